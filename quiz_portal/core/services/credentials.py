"""Password verification strategies used by the credential lookup."""

from __future__ import annotations

from typing import Protocol

from quiz_portal.core.models import User


class CredentialVerifier(Protocol):
    """Decides whether a supplied password matches a stored user."""

    def verify(self, user: User, password: str | None) -> bool: ...


class PlaintextCredentialVerifier:
    """Compares the supplied password with the stored one verbatim."""

    def verify(self, user: User, password: str | None) -> bool:
        return user.password == password
