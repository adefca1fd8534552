"""Port for password hashing and verification."""

from __future__ import annotations

from typing import Protocol


class PasswordHasherPort(Protocol):
    """Password hashing/verification contract.

    ``verify_password`` returns False for an ordinary mismatch and raises
    ``MalformedCredentialRecordError`` when the stored value cannot be parsed.
    """

    def hash_password(self, password: str) -> str:
        """Hash plaintext password into a storable credential record."""

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        """Verify plaintext password against a stored credential record."""
