"""PBKDF2-SHA256 password hasher adapter."""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass

from blog_backend.application.ports.password_hasher_port import PasswordHasherPort
from blog_backend.domain.auth.credential_record import (
    HASH_LENGTH_BYTES,
    SALT_LENGTH_BYTES,
    CredentialRecord,
    parse_credential_record,
)


class CryptoUnavailableError(RuntimeError):
    """Raised when the runtime cannot provide a CSPRNG or the PBKDF2 primitive."""


@dataclass(frozen=True)
class Pbkdf2Parameters:
    """Key-derivation parameters shared by the hash and verify paths.

    Stored credential records carry no parameters, so changing any value
    here makes every existing record unverifiable.
    """

    digest: str = "sha256"
    iterations: int = 310_000
    salt_length: int = SALT_LENGTH_BYTES
    hash_length: int = HASH_LENGTH_BYTES

    def __post_init__(self) -> None:
        if self.iterations < 1:
            raise ValueError("iterations must be positive")
        if self.salt_length < 1 or self.hash_length < 1:
            raise ValueError("salt and hash lengths must be positive")


DEFAULT_PBKDF2_PARAMETERS = Pbkdf2Parameters()


def constant_time_equal(left: bytes, right: bytes) -> bool:
    """Compare two byte strings without exiting at the first differing byte."""

    # Record lengths are fixed by format, so a length mismatch leaks nothing secret.
    if len(left) != len(right):
        return False

    result = 0
    for left_byte, right_byte in zip(left, right, strict=True):
        result |= left_byte ^ right_byte
    return result == 0


class Pbkdf2PasswordHasher(PasswordHasherPort):
    """Password hashing adapter producing ``salt_hex:hash_hex`` records."""

    def __init__(self, *, parameters: Pbkdf2Parameters = DEFAULT_PBKDF2_PARAMETERS) -> None:
        self._parameters = parameters

    @property
    def parameters(self) -> Pbkdf2Parameters:
        return self._parameters

    def hash_password(self, password: str) -> str:
        """Hash plaintext password with a fresh random salt."""

        try:
            salt = secrets.token_bytes(self._parameters.salt_length)
        except NotImplementedError as exc:
            raise CryptoUnavailableError("no cryptographic random source available") from exc

        record = CredentialRecord(salt=salt, password_hash=self.derive(password, salt))
        return record.to_text()

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        """Re-derive the candidate hash with the stored salt and compare it."""

        record = parse_credential_record(
            password_hash,
            salt_length=self._parameters.salt_length,
            hash_length=self._parameters.hash_length,
        )
        candidate = self.derive(password, record.salt)
        return constant_time_equal(candidate, record.password_hash)

    def derive(self, password: str, salt: bytes) -> bytes:
        """Run PBKDF2 over the UTF-8 password bytes and the given salt.

        A password that cannot be encoded as UTF-8 raises ``UnicodeEncodeError``.
        """

        password_bytes = password.encode("utf-8")
        try:
            return hashlib.pbkdf2_hmac(
                self._parameters.digest,
                password_bytes,
                salt,
                self._parameters.iterations,
                dklen=self._parameters.hash_length,
            )
        except ValueError as exc:
            raise CryptoUnavailableError(
                f"PBKDF2 with {self._parameters.digest} is not available"
            ) from exc
