"""Credential record value stored for every user password.

A credential record is the text ``"<salt-hex>:<hash-hex>"``: 16 salt bytes
(32 hex characters), a colon, then 32 derived-key bytes (64 hex characters).
This layout is the only bit-exact contract shared with previously stored
rows, so parsing is strict about separator and decoded lengths.
"""

from __future__ import annotations

from dataclasses import dataclass

SALT_LENGTH_BYTES = 16
HASH_LENGTH_BYTES = 32
RECORD_SEPARATOR = ":"


class MalformedCredentialRecordError(ValueError):
    """Raised when a stored credential record cannot be parsed."""


@dataclass(frozen=True)
class CredentialRecord:
    """Decoded salt and derived hash of one stored password."""

    salt: bytes
    password_hash: bytes

    def to_text(self) -> str:
        """Render the lowercase ``salt:hash`` hex form used for storage."""

        return f"{self.salt.hex()}{RECORD_SEPARATOR}{self.password_hash.hex()}"


def parse_credential_record(
    stored: str,
    *,
    salt_length: int = SALT_LENGTH_BYTES,
    hash_length: int = HASH_LENGTH_BYTES,
) -> CredentialRecord:
    """Split and decode one stored record, rejecting any malformed layout."""

    salt_hex, separator, hash_hex = stored.partition(RECORD_SEPARATOR)
    if not separator:
        raise MalformedCredentialRecordError("credential record has no separator")

    salt = _decode_hex_segment(salt_hex, expected_length=salt_length, label="salt")
    password_hash = _decode_hex_segment(
        hash_hex,
        expected_length=hash_length,
        label="hash",
    )
    return CredentialRecord(salt=salt, password_hash=password_hash)


def _decode_hex_segment(segment: str, *, expected_length: int, label: str) -> bytes:
    # bytes.fromhex tolerates embedded whitespace, so the text length is checked first.
    if len(segment) != expected_length * 2:
        raise MalformedCredentialRecordError(
            f"credential record {label} must be {expected_length * 2} hex characters"
        )
    try:
        decoded = bytes.fromhex(segment)
    except ValueError as exc:
        raise MalformedCredentialRecordError(
            f"credential record {label} is not valid hex"
        ) from exc
    if len(decoded) != expected_length:
        raise MalformedCredentialRecordError(
            f"credential record {label} must decode to {expected_length} bytes"
        )
    return decoded
