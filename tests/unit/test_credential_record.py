from __future__ import annotations

import pytest

from blog_backend.domain.auth.credential_record import (
    CredentialRecord,
    MalformedCredentialRecordError,
    parse_credential_record,
)

SALT_HEX = "00112233445566778899aabbccddeeff"
HASH_HEX = "ab" * 32


def test_parse_splits_salt_and_hash_bytes() -> None:
    record = parse_credential_record(f"{SALT_HEX}:{HASH_HEX}")

    assert record.salt == bytes.fromhex(SALT_HEX)
    assert record.password_hash == bytes.fromhex(HASH_HEX)


def test_to_text_renders_lowercase_record() -> None:
    record = CredentialRecord(salt=bytes.fromhex(SALT_HEX), password_hash=b"\xab" * 32)

    assert record.to_text() == f"{SALT_HEX}:{HASH_HEX}"
    assert parse_credential_record(record.to_text().upper()).to_text() == record.to_text()


def test_record_without_separator_is_malformed() -> None:
    with pytest.raises(MalformedCredentialRecordError, match="separator"):
        parse_credential_record("not-a-valid-record")


def test_short_segments_are_malformed() -> None:
    with pytest.raises(MalformedCredentialRecordError, match="salt"):
        parse_credential_record("aa:bb")


def test_non_hex_hash_is_malformed() -> None:
    with pytest.raises(MalformedCredentialRecordError, match="not valid hex"):
        parse_credential_record(f"{SALT_HEX}:{'zz' * 32}")


def test_hex_with_embedded_whitespace_is_malformed() -> None:
    padded_salt = SALT_HEX[:-2] + " f"

    with pytest.raises(MalformedCredentialRecordError):
        parse_credential_record(f"{padded_salt}:{HASH_HEX}")


def test_custom_lengths_are_enforced() -> None:
    record = parse_credential_record("aabb:ccddeeff", salt_length=2, hash_length=4)

    assert record.salt == b"\xaa\xbb"
    assert record.password_hash == b"\xcc\xdd\xee\xff"
    with pytest.raises(MalformedCredentialRecordError, match="hash"):
        parse_credential_record("aabb:ccdd", salt_length=2, hash_length=4)


def test_malformed_error_is_value_error() -> None:
    assert issubclass(MalformedCredentialRecordError, ValueError)
