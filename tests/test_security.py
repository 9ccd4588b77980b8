"""
test_security.py - Tests for encryption key helpers.
"""

import pytest

from realm_sync_config.errors import ValidationError
from realm_sync_config.security import (
    derive_encryption_key,
    generate_encryption_key,
    generate_salt,
    validate_encryption_key,
)


class TestKeyGeneration:
    def test_key_length(self):
        assert len(generate_encryption_key()) == 64

    def test_keys_are_random(self):
        assert generate_encryption_key() != generate_encryption_key()

    def test_salt_length(self):
        assert len(generate_salt()) == 16


class TestKeyDerivation:
    """PBKDF2 derivation is deterministic per password and salt."""

    def test_deterministic(self):
        salt = b"0123456789abcdef"
        a = derive_encryption_key("secret", salt, iterations=1000)
        b = derive_encryption_key("secret", salt, iterations=1000)
        assert a == b
        assert len(a) == 64

    def test_salt_changes_key(self):
        a = derive_encryption_key("secret", b"salt-one", iterations=1000)
        b = derive_encryption_key("secret", b"salt-two", iterations=1000)
        assert a != b

    def test_derived_key_is_valid(self):
        key = derive_encryption_key("secret", generate_salt(), iterations=1000)
        assert validate_encryption_key(key) == key

    @pytest.mark.parametrize("password,salt", [("", b"salt"), ("secret", b"")])
    def test_empty_inputs(self, password, salt):
        with pytest.raises(ValidationError):
            derive_encryption_key(password, salt, iterations=1000)


class TestKeyValidation:
    def test_bytearray_is_copied(self):
        key = bytearray(64)
        checked = validate_encryption_key(key)
        key[0] = 1
        assert isinstance(checked, bytes)
        assert checked == bytes(64)

    def test_memoryview(self):
        assert validate_encryption_key(memoryview(bytes(64))) == bytes(64)

    @pytest.mark.parametrize("key", [None, bytes(63), bytes(65), "k" * 64, 42])
    def test_invalid(self, key):
        with pytest.raises(ValidationError) as exc_info:
            validate_encryption_key(key)
        assert exc_info.value.field == "encryption_key"
