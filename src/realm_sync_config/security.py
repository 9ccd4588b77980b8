"""
security.py - Encryption key helpers.

Encryption at rest is done by the storage engine. This module only
produces and checks the 64-byte keys a configuration carries:
- Random key generation
- Password-based derivation (PBKDF2-HMAC-SHA512)
- Length validation
"""

import os

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from realm_sync_config.config import (
    ENCRYPTION_KEY_LENGTH,
    KEY_DERIVATION_ITERATIONS,
    KEY_DERIVATION_SALT_LENGTH,
)
from realm_sync_config.errors import ValidationError


def generate_encryption_key() -> bytes:
    """Generate a random 64-byte encryption key."""
    return os.urandom(ENCRYPTION_KEY_LENGTH)


def generate_salt() -> bytes:
    """Generate a random salt for key derivation."""
    return os.urandom(KEY_DERIVATION_SALT_LENGTH)


def derive_encryption_key(
    password: str,
    salt: bytes,
    iterations: int = KEY_DERIVATION_ITERATIONS
) -> bytes:
    """
    Derive a 64-byte encryption key from a password.

    The same password, salt and iteration count always give the same key.

    Args:
        password: Password to derive from
        salt: Salt bytes, stored alongside whatever needs the key again
        iterations: PBKDF2 iteration count

    Returns:
        64-byte key

    Raises:
        ValidationError: If password or salt is empty
    """
    if not password:
        raise ValidationError("A non-empty password must be provided", field="password")
    if not salt:
        raise ValidationError("A non-empty salt must be provided", field="salt")

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA512(),
        length=ENCRYPTION_KEY_LENGTH,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password.encode())


def validate_encryption_key(key: bytes) -> bytes:
    """
    Check an encryption key and return an immutable copy.

    Args:
        key: Key as bytes or bytearray

    Returns:
        The key as bytes

    Raises:
        ValidationError: If key is None, not bytes-like or not 64 bytes
    """
    if key is None:
        raise ValidationError("A non-null key must be provided", field="encryption_key")
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise ValidationError(
            f"The key must be bytes, got {type(key).__name__}", field="encryption_key"
        )
    key = bytes(key)
    if len(key) != ENCRYPTION_KEY_LENGTH:
        raise ValidationError(
            f"The provided key must be {ENCRYPTION_KEY_LENGTH} bytes. Yours was: {len(key)}",
            field="encryption_key",
        )
    return key
