"""Utility helpers for realm_sync_config."""

from realm_sync_config.utils.hashing import md5_hex, NAME_HASH_LENGTH

__all__ = ["md5_hex", "NAME_HASH_LENGTH"]
