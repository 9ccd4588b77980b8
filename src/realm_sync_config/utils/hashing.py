"""
hashing.py - Deterministic hashing utilities.

MD5 is used to shorten file names that do not fit the path budget.
It is an identifier here, not a security primitive.

All hashing is deterministic: same input = same output.
"""

import hashlib
from typing import Final

# Length of an MD5 digest rendered as hex
NAME_HASH_LENGTH: Final[int] = 32


def md5_hex(text: str) -> str:
    """
    Compute the MD5 hash of a string and return it as upper-case hex.

    The string is encoded as UTF-8 before hashing.

    Args:
        text: String to hash

    Returns:
        32-character upper-case hex string
    """
    return hashlib.md5(text.encode("utf-8")).hexdigest().upper()
