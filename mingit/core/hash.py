"""Hash utilities for mingit."""

import binascii
import hashlib
from typing import Union

from .errors import InvalidHashEncoding

HASH_LENGTH = 20
HEX_LENGTH = HASH_LENGTH * 2


def hash_object(data: bytes) -> bytes:
    """
    Compute SHA-1 digest of data.

    Args:
        data: Bytes to hash (an object's full encoded stream)

    Returns:
        20-byte raw digest
    """
    return hashlib.sha1(data).digest()


def hash_file(filepath) -> bytes:
    """Compute SHA-1 digest of a file's raw contents."""
    with open(filepath, 'rb') as f:
        return hash_object(f.read())


def hash_to_hex(sha: bytes) -> str:
    """
    Render a raw hash as 40 lowercase hex characters.

    Raises:
        InvalidHashEncoding: If sha is not exactly 20 bytes
    """
    if not isinstance(sha, bytes) or len(sha) != HASH_LENGTH:
        raise InvalidHashEncoding(sha)
    return sha.hex()


def hex_to_hash(hexsha: str) -> bytes:
    """
    Parse 40 hex characters into a raw 20-byte hash.

    Raises:
        InvalidHashEncoding: On odd length, non-hex characters or wrong width
    """
    if isinstance(hexsha, bytes):
        try:
            hexsha = hexsha.decode('ascii')
        except UnicodeDecodeError:
            raise InvalidHashEncoding(hexsha) from None
    if not isinstance(hexsha, str) or len(hexsha) != HEX_LENGTH:
        raise InvalidHashEncoding(hexsha)
    try:
        return binascii.unhexlify(hexsha)
    except (binascii.Error, ValueError):
        raise InvalidHashEncoding(hexsha) from None


def to_hash(value: Union[bytes, str]) -> bytes:
    """Normalize a raw hash or a hex string to a raw 20-byte hash."""
    if isinstance(value, bytes) and len(value) == HASH_LENGTH:
        return value
    return hex_to_hash(value)
