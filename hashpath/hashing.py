"""
HashPath Digest Primitives

All digests are SHA-256. Identifiers travel in two encodings:

- native: the raw 32-byte digest, used as chain function input
- human: unpadded URL-safe base64 of the native form (43 characters),
  used in message fields and in serialized HashPaths
"""

import base64
import binascii
import hashlib
from typing import Union

ID_BYTES = 32
HUMAN_ID_LENGTH = 43
ACCUMULATOR_MODULUS = 2 ** 256


def sha256(data: Union[bytes, str]) -> bytes:
    """Compute the raw SHA-256 digest of ``data`` (str is UTF-8 encoded)."""
    if isinstance(data, str):
        data = data.encode('utf-8')
    return hashlib.sha256(data).digest()


def b64url_encode(b: bytes) -> str:
    """URL-safe base64 encode bytes to string (no padding)."""
    return base64.urlsafe_b64encode(b).rstrip(b'=').decode('ascii')


def b64url_decode(s: str) -> bytes:
    """URL-safe base64 decode string to bytes (handles missing padding)."""
    padding = 4 - (len(s) % 4)
    if padding != 4:
        s += '=' * padding
    return base64.urlsafe_b64decode(s.encode('ascii'))


def is_human_id(segment: str) -> bool:
    """True if ``segment`` is the human encoding of a 32-byte identifier."""
    if not isinstance(segment, str) or len(segment) != HUMAN_ID_LENGTH:
        return False
    try:
        native = b64url_decode(segment)
    except (binascii.Error, ValueError):
        return False
    # Re-encoding rejects non-canonical trailing bits
    return len(native) == ID_BYTES and b64url_encode(native) == segment


def human_id(native: bytes) -> str:
    """
    Convert a native identifier to its human encoding.

    Raises:
        ValueError: if ``native`` is not 32 bytes long
    """
    if len(native) != ID_BYTES:
        raise ValueError(f"native id must be {ID_BYTES} bytes, got {len(native)}")
    return b64url_encode(bytes(native))


def native_id(segment: Union[str, bytes]) -> bytes:
    """
    Convert a segment to its native (digest-ready) form.

    Human identifiers decode to their 32 raw bytes. Already-native 32-byte
    values pass through. Any other segment, such as a key name recorded
    for a selector-only message, is used as its UTF-8 bytes.
    """
    if isinstance(segment, (bytes, bytearray)):
        return bytes(segment)
    if is_human_id(segment):
        return b64url_decode(segment)
    return segment.encode('utf-8')


def sha256_chain(left: bytes, right: bytes) -> bytes:
    """Chain two native values: SHA-256(left || right)."""
    return sha256(bytes(left) + bytes(right))


def accumulate(left: bytes, right: bytes) -> bytes:
    """
    Combine two native values by addition modulo 2**256.

    Both inputs are read as unsigned big-endian integers, so the function
    is commutative and associative and accepts inputs of any width.
    """
    total = int.from_bytes(left, 'big') + int.from_bytes(right, 'big')
    return (total % ACCUMULATOR_MODULUS).to_bytes(ID_BYTES, 'big')


def content_id(data: Union[bytes, str]) -> str:
    """Human-encoded SHA-256 of raw data."""
    return human_id(sha256(data))
