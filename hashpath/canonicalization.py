"""
HashPath Canonical JSON Encoding (CJE)

Gives a message one byte representation regardless of key order, so that
content identifiers are stable. Used by the reference identity capability.
"""

import json
from enum import Enum
from typing import Any, Dict, List, Mapping, Union

from .hashing import b64url_encode


def canonicalize(obj: Any) -> bytes:
    """
    Convert a message to Canonical JSON Encoding (CJE).

    Rules:
    - Object keys sorted lexicographically (Unicode code point order)
    - No whitespace between tokens (compact form)
    - UTF-8 encoding, no BOM
    - Raw buffers as unpadded URL-safe base64 strings
    - Symbolic tags (Enum members) as their names
    - Arrays preserve order

    Returns:
        UTF-8 encoded bytes of canonical JSON
    """
    canonical = _canonicalize_value(obj)
    return json.dumps(canonical, separators=(',', ':'), ensure_ascii=False).encode('utf-8')


def canonicalize_str(obj: Any) -> str:
    """Return canonical JSON as string."""
    return canonicalize(obj).decode('utf-8')


def _canonicalize_value(value: Any) -> Any:
    """Recursively canonicalize a value."""
    if value is None:
        return None
    elif isinstance(value, Enum):
        return value.name
    elif isinstance(value, bool):
        return value
    elif isinstance(value, (int, float)):
        return value
    elif isinstance(value, str):
        return value
    elif isinstance(value, (bytes, bytearray, memoryview)):
        return b64url_encode(bytes(value))
    elif isinstance(value, Mapping):
        return _canonicalize_object(value)
    elif isinstance(value, (list, tuple)):
        return _canonicalize_array(value)
    else:
        raise ValueError(f"Cannot canonicalize type: {type(value)}")


def _canonicalize_object(obj: Mapping) -> Dict[str, Any]:
    """Canonicalize an object by sorting its (stringified) keys."""
    items = {_canonical_key(k): v for k, v in obj.items()}
    return {k: _canonicalize_value(items[k]) for k in sorted(items)}


def _canonical_key(key: Any) -> str:
    if isinstance(key, Enum):
        return key.name
    if isinstance(key, (bytes, bytearray)):
        return bytes(key).decode('utf-8')
    return str(key)


def _canonicalize_array(arr: Union[List, tuple]) -> List:
    """Canonicalize an array, preserving order."""
    return [_canonicalize_value(item) for item in arr]
