"""
Message field access.

Messages are plain mappings with string keys. This module knows which
fields carry protocol metadata and how they may be spelled; it never
mutates a message.
"""

from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

# Accepted spellings per field, canonical first. Lookups are exact per
# spelling.
PATH_KEYS: Tuple[str, ...] = ("path", "Path")
HASHPATH_KEYS: Tuple[str, ...] = ("hashpath", "Hashpath")
HASHPATH_ALG_KEYS: Tuple[str, ...] = ("hashpath-alg", "Hashpath-Alg")

# Protocol-reserved fields, matched case-insensitively when deciding
# whether a message carries any user fields.
RESERVED_KEYS: FrozenSet[str] = frozenset({"path", "hashpath", "hashpath-alg", "priv"})

_MISSING = object()


def is_message(term: Any) -> bool:
    """True for structured messages (mappings)."""
    return isinstance(term, Mapping)


def field_key(message: Mapping[str, Any], spellings: Iterable[str]) -> Optional[str]:
    """The spelling of a field present on ``message``, if any."""
    for key in spellings:
        if key in message:
            return key
    return None


def get_field(message: Mapping[str, Any], spellings: Iterable[str], default: Any = None) -> Any:
    """Value of the first present spelling of a field; absent or None gives ``default``."""
    for key in spellings:
        value = message.get(key, _MISSING)
        if value is not _MISSING and value is not None:
            return value
    return default


def with_field(message: Mapping[str, Any], spellings: Tuple[str, ...], value: Any) -> Dict[str, Any]:
    """Copy of ``message`` with a field set, keeping its existing spelling."""
    key = field_key(message, spellings) or spellings[0]
    updated = {k: v for k, v in message.items() if k not in spellings or k == key}
    updated[key] = value
    return updated


def without_field(message: Mapping[str, Any], spellings: Iterable[str]) -> Dict[str, Any]:
    """Copy of ``message`` with every spelling of a field removed."""
    names = set(spellings)
    return {k: v for k, v in message.items() if k not in names}


def without_reserved(message: Mapping[str, Any], reserved: FrozenSet[str] = RESERVED_KEYS) -> Dict[str, Any]:
    """Copy of ``message`` holding only user fields."""
    return {k: v for k, v in message.items() if str(k).lower() not in reserved}
