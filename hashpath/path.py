"""
HashPath Path Canonicalizer

Converts any supported path term into its canonical form: an ordered list
of non-empty string segments, or ``None`` for the empty path.

Supported terms:
- ``str``: split on ``/``, empty pieces dropped
- raw character buffers (``bytes``, ``bytearray``, ``memoryview``): one
  UTF-8 segment, never split into characters or on ``/``
- ``list`` / ``tuple``: flattened recursively, element order preserved
- ``enum.Enum`` members (symbolic tags): their name
- ``bool``: ``"true"`` / ``"false"``
- ``int``: decimal text
- ``None``: the empty path
"""

import logging
from enum import Enum
from typing import Any, List, Optional

from .errors import UnsupportedPathTerm
from .options import apply_error_strategy

logger = logging.getLogger(__name__)

SEPARATOR = "/"

_BUFFER_TYPES = (bytes, bytearray, memoryview)


@apply_error_strategy
def canonicalize(term: Any, opts=None) -> Optional[List[str]]:
    """
    Convert a path term into its canonical segment list.

    Returns:
        List of segments, or None when the term holds no segments

    Raises:
        UnsupportedPathTerm: if the term (or a nested element) has an
        unsupported type
    """
    parts = _term_to_parts(term)
    return parts or None


@apply_error_strategy
def to_flat_string(term: Any, opts=None) -> str:
    """
    Join the canonical form of a term with ``/``.

    The joined text is re-split so that separators held inside raw buffers
    never produce empty segments. ``to_flat_string(None) == ""``.
    """
    joined = SEPARATOR.join(_term_to_parts(term))
    return SEPARATOR.join(part for part in joined.split(SEPARATOR) if part)


def key_to_str(term: Any) -> str:
    """String form of a single key term; sequences become flat paths."""
    if term is None:
        return ""
    if isinstance(term, (list, tuple)):
        return to_flat_string(term)
    return _leaf_to_str(term)


def segments_match(a: Any, b: Any) -> bool:
    """Case-insensitive comparison of two keys or paths."""
    return key_to_str(a).lower() == key_to_str(b).lower()


def _term_to_parts(term: Any) -> List[str]:
    if term is None:
        return []
    if isinstance(term, str) and not isinstance(term, Enum):
        if SEPARATOR not in term:
            return [term] if term else []
        return _term_to_parts([piece for piece in term.split(SEPARATOR) if piece])
    if isinstance(term, (list, tuple)):
        parts: List[str] = []
        for element in term:
            parts.extend(_term_to_parts(element))
        return parts
    # Raw buffers, symbolic tags and integers are single segments
    segment = _leaf_to_str(term)
    return [segment] if segment else []


def _leaf_to_str(term: Any) -> str:
    if isinstance(term, Enum):
        return term.name
    if isinstance(term, bool):
        return "true" if term else "false"
    if isinstance(term, int):
        return str(term)
    if isinstance(term, str):
        return term
    if isinstance(term, _BUFFER_TYPES):
        try:
            return bytes(term).decode('utf-8')
        except UnicodeDecodeError:
            logger.debug("rejecting non-UTF-8 path buffer of %d bytes", len(bytes(term)))
            raise UnsupportedPathTerm(term)
    raise UnsupportedPathTerm(term)
