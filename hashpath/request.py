"""
HashPath Request Path Queue

The request path is the work queue stored in a message's ``path`` field:
the head is the next computation step, the rest is what remains. It is
unrelated to the HashPath and consuming it is not recorded in the chain.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .logging_config import chain_events
from .message import PATH_KEYS, get_field, is_message, with_field, without_field
from .options import apply_error_strategy
from .path import canonicalize

logger = logging.getLogger(__name__)

Popped = Tuple[str, Union[Dict[str, Any], List[str], None]]


def request_path(message: Mapping[str, Any]) -> Optional[List[str]]:
    """The canonical request path of a message, or None."""
    return canonicalize(get_field(message, PATH_KEYS))


def _set_request_path(message: Mapping[str, Any], parts: List[str]) -> Dict[str, Any]:
    if not parts:
        return without_field(message, PATH_KEYS)
    return with_field(message, PATH_KEYS, parts)


def _consume_head(message: Mapping[str, Any], rest: List[str]) -> Dict[str, Any]:
    """
    Drop the consumed head from a message's request path.

    This is the one transformation that leaves no record in the HashPath,
    so ids of the resulting message cannot be re-derived from its history.
    """
    return _set_request_path(message, rest)


@apply_error_strategy
def pop_request(term: Any, opts=None) -> Optional[Popped]:
    """
    Pop the next segment from a message's request path.

    Accepts a message or a bare path term. Returns None when there is no
    more work. For a message, returns ``(head, rest_message)`` where
    ``rest_message`` carries the remaining path (and omits ``path`` when
    nothing remains). For a bare path term, returns ``(head, rest_parts)``
    with ``rest_parts`` None when nothing remains.
    """
    if term is None:
        return None
    if is_message(term):
        parts = request_path(term)
    else:
        parts = canonicalize(term)
    if not parts:
        return None

    head, rest = parts[0], parts[1:]
    chain_events.request_popped(head, len(rest))
    if is_message(term):
        return head, _consume_head(term, rest)
    return head, (rest or None)


@apply_error_strategy
def first_segment(term: Any, opts=None) -> Optional[str]:
    """The first canonical part of the next request path segment."""
    popped = pop_request(term, opts)
    if popped is None:
        return None
    head, _ = popped
    return canonicalize(head)[0]


@apply_error_strategy
def rest(term: Any, opts=None) -> Union[Dict[str, Any], List[str], None]:
    """
    The message (or path) without its next segment.

    Returns None when the path is empty or holds a single segment.
    """
    popped = pop_request(term, opts)
    if popped is None:
        return None
    _, remainder = popped
    if is_message(remainder) and request_path(remainder) is None:
        return None
    return remainder


@apply_error_strategy
def push_request(message: Mapping[str, Any], segments: Any, opts=None) -> Dict[str, Any]:
    """Add segments to the head (next to execute) of a request path."""
    new = canonicalize(segments) or []
    existing = request_path(message) or []
    return _set_request_path(message, new + existing)


@apply_error_strategy
def queue_request(message: Mapping[str, Any], segments: Any, opts=None) -> Dict[str, Any]:
    """Add segments to the back of a request path."""
    new = canonicalize(segments) or []
    existing = request_path(message) or []
    return _set_request_path(message, existing + new)
