"""
HashPath Engine

A HashPath is a rolling Merkle list of the messages applied to produce a
given message. The first message on the list is referred to by its
identity and is the chain's root:

    M1.hashpath = identity(M1)
    M3.hashpath = extend(M1, M2)        where M3 = apply(M1, M2)

The stored value never grows beyond two segments. It is either a root
``id`` or a pending pair ``base/pending``: extending a pending pair first
folds it into a new base with the chain function declared on the message
being extended, then records the newly applied identifier as pending.

Because an applied message's identity covers its own HashPath, the chain
of M3 commits to the history of M2 as well, so a single value represents
the whole derivation tree rather than a linear history.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from .chain import ChainFunction, chain_algorithm, resolve_chain_fn
from .errors import (
    ChainFunctionError,
    HashPathNotViable,
    MalformedHashPath,
    UnsupportedBase,
    UnsupportedPathTerm,
)
from .hashing import ID_BYTES, content_id, human_id, native_id
from .logging_config import chain_events
from .message import HASHPATH_KEYS, get_field, is_message, with_field, without_reserved
from .options import apply_error_strategy, coerce_options
from .path import SEPARATOR, canonicalize, key_to_str, to_flat_string
from .request import first_segment

logger = logging.getLogger(__name__)

_BUFFER_TYPES = (bytes, bytearray, memoryview)


@dataclass(frozen=True)
class Root:
    """A chain holding only its root identifier."""
    id: str

    def parts(self) -> List[str]:
        return [self.id]

    def serialize(self) -> str:
        return self.id


@dataclass(frozen=True)
class Pending:
    """A consolidated (or root) base with one applied identifier not yet folded in."""
    base: str
    pending: str

    def parts(self) -> List[str]:
        return [self.base, self.pending]

    def serialize(self) -> str:
        return f"{self.base}{SEPARATOR}{self.pending}"

    def consolidate(self, chain_fn: ChainFunction, algorithm: Optional[str] = None) -> Root:
        """
        Fold the pair into a single new base.

        Raises:
            ChainFunctionError: if ``chain_fn`` raises or does not return
                32 bytes
        """
        name = algorithm or getattr(chain_fn, "__name__", repr(chain_fn))
        try:
            folded = chain_fn(native_id(self.base), native_id(self.pending))
        except Exception as err:
            raise ChainFunctionError(name, err) from err
        if not isinstance(folded, (bytes, bytearray)) or len(folded) != ID_BYTES:
            raise ChainFunctionError(name, f"returned {folded!r}")
        return Root(human_id(bytes(folded)))


HashPath = Union[Root, Pending]


def parse_hashpath(value: Any) -> HashPath:
    """
    Parse a serialized HashPath.

    Raises:
        MalformedHashPath: if the value does not hold one or two segments
    """
    parts = canonicalize(value)
    if parts and len(parts) == 1:
        return Root(parts[0])
    if parts and len(parts) == 2:
        return Pending(parts[0], parts[1])
    raise MalformedHashPath(value, parts)


def consolidate(hashpath: Any, chain_fn: ChainFunction) -> str:
    """Fold a serialized HashPath into a single base segment."""
    parsed = parse_hashpath(hashpath)
    if isinstance(parsed, Pending):
        return parsed.consolidate(chain_fn).serialize()
    return parsed.serialize()


@apply_error_strategy
def current_hashpath(msg1: Any, opts=None) -> str:
    """
    The HashPath of a base message.

    - a message with a stored ``hashpath``: that value, verbatim
    - a raw byte buffer: its SHA-256, human encoded
    - any other message: its identity, as the chain root

    Raises:
        UnsupportedBase: if none of these applies
        MalformedHashPath: if the stored value is not a path term
    """
    if isinstance(msg1, _BUFFER_TYPES):
        return content_id(bytes(msg1))
    if not is_message(msg1):
        raise UnsupportedBase(msg1)

    stored = get_field(msg1, HASHPATH_KEYS)
    if stored is not None:
        if isinstance(stored, str):
            return stored
        try:
            return to_flat_string(stored)
        except UnsupportedPathTerm as err:
            raise MalformedHashPath(stored) from err

    identity = coerce_options(opts).identity
    try:
        root = identity(msg1)
    except Exception as err:
        logger.debug("identity failed for base message: %s", err)
        raise UnsupportedBase(msg1, err) from err
    if not isinstance(root, str) or not root:
        raise UnsupportedBase(msg1, f"identity returned {root!r}")
    return root


def _applied_id(msg2: Any, opts) -> str:
    """The identifier recorded for an applied message or raw id."""
    if isinstance(msg2, str):
        applied = msg2
    elif isinstance(msg2, _BUFFER_TYPES):
        try:
            applied = bytes(msg2).decode('utf-8')
        except UnicodeDecodeError as err:
            raise HashPathNotViable(msg2) from err
    elif is_message(msg2):
        options = coerce_options(opts)
        selector_only = not without_reserved(msg2, options.reserved_keys)
        key = first_segment(msg2, opts) if selector_only else None
        if key is not None:
            # Selector-only message: record the key name, keeping the
            # HashPath legible for plain key lookups
            applied = key_to_str(key)
        else:
            try:
                applied = options.identity(msg2)
            except Exception as err:
                raise HashPathNotViable(msg2) from err
    else:
        raise HashPathNotViable(msg2)

    parts = canonicalize(applied) if isinstance(applied, str) else None
    if not parts or len(parts) != 1:
        raise HashPathNotViable(msg2)
    return parts[0]


@apply_error_strategy
def extend(msg1: Any, msg2_or_id: Any, opts=None) -> str:
    """
    The HashPath of the message produced by applying ``msg2_or_id`` to
    ``msg1``.

    Raises:
        HashPathNotViable: if ``msg2_or_id`` is neither a message nor a
            single-segment identifier (text or a UTF-8 buffer)
        UnsupportedBase: if ``msg1`` has no derivable HashPath
        UnknownChainAlgorithm: if ``msg1`` declares an unknown algorithm
            and its HashPath needs consolidating
        MalformedHashPath: if ``msg1``'s stored HashPath is malformed
        ChainFunctionError: if the resolved chain function misbehaves
    """
    applied = _applied_id(msg2_or_id, opts)
    base = current_hashpath(msg1, opts)
    parsed = parse_hashpath(base)

    if isinstance(parsed, Pending):
        chain_fn = resolve_chain_fn(msg1, opts)
        algorithm = chain_algorithm(msg1, opts)
        new_base = parsed.consolidate(chain_fn, algorithm)
        chain_events.hashpath_consolidated(parsed.parts(), algorithm, new_base.id)
        parsed = new_base

    result = Pending(parsed.serialize(), applied).serialize()
    chain_events.hashpath_extended(base, applied, result)
    return result


@apply_error_strategy
def with_hashpath(
    msg1: Any,
    msg2_or_id: Any,
    result: Optional[Mapping[str, Any]] = None,
    opts=None
) -> Dict[str, Any]:
    """
    Materialize the next message of a derivation.

    Returns a copy of ``result`` (default: ``msg1``) whose ``hashpath`` is
    ``extend(msg1, msg2_or_id)``.
    """
    hashpath = extend(msg1, msg2_or_id, opts)
    if result is None:
        result = msg1 if is_message(msg1) else {}
    return with_field(result, HASHPATH_KEYS, hashpath)
