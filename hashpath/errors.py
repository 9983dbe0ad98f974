"""
HashPath error kinds.

Every failure raised by this package is a ``HashPathError``. Errors are
local and synchronous: there is nothing transient to retry in a pure
computation, so callers either abort the step or surface the error.
"""

from typing import Any


class HashPathError(ValueError):
    """Base class for all HashPath failures."""

    def __init__(self, message: str, term: Any = None):
        self.term = term
        super().__init__(message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class UnsupportedPathTerm(HashPathError):
    """A term could not be converted into path segments."""

    def __init__(self, term: Any):
        super().__init__(f"Unsupported path term of type {type(term).__name__}: {term!r}", term)


class UnknownChainAlgorithm(HashPathError):
    """A message declares a hashpath-alg that is not registered."""

    def __init__(self, algorithm: Any):
        super().__init__(f"Unknown hashpath algorithm: {algorithm!r}", algorithm)


class UnsupportedBase(HashPathError):
    """No HashPath can be derived for the base message."""

    def __init__(self, term: Any, cause: Any = None):
        self.cause = cause
        detail = f" ({cause})" if cause else ""
        super().__init__(
            f"Cannot derive a hashpath from base of type {type(term).__name__}{detail}",
            term
        )


class HashPathNotViable(HashPathError):
    """The applied element is neither a message nor an identifier string."""

    def __init__(self, term: Any):
        super().__init__(f"Cannot chain a term of type {type(term).__name__}: {term!r}", term)


class MalformedHashPath(HashPathError):
    """A stored HashPath does not have one or two segments."""

    def __init__(self, hashpath: Any, parts: Any = None):
        self.parts = parts
        count = len(parts) if parts else 0
        super().__init__(
            f"Malformed hashpath {hashpath!r}: expected 1 or 2 segments, found {count}",
            hashpath
        )


class ChainFunctionError(HashPathError):
    """A chain function failed or did not return a 32-byte native value."""

    def __init__(self, algorithm: Any, cause: Any = None):
        self.cause = cause
        detail = f" ({cause})" if cause else ""
        super().__init__(f"Chain function {algorithm!r} cannot consolidate{detail}", algorithm)
