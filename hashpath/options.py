"""
Operation options for HashPath.

Every public operation accepts ``opts``: ``None`` (defaults), a plain dict
of option values, or an ``Options`` instance. The chaining default, the
chain function registry and the identity capability travel inside this
object so that no operation reads ambient configuration at call time.
"""

import inspect
from contextvars import ContextVar
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache, wraps
from types import MappingProxyType
from typing import Any, Callable, FrozenSet, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import config
from .errors import HashPathError
from .identity import identity_for_policy, unsigned_id
from .message import RESERVED_KEYS


class ErrorStrategy(str, Enum):
    """How public operations report a HashPathError."""
    THROW = "throw"
    COLLECT = "collect"


def _builtin_chain_functions() -> Mapping[str, Callable[[bytes, bytes], bytes]]:
    from .chain import BUILTIN_CHAIN_FUNCTIONS

    return BUILTIN_CHAIN_FUNCTIONS


class Options(BaseModel):
    """Validated, immutable options threaded through every operation."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    error_strategy: ErrorStrategy = ErrorStrategy.THROW
    default_alg: str = "sha-256-chain"
    reserved_keys: FrozenSet[str] = Field(default=RESERVED_KEYS)
    identity: Callable[[Mapping[str, Any]], str] = Field(default=unsigned_id)
    chain_functions: Mapping[str, Callable[[bytes, bytes], bytes]] = Field(
        default_factory=_builtin_chain_functions
    )

    @field_validator("reserved_keys", mode="before")
    @classmethod
    def _lowercase_keys(cls, value: Any) -> FrozenSet[str]:
        if isinstance(value, str):
            value = value.split(",")
        return frozenset(str(key).strip().lower() for key in value if str(key).strip())

    @field_validator("chain_functions")
    @classmethod
    def _freeze_chain_functions(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_validator("default_alg")
    @classmethod
    def _non_empty_alg(cls, value: str) -> str:
        if not value:
            raise ValueError("default_alg must not be empty")
        return value

    @classmethod
    def from_env(cls) -> "Options":
        """Build options from environment configuration."""
        return cls(
            error_strategy=config.ERROR_STRATEGY,
            default_alg=config.DEFAULT_ALG,
            reserved_keys=config.RESERVED_KEYS.strip() or RESERVED_KEYS,
            identity=identity_for_policy(config.IDENTITY_POLICY),
        )

    def collecting(self) -> bool:
        return self.error_strategy == ErrorStrategy.COLLECT


@lru_cache(maxsize=1)
def default_options() -> Options:
    """Options built from the environment, once per process."""
    return Options.from_env()


def coerce_options(opts: Union[None, Mapping[str, Any], Options]) -> Options:
    """Accept None, a mapping of option values, or an Options instance."""
    if opts is None:
        return default_options()
    if isinstance(opts, Options):
        return opts
    if isinstance(opts, Mapping):
        values = dict(opts)
        # Accept the camelCase spelling used by message-level option maps
        if "errorStrategy" in values:
            values["error_strategy"] = values.pop("errorStrategy")
        base = default_options()
        merged = {name: getattr(base, name) for name in Options.model_fields}
        merged.update(values)
        return Options(**merged)
    raise TypeError(f"opts must be None, a mapping or Options, not {type(opts).__name__}")


@dataclass(frozen=True)
class Failure:
    """A HashPathError reported as a value under the collect strategy."""
    error: HashPathError

    @property
    def kind(self) -> str:
        return self.error.kind

    @property
    def reason(self) -> str:
        return str(self.error)

    def __bool__(self) -> bool:
        return False


# True while a public operation is running; nested operations always raise
_in_operation: ContextVar[bool] = ContextVar('hashpath_in_operation', default=False)


def apply_error_strategy(func: Callable) -> Callable:
    """
    Honour ``opts.error_strategy`` for a public operation.

    Only the outermost operation converts errors: nested calls between
    public operations propagate exceptions so control flow stays intact.
    """
    signature = inspect.signature(func)

    @wraps(func)
    def wrapper(*args, **kwargs):
        if _in_operation.get():
            return func(*args, **kwargs)
        token = _in_operation.set(True)
        try:
            return func(*args, **kwargs)
        except HashPathError as error:
            bound = signature.bind_partial(*args, **kwargs)
            opts = coerce_options(bound.arguments.get("opts"))
            if opts.collecting():
                return Failure(error)
            raise
        finally:
            _in_operation.reset(token)

    return wrapper
