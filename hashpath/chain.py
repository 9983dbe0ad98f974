"""
HashPath Chain Function Registry

Maps a message's ``hashpath-alg`` tag to the function used to consolidate
a pending HashPath pair. Chain functions take two native values and
return one 32-byte native value; they must be pure and total.

The registry travels in ``Options.chain_functions``. Registering an
algorithm returns new options and never changes the built-in table.
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping

from .errors import UnknownChainAlgorithm
from .hashing import accumulate, sha256_chain
from .message import HASHPATH_ALG_KEYS, get_field, is_message
from .options import Options, apply_error_strategy, coerce_options

logger = logging.getLogger(__name__)

ChainFunction = Callable[[bytes, bytes], bytes]

SHA256_CHAIN = "sha-256-chain"
ACCUMULATE_256 = "accumulate-256"

BUILTIN_CHAIN_FUNCTIONS: Mapping[str, ChainFunction] = MappingProxyType({
    SHA256_CHAIN: sha256_chain,
    ACCUMULATE_256: accumulate,
})


def register_chain_fn(algorithm: str, function: ChainFunction, opts=None) -> Options:
    """
    Return options that also resolve ``algorithm`` to ``function``.

    Raises:
        ValueError: if the tag is empty or already registered in ``opts``
    """
    options = coerce_options(opts)
    if not algorithm:
        raise ValueError("algorithm tag must not be empty")
    if algorithm in options.chain_functions:
        raise ValueError(f"Chain algorithm already registered: {algorithm}")
    functions = dict(options.chain_functions)
    functions[algorithm] = function
    return options.model_copy(update={"chain_functions": MappingProxyType(functions)})


def chain_algorithm(message: Any, opts=None) -> str:
    """The algorithm tag a message declares, or the configured default."""
    if is_message(message):
        declared = get_field(message, HASHPATH_ALG_KEYS)
        if declared is not None:
            return declared
    return coerce_options(opts).default_alg


@apply_error_strategy
def resolve_chain_fn(message: Any, opts=None) -> ChainFunction:
    """
    Resolve the chain function for a base message.

    Raises:
        UnknownChainAlgorithm: if the declared (or default) tag is not
        registered in ``opts.chain_functions``
    """
    algorithm = chain_algorithm(message, opts)
    functions = coerce_options(opts).chain_functions
    function = functions.get(algorithm) if isinstance(algorithm, str) else None
    if function is None:
        logger.debug("unknown hashpath algorithm %r", algorithm)
        raise UnknownChainAlgorithm(algorithm)
    return function
