"""
HashPath Reference Implementation

Version: 1.0.0
License: Apache 2.0

Tamper-evident derivation histories for message-oriented computation.

Every derived message carries a ``hashpath``: a bounded, two-segment
rolling Merkle list committing to all the messages applied to produce it.
Separately, a message's ``path`` is the request path: the work queue of
segments that drives successive computation steps.

Usage:
    from hashpath import extend, verify, pop_request

    msg1 = {"balance": "100"}
    msg2 = {"deposit": "25"}
    msg3 = {"balance": "125", "hashpath": extend(msg1, msg2)}

    assert verify([msg1, msg2, msg3])

    head, rest = pop_request({"path": "compute/balance"})
    # head == "compute", rest == {"path": ["balance"]}
"""

__version__ = "1.0.0"
__license__ = "Apache-2.0"

# Errors
from .errors import (
    HashPathError,
    UnsupportedPathTerm,
    UnknownChainAlgorithm,
    UnsupportedBase,
    HashPathNotViable,
    MalformedHashPath,
    ChainFunctionError,
)

# Options
from .options import (
    Options,
    ErrorStrategy,
    Failure,
    coerce_options,
)

# Path canonicalization
from .path import (
    canonicalize,
    to_flat_string,
    key_to_str,
    segments_match,
)

# Digests and identifiers
from .hashing import (
    sha256,
    human_id,
    native_id,
    is_human_id,
    sha256_chain,
    accumulate,
)

# Identity
from .identity import (
    unsigned_id,
    signed_id,
    sign_message,
    verify_message_signature,
    generate_signing_key,
    identity_for_policy,
)

# Chain functions
from .chain import (
    BUILTIN_CHAIN_FUNCTIONS,
    SHA256_CHAIN,
    ACCUMULATE_256,
    register_chain_fn,
    resolve_chain_fn,
    chain_algorithm,
)

# Engine
from .engine import (
    Root,
    Pending,
    parse_hashpath,
    consolidate,
    current_hashpath,
    extend,
    with_hashpath,
)

# Verifier
from .verifier import (
    HashPathVerifier,
    VerificationResult,
    VerificationOutcome,
    verify,
    verify_detailed,
)

# Request path queue
from .request import (
    request_path,
    pop_request,
    push_request,
    queue_request,
    first_segment,
    rest,
)


__all__ = [
    # Version
    "__version__",

    # Errors
    "HashPathError",
    "UnsupportedPathTerm",
    "UnknownChainAlgorithm",
    "UnsupportedBase",
    "HashPathNotViable",
    "MalformedHashPath",
    "ChainFunctionError",

    # Options
    "Options",
    "ErrorStrategy",
    "Failure",
    "coerce_options",

    # Paths
    "canonicalize",
    "to_flat_string",
    "key_to_str",
    "segments_match",

    # Hashing
    "sha256",
    "human_id",
    "native_id",
    "is_human_id",
    "sha256_chain",
    "accumulate",

    # Identity
    "unsigned_id",
    "signed_id",
    "sign_message",
    "verify_message_signature",
    "generate_signing_key",
    "identity_for_policy",

    # Chain functions
    "BUILTIN_CHAIN_FUNCTIONS",
    "SHA256_CHAIN",
    "ACCUMULATE_256",
    "register_chain_fn",
    "resolve_chain_fn",
    "chain_algorithm",

    # Engine
    "Root",
    "Pending",
    "parse_hashpath",
    "consolidate",
    "current_hashpath",
    "extend",
    "with_hashpath",

    # Verifier
    "HashPathVerifier",
    "VerificationResult",
    "VerificationOutcome",
    "verify",
    "verify_detailed",

    # Request path
    "request_path",
    "pop_request",
    "push_request",
    "queue_request",
    "first_segment",
    "rest",
]
