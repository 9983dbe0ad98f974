"""
Configuration module for HashPath.

Centralizes configuration with environment variable support and
validation. Values are read once at import; operations never consult
this module directly, they receive an ``Options`` object built from it.
"""

import os
from typing import Dict, List

# ============================================================
# Environment Configuration
# ============================================================

# Chaining algorithm used when a base message declares no hashpath-alg
DEFAULT_ALG = os.getenv("HASHPATH_DEFAULT_ALG", "sha-256-chain")

# throw|collect
ERROR_STRATEGY = os.getenv("HASHPATH_ERROR_STRATEGY", "throw")

# unsigned|signed
IDENTITY_POLICY = os.getenv("HASHPATH_IDENTITY_POLICY", "unsigned")

# Comma separated; empty means the message model's default set
RESERVED_KEYS = os.getenv("HASHPATH_RESERVED_KEYS", "")

# Logging
LOG_LEVEL = os.getenv("HASHPATH_LOG_LEVEL", "WARNING")
LOG_JSON = os.getenv("HASHPATH_LOG_JSON", "true").lower() in ("1", "true", "yes")


# ============================================================
# Validation
# ============================================================

def validate_config() -> Dict[str, bool]:
    """
    Validate the configured values.
    Returns dict of setting -> valid.
    """
    from .chain import BUILTIN_CHAIN_FUNCTIONS
    from .identity import IDENTITY_POLICIES

    return {
        "default_alg": DEFAULT_ALG in BUILTIN_CHAIN_FUNCTIONS,
        "error_strategy": ERROR_STRATEGY in ("throw", "collect"),
        "identity_policy": IDENTITY_POLICY in IDENTITY_POLICIES,
        "log_level": LOG_LEVEL.upper() in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
    }


def invalid_settings() -> List[str]:
    """Names of the settings that failed validation."""
    return [name for name, valid in validate_config().items() if not valid]
