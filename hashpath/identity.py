"""
HashPath Message Identity

A message's identity is the human-encoded identifier that roots its
HashPath and that is recorded when it is applied to another message.
Two policies are provided:

- ``unsigned``: SHA-256 over the canonical encoding of the message with
  its signature fields removed. Signing a message does not change it.
- ``signed``: SHA-256 over the message's Ed25519 signature, so the id
  commits to the signer as well as the content. Unsigned messages fall
  back to the unsigned id.

The default policy is ``unsigned``. Either capability can be replaced by
passing ``identity=`` in the operation options.
"""

import binascii
from typing import Any, Callable, Dict, Mapping, Tuple

from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from .canonicalization import canonicalize
from .hashing import b64url_decode, b64url_encode, human_id, sha256

SIGNATURE_KEY = "signature"
OWNER_KEY = "owner"
SIGNATURE_KEYS: Tuple[str, ...] = (SIGNATURE_KEY, OWNER_KEY)


def _unsigned_body(message: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in message.items() if k not in SIGNATURE_KEYS}


def unsigned_id(message: Mapping[str, Any]) -> str:
    """Content identifier of a message, ignoring any signature."""
    return human_id(sha256(canonicalize(_unsigned_body(message))))


def signed_id(message: Mapping[str, Any]) -> str:
    """Identifier derived from the message signature, if it has one."""
    signature = message.get(SIGNATURE_KEY)
    if not signature:
        return unsigned_id(message)
    return human_id(sha256(b64url_decode(signature)))


IDENTITY_POLICIES: Dict[str, Callable[[Mapping[str, Any]], str]] = {
    "unsigned": unsigned_id,
    "signed": signed_id,
}


def identity_for_policy(policy: str) -> Callable[[Mapping[str, Any]], str]:
    """Look up an identity capability by policy name."""
    if policy not in IDENTITY_POLICIES:
        raise ValueError(f"Unknown identity policy: {policy}")
    return IDENTITY_POLICIES[policy]


# Signing

def generate_signing_key() -> Tuple[bytes, bytes]:
    """
    Generate an Ed25519 key pair.

    Returns:
        Tuple of (signing_key_bytes, verify_key_bytes)
    """
    signing_key = SigningKey.generate()
    return bytes(signing_key), bytes(signing_key.verify_key)


def sign_message(message: Mapping[str, Any], signing_key: bytes) -> Dict[str, Any]:
    """
    Sign a message with Ed25519.

    The signature covers the canonical encoding of the message without
    any previous signature. Returns a new message carrying ``owner`` (the
    verify key) and ``signature``, both unpadded URL-safe base64.
    """
    key = SigningKey(signing_key)
    body = _unsigned_body(message)
    signature = key.sign(canonicalize(body)).signature
    signed = dict(body)
    signed[OWNER_KEY] = b64url_encode(bytes(key.verify_key))
    signed[SIGNATURE_KEY] = b64url_encode(signature)
    return signed


def verify_message_signature(message: Mapping[str, Any]) -> bool:
    """Check a message's Ed25519 signature against its ``owner`` key."""
    signature = message.get(SIGNATURE_KEY)
    owner = message.get(OWNER_KEY)
    if not signature or not owner:
        return False
    try:
        verify_key = VerifyKey(b64url_decode(owner))
        verify_key.verify(canonicalize(_unsigned_body(message)), b64url_decode(signature))
        return True
    except (BadSignatureError, binascii.Error, ValueError):
        return False
