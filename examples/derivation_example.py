#!/usr/bin/env python3
"""
HashPath Example - Ledger Derivation End-to-End

This example drives a small balance ledger through its request path,
records every step in the HashPath, and then has an auditor verify the
resulting history, including a tampered copy.

Run with: python examples/derivation_example.py
"""

import json
from typing import Any, Dict

from hashpath import (
    Options,
    extend,
    generate_signing_key,
    pop_request,
    queue_request,
    sign_message,
    signed_id,
    verify,
    verify_detailed,
    with_hashpath,
)
from hashpath.logging_config import configure_logging, set_derivation_id


def apply_step(base: Dict[str, Any], step: Dict[str, Any], opts=None) -> Dict[str, Any]:
    """
    Apply one ledger operation to a base message.

    The result carries the new balance, the base's remaining request
    path and a HashPath extended with the applied step.
    """
    _, remainder = pop_request(base)
    balance = int(base["balance"]) + int(step.get("amount", "0"))
    result = dict(remainder, balance=str(balance))
    return with_hashpath(base, step, result=result, opts=opts)


def main():
    print("=" * 70)
    print("HashPath Ledger Derivation - Example")
    print("=" * 70)

    configure_logging("WARNING")
    derivation_id = set_derivation_id()
    print(f"\nDerivation ID: {derivation_id}")

    # =========================================================
    # SCENARIO 1: Derivation driven by the request path
    # =========================================================
    print("\n" + "-" * 70)
    print("SCENARIO 1: Deposits Applied Through the Request Path")
    print("-" * 70)

    ledger = {"balance": "100", "path": "deposit"}
    ledger = queue_request(ledger, ["withdraw", "deposit"])
    print(f"\n[STEP 1] Initial ledger: {json.dumps(ledger)}")

    steps = [
        {"amount": "25", "memo": "salary"},
        {"amount": "-40", "memo": "rent"},
        {"amount": "10", "memo": "refund"},
    ]

    history = [ledger]
    message = ledger
    for step in steps:
        history.append(step)
        message = apply_step(message, step)
        history.append(message)
        print(f"  Applied {step['memo']:<7} balance={message['balance']:<4} hashpath={message['hashpath'][:30]}...")

    print(f"\n[STEP 2] Final request path: {message.get('path')}")

    # =========================================================
    # SCENARIO 2: Third-party verification
    # =========================================================
    print("\n" + "-" * 70)
    print("SCENARIO 2: Auditor Verification")
    print("-" * 70)

    for index in range(0, len(history) - 2, 2):
        window = history[index:index + 3]
        print(f"  Window {index // 2}: {'✓ VALID' if verify(window) else '✗ INVALID'}")

    tampered = dict(history[1], amount="2500")
    result = verify_detailed([history[0], tampered, history[2]])
    print(f"\n[TAMPERED] Outcome: {result.outcome.value}")
    print(f"  Reason: {result.reason}")

    # =========================================================
    # SCENARIO 3: Signed identities
    # =========================================================
    print("\n" + "-" * 70)
    print("SCENARIO 3: Signed Applied Messages")
    print("-" * 70)

    signing_key, _ = generate_signing_key()
    opts = Options(identity=signed_id)
    base = {"balance": "100"}
    signed_step = sign_message({"amount": "5", "memo": "interest"}, signing_key)
    produced = {"balance": "105", "hashpath": extend(base, signed_step, opts)}

    print(f"  Signed step owner: {signed_step['owner'][:20]}...")
    print(f"  Verified with signed identities: {verify([base, signed_step, produced], opts)}")
    print(f"  Verified with unsigned identities: {verify([base, signed_step, produced])}")

    print("\n" + "=" * 70)


if __name__ == "__main__":
    main()
