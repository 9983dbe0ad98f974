#!/usr/bin/env python3
"""
HashPath Command Line Interface

Usage:
    hashpath parts <term> [--json]
    hashpath flat <term> [--json]
    hashpath id --message <file> [--policy unsigned|signed]
    hashpath extend --base <file> (--applied <file> | --applied-id <id>) [--materialize]
    hashpath verify --history <file>
    hashpath pop --message <file>
"""

import argparse
import json
import sys

from . import config
from .errors import HashPathError
from .logging_config import configure_logging, set_derivation_id


def load_json(path: str):
    """Load JSON from file."""
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def save_json(data, path: str):
    """Save JSON to file."""
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)


def _options(args):
    from hashpath import Options, identity_for_policy

    return Options(
        default_alg=args.alg,
        identity=identity_for_policy(getattr(args, "policy", None) or config.IDENTITY_POLICY),
    )


def _term(args):
    return json.loads(args.term) if args.json else args.term


def cmd_parts(args):
    """Print the canonical segments of a path term."""
    from hashpath import canonicalize

    print(json.dumps(canonicalize(_term(args))))
    return 0


def cmd_flat(args):
    """Print the flat string form of a path term."""
    from hashpath import to_flat_string

    print(to_flat_string(_term(args)))
    return 0


def cmd_id(args):
    """Print the identity of a message."""
    opts = _options(args)
    print(opts.identity(load_json(args.message)))
    return 0


def cmd_extend(args):
    """Extend the hashpath of a base message."""
    from hashpath import extend, with_hashpath

    opts = _options(args)
    base = load_json(args.base)
    applied = args.applied_id if args.applied_id else load_json(args.applied)

    if args.materialize:
        result = with_hashpath(base, applied, opts=opts)
        if args.output:
            save_json(result, args.output)
            print(f"Message saved to: {args.output}", file=sys.stderr)
        else:
            print(json.dumps(result, indent=2))
    else:
        print(extend(base, applied, opts))
    return 0


def cmd_verify(args):
    """Verify a message history."""
    from hashpath import verify_detailed

    history = load_json(args.history)
    if not isinstance(history, list):
        print("✗ INVALID: history must be a JSON array of messages")
        return 1

    result = verify_detailed(history, _options(args))

    if result.is_valid():
        print(f"✓ {result.outcome.value} ({max(len(history) - 2, 0)} window(s) checked)")
        return 0
    else:
        print(f"✗ INVALID at window {result.window}: {result.reason}")
        if result.details:
            print(json.dumps(result.details, indent=2))
        return 1


def cmd_pop(args):
    """Pop the next request path segment from a message."""
    from hashpath import pop_request

    popped = pop_request(load_json(args.message))
    if popped is None:
        print("No more work", file=sys.stderr)
        return 1

    head, remainder = popped
    print(json.dumps({"head": head, "rest": remainder}, indent=2))
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="HashPath CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hashpath parts "a//b/c"                      Canonical segments
  hashpath flat '["a", ["b", "//b"], "c"]' --json
  hashpath id -m message.json
  hashpath extend -b base.json -a applied.json
  hashpath verify -H history.json
  hashpath pop -m message.json
        """
    )
    parser.add_argument("--alg", default=config.DEFAULT_ALG, help="Default hashpath algorithm")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Log level")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # parts
    parts_parser = subparsers.add_parser("parts", help="Canonicalize a path term")
    parts_parser.add_argument("term", help="Path term")
    parts_parser.add_argument("--json", action="store_true", help="Parse term as JSON")

    # flat
    flat_parser = subparsers.add_parser("flat", help="Flatten a path term")
    flat_parser.add_argument("term", help="Path term")
    flat_parser.add_argument("--json", action="store_true", help="Parse term as JSON")

    # id
    id_parser = subparsers.add_parser("id", help="Compute a message identity")
    id_parser.add_argument("-m", "--message", required=True, help="Message JSON file")
    id_parser.add_argument("-p", "--policy", choices=["unsigned", "signed"], help="Identity policy")

    # extend
    extend_parser = subparsers.add_parser("extend", help="Extend a message hashpath")
    extend_parser.add_argument("-b", "--base", required=True, help="Base message JSON file")
    applied_group = extend_parser.add_mutually_exclusive_group(required=True)
    applied_group.add_argument("-a", "--applied", help="Applied message JSON file")
    applied_group.add_argument("-i", "--applied-id", help="Applied identifier")
    extend_parser.add_argument("-p", "--policy", choices=["unsigned", "signed"], help="Identity policy")
    extend_parser.add_argument("--materialize", action="store_true", help="Print the base message with its new hashpath")
    extend_parser.add_argument("-o", "--output", help="Output file for the materialized message")

    # verify
    verify_parser = subparsers.add_parser("verify", help="Verify a message history")
    verify_parser.add_argument("-H", "--history", required=True, help="JSON array of messages")
    verify_parser.add_argument("-p", "--policy", choices=["unsigned", "signed"], help="Identity policy")

    # pop
    pop_parser = subparsers.add_parser("pop", help="Pop the next request path segment")
    pop_parser.add_argument("-m", "--message", required=True, help="Message JSON file")

    args = parser.parse_args(argv)

    invalid = config.invalid_settings()
    if invalid:
        print(f"✗ Invalid configuration: {', '.join(invalid)}", file=sys.stderr)
        return 2

    configure_logging(args.log_level, json_format=config.LOG_JSON)
    set_derivation_id()

    commands = {
        "parts": cmd_parts,
        "flat": cmd_flat,
        "id": cmd_id,
        "extend": cmd_extend,
        "verify": cmd_verify,
        "pop": cmd_pop,
    }
    if args.command not in commands:
        parser.print_help()
        return 2
    try:
        return commands[args.command](args)
    except HashPathError as error:
        print(f"✗ {error.kind}: {error}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
