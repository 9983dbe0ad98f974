"""
Options, Error Strategy and Configuration Test Suite
"""

import json
import logging
import unittest
from unittest import mock

from hashpath import (
    ErrorStrategy,
    Failure,
    HashPathError,
    Options,
    UnsupportedPathTerm,
    canonicalize,
    coerce_options,
    extend,
    pop_request,
    resolve_chain_fn,
    to_flat_string,
    unsigned_id,
)
from hashpath import config
from hashpath.logging_config import (
    StructuredFormatter,
    derivation_id_var,
    get_derivation_id,
    set_derivation_id,
)
from hashpath.message import RESERVED_KEYS
from hashpath.options import default_options


class TestErrorStrategy(unittest.TestCase):
    """throw | collect reporting of HashPath errors."""

    def test_throw_is_default(self):
        with self.assertRaises(UnsupportedPathTerm):
            canonicalize(3.5)

    def test_collect_returns_failure(self):
        result = canonicalize(3.5, {"error_strategy": "collect"})
        self.assertIsInstance(result, Failure)
        self.assertFalse(result)
        self.assertEqual(result.kind, "UnsupportedPathTerm")
        self.assertIn("float", result.reason)

    def test_camel_case_option_name(self):
        result = to_flat_string([object()], {"errorStrategy": "collect"})
        self.assertIsInstance(result, Failure)

    def test_nested_errors_surface_from_outer_operation(self):
        opts = Options(error_strategy=ErrorStrategy.COLLECT)
        result = extend({"hashpath": "a/b/c"}, "next", opts)
        self.assertIsInstance(result, Failure)
        self.assertEqual(result.kind, "MalformedHashPath")

        result = pop_request({"path": [1.5]}, opts)
        self.assertEqual(result.kind, "UnsupportedPathTerm")

        result = resolve_chain_fn({"hashpath-alg": "nope"}, opts)
        self.assertEqual(result.kind, "UnknownChainAlgorithm")

    def test_successful_calls_unchanged_under_collect(self):
        opts = {"error_strategy": "collect"}
        self.assertEqual(canonicalize("a/b", opts), ["a", "b"])
        self.assertEqual(extend({"a": 1}, "x", opts), f"{unsigned_id({'a': 1})}/x")

    def test_throw_after_collect(self):
        canonicalize(3.5, {"error_strategy": "collect"})
        with self.assertRaises(HashPathError):
            canonicalize(3.5, {"error_strategy": "throw"})


class TestOptions(unittest.TestCase):
    """Validation and coercion of option values."""

    def test_invalid_strategy_rejected(self):
        with self.assertRaises(ValueError):
            Options(error_strategy="ignore")

    def test_empty_default_alg_rejected(self):
        with self.assertRaises(ValueError):
            Options(default_alg="")

    def test_reserved_keys_normalized(self):
        self.assertEqual(Options(reserved_keys="path, HashPath").reserved_keys, frozenset({"path", "hashpath"}))
        self.assertEqual(Options(reserved_keys=["Path", "Kind"]).reserved_keys, frozenset({"path", "kind"}))

    def test_custom_reserved_keys_change_selector_detection(self):
        msg1 = {"a": 1}
        selector = {"path": "Base", "Kind": "lookup"}
        default = extend(msg1, selector)
        custom = extend(msg1, selector, Options(reserved_keys={"path", "hashpath", "kind"}))
        self.assertTrue(default.endswith(unsigned_id(selector)))
        self.assertTrue(custom.endswith("/Base"))

    def test_options_are_frozen(self):
        opts = Options()
        with self.assertRaises(Exception):
            opts.default_alg = "accumulate-256"

    def test_coerce(self):
        opts = Options()
        self.assertIs(coerce_options(opts), opts)
        self.assertIs(coerce_options(None), default_options())
        self.assertEqual(coerce_options({"default_alg": "accumulate-256"}).default_alg, "accumulate-256")
        with self.assertRaises(TypeError):
            coerce_options(5)


class TestConfig(unittest.TestCase):

    def test_defaults_are_valid(self):
        self.assertTrue(all(config.validate_config().values()))
        self.assertEqual(config.invalid_settings(), [])

    def test_invalid_settings_named(self):
        with mock.patch.object(config, "DEFAULT_ALG", "md5-chain"), \
                mock.patch.object(config, "ERROR_STRATEGY", "ignore"):
            self.assertEqual(config.invalid_settings(), ["default_alg", "error_strategy"])

    def test_reserved_keys_from_env_normalized_by_options(self):
        with mock.patch.object(config, "RESERVED_KEYS", " Path , Kind,"):
            self.assertEqual(Options.from_env().reserved_keys, frozenset({"path", "kind"}))
        with mock.patch.object(config, "RESERVED_KEYS", ""):
            self.assertEqual(Options.from_env().reserved_keys, RESERVED_KEYS)

    def test_from_env_matches_config(self):
        opts = Options.from_env()
        self.assertEqual(opts.default_alg, config.DEFAULT_ALG)
        self.assertEqual(opts.error_strategy.value, config.ERROR_STRATEGY)


class TestStructuredLogging(unittest.TestCase):

    def tearDown(self):
        derivation_id_var.set('')

    def test_formatter_emits_json(self):
        record = logging.LogRecord("hashpath.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        record.extra_fields = {"event_type": "HASHPATH_EXTENDED"}
        data = json.loads(StructuredFormatter().format(record))
        self.assertEqual(data["message"], "hello world")
        self.assertEqual(data["level"], "INFO")
        self.assertEqual(data["event_type"], "HASHPATH_EXTENDED")

    def test_derivation_id_included(self):
        derivation_id = set_derivation_id()
        self.assertEqual(get_derivation_id(), derivation_id)
        record = logging.LogRecord("hashpath.test", logging.INFO, __file__, 1, "msg", (), None)
        data = json.loads(StructuredFormatter().format(record))
        self.assertEqual(data["derivation_id"], derivation_id)

    def test_extension_events(self):
        with self.assertLogs("hashpath.events", level="DEBUG") as logs:
            extend({"hashpath": extend({"a": 1}, "x")}, "y")
        events = " ".join(logs.output)
        self.assertIn("HASHPATH_CONSOLIDATED", events)
        self.assertIn("HASHPATH_EXTENDED", events)


if __name__ == "__main__":
    unittest.main()
