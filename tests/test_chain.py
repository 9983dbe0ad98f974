"""
Chain Function Registry and Digest Primitive Test Suite
"""

import hashlib
import unittest

from hashpath import (
    ACCUMULATE_256,
    BUILTIN_CHAIN_FUNCTIONS,
    SHA256_CHAIN,
    Options,
    UnknownChainAlgorithm,
    accumulate,
    chain_algorithm,
    human_id,
    is_human_id,
    native_id,
    register_chain_fn,
    resolve_chain_fn,
    sha256,
    sha256_chain,
)


class TestResolveChainFn(unittest.TestCase):
    """Resolution of hashpath-alg tags."""

    def test_default_is_sha256_chain(self):
        self.assertIs(resolve_chain_fn({}), sha256_chain)
        self.assertIs(resolve_chain_fn(b"raw buffer"), sha256_chain)

    def test_declared_algorithms(self):
        self.assertIs(resolve_chain_fn({"hashpath-alg": SHA256_CHAIN}), sha256_chain)
        self.assertIs(resolve_chain_fn({"hashpath-alg": ACCUMULATE_256}), accumulate)

    def test_header_style_field(self):
        self.assertIs(resolve_chain_fn({"Hashpath-Alg": "accumulate-256"}), accumulate)

    def test_unknown_algorithm(self):
        with self.assertRaises(UnknownChainAlgorithm) as ctx:
            resolve_chain_fn({"hashpath-alg": "md5-chain"})
        self.assertEqual(ctx.exception.term, "md5-chain")

    def test_tag_is_case_sensitive(self):
        with self.assertRaises(UnknownChainAlgorithm):
            resolve_chain_fn({"hashpath-alg": "SHA-256-CHAIN"})

    def test_default_from_options(self):
        opts = Options(default_alg=ACCUMULATE_256)
        self.assertIs(resolve_chain_fn({}, opts), accumulate)
        self.assertEqual(chain_algorithm({}, opts), ACCUMULATE_256)
        # A declared tag still wins over the default
        self.assertIs(resolve_chain_fn({"hashpath-alg": SHA256_CHAIN}, opts), sha256_chain)


class TestRegisterChainFn(unittest.TestCase):
    """Adding algorithms through options."""

    @staticmethod
    def xor_chain(left, right):
        return bytes(a ^ b for a, b in zip(left.rjust(32, b"\0"), right.rjust(32, b"\0")))

    def test_register_returns_new_options(self):
        base = Options()
        opts = register_chain_fn("xor-256", self.xor_chain, base)
        self.assertIs(resolve_chain_fn({"hashpath-alg": "xor-256"}, opts), self.xor_chain)
        self.assertIs(resolve_chain_fn({"hashpath-alg": ACCUMULATE_256}, opts), accumulate)

    def test_registration_does_not_leak(self):
        register_chain_fn("xor-256", self.xor_chain)
        self.assertNotIn("xor-256", BUILTIN_CHAIN_FUNCTIONS)
        self.assertNotIn("xor-256", Options().chain_functions)
        with self.assertRaises(UnknownChainAlgorithm):
            resolve_chain_fn({"hashpath-alg": "xor-256"})

    def test_registry_is_read_only(self):
        with self.assertRaises(TypeError):
            Options().chain_functions["xor-256"] = self.xor_chain
        with self.assertRaises(TypeError):
            BUILTIN_CHAIN_FUNCTIONS["xor-256"] = self.xor_chain

    def test_registry_from_option_values(self):
        opts = {"chain_functions": {"xor-256": self.xor_chain}}
        self.assertIs(resolve_chain_fn({"hashpath-alg": "xor-256"}, opts), self.xor_chain)
        with self.assertRaises(UnknownChainAlgorithm):
            resolve_chain_fn({"hashpath-alg": SHA256_CHAIN}, opts)

    def test_duplicate_rejected(self):
        with self.assertRaises(ValueError):
            register_chain_fn(SHA256_CHAIN, sha256_chain)

    def test_empty_tag_rejected(self):
        with self.assertRaises(ValueError):
            register_chain_fn("", sha256_chain)


class TestChainFunctions(unittest.TestCase):
    """The built-in two-input combiners."""

    def setUp(self):
        self.left = sha256(b"left")
        self.right = sha256(b"right")

    def test_sha256_chain(self):
        self.assertEqual(
            sha256_chain(self.left, self.right),
            hashlib.sha256(self.left + self.right).digest()
        )
        self.assertNotEqual(sha256_chain(self.left, self.right), sha256_chain(self.right, self.left))

    def test_accumulate_is_commutative_and_associative(self):
        third = sha256(b"third")
        self.assertEqual(accumulate(self.left, self.right), accumulate(self.right, self.left))
        self.assertEqual(
            accumulate(accumulate(self.left, self.right), third),
            accumulate(self.left, accumulate(self.right, third))
        )

    def test_accumulate_is_modular_addition(self):
        one = (1).to_bytes(32, "big")
        self.assertEqual(accumulate(one, one), (2).to_bytes(32, "big"))
        self.assertEqual(accumulate(b"\xff" * 32, one), b"\x00" * 32)

    def test_outputs_are_fixed_width(self):
        self.assertEqual(len(sha256_chain(self.left, b"Base")), 32)
        self.assertEqual(len(accumulate(self.left, b"Base")), 32)


class TestIdEncoding(unittest.TestCase):
    """Human and native identifier encodings."""

    def test_round_trip(self):
        digest = sha256(b"message")
        human = human_id(digest)
        self.assertEqual(len(human), 43)
        self.assertTrue(is_human_id(human))
        self.assertEqual(native_id(human), digest)

    def test_native_passthrough(self):
        digest = sha256(b"message")
        self.assertEqual(native_id(digest), digest)

    def test_non_id_segments_use_utf8(self):
        self.assertFalse(is_human_id("Base"))
        self.assertEqual(native_id("Base"), b"Base")

    def test_human_id_requires_32_bytes(self):
        with self.assertRaises(ValueError):
            human_id(b"short")


if __name__ == "__main__":
    unittest.main()
