"""
Tests for the small shared helpers.

This module verifies:
- Unset sentinel semantics (singleton, falsy, unions, copy/pickle identity, finality).
- coalesce() preserving legitimate falsy values.
- freeze() producing read-only containers recursively.
- kebabize() default command-name derivation.
- ordinal() position labels used by diagnostics.
"""
import copy
import pickle
import unittest
from types import MappingProxyType
from unittest import TestCase

from branchline.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        self.assertIs(Unset, UnsetType())

    def testFalsy(self) -> None:
        """
        Unset is falsy but never equal to other falsy values.
        """
        self.assertFalse(Unset)
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, "")

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testUnionInIsInstance(self) -> None:
        """
        `str | Unset` works on both sides of isinstance.
        """
        self.assertIsInstance("x", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance(Unset, Unset | str)
        self.assertNotIsInstance(1, str | Unset)

    def testCopyAndPickleKeepIdentity(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            class Sub(UnsetType):  # NOQA: F-841
                pass


class HelpersTest(TestCase):
    """
    Test suite for coalesce, freeze, kebabize and ordinal.
    """

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))

    def testFreezeSequences(self) -> None:
        self.assertEqual(freeze([1, [2, 3]]), (1, (2, 3)))
        self.assertEqual(freeze("abc"), "abc")

    def testFreezeMappings(self) -> None:
        """
        Mappings become read-only proxies with frozen values, order preserved.
        """
        frozen = freeze({"b": [1], "a": {2}})
        self.assertIsInstance(frozen, MappingProxyType)
        self.assertEqual(list(frozen), ["b", "a"])
        self.assertEqual(frozen["b"], (1,))
        self.assertEqual(frozen["a"], frozenset({2}))
        with self.assertRaises(TypeError):
            frozen["c"] = 3  # type: ignore[index]

    def testKebabize(self) -> None:
        self.assertEqual(kebabize("CheckoutBranch"), "checkout-branch")
        self.assertEqual(kebabize("listRemotes"), "list-remotes")
        self.assertEqual(kebabize("HTTPServer"), "http-server")
        self.assertEqual(kebabize("add_remote"), "add-remote")
        self.assertEqual(kebabize("checkout"), "checkout")
        self.assertEqual(kebabize("SomeParent"), "some-parent")

    def testKebabizeRejectsNonStrings(self) -> None:
        with self.assertRaises(TypeError):
            kebabize(42)

    def testOrdinal(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(112), "112th")


if __name__ == "__main__":
    unittest.main()
