"""
Parameter classifier tests.

Scope
- classify() policy for every argument shape.
- The closed variant family (no direct instantiation, no foreign subclasses).
- Markers and help labels.
"""
import unittest
from unittest import TestCase

from branchline import (
    ArgumentDescriptor,
    Flag,
    Option,
    OptionalPositional,
    Parameter,
    Positional,
    Unset,
    classify,
    describe,
)


class TestClassify(TestCase):
    """Behavioral tests for classify()."""

    def testBooleanIsFlag(self):
        parameter = classify(ArgumentDescriptor("force", "bool", boolean=True, short="f"))
        self.assertEqual(parameter, Flag("force", short="f"))

    def testBooleanWithDefaultIsStillFlag(self):
        parameter = classify(ArgumentDescriptor("force", "bool", boolean=True, default="true", named=True))
        self.assertIsInstance(parameter, Flag)

    def testNamedWithDefaultIsOption(self):
        parameter = classify(ArgumentDescriptor("remote", short="r", default="origin", named=True))
        self.assertEqual(parameter, Option("remote", short="r", default="origin"))

    def testDefaultWithoutMarkerIsOptionalPositional(self):
        parameter = classify(ArgumentDescriptor("index", "int", default="0"))
        self.assertEqual(parameter, OptionalPositional("index", "int", "0"))

    def testNamedWithoutDefaultIsOption(self):
        parameter = classify(ArgumentDescriptor("remoteName", named=True))
        self.assertIsInstance(parameter, Option)
        self.assertIs(parameter.default, Unset)

    def testPlainIsPositional(self):
        parameter = classify(ArgumentDescriptor("branchName", choices=["a", "b"]))
        self.assertEqual(parameter, Positional("branchName", choices=("a", "b")))

    def testRejectsNonDescriptors(self):
        with self.assertRaises(TypeError):
            classify("branchName")


class TestVariants(TestCase):
    """The parameter family is closed and exposes markers."""

    def testBaseCannotBeInstantiated(self):
        with self.assertRaises(TypeError):
            Parameter()

    def testVariantsAreSealed(self):
        with self.assertRaises(TypeError):
            class Custom(Positional):  # NOQA: F-841
                pass

    def testBaseCannotBeExtendedOutsideItsModule(self):
        with self.assertRaises(TypeError):
            class Custom(Parameter):  # NOQA: F-841
                pass

    def testNamedAndOptional(self):
        self.assertTrue(Flag("force").named)
        self.assertTrue(Option("remote").named)
        self.assertFalse(Positional("branch").named)
        self.assertFalse(Positional("branch").optional)
        self.assertTrue(OptionalPositional("index").optional)
        self.assertTrue(Option("remote").optional)

    def testMarkers(self):
        self.assertEqual(Flag("force", short="f").markers, ("--force", "-f"))
        self.assertEqual(Option("remoteName").markers, ("--remoteName",))

    def testFlagTypeIsBool(self):
        self.assertEqual(Flag("force").type, "bool")


class TestDescribe(TestCase):
    """Help-table labels."""

    def testFlag(self):
        self.assertEqual(describe(Flag("force", short="f")), "-f | --force")

    def testOption(self):
        self.assertEqual(describe(Option("remote", short="r")), "-r | --remote=<remote>")
        self.assertEqual(describe(Option("mode", choices=("fast", "slow"))), "--mode=fast|slow")

    def testPositional(self):
        self.assertEqual(describe(Positional("branch")), "branch")
        self.assertEqual(describe(OptionalPositional("mode", choices=("fast", "slow"))), "<fast|slow>")


if __name__ == "__main__":
    unittest.main()
