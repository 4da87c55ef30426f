"""
Fault model tests (codes, diagnostics to exceptions, triggering, rendering).

Conventions
- Test method names follow CamelCase per project convention.
- The module console is swapped for an in-memory one whenever shell mode prints.
"""
import copy
import io
import unittest
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from branchline import (
    BuildExit,
    CommandException,
    ConversionFailedError,
    Diagnostic,
    DuplicateCommandError,
    DuplicateCommandWarning,
    FaultCode,
    MissingOptionValueError,
    MissingPositionalError,
    UnknownCommandError,
    UnrecognizedArgumentsError,
    getdoc,
    trigger,
)


def capture():
    return Console(file=io.StringIO(), width=120, color_system=None)


class TestFaultCodes(TestCase):
    """Stable identifiers."""

    def testNormalizeDefaultsToTheNumber(self):
        self.assertEqual(FaultCode.MISSING_POSITIONAL.normalize(), "11121")

    def testGetdoc(self):
        self.assertIsNone(getdoc(FaultCode.UNKNOWN_COMMAND))
        with self.assertRaises(TypeError):
            getdoc(11101)


class TestDiagnosticFaults(TestCase):
    """Diagnostic.fault() builds the matching exception."""

    def testMissingPositional(self):
        fault = Diagnostic(FaultCode.MISSING_POSITIONAL, {"parameter": "branchName"}, ("checkout",)).fault("git")
        self.assertIsInstance(fault, MissingPositionalError)
        self.assertEqual(str(fault), "missing value for argument 'branchName'")
        self.assertIn("git checkout --help", fault.options["hint"])
        self.assertEqual(fault.options["code"], FaultCode.MISSING_POSITIONAL)

    def testMissingOptionValueUsesOrdinals(self):
        fault = Diagnostic(FaultCode.MISSING_OPTION_VALUE, {
            "option": "remoteName",
            "marker": "--remoteName",
            "index": 2,
        }, ("remote", "add")).fault("git")
        self.assertIsInstance(fault, MissingOptionValueError)
        self.assertEqual(fault.message, "option '--remoteName' at third position requires a value")

    def testConversionFailed(self):
        fault = Diagnostic(FaultCode.CONVERSION_FAILED, {
            "parameter": "depth",
            "type": "int",
            "value": "deep",
            "reason": "not a number",
            "index": 3,
        }, ("clone",)).fault()
        self.assertIsInstance(fault, ConversionFailedError)
        self.assertEqual(fault.message, "invalid value 'deep' for 'depth' at fourth position: not a number")

    def testUnrecognizedArguments(self):
        fault = Diagnostic(FaultCode.UNRECOGNIZED_ARGUMENTS, {
            "tokens": ("--bogus", "x"),
            "indices": (2, 3),
        }, ("checkout",)).fault("git")
        self.assertIsInstance(fault, UnrecognizedArgumentsError)
        self.assertEqual(fault.message, "unrecognized arguments: --bogus, x")
        self.assertEqual(fault.options["tokens"], ("--bogus", "x"))

    def testUnknownCommand(self):
        fault = Diagnostic(FaultCode.UNKNOWN_COMMAND, {"tokens": ("push",)}).fault("git")
        self.assertIsInstance(fault, UnknownCommandError)
        self.assertEqual(fault.message, "unknown command 'push' at first position")

    def testBuildCodesHaveNoRuntimeFault(self):
        with self.assertRaises(ValueError):
            Diagnostic(FaultCode.DUPLICATE_COMMAND, {}).fault()


class TestTrigger(TestCase):
    """Raising, printing and exiting."""

    def setUp(self):
        self.fault = MissingPositionalError(
            "missing value for argument 'branchName'",
            title="missing positional",
            code=FaultCode.MISSING_POSITIONAL,
            hint="add the missing value",
        )

    def testRaisesOutsideShell(self):
        with self.assertRaises(MissingPositionalError) as context:
            trigger(self.fault)
        self.assertIsInstance(context.exception, CommandException)

    def testShellPrintsAndExits(self):
        console = capture()
        with patch("branchline.faults.console", console), self.assertRaises(SystemExit) as context:
            trigger(self.fault, shell=True, colorful=False, prog="git")
        self.assertEqual(context.exception.code, 1)
        output = console.file.getvalue()
        self.assertIn("[ git — 11121 | Missing Positional ]", output)
        self.assertIn("missing value for argument 'branchName'", output)
        self.assertIn("→ add the missing value", output)

    def testDeferredDoesNotExit(self):
        console = capture()
        with patch("branchline.faults.console", console):
            trigger(self.fault, shell=True, deferred=True, colorful=False)
        self.assertIn("branchName", console.file.getvalue())

    def testFancyRendersAPanel(self):
        console = capture()
        with patch("branchline.faults.console", console):
            trigger(self.fault, shell=True, deferred=True, fancy=True, colorful=False)
        self.assertIn("╭", console.file.getvalue())

    def testReplaceKeepsMessage(self):
        replaced = copy.replace(self.fault, shell=True)
        self.assertEqual(replaced.message, self.fault.message)
        self.assertTrue(replaced.options["shell"])
        self.assertEqual(replaced.options["hint"], "add the missing value")

    def testWarningsOutsideShell(self):
        with self.assertWarns(DuplicateCommandWarning):
            trigger(DuplicateCommandWarning("command 'checkout' is declared twice"))

    def testWarningsInShellArePrinted(self):
        console = capture()
        with patch("branchline.faults.console", console):
            trigger(DuplicateCommandWarning("command 'checkout' is declared twice", title="duplicate command"),
                    shell=True, colorful=False)
        self.assertIn("Duplicate Command", console.file.getvalue())

    def testBuildExitInShell(self):
        console = capture()
        group = BuildExit([DuplicateCommandError("command 'a' is declared twice", title="duplicate command")])
        with patch("branchline.faults.console", console), self.assertRaises(SystemExit):
            trigger(group, shell=True, colorful=False, prog="git")
        output = console.file.getvalue()
        self.assertIn("Bad Build", output)
        self.assertIn("command 'a' is declared twice", output)

    def testRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


if __name__ == "__main__":
    unittest.main()
