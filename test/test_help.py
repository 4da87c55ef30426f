"""
Help renderer tests (usage lines, sections, commands listing).

Conventions
- Rendering is checked on plain text exported from a recording console with
  colors disabled.
"""
import io
import unittest
from unittest import TestCase

from rich.console import Console

from branchline import (
    ArgumentDescriptor,
    CommandPathItem,
    MethodDescriptor,
    assemble,
    helper,
    render,
    signature,
    usage,
)


def tree():
    return assemble([
        MethodDescriptor("Checkout", "samples.git.Actions", [
            ArgumentDescriptor("branchName", description="branch to switch to"),
            ArgumentDescriptor("force", "bool", boolean=True, short="f", description="discard local changes"),
            ArgumentDescriptor("remote", short="r", default="origin", named=True),
        ], description="switch branches"),
        MethodDescriptor("Add", "samples.git.Remote", [
            ArgumentDescriptor("remoteName", named=True),
        ], [CommandPathItem("remote", "manage remotes")]),
        MethodDescriptor("List", "samples.git.Remote", [
            ArgumentDescriptor("verbose", "bool", boolean=True, short="v"),
        ], ["remote"], name=""),
        MethodDescriptor("Pop", "samples.git.Stash", [
            ArgumentDescriptor("index", "int", default="0"),
        ], ["stash"]),
        MethodDescriptor("Merge", "samples.git.Actions", [
            ArgumentDescriptor("strategy", choices=["ours", "theirs"]),
        ]),
    ])


def export(renderable):
    console = Console(file=io.StringIO(), record=True, width=200, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestUsage(TestCase):
    """Plain usage lines."""

    def setUp(self):
        self.tree = tree()

    def testCommandWithEveryKind(self):
        self.assertEqual(
            usage(self.tree, ["checkout"], "git"),
            "git checkout <branchName> [-r | --remote <remote>] [-f | --force]",
        )

    def testOptionWithoutShortForm(self):
        self.assertEqual(usage(self.tree, ["remote", "add"], "git"), "git remote add [--remoteName <remoteName>]")

    def testDualRoleNode(self):
        self.assertEqual(usage(self.tree, ["remote"], "git"), "git remote [-v | --verbose] [<command>]")

    def testGroupWithoutHandler(self):
        self.assertEqual(usage(self.tree, ["stash"], "git"), "git stash <command>")

    def testOptionalPositional(self):
        self.assertEqual(usage(self.tree, ["stash", "pop"], "git"), "git stash pop [<index>]")

    def testEnumeratedType(self):
        self.assertEqual(usage(self.tree, ["merge"], "git"), "git merge <ours|theirs>")

    def testSignature(self):
        self.assertEqual(signature(self.tree[["checkout"]]), (
            "<branchName>", "[-r | --remote <remote>]", "[-f | --force]",
        ))

    def testRejectsNonTrees(self):
        with self.assertRaises(TypeError):
            usage({}, [], "git")


class TestRender(TestCase):
    """Full help screens."""

    def setUp(self):
        self.tree = tree()

    def testCommandHelp(self):
        output = export(render(self.tree, ["checkout"], "git", colorful=False, width=200))
        self.assertIn("git checkout", output)
        self.assertIn("switch branches", output)
        self.assertIn("usage: git checkout <branchName> [-r | --remote <remote>] [-f | --force]", output)
        self.assertIn("parameters:", output)
        self.assertIn("branch to switch to", output)
        self.assertIn("options:", output)
        self.assertIn("-r | --remote=<remote>", output)
        self.assertIn("-f | --force", output)
        self.assertIn("discard local changes", output)

    def testOptionsEndWithHelp(self):
        output = export(render(self.tree, ["checkout"], "git", colorful=False, width=200))
        self.assertLess(output.index("-f | --force"), output.index("-h | --help"))
        self.assertNotIn("commands", output)

    def testRootListsCommands(self):
        output = export(render(self.tree, [], "git", colorful=False, width=200))
        self.assertIn("commands", output)
        for name in ("checkout", "remote", "stash", "merge"):
            self.assertIn(name, output)
        self.assertIn("manage remotes", output)
        self.assertIn("no description, run 'git stash --help' for details", output)

    def testGroupListsSubcommands(self):
        output = export(render(self.tree, ["remote"], "git", colorful=False, width=200))
        self.assertIn("subcommands", output)
        self.assertIn("[--remoteName <remoteName>]", output)

    def testFancyWrapsInAPanel(self):
        output = export(render(self.tree, ["checkout"], "git", colorful=False, fancy=True, width=200))
        self.assertIn("GIT HELP", output)

    def testUnknownPathRaises(self):
        with self.assertRaises(KeyError):
            render(self.tree, ["push"], "git")

    def testHelperPrintsToTheGivenConsole(self):
        console = Console(file=io.StringIO(), width=200, color_system=None)
        helper(self.tree, ["stash", "pop"], "git", console=console, colorful=False)
        self.assertIn("usage: git stash pop [<index>]", console.file.getvalue())


if __name__ == "__main__":
    unittest.main()
