"""
Help collection and rendering tests.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured on a colorless rich Console.
"""

import unittest
from unittest import TestCase

from rich.console import Console

from helmsman.helper import HelpEntry, HelpRenderer, collect, NO_DESCRIPTION
from helmsman.nodes import Switch, tree


def run_some_function(context):
    pass


def documented(context):
    """does documented things"""


COMMANDS = {
    "options": [{"option": {"short": "v", "long": "verbose"}, "help": "print more"}],
    "test": {
        "execute": run_some_function,
        "help": "help of test",
        "testing": {"execute": run_some_function, "help": "testing help"},
    },
    "deep": {"nesting": {"works": {"as": {"command": {"execute": run_some_function, "help": "help of command"}}}}},
    "runSomeFunction": run_some_function,
    "documented": documented,
    "create": {
        "execute": run_some_function,
        "help": "create a new project",
        "input": "<name>",
        "options": [{"option": {"short": "f", "long": "force"}, "help": "overwrite"}],
    },
}


def render(entries, **options):
    console = Console(color_system=None, force_terminal=False, width=120)
    with console.capture() as capture:
        HelpRenderer(**options).print(entries, console)
    return capture.get()


class TestCollect(TestCase):

    def testEntriesInTreeOrder(self):
        entries = collect(tree(COMMANDS))
        self.assertEqual([entry.command for entry in entries], [
            None,
            "test",
            "test testing",
            "deep nesting works as command",
            "run-some-function",
            "documented",
            "create",
        ])

    def testGlobalOptionsEntry(self):
        entry = collect(tree(COMMANDS))[0]
        self.assertEqual(entry, HelpEntry(None, None, (Switch("v", "verbose", descr="print more"),)))

    def testActionDescriptions(self):
        entries = {entry.command: entry for entry in collect(tree(COMMANDS))}
        self.assertEqual(entries["run-some-function"].description, NO_DESCRIPTION)
        self.assertEqual(entries["documented"].description, "does documented things")

    def testStructuralGroupsContributeNothing(self):
        commands = [entry.command for entry in collect(tree(COMMANDS))]
        self.assertNotIn("deep", commands)
        self.assertNotIn("deep nesting", commands)

    def testGroupLineFollowsItsHelpKey(self):
        root = tree({
            "test": {
                "testing": {"execute": run_some_function, "help": "testing help"},
                "help": "help of test",
                "other": documented,
            },
        })
        self.assertEqual([entry.command for entry in collect(root)], ["test testing", "test", "test other"])

    def testSubtreeUsesPathPrefix(self):
        root = tree(COMMANDS)
        entries = collect(root.get("test"), ("test",))
        self.assertEqual([entry.command for entry in entries], ["test", "test testing"])

    def testEveryDescribedNodeAppears(self):
        commands = {entry.command for entry in collect(tree(COMMANDS))}
        for expected in ("test", "test testing", "deep nesting works as command", "create"):
            with self.subTest(command=expected):
                self.assertIn(expected, commands)


class TestHelpRenderer(TestCase):

    def testColumnsAreAlignedToTab(self):
        output = render(collect(tree(COMMANDS)), tab=40)
        for line in output.splitlines():
            if line.startswith("test testing"):
                self.assertEqual(line.index("testing help"), 40)
                break
        else:
            self.fail("missing 'test testing' line")

    def testInputAndOptionsAreRendered(self):
        output = render(collect(tree(COMMANDS)))
        self.assertIn("create <name>", output)
        self.assertIn("   -f, --force", output)
        self.assertIn("overwrite", output)

    def testGlobalOptionsBlock(self):
        lines = render(collect(tree(COMMANDS))).splitlines()
        self.assertEqual(lines[0], "options:")
        self.assertTrue(lines[1].startswith("  -v, --verbose"))

    def testHeaderAndFooter(self):
        lines = render(collect(tree(COMMANDS)), header="HEADER", footer="FOOTER").splitlines()
        self.assertEqual(lines[0], "HEADER")
        self.assertEqual(lines[-1], "FOOTER")

    def testRenderingIsRepeatable(self):
        entries = collect(tree(COMMANDS))
        renderer = HelpRenderer()
        self.assertEqual(
            [line.plain for line in renderer.lines(entries)],
            [line.plain for line in renderer.lines(entries)],
        )

    def testColorlessLinesCarryNoStyle(self):
        lines = HelpRenderer(colorful=False).lines(collect(tree(COMMANDS)))
        self.assertTrue(all(not span.style for line in lines for span in line.spans))

    def testInvalidTab(self):
        with self.assertRaises(TypeError):
            HelpRenderer(tab=0)


if __name__ == "__main__":
    unittest.main()
