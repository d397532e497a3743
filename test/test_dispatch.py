"""
Dispatcher behavioral tests (routing, pass-through, help triggers, faults).

Scope
- Exactly one action runs per dispatch, or a dispatch fault is raised.
- Unknown tokens flow to the nearest fallback unchanged.
- Description-only children hand their display name to the parent fallback.
- Help requests are routed to the configured helper with the node reached so far.

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from unittest import IsolatedAsyncioTestCase, TestCase

from helmsman.dispatch import Context, Dispatcher, tokenize
from helmsman.faults import CommandInvalidError, NeedsMoreArgumentsError, ParameterInvalidError
from helmsman.nodes import tree


class Recorder:
    """Collects (name, argument, options) for every call it receives."""

    def __init__(self):
        self.calls = []

    def __call__(self, name):
        def action(context):
            self.calls.append((name, context.argument, dict(context.options)))
        return action


def commands(record):
    return {
        "test": {
            "execute": record("test"),
            "help": "help of test",
            "testing": {"execute": record("testing"), "help": "testing help"},
        },
        "test2": {"execute": record("test2"), "help": "help of test2"},
        "wallet": {
            "execute": record("wallet"),
            "knownCommand": {"help": "a known command"},
        },
        "structural": {"leaf": record("leaf")},
        "create": {"execute": record("create"), "help": "create a new project", "input": "<name>"},
        "deep": {"nesting": {"works": {"as": {"command": {"execute": record("command"), "help": "help of command"}}}}},
        "runSomeFunction": record("runSomeFunction"),
        "testingASmallerArgument": record("smaller"),
    }


class TestTokenize(TestCase):

    def testStringsAreSplit(self):
        self.assertEqual(tokenize("  test   testing "), ["test", "testing"])

    def testSingleSpacedElementIsSplit(self):
        self.assertEqual(tokenize(["test testing"]), ["test", "testing"])

    def testSequencesAreKept(self):
        self.assertEqual(tokenize(("test", "", "testing")), ["test", "testing"])

    def testInvalidTokens(self):
        with self.assertRaises(TypeError):
            tokenize(42)
        with self.assertRaises(TypeError):
            tokenize(["test", 42])


class TestDispatch(IsolatedAsyncioTestCase):

    def setUp(self):
        self.record = Recorder()
        self.helped = []
        self.dispatcher = Dispatcher(tree(commands(self.record)), helper=self.help)

    def help(self, node, path):
        self.helped.append((node, path))

    async def testGroupExecutesWithoutArgument(self):
        await self.dispatcher.resolve(["test"])
        self.assertEqual(self.record.calls, [("test", None, {})])

    async def testChildExecutes(self):
        await self.dispatcher.resolve(["test", "testing"])
        self.assertEqual(self.record.calls, [("testing", None, {})])

    async def testUnknownTokenPassesThroughUnchanged(self):
        await self.dispatcher.resolve(["create", "My-Project-42"])
        self.assertEqual(self.record.calls, [("create", "My-Project-42", {})])

    async def testDescribedChildPassesItsDisplayName(self):
        await self.dispatcher.resolve(["wallet", "known-command"])
        self.assertEqual(self.record.calls, [("wallet", "known-command", {})])

    async def testDeepNesting(self):
        await self.dispatcher.resolve("deep nesting works as command")
        self.assertEqual(self.record.calls, [("command", None, {})])

    async def testHyphenatedActionNames(self):
        await self.dispatcher.resolve(["run-some-function"])
        await self.dispatcher.resolve(["testing-a-smaller-argument"])
        self.assertEqual([call[0] for call in self.record.calls], ["runSomeFunction", "smaller"])

    async def testIncompletePathNeedsMoreArguments(self):
        with self.assertRaises(NeedsMoreArgumentsError):
            await self.dispatcher.resolve(["deep", "nesting"])
        with self.assertRaises(NeedsMoreArgumentsError):
            await self.dispatcher.resolve(["structural"])
        self.assertEqual(self.record.calls, [])

    async def testActionFollowedByArgumentNeedsMoreArguments(self):
        with self.assertRaises(NeedsMoreArgumentsError):
            await self.dispatcher.resolve(["run-some-function", "extra"])
        self.assertEqual(self.record.calls, [])

    async def testStructuralGroupWithUnknownChild(self):
        with self.assertRaises(NeedsMoreArgumentsError):
            await self.dispatcher.resolve(["structural", "missing"])

    async def testUnknownRootCommandIsInvalid(self):
        with self.assertRaises(CommandInvalidError) as context:
            await self.dispatcher.resolve(["unknown"])
        self.assertEqual(context.exception.options["token"], "unknown")

    async def testBoundDispatcherRejectsParameters(self):
        dispatcher = Dispatcher(tree(commands(self.record)), bound=True, helper=self.help)
        with self.assertRaises(ParameterInvalidError):
            await dispatcher.resolve(["unknown"])

    async def testEmptyTokensNeedMoreArguments(self):
        with self.assertRaises(NeedsMoreArgumentsError):
            await self.dispatcher.resolve([])

    async def testOptionsPropagateToTheAction(self):
        await self.dispatcher.resolve(["create", "app", "--force"], {"force": True})
        self.assertEqual(self.record.calls, [("create", "app", {"force": True})])

    async def testFlagTokensAreNeverMatchedAsChildren(self):
        await self.dispatcher.resolve(["test", "--testing"], {"testing": True})
        self.assertEqual(self.record.calls, [("test", "--testing", {"testing": True})])

    async def testFlagTokenReachesFallbackUnchanged(self):
        await self.dispatcher.resolve(["create", "--force"], {"force": True})
        await self.dispatcher.resolve(["create", "-f"], {"f": True})
        self.assertEqual(self.record.calls, [
            ("create", "--force", {"force": True}),
            ("create", "-f", {"f": True}),
        ])

    async def testOptionsAreReadOnly(self):
        seen = []
        dispatcher = Dispatcher(tree({"test": seen.append}), helper=self.help)
        await dispatcher.resolve(["test"], {"x": 1})
        context, = seen
        self.assertIsInstance(context, Context)
        with self.assertRaises(TypeError):
            context.options["x"] = 2

    async def testAsyncActionsAreAwaited(self):
        seen = []

        async def action(context):
            seen.append(context.argument)

        dispatcher = Dispatcher(tree({"run": {"execute": action}}), helper=self.help)
        await dispatcher.resolve(["run", "now"])
        self.assertEqual(seen, ["now"])

    async def testSessionIsForwarded(self):
        seen = []
        dispatcher = Dispatcher(tree({"run": seen.append}), helper=self.help)
        await dispatcher.resolve(["run"], session="session")
        self.assertEqual(seen[0].session, "session")


class TestHelpTriggers(IsolatedAsyncioTestCase):

    def setUp(self):
        self.record = Recorder()
        self.helped = []
        self.root = tree(commands(self.record))

    def help(self, node, path):
        self.helped.append((node, path))

    def dispatcher(self, **options):
        return Dispatcher(self.root, helper=self.help, **options)

    async def testTrailingHelpShowsSubtree(self):
        await self.dispatcher().resolve(["test", "help"])
        self.assertEqual(self.helped, [(self.root.get("test"), ("test",))])
        self.assertEqual(self.record.calls, [])

    async def testBareHelpShowsRoot(self):
        await self.dispatcher().resolve(["help"])
        self.assertEqual(self.helped, [(self.root, ())])

    async def testHelpFlagShowsSubtree(self):
        await self.dispatcher().resolve(["deep", "nesting", "--help"], {"help": True})
        self.assertEqual(self.helped, [(self.root.get("deep").get("nesting"), ("deep", "nesting"))])

    async def testShortHelpOnlyWhileInteractive(self):
        await self.dispatcher(interactive=True).resolve(["test", "h"])
        self.assertEqual(len(self.helped), 1)
        await self.dispatcher().resolve(["test", "h"])
        self.assertEqual(self.record.calls, [("test", "h", {})])

    async def testHelpInOptionsWithoutPositionalsLeft(self):
        await self.dispatcher().resolve(["test"], {"h": True})
        self.assertEqual(self.helped, [(self.root.get("test"), ("test",))])

    async def testHelpInOptionsIgnoredWhileInteractive(self):
        await self.dispatcher(interactive=True).resolve(["test"], {"help": True})
        self.assertEqual(self.helped, [])
        self.assertEqual(self.record.calls, [("test", None, {"help": True})])

    async def testAsyncHelperIsAwaited(self):
        helped = []

        async def helper(node, path):
            helped.append(path)

        await Dispatcher(self.root, helper=helper).resolve(["test", "testing", "help"])
        self.assertEqual(helped, [("test", "testing")])


if __name__ == "__main__":
    unittest.main()
