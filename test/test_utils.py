"""
Unset marker tests.

Conventions
- Test method names follow CamelCase per project convention.
"""

import copy
import pickle
import unittest
from unittest import TestCase

from helmsman.utils import Unset, UnsetType, coalesce


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy({"value": Unset})["value"], Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFalsyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnionChecks(self):
        self.assertIsInstance(Unset, str | UnsetType)
        self.assertIsInstance("name", str | UnsetType)
        self.assertNotIsInstance(None, str | UnsetType)

    def testCoalesceOnlyReplacesUnset(self):
        self.assertEqual(coalesce(Unset, ">"), ">")
        self.assertIsNone(coalesce(Unset))
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, ">"), value)


if __name__ == "__main__":
    unittest.main()
