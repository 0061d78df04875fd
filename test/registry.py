"""
Registry module behavioral tests (alias lookup, collisions, ordering).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import os
import unittest
import warnings
from unittest import TestCase, mock

from rich.console import Console

from argbind import Argument, Arguments, Arity, Registry, DuplicateAliasWarning


class TestRegistry(TestCase):
    """Behavioral tests for Registry lookups."""

    def setUp(self):
        self.verbose = Argument("-v", "--verbose")
        self.output = Argument("-o", "--output", arity=Arity.SINGLE)
        self.registry = Registry([self.verbose, self.output])

    def testLookupEveryAlias(self):
        self.assertIs(self.registry.lookup("-v"), self.verbose)
        self.assertIs(self.registry.lookup("--verbose"), self.verbose)
        self.assertIs(self.registry.lookup("-o"), self.output)
        self.assertIs(self.registry.lookup("--output"), self.output)

    def testLookupUnknownIsNone(self):
        self.assertIsNone(self.registry.lookup("-x"))

    def testContains(self):
        self.assertIn("--output", self.registry)
        self.assertNotIn("output", self.registry)

    def testGetItem(self):
        self.assertIs(self.registry["-v"], self.verbose)
        with self.assertRaises(KeyError):
            self.registry["-x"]

    def testLenAndIterCountAliases(self):
        self.assertEqual(len(self.registry), 4)
        self.assertEqual(list(self.registry), ["-v", "--verbose", "-o", "--output"])

    def testArgumentsInDeclarationOrder(self):
        self.assertEqual(self.registry.arguments, (self.verbose, self.output))

    def testAliasesViewIsReadOnly(self):
        with self.assertRaises(TypeError):
            self.registry.aliases["-x"] = self.verbose

    def testBuild(self):
        registry = Registry.build([self.verbose])
        self.assertIs(registry.lookup("-v"), self.verbose)

    def testEmptyRegistry(self):
        registry = Registry([])
        self.assertEqual(len(registry), 0)
        self.assertEqual(registry.arguments, ())

    def testNonArgumentRejected(self):
        with self.assertRaises(TypeError):
            Registry([self.verbose, "-o"])

    def testSingleArgumentRejected(self):
        with self.assertRaises(TypeError):
            Registry(self.verbose)

    def testSameArgumentTwiceDoesNotWarn(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            registry = Registry([self.verbose, self.verbose])
        self.assertEqual(registry.arguments, (self.verbose,))


class TestRegistryCollisions(TestCase):
    """Duplicate aliases: the later argument wins and a warning is emitted."""

    def testLastWriteWins(self):
        first = Argument("-x")
        second = Argument("-x", "--extra")
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            registry = Registry([first, second])
        self.assertIs(registry.lookup("-x"), second)
        self.assertEqual(len(caught), 1)
        warning = caught[0].message
        self.assertIsInstance(warning, DuplicateAliasWarning)
        self.assertEqual(warning.alias, "-x")
        self.assertIs(warning.shadowed, first)
        self.assertIs(warning.argument, second)

    def testFullyShadowedArgumentIsUnreachable(self):
        first = Argument("-x", mandatory=True)
        second = Argument("-x", "--extra")
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            registry = Registry([first, second])
        self.assertEqual(registry.arguments, (second,))

    def testPartiallyShadowedArgumentKeepsItsSlot(self):
        first = Argument("-a", "-x")
        second = Argument("-b", "-x")
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            registry = Registry([first, second])
        self.assertIs(registry.lookup("-a"), first)
        self.assertIs(registry.lookup("-x"), second)
        self.assertEqual(registry.arguments, (first, second))

    def testWarningPointsAtTheDeclaringCode(self):
        first, second = Argument("-x"), Argument("-x")
        for build in (Registry, Registry.build, lambda arguments: Arguments([], arguments)):
            with self.subTest(build=build):
                with warnings.catch_warnings(record=True) as caught:
                    warnings.simplefilter("always")
                    build([first, second])
                self.assertEqual(len(caught), 1)
                self.assertEqual(os.path.abspath(caught[0].filename), os.path.abspath(__file__))

    def testShellOptionsRenderWarnings(self):
        first, second = Argument("-x", "--ex"), Argument("-x")
        buffer = io.StringIO()
        with mock.patch("argbind.faults.console", Console(file=buffer, width=120, color_system=None)):
            with warnings.catch_warnings():
                warnings.simplefilter("error")
                registry = Registry([first, second], shell=True, colorful=False)
        self.assertIs(registry.lookup("-x"), second)
        self.assertIn("22101 | Duplicate Alias ]", buffer.getvalue())


if __name__ == "__main__":
    unittest.main()
