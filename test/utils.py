"""
Utilities behavioral tests.

Scope
- Validate the Unset sentinel (singleton, falsy, sealed) and coalesce().
- Validate rename() in both forms and mirror() read-only properties.
- Validate ordinal() words and numeric suffixes.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from cmdargs.utils import Unset, UnsetType, coalesce, mirror, ordinal, rename


class TestUnset(TestCase):
    """Unset marks "no default was declared"."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyButDistinct(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertEqual(repr(Unset), "Unset")

    def testSealed(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testCoalesceOnlyReplacesUnset(self):
        self.assertEqual(coalesce(Unset, 3.14), 3.14)
        self.assertIsNone(coalesce(Unset))
        for value in (0, False, "", None):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, 10), value)


class TestRename(TestCase):
    """rename() sets stable names on callables."""

    def testFunctionForm(self):
        def handler():
            pass
        self.assertIs(rename(handler, "parse_flag"), handler)
        self.assertEqual(handler.__name__, "parse_flag")
        self.assertEqual(handler.__qualname__, "parse_flag")

    def testDecoratorForm(self):
        @rename("helpstring")
        def handler():
            pass
        self.assertEqual(handler.__name__, "helpstring")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename("not callable", "name")
        with self.assertRaises(TypeError):
            rename(len, 42)
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):
    """mirror() publishes a private field as a read-only property."""

    def setUp(self):
        class Holder:
            value = mirror("value")
            names = mirror("names")

            def __init__(self):
                self._value = 3
                self._names = ["-v", "--val1"]

        self.holder = Holder()

    def testReadsBackingField(self):
        self.assertEqual(self.holder.value, 3)

    def testContainersAreCopied(self):
        self.assertEqual(self.holder.names, ("-v", "--val1"))

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.holder.value = 4


class TestOrdinal(TestCase):
    """ordinal() words positions for messages."""

    def testWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(2), "second")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self):
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(103), "103rd")
        self.assertEqual(ordinal(113), "113th")

    def testRejectsBadInput(self):
        with self.assertRaises(TypeError):
            ordinal(True)
        with self.assertRaises(ValueError):
            ordinal(-1)


if __name__ == "__main__":
    unittest.main()
