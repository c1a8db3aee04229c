"""
Faults module behavioral tests (codes, options, rich rendering).

Scope
- Validate fault options: defaults fixed by each subclass, overrides at
  construction, and read-only storage.
- Validate host overrides looked up on __main__ (__prog__, __codes__, __styles__).
- Validate the rich rendering of errors and warnings.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured with color disabled for deterministic comparison.
"""

from __future__ import annotations

import __main__
import unittest
from unittest import TestCase, mock

from rich.console import Console

from cmdargs.faults import (
    ArgumentException,
    ArgumentWarning,
    DuplicateNameWarning,
    FaultCode,
    InvalidValueError,
    MissingValueError,
    UnknownArgumentError,
)


def _capture(renderable):
    console = Console(color_system=None, force_terminal=False, width=120)
    with console.capture() as capture:
        console.print(renderable)
    return [line.rstrip() for line in capture.get().splitlines()]


class TestFaultOptions(TestCase):
    """Faults are a message plus a frozen mapping of options."""

    def testSubclassDefaults(self):
        fault = MissingValueError("no value")
        self.assertIs(fault.code, FaultCode.MISSING_VALUE)
        self.assertEqual(fault.title, "missing value")
        self.assertIsNone(fault.hint)
        self.assertIsNone(fault.argument)
        self.assertIsNone(fault.token)
        self.assertIsNone(fault.index)
        self.assertEqual(str(fault), "no value")

    def testOptionsOverrideDefaults(self):
        fault = InvalidValueError("bad", title="custom title", hint="try again", token="x", index=3)
        self.assertEqual(fault.title, "custom title")
        self.assertEqual(fault.hint, "try again")
        self.assertEqual(fault.token, "x")
        self.assertEqual(fault.index, 3)

    def testOptionsAreReadOnly(self):
        fault = MissingValueError("no value")
        with self.assertRaises(TypeError):
            fault.options["hint"] = "late"

    def testMessageMustBeString(self):
        with self.assertRaises(TypeError):
            MissingValueError(42)
        with self.assertRaises(TypeError):
            ArgumentWarning(None)

    def testTaxonomy(self):
        for fault in (MissingValueError, InvalidValueError, UnknownArgumentError):
            with self.subTest(fault=fault):
                self.assertTrue(issubclass(fault, ArgumentException))
        self.assertTrue(issubclass(DuplicateNameWarning, Warning))
        self.assertFalse(issubclass(DuplicateNameWarning, ArgumentException))

    def testSuggestionsAreTuple(self):
        self.assertEqual(UnknownArgumentError("?").suggestions, ())
        self.assertEqual(UnknownArgumentError("?", suggestions=["--val1"]).suggestions, ("--val1",))


class TestFaultCodes(TestCase):
    """Codes are stable and can be relabelled by the host."""

    def testCodesAreGrouped(self):
        self.assertEqual(FaultCode.NAMELESS_ARGUMENT, 11101)
        self.assertEqual(FaultCode.MISSING_VALUE, 11111)
        self.assertEqual(FaultCode.DUPLICATED_NAME, 12101)

    def testNormalizeDefaultsToNumber(self):
        with mock.patch.object(__main__, "__codes__", {}, create=True):
            self.assertEqual(FaultCode.INVALID_VALUE.normalize(), "11112")

    def testNormalizeUsesHostLabels(self):
        with mock.patch.object(__main__, "__codes__", {FaultCode.INVALID_VALUE: "E-VAL"}, create=True):
            self.assertEqual(FaultCode.INVALID_VALUE.normalize(), "E-VAL")
            self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "11111")


class TestRendering(TestCase):
    """Faults render as a header, the message, and an optional hint."""

    def setUp(self):
        patcher = mock.patch.object(__main__, "__prog__", "demo", create=True)
        patcher.start()
        self.addCleanup(patcher.stop)

    def testErrorLayout(self):
        lines = _capture(MissingValueError("argument '--val2' requires a value", hint="pass a value"))
        self.assertEqual(lines[0], "[ demo — 11111 | Missing Value ]")
        self.assertEqual(lines[1], "argument '--val2' requires a value")
        self.assertEqual(lines[2], " → pass a value")

    def testHintIsOptional(self):
        lines = _capture(InvalidValueError("bad value"))
        self.assertEqual(len(lines), 2)

    def testHostCodeLabelInHeader(self):
        with mock.patch.object(__main__, "__codes__", {FaultCode.UNKNOWN_ARGUMENT: "E-UNK"}, create=True):
            lines = _capture(UnknownArgumentError("unknown argument"))
        self.assertEqual(lines[0], "[ demo — E-UNK | Unknown Argument ]")

    def testBaseFaultHasNoCode(self):
        lines = _capture(ArgumentException("generic"))
        self.assertEqual(lines[0], "[ demo — - | Argument Error ]")

    def testWarningLayout(self):
        warning = DuplicateNameWarning("name '-v' now refers to '-v,--version'", name="-v")
        lines = _capture(warning)
        self.assertEqual(lines[0], "[ demo — 12101 | Duplicated Name ]")
        self.assertEqual(warning.name, "-v")
        self.assertIsNone(warning.previous)

    def testColorlessRenderingHasNoStyles(self):
        group = MissingValueError("plain", colorful=False).__rich__()
        for text in group.renderables:
            with self.subTest(text=text.plain):
                self.assertEqual(text.spans, [])
                self.assertEqual(str(text.style), "")


if __name__ == "__main__":
    unittest.main()
