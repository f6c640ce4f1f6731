# python
"""
Processor module behavioral tests.

Scope
- Token matching (long/short forms, attached and spaced values, "--").
- Typed coercion faults (uncastable, out of range, missing value, switch
  given a value) and duplicate detection.
- Presence handling (required options, defaults).
- Validate-before-assign ordering and the all-or-nothing guarantee.
- Remaining arguments ordering.
- Built-in help/version options, terminate signals and the run() driver.
- Deprecated section warnings.

Conventions
- Test method names follow CamelCase per project convention.
- Stores are built with builtins=False unless the test is about builtins.
- Assign callbacks record into a dict destination.
"""

from __future__ import annotations

import contextlib
import io
import unittest
import warnings
from unittest import TestCase

from easyopts import Kind, Requiredness, State, Store, Terminate, Visibility
from easyopts import (
    DeprecatedOptionWarning,
    DuplicatedOptionError,
    FaultCode,
    MissingRequiredError,
    MissingValueError,
    OutOfRangeValueError,
    RejectedValueError,
    SwitchAssignmentError,
    UncastableValueError,
)


def recorder(name):
    def assign(value, destination, /):
        destination[name] = value
    return assign


class Fixture(TestCase):
    """Store with a representative set of options."""

    def setUp(self):
        self.store = Store(["prog"], "Test program", builtins=False)
        main = self.store.add_section("Main", "Main options", Visibility.PUBLIC)
        main.add_option("f", "foo", Kind.STRING, Requiredness.OPTIONAL, None, recorder("foo"), "Foo")
        main.add_option("c", "count", Kind.SIGNED_INT, Requiredness.OPTIONAL, None, recorder("count"), "Count")
        main.add_option("q", "quiet", Kind.STRING, Requiredness.NONE, None, recorder("quiet"), "Quiet")
        main.add_option(None, "ratio", Kind.FLOAT, Requiredness.OPTIONAL, None, recorder("ratio"), "Ratio")
        self.destination = {}

    def process(self, argv):
        return self.store.process(argv, self.destination)


class TestMatching(Fixture):

    def testLongAttachedValue(self):
        outcome = self.process(["--foo=bar"])
        self.assertEqual(self.destination, {"foo": "bar"})
        self.assertEqual(list(outcome.remaining), [])
        self.assertIsNone(outcome.exitcode)

    def testLongSpacedValue(self):
        self.process(["--count", "5"])
        self.assertEqual(self.destination, {"count": 5})

    def testShortForms(self):
        self.process(["-c", "5", "-fbar"])
        self.assertEqual(self.destination, {"count": 5, "foo": "bar"})

    def testEmptyAttachedValue(self):
        self.process(["--foo="])
        self.assertEqual(self.destination, {"foo": ""})

    def testSwitchCarriesTrue(self):
        self.process(["-q"])
        self.assertIs(self.destination["quiet"], True)

    def testSpacedValueMayLookLikeAnOption(self):
        self.process(["--foo", "--count=1"])
        self.assertEqual(self.destination, {"foo": "--count=1"})

    def testRemainderKeepsOrder(self):
        outcome = self.process(["--foo=bar", "extra1", "--unknown=1", "extra2"])
        self.assertEqual(self.destination, {"foo": "bar"})
        self.assertEqual(list(outcome.remaining), ["extra1", "--unknown=1", "extra2"])
        self.assertEqual(outcome.remaining.count, 3)

    def testLoneDashIsRemainder(self):
        outcome = self.process(["-", "-x"])
        self.assertEqual(list(outcome.remaining), ["-", "-x"])

    def testDoubleDashEndsScanning(self):
        outcome = self.process(["--count=1", "--", "--count=5", "x"])
        self.assertEqual(self.destination, {"count": 1})
        self.assertEqual(list(outcome.remaining), ["--count=5", "x"])

    def testStringArgvIsSplit(self):
        outcome = self.process("--foo='a b' 'c d'")
        self.assertEqual(self.destination, {"foo": "a b"})
        self.assertEqual(list(outcome.remaining), ["c d"])

    def testDefaultArgvSkipsProgramName(self):
        store = Store(["prog", "--foo=bar", "x"], "Program", builtins=False)
        section = store.add_section("Main", "Main options", Visibility.PUBLIC)
        section.add_option(None, "foo", Kind.STRING, Requiredness.OPTIONAL, None, recorder("foo"), "Foo")
        destination = {}
        outcome = store.process(destination=destination)
        self.assertEqual(destination, {"foo": "bar"})
        self.assertEqual(list(outcome.remaining), ["x"])

    def testArgvMustHoldStrings(self):
        with self.assertRaises(TypeError):
            self.process(42)
        with self.assertRaises(TypeError):
            self.process(["--foo", 1])

    def testStoreIsProcessed(self):
        self.process([])
        self.assertIs(self.store.state, State.PROCESSED)


class TestValueFaults(Fixture):

    def testUncastableValue(self):
        with self.assertRaises(UncastableValueError) as context:
            self.process(["--count=12x"])
        self.assertNotIsInstance(context.exception, OutOfRangeValueError)
        self.assertIs(context.exception.options["code"], FaultCode.UNCASTABLE_VALUE)
        self.assertEqual(context.exception.options["input"], "--count")
        self.assertEqual(context.exception.options["index"], 1)
        self.assertIsInstance(context.exception.__cause__, ValueError)
        self.assertEqual(self.destination, {})

    def testOutOfRangeValue(self):
        with self.assertRaises(OutOfRangeValueError) as context:
            self.process(["--count=99999999999999"])
        self.assertIsInstance(context.exception, UncastableValueError)
        self.assertIs(context.exception.options["code"], FaultCode.OUT_OF_RANGE_VALUE)

    def testVeryLongLiteralIsOutOfRange(self):
        with self.assertRaises(OutOfRangeValueError) as context:
            self.process(["--count=" + "9" * 5000])
        self.assertIs(context.exception.options["code"], FaultCode.OUT_OF_RANGE_VALUE)

    def testFloatOutOfRange(self):
        with self.assertRaises(OutOfRangeValueError):
            self.process(["--ratio=1e39"])

    def testMissingValue(self):
        with self.assertRaises(MissingValueError):
            self.process(["--foo=x", "--count"])
        self.assertEqual(self.destination, {})

    def testSwitchAssignment(self):
        with self.assertRaises(SwitchAssignmentError):
            self.process(["--quiet=yes"])
        with self.assertRaises(SwitchAssignmentError):
            self.process(["-qyes"])

    def testDuplicatedOption(self):
        with self.assertRaises(DuplicatedOptionError) as context:
            self.process(["-c", "1", "--count=2"])
        self.assertEqual(context.exception.options["index"], 3)
        self.assertEqual(self.destination, {})


class TestPresence(TestCase):

    def setUp(self):
        self.store = Store(["prog"], "Test program", builtins=False)
        self.section = self.store.add_section("Main", "Main options", Visibility.PUBLIC)
        self.destination = {}

    def testMissingRequired(self):
        self.section.add_option(None, "foo", Kind.STRING, Requiredness.OPTIONAL, None, recorder("foo"), "Foo")
        self.section.add_option(None, "need", Kind.STRING, Requiredness.REQUIRED, None, recorder("need"), "Need")
        with self.assertRaises(MissingRequiredError) as context:
            self.store.process(["--foo=x"], self.destination)
        self.assertEqual(context.exception.options["input"], "--need")
        self.assertEqual(self.destination, {})

    def testDefaultSuppliesAbsentOption(self):
        self.section.add_option(None, "level", Kind.SIGNED_INT, Requiredness.OPTIONAL, None,
                                recorder("level"), "Level", default="7")
        self.section.add_option(None, "need", Kind.STRING, Requiredness.REQUIRED, None,
                                recorder("need"), "Need", default="fallback")
        self.store.process([], self.destination)
        self.assertEqual(self.destination, {"level": 7, "need": "fallback"})

    def testGivenValueOverridesDefault(self):
        self.section.add_option(None, "level", Kind.SIGNED_INT, Requiredness.OPTIONAL, None,
                                recorder("level"), "Level", default=7)
        self.store.process(["--level=2"], self.destination)
        self.assertEqual(self.destination, {"level": 2})

    def testAbsentOptionalIsNotAssigned(self):
        self.section.add_option(None, "level", Kind.SIGNED_INT, Requiredness.OPTIONAL, None,
                                recorder("level"), "Level")
        self.store.process([], self.destination)
        self.assertEqual(self.destination, {})


class TestValidation(TestCase):

    def setUp(self):
        self.store = Store(["prog"], "Test program", builtins=False)
        self.section = self.store.add_section("Main", "Main options", Visibility.PUBLIC)
        self.events = []

    def option(self, long, validate, kind=Kind.STRING):
        def assign(value, destination, /):
            self.events.append(("assign", long, value))

        def check(value, /):
            self.events.append(("validate", long, value))
            return validate(value)

        self.section.add_option(None, long, kind, Requiredness.OPTIONAL, check, assign, long.upper())

    def testAllValidationsBeforeAnyAssignment(self):
        self.option("a", lambda value: True)
        self.option("b", lambda value: True)
        self.store.process(["--b=2", "--a=1"])
        self.assertEqual(self.events, [
            ("validate", "a", "1"),
            ("validate", "b", "2"),
            ("assign", "a", "1"),
            ("assign", "b", "2"),
        ])

    def testLaterValidatorSeesEarlierValidatorState(self):
        recorded = {}

        def check_a(value, /):
            self.events.append(("validate", "a", value))
            recorded["a"] = value
            return True

        def check_b(value, /):
            self.events.append(("validate", "b", value, recorded.get("a")))
            return recorded.get("a") == 1 and value > recorded["a"]

        def assign(name):
            def assign(value, destination, /):
                self.events.append(("assign", name, value))
            return assign

        self.section.add_option(None, "a", Kind.SIGNED_INT, Requiredness.REQUIRED, check_a, assign("a"), "A")
        self.section.add_option(None, "b", Kind.SIGNED_INT, Requiredness.REQUIRED, check_b, assign("b"), "B")
        self.store.process(["--a=1", "--b=2"])
        self.assertEqual(self.events, [
            ("validate", "a", 1),
            ("validate", "b", 2, 1),
            ("assign", "a", 1),
            ("assign", "b", 2),
        ])

    def testRejectionPreventsEveryAssignment(self):
        self.option("a", lambda value: True)
        self.option("b", lambda value: False)
        with self.assertRaises(RejectedValueError) as context:
            self.store.process(["--a=1", "--b=2"])
        self.assertEqual(self.events, [("validate", "a", "1"), ("validate", "b", "2")])
        self.assertIs(context.exception.options["code"], FaultCode.REJECTED_VALUE)
        self.assertEqual(context.exception.options["value"], "2")

    def testValidatorReceivesTypedValue(self):
        self.option("n", lambda value: isinstance(value, int) and value > 0, kind=Kind.UNSIGNED_SHORT)
        self.store.process(["--n=3"])
        self.assertIn(("validate", "n", 3), self.events)
        self.assertIn(("assign", "n", 3), self.events)

    def testValidatorRejectsTypedValue(self):
        self.option("n", lambda value: value > 0, kind=Kind.SIGNED_SHORT)
        with self.assertRaises(RejectedValueError):
            self.store.process(["--n=-3"])
        self.assertEqual(self.events, [("validate", "n", -3)])

    def testRaisingValidatorIsChained(self):
        def explode(value):
            raise ValueError("bad value")

        self.option("a", explode)
        with self.assertRaises(RejectedValueError) as context:
            self.store.process(["--a=1"])
        self.assertIsInstance(context.exception.__cause__, ValueError)
        self.assertEqual([event[0] for event in self.events], ["validate"])


class TestTerminate(TestCase):

    def testAssignMayTerminate(self):
        store = Store(["prog"], "Test program", builtins=False)
        section = store.add_section("Main", "Main options", Visibility.PUBLIC)
        seen = []
        section.add_option(None, "stop", Kind.STRING, Requiredness.NONE, None,
                           lambda value, destination: Terminate(4), "Stop")
        section.add_option(None, "after", Kind.STRING, Requiredness.OPTIONAL, None,
                           lambda value, destination: seen.append(value), "After")
        outcome = store.process(["--stop", "--after=x"])
        self.assertEqual(outcome.exitcode, 4)
        self.assertEqual(seen, [])


class TestBuiltins(TestCase):

    def setUp(self):
        self.store = Store(["prog"], "Test program")
        section = self.store.add_section("Main", "Main options", Visibility.PUBLIC)
        section.add_option(None, "need", Kind.STRING, Requiredness.REQUIRED, None, recorder("need"), "Need")
        secret = self.store.add_section("Secret", "Secret options", Visibility.HIDDEN)
        secret.add_option(None, "debug", Kind.STRING, Requiredness.OPTIONAL, None, recorder("debug"), "Debug")
        self.destination = {}

    def testHelpTerminatesWithoutRequiredCheck(self):
        with contextlib.redirect_stdout(io.StringIO()) as stdout:
            outcome = self.store.process(["--help", "--need=x"], self.destination)
        self.assertEqual(outcome.exitcode, 0)
        self.assertEqual(list(outcome.remaining), ["--need=x"])
        self.assertEqual(self.destination, {})
        self.assertIn("Usage: prog", stdout.getvalue())
        self.assertNotIn("Secret", stdout.getvalue())

    def testHelpHiddenShowsHiddenSections(self):
        with contextlib.redirect_stdout(io.StringIO()) as stdout:
            outcome = self.store.process(["--help-hidden"], self.destination)
        self.assertEqual(outcome.exitcode, 0)
        self.assertIn("[Secret: Options are hidden]", stdout.getvalue())

    def testHelpJson(self):
        with contextlib.redirect_stdout(io.StringIO()) as stdout:
            outcome = self.store.process(["--help-json"], self.destination)
        self.assertEqual(outcome.exitcode, 0)
        self.assertIn('"program": "prog"', stdout.getvalue())

    def testVersionContinues(self):
        with contextlib.redirect_stdout(io.StringIO()) as stdout:
            outcome = self.store.process(["-v", "--need=x"], self.destination)
        self.assertIsNone(outcome.exitcode)
        self.assertEqual(self.destination, {"need": "x"})
        self.assertIn("Easyopts Version", stdout.getvalue())


class TestDeprecated(TestCase):

    def testDeprecatedOptionWarns(self):
        store = Store(["prog"], "Test program", builtins=False)
        old = store.add_section("Old", "Old options", Visibility.DEPRECATED)
        old.add_option(None, "legacy", Kind.SIGNED_INT, Requiredness.OPTIONAL, None, recorder("legacy"), "Legacy")
        destination = {}
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            store.process(["--legacy=1"], destination)
        self.assertEqual(destination, {"legacy": 1})
        self.assertEqual(len(caught), 1)
        self.assertIs(caught[0].category, DeprecatedOptionWarning)
        self.assertIs(caught[0].message.options["code"], FaultCode.DEPRECATED_OPTION)


class TestRun(Fixture):

    def testReturnsRemaining(self):
        remaining = self.store.run(["--foo=bar", "x"], self.destination)
        self.assertEqual(list(remaining), ["x"])
        self.assertEqual(self.destination, {"foo": "bar"})

    def testFaultExitsWithOne(self):
        with contextlib.redirect_stderr(io.StringIO()) as stderr:
            with self.assertRaises(SystemExit) as context:
                self.store.run(["--count=abc"], self.destination)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("--count", stderr.getvalue())
        self.assertEqual(self.destination, {})

    def testHelpExitsWithZero(self):
        store = Store(["prog"], "Test program")
        with contextlib.redirect_stdout(io.StringIO()) as stdout:
            with self.assertRaises(SystemExit) as context:
                store.run(["-h"])
        self.assertEqual(context.exception.code, 0)
        self.assertIn("Usage: prog", stdout.getvalue())

    def testWarningsRenderedOnStandardError(self):
        store = Store(["prog"], "Test program", builtins=False)
        old = store.add_section("Old", "Old options", Visibility.DEPRECATED)
        old.add_option(None, "legacy", Kind.STRING, Requiredness.OPTIONAL, None, recorder("legacy"), "Legacy")
        destination = {}
        with contextlib.redirect_stderr(io.StringIO()) as stderr:
            store.run(["--legacy=1"], destination)
        self.assertIn("deprecated", stderr.getvalue())
        self.assertEqual(destination, {"legacy": "1"})


if __name__ == "__main__":
    unittest.main()
