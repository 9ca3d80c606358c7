"""
ParseResult behavioral tests (lookups, completion, raising).

Scope
- Validate root lookups, has_option, applied_command and current.
- Validate text_to_match for progressive and complete input.
- Validate completion suggestions: child aliases, allowed values, suggestion
  sources, and the proximate option or command.
- Validate raise_for_errors and direct construction.

Conventions
- Test method names follow CamelCase per project convention.
- Suggestions are compared as sorted lists, exactly as suggestions() returns them.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from sextant import (
    AnyOneOf,
    Command,
    ExactlyOneArgument,
    NoArguments,
    Option,
    ParseExit,
    ParseResult,
    Parser,
    WithSuggestionsFrom,
)

MATERIALS = ("vegetable", "mineral", "animal")


class TestLookups(TestCase):
    """Behavioral tests for result lookups."""

    def setUp(self):
        self.parser = Parser(Command("tool", children=[
            Option("-v", "--verbose"),
            Command("run", children=[Option("--dry")]),
        ]))

    def testRootLookup(self):
        result = self.parser.parse("run --dry")
        self.assertEqual(result["tool"].name, "tool")
        self.assertIn("tool", result)
        with self.assertRaises(KeyError):
            result["run"]

    def testLookupByName(self):
        result = self.parser.parse("run --dry")
        self.assertIs(result["tool"]["run"]["dry"], result["tool"]["run"]["--dry"])
        self.assertTrue(result.has_option("dry"))
        self.assertIn("/tool", result)

    def testHasOptionLooksUnderAppliedCommand(self):
        result = self.parser.parse("run --dry")
        self.assertTrue(result.has_option("--dry"))
        self.assertFalse(result.has_option("--verbose"))

    def testAppliedCommandIsDeepest(self):
        self.assertEqual(self.parser.parse("run").applied_command().name, "run")
        self.assertEqual(self.parser.parse("-v").applied_command().name, "tool")

    def testCurrentIsLastLeaf(self):
        self.assertEqual(self.parser.parse("-v run --dry").current().name, "dry")
        self.assertEqual(self.parser.parse("").current().name, "tool")

    def testNothingApplied(self):
        result = Parser(Option("-x")).parse("stray")
        self.assertIsNone(result.current())
        self.assertIsNone(result.applied_command())
        self.assertEqual(result.suggestions(), [])


class TestTextToMatch(TestCase):
    """Behavioral tests for text_to_match()."""

    def setUp(self):
        self.parser = Parser(Command("tool", children=[Option("--verbose")]))

    def testProgressiveUsesLastToken(self):
        self.assertEqual(self.parser.parse("--ver").text_to_match(), "--ver")

    def testCompleteUsesLastUnmatched(self):
        self.assertEqual(self.parser.parse(["--ver", "--verbose"]).text_to_match(), "--ver")
        self.assertEqual(self.parser.parse(["--verbose"]).text_to_match(), "")

    def testBlankLastToken(self):
        self.assertEqual(self.parser.parse(["--verbose", ""], progressive=True).text_to_match(), "")

    def testEmptyLineMatchesNothing(self):
        result = self.parser.parse("")
        self.assertTrue(result.progressive)
        self.assertEqual(result.words, ())
        self.assertEqual(result.text_to_match(), "")

    def testDelimitedWordIsMatchedWhole(self):
        parser = Parser(Command("tool", children=[Option("--name", rule=ExactlyOneArgument())]))
        result = parser.parse("--name=Bo")
        self.assertEqual(result.words, ("--name=Bo",))
        self.assertEqual(result.text_to_match(), "--name=Bo")
        self.assertEqual(parser.parse("--name=Bo ").text_to_match(), "")

    def testTypedRootNameIsMatched(self):
        result = self.parser.parse(["tool"], progressive=True)
        self.assertEqual(result.text_to_match(), "tool")
        self.assertEqual(self.parser.parse([], progressive=True).text_to_match(), "")


class TestSuggestions(TestCase):
    """Behavioral tests for completion suggestions."""

    def testSubcommandNames(self):
        parser = Parser(Command("outer", children=[Command("one"), Command("two"), Command("three")]))
        self.assertEqual(parser.parse("outer ").suggestions(), ["one", "three", "two"])

    def testEmptyLineSuggestsEveryOption(self):
        parser = Parser(Command("tool", children=[
            Option("--name", rule=ExactlyOneArgument()),
            Option("-v", "--verbose"),
        ]))
        self.assertEqual(parser.parse("").suggestions(), ["--name", "--verbose", "-v"])

    def testOptionAliases(self):
        parser = Parser(Command("outer", children=[Option("--one"), Option("--two"), Option("--three")]))
        self.assertEqual(parser.parse("outer ").suggestions(), ["--one", "--three", "--two"])

    def testHiddenOptionsAreNotSuggested(self):
        parser = Parser(Command("outer", children=[Option("--one"), Option("--two", hidden=True)]))
        self.assertEqual(parser.parse("outer ").suggestions(), ["--one"])

    def testAllowedValuesOfCurrentOption(self):
        parser = Parser(Command("outer", children=[
            Option("--one", rule=AnyOneOf("one-a", "one-b")),
            Option("--two", rule=AnyOneOf("two-a", "two-b")),
        ]))
        self.assertEqual(parser.parse("outer --two ").suggestions(), ["two-a", "two-b"])

    def testPartialWordFiltersChildren(self):
        parser = Parser(Command("outer", children=[Command("one"), Command("two"), Command("three")]))
        self.assertEqual(parser.parse("outer o").suggestions(), ["one", "two"])

    def testSuggestionsWithoutValidation(self):
        command = Command("the-command", children=[
            Option("-t", rule=ExactlyOneArgument().with_suggestions_from(*MATERIALS)),
        ])
        self.assertEqual(Parser(command).parse("the-command -t m").suggestions(), ["animal", "mineral"])
        self.assertEqual(Parser(command).parse("the-command -t something-else").errors, ())

    def testSuggestionsFromCallable(self):
        command = Command("the-command", children=[
            Command("one", rule=WithSuggestionsFrom(lambda text: [value for value in MATERIALS if text in value])),
        ])
        self.assertEqual(Parser(command).parse("the-command one m").suggestions(), ["animal", "mineral"])

    def testDynamicChoicesValidateAndSuggest(self):
        command = Command("the-command", children=[Command("one", rule=AnyOneOf(lambda: MATERIALS))])
        parser = Parser(command)
        self.assertEqual(parser.parse("the-command one m").suggestions(), ["animal", "mineral"])
        self.assertEqual(
            [error.message for error in parser.parse("the-command one fungus").errors],
            ["Unrecognized command or argument 'fungus'", "Required argument missing for command: one"],
        )

    def testProximateOption(self):
        parser = Parser(Command("outer", rule=NoArguments(), children=[
            Option("one", rule=AnyOneOf("one-a", "one-b", "one-c")),
            Option("two", rule=AnyOneOf("two-a", "two-b", "two-c")),
            Option("three", rule=AnyOneOf("three-a", "three-b", "three-c")),
        ]))
        self.assertEqual(parser.parse(["outer", "two", "b"]).suggestions(), ["two-b"])
        self.assertEqual(parser.parse("outer two b").suggestions(), ["two-b"])

    def testProximateCommand(self):
        parser = Parser(Command("outer", children=[
            Command("one", rule=AnyOneOf("one-a", "one-b", "one-c")),
            Command("two", rule=AnyOneOf("two-a", "two-b", "two-c")),
            Command("three", rule=AnyOneOf("three-a", "three-b", "three-c")),
        ]))
        self.assertEqual(parser.parse(["outer", "two", "b"]).suggestions(), ["two-b"])
        self.assertEqual(parser.parse("outer two b").suggestions(), ["two-b"])


class TestRaising(TestCase):
    """Behavioral tests for raise_for_errors() and construction."""

    def testCleanResultDoesNotRaise(self):
        Parser(Command("tool")).parse("").raise_for_errors()

    def testErrorsAreGrouped(self):
        result = Parser(Command("tool")).parse("one two")
        with self.assertRaises(ParseExit) as context:
            result.raise_for_errors(prog="tool")
        self.assertEqual(
            [error.message for error in context.exception.exceptions],
            ["Unrecognized command or argument 'one'", "Unrecognized command or argument 'two'"],
        )
        self.assertEqual(context.exception.options["prog"], "tool")

    def testDirectConstruction(self):
        result = ParseResult((), ())
        self.assertEqual(result.errors, ())
        self.assertEqual(result.diagram(), "")
        self.assertFalse(result.progressive)

    def testConstructionRejectsWrongTypes(self):
        with self.assertRaises(TypeError):
            ParseResult(["tool"], ())
        with self.assertRaises(TypeError):
            ParseResult((), (), unmatched="word")


if __name__ == "__main__":
    unittest.main()
