"""
Lexer behavioral tests (tokenize, response files, token classification).

Scope
- Validate quote-aware line splitting, including empty and unterminated quotes.
- Validate response-file splicing: in place, one level, comments, unclosed quotes,
  missing files, and the response_files toggle.
- Validate delimiter splitting, unbundling and the end-of-arguments marker, with and
  without a known alias set.

Conventions
- Test method names follow CamelCase per project convention.
- Response files are written to a temporary directory per test.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from unittest import TestCase

from sextant import Configuration, FaultCode, OptionError, Token, TokenKind, expand, lex, tokenize

ARGUMENT = TokenKind.ARGUMENT
OPTION_LIKE = TokenKind.OPTION_LIKE
END_OF_ARGUMENTS = TokenKind.END_OF_ARGUMENTS


class TestTokenize(TestCase):
    """Behavioral tests for tokenize()."""

    def testQuotedRunIsOneWord(self):
        self.assertEqual(tokenize('outer inner "a b"'), ["outer", "inner", "a b"])

    def testEmptyQuotesYieldEmptyWord(self):
        self.assertEqual(tokenize('cmd ""'), ["cmd", ""])

    def testUnterminatedQuoteNeverFails(self):
        self.assertEqual(tokenize('say "unterminated'), ["say", '"unterminated'])

    def testWhitespaceOnlyLine(self):
        self.assertEqual(tokenize("   "), [])

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            tokenize(["a", "b"])


class TestExpand(TestCase):
    """Behavioral tests for response-file expansion."""

    def setUp(self):
        self._directory = tempfile.TemporaryDirectory()
        self.addCleanup(self._directory.cleanup)

    def _write(self, name, content):
        path = os.path.join(self._directory.name, name)
        with open(path, "w", encoding="utf-8") as stream:
            stream.write(content)
        return path

    def testWordsAreSplicedInPlace(self):
        path = self._write("args.rsp", 'one "two three"\n# a comment\nfour # trailing\n')
        self.assertEqual(expand(["a", "@" + path, "b"]), ["a", "one", "two three", "four", "b"])

    def testExpansionIsOneLevelOnly(self):
        path = self._write("outer.rsp", "@nested.rsp\n")
        self.assertEqual(expand(["@" + path]), ["@nested.rsp"])

    def testUnclosedQuoteKeepsRestOfLine(self):
        path = self._write("quote.rsp", 'say "hello world\nnext\n')
        self.assertEqual(expand(["@" + path]), ["say", "hello world", "next"])

    def testWordsAfterMarkerAreNotExpanded(self):
        path = self._write("args.rsp", "one\n")
        self.assertEqual(expand(["--", "@" + path]), ["--", "@" + path])

    def testLoneAtSignIsKept(self):
        self.assertEqual(expand(["@"]), ["@"])

    def testMissingFileIsCollected(self):
        missing = os.path.join(self._directory.name, "missing.rsp")
        errors = []
        self.assertEqual(expand(["a", "@" + missing], errors=errors), ["a"])
        self.assertEqual(len(errors), 1)
        self.assertIs(errors[0].code, FaultCode.RESPONSE_FILE_NOT_FOUND)
        self.assertEqual(errors[0].message, "Response file not found '%s'" % missing)
        self.assertEqual(errors[0].token, "@" + missing)

    def testMissingFileRaisesWithoutErrorList(self):
        missing = os.path.join(self._directory.name, "missing.rsp")
        with self.assertRaises(OptionError):
            expand(["@" + missing])

    def testDisabledResponseFiles(self):
        configuration = Configuration(response_files=False)
        self.assertEqual(expand(["@whatever"], configuration), ["@whatever"])


class TestLex(TestCase):
    """Behavioral tests for lex()."""

    def testDelimitedKnownAliasIsSplit(self):
        self.assertEqual(
            lex(["--name=Bob"], known={"--name"}),
            [Token("--name", OPTION_LIKE), Token("Bob", ARGUMENT)],
        )

    def testColonDelimiter(self):
        self.assertEqual(
            lex(["/p:value"], known={"/p"}),
            [Token("/p", OPTION_LIKE), Token("value", ARGUMENT)],
        )

    def testEarliestDelimiterWins(self):
        self.assertEqual(
            lex(["-p:Random=x"], known={"-p"}),
            [Token("-p", OPTION_LIKE), Token("Random=x", ARGUMENT)],
        )

    def testDelimitedUnknownAliasStaysWhole(self):
        self.assertEqual(lex(["-p:Random=x"], known={"-x"}), [Token("-p:Random=x", ARGUMENT)])

    def testDelimitedWithoutKnownSet(self):
        self.assertEqual(
            lex(["--name=Bob"]),
            [Token("--name", OPTION_LIKE), Token("Bob", ARGUMENT)],
        )

    def testBundleOfKnownAliasesIsUnbundled(self):
        self.assertEqual(
            lex(["-xyz"], known={"-x", "-y", "-z"}),
            [Token("-x", OPTION_LIKE), Token("-y", OPTION_LIKE), Token("-z", OPTION_LIKE)],
        )

    def testBundleWithUnknownCharacterStaysWhole(self):
        self.assertEqual(lex(["-xyz"], known={"-x", "-y"}), [Token("-xyz", ARGUMENT)])

    def testKnownBundleLookalikeIsNotUnbundled(self):
        self.assertEqual(lex(["-abc"], known={"-abc", "-a", "-b", "-c"}), [Token("-abc", OPTION_LIKE)])

    def testDoubleDashWordIsNeverUnbundled(self):
        self.assertEqual(lex(["--xyz"]), [Token("--xyz", OPTION_LIKE)])

    def testUnbundlingCanBeDisabled(self):
        configuration = Configuration(allow_unbundling=False)
        self.assertEqual(lex(["-xyz"], configuration), [Token("-xyz", OPTION_LIKE)])

    def testEndOfArgumentsMarker(self):
        self.assertEqual(
            lex(["a", "--", "--name=Bob", "-xyz", "--"], known={"--name", "-x", "-y", "-z"}),
            [
                Token("a", ARGUMENT),
                Token("--", END_OF_ARGUMENTS),
                Token("--name=Bob", ARGUMENT),
                Token("-xyz", ARGUMENT),
                Token("--", ARGUMENT),
            ],
        )

    def testCustomEndOfArgumentsMarker(self):
        configuration = Configuration(end_of_arguments="::")
        self.assertEqual(
            lex(["::", "--"], configuration),
            [Token("::", END_OF_ARGUMENTS), Token("--", ARGUMENT)],
        )

    def testClassificationWithoutKnownSet(self):
        self.assertEqual(
            [token.kind for token in lex(["--flag", "value", "/x", "-"])],
            [OPTION_LIKE, ARGUMENT, OPTION_LIKE, OPTION_LIKE],
        )

    def testClassificationWithKnownSet(self):
        self.assertEqual(
            [token.kind for token in lex(["build", "--flag", "value"], known={"build"})],
            [OPTION_LIKE, ARGUMENT, ARGUMENT],
        )

    def testEmptyWordIsAnArgument(self):
        self.assertEqual(lex([""], known={"-x"}), [Token("", ARGUMENT)])

    def testLexingIsDeterministic(self):
        words = ["tool", "-vq", "--name=Bob", "rest", "--", "tail"]
        known = {"tool", "-v", "-q", "--name"}
        self.assertEqual(lex(words, known=known), lex(words, known=known))

    def testTokenStringIsItsValue(self):
        self.assertEqual(str(Token("--name", OPTION_LIKE)), "--name")

    def testNonStringWordRejected(self):
        with self.assertRaises(TypeError):
            lex(["ok", 3])

    def testBareStringRejected(self):
        with self.assertRaises(TypeError):
            lex("--name")


if __name__ == "__main__":
    unittest.main()
