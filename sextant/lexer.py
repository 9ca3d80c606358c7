r"""
Sextant lexer: raw words -> classified tokens.

Overview
- tokenize(line)
  • Quote-aware splitter for a single raw line: a double-quoted run becomes one
    word (quotes removed, "" yields an empty word), any other run of
    non-whitespace becomes a word. An unpaired quote never fails; it just stays
    part of its word.

- expand(words, configuration, errors=None)
  • Response files: every "@path" word before the end-of-arguments marker is
    replaced in place by the shell-quoted contents of path (one level only; words
    read from a file are never expanded again).

- lex(words, configuration, known=None)
  • Splits "--name=Bob" into "--name" "Bob", unbundles "-xyz" into "-x" "-y" "-z",
    marks the end-of-arguments marker, and classifies every word as ARGUMENT or
    OPTION_LIKE. With a known alias set, splitting and unbundling only happen
    when they produce known aliases, so "-p:Random=x" stays one argument when
    "-p" is not declared.

Notes
- Nothing here consults the symbol tree beyond the flat set of known aliases;
  deciding which symbol a token belongs to is the matcher's job.
- Lexing never raises on user input. Missing response files are reported as
  OptionError values (collected when an errors list is given).
"""
import enum
import logging
import re
import shlex
from collections.abc import Iterable
from typing import NamedTuple

from .config import DEFAULT
from .faults import FaultCode, OptionError
from .utils import *

logger = logging.getLogger(__name__)

_WORDS = re.compile(r'"(?P<quoted>[^"]*)"|(?P<bare>\S+)')


class TokenKind(enum.Enum):
    """
    Classification of a lexed token.

    - ARGUMENT: a plain value (or anything after the end-of-arguments marker).
    - OPTION_LIKE: an option or command alias, or a prefixed word when no alias set is known.
    - END_OF_ARGUMENTS: the configured marker itself.
    """
    ARGUMENT = "argument"
    OPTION_LIKE = "option-like"
    END_OF_ARGUMENTS = "end-of-arguments"


class Token(NamedTuple):
    """Immutable lexed token: (value, kind)."""
    value: str
    kind: TokenKind

    def __str__(self):
        return self.value


def tokenize(line, /):
    """
    Split a raw command line into words.

    Examples
    - tokenize('outer inner "a b"')  -> ['outer', 'inner', 'a b']
    - tokenize('cmd ""')             -> ['cmd', '']
    - tokenize('say "unterminated')  -> ['say', '"unterminated']
    """
    if not isinstance(line, str):
        raise TypeError("tokenize() argument must be a string")
    return [
        match["quoted"] if match["quoted"] is not None else match["bare"]
        for match in _WORDS.finditer(line)
    ]


def _split_response_line(line):
    """
    shell-split one response-file line; an unclosed quote swallows the rest of
    the line as literal content instead of failing.
    """
    try:
        return shlex.split(line, comments=True)
    except ValueError:
        pass
    for quote in ('"', "'"):
        try:
            return shlex.split(line + quote, comments=True)
        except ValueError:
            continue
    return line.split()


def _read_response_file(path):
    with open(path, encoding="utf-8") as stream:
        words = []
        for line in stream:
            words.extend(_split_response_line(line.rstrip("\r\n")))
        return words


def expand(words, /, configuration=Unset, errors=None):
    """
    Splice response files into a word list.

    Parameters
    - words: Iterable[str]
    - configuration: Configuration (defaults to the shared default); expansion is
      skipped when configuration.response_files is false.
    - errors: optional list collecting OptionError values for unreadable files;
      when omitted, the first such error is raised.

    Returns
    - list[str]: the expanded words. Unreadable "@path" words are dropped.
    """
    configuration = coalesce(configuration, DEFAULT)
    words = list(words)
    if not configuration.response_files:
        return words

    expanded = []
    literal = False
    for word in words:
        if literal or word == configuration.end_of_arguments:
            literal = True
            expanded.append(word)
            continue
        if not word.startswith("@") or len(word) == 1:
            expanded.append(word)
            continue

        path = word[1:]
        try:
            spliced = _read_response_file(path)
        except OSError as exception:
            logger.debug("response file %r could not be read: %s", path, exception)
            error = OptionError(
                "Response file not found '%s'" % path,
                word,
                code=FaultCode.RESPONSE_FILE_NOT_FOUND,
                hint="check that the file exists and is readable",
            )
            if errors is None:
                raise error
            errors.append(error)
            continue

        logger.debug("response file %r spliced %d word(s)", path, len(spliced))
        expanded.extend(spliced)
    return expanded


def _is_known(word, known):
    return known is None or word in known


def _can_unbundle(word, configuration, known):
    if not configuration.allow_unbundling:
        return False
    if not word.startswith("-") or word.startswith("--") or len(word) < 3:
        return False
    if known is not None:
        if word in known:
            return False
        return all("-" + character in known for character in word[1:])
    return True


def _split_delimited(word, configuration):
    index = min((position for delimiter in configuration.delimiters if (position := word.find(delimiter)) > 0), default=-1)
    if index < 0:
        return None
    return word[:index], word[index + 1:]


def lex(words, /, configuration=Unset, known=None):
    """
    Classify raw words into tokens.

    Parameters
    - words: Iterable[str] (already expanded, see expand()).
    - configuration: Configuration (defaults to the shared default).
    - known: optional collection of every alias the grammar declares; when given,
      classification and splitting are grammar-aware.

    Returns
    - list[Token]
    """
    if isinstance(words, str) or not isinstance(words, Iterable):
        raise TypeError("lex() argument must be an iterable of strings")
    configuration = coalesce(configuration, DEFAULT)
    if known is not None:
        known = frozenset(known)

    tokens = []
    literal = False
    for word in words:
        if not isinstance(word, str):
            raise TypeError("lex() argument must be an iterable of strings")

        if literal:
            tokens.append(Token(word, TokenKind.ARGUMENT))
            continue
        if word == configuration.end_of_arguments:
            literal = True
            tokens.append(Token(word, TokenKind.END_OF_ARGUMENTS))
            continue

        prefixed = configuration.has_prefix(word)

        if prefixed and (parts := _split_delimited(word, configuration)):
            head, tail = parts
            if _is_known(head, known):
                tokens.append(Token(head, TokenKind.OPTION_LIKE))
                tokens.append(Token(tail, TokenKind.ARGUMENT))
            else:
                tokens.append(Token(word, TokenKind.ARGUMENT))
            continue

        if _can_unbundle(word, configuration, known):
            # -xyz -> -x -y -z
            tokens.extend(Token("-" + character, TokenKind.OPTION_LIKE) for character in word[1:])
            continue

        if known is not None:
            kind = TokenKind.OPTION_LIKE if word in known else TokenKind.ARGUMENT
        else:
            kind = TokenKind.OPTION_LIKE if prefixed else TokenKind.ARGUMENT
        tokens.append(Token(word, kind))

    return tokens


__all__ = (
    "TokenKind",
    "Token",
    "tokenize",
    "expand",
    "lex",
)
