r"""
Sextant parser: the greedy, backtracking matcher.

Overview
- Parser(*symbols, configuration=Unset, **settings)
  • Holds one or more top-level symbols, a Configuration and the flat set of every
    alias declared anywhere in the tree (computed once, reused by every parse).

- Parser.parse(arguments=Unset, /, *, progressive=Unset)
  • Root normalization: with a single top-level Command, the words are made to start
    with its name ("C:\tools\tool.exe --x" and "--x" both become "tool --x").
  • Response files are expanded, the words are lexed, and the token queue is matched
    against the symbol tree:
      – the end-of-arguments marker halts matching; the rest is unparsed.
      – a top-level alias (re)opens its root node.
      – anything else is offered to the active nodes, most recent first; an
        argument is not offered past the nearest command.
      – an option considers an argument only right after its alias; it has to be
        respecified ("-a cat -a dog") to take another one.
      – an argument nobody accepts goes to a saturated option (so it reports
        "only accepts a single argument"), or else is unmatched.
  • Unmatched words become "Unrecognized command or argument" errors unless the
    deepest applied command sets treat_unmatched_as_errors=False.

- parse(target, arguments=Unset, /, **options)
  • One-shot helper accepting a Parser or a symbol.

Parsing never raises on user input: every user error ends up in ParseResult.errors.
Declaration mistakes raise TypeError/ValueError when the Parser is built.

Quick example:
    >>> tool = Command("tool", children=[Option("-n", "--name", rule=ExactlyOneArgument())])
    >>> result = Parser(tool).parse("--name=Bob")
    >>> result["tool"]["--name"].value()
    'Bob'
"""
import logging
import os
import sys
from collections import deque
from collections.abc import Iterable

from .applied import AppliedOption
from .config import Configuration
from .faults import FaultCode, OptionError
from .lexer import TokenKind, expand, lex, tokenize
from .results import ParseResult
from .suggestions import suggest
from .symbols import Option
from .utils import *

logger = logging.getLogger(__name__)


def _sanitize_symbols(cls, metadata, /):
    """
    Internal: validate the top-level symbols and index them by alias.

    Raises
    - TypeError: if a symbol is not an Option or a Command.
    - ValueError: if no symbol is given, a symbol is not top-level, or two
      symbols share an alias.
    """
    symbols = metadata["symbols"]
    if not symbols:
        raise ValueError(f"{cls.__typename__} requires at least one symbol")

    index = {}
    for symbol in symbols:
        if not isinstance(symbol, Option):
            raise TypeError(f"{cls.__typename__} symbols must be options or commands")
        if symbol.parent is not None:
            raise ValueError(f"{cls.__typename__} symbol {symbol.name!r} is not a top-level symbol")
        for alias in symbol.aliases:
            if index.setdefault(alias, symbol) is not symbol:
                raise ValueError(f"{cls.__typename__} alias {alias!r} is already in use")

    metadata["symbols"] = tuple(symbols)
    metadata["index"] = index
    metadata["known"] = frozenset(
        alias
        for symbol in symbols
        for descendant in symbol.walk()
        for alias in descendant.aliases
    )


def _sanitize_configuration(cls, metadata, /):
    configuration, settings = metadata["configuration"], metadata.pop("settings")
    if configuration is Unset:
        metadata["configuration"] = Configuration(**settings)
    elif not isinstance(configuration, Configuration):
        raise TypeError(f"{cls.__typename__} 'configuration' must be a configuration")
    elif settings:
        metadata["configuration"] = configuration.__replace__(**settings)


def _words(arguments, progressive):
    """Internal: resolve the accepted input forms into (words, progressive)."""
    if arguments is Unset:
        return list(sys.argv[1:]), bool(coalesce(progressive, False))
    if isinstance(arguments, str):
        return tokenize(arguments), bool(coalesce(progressive, not arguments[-1:].isspace()))
    if not isinstance(arguments, Iterable):
        raise TypeError("parse() argument must be a string or an iterable of strings")

    words = list(arguments)
    if not all(isinstance(word, str) for word in words):
        raise TypeError("parse() argument must be a string or an iterable of strings")
    return words, bool(coalesce(progressive, False))


def _basename(word):
    for separator in filter(None, (os.sep, os.altsep)):
        word = word.rsplit(separator, 1)[-1]
    return word


class Parser(metaclass=ReflectiveType):
    """
    Matches words against a symbol tree.

    Parameters
    - *symbols: Option | Command, the top-level symbols (at least one).
    - configuration: Unset | Configuration
    - **settings: Configuration fields; build the configuration when none is given,
      or override fields of the given one.
    """

    __introspectable__ = (
        "symbols",
        "configuration",
    )

    def __init__(self, *symbols, configuration=Unset, **settings):
        metadata = {
            "symbols": symbols,
            "configuration": configuration,
            "settings": settings,
        }
        _sanitize_symbols(type(self), metadata)
        _sanitize_configuration(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def known(self):
        """Every alias declared anywhere in the symbol tree."""
        return self._known

    def parse(self, arguments=Unset, /, *, progressive=Unset):
        """
        Parse a command line.

        Parameters
        - arguments:
          • Unset: sys.argv[1:].
          • str: a raw line, split by tokenize(); progressive unless it ends in whitespace.
          • Iterable[str]: pre-split words, kept as given (empty words included).
        - progressive: Unset | bool, whether the last word may still be incomplete.

        Returns
        - ParseResult

        Raises
        - TypeError: when arguments is not a string or an iterable of strings.
        """
        raw, progressive = _words(arguments, progressive)
        words = self._normalize(raw)

        errors = []
        words = expand(words, self._configuration, errors)
        tokens = lex(words, self._configuration, self._known)
        logger.debug("lexed %d token(s): %s", len(tokens), " ".join(repr(token.value) for token in tokens))

        queue = deque(tokens)
        roots, active, unparsed, unmatched = [], [], [], []
        while queue:
            token = queue.popleft()

            if token.kind is TokenKind.END_OF_ARGUMENTS:
                unparsed.extend(remaining.value for remaining in queue)
                logger.debug("end of arguments, %d word(s) left unparsed", len(unparsed))
                break

            if token.kind is TokenKind.OPTION_LIKE and (symbol := self._index.get(token.value)) is not None:
                node = next((root for root in roots if root.symbol is symbol), None)
                if node is None:
                    roots.append(node := AppliedOption(symbol, token.value))
                    logger.debug("%r opened root %r", token.value, symbol.name)
                else:
                    node.respecify()
                    logger.debug("%r reopened root %r", token.value, symbol.name)
                active.append(node)
                continue

            if (taker := self._offer(token, active)) is not None:
                if taker is not active[-1]:
                    active.append(taker)
                logger.debug("%r taken by %r", token.value, taker.name)
                continue

            if token.kind is TokenKind.ARGUMENT and active and self._saturated(active[-1]):
                active[-1].bind(token.value)
                logger.debug("%r bound to saturated %r", token.value, active[-1].name)
                continue

            unmatched.append(token.value)
            logger.debug("%r unmatched", token.value)

        errors.extend(self._unmatched_errors(roots, unmatched))
        return ParseResult(
            tokens,
            roots,
            progressive=progressive,
            unparsed=unparsed,
            unmatched=unmatched,
            errors=errors,
            words=raw,
        )

    def _normalize(self, words):
        """
        Make the words start with the root command's name when there is exactly one
        top-level symbol and it is a command.
        """
        if len(self._symbols) != 1 or not (root := self._symbols[0]).is_command:
            return words

        canonical = root.name if root.has_raw_alias(root.name) else root.aliases[0]
        if words:
            first, rest = words[0], words[1:]
            if root.has_raw_alias(first):
                return words
            if first.casefold() == root.name.casefold():
                return [canonical, *rest]
            if any(separator in first for separator in filter(None, (os.sep, os.altsep))):
                if _basename(first).casefold() in (root.name.casefold(), root.name.casefold() + ".exe"):
                    logger.debug("executable path %r normalized to %r", first, canonical)
                    return [canonical, *rest]
        return [canonical, *words]

    @staticmethod
    def _offer(token, active):
        # most recent first; an argument never travels past the nearest command
        for node in reversed(active):
            if (taker := node.try_take(token)) is not None:
                return taker
            if token.kind is TokenKind.ARGUMENT and node.is_command:
                break
        return None

    @staticmethod
    def _saturated(node):
        if node.is_command or (maximum := node.symbol.rule.maximum) is None or maximum < 1:
            return False
        return len(node.arguments) >= maximum

    def _unmatched_errors(self, roots, unmatched):
        if not unmatched:
            return []

        command = None
        for root in roots:
            for node in root.walk():
                if node.is_command:
                    command = node
        if command is not None and not command.symbol.treat_unmatched_as_errors:
            return []

        if command is not None:
            candidates = [
                alias
                for child in command.symbol.children if not child.hidden
                for alias in child.aliases
            ]
        else:
            candidates = [
                alias
                for symbol in self._symbols if not symbol.hidden
                for alias in symbol.aliases
            ]

        errors = []
        for word in unmatched:
            suggestions = list(suggest(candidates, word)) if word else []
            errors.append(OptionError(
                f"Unrecognized command or argument '{word}'",
                word or '""',
                code=FaultCode.UNRECOGNIZED_TOKEN,
                suggestions=suggestions,
                hint=f"did you mean {suggestions[0]!r}?" if suggestions else None,
            ))
        return errors


def parse(target, arguments=Unset, /, **options):
    """
    Parse once against a Parser or a symbol.

    Parameters
    - target: Parser | Option | Command (a symbol is wrapped in Parser(target, **options)).
    - arguments: as for Parser.parse().
    - **options: progressive, plus Parser keywords when target is a symbol.

    Raises
    - TypeError: for any other target, or Parser keywords given with a Parser.
    """
    progressive = options.pop("progressive", Unset)
    if isinstance(target, Parser):
        if options:
            raise TypeError("parse() does not accept parser options when given a parser")
        return target.parse(arguments, progressive=progressive)
    if isinstance(target, Option):
        return Parser(target, **options).parse(arguments, progressive=progressive)
    raise TypeError("parse() first argument must be a parser or a symbol")


__all__ = (
    "Parser",
    "parse",
)
