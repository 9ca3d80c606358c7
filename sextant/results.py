"""
Parse results.

Scope
- ParseResult is the immutable outcome of one parse: the raw words, the lexed tokens,
  the root applied nodes, the unparsed and unmatched tokens, and every user error.
- Errors are computed once, at construction: errors reported by the matcher
  (unreadable response files, unrecognized tokens) come first, followed by the
  validation failures of every applied node, breadth-first.

Completion
- text_to_match() picks the word being completed and suggestions() asks the
  current node's rule for candidates, so a shell completion hook reduces to
  parser.parse(line).suggestions().
"""
from .applied import AppliedOption
from .faults import OptionError, ParseExit
from .lexer import Token
from .utils import *


def _sanitize_sequence(cls, metadata, field, kind, /):
    if isinstance(value := metadata[field], str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a sequence, not a string")
    value = tuple(value)
    if not all(isinstance(item, kind) for item in value):
        raise TypeError(f"{cls.__typename__} {field!r} must only contain {kind.__name__} values")
    metadata[field] = value


class ParseResult(metaclass=ReflectiveType):
    """
    Outcome of Parser.parse().

    Parameters
    - tokens: Iterable[Token], the lexed input.
    - applied: Iterable[AppliedOption], the root applied nodes.
    - progressive: bool, whether the last word may still be incomplete.
    - unparsed: Iterable[str], words after the end-of-arguments marker.
    - unmatched: Iterable[str], words nobody accepted.
    - errors: Iterable[OptionError], errors found before validation.
    - words: Iterable[str], the raw words as given, before root normalization,
      response-file expansion and lexing.
    """

    __introspectable__ = (
        "words",
        "tokens",
        "applied",
        "progressive",
        "unparsed",
        "unmatched",
        "errors",
    )
    __displayable__ = (
        "applied",
        "unparsed",
        "unmatched",
        "errors",
    )

    def __init__(self, tokens, applied, progressive=False, unparsed=(), unmatched=(), errors=(), words=()):
        metadata = {
            "words": words,
            "tokens": tokens,
            "applied": applied,
            "unparsed": unparsed,
            "unmatched": unmatched,
            "errors": errors,
        }
        _sanitize_sequence(type(self), metadata, "words", str)
        _sanitize_sequence(type(self), metadata, "tokens", Token)
        _sanitize_sequence(type(self), metadata, "applied", AppliedOption)
        _sanitize_sequence(type(self), metadata, "unparsed", str)
        _sanitize_sequence(type(self), metadata, "unmatched", str)
        _sanitize_sequence(type(self), metadata, "errors", OptionError)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._progressive = bool(progressive)
        self._errors = list(self._errors)
        for root in self._applied:
            for node in root.walk():
                if (error := node.validate()) is not None:
                    self._errors.append(error)

    def __getitem__(self, alias):
        for node in self._applied:
            if node.has_alias(alias):
                return node
        raise KeyError(alias)

    def __contains__(self, alias):
        return any(node.has_alias(alias) for node in self._applied)

    def has_option(self, alias, /):
        """
        Whether alias was applied under the applied command (or at the root when
        no command was applied).
        """
        if (command := self.applied_command()) is not None and alias in command:
            return True
        return alias in self

    def applied_command(self):
        """The deepest applied Command node (last in breadth-first order), or None."""
        command = None
        for root in self._applied:
            for node in root.walk():
                if node.is_command:
                    command = node
        return command

    def current(self):
        """The most recently applied leaf: last root, then last child all the way down."""
        if not self._applied:
            return None
        node = self._applied[-1]
        while node.children:
            node = node.children[-1]
        return node

    def diagram(self):
        rendered = " ".join(node.diagram() for node in self._applied)
        if self._unmatched:
            rendered += "   ???--> " + " ".join(self._unmatched)
        return rendered

    def text_to_match(self):
        """
        The word completion should match against.

        - "" when there is no last raw word or it is blank.
        - the last raw word, exactly as typed, when the parse is progressive.
        - otherwise the last unmatched word, or "".
        """
        if not self._words or not self._words[-1].strip():
            return ""
        if self._progressive:
            return self._words[-1]
        return self._unmatched[-1] if self._unmatched else ""

    def suggestions(self):
        if (node := self.current()) is None:
            return []
        return sorted(set(node.symbol.rule.suggest(self.text_to_match())))

    def raise_for_errors(self, **options):
        """Raise a ParseExit grouping every error (options go to its rendering)."""
        if self._errors:
            raise ParseExit(self._errors, **options)


__all__ = (
    "ParseResult",
)
