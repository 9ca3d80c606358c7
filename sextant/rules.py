r"""
Sextant argument rules: composable arity and value validation.

Overview
- ArgumentsRule
  • A named predicate over an applied option: check(applied) returns None when the
    node is valid, otherwise a (FaultCode, message) pair; validate(applied) returns
    just the message. Blank messages count as valid.
  • Also carries the allowed-value set (static, or a callable re-evaluated on every
    access), a suggestion source, a default-value supplier (re-evaluated on every
    access), a materializer, and an arity ceiling used by the matcher.

- And
  • Runs its operands in registration order; the first failing operand wins.
  • Allowed values and suggestions are unions (order-preserving, de-duplicated).
  • Default supplier and materializer come from the last operand that defines one,
    so rule.with_default(...) / rule.with_materializer(...) override earlier ones.
  • The arity ceiling is the smallest ceiling among operands.

- Families (one class per rule family)
  • ExactlyOneArgument, ZeroOrOneArgument, NoArguments, OneOrMoreArguments,
    ZeroOrMoreArguments, AnyOneOf, ExactlyOneCommandRequired, ZeroOrMoreOf,
    ExistingFilesOnly, WithSuggestionsFrom.
  • Arity families accept an optional message callable (applied) -> str replacing
    the default text.

Error texts (<sym> is str(symbol); command/option follows the symbol's kind)
- Required argument missing for option: <sym>
- Option '<sym>' only accepts a single argument but N were provided.
- Arguments not allowed for option: <sym>
- Argument 'x' not recognized. Must be one of:\n\t'a'\n\t'b'
- Required command was not provided for command: <sym>
- Command '<sym>' only accepts a single subcommand but N were provided: a, b
- File does not exist: <path>

Quick example:
    >>> rule = ExactlyOneArgument().with_default("text").with_suggestions_from("json", "text")
    >>> rule.maximum
    1
"""
import builtins
import os
from collections.abc import Iterable

from .faults import FaultCode
from .suggestions import suggest as _suggest
from .utils import *


def _kind(applied):
    return "command" if applied.symbol.is_command else "option"


def _single(applied):
    arguments = applied.arguments
    return arguments[0] if arguments else None


def _union(iterables):
    seen = {}
    for iterable in iterables:
        for value in iterable:
            seen.setdefault(value, None)
    return tuple(seen)


def _sanitize_callable(cls, metadata, field, /):
    if not (metadata[field] is Unset or builtins.callable(metadata[field])):
        raise TypeError(f"{cls.__typename__} {field!r} must be callable")


def _sanitize_rule_metadata(cls, metadata, /):
    """
    Internal: validate the metadata shared by every rule.

    - name: non-empty string after trimming.
    - code: FaultCode.
    - validate/suggest/materialize: callables or Unset.
    - default: a callable supplier, a string (wrapped into a supplier) or Unset.
    - allowed: a callable, an iterable of strings (frozen into a tuple) or Unset.
    - maximum: None or an int >= 0.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    metadata["name"] = name

    if not isinstance(metadata["code"], FaultCode):
        raise TypeError(f"{cls.__typename__} 'code' must be a fault-code")

    for field in ("validate", "suggest", "materialize"):
        _sanitize_callable(cls, metadata, field)

    if isinstance(default := metadata["default"], str):
        metadata["default"] = lambda: default
    elif not (default is Unset or builtins.callable(default)):
        raise TypeError(f"{cls.__typename__} 'default' must be a string or a callable")

    if (allowed := metadata["allowed"]) is not Unset and not builtins.callable(allowed):
        if isinstance(allowed, str) or not isinstance(allowed, Iterable):
            raise TypeError(f"{cls.__typename__} 'allowed' must be an iterable of strings or a callable")
        allowed = tuple(allowed)
        if not all(isinstance(value, str) for value in allowed):
            raise TypeError(f"{cls.__typename__} 'allowed' must only contain strings")
        metadata["allowed"] = allowed

    if (maximum := metadata["maximum"]) is not None:
        if isinstance(maximum, bool) or not isinstance(maximum, int):
            raise TypeError(f"{cls.__typename__} 'maximum' must be an integer")
        elif maximum < 0:
            raise ValueError(f"{cls.__typename__} 'maximum' cannot be negative")


def _sanitize_message(cls, message, /):
    if not (message is Unset or builtins.callable(message)):
        raise TypeError(f"{cls.__typename__} 'message' must be callable")
    return message


class ArgumentsRule(metaclass=ReflectiveType):
    """
    Base rule; also usable directly for custom predicates.

    Parameters
    - validate: Unset | Callable[[AppliedOption], str | None]
      Returns an error message, or None/"" when valid. Unset means always valid.
    - name: Unset | str (defaults to validate.__name__, else the typename)
    - code: FaultCode reported when validate fails (DELEGATED_ERROR by default).
    - allowed: Unset | Iterable[str] | Callable[[], Iterable[str]]
    - suggest: Unset | Callable[[str], Iterable[str]]; defaults to filtering the
      allowed values through the suggestion engine.
    - default: Unset | str | Callable[[], str | None]
    - materialize: Unset | Callable[[AppliedOption], object]
    - maximum: None | int, the most arguments this rule can ever accept.
    """

    __introspectable__ = (
        "name",
        "code",
        "maximum",
    )

    def __init__(
            self,
            validate=Unset,
            /,
            *,
            name=Unset,
            code=FaultCode.DELEGATED_ERROR,
            allowed=Unset,
            suggest=Unset,
            default=Unset,
            materialize=Unset,
            maximum=None,
    ):
        metadata = {
            "validate": validate,
            "name": coalesce(name, getattr(validate, "__name__", type(self).__typename__)),
            "code": code,
            "allowed": allowed,
            "suggest": suggest,
            "default": default,
            "materialize": materialize,
            "maximum": maximum,
        }
        _sanitize_rule_metadata(type(self), metadata)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def _failure(self, applied):
        """Family hook: return None, a message, or a (FaultCode, message) pair."""
        if self._validate is Unset:
            return None
        return self._validate(applied)

    def check(self, applied, /):
        """
        Validate an applied option.

        Returns
        - None when valid (including blank messages).
        - (FaultCode, str) describing the first failure otherwise.
        """
        failure = self._failure(applied)
        if failure is None:
            return None
        code, message = failure if isinstance(failure, tuple) else (self.code, failure)
        if message is None or not str(message).strip():
            return None
        return code, str(message)

    def validate(self, applied, /):
        """Return the failure message for applied, or None when valid."""
        if (failure := self.check(applied)) is None:
            return None
        return failure[1]

    @property
    def allowed_values(self):
        """Allowed values; a callable source is re-evaluated on every access."""
        if self._allowed is Unset:
            return ()
        if builtins.callable(self._allowed):
            return tuple(self._allowed())
        return self._allowed

    def suggest(self, text, /):
        """Suggestions for a partially typed word."""
        if self._suggest is not Unset:
            return list(self._suggest(text))
        return list(_suggest(self.allowed_values, text))

    def default_value(self):
        """The default argument value, or None. Never cached."""
        if self._default is Unset:
            return None
        return self._default()

    def materialize(self, applied, /):
        if self._materialize is Unset:
            return None
        return self._materialize(applied)

    def __and__(self, other):
        if not isinstance(other, ArgumentsRule):
            return NotImplemented
        return And(self, other)

    def with_default(self, default, /):
        """Compose a default-value supplier (a string or a zero-argument callable)."""
        return And(self, ArgumentsRule(name="default", default=default))

    def with_suggestions_from(self, *values):
        """Compose a suggestion source: literal values, or one callable (text) -> Iterable[str]."""
        return And(self, WithSuggestionsFrom(*values))

    def existing_files_only(self):
        """Compose a check that every argument names an existing file or directory."""
        return And(self, ExistingFilesOnly())

    def with_materializer(self, materialize, /):
        """Compose a materializer (applied) -> object overriding earlier ones."""
        return And(self, ArgumentsRule(name="materializer", materialize=materialize))


class And(ArgumentsRule):
    """
    Conjunction of rules, evaluated in registration order.

    Nested plain And operands are flattened, which keeps the order intact.
    """

    __introspectable__ = (
        "name",
        "code",
        "maximum",
        "operands",
    )
    __displayable__ = (
        "name",
        "operands",
    )

    def __init__(self, *operands, name=Unset):
        flattened = []
        for operand in operands:
            if not isinstance(operand, ArgumentsRule):
                raise TypeError(f"{type(self).__typename__} operands must be arguments-rules")
            flattened.extend(operand.operands if type(operand) is And else (operand,))
        if not flattened:
            raise ValueError(f"{type(self).__typename__} requires at least one operand")

        maxima = [operand.maximum for operand in flattened if operand.maximum is not None]
        defaults = [operand._default for operand in flattened if operand._default is not Unset]
        materializers = [operand._materialize for operand in flattened if operand._materialize is not Unset]

        super().__init__(
            name=name,
            default=defaults[-1] if defaults else Unset,
            materialize=materializers[-1] if materializers else Unset,
            maximum=min(maxima) if maxima else None,
        )
        self._operands = tuple(flattened)

    def _failure(self, applied):
        for operand in self._operands:
            if (failure := operand.check(applied)) is not None:
                return failure
        return None

    @property
    def allowed_values(self):
        return _union(operand.allowed_values for operand in self._operands)

    def suggest(self, text, /):
        return list(_union(operand.suggest(text) for operand in self._operands))


class ExactlyOneArgument(ArgumentsRule):
    """Exactly one argument must be bound."""

    def __init__(self, message=Unset, /):
        super().__init__(code=FaultCode.MISSING_ARGUMENT, materialize=_single, maximum=1)
        self._message = _sanitize_message(type(self), message)

    def _failure(self, applied):
        count = len(applied.arguments)
        if count == 0:
            return FaultCode.MISSING_ARGUMENT, (
                f"Required argument missing for {_kind(applied)}: {applied.symbol}"
                if self._message is Unset else self._message(applied)
            )
        if count > 1:
            return FaultCode.TOO_MANY_ARGUMENTS, (
                f"{_kind(applied).title()} '{applied.symbol}' only accepts a single argument but {count} were provided."
                if self._message is Unset else self._message(applied)
            )
        return None


class ZeroOrOneArgument(ArgumentsRule):
    """At most one argument may be bound."""

    def __init__(self, message=Unset, /):
        super().__init__(code=FaultCode.TOO_MANY_ARGUMENTS, materialize=_single, maximum=1)
        self._message = _sanitize_message(type(self), message)

    def _failure(self, applied):
        if (count := len(applied.arguments)) > 1:
            if self._message is not Unset:
                return self._message(applied)
            return f"{_kind(applied).title()} '{applied.symbol}' only accepts a single argument but {count} were provided."
        return None


class NoArguments(ArgumentsRule):
    """No argument may be bound; materializes to True (presence flag)."""

    def __init__(self, message=Unset, /):
        super().__init__(code=FaultCode.ARGUMENTS_NOT_ALLOWED, materialize=lambda applied: True, maximum=0)
        self._message = _sanitize_message(type(self), message)

    def _failure(self, applied):
        if not applied.arguments:
            return None
        if self._message is not Unset:
            return self._message(applied)
        return f"Arguments not allowed for option: {applied.symbol}"


class OneOrMoreArguments(ArgumentsRule):
    """At least one argument must be bound."""

    def __init__(self, message=Unset, /):
        super().__init__(code=FaultCode.MISSING_ARGUMENT, materialize=lambda applied: tuple(applied.arguments))
        self._message = _sanitize_message(type(self), message)

    def _failure(self, applied):
        if applied.arguments:
            return None
        if self._message is not Unset:
            return self._message(applied)
        return f"Required argument missing for {_kind(applied)}: {applied.symbol}"


class ZeroOrMoreArguments(ArgumentsRule):
    """Any number of arguments; always valid."""

    def __init__(self):
        super().__init__(materialize=lambda applied: tuple(applied.arguments))


class _Membership(ArgumentsRule):
    # membership half of AnyOneOf; arity is left to ExactlyOneArgument
    def __init__(self, source, message, /):
        super().__init__(name="membership", code=FaultCode.INVALID_CHOICE, allowed=source)
        self._message = message

    def _failure(self, applied):
        if len(arguments := applied.arguments) != 1:
            return None
        values = self.allowed_values
        if arguments[0].casefold() in {value.casefold() for value in values}:
            return None
        if self._message is not Unset:
            return self._message(applied)
        return "Argument '%s' not recognized. Must be one of:\n\t%s" % (
            arguments[0],
            "\n\t".join(f"'{value}'" for value in values),
        )


class AnyOneOf(And):
    """
    Exactly one argument, which must be one of the given values (case-insensitive).

    Accepts literal values, or a single zero-argument callable returning the values;
    a callable is re-evaluated on every validation and every suggestion.
    """

    def __init__(self, *values, message=Unset):
        if len(values) == 1 and builtins.callable(values[0]):
            source, = values
        else:
            if not values:
                raise ValueError(f"{type(self).__typename__} requires at least one value")
            if not all(isinstance(value, str) for value in values):
                raise TypeError(f"{type(self).__typename__} values must be strings")
            source = values
        message = _sanitize_message(type(self), message)
        super().__init__(ExactlyOneArgument(message), _Membership(source, message))


class ExactlyOneCommandRequired(ArgumentsRule):
    """Exactly one sub-command must be applied under the command."""

    def __init__(self, message=Unset, /):
        super().__init__(code=FaultCode.MISSING_COMMAND)
        self._message = _sanitize_message(type(self), message)

    def _failure(self, applied):
        commands = [child for child in applied.children if child.symbol.is_command]
        if not commands:
            return FaultCode.MISSING_COMMAND, (
                f"Required command was not provided for command: {applied.symbol}"
                if self._message is Unset else self._message(applied)
            )
        if len(commands) > 1:
            return FaultCode.AMBIGUOUS_COMMAND, (
                f"Command '{applied.symbol}' only accepts a single subcommand but {len(commands)} were provided: "
                f"{', '.join(str(child.symbol) for child in commands)}"
                if self._message is Unset else self._message(applied)
            )
        return None


class ZeroOrMoreOf(ArgumentsRule):
    """
    Implicit rule of every symbol over its children: never fails, and exposes the
    aliases of the non-hidden children as allowed values (completion candidates).
    """

    def __init__(self, *symbols):
        symbols = tuple(symbols)
        super().__init__(allowed=lambda: [
            alias
            for symbol in symbols if not symbol.hidden
            for alias in symbol.aliases
        ])


class ExistingFilesOnly(ArgumentsRule):
    """Every bound argument must name an existing file or directory."""

    def __init__(self):
        super().__init__(code=FaultCode.FILE_NOT_FOUND)

    def _failure(self, applied):
        for path in applied.arguments:
            if not os.path.exists(path):
                return f"File does not exist: {path}"
        return None


class WithSuggestionsFrom(ArgumentsRule):
    """
    Suggestion-only rule: literal candidate values filtered through the suggestion
    engine, or a single callable (text) -> Iterable[str] consulted on every call.
    """

    def __init__(self, *values):
        if len(values) == 1 and builtins.callable(values[0]):
            source, = values
            super().__init__(suggest=lambda text: source(text))
        else:
            if not all(isinstance(value, str) for value in values):
                raise TypeError(f"{type(self).__typename__} values must be strings")
            super().__init__(suggest=lambda text: _suggest(values, text))


__all__ = (
    "ArgumentsRule",
    "And",
    "ExactlyOneArgument",
    "ZeroOrOneArgument",
    "NoArguments",
    "OneOrMoreArguments",
    "ZeroOrMoreArguments",
    "AnyOneOf",
    "ExactlyOneCommandRequired",
    "ZeroOrMoreOf",
    "ExistingFilesOnly",
    "WithSuggestionsFrom",
)
