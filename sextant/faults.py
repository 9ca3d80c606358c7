"""
Sextant faults (parse errors) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing parse error,
  grouped by domain so logs and searches stay predictable.
- ParseFault: base exception carrying message + read-only options and knowing how
  to render itself through rich.
- OptionError: the record produced for each user error found while parsing
  (message, offending token, optional applied option). Parsing never raises it;
  results collect it. Callers may raise it, or a ParseExit grouping several.
- trigger(): central entry point to surface a fault (raise, or print in shell mode).
- getdoc(): optional description lookup for a code from the host application.

Declaration mistakes (duplicate aliases, blank aliases, wrong types) are not
faults: they raise TypeError/ValueError at construction and never reach here.

Integration
- The matcher and ParseResult create OptionError instances with code/suggestions/hint
  options; ParseResult.raise_for_errors() wraps them in a ParseExit.
- In shell mode, trigger() prints the fault to stderr and exits with status 1.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import *

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - arity (211xx)
      • MISSING_ARGUMENT, TOO_MANY_ARGUMENTS, ARGUMENTS_NOT_ALLOWED
    - values (212xx)
      • INVALID_CHOICE, FILE_NOT_FOUND
    - routing (221xx)
      • MISSING_COMMAND, AMBIGUOUS_COMMAND, UNRECOGNIZED_TOKEN
    - input (231xx)
      • RESPONSE_FILE_NOT_FOUND
    - delegated (291xx)
      • DELEGATED_ERROR (custom rules and custom messages without a code)
    """
    # --- arity errors (211xx) ---
    MISSING_ARGUMENT            = 21101
    TOO_MANY_ARGUMENTS          = 21102
    ARGUMENTS_NOT_ALLOWED       = 21103

    # --- value errors (212xx) ---
    INVALID_CHOICE              = 21201
    FILE_NOT_FOUND              = 21202

    # --- routing errors (221xx) ---
    MISSING_COMMAND             = 22101
    AMBIGUOUS_COMMAND           = 22102
    UNRECOGNIZED_TOKEN          = 22111

    # --- input errors (231xx) ---
    RESPONSE_FILE_NOT_FOUND     = 23101

    # --- delegated errors (291xx) ---
    DELEGATED_ERROR             = 29131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))

    @property
    def title(self):
        """short lowercase title derived from the member name."""
        return self.name.lower().replace("_", " ")


def _palette(options, defaults, /):
    """
    build the (styler, text) helpers used by every __rich__ implementation.

    styles come from defaults, overridden by __main__.__styles__; with
    colorful=False every fragment is rendered plain.
    """
    styles = defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))
    colorful = options.get("colorful", True)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), style if colorful else "")

    return styler, text


class ParseFault(Exception):
    """
    base type for parse faults: a message plus free-form rendering options.

    common options
    - code (FaultCode), title, hint, suggestions, docs
    - prog: program name shown in the header (overridden by __main__.__prog__)
    - shell, fancy, colorful, deferred: rendering and trigger behaviour
    """

    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | Unset):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", FaultCode.DELEGATED_ERROR)

    @property
    def title(self):
        return self.options.get("title", self.code.title)

    @property
    def hint(self):
        return self.options.get("hint")

    def _prog(self):
        return self.options.get("prog", __package__)

    def __rich__(self):
        styler, text = _palette(self.options, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

        prog = text(getattr(__import__("__main__"), "__prog__", self._prog()), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.code.normalize(), styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        message = text(coalesce(self.message, ""), styler("error-message"))
        parts = [message]
        if self.hint:
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))

        if self.options.get("fancy", False):
            width = self.options.get("width")
            return Panel(Group(*parts), title=header, title_align="left", width=width)

        return Group(header, *parts)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class OptionError(ParseFault):
    """
    A user error found while parsing: (message, token, option).

    - message: non-blank text describing the error.
    - token: the offending raw token, non-empty (the alias that applied an option,
      or the unrecognized word).
    - option: the AppliedOption the error belongs to, or None (unrecognized tokens,
      missing response files).
    """

    def __init__(self, message, token, option=None, /, **options):
        if not isinstance(message, str):
            raise TypeError("option-error 'message' must be a string")
        elif not message.strip():
            raise ValueError("option-error 'message' cannot be empty")
        if not isinstance(token, str):
            raise TypeError("option-error 'token' must be a string")
        elif not token:
            raise ValueError("option-error 'token' cannot be empty")
        super().__init__(message, **options)
        self.token = token
        self.option = option

    @property
    def suggestions(self):
        return tuple(self.options.get("suggestions", ()))

    def _prog(self):
        if "prog" not in self.options and self.option is not None:
            return self.option.symbol.root.name
        return super()._prog()

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, self.token, self.option, **{**self.options, **overrides})


class ParseExit(ExceptionGroup):
    """
    Group of faults raised together once a parse is known to be unusable.
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad parse", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad parse", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        styler, text = _palette(self.options, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title (Bad Parse)
        })

        prog = getattr(__import__("__main__"), "__prog__", self.options.get("prog", __package__))
        header = Text.assemble("[ ", text(prog, styler("prog-name")), " — ", text(self.message.title(), styler("title")), " ]")

        propagated = {name: self.options[name] for name in ("colorful", "prog") if name in self.options}
        renders = [exception.__replace__(**propagated) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - with shell=True the fault is printed to stderr via rich and the process exits
      with status 1; otherwise the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ keyed by
    FaultCode; when the code is absent, None is returned.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "ParseFault",
    "OptionError",
    "ParseExit",
    "trigger",
    "getdoc",
)
