"""
Applied options: the nodes the matcher builds while consuming tokens.

An AppliedOption records that a symbol was invoked: which symbol, the token that
triggered it, the argument tokens bound so far and the applied children. It is
mutated only by the matcher; every speculative argument bind is an explicit
trial (append, validate against the symbol's arguments rule, commit or revert).
"""
from collections import deque

from .faults import OptionError
from .lexer import TokenKind
from .symbols import Option
from .utils import *


class AppliedOption(metaclass=ReflectiveType):
    """
    Runtime record of an invoked symbol.

    Parameters
    - symbol: Option | Command
    - token: Unset | str, the raw alias that triggered it (defaults to str(symbol)).

    Arguments
    - arguments returns the bound argument values; when none are bound and the
      rule supplies a default, it returns (default,) instead. The default is
      asked for again on every access.
    """

    __introspectable__ = (
        "symbol",
        "token",
        "children",
    )
    __displayable__ = (
        "token",
        "arguments",
        "children",
    )

    def __init__(self, symbol, token=Unset, /):
        if not isinstance(symbol, Option):
            raise TypeError(f"{type(self).__typename__} symbol must be an option or a command")
        token = coalesce(token, str(symbol))
        if not isinstance(token, str):
            raise TypeError(f"{type(self).__typename__} token must be a string")
        elif not token:
            raise ValueError(f"{type(self).__typename__} token cannot be empty")

        self._symbol = symbol
        self._token = token
        self._arguments = []
        self._children = []
        self._accepting = True

    @property
    def arguments(self):
        if self._arguments:
            return tuple(self._arguments)
        if (default := self._symbol.rule.default_value()) is not None:
            return (default,)
        return ()

    @property
    def name(self):
        return self._symbol.name

    @property
    def aliases(self):
        return self._symbol.aliases

    @property
    def is_command(self):
        return self._symbol.is_command

    def has_alias(self, alias, /):
        return self._symbol.has_alias(alias)

    def has_raw_alias(self, alias, /):
        return self._symbol.has_raw_alias(alias)

    def try_take(self, token, /):
        """
        Offer a token to this node.

        - OPTION_LIKE: accepted when it names an applied child (the child is
          respecified and returned) or a child symbol (a new applied child is
          attached and returned).
        - ARGUMENT: accepted when binding it keeps the arguments rule valid
          (returns self); otherwise the bind is reverted. An option only considers
          an argument right after it was specified (or respecified); commands
          always do.

        Returns the node that accepted the token, or None.
        """
        match token.kind:
            case TokenKind.ARGUMENT if self._accepting or self.is_command:
                taker = self if self._trial(token.value) else None
            case TokenKind.OPTION_LIKE:
                taker = self._take_symbol(token.value)
            case _:
                taker = None
        self._accepting = False
        return taker

    def respecify(self):
        """Let the node consider one more argument (its alias was given again)."""
        self._accepting = True

    def _take_symbol(self, alias):
        for child in reversed(self._children):
            if child.has_raw_alias(alias):
                child.respecify()
                return child
        if (symbol := self._symbol.child(alias)) is None:
            return None
        child = AppliedOption(symbol, alias)
        self._children.append(child)
        return child

    def _trial(self, value):
        self._arguments.append(value)
        if self._symbol.arguments_rule.check(self) is None:
            return True
        self._arguments.pop()
        return False

    def bind(self, value, /):
        """Bind an argument without validation (surplus binding)."""
        if not isinstance(value, str):
            raise TypeError(f"{type(self).__typename__} argument must be a string")
        self._arguments.append(value)

    def validate(self):
        """Run the symbol's effective rule once; returns an OptionError or None."""
        if (failure := self._symbol.rule.check(self)) is None:
            return None
        code, message = failure
        return OptionError(message, self._token, self, code=code)

    def value(self):
        """
        Materialize the node through its rule (e.g., the single argument, a tuple of
        arguments, True for presence flags).

        Raises
        - ValueError wrapping whatever the materializer raised.
        """
        try:
            return self._symbol.rule.materialize(self)
        except Exception as exception:
            described = ", ".join(self.arguments) if self.arguments else "(none)"
            raise ValueError(
                f"an exception occurred while getting the value for {self._symbol.name!r} "
                f"based on argument(s): {described}"
            ) from exception

    def walk(self):
        """Yield this node and all applied descendants, breadth-first."""
        queue = deque([self])
        while queue:
            yield (node := queue.popleft())
            queue.extend(node._children)

    def __getitem__(self, alias):
        for child in self._children:
            if child.has_alias(alias):
                return child
        raise KeyError(alias)

    def __contains__(self, alias):
        return any(child.has_alias(alias) for child in self._children)

    def diagram(self):
        """Bracketed view: [ symbol [ child ... ] <argument> ... ]"""
        parts = ["[", str(self._symbol)]
        parts.extend(child.diagram() for child in self._children)
        parts.extend(f"<{argument}>" for argument in self.arguments)
        parts.append("]")
        return " ".join(parts)

    def __str__(self):
        return self.diagram()


__all__ = (
    "AppliedOption",
)
