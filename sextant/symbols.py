r"""
Sextant symbol tree: the grammar a parser matches against.

Overview
- Option
  • One or more aliases ("-v", "--verbose", "/?"), help text, an arguments rule
    (NoArguments by default), child symbols and a hidden flag.
- Command
  • An Option with is_command = True. When it has sub-commands it additionally
    requires exactly one of them to be applied. It also decides whether unmatched
    tokens under it are reported as errors (treat_unmatched_as_errors).

Rules of a symbol
- arguments_rule = explicit rule AND ZeroOrMoreOf(children); the matcher uses it
  while speculatively binding argument tokens.
- rule = arguments_rule, AND ExactlyOneCommandRequired for commands with
  sub-commands; ParseResult validates every applied node against it.

Construction (fails fast, never at parse time)
- aliases: at least one; strings only; non-blank, no whitespace, not made only of
  prefix characters; unique within the symbol.
- children: symbols only; no two children share an alias; a symbol belongs to at
  most one parent. The parent link is a weak reference held by the child.
- help: Unset/None or a non-empty string.
- rule: an ArgumentsRule.

Naming
- name: the longest alias with its prefix characters ("-", "/") stripped.
- str(symbol): the name for a command; for an option the alias whose stripped form
  is the name (e.g., "--verbose").
- Lookups (has_alias, symbol[alias], alias in symbol) ignore prefix characters, so
  tool["verbose"] finds "--verbose". The matcher only ever uses exact aliases
  (has_raw_alias, child).

Quick example:
    >>> tool = Command("tool", children=[
    ...     Option("-v", "--verbose"),
    ...     Command("add", rule=ExactlyOneArgument()),
    ... ])
    >>> str(tool["--verbose"]), tool["add"].parent.name
    ('--verbose', 'tool')
"""
import weakref
from collections import deque
from collections.abc import Iterable

from .rules import And, ArgumentsRule, ExactlyOneCommandRequired, NoArguments, ZeroOrMoreOf
from .utils import *

_PREFIXES = "-/"


def _sanitize_aliases(cls, metadata, /):
    """
    Internal: validate the aliases of a symbol and derive its name.

    Raises
    - TypeError: if an alias is not a string.
    - ValueError: if there are no aliases, an alias is blank, contains whitespace,
      consists only of prefix characters, or is repeated.
    """
    aliases = metadata["aliases"]
    if not aliases:
        raise ValueError(f"{cls.__typename__} must have at least one alias")
    for alias in aliases:
        if not isinstance(alias, str):
            raise TypeError(f"{cls.__typename__} alias must be a string")
        if not alias.strip():
            raise ValueError(f"{cls.__typename__} alias cannot be null, empty, or consist entirely of whitespace")
        if any(character.isspace() for character in alias):
            raise ValueError(f"{cls.__typename__} alias {alias!r} cannot contain whitespace")
        if not alias.lstrip(_PREFIXES):
            raise ValueError(f"{cls.__typename__} alias {alias!r} cannot consist only of prefix characters")
    if len(set(aliases)) != len(aliases):
        raise ValueError(f"{cls.__typename__} aliases cannot contain duplicates")

    metadata["aliases"] = tuple(aliases)
    metadata["name"] = max((alias.lstrip(_PREFIXES) for alias in aliases), key=len)


def _sanitize_help(cls, metadata, /):
    if not isinstance(help := metadata["help"], str | Unset | None):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")
    elif isinstance(help, str) and not (help := help.strip()):
        raise ValueError(f"{cls.__typename__} 'help' cannot be empty")
    metadata["help"] = coalesce(help)


def _sanitize_children(cls, metadata, /):
    """
    Internal: validate child symbols and the uniqueness of their aliases.
    """
    children = metadata["children"]
    if isinstance(children, str) or not isinstance(children, Iterable):
        raise TypeError(f"{cls.__typename__} 'children' must be an iterable of symbols")
    children = tuple(children)

    taken = {}
    seen = set()
    for child in children:
        if not isinstance(child, Option):
            raise TypeError(f"{cls.__typename__} children must be options or commands")
        if child.parent is not None:
            raise ValueError(f"{child.__typename__} {child.name!r} already belongs to {child.parent.name!r}")
        if id(child) in seen:
            raise ValueError(f"{child.__typename__} {child.name!r} is listed twice")
        seen.add(id(child))
        for alias in child.aliases:
            if taken.setdefault(alias, child) is not child:
                raise ValueError(f"{child.__typename__} alias {alias!r} is already in use")

    metadata["children"] = children


class Option(metaclass=ReflectiveType):
    """
    Named grammar element: aliases, help, an arguments rule and children.

    Parameters
    - *aliases: str (at least one)
    - help: Unset | str
    - rule: Unset | ArgumentsRule (defaults to NoArguments())
    - children: Iterable[Option | Command]
    - hidden: bool, suppresses the symbol from suggestions and completion.
    """

    __introspectable__ = (
        "aliases",
        "name",
        "help",
        "rule",
        "arguments_rule",
        "children",
        "hidden",
    )
    __displayable__ = (
        "aliases",
        "help",
        "rule",
        "children",
        "hidden",
    )

    is_command = False

    def __init__(self, *aliases, help=Unset, rule=Unset, children=(), hidden=False):
        if not isinstance(rule := coalesce(rule, NoArguments()), ArgumentsRule):
            raise TypeError(f"{type(self).__typename__} 'rule' must be an arguments-rule")

        metadata = {
            "aliases": aliases,
            "help": help,
            "children": children,
            "hidden": bool(hidden),
        }
        _sanitize_aliases(type(self), metadata)
        _sanitize_help(type(self), metadata)
        _sanitize_children(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._parent = None
        for child in self._children:
            child._parent = weakref.ref(self)

        self._arguments_rule = And(rule, ZeroOrMoreOf(*self._children))
        self._rule = self._arguments_rule

    @property
    def parent(self):
        """The owning symbol, or None for a top-level symbol."""
        return self._parent() if self._parent is not None else None

    @property
    def root(self):
        """The topmost symbol of the tree this symbol belongs to."""
        child, parent = self, self.parent
        while parent is not None:
            child, parent = parent, parent.parent
        return child

    def has_alias(self, alias, /):
        """
        Whether alias names this symbol, with or without its prefix characters
        ("--verbose", "-verbose" and "verbose" all name an option declared "--verbose").
        """
        if not isinstance(alias, str):
            return False
        return alias.lstrip(_PREFIXES) in (known.lstrip(_PREFIXES) for known in self._aliases)

    def has_raw_alias(self, alias, /):
        """Whether alias is exactly one of the declared aliases."""
        return alias in self._aliases

    def child(self, alias, /):
        """The child declared with exactly this alias, or None."""
        return next((child for child in self._children if child.has_raw_alias(alias)), None)

    def __getitem__(self, alias):
        for child in self._children:
            if child.has_alias(alias):
                return child
        raise KeyError(alias)

    def __contains__(self, alias):
        return any(child.has_alias(alias) for child in self._children)

    def walk(self):
        """Yield this symbol and all of its descendants, breadth-first."""
        queue = deque([self])
        while queue:
            yield (symbol := queue.popleft())
            queue.extend(symbol._children)

    def __str__(self):
        if self.is_command:
            return self._name
        return next(alias for alias in self._aliases if alias.lstrip(_PREFIXES) == self._name)


class Command(Option):
    """
    Command symbol. Adds:

    - treat_unmatched_as_errors: bool (default True); when this is the deepest
      applied command, unmatched tokens become "unrecognized" errors.
    - ExactlyOneCommandRequired in its effective rule when any child is a command.
    """

    __introspectable__ = (
        "aliases",
        "name",
        "help",
        "rule",
        "arguments_rule",
        "children",
        "hidden",
        "treat_unmatched_as_errors",
    )
    __displayable__ = (
        "aliases",
        "help",
        "rule",
        "children",
        "hidden",
        "treat_unmatched_as_errors",
    )

    is_command = True

    def __init__(self, *aliases, help=Unset, rule=Unset, children=(), hidden=False, treat_unmatched_as_errors=True):
        super().__init__(*aliases, help=help, rule=rule, children=children, hidden=hidden)
        self._treat_unmatched_as_errors = bool(treat_unmatched_as_errors)
        if any(child.is_command for child in self._children):
            self._rule = self._arguments_rule & ExactlyOneCommandRequired()


__all__ = (
    "Option",
    "Command",
)
