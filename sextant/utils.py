"""
Sextant utilities (internal helpers, carefully exposed)

Scope
- Core building blocks shared by the lexer, the symbol tree, the matcher and the
  parse result, so that all of them read, print and default the same way.

Overview
- UnsetType / Unset
  • Singleton sentinel for “value not provided” that does not conflate with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, keeping legitimate falsey values like None/0/""/().

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables (rule validators,
    generated dunders) so tracebacks stay readable.

- mirror("attr")
  • Read-only property exposing a private backing field (self._attr); containers are
    handed out as read-only snapshots (tuple, frozenset, mappingproxy).

- ReflectiveType
  • Metaclass shared by symbols, rules, applied nodes, results and configuration:
    derives __typename__ from the class name, publishes __introspectable__ fields
    through mirror(), and generates __repr__/__rich_repr__.

Stability and contract
- Names in __all__ are re-exported by the package; anything else may change.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
"""
import builtins
import functools
import operator
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used wherever None is a legitimate value (a default supplier may return None,
    a symbol may have no help text) but the API still needs to tell “not given”
    apart from “given as None”. A single instance, Unset, is exposed.

    Characteristics
    - Boolean-false, distinct from None and 0.
    - repr(Unset) -> "Unset".
    - Sealed and singleton: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()
"""
Sentinel for “not provided”.

Notes
- Singleton, falsey, and never equal to None.
- Typical pattern: value = coalesce(user_value, default).
"""


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns the object unless it is Unset, in which case default is returned.
    Falsey values (None, 0, "", ()) are preserved as given.

    Examples
    - coalesce("--", "::")   -> "--"
    - coalesce(Unset, "::")  -> "::"
    - coalesce(None, "::")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name) -> decorator

    Raises
    - TypeError: on a non-callable target, a non-string name, a callable whose
      names cannot be updated, or a wrong number of arguments.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Recursively snapshot a container into its read-only counterpart.

    - str and named tuples (tokens): returned as-is, they are already immutable.
    - Sequence: tuple of frozen items.
    - Mapping: mappingproxy over a fresh dict of frozen values (keys untouched).
    - Set: frozenset of frozen items.
    - Anything else: returned as-is.
    """
    if isinstance(object, str) or hasattr(object, "_fields"):
        return object
    if isinstance(object, Sequence):
        return tuple(map(_freeze, object))
    if isinstance(object, Mapping):
        return MappingProxyType(dict(zip(object.keys(), map(_freeze, object.values()))))
    if isinstance(object, Set):
        return frozenset(map(_freeze, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private attribute "_{name}".

    Container values are returned as frozen snapshots, so callers can never
    mutate parser state (an applied node's children, a symbol's aliases) through
    the public surface.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


class ReflectiveType(type):
    """
    Metaclass giving sextant objects uniform introspection.

    Responsibilities
    - __typename__ is derived from the class name ("AppliedOption" -> "applied-option")
      and is used as the subject of every construction-time error message.
    - Every name listed in the class body's __introspectable__ becomes a read-only
      property backed by "_{name}" (see mirror()).
    - __repr__ and __rich_repr__ are generated from __displayable__ when declared,
      otherwise from __introspectable__. Classes that define their own __repr__
      keep it.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                field: mirror(field) for field in namespace.get("__introspectable__", ())
            },
            **options,
        )

        if "__repr__" not in namespace:
            @rename("__repr__")
            def __repr__(self):
                return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
            self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        return self


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",

    # Types
    "UnsetType",
    "ReflectiveType",

    # Constants
    "Unset",
)
