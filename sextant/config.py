"""
Parser configuration.

Scope
- Configuration holds every lexical setting a Parser needs: argument delimiters,
  option prefixes, the end-of-arguments marker, and the unbundling and
  response-file toggles.
- It is built once per parser and read-only afterwards; nothing here is cached
  process-wide, so two parsers with different settings never interfere.

Defaults
- delimiters: "=" and ":"        (--name=Bob, /p:x)
- prefixes: "-" and "/"          (what makes a word option-like)
- end_of_arguments: "--"         (everything after it is literal)
- allow_unbundling: True         (-xyz -> -x -y -z)
- response_files: True           (@file splicing)
"""
from collections.abc import Iterable

from .utils import *


def _sanitize_characters(cls, metadata, field, /):
    """
    Internal: validate a collection of single characters (delimiters, prefixes).

    Raises
    - TypeError: if the value is a bare string, not iterable, or holds non-strings.
    - ValueError: if the collection is empty, holds anything but single characters,
      or repeats a character.
    """
    value = metadata[field]
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise TypeError(f"{cls.__typename__} {field!r} must be an iterable of characters")
    value = tuple(value)
    if not value:
        raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
    for character in value:
        if not isinstance(character, str):
            raise TypeError(f"{cls.__typename__} {field!r} must only contain strings")
        if len(character) != 1 or character.isspace():
            raise ValueError(f"{cls.__typename__} {field!r} must only contain single visible characters")
    if len(set(value)) != len(value):
        raise ValueError(f"{cls.__typename__} {field!r} cannot contain duplicates")
    metadata[field] = value


def _sanitize_marker(cls, metadata, /):
    if not isinstance(marker := metadata["end_of_arguments"], str):
        raise TypeError(f"{cls.__typename__} 'end_of_arguments' must be a string")
    elif not marker.strip() or marker != marker.strip():
        raise ValueError(f"{cls.__typename__} 'end_of_arguments' must be a non-blank word")


class Configuration(metaclass=ReflectiveType):
    """
    Immutable lexical settings for a Parser.

    All parameters are keyword-only and default to Unset; missing values are
    materialized with coalesce() to the defaults listed in the module docstring.
    """

    __introspectable__ = (
        "delimiters",
        "prefixes",
        "end_of_arguments",
        "allow_unbundling",
        "response_files",
    )

    def __init__(
            self,
            *,
            delimiters=Unset,
            prefixes=Unset,
            end_of_arguments=Unset,
            allow_unbundling=Unset,
            response_files=Unset,
    ):
        metadata = {
            "delimiters": coalesce(delimiters, ("=", ":")),
            "prefixes": coalesce(prefixes, ("-", "/")),
            "end_of_arguments": coalesce(end_of_arguments, "--"),
            "allow_unbundling": bool(coalesce(allow_unbundling, True)),
            "response_files": bool(coalesce(response_files, True)),
        }
        _sanitize_characters(type(self), metadata, "delimiters")
        _sanitize_characters(type(self), metadata, "prefixes")
        _sanitize_marker(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def __eq__(self, other):
        if not isinstance(other, Configuration):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in type(self).__introspectable__)

    def __hash__(self):
        return hash(tuple(getattr(self, name) for name in type(self).__introspectable__))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(**{
            name: getattr(self, name) for name in type(self).__introspectable__
        } | overrides)

    def has_prefix(self, word, /):
        """Whether word starts with one of the configured option prefixes."""
        return bool(word) and word[0] in self._prefixes


DEFAULT = Configuration()
"""Shared default configuration (read-only, safe to reuse across parsers)."""


__all__ = (
    "Configuration",
)
