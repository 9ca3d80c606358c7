"""
Suggestion engine shared by error reporting ("did you mean") and completion.

suggest(candidates, text) keeps the candidates that contain text
(case-insensitive), drops duplicates, and orders prefix matches before interior
matches, each group alphabetically. An empty text matches every candidate, so
completing after a trailing space lists everything; no candidates means no
suggestions.
"""
from collections.abc import Iterable


def suggest(candidates, text, /):
    """
    Rank candidate words against a partially typed word.

    Parameters
    - candidates: Iterable[str]
    - text: str | None (None behaves like "")

    Returns
    - Iterator[str]: lazily yielded suggestions.

    Examples
    - list(suggest(["--verbose", "--version", "-v"], "ver")) -> ['--verbose', '--version']
    - list(suggest(["remove", "move"], "mo"))                -> ['move', 'remove']
    """
    if isinstance(candidates, str) or not isinstance(candidates, Iterable):
        raise TypeError("suggest() first argument must be an iterable of strings")
    if text is None:
        text = ""
    elif not isinstance(text, str):
        raise TypeError("suggest() second argument must be a string")

    return _rank(candidates, text.casefold())


def _rank(candidates, needle):
    matches = {
        candidate
        for candidate in candidates
        if needle in candidate.casefold()
    }
    yield from sorted(matches, key=lambda candidate: (not candidate.casefold().startswith(needle), candidate))


__all__ = (
    "suggest",
)
