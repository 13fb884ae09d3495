from __future__ import annotations

from typing import Any, Iterable, Sequence

from pagewalk.utils.types import T, get_field


def matches(item: Any, term: str, fields: Iterable[str]) -> bool:
    """True if any of ``fields`` holds a string containing ``term``.

    Comparison is case-insensitive. Missing and non-string values never match.
    """
    needle = term.casefold()
    for field in fields:
        value = get_field(item, field)
        if isinstance(value, str) and needle in value.casefold():
            return True
    return False


def apply_search(items: Sequence[T], term: str, fields: Iterable[str]) -> list[T]:
    """Filter an in-memory batch by substring search.

    A blank term or an empty field set returns the batch unchanged.
    """
    fields = tuple(fields)
    if not term.strip() or not fields:
        return list(items)
    return [item for item in items if matches(item, term, fields)]
