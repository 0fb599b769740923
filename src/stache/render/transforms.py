"""Transforms - named functions applied to values with `name(value)` syntax.

One table covers every value type:

- strings: empty, capitalized, lowercased, uppercased, reversed
- sequences: first, last, reversed, count, empty, sorted
- sets: count, empty, sorted
- mappings: count, empty, enumerated, sorted
- numbers: equalzero, plusone, minusone, even, odd
- sequence context: first, last, index, even, odd

A transform that does not apply to the value returns `MISSING`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence, Set
from typing import Any, Callable, Dict, List

from stache.render.context import SequenceContext
from stache.values import MISSING, Transformable


_WORD = re.compile(r"\S+")


def _capitalized(text: str) -> str:
    # words are whitespace-delimited, so "world's" stays "World's"
    return _WORD.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), text)


def _integral(number: Any) -> bool:
    return isinstance(number, int) or number.is_integer()


def _sorted(values: Any) -> Any:
    try:
        return sorted(values)
    except TypeError:
        return MISSING


def _enumerated(mapping: Mapping) -> List[Dict[str, Any]]:
    return [{"key": key, "value": value} for key, value in mapping.items()]


def _sorted_items(mapping: Mapping) -> Any:
    try:
        keys = sorted(mapping)
    except TypeError:
        return MISSING
    return [{"key": key, "value": mapping[key]} for key in keys]


STRING_TRANSFORMS: Dict[str, Callable[[str], Any]] = {
    "empty": lambda s: len(s) == 0,
    "capitalized": _capitalized,
    "lowercased": lambda s: s.lower(),
    "uppercased": lambda s: s.upper(),
    "reversed": lambda s: s[::-1],
}

SEQUENCE_TRANSFORMS: Dict[str, Callable[[Sequence], Any]] = {
    "first": lambda s: s[0] if len(s) else MISSING,
    "last": lambda s: s[-1] if len(s) else MISSING,
    "reversed": lambda s: list(reversed(s)),
    "count": len,
    "empty": lambda s: len(s) == 0,
    "sorted": _sorted,
}

SET_TRANSFORMS: Dict[str, Callable[[Set], Any]] = {
    "count": len,
    "empty": lambda s: len(s) == 0,
    "sorted": _sorted,
}

MAPPING_TRANSFORMS: Dict[str, Callable[[Mapping], Any]] = {
    "count": len,
    "empty": lambda m: len(m) == 0,
    "enumerated": _enumerated,
    "sorted": _sorted_items,
}

NUMBER_TRANSFORMS: Dict[str, Callable[[Any], Any]] = {
    "equalzero": lambda n: n == 0,
    "plusone": lambda n: n + 1,
    "minusone": lambda n: n - 1,
    "even": lambda n: n % 2 == 0 if _integral(n) else MISSING,
    "odd": lambda n: n % 2 == 1 if _integral(n) else MISSING,
}

SEQUENCE_CONTEXT_TRANSFORMS: Dict[str, Callable[[SequenceContext], Any]] = {
    "first": lambda c: c.first,
    "last": lambda c: c.last,
    "index": lambda c: c.index,
    "even": lambda c: c.index % 2 == 0,
    "odd": lambda c: c.index % 2 == 1,
}


def _table_for(value: Any) -> Dict[str, Callable[[Any], Any]]:
    if isinstance(value, str):
        return STRING_TRANSFORMS
    if isinstance(value, bool):
        return {}
    if isinstance(value, (int, float)):
        return NUMBER_TRANSFORMS
    if isinstance(value, SequenceContext):
        return SEQUENCE_CONTEXT_TRANSFORMS
    if isinstance(value, Mapping):
        return MAPPING_TRANSFORMS
    if isinstance(value, Set):
        return SET_TRANSFORMS
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return SEQUENCE_TRANSFORMS
    return {}


def apply_transform(value: Any, name: str) -> Any:
    """Apply transform `name` to `value`, returning `MISSING` on failure."""
    if isinstance(value, Transformable):
        result = value.transform(name)
        return MISSING if result is None else result
    transform = _table_for(value).get(name)
    if transform is None:
        return MISSING
    return transform(value)
