"""Resolver - looks up variable names against the render context.

Name forms:
- `.` is the current object (top of the stack)
- `` (empty) with a transform chain is the current sequence context,
  which is how `{{index()}}` reaches iteration metadata
- `.a.b` resolves only inside the current object, never climbing
- `a.b.c` finds `a` in the nearest stack frame that has it, then resolves
  `b` and `c` strictly inside that value

Any miss along the path, and any failing transform, is a miss for the
whole expression.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from stache.render.context import RenderContext
from stache.render.transforms import apply_transform
from stache.values import MISSING, ValueAccessor, as_lambda


class Resolver:
    """Resolves `name` plus transform chain to a value or `MISSING`."""

    def __init__(self, accessor: ValueAccessor | None = None):
        self.accessor = accessor or ValueAccessor()

    def resolve(
        self, name: str, transforms: Sequence[str], context: RenderContext
    ) -> Any:
        value = self._lookup(name, transforms, context)
        if value is MISSING:
            return MISSING
        for transform in transforms:
            value = apply_transform(value, transform)
            if value is MISSING:
                return MISSING
        return value

    def _lookup(self, name: str, transforms: Sequence[str], context: RenderContext) -> Any:
        if name == ".":
            return context.top
        if name == "":
            if transforms and context.sequence is not None:
                return context.sequence
            return MISSING

        segments = [segment for segment in name.split(".") if segment]
        if not segments:
            return MISSING
        if name.startswith("."):
            return self._walk(context.top, segments)

        first, rest = segments[0], segments[1:]
        for frame in reversed(context.stack):
            value = self.accessor.child(frame, first)
            if value is not MISSING:
                return self._walk(value, rest)
        return MISSING

    def _walk(self, value: Any, segments: Iterable[str]) -> Any:
        for segment in segments:
            value = call_lambda(value)
            value = self.accessor.child(value, segment)
            if value is MISSING:
                return MISSING
        return value


def call_lambda(value: Any) -> Any:
    """Call lambdas with empty input until something else comes back."""
    fn = as_lambda(value)
    while fn is not None:
        value = fn("")
        fn = as_lambda(value)
    return value
