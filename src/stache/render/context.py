"""Render context - the per-frame state carried through a render."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Mapping, Optional, Tuple

from stache.ast.spec import TokenTree
from stache.content_types import HTML, ContentType

if TYPE_CHECKING:
    from stache.library import Library


@dataclass(frozen=True)
class SequenceContext:
    """Position of the current element while rendering a sequence."""

    first: bool = False
    last: bool = False
    index: int = 0


@dataclass(frozen=True)
class RenderContext:
    """Immutable render state; every transition returns a new context."""

    stack: Tuple[Any, ...]
    sequence: Optional[SequenceContext] = None
    indentation: Optional[str] = None
    overrides: Mapping[str, TokenTree] = field(default_factory=dict)
    content_type: ContentType = HTML
    library: Optional["Library"] = None

    @classmethod
    def root(cls, value: Any, library: Optional["Library"] = None) -> "RenderContext":
        return cls(stack=(value,), library=library)

    @property
    def top(self) -> Any:
        return self.stack[-1]

    def with_object(self, value: Any) -> "RenderContext":
        return replace(self, stack=self.stack + (value,), sequence=None)

    def with_sequence(self, value: Any, sequence: SequenceContext) -> "RenderContext":
        return replace(self, stack=self.stack + (value,), sequence=sequence)

    def with_partial(
        self,
        indentation: Optional[str],
        overrides: Optional[Mapping[str, TokenTree]],
    ) -> "RenderContext":
        """Context for rendering a partial.

        Overrides already inherited win over ones introduced by this
        partial, so the override nearest the render root is used.
        """
        merged = self.overrides
        if overrides:
            merged = {**overrides, **self.overrides}
        return replace(
            self,
            sequence=None,
            indentation=self._indent(indentation),
            overrides=merged,
            content_type=HTML,
        )

    def with_block_expansion(self, indentation: Optional[str]) -> "RenderContext":
        return replace(self, sequence=None, indentation=self._indent(indentation))

    def with_content_type(self, content_type: ContentType) -> "RenderContext":
        return replace(self, content_type=content_type)

    def _indent(self, indentation: Optional[str]) -> Optional[str]:
        if indentation is None:
            return self.indentation
        return (self.indentation or "") + indentation
