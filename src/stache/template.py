"""Template - a compiled template and the entry point for rendering it."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Union

from stache.ast.parser import Parser
from stache.ast.spec import TokenTree
from stache.content_types import ContentTypes
from stache.render.context import RenderContext
from stache.render.renderer import Renderer

if TYPE_CHECKING:
    from stache.library import Library


class Template:
    """Template text compiled once into a token tree.

    Args:
        text: Mustache template source.
        content_types: Registry for `{{%CONTENT_TYPE:...}}` pragmas.
        filename: Where the text was read from, if anywhere.

    Raises:
        ParseError: If the text is not a valid template.
    """

    def __init__(
        self,
        text: str,
        *,
        content_types: ContentTypes | None = None,
        filename: Optional[str] = None,
    ):
        self.text = text
        self.filename = filename
        self.content_types = content_types or ContentTypes()
        self.tokens: TokenTree = Parser(self.content_types).parse(text)

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        *,
        content_types: ContentTypes | None = None,
        encoding: str = "utf-8",
    ) -> "Template":
        path = Path(path)
        return cls(
            path.read_text(encoding=encoding),
            content_types=content_types,
            filename=str(path),
        )

    def render(self, value: Any = None, library: Optional["Library"] = None) -> str:
        """Render against `value`, resolving partials from `library`."""
        if library is not None:
            renderer = library.renderer
        else:
            renderer = Renderer(self.content_types)
        return renderer.render(self.tokens, RenderContext.root(value, library))

    def __repr__(self) -> str:
        if self.filename:
            return f"Template(filename={self.filename!r})"
        return f"Template({self.text[:40]!r})"
