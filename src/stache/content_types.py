"""Content types - output escaping policies selectable by pragma."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional


@dataclass(frozen=True)
class ContentType:
    """A named escaper applied to interpolated variables."""

    name: str
    escape: Callable[[str], str]


_HTML_ESCAPES = str.maketrans(
    {"<": "&lt;", ">": "&gt;", "&": "&amp;", '"': "&quot;", "'": "&#39;"}
)


def escape_html(text: str) -> str:
    return text.translate(_HTML_ESCAPES)


TEXT = ContentType("TEXT", lambda text: text)
HTML = ContentType("HTML", escape_html)


class ContentTypes:
    """Registry of content types known to a parser.

    Each registry is an independent object; registering a content type on
    one never affects templates compiled with another.
    """

    def __init__(self, types: Optional[Mapping[str, ContentType]] = None):
        self._types: Dict[str, ContentType] = {TEXT.name: TEXT, HTML.name: HTML}
        if types:
            self._types.update(types)

    def register(
        self, name: str, escape: ContentType | Callable[[str], str]
    ) -> ContentType:
        """Register an escaper under `name` and return the content type."""
        content_type = (
            escape if isinstance(escape, ContentType) else ContentType(name, escape)
        )
        self._types[name] = content_type
        return content_type

    def get(self, name: str) -> ContentType | None:
        return self._types.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._types
