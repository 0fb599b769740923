"""Token tree spec - the compiled form of a template."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union

from stache.content_types import ContentType


@dataclass(frozen=True)
class Text:
    """Literal template text, emitted verbatim."""

    text: str


@dataclass(frozen=True)
class Variable:
    """`{{name}}` - escaped by the active content type."""

    name: str
    transforms: Tuple[str, ...] = ()


@dataclass(frozen=True)
class UnescapedVariable:
    """`{{{name}}}` or `{{&name}}` - emitted raw."""

    name: str
    transforms: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Section:
    """`{{#name}}...{{/name}}`.

    `text` keeps the raw source between the tags; lambdas receive it.
    """

    name: str
    transforms: Tuple[str, ...] = ()
    body: "TokenTree" = ()
    text: str = ""


@dataclass(frozen=True)
class InvertedSection:
    """`{{^name}}...{{/name}}`."""

    name: str
    transforms: Tuple[str, ...] = ()
    body: "TokenTree" = ()


@dataclass(frozen=True)
class BlockDefinition:
    """`{{$name}}...{{/name}}` inside a `{{<partial}}` body: an override."""

    name: str
    body: "TokenTree" = ()


@dataclass(frozen=True)
class BlockExpansion:
    """`{{$name}}...{{/name}}` anywhere else: a block with default content."""

    name: str
    default: "TokenTree" = ()
    indentation: Optional[str] = None


@dataclass(frozen=True)
class Partial:
    """`{{>name}}`, or `{{<name}}...{{/name}}` when `overrides` is set."""

    name: str
    indentation: Optional[str] = None
    overrides: Optional[Dict[str, "TokenTree"]] = field(default=None, hash=False)


@dataclass(frozen=True)
class DynamicPartial:
    """`{{>*name}}` - the partial name is looked up in the render data."""

    name: str
    indentation: Optional[str] = None
    overrides: Optional[Dict[str, "TokenTree"]] = field(default=None, hash=False)


@dataclass(frozen=True)
class ContentTypePragma:
    """`{{%CONTENT_TYPE:name}}` - switches escaping for the rest of the template."""

    content_type: ContentType


Token = Union[
    Text,
    Variable,
    UnescapedVariable,
    Section,
    InvertedSection,
    BlockDefinition,
    BlockExpansion,
    Partial,
    DynamicPartial,
    ContentTypePragma,
]

TokenTree = Tuple[Token, ...]
