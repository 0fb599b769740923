"""Stache - logic-less mustache templates"""

from stache._version import __version__
from stache.content_types import HTML, TEXT, ContentType, ContentTypes
from stache.exceptions import (
    ConfigError,
    ErrorLocation,
    ParseError,
    RenderError,
    StacheError,
    TemplateLoadError,
)
from stache.library import Library
from stache.template import Template
from stache.values import (
    MISSING,
    CustomRenderable,
    Lambda,
    Parent,
    Transformable,
    ValueAccessor,
)

__all__ = [
    "__version__",
    # templates
    "Template",
    "Library",
    # content types
    "ContentType",
    "ContentTypes",
    "HTML",
    "TEXT",
    # values
    "MISSING",
    "CustomRenderable",
    "Lambda",
    "Parent",
    "Transformable",
    "ValueAccessor",
    # errors
    "StacheError",
    "ParseError",
    "ErrorLocation",
    "TemplateLoadError",
    "RenderError",
    "ConfigError",
]
