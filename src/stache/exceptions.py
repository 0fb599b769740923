"""Stache Exceptions

Custom exceptions for the stache template engine.
"""

from __future__ import annotations

from typing import NamedTuple


class ErrorLocation(NamedTuple):
    """Where in the template text a parse error occurred (1-based)."""

    line: str
    line_number: int
    column: int


class StacheError(Exception):
    """Base exception for all stache errors."""

    pass


class ParseError(StacheError):
    """Base class for errors raised while compiling a template.

    The parser fills in `location` from the failing position before the
    error leaves `Parser.parse`.
    """

    message = "template parse error"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        self.location: ErrorLocation | None = None
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return (
            f"{self.message} (line {self.location.line_number}, "
            f"column {self.location.column}): {self.location.line!r}"
        )


class ScanOverflow(ParseError):
    """Raised when the scanner runs past either end of its buffer."""

    message = "unexpected end of template"


class SectionCloseNameIncorrect(ParseError):
    """Raised when a close tag does not match the open section."""

    message = "section close tag does not match the open section"


class UnfinishedName(ParseError):
    """Raised when a tag is badly formatted or never terminated."""

    message = "unfinished tag name"


class ExpectedSectionEnd(ParseError):
    """Raised when the template ends while a section is still open."""

    message = "expected section end tag"


class InvalidSetDelimiter(ParseError):
    """Raised when a set-delimiter tag is malformed."""

    message = "invalid set delimiter tag"


class TransformAppliedToInheritanceSection(ParseError):
    """Raised when a transform is applied to an inheritance block."""

    message = "transforms cannot be applied to inheritance blocks"


class IllegalTokenInsideInheritSection(ParseError):
    """Raised when a partial-with-inheritance body holds anything but blocks."""

    message = "only block definitions are allowed inside an inheriting partial"


class InvalidConfigVariableSyntax(ParseError):
    """Raised when a pragma tag is malformed."""

    message = "invalid configuration pragma syntax"


class UnrecognisedConfigVariable(ParseError):
    """Raised when a pragma names an unknown variable or value."""

    message = "unrecognised configuration variable"


class TemplateLoadError(StacheError):
    """Raised when a library template file cannot be read or parsed."""

    def __init__(self, filename: str, error: Exception):
        self.filename = filename
        self.error = error
        super().__init__(f"{filename}: {error}")


class RenderError(StacheError):
    """Raised when a token tree breaks a rendering contract."""

    pass


class ConfigError(StacheError):
    """Raised when configuration or context input cannot be loaded."""

    pass
