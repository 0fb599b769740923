"""Parser - compiles mustache template text into a token tree."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import List, NamedTuple, Optional, Tuple

from stache.ast.scanner import Scanner
from stache.ast.spec import (
    BlockDefinition,
    BlockExpansion,
    ContentTypePragma,
    DynamicPartial,
    InvertedSection,
    Partial,
    Section,
    Text,
    Token,
    TokenTree,
    UnescapedVariable,
    Variable,
)
from stache.content_types import ContentTypes
from stache.exceptions import (
    ExpectedSectionEnd,
    IllegalTokenInsideInheritSection,
    InvalidConfigVariableSyntax,
    InvalidSetDelimiter,
    ParseError,
    ScanOverflow,
    SectionCloseNameIncorrect,
    TransformAppliedToInheritanceSection,
    UnfinishedName,
    UnrecognisedConfigVariable,
)

NAME_CHARS = frozenset(
    "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ.-_?"
)
SECTION_NAME_CHARS = NAME_CHARS | frozenset("()")
PARTIAL_NAME_CHARS = NAME_CHARS | frozenset("/")
CLOSE_NAME_CHARS = SECTION_NAME_CHARS | frozenset("/")

# `name(argument)` where name has no brackets
_CALL = re.compile(r"^([^()]+)\((.*)\)$")


def _is_inline_space(c: str) -> bool:
    return c == " " or c == "\t"


@dataclass(frozen=True)
class ParserState:
    """State threaded through the recursive descent.

    `inherit` is only true directly inside a `{{<partial}}` body, where
    `{{$name}}` tags define overrides instead of expanding blocks.
    """

    section_name: Optional[str] = None
    section_transforms: Tuple[str, ...] = ()
    new_line: bool = True
    start_delimiter: str = "{{"
    end_delimiter: str = "}}"
    inherit: bool = False

    def with_section(
        self,
        name: str,
        transforms: Tuple[str, ...] = (),
        new_line: bool = False,
        inherit: bool = False,
    ) -> "ParserState":
        return replace(
            self,
            section_name=name,
            section_transforms=transforms,
            new_line=new_line,
            inherit=inherit,
        )

    def with_delimiters(self, start: str, end: str) -> "ParserState":
        return replace(self, start_delimiter=start, end_delimiter=end)


class _Body(NamedTuple):
    tokens: TokenTree
    # offset where the close tag starts
    end: int
    # whether the close tag consumed its line
    standalone: bool


class Parser:
    """Compiles template text into a `TokenTree`.

    Args:
        content_types: Registry consulted by `{{%CONTENT_TYPE:...}}` pragmas.
            A fresh registry with `TEXT` and `HTML` is used when omitted.
    """

    def __init__(self, content_types: ContentTypes | None = None):
        self.content_types = content_types or ContentTypes()

    def parse(self, text: str) -> TokenTree:
        """Parse template text.

        Raises:
            ParseError: With `location` set to the line and column where
                parsing failed.
        """
        scanner = Scanner(text)
        try:
            return self._parse(scanner, ParserState()).tokens
        except ParseError as exc:
            if exc.location is None:
                exc.location = scanner.location()
            raise

    def _parse(self, scanner: Scanner, state: ParserState) -> _Body:
        tokens: List[Token] = []
        whitespace = ""

        while not scanner.reached_end():
            if state.new_line:
                whitespace = scanner.read_while(_is_inline_space)

            text, found_tag = self._read_text(scanner, state)
            if not found_tag:
                newline = scanner.newline_length()
                if newline:
                    tokens.append(Text(whitespace + text + scanner.read_exact(newline)))
                    whitespace = ""
                    state = replace(state, new_line=True)
                    continue
                if whitespace or text:
                    tokens.append(Text(whitespace + text))
                break

            # text before the tag ends any chance of a standalone line
            if text:
                tokens.append(Text(whitespace + text))
                whitespace = ""
                state = replace(state, new_line=False)

            if scanner.reached_end():
                raise UnfinishedName()
            tag_start = scanner.position - len(state.start_delimiter)
            sigil = scanner.current()
            standalone = False

            if sigil == "#" or sigil == "^":
                scanner.advance()
                name, transforms = self._parse_name(scanner, state)
                body_start = scanner.position
                standalone = self._is_standalone(scanner, state)
                if not standalone and whitespace:
                    tokens.append(Text(whitespace))
                body = self._parse(
                    scanner, state.with_section(name, transforms, new_line=standalone)
                )
                if sigil == "#":
                    raw = scanner.text[body_start : body.end]
                    tokens.append(Section(name, transforms, body.tokens, raw))
                else:
                    tokens.append(InvertedSection(name, transforms, body.tokens))
                standalone = body.standalone

            elif sigil == "$":
                scanner.advance()
                name, transforms = self._parse_name(scanner, state)
                if transforms:
                    raise TransformAppliedToInheritanceSection()
                standalone = self._is_standalone(scanner, state)
                body_start = scanner.position
                indentation = None
                if not standalone and whitespace:
                    indentation = whitespace
                    tokens.append(Text(whitespace))
                body = self._parse(scanner, state.with_section(name, new_line=standalone))
                if state.inherit:
                    block = body.tokens
                    if standalone:
                        source = scanner.text[body_start : body.end]
                        indent = source[: len(source) - len(source.lstrip(" \t"))]
                        block = _dedent(block, indent)
                    tokens.append(BlockDefinition(name, block))
                else:
                    tokens.append(BlockExpansion(name, body.tokens, indentation))
                standalone = body.standalone

            elif sigil == "/":
                scanner.advance()
                position = scanner.position
                name, transforms = self._parse_close_name(scanner, state)
                if name != state.section_name or transforms != state.section_transforms:
                    scanner.restore(position)
                    raise SectionCloseNameIncorrect(
                        f"expected close tag for {state.section_name!r}, found {name!r}"
                        if state.section_name is not None
                        else f"close tag {name!r} without an open section"
                    )
                standalone = self._is_standalone(scanner, state)
                if not standalone and whitespace:
                    tokens.append(Text(whitespace))
                return _Body(tuple(tokens), tag_start, standalone)

            elif sigil == "!":
                scanner.advance()
                try:
                    scanner.read_until(state.end_delimiter, consume=True)
                except ScanOverflow:
                    raise UnfinishedName("unterminated comment") from None
                standalone = self._is_standalone(scanner, state)
                if not standalone and whitespace:
                    tokens.append(Text(whitespace))

            elif sigil == "{" or sigil == "&":
                if whitespace:
                    tokens.append(Text(whitespace))
                scanner.advance()
                closing = "}" if sigil == "{" else ""
                name, transforms = self._parse_name(scanner, state, closing=closing)
                tokens.append(UnescapedVariable(name, transforms))

            elif sigil == ">":
                scanner.advance()
                name, dynamic = self._parse_partial_name(scanner, state)
                if whitespace:
                    tokens.append(Text(whitespace))
                standalone = self._is_standalone(scanner, state)
                indentation = whitespace if standalone else None
                partial_type = DynamicPartial if dynamic else Partial
                tokens.append(partial_type(name, indentation))

            elif sigil == "<":
                scanner.advance()
                name, dynamic = self._parse_partial_name(scanner, state)
                standalone = self._is_standalone(scanner, state)
                indentation = None
                if not standalone and whitespace:
                    indentation = whitespace
                    tokens.append(Text(whitespace))
                section_name = "*" + name if dynamic else name
                body = self._parse(
                    scanner,
                    state.with_section(section_name, new_line=standalone, inherit=True),
                )
                overrides = _collect_overrides(body.tokens)
                partial_type = DynamicPartial if dynamic else Partial
                tokens.append(partial_type(name, indentation, overrides))
                standalone = body.standalone

            elif sigil == "=":
                scanner.advance()
                state = self._set_delimiters(scanner, state)
                standalone = self._is_standalone(scanner, state)
                if not standalone and whitespace:
                    tokens.append(Text(whitespace))

            elif sigil == "%":
                scanner.advance()
                tokens.append(self._read_pragma(scanner, state))
                standalone = self._is_standalone(scanner, state)
                if not standalone and whitespace:
                    tokens.append(Text(whitespace))

            else:
                if whitespace:
                    tokens.append(Text(whitespace))
                name, transforms = self._parse_name(scanner, state)
                tokens.append(Variable(name, transforms))

            whitespace = ""
            state = replace(state, new_line=standalone)

        if state.section_name is not None:
            raise ExpectedSectionEnd(f"expected close tag for {state.section_name!r}")
        return _Body(tuple(tokens), scanner.position, False)

    def _read_text(self, scanner: Scanner, state: ParserState) -> Tuple[str, bool]:
        """Read text up to a newline, the end, or a start delimiter.

        Returns the text and whether a start delimiter was consumed.
        """
        delimiter = state.start_delimiter
        first = delimiter[0]
        parts: List[str] = []
        while not scanner.reached_end():
            parts.append(
                scanner.read_until_match(
                    lambda c: c == "\n" or c == "\r" or c == first, required=False
                )
            )
            if scanner.reached_end() or scanner.newline_length():
                break
            if scanner.match(delimiter):
                return "".join(parts), True
            parts.append(scanner.current())
            scanner.advance()
        return "".join(parts), False

    def _parse_name(
        self,
        scanner: Scanner,
        state: ParserState,
        closing: str = "",
        chars: frozenset = SECTION_NAME_CHARS,
    ) -> Tuple[str, Tuple[str, ...]]:
        scanner.read_while(str.isspace)
        text = scanner.read_while(lambda c: c in chars)
        scanner.read_while(str.isspace)
        if closing and not scanner.match(closing):
            raise UnfinishedName()
        if not scanner.match(state.end_delimiter):
            raise UnfinishedName()
        return split_transforms(text)

    def _parse_close_name(
        self, scanner: Scanner, state: ParserState
    ) -> Tuple[str, Tuple[str, ...]]:
        scanner.read_while(str.isspace)
        prefix = "*" if scanner.match("*") else ""
        name, transforms = self._parse_name(scanner, state, chars=CLOSE_NAME_CHARS)
        return prefix + name, transforms

    def _parse_partial_name(self, scanner: Scanner, state: ParserState) -> Tuple[str, bool]:
        scanner.read_while(str.isspace)
        dynamic = scanner.match("*")
        scanner.read_while(str.isspace)
        name = scanner.read_while(lambda c: c in PARTIAL_NAME_CHARS)
        scanner.read_while(str.isspace)
        if not scanner.match(state.end_delimiter):
            raise UnfinishedName()
        return name, dynamic

    def _set_delimiters(self, scanner: Scanner, state: ParserState) -> ParserState:
        try:
            scanner.read_while(str.isspace)
            start = scanner.read_until_match(str.isspace)
            scanner.read_while(str.isspace)
            end = scanner.read_until_match(lambda c: c == "=" or c.isspace())
            scanner.read_while(str.isspace)
        except ScanOverflow:
            raise InvalidSetDelimiter() from None
        if not scanner.match("=") or not scanner.match(state.end_delimiter):
            raise InvalidSetDelimiter()
        if not start or not end:
            raise InvalidSetDelimiter()
        return state.with_delimiters(start, end)

    def _read_pragma(self, scanner: Scanner, state: ParserState) -> ContentTypePragma:
        def is_name_char(c: str) -> bool:
            return c in NAME_CHARS

        scanner.read_while(str.isspace)
        variable = scanner.read_while(is_name_char)
        scanner.read_while(str.isspace)
        if not scanner.match(":"):
            raise InvalidConfigVariableSyntax()
        scanner.read_while(str.isspace)
        value = scanner.read_while(is_name_char)
        scanner.read_while(str.isspace)
        if not scanner.match(state.end_delimiter):
            raise InvalidConfigVariableSyntax()
        if not variable or not value:
            raise InvalidConfigVariableSyntax()

        if variable != "CONTENT_TYPE":
            raise UnrecognisedConfigVariable(
                f"unrecognised configuration variable {variable!r}"
            )
        content_type = self.content_types.get(value)
        if content_type is None:
            raise UnrecognisedConfigVariable(f"unrecognised content type {value!r}")
        return ContentTypePragma(content_type)

    def _is_standalone(self, scanner: Scanner, state: ParserState) -> bool:
        return state.new_line and _line_finished(scanner)


def parse(text: str, content_types: ContentTypes | None = None) -> TokenTree:
    """Parse template text with a default `Parser`."""
    return Parser(content_types).parse(text)


def split_transforms(text: str) -> Tuple[str, Tuple[str, ...]]:
    """Split `f(g(name))` into `("name", ("g", "f"))`.

    The chain is returned innermost-first, the order it is applied in.
    """
    calls: List[str] = []
    match = _CALL.match(text)
    while match:
        calls.append(match.group(1))
        text = match.group(2)
        match = _CALL.match(text)
    if "(" in text or ")" in text:
        raise UnfinishedName()
    return text, tuple(reversed(calls))


def _line_finished(scanner: Scanner) -> bool:
    """Consume trailing spaces and the line terminator if nothing else follows."""
    if scanner.reached_end():
        return True
    position = scanner.position
    scanner.read_while(_is_inline_space)
    newline = scanner.newline_length()
    if newline:
        scanner.advance(newline)
        return True
    if scanner.reached_end():
        return True
    scanner.restore(position)
    return False


def _collect_overrides(tokens: TokenTree) -> dict:
    overrides = {}
    for token in tokens:
        if isinstance(token, BlockDefinition):
            overrides[token.name] = token.body
        elif isinstance(token, Text) and not token.text.strip():
            continue
        else:
            raise IllegalTokenInsideInheritSection()
    return overrides


def _dedent(tokens: TokenTree, indent: str) -> TokenTree:
    """Remove `indent` from the start of every line of a block body."""
    if not indent:
        return tokens
    return _dedent_lines(tokens, indent, True)[0]


def _dedent_lines(
    tokens: TokenTree, indent: str, line_start: bool
) -> Tuple[TokenTree, bool]:
    result: List[Token] = []
    for token in tokens:
        if isinstance(token, Text):
            text = token.text
            if line_start and text.startswith(indent):
                text = text[len(indent) :]
            line_start = text.endswith("\n")
            if text:
                result.append(Text(text))
        elif isinstance(token, (Section, InvertedSection)):
            body, line_start = _dedent_lines(token.body, indent, line_start)
            result.append(replace(token, body=body))
        elif isinstance(token, BlockExpansion):
            default, line_start = _dedent_lines(token.default, indent, line_start)
            result.append(replace(token, default=default))
        else:
            result.append(token)
            line_start = False
    return tuple(result), line_start
