"""Renderer - walks a token tree against a render context."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Union

from stache.ast.parser import Parser
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
from stache.exceptions import ParseError, RenderError
from stache.render.context import RenderContext, SequenceContext
from stache.render.resolver import Resolver, call_lambda
from stache.values import (
    MISSING,
    CustomRenderable,
    ValueAccessor,
    as_lambda,
    is_sequence,
    stringify,
)

log = logging.getLogger(__name__)


class Renderer:
    """Renders token trees.

    Missing values, failed transforms and unknown partials render as empty
    text; rendering never fails because of the data.

    Output is accumulated in one list per top-level render so that partial
    indentation can be applied across section, partial and block boundaries.

    Args:
        content_types: Registry used when lambda output is parsed.
        accessor: Named-child lookup for host objects.
    """

    def __init__(
        self,
        content_types: ContentTypes | None = None,
        accessor: ValueAccessor | None = None,
    ):
        self.parser = Parser(content_types)
        self.resolver = Resolver(accessor)

    def render(self, tree: TokenTree, context: RenderContext) -> str:
        out: List[str] = []
        self.render_into(out, tree, context)
        return "".join(out)

    def render_into(self, out: List[str], tree: TokenTree, context: RenderContext) -> None:
        for token in tree:
            if isinstance(token, ContentTypePragma):
                context = context.with_content_type(token.content_type)
            else:
                self.render_token(out, token, context)

    def render_token(self, out: List[str], token: Token, context: RenderContext) -> None:
        if isinstance(token, Text):
            _emit(out, token.text, context)
        elif isinstance(token, Variable):
            _emit(out, self._render_variable(token, context, escape=True), context)
        elif isinstance(token, UnescapedVariable):
            _emit(out, self._render_variable(token, context, escape=False), context)
        elif isinstance(token, Section):
            self._render_section(out, token, context)
        elif isinstance(token, InvertedSection):
            self._render_inverted_section(out, token, context)
        elif isinstance(token, BlockExpansion):
            body = context.overrides.get(token.name, token.default)
            self.render_into(out, body, context.with_block_expansion(token.indentation))
        elif isinstance(token, Partial):
            self._render_partial(out, token.name, token, context)
        elif isinstance(token, DynamicPartial):
            name = self.resolver.resolve(token.name, (), context)
            if isinstance(name, str):
                self._render_partial(out, name, token, context)
        elif isinstance(token, BlockDefinition):
            raise RenderError(
                f"block definition {token.name!r} found outside an inheriting partial"
            )
        else:
            raise RenderError(f"cannot render token {token!r}")

    def _render_variable(
        self,
        token: Union[Variable, UnescapedVariable],
        context: RenderContext,
        escape: bool,
    ) -> str:
        from stache.template import Template

        value = self.resolver.resolve(token.name, token.transforms, context)
        if value is MISSING:
            return ""
        if as_lambda(value) is not None:
            value = call_lambda(value)
            if value is None or value is MISSING:
                return ""
            tree = self._parse_lambda_result(value)
            text = self.render(tree, context) if tree is not None else ""
        elif isinstance(value, Template):
            return self.render(value.tokens, context)
        else:
            text = stringify(value)
        return context.content_type.escape(text) if escape else text

    def _render_section(self, out: List[str], token: Section, context: RenderContext) -> None:
        value = self.resolver.resolve(token.name, token.transforms, context)

        fn = as_lambda(value)
        if fn is not None:
            result = call_lambda(fn(token.text))
            if result is None or result is MISSING:
                return
            tree = self._parse_lambda_result(result)
            if tree is not None:
                self.render_into(out, tree, context)
            return

        if is_sequence(value):
            items = list(value)
            last = len(items) - 1
            for i, item in enumerate(items):
                sequence = SequenceContext(first=i == 0, last=i == last, index=i)
                self.render_into(out, token.body, context.with_sequence(item, sequence))
        elif isinstance(value, bool):
            if value:
                self.render_into(out, token.body, context)
        elif isinstance(value, CustomRenderable) and value.is_null():
            return
        elif value is not MISSING and value is not None:
            self.render_into(out, token.body, context.with_object(value))

    def _render_inverted_section(
        self, out: List[str], token: InvertedSection, context: RenderContext
    ) -> None:
        value = self.resolver.resolve(token.name, token.transforms, context)

        if as_lambda(value) is not None:
            return
        if is_sequence(value):
            if not len(value):
                self.render_into(out, token.body, context.with_object(value))
        elif isinstance(value, bool):
            if not value:
                self.render_into(out, token.body, context)
        elif isinstance(value, CustomRenderable):
            if value.is_null():
                self.render_into(out, token.body, context)
        elif value is MISSING or value is None:
            self.render_into(out, token.body, context)

    def _render_partial(
        self,
        out: List[str],
        name: str,
        token: Union[Partial, DynamicPartial],
        context: RenderContext,
    ) -> None:
        library = context.library
        template = library.get(name) if library is not None else None
        if template is None:
            log.debug("partial %r not found", name)
            return
        self.render_into(
            out, template.tokens, context.with_partial(token.indentation, token.overrides)
        )

    def _parse_lambda_result(self, value: Any) -> Optional[TokenTree]:
        """Parse lambda output as a template, or return None if it is invalid."""
        text = value if isinstance(value, str) else stringify(value)
        try:
            return self.parser.parse(text)
        except ParseError as exc:
            log.warning("lambda returned an invalid template: %s", exc)
            return None


def _emit(out: List[str], text: str, context: RenderContext) -> None:
    """Append `text`, indenting it first if it starts a new line."""
    if not text:
        return
    if context.indentation and out and out[-1].endswith("\n"):
        out.append(context.indentation)
    out.append(text)
