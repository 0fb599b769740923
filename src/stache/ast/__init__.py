"""Template compilation - scanner, parser and token tree."""

from stache.ast.parser import Parser, parse
from stache.ast.scanner import Scanner
from stache.ast.spec import Token, TokenTree

__all__ = ["Parser", "parse", "Scanner", "Token", "TokenTree"]
