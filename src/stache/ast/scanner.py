"""Scanner - a cursor over template text used by the parser."""

from __future__ import annotations

from typing import Callable

from stache.exceptions import ErrorLocation, ScanOverflow

END = "\0"


class Scanner:
    """Reads template text one character at a time.

    Every position is restorable so the parser can read speculatively and
    back off. Moving past either end of the buffer raises `ScanOverflow`.
    """

    def __init__(self, text: str):
        self.text = text
        self.position = 0

    def reached_end(self) -> bool:
        return self.position >= len(self.text)

    def at_start(self) -> bool:
        return self.position == 0

    def current(self) -> str:
        """Return the character at the cursor, or `END` past the buffer."""
        if self.reached_end():
            return END
        return self.text[self.position]

    def advance(self, count: int = 1) -> None:
        if self.position + count > len(self.text):
            raise ScanOverflow()
        self.position += count

    def retreat(self, count: int = 1) -> None:
        if self.position - count < 0:
            raise ScanOverflow()
        self.position -= count

    def restore(self, position: int) -> None:
        if not 0 <= position <= len(self.text):
            raise ScanOverflow()
        self.position = position

    def match(self, literal: str) -> bool:
        """Consume `literal` if the text at the cursor starts with it."""
        if self.text.startswith(literal, self.position):
            self.position += len(literal)
            return True
        return False

    def read_exact(self, count: int) -> str:
        if self.position + count > len(self.text):
            raise ScanOverflow()
        start = self.position
        self.position += count
        return self.text[start : self.position]

    def read_while(self, predicate: Callable[[str], bool]) -> str:
        start = self.position
        text = self.text
        while self.position < len(text) and predicate(text[self.position]):
            self.position += 1
        return text[start : self.position]

    def read_until_match(
        self, predicate: Callable[[str], bool], required: bool = True
    ) -> str:
        """Read until a character satisfies `predicate`.

        The cursor is left on that character. If none is found the read
        either raises `ScanOverflow` (cursor restored) or returns the rest
        of the text.
        """
        start = self.position
        text = self.text
        while self.position < len(text):
            if predicate(text[self.position]):
                return text[start : self.position]
            self.position += 1
        if required:
            self.position = start
            raise ScanOverflow()
        return text[start:]

    def read_until(
        self, delimiter: str, required: bool = True, consume: bool = False
    ) -> str:
        """Read until `delimiter`.

        Args:
            delimiter: The string to look for.
            required: Raise `ScanOverflow` if the delimiter is never found,
                instead of returning everything up to the end.
            consume: Leave the cursor after the delimiter rather than on it.

        Returns:
            The text between the cursor and the delimiter.
        """
        start = self.position
        found = self.text.find(delimiter, start)
        if found == -1:
            if required:
                raise ScanOverflow()
            self.position = len(self.text)
            return self.text[start:]
        self.position = found + len(delimiter) if consume else found
        return self.text[start:found]

    def newline_length(self) -> int:
        """Length of the line terminator at the cursor, 0 if there is none."""
        if self.text.startswith("\r\n", self.position):
            return 2
        if self.text.startswith("\n", self.position):
            return 1
        return 0

    def location(self, position: int | None = None) -> ErrorLocation:
        """Describe `position` (default: the cursor) as line text and numbers.

        Computed on demand by searching back and forward from the position.
        """
        if position is None:
            position = self.position
        position = min(position, len(self.text))
        line_start = self.text.rfind("\n", 0, position) + 1
        line_end = self.text.find("\n", position)
        if line_end == -1:
            line_end = len(self.text)
        line = self.text[line_start:line_end].rstrip("\r")
        line_number = self.text.count("\n", 0, position) + 1
        return ErrorLocation(line, line_number, position - line_start + 1)
