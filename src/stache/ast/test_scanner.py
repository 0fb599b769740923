import pytest

from stache.ast.scanner import END, Scanner
from stache.exceptions import ScanOverflow


def test_current_and_advance():
    scanner = Scanner("ab")
    assert scanner.current() == "a"
    scanner.advance()
    assert scanner.current() == "b"
    scanner.advance()
    assert scanner.reached_end()
    assert scanner.current() == END


def test_advance_past_end_raises():
    scanner = Scanner("ab")
    with pytest.raises(ScanOverflow):
        scanner.advance(3)
    assert scanner.position == 0


def test_retreat_past_start_raises():
    scanner = Scanner("ab")
    with pytest.raises(ScanOverflow):
        scanner.retreat()


def test_match_consumes_only_on_success():
    scanner = Scanner("{{name}}")
    assert not scanner.match("}}")
    assert scanner.position == 0
    assert scanner.match("{{")
    assert scanner.position == 2


def test_read_while():
    scanner = Scanner("   name")
    assert scanner.read_while(str.isspace) == "   "
    assert scanner.read_while(str.isalpha) == "name"
    assert scanner.reached_end()


def test_read_until_match_required_restores_position():
    scanner = Scanner("abc")
    with pytest.raises(ScanOverflow):
        scanner.read_until_match(lambda c: c == "!")
    assert scanner.position == 0


def test_read_until_match_optional_returns_rest():
    scanner = Scanner("abc")
    assert scanner.read_until_match(lambda c: c == "!", required=False) == "abc"
    assert scanner.reached_end()


def test_read_until_leaves_cursor_on_delimiter():
    scanner = Scanner("comment}}rest")
    assert scanner.read_until("}}") == "comment"
    assert scanner.current() == "}"


def test_read_until_consume():
    scanner = Scanner("comment}}rest")
    assert scanner.read_until("}}", consume=True) == "comment"
    assert scanner.read_while(str.isalpha) == "rest"


def test_read_until_missing_delimiter():
    scanner = Scanner("comment")
    with pytest.raises(ScanOverflow):
        scanner.read_until("}}")
    assert scanner.position == 0
    assert scanner.read_until("}}", required=False) == "comment"


def test_read_exact():
    scanner = Scanner("abcdef")
    assert scanner.read_exact(3) == "abc"
    with pytest.raises(ScanOverflow):
        scanner.read_exact(4)


def test_newline_length():
    assert Scanner("\nx").newline_length() == 1
    assert Scanner("\r\nx").newline_length() == 2
    assert Scanner("\rx").newline_length() == 0
    assert Scanner("x").newline_length() == 0


def test_restore():
    scanner = Scanner("abcdef")
    scanner.advance(4)
    scanner.restore(1)
    assert scanner.current() == "b"
    with pytest.raises(ScanOverflow):
        scanner.restore(10)


# ============================================================================
# Error locations
# ============================================================================


def test_location_first_line():
    scanner = Scanner("hello {{name")
    scanner.advance(8)
    location = scanner.location()
    assert location.line == "hello {{name"
    assert location.line_number == 1
    assert location.column == 9


def test_location_later_line():
    text = "line one\nline two\nline three"
    location = Scanner(text).location(text.index("two"))
    assert location.line == "line two"
    assert location.line_number == 2
    assert location.column == 6


def test_location_strips_carriage_return():
    text = "first\r\nsecond"
    location = Scanner(text).location(2)
    assert location.line == "first"
    assert location.line_number == 1


def test_location_at_end():
    text = "{{#test}}\n{{.}}"
    location = Scanner(text).location(len(text))
    assert location.line == "{{.}}"
    assert location.line_number == 2
    assert location.column == 6
