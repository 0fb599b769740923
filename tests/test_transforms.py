"""Transforms: `name(value)` functions and sequence metadata."""

import pytest

from stache import MISSING, Template, Transformable
from stache.render.context import SequenceContext
from stache.render.transforms import apply_transform

REPO = {"repo": [{"name": "resque"}, {"name": "hub"}, {"name": "rip"}]}


def render(source, value=None):
    return Template(source).render(value)


# =============================================================================
# Strings and numbers
# =============================================================================


def test_lowercased():
    assert render("{{ lowercased(name) }}", {"name": "Test"}) == "test"


def test_uppercased():
    assert render("{{ uppercased(name) }}", {"name": "Test"}) == "TEST"


def test_capitalized():
    assert render("{{capitalized(name)}}", {"name": "hello world"}) == "Hello World"


def test_capitalized_keeps_apostrophes():
    assert apply_transform("world's fair", "capitalized") == "World's Fair"
    assert apply_transform("hELLO  there", "capitalized") == "Hello  There"


def test_string_reversed_section():
    template = "{{#repo}}\n{{#uppercased(string)}}{{reversed(.)}}{{/uppercased(string)}}\n{{/repo}}\n"
    assert render(template, {"repo": {"string": "a123a"}}) == "A321A\n"


def test_nested_number_transforms():
    template = "{{#repo}}\n{{minusone(plusone(last(reversed(numbers))))}}\n{{/repo}}\n"
    assert render(template, {"repo": {"numbers": [5, 4, 3]}}) == "5\n"


def test_count_of_reversed():
    template = "{{#repo}}\n{{count(reversed(numbers))}}\n{{/repo}}\n"
    assert render(template, {"repo": {"numbers": [1, 2, 3]}}) == "3\n"


def test_transform_inside_sequence_element_misses():
    template = "{{#repo}}\n{{#reversed(numbers)}}{{count(.)}}{{/reversed(numbers)}}\n{{/repo}}\n"
    assert render(template, {"repo": {"numbers": [1, 2, 3]}}) == "\n"


@pytest.mark.parametrize(
    "name, value, expected",
    [
        ("equalzero", 0, True),
        ("equalzero", 3, False),
        ("plusone", 1, 2),
        ("minusone", 1, 0),
        ("even", 4, True),
        ("odd", 4, False),
        ("odd", 3.0, True),
    ],
)
def test_number_transforms(name, value, expected):
    assert apply_transform(value, name) == expected


def test_even_on_fraction_misses():
    assert apply_transform(2.5, "even") is MISSING


def test_booleans_have_no_number_transforms():
    assert apply_transform(True, "plusone") is MISSING


def test_unknown_transform_misses():
    assert render("[{{shout(name)}}]", {"name": "x"}) == "[]"
    assert apply_transform({"a": 1}, "uppercased") is MISSING


# =============================================================================
# Sequences
# =============================================================================


def test_chain_is_applied_innermost_first():
    template = "{{#reversed(sorted(x))}}{{.}}{{/reversed(sorted(x))}}"
    assert render(template, {"x": ["b", "a", "c"]}) == "cba"


def test_reversed_section():
    template = "{{#reversed(repo)}}\n  <b>{{ name }}</b>\n{{/reversed(repo)}}\n"
    assert render(template, REPO) == "  <b>rip</b>\n  <b>hub</b>\n  <b>resque</b>\n"


def test_sorted_section():
    template = "{{#sorted(repo)}}\n  <b>{{ index() }}) {{ . }}</b>\n{{/sorted(repo)}}"
    assert render(template, {"repo": ["resque", "hub", "rip"]}) == (
        "  <b>0) hub</b>\n  <b>1) resque</b>\n  <b>2) rip</b>\n"
    )


def test_sorted_unorderable_misses():
    assert apply_transform([1, "a"], "sorted") is MISSING


def test_first_and_last_of_empty_sequence_miss():
    assert apply_transform([], "first") is MISSING
    assert apply_transform([], "last") is MISSING


def test_set_transforms():
    assert apply_transform({3, 1, 2}, "sorted") == [1, 2, 3]
    assert apply_transform(frozenset(), "empty") is True
    assert apply_transform({1}, "first") is MISSING


def test_empty_list_and_dictionary():
    template = "{{#empty(array)}}Array{{/empty(array)}}{{#empty(dictionary)}}Dictionary{{/empty(dictionary)}}"
    assert render(template, {"array": [], "dictionary": {}}) == "ArrayDictionary"


# =============================================================================
# Sequence context
# =============================================================================


def test_first_last():
    template = (
        "{{#repo}}\n"
        "<b>{{#first()}}first: {{/first()}}{{#last()}}last: {{/last()}}{{ name }}</b>\n"
        "{{/repo}}\n"
    )
    assert render(template, REPO) == (
        "<b>first: resque</b>\n<b>hub</b>\n<b>last: rip</b>\n"
    )


def test_index_section_renders_for_zero():
    template = "{{#repo}}\n<b>{{#index()}}{{plusone(.)}}{{/index()}}) {{ name }}</b>\n{{/repo}}\n"
    assert render(template, REPO) == "<b>1) resque</b>\n<b>2) hub</b>\n<b>3) rip</b>\n"


def test_even_odd():
    template = (
        "{{#repo}}\n"
        "<b>{{index()}}) {{#even()}}even {{/even()}}{{#odd()}}odd {{/odd()}}{{ name }}</b>\n"
        "{{/repo}}\n"
    )
    assert render(template, REPO) == (
        "<b>0) even resque</b>\n<b>1) odd hub</b>\n<b>2) even rip</b>\n"
    )


def test_list_output():
    template = "{{#.}}{{.}}{{^last()}}, {{/last()}}{{/.}}"
    assert render(template, [1, 2, 3, 4]) == "1, 2, 3, 4"


def test_sequence_context_outside_sequence_misses():
    assert render("[{{index()}}]", {}) == "[]"


def test_sequence_context_table():
    context = SequenceContext(first=False, last=True, index=3)
    assert apply_transform(context, "index") == 3
    assert apply_transform(context, "last") is True
    assert apply_transform(context, "odd") is True


# =============================================================================
# Mappings
# =============================================================================


def test_dictionary_enumerated():
    template = "{{#enumerated(.)}}<b>{{ key }} = {{ value }}</b>{{/enumerated(.)}}"
    assert render(template, {"one": 1, "two": 2}) == "<b>one = 1</b><b>two = 2</b>"


def test_dictionary_sorted_by_key():
    template = "{{#sorted(.)}}<b>{{ key }} = {{ value }}</b>{{/sorted(.)}}"
    assert render(template, {"one": 1, "two": 2, "three": 3}) == (
        "<b>one = 1</b><b>three = 3</b><b>two = 2</b>"
    )


def test_dictionary_count():
    assert render("{{count(.)}}", {"a": 1, "b": 2}) == "2"


# =============================================================================
# Host transforms
# =============================================================================


class Money(Transformable):
    def __init__(self, cents):
        self.cents = cents

    def transform(self, name):
        if name == "dollars":
            return f"${self.cents / 100:.2f}"
        return None


def test_transformable():
    assert render("{{dollars(price)}}", {"price": Money(1250)}) == "$12.50"
    assert render("[{{euros(price)}}]", {"price": Money(1250)}) == "[]"
