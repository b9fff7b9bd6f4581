"""Tests for identifier scanning."""

from hypothesis import given, strategies as st

from symkernel.completion import Span, find_longest_matching_at, is_identifier_char


def test_cursor_inside_identifier():
    """Test span covers the whole identifier around the cursor."""
    span = find_longest_matching_at("Sin[x]", 2)

    assert span == Span(0, 3)
    assert span.extract("Sin[x]") == "Sin"
    assert len(span) == 3


def test_cursor_after_identifier():
    """Test an identifier ending at the cursor is found."""
    assert find_longest_matching_at("Si", 2) == Span(0, 2)
    assert find_longest_matching_at("N[Sq", 4) == Span(2, 4)


def test_cursor_before_identifier():
    """Test an identifier starting at the cursor is found."""
    assert find_longest_matching_at("1+Cos", 2) == Span(2, 5)


def test_no_identifier():
    """Test no span when the cursor touches no identifier."""
    assert find_longest_matching_at("3+4", 1) is None
    assert find_longest_matching_at("", 0) is None
    assert find_longest_matching_at("(x) ", 4) is None


def test_digits_are_not_identifier_chars():
    """Test digits split identifiers."""
    assert not is_identifier_char("1")
    assert is_identifier_char("_")
    assert find_longest_matching_at("x1y", 1) == Span(0, 1)


def test_cursor_is_clamped():
    """Test out-of-range offsets are clamped to the text."""
    assert find_longest_matching_at("Sin", 99) == Span(0, 3)
    assert find_longest_matching_at("Sin", -5) == Span(0, 3)


def test_custom_predicate():
    """Test any character class can be scanned."""
    span = find_longest_matching_at("ab 123 cd", 4, str.isdigit)
    assert span == Span(3, 6)


@given(st.text(alphabet="abXY_1+[] ", max_size=30), st.integers(min_value=0, max_value=30))
def test_span_is_maximal_run_touching_cursor(text, at):
    """Property test: spans are maximal identifier runs that touch the cursor."""
    span = find_longest_matching_at(text, at)
    at = min(at, len(text))

    if span is None:
        assert at == 0 or not is_identifier_char(text[at - 1])
        assert at == len(text) or not is_identifier_char(text[at])
        return

    assert span.low <= at <= span.high
    assert all(is_identifier_char(ch) for ch in span.extract(text))
    assert span.low == 0 or not is_identifier_char(text[span.low - 1])
    assert span.high == len(text) or not is_identifier_char(text[span.high])
