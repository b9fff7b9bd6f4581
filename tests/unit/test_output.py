"""Tests for output form."""

from decimal import Decimal
from io import StringIO

import pytest
from hypothesis import given, strategies as st
from sympy import Float, Function, Rational, Symbol, Tuple, oo, pi, sin
from sympy.core.symbol import Str

from symkernel.engine import OutputFormatter, format_decimal
from symkernel.engine.builtins import Rule


@pytest.mark.parametrize(
    "value, expected",
    [
        ("3.14159265", "3.1416"),
        (2, "2.0"),
        ("1.50000", "1.5"),
        ("2.25", "2.25"),
        ("0.00004", "0.0"),
        ("-0.00001", "0.0"),
        ("0.00015", "0.0002"),
        ("0.00025", "0.0002"),
        ("-7.123456", "-7.1235"),
        ("1234567.891", "1234567.891"),
        ("1e20", "100000000000000000000.0"),
        ("1e-10", "0.0"),
    ],
)
def test_format_decimal(value, expected):
    """Test the 0.0### pattern: half-even, no grouping, no exponent."""
    assert format_decimal(value) == expected


def test_format_decimal_custom_digits():
    """Test other fractional digit bounds."""
    assert format_decimal("3.14159265", max_fraction_digits=2) == "3.14"
    assert format_decimal("3", max_fraction_digits=2, min_fraction_digits=2) == "3.00"
    assert format_decimal("3.7", max_fraction_digits=0, min_fraction_digits=0) == "4"


@given(st.decimals(min_value=-10**9, max_value=10**9, allow_nan=False, allow_infinity=False, places=8))
def test_format_decimal_shape(value):
    """Property test: one to four fractional digits, no exponent, no grouping."""
    text = format_decimal(value)
    integer, point, fraction = text.partition(".")

    assert point == "."
    assert 1 <= len(fraction) <= 4
    assert len(fraction) == 1 or not fraction.endswith("0")
    assert "e" not in text.lower()
    assert "," not in text
    assert abs(Decimal(text) - value) <= Decimal("0.00005")


def test_formats_floats_inside_expressions(formatter):
    """Test floats nested in expressions use the decimal pattern."""
    x = Symbol("x")
    assert formatter.to_text(Float("0.333333333") * x) == "0.3333*x"


def test_formats_mathematica_syntax(formatter):
    """Test results print in Mathematica syntax."""
    x = Symbol("x")

    assert formatter.to_text(Rational(5, 6)) == "5/6"
    assert formatter.to_text(pi) == "Pi"
    assert formatter.to_text(oo) == "Infinity"
    assert formatter.to_text(sin(x)**2) == "Sin[x]^2"
    assert formatter.to_text(x**2 + 2*x + 1) == "x^2 + 2*x + 1"


def test_formats_undefined_heads(formatter):
    """Test unknown heads print as calls with brackets."""
    x = Symbol("x")
    assert formatter.to_text(Function("Foo")(x, 1)) == "Foo[x, 1]"


def test_formats_lists_and_rules(formatter):
    """Test lists print in braces and rules with an arrow."""
    x = Symbol("x")

    assert formatter.to_text(Tuple(1, 2, 3)) == "{1, 2, 3}"
    assert formatter.to_text(Tuple(Tuple(Rule(x, -2)), Tuple(Rule(x, 2)))) == "{{x -> -2}, {x -> 2}}"


def test_formats_strings_without_quotes(formatter):
    """Test strings print as their contents."""
    assert formatter.to_text(Str("hello world")) == "hello world"


def test_convert_requires_reset(formatter):
    """Test a second convert without reset is rejected."""
    out = StringIO()
    formatter.reset()
    formatter.convert(out, Rational(1, 2))

    with pytest.raises(RuntimeError):
        formatter.convert(out, Rational(1, 3))

    formatter.reset()
    formatter.convert(out, Rational(1, 3))
    assert out.getvalue() == "1/21/3"


def test_convert_is_not_reentrant(formatter):
    """Test convert refuses to run while another convert is in progress."""
    formatter.reset()
    formatter._converting = True

    with pytest.raises(RuntimeError):
        formatter.convert(StringIO(), Rational(1, 2))


def test_custom_fraction_digits():
    """Test the formatter passes its digit bounds to the printer."""
    formatter = OutputFormatter(max_fraction_digits=2)
    assert formatter.to_text(Float("2.71828")) == "2.72"
