"""
Output Form
Turns result expressions into the text shown as ``Out[n]``.

Numbers follow the US decimal pattern ``0.0###``: a point separator, no
grouping, no exponent, half-even rounding to at most four fractional digits
and trailing zeros trimmed down to one.
"""

from decimal import Decimal, ROUND_HALF_EVEN, localcontext
from io import StringIO
from typing import Any, TextIO

from sympy import Basic, Float
from sympy.core.function import AppliedUndef
from sympy.printing.mathematica import MCodePrinter


def format_decimal(value: Any, max_fraction_digits: int = 4, min_fraction_digits: int = 1) -> str:
    """
    Format a number with the output-form decimal pattern.

    Examples:
        >>> format_decimal("3.14159265")
        '3.1416'
        >>> format_decimal(2)
        '2.0'
        >>> format_decimal("1.50000")
        '1.5'
    """
    number = Decimal(str(value))
    if not number.is_finite():
        return str(value)

    with localcontext() as ctx:
        ctx.prec = max(28, number.adjusted() + max_fraction_digits + 2)
        quantized = number.quantize(Decimal(1).scaleb(-max_fraction_digits), rounding=ROUND_HALF_EVEN)

    if quantized.is_zero():
        quantized = abs(quantized)

    integer, _, fraction = format(quantized, "f").partition(".")
    fraction = fraction.rstrip("0").ljust(min_fraction_digits, "0")
    return f"{integer}.{fraction}" if fraction else integer


class OutputFormPrinter(MCodePrinter):
    """sympy's Mathematica form with the decimal pattern, rules and bare strings."""

    printmethod = "_symkernel_output"

    _default_settings: dict[str, Any] = {
        **MCodePrinter._default_settings,
        "max_fraction_digits": 4,
        "min_fraction_digits": 1,
    }

    def doprint(self, expr: Any, assign_to: Any = None) -> str:
        # Plain expression text, without the code printer's comment header
        self._not_supported = set()
        self._number_symbols = set()
        return self._print(expr)

    def _print_Float(self, expr: Float) -> str:
        return format_decimal(
            expr,
            self._settings["max_fraction_digits"],
            self._settings["min_fraction_digits"],
        )

    def _print_Tuple(self, expr: Basic) -> str:
        return "{" + ", ".join(self._print(item) for item in expr.args) + "}"

    def _print_Str(self, expr: Basic) -> str:
        return expr.name

    def _print_AppliedUndef(self, expr: AppliedUndef) -> str:
        if expr.func.__name__ == "Rule" and len(expr.args) == 2:
            lhs, rhs = expr.args
            return f"{self._print(lhs)} -> {self._print(rhs)}"
        return self._print_Function(expr)


class OutputFormatter:
    """
    Reset/convert output formatter.

    ``reset()`` clears the internal buffer and must precede every
    ``convert()``. One formatter serves one session; ``convert()`` is not
    re-entrant.
    """

    def __init__(self, max_fraction_digits: int = 4, min_fraction_digits: int = 1):
        self._printer = OutputFormPrinter(
            {
                "max_fraction_digits": max_fraction_digits,
                "min_fraction_digits": min_fraction_digits,
            }
        )
        self._buffer: list[str] = []
        self._converting = False

    def reset(self) -> None:
        self._buffer.clear()

    def convert(self, out: TextIO, expr: Basic) -> None:
        """
        Write the output form of expr to out.

        Raises:
            RuntimeError: If called re-entrantly or without a preceding reset()
        """
        if self._converting:
            raise RuntimeError("OutputFormatter.convert() is not re-entrant")
        if self._buffer:
            raise RuntimeError("OutputFormatter.reset() must be called before convert()")

        self._converting = True
        try:
            self._buffer.append(self._printer.doprint(expr))
            out.write("".join(self._buffer))
        finally:
            self._converting = False

    def to_text(self, expr: Basic) -> str:
        """Reset, convert and return the text."""
        buf = StringIO()
        self.reset()
        self.convert(buf, expr)
        return buf.getvalue()


__all__ = ["format_decimal", "OutputFormPrinter", "OutputFormatter"]
