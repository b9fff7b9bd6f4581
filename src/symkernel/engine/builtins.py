"""
Built-in Functions
Mathematica heads mapped onto sympy operations, plus the keyword lists the
autocompleter is seeded from.
"""

import functools
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable

from sympy import (
    Abs,
    Basic,
    Eq,
    Ge,
    Gt,
    Integer,
    Le,
    Lt,
    Max,
    Min,
    Mod,
    Ne,
    Tuple,
    acos,
    apart,
    asin,
    atan,
    binomial,
    cancel,
    ceiling,
    conjugate,
    cos,
    cosh,
    cot,
    csc,
    diff,
    exp,
    expand,
    factor,
    factorial,
    fibonacci,
    floor,
    gamma,
    gcd,
    im,
    integrate,
    lcm,
    limit,
    log,
    prime,
    product,
    re,
    sec,
    series,
    sign,
    simplify,
    sin,
    sinh,
    solve,
    sqrt,
    summation,
    sympify,
    tan,
    tanh,
    together,
    zeta,
)
from sympy.core.function import AppliedUndef, Function
from sympy.core.symbol import Str

from .errors import AbortError, ArgumentCountError, MathError
from .parser import NULL

Rule = Function("Rule")

# Heads the evaluator handles itself because their arguments must not be
# evaluated first
CONTROL_FORMS = ("Clear", "CompoundExpression", "Set", "SetDelayed", "Timing")
FILE_FORMS = ("Get",)

DOLLAR_STRINGS = ("$Aborted", "$Failed", "$MachinePrecision", "$RecursionLimit")

SYMBOL_STRINGS = (
    "Catalan",
    "ComplexInfinity",
    "Degree",
    "E",
    "EulerGamma",
    "False",
    "GoldenRatio",
    "I",
    "Indeterminate",
    "Infinity",
    "Null",
    "Pi",
    "True",
)


@dataclass(frozen=True)
class Builtin:
    """A built-in function with its accepted argument counts."""

    name: str
    handler: Callable[..., Any]
    min_args: int = 1
    max_args: int | None = 1

    def __call__(self, *args: Basic) -> Basic:
        if len(args) < self.min_args or (self.max_args is not None and len(args) > self.max_args):
            raise ArgumentCountError(self.name, len(args), self._expected())
        return to_basic(self.handler(*args))

    def _expected(self) -> str:
        if self.max_args is None:
            return f"{self.min_args} or more"
        if self.min_args == self.max_args:
            return str(self.min_args)
        return f"{self.min_args} to {self.max_args}"


def to_basic(value: Any) -> Basic:
    """Coerce a handler result into an expression tree node."""
    if value is None:
        return NULL
    if isinstance(value, Basic):
        return value
    if isinstance(value, dict):
        return Tuple(*[Rule(key, to_basic(item)) for key, item in value.items()])
    if isinstance(value, (list, tuple)):
        return Tuple(*[to_basic(item) for item in value])
    return sympify(value)


def is_head(expr: Any, name: str) -> bool:
    """True when expr is an application of the undefined head ``name``."""
    return isinstance(expr, AppliedUndef) and expr.func.__name__ == name


def head_name(expr: Any) -> str | None:
    if isinstance(expr, AppliedUndef):
        return expr.func.__name__
    return None


def _listable(fn: Callable[..., Basic]) -> Callable[..., Basic]:
    """Thread fn over lists in its first argument."""

    @functools.wraps(fn)
    def wrapper(expr: Basic, *rest: Basic) -> Basic:
        if isinstance(expr, Tuple):
            return Tuple(*[wrapper(item, *rest) for item in expr])
        return fn(expr, *rest)

    return wrapper


def _as_list(expr: Basic) -> list[Basic]:
    if isinstance(expr, Tuple):
        return list(expr)
    return [expr]


def _iterator(name: str, spec: Basic) -> tuple[Basic, ...]:
    """``{i, n}`` means ``{i, 1, n}``."""
    if not isinstance(spec, Tuple) or len(spec) not in (2, 3):
        raise MathError(f"{name}::itform: Argument {spec} is not a valid iterator specification.")
    if len(spec) == 2:
        return (spec[0], Integer(1), spec[1])
    return tuple(spec)


def _numeric(expr: Basic, digits: Basic = Integer(15)) -> Basic:
    return sympify(expr).evalf(int(digits))


def _derivative(expr: Basic, *variables: Basic) -> Basic:
    args: list[Basic] = []
    for variable in variables:
        args.extend(_as_list(variable))
    return diff(expr, *args)


def _integrate(expr: Basic, *specs: Basic) -> Basic:
    return integrate(expr, *[tuple(spec) if isinstance(spec, Tuple) else spec for spec in specs])


def _sum(expr: Basic, *specs: Basic) -> Basic:
    return summation(expr, *[_iterator("Sum", spec) for spec in specs])


def _product(expr: Basic, *specs: Basic) -> Basic:
    return product(expr, *[_iterator("Product", spec) for spec in specs])


def _limit(expr: Basic, rule: Basic) -> Basic:
    if not is_head(rule, "Rule"):
        raise MathError(f"Limit::lim: {rule} is not of the form x -> a.")
    variable, point = rule.args
    return limit(expr, variable, point)


def _series(expr: Basic, spec: Basic) -> Basic:
    if not isinstance(spec, Tuple) or len(spec) != 3:
        raise MathError(f"Series::serlim: {spec} is not of the form {{x, x0, n}}.")
    variable, point, order = spec
    return series(expr, variable, point, int(order) + 1)


def _solve(equations: Basic, variables: Basic | None = None) -> Basic:
    symbols = _as_list(variables) if variables is not None else []
    solutions = solve(_as_list(equations), *symbols, dict=True)
    return Tuple(*[Tuple(*[Rule(key, value) for key, value in solution.items()]) for solution in solutions])


def _length(expr: Basic) -> Basic:
    return Integer(len(expr.args))


def _first(expr: Basic) -> Basic:
    if not expr.args:
        raise MathError(f"First::nofirst: {expr} has zero length and no first element.")
    return expr.args[0]


def _last(expr: Basic) -> Basic:
    if not expr.args:
        raise MathError(f"Last::nolast: {expr} has zero length and no last element.")
    return expr.args[-1]


def _log(*args: Basic) -> Basic:
    # Log[b, x] is the base-b logarithm
    if len(args) == 2:
        return log(args[1], args[0])
    return log(args[0])


def _abort() -> Basic:
    raise AbortError()


def _pause(seconds: Basic) -> None:
    time.sleep(float(seconds))


def _plain(expr: Basic) -> str:
    if isinstance(expr, Str):
        return expr.name
    return str(expr)


def _print(*args: Basic) -> None:
    print("".join(_plain(arg) for arg in args), file=sys.stdout)


class BuiltinRegistry:
    """
    Name to built-in lookup, applied bottom-up over expression trees.

    Examples:
        >>> registry = create_builtins()
        >>> "Simplify" in registry
        True
    """

    def __init__(self) -> None:
        self._functions: dict[str, Builtin] = {}

    def register(
        self,
        name: str,
        handler: Callable[..., Any],
        min_args: int = 1,
        max_args: int | None = 1,
    ) -> None:
        self._functions[name] = Builtin(name, handler, min_args, max_args)

    def get(self, name: str) -> Builtin | None:
        return self._functions.get(name)

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._functions))

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def _is_call(self, expr: Basic) -> bool:
        return isinstance(expr, AppliedUndef) and expr.func.__name__ in self._functions

    def _call(self, expr: Basic) -> Basic:
        return self._functions[expr.func.__name__](*expr.args)

    def apply(self, expr: Basic) -> Basic:
        """Replace every built-in call in expr, innermost first."""
        if not isinstance(expr, Basic):
            return expr
        return expr.replace(self._is_call, self._call)


# name -> (handler, min_args, max_args)
_ELEMENTARY: dict[str, tuple[Callable[..., Any], int, int | None]] = {
    "Abs": (Abs, 1, 1),
    "ArcCos": (acos, 1, 1),
    "ArcSin": (asin, 1, 1),
    "ArcTan": (atan, 1, 1),
    "Binomial": (binomial, 2, 2),
    "Ceiling": (ceiling, 1, 1),
    "Conjugate": (conjugate, 1, 1),
    "Cos": (cos, 1, 1),
    "Cosh": (cosh, 1, 1),
    "Cot": (cot, 1, 1),
    "Csc": (csc, 1, 1),
    "Exp": (exp, 1, 1),
    "Factorial": (factorial, 1, 1),
    "Fibonacci": (fibonacci, 1, 1),
    "Floor": (floor, 1, 1),
    "GCD": (lambda *a: functools.reduce(gcd, a), 1, None),
    "Gamma": (gamma, 1, 1),
    "Im": (im, 1, 1),
    "LCM": (lambda *a: functools.reduce(lcm, a), 1, None),
    "Log": (_log, 1, 2),
    "Max": (Max, 1, None),
    "Min": (Min, 1, None),
    "Mod": (Mod, 2, 2),
    "Prime": (prime, 1, 1),
    "Re": (re, 1, 1),
    "Sec": (sec, 1, 1),
    "Sign": (sign, 1, 1),
    "Sin": (sin, 1, 1),
    "Sinh": (sinh, 1, 1),
    "Sqrt": (sqrt, 1, 1),
    "Tan": (tan, 1, 1),
    "Tanh": (tanh, 1, 1),
    "Zeta": (zeta, 1, 1),
}


def create_builtins() -> BuiltinRegistry:
    """Build the built-in function table."""
    registry = BuiltinRegistry()

    for name, (handler, min_args, max_args) in _ELEMENTARY.items():
        registry.register(name, handler, min_args, max_args)

    # Algebra
    registry.register("N", _listable(_numeric), 1, 2)
    registry.register("Simplify", _listable(simplify))
    registry.register("Expand", _listable(expand))
    registry.register("Factor", _listable(factor))
    registry.register("Together", _listable(together))
    registry.register("Apart", _listable(apart))
    registry.register("Cancel", _listable(cancel))
    registry.register("Solve", _solve, 1, 2)

    # Calculus
    registry.register("D", _derivative, 2, None)
    registry.register("Integrate", _integrate, 2, None)
    registry.register("Limit", _limit, 2, 2)
    registry.register("Series", _series, 2, 2)
    registry.register("Sum", _sum, 2, None)
    registry.register("Product", _product, 2, None)

    # Relations
    registry.register("Equal", Eq, 2, 2)
    registry.register("Unequal", Ne, 2, 2)
    registry.register("Less", Lt, 2, 2)
    registry.register("LessEqual", Le, 2, 2)
    registry.register("Greater", Gt, 2, 2)
    registry.register("GreaterEqual", Ge, 2, 2)

    # Lists
    registry.register("List", Tuple, 0, None)
    registry.register("Length", _length)
    registry.register("First", _first)
    registry.register("Last", _last)

    # Session
    registry.register("Abort", _abort, 0, 0)
    registry.register("Pause", _pause)
    registry.register("Print", _print, 0, None)

    return registry


def function_strings(registry: BuiltinRegistry, filesystem_enabled: bool) -> tuple[str, ...]:
    """Every function name the session understands."""
    names = set(registry.names()) | set(CONTROL_FORMS) | {"Rule"}
    if filesystem_enabled:
        names.update(FILE_FORMS)
    return tuple(sorted(names))


__all__ = [
    "Builtin",
    "BuiltinRegistry",
    "CONTROL_FORMS",
    "DOLLAR_STRINGS",
    "FILE_FORMS",
    "Rule",
    "SYMBOL_STRINGS",
    "create_builtins",
    "function_strings",
    "head_name",
    "is_head",
    "to_basic",
]
