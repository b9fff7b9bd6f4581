"""Source text to sympy expression trees.

Parsing is delegated to sympy's Mathematica front end. This module only
prepares the text for it: comments are dropped, cells are split into
statements, and string literals are swapped for placeholder symbols that the
front end can tokenize and that are turned back into ``Str`` atoms afterwards.
"""

import re

from sympy import Basic, Catalan, EulerGamma, GoldenRatio, Symbol, SympifyError, Tuple, nan, oo, pi, sympify, zoo
from sympy.core.symbol import Str
from sympy.parsing.mathematica import parse_mathematica

from .errors import ParseError

NULL = Symbol("Null")

# Named constants the Mathematica front end leaves as plain symbols
CONSTANTS: dict[str, Basic] = {
    "Catalan": Catalan,
    "ComplexInfinity": zoo,
    "Degree": pi / 180,
    "EulerGamma": EulerGamma,
    "GoldenRatio": GoldenRatio,
    "Indeterminate": nan,
    "Infinity": oo,
}

STRING_PLACEHOLDER = "SymkernelStringLiteral"

# Stands in for the missing argument of `f[]` and `{}`, which the front end
# cannot parse; dropped from the tree afterwards
EMPTY_PLACEHOLDER = "SymkernelNoArguments"
_EMPTY = Symbol(EMPTY_PLACEHOLDER)
_EMPTY_CALL = re.compile(r"\[\s*\]")
_EMPTY_LIST = re.compile(r"\{\s*\}")

_COMMENT = re.compile(r"\(\*.*?\*\)", re.DOTALL)
_STRING_LITERAL = re.compile(r'"((?:[^"\\]|\\.)*)"', re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}

# A line ending in one of these continues on the next line
_CONTINUATION = frozenset("+-*/^=,<>|&@.:")


def strip_comments(source: str) -> str:
    """Remove ``(* ... *)`` comments."""
    return _COMMENT.sub(" ", source)


def split_statements(source: str) -> list[str]:
    """
    Split a cell into top-level statements.

    A newline ends a statement only outside brackets and string literals,
    and only when the line does not end with a binary operator.

    Examples:
        >>> split_statements("x = 2\\nx^2")
        ['x = 2', 'x^2']
        >>> split_statements("1 +\\n2")
        ['1 + 2']
    """
    statements: list[str] = []
    current: list[str] = []
    depth = 0
    in_string = False
    escaped = False

    for ch in strip_comments(source):
        if in_string:
            current.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth = max(0, depth - 1)
        elif ch == "\n":
            text = "".join(current).strip()
            if depth == 0 and text and text[-1] not in _CONTINUATION:
                statements.append(text)
                current = []
                continue
            ch = " "
        current.append(ch)

    tail = "".join(current).strip()
    if tail:
        statements.append(tail)
    return statements


def _unescape(text: str) -> str:
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), text, flags=re.DOTALL)


def extract_strings(statement: str) -> tuple[str, dict[str, Str]]:
    """Replace string literals with placeholder identifiers."""
    literals: dict[str, Str] = {}

    def substitute(match: re.Match) -> str:
        name = f"{STRING_PLACEHOLDER}{len(literals)}"
        literals[name] = Str(_unescape(match.group(1)))
        return name

    return _STRING_LITERAL.sub(substitute, statement), literals


def fill_empty(statement: str) -> tuple[str, bool]:
    """Give ``f[]`` and ``{}`` a placeholder argument the front end accepts."""
    text, calls = _EMPTY_CALL.subn(f"[{EMPTY_PLACEHOLDER}]", statement)
    text, lists = _EMPTY_LIST.subn(f"{{{EMPTY_PLACEHOLDER}}}", text)
    return text, bool(calls or lists)


def _drop_empty(expr: Basic) -> Basic:
    if not expr.args:
        return expr
    args = tuple(_drop_empty(arg) for arg in expr.args if arg != _EMPTY)
    if args == expr.args:
        return expr
    return expr.func(*args)


def parse(statement: str) -> Basic:
    """
    Parse one statement into an unevaluated-head expression tree.

    Heads sympy does not know (``Set``, ``N``, ``Solve``...) come back as
    undefined functions; the evaluator gives them meaning.

    Raises:
        ParseError: If the front end rejects the text
    """
    text, literals = extract_strings(statement)
    text, has_empty = fill_empty(text)
    try:
        expr = parse_mathematica(text)
    except Exception as exc:
        raise ParseError(f"Syntax error in input: {statement}\n{type(exc).__name__}: {exc}") from exc

    if isinstance(expr, (list, tuple)):
        expr = Tuple(*expr)
    if not isinstance(expr, Basic):
        # Heads the front end evaluates itself can come back as plain numbers
        try:
            expr = sympify(expr, strict=True)
        except SympifyError as exc:
            raise ParseError(f"Syntax error in input: {statement}") from exc

    if has_empty:
        try:
            expr = _drop_empty(expr)
        except (TypeError, ValueError) as exc:
            raise ParseError(f"Syntax error in input: {statement}\n{type(exc).__name__}: {exc}") from exc

    replacements: dict[Basic, Basic] = {Symbol(name): value for name, value in CONSTANTS.items()}
    replacements.update({Symbol(name): value for name, value in literals.items()})
    return expr.xreplace(replacements)


__all__ = ["NULL", "CONSTANTS", "strip_comments", "split_statements", "extract_strings", "fill_empty", "parse"]
