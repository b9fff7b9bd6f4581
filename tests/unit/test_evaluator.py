"""Tests for the evaluation session."""

import pytest
from sympy import Integer, Rational, Symbol, Tuple

from symkernel.engine import (
    AbortError,
    ArgumentCountError,
    EvaluationError,
    Evaluator,
    FileAccessError,
    ParseError,
    RecursionLimitError,
)


def test_exact_arithmetic(evaluator):
    """Test arithmetic stays exact."""
    assert evaluator.eval("1/2 + 1/3") == Rational(5, 6)


def test_assignment_returns_nothing(evaluator):
    """Test Set binds and produces no result."""
    assert evaluator.eval("x = 3") is None
    assert evaluator.eval("x^2") == Integer(9)
    assert evaluator.bindings() == {"x": Integer(3)}


def test_immediate_assignment_evaluates_once(evaluator):
    """Test Set captures the value at assignment time."""
    evaluator.eval("a = 2")
    evaluator.eval("b = a + 1")
    evaluator.eval("a = 10")

    assert evaluator.eval("b") == Integer(3)


def test_delayed_assignment_reevaluates(evaluator):
    """Test SetDelayed re-evaluates on every use."""
    evaluator.eval("a = 2")
    evaluator.eval("b := a + 1")
    evaluator.eval("a = 10")

    assert evaluator.eval("b") == Integer(11)


def test_clear(evaluator):
    """Test Clear removes bindings."""
    evaluator.eval("x = 3")
    evaluator.eval("Clear[x]")

    assert evaluator.eval("x") == Symbol("x")


def test_trailing_semicolon_suppresses_result(evaluator):
    """Test a trailing ; produces no result."""
    assert evaluator.eval("1 + 2;") is None


def test_multiple_statements(evaluator):
    """Test the last statement's value is the cell's value."""
    assert evaluator.eval("a = 2\nb = 3\na*b") == Integer(6)


def test_comments_are_ignored(evaluator):
    """Test comments do not affect evaluation."""
    assert evaluator.eval("(* comment *) 1 + 1") == Integer(2)


def test_builtins_are_applied(evaluator):
    """Test built-in heads evaluate."""
    x = Symbol("x")

    assert evaluator.eval("Expand[(x + 1)^2]") == x**2 + 2*x + 1
    assert evaluator.eval("D[x^3, x]") == 3 * x**2
    assert evaluator.eval("Integrate[x, {x, 0, 1}]") == Rational(1, 2)
    assert evaluator.eval("Length[{1, 2, 3}]") == Integer(3)


def test_solve_returns_rules(evaluator):
    """Test Solve returns a list of rule lists."""
    result = evaluator.eval("Solve[x^2 == 4, x]")

    assert isinstance(result, Tuple)
    assert len(result) == 2
    assert {rules[0].args[1] for rules in result} == {Integer(-2), Integer(2)}


def test_history_is_bounded(runtime):
    """Test only the most recent results are kept."""
    evaluator = Evaluator(runtime, history_limit=3)

    for i in range(5):
        evaluator.eval(f"{i} + 1")

    assert list(evaluator.history) == [Integer(3), Integer(4), Integer(5)]


def test_history_skips_empty_results(evaluator):
    """Test assignments are not recorded."""
    evaluator.eval("x = 1")
    evaluator.eval("x + 1")

    assert list(evaluator.history) == [Integer(2)]


def test_parse_cache(evaluator):
    """Test repeated statements are parsed once."""
    evaluator.eval("1 + 1")
    evaluator.eval("1 + 1")

    assert evaluator.parse_cache.stats.hits == 1
    assert "1 + 1" in evaluator.parse_cache


def test_self_reference_hits_recursion_limit(evaluator):
    """Test x = x + 1 fails instead of looping."""
    with pytest.raises(EvaluationError) as exc_info:
        evaluator.eval("x = x + 1")

    assert isinstance(exc_info.value.__cause__, RecursionLimitError)
    assert "$RecursionLimit" in str(exc_info.value.__cause__)
    assert evaluator.bindings() == {}


def test_delayed_self_reference_hits_recursion_limit(evaluator):
    """Test a delayed cycle fails when used."""
    evaluator.eval("y := y + 1")

    with pytest.raises(EvaluationError) as exc_info:
        evaluator.eval("y")

    assert isinstance(exc_info.value.__cause__, RecursionLimitError)


def test_argument_count(evaluator):
    """Test wrong arity is reported as a math error."""
    with pytest.raises(EvaluationError) as exc_info:
        evaluator.eval("Pause[1, 2]")

    cause = exc_info.value.__cause__
    assert isinstance(cause, ArgumentCountError)
    assert "Pause::argx" in str(cause)


def test_abort(evaluator):
    """Test Abort[] raises AbortError unwrapped."""
    with pytest.raises(AbortError):
        evaluator.eval("Abort[]")


def test_parse_error_is_not_wrapped(evaluator):
    """Test syntax errors surface as ParseError."""
    with pytest.raises(ParseError):
        evaluator.eval("Sin[x")


def test_print_writes_stdout(evaluator, capsys):
    """Test Print writes to stdout and yields no result."""
    assert evaluator.eval('Print["hello"]') is None
    assert capsys.readouterr().out == "hello\n"


def test_get_reads_file(evaluator, package_file):
    """Test Get evaluates a file and returns its last value."""
    assert evaluator.eval(f'Get["{package_file}"]') == Integer(30)
    assert evaluator.bindings()["a"] == Integer(5)


def test_get_missing_file(evaluator, tmp_path):
    """Test a missing file is a file access error."""
    with pytest.raises(EvaluationError) as exc_info:
        evaluator.eval(f'Get["{tmp_path / "missing.m"}"]')

    assert isinstance(exc_info.value.__cause__, FileAccessError)


def test_get_disabled(restricted_runtime, package_file):
    """Test Get is refused when file access is disabled."""
    evaluator = Evaluator(restricted_runtime)

    with pytest.raises(EvaluationError) as exc_info:
        evaluator.eval(f'Get["{package_file}"]')

    assert "disabled" in str(exc_info.value.__cause__)


def test_failure_keeps_session(evaluator):
    """Test bindings survive a failed cell."""
    evaluator.eval("x = 3")
    with pytest.raises(EvaluationError):
        evaluator.eval("Pause[1, 2]")

    assert evaluator.eval("x + 1") == Integer(4)


def test_timing(evaluator):
    """Test Timing returns elapsed seconds and the value."""
    result = evaluator.eval("Timing[Expand[(x + 1)^2]]")

    assert isinstance(result, Tuple)
    assert result[0] >= 0
    assert result[1] == Symbol("x")**2 + 2*Symbol("x") + 1


def test_timing_of_assignment(evaluator):
    """Test Timing of an assignment pairs the time with Null."""
    result = evaluator.eval("Timing[x = 2]")

    assert result[1] == Symbol("Null")
    assert evaluator.bindings() == {"x": Integer(2)}


def test_call_without_arguments(evaluator, capsys):
    """Test Print[] prints an empty line."""
    assert evaluator.eval("Print[]") is None
    assert capsys.readouterr().out == "\n"


def test_first_of_empty_list(evaluator):
    """Test First[{}] is a math error, not a syntax error."""
    with pytest.raises(EvaluationError) as exc_info:
        evaluator.eval("First[{}]")

    assert "First::nofirst" in str(exc_info.value.__cause__)
