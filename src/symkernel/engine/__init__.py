"""
Math Engine
sympy configured as a Mathematica-style session: parsing, built-in
functions, bindings, output form and failure classification.
"""

from .bootstrap import EngineFlags, EngineRuntime, KeywordLists, bootstrap, reset_runtime
from .errors import (
    AbortError,
    ArgumentCountError,
    EngineError,
    EvaluationError,
    FileAccessError,
    MathError,
    ParseError,
    RecursionLimitError,
    format_exception,
)
from .evaluator import Evaluator
from .interpreter import ABORTED, Interpreter, Outcome, OutcomeKind, create_interpreter
from .output import OutputFormatter, format_decimal
from .supervisor import SupervisedInterpreter

__all__ = [
    # Bootstrap
    "EngineFlags",
    "EngineRuntime",
    "KeywordLists",
    "bootstrap",
    "reset_runtime",
    # Errors
    "AbortError",
    "ArgumentCountError",
    "EngineError",
    "EvaluationError",
    "FileAccessError",
    "MathError",
    "ParseError",
    "RecursionLimitError",
    "format_exception",
    # Session
    "Evaluator",
    "ABORTED",
    "Interpreter",
    "Outcome",
    "OutcomeKind",
    "create_interpreter",
    "OutputFormatter",
    "format_decimal",
    "SupervisedInterpreter",
]
