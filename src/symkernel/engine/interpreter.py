"""
Interpreter
Runs one cell through the session and classifies what happened.

The classification is a plain picklable record so the supervised worker can
send it across a pipe unchanged.
"""

import dataclasses
from contextlib import redirect_stdout
from dataclasses import dataclass
from enum import Enum
from io import StringIO

from ..core import Settings
from .bootstrap import EngineRuntime
from .errors import (
    AbortError,
    EvaluationError,
    ParseError,
    format_exception,
    is_math_cause,
)
from .evaluator import Evaluator
from .output import OutputFormatter

ABORTED = "$Aborted"


class OutcomeKind(str, Enum):
    """What a cell evaluation produced."""

    VALUE = "value"
    EMPTY = "empty"
    ABORTED = "aborted"
    PARSE_ERROR = "parse_error"
    MATH_ERROR = "math_error"
    RUNTIME_ERROR = "runtime_error"
    RESOURCE_ERROR = "resource_error"


@dataclass(frozen=True)
class Outcome:
    """Result text or diagnostic of one cell, plus anything it printed."""

    kind: OutcomeKind
    text: str | None = None
    diagnostic: str | None = None
    stdout: str = ""

    @property
    def failed(self) -> bool:
        return self.diagnostic is not None


class Interpreter:
    """In-process cell runner: one evaluator and one formatter."""

    def __init__(self, evaluator: Evaluator, formatter: OutputFormatter):
        self.evaluator = evaluator
        self.formatter = formatter

    def run(self, source: str) -> Outcome:
        """Evaluate source; never raises."""
        captured = StringIO()
        with redirect_stdout(captured):
            outcome = self._run(source)
        return dataclasses.replace(outcome, stdout=captured.getvalue())

    def _run(self, source: str) -> Outcome:
        try:
            result = self.evaluator.eval(source)
            if result is None:
                return Outcome(OutcomeKind.EMPTY)

            buf = StringIO()
            self.formatter.reset()
            self.formatter.convert(buf, result)
            return Outcome(OutcomeKind.VALUE, text=buf.getvalue())
        except (AbortError, KeyboardInterrupt):
            return Outcome(OutcomeKind.ABORTED, text=ABORTED)
        except ParseError as exc:
            return Outcome(OutcomeKind.PARSE_ERROR, diagnostic=str(exc))
        except EvaluationError as exc:
            cause = exc.__cause__
            if is_math_cause(cause):
                return Outcome(OutcomeKind.MATH_ERROR, diagnostic=format_exception(cause))
            diagnostic = format_exception(exc)
            if cause is not None:
                diagnostic += "\n" + format_exception(cause)
            return Outcome(OutcomeKind.RUNTIME_ERROR, diagnostic=diagnostic)
        except (MemoryError, RecursionError) as exc:
            return Outcome(OutcomeKind.RESOURCE_ERROR, diagnostic=format_exception(exc))
        except Exception as exc:
            return Outcome(OutcomeKind.RUNTIME_ERROR, diagnostic=format_exception(exc))

    def close(self) -> None:
        pass


def create_interpreter(settings: Settings, runtime: EngineRuntime) -> Interpreter:
    """Build a fresh session (evaluator and formatter) for one adapter."""
    evaluator = Evaluator(
        runtime,
        history_limit=settings.history_limit,
        parse_cache_size=settings.parse_cache_size,
    )
    formatter = OutputFormatter(
        max_fraction_digits=settings.max_fraction_digits,
        min_fraction_digits=settings.min_fraction_digits,
    )
    return Interpreter(evaluator, formatter)


__all__ = ["ABORTED", "Interpreter", "Outcome", "OutcomeKind", "create_interpreter"]
