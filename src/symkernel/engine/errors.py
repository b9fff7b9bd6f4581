"""Engine exceptions and the exception printer."""

class EngineError(Exception):
    """Base for all engine errors."""

    pass


class AbortError(EngineError):
    """The computation was aborted; the result is $Aborted."""

    pass


class ParseError(EngineError):
    """Source text is not valid input syntax."""

    pass


class EvaluationError(EngineError):
    """Evaluation failed; the originating exception is chained as __cause__."""

    pass


class MathError(EngineError):
    """Base for math-domain failures raised by the session itself."""

    pass


class RecursionLimitError(MathError):
    """Binding substitution did not reach a fixed point."""

    def __init__(self, limit: int):
        super().__init__(f"$RecursionLimit::reclim: Recursion depth of {limit} exceeded.")
        self.limit = limit


class ArgumentCountError(MathError):
    """A built-in function was called with an unsupported number of arguments."""

    def __init__(self, name: str, given: int, expected: str):
        super().__init__(f"{name}::argx: {name} called with {given} arguments; {expected} expected.")
        self.name = name
        self.given = given


class FileAccessError(MathError):
    """A file could not be read, or file access is disabled."""

    pass


def is_math_cause(exc: BaseException | None) -> bool:
    """True when exc is a math-domain failure worth reporting instead of its wrapper."""
    if exc is None:
        return False
    if isinstance(exc, (MathError, ArithmeticError, NotImplementedError)):
        return True
    # sympy reports domain problems (non-polynomial input, unsolvable
    # systems, bad assumptions) through its own exception modules
    return type(exc).__module__.startswith("sympy.")


def format_exception(exc: BaseException) -> str:
    """Render exc the way the notebook shows engine errors: ``Name: message``."""
    message = str(exc)
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__


__all__ = [
    "EngineError",
    "AbortError",
    "ParseError",
    "EvaluationError",
    "MathError",
    "RecursionLimitError",
    "ArgumentCountError",
    "FileAccessError",
    "is_math_cause",
    "format_exception",
]
