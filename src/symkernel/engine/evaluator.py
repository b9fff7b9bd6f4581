"""
Evaluation Session
One mutable engine session: bindings, bounded history, parse cache.
"""

import time
from collections import deque
from pathlib import Path
from typing import Any

from sympy import Basic, Float, Symbol, Tuple
from sympy.core.symbol import Str

from ..core import LRUCache, get_logger
from .bootstrap import EngineRuntime
from .builtins import head_name
from .errors import (
    AbortError,
    ArgumentCountError,
    EvaluationError,
    FileAccessError,
    MathError,
    ParseError,
    RecursionLimitError,
)
from .parser import NULL, parse, split_statements

logger = get_logger(__name__)

# Errors that leave the session untouched and carry their own meaning
_PASSTHROUGH = (AbortError, ParseError, EvaluationError, MemoryError, RecursionError)


class Evaluator:
    """
    Evaluates cells against a long-lived session.

    ``x = e`` evaluates e and binds x; ``x := e`` binds e unevaluated and
    re-evaluates it on every use; ``Clear[x]`` removes bindings. Results are
    kept in a history bounded by ``history_limit``.
    """

    def __init__(
        self,
        runtime: EngineRuntime,
        history_limit: int = 100,
        parse_cache_size: int = 256,
    ):
        self.runtime = runtime
        self.history: deque[Basic] = deque(maxlen=history_limit)
        self._bindings: dict[Symbol, Basic] = {}
        self._parse_cache = LRUCache[Basic](max_size=parse_cache_size)

    @property
    def parse_cache(self) -> LRUCache[Basic]:
        return self._parse_cache

    def bindings(self) -> dict[str, Basic]:
        """Snapshot of the session bindings by name."""
        return {symbol.name: value for symbol, value in self._bindings.items()}

    def eval(self, source: str) -> Basic | None:
        """
        Evaluate every statement in source and return the last result.

        Returns:
            The result expression, or None when the last statement produced
            nothing (assignment, trailing ``;``, ``Null``)

        Raises:
            ParseError: If a statement does not parse
            AbortError: If the computation was aborted
            EvaluationError: If evaluation failed; the cause is chained
        """
        result: Basic | None = None
        for statement in split_statements(source):
            expr = self._parse_cache.get_or_compute(statement, parse)
            try:
                result = self._evaluate(expr)
            except _PASSTHROUGH:
                raise
            except Exception as exc:
                raise EvaluationError(f"Evaluation of '{statement}' failed") from exc

        if result is None or result == NULL:
            return None
        self.history.append(result)
        return result

    def _evaluate(self, expr: Basic) -> Basic | None:
        head = head_name(expr)

        if head == "CompoundExpression":
            result = None
            for part in expr.args:
                result = self._evaluate(part)
            return result
        if head == "Set":
            return self._assign(expr.args, delayed=False)
        if head == "SetDelayed":
            return self._assign(expr.args, delayed=True)
        if head == "Clear":
            return self._clear(expr.args)
        if head == "Get":
            return self._get(expr.args)
        if head == "Timing":
            return self._timing(expr.args)

        resolved = self._resolve(expr)
        result = self.runtime.builtins.apply(resolved)
        return None if result == NULL else result

    def _assign(self, args: tuple[Basic, ...], delayed: bool) -> None:
        op = "SetDelayed" if delayed else "Set"
        if len(args) != 2:
            raise MathError(f"{op}::argrx: {op} called with {len(args)} arguments; 2 expected.")
        target, value = args
        if not isinstance(target, Symbol):
            raise MathError(f"{op}::write: Cannot assign to {target}.")

        if not delayed:
            value = self._evaluate(value)
            if value is None:
                value = NULL
            elif target in value.free_symbols:
                raise RecursionLimitError(self.runtime.flags.recursion_limit)

        self._bindings[target] = value
        logger.debug("symbol_bound", symbol=target.name, delayed=delayed)
        return None

    def _clear(self, args: tuple[Basic, ...]) -> None:
        for arg in args:
            if isinstance(arg, Str):
                arg = Symbol(arg.name)
            self._bindings.pop(arg, None)
        return None

    def _timing(self, args: tuple[Basic, ...]) -> Basic:
        """``Timing[e]`` is ``{seconds, value}``."""
        if len(args) != 1:
            raise ArgumentCountError("Timing", len(args), "1")
        start = time.perf_counter()
        result = self._evaluate(args[0])
        elapsed = time.perf_counter() - start
        return Tuple(Float(elapsed), NULL if result is None else result)

    def _get(self, args: tuple[Basic, ...]) -> Basic | None:
        if not self.runtime.flags.filesystem_enabled:
            raise FileAccessError("Get::noopen: File access is disabled.")
        if len(args) != 1 or not isinstance(args[0], Str):
            raise MathError('Get::string: Get expects a single file name such as Get["file.m"].')

        path = Path(args[0].name).expanduser()
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FileAccessError(f"Get::noopen: Cannot open {path}.") from exc

        logger.info("file_loaded", path=str(path))
        result: Basic | None = None
        for statement in split_statements(source):
            result = self._evaluate(self._parse_cache.get_or_compute(statement, parse))
        return result

    def _resolve(self, expr: Any) -> Any:
        """Substitute bindings until nothing changes."""
        if not self._bindings or not isinstance(expr, Basic):
            return expr

        limit = self.runtime.flags.recursion_limit
        for _ in range(limit):
            replaced = expr.xreplace(self._bindings)
            if replaced == expr:
                return replaced
            expr = replaced
        raise RecursionLimitError(limit)


__all__ = ["Evaluator"]
