"""
Engine Adapter
The four callbacks the notebook kernel needs, backed by one engine session.

Failures never reach the host: every error is written to the diagnostic
stream (``sys.stderr``, which the kernel forwards to the notebook), logged,
and the cell completes without a result.
"""

import sys
from dataclasses import dataclass, field

from .completion import find_longest_matching_at
from .core import Settings, get_logger, get_settings
from .engine import (
    EngineRuntime,
    Interpreter,
    Outcome,
    OutcomeKind,
    SupervisedInterpreter,
    bootstrap,
    create_interpreter,
)
from .language import LanguageInfo, build_language_info

logger = get_logger(__name__)

PLAIN_TEXT = "text/plain"


@dataclass(frozen=True)
class DisplayData:
    """MIME-tagged payload rendered by the front end."""

    data: dict[str, str] = field(default_factory=dict)
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def plain(cls, text: str) -> "DisplayData":
        return cls(data={PLAIN_TEXT: text})

    @property
    def text(self) -> str | None:
        return self.data.get(PLAIN_TEXT)


@dataclass(frozen=True)
class ReplacementOptions:
    """Completion candidates and the half-open span ``[start, end)`` they replace."""

    matches: list[str]
    start: int
    end: int


class EngineAdapter:
    """
    One engine session exposed as eval / inspect / complete / language info.

    With ``settings.supervised`` the session lives in a worker process with
    an optional per-cell timeout; otherwise it runs in-process.
    """

    def __init__(self, settings: Settings | None = None, runtime: EngineRuntime | None = None):
        self.settings = settings or get_settings()
        self.runtime = runtime or bootstrap(self.settings)
        self.language_info = build_language_info()

        self._interpreter: Interpreter | SupervisedInterpreter
        if self.settings.supervised:
            self._interpreter = SupervisedInterpreter(self.settings)
        else:
            self._interpreter = create_interpreter(self.settings, self.runtime)

        logger.info("adapter_ready", supervised=self.settings.supervised)

    @property
    def interpreter(self) -> Interpreter | SupervisedInterpreter:
        return self._interpreter

    def get_language_info(self) -> LanguageInfo:
        return self.language_info

    def evaluate(self, source: str) -> DisplayData | None:
        """
        Evaluate one cell.

        Returns:
            Plain-text display data for a result, ``$Aborted`` for an aborted
            computation, None when there is nothing to show (no ``Out[n]``)
        """
        outcome = self._interpreter.run(source)

        if outcome.stdout:
            sys.stdout.write(outcome.stdout)
            sys.stdout.flush()

        if outcome.failed:
            self._report(outcome)

        if outcome.text:
            return DisplayData.plain(outcome.text)
        return None

    def _report(self, outcome: Outcome) -> None:
        print(outcome.diagnostic, file=sys.stderr)
        if outcome.kind is OutcomeKind.PARSE_ERROR:
            print(file=sys.stderr)
        sys.stderr.flush()

        logger.warning("evaluation_failed", kind=outcome.kind.value, error=outcome.diagnostic)

    def inspect(self, source: str, cursor: int, detail_level: int = 0) -> DisplayData:
        """
        Describe the identifier under the cursor.

        Session values are not looked up; the reply always says there is no
        value for the identifier.
        """
        match = find_longest_matching_at(source, cursor)
        identifier = match.extract(source) if match is not None else ""
        logger.debug("inspect", identifier=identifier, detail_level=detail_level)
        return DisplayData.plain(f"No memory value for '{identifier}'")

    def complete(self, source: str, cursor: int) -> ReplacementOptions | None:
        """Complete the identifier touching the cursor from the engine's keyword lists."""
        match = find_longest_matching_at(source, cursor)
        if match is None:
            return None
        prefix = match.extract(source)
        return ReplacementOptions(self.runtime.completer.autocomplete(prefix), match.low, match.high)

    def close(self) -> None:
        self._interpreter.close()


__all__ = ["DisplayData", "EngineAdapter", "ReplacementOptions", "PLAIN_TEXT"]
