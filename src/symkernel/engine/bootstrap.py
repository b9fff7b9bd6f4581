"""
Engine Bootstrap
Explicit one-time initialisation of the process-wide engine state.

Order matters and is fixed:

1. engine flags are read from settings (file access, recursion limit) and
   the interpreter's integer-to-text digit limit is lifted;
2. the built-in function table is built; ``Get`` is only a known function
   when file access is enabled, so this needs the flags;
3. the autocompleter is seeded from the keyword lists, which are derived
   from the finished built-in table.

The first ``bootstrap()`` call wins; later calls return the same runtime
regardless of the settings passed.
"""

import sys
from dataclasses import dataclass

from ..completion import AutoCompleter
from ..core import Settings, get_logger, get_settings
from .builtins import (
    DOLLAR_STRINGS,
    SYMBOL_STRINGS,
    BuiltinRegistry,
    create_builtins,
    function_strings,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class EngineFlags:
    """Process-wide engine configuration."""

    filesystem_enabled: bool = True
    recursion_limit: int = 256

    @classmethod
    def from_settings(cls, settings: Settings) -> "EngineFlags":
        return cls(
            filesystem_enabled=settings.filesystem_enabled,
            recursion_limit=settings.recursion_limit,
        )


@dataclass(frozen=True)
class KeywordLists:
    """The three keyword lists the autocompleter is seeded from."""

    dollar_strings: tuple[str, ...]
    symbol_strings: tuple[str, ...]
    function_strings: tuple[str, ...]


@dataclass(frozen=True)
class EngineRuntime:
    """Everything initialised once per process and shared read-only."""

    flags: EngineFlags
    builtins: BuiltinRegistry
    keywords: KeywordLists
    completer: AutoCompleter


_runtime: EngineRuntime | None = None


def bootstrap(settings: Settings | None = None) -> EngineRuntime:
    """Initialise the engine once and return the shared runtime."""
    global _runtime
    if _runtime is not None:
        return _runtime

    settings = settings or get_settings()

    flags = EngineFlags.from_settings(settings)
    # Exact integers such as Factorial[2000] print with more than 4300 digits
    if hasattr(sys, "set_int_max_str_digits"):
        sys.set_int_max_str_digits(0)

    builtins = create_builtins()

    keywords = KeywordLists(
        dollar_strings=DOLLAR_STRINGS,
        symbol_strings=SYMBOL_STRINGS,
        function_strings=function_strings(builtins, flags.filesystem_enabled),
    )
    completer = AutoCompleter(
        keywords.dollar_strings,
        keywords.symbol_strings,
        keywords.function_strings,
        prefer_long=True,
    )

    _runtime = EngineRuntime(flags=flags, builtins=builtins, keywords=keywords, completer=completer)
    logger.info(
        "engine_bootstrapped",
        functions=len(keywords.function_strings),
        filesystem_enabled=flags.filesystem_enabled,
        recursion_limit=flags.recursion_limit,
    )
    return _runtime


def reset_runtime() -> None:
    """Forget the shared runtime so the next bootstrap() starts over."""
    global _runtime
    _runtime = None


__all__ = ["EngineFlags", "KeywordLists", "EngineRuntime", "bootstrap", "reset_runtime"]
