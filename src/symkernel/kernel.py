"""
Jupyter Kernel
Maps ipykernel's wrapper-kernel callbacks onto the engine adapter.
"""

from typing import Any, Dict, Optional

from ipykernel.kernelbase import Kernel

from . import __version__
from .adapter import DisplayData, EngineAdapter, ReplacementOptions
from .core import LogContext, get_logger

logger = get_logger(__name__)


def execute_result_content(execution_count: int, display: DisplayData) -> Dict[str, Any]:
    """Content of an ``execute_result`` iopub message."""
    return {
        "execution_count": execution_count,
        "data": dict(display.data),
        "metadata": dict(display.metadata),
    }


def complete_reply(options: Optional[ReplacementOptions], cursor_pos: int) -> Dict[str, Any]:
    """``complete_reply`` content; no options means an empty match list at the cursor."""
    if options is None:
        return {
            "status": "ok",
            "matches": [],
            "cursor_start": cursor_pos,
            "cursor_end": cursor_pos,
            "metadata": {},
        }
    return {
        "status": "ok",
        "matches": list(options.matches),
        "cursor_start": options.start,
        "cursor_end": options.end,
        "metadata": {},
    }


def inspect_reply(display: DisplayData, found: bool = False) -> Dict[str, Any]:
    """``inspect_reply`` content."""
    return {
        "status": "ok",
        "found": found,
        "data": dict(display.data),
        "metadata": dict(display.metadata),
    }


class SymKernel(Kernel):
    """Jupyter kernel for Mathematica-style symbolic math"""

    implementation = "symkernel"
    implementation_version = __version__
    language = "symjamma"
    language_version = "1.0.0"
    banner = "symkernel - Mathematica-style symbolic math on sympy"

    def __init__(self, **kwargs: Any):
        super().__init__(**kwargs)
        self.adapter = EngineAdapter()

    @property
    def language_info(self) -> Dict[str, Any]:
        return self.adapter.get_language_info().to_dict()

    def do_execute(
        self,
        code: str,
        silent: bool,
        store_history: bool = True,
        user_expressions: Optional[Dict[str, Any]] = None,
        allow_stdin: bool = False,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        """Evaluate a cell; errors are reported on stderr and never fail the cell."""
        display = None
        if code.strip():
            with LogContext(execution_count=self.execution_count):
                display = self.adapter.evaluate(code)

        if display is not None and not silent:
            self.send_response(
                self.iopub_socket,
                "execute_result",
                execute_result_content(self.execution_count, display),
            )

        return {
            "status": "ok",
            "execution_count": self.execution_count,
            "payload": [],
            "user_expressions": {},
        }

    def do_complete(self, code: str, cursor_pos: int) -> Dict[str, Any]:
        return complete_reply(self.adapter.complete(code, cursor_pos), cursor_pos)

    def do_inspect(
        self,
        code: str,
        cursor_pos: int,
        detail_level: int = 0,
        omit_sections: Any = (),
    ) -> Dict[str, Any]:
        return inspect_reply(self.adapter.inspect(code, cursor_pos, detail_level))

    def do_shutdown(self, restart: bool) -> Dict[str, Any]:
        logger.info("kernel_shutdown", restart=restart)
        self.adapter.close()
        return {"status": "ok", "restart": restart}


__all__ = ["SymKernel", "complete_reply", "execute_result_content", "inspect_reply"]
