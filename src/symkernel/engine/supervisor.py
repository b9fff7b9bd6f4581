"""
Supervised Interpreter
Runs the session in a child process so a runaway or crashing cell costs the
session, not the kernel.

The worker owns the evaluator and formatter; only source text and
``Outcome`` records cross the pipe. A cell that exceeds ``eval_timeout`` or
is interrupted gets the worker terminated and replaced; bindings made so far
are lost with it.
"""

import multiprocessing
from multiprocessing.connection import Connection
from typing import Any

from ..core import Settings, configure_logging, get_logger
from .bootstrap import bootstrap
from .interpreter import ABORTED, Outcome, OutcomeKind, create_interpreter

logger = get_logger(__name__)

# spawn: the child must not inherit the kernel's sockets and threads
_CONTEXT = multiprocessing.get_context("spawn")

READY = "ready"


def worker_main(conn: Connection, settings_data: dict[str, Any]) -> None:
    """Child process loop: receive source, send Outcome, stop on None."""
    settings = Settings(**settings_data)
    configure_logging(settings.log_level, settings.json_logs)
    interpreter = create_interpreter(settings, bootstrap(settings))
    conn.send(READY)

    try:
        while True:
            try:
                source = conn.recv()
            except EOFError:
                break
            if source is None:
                break
            conn.send(interpreter.run(source))
    except KeyboardInterrupt:
        # The parent handles interrupts by terminating this process
        pass
    finally:
        conn.close()


class SupervisedInterpreter:
    """Cell runner backed by a restartable worker process."""

    def __init__(self, settings: Settings):
        """
        Start the worker.

        Args:
            settings: Settings passed to the worker; ``eval_timeout`` bounds
                each cell (None waits forever)
        """
        self.settings = settings
        self.timeout = settings.eval_timeout
        self.restarts = 0
        self._process: multiprocessing.process.BaseProcess | None = None
        self._conn: Connection | None = None
        self.start()

    def start(self) -> None:
        """Start a worker if none is running."""
        if self._process is not None and self._process.is_alive():
            return

        parent_conn, child_conn = _CONTEXT.Pipe()
        process = _CONTEXT.Process(
            target=worker_main,
            args=(child_conn, self.settings.model_dump()),
            name="symkernel-worker",
            daemon=True,
        )
        process.start()
        child_conn.close()

        # eval_timeout covers evaluation only, not worker startup
        try:
            handshake = parent_conn.recv()
        except EOFError as exc:
            parent_conn.close()
            process.join()
            raise RuntimeError(f"Evaluation worker failed to start (exit code {process.exitcode})") from exc
        if handshake != READY:
            raise RuntimeError(f"Unexpected worker handshake: {handshake!r}")

        self._process = process
        self._conn = parent_conn
        logger.info("worker_started", pid=process.pid)

    def close(self) -> None:
        """Stop the worker."""
        if self._conn is not None:
            try:
                self._conn.send(None)
            except (BrokenPipeError, OSError):
                pass
            self._conn.close()
            self._conn = None

        if self._process is not None:
            self._process.join(timeout=5)
            if self._process.is_alive():
                self._process.terminate()
                self._process.join()
            logger.info("worker_stopped", pid=self._process.pid)
            self._process = None

    def __enter__(self) -> "SupervisedInterpreter":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @property
    def pid(self) -> int | None:
        return self._process.pid if self._process is not None else None

    def _restart(self, reason: str) -> None:
        if self._process is not None:
            self._process.terminate()
            self._process.join()
            logger.warning(
                "worker_restarted",
                reason=reason,
                pid=self._process.pid,
                exitcode=self._process.exitcode,
            )
        if self._conn is not None:
            self._conn.close()
        self._process = None
        self._conn = None
        self.restarts += 1
        self.start()

    def run(self, source: str) -> Outcome:
        """Evaluate source in the worker; never raises."""
        if self._process is not None and not self._process.is_alive():
            self._restart("worker_died")
        self.start()
        assert self._conn is not None

        try:
            self._conn.send(source)
            if not self._conn.poll(self.timeout):
                self._restart("timeout")
                return Outcome(
                    OutcomeKind.ABORTED,
                    text=ABORTED,
                    diagnostic=f"Evaluation exceeded {self.timeout} seconds; session restarted.",
                )
            return self._conn.recv()
        except KeyboardInterrupt:
            self._restart("interrupted")
            return Outcome(OutcomeKind.ABORTED, text=ABORTED)
        except (EOFError, BrokenPipeError, ConnectionResetError):
            exitcode = self._process.exitcode if self._process is not None else None
            self._restart("worker_died")
            return Outcome(
                OutcomeKind.RESOURCE_ERROR,
                diagnostic=f"Evaluation worker exited unexpectedly (exit code {exitcode}); session restarted.",
            )


__all__ = ["SupervisedInterpreter", "worker_main"]
