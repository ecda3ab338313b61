"""
Progress Display Module

Print one status line per provisioning step, with indented detail lines for
per-subnet and per-NIC work.

Security Requirements:
- No credential exposure in output (messages pass through LogSanitizer)
- Thread-safe: the storage account task prints from a worker thread
"""

import logging
import sys
import threading
import time
from dataclasses import dataclass
from enum import Enum

from aznic.log_sanitizer import LogSanitizer

logger = logging.getLogger(__name__)


class ProgressStage(Enum):
    """Progress stage indicators."""

    STEP = "step"
    DETAIL = "detail"
    COMPLETED = "completed"
    FAILED = "failed"
    WARNING = "warning"


@dataclass
class ProgressUpdate:
    """Progress update information."""

    stage: ProgressStage
    message: str
    timestamp: float
    thread: str


class ProgressDisplay:
    """
    Status line display for the sample workflow.

    Steps print as-is, details are tab-indented, completions and failures
    get a stage symbol. Failures and warnings go to stderr.
    """

    SYMBOLS = {
        ProgressStage.COMPLETED: "✓",
        ProgressStage.FAILED: "✗",
        ProgressStage.WARNING: "⚠",
    }

    ASCII_SYMBOLS = {
        ProgressStage.COMPLETED: "OK",
        ProgressStage.FAILED: "FAIL",
        ProgressStage.WARNING: "WARN",
    }

    def __init__(self, use_unicode: bool = True, output_file=None, error_file=None):
        """
        Initialize progress display.

        Args:
            use_unicode: Use Unicode symbols (True) or ASCII (False)
            output_file: Output file object (default: sys.stdout)
            error_file: Output for failures and warnings (default: sys.stderr)
        """
        self.use_unicode = use_unicode
        self.output_file = output_file or sys.stdout
        self.error_file = error_file or sys.stderr
        self.updates: list[ProgressUpdate] = []
        self._lock = threading.Lock()

    def step(self, message: str) -> None:
        """Announce a top-level step, e.g. "Create virtual network"."""
        self.update(message, ProgressStage.STEP)

    def detail(self, message: str) -> None:
        """Announce a sub-step of the current step (tab-indented)."""
        self.update(message, ProgressStage.DETAIL)

    def complete(self, message: str) -> None:
        self.update(message, ProgressStage.COMPLETED)

    def fail(self, message: str) -> None:
        self.update(message, ProgressStage.FAILED)

    def warn(self, message: str) -> None:
        self.update(message, ProgressStage.WARNING)

    def update(self, message: str, stage: ProgressStage = ProgressStage.STEP) -> None:
        """
        Record and print a status line.

        Args:
            message: Status message
            stage: Stage of the message
        """
        update = ProgressUpdate(
            stage=stage,
            message=LogSanitizer.sanitize(message),
            timestamp=time.time(),
            thread=threading.current_thread().name,
        )
        with self._lock:
            self.updates.append(update)
            self._print(update)

    def _format_update(self, update: ProgressUpdate) -> str:
        if update.stage == ProgressStage.STEP:
            return update.message
        if update.stage == ProgressStage.DETAIL:
            return f"\t{update.message}"
        symbols = self.SYMBOLS if self.use_unicode else self.ASCII_SYMBOLS
        return f"{symbols[update.stage]} {update.message}"

    def _print(self, update: ProgressUpdate) -> None:
        if update.stage in (ProgressStage.FAILED, ProgressStage.WARNING):
            target = self.error_file
        else:
            target = self.output_file
        print(self._format_update(update), file=target, flush=True)

    def get_updates(self) -> list[ProgressUpdate]:
        """Return a copy of all recorded updates."""
        with self._lock:
            return self.updates.copy()

    def messages(self) -> list[str]:
        """Return the recorded messages in order."""
        return [u.message for u in self.get_updates()]
