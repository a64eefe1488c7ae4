"""Logging utilities with timing and tick tracking."""

from __future__ import annotations
import os
import sys
import threading
import time
from typing import Optional

from .config import ENV_QUIET


class Logger:
    """Application logger with timestamps, UI ticks and thread names."""

    def __init__(self, quiet: Optional[bool] = None):
        self._start_time: float = time.perf_counter()
        self._tick: int = 0
        self._lock = threading.Lock()
        if quiet is None:
            quiet = bool(os.environ.get(ENV_QUIET))
        self.quiet = quiet

    @property
    def tick(self) -> int:
        """Number of UI event batches pumped so far."""
        return self._tick

    def increment_tick(self) -> None:
        self._tick += 1

    @property
    def elapsed(self) -> float:
        """Seconds since logger was created."""
        return time.perf_counter() - self._start_time

    def log(self, msg: str) -> None:
        """Log a message with timestamp, tick and thread name."""
        if self.quiet:
            return
        thread = threading.current_thread().name
        line = f"[{self.elapsed:7.3f}s T{self._tick:06d} {thread}] {msg}\n"
        with self._lock:
            try:
                sys.stdout.write(line)
                sys.stdout.flush()
            except (OSError, ValueError):
                try:
                    sys.stderr.write(line)
                    sys.stderr.flush()
                except (OSError, ValueError):
                    pass

    def __call__(self, msg: str) -> None:
        """Shorthand for log()."""
        self.log(msg)


# Global logger instance
_logger: Optional[Logger] = None


def get_logger() -> Logger:
    """Get or create the global logger instance."""
    global _logger
    if _logger is None:
        _logger = Logger()
    return _logger


def set_quiet(quiet: bool) -> None:
    """Silence or re-enable the global logger."""
    get_logger().quiet = quiet


def log(msg: str) -> None:
    """Log a message using the global logger."""
    get_logger().log(msg)


def get_tick() -> int:
    """Get current UI tick count."""
    return get_logger().tick


def increment_tick() -> None:
    """Increment UI tick counter."""
    get_logger().increment_tick()


# Time utilities
def now() -> float:
    """Get current time in seconds (high precision)."""
    return time.perf_counter()
