"""Wall-clock timeout with a watchdog thread and an emergency fallback."""

from __future__ import annotations

import os
import sys
import threading
import time
from typing import Callable, Optional


class PlacementTimeout(RuntimeError):
    """Raised when the time budget has run out."""

    def __init__(self, message: str = "Timeout occurred") -> None:
        super().__init__(message)


def _force_exit() -> None:
    print("\nEmergency shutdown activated. Forcing exit.", file=sys.stderr)
    os._exit(1)


class TimeoutManager:
    """Flags a timeout after ``seconds`` and, if the program is still running
    ``emergency_seconds`` later, calls ``emergency_callback``.

    The default emergency callback terminates the process.
    """

    def __init__(self, seconds: float = 300, emergency_seconds: float = 10) -> None:
        self.seconds = seconds
        self.emergency_seconds = emergency_seconds
        self.emergency_callback: Optional[Callable[[], None]] = _force_exit
        self._timed_out = threading.Event()
        self._stop = threading.Event()
        self._start = time.monotonic()
        self._watchdog: Optional[threading.Thread] = None
        self._emergency: Optional[threading.Thread] = None

    def __enter__(self) -> "TimeoutManager":
        self.start_watchdog()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    @property
    def timed_out(self) -> bool:
        return self._timed_out.is_set()

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self._start

    def start_watchdog(self) -> None:
        """Reset the clock and start watching."""
        self.stop()
        self._stop.clear()
        self._timed_out.clear()
        self._start = time.monotonic()
        self._watchdog = threading.Thread(
            target=self._watch, name="timeout-watchdog", daemon=True
        )
        self._watchdog.start()

    def _watch(self) -> None:
        remaining = max(0.0, self.seconds - self.elapsed)
        if self._stop.wait(remaining):
            return
        self._timed_out.set()
        print("\nProgram timeout reached! Forcing termination...\n", flush=True)
        self._emergency = threading.Thread(
            target=self._countdown, name="timeout-emergency", daemon=True
        )
        self._emergency.start()

    def _countdown(self) -> None:
        if self._stop.wait(self.emergency_seconds):
            return
        callback = self.emergency_callback
        if callback is not None:
            callback()

    def check_timeout(self) -> None:
        """Raise PlacementTimeout if the time budget is spent."""
        if self._timed_out.is_set():
            raise PlacementTimeout()

    def stop(self) -> None:
        """Stop watching and cancel any pending emergency callback."""
        self._stop.set()
        current = threading.current_thread()
        for thread in (self._watchdog, self._emergency):
            if thread is not None and thread.is_alive() and thread is not current:
                thread.join()
        self._watchdog = None
        self._emergency = None