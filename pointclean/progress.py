import logging
import time
from typing import Callable, Optional


logger = logging.getLogger(__name__)


class LoggingProgress:
    """Logs scoring progress every `step` fraction and never cancels."""

    def __init__(self, step: float = 0.1, label: str = "points"):
        if not 0 < step <= 1:
            raise ValueError(f"Progress step must be within (0, 1], got {step}")
        self.step = step
        self.label = label
        self._next = step

    def __call__(self, advancement: float) -> bool:
        if advancement + 1e-12 >= self._next:
            logger.info("Scoring %s: %3.0f%%", self.label, 100.0 * advancement)
            while self._next <= advancement + 1e-12:
                self._next += self.step
        return True


class TimeLimit:
    """Cancels once `seconds` of wall-clock time have passed since the first call."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        if seconds <= 0:
            raise ValueError(f"Time limit must be positive, got {seconds}")
        self.seconds = seconds
        self._clock = clock
        self._start: Optional[float] = None

    def __call__(self, advancement: float) -> bool:
        now = self._clock()
        if self._start is None:
            self._start = now
        if now - self._start > self.seconds:
            logger.warning("Time limit of %.1f s exceeded at %.1f%%", self.seconds, 100.0 * advancement)
            return False
        return True


def chain(*callbacks: Optional[Callable[[float], bool]]) -> Optional[Callable[[float], bool]]:
    """Combine callbacks; the result continues only while all of them continue."""
    active = [cb for cb in callbacks if cb is not None]
    if len(active) == 0:
        return None
    if len(active) == 1:
        return active[0]

    def _combined(advancement: float) -> bool:
        results = [cb(advancement) for cb in active]
        return all(results)

    return _combined
