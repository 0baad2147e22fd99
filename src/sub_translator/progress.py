"""Progress tracking and remaining-time estimation."""

from __future__ import annotations

import time
import logging
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

PLEASE_WAIT = "Please wait..."


def format_duration(seconds: float) -> str:
    """Format seconds as '1h 2m 3s'."""
    total = int(round(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours}h {minutes}m {secs}s"


@dataclass(frozen=True)
class Estimate:
    """剩余时间估计。"""

    completed: int
    remaining: int
    seconds: Optional[float]

    @property
    def is_indeterminate(self) -> bool:
        return self.seconds is None

    def __str__(self) -> str:
        if self.seconds is None:
            return PLEASE_WAIT
        return format_duration(self.seconds)


class ProgressEstimator:
    """
    Running-average estimate of the time left for one file.

    Create one per file. Each call to ``record`` marks one more item as done
    and measures the time since the previous call (or since construction).
    """

    def __init__(
        self,
        total: int,
        min_samples: int = 10,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.total = total
        self.min_samples = min_samples
        self._clock = clock
        self._last = clock()
        self._elapsed = 0.0
        self.completed = 0

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def remaining(self) -> int:
        return max(self.total - self.completed, 0)

    def record(self) -> Estimate:
        """Mark one item completed and return the updated estimate."""
        now = self._clock()
        self._elapsed += now - self._last
        self._last = now
        self.completed += 1

        # 样本太少时平均值不可靠
        if self.completed < self.min_samples:
            return Estimate(self.completed, self.remaining, None)

        average = self._elapsed / self.completed
        return Estimate(self.completed, self.remaining, average * self.remaining)
