"""chain_engine.scheduler

Fixed-cadence tick clock.

The UI reruns roughly once per interval; the clock says how many ticks are
actually owed so that slow or early reruns neither skip nor double ticks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class TickClock:
    interval_s: float = 1.0
    max_catchup: int = 5
    last: Optional[float] = None

    def __post_init__(self) -> None:
        if self.interval_s <= 0:
            raise ValueError(f"interval_s must be > 0, got {self.interval_s}")
        if self.max_catchup < 1:
            raise ValueError(f"max_catchup must be >= 1, got {self.max_catchup}")

    def due(self, now: float) -> int:
        """Number of ticks owed at time `now` (seconds, monotonic)."""
        if self.last is None:
            self.last = float(now)
            return 0

        elapsed = float(now) - self.last
        if elapsed < self.interval_s:
            return 0

        n = int(elapsed // self.interval_s)
        if n > self.max_catchup:
            # page was asleep; don't simulate the gap
            logger.info("tick clock skipped %d ticks after %.1fs gap", n - self.max_catchup, elapsed)
            self.last = float(now)
            return self.max_catchup

        self.last += n * self.interval_s
        return n

    def reset(self) -> None:
        self.last = None
