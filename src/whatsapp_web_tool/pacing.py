"""Randomized pauses between UI steps."""

from __future__ import annotations

import logging
import random
import time
from typing import Callable, Optional

from .config import DelayRange

LOGGER = logging.getLogger(__name__)


class Pacer:
    """Draws delays uniformly from a :class:`DelayRange` and sleeps for them."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._rng = rng or random.Random()
        self._sleep = sleep

    def pick(self, bounds: DelayRange) -> int:
        """Return a delay in milliseconds within ``bounds`` (inclusive)."""

        return self._rng.randint(bounds.min_ms, bounds.max_ms)

    def pause(self, bounds: DelayRange) -> int:
        delay_ms = self.pick(bounds)
        LOGGER.debug("Pausing for %d ms", delay_ms)
        self._sleep(delay_ms / 1000)
        return delay_ms


class NoDelayPacer(Pacer):
    """Pacer that never sleeps, useful for testing."""

    def __init__(self) -> None:
        super().__init__(rng=random.Random(0), sleep=lambda _seconds: None)
