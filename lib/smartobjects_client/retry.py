from __future__ import annotations

import logging
import random
import time
from typing import Callable, TypeVar

from .config_types import BackoffConfig
from .errors import PlatformUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ExponentialBackoff:
    """Randomized exponential delays, bounded by a total elapsed time.

    Each delay is drawn from ``interval * (1 +/- randomization_factor)`` and
    the interval then grows by ``multiplier`` up to ``max_interval_s``.
    Once ``max_elapsed_s`` has passed since ``reset()``, ``next_delay()``
    returns None. ``max_elapsed_s == 0`` never stops.
    """

    def __init__(
            self,
            *,
            initial_interval_s: float = 0.5,
            multiplier: float = 1.5,
            randomization_factor: float = 0.5,
            max_interval_s: float = 300.0,
            max_elapsed_s: float = 0.0,
    ):
        self.initial_interval_s = initial_interval_s
        self.multiplier = multiplier
        self.randomization_factor = randomization_factor
        self.max_interval_s = max_interval_s
        self.max_elapsed_s = max_elapsed_s
        self.reset()

    @classmethod
    def from_config(cls, cfg: BackoffConfig) -> ExponentialBackoff:
        return cls(
            initial_interval_s=cfg.initial_interval_s,
            multiplier=cfg.multiplier,
            randomization_factor=cfg.randomization_factor,
            max_interval_s=cfg.max_interval_s,
            max_elapsed_s=cfg.max_elapsed_s,
        )

    def reset(self) -> None:
        self._current = self.initial_interval_s
        self._started = time.monotonic()

    def elapsed(self) -> float:
        return time.monotonic() - self._started

    def next_delay(self) -> float | None:
        if self.max_elapsed_s > 0 and self.elapsed() > self.max_elapsed_s:
            return None
        delta = self.randomization_factor * self._current
        delay = random.uniform(self._current - delta, self._current + delta)
        if self._current >= self.max_interval_s / self.multiplier:
            self._current = self.max_interval_s
        else:
            self._current *= self.multiplier
        return max(0.0, delay)


def retry_notify(
        operation: Callable[[], T],
        backoff: ExponentialBackoff,
        notify: Callable[[Exception, float], None] | None = None,
        *,
        retryable: tuple[type[Exception], ...] = (PlatformUnavailableError,),
) -> T:
    backoff.reset()
    while True:
        try:
            return operation()
        except retryable as e:
            delay = backoff.next_delay()
            if delay is None:
                logger.warning("giving up after %.1fs: %s", backoff.elapsed(), e)
                raise
            if notify:
                notify(e, delay)
            logger.warning("%s, retrying in %.2fs", e, delay)
            time.sleep(delay)
