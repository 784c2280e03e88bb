"""Shared retry policy for archive fetches, Day One submission and batch runs."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try an operation and how long to wait in between.

    ``retry_if`` inspects a returned value and says whether it is worth
    another attempt; ``retry_on`` lists exception types that are retried
    instead of propagated.
    """

    max_attempts: int = 2
    delay: float = 0
    retry_if: Callable[[object], bool] | None = None
    retry_on: tuple[type[BaseException], ...] = ()

    def run(
        self,
        func: Callable[[int], T],
        label: str = "operation",
        sleep: Callable[[float], None] = time.sleep,
    ) -> T:
        """Call ``func(attempt)`` until it succeeds or attempts run out.

        The last result is returned even if ``retry_if`` still rejects it;
        the last exception is re-raised if every attempt raised.
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                result = func(attempt)
            except self.retry_on as e:
                if attempt >= self.max_attempts:
                    raise
                logger.warning(
                    "%s failed (attempt %d/%d): %s, retrying in %gs...",
                    label, attempt, self.max_attempts, e, self.delay,
                )
                sleep(self.delay)
                continue

            if self.retry_if is None or not self.retry_if(result) or attempt >= self.max_attempts:
                return result

            logger.info(
                "%s returned nothing usable (attempt %d/%d), retrying in %gs...",
                label, attempt, self.max_attempts, self.delay,
            )
            sleep(self.delay)

        raise RuntimeError("RetryPolicy.max_attempts must be at least 1")
