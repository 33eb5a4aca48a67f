"""Client retry decisions.

A client whose request failed (timed out or rejected) flips a biased coin
and, on success, immediately reissues the call as a brand new request.
Those extra arrivals stack on top of the organic load, which is how a
brief slowdown can turn into sustained congestion collapse.
"""

from __future__ import annotations

import numpy as np

from queuesim.core.request import Request
from queuesim.errors import ConfigurationError


class RetryController:
    """Decides whether a failed request is reissued.

    Args:
        retry_probability: Chance of a retry per failure, in [0, 1].
        rng: Shared random generator for the run.
        max_retries: Cap on ``retry_count``; None means unlimited.
    """

    def __init__(
        self,
        retry_probability: float,
        rng: np.random.Generator,
        max_retries: int | None = None,
    ):
        if not 0.0 <= retry_probability <= 1.0:
            raise ConfigurationError(
                f"retry_probability must be between 0 and 1, got {retry_probability}"
            )
        if max_retries is not None and max_retries < 0:
            raise ConfigurationError(f"max_retries must be >= 0 or None, got {max_retries}")
        self.retry_probability = retry_probability
        self.max_retries = max_retries
        self._rng = rng

    def should_retry(self, request: Request) -> bool:
        if self.max_retries is not None and request.retry_count >= self.max_retries:
            return False
        if self.retry_probability <= 0.0:
            return False
        return self._rng.random() < self.retry_probability
