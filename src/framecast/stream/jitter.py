"""
Jittered Tick Interval
======================

Each tick re-samples its own delay so that sessions opened at the same
moment drift apart instead of firing in lockstep.
"""

import random
from typing import Optional


class JitterInterval:
    """
    Uniform integer delay in [min_ms, max_ms], inclusive on both ends.

    Attributes:
        min_ms: Shortest delay in milliseconds
        max_ms: Longest delay in milliseconds

    Example:
        interval = JitterInterval(3000, 10000)
        delay_ms = interval.sample()
    """

    def __init__(
        self,
        min_ms: int = 3000,
        max_ms: int = 10000,
        rng: Optional[random.Random] = None,
    ) -> None:
        if min_ms < 0:
            raise ValueError("min_ms must be >= 0")
        if min_ms > max_ms:
            raise ValueError(f"min_ms ({min_ms}) must not exceed max_ms ({max_ms})")

        self.min_ms = min_ms
        self.max_ms = max_ms
        self._rng = rng or random

    def sample(self) -> int:
        """Draw a fresh delay in milliseconds."""
        return self._rng.randint(self.min_ms, self.max_ms)

    def __repr__(self) -> str:
        return f"JitterInterval({self.min_ms}..{self.max_ms}ms)"
