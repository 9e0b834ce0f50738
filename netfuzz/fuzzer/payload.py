"""
Random message bodies for both directions of the exchange.
"""

import random

from netfuzz.config import BUFFER_CAPACITY


class PayloadGenerator:
    """Produces a random byte string of random length in [1, capacity]."""

    def __init__(self, capacity: int = BUFFER_CAPACITY, seed: int | None = None):
        if capacity < 1:
            raise ValueError(f"payload capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._rng = random.Random(seed)

    def __call__(self) -> bytes:
        length = self._rng.randint(1, self.capacity)
        return self._rng.randbytes(length)
