import numpy as np


class WeightedError(ValueError):
    """Weights cannot define a distribution."""


class InvalidWeight(WeightedError):
    pass


class NoItem(WeightedError):
    pass


class AllWeightsZero(WeightedError):
    pass


class CumulativeWeights:
    """
    Weighted index sampling over a reusable cumulative-sum buffer.

    `fill` overwrites the buffer in place (it only grows when more weights arrive
    than it has room for), so one instance can serve every step of every tour an
    ant builds. `sample` is a binary search, O(log n).
    """

    def __init__(self, capacity=0):
        self._buffer = np.empty(max(int(capacity), 1), dtype=float)
        self._len = 0
        self.total = 0.0

    @property
    def capacity(self):
        return self._buffer.size

    @property
    def cumulative(self):
        return self._buffer[:self._len]

    def __len__(self):
        return self._len

    def clear(self):
        self._len = 0
        self.total = 0.0

    def fill(self, weights):
        self.clear()
        if not isinstance(weights, np.ndarray):
            weights = np.fromiter(weights, dtype=float)
        n = weights.size
        if n == 0:
            raise NoItem("No weights given")
        # also rejects NaN, which compares false to everything
        if not np.all((weights >= 0) & np.isfinite(weights)):
            raise InvalidWeight(f"Weights must be finite and non-negative: {weights}")

        if n > self._buffer.size:
            self._buffer = np.empty(n, dtype=float)
        np.cumsum(weights, out=self._buffer[:n])
        total = float(self._buffer[n - 1])
        if total == 0.0:
            raise AllWeightsZero("All weights are zero")
        if not np.isfinite(total):
            raise InvalidWeight(f"Weights overflow to a non-finite total: {total}")

        self._len = n
        self.total = total
        return self

    def sample(self, rng):
        """Index of the first bucket whose cumulative weight exceeds a uniform draw in [0, total)."""
        if self._len == 0:
            raise NoItem("Sampler is empty, call fill() first")
        chosen_weight = rng.random() * self.total
        idx = int(np.searchsorted(self._buffer[:self._len], chosen_weight, side="right"))
        if idx >= self._len:
            # rng.random() * total rounded up to total itself: take the last non-empty bucket
            idx = int(np.searchsorted(self._buffer[:self._len], self.total, side="left"))
        return idx
