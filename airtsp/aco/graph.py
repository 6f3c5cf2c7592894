import numpy as np


def triangle_len(size):
    return size * (size - 1) // 2


def pos(node1, node2):
    """Offset of the unordered pair (node1, node2) in the flattened lower triangle."""
    if node1 < node2:
        node1, node2 = node2, node1
    return node1 * (node1 - 1) // 2 + node2


def cycle_edges(tour):
    """Consecutive pairs of a closed tour, including the wrap-around edge."""
    if not tour:
        return
    yield from zip(tour, tour[1:])
    yield tour[-1], tour[0]


class TriangleMatrix:
    """
    Symmetric matrix with an empty diagonal stored as its flattened lower triangle.

    Row i holds pairs (i, 0) .. (i, i-1), so the pair (i, j), i > j, lives at
    i * (i - 1) / 2 + j. NaN marks a missing edge.
    """

    def __init__(self, size, edges=None, fill=np.nan):
        self.size = int(size)
        n_edges = triangle_len(self.size)
        if edges is None:
            self.edges = np.full(n_edges, fill, dtype=float)
        else:
            self.edges = np.asarray(edges, dtype=float)
            assert self.edges.shape == (n_edges,), (
                f"Expected {n_edges} edges for size {self.size}, got {self.edges.shape}"
            )
        # cached row/col of every flattened slot, used by to_square()
        self._rows, self._cols = np.tril_indices(self.size, k=-1)

    def __len__(self):
        return self.size

    def __eq__(self, other):
        if not isinstance(other, TriangleMatrix):
            return NotImplemented
        return self.size == other.size and np.array_equal(self.edges, other.edges, equal_nan=True)

    def __repr__(self):
        return f"TriangleMatrix(size={self.size}, edges={self.edges!r})"

    def in_bounds(self, node1, node2):
        return 0 <= node1 < self.size and 0 <= node2 < self.size

    def between(self, node1, node2, default=None):
        """
        Value stored for the pair, `default` on the diagonal, None out of bounds.
        A missing edge is returned as NaN; callers decide what that means.
        """
        if not self.in_bounds(node1, node2):
            return None
        if node1 == node2:
            return default
        return float(self.edges[pos(node1, node2)])

    def row(self, node, others):
        """Values for (node, k) for every k in the integer array `others` (none equal to node)."""
        others = np.asarray(others)
        hi = np.maximum(others, node)
        lo = np.minimum(others, node)
        return self.edges[hi * (hi - 1) // 2 + lo]

    def positions(self, tour):
        """Flattened offsets of every edge of the closed tour."""
        tour = np.asarray(tour, dtype=np.int64)
        if tour.size < 2:
            return np.empty(0, dtype=np.int64)
        nxt = np.roll(tour, -1)
        hi = np.maximum(tour, nxt)
        lo = np.minimum(tour, nxt)
        return hi * (hi - 1) // 2 + lo

    def transform(self, f):
        """New matrix with f applied elementwise to the flattened edges (vectorized)."""
        return TriangleMatrix(self.size, f(self.edges.copy()))

    def merge_into(self, other, target, f):
        """target.edges[:] = f(self.edges, other.edges). Sizes must match."""
        assert self.size == other.size == target.size, (
            f"Mismatched graph sizes: {self.size} vs {other.size} vs {target.size}"
        )
        target.edges[:] = f(self.edges, other.edges)
        return target

    def present(self):
        return ~np.isnan(self.edges)

    def to_square(self, diagonal=0.0):
        square = np.full((self.size, self.size), diagonal, dtype=float)
        square[self._rows, self._cols] = self.edges
        square[self._cols, self._rows] = self.edges
        return square
