"""Memoized live-neighbor counts."""

import threading
from typing import Optional
import numpy as np


class NeighborCache:
    """Cache of live-neighbor counts for one grid.

    Entries are addressed by the linear index ``y * width + x``. An entry is
    valid only while no cell in its Moore neighborhood has changed since the
    count was stored. Counts and validity flags always change together under
    ``lock``.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.counts = np.zeros(width * height, dtype=np.int8)
        self.valid = np.zeros(width * height, dtype=bool)
        self.lock = threading.Lock()

    def key(self, x: int, y: int) -> int:
        """Linear index of a cell."""
        return y * self.width + x

    @property
    def valid_entries(self) -> int:
        """Number of entries currently usable."""
        return int(np.count_nonzero(self.valid))

    def lookup(self, x: int, y: int) -> Optional[int]:
        """Return the cached count for a cell, or None if it must be rescanned.

        Callers hold ``lock`` across the lookup and the following store.
        """
        key = self.key(x, y)
        if self.valid[key]:
            return int(self.counts[key])
        return None

    def store(self, x: int, y: int, count: int) -> None:
        key = self.key(x, y)
        self.counts[key] = count
        self.valid[key] = True

    def invalidate_around(self, x: int, y: int) -> None:
        """Invalidate a cell and its up-to-8 neighbors after it changed state."""
        with self.lock:
            for dy in (-1, 0, 1):
                for dx in (-1, 0, 1):
                    nx, ny = x + dx, y + dy
                    if 0 <= nx < self.width and 0 <= ny < self.height:
                        self.valid[self.key(nx, ny)] = False

    def clear(self) -> None:
        """Invalidate every entry."""
        with self.lock:
            self.valid.fill(False)

    def carry_forward(self, previous: "NeighborCache", changed: np.ndarray) -> None:
        """Adopt the entries of the previous generation that are still correct.

        An entry survives when neither the cell nor any of its neighbors is
        marked in ``changed``; everything else is left invalid.

        Args:
            previous: Cache of the generation this one was computed from
            changed: Boolean array of shape (height, width), True where a cell
                changed state between the two generations

        Raises:
            ValueError: If the caches or the mask have different dimensions
        """
        if (previous.width, previous.height) != (self.width, self.height):
            raise ValueError(
                f"Cache dimensions don't match: {previous.width}x{previous.height} vs {self.width}x{self.height}"
            )
        if changed.shape != (self.height, self.width):
            raise ValueError(f"Change mask shape {changed.shape} doesn't match cache {self.height}x{self.width}")

        # Spread each change over its 3x3 neighborhood
        padded = np.pad(changed.astype(bool), 1, mode="constant", constant_values=False)
        touched = np.zeros((self.height, self.width), dtype=bool)
        for dy in (0, 1, 2):
            for dx in (0, 1, 2):
                touched |= padded[dy : dy + self.height, dx : dx + self.width]

        with previous.lock:
            keep = previous.valid & ~touched.reshape(-1)
            counts = previous.counts.copy()

        with self.lock:
            self.counts = counts
            self.valid = keep
