"""Grid data structure for the Game of Life."""

import sys
from typing import Iterable, List, Optional, TextIO, Tuple
import numpy as np
import torch
import torch.nn.functional as F

from .cache import NeighborCache

# Move the cursor to the top-left corner without clearing the screen
CURSOR_HOME = "\033[H"

ALIVE_GLYPH = "█"
DEAD_GLYPH = " "

DEFAULT_DENSITY = 1.0 / 3.0

# Moore neighborhood, center excluded
NEIGHBOR_KERNEL = torch.tensor([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=torch.float32).unsqueeze(0).unsqueeze(0)

# Single-threaded to keep a step free of intra-op parallelism
torch.set_num_threads(1)


class Grid:
    """A bounded 2D grid holding one generation of cells.

    Cells are stored row-major in a numpy array of shape (height, width).
    Coordinates outside the grid read as dead and writes to them are ignored,
    so neighbor scans never need to special-case the edges.
    """

    def __init__(self, width: int, height: int, use_cache: bool = True) -> None:
        """Initialize a new grid with all cells dead.

        Args:
            width: Number of columns
            height: Number of rows
            use_cache: Whether neighbor counts are memoized

        Raises:
            ValueError: If width or height is negative
        """
        if width < 0 or height < 0:
            raise ValueError(f"Grid dimensions must not be negative: {width}x{height}")

        self.width = width
        self.height = height
        self._cells = np.zeros((height, width), dtype=np.int8)
        self.cache: Optional[NeighborCache] = NeighborCache(width, height) if use_cache else None

    @property
    def cells(self) -> np.ndarray:
        """Get the cell array, indexed as [y, x]."""
        return self._cells

    @property
    def shape(self) -> Tuple[int, int]:
        """Get grid dimensions as (width, height)."""
        return (self.width, self.height)

    @property
    def use_cache(self) -> bool:
        return self.cache is not None

    @property
    def population(self) -> int:
        """Get the number of living cells."""
        return int(np.sum(self._cells > 0))

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_cell(self, x: int, y: int) -> int:
        """Get the state of a cell.

        Args:
            x: Column coordinate
            y: Row coordinate

        Returns:
            1 if the cell is alive, 0 if dead or out of bounds
        """
        if not self.in_bounds(x, y):
            return 0
        return int(self._cells[y, x])

    def set_cell(self, x: int, y: int, alive: bool) -> None:
        """Set the state of a cell.

        Writes outside the grid are ignored. When the stored value actually
        changes, cached neighbor counts around the cell are invalidated.

        Args:
            x: Column coordinate
            y: Row coordinate
            alive: Whether the cell should be alive
        """
        if not self.in_bounds(x, y):
            return

        value = 1 if alive else 0
        if self._cells[y, x] == value:
            return

        self._cells[y, x] = value
        if self.cache is not None:
            self.cache.invalidate_around(x, y)

    def clear(self) -> None:
        """Clear all cells (set all to dead)."""
        self._cells.fill(0)
        if self.cache is not None:
            self.cache.clear()

    def randomize(self, density: float = DEFAULT_DENSITY, rng: Optional[np.random.Generator] = None) -> None:
        """Randomly populate the grid.

        Args:
            density: Chance each cell will be alive (0.0 to 1.0)
            rng: Random source; a fresh unseeded generator when omitted
        """
        if rng is None:
            rng = np.random.default_rng()

        mask = rng.random((self.height, self.width)) < density
        self._cells[mask] = 1
        self._cells[~mask] = 0
        if self.cache is not None:
            self.cache.clear()

    def seed(self, coordinates: Iterable[Tuple[int, int]]) -> List[Tuple[int, int]]:
        """Mark the given coordinates alive.

        Args:
            coordinates: (x, y) pairs to bring to life

        Returns:
            The pairs that fell outside the grid and were skipped
        """
        skipped = []
        for x, y in coordinates:
            if not self.in_bounds(x, y):
                skipped.append((x, y))
                continue
            self.set_cell(x, y, True)
        return skipped

    def scan_neighbors(self, x: int, y: int) -> int:
        """Count living neighbors of a cell without consulting the cache.

        Neighbors past the edges count as dead; there is no wraparound.

        Args:
            x: Column coordinate
            y: Row coordinate

        Returns:
            Number of living neighbors (0-8)
        """
        count = 0
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                count += self.get_cell(x + dx, y + dy)
        return count

    def neighbor_count(self, x: int, y: int) -> int:
        """Count living neighbors of a cell, memoized when caching is on."""
        if self.cache is None or not self.in_bounds(x, y):
            return self.scan_neighbors(x, y)

        with self.cache.lock:
            cached = self.cache.lookup(x, y)
            if cached is not None:
                return cached
            count = self.scan_neighbors(x, y)
            self.cache.store(x, y, count)
            return count

    def count_all_neighbors(self) -> np.ndarray:
        """Count neighbors for all cells using a PyTorch convolution.

        Returns:
            Array of shape (height, width) with the neighbor count of each cell
        """
        if self.width == 0 or self.height == 0:
            return np.zeros((self.height, self.width), dtype=np.int8)

        torch_input = torch.from_numpy(self._cells.astype(np.float32)).reshape(1, 1, self.height, self.width)
        # Zero padding keeps the topology bounded
        padded = F.pad(torch_input, (1, 1, 1, 1), mode="constant", value=0.0)
        neighbors = F.conv2d(padded, NEIGHBOR_KERNEL)
        return neighbors[0, 0].numpy().astype(np.int8)

    def render(self, stream: Optional[TextIO] = None) -> str:
        """Draw the grid as a bordered frame.

        The frame is written to ``stream`` (stdout by default) after a
        cursor-home escape so that successive frames overwrite each other.

        Args:
            stream: Where to write the frame

        Returns:
            The frame text, without the escape sequence
        """
        border = "─" * (self.width * 2 + 1)
        lines = ["┌" + border + "┐"]
        for y in range(self.height):
            row = "".join((ALIVE_GLYPH if self._cells[y, x] else DEAD_GLYPH) + " " for x in range(self.width))
            lines.append("│ " + row + "│")
        lines.append("└" + border + "┘")
        frame = "\n".join(lines) + "\n"

        if stream is None:
            stream = sys.stdout
        stream.write(CURSOR_HOME + frame)
        stream.flush()
        return frame

    def __eq__(self, other: object) -> bool:
        """Check if two grids hold the same cells."""
        if not isinstance(other, Grid):
            return False
        return self.shape == other.shape and np.array_equal(self._cells, other._cells)

    def __str__(self) -> str:
        """String representation showing living cells as '*' and dead as '.'."""
        result = []
        for y in range(self.height):
            result.append("".join("*" if self._cells[y, x] else "." for x in range(self.width)))
        return "\n".join(result)
