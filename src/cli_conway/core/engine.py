"""Generation-advance rule engine for Conway's Game of Life."""

import numpy as np

from .grid import Grid


class EvolutionEngine:
    """Computes the next generation of a grid.

    Implements the classic rules, first match wins:
    - Live cell with fewer than 2 or more than 3 neighbors dies
    - Live cell with 2-3 neighbors survives
    - Dead cell with exactly 3 neighbors becomes alive
    - All other dead cells stay dead

    With ``use_cache`` the engine counts neighbors cell by cell through the
    grid's neighbor cache and hands still-valid counts on to the new grid.
    Without it the whole grid is counted at once by convolution.
    """

    def __init__(self, use_cache: bool = True) -> None:
        self.use_cache = use_cache

    @staticmethod
    def next_state(alive: int, live_neighbors: int) -> int:
        """Apply the rules to a single cell."""
        if alive:
            if live_neighbors < 2 or live_neighbors > 3:
                return 0
            return 1
        if live_neighbors == 3:
            return 1
        return 0

    def advance(self, grid: Grid) -> Grid:
        """Produce the next generation.

        The source grid is only read; the result is a new grid of the same
        dimensions and caching mode.

        Args:
            grid: Current generation

        Returns:
            Next generation
        """
        if self.use_cache and grid.cache is not None:
            return self._advance_cached(grid)
        return self._advance_vectorized(grid)

    def _advance_cached(self, grid: Grid) -> Grid:
        next_grid = Grid(grid.width, grid.height, use_cache=True)
        current = grid.cells
        target = next_grid.cells

        for y in range(grid.height):
            for x in range(grid.width):
                target[y, x] = self.next_state(current[y, x], grid.neighbor_count(x, y))

        # Counts around changed cells are stale for the new generation
        changed = current != target
        next_grid.cache.carry_forward(grid.cache, changed)
        return next_grid

    def _advance_vectorized(self, grid: Grid) -> Grid:
        next_grid = Grid(grid.width, grid.height, use_cache=grid.use_cache)
        neighbor_counts = grid.count_all_neighbors()
        cells = grid.cells

        # Survival: live cell with 2 or 3 neighbors
        survive_mask = (cells > 0) & ((neighbor_counts == 2) | (neighbor_counts == 3))

        # Birth: dead cell with exactly 3 neighbors
        birth_mask = (cells == 0) & (neighbor_counts == 3)

        next_grid.cells[:] = (survive_mask | birth_mask).astype(np.int8)
        return next_grid
