"""Tests for the EvolutionEngine class."""

import numpy as np
import pytest
from cli_conway.core.grid import Grid
from cli_conway.core.engine import EvolutionEngine

# Neighbor offsets in a fixed order, used to place n live neighbors around a cell
NEIGHBOR_OFFSETS = [(-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1)]


def grid_with_neighbors(center_alive: bool, live_neighbors: int, use_cache: bool = True) -> Grid:
    """Build a 7x7 grid whose center cell has the given number of live neighbors."""
    grid = Grid(7, 7, use_cache=use_cache)
    grid.set_cell(3, 3, center_alive)
    for dx, dy in NEIGHBOR_OFFSETS[:live_neighbors]:
        grid.set_cell(3 + dx, 3 + dy, True)
    return grid


@pytest.fixture(params=[True, False], ids=["cached", "vectorized"])
def engine(request):
    return EvolutionEngine(use_cache=request.param)


class TestRules:
    """Test cases for the per-cell rule."""

    @pytest.mark.parametrize("n", range(9))
    def test_next_state_alive(self, n):
        expected = 1 if n in (2, 3) else 0
        assert EvolutionEngine.next_state(1, n) == expected

    @pytest.mark.parametrize("n", range(9))
    def test_next_state_dead(self, n):
        expected = 1 if n == 3 else 0
        assert EvolutionEngine.next_state(0, n) == expected


class TestEvolutionEngine:
    """Test cases for advancing whole grids."""

    @pytest.mark.parametrize("n", [0, 1, 2, 3, 4, 5, 8])
    def test_birth(self, engine, n):
        """Test that a dead cell is born with exactly three neighbors."""
        grid = grid_with_neighbors(False, n, use_cache=engine.use_cache)
        next_grid = engine.advance(grid)
        assert next_grid.get_cell(3, 3) == (1 if n == 3 else 0)

    @pytest.mark.parametrize("n", [0, 1, 2, 3, 4, 5, 8])
    def test_survival(self, engine, n):
        """Test that a live cell survives with two or three neighbors."""
        grid = grid_with_neighbors(True, n, use_cache=engine.use_cache)
        next_grid = engine.advance(grid)
        assert next_grid.get_cell(3, 3) == (1 if n in (2, 3) else 0)

    def test_source_not_mutated(self, engine):
        """Test that advancing leaves the source grid untouched."""
        grid = Grid(5, 5, use_cache=engine.use_cache)
        grid.seed([(1, 2), (2, 2), (3, 2)])
        before = grid.cells.copy()

        next_grid = engine.advance(grid)

        assert next_grid is not grid
        assert np.array_equal(grid.cells, before)
        assert next_grid.shape == grid.shape

    def test_still_life_block(self, engine):
        """Test that a block pattern is stable (still life)."""
        grid = Grid(10, 10, use_cache=engine.use_cache)
        grid.seed([(4, 4), (4, 5), (5, 4), (5, 5)])

        next_grid = engine.advance(grid)

        assert next_grid == grid
        assert next_grid.population == 4

    def test_oscillator_blinker(self, engine):
        """Test blinker oscillator (period 2)."""
        grid = Grid(10, 10, use_cache=engine.use_cache)

        # Horizontal blinker
        grid.seed([(4, 5), (5, 5), (6, 5)])

        # After one step, should be vertical
        vertical = engine.advance(grid)
        assert vertical.population == 3
        assert vertical.get_cell(5, 4)
        assert vertical.get_cell(5, 5)
        assert vertical.get_cell(5, 6)
        assert not vertical.get_cell(4, 5)
        assert not vertical.get_cell(6, 5)

        # After another step, should be horizontal again
        horizontal = engine.advance(vertical)
        assert horizontal == grid

    def test_glider_moves(self, engine):
        """Test that a glider translates by (1, 1) every four generations."""
        grid = Grid(10, 10, use_cache=engine.use_cache)
        grid.seed([(1, 0), (2, 1), (0, 2), (1, 2), (2, 2)])

        current = grid
        for _ in range(4):
            current = engine.advance(current)

        expected = Grid(10, 10)
        expected.seed([(2, 1), (3, 2), (1, 3), (2, 3), (3, 3)])
        assert current == expected

    def test_corner_has_fewer_neighbors(self, engine):
        """Test that cells at the edge do not wrap around."""
        grid = Grid(4, 4, use_cache=engine.use_cache)

        # An L in the corner would wrap into a block on a torus
        grid.seed([(0, 0), (3, 0), (0, 3)])
        next_grid = engine.advance(grid)
        assert next_grid.population == 0

    def test_extinction(self, engine):
        """Test pattern that goes extinct."""
        grid = Grid(10, 10, use_cache=engine.use_cache)
        grid.set_cell(5, 5, True)
        assert engine.advance(grid).population == 0

    def test_empty_grid(self, engine):
        """Test that degenerate grids advance to degenerate grids."""
        grid = Grid(0, 0, use_cache=engine.use_cache)
        next_grid = engine.advance(grid)
        assert next_grid.shape == (0, 0)
        assert next_grid.population == 0

    def test_cached_and_vectorized_agree(self):
        """Test that both counting paths give the same generations."""
        grid = Grid(24, 18)
        grid.randomize(rng=np.random.default_rng(11))

        cached = grid
        vectorized = grid
        cached_engine = EvolutionEngine(use_cache=True)
        vectorized_engine = EvolutionEngine(use_cache=False)

        for _ in range(10):
            cached = cached_engine.advance(cached)
            vectorized = vectorized_engine.advance(vectorized)
            assert cached == vectorized

    def test_uncached_grid_uses_vectorized_path(self):
        """Test that a grid without a cache advances even with a caching engine."""
        grid = Grid(5, 5, use_cache=False)
        grid.seed([(1, 2), (2, 2), (3, 2)])

        next_grid = EvolutionEngine(use_cache=True).advance(grid)
        assert next_grid.cache is None
        assert next_grid.get_cell(2, 1) and next_grid.get_cell(2, 3)


class TestNeighborCacheAcrossGenerations:
    """Test cases for cache correctness while advancing."""

    def assert_cache_matches_scan(self, grid: Grid) -> None:
        for y in range(grid.height):
            for x in range(grid.width):
                cached = grid.cache.lookup(x, y)
                if cached is not None:
                    assert cached == grid.scan_neighbors(x, y), (x, y)
                assert grid.neighbor_count(x, y) == grid.scan_neighbors(x, y), (x, y)

    def test_blinker_counts_stay_correct(self):
        """Test cached counts against fresh scans over several generations."""
        engine = EvolutionEngine(use_cache=True)
        grid = Grid(8, 8)
        grid.seed([(2, 3), (3, 3), (4, 3)])

        for _ in range(6):
            grid = engine.advance(grid)
            self.assert_cache_matches_scan(grid)

    def test_random_soup_counts_stay_correct(self):
        """Test cached counts on a busy pattern."""
        engine = EvolutionEngine(use_cache=True)
        grid = Grid(16, 12)
        grid.randomize(0.4, np.random.default_rng(5))

        for _ in range(8):
            grid = engine.advance(grid)
            self.assert_cache_matches_scan(grid)

    def test_counts_carried_forward(self):
        """Test that counts away from any change survive into the next generation."""
        engine = EvolutionEngine(use_cache=True)
        grid = Grid(12, 12)

        # Blinker in one corner, block in the other
        grid.seed([(1, 2), (2, 2), (3, 2), (8, 8), (8, 9), (9, 8), (9, 9)])

        next_grid = engine.advance(grid)

        # Far from the blinker the counts are reused
        assert next_grid.cache.lookup(9, 9) == 3
        assert next_grid.cache.lookup(10, 1) == 0

        # Around the blinker's flipped cells they are not
        assert next_grid.cache.lookup(2, 2) is None
        assert next_grid.cache.lookup(1, 1) is None

    def test_counts_after_manual_edit(self):
        """Test that editing an advanced grid invalidates carried counts."""
        engine = EvolutionEngine(use_cache=True)
        grid = Grid(8, 8)
        grid.seed([(5, 5), (5, 6), (6, 5), (6, 6)])

        next_grid = engine.advance(grid)
        assert next_grid.cache.lookup(1, 1) == 0

        next_grid.set_cell(2, 2, True)
        assert next_grid.cache.lookup(1, 1) is None
        assert next_grid.neighbor_count(1, 1) == 1
