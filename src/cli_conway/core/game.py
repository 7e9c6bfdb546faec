"""Game of Life simulation session."""

from typing import Callable, Optional

from .engine import EvolutionEngine
from .grid import Grid


class GameOfLife:
    """Runs successive generations of a grid.

    Only the current generation is kept; each step replaces ``grid`` with a
    freshly computed one.
    """

    def __init__(self, grid: Grid, engine: Optional[EvolutionEngine] = None) -> None:
        """Initialize the game with a grid.

        Args:
            grid: Initial generation
            engine: Rule engine; defaults to one matching the grid's caching mode
        """
        self.grid = grid
        self.engine = engine if engine is not None else EvolutionEngine(use_cache=grid.use_cache)
        self._generation = 0

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of living cells."""
        return self.grid.population

    def step(self) -> None:
        """Advance the simulation by one generation."""
        self.grid = self.engine.advance(self.grid)
        self._generation += 1

    def run(
        self,
        generations: int,
        on_generation: Optional[Callable[["GameOfLife"], None]] = None,
        stop_on_extinction: bool = False,
    ) -> int:
        """Run several generations.

        Args:
            generations: Number of steps to take; 0 or less runs until
                interrupted (or extinct, with ``stop_on_extinction``)
            on_generation: Called with the game after every step
            stop_on_extinction: Stop once no cell is alive

        Returns:
            Number of steps taken
        """
        steps = 0
        while generations <= 0 or steps < generations:
            if stop_on_extinction and self.population == 0:
                break

            self.step()
            steps += 1

            if on_generation is not None:
                on_generation(self)

        return steps
