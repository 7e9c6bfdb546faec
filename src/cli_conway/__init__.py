"""Terminal Conway's Game of Life on a bounded grid."""

__version__ = "0.1.0"

from .core.grid import Grid
from .core.engine import EvolutionEngine
from .core.game import GameOfLife

__all__ = ["Grid", "EvolutionEngine", "GameOfLife"]
