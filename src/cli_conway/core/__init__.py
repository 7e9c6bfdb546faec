"""Core Game of Life logic."""

from .cache import NeighborCache
from .grid import Grid
from .engine import EvolutionEngine
from .game import GameOfLife

__all__ = ["NeighborCache", "Grid", "EvolutionEngine", "GameOfLife"]
