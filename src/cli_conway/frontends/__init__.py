"""Frontend interfaces for the Game of Life."""

from .cli import main

__all__ = ["main"]
