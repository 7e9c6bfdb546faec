#!/usr/bin/env python3
"""
Example usage of the cli_conway package.
"""

import time

from cli_conway import GameOfLife, Grid


def main():
    """Animate a glider for a few generations."""
    grid = Grid(12, 12)
    grid.seed([(1, 0), (2, 1), (0, 2), (1, 2), (2, 2)])
    game = GameOfLife(grid)

    game.grid.render()
    for _ in range(20):
        game.step()
        game.grid.render()
        time.sleep(0.1)

    print(f"Generation {game.generation}, population {game.population}")


if __name__ == "__main__":
    main()
