"""Command-line interface for Conway's Game of Life."""

import argparse
import json
import sys
import time
from typing import List, Optional, TextIO, Tuple
import numpy as np

from ..core.grid import DEFAULT_DENSITY, Grid
from ..core.engine import EvolutionEngine
from ..core.game import GameOfLife

# A glider in the top-left corner
DEFAULT_CELLS = "[[1,0],[2,1],[0,2],[1,2],[2,2]]"


def parse_cells(text: str) -> List[Tuple[int, int]]:
    """Parse a JSON array of [x, y] pairs.

    Args:
        text: JSON text such as '[[1,0],[2,1]]'

    Returns:
        List of (x, y) tuples

    Raises:
        ValueError: If the text is not a JSON array of integer pairs
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid cells JSON: {e}") from e

    if not isinstance(data, list):
        raise ValueError("Cells must be a JSON array of [x, y] pairs")

    coordinates = []
    for entry in data:
        if (
            not isinstance(entry, list)
            or len(entry) != 2
            # bool is an int subclass, but true/false are not coordinates
            or not all(isinstance(v, int) and not isinstance(v, bool) for v in entry)
        ):
            raise ValueError(f"Invalid cell coordinate {json.dumps(entry)}: expected [x, y] integers")
        coordinates.append((entry[0], entry[1]))

    return coordinates


def seed_grid(grid: Grid, coordinates: List[Tuple[int, int]], err: Optional[TextIO] = None) -> int:
    """Bring the given cells to life, warning about the ones off the grid.

    Returns:
        Number of coordinates skipped
    """
    if err is None:
        err = sys.stderr

    skipped = grid.seed(coordinates)
    for x, y in skipped:
        print(
            f"Warning: Cell coordinate [{x},{y}] is outside grid bounds "
            f"({grid.width}x{grid.height}), skipping it",
            file=err,
        )
    return len(skipped)


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="cli-conway",
        description="Run Conway's Game of Life in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Glider on the default 42x42 grid
  cli-conway

  # Blinker on a small grid, 10 generations
  cli-conway -x 10 -y 10 --cells '[[3,4],[4,4],[5,4]]' --generations 10

  # Reproducible random start at 25% density
  cli-conway --random --density 0.25 --seed 7
        """,
    )

    # Grid configuration
    parser.add_argument("-x", "--width", type=int, default=42, help="Grid width (default: 42)")

    parser.add_argument("-y", "--height", type=int, default=42, help="Grid height (default: 42)")

    # Seeding
    parser.add_argument(
        "-c",
        "--cells",
        type=str,
        default=DEFAULT_CELLS,
        help="Start with live cells as JSON array: '[[x1,y1],[x2,y2],...]' (default: a glider)",
    )

    parser.add_argument(
        "-r",
        "--random",
        action="store_true",
        help="Randomize the start state instead of using --cells",
    )

    parser.add_argument(
        "-d",
        "--density",
        type=float,
        default=DEFAULT_DENSITY,
        help="Chance each cell starts alive with --random (default: 0.33)",
    )

    parser.add_argument(
        "-s",
        "--seed",
        type=int,
        help="Random seed for reproducible --random starts",
    )

    # Simulation configuration
    parser.add_argument(
        "-g",
        "--generations",
        type=int,
        default=0,
        help="Generations to run, 0 runs until interrupted (default: 0)",
    )

    parser.add_argument(
        "--delay",
        type=float,
        default=0.1,
        help="Seconds to wait between frames (default: 0.1)",
    )

    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Count neighbors by convolution instead of the neighbor cache",
    )

    # Output configuration
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print setup details and a summary",
    )

    return parser


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command-line arguments.

    Args:
        args: Parsed arguments

    Returns:
        True if arguments are valid
    """
    errors = []

    if args.width <= 0:
        errors.append("Width must be positive")

    if args.height <= 0:
        errors.append("Height must be positive")

    if not 0.0 <= args.density <= 1.0:
        errors.append("Density must be between 0.0 and 1.0")

    if args.generations < 0:
        errors.append("Generations must not be negative")

    if args.delay < 0:
        errors.append("Delay must not be negative")

    if errors:
        print("Error: Invalid arguments:", file=sys.stderr)
        for error in errors:
            print(f"  - {error}", file=sys.stderr)
        return False

    return True


def run_simulation(
    grid: Grid,
    generations: int,
    delay: float,
    use_cache: bool = True,
    out: Optional[TextIO] = None,
) -> GameOfLife:
    """Render generation 0, then step and render until done or interrupted.

    Args:
        grid: Seeded initial generation
        generations: Number of steps, 0 for no limit
        delay: Seconds to sleep after each frame
        use_cache: Whether the engine uses the neighbor cache
        out: Stream the frames are drawn to

    Returns:
        The game, positioned at the last rendered generation
    """
    game = GameOfLife(grid, EvolutionEngine(use_cache=use_cache))

    def draw(current: GameOfLife) -> None:
        current.grid.render(out)
        if delay > 0:
            time.sleep(delay)

    try:
        draw(game)
        game.run(generations, on_generation=draw)
    except KeyboardInterrupt:
        pass

    return game


def main() -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args()

    if not validate_args(args):
        return 1

    grid = Grid(args.width, args.height, use_cache=not args.no_cache)

    if args.random:
        if args.verbose:
            print(f"Generating random population (density: {args.density:.2%})")
        grid.randomize(args.density, np.random.default_rng(args.seed))
    else:
        try:
            coordinates = parse_cells(args.cells)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        seed_grid(grid, coordinates)

    if args.verbose:
        print(f"Initial population: {grid.population} cells on a {args.width}x{args.height} grid")

    try:
        game = run_simulation(grid, args.generations, args.delay, use_cache=not args.no_cache)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1

    print(f"Grid {args.width}x{args.height}: stopped after {game.generation} generations, population {game.population}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
