"""Entry point for ``python -m tinytown``.

Loads the default YAML config, builds a simulation engine, and either
opens a Pygame window or prints the generated map as text (``--dump``).
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys

import structlog

from tinytown.simulation.config import SimulationConfig
from tinytown.simulation.engine import SimulationEngine

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def render_ascii(engine: SimulationEngine) -> str:
    """Render the current map as text, one character per cell.

    Terrain uses the first letter of its label; decor overrides the cell
    with the uppercase first letter of its variant, and the agent is ``@``.
    """
    rows = [[cell.terrain[:1] or "?" for cell in line] for line in engine.grid.cells]
    for item in engine.decor:
        rows[item.row][item.column] = item.variant[:1].upper() or "?"
    agent_cell = engine.grid.cell_at_world(engine.agent.x, engine.agent.y)
    if agent_cell is not None:
        rows[agent_cell.row][agent_cell.column] = "@"
    return "\n".join("".join(line) for line in rows)


def configure_logging(verbose: bool = False) -> None:
    """Route structlog output to stderr, filtering below INFO unless verbose."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO,
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, create engine, launch renderer or dump the map."""
    parser = argparse.ArgumentParser(
        prog="tinytown",
        description="Tinytown - noise-driven tile map generator",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override the config seed",
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print the generated map as text instead of opening a window",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=60,
        help="Target frames per second (default: 60)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose)

    config = SimulationConfig.from_yaml(args.config)
    if args.seed is not None:
        config.seed = args.seed
    engine = SimulationEngine(config=config)

    if args.dump:
        print(render_ascii(engine))
        print(f"decor: {len(engine.decor)}")
        return

    # Import here so --dump works without a display
    from tinytown.ui.pygame_client import PygameRenderer

    renderer = PygameRenderer(engine=engine)
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
