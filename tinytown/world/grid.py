"""TerrainGrid — the classified tile map produced by one generation pass.

A grid is built in a single row-major sweep and never edited afterwards;
regeneration builds a fresh grid.  It keeps a derived set of blocking
world positions so passability checks are a set lookup.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field

from tinytown.exceptions import ConfigurationError
from tinytown.world.cell import Cell

LabelFn = Callable[[int, int], str]


@dataclass(frozen=True)
class TerrainGrid:
    """A ``width x height`` grid of classified cells.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        tile_size: World units per cell edge.
        cells: Row-major cells indexed as ``cells[row][column]``.
        blocking: World positions (cell top-left corners) the agent may
            not enter.
    """

    width: int
    height: int
    tile_size: float
    cells: tuple[tuple[Cell, ...], ...] = field(repr=False)
    blocking: frozenset[tuple[float, float]] = field(repr=False)

    @classmethod
    def generate(
        cls,
        width: int,
        height: int,
        tile_size: float,
        label_at: LabelFn,
        blocking_labels: Iterable[str] = (),
    ) -> TerrainGrid:
        """Classify every cell and build the grid.

        Args:
            width: Number of columns (> 0).
            height: Number of rows (> 0).
            tile_size: World units per cell (> 0).
            label_at: Called once per ``(column, row)``, rows outermost.
            blocking_labels: Terrain labels that block movement.

        Returns:
            A new grid with its blocking set computed.

        Raises:
            ConfigurationError: If a dimension or the tile size is not
                positive.
        """
        if width <= 0 or height <= 0:
            msg = f"grid dimensions must be positive, got {width}x{height}"
            raise ConfigurationError(msg)
        if tile_size <= 0:
            msg = f"tile_size must be positive, got {tile_size}"
            raise ConfigurationError(msg)

        blocking_set = frozenset(blocking_labels)
        rows: list[tuple[Cell, ...]] = []
        blocked: set[tuple[float, float]] = set()
        for row in range(height):
            line: list[Cell] = []
            for column in range(width):
                cell = Cell(
                    column=column,
                    row=row,
                    world_x=column * tile_size,
                    world_y=row * tile_size,
                    terrain=label_at(column, row),
                )
                if cell.terrain in blocking_set:
                    blocked.add(cell.position)
                line.append(cell)
            rows.append(tuple(line))

        return cls(
            width=width,
            height=height,
            tile_size=tile_size,
            cells=tuple(rows),
            blocking=frozenset(blocked),
        )

    @property
    def world_width(self) -> float:
        """Width of the grid in world units."""
        return self.width * self.tile_size

    @property
    def world_height(self) -> float:
        """Height of the grid in world units."""
        return self.height * self.tile_size

    def in_bounds(self, column: int, row: int) -> bool:
        """Return True if ``(column, row)`` lies inside the grid."""
        return 0 <= column < self.width and 0 <= row < self.height

    def cell_at(self, column: int, row: int) -> Cell:
        """Return the cell at grid coordinates ``(column, row)``.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        if not self.in_bounds(column, row):
            msg = f"({column}, {row}) out of bounds for {self.width}x{self.height}"
            raise IndexError(msg)
        return self.cells[row][column]

    def cell_at_world(self, world_x: float, world_y: float) -> Cell | None:
        """Return the cell enclosing a world position, or None outside."""
        column = math.floor(world_x / self.tile_size)
        row = math.floor(world_y / self.tile_size)
        if not self.in_bounds(column, row):
            return None
        return self.cells[row][column]

    def snap(self, world_x: float, world_y: float) -> tuple[float, float]:
        """Snap a world position down to its enclosing cell's corner."""
        return (
            math.floor(world_x / self.tile_size) * self.tile_size,
            math.floor(world_y / self.tile_size) * self.tile_size,
        )

    def is_blocking(self, world_x: float, world_y: float) -> bool:
        """Return True if the cell enclosing ``(world_x, world_y)`` blocks.

        Positions outside the grid are never blocking.
        """
        return self.snap(world_x, world_y) in self.blocking

    def __iter__(self) -> Iterator[Cell]:
        """Iterate cells in row-major order."""
        for line in self.cells:
            yield from line

    def labels(self) -> list[list[str]]:
        """Return terrain labels as ``labels[row][column]``."""
        return [[cell.terrain for cell in line] for line in self.cells]

    def cells_with(self, label: str) -> Iterator[Cell]:
        """Iterate cells carrying ``label`` in row-major order."""
        return (cell for cell in self if cell.terrain == label)

    def count(self, label: str) -> int:
        """Number of cells labelled ``label``."""
        return sum(1 for _ in self.cells_with(label))
