"""Cell and DecorInstance — the per-tile records of a generation pass."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Cell:
    """A single classified tile.

    Attributes:
        column: Grid column.
        row: Grid row.
        world_x: Left edge in world units (``column * tile_size``).
        world_y: Top edge in world units (``row * tile_size``).
        terrain: Terrain label assigned by the classifier.
    """

    column: int
    row: int
    world_x: float
    world_y: float
    terrain: str

    @property
    def position(self) -> tuple[float, float]:
        """World-space position of the cell's top-left corner."""
        return (self.world_x, self.world_y)


@dataclass(frozen=True)
class DecorInstance:
    """A decor object placed on top of a cell.

    Attributes:
        column: Grid column of the host cell.
        row: Grid row of the host cell.
        world_x: World x of the host cell.
        world_y: World y of the host cell.
        variant: Decor label chosen from the firing rule's candidates.
    """

    column: int
    row: int
    world_x: float
    world_y: float
    variant: str
