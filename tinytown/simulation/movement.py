"""MovementController — move the agent once per tick against the grid.

Intent is four independent booleans.  Each axis sums its two directions
(left+right cancel, up+down cancel) and the resulting candidate position
is accepted or rejected as a whole: a blocked diagonal does not slide
along the free axis.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from tinytown.world.grid import TerrainGrid

logger = structlog.get_logger()


@dataclass
class Agent:
    """The moving agent.

    Attributes:
        x: World x, not snapped to the grid.
        y: World y, not snapped to the grid.
    """

    x: float
    y: float


@dataclass(frozen=True)
class MoveIntent:
    """Directions currently held."""

    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False

    def delta(self, speed: float) -> tuple[float, float]:
        """Return ``(dx, dy)`` for one tick at ``speed``."""
        dx = (int(self.right) - int(self.left)) * speed
        dy = (int(self.down) - int(self.up)) * speed
        return dx, dy


class MovementController:
    """Advances the agent from the current intent.

    Attributes:
        agent: The agent being moved.
        intent: Intent applied on each tick until replaced.
        speed: World units per tick per axis.
        spawn: Preferred spawn position.
    """

    def __init__(self, speed: float, spawn: tuple[float, float]) -> None:
        self.speed = speed
        self.spawn = spawn
        self.agent = Agent(x=spawn[0], y=spawn[1])
        self.intent = MoveIntent()

    def set_intent(
        self,
        up: bool = False,
        down: bool = False,
        left: bool = False,
        right: bool = False,
    ) -> None:
        """Replace the held directions."""
        self.intent = MoveIntent(up=up, down=down, left=left, right=right)

    def tick(self, grid: TerrainGrid) -> bool:
        """Try to move the agent one step.

        Args:
            grid: Current terrain grid used for the passability check.

        Returns:
            True if the agent's position changed.
        """
        dx, dy = self.intent.delta(self.speed)
        if dx == 0 and dy == 0:
            return False

        new_x = self.agent.x + dx
        new_y = self.agent.y + dy
        if grid.is_blocking(new_x, new_y):
            logger.debug("move_blocked", x=new_x, y=new_y)
            return False

        self.agent.x = new_x
        self.agent.y = new_y
        return True

    def respawn(self, grid: TerrainGrid) -> Agent:
        """Reset the agent to spawn, avoiding blocking cells.

        If the spawn point blocks, the agent goes to the centre of the
        nearest passable cell, searching outward ring by ring and in
        row-major order within a ring.

        Returns:
            The agent, repositioned.
        """
        x, y = self.spawn
        if grid.is_blocking(x, y):
            fallback = self._nearest_passable(grid, x, y)
            if fallback is None:
                logger.warning("respawn_no_passable_cell", x=x, y=y)
            else:
                logger.debug("respawn_relocated", x=fallback[0], y=fallback[1])
                x, y = fallback
        self.agent.x = x
        self.agent.y = y
        return self.agent

    @staticmethod
    def _nearest_passable(
        grid: TerrainGrid,
        x: float,
        y: float,
    ) -> tuple[float, float] | None:
        """Find the closest non-blocking cell centre to ``(x, y)``."""
        half = grid.tile_size / 2
        col = int(x // grid.tile_size)
        row = int(y // grid.tile_size)

        max_radius = max(grid.width, grid.height)
        for radius in range(max_radius + 1):
            for r in range(row - radius, row + radius + 1):
                for c in range(col - radius, col + radius + 1):
                    if max(abs(r - row), abs(c - col)) != radius:
                        continue
                    if not grid.in_bounds(c, r):
                        continue
                    cell = grid.cells[r][c]
                    if cell.position not in grid.blocking:
                        return (cell.world_x + half, cell.world_y + half)
        return None
