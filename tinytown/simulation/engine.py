"""SimulationEngine — the command surface driven by the viewer or a caller.

Owns the generation and movement controllers and applies commands in the
order they arrive:

1. ``reseed`` draws a fresh seed, regenerates, and respawns the agent.
2. ``adjust_frequency`` and ``step_frequency`` regenerate with the same
   seed; the agent stays.
3. ``set_move_intent`` replaces the held directions.
4. ``tick`` moves the agent once against the current grid.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator

from tinytown.simulation.config import SimulationConfig
from tinytown.simulation.generation import (
    FrequencyState,
    GenerationController,
    PlaceCallback,
)
from tinytown.simulation.movement import Agent, MovementController
from tinytown.world.cell import DecorInstance
from tinytown.world.grid import TerrainGrid
from tinytown.world.noise import NoiseField

# Upper bound (exclusive) for seeds drawn on reseed.
_SEED_RANGE = 2**31


@dataclass
class SimulationEngine:
    """Drives generation and movement.

    Attributes:
        config: Loaded configuration.
        on_place: Placement callback forwarded to the generation pass.
        noise: Optional noise source override (tests).
        generation: Terrain/decor generation controller.
        movement: Agent movement controller.
        rng: Seeded generator supplying fresh seeds on reseed.
        tick_count: Number of ticks processed.
    """

    config: SimulationConfig
    on_place: PlaceCallback | None = None
    noise: NoiseField | None = None
    generation: GenerationController = field(init=False)
    movement: MovementController = field(init=False)
    rng: Generator = field(init=False)
    tick_count: int = 0

    def __post_init__(self) -> None:
        """Generate the first map and place the agent."""
        self.rng = np.random.default_rng(self.config.seed)
        self.generation = GenerationController(
            self.config,
            noise=self.noise,
            on_place=self.on_place,
        )
        self.movement = MovementController(
            speed=self.config.movement.speed,
            spawn=self.config.movement.spawn,
        )
        self.movement.respawn(self.generation.grid)

    @property
    def grid(self) -> TerrainGrid:
        """The current terrain grid."""
        return self.generation.grid

    @property
    def decor(self) -> list[DecorInstance]:
        """Decor placed by the latest regeneration."""
        return self.generation.decor

    @property
    def agent(self) -> Agent:
        """The moving agent."""
        return self.movement.agent

    @property
    def frequency(self) -> FrequencyState:
        """Current adjustable frequencies."""
        return self.generation.frequency

    @property
    def seed(self) -> int:
        """Seed of the current noise field."""
        return self.generation.seed

    def reseed(self, seed: int | None = None) -> TerrainGrid:
        """Regenerate from a new seed and reset the agent to spawn.

        Args:
            seed: Explicit seed; drawn from :attr:`rng` when omitted.
        """
        if seed is None:
            seed = int(self.rng.integers(_SEED_RANGE))
        grid = self.generation.reseed(seed)
        self.movement.respawn(grid)
        return grid

    def adjust_frequency(self, delta: float) -> TerrainGrid:
        """Change frequencies by ``delta`` and regenerate in place."""
        return self.generation.adjust_frequency(delta)

    def step_frequency(self, direction: int) -> TerrainGrid:
        """Move frequencies one configured step up (+1) or down (-1)."""
        return self.generation.step_frequency(direction)

    def set_move_intent(
        self,
        up: bool = False,
        down: bool = False,
        left: bool = False,
        right: bool = False,
    ) -> None:
        """Replace the directions applied on subsequent ticks."""
        self.movement.set_intent(up=up, down=down, left=left, right=right)

    def tick(self) -> bool:
        """Advance one frame; returns True if the agent moved."""
        moved = self.movement.tick(self.generation.grid)
        self.tick_count += 1
        return moved

    def run(self, ticks: int) -> None:
        """Advance a fixed number of ticks.

        Args:
            ticks: Number of ticks to advance.
        """
        for _ in range(ticks):
            self.tick()
