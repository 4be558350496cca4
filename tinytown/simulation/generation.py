"""GenerationController — owns frequencies and seed, runs regeneration.

A regeneration is two synchronous passes: classify every cell into a new
TerrainGrid, then lay decor over it.  Each pass reports what it placed
through an optional ``on_place(world_x, world_y, label)`` callback so a
renderer can draw without the core knowing anything about drawing.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
import structlog
from numpy.random import Generator

from tinytown.simulation.config import SimulationConfig
from tinytown.world.cell import DecorInstance
from tinytown.world.classifier import ClassifierMode, TerrainClassifier
from tinytown.world.decor import DecorPlacer
from tinytown.world.grid import TerrainGrid
from tinytown.world.noise import NoiseField

logger = structlog.get_logger()

PlaceCallback = Callable[[float, float, str], None]
RngFactory = Callable[[int], Generator]


@dataclass
class FrequencyState:
    """Adjustable noise frequencies.

    Attributes:
        terrain: Terrain-channel frequency.
        water: Water-channel frequency, or None in single-channel mode.
        lo: Lower clamp bound.
        hi: Upper clamp bound.
    """

    terrain: float
    water: float | None = None
    lo: float = 0.02
    hi: float = 0.5

    def clamp(self, value: float) -> float:
        """Clamp ``value`` into ``[lo, hi]``."""
        return max(self.lo, min(self.hi, value))

    def adjust(self, delta: float) -> None:
        """Add ``delta`` to every tracked channel, then clamp each."""
        self.terrain = self.clamp(self.terrain + delta)
        if self.water is not None:
            self.water = self.clamp(self.water + delta)


class GenerationController:
    """Runs terrain and decor passes and exposes reseed/adjust.

    Attributes:
        config: The loaded configuration.
        noise: Shared noise field for every channel.
        classifier: Terrain classifier built from config.
        placer: Decor placer built from config.
        frequency: Current adjustable frequencies.
        grid: Grid from the latest regeneration.
        decor: Decor from the latest regeneration.
    """

    def __init__(
        self,
        config: SimulationConfig,
        *,
        noise: NoiseField | None = None,
        on_place: PlaceCallback | None = None,
        rng_factory: RngFactory = np.random.default_rng,
    ) -> None:
        """Build components from ``config`` and run the first regeneration.

        Args:
            config: Validated configuration.
            noise: Noise source; defaults to an OpenSimplex field seeded
                from ``config.seed``.
            on_place: Called for every terrain cell and decor instance.
            rng_factory: Builds the variant-selection generator for a decor
                pass from the current seed.
        """
        self.config = config
        self.noise = noise if noise is not None else NoiseField(config.seed)
        self.classifier: TerrainClassifier = config.build_classifier()
        self.placer: DecorPlacer = config.build_decor_placer()
        self.on_place = on_place
        self._rng_factory = rng_factory

        freq = config.frequency
        dual = self.classifier.mode is ClassifierMode.DUAL
        self.frequency = FrequencyState(
            terrain=freq.terrain,
            water=freq.water if dual else None,
            lo=freq.min,
            hi=freq.max,
        )
        self.grid: TerrainGrid
        self.decor: list[DecorInstance] = []
        self.regenerate()

    @property
    def seed(self) -> int:
        """Seed of the current noise field."""
        return self.noise.seed

    def label_at(self, column: int, row: int) -> str:
        """Classify one cell from the current noise and frequencies."""
        terrain_value = self.noise.sample_normalized(
            column, row, self.frequency.terrain
        )
        water_value = None
        if self.frequency.water is not None:
            water_value = self.noise.sample_normalized(
                column, row, self.frequency.water
            )
        return self.classifier.classify(terrain_value, water_value)

    def build_grid(self) -> TerrainGrid:
        """Run the terrain pass and return a new grid."""
        return TerrainGrid.generate(
            width=self.config.width,
            height=self.config.height,
            tile_size=self.config.tile_size,
            label_at=self.label_at,
            blocking_labels=self.config.terrain.blocking,
        )

    def place_decor(self, grid: TerrainGrid) -> list[DecorInstance]:
        """Run the decor pass over ``grid`` with a seed-derived generator."""
        return self.placer.place(grid, self.noise, self._rng_factory(self.seed))

    def regenerate(self) -> TerrainGrid:
        """Discard the current map and build a new one.

        Returns:
            The new grid (also stored on :attr:`grid`).
        """
        grid = self.build_grid()
        if self.on_place is not None:
            for cell in grid:
                self.on_place(cell.world_x, cell.world_y, cell.terrain)

        decor = self.place_decor(grid)
        if self.on_place is not None:
            for item in decor:
                self.on_place(item.world_x, item.world_y, item.variant)

        self.grid = grid
        self.decor = decor

        counts = Counter(cell.terrain for cell in grid)
        logger.info(
            "terrain_generated",
            seed=self.seed,
            terrain_frequency=self.frequency.terrain,
            water_frequency=self.frequency.water,
            labels=dict(counts),
            decor=len(decor),
        )
        return grid

    def reseed(self, seed: int) -> TerrainGrid:
        """Switch the noise seed and regenerate.

        Args:
            seed: Fresh seed supplied by the caller.
        """
        self.noise.reseed(seed)
        logger.debug("noise_reseeded", seed=self.seed)
        return self.regenerate()

    def adjust_frequency(self, delta: float) -> TerrainGrid:
        """Shift every adjustable frequency by ``delta`` and regenerate.

        The seed is kept, so the result is the same field sampled at a
        different scale.
        """
        self.frequency.adjust(delta)
        logger.debug(
            "frequency_adjusted",
            delta=delta,
            terrain=self.frequency.terrain,
            water=self.frequency.water,
        )
        return self.regenerate()

    def step_frequency(self, direction: int) -> TerrainGrid:
        """Adjust by one configured step; ``direction`` is +1 or -1."""
        step = self.config.frequency.step
        return self.adjust_frequency(step if direction > 0 else -step)
