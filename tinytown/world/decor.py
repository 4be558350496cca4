"""DecorPlacer — additive decor pass over a finished TerrainGrid.

Each terrain label has its own ordered rule table.  A single decor noise
channel is sampled at each cell's world position and walked against that
table from the most selective rule down; the first rule the sample
exceeds places one variant from its candidate set.  Variant choice draws from an injected numpy
``Generator`` so callers control reproducibility.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tinytown.exceptions import ConfigurationError
from tinytown.world.cell import DecorInstance

if TYPE_CHECKING:
    from numpy.random import Generator

    from tinytown.world.grid import TerrainGrid
    from tinytown.world.noise import NoiseField


@dataclass(frozen=True)
class DecorRule:
    """Place one of ``variants`` when the decor sample exceeds ``threshold``.

    Attributes:
        threshold: Strict lower bound on the normalised decor sample.
        variants: Candidate decor labels; picked uniformly when more than one.
    """

    threshold: float
    variants: tuple[str, ...]

    def __post_init__(self) -> None:
        """Reject rules that could fire with nothing to place."""
        if not self.variants:
            msg = f"decor rule at threshold {self.threshold} has no variants"
            raise ConfigurationError(msg)
        if not 0.0 <= self.threshold <= 1.0:
            msg = f"decor threshold {self.threshold} outside [0, 1]"
            raise ConfigurationError(msg)


class DecorPlacer:
    """Per-terrain decor rule tables and the placement pass.

    Attributes:
        rules: Terrain label to rules, sorted by descending threshold.
        frequency: Decor noise frequency, independent of terrain channels.
    """

    def __init__(
        self,
        rules: Mapping[str, Sequence[DecorRule]],
        frequency: float,
    ) -> None:
        """Sort and store the rule tables.

        Args:
            rules: Terrain label to its decor rules, in any order.
            frequency: Scale applied to each cell's world position before
                sampling.

        Raises:
            ConfigurationError: If ``frequency`` is not positive.
        """
        if frequency <= 0:
            msg = f"decor frequency must be positive, got {frequency}"
            raise ConfigurationError(msg)
        self.frequency = frequency
        self.rules: dict[str, tuple[DecorRule, ...]] = {
            label: tuple(sorted(table, key=lambda r: r.threshold, reverse=True))
            for label, table in rules.items()
        }

    def choose(self, terrain: str, decor_value: float, rng: Generator) -> str | None:
        """Return the decor variant for one cell, or None.

        Args:
            terrain: The cell's terrain label.
            decor_value: Normalised decor noise sample for the cell.
            rng: Source for the variant draw.
        """
        for rule in self.rules.get(terrain, ()):
            if decor_value > rule.threshold:
                if len(rule.variants) == 1:
                    return rule.variants[0]
                return rule.variants[int(rng.integers(len(rule.variants)))]
        return None

    def place(
        self,
        grid: TerrainGrid,
        noise: NoiseField,
        rng: Generator,
    ) -> list[DecorInstance]:
        """Run the decor pass over every cell of ``grid``.

        The grid is only read; terrain labels are never changed.

        Args:
            grid: A fully classified grid.
            noise: Noise source shared with the terrain pass.
            rng: Source for variant draws, consumed in row-major order.

        Returns:
            Placed decor, at most one per cell, in row-major order.
        """
        placed: list[DecorInstance] = []
        for cell in grid:
            if cell.terrain not in self.rules:
                continue
            value = noise.sample_normalized(cell.world_x, cell.world_y, self.frequency)
            variant = self.choose(cell.terrain, value, rng)
            if variant is not None:
                placed.append(
                    DecorInstance(
                        column=cell.column,
                        row=cell.row,
                        world_x=cell.world_x,
                        world_y=cell.world_y,
                        variant=variant,
                    ),
                )
        return placed
