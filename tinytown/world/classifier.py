"""TerrainClassifier — turn normalised noise samples into terrain labels.

Two modes share one class:

- **single**: ordered threshold bands over one noise channel.
- **dual**: a water channel gates first; if the cell is not water, the
  terrain channel picks a label from the bands.  Sampled at a higher
  frequency, the water channel yields small pockets over broad
  grass/sand regions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from tinytown.exceptions import ConfigurationError, GenerationError


class ClassifierMode(Enum):
    """Number of noise channels consumed per cell."""

    SINGLE = "single"
    DUAL = "dual"


@dataclass(frozen=True)
class ThresholdBand:
    """One band of the classifier.

    Attributes:
        below: Exclusive upper bound of the band in ``[0, 1]``.  The lower
            bound is the previous band's ``below`` (or 0.0).
        label: Terrain label returned for values in this band.
    """

    below: float
    label: str


def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


class TerrainClassifier:
    """Ordered threshold rules mapping noise values to terrain labels.

    Attributes:
        bands: Contiguous bands covering ``[0, 1]`` in ascending order.
        mode: Single- or dual-channel classification.
        water_label: Label returned by the water gate (dual mode only).
        water_threshold: Water values strictly below this are water.
    """

    def __init__(
        self,
        bands: list[ThresholdBand],
        *,
        mode: ClassifierMode = ClassifierMode.SINGLE,
        water_label: str | None = None,
        water_threshold: float = 0.0,
    ) -> None:
        """Validate and store the rule set.

        Raises:
            ConfigurationError: If the bands leave part of ``[0, 1]``
                unmapped, are out of order, or the water gate is incomplete.
        """
        self.bands = tuple(bands)
        self.mode = mode
        self.water_label = water_label
        self.water_threshold = water_threshold
        self._validate()

    def _validate(self) -> None:
        if not self.bands:
            msg = "classifier needs at least one threshold band"
            raise ConfigurationError(msg)

        previous = 0.0
        for band in self.bands:
            if band.below <= previous:
                msg = (
                    f"band {band.label!r} upper bound {band.below} must exceed "
                    f"the previous bound {previous}"
                )
                raise ConfigurationError(msg)
            previous = band.below

        if self.bands[-1].below < 1.0:
            msg = (
                f"bands stop at {self.bands[-1].below}; "
                f"values in [{self.bands[-1].below}, 1.0] are unmapped"
            )
            raise ConfigurationError(msg)

        if self.mode is ClassifierMode.DUAL:
            if not self.water_label:
                msg = "dual-channel classifier requires a water_label"
                raise ConfigurationError(msg)
            if not 0.0 <= self.water_threshold <= 1.0:
                msg = f"water_threshold {self.water_threshold} outside [0, 1]"
                raise ConfigurationError(msg)

    @property
    def palette(self) -> tuple[str, ...]:
        """Every label this classifier can return, in declaration order."""
        labels: list[str] = []
        if self.mode is ClassifierMode.DUAL and self.water_label is not None:
            labels.append(self.water_label)
        for band in self.bands:
            if band.label not in labels:
                labels.append(band.label)
        return tuple(labels)

    def classify(
        self,
        terrain_value: float,
        water_value: float | None = None,
    ) -> str:
        """Return the terrain label for one cell.

        Args:
            terrain_value: Normalised terrain channel sample.
            water_value: Normalised water channel sample (dual mode only).

        Returns:
            Exactly one label from :attr:`palette`.

        Raises:
            GenerationError: If a dual-channel classifier gets no water value.
        """
        if self.mode is ClassifierMode.DUAL:
            if water_value is None:
                msg = "dual-channel classification needs a water value"
                raise GenerationError(msg)
            if _clamp01(water_value) < self.water_threshold:
                return self.water_label  # type: ignore[return-value]

        value = _clamp01(terrain_value)
        for band in self.bands:
            if value < band.below:
                return band.label
        # value == 1.0 with a final bound of exactly 1.0
        return self.bands[-1].label
