"""Shared fixtures for the Tinytown test suite."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest
from numpy.random import Generator

from tinytown.simulation.config import SimulationConfig, TerrainConfig
from tinytown.world.classifier import ClassifierMode, ThresholdBand
from tinytown.world.noise import NoiseField, normalize

RawNoiseFn = Callable[[float, float, float], float]


class StubNoise(NoiseField):
    """Noise field whose values come from a plain function.

    ``fn(x, y, frequency)`` returns a raw value in ``[-1, 1]``.  ``x, y``
    are the unscaled coordinates the caller samples at (column/row for
    terrain, world position for decor); frequency is passed through rather
    than applied so tests can address cells and channels directly.
    """

    def __init__(self, fn: RawNoiseFn, seed: int = 0) -> None:
        super().__init__(seed)
        self.fn = fn

    def sample(self, x: float, y: float) -> float:
        return self.fn(x, y, 1.0)

    def sample_normalized(self, x: float, y: float, frequency: float) -> float:
        return normalize(self.fn(x, y, frequency))


class SequenceRng:
    """Stand-in for ``numpy.random.Generator`` returning fixed draws."""

    def __init__(self, draws: list[int]) -> None:
        self.draws = list(draws)
        self.calls: list[int] = []

    def integers(self, high: int) -> int:
        self.calls.append(high)
        return self.draws.pop(0) % high


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default dual-channel config (no YAML file needed)."""
    return SimulationConfig()


@pytest.fixture
def single_channel_config() -> SimulationConfig:
    """A 4x4 single-channel config: water below 0.5, grass above."""
    return SimulationConfig(
        width=4,
        height=4,
        tile_size=10,
        terrain=TerrainConfig(
            mode=ClassifierMode.SINGLE,
            bands=[
                ThresholdBand(below=0.5, label="water"),
                ThresholdBand(below=1.0, label="grass"),
            ],
            blocking=["water"],
        ),
        decor={},
    )


@pytest.fixture
def stub_noise() -> Callable[[RawNoiseFn], NoiseField]:
    """Factory for noise fields driven by ``fn(x, y, frequency)``."""
    return StubNoise


@pytest.fixture
def sequence_rng() -> Callable[[list[int]], SequenceRng]:
    """Factory for variant generators returning fixed draws."""
    return SequenceRng
