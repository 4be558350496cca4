"""Tests for tinytown.simulation.generation."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from tinytown.simulation.config import SimulationConfig, TerrainConfig
from tinytown.simulation.generation import FrequencyState, GenerationController
from tinytown.world.classifier import ClassifierMode, ThresholdBand
from tinytown.world.decor import DecorRule


def _water_grass(width: int, height: int, tile_size: int) -> SimulationConfig:
    return SimulationConfig(
        width=width,
        height=height,
        tile_size=tile_size,
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


class TestFrequencyState:
    """Clamp behaviour of adjustable frequencies."""

    def test_adjust_clamps_high(self) -> None:
        state = FrequencyState(terrain=0.06, water=0.15)
        for _ in range(5):
            state.adjust(10)
        assert state.terrain == 0.5
        assert state.water == 0.5

    def test_adjust_clamps_low(self) -> None:
        state = FrequencyState(terrain=0.06, water=0.15)
        for _ in range(5):
            state.adjust(-10)
        assert state.terrain == 0.02
        assert state.water == 0.02

    def test_single_channel_leaves_water_none(self) -> None:
        state = FrequencyState(terrain=0.1)
        state.adjust(0.02)
        assert state.terrain == pytest.approx(0.12)
        assert state.water is None


class TestGenerationController:
    """Regeneration, reseed, and frequency adjustment."""

    def test_two_by_one_scenario(self, stub_noise: Callable) -> None:
        noise = stub_noise(lambda x, y, f: -1.0 if x == 0 else 1.0)
        gen = GenerationController(_water_grass(2, 1, 1), noise=noise)
        assert gen.grid.cell_at(0, 0).terrain == "water"
        assert gen.grid.cell_at(1, 0).terrain == "grass"
        assert gen.grid.is_blocking(0, 0)
        assert not gen.grid.is_blocking(1, 0)

    def test_dual_channel_samples_each_frequency(
        self,
        default_config: SimulationConfig,
        stub_noise: Callable,
    ) -> None:
        water_f = default_config.frequency.water

        def fn(x: float, y: float, f: float) -> float:
            # water channel low only in column 0; terrain channel high
            if f == water_f:
                return -1.0 if x == 0 else 1.0
            return 1.0

        gen = GenerationController(default_config, noise=stub_noise(fn))
        assert gen.grid.cell_at(0, 3).terrain == "water"
        assert gen.grid.cell_at(1, 3).terrain == "sand"
        assert gen.grid.count("water") == default_config.height

    def test_on_place_called_per_cell_and_decor(
        self,
        default_config: SimulationConfig,
    ) -> None:
        placed: list[tuple[float, float, str]] = []
        gen = GenerationController(
            default_config,
            on_place=lambda x, y, label: placed.append((x, y, label)),
        )
        cells = default_config.width * default_config.height
        assert len(placed) == cells + len(gen.decor)
        assert placed[0] == (0, 0, gen.grid.cell_at(0, 0).terrain)
        assert [p[2] for p in placed[cells:]] == [d.variant for d in gen.decor]

    def test_determinism(self, default_config: SimulationConfig) -> None:
        a = GenerationController(default_config)
        b = GenerationController(default_config)
        assert a.grid.labels() == b.grid.labels()
        assert a.decor == b.decor
        assert a.grid.blocking == b.grid.blocking

    def test_decor_pass_repeatable_and_additive(self) -> None:
        config = SimulationConfig(
            decor={"grass": [DecorRule(threshold=0.3, variants=("oak", "pine", "birch"))]},
        )
        gen = GenerationController(config)
        labels = gen.grid.labels()
        assert gen.place_decor(gen.grid) == gen.decor
        assert gen.grid.labels() == labels

    def test_decor_only_on_ruled_labels(self, default_config: SimulationConfig) -> None:
        gen = GenerationController(default_config)
        expected = {"sand": "cactus", "grass": "tree", "water": "sand_rock"}
        for item in gen.decor:
            terrain = gen.grid.cell_at(item.column, item.row).terrain
            assert item.variant == expected[terrain]

    def test_reseed_changes_seed_and_map(self, default_config: SimulationConfig) -> None:
        gen = GenerationController(default_config)
        before = gen.grid
        gen.reseed(default_config.seed + 1)
        assert gen.seed == default_config.seed + 1
        assert gen.grid is not before
        assert gen.grid.labels() != before.labels()

    def test_reseed_back_reproduces(self, default_config: SimulationConfig) -> None:
        gen = GenerationController(default_config)
        original = gen.grid.labels()
        gen.reseed(999)
        gen.reseed(default_config.seed)
        assert gen.grid.labels() == original

    def test_adjust_frequency_keeps_seed(self, default_config: SimulationConfig) -> None:
        gen = GenerationController(default_config)
        seed = gen.seed
        gen.adjust_frequency(0.02)
        assert gen.seed == seed
        assert gen.frequency.terrain == pytest.approx(0.08)
        assert gen.frequency.water == pytest.approx(0.17)

    def test_adjust_frequency_clamped(self, default_config: SimulationConfig) -> None:
        gen = GenerationController(default_config)
        for _ in range(3):
            gen.adjust_frequency(10)
        assert gen.frequency.terrain == 0.5
        assert gen.frequency.water == 0.5
        for _ in range(3):
            gen.adjust_frequency(-10)
        assert gen.frequency.terrain == 0.02
        assert gen.frequency.water == 0.02

    def test_step_frequency(self, default_config: SimulationConfig) -> None:
        gen = GenerationController(default_config)
        gen.step_frequency(-1)
        assert gen.frequency.terrain == pytest.approx(0.04)
        gen.step_frequency(+1)
        assert gen.frequency.terrain == pytest.approx(0.06)

    def test_single_channel_has_no_water_frequency(
        self,
        single_channel_config: SimulationConfig,
    ) -> None:
        gen = GenerationController(single_channel_config)
        assert gen.frequency.water is None
        assert set(gen.grid.labels()[0]) <= {"water", "grass"}
