"""Tests for tinytown.world.noise."""

from tinytown.world.noise import NoiseField, normalize


class TestNormalize:
    """Raw [-1, 1] to [0, 1] mapping."""

    def test_endpoints(self) -> None:
        assert normalize(-1.0) == 0.0
        assert normalize(0.0) == 0.5
        assert normalize(1.0) == 1.0

    def test_clamps_overshoot(self) -> None:
        assert normalize(-1.2) == 0.0
        assert normalize(1.05) == 1.0


class TestNoiseField:
    """OpenSimplex-backed sampling."""

    def test_range(self) -> None:
        field = NoiseField(seed=3)
        for i in range(50):
            value = field.sample(i * 0.37, i * 0.11)
            assert -1.0 <= value <= 1.0

    def test_deterministic_for_seed(self) -> None:
        a = NoiseField(seed=11)
        b = NoiseField(seed=11)
        coords = [(x * 0.1, y * 0.1) for x in range(10) for y in range(10)]
        assert [a.sample(x, y) for x, y in coords] == [
            b.sample(x, y) for x, y in coords
        ]

    def test_reseed_changes_output(self) -> None:
        field = NoiseField(seed=1)
        coords = [(x * 0.3 + 0.05, y * 0.3 + 0.05) for x in range(8) for y in range(8)]
        before = [field.sample(x, y) for x, y in coords]
        field.reseed(2)
        after = [field.sample(x, y) for x, y in coords]
        assert field.seed == 2
        assert before != after

    def test_continuity(self) -> None:
        field = NoiseField(seed=5)
        a = field.sample(1.5, 2.5)
        b = field.sample(1.5001, 2.5001)
        assert abs(a - b) < 0.01

    def test_seed_folded_non_negative(self) -> None:
        assert NoiseField(seed=-1).seed >= 0

    def test_sample_normalized_scales_coordinates(self) -> None:
        field = NoiseField(seed=9)
        expected = normalize(field.sample(3 * 0.2, 4 * 0.2))
        assert field.sample_normalized(3, 4, 0.2) == expected
