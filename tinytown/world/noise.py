"""NoiseField — seedable 2D coherent noise.

Wraps an OpenSimplex generator so the rest of the package only deals with
``sample``/``reseed`` and the ``[0, 1]`` normalisation used for every
threshold comparison.
"""

from __future__ import annotations

from opensimplex import OpenSimplex

# OpenSimplex accepts arbitrary ints but seeds drawn from numpy or the CLI
# are folded into this range to keep them portable.
_SEED_MASK = 0x7FFFFFFF


def normalize(value: float) -> float:
    """Map a raw noise value from ``[-1, 1]`` onto ``[0, 1]``.

    Values outside the nominal range (floating point overshoot from the
    generator) are clamped rather than propagated.
    """
    return min(1.0, max(0.0, (value + 1.0) / 2.0))


class NoiseField:
    """A deterministic, continuous 2D noise source.

    Attributes:
        seed: The seed the current generator was built from.
    """

    def __init__(self, seed: int = 0) -> None:
        """Build the underlying generator for ``seed``.

        Args:
            seed: Any integer; folded to a non-negative 31-bit value.
        """
        self.seed = int(seed) & _SEED_MASK
        self._gen = OpenSimplex(seed=self.seed)

    def reseed(self, seed: int) -> None:
        """Replace the generator so all later samples use ``seed``."""
        self.seed = int(seed) & _SEED_MASK
        self._gen = OpenSimplex(seed=self.seed)

    def sample(self, x: float, y: float) -> float:
        """Return the raw noise value at ``(x, y)`` in ``[-1, 1]``."""
        return float(self._gen.noise2(x, y))

    def sample_normalized(self, x: float, y: float, frequency: float) -> float:
        """Sample at ``(x * frequency, y * frequency)`` and normalise.

        Args:
            x: Column (or other caller-chosen) coordinate.
            y: Row coordinate.
            frequency: Scale applied to both coordinates; higher values
                give smaller coherent regions.

        Returns:
            Noise value in ``[0, 1]``.
        """
        return normalize(self.sample(x * frequency, y * frequency))
