"""Config — load generation parameters from YAML files.

Grid size, classifier bands, decor tables, frequencies, and movement
settings live in YAML and are parsed into typed dataclasses here.  Every
dataclass validates itself on construction so a bad file fails before the
first generation pass rather than halfway through one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from tinytown.exceptions import ConfigurationError
from tinytown.world.classifier import ClassifierMode, TerrainClassifier, ThresholdBand
from tinytown.world.decor import DecorPlacer, DecorRule


def _default_bands() -> list[ThresholdBand]:
    return [ThresholdBand(below=0.5, label="grass"), ThresholdBand(below=1.0, label="sand")]


def _default_decor() -> dict[str, list[DecorRule]]:
    return {
        "sand": [DecorRule(threshold=0.7, variants=("cactus",))],
        "grass": [DecorRule(threshold=0.7, variants=("tree",))],
        "water": [DecorRule(threshold=0.7, variants=("sand_rock",))],
    }


def _default_colours() -> dict[str, tuple[int, int, int]]:
    return {
        "water": (64, 120, 200),
        "sand": (226, 204, 140),
        "grass": (96, 168, 72),
        "cactus": (40, 110, 50),
        "tree": (30, 80, 30),
        "sand_rock": (150, 140, 120),
    }


def _coerce(value: Any, kind: type, name: str) -> Any:
    """Convert a scalar config value, wrapping failures in ConfigurationError."""
    try:
        return kind(value)
    except (TypeError, ValueError) as exc:
        msg = f"{name} must be {kind.__name__}, got {value!r}"
        raise ConfigurationError(msg) from exc


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        msg = f"config section {key!r} must be a mapping"
        raise ConfigurationError(msg)
    return value


@dataclass
class TerrainConfig:
    """Classifier settings.

    Attributes:
        mode: ``single`` samples one channel; ``dual`` adds a water gate.
        bands: Ascending threshold bands for the terrain channel.
        water_label: Label produced by the water gate.
        water_threshold: Water samples below this become ``water_label``.
        blocking: Labels the agent cannot walk onto.
    """

    mode: ClassifierMode = ClassifierMode.DUAL
    bands: list[ThresholdBand] = field(default_factory=_default_bands)
    water_label: str = "water"
    water_threshold: float = 0.3
    blocking: list[str] = field(default_factory=lambda: ["water"])

    def build_classifier(self) -> TerrainClassifier:
        """Construct the classifier; raises ConfigurationError on bad bands."""
        return TerrainClassifier(
            self.bands,
            mode=self.mode,
            water_label=self.water_label,
            water_threshold=self.water_threshold,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TerrainConfig:
        """Build from the ``terrain`` section of a config mapping."""
        try:
            mode = ClassifierMode(data.get("mode", cls.mode.value))
        except ValueError as exc:
            msg = f"unknown terrain mode {data.get('mode')!r}"
            raise ConfigurationError(msg) from exc

        bands = _default_bands()
        if "bands" in data:
            try:
                bands = [
                    ThresholdBand(below=float(b.get("below", 1.0)), label=str(b["label"]))
                    for b in data["bands"]
                ]
            except (KeyError, TypeError, AttributeError, ValueError) as exc:
                msg = f"malformed terrain bands: {data['bands']!r}"
                raise ConfigurationError(msg) from exc

        water_label = data.get("water_label", cls.water_label)
        blocking = data.get("blocking")
        if blocking is None:
            blocking = [water_label] if mode is ClassifierMode.DUAL else []
        return cls(
            mode=mode,
            bands=bands,
            water_label=water_label,
            water_threshold=_coerce(
                data.get("water_threshold", cls.water_threshold),
                float,
                "terrain.water_threshold",
            ),
            blocking=[str(label) for label in blocking],
        )


@dataclass
class FrequencyConfig:
    """Noise frequencies and the clamp/step used by frequency adjustment.

    Attributes:
        terrain: Initial terrain-channel frequency.
        water: Initial water-channel frequency (ignored in single mode).
        decor: Decor-channel frequency; never adjusted at runtime.
        min: Lower clamp bound for adjustable frequencies.
        max: Upper clamp bound for adjustable frequencies.
        step: Increment applied by one frequency step.
    """

    terrain: float = 0.06
    water: float = 0.15
    decor: float = 0.1
    min: float = 0.02
    max: float = 0.5
    step: float = 0.02

    def __post_init__(self) -> None:
        """Reject inverted bounds and starting values outside them."""
        if not 0 < self.min < self.max:
            msg = f"frequency bounds must satisfy 0 < min < max, got [{self.min}, {self.max}]"
            raise ConfigurationError(msg)
        if self.step <= 0:
            msg = f"frequency step must be positive, got {self.step}"
            raise ConfigurationError(msg)
        for name in ("terrain", "water"):
            value = getattr(self, name)
            if not self.min <= value <= self.max:
                msg = f"{name} frequency {value} outside [{self.min}, {self.max}]"
                raise ConfigurationError(msg)
        if self.decor <= 0:
            msg = f"decor frequency must be positive, got {self.decor}"
            raise ConfigurationError(msg)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FrequencyConfig:
        """Build from the ``frequency`` section of a config mapping."""
        return cls(
            **{
                name: _coerce(data.get(name, getattr(cls, name)), float, f"frequency.{name}")
                for name in ("terrain", "water", "decor", "min", "max", "step")
            },
        )


@dataclass
class MovementConfig:
    """Agent movement settings.

    Attributes:
        speed: World units moved per tick along each held axis.
        spawn: World position the agent starts from and resets to.
    """

    speed: float = 5.0
    spawn: tuple[float, float] = (200.0, 200.0)

    def __post_init__(self) -> None:
        """Reject non-positive speeds."""
        if self.speed <= 0:
            msg = f"movement speed must be positive, got {self.speed}"
            raise ConfigurationError(msg)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MovementConfig:
        """Build from the ``movement`` section of a config mapping."""
        spawn = data.get("spawn", cls.spawn)
        try:
            sx, sy = spawn
        except (TypeError, ValueError) as exc:
            msg = f"movement spawn must be an [x, y] pair, got {spawn!r}"
            raise ConfigurationError(msg) from exc
        return cls(
            speed=_coerce(data.get("speed", cls.speed), float, "movement.speed"),
            spawn=(
                _coerce(sx, float, "movement.spawn"),
                _coerce(sy, float, "movement.spawn"),
            ),
        )


@dataclass
class SimulationConfig:
    """Top-level configuration.

    Attributes:
        seed: Initial noise seed; also seeds the engine's reseed RNG.
        width: Grid columns.
        height: Grid rows.
        tile_size: World units per cell.
        terrain: Classifier settings.
        frequency: Noise frequencies and adjustment bounds.
        decor: Terrain label to decor rules.
        movement: Agent speed and spawn point.
        colours: Label to RGB, used only by the viewer.
    """

    seed: int = 42
    width: int = 20
    height: int = 15
    tile_size: float = 64.0
    terrain: TerrainConfig = field(default_factory=TerrainConfig)
    frequency: FrequencyConfig = field(default_factory=FrequencyConfig)
    decor: dict[str, list[DecorRule]] = field(default_factory=_default_decor)
    movement: MovementConfig = field(default_factory=MovementConfig)
    colours: dict[str, tuple[int, int, int]] = field(default_factory=_default_colours)

    def __post_init__(self) -> None:
        """Cross-check dimensions and label references."""
        if self.width <= 0 or self.height <= 0:
            msg = f"grid dimensions must be positive, got {self.width}x{self.height}"
            raise ConfigurationError(msg)
        if self.tile_size <= 0:
            msg = f"tile_size must be positive, got {self.tile_size}"
            raise ConfigurationError(msg)

        palette = set(self.build_classifier().palette)
        for label in self.terrain.blocking:
            if label not in palette:
                msg = f"blocking label {label!r} is not produced by the classifier"
                raise ConfigurationError(msg)
        for label in self.decor:
            if label not in palette:
                msg = f"decor rules reference unknown terrain label {label!r}"
                raise ConfigurationError(msg)

    def build_classifier(self) -> TerrainClassifier:
        """Return the classifier described by :attr:`terrain`."""
        return self.terrain.build_classifier()

    def build_decor_placer(self) -> DecorPlacer:
        """Return the decor placer described by :attr:`decor`."""
        return DecorPlacer(self.decor, frequency=self.frequency.decor)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimulationConfig:
        """Build a config from a plain mapping (e.g. parsed YAML).

        Missing keys fall back to the defaults.

        Raises:
            ConfigurationError: If any value is malformed or out of range.
        """
        decor = _default_decor()
        if "decor" in data:
            decor = {}
            for label, table in _section(data, "decor").items():
                try:
                    decor[str(label)] = [
                        DecorRule(
                            threshold=float(rule["threshold"]),
                            variants=tuple(str(v) for v in rule.get("variants") or ()),
                        )
                        for rule in table or ()
                    ]
                except (KeyError, TypeError, AttributeError, ValueError) as exc:
                    msg = f"malformed decor rules for {label!r}: {table!r}"
                    raise ConfigurationError(msg) from exc

        colours = _default_colours()
        for label, rgb in _section(data, "colours").items():
            try:
                r, g, b = (int(c) for c in rgb)
            except (TypeError, ValueError) as exc:
                msg = f"colour for {label!r} must be an [r, g, b] triple, got {rgb!r}"
                raise ConfigurationError(msg) from exc
            colours[str(label)] = (r, g, b)

        return cls(
            seed=_coerce(data.get("seed", cls.seed), int, "seed"),
            width=_coerce(data.get("width", cls.width), int, "width"),
            height=_coerce(data.get("height", cls.height), int, "height"),
            tile_size=_coerce(data.get("tile_size", cls.tile_size), float, "tile_size"),
            terrain=TerrainConfig.from_dict(_section(data, "terrain")),
            frequency=FrequencyConfig.from_dict(_section(data, "frequency")),
            decor=decor,
            movement=MovementConfig.from_dict(_section(data, "movement")),
            colours=colours,
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ConfigurationError: If the file content is invalid.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            msg = f"{path} must contain a YAML mapping"
            raise ConfigurationError(msg)
        return cls.from_dict(data)
