"""
Configuration schema for the Sprouts engine.

Defines the tolerance policy, the path synthesizer's candidate ladder, the
per-game settings and the logging level. Loaded from YAML and validated at
construction (frozen dataclasses).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple, Union
import yaml

from sprouts_engine.geometry.tolerance import TolerancePolicy

MIN_POINTS = 2
MAX_POINTS = 6
DEFAULT_POINTS = 3


@dataclass(frozen=True)
class SynthesisConfig:
    """
    Path synthesizer ladder configuration.

    Arc heights are ``base * h`` for each ``h`` in ``height_ladder`` where
    ``base = min(max_curve_height, distance * curvature_ratio)``. S-curves
    offset the quarter points by ``base * (a, b)``. Loops try each radius
    multiplier on the preferred direction, then on every rotation.
    """

    arc_samples: int = 16
    loop_samples: int = 24
    curvature_ratio: float = 0.2
    max_curve_height: float = 30.0
    min_loop_radius: float = 30.0
    height_ladder: Tuple[float, ...] = (1.0, 1.5, 0.5, -1.0, -1.5, 2.0, -2.0)
    s_curve_ladder: Tuple[Tuple[float, float], ...] = (
        (0.5, -0.5), (-0.5, 0.5), (1.0, 1.0), (-1.0, -1.0)
    )
    radius_ladder: Tuple[float, ...] = (1.0, 1.5, 2.0, 2.5, 3.0)
    rotation_ladder_deg: Tuple[float, ...] = (45.0, 90.0, 135.0, 180.0, 225.0, 270.0, 315.0)
    jitter: float = 0.05
    seed: int = 0

    def __post_init__(self):
        """Validate synthesis configuration."""
        object.__setattr__(self, 'height_ladder', tuple(float(h) for h in self.height_ladder))
        object.__setattr__(
            self, 's_curve_ladder',
            tuple((float(a), float(b)) for a, b in self.s_curve_ladder)
        )
        object.__setattr__(self, 'radius_ladder', tuple(float(r) for r in self.radius_ladder))
        object.__setattr__(
            self, 'rotation_ladder_deg', tuple(float(d) for d in self.rotation_ladder_deg)
        )

        if self.arc_samples < 4:
            raise ValueError(f"arc_samples must be >= 4, got {self.arc_samples}")
        if self.loop_samples < 8:
            raise ValueError(f"loop_samples must be >= 8, got {self.loop_samples}")
        if self.curvature_ratio <= 0:
            raise ValueError(f"curvature_ratio must be > 0, got {self.curvature_ratio}")
        if self.max_curve_height <= 0:
            raise ValueError(f"max_curve_height must be > 0, got {self.max_curve_height}")
        if self.min_loop_radius <= 0:
            raise ValueError(f"min_loop_radius must be > 0, got {self.min_loop_radius}")
        if not self.radius_ladder or min(self.radius_ladder) <= 0:
            raise ValueError(f"radius_ladder must be non-empty and positive, got {self.radius_ladder}")
        if not 0.0 <= self.jitter < 0.5:
            raise ValueError(f"jitter must be in [0.0, 0.5), got {self.jitter}")


@dataclass(frozen=True)
class GameSettings:
    """
    Per-game settings.

    ``point_count`` is range-checked by the engine so that a bad value
    surfaces as InvalidGameStateError at game creation.
    """

    point_count: int = DEFAULT_POINTS
    canvas_width: float = 600.0
    canvas_height: float = 400.0
    canvas_padding: float = 50.0

    def __post_init__(self):
        """Validate canvas geometry."""
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError(
                f"canvas dimensions must be positive, got "
                f"{self.canvas_width}x{self.canvas_height}"
            )
        if not 0 <= 2 * self.canvas_padding < min(self.canvas_width, self.canvas_height):
            raise ValueError(
                f"canvas_padding must leave a usable area, got {self.canvas_padding}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'point_count': self.point_count,
            'canvas_width': self.canvas_width,
            'canvas_height': self.canvas_height,
            'canvas_padding': self.canvas_padding,
        }


@dataclass(frozen=True)
class EngineConfig:
    """
    Main configuration for SproutsEngine.

    Immutable after construction (frozen dataclass).
    """

    tolerance: TolerancePolicy = field(default_factory=TolerancePolicy)
    synthesis: SynthesisConfig = field(default_factory=SynthesisConfig)
    game: GameSettings = field(default_factory=GameSettings)
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate engine configuration."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR"}
        if self.log_level.upper() not in valid_levels:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. "
                f"Must be one of {valid_levels}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Build from a parsed mapping; missing sections use defaults."""
        data = data or {}
        return cls(
            tolerance=TolerancePolicy(**data.get("tolerance", {})),
            synthesis=SynthesisConfig(**data.get("synthesis", {})),
            game=GameSettings(**data.get("game", {})),
            log_level=data.get("log_level", "INFO"),
        )

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "EngineConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            log_level: "INFO"

            tolerance:
              exact: 0.1
              pixel: 12.0
              min_separation: 15.0

            synthesis:
              arc_samples: 16
              jitter: 0.05
              seed: 7

            game:
              point_count: 3
              canvas_width: 600
              canvas_height: 400
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data)
