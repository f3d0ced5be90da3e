"""
Configuration loading and validation for soft-body scenes.

Loads YAML config and validates every section before a scene is built.
Defaults reproduce the washing-line demo: a 29x29 cloth pinned at the
corners and middle of its top edge, and a lawn of 250 grass blades.
"""

import yaml
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path
import numpy as np

from .exceptions import InvalidConfigError
from .solver import SolverConfig


def _is_vector2(v) -> bool:
    try:
        arr = np.asarray(v, dtype=np.float64)
    except (TypeError, ValueError):
        return False
    return arr.shape == (2,) and bool(np.all(np.isfinite(arr)))


@dataclass
class WindConfig:
    """Noise-driven wind parameters."""
    direction: list[float] = field(default_factory=lambda: [1.0, 0.0])
    strength: float = 0.1
    frequency: float = 0.01
    seed: int = 100
    grass_factor: float = 2.0

    def validate(self) -> tuple[bool, Optional[str]]:
        if not _is_vector2(self.direction):
            return False, "direction must have 2 finite components"
        if np.linalg.norm(self.direction) < 1e-10:
            return False, "direction must be non-zero"
        if self.strength < 0:
            return False, "strength must be non-negative"
        if self.frequency < 0:
            return False, "frequency must be non-negative"
        return True, None


@dataclass
class ClothConfig:
    """Grid body parameters. pinned lists point indices locked after generation."""
    x: float = 100.0
    y: float = 480.0
    width: int = 29
    height: int = 29
    cell_size: float = 5.0
    force_multiplier: float = 0.01
    pinned: Optional[list[int]] = None

    def __post_init__(self):
        if self.pinned is None and isinstance(self.width, int) and self.width >= 1:
            self.pinned = [0, self.width // 2, self.width - 1]

    def validate(self) -> tuple[bool, Optional[str]]:
        if not isinstance(self.width, int) or self.width < 1:
            return False, "width must be a positive integer"
        if not isinstance(self.height, int) or self.height < 1:
            return False, "height must be a positive integer"
        if self.cell_size <= 0:
            return False, "cell_size must be positive"
        if self.force_multiplier < 0:
            return False, "force_multiplier must be non-negative"
        n = self.width * self.height
        for idx in self.pinned or []:
            if not isinstance(idx, int) or not 0 <= idx < n:
                return False, f"pinned index {idx} outside 0..{n - 1}"
        return True, None


@dataclass
class GrassConfig:
    """Field of chain bodies scattered over a rectangular region."""
    count: int = 250
    segments: int = 5
    spacing_min: float = 5.0
    spacing_max: float = 7.0
    x_min: float = 0.0
    x_max: float = 1200.0
    y_min: float = 490.0
    y_max: float = 800.0
    jitter: float = 0.05

    def validate(self) -> tuple[bool, Optional[str]]:
        if not isinstance(self.count, int) or self.count < 0:
            return False, "count must be a non-negative integer"
        if not isinstance(self.segments, int) or self.segments < 1:
            return False, "segments must be a positive integer"
        if self.spacing_min <= 0:
            return False, "spacing_min must be positive"
        if self.spacing_max < self.spacing_min:
            return False, "spacing_max must be >= spacing_min"
        if self.x_max < self.x_min:
            return False, "x_max must be >= x_min"
        if self.y_max < self.y_min:
            return False, "y_max must be >= y_min"
        if self.jitter < 0:
            return False, "jitter must be non-negative"
        return True, None


@dataclass
class SceneConfig:
    """Complete scene configuration."""
    solver: SolverConfig = field(default_factory=lambda: SolverConfig(iterations=10))
    gravity: list[float] = field(default_factory=lambda: [0.0, 0.2])
    wind: WindConfig = field(default_factory=WindConfig)
    cloth: Optional[ClothConfig] = field(default_factory=ClothConfig)
    grass: GrassConfig = field(default_factory=GrassConfig)
    seed: Optional[int] = 42

    def validate(self) -> tuple[bool, Optional[str]]:
        if not _is_vector2(self.gravity):
            return False, "gravity: must have 2 finite components"
        sections = ["solver", "wind", "grass"]
        if self.cloth is not None:
            sections.append("cloth")
        for section_name in sections:
            section = getattr(self, section_name)
            is_valid, error = section.validate()
            if not is_valid:
                return False, f"{section_name}: {error}"
        return True, None


def _section(raw: dict, name: str) -> dict:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise InvalidConfigError(f"Invalid configuration: section '{name}' must be a mapping")
    return value


def parse_config(raw: Optional[dict]) -> SceneConfig:
    """
    Build and validate a SceneConfig from a parsed YAML mapping.

    Missing sections and keys take their defaults. A ``cloth: null`` entry
    disables the cloth.

    Raises:
        InvalidConfigError: If a section is malformed, has unknown keys or
            fails validation.
    """
    raw = raw or {}
    if not isinstance(raw, dict):
        raise InvalidConfigError("Invalid configuration: top level must be a mapping")

    try:
        solver = SolverConfig(**{"iterations": 10, **_section(raw, "solver")})
        wind = WindConfig(**_section(raw, "wind"))
        grass = GrassConfig(**_section(raw, "grass"))
        if "cloth" in raw and raw["cloth"] is None:
            cloth = None
        else:
            cloth = ClothConfig(**_section(raw, "cloth"))
    except TypeError as e:
        raise InvalidConfigError(f"Invalid configuration: {e}") from e

    config = SceneConfig(
        solver=solver,
        gravity=raw.get("gravity", [0.0, 0.2]),
        wind=wind,
        cloth=cloth,
        grass=grass,
        seed=raw.get("seed", 42),
    )

    try:
        is_valid, error = config.validate()
    except (TypeError, ValueError) as e:
        raise InvalidConfigError(f"Invalid configuration: {e}") from e
    if not is_valid:
        raise InvalidConfigError(f"Invalid configuration: {error}")

    return config


def load_config(path: Path) -> SceneConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        path: Path to YAML config file.

    Returns:
        Validated SceneConfig.

    Raises:
        InvalidConfigError: If config is invalid.
        FileNotFoundError: If file doesn't exist.
    """
    with open(path, 'r') as f:
        raw = yaml.safe_load(f)

    return parse_config(raw)
