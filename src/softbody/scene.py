"""
Headless washing-line scene: one pinned cloth and a lawn of grass blades.

The host owns the frame loop. Each frame it calls Scene.advance(dt) and then
reads cloth_outline() / grass_segments() to draw. The scene keeps a frame
counter only to sample the wind; it holds no wall-clock state.

Forces per frame:
    cloth: wind + gravity
    grass: grass_factor * wind - gravity   (blades are generated hanging
           from their root and pushed upward, so they stand and sway)
"""

import numpy as np
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .body import Body
from .config import SceneConfig
from .logger import Logger
from .solver import SoftBodySolver
from .topology import generate_chain, generate_grid, grid_outline_indices
from .wind import WindField


@dataclass
class SceneFrame:
    """
    Summary of one advanced frame.

    Attributes:
        frame: Frame number after the step (1 for the first call).
        wind: Wind force sampled for this frame.
        cloth_deviation: Mean link deviation of the cloth, None without cloth.
        degenerate_links: Degenerate link visits skipped across all bodies.
    """
    frame: int
    wind: np.ndarray
    cloth_deviation: Optional[float]
    degenerate_links: int


class Scene:
    """
    Cloth plus grass blades stepped with a shared solver and wind field.

    Attributes:
        config: Scene configuration used to build the bodies.
        cloth: Grid body, or None when the config disables it.
        grass: Chain bodies.
        frame: Number of frames advanced so far.
    """

    def __init__(self, config: SceneConfig, cloth: Optional[Body], grass: List[Body]):
        self.config = config
        self.cloth = cloth
        self.grass = grass
        self.frame = 0
        self.gravity = np.asarray(config.gravity, dtype=np.float64)
        self.solver = SoftBodySolver(config.solver)
        self.wind = WindField(
            direction=config.wind.direction,
            strength=config.wind.strength,
            frequency=config.wind.frequency,
            seed=config.wind.seed,
        )

    @classmethod
    def from_config(cls, config: Optional[SceneConfig] = None) -> "Scene":
        """
        Build every body of the scene from one seeded random generator.

        Args:
            config: Validated scene configuration (default: SceneConfig()).
        """
        config = config if config is not None else SceneConfig()
        rng = np.random.default_rng(config.seed)

        cloth = None
        if config.cloth is not None:
            c = config.cloth
            cloth = generate_grid(c.x, c.y, c.width, c.height, c.cell_size, c.force_multiplier)
            cloth.lock(*(c.pinned or []))

        g = config.grass
        grass = []
        for _ in range(g.count):
            x = rng.uniform(g.x_min, g.x_max)
            y = rng.uniform(g.y_min, g.y_max)
            spacing = rng.uniform(g.spacing_min, g.spacing_max)
            grass.append(generate_chain(x, y, g.segments, spacing, rng=rng, jitter=g.jitter))

        Logger.log(
            f"Scene built: cloth={cloth}, grass blades={len(grass)}, seed={config.seed}",
            Logger.LogPriority.INFO,
        )
        return cls(config, cloth, grass)

    @property
    def bodies(self) -> List[Body]:
        return ([self.cloth] if self.cloth is not None else []) + self.grass

    def cloth_force(self, wind: np.ndarray) -> np.ndarray:
        return wind + self.gravity

    def grass_force(self, wind: np.ndarray) -> np.ndarray:
        return wind * self.config.wind.grass_factor - self.gravity

    def advance(self, elapsed_time: float) -> SceneFrame:
        """
        Step every body by one frame.

        Args:
            elapsed_time: Time since the previous frame.

        Returns:
            SceneFrame describing the step.
        """
        wind = self.wind.sample(self.frame)
        degenerate = 0

        cloth_deviation = None
        if self.cloth is not None:
            result = self.solver.step(self.cloth, self.cloth_force(wind), elapsed_time)
            degenerate += result.degenerate_links
            cloth_deviation = result.mean_deviation

        grass_force = self.grass_force(wind)
        for result in self.solver.step_all(self.grass, grass_force, elapsed_time):
            degenerate += result.degenerate_links

        self.frame += 1
        return SceneFrame(
            frame=self.frame,
            wind=wind,
            cloth_deviation=cloth_deviation,
            degenerate_links=degenerate,
        )

    def cloth_outline(self) -> np.ndarray:
        """Boundary polygon of the cloth, shape (K, 2). Empty without cloth."""
        if self.cloth is None:
            return np.zeros((0, 2), dtype=np.float64)
        c = self.config.cloth
        return self.cloth.positions[grid_outline_indices(c.width, c.height)].copy()

    def grass_segments(self) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
        """Endpoint pairs of every grass link, blade by blade."""
        for blade in self.grass:
            for k in range(blade.n_links):
                yield blade.link_endpoints(k)
