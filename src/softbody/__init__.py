"""
softbody - 2D Verlet soft-body simulation.

Point masses joined by fixed-length links, advanced once per frame by a
Verlet integrator followed by a fixed number of constraint relaxation
passes. Grid ("cloth") and chain ("grass blade") topologies are provided.

Units:
    - Position: whatever the host draws in (pixels in the default scene)
    - Time: whatever the host scales its forces by (ms per frame in the default scene)
"""

__version__ = "0.1.0"

from .exceptions import (
    SoftBodyError,
    InvalidTopologyError,
    InvalidBodyError,
    InvalidSolverParameterError,
    InvalidConfigError,
)
from .body import Body, Link, Point
from .topology import (
    generate_grid,
    generate_chain,
    generate_links,
    grid_index,
    grid_link_pairs,
    grid_outline_indices,
)
from .solver import (
    SoftBodySolver,
    SolverConfig,
    StepResult,
    integrate,
    relax,
    step,
)
from .wind import WindField, ValueNoise1D

# Config exports
from .config import (
    SceneConfig,
    ClothConfig,
    GrassConfig,
    WindConfig,
    load_config,
    parse_config,
)
from .scene import Scene, SceneFrame
