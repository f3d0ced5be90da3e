"""
Position-based integrator and constraint solver for soft bodies.

One step = two strictly ordered phases:
    1. Verlet integration of every unlocked point (inertia + external force).
    2. A fixed number of relaxation passes over all links, moving unlocked
       endpoints so each link returns to its rest length.

NUMERICAL NOTES:
    There is no damping term. Velocity is carried implicitly by
    position - previous_position, so any settling comes from the constraint
    projection alone.

    The iteration count is fixed rather than convergence-based, which bounds
    the cost of a frame. More iterations give stiffer links at linear cost.

    Relaxation is sequential (Gauss-Seidel style): a link sees positions
    already moved by earlier links in the same pass. Results are
    deterministic for a fixed link order but depend on that order;
    reordering body.links changes the numbers slightly, not the settled
    shape. Independent bodies can be stepped in any order or concurrently,
    the links of a single body cannot.

Units:
    external_force * elapsed_time is a displacement per step in the body's
    position units; the caller picks consistent units, nothing is normalised here.
"""

import math
import numbers
import numpy as np
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .body import Body
from .exceptions import InvalidSolverParameterError
from .logger import Logger

# Links shorter than this have no usable direction and are skipped for the pass
DEGENERATE_LENGTH = 1e-12

DEFAULT_ITERATIONS = 5


@dataclass
class SolverConfig:
    """Solver parameters."""
    iterations: int = DEFAULT_ITERATIONS

    def validate(self) -> tuple[bool, Optional[str]]:
        if not _is_count(self.iterations):
            return False, "iterations must be an integer"
        if self.iterations < 1:
            return False, "iterations must be >= 1"
        return True, None


@dataclass
class StepResult:
    """
    Diagnostics of one simulation step.

    Attributes:
        iterations: Relaxation passes performed.
        degenerate_links: Link visits skipped because both endpoints coincided.
        mean_deviation: Mean |length - rest_length| after the step.
        warnings: Human-readable notes about skipped work.
    """
    iterations: int
    degenerate_links: int
    mean_deviation: float
    warnings: List[str] = field(default_factory=list)


def _as_force(external_force) -> np.ndarray:
    force = np.asarray(external_force, dtype=np.float64)
    if force.shape != (2,):
        raise InvalidSolverParameterError(f"external_force must be a 2-vector, got shape {force.shape}")
    if not np.all(np.isfinite(force)):
        raise InvalidSolverParameterError("external_force must be finite")
    return force


def _is_count(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _check_elapsed_time(elapsed_time) -> float:
    if isinstance(elapsed_time, (str, bytes)):
        raise InvalidSolverParameterError(f"elapsed_time must be a number, got {elapsed_time!r}")
    try:
        dt = float(elapsed_time)
    except (TypeError, ValueError) as e:
        raise InvalidSolverParameterError(f"elapsed_time must be a number, got {elapsed_time!r}") from e
    if not math.isfinite(dt) or dt < 0:
        raise InvalidSolverParameterError(f"elapsed_time must be finite and >= 0, got {elapsed_time}")
    return dt


def _check_iterations(iterations) -> int:
    if not _is_count(iterations) or iterations < 1:
        raise InvalidSolverParameterError(f"iterations must be a positive integer, got {iterations!r}")
    return int(iterations)


def integrate(body: Body, external_force, elapsed_time: float) -> None:
    """
    Verlet step for every unlocked point (phase 1).

    For an unlocked point:
        x_new = x + (x - x_prev) + F * dt * force_multiplier
        x_prev = x
    Locked points keep both positions.

    Args:
        body: Body to advance in place.
        external_force: Combined external force (gravity, wind, ...) as a 2-vector.
        elapsed_time: Time since the previous step, in the units the force is scaled for.
    """
    force = _as_force(external_force)
    dt = _check_elapsed_time(elapsed_time)

    free = ~body.locked
    if not np.any(free):
        return

    current = body.positions[free]
    inertia = current - body.previous_positions[free]
    push = np.outer(body.force_multipliers[free], force * dt)

    body.positions[free] = current + inertia + push
    body.previous_positions[free] = current


def relax(body: Body, iterations: int) -> int:
    """
    Project links toward their rest lengths (phase 2).

    Each pass visits body.links in order. For a link between A and B with
    midpoint c and unit direction d from B to A:
        A <- c + d * rest / 2   (unless A is locked)
        B <- c - d * rest / 2   (unless B is locked)
    A link with both ends locked is left as is. A link whose endpoints
    coincide has no direction and is skipped for that pass.

    Args:
        body: Body to relax in place.
        iterations: Number of passes, >= 1.

    Returns:
        Number of link visits skipped as degenerate.
    """
    iterations = _check_iterations(iterations)

    positions = body.positions
    locked = body.locked
    skipped = 0

    for _ in range(iterations):
        for link in body.links:
            a = link.index_a
            b = link.index_b
            lock_a = locked[a]
            lock_b = locked[b]
            if lock_a and lock_b:
                continue

            ax, ay = positions[a]
            bx, by = positions[b]
            dx = ax - bx
            dy = ay - by
            length = math.hypot(dx, dy)
            if length < DEGENERATE_LENGTH:
                skipped += 1
                continue

            half = 0.5 * link.rest_length / length
            cx = 0.5 * (ax + bx)
            cy = 0.5 * (ay + by)
            if not lock_a:
                positions[a, 0] = cx + dx * half
                positions[a, 1] = cy + dy * half
            if not lock_b:
                positions[b, 0] = cx - dx * half
                positions[b, 1] = cy - dy * half

    return skipped


def step(body: Body, external_force, elapsed_time: float, iterations: int) -> None:
    """
    Advance a body by one frame: integrate, then relax ``iterations`` times.

    All parameters are checked before the body is touched, so a bad call
    leaves the body unchanged.

    Raises:
        InvalidSolverParameterError: Non-positive iterations, negative or
            non-finite elapsed_time, or a malformed force.
    """
    force = _as_force(external_force)
    dt = _check_elapsed_time(elapsed_time)
    iterations = _check_iterations(iterations)

    integrate(body, force, dt)
    relax(body, iterations)


class SoftBodySolver:
    """
    Per-scene solver holding the iteration count and reporting diagnostics.

    The module-level step() is the bare per-frame call; this class wraps it
    for hosts that want a StepResult and logged warnings.
    """

    def __init__(self, config: Optional[SolverConfig] = None):
        """
        Args:
            config: Solver configuration (default: SolverConfig()).

        Raises:
            InvalidSolverParameterError: If the configuration does not validate.
        """
        self.config = config if config is not None else SolverConfig()
        is_valid, error = self.config.validate()
        if not is_valid:
            raise InvalidSolverParameterError(error)
        self.iterations = int(self.config.iterations)
        Logger.log(f"SoftBodySolver initialized (iterations={self.iterations})")

    def step(self, body: Body, external_force, elapsed_time: float) -> StepResult:
        """
        Advance one body by one frame.

        Returns:
            StepResult for this body.
        """
        force = _as_force(external_force)
        dt = _check_elapsed_time(elapsed_time)

        integrate(body, force, dt)
        skipped = relax(body, self.iterations)

        warnings: List[str] = []
        if skipped:
            message = f"{skipped} degenerate link visit(s) skipped (coincident endpoints)"
            warnings.append(message)
            Logger.log(f"WARNING: {message} in {body}", Logger.LogPriority.WARNING)

        return StepResult(
            iterations=self.iterations,
            degenerate_links=skipped,
            mean_deviation=body.mean_link_deviation(),
            warnings=warnings,
        )

    def step_all(self, bodies: Iterable[Body], external_force, elapsed_time: float) -> List[StepResult]:
        """Step several independent bodies with the same force."""
        return [self.step(body, external_force, elapsed_time) for body in bodies]
