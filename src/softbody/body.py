"""
Constraint graph for 2D soft bodies.

Body = N points connected by M length-preserving links.

Point state lives in contiguous arrays owned by the Body; links refer to
points by index, so a point can be shared by any number of links without
aliasing. ``body.points[i]`` gives a Point view over row ``i`` of those
arrays for callers that prefer per-point access (renderers, pinning).

Units:
    - Positions: screen units (pixels in the default scene)
    - Velocity: implicit, position - previous_position per frame
"""

import numpy as np
from dataclasses import dataclass
from collections.abc import Sequence as SequenceABC
from typing import Iterator, List, Sequence, Tuple

from .exceptions import InvalidBodyError


@dataclass(frozen=True)
class Link:
    """
    Length constraint between two points of the same body.

    Attributes:
        index_a: Index of the first endpoint in the owning body.
        index_b: Index of the second endpoint in the owning body.
        rest_length: Target distance, fixed at creation.

    Links are undirected: swapping index_a and index_b does not change the
    solver's result.
    """
    index_a: int
    index_b: int
    rest_length: float


class Point:
    """
    View of a single point in a Body.

    Reads return copies, writes go straight into the body's arrays.
    """

    __slots__ = ("_body", "index")

    def __init__(self, body: "Body", index: int):
        self._body = body
        self.index = index

    @property
    def position(self) -> np.ndarray:
        return self._body.positions[self.index].copy()

    @position.setter
    def position(self, value) -> None:
        self._body.positions[self.index] = value

    @property
    def previous_position(self) -> np.ndarray:
        return self._body.previous_positions[self.index].copy()

    @previous_position.setter
    def previous_position(self, value) -> None:
        self._body.previous_positions[self.index] = value

    @property
    def velocity(self) -> np.ndarray:
        """Displacement over the last step."""
        return self._body.positions[self.index] - self._body.previous_positions[self.index]

    @property
    def force_multiplier(self) -> float:
        return float(self._body.force_multipliers[self.index])

    @force_multiplier.setter
    def force_multiplier(self, value: float) -> None:
        if value < 0:
            raise InvalidBodyError("force_multiplier must be non-negative")
        self._body.force_multipliers[self.index] = value

    @property
    def locked(self) -> bool:
        return bool(self._body.locked[self.index])

    @locked.setter
    def locked(self, value: bool) -> None:
        self._body.locked[self.index] = bool(value)

    def __repr__(self):
        x, y = self._body.positions[self.index]
        return f"Point(index={self.index}, position=({x:.3f}, {y:.3f}), locked={self.locked})"


class PointList(SequenceABC):
    """Indexable, iterable sequence of Point views over a body."""

    def __init__(self, body: "Body"):
        self._body = body

    def __len__(self) -> int:
        return self._body.n_points

    def __getitem__(self, index):
        n = len(self)
        if isinstance(index, slice):
            return [Point(self._body, i) for i in range(*index.indices(n))]
        if index < 0:
            index += n
        if not 0 <= index < n:
            raise IndexError(f"point index {index} out of range for {n} points")
        return Point(self._body, index)

    def __iter__(self) -> Iterator[Point]:
        for i in range(len(self)):
            yield Point(self._body, i)


class Body:
    """
    Owned collection of points and links forming one deformable object.

    Attributes:
        positions: Current positions, shape (N, 2).
        previous_positions: Positions one step ago, shape (N, 2).
        force_multipliers: Per-point external force scale, shape (N,).
        locked: Anchor flags, shape (N,). Locked points are never moved by the solver.
        links: Length constraints between points of this body.

    Point order is significant: generators encode topology in it (for
    example row-major order for grids) and renderers rely on that.
    """

    def __init__(
        self,
        positions,
        links: Sequence[Link],
        previous_positions=None,
        force_multipliers=None,
        locked=None,
    ):
        self.positions = np.array(positions, dtype=np.float64).reshape(-1, 2)
        n = len(self.positions)

        if previous_positions is None:
            self.previous_positions = self.positions.copy()
        else:
            self.previous_positions = np.array(previous_positions, dtype=np.float64)

        if force_multipliers is None:
            self.force_multipliers = np.ones(n, dtype=np.float64)
        else:
            self.force_multipliers = np.array(force_multipliers, dtype=np.float64)

        if locked is None:
            self.locked = np.zeros(n, dtype=bool)
        else:
            self.locked = np.array(locked, dtype=bool)

        self.links: List[Link] = list(links)
        self._validate()

    def _validate(self) -> None:
        n = self.n_points
        if n < 1:
            raise InvalidBodyError("Body must have at least 1 point")
        if self.previous_positions.shape != (n, 2):
            raise InvalidBodyError(
                f"previous_positions shape {self.previous_positions.shape} does not match ({n}, 2)"
            )
        if self.force_multipliers.shape != (n,):
            raise InvalidBodyError(f"Expected {n} force multipliers, got {self.force_multipliers.shape}")
        if self.locked.shape != (n,):
            raise InvalidBodyError(f"Expected {n} locked flags, got {self.locked.shape}")
        if np.any(self.force_multipliers < 0):
            raise InvalidBodyError("force multipliers must be non-negative")
        if not np.all(np.isfinite(self.positions)):
            raise InvalidBodyError("positions must be finite")
        for k, link in enumerate(self.links):
            if not (0 <= link.index_a < n and 0 <= link.index_b < n):
                raise InvalidBodyError(
                    f"Link {k} ({link.index_a}, {link.index_b}) references a point outside 0..{n - 1}"
                )
            if link.rest_length < 0:
                raise InvalidBodyError(f"Link {k} has negative rest length {link.rest_length}")

    @classmethod
    def from_points(
        cls,
        positions,
        index_pairs: Sequence[Tuple[int, int]],
        force_multipliers=None,
        locked=None,
    ) -> "Body":
        """
        Build a body at rest: zero velocity, each link's rest length equal to
        the current distance between its endpoints.
        """
        # local import, topology depends on this module
        from .topology import generate_links

        positions = np.array(positions, dtype=np.float64).reshape(-1, 2)
        n = len(positions)
        for a, b in index_pairs:
            if not (0 <= a < n and 0 <= b < n):
                raise InvalidBodyError(f"Link ({a}, {b}) references a point outside 0..{n - 1}")
        links = generate_links(positions, index_pairs)
        return cls(positions, links, force_multipliers=force_multipliers, locked=locked)

    @property
    def points(self) -> PointList:
        return PointList(self)

    @property
    def n_points(self) -> int:
        return len(self.positions)

    @property
    def n_links(self) -> int:
        return len(self.links)

    def lock(self, *indices: int) -> None:
        """Pin the given points in place."""
        for i in indices:
            self.points[i].locked = True

    def unlock(self, *indices: int) -> None:
        for i in indices:
            self.points[i].locked = False

    def locked_indices(self) -> List[int]:
        return [int(i) for i in np.flatnonzero(self.locked)]

    def link_endpoints(self, k: int) -> Tuple[np.ndarray, np.ndarray]:
        """Copies of the two endpoint positions of link k."""
        link = self.links[k]
        return self.positions[link.index_a].copy(), self.positions[link.index_b].copy()

    def link_length(self, k: int) -> float:
        link = self.links[k]
        return float(np.linalg.norm(self.positions[link.index_a] - self.positions[link.index_b]))

    def link_lengths(self) -> np.ndarray:
        """Current length of every link, in link order."""
        if not self.links:
            return np.zeros(0, dtype=np.float64)
        a = np.fromiter((l.index_a for l in self.links), dtype=np.intp, count=self.n_links)
        b = np.fromiter((l.index_b for l in self.links), dtype=np.intp, count=self.n_links)
        return np.linalg.norm(self.positions[a] - self.positions[b], axis=1)

    def rest_lengths(self) -> np.ndarray:
        return np.fromiter((l.rest_length for l in self.links), dtype=np.float64, count=self.n_links)

    def mean_link_deviation(self) -> float:
        """Mean absolute difference between current and rest link lengths."""
        if not self.links:
            return 0.0
        return float(np.mean(np.abs(self.link_lengths() - self.rest_lengths())))

    def max_link_strain(self) -> float:
        """Largest |L - L0| / L0 over links with a positive rest length."""
        rest = self.rest_lengths()
        mask = rest > 0
        if not np.any(mask):
            return 0.0
        strain = np.abs(self.link_lengths()[mask] - rest[mask]) / rest[mask]
        return float(np.max(strain))

    def copy(self) -> "Body":
        """Deep copy; links are immutable and shared."""
        return Body(
            positions=self.positions.copy(),
            links=list(self.links),
            previous_positions=self.previous_positions.copy(),
            force_multipliers=self.force_multipliers.copy(),
            locked=self.locked.copy(),
        )

    def __repr__(self):
        return (f"Body(points={self.n_points}, links={self.n_links}, "
                f"locked={int(np.count_nonzero(self.locked))})")
