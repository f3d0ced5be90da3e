"""
Topology generation for soft bodies.

Two shapes are supported:
    - Grid ("cloth"): width x height points, row-major, structural links only.
    - Chain ("blade"): segment_count + 1 points hanging from a locked root.

Every link's rest length is the initial distance between its endpoints, so a
freshly generated body starts with zero internal stress whatever its layout.

Index contract for grids: the point at row i, column j has index
i * width + j. Renderers rebuild the cloth outline from width and height
alone (see grid_outline_indices), so generators must keep this order.
"""

import numpy as np
from typing import List, Optional, Sequence, Tuple

from .body import Body, Link
from .exceptions import InvalidTopologyError
from .logger import Logger

# Upper bound of the per-point random offset added to a chain's force multipliers
DEFAULT_CHAIN_JITTER = 0.05


def generate_links(positions, index_pairs: Sequence[Tuple[int, int]]) -> List[Link]:
    """
    Create links for the given index pairs.

    Args:
        positions: Point positions, shape (N, 2).
        index_pairs: (a, b) index pairs into positions.

    Returns:
        List of Link with rest_length = |positions[a] - positions[b]|.
    """
    positions = np.asarray(positions, dtype=np.float64)
    links = []
    for a, b in index_pairs:
        rest = float(np.linalg.norm(positions[a] - positions[b]))
        links.append(Link(int(a), int(b), rest))
    return links


def grid_index(row: int, col: int, width: int) -> int:
    """Row-major index of the grid point at (row, col)."""
    return row * width + col


def grid_link_pairs(width: int, height: int) -> List[Tuple[int, int]]:
    """
    Structural link index pairs for a width x height grid.

    Horizontal neighbours of every row come first, then vertical neighbours
    of every column. No shear (diagonal) links.
    """
    pairs = []
    for i in range(height):
        for j in range(width - 1):
            pairs.append((grid_index(i, j, width), grid_index(i, j + 1, width)))
    for j in range(width):
        for i in range(height - 1):
            pairs.append((grid_index(i, j, width), grid_index(i + 1, j, width)))
    return pairs


def grid_outline_indices(width: int, height: int) -> List[int]:
    """
    Point indices tracing the boundary of a grid body.

    Walk order: top row left to right, right column top to bottom, bottom
    row right to left, left column bottom to top. Corner points appear once
    per edge they belong to, matching a polygon drawn edge by edge.
    """
    _check_grid_dimensions(width, height)
    top = [grid_index(0, j, width) for j in range(width)]
    right = [grid_index(i, width - 1, width) for i in range(height)]
    bottom = [grid_index(height - 1, j, width) for j in range(width - 1, -1, -1)]
    left = [grid_index(i, 0, width) for i in range(height - 1, -1, -1)]
    return top + right + bottom + left


def _check_grid_dimensions(width: int, height: int) -> None:
    if int(width) != width or int(height) != height:
        raise InvalidTopologyError(f"Grid dimensions must be integers, got {width}x{height}")
    if width < 1 or height < 1:
        raise InvalidTopologyError(f"Grid dimensions must be positive, got {width}x{height}")


def generate_grid(
    origin_x: float,
    origin_y: float,
    width: int,
    height: int,
    cell_size: float,
    force_multiplier: float = 1.0,
) -> Body:
    """
    Generate a rectangular cloth body.

    Args:
        origin_x, origin_y: Position of the top-left point (row 0, column 0).
        width: Number of columns.
        height: Number of rows.
        cell_size: Spacing between neighbouring points.
        force_multiplier: Force multiplier given to every point.

    Returns:
        Body with width*height unlocked points and
        width*(height-1) + height*(width-1) links.

    Raises:
        InvalidTopologyError: If a dimension is not a positive integer,
            cell_size is not positive or force_multiplier is negative.
    """
    _check_grid_dimensions(width, height)
    if not cell_size > 0:
        raise InvalidTopologyError(f"cell_size must be positive, got {cell_size}")
    if force_multiplier < 0:
        raise InvalidTopologyError(f"force_multiplier must be non-negative, got {force_multiplier}")

    width = int(width)
    height = int(height)

    rows, cols = np.meshgrid(np.arange(height), np.arange(width), indexing="ij")
    positions = np.column_stack([
        origin_x + cols.ravel() * cell_size,
        origin_y + rows.ravel() * cell_size,
    ]).astype(np.float64)

    links = generate_links(positions, grid_link_pairs(width, height))
    body = Body(
        positions,
        links,
        force_multipliers=np.full(width * height, force_multiplier, dtype=np.float64),
    )
    Logger.log(f"generate_grid: {width}x{height} cells of {cell_size} at ({origin_x}, {origin_y}) -> {body}")
    return body


def generate_chain(
    x: float,
    y: float,
    segment_count: int,
    segment_spacing: float,
    rng: Optional[np.random.Generator] = None,
    jitter: float = DEFAULT_CHAIN_JITTER,
) -> Body:
    """
    Generate a vertical chain (grass blade) anchored at (x, y).

    Point 0 is locked at (x, y). Point k >= 1 sits at (x, y + k * spacing)
    with force multiplier 1/k + u, u drawn uniformly from [0, jitter). The
    offset keeps neighbouring blades from swaying in lockstep under a shared
    wind force; pass a seeded rng for reproducible bodies.

    Args:
        x, y: Anchor position.
        segment_count: Number of links (points = segment_count + 1).
        segment_spacing: Distance between consecutive points. Use a negative
            force (or flip the scene) for blades that stand upward.
        rng: Random source for the multiplier offsets.
        jitter: Upper bound of the random offset.

    Raises:
        InvalidTopologyError: On non-positive segment_count or spacing, or negative jitter.
    """
    if int(segment_count) != segment_count or segment_count < 1:
        raise InvalidTopologyError(f"segment_count must be a positive integer, got {segment_count}")
    if not segment_spacing > 0:
        raise InvalidTopologyError(f"segment_spacing must be positive, got {segment_spacing}")
    if jitter < 0:
        raise InvalidTopologyError(f"jitter must be non-negative, got {jitter}")

    segment_count = int(segment_count)
    if rng is None:
        rng = np.random.default_rng()

    k = np.arange(segment_count + 1)
    positions = np.column_stack([
        np.full(segment_count + 1, x, dtype=np.float64),
        y + k * segment_spacing,
    ])

    force_multipliers = np.ones(segment_count + 1, dtype=np.float64)
    force_multipliers[1:] = 1.0 / k[1:] + rng.random(segment_count) * jitter

    locked = np.zeros(segment_count + 1, dtype=bool)
    locked[0] = True

    pairs = [(i, i + 1) for i in range(segment_count)]
    return Body(
        positions,
        generate_links(positions, pairs),
        force_multipliers=force_multipliers,
        locked=locked,
    )
