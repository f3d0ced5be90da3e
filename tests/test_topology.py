"""
Tests for grid and chain topology generation.

Tests:
    - Grid size / index / position law
    - Chain layout and force multipliers
    - Rest lengths equal initial distances
    - Outline index walk
    - Parameter validation
"""

import pytest
import numpy as np

from softbody.exceptions import InvalidTopologyError
from softbody.topology import (
    generate_chain,
    generate_grid,
    generate_links,
    grid_index,
    grid_link_pairs,
    grid_outline_indices,
)


def assert_links_at_rest(body):
    for link in body.links:
        d = np.linalg.norm(body.positions[link.index_a] - body.positions[link.index_b])
        assert d == pytest.approx(link.rest_length, abs=1e-12)


class TestGrid:
    """Tests for generate_grid."""

    @pytest.mark.parametrize("width,height", [(1, 1), (2, 2), (3, 5), (29, 29)])
    def test_point_and_link_counts(self, width, height):
        body = generate_grid(0.0, 0.0, width, height, 5.0)
        assert body.n_points == width * height
        assert body.n_links == width * (height - 1) + height * (width - 1)

    def test_row_major_positions(self):
        x, y, w, h, s = 100.0, 50.0, 4, 3, 2.5
        body = generate_grid(x, y, w, h, s)
        for i in range(h):
            for j in range(w):
                idx = grid_index(i, j, w)
                assert idx == i * w + j
                np.testing.assert_allclose(body.positions[idx], [x + j * s, y + i * s])

    def test_all_points_unlocked_with_multiplier(self):
        body = generate_grid(0.0, 0.0, 3, 3, 1.0, force_multiplier=0.01)
        assert not body.locked.any()
        np.testing.assert_array_equal(body.force_multipliers, np.full(9, 0.01))
        np.testing.assert_array_equal(body.previous_positions, body.positions)

    def test_links_are_structural_only(self):
        w, h, s = 4, 3, 2.0
        body = generate_grid(0.0, 0.0, w, h, s)
        for link in body.links:
            assert abs(link.index_b - link.index_a) in (1, w)
            assert link.rest_length == pytest.approx(s)

    def test_horizontal_links_come_first(self):
        w, h = 3, 2
        pairs = grid_link_pairs(w, h)
        assert pairs[:4] == [(0, 1), (1, 2), (3, 4), (4, 5)]
        assert pairs[4:] == [(0, 3), (1, 4), (2, 5)]

    def test_rest_lengths_match_initial_distances(self):
        assert_links_at_rest(generate_grid(-3.0, 7.0, 6, 4, 1.7))

    @pytest.mark.parametrize("width,height,cell", [
        (0, 3, 1.0),
        (3, 0, 1.0),
        (-1, 3, 1.0),
        (2.5, 3, 1.0),
        (3, 3, 0.0),
        (3, 3, -2.0),
    ])
    def test_invalid_parameters(self, width, height, cell):
        with pytest.raises(InvalidTopologyError):
            generate_grid(0.0, 0.0, width, height, cell)

    def test_negative_force_multiplier(self):
        with pytest.raises(InvalidTopologyError):
            generate_grid(0.0, 0.0, 2, 2, 1.0, force_multiplier=-0.5)


class TestOutline:
    """Tests for grid_outline_indices."""

    def test_walk_order(self):
        assert grid_outline_indices(3, 2) == [0, 1, 2, 2, 5, 5, 4, 3, 3, 0]

    def test_length(self):
        assert len(grid_outline_indices(29, 29)) == 2 * (29 + 29)

    def test_outline_traces_grid_boundary(self):
        w, h, s = 4, 3, 1.0
        body = generate_grid(0.0, 0.0, w, h, s)
        outline = body.positions[grid_outline_indices(w, h)]
        on_edge = (
            np.isclose(outline[:, 0], 0.0) | np.isclose(outline[:, 0], (w - 1) * s)
            | np.isclose(outline[:, 1], 0.0) | np.isclose(outline[:, 1], (h - 1) * s)
        )
        assert on_edge.all()

    def test_invalid_dimensions(self):
        with pytest.raises(InvalidTopologyError):
            grid_outline_indices(0, 4)


class TestChain:
    """Tests for generate_chain."""

    def test_layout(self):
        x, y, n, s = 12.0, 30.0, 5, 6.0
        body = generate_chain(x, y, n, s, rng=np.random.default_rng(0))
        assert body.n_points == n + 1
        assert body.n_links == n
        assert body.locked[0]
        assert not body.locked[1:].any()
        for k in range(n + 1):
            np.testing.assert_allclose(body.positions[k], [x, y + k * s])
        assert [(l.index_a, l.index_b) for l in body.links] == [(k, k + 1) for k in range(n)]

    def test_force_multiplier_range(self):
        body = generate_chain(0.0, 0.0, 20, 1.0, rng=np.random.default_rng(7))
        for k in range(1, 21):
            m = body.force_multipliers[k]
            assert 1.0 / k <= m < 1.0 / k + 0.05

    def test_zero_jitter_is_exact(self):
        body = generate_chain(0.0, 0.0, 4, 1.0, jitter=0.0)
        np.testing.assert_allclose(body.force_multipliers[1:], [1.0, 0.5, 1.0 / 3.0, 0.25])

    def test_seeded_rng_is_reproducible(self):
        a = generate_chain(0.0, 0.0, 8, 2.0, rng=np.random.default_rng(123))
        b = generate_chain(0.0, 0.0, 8, 2.0, rng=np.random.default_rng(123))
        np.testing.assert_array_equal(a.force_multipliers, b.force_multipliers)

    def test_rest_lengths_match_spacing(self):
        body = generate_chain(0.0, 0.0, 5, 6.5)
        assert_links_at_rest(body)
        assert all(l.rest_length == pytest.approx(6.5) for l in body.links)

    @pytest.mark.parametrize("segments,spacing,jitter", [
        (0, 1.0, 0.05),
        (-2, 1.0, 0.05),
        (1.5, 1.0, 0.05),
        (3, 0.0, 0.05),
        (3, 1.0, -0.01),
    ])
    def test_invalid_parameters(self, segments, spacing, jitter):
        with pytest.raises(InvalidTopologyError):
            generate_chain(0.0, 0.0, segments, spacing, jitter=jitter)


class TestGenerateLinks:
    """Tests for generate_links on irregular layouts."""

    def test_irregular_layout_starts_unstressed(self):
        positions = np.array([[0.0, 0.0], [3.0, 4.0], [-1.0, 2.5]])
        links = generate_links(positions, [(0, 1), (1, 2), (2, 0)])
        assert [l.rest_length for l in links] == pytest.approx(
            [5.0, np.hypot(4.0, 1.5), np.hypot(1.0, 2.5)]
        )
