"""
Tests for impact-site mapping and flight-path curves.

Tests cover:
1. Impact site on the target sphere
2. Start position and parabolic arc
3. Sampled trajectories
4. Miss extrapolation and interceptor helpers
"""

import math

import numpy as np
import pytest

from impact_sim.core.config import SCENE_CFG
from impact_sim.core.geometry import (
    arc_height,
    distance_from_center,
    guide_path,
    impact_point,
    interceptor_launch_point,
    miss_trajectory,
    position_at,
    start_position,
    trajectory,
)


# =============================================================================
# IMPACT SITE
# =============================================================================

class TestImpactPoint:
    def test_reference_angle_lies_on_equator(self):
        point = impact_point(45.0)
        half = 4500.0 * math.cos(math.radians(45.0))
        assert point == pytest.approx(np.array([half, 0.0, half]))

    @pytest.mark.parametrize("angle", [5.0, 15.0, 30.0, 45.0, 60.0, 90.0])
    def test_site_is_on_target_surface(self, angle):
        assert distance_from_center(impact_point(angle)) == pytest.approx(SCENE_CFG.target_radius)

    def test_vertical_entry_hits_pole(self):
        point = impact_point(90.0)
        assert point[1] == pytest.approx(4500.0)
        assert abs(point[0]) < 1e-9 and abs(point[2]) < 1e-9

    def test_different_angles_give_different_sites(self):
        assert not np.allclose(impact_point(30.0), impact_point(60.0))


# =============================================================================
# FLIGHT PATH
# =============================================================================

class TestFlightPath:
    def test_start_position_for_reference_angle(self):
        offset = 20000.0 * math.cos(math.radians(45.0))
        assert start_position(45.0) == pytest.approx(np.array([-offset, 5000.0, -offset]))

    @pytest.mark.parametrize("angle", [10.0, 45.0, 80.0])
    def test_start_is_above_plane(self, angle):
        assert start_position(angle)[1] >= SCENE_CFG.start_altitude_offset

    def test_position_endpoints(self):
        assert position_at(30.0, 0.0) == pytest.approx(start_position(30.0))
        assert position_at(30.0, 1.0) == pytest.approx(impact_point(30.0), abs=1e-6)

    def test_arc_height(self):
        assert arc_height(45.0, 0.5) == pytest.approx(1000.0)
        assert arc_height(90.0, 0.5) == pytest.approx(0.0)
        assert arc_height(0.0, 0.5) == pytest.approx(2000.0)

    def test_trajectory_shape(self):
        points = trajectory(45.0)
        assert points.shape == (SCENE_CFG.trajectory_steps + 1, 3)
        assert trajectory(45.0, steps=10).shape == (11, 3)

    def test_trajectory_matches_position_at(self):
        points = trajectory(60.0, steps=20)
        for k in (0, 5, 10, 20):
            assert points[k] == pytest.approx(position_at(60.0, k / 20.0), abs=1e-6)

    def test_trajectory_rejects_zero_steps(self):
        with pytest.raises(ValueError):
            trajectory(45.0, steps=0)


# =============================================================================
# MISS AND INTERCEPTOR HELPERS
# =============================================================================

class TestHelpers:
    def test_miss_trajectory_is_radial(self):
        position = np.array([3000.0, 4000.0, 0.0])
        points = miss_trajectory(position)
        assert points.shape == (SCENE_CFG.miss_points + 1, 3)
        assert points[0] == pytest.approx(position)
        radii = np.linalg.norm(points, axis=1)
        assert np.diff(radii) == pytest.approx(np.full(SCENE_CFG.miss_points, 300.0))

    def test_launch_point_is_above_nominal_site(self):
        point = interceptor_launch_point(45.0)
        assert distance_from_center(point) == pytest.approx(4500.0 * 1.1)
        direction = impact_point(45.0) / 4500.0
        assert point / np.linalg.norm(point) == pytest.approx(direction)

    def test_guide_path(self):
        start = np.zeros(3)
        end = np.array([100.0, 0.0, 0.0])
        path = guide_path(start, end)
        assert path.shape == (SCENE_CFG.interceptor_guide_steps + 1, 3)
        assert path[0] == pytest.approx(start)
        assert path[-1] == pytest.approx(end)
