"""Impact-site mapping and flight-path curves.

The impact site is a stylised mapping from the effective approach angle to a
point on the target sphere: the angle doubles as the longitude and the
latitude is ``(angle - 45) * 2``. It gives each angle a visually distinct
site and is not a geodesic computation.
"""
from __future__ import annotations

import math

import numpy as np

from .config import SCENE_CFG, SceneCfg


def _unit(vector: np.ndarray) -> np.ndarray:
    norm = float(np.linalg.norm(vector))
    if norm <= 0.0:
        return np.zeros_like(vector)
    return vector / norm


def impact_point(effective_angle: float, cfg: SceneCfg = SCENE_CFG) -> np.ndarray:
    """Point on the target sphere hit for *effective_angle* (degrees)."""

    angle_rad = math.radians(effective_angle)
    lat_rad = math.radians((effective_angle - 45.0) * 2.0)
    radius = cfg.target_radius
    return np.array(
        [
            radius * math.cos(lat_rad) * math.cos(angle_rad),
            radius * math.sin(lat_rad),
            radius * math.cos(lat_rad) * math.sin(angle_rad),
        ],
        dtype=float,
    )


def start_position(effective_angle: float, cfg: SceneCfg = SCENE_CFG) -> np.ndarray:
    """Nominal approach start: opposite the impact direction, lifted above the plane."""

    direction = _unit(impact_point(effective_angle, cfg))
    start = -direction * cfg.start_distance
    start[1] = abs(start[1]) + cfg.start_altitude_offset
    return start


def arc_height(effective_angle: float, t: float, cfg: SceneCfg = SCENE_CFG) -> float:
    return math.sin(t * math.pi) * cfg.arc_peak_height * (1.0 - effective_angle / 90.0)


def position_at(effective_angle: float, t: float, cfg: SceneCfg = SCENE_CFG) -> np.ndarray:
    """Body position at normalised flight phase ``t`` in ``[0, 1]``."""

    start = start_position(effective_angle, cfg)
    end = impact_point(effective_angle, cfg)
    position = start + (end - start) * t
    position[1] += arc_height(effective_angle, t, cfg)
    return position


def trajectory(
    effective_angle: float, steps: int | None = None, cfg: SceneCfg = SCENE_CFG
) -> np.ndarray:
    """Sampled flight path of ``steps + 1`` points, shape ``(steps + 1, 3)``."""

    steps = cfg.trajectory_steps if steps is None else steps
    if steps < 1:
        raise ValueError("steps must be at least 1")
    start = start_position(effective_angle, cfg)
    end = impact_point(effective_angle, cfg)
    ts = np.arange(steps + 1, dtype=float) / steps
    points = start[np.newaxis, :] + (end - start)[np.newaxis, :] * ts[:, np.newaxis]
    points[:, 1] += (
        np.sin(ts * math.pi) * cfg.arc_peak_height * (1.0 - effective_angle / 90.0)
    )
    return points


def miss_trajectory(position: np.ndarray, cfg: SceneCfg = SCENE_CFG) -> np.ndarray:
    """Outward radial extrapolation from *position* after a miss.

    Returns the current position followed by ``cfg.miss_points`` further
    points spaced ``cfg.miss_step_distance`` apart.
    """

    direction = _unit(np.asarray(position, dtype=float))
    offsets = np.arange(cfg.miss_points + 1, dtype=float) * cfg.miss_step_distance
    return position[np.newaxis, :] + direction[np.newaxis, :] * offsets[:, np.newaxis]


def interceptor_launch_point(approach_angle: float, cfg: SceneCfg = SCENE_CFG) -> np.ndarray:
    """Launch site just above the nominal (undeflected) impact point."""

    return impact_point(approach_angle, cfg) * cfg.interceptor_launch_factor


def guide_path(
    start: np.ndarray, end: np.ndarray, steps: int | None = None, cfg: SceneCfg = SCENE_CFG
) -> np.ndarray:
    """Straight line of ``steps + 1`` points from *start* to *end*."""

    steps = cfg.interceptor_guide_steps if steps is None else steps
    ts = np.arange(steps + 1, dtype=float) / steps
    return start[np.newaxis, :] + (end - start)[np.newaxis, :] * ts[:, np.newaxis]


def distance_from_center(position: np.ndarray) -> float:
    return float(np.linalg.norm(position))


__all__ = [
    "arc_height",
    "distance_from_center",
    "guide_path",
    "impact_point",
    "interceptor_launch_point",
    "miss_trajectory",
    "position_at",
    "start_position",
    "trajectory",
]
