from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


@dataclass
class CameraState:
    azimuth: float
    elevation: float
    distance: float
    distance_target: float


class OrbitCamera:
    """Perspective camera circling the origin; drag to orbit, wheel to zoom."""

    def __init__(
        self,
        size: tuple[int, int],
        distance: float,
        *,
        min_distance: float,
        max_distance: float,
        elevation: float = 30.0,
        max_elevation: float = 80.0,
        fov_deg: float = 60.0,
        near: float = 50.0,
    ) -> None:
        self._size = size
        self._min_distance = min_distance
        self._max_distance = max_distance
        self._max_elevation = max_elevation
        self._fov_deg = fov_deg
        self._near = near
        distance = _clamp(distance, min_distance, max_distance)
        self._state = CameraState(
            azimuth=0.0,
            elevation=_clamp(elevation, -max_elevation, max_elevation),
            distance=distance,
            distance_target=distance,
        )
        self._drag_anchor: tuple[int, int] | None = None
        self._basis = self._compute_basis()

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def update_size(self, size: tuple[int, int]) -> None:
        self._size = size

    @property
    def azimuth(self) -> float:
        return self._state.azimuth

    @property
    def elevation(self) -> float:
        return self._state.elevation

    @property
    def distance(self) -> float:
        return self._state.distance

    @property
    def focal_length(self) -> float:
        return (self._size[1] / 2.0) / math.tan(math.radians(self._fov_deg) / 2.0)

    def position(self) -> np.ndarray:
        az = math.radians(self._state.azimuth)
        el = math.radians(self._state.elevation)
        d = self._state.distance
        return np.array(
            [d * math.cos(el) * math.sin(az), d * math.sin(el), d * math.cos(el) * math.cos(az)],
            dtype=float,
        )

    def rotate(self, d_azimuth: float, d_elevation: float = 0.0) -> None:
        self._state.azimuth = (self._state.azimuth + d_azimuth) % 360.0
        self._state.elevation = _clamp(
            self._state.elevation + d_elevation, -self._max_elevation, self._max_elevation
        )

    def zoom_by(self, delta: float) -> None:
        self._state.distance_target = _clamp(
            self._state.distance_target + delta, self._min_distance, self._max_distance
        )

    def update(self, smoothing: float = 0.15) -> None:
        state = self._state
        state.distance += (state.distance_target - state.distance) * smoothing
        state.distance = _clamp(state.distance, self._min_distance, self._max_distance)
        self._basis = self._compute_basis()

    def begin_drag(self, position: tuple[int, int]) -> None:
        self._drag_anchor = position

    def drag(self, position: tuple[int, int], sensitivity: float) -> None:
        if self._drag_anchor is None:
            return
        dx = position[0] - self._drag_anchor[0]
        dy = position[1] - self._drag_anchor[1]
        if dx == 0 and dy == 0:
            return
        self.rotate(dx * sensitivity, -dy * sensitivity)
        self._drag_anchor = position

    def end_drag(self) -> None:
        self._drag_anchor = None

    @property
    def dragging(self) -> bool:
        return self._drag_anchor is not None

    def _compute_basis(self) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        eye = self.position()
        forward = -eye / max(float(np.linalg.norm(eye)), 1e-9)
        right = np.cross(forward, np.array([0.0, 1.0, 0.0]))
        right /= max(float(np.linalg.norm(right)), 1e-9)
        up = np.cross(right, forward)
        return eye, forward, right, up

    def depth(self, point: np.ndarray) -> float:
        eye, forward, _, _ = self._basis
        return float(np.dot(np.asarray(point, dtype=float) - eye, forward))

    def world_to_screen(self, point: np.ndarray) -> tuple[int, int] | None:
        """Project a 3-D point; ``None`` when it lies behind the near plane."""

        eye, forward, right, up = self._basis
        rel = np.asarray(point, dtype=float) - eye
        z = float(np.dot(rel, forward))
        if z <= self._near:
            return None
        f = self.focal_length
        width, height = self._size
        sx = width / 2.0 + f * float(np.dot(rel, right)) / z
        sy = height / 2.0 - f * float(np.dot(rel, up)) / z
        return int(sx), int(sy)

    def project_many(self, points: np.ndarray) -> list[tuple[int, int]]:
        projected: list[tuple[int, int]] = []
        for point in points:
            screen = self.world_to_screen(point)
            if screen is not None:
                projected.append(screen)
        return projected

    def project_radius(self, point: np.ndarray, radius: float) -> int:
        z = self.depth(point)
        if z <= self._near:
            return 0
        return max(1, int(self.focal_length * radius / z))
