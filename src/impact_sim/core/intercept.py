"""Interceptor launch, pursuit and proximity detonation."""
from __future__ import annotations

import numpy as np

from impact_sim.data.deflection_methods import NO_DEFLECTION_KEY

from .config import SCENE_CFG, SceneCfg
from .deflection import is_feasible
from .geometry import guide_path, interceptor_launch_point
from .model import DeflectionState, Explosion, Projectile


def interception_planned(deflection: DeflectionState) -> bool:
    """A projectile is flown only for a real, feasible countermeasure."""

    method = deflection.method
    return method.key != NO_DEFLECTION_KEY and is_feasible(method, deflection.lead_time)


def should_launch(
    deflection: DeflectionState,
    elapsed_ticks: int,
    cfg: SceneCfg = SCENE_CFG,
) -> bool:
    return (
        not deflection.missile_deployed
        and interception_planned(deflection)
        and elapsed_ticks >= cfg.interceptor_spawn_delay_ticks
    )


def launch(
    approach_angle: float,
    body_position: np.ndarray,
    *,
    color: int = 0xFFFFFF,
    cfg: SceneCfg = SCENE_CFG,
) -> Projectile:
    """Spawn the projectile above the nominal impact site, aimed at the body."""

    start = interceptor_launch_point(approach_angle, cfg)
    target = np.asarray(body_position, dtype=float).copy()
    return Projectile(
        position=start,
        target=target,
        heading=_heading(start, target),
        guide_path=guide_path(start, target, cfg=cfg),
        color=color,
    )


def _heading(origin: np.ndarray, target: np.ndarray) -> np.ndarray:
    delta = target - origin
    norm = float(np.linalg.norm(delta))
    if norm <= 0.0:
        return np.zeros(3, dtype=float)
    return delta / norm


def step(projectile: Projectile, target_position: np.ndarray, cfg: SceneCfg = SCENE_CFG) -> float:
    """Advance one tick toward *target_position*; return the remaining separation."""

    target = np.asarray(target_position, dtype=float)
    direction = _heading(projectile.position, target)
    projectile.position = projectile.position + direction * cfg.interceptor_step
    projectile.target = target.copy()
    projectile.heading = _heading(projectile.position, target)
    if not projectile.heading.any():
        projectile.heading = direction
    return float(np.linalg.norm(target - projectile.position))


def in_detonation_range(separation: float, cfg: SceneCfg = SCENE_CFG) -> bool:
    return separation < cfg.interceptor_proximity


def detonate(projectile: Projectile, cfg: SceneCfg = SCENE_CFG) -> Explosion:
    projectile.detonated = True
    return Explosion(
        position=projectile.position.copy(),
        radius=cfg.explosion_radius,
        opacity=cfg.explosion_opacity,
        remaining_ticks=cfg.explosion_lifetime_ticks,
    )


__all__ = [
    "detonate",
    "in_detonation_range",
    "interception_planned",
    "launch",
    "should_launch",
    "step",
]
