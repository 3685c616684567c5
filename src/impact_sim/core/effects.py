"""Fire-and-forget visual effects: debris, explosions and impact zones."""
from __future__ import annotations

import random

import numpy as np

from .config import SCENE_CFG, SceneCfg
from .model import Debris, Explosion, ImpactEffectsReport, ImpactZone


_FADE_EPSILON = 1e-9


def spawn_debris(
    position: np.ndarray,
    diameter: float,
    rng: random.Random,
    cfg: SceneCfg = SCENE_CFG,
) -> list[Debris]:
    """Fragments thrown outward from *position* with randomised velocity and spin."""

    fragments: list[Debris] = []
    size_factor = diameter / 100.0
    for _ in range(cfg.debris_count):
        size = (rng.random() * cfg.debris_size_spread + cfg.debris_base_size) * size_factor
        velocity = np.array(
            [(rng.random() - 0.5) * cfg.debris_speed for _ in range(3)], dtype=float
        )
        spin = np.array([rng.random() * cfg.debris_spin for _ in range(3)], dtype=float)
        fragments.append(
            Debris(
                position=np.asarray(position, dtype=float).copy(),
                velocity=velocity,
                rotation=np.zeros(3, dtype=float),
                spin=spin,
                size=size,
            )
        )
    return fragments


def advance_debris(fragments: list[Debris], cfg: SceneCfg = SCENE_CFG) -> list[Debris]:
    """Move, spin, pull down and fade each fragment; drop the fully faded ones."""

    survivors: list[Debris] = []
    for fragment in fragments:
        fragment.position = fragment.position + fragment.velocity
        fragment.rotation = fragment.rotation + fragment.spin
        fragment.velocity[1] -= cfg.debris_gravity
        fragment.opacity = max(0.0, fragment.opacity - cfg.debris_fade_per_tick)
        if fragment.opacity > _FADE_EPSILON:
            survivors.append(fragment)
    return survivors


def advance_explosions(explosions: list[Explosion]) -> list[Explosion]:
    survivors: list[Explosion] = []
    for explosion in explosions:
        explosion.remaining_ticks -= 1
        if explosion.remaining_ticks > 0:
            survivors.append(explosion)
    return survivors


def impact_zones(
    site: np.ndarray, report: ImpactEffectsReport, cfg: SceneCfg = SCENE_CFG
) -> list[ImpactZone]:
    """Crater, airblast and thermal rings centred on the impact site."""

    position = tuple(float(c) for c in site)
    return [
        ImpactZone(
            "crater",
            position,
            report.crater_diameter * cfg.crater_zone_factor,
            cfg.crater_zone_opacity,
        ),
        ImpactZone(
            "airblast",
            position,
            report.airblast_radius * cfg.airblast_zone_factor,
            cfg.airblast_zone_opacity,
        ),
        ImpactZone(
            "thermal",
            position,
            report.thermal_radius * cfg.thermal_zone_factor,
            cfg.thermal_zone_opacity,
        ),
    ]


__all__ = ["advance_debris", "advance_explosions", "impact_zones", "spawn_debris"]
