from __future__ import annotations

import math
import random
from typing import Iterable, Sequence, TYPE_CHECKING

import numpy as np
import pygame

from .assets import Color, mix_rgb
from .camera import OrbitCamera

if TYPE_CHECKING:  # pragma: no cover
    from impact_sim.core.config import RenderCfg
    from impact_sim.core.model import BodyVisual, Debris, Explosion, ImpactZone, Projectile


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def _blit_circle(
    surface: pygame.Surface,
    color: tuple[int, int, int],
    alpha: int,
    center: tuple[int, int],
    radius: int,
) -> None:
    if alpha <= 0 or radius <= 0:
        return
    circle_surface = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
    pygame.draw.circle(circle_surface, (*color, alpha), (radius, radius), radius)
    surface.blit(circle_surface, circle_surface.get_rect(center=center))


def generate_starfield(
    num_stars: int,
    *,
    size: tuple[int, int],
    rng: random.Random | None = None,
) -> list[dict[str, object]]:
    rng = rng or random.Random()
    width, height = size
    stars: list[dict[str, object]] = []
    for _ in range(num_stars):
        x = rng.uniform(0, width)
        y = rng.uniform(0, height)
        radius = rng.choice([1, 1, 1, 2])
        alpha = rng.randint(80, 200)
        base = rng.randint(200, 240)
        color = (
            max(0, base - rng.randint(10, 25)),
            max(0, base - rng.randint(5, 15)),
            base,
        )
        star_surface = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
        pygame.draw.circle(star_surface, (*color, alpha), (radius, radius), radius)
        stars.append({"pos": (x, y), "surface": star_surface, "radius": radius})
    return stars


def draw_starfield(
    surface: pygame.Surface,
    starfield: Iterable[dict[str, object]],
    azimuth: float,
) -> None:
    width, height = surface.get_size()
    offset_x = azimuth / 360.0 * width
    for star in starfield:
        base_x, base_y = star["pos"]  # type: ignore[index]
        star_surface = star["surface"]  # type: ignore[index]
        radius = star["radius"]  # type: ignore[index]
        sx = int((base_x - offset_x) % width)
        surface.blit(star_surface, (sx - radius, int(base_y) - radius))


def draw_target(
    surface: pygame.Surface,
    camera: OrbitCamera,
    radius: float,
    atmosphere_radius: float,
    *,
    render_cfg: RenderCfg,
) -> None:
    origin = np.zeros(3, dtype=float)
    center = camera.world_to_screen(origin)
    if center is None:
        return
    outer = camera.project_radius(origin, atmosphere_radius)
    atmosphere = render_cfg.atmosphere_color
    _blit_circle(surface, atmosphere[:3], atmosphere[3], center, outer)
    pixel_radius = camera.project_radius(origin, radius)
    pygame.draw.circle(surface, render_cfg.target_color, center, pixel_radius)
    # terminator shading toward the lower right
    shade_radius = max(1, int(pixel_radius * 0.92))
    shade_center = (center[0] + int(pixel_radius * 0.18), center[1] + int(pixel_radius * 0.18))
    _blit_circle(surface, (0, 0, 0), 60, shade_center, shade_radius)


def draw_polar_grid(surface: pygame.Surface, camera: OrbitCamera, *, render_cfg: RenderCfg) -> None:
    rings = 8
    spokes = 16
    segments = 64
    y = render_cfg.grid_offset
    max_radius = render_cfg.grid_radius
    for ring in range(1, rings + 1):
        r = max_radius * ring / rings
        angles = np.linspace(0.0, 2.0 * math.pi, segments + 1)
        points = np.stack([r * np.cos(angles), np.full_like(angles, y), r * np.sin(angles)], axis=1)
        draw_path(surface, camera, points, render_cfg.grid_color, 1)
    for spoke in range(spokes):
        theta = 2.0 * math.pi * spoke / spokes
        points = np.array(
            [[0.0, y, 0.0], [max_radius * math.cos(theta), y, max_radius * math.sin(theta)]]
        )
        draw_path(surface, camera, points, render_cfg.grid_color, 1)


def draw_path(
    surface: pygame.Surface,
    camera: OrbitCamera,
    points: np.ndarray | None,
    color: Color,
    width: int,
    *,
    max_points: int = 400,
) -> None:
    if points is None or len(points) < 2:
        return
    projected = camera.project_many(points)
    draw_orbit_line(surface, color, downsample_points(projected, max_points), width)


def draw_orbit_line(
    surface: pygame.Surface,
    color: Color,
    points: Sequence[tuple[int, int]],
    width: int,
) -> None:
    if len(points) < 2:
        return
    if width <= 1:
        pygame.draw.aalines(surface, color, False, points)
    else:
        pygame.draw.lines(surface, color, False, points, width)
        pygame.draw.aalines(surface, color, False, points)


def downsample_points(
    points: Sequence[tuple[int, int]], max_points: int
) -> list[tuple[int, int]]:
    if len(points) <= max_points:
        return list(points)
    step = max(1, math.ceil(len(points) / max_points))
    sampled = list(points[::step])
    if sampled[-1] != points[-1]:
        sampled.append(points[-1])
    return sampled


def draw_impact_marker(
    surface: pygame.Surface,
    camera: OrbitCamera,
    point: np.ndarray,
    elapsed: float,
    *,
    render_cfg: RenderCfg,
) -> None:
    screen = camera.world_to_screen(point)
    if screen is None:
        return
    opacity = 0.4 + math.sin(elapsed * render_cfg.marker_pulse_speed) * 0.3
    radius = max(3, camera.project_radius(point, 100.0))
    _blit_circle(surface, render_cfg.marker_color, int(255 * opacity), screen, radius)


def draw_heating_glow(
    surface: pygame.Surface,
    position: tuple[int, int],
    radius: int,
    intensity: float,
    *,
    color: tuple[int, int, int],
    outer_alpha: int = 90,
    inner_alpha: int = 180,
    radius_factor: float = 2.6,
) -> None:
    if intensity <= 0.0 or radius <= 0:
        return
    intensity = _clamp(intensity, 0.0, 1.0)
    glow_radius = max(2, int(radius * (1.3 + radius_factor * intensity)))
    _blit_circle(surface, color, int(outer_alpha * intensity), position, glow_radius)
    _blit_circle(surface, color, int(inner_alpha * intensity), position, max(1, int(glow_radius * 0.55)))


def draw_body(
    surface: pygame.Surface,
    camera: OrbitCamera,
    body: BodyVisual,
    color: tuple[int, int, int],
    radius: float,
    *,
    render_cfg: RenderCfg,
) -> None:
    if not body.visible:
        return
    screen = camera.world_to_screen(body.position)
    if screen is None:
        return
    pixel_radius = max(3, camera.project_radius(body.position, radius))
    draw_heating_glow(surface, screen, pixel_radius, body.emissive, color=render_cfg.emissive_color)
    # surface glows toward the plasma colour while heating
    pygame.draw.circle(surface, mix_rgb(color, render_cfg.emissive_color, 0.6 * body.emissive), screen, pixel_radius)


def draw_projectile(
    surface: pygame.Surface,
    camera: OrbitCamera,
    projectile: Projectile,
    color: tuple[int, int, int],
) -> None:
    draw_path(surface, camera, projectile.guide_path, (*color, 150), 1)
    screen = camera.world_to_screen(projectile.position)
    nose = camera.world_to_screen(projectile.position + projectile.heading * 150.0)
    if screen is None:
        return
    if nose is not None and nose != screen:
        pygame.draw.line(surface, color, screen, nose, 3)
    pygame.draw.circle(surface, color, screen, 4)
    _blit_circle(surface, (255, 102, 0), 150, screen, 7)


def draw_explosions(
    surface: pygame.Surface,
    camera: OrbitCamera,
    explosions: Iterable[Explosion],
    *,
    render_cfg: RenderCfg,
) -> None:
    for explosion in explosions:
        screen = camera.world_to_screen(explosion.position)
        if screen is None:
            continue
        radius = camera.project_radius(explosion.position, explosion.radius)
        _blit_circle(surface, render_cfg.explosion_color, int(255 * explosion.opacity), screen, radius)


def draw_debris(
    surface: pygame.Surface,
    camera: OrbitCamera,
    fragments: Iterable[Debris],
    color: tuple[int, int, int],
) -> None:
    for fragment in fragments:
        screen = camera.world_to_screen(fragment.position)
        if screen is None:
            continue
        radius = max(1, camera.project_radius(fragment.position, fragment.size))
        _blit_circle(surface, color, int(255 * fragment.opacity), screen, radius)


def _ring_points(site: np.ndarray, radius: float, segments: int = 48) -> np.ndarray:
    normal = site / max(float(np.linalg.norm(site)), 1e-9)
    helper = np.array([0.0, 1.0, 0.0]) if abs(normal[1]) < 0.9 else np.array([1.0, 0.0, 0.0])
    u = np.cross(normal, helper)
    u /= max(float(np.linalg.norm(u)), 1e-9)
    v = np.cross(normal, u)
    angles = np.linspace(0.0, 2.0 * math.pi, segments + 1)
    return site + radius * (np.outer(np.cos(angles), u) + np.outer(np.sin(angles), v))


def draw_impact_zones(
    surface: pygame.Surface,
    camera: OrbitCamera,
    zones: Iterable[ImpactZone],
    colors: Sequence[tuple[int, int, int]],
) -> None:
    # largest first so smaller rings stay visible on top
    ordered = sorted(zip(zones, colors), key=lambda item: item[0].scale, reverse=True)
    for zone, color in ordered:
        site = np.asarray(zone.position, dtype=float)
        projected = camera.project_many(_ring_points(site, zone.scale))
        if len(projected) < 3:
            continue
        layer = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        pygame.draw.polygon(layer, (*color, int(255 * zone.opacity)), projected)
        surface.blit(layer, (0, 0))
