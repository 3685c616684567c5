"""Rendering helpers for the impact simulator."""

from .camera import OrbitCamera
from .assets import (
    get_text_surface,
    hex_to_rgb,
    load_font,
)
from .draw import (
    downsample_points,
    draw_body,
    draw_debris,
    draw_explosions,
    draw_impact_marker,
    draw_impact_zones,
    draw_orbit_line,
    draw_path,
    draw_polar_grid,
    draw_projectile,
    draw_starfield,
    draw_target,
    generate_starfield,
)
from .ui import (
    Button,
    ButtonVisualStyle,
    build_text_panel,
    draw_progress_bar,
)

__all__ = [
    "Button",
    "ButtonVisualStyle",
    "OrbitCamera",
    "build_text_panel",
    "downsample_points",
    "draw_body",
    "draw_debris",
    "draw_explosions",
    "draw_impact_marker",
    "draw_impact_zones",
    "draw_orbit_line",
    "draw_path",
    "draw_polar_grid",
    "draw_progress_bar",
    "draw_projectile",
    "draw_starfield",
    "draw_target",
    "generate_starfield",
    "get_text_surface",
    "hex_to_rgb",
    "load_font",
]
