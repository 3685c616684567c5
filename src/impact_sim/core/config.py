"""Configuration dataclasses for the impact simulation."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ImpactCfg:
    joules_per_megaton: float = 4.184e15
    crater_coefficient: float = 1.8
    crater_mass_exponent: float = 0.22
    crater_velocity_exponent: float = 0.44
    crater_angle_exponent: float = 0.33
    crater_depth_ratio: float = 5.0
    airblast_exponent: float = 0.33
    airblast_coefficient: float = 2.2
    thermal_exponent: float = 0.41
    thermal_coefficient: float = 1.5
    seismic_exponent: float = 0.33
    seismic_coefficient: float = 5.0
    magnitude_offset: float = 2.9
    population_density: float = 50.0
    threat_thresholds: tuple[float, float, float, float] = (1.0, 10.0, 100.0, 1000.0)
    max_approach_angle: float = 90.0


@dataclass(frozen=True)
class SceneCfg:
    target_radius: float = 4_500.0
    atmosphere_thickness: float = 200.0
    start_distance: float = 20_000.0
    start_altitude_offset: float = 5_000.0
    trajectory_steps: int = 100
    arc_peak_height: float = 2_000.0
    base_duration_ticks: float = 300.0
    tick_interval_ms: float = 16.0
    max_ticks_per_frame: int = 32
    body_radius_scale: float = 0.01
    body_scale_divisor: float = 15.0
    base_emissive: float = 0.2
    thermal_ramp_start: float = 0.7
    thermal_max_emissive: float = 0.8
    deflection_scale: float = 10.0
    max_deflection_angle: float = 45.0
    success_threshold: float = 0.5
    interceptor_spawn_delay_ticks: int = 125
    interceptor_step: float = 150.0
    interceptor_proximity: float = 200.0
    interceptor_launch_factor: float = 1.1
    interceptor_guide_steps: int = 50
    explosion_radius: float = 300.0
    explosion_opacity: float = 0.8
    explosion_lifetime_ticks: int = 31
    debris_count: int = 20
    debris_base_size: float = 10.0
    debris_size_spread: float = 20.0
    debris_speed: float = 200.0
    debris_spin: float = 0.1
    debris_gravity: float = 5.0
    debris_fade_per_tick: float = 0.01
    crater_zone_factor: float = 5.0
    airblast_zone_factor: float = 3.0
    thermal_zone_factor: float = 2.0
    crater_zone_opacity: float = 0.6
    airblast_zone_opacity: float = 0.4
    thermal_zone_opacity: float = 0.2
    miss_step_distance: float = 300.0
    miss_points: int = 100
    max_feed_presets: int = 10

    @property
    def tick_interval_s(self) -> float:
        return self.tick_interval_ms / 1000.0

    @property
    def atmosphere_radius(self) -> float:
        return self.target_radius + self.atmosphere_thickness


@dataclass(frozen=True)
class RenderCfg:
    width: int = 1280
    height: int = 800
    background_color: tuple[int, int, int] = (2, 6, 23)
    target_color: tuple[int, int, int] = (30, 90, 170)
    atmosphere_color: tuple[int, int, int, int] = (100, 160, 255, 60)
    grid_color: tuple[int, int, int, int] = (68, 68, 68, 120)
    grid_offset: float = -5_000.0
    grid_radius: float = 8_000.0
    trajectory_color: tuple[int, int, int, int] = (255, 68, 68, 230)
    deflected_color: tuple[int, int, int, int] = (255, 200, 80, 140)
    miss_color: tuple[int, int, int, int] = (0, 255, 0, 150)
    marker_color: tuple[int, int, int] = (255, 0, 0)
    emissive_color: tuple[int, int, int] = (255, 51, 0)
    explosion_color: tuple[int, int, int] = (255, 102, 0)
    hud_text_color: tuple[int, int, int] = (234, 241, 255)
    hud_muted_color: tuple[int, int, int] = (160, 176, 200)
    hud_warning_color: tuple[int, int, int] = (255, 176, 120)
    hud_panel_color: tuple[int, int, int, int] = (12, 18, 30, int(255 * 0.7))
    threat_colors: tuple[tuple[int, int, int], ...] = (
        (74, 222, 128),
        (250, 204, 21),
        (251, 146, 60),
        (239, 68, 68),
        (168, 85, 247),
    )
    button_color: tuple[int, int, int, int] = (8, 32, 64, int(255 * 0.78))
    button_hover_color: tuple[int, int, int, int] = (18, 52, 94, int(255 * 0.88))
    button_text_color: tuple[int, int, int] = (234, 241, 255)
    button_border_color: tuple[int, int, int, int] = (88, 140, 255, int(255 * 0.55))
    button_radius: int = 14
    camera_distance: float = 15_000.0
    camera_min_distance: float = 8_000.0
    camera_max_distance: float = 40_000.0
    camera_elevation: float = 30.0
    camera_max_elevation: float = 80.0
    camera_auto_rotate: float = 0.05
    camera_drag_sensitivity: float = 0.3
    camera_wheel_step: float = 600.0
    field_of_view_deg: float = 60.0
    body_geometry_divisor: float = 60.0
    marker_pulse_speed: float = 3.0
    num_stars: int = 220
    fps: int = 60
    time_scales: tuple[float, ...] = (0.5, 1.0, 2.0, 4.0)


IMPACT_CFG = ImpactCfg()
SCENE_CFG = SceneCfg()
RENDER_CFG = RenderCfg()


__all__ = ["IMPACT_CFG", "RENDER_CFG", "SCENE_CFG", "ImpactCfg", "RenderCfg", "SceneCfg"]
