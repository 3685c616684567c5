# src/impact_pygame.py
"""
Asteroid Impact Simulator - interactive viewer
===============================================

Drives :class:`impact_sim.core.simulation.ImpactSimulation` from a pygame
window: the window is the controller (keys and buttons push parameter
changes) and the renderer (it draws the snapshot returned each frame).

Keys:
    SPACE      start / pause / resume        R        reset
    LEFT/RIGHT approach angle -/+ 5 deg      UP/DOWN  velocity +/- 1 km/s
    [ / ]      diameter /1.25, *1.25         C        cycle composition
    D          cycle deflection method       , / .    lead time -/+ 1 year
    1-4        historical presets            N        next near-Earth object
    T          cycle time scale              L        toggle run log
    ESC        quit
"""

import argparse
import json
import random
import sys
from dataclasses import replace
from pathlib import Path

import pygame
from dotenv import load_dotenv

from impact_sim.core.config import RENDER_CFG, SCENE_CFG
from impact_sim.core.errors import SimulationError
from impact_sim.core.logging_utils import RunLogger
from impact_sim.core.model import SimulationPhase, Snapshot
from impact_sim.core.physics import clamp
from impact_sim.core.simulation import ImpactSimulation
from impact_sim.core.timekeeping import FrameTimer, TickScheduler
from impact_sim.data.compositions import COMPOSITION_DISPLAY_ORDER, profile
from impact_sim.data.deflection_methods import METHOD_DISPLAY_ORDER
from impact_sim.data.neo_feed import fetch_neo_presets
from impact_sim.data.scenarios import (
    CUSTOM_SCENARIO_NAME,
    SCENARIO_DISPLAY_ORDER,
    SCENARIOS,
    Scenario,
)
from impact_sim.render import (
    Button,
    ButtonVisualStyle,
    OrbitCamera,
    build_text_panel,
    draw_body,
    draw_debris,
    draw_explosions,
    draw_impact_marker,
    draw_impact_zones,
    draw_path,
    draw_polar_grid,
    draw_progress_bar,
    draw_projectile,
    draw_starfield,
    draw_target,
    generate_starfield,
    hex_to_rgb,
    load_font,
)


SETTINGS_DIR = Path.home() / ".impact_sim"
SETTINGS_PATH = SETTINGS_DIR / "settings.json"

ZONE_COLORS = ((255, 0, 0), (255, 102, 0), (255, 170, 0))
MIN_DIAMETER = 10.0
MAX_DIAMETER = 10_000.0
MIN_VELOCITY = 11.0
MAX_VELOCITY = 72.0
MIN_ANGLE = 5.0
MAX_ANGLE = 90.0
MAX_LEAD_TIME = 50.0


def load_user_settings() -> dict[str, object]:
    """Return persisted runtime settings if the JSON file is readable."""

    try:
        with SETTINGS_PATH.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def save_user_settings(settings: dict[str, object]) -> None:
    """Persist runtime settings, ignoring filesystem errors."""

    try:
        SETTINGS_DIR.mkdir(parents=True, exist_ok=True)
        with SETTINGS_PATH.open("w", encoding="utf-8") as fh:
            json.dump(settings, fh, indent=2, sort_keys=True)
    except OSError:
        # the viewer keeps shutting down even if settings cannot be written
        pass


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive asteroid impact simulator.")
    parser.add_argument("--log", action="store_true", help="trace each run to data/runs/")
    parser.add_argument("--log-dir", type=Path, default=Path("data/runs"))
    parser.add_argument("--seed", type=int, default=None, help="seed for debris randomness")
    parser.add_argument("--no-feed", action="store_true", help="skip the near-Earth-object feed")
    parser.add_argument("--preset", choices=SCENARIO_DISPLAY_ORDER, default=None)
    return parser.parse_args(argv)


class Viewer:
    """Controller + renderer around one :class:`ImpactSimulation`."""

    def __init__(self, args: argparse.Namespace, settings: dict[str, object]) -> None:
        self.args = args
        self.settings = settings
        self.render_cfg = RENDER_CFG
        self.scene_cfg = SCENE_CFG

        time_scale = settings.get("time_scale", 1.0)
        if not isinstance(time_scale, (int, float)) or time_scale not in RENDER_CFG.time_scales:
            time_scale = 1.0
        method_key = settings.get("method", "none")
        if method_key not in METHOD_DISPLAY_ORDER:
            method_key = "none"
        lead_time = settings.get("lead_time", 10.0)
        if not isinstance(lead_time, (int, float)) or not 0.0 <= lead_time <= MAX_LEAD_TIME:
            lead_time = 10.0

        self.sim = ImpactSimulation(
            method_key=str(method_key),
            lead_time=float(lead_time),
            time_scale=float(time_scale),
            rng=random.Random(args.seed),
        )
        self.sim.add_phase_listener(self.on_phase_change)
        self.scheduler = TickScheduler(
            interval=SCENE_CFG.tick_interval_s,
            max_ticks=SCENE_CFG.max_ticks_per_frame,
            time_scale=float(time_scale),
        )
        self.logging_enabled = bool(args.log)
        self.logger: RunLogger | None = None
        self.scenario_name = CUSTOM_SCENARIO_NAME
        self.neo_presets: list[Scenario] = []
        self.neo_index = -1
        self.status = "SPACE to launch"
        self.elapsed = 0.0
        self.running = True

        preset_key = args.preset or settings.get("preset")
        if isinstance(preset_key, str) and preset_key in SCENARIOS:
            self.load_preset(SCENARIOS[preset_key])

    # ------------------------------------------------------------------
    # controller actions
    # ------------------------------------------------------------------
    def guarded(self, action, *args) -> None:
        try:
            action(*args)
        except SimulationError as exc:
            self.status = str(exc)

    def toggle_play(self) -> None:
        state = self.sim.state
        if state.phase is SimulationPhase.IDLE:
            self.open_logger()
            self.sim.start()
        elif state.phase is SimulationPhase.RUNNING:
            if state.paused:
                self.sim.resume()
                self.status = "Running"
            else:
                self.scheduler.cancel()
                self.sim.pause()
                self.status = "Paused"
        else:
            self.status = "Press R to reset"

    def reset(self) -> None:
        self.scheduler.cancel()
        self.sim.reset()
        self.close_logger()

    def load_preset(self, scenario: Scenario) -> None:
        self.scheduler.cancel()
        self.sim.load_preset(scenario)
        self.close_logger()
        self.scenario_name = scenario.name
        if scenario.key in SCENARIOS:
            self.settings["preset"] = scenario.key

    def adjust_parameters(self, **changes: float | str) -> None:
        params = replace(self.sim.parameters, **changes)
        self.sim.set_parameters(params)
        self.scenario_name = CUSTOM_SCENARIO_NAME
        self.settings.pop("preset", None)

    def cycle_composition(self) -> None:
        keys = COMPOSITION_DISPLAY_ORDER
        current = keys.index(self.sim.parameters.composition)
        self.adjust_parameters(composition=keys[(current + 1) % len(keys)])

    def cycle_method(self) -> None:
        deflection = self.sim.deflection
        keys = METHOD_DISPLAY_ORDER
        next_key = keys[(keys.index(deflection.method.key) + 1) % len(keys)]
        self.sim.set_deflection(next_key, deflection.lead_time)
        self.settings["method"] = next_key

    def adjust_lead_time(self, delta: float) -> None:
        deflection = self.sim.deflection
        lead_time = clamp(deflection.lead_time + delta, 0.0, MAX_LEAD_TIME)
        self.sim.set_deflection(deflection.method.key, lead_time)
        self.settings["lead_time"] = lead_time

    def cycle_time_scale(self) -> None:
        scales = self.render_cfg.time_scales
        current = self.sim.state.time_scale
        index = scales.index(current) if current in scales else 0
        factor = scales[(index + 1) % len(scales)]
        self.sim.set_time_scale(factor)
        self.scheduler.set_time_scale(factor)
        self.settings["time_scale"] = factor

    def next_neo(self) -> None:
        if not self.neo_presets:
            self.status = "No near-Earth objects available"
            return
        self.neo_index = (self.neo_index + 1) % len(self.neo_presets)
        self.load_preset(self.neo_presets[self.neo_index])

    def toggle_logging(self) -> None:
        self.logging_enabled = not self.logging_enabled
        self.status = f"Run log {'on' if self.logging_enabled else 'off'}"

    # ------------------------------------------------------------------
    # run logging
    # ------------------------------------------------------------------
    def open_logger(self) -> None:
        self.close_logger()
        if not self.logging_enabled:
            return
        self.logger = RunLogger(self.args.log_dir)
        params = self.sim.parameters
        deflection = self.sim.deflection
        self.logger.write_meta(
            {
                "scenario": self.scenario_name,
                "diameter_m": params.diameter,
                "velocity_kms": params.velocity,
                "composition": params.composition,
                "approach_angle_deg": params.approach_angle,
                "method": deflection.method.key,
                "lead_time_years": deflection.lead_time,
                "achieved_angle_deg": deflection.achieved_angle,
                "deflection_success": deflection.success,
                "time_scale": self.sim.state.time_scale,
                "target_radius": self.scene_cfg.target_radius,
                "energy_mt": self.sim.report.kinetic_energy_mt,
                "threat_level": self.sim.report.threat_level.label,
            }
        )
        self.sim.attach_logger(self.logger)

    def close_logger(self) -> None:
        if self.logger is not None:
            self.sim.attach_logger(None)
            self.logger.close()
            print(f"Run log saved to {self.logger.run_dir}")
            self.logger = None

    def on_phase_change(self, old: SimulationPhase, new: SimulationPhase) -> None:
        if new is SimulationPhase.RUNNING:
            self.status = "Running"
        elif new is SimulationPhase.IMPACTED:
            self.scheduler.cancel()
            report = self.sim.report
            self.status = f"IMPACT - {report.kinetic_energy_mt:,.2f} Mt, {report.threat_level.label}"
            print(self.status)
            self.close_logger()
        elif new is SimulationPhase.MISSED:
            self.scheduler.cancel()
            self.status = "MISS - the asteroid passes by"
            print(self.status)
            self.close_logger()
        elif new is SimulationPhase.IDLE:
            self.status = "SPACE to launch"

    # ------------------------------------------------------------------
    # events
    # ------------------------------------------------------------------
    def handle_key(self, key: int) -> None:
        params = self.sim.parameters
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_SPACE:
            self.guarded(self.toggle_play)
        elif key == pygame.K_r:
            self.reset()
        elif key == pygame.K_LEFT:
            self.guarded(self.adjust_parameters, approach_angle=clamp(params.approach_angle - 5.0, MIN_ANGLE, MAX_ANGLE))
        elif key == pygame.K_RIGHT:
            self.guarded(self.adjust_parameters, approach_angle=clamp(params.approach_angle + 5.0, MIN_ANGLE, MAX_ANGLE))
        elif key == pygame.K_UP:
            self.guarded(self.adjust_parameters, velocity=clamp(params.velocity + 1.0, MIN_VELOCITY, MAX_VELOCITY))
        elif key == pygame.K_DOWN:
            self.guarded(self.adjust_parameters, velocity=clamp(params.velocity - 1.0, MIN_VELOCITY, MAX_VELOCITY))
        elif key == pygame.K_RIGHTBRACKET:
            self.guarded(self.adjust_parameters, diameter=round(clamp(params.diameter * 1.25, MIN_DIAMETER, MAX_DIAMETER)))
        elif key == pygame.K_LEFTBRACKET:
            self.guarded(self.adjust_parameters, diameter=round(clamp(params.diameter / 1.25, MIN_DIAMETER, MAX_DIAMETER)))
        elif key == pygame.K_c:
            self.guarded(self.cycle_composition)
        elif key == pygame.K_d:
            self.guarded(self.cycle_method)
        elif key == pygame.K_COMMA:
            self.guarded(self.adjust_lead_time, -1.0)
        elif key == pygame.K_PERIOD:
            self.guarded(self.adjust_lead_time, 1.0)
        elif key == pygame.K_t:
            self.guarded(self.cycle_time_scale)
        elif key == pygame.K_n:
            self.next_neo()
        elif key == pygame.K_l:
            self.toggle_logging()
        elif pygame.K_1 <= key <= pygame.K_4:
            index = key - pygame.K_1
            if index < len(SCENARIO_DISPLAY_ORDER):
                self.load_preset(SCENARIOS[SCENARIO_DISPLAY_ORDER[index]])

    # ------------------------------------------------------------------
    # drawing
    # ------------------------------------------------------------------
    def draw_scene(
        self,
        screen: pygame.Surface,
        overlay: pygame.Surface,
        camera: OrbitCamera,
        snapshot: Snapshot,
    ) -> None:
        cfg = self.render_cfg
        overlay.fill((0, 0, 0, 0))
        draw_polar_grid(overlay, camera, render_cfg=cfg)
        draw_target(
            screen,
            camera,
            self.scene_cfg.target_radius,
            self.scene_cfg.atmosphere_radius,
            render_cfg=cfg,
        )
        draw_impact_zones(screen, camera, snapshot.zones, ZONE_COLORS)
        if snapshot.phase is not SimulationPhase.MISSED:
            draw_path(overlay, camera, snapshot.trajectory, cfg.trajectory_color, 2)
        deflection = snapshot.deflection
        if deflection.achieved_angle > 0.0 and snapshot.phase in (
            SimulationPhase.IDLE,
            SimulationPhase.RUNNING,
        ):
            draw_path(overlay, camera, snapshot.deflected_trajectory, cfg.deflected_color, 1)
        draw_path(overlay, camera, snapshot.miss_trajectory, cfg.miss_color, 2)
        screen.blit(overlay, (0, 0))

        draw_impact_marker(screen, camera, snapshot.impact_point, self.elapsed, render_cfg=cfg)
        composition_rgb = hex_to_rgb(profile(snapshot.parameters.composition).color)
        body_radius = snapshot.parameters.diameter / cfg.body_geometry_divisor * snapshot.body.scale
        draw_body(screen, camera, snapshot.body, composition_rgb, body_radius, render_cfg=cfg)
        if snapshot.projectile is not None:
            draw_projectile(screen, camera, snapshot.projectile, hex_to_rgb(snapshot.projectile.color))
        draw_explosions(screen, camera, snapshot.explosions, render_cfg=cfg)
        draw_debris(screen, camera, snapshot.debris, composition_rgb)

    def draw_hud(self, screen: pygame.Surface, font: pygame.font.Font, snapshot: Snapshot) -> None:
        cfg = self.render_cfg
        text = cfg.hud_text_color
        muted = cfg.hud_muted_color
        params = snapshot.parameters
        report = snapshot.impact_report or snapshot.report
        display = report.as_display()
        deflection = snapshot.deflection
        threat_color = cfg.threat_colors[int(report.threat_level)]

        param_lines = [
            (self.scenario_name, text),
            (f"Diameter      {params.diameter:,.0f} m", text),
            (f"Velocity      {params.velocity:.1f} km/s", text),
            (f"Composition   {profile(params.composition).name}", text),
            (f"Approach      {params.approach_angle:.0f} deg", text),
            (f"Time scale    {snapshot.time_scale:g}x", muted),
        ]
        screen.blit(
            build_text_panel(
                font,
                param_lines,
                background_color=cfg.hud_panel_color,
                title=("Scenario", muted),
                min_width=260,
            ),
            (16, 16),
        )

        report_lines = [
            (f"Threat        {display['threat_level']}", threat_color),
            (f"Energy        {display['energy']} Mt", text),
            (f"Mass          {display['mass']} x10^12 kg", text),
            (f"Crater        {display['crater_diameter']} m / {display['crater_depth']} m deep", text),
            (f"Airblast      {display['airblast_radius']} km", text),
            (f"Thermal       {display['thermal_radius']} km", text),
            (f"Seismic       {display['seismic_radius']} km, M{display['magnitude']}", text),
            (f"At risk       {display['population_at_risk']}", text),
        ]
        report_panel = build_text_panel(
            font, report_lines, background_color=cfg.hud_panel_color, title=("Impact assessment", muted)
        )
        screen.blit(report_panel, (screen.get_width() - report_panel.get_width() - 16, 16))

        feasible_color = cfg.threat_colors[0] if deflection.success else cfg.hud_warning_color
        deflection_lines = [
            (f"Defense       {deflection.method.name}", text),
            (f"Lead time     {deflection.lead_time:.0f} yr (min {deflection.method.min_lead_time:.0f})", text),
            (f"Deflection    {deflection.achieved_angle:.1f} deg", text),
            (f"Outcome       {'likely success' if deflection.success else 'insufficient'}", feasible_color),
            (f"Interceptor   {'deployed' if deflection.missile_deployed else 'standby'}", muted),
        ]
        deflection_panel = build_text_panel(
            font, deflection_lines, background_color=cfg.hud_panel_color, title=("Planetary defense", muted)
        )
        screen.blit(deflection_panel, (16, screen.get_height() - deflection_panel.get_height() - 16))

        status_lines = [
            (f"{snapshot.phase.value.upper()}  {snapshot.progress:5.1f}%", text),
            (self.status, cfg.hud_warning_color if snapshot.phase.is_terminal else muted),
        ]
        status_panel = build_text_panel(font, status_lines, background_color=cfg.hud_panel_color)
        screen.blit(
            status_panel,
            (
                screen.get_width() - status_panel.get_width() - 16,
                screen.get_height() - status_panel.get_height() - 76,
            ),
        )
        draw_progress_bar(
            screen,
            (screen.get_width() - status_panel.get_width() - 16, screen.get_height() - 70, status_panel.get_width(), 5),
            snapshot.progress / 100.0,
            fill_color=threat_color,
        )

    # ------------------------------------------------------------------
    # main loop
    # ------------------------------------------------------------------
    def run(self) -> None:
        cfg = self.render_cfg
        pygame.init()
        pygame.display.set_caption("Asteroid Impact Simulator")
        screen = pygame.display.set_mode((cfg.width, cfg.height), pygame.RESIZABLE)
        overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        font = load_font(["consolas", "dejavusansmono", "couriernew"], 16)
        button_font = load_font(["consolas", "dejavusansmono", "couriernew"], 18, bold=True)
        clock = pygame.time.Clock()

        camera = OrbitCamera(
            screen.get_size(),
            cfg.camera_distance,
            min_distance=cfg.camera_min_distance,
            max_distance=cfg.camera_max_distance,
            elevation=cfg.camera_elevation,
            max_elevation=cfg.camera_max_elevation,
            fov_deg=cfg.field_of_view_deg,
        )
        starfield = generate_starfield(cfg.num_stars, size=screen.get_size(), rng=random.Random(7))

        style = ButtonVisualStyle(
            base_color=cfg.button_color,
            hover_color=cfg.button_hover_color,
            text_color=cfg.button_text_color,
            radius=cfg.button_radius,
            border_color=cfg.button_border_color,
            border_width=1,
        )

        def play_label() -> str:
            state = self.sim.state
            if state.phase is SimulationPhase.RUNNING and not state.paused:
                return "Pause"
            return "Launch" if state.phase is SimulationPhase.IDLE else "Resume"

        def layout_buttons() -> list[Button]:
            width, height = screen.get_size()
            y = height - 60
            return [
                Button(
                    (width - 316, y, 140, 44),
                    play_label,
                    lambda: self.guarded(self.toggle_play),
                    style=style,
                    enabled=lambda: not self.sim.state.phase.is_terminal,
                ),
                Button((width - 166, y, 150, 44), "Reset", self.reset, style=style),
            ]

        buttons = layout_buttons()

        if not self.args.no_feed:
            self.neo_presets = fetch_neo_presets()
            if self.neo_presets:
                print(f"Loaded {len(self.neo_presets)} near-Earth objects from the feed")

        frame_timer = FrameTimer()
        snapshot = self.sim.snapshot()
        while self.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.VIDEORESIZE:
                    screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                    overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
                    camera.update_size(screen.get_size())
                    starfield = generate_starfield(cfg.num_stars, size=screen.get_size(), rng=random.Random(7))
                    buttons = layout_buttons()
                elif event.type == pygame.KEYDOWN:
                    self.handle_key(event.key)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    if not any(button.handle_event(event) for button in buttons):
                        camera.begin_drag(event.pos)
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                    camera.end_drag()
                elif event.type == pygame.MOUSEMOTION and camera.dragging:
                    camera.drag(event.pos, cfg.camera_drag_sensitivity)
                elif event.type == pygame.MOUSEWHEEL:
                    camera.zoom_by(-event.y * cfg.camera_wheel_step)

            frame_dt = frame_timer.tick()
            self.elapsed += frame_dt
            self.scheduler.accrue(frame_dt)
            ticks = self.scheduler.consume()
            snapshot = self.sim.advance(ticks) if ticks else self.sim.snapshot()

            if not camera.dragging:
                camera.rotate(cfg.camera_auto_rotate)
            camera.update()

            screen.fill(cfg.background_color)
            draw_starfield(screen, starfield, camera.azimuth)
            self.draw_scene(screen, overlay, camera, snapshot)
            self.draw_hud(screen, font, snapshot)
            mouse_pos = pygame.mouse.get_pos()
            for button in buttons:
                button.draw(screen, button_font, mouse_pos)

            pygame.display.flip()
            clock.tick(cfg.fps)

        self.close_logger()
        save_user_settings(self.settings)
        pygame.quit()


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    viewer = Viewer(args, load_user_settings())
    viewer.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
