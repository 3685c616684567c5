"""State machine sequencing one impact run from Idle to Impacted or Missed.

The simulation owns a :class:`SimState` and never schedules anything itself:
an external driver calls :meth:`ImpactSimulation.advance` once per tick and
pushes controller changes in between ticks.
"""
from __future__ import annotations

import math
import random
from dataclasses import replace
from typing import Callable

from impact_sim.data.deflection_methods import NO_DEFLECTION_KEY, method as lookup_method
from impact_sim.data.scenarios import Scenario

from . import effects, intercept
from .config import IMPACT_CFG, SCENE_CFG, ImpactCfg, SceneCfg
from .deflection import evaluate, is_feasible, validate_lead_time
from .errors import IllegalTransitionError, InvalidParameterError
from .geometry import (
    distance_from_center,
    impact_point,
    miss_trajectory,
    position_at,
    start_position,
    trajectory,
)
from .logging_utils import RunLogger
from .model import (
    BodyVisual,
    ImpactEffectsReport,
    ImpactorParameters,
    SimState,
    SimulationPhase,
    Snapshot,
    DeflectionState,
)
from .physics import compute_impact_effects


PhaseListener = Callable[[SimulationPhase, SimulationPhase], None]


class ImpactSimulation:
    """Owns the simulation state and applies controller commands and ticks."""

    def __init__(
        self,
        parameters: ImpactorParameters | None = None,
        *,
        method_key: str = NO_DEFLECTION_KEY,
        lead_time: float = 10.0,
        time_scale: float = 1.0,
        rng: random.Random | None = None,
        scene_cfg: SceneCfg = SCENE_CFG,
        impact_cfg: ImpactCfg = IMPACT_CFG,
    ) -> None:
        self._scene_cfg = scene_cfg
        self._impact_cfg = impact_cfg
        self._rng = rng or random.Random()
        self._listeners: list[PhaseListener] = []
        self._logger: RunLogger | None = None

        parameters = parameters or ImpactorParameters()
        report = compute_impact_effects(parameters, impact_cfg)
        validate_lead_time(lead_time)
        deflection = evaluate(lookup_method(method_key), lead_time, cfg=scene_cfg)
        self._validate_time_scale(time_scale)

        angle = parameters.approach_angle
        self._state = SimState(
            parameters=parameters,
            report=report,
            deflection=deflection,
            trajectory=trajectory(angle, cfg=scene_cfg),
            deflected_trajectory=trajectory(angle + deflection.achieved_angle, cfg=scene_cfg),
            impact_point=impact_point(angle, scene_cfg),
            body=BodyVisual(
                position=start_position(angle, scene_cfg),
                scale=self._body_scale(parameters),
                emissive=scene_cfg.base_emissive,
            ),
            time_scale=time_scale,
        )

    # ------------------------------------------------------------------
    # read access
    # ------------------------------------------------------------------
    @property
    def state(self) -> SimState:
        return self._state

    @property
    def phase(self) -> SimulationPhase:
        return self._state.phase

    @property
    def parameters(self) -> ImpactorParameters:
        return self._state.parameters

    @property
    def report(self) -> ImpactEffectsReport:
        return self._state.report

    @property
    def deflection(self) -> DeflectionState:
        return self._state.deflection

    @property
    def duration_ticks(self) -> float:
        return self._scene_cfg.base_duration_ticks / self._state.time_scale

    @property
    def body_radius(self) -> float:
        return self._state.parameters.diameter * self._scene_cfg.body_radius_scale

    def snapshot(self) -> Snapshot:
        s = self._state
        return Snapshot(
            phase=s.phase,
            paused=s.paused,
            progress=s.progress,
            time_scale=s.time_scale,
            body=s.body.copy(),
            projectile=s.projectile.copy() if s.projectile is not None else None,
            explosions=tuple(explosion.copy() for explosion in s.explosions),
            debris=tuple(fragment.copy() for fragment in s.debris),
            zones=tuple(s.zones),
            trajectory=s.trajectory,
            deflected_trajectory=s.deflected_trajectory,
            miss_trajectory=s.miss_trajectory,
            impact_point=s.impact_point.copy(),
            parameters=s.parameters,
            report=s.report,
            impact_report=s.impact_report,
            deflection=s.deflection,
        )

    # ------------------------------------------------------------------
    # observers
    # ------------------------------------------------------------------
    def add_phase_listener(self, listener: PhaseListener) -> None:
        self._listeners.append(listener)

    def remove_phase_listener(self, listener: PhaseListener) -> None:
        self._listeners.remove(listener)

    def attach_logger(self, logger: RunLogger | None) -> None:
        self._logger = logger

    # ------------------------------------------------------------------
    # controller commands
    # ------------------------------------------------------------------
    def set_parameters(self, parameters: ImpactorParameters) -> None:
        """Replace the scenario; a rejected set leaves the previous state intact."""

        report = compute_impact_effects(parameters, self._impact_cfg)
        s = self._state
        s.parameters = parameters
        s.report = report
        self._refresh_geometry()
        s.body.scale = self._body_scale(parameters)
        if s.phase is not SimulationPhase.RUNNING:
            s.body.position = start_position(s.parameters.approach_angle, self._scene_cfg)

    def set_deflection(self, method_key: str, lead_time: float) -> None:
        method = lookup_method(method_key)
        validate_lead_time(lead_time)
        s = self._state
        s.deflection = evaluate(
            method,
            lead_time,
            missile_deployed=s.deflection.missile_deployed,
            cfg=self._scene_cfg,
        )
        s.deflected_trajectory = trajectory(
            s.parameters.approach_angle + s.deflection.achieved_angle, cfg=self._scene_cfg
        )

    def set_time_scale(self, factor: float) -> None:
        self._validate_time_scale(factor)
        s = self._state
        if s.phase is SimulationPhase.RUNNING:
            # keep the flight phase t continuous across the change
            old_duration = self.duration_ticks
            s.frame = s.frame / old_duration * (self._scene_cfg.base_duration_ticks / factor)
        s.time_scale = factor

    def load_preset(self, scenario: Scenario) -> None:
        """Adopt a preset's parameters and return to Idle."""

        self.set_parameters(scenario.parameters())
        self.reset()

    def start(self) -> None:
        s = self._state
        if s.phase is not SimulationPhase.IDLE:
            raise IllegalTransitionError(f"cannot start from {s.phase.value}")
        s.frame = 0.0
        s.elapsed_ticks = 0
        s.progress = 0.0
        s.paused = False
        self._log_event(
            "start",
            {
                "diameter": s.parameters.diameter,
                "velocity": s.parameters.velocity,
                "composition": s.parameters.composition,
                "angle": s.parameters.approach_angle,
                "method": s.deflection.method.key,
                "lead_time": s.deflection.lead_time,
                "time_scale": s.time_scale,
            },
        )
        self._set_phase(SimulationPhase.RUNNING)

    def pause(self) -> None:
        if self._state.phase is SimulationPhase.RUNNING:
            self._state.paused = True

    def resume(self) -> None:
        if self._state.phase is SimulationPhase.RUNNING:
            self._state.paused = False

    def reset(self) -> None:
        s = self._state
        s.paused = False
        s.frame = 0.0
        s.elapsed_ticks = 0
        s.progress = 0.0
        s.applied_deflection = 0.0
        s.projectile = None
        s.explosions.clear()
        s.debris.clear()
        s.zones.clear()
        s.miss_trajectory = None
        s.impact_report = None
        s.deflection = replace(s.deflection, missile_deployed=False)
        self._refresh_geometry()
        s.body = BodyVisual(
            position=start_position(s.parameters.approach_angle, self._scene_cfg),
            scale=self._body_scale(s.parameters),
            emissive=self._scene_cfg.base_emissive,
            visible=True,
        )
        self._log_event("reset", {})
        self._set_phase(SimulationPhase.IDLE)

    # ------------------------------------------------------------------
    # ticking
    # ------------------------------------------------------------------
    def advance(self, ticks: int = 1) -> Snapshot:
        """Run *ticks* simulation ticks and return the resulting snapshot.

        Visual effects age on every tick; the body and the interceptor move
        only while Running and not paused. The phase is re-checked before each
        tick, so ticks left over after a reset or terminal transition are no-ops.
        """

        if ticks < 0:
            raise InvalidParameterError(f"ticks must be >= 0, got {ticks!r}")
        s = self._state
        for _ in range(ticks):
            s.tick += 1
            s.debris = effects.advance_debris(s.debris, self._scene_cfg)
            s.explosions = effects.advance_explosions(s.explosions)
            if s.phase is SimulationPhase.RUNNING and not s.paused:
                self._advance_flight()
        return self.snapshot()

    def _advance_flight(self) -> None:
        s = self._state
        cfg = self._scene_cfg
        duration = self.duration_ticks
        if s.frame >= duration:
            self._miss()
            return

        # interceptor first so a detonation bends this tick's position
        self._advance_interceptor()

        t = s.frame / duration
        s.body.position = position_at(s.effective_angle, t, cfg)
        r = distance_from_center(s.body.position)
        self._log_sample(t, r)

        if r <= cfg.target_radius + self.body_radius:
            s.progress = 100.0
            self._impact()
            return

        s.body.scale = self._body_scale(s.parameters)
        if t > cfg.thermal_ramp_start:
            heat = (t - cfg.thermal_ramp_start) / (1.0 - cfg.thermal_ramp_start)
            s.body.emissive = heat * cfg.thermal_max_emissive

        s.progress = t * 100.0
        s.frame += 1.0
        s.elapsed_ticks += 1

    def _advance_interceptor(self) -> None:
        s = self._state
        cfg = self._scene_cfg
        if s.projectile is None:
            if intercept.should_launch(s.deflection, s.elapsed_ticks, cfg):
                s.projectile = intercept.launch(
                    s.parameters.approach_angle,
                    s.body.position,
                    color=s.deflection.method.color,
                    cfg=cfg,
                )
                s.deflection = replace(s.deflection, missile_deployed=True)
                self._log_event("launch", {"method": s.deflection.method.key})
            return

        separation = intercept.step(s.projectile, s.body.position, cfg)
        if not intercept.in_detonation_range(separation, cfg):
            return
        s.explosions.append(intercept.detonate(s.projectile, cfg))
        s.projectile = None
        if is_feasible(s.deflection.method, s.deflection.lead_time):
            s.applied_deflection = s.deflection.achieved_angle
        self._refresh_geometry()
        self._log_event(
            "detonation",
            {"separation": separation, "deflection": s.applied_deflection},
        )

    def _impact(self) -> None:
        s = self._state
        s.impact_report = s.report
        s.body.visible = False
        s.projectile = None
        s.debris.extend(
            effects.spawn_debris(s.body.position, s.parameters.diameter, self._rng, self._scene_cfg)
        )
        s.zones = effects.impact_zones(s.impact_point, s.report, self._scene_cfg)
        self._log_event(
            "impact",
            {
                "energy_mt": s.report.kinetic_energy_mt,
                "threat": s.report.threat_level.label,
                "deflection": s.applied_deflection,
            },
        )
        self._set_phase(SimulationPhase.IMPACTED)

    def _miss(self) -> None:
        s = self._state
        s.projectile = None
        s.miss_trajectory = miss_trajectory(s.body.position, self._scene_cfg)
        self._log_event("miss", {"deflection": s.applied_deflection})
        self._set_phase(SimulationPhase.MISSED)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _refresh_geometry(self) -> None:
        s = self._state
        cfg = self._scene_cfg
        s.impact_point = impact_point(s.effective_angle, cfg)
        s.trajectory = trajectory(s.effective_angle, cfg=cfg)
        s.deflected_trajectory = trajectory(
            s.parameters.approach_angle + s.deflection.achieved_angle, cfg=cfg
        )

    def _body_scale(self, parameters: ImpactorParameters) -> float:
        return parameters.diameter / self._scene_cfg.body_scale_divisor

    @staticmethod
    def _validate_time_scale(factor: float) -> None:
        if not (math.isfinite(factor) and factor > 0.0):
            raise InvalidParameterError(f"time scale must be > 0, got {factor!r}")

    def _set_phase(self, phase: SimulationPhase) -> None:
        previous = self._state.phase
        self._state.phase = phase
        if previous is not phase:
            for listener in list(self._listeners):
                listener(previous, phase)

    def _log_sample(self, t: float, r: float) -> None:
        if self._logger is None:
            return
        s = self._state
        x, y, z = (float(c) for c in s.body.position)
        self._logger.log_ts(
            [s.tick, t, x, y, z, r, t * 100.0, s.body.emissive, s.applied_deflection]
        )

    def _log_event(self, event_type: str, details: dict) -> None:
        if self._logger is None:
            return
        r = distance_from_center(self._state.body.position)
        self._logger.log_event(self._state.tick, event_type, r, details)


__all__ = ["ImpactSimulation", "PhaseListener"]
