"""Data models for the impact simulation state."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum

import numpy as np


class ThreatLevel(IntEnum):
    """Threat tiers ordered by increasing kinetic energy."""

    LOW = 0
    MODERATE = 1
    HIGH = 2
    SEVERE = 3
    CATASTROPHIC = 4

    @property
    def label(self) -> str:
        return self.name


class SimulationPhase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    IMPACTED = "impacted"
    MISSED = "missed"

    @property
    def is_terminal(self) -> bool:
        return self in (SimulationPhase.IMPACTED, SimulationPhase.MISSED)


@dataclass(frozen=True)
class CompositionProfile:
    """Physical properties of one material class."""

    key: str
    name: str
    density: float
    color: int
    albedo: float


@dataclass(frozen=True)
class ImpactorParameters:
    """Diameter (m), velocity (km/s), composition key and approach angle (deg)."""

    diameter: float = 100.0
    velocity: float = 20.0
    composition: str = "stony"
    approach_angle: float = 45.0


@dataclass(frozen=True)
class ImpactEffectsReport:
    mass: float
    kinetic_energy_mt: float
    crater_diameter: float
    crater_depth: float
    airblast_radius: float
    thermal_radius: float
    seismic_radius: float
    magnitude: float
    population_at_risk: int
    threat_level: ThreatLevel

    def as_display(self) -> dict[str, str]:
        """Formatted values for the HUD; mass is shown in units of 10^12 kg."""

        return {
            "mass": f"{self.mass / 1e12:.2f}",
            "energy": f"{self.kinetic_energy_mt:.2f}",
            "crater_diameter": f"{self.crater_diameter:.1f}",
            "crater_depth": f"{self.crater_depth:.1f}",
            "airblast_radius": f"{self.airblast_radius:.1f}",
            "thermal_radius": f"{self.thermal_radius:.1f}",
            "seismic_radius": f"{self.seismic_radius:.1f}",
            "magnitude": f"{self.magnitude:.1f}",
            "population_at_risk": f"{self.population_at_risk:,}",
            "threat_level": self.threat_level.label,
        }


@dataclass(frozen=True)
class DeflectionMethod:
    key: str
    name: str
    effectiveness: float
    min_lead_time: float
    color: int


@dataclass(frozen=True)
class DeflectionState:
    method: DeflectionMethod
    lead_time: float
    achieved_angle: float
    success: bool
    missile_deployed: bool = False


@dataclass
class BodyVisual:
    """Render-facing state of the incoming body."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=float))
    scale: float = 1.0
    emissive: float = 0.2
    visible: bool = True

    def copy(self) -> "BodyVisual":
        return BodyVisual(
            position=self.position.copy(),
            scale=self.scale,
            emissive=self.emissive,
            visible=self.visible,
        )


@dataclass
class Projectile:
    """The interceptor closing on the body."""

    position: np.ndarray
    target: np.ndarray
    heading: np.ndarray
    guide_path: np.ndarray
    color: int = 0xFFFFFF
    detonated: bool = False

    def copy(self) -> "Projectile":
        return Projectile(
            position=self.position.copy(),
            target=self.target.copy(),
            heading=self.heading.copy(),
            guide_path=self.guide_path,
            color=self.color,
            detonated=self.detonated,
        )


@dataclass
class Explosion:
    position: np.ndarray
    radius: float
    opacity: float
    remaining_ticks: int

    def copy(self) -> "Explosion":
        return Explosion(self.position.copy(), self.radius, self.opacity, self.remaining_ticks)


@dataclass
class Debris:
    position: np.ndarray
    velocity: np.ndarray
    rotation: np.ndarray
    spin: np.ndarray
    size: float
    opacity: float = 1.0

    def copy(self) -> "Debris":
        return Debris(
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            rotation=self.rotation.copy(),
            spin=self.spin.copy(),
            size=self.size,
            opacity=self.opacity,
        )


@dataclass(frozen=True)
class ImpactZone:
    name: str
    position: tuple[float, float, float]
    scale: float
    opacity: float


@dataclass
class SimState:
    """High level simulation state container."""

    parameters: ImpactorParameters
    report: ImpactEffectsReport
    deflection: DeflectionState
    trajectory: np.ndarray
    deflected_trajectory: np.ndarray
    impact_point: np.ndarray
    body: BodyVisual
    phase: SimulationPhase = SimulationPhase.IDLE
    paused: bool = False
    time_scale: float = 1.0
    frame: float = 0.0
    elapsed_ticks: int = 0
    tick: int = 0
    progress: float = 0.0
    applied_deflection: float = 0.0
    projectile: Projectile | None = None
    explosions: list[Explosion] = field(default_factory=list)
    debris: list[Debris] = field(default_factory=list)
    zones: list[ImpactZone] = field(default_factory=list)
    miss_trajectory: np.ndarray | None = None
    impact_report: ImpactEffectsReport | None = None

    @property
    def effective_angle(self) -> float:
        return self.parameters.approach_angle + self.applied_deflection


@dataclass(frozen=True)
class Snapshot:
    """Read-only view handed to the renderer and controller each frame."""

    phase: SimulationPhase
    paused: bool
    progress: float
    time_scale: float
    body: BodyVisual
    projectile: Projectile | None
    explosions: tuple[Explosion, ...]
    debris: tuple[Debris, ...]
    zones: tuple[ImpactZone, ...]
    trajectory: np.ndarray
    deflected_trajectory: np.ndarray
    miss_trajectory: np.ndarray | None
    impact_point: np.ndarray
    parameters: ImpactorParameters
    report: ImpactEffectsReport
    impact_report: ImpactEffectsReport | None
    deflection: DeflectionState


__all__ = [
    "BodyVisual",
    "CompositionProfile",
    "Debris",
    "DeflectionMethod",
    "DeflectionState",
    "Explosion",
    "ImpactEffectsReport",
    "ImpactZone",
    "ImpactorParameters",
    "Projectile",
    "SimState",
    "SimulationPhase",
    "Snapshot",
    "ThreatLevel",
]
