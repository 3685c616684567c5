"""Impact-effects calculator for the asteroid simulation."""
from __future__ import annotations

import math

from impact_sim.data.compositions import profile

from .config import IMPACT_CFG, ImpactCfg
from .errors import InvalidParameterError
from .model import ImpactEffectsReport, ImpactorParameters, ThreatLevel


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* between *lo* and *hi*."""

    return max(lo, min(hi, value))


def _is_positive(value: float) -> bool:
    return math.isfinite(value) and value > 0.0


def validate_parameters(params: ImpactorParameters, cfg: ImpactCfg = IMPACT_CFG) -> None:
    """Raise :class:`InvalidParameterError` unless *params* lies inside the model domain."""

    if not _is_positive(params.diameter):
        raise InvalidParameterError(f"diameter must be > 0 m, got {params.diameter!r}")
    if not _is_positive(params.velocity):
        raise InvalidParameterError(f"velocity must be > 0 km/s, got {params.velocity!r}")
    angle = params.approach_angle
    if not (math.isfinite(angle) and 0.0 < angle <= cfg.max_approach_angle):
        raise InvalidParameterError(
            f"approach angle must lie in (0, {cfg.max_approach_angle:g}] degrees, got {angle!r}"
        )
    profile(params.composition)


def body_mass(diameter: float, density: float) -> float:
    """Mass of a sphere of *diameter* metres and *density* kg/m³."""

    return (4.0 / 3.0) * math.pi * (diameter / 2.0) ** 3 * density


def kinetic_energy_megatons(mass: float, velocity_kms: float, cfg: ImpactCfg = IMPACT_CFG) -> float:
    velocity_ms = velocity_kms * 1000.0
    return 0.5 * mass * velocity_ms**2 / cfg.joules_per_megaton


def classify_threat(energy_mt: float, cfg: ImpactCfg = IMPACT_CFG) -> ThreatLevel:
    """Map kinetic energy to a threat tier; a value exactly on a threshold stays in the lower tier."""

    moderate, high, severe, catastrophic = cfg.threat_thresholds
    if energy_mt > catastrophic:
        return ThreatLevel.CATASTROPHIC
    if energy_mt > severe:
        return ThreatLevel.SEVERE
    if energy_mt > high:
        return ThreatLevel.HIGH
    if energy_mt > moderate:
        return ThreatLevel.MODERATE
    return ThreatLevel.LOW


def compute_impact_effects(
    params: ImpactorParameters, cfg: ImpactCfg = IMPACT_CFG
) -> ImpactEffectsReport:
    """Energetics, crater and blast geometry for *params*.

    Pure function: the same parameters always give the same report. Invalid
    parameters raise :class:`InvalidParameterError` and an unknown composition
    raises :class:`UnknownCompositionError`.
    """

    validate_parameters(params, cfg)
    density = profile(params.composition).density

    try:
        mass = body_mass(params.diameter, density)
        energy_mt = kinetic_energy_megatons(mass, params.velocity, cfg)
    except OverflowError:
        energy_mt = math.inf
    if not math.isfinite(energy_mt):
        raise InvalidParameterError(
            f"diameter {params.diameter!r} m at {params.velocity!r} km/s is beyond the representable energy range"
        )

    sin_angle = math.sin(math.radians(params.approach_angle))
    impact_velocity = params.velocity * 1000.0 * sin_angle
    crater_diameter = (
        cfg.crater_coefficient
        * mass**cfg.crater_mass_exponent
        * impact_velocity**cfg.crater_velocity_exponent
        * sin_angle**cfg.crater_angle_exponent
    )
    crater_depth = crater_diameter / cfg.crater_depth_ratio

    airblast_radius = energy_mt**cfg.airblast_exponent * cfg.airblast_coefficient
    thermal_radius = energy_mt**cfg.thermal_exponent * cfg.thermal_coefficient
    seismic_radius = energy_mt**cfg.seismic_exponent * cfg.seismic_coefficient
    magnitude = (2.0 / 3.0) * math.log10(energy_mt * cfg.joules_per_megaton) - cfg.magnitude_offset

    affected_area = math.pi * airblast_radius**2
    population_at_risk = int(math.floor(affected_area * cfg.population_density + 0.5))

    return ImpactEffectsReport(
        mass=mass,
        kinetic_energy_mt=energy_mt,
        crater_diameter=crater_diameter,
        crater_depth=crater_depth,
        airblast_radius=airblast_radius,
        thermal_radius=thermal_radius,
        seismic_radius=seismic_radius,
        magnitude=magnitude,
        population_at_risk=population_at_risk,
        threat_level=classify_threat(energy_mt, cfg),
    )


__all__ = [
    "IMPACT_CFG",
    "ImpactCfg",
    "body_mass",
    "clamp",
    "classify_threat",
    "compute_impact_effects",
    "kinetic_energy_megatons",
    "validate_parameters",
]
