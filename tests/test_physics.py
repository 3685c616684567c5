"""
Tests for the impact-effects calculator.

Tests cover:
1. Mass and kinetic energy of the impactor
2. Threat classification, including values exactly on a threshold
3. Crater, blast and population derivations
4. Parameter validation and unknown compositions
"""

import math

import pytest

from impact_sim.core.config import IMPACT_CFG
from impact_sim.core.errors import InvalidParameterError, SimulationError, UnknownCompositionError
from impact_sim.core.model import ImpactorParameters, ThreatLevel
from impact_sim.core.physics import (
    body_mass,
    clamp,
    classify_threat,
    compute_impact_effects,
    kinetic_energy_megatons,
    validate_parameters,
)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def default_params():
    return ImpactorParameters()


@pytest.fixture
def default_report(default_params):
    return compute_impact_effects(default_params)


# =============================================================================
# ENERGETICS
# =============================================================================

class TestEnergetics:
    def test_body_mass_of_sphere(self):
        assert body_mass(100.0, 3000.0) == pytest.approx(5e8 * math.pi)

    def test_default_mass(self, default_report):
        assert default_report.mass == pytest.approx(1.5707963e9, rel=1e-6)

    def test_default_energy_in_megatons(self, default_report):
        assert default_report.kinetic_energy_mt == pytest.approx(75.086, rel=1e-4)

    def test_energy_uses_megaton_constant(self):
        # 1 kg at 1 km/s is 5e5 J
        assert kinetic_energy_megatons(1.0, 1.0) == pytest.approx(5e5 / IMPACT_CFG.joules_per_megaton)

    def test_iron_is_denser_than_stony(self):
        stony = compute_impact_effects(ImpactorParameters(composition="stony"))
        iron = compute_impact_effects(ImpactorParameters(composition="iron"))
        assert iron.kinetic_energy_mt / stony.kinetic_energy_mt == pytest.approx(7800.0 / 3000.0)

    def test_energy_scales_with_velocity_squared(self):
        slow = compute_impact_effects(ImpactorParameters(velocity=10.0))
        fast = compute_impact_effects(ImpactorParameters(velocity=20.0))
        assert fast.kinetic_energy_mt == pytest.approx(4.0 * slow.kinetic_energy_mt)

    def test_report_is_pure(self, default_params):
        assert compute_impact_effects(default_params) == compute_impact_effects(default_params)


# =============================================================================
# THREAT CLASSIFICATION
# =============================================================================

class TestThreatClassification:
    @pytest.mark.parametrize(
        "energy, expected",
        [
            (0.5, ThreatLevel.LOW),
            (1.0, ThreatLevel.LOW),
            (1.0001, ThreatLevel.MODERATE),
            (10.0, ThreatLevel.MODERATE),
            (50.0, ThreatLevel.HIGH),
            (100.0, ThreatLevel.HIGH),
            (500.0, ThreatLevel.SEVERE),
            (1000.0, ThreatLevel.SEVERE),
            (1000.0001, ThreatLevel.CATASTROPHIC),
        ],
    )
    def test_tiers(self, energy, expected):
        assert classify_threat(energy) is expected

    def test_default_asteroid_is_high(self, default_report):
        assert default_report.threat_level is ThreatLevel.HIGH

    def test_levels_are_ordered(self):
        assert ThreatLevel.LOW < ThreatLevel.MODERATE < ThreatLevel.HIGH
        assert ThreatLevel.SEVERE < ThreatLevel.CATASTROPHIC
        assert ThreatLevel.CATASTROPHIC.label == "CATASTROPHIC"


# =============================================================================
# DERIVED EFFECTS
# =============================================================================

class TestDerivedEffects:
    def test_crater_depth_is_fifth_of_diameter(self, default_report):
        assert default_report.crater_depth == pytest.approx(default_report.crater_diameter / 5.0)

    def test_crater_formula(self, default_params, default_report):
        sin_a = math.sin(math.radians(default_params.approach_angle))
        expected = (
            1.8
            * default_report.mass ** 0.22
            * (default_params.velocity * 1000.0 * sin_a) ** 0.44
            * sin_a ** 0.33
        )
        assert default_report.crater_diameter == pytest.approx(expected)

    def test_blast_radii(self, default_report):
        energy = default_report.kinetic_energy_mt
        assert default_report.airblast_radius == pytest.approx(energy ** 0.33 * 2.2)
        assert default_report.thermal_radius == pytest.approx(energy ** 0.41 * 1.5)
        assert default_report.seismic_radius == pytest.approx(energy ** 0.33 * 5.0)

    def test_magnitude(self, default_report):
        joules = default_report.kinetic_energy_mt * 4.184e15
        assert default_report.magnitude == pytest.approx((2.0 / 3.0) * math.log10(joules) - 2.9)

    def test_population_rounds_half_up(self, default_report):
        area = math.pi * default_report.airblast_radius ** 2
        assert default_report.population_at_risk == math.floor(area * 50.0 + 0.5)
        assert isinstance(default_report.population_at_risk, int)

    def test_steeper_angle_digs_bigger_crater(self):
        shallow = compute_impact_effects(ImpactorParameters(approach_angle=15.0))
        steep = compute_impact_effects(ImpactorParameters(approach_angle=90.0))
        assert steep.crater_diameter > shallow.crater_diameter
        assert steep.kinetic_energy_mt == pytest.approx(shallow.kinetic_energy_mt)

    def test_display_formatting(self, default_report):
        display = default_report.as_display()
        assert display["energy"] == f"{default_report.kinetic_energy_mt:.2f}"
        assert display["threat_level"] == "HIGH"
        assert display["population_at_risk"] == f"{default_report.population_at_risk:,}"


# =============================================================================
# VALIDATION
# =============================================================================

class TestValidation:
    @pytest.mark.parametrize(
        "changes",
        [
            {"diameter": 0.0},
            {"diameter": -10.0},
            {"diameter": float("nan")},
            {"velocity": 0.0},
            {"velocity": float("inf")},
            {"approach_angle": 0.0},
            {"approach_angle": -5.0},
            {"approach_angle": 91.0},
        ],
    )
    def test_out_of_domain_parameters(self, changes):
        params = ImpactorParameters(**changes)
        with pytest.raises(InvalidParameterError):
            compute_impact_effects(params)

    @pytest.mark.parametrize("changes", [{"diameter": 1e120}, {"velocity": 1e200}])
    def test_energy_overflow_is_invalid_parameter(self, changes):
        with pytest.raises(InvalidParameterError):
            compute_impact_effects(ImpactorParameters(**changes))

    def test_invalid_parameter_is_value_error(self):
        with pytest.raises(ValueError):
            validate_parameters(ImpactorParameters(diameter=-1.0))

    def test_vertical_entry_is_allowed(self):
        validate_parameters(ImpactorParameters(approach_angle=90.0))

    def test_unknown_composition(self):
        with pytest.raises(UnknownCompositionError) as excinfo:
            compute_impact_effects(ImpactorParameters(composition="ice"))
        assert isinstance(excinfo.value, SimulationError)
        assert isinstance(excinfo.value, KeyError)
        assert "ice" in str(excinfo.value)

    @pytest.mark.parametrize("value, expected", [(-1.0, 0.0), (0.5, 0.5), (3.0, 1.0)])
    def test_clamp(self, value, expected):
        assert clamp(value, 0.0, 1.0) == expected


# =============================================================================
# MONOTONICITY
# =============================================================================

class TestMonotonicity:
    @pytest.mark.parametrize("field, values", [
        ("diameter", [10.0, 50.0, 100.0, 1000.0, 10_000.0]),
        ("velocity", [11.0, 20.0, 40.0, 72.0]),
    ])
    def test_effects_grow_with_size_and_speed(self, field, values):
        reports = [compute_impact_effects(ImpactorParameters(**{field: value})) for value in values]
        for smaller, larger in zip(reports, reports[1:]):
            assert larger.crater_diameter > smaller.crater_diameter
            assert larger.airblast_radius > smaller.airblast_radius
            assert larger.thermal_radius > smaller.thermal_radius
            assert larger.seismic_radius > smaller.seismic_radius
            assert larger.threat_level >= smaller.threat_level
