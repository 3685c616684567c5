"""
Tests for the deflection model and the interceptor.

Tests cover:
1. Feasibility, achieved angle and success per countermeasure
2. Lead-time validation
3. Launch rules, pursuit steps and detonation
"""

import numpy as np
import pytest

from impact_sim.core import intercept
from impact_sim.core.deflection import (
    achieved_angle,
    deflection_success,
    evaluate,
    is_feasible,
    validate_lead_time,
)
from impact_sim.core.errors import InvalidParameterError, UnknownMethodError
from impact_sim.core.geometry import impact_point
from impact_sim.core.model import DeflectionMethod, Projectile
from impact_sim.data.deflection_methods import METHOD_DISPLAY_ORDER, METHODS, method


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def kinetic():
    return METHODS["kinetic"]


@pytest.fixture
def weak_method():
    return DeflectionMethod(key="weak", name="Weak", effectiveness=0.01, min_lead_time=1.0, color=0xFFFFFF)


def make_projectile(position, target):
    position = np.asarray(position, dtype=float)
    target = np.asarray(target, dtype=float)
    return Projectile(
        position=position,
        target=target,
        heading=np.zeros(3),
        guide_path=np.stack([position, target]),
    )


# =============================================================================
# CATALOG
# =============================================================================

class TestCatalog:
    def test_all_methods_present(self):
        assert METHOD_DISPLAY_ORDER == ["none", "kinetic", "nuclear", "gravity", "laser"]

    @pytest.mark.parametrize(
        "key, effectiveness, min_lead",
        [
            ("none", 0.0, 0.0),
            ("kinetic", 0.15, 5.0),
            ("nuclear", 0.8, 2.0),
            ("gravity", 0.05, 20.0),
            ("laser", 0.10, 10.0),
        ],
    )
    def test_method_values(self, key, effectiveness, min_lead):
        entry = method(key)
        assert entry.effectiveness == effectiveness
        assert entry.min_lead_time == min_lead

    def test_unknown_method(self):
        with pytest.raises(UnknownMethodError) as excinfo:
            method("rail_gun")
        assert isinstance(excinfo.value, KeyError)
        assert "rail_gun" in str(excinfo.value)


# =============================================================================
# DEFLECTION MODEL
# =============================================================================

class TestDeflectionModel:
    @pytest.mark.parametrize(
        "key, lead, angle, success",
        [
            ("kinetic", 10.0, 15.0, True),
            ("kinetic", 5.0, 7.5, True),
            ("kinetic", 4.0, 0.0, False),
            ("nuclear", 10.0, 45.0, True),
            ("nuclear", 2.0, 16.0, True),
            ("nuclear", 1.0, 0.0, False),
            ("gravity", 20.0, 10.0, True),
            ("gravity", 19.0, 0.0, False),
            ("laser", 10.0, 10.0, True),
            ("none", 10.0, 0.0, False),
        ],
    )
    def test_outcomes(self, key, lead, angle, success):
        entry = METHODS[key]
        assert achieved_angle(entry, lead) == pytest.approx(angle)
        assert deflection_success(entry, lead) is success

    def test_minimum_lead_time_is_inclusive(self, kinetic):
        assert is_feasible(kinetic, 5.0)
        assert not is_feasible(kinetic, 4.999)

    def test_feasible_but_insufficient(self, weak_method):
        assert achieved_angle(weak_method, 10.0) == pytest.approx(1.0)
        assert deflection_success(weak_method, 10.0) is False

    def test_angle_is_capped(self):
        assert achieved_angle(METHODS["nuclear"], 50.0) == 45.0

    @pytest.mark.parametrize("lead", [-1.0, float("nan"), float("inf")])
    def test_invalid_lead_time(self, kinetic, lead):
        with pytest.raises(InvalidParameterError):
            validate_lead_time(lead)
        with pytest.raises(InvalidParameterError):
            achieved_angle(kinetic, lead)

    def test_evaluate(self, kinetic):
        state = evaluate(kinetic, 10.0, missile_deployed=True)
        assert state.method is kinetic
        assert state.lead_time == 10.0
        assert state.achieved_angle == pytest.approx(15.0)
        assert state.success is True
        assert state.missile_deployed is True


# =============================================================================
# INTERCEPTOR
# =============================================================================

class TestInterceptor:
    def test_no_interception_without_method(self):
        assert not intercept.interception_planned(evaluate(METHODS["none"], 30.0))

    def test_no_interception_when_infeasible(self, kinetic):
        assert not intercept.interception_planned(evaluate(kinetic, 2.0))

    def test_launch_waits_for_spawn_delay(self, kinetic):
        deflection = evaluate(kinetic, 10.0)
        assert not intercept.should_launch(deflection, 124)
        assert intercept.should_launch(deflection, 125)

    def test_launches_only_once(self, kinetic):
        deflection = evaluate(kinetic, 10.0, missile_deployed=True)
        assert not intercept.should_launch(deflection, 500)

    def test_launch_geometry(self):
        body = np.array([-10000.0, 5000.0, -10000.0])
        projectile = intercept.launch(45.0, body, color=0x00FF00)
        assert projectile.position == pytest.approx(impact_point(45.0) * 1.1)
        assert projectile.target == pytest.approx(body)
        assert np.linalg.norm(projectile.heading) == pytest.approx(1.0)
        assert projectile.guide_path.shape == (51, 3)
        assert projectile.color == 0x00FF00

    def test_step_moves_fixed_distance(self):
        projectile = make_projectile([0.0, 0.0, 0.0], [1000.0, 0.0, 0.0])
        separation = intercept.step(projectile, np.array([1000.0, 0.0, 0.0]))
        assert projectile.position == pytest.approx(np.array([150.0, 0.0, 0.0]))
        assert separation == pytest.approx(850.0)
        assert projectile.heading == pytest.approx(np.array([1.0, 0.0, 0.0]))

    def test_step_retargets_moving_body(self):
        projectile = make_projectile([0.0, 0.0, 0.0], [1000.0, 0.0, 0.0])
        intercept.step(projectile, np.array([0.0, 1000.0, 0.0]))
        assert projectile.position == pytest.approx(np.array([0.0, 150.0, 0.0]))
        assert projectile.target == pytest.approx(np.array([0.0, 1000.0, 0.0]))

    def test_detonation_range_is_exclusive(self):
        assert intercept.in_detonation_range(199.9)
        assert not intercept.in_detonation_range(200.0)

    def test_detonate(self):
        projectile = make_projectile([1.0, 2.0, 3.0], [0.0, 0.0, 0.0])
        explosion = intercept.detonate(projectile)
        assert projectile.detonated
        assert explosion.position == pytest.approx(np.array([1.0, 2.0, 3.0]))
        assert explosion.radius == 300.0
        assert explosion.opacity == pytest.approx(0.8)
        assert explosion.remaining_ticks == 31


class TestFeasibleAngles:
    @pytest.mark.parametrize("key", ["kinetic", "nuclear", "gravity", "laser"])
    def test_positive_from_minimum_lead_time(self, key):
        entry = METHODS[key]
        for lead in (entry.min_lead_time, entry.min_lead_time + 5.0, 100.0):
            assert 0.0 < achieved_angle(entry, lead) <= 45.0
        assert achieved_angle(entry, entry.min_lead_time - 0.5) == 0.0
