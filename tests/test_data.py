"""
Tests for the composition table and the historical presets.
"""

import pytest

from impact_sim.core.errors import UnknownCompositionError
from impact_sim.core.model import ImpactorParameters, ThreatLevel
from impact_sim.core.physics import compute_impact_effects
from impact_sim.data.compositions import COMPOSITION_DISPLAY_ORDER, DEFAULT_COMPOSITION_KEY, profile
from impact_sim.data.scenarios import SCENARIO_DISPLAY_ORDER, SCENARIOS


class TestCompositions:
    @pytest.mark.parametrize(
        "key, density, color",
        [
            ("stony", 3000.0, 0x8B7355),
            ("iron", 7800.0, 0x696969),
            ("carbonaceous", 2000.0, 0x2F1B0C),
        ],
    )
    def test_profiles(self, key, density, color):
        entry = profile(key)
        assert entry.density == density
        assert entry.color == color

    def test_order_and_default(self):
        assert COMPOSITION_DISPLAY_ORDER == ["stony", "iron", "carbonaceous"]
        assert DEFAULT_COMPOSITION_KEY == "stony"

    def test_unknown_key(self):
        with pytest.raises(UnknownCompositionError):
            profile("ice")


class TestScenarios:
    def test_display_order(self):
        assert SCENARIO_DISPLAY_ORDER == ["tunguska", "chelyabinsk", "chicxulub", "apophis"]

    @pytest.mark.parametrize(
        "key, diameter, velocity, composition, angle",
        [
            ("tunguska", 60.0, 27.0, "stony", 30.0),
            ("chelyabinsk", 20.0, 19.0, "stony", 18.0),
            ("chicxulub", 10_000.0, 20.0, "carbonaceous", 60.0),
            ("apophis", 370.0, 12.6, "stony", 15.0),
        ],
    )
    def test_preset_parameters(self, key, diameter, velocity, composition, angle):
        assert SCENARIOS[key].parameters() == ImpactorParameters(
            diameter=diameter, velocity=velocity, composition=composition, approach_angle=angle
        )

    @pytest.mark.parametrize(
        "key, level",
        [
            ("chelyabinsk", ThreatLevel.LOW),
            ("tunguska", ThreatLevel.HIGH),
            ("apophis", ThreatLevel.CATASTROPHIC),
            ("chicxulub", ThreatLevel.CATASTROPHIC),
        ],
    )
    def test_preset_threat_levels(self, key, level):
        assert compute_impact_effects(SCENARIOS[key].parameters()).threat_level is level
