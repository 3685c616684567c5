"""Historical impact events offered as preset starting conditions."""
from __future__ import annotations

from dataclasses import dataclass

from impact_sim.core.model import ImpactorParameters


@dataclass(frozen=True)
class Scenario:
    key: str
    name: str
    diameter: float
    velocity: float
    composition: str
    approach_angle: float
    description: str = ""
    hazardous: bool = False

    def parameters(self) -> ImpactorParameters:
        return ImpactorParameters(
            diameter=self.diameter,
            velocity=self.velocity,
            composition=self.composition,
            approach_angle=self.approach_angle,
        )


SCENARIO_DEFINITIONS: tuple[Scenario, ...] = (
    Scenario(
        key="tunguska",
        name="Tunguska Event",
        diameter=60.0,
        velocity=27.0,
        composition="stony",
        approach_angle=30.0,
        description="1908 airburst over Siberia that flattened ~2,000 km² of forest.",
    ),
    Scenario(
        key="chelyabinsk",
        name="Chelyabinsk Meteor",
        diameter=20.0,
        velocity=19.0,
        composition="stony",
        approach_angle=18.0,
        description="2013 shallow-entry superbolide over the Ural region.",
    ),
    Scenario(
        key="chicxulub",
        name="Chicxulub Impactor",
        diameter=10_000.0,
        velocity=20.0,
        composition="carbonaceous",
        approach_angle=60.0,
        description="End-Cretaceous impactor linked to the dinosaur extinction.",
    ),
    Scenario(
        key="apophis",
        name="99942 Apophis",
        diameter=370.0,
        velocity=12.6,
        composition="stony",
        approach_angle=15.0,
        description="Near-Earth asteroid with a close approach in 2029.",
    ),
)

SCENARIOS: dict[str, Scenario] = {scenario.key: scenario for scenario in SCENARIO_DEFINITIONS}
SCENARIO_DISPLAY_ORDER: list[str] = [scenario.key for scenario in SCENARIO_DEFINITIONS]
CUSTOM_SCENARIO_NAME = "Custom Asteroid"


__all__ = [
    "CUSTOM_SCENARIO_NAME",
    "SCENARIO_DEFINITIONS",
    "SCENARIO_DISPLAY_ORDER",
    "SCENARIOS",
    "Scenario",
]
