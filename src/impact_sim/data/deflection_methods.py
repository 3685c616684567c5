"""Catalog of planetary-defense countermeasures."""
from __future__ import annotations

from impact_sim.core.errors import UnknownMethodError
from impact_sim.core.model import DeflectionMethod


METHOD_DEFINITIONS: tuple[DeflectionMethod, ...] = (
    DeflectionMethod(key="none", name="No Deflection", effectiveness=0.0, min_lead_time=0.0, color=0x888888),
    DeflectionMethod(key="kinetic", name="Kinetic Impactor", effectiveness=0.15, min_lead_time=5.0, color=0x00FF00),
    DeflectionMethod(key="nuclear", name="Nuclear Standoff", effectiveness=0.8, min_lead_time=2.0, color=0xFF0000),
    DeflectionMethod(key="gravity", name="Gravity Tractor", effectiveness=0.05, min_lead_time=20.0, color=0x0088FF),
    DeflectionMethod(key="laser", name="Laser Ablation", effectiveness=0.10, min_lead_time=10.0, color=0xFF00FF),
)

METHODS: dict[str, DeflectionMethod] = {method.key: method for method in METHOD_DEFINITIONS}
METHOD_DISPLAY_ORDER: list[str] = [method.key for method in METHOD_DEFINITIONS]
NO_DEFLECTION_KEY = "none"


def method(key: str) -> DeflectionMethod:
    """Return the catalog entry for *key* or raise :class:`UnknownMethodError`."""

    try:
        return METHODS[key]
    except KeyError:
        raise UnknownMethodError(f"unknown deflection method {key!r}") from None


__all__ = [
    "METHOD_DEFINITIONS",
    "METHOD_DISPLAY_ORDER",
    "METHODS",
    "NO_DEFLECTION_KEY",
    "method",
]
