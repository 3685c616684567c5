"""Physical properties per asteroid material class."""
from __future__ import annotations

from impact_sim.core.errors import UnknownCompositionError
from impact_sim.core.model import CompositionProfile


COMPOSITION_DEFINITIONS: tuple[CompositionProfile, ...] = (
    CompositionProfile(key="stony", name="Stony", density=3000.0, color=0x8B7355, albedo=0.20),
    CompositionProfile(key="iron", name="Iron", density=7800.0, color=0x696969, albedo=0.15),
    CompositionProfile(
        key="carbonaceous", name="Carbonaceous", density=2000.0, color=0x2F1B0C, albedo=0.05
    ),
)

COMPOSITIONS: dict[str, CompositionProfile] = {
    profile.key: profile for profile in COMPOSITION_DEFINITIONS
}
COMPOSITION_DISPLAY_ORDER: list[str] = [profile.key for profile in COMPOSITION_DEFINITIONS]
DEFAULT_COMPOSITION_KEY = COMPOSITION_DISPLAY_ORDER[0]


def profile(key: str) -> CompositionProfile:
    """Return the profile for *key* or raise :class:`UnknownCompositionError`."""

    try:
        return COMPOSITIONS[key]
    except KeyError:
        raise UnknownCompositionError(f"unknown composition {key!r}") from None


__all__ = [
    "COMPOSITION_DEFINITIONS",
    "COMPOSITION_DISPLAY_ORDER",
    "COMPOSITIONS",
    "DEFAULT_COMPOSITION_KEY",
    "profile",
]
