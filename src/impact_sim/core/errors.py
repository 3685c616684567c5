"""Error kinds raised by the simulation core."""
from __future__ import annotations


class SimulationError(Exception):
    """Base class for every error raised by the core."""


class InvalidParameterError(SimulationError, ValueError):
    """A diameter, velocity, angle, lead time or time scale is out of domain."""


class UnknownCompositionError(SimulationError, KeyError):
    """The composition key has no profile in the composition table."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class UnknownMethodError(SimulationError, KeyError):
    """The deflection-method key is not in the catalog."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class IllegalTransitionError(SimulationError, RuntimeError):
    """The requested phase change is not allowed from the current phase."""


__all__ = [
    "IllegalTransitionError",
    "InvalidParameterError",
    "SimulationError",
    "UnknownCompositionError",
    "UnknownMethodError",
]
