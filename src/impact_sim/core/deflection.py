"""Deflection model: how far a countermeasure bends the approach."""
from __future__ import annotations

import math

from .config import SCENE_CFG, SceneCfg
from .errors import InvalidParameterError
from .model import DeflectionMethod, DeflectionState


def validate_lead_time(lead_time: float) -> None:
    if not (math.isfinite(lead_time) and lead_time >= 0.0):
        raise InvalidParameterError(f"lead time must be >= 0 years, got {lead_time!r}")


def is_feasible(method: DeflectionMethod, lead_time: float) -> bool:
    """``True`` when there is enough preparation time for *method*."""

    return lead_time >= method.min_lead_time


def achieved_angle(method: DeflectionMethod, lead_time: float, cfg: SceneCfg = SCENE_CFG) -> float:
    """Displayed deflection in degrees: scaled effort, capped, zero when infeasible."""

    validate_lead_time(lead_time)
    if not is_feasible(method, lead_time):
        return 0.0
    return min(method.effectiveness * lead_time * cfg.deflection_scale, cfg.max_deflection_angle)


def deflection_success(method: DeflectionMethod, lead_time: float, cfg: SceneCfg = SCENE_CFG) -> bool:
    # Unscaled effort against the threshold, unlike achieved_angle.
    validate_lead_time(lead_time)
    if not is_feasible(method, lead_time):
        return False
    return method.effectiveness * lead_time >= cfg.success_threshold


def evaluate(
    method: DeflectionMethod,
    lead_time: float,
    *,
    missile_deployed: bool = False,
    cfg: SceneCfg = SCENE_CFG,
) -> DeflectionState:
    return DeflectionState(
        method=method,
        lead_time=float(lead_time),
        achieved_angle=achieved_angle(method, lead_time, cfg),
        success=deflection_success(method, lead_time, cfg),
        missile_deployed=missile_deployed,
    )


__all__ = [
    "achieved_angle",
    "deflection_success",
    "evaluate",
    "is_feasible",
    "validate_lead_time",
]
