"""Near-Earth-object presets from the NASA NeoWs feed.

The feed is an optional data source: every failure (network, HTTP status,
malformed JSON) yields an empty preset list so the simulator simply has
nothing extra to offer.
"""
from __future__ import annotations

import math
import os
from datetime import date, timedelta
from typing import Any, Iterable, Mapping

import httpx

from impact_sim.core.config import SCENE_CFG, SceneCfg
from .scenarios import Scenario


FEED_URL = "https://api.nasa.gov/neo/rest/v1/feed"
FEED_WINDOW_DAYS = 7
DEFAULT_DIAMETER_MIN = 50.0
DEFAULT_DIAMETER_MAX = 100.0
DEFAULT_VELOCITY_KMS = 20.0
DEFAULT_APPROACH_ANGLE = 45.0
CARBONACEOUS_DIAMETER_THRESHOLD = 200.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _round_tenths(value: float) -> float:
    return math.floor(value * 10.0 + 0.5) / 10.0


def _positive_float(value: Any, fallback: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(number) or number <= 0.0:
        return fallback
    return number


def normalize_entry(entry: Mapping[str, Any]) -> Scenario:
    """Turn one raw feed record into a fully populated preset."""

    meters = (entry.get("estimated_diameter") or {}).get("meters") or {}
    diameter_min = _positive_float(meters.get("estimated_diameter_min"), DEFAULT_DIAMETER_MIN)
    diameter_max = _positive_float(meters.get("estimated_diameter_max"), DEFAULT_DIAMETER_MAX)
    avg_diameter = (diameter_min + diameter_max) / 2.0

    approaches = entry.get("close_approach_data") or []
    relative = (approaches[0].get("relative_velocity") or {}) if approaches else {}
    velocity = _positive_float(relative.get("kilometers_per_second"), DEFAULT_VELOCITY_KMS)

    name = str(entry.get("name") or entry.get("id") or "Unnamed NEO")
    name = name.replace("(", "").replace(")", "").strip()
    hazardous = bool(entry.get("is_potentially_hazardous_asteroid", False))

    return Scenario(
        key=f"neo:{entry.get('id', name)}",
        name=name,
        diameter=float(max(1, _round_half_up(avg_diameter))),
        velocity=_round_tenths(velocity),
        composition="carbonaceous" if avg_diameter > CARBONACEOUS_DIAMETER_THRESHOLD else "stony",
        approach_angle=DEFAULT_APPROACH_ANGLE,
        description="Potentially hazardous" if hazardous else "Near-Earth object",
        hazardous=hazardous,
    )


def normalize_feed(payload: Mapping[str, Any], *, cfg: SceneCfg = SCENE_CFG) -> list[Scenario]:
    """Flatten a feed response into at most ``cfg.max_feed_presets`` presets."""

    by_day = payload.get("near_earth_objects") or {}
    if not isinstance(by_day, Mapping):
        return []
    presets: list[Scenario] = []
    for day in sorted(by_day):
        entries: Iterable[Any] = by_day[day] or []
        for entry in entries:
            if not isinstance(entry, Mapping):
                continue
            presets.append(normalize_entry(entry))
            if len(presets) >= cfg.max_feed_presets:
                return presets
    return presets


def fetch_neo_presets(
    api_key: str | None = None,
    *,
    client: httpx.Client | None = None,
    start: date | None = None,
    timeout: float = 10.0,
    cfg: SceneCfg = SCENE_CFG,
) -> list[Scenario]:
    """Fetch this week's close approaches; returns ``[]`` when the feed is unavailable."""

    start = start or date.today()
    params = {
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(days=FEED_WINDOW_DAYS)).isoformat(),
        "api_key": api_key or os.getenv("NASA_API_KEY", "DEMO_KEY"),
    }
    owns_client = client is None
    http = client or httpx.Client(timeout=timeout)
    try:
        response = http.get(FEED_URL, params=params)
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        print(f"NEO feed unavailable: {exc}")
        return []
    finally:
        if owns_client:
            http.close()
    if not isinstance(payload, Mapping):
        return []
    return normalize_feed(payload, cfg=cfg)


__all__ = [
    "FEED_URL",
    "fetch_neo_presets",
    "normalize_entry",
    "normalize_feed",
]
