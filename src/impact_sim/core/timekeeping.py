"""Utilities for turning wall-clock frames into simulation ticks."""
from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`."""

    last_time: float = field(default_factory=time.perf_counter)

    def tick(self) -> float:
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        return dt


@dataclass
class TickScheduler:
    """Accumulates wall-clock time and releases whole ticks.

    A tick lasts ``interval / time_scale`` seconds, so a faster time scale
    fires ticks more often. ``cancel`` drops everything accumulated so far;
    nothing scheduled before the cancel is ever released.
    """

    interval: float
    max_ticks: int
    time_scale: float = 1.0
    value: float = 0.0

    @property
    def tick_interval(self) -> float:
        return self.interval / self.time_scale

    def set_time_scale(self, time_scale: float) -> None:
        if time_scale <= 0.0:
            raise ValueError("time_scale must be positive")
        self.time_scale = time_scale

    def accrue(self, delta: float) -> None:
        if delta > 0.0:
            self.value += delta

    def cancel(self) -> None:
        self.value = 0.0

    def consume(self) -> int:
        if self.value <= 0.0:
            return 0
        step = self.tick_interval
        ticks_due = int(self.value // step)
        if ticks_due > self.max_ticks:
            # Too far behind: run the cap and drop the backlog.
            self.value = 0.0
            return self.max_ticks
        self.value -= ticks_due * step
        return ticks_due


__all__ = ["FrameTimer", "TickScheduler"]
