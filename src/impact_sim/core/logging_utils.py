"""Run tracing for the impact simulator.

Each traced run gets its own directory under ``root_dir`` holding
``timeseries.csv`` (one row per rendered tick), ``events.csv`` (phase
changes, impact, interception) and ``meta.json`` (scenario parameters).
The id of the newest run is recorded in ``root_dir/last_run.txt`` so the
analysis script can pick it up without arguments.
"""
from __future__ import annotations

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import IO, Optional, Sequence


def _fmt(value: object) -> str:
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, (int, float)):
        return f"{value:.10g}"
    return str(value)


class _CsvChannel:
    """One CSV file with a row buffer that is written out in batches."""

    def __init__(self, path: Path, header: Sequence[str], batch_size: int) -> None:
        self.path = path
        self._handle: IO[str] = path.open("w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._handle, lineterminator="\n")
        self._writer.writerow(header)
        self._pending: list[list[str]] = []
        self._batch_size = max(1, batch_size)

    def push(self, row: list[str]) -> None:
        self._pending.append(row)
        if len(self._pending) >= self._batch_size:
            self.drain()

    def drain(self) -> None:
        if not self._pending:
            return
        self._writer.writerows(self._pending)
        self._handle.flush()
        self._pending.clear()

    def shut(self) -> None:
        self.drain()
        self._handle.close()


def _reserve_run_dir(root: Path, requested: Optional[str]) -> tuple[str, Path]:
    stem = requested or datetime.now().strftime("impact_%Y%m%d_%H%M%S")
    candidate = stem
    n = 0
    while (root / candidate).exists():
        n += 1
        candidate = f"{stem}_{n}"
    path = root / candidate
    path.mkdir(parents=True)
    return candidate, path


class RunLogger:
    """Writes the trace of one simulation run; usable as a context manager."""

    TIMESERIES_HEADER = [
        "tick",
        "t",
        "x",
        "y",
        "z",
        "r",
        "progress",
        "emissive",
        "deflection",
    ]
    EVENTS_HEADER = ["tick", "type", "r", "details"]

    def __init__(
        self,
        root_dir: str | Path = "data/runs",
        run_id: Optional[str] = None,
        *,
        timeseries_flush_threshold: int = 200,
        events_flush_threshold: int = 20,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)
        self.run_id, self.run_dir = _reserve_run_dir(self.root_dir, run_id)

        self.timeseries_path = self.run_dir / "timeseries.csv"
        self.events_path = self.run_dir / "events.csv"
        self.meta_path = self.run_dir / "meta.json"

        self._samples = _CsvChannel(self.timeseries_path, self.TIMESERIES_HEADER, timeseries_flush_threshold)
        self._events = _CsvChannel(self.events_path, self.EVENTS_HEADER, events_flush_threshold)
        self.closed = False

        (self.root_dir / "last_run.txt").write_text(self.run_id, encoding="utf-8")

    def write_meta(self, meta: dict) -> None:
        self.meta_path.write_text(json.dumps(meta, indent=2, sort_keys=True), encoding="utf-8")

    def log_ts(self, values: Sequence[float]) -> None:
        self._samples.push([_fmt(v) for v in values])

    def log_event(self, tick: int, event_type: str, r: float, details: dict | None = None) -> None:
        payload = json.dumps(details or {}, sort_keys=True)
        self._events.push([_fmt(tick), event_type, _fmt(r), payload])

    def close(self) -> None:
        if self.closed:
            return
        self._samples.shut()
        self._events.shut()
        self.closed = True

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["RunLogger"]
