"""Summarise a traced impact run and render its diagnostic figures.

Usage: ``impact-analyze [RUN] [--runs-dir DIR]``. Without ``RUN`` the run
named in ``DIR/last_run.txt`` is used. Figures land in ``RUN/figs``.
"""
from __future__ import annotations

import argparse
import csv
import json
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from impact_sim.core.config import SCENE_CFG


TERMINAL_EVENTS = ("impact", "miss")
COUNTED_EVENTS = ("start", "launch", "detonation", "impact", "miss")


@dataclass
class RunRecord:
    path: Path
    samples: dict[str, np.ndarray]
    events: list[dict]
    meta: dict = field(default_factory=dict)

    @property
    def target_radius(self) -> float:
        return float(self.meta.get("target_radius", SCENE_CFG.target_radius))

    @property
    def outcome(self) -> str:
        terminal = [e["type"] for e in self.events if e["type"] in TERMINAL_EVENTS]
        return terminal[-1] if terminal else "incomplete"

    def event_counts(self) -> dict[str, int]:
        kinds = [e["type"] for e in self.events]
        return {kind: kinds.count(kind) for kind in COUNTED_EVENTS}

    def closest_approach(self) -> tuple[int, float] | None:
        """``(tick, r)`` of the smallest logged distance to the target centre."""
        r = self.samples.get("r")
        if r is None or r.size == 0:
            return None
        i = int(np.argmin(r))
        return int(self.samples["tick"][i]), float(r[i])

    def applied_deflection(self) -> float:
        detonations = [e for e in self.events if e["type"] == "detonation"]
        if not detonations:
            return 0.0
        return float(detonations[0]["details"].get("deflection", 0.0))


def read_samples(path: Path) -> dict[str, np.ndarray]:
    with path.open(newline="", encoding="utf-8") as fh:
        reader = csv.reader(fh)
        header = next(reader, [])
        rows = [[float(cell) for cell in row] for row in reader if row]
    table = np.asarray(rows, dtype=float).reshape(len(rows), len(header))
    return {name: table[:, col] for col, name in enumerate(header)}


def read_events(path: Path) -> list[dict]:
    with path.open(newline="", encoding="utf-8") as fh:
        return [
            {
                "tick": int(float(row["tick"])),
                "type": row["type"],
                "r": float(row["r"]),
                "details": json.loads(row["details"]) if row.get("details") else {},
            }
            for row in csv.DictReader(fh)
        ]


def load_run(run_dir: Path) -> RunRecord:
    meta_path = run_dir / "meta.json"
    meta = json.loads(meta_path.read_text(encoding="utf-8")) if meta_path.exists() else {}
    return RunRecord(
        path=run_dir,
        samples=read_samples(run_dir / "timeseries.csv"),
        events=read_events(run_dir / "events.csv"),
        meta=meta,
    )


def _target_outline(ax, radius: float) -> None:
    theta = np.linspace(0.0, 2.0 * np.pi, 256)
    ax.fill(radius * np.cos(theta), radius * np.sin(theta), color="#1e5aaa", alpha=0.6, label="Target")


def plot_path(run: RunRecord, fig_dir: Path) -> Path:
    s = run.samples
    fig, (ax_xy, ax_xz) = plt.subplots(1, 2, figsize=(11, 5.5))
    for ax, (h, v) in ((ax_xy, ("x", "y")), (ax_xz, ("x", "z"))):
        _target_outline(ax, run.target_radius)
        ax.plot(s[h], s[v], color="#ff4444", lw=1.5, label="Impactor")
        ax.scatter(s[h][-1:], s[v][-1:], color="#ffd43b", zorder=3, s=18)
        ax.set_aspect("equal", "box")
        ax.set_xlabel(f"{h} [scene units]")
        ax.set_ylabel(f"{v} [scene units]")
        ax.set_title(f"Flight path ({h}-{v})")
    ax_xy.legend(loc="upper right")
    fig.tight_layout()
    out = fig_dir / "path.png"
    fig.savefig(out, dpi=150)
    plt.close(fig)
    return out


def plot_distance(run: RunRecord, fig_dir: Path) -> Path:
    markers = {"launch": ("#2f9e44", ":"), "detonation": ("#d9480f", "--")}
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(run.samples["tick"], run.samples["r"], color="#4dabf7", label="r")
    ax.axhline(run.target_radius, color="#1e5aaa", linestyle="--", alpha=0.6, label="Surface")
    for event in run.events:
        if event["type"] in markers:
            color, style = markers[event["type"]]
            ax.axvline(event["tick"], color=color, linestyle=style, alpha=0.7, label=event["type"].title())
    by_label = dict(zip(*reversed(ax.get_legend_handles_labels())))
    ax.legend(by_label.values(), by_label.keys())
    ax.set(xlabel="tick", ylabel="r [scene units]", title="Distance to target centre")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    out = fig_dir / "distance.png"
    fig.savefig(out, dpi=150)
    plt.close(fig)
    return out


def plot_heating(run: RunRecord, fig_dir: Path) -> Path:
    ticks = run.samples["tick"]
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.fill_between(ticks, run.samples["emissive"], color="#ffa94d", alpha=0.5, label="Emissive")
    ax.set(xlabel="tick", ylabel="emissive intensity", ylim=(0.0, 1.05))
    ax_progress = ax.twinx()
    ax_progress.plot(ticks, run.samples["progress"], color="#9775fa", label="Progress")
    ax_progress.set_ylabel("progress [%]")
    ax.set_title("Atmospheric heating along the approach")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    out = fig_dir / "heating.png"
    fig.savefig(out, dpi=150)
    plt.close(fig)
    return out


def format_summary(run: RunRecord) -> str:
    meta = run.meta
    lines = [f"Run: {run.path.name}"]
    if meta:
        lines.append(
            f" Impactor: {meta.get('diameter_m', '?')} m at {meta.get('velocity_kms', '?')} km/s,"
            f" {meta.get('composition', '?')}, {meta.get('approach_angle_deg', '?')} deg"
        )
        lines.append(f" Defense: {meta.get('method', 'none')}, {meta.get('lead_time_years', 0)} years lead")
    lines.append(f" Outcome: {run.outcome}")
    approach = run.closest_approach()
    lines.append(
        f" Closest approach: r = {approach[1]:.1f} at tick {approach[0]}" if approach else " Closest approach: n/a"
    )
    lines.append(f" Applied deflection: {run.applied_deflection():.2f} deg")
    lines.append(" Events: " + ", ".join(f"{kind}={n}" for kind, n in run.event_counts().items()))
    return "\n".join(lines)


def resolve_run_dir(run_arg: str | None, runs_dir: Path) -> Path | None:
    if run_arg:
        direct = Path(run_arg)
        return direct if direct.is_dir() else runs_dir / run_arg
    marker = runs_dir / "last_run.txt"
    if not marker.exists():
        return None
    return runs_dir / marker.read_text(encoding="utf-8").strip()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Summarise a traced impact run and plot it.")
    parser.add_argument("run_dir", nargs="?", help="run directory, or a run id under --runs-dir")
    parser.add_argument("--runs-dir", type=Path, default=Path("data") / "runs")
    args = parser.parse_args(argv)

    run_path = resolve_run_dir(args.run_dir, args.runs_dir)
    if run_path is None:
        parser.error(f"no run given and {args.runs_dir / 'last_run.txt'} does not exist")
    for required in ("timeseries.csv", "events.csv"):
        if not (run_path / required).is_file():
            parser.error(f"{run_path} has no {required}")

    run = load_run(run_path)
    if run.samples.get("tick") is None or run.samples["tick"].size == 0:
        parser.error("timeseries.csv has no samples; was the run started with logging on?")

    fig_dir = run_path / "figs"
    fig_dir.mkdir(exist_ok=True)
    for plot in (plot_path, plot_distance, plot_heating):
        plot(run, fig_dir)
    print(format_summary(run))
    print(f"Figures written to {fig_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
