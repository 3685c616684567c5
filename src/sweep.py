"""Parameter sweeps over the impact model: threat tiers and deflection outcomes."""
from __future__ import annotations

import argparse
import math
from pathlib import Path
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap

from impact_sim.core.deflection import achieved_angle, deflection_success
from impact_sim.core.model import ImpactorParameters, SimulationPhase, ThreatLevel
from impact_sim.core.physics import compute_impact_effects
from impact_sim.core.simulation import ImpactSimulation
from impact_sim.data.compositions import COMPOSITION_DISPLAY_ORDER, DEFAULT_COMPOSITION_KEY
from impact_sim.data.deflection_methods import METHOD_DISPLAY_ORDER, METHODS

# ===========================
# SWEEP SETTINGS
# ===========================
DIAMETER_RANGE = (10.0, 10_000.0)   # m, log spaced
VELOCITY_RANGE = (11.0, 72.0)       # km/s
DIAMETER_POINTS = 120               # horizontal resolution (x-axis)
VELOCITY_POINTS = 60                # vertical resolution (y-axis)
APPROACH_ANGLE = 45.0               # degrees

LEAD_TIME_RANGE = (0.0, 30.0)       # years
LEAD_TIME_POINTS = 61

MAX_TICKS = 2_000                   # safety cap for simulated runs

FIGURES_DIR = Path("figures")

THREAT_COLORS = ["#4ade80", "#facc15", "#fb923c", "#ef4444", "#a855f7"]


# ===========================
# THREAT SWEEP
# ===========================
def run_threat_sweep(composition: str) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    diameters = np.geomspace(*DIAMETER_RANGE, DIAMETER_POINTS)
    velocities = np.linspace(*VELOCITY_RANGE, VELOCITY_POINTS)
    results = np.zeros((velocities.size, diameters.size), dtype=int)

    print(f"\n--- Threat sweep ({composition}) ---")
    print(f"{results.size} points ({DIAMETER_POINTS} diameters x {VELOCITY_POINTS} velocities)")
    for i, velocity in enumerate(velocities):
        for j, diameter in enumerate(diameters):
            params = ImpactorParameters(
                diameter=float(diameter),
                velocity=float(velocity),
                composition=composition,
                approach_angle=APPROACH_ANGLE,
            )
            results[i, j] = int(compute_impact_effects(params).threat_level)
    return diameters, velocities, results


# ===========================
# DEFLECTION SWEEP
# ===========================
def simulate_outcome(method_key: str, lead_time: float) -> SimulationPhase:
    """Run one headless flight to its terminal phase."""
    sim = ImpactSimulation(method_key=method_key, lead_time=lead_time)
    sim.start()
    ticks = 0
    while not sim.phase.is_terminal and ticks < MAX_TICKS:
        sim.advance()
        ticks += 1
    return sim.phase


def run_deflection_sweep(mode: str) -> tuple[np.ndarray, dict[str, np.ndarray], dict[str, np.ndarray]]:
    lead_times = np.linspace(*LEAD_TIME_RANGE, LEAD_TIME_POINTS)
    angles: dict[str, np.ndarray] = {}
    outcomes: dict[str, np.ndarray] = {}

    print(f"\n--- Deflection sweep ({mode}) ---")
    for key in METHOD_DISPLAY_ORDER:
        method = METHODS[key]
        angles[key] = np.array([achieved_angle(method, float(lead)) for lead in lead_times])
        if mode == "fast":
            outcomes[key] = np.array([deflection_success(method, float(lead)) for lead in lead_times])
        else:
            outcomes[key] = np.array(
                [simulate_outcome(key, float(lead)) is SimulationPhase.MISSED for lead in lead_times]
            )
        first = np.flatnonzero(outcomes[key])
        if first.size:
            print(f"  {method.name}: succeeds from {lead_times[first[0]]:.1f} years")
        else:
            print(f"  {method.name}: never succeeds in range")
    return lead_times, angles, outcomes


# ===========================
# PLOTTING
# ===========================
def plot_threat_heatmap(
    diameters: np.ndarray,
    velocities: np.ndarray,
    results: np.ndarray,
    composition: str,
    out_dir: Path = FIGURES_DIR,
) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    cmap = ListedColormap(THREAT_COLORS)

    fig, ax = plt.subplots(figsize=(10, 6))
    mesh = ax.pcolormesh(diameters, velocities, results, cmap=cmap, vmin=-0.5, vmax=4.5, shading="auto")
    cbar = fig.colorbar(mesh, ticks=[level.value for level in ThreatLevel])
    cbar.ax.set_yticklabels([level.label for level in ThreatLevel])
    ax.set_xscale("log")
    ax.set_xlabel("Diameter [m]")
    ax.set_ylabel("Velocity [km/s]")
    ax.set_title(f"Threat level by diameter and velocity ({composition}, {APPROACH_ANGLE:g} deg)")
    fig.tight_layout()
    out = out_dir / f"threat_heatmap_{composition}.png"
    fig.savefig(out, dpi=180)
    plt.close(fig)
    print(f"Heat map saved to {out}")
    return out


def plot_deflection(
    lead_times: np.ndarray,
    angles: dict[str, np.ndarray],
    outcomes: dict[str, np.ndarray],
    mode: str,
    out_dir: Path = FIGURES_DIR,
) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    fig, ax = plt.subplots(figsize=(9, 5))
    for key, values in angles.items():
        method = METHODS[key]
        color = f"#{method.color:06x}"
        ax.plot(lead_times, values, color=color, lw=1.8, label=method.name)
        success = outcomes[key]
        ax.scatter(lead_times[success], values[success], color=color, s=14, marker="o")
    ax.set_xlabel("Lead time [years]")
    ax.set_ylabel("Achieved deflection [deg]")
    ax.set_title(f"Deflection by lead time (dots: successful, {mode})")
    ax.grid(True, alpha=0.3)
    ax.legend()
    fig.tight_layout()
    out = out_dir / f"deflection_{mode}.png"
    fig.savefig(out, dpi=180)
    plt.close(fig)
    print(f"Deflection chart saved to {out}")
    return out


# ===========================
# MAIN
# ===========================
def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Sweep the impact model and plot the results.")
    parser.add_argument("--composition", choices=COMPOSITION_DISPLAY_ORDER, default=DEFAULT_COMPOSITION_KEY)
    parser.add_argument(
        "--mode",
        choices=("fast", "simulated"),
        default="fast",
        help="fast = success criterion only, simulated = fly each case headless",
    )
    parser.add_argument("--out", type=Path, default=FIGURES_DIR)
    args = parser.parse_args(argv)

    smallest = compute_impact_effects(
        ImpactorParameters(diameter=DIAMETER_RANGE[0], velocity=VELOCITY_RANGE[0], composition=args.composition)
    )
    largest = compute_impact_effects(
        ImpactorParameters(diameter=DIAMETER_RANGE[1], velocity=VELOCITY_RANGE[1], composition=args.composition)
    )
    print(
        f"Energy span: {smallest.kinetic_energy_mt:.3g} Mt to {largest.kinetic_energy_mt:.3g} Mt"
        f" ({math.log10(largest.kinetic_energy_mt / smallest.kinetic_energy_mt):.1f} decades)"
    )

    diameters, velocities, results = run_threat_sweep(args.composition)
    plot_threat_heatmap(diameters, velocities, results, args.composition, args.out)
    lead_times, angles, outcomes = run_deflection_sweep(args.mode)
    plot_deflection(lead_times, angles, outcomes, args.mode, args.out)


if __name__ == "__main__":
    main()
