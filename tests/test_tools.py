"""
Tests for the offline tools: run analysis and parameter sweeps.
"""

import random

import numpy as np
import pytest

import analyze_run
import sweep
from impact_sim.core.logging_utils import RunLogger
from impact_sim.core.model import ImpactorParameters, SimulationPhase, ThreatLevel
from impact_sim.core.simulation import ImpactSimulation


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def traced_miss(tmp_path):
    """A logged straight-down entry, which ends in a miss."""
    sim = ImpactSimulation(ImpactorParameters(approach_angle=90.0), rng=random.Random(3))
    with RunLogger(tmp_path, run_id="vertical") as logger:
        logger.write_meta({"diameter_m": 100.0, "method": "none", "target_radius": 4500.0})
        sim.attach_logger(logger)
        sim.start()
        while not sim.phase.is_terminal:
            sim.advance()
    return logger.run_dir


# =============================================================================
# ANALYSIS
# =============================================================================

class TestAnalyzeRun:
    def test_load_run(self, traced_miss):
        run = analyze_run.load_run(traced_miss)
        assert run.samples["tick"].size == 300
        assert [event["type"] for event in run.events] == ["start", "miss"]
        assert run.outcome == "miss"
        assert run.target_radius == 4500.0
        assert run.applied_deflection() == 0.0

    def test_event_counts_and_closest_approach(self, traced_miss):
        run = analyze_run.load_run(traced_miss)
        counts = run.event_counts()
        assert counts["start"] == 1 and counts["miss"] == 1 and counts["impact"] == 0
        tick, r = run.closest_approach()
        assert r == pytest.approx(run.samples["r"].min())
        assert tick in run.samples["tick"]

    def test_incomplete_run(self, tmp_path):
        with RunLogger(tmp_path, run_id="empty") as logger:
            logger.log_event(0, "start", 1.0)
        run = analyze_run.load_run(logger.run_dir)
        assert run.outcome == "incomplete"
        assert run.closest_approach() is None
        assert run.meta == {}

    def test_resolve_run_dir_uses_last_run(self, tmp_path, traced_miss):
        assert analyze_run.resolve_run_dir(None, tmp_path) == traced_miss
        assert analyze_run.resolve_run_dir("vertical", tmp_path) == traced_miss
        assert analyze_run.resolve_run_dir(None, tmp_path / "nowhere") is None

    def test_main_writes_figures(self, tmp_path, traced_miss, capsys):
        assert analyze_run.main(["--runs-dir", str(tmp_path)]) == 0
        for name in ("path.png", "distance.png", "heating.png"):
            assert (traced_miss / "figs" / name).is_file()
        out = capsys.readouterr().out
        assert "Outcome: miss" in out

    def test_main_rejects_missing_run(self, tmp_path):
        with pytest.raises(SystemExit):
            analyze_run.main(["--runs-dir", str(tmp_path)])


# =============================================================================
# SWEEPS
# =============================================================================

class TestSweep:
    def test_threat_sweep_spans_all_tiers(self, monkeypatch):
        monkeypatch.setattr(sweep, "DIAMETER_POINTS", 6)
        monkeypatch.setattr(sweep, "VELOCITY_POINTS", 3)
        diameters, velocities, results = sweep.run_threat_sweep("stony")
        assert results.shape == (3, 6)
        assert diameters[0] == pytest.approx(10.0) and diameters[-1] == pytest.approx(10_000.0)
        assert results[0, 0] == ThreatLevel.LOW
        assert results[-1, -1] == ThreatLevel.CATASTROPHIC
        # tiers never drop as the impactor grows
        assert np.all(np.diff(results, axis=1) >= 0)

    def test_fast_deflection_sweep(self, monkeypatch):
        monkeypatch.setattr(sweep, "LEAD_TIME_POINTS", 7)
        lead_times, angles, outcomes = sweep.run_deflection_sweep("fast")
        assert lead_times.tolist() == [0.0, 5.0, 10.0, 15.0, 20.0, 25.0, 30.0]
        assert not outcomes["none"].any()
        assert outcomes["kinetic"].tolist() == [False, True, True, True, True, True, True]
        assert outcomes["gravity"].tolist() == [False, False, False, False, True, True, True]
        assert angles["nuclear"][-1] == 45.0

    def test_unguarded_flight_impacts(self):
        assert sweep.simulate_outcome("none", 0.0) is SimulationPhase.IMPACTED

    def test_plots_are_written(self, tmp_path, monkeypatch):
        monkeypatch.setattr(sweep, "DIAMETER_POINTS", 4)
        monkeypatch.setattr(sweep, "VELOCITY_POINTS", 3)
        monkeypatch.setattr(sweep, "LEAD_TIME_POINTS", 4)
        heatmap = sweep.plot_threat_heatmap(*sweep.run_threat_sweep("iron"), "iron", tmp_path)
        chart = sweep.plot_deflection(*sweep.run_deflection_sweep("fast"), "fast", tmp_path)
        assert heatmap.is_file() and chart.is_file()
