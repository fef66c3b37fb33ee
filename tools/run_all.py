#!/usr/bin/env python3
"""Run the complete orrery validation.

This script executes:
- Python unit tests (pytest)
- Simulation scenarios (annual orbit, lunar stability, frozen clock)

It writes full logs + data + images into build/reports/.

Usage:
  python3 tools/run_all.py
  python3 tools/run_all.py --out build/reports --profile full
"""

from __future__ import annotations

import argparse
import csv
import json
import logging
import os
import shutil
import subprocess
import sys
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

# Force headless plotting
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np


REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_OUT_ROOT = REPO_ROOT / "build" / "reports"


def _utc_stamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%SZ")


def _run_cmd(
    cmd: list[str],
    *,
    cwd: Path,
    log_path: Path,
    env: Optional[dict[str, str]] = None,
) -> int:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("w", encoding="utf-8") as f:
        f.write(f"$ {' '.join(cmd)}\n")
        f.write(f"cwd={cwd}\n\n")
        f.flush()
        proc = subprocess.Popen(
            cmd,
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            env=env,
        )
        assert proc.stdout is not None
        for line in proc.stdout:
            f.write(line)
        return proc.wait()


def _write_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)

    def _default(o: Any):
        if isinstance(o, np.ndarray):
            return o.tolist()
        if isinstance(o, np.generic):
            return o.item()
        if is_dataclass(o):
            return asdict(o)
        return str(o)

    path.write_text(json.dumps(obj, indent=2, sort_keys=True, default=_default) + "\n", encoding="utf-8")


def _history_to_rows(history: Iterable[Any]) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for s in history:
        rows.append(
            {
                "time_s": float(s.time_s),
                "earth_x_m": float(s.earth_position_m[0]),
                "earth_y_m": float(s.earth_position_m[1]),
                "earth_distance_m": float(s.telemetry.earth_sun_distance_m),
                "earth_speed_m_s": float(s.telemetry.earth_speed_m_s),
                "moon_x_m": float(s.moon_position_m[0]),
                "moon_y_m": float(s.moon_position_m[1]),
                "moon_distance_m": float(s.telemetry.moon_distance_m),
                "day_of_year": int(s.telemetry.day_of_year),
            }
        )
    return rows


def _write_csv(path: Path, rows: list[dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if not rows:
        path.write_text("", encoding="utf-8")
        return
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        writer.writerows(rows)


def _plot_timeseries(rows: list[dict[str, Any]], out_png: Path, title: str) -> None:
    out_png.parent.mkdir(parents=True, exist_ok=True)
    if not rows:
        return

    t_days = np.array([r["time_s"] for r in rows]) / 86400.0
    earth_r = np.array([r["earth_distance_m"] for r in rows]) / 1e9
    earth_v = np.array([r["earth_speed_m_s"] for r in rows]) / 1e3
    moon_r = np.array([r["moon_distance_m"] for r in rows]) / 1e3

    fig, axs = plt.subplots(3, 1, figsize=(12, 9), sharex=True)
    fig.suptitle(title)

    axs[0].plot(t_days, earth_r)
    axs[0].set_ylabel("Earth-Sun (M km)")
    axs[0].grid(True)

    axs[1].plot(t_days, earth_v)
    axs[1].set_ylabel("Earth speed (km/s)")
    axs[1].grid(True)

    axs[2].plot(t_days, moon_r)
    axs[2].set_ylabel("Earth-Moon (km)")
    axs[2].set_xlabel("Time (days)")
    axs[2].grid(True)

    fig.tight_layout(rect=(0, 0, 1, 0.96))
    fig.savefig(out_png, dpi=160)
    plt.close(fig)


def _plot_orbits(rows: list[dict[str, Any]], out_png: Path) -> None:
    if not rows:
        return
    fig, axs = plt.subplots(1, 2, figsize=(12, 6))

    axs[0].plot([r["earth_x_m"] / 1e9 for r in rows], [r["earth_y_m"] / 1e9 for r in rows])
    axs[0].plot(0, 0, "yo", label="Sun")
    axs[0].set_title("Earth (heliocentric)")
    axs[0].set_xlabel("x (M km)")
    axs[0].set_ylabel("y (M km)")
    axs[0].axis("equal")
    axs[0].legend()

    axs[1].plot([r["moon_x_m"] / 1e3 for r in rows], [r["moon_y_m"] / 1e3 for r in rows], lw=0.5)
    axs[1].plot(0, 0, "bo", label="Earth")
    axs[1].set_title("Moon (Earth-relative)")
    axs[1].set_xlabel("x (km)")
    axs[1].set_ylabel("y (km)")
    axs[1].axis("equal")
    axs[1].legend()

    fig.tight_layout()
    fig.savefig(out_png, dpi=160)
    plt.close(fig)


def _plot_energy(scenario, out_png: Path) -> None:
    t_days = scenario.time_history / 86400.0
    fig, ax = plt.subplots(figsize=(12, 6))
    for method, energies in scenario.energy_history.items():
        drift = np.abs((energies - energies[0]) / energies[0])
        ax.semilogy(t_days, np.maximum(drift, 1e-16), label=method)
    ax.set_xlabel("Time (days)")
    ax.set_ylabel("|ΔE / E0|")
    ax.set_title("Moon specific energy drift")
    ax.grid(True, which="both")
    ax.legend()
    fig.tight_layout()
    fig.savefig(out_png, dpi=160)
    plt.close(fig)


def _run_simulation_bundle(out_dir: Path, *, profile: str) -> dict[str, Any]:
    from orrery.scenarios import (
        AnnualOrbitScenario,
        AnnualOrbitScenarioConfig,
        FrozenClockScenario,
        FrozenClockScenarioConfig,
        LunarStabilityScenario,
        LunarStabilityScenarioConfig,
    )

    results: dict[str, Any] = {}

    # Scenario log messages go to one file per scenario
    (out_dir / "logs").mkdir(parents=True, exist_ok=True)
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    def _capture(name: str, fn):
        handler = logging.FileHandler(out_dir / "logs" / f"simulation_{name}.log", encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        root_logger.addHandler(handler)
        try:
            return fn()
        finally:
            root_logger.removeHandler(handler)
            handler.close()

    if profile == "full":
        annual_cfg = AnnualOrbitScenarioConfig(revolutions=3.0)
        lunar_cfg = LunarStabilityScenarioConfig(n_steps=100000)
    elif profile == "standard":
        annual_cfg = AnnualOrbitScenarioConfig(revolutions=1.0)
        lunar_cfg = LunarStabilityScenarioConfig(n_steps=10000)
    else:
        # Smoke profile: fast, still generates complete artifacts (logs/CSV/PNG) for every scenario.
        annual_cfg = AnnualOrbitScenarioConfig(revolutions=1.0, speed_multiplier=5.0)
        lunar_cfg = LunarStabilityScenarioConfig(n_steps=2000)

    scenarios = {
        "annual_orbit": AnnualOrbitScenario(annual_cfg),
        "lunar_stability": LunarStabilityScenario(lunar_cfg),
        "frozen_zero_speed": FrozenClockScenario(FrozenClockScenarioConfig(mode="zero_speed")),
        "frozen_paused": FrozenClockScenario(FrozenClockScenarioConfig(mode="paused")),
    }

    for name, scenario in scenarios.items():
        res = _capture(name, scenario.run)
        results[name] = res
        _write_json(out_dir / "data" / f"{name}_results.json", res)

        history = getattr(scenario, "history", None)
        if history:
            rows = _history_to_rows(history)
            _write_csv(out_dir / "data" / f"{name}_timeseries.csv", rows)
            _plot_timeseries(rows, out_dir / "images" / f"{name}_timeseries.png", f"Scenario: {name}")
            _plot_orbits(rows, out_dir / "images" / f"{name}_orbits.png")

        # Lunar stability has an extra energy drift plot
        if name == "lunar_stability" and getattr(scenario, "energy_history", None):
            _plot_energy(scenario, out_dir / "images" / "lunar_energy_drift.png")

    return results


def main() -> int:
    parser = argparse.ArgumentParser(description="Run complete tests + simulations and write artifacts into build/")
    parser.add_argument("--out", default=str(DEFAULT_OUT_ROOT), help="Output root (default: build/reports)")
    parser.add_argument("--skip-pytests", action="store_true", help="Skip pytest")
    parser.add_argument("--skip-sim", action="store_true", help="Skip simulations")
    parser.add_argument(
        "--profile",
        choices=["smoke", "standard", "full"],
        default="smoke",
        help="Simulation workload profile (default: smoke)",
    )
    args = parser.parse_args()

    out_root = Path(args.out)
    stamp = _utc_stamp()
    run_dir = out_root / stamp
    latest_dir = out_root / "latest"

    run_dir.mkdir(parents=True, exist_ok=True)
    (run_dir / "logs").mkdir(exist_ok=True)
    (run_dir / "data").mkdir(exist_ok=True)
    (run_dir / "images").mkdir(exist_ok=True)

    meta = {
        "timestamp_utc": stamp,
        "python": sys.version,
        "repo": str(REPO_ROOT),
        "profile": args.profile,
    }
    _write_json(run_dir / "meta.json", meta)

    summary: dict[str, Any] = {"meta": meta, "steps": {}}

    # Pytests
    if not args.skip_pytests:
        code = _run_cmd(
            [
                sys.executable,
                "-m",
                "pytest",
                "-q",
                "--disable-warnings",
                "--maxfail=1",
                f"--junitxml={str(run_dir / 'data' / 'pytest-junit.xml')}",
                "tests",
            ],
            cwd=REPO_ROOT,
            log_path=run_dir / "logs" / "pytest.log",
            env={**os.environ, "PYTHONPATH": str(REPO_ROOT), "MPLBACKEND": "Agg"},
        )
        summary["steps"]["pytest"] = {"exit_code": code}

    # Simulations
    if not args.skip_sim:
        try:
            sim_results = _run_simulation_bundle(run_dir, profile=args.profile)
            _write_json(run_dir / "data" / "simulation_summary.json", sim_results)
            summary["steps"]["simulations"] = {"ok": True, "scenarios": list(sim_results.keys())}
        except KeyboardInterrupt:
            (run_dir / "logs" / "simulation_runner_error.log").write_text("KeyboardInterrupt\n", encoding="utf-8")
            summary["steps"]["simulations"] = {"ok": False, "error": "KeyboardInterrupt"}
        except Exception as e:
            (run_dir / "logs" / "simulation_runner_error.log").write_text(str(e) + "\n", encoding="utf-8")
            summary["steps"]["simulations"] = {"ok": False, "error": str(e)}

    _write_json(run_dir / "summary.json", summary)

    # Human-readable summary
    lines = [
        f"Orrery Validation Report ({stamp})",
        f"Output: {run_dir}",
        "",
        "Steps:",
    ]
    for k, v in summary["steps"].items():
        lines.append(f"- {k}: {v}")
    (run_dir / "summary.txt").write_text("\n".join(lines) + "\n", encoding="utf-8")
    print("\n".join(lines))

    # Refresh latest/
    if latest_dir.exists():
        shutil.rmtree(latest_dir)
    shutil.copytree(run_dir, latest_dir)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
