"""
trade_study.py – Engine-power sweep and trade-study plotting.

Fly the same altitude transfer at several engine power settings and compare
how long it takes and how close the aircraft comes to its limits.  Results
are a list of dicts (easily convertible to a DataFrame).
"""

from __future__ import annotations
import dataclasses
import numpy as np
import matplotlib.pyplot as plt

from altsim.config import SimulationConfig
from altsim.constraints import ConstraintViolation
from altsim.simulation import FlightSimulator


def sweep_engine_power(
    powers_pct: np.ndarray | list[float],
    target_altitude_ft: float,
    config: SimulationConfig | None = None,
    max_ticks: int | None = None,
) -> list[dict]:
    """
    Climb (or descend) from the ground to *target_altitude_ft* once per
    engine power setting.

    Returns list of dicts with keys:
        engine_power_pct, reached, time_to_target_s, final_altitude_ft,
        peak_speed_m_min, peak_angle_deg, violation
    """
    config = config or SimulationConfig()
    results = []
    for power in powers_pct:
        cfg = dataclasses.replace(config, engine_power_pct=float(power))
        sim = FlightSimulator(cfg)
        sim.command(target_altitude_ft)
        violation = None
        try:
            reached = sim.run_until_done(max_ticks)
        except ConstraintViolation as exc:
            reached = False
            violation = str(exc)

        final = sim.engine.get_data()
        arrays = sim.telemetry.as_arrays()
        speeds = np.append(arrays['speed_m_min'], final.speed_m_min)
        angles = np.append(np.abs(arrays['angle_deg']), abs(final.computed_angle_deg))
        results.append({
            'engine_power_pct': float(power),
            'reached': reached,
            'time_to_target_s': sim.elapsed_s if reached else None,
            'final_altitude_ft': final.altitude_ft,
            'peak_speed_m_min': float(np.max(speeds)),
            'peak_angle_deg': float(np.max(angles)),
            'violation': violation,
        })
    return results


def plot_power_sweep(results: list[dict],
                     title: str = "Engine Power Trade Study",
                     *, show: bool = True,
                     save_path: str | None = None) -> plt.Figure:
    """Three-panel plot of time to target, peak speed and peak angle."""
    x_vals = [r['engine_power_pct'] for r in results]
    y_keys = ['time_to_target_s', 'peak_speed_m_min', 'peak_angle_deg']
    labels = {
        'time_to_target_s': 'Time to target [s]',
        'peak_speed_m_min': 'Peak speed [m/min]',
        'peak_angle_deg': 'Peak |angle| [°]',
    }

    fig, axes = plt.subplots(len(y_keys), 1, figsize=(10, 3.2 * len(y_keys)),
                             sharex=True)

    colors = ['#1a73e8', '#d93025', '#0d652d']
    for i, key in enumerate(y_keys):
        # unreached runs have no time to target
        pairs = [(r['engine_power_pct'], r[key]) for r in results if r[key] is not None]
        if pairs:
            xf, yf = zip(*pairs)
            axes[i].plot(xf, yf, 'o-', color=colors[i], lw=2, ms=4)
        axes[i].set_ylabel(labels[key], fontsize=10)
        axes[i].grid(True, ls=':', alpha=0.4)

    axes[-1].set_xlabel('Engine power [%]', fontsize=11)
    if x_vals:
        axes[-1].set_xlim(min(x_vals) * 0.95, max(x_vals) * 1.05)
    fig.suptitle(title, fontsize=13, fontweight='bold')
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=200, bbox_inches='tight')
    if show:
        plt.show()
    return fig
