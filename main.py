#!/usr/bin/env python3
"""
main.py – CLI for the altitude-transfer flight simulator.

Usage:
    python main.py                          # interactive mode
    python main.py --help                   # show all flags
    python main.py --altitude 500 \\
        --altitude -30 --altitude 0         # batch mode (no prompts)
    python main.py --sweep 50 200 4 --target 500   # engine power sweep
"""

from __future__ import annotations
import argparse
import sys
import numpy as np
from pathlib import Path

from altsim.config import load_config
from altsim.constraints import ConstraintViolation
from altsim.plotting import plot_flight_profile
from altsim.simulation import FlightSimulator, parse_command
from altsim.trade_study import plot_power_sweep, sweep_engine_power


# ── Pretty-printing helpers ──────────────────────────────────────────

def _header():
    print()
    print("╔══════════════════════════════════════════════════════════╗")
    print("║            Altitude Transfer Flight Simulator            ║")
    print("╚══════════════════════════════════════════════════════════╝")
    print()


def _dump(sim: FlightSimulator):
    print(f"[{sim.elapsed_s:.0f}s]")
    print(sim.engine.describe())
    print()


# ── Argparse ─────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Altitude Transfer Flight Simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  Interactive:   python main.py
  Batch:         python main.py --altitude 500 --altitude -30 --altitude 0
  Sweep:         python main.py --sweep 50 200 4 --target 500
""",
    )
    # ── Simulation params ────────────────────────────────────────
    p.add_argument('--config', type=str, default=None,
                   help='JSON config file')
    p.add_argument('--timestep-us', type=int, default=None,
                   help='Simulation timestep [µs] (default 100)')
    p.add_argument('--engine-power', type=float, default=None,
                   help='Engine power [%%] (default 10)')
    p.add_argument('--altitude', action='append', default=None,
                   metavar='FT',
                   help='Altitude command [ft]; negative = hold for that many '
                        'seconds.  Repeat for a script.')

    # ── Output ───────────────────────────────────────────────────
    p.add_argument('--output-dir', type=str, default=None,
                   help='Directory for the profile files')
    p.add_argument('--csv', type=str, default=None,
                   help='CSV telemetry output path')
    p.add_argument('--no-plot', action='store_true',
                   help='Suppress all plots')
    p.add_argument('-v', '--verbose', action='store_true',
                   help='Print the aircraft status periodically')

    # ── Sweep mode ───────────────────────────────────────────────
    p.add_argument('--sweep', nargs=3, metavar=('MIN', 'MAX', 'N'),
                   help='Sweep engine power [%%]: --sweep 50 200 4')
    p.add_argument('--target', type=float, default=500.0,
                   help='Target altitude for the sweep [ft] (default 500)')

    return p


def _build_config(args):
    cfg = load_config(args.config)
    if args.timestep_us is not None:
        cfg.timestep_us = args.timestep_us
    if args.engine_power is not None:
        cfg.engine_power_pct = args.engine_power
    if args.output_dir is not None:
        cfg.output_dir = args.output_dir
    if cfg.timestep_us <= 0:
        raise ValueError("timestep must be > 0")
    return cfg


def _make_simulator(cfg, verbose: bool) -> FlightSimulator:
    sim = FlightSimulator(cfg, on_report=_dump if verbose else None)
    if verbose:
        print("plane initial status:")
        print(sim.engine.describe())
        print()
    return sim


def _fail(sim: FlightSimulator, err: ConstraintViolation):
    print(f"at tick {err.tick}", file=sys.stderr)
    print("\nPLANE FAILED TO MEET CONSTRAINTS", file=sys.stderr)
    print(f"{err.reason}\n", file=sys.stderr)
    print("plane status while error:", file=sys.stderr)
    print(sim.engine.describe(), file=sys.stderr)
    sys.exit(1)


def _finish(sim: FlightSimulator, cfg, args):
    """Write profile files, CSV and plot for a finished run."""
    paths = sim.telemetry.write_profiles(cfg.output_dir)
    for name, path in paths.items():
        print(f"  → {name}: {path}")
    if args.csv:
        csv_path = sim.telemetry.export_csv(args.csv)
        print(f"  → CSV: {csv_path}")
    if not args.no_plot and len(sim.telemetry):
        plot_flight_profile(sim.telemetry.as_arrays(),
                            save_path=str(Path(cfg.output_dir) / "flight_profile.png"))


# ── Batch mode ───────────────────────────────────────────────────────

def run_batch(args):
    """Non-interactive mode: commands from --altitude."""
    _header()
    cfg = _build_config(args)
    commands = [parse_command(text) for text in args.altitude]
    sim = _make_simulator(cfg, args.verbose)

    print(f"  Timestep {cfg.timestep_us} µs, engine power {cfg.engine_power_pct:.0f}%")
    try:
        for cmd in commands:
            if cmd.target_altitude_ft is not None:
                print(f"  going to altitude {cmd.target_altitude_ft:.0f}ft")
            else:
                print(f"  waiting for {cmd.hold_s:.0f}s")
            result = sim.run_script([cmd])
            if not result.reached:
                print(f"  ⚠ transfer not finished after {cfg.max_simulated_s:.0f}s")
    except ConstraintViolation as err:
        _fail(sim, err)

    _print_summary(sim)
    _finish(sim, cfg, args)
    print("\n  Done.\n")


# ── Sweep mode ───────────────────────────────────────────────────────

def run_sweep(args):
    """Engine power sweep mode."""
    _header()
    cfg = _build_config(args)

    lo, hi, n = args.sweep
    lo, hi, n = float(lo), float(hi), int(n)
    values = np.linspace(lo, hi, n)

    print(f"  Sweeping engine power from {lo}% to {hi}% ({n} steps), "
          f"target {args.target:.0f}ft...\n")
    results = sweep_engine_power(values, args.target, cfg)

    # Print table header
    keys = list(results[0].keys())
    print("  " + "  ".join(f"{k:>18s}" for k in keys))
    for r in results:
        vals = []
        for k in keys:
            v = r[k]
            if v is None:
                vals.append(f"{'N/A':>18s}")
            elif isinstance(v, float):
                vals.append(f"{v:18.3f}")
            else:
                vals.append(f"{v!s:>18s}")
        print("  " + "  ".join(vals))

    if not args.no_plot:
        plot_power_sweep(results,
                         title=f"Trade Study: engine power = [{lo}, {hi}]%")

    print("\n  Done.\n")


# ── Interactive mode ─────────────────────────────────────────────────

def run_interactive(args):
    """Prompt for a new altitude every time the aircraft is idle."""
    _header()
    cfg = _build_config(args)
    sim = _make_simulator(cfg, args.verbose)

    print("  Enter an altitude [ft], a negative number of seconds to wait,")
    print("  or a blank line to stop.\n")
    try:
        while True:
            raw = input("  new altitude: ").strip()
            if raw == "":
                break
            try:
                cmd = parse_command(raw)
            except ValueError:
                print(f"  not a number: {raw!r}")
                continue

            if cmd.target_altitude_ft is not None:
                print(f"  going to altitude {cmd.target_altitude_ft:.0f}")
            else:
                print(f"  waiting for {cmd.hold_s:.0f}s")
            result = sim.run_script([cmd])
            if not result.reached:
                print(f"  ⚠ transfer not finished after {cfg.max_simulated_s:.0f}s")
            print(sim.engine.describe())
            print()
    except ConstraintViolation as err:
        _fail(sim, err)

    _print_summary(sim)
    _finish(sim, cfg, args)
    print("\n  Done.\n")


# ── Shared printing ──────────────────────────────────────────────────

def _print_summary(sim: FlightSimulator):
    data = sim.engine.get_data()
    print()
    print("  ── Flight Summary ──────────────────────────────────────")
    print(f"    Simulated time    = {sim.elapsed_s:.1f} s  ({sim.tick_count} ticks)")
    print(f"    Altitude          = {data.altitude_ft:.0f} ft")
    print(f"    Position          = {data.pos_x_ft:.1f} ft")
    print(f"    Speed             = {data.speed_m_min:.1f} m/min")
    print(f"    Angle             = {data.computed_angle_deg:.3f}°")
    print(f"    State             = {data.state.name}")
    print(f"    Samples recorded  = {len(sim.telemetry)}")


# ── Entry point ──────────────────────────────────────────────────────

def main():
    parser = build_parser()
    args = parser.parse_args()

    if args.sweep:
        run_sweep(args)
    elif args.altitude:
        run_batch(args)
    else:
        run_interactive(args)


if __name__ == "__main__":
    main()
