#!/usr/bin/env python3
"""
main.py – CLI for the turbofan cycle analysis toolbox.

Usage:
    python main.py                          # reference cruise point
    python main.py --help                   # show all flags
    python main.py --altitude 0 --mach 0 \\
        --tit 1800 --output stations.csv    # single operating point
    python main.py --sweep bpr              # design trend sweep
    python main.py --envelope --no-plot     # Mach/altitude map
"""

from __future__ import annotations
import argparse
import logging
import sys
from dataclasses import fields

from tfcycle.cycle import calculate_cycle
from tfcycle.engine_inputs import EngineInputs, DEFAULT_INPUTS, out_of_range_fields
from tfcycle.envelope import flight_envelope, plot_flight_envelope
from tfcycle.export import export_stations_csv, export_sweep_csv
from tfcycle.plotting import plot_stations
from tfcycle.trade_study import SWEEPS, plot_trade_study

logger = logging.getLogger("tfcycle")


# ── Pretty-printing helpers ──────────────────────────────────────────

def _header():
    print()
    print("╔══════════════════════════════════════════════════════════╗")
    print("║      Separate-Exhaust Turbofan Cycle Analysis  v1.0      ║")
    print("╚══════════════════════════════════════════════════════════╝")
    print()


# ── Argparse ─────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    d = DEFAULT_INPUTS
    p = argparse.ArgumentParser(
        description="Separate-exhaust turbofan cycle analysis v1.0",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  Cruise point:  python main.py
  Take-off:      python main.py --altitude 0 --mach 0.25 --tit 1800
  Sweep:         python main.py --sweep opr --output opr_trend.csv
  Envelope:      python main.py --envelope --save-plot envelope.png
""",
    )
    # ── Flight condition ─────────────────────────────────────────
    p.add_argument('--altitude', type=float, default=d.altitude,
                   help=f'Altitude [km] (default {d.altitude})')
    p.add_argument('--mach', type=float, default=d.mach,
                   help=f'Flight Mach number (default {d.mach})')
    p.add_argument('--mass-flow', type=float, default=d.mass_flow,
                   help=f'Total air mass flow [kg/s] (default {d.mass_flow})')

    # ── Cycle design ─────────────────────────────────────────────
    p.add_argument('--bpr', dest='bypass_ratio', type=float,
                   default=d.bypass_ratio,
                   help=f'Bypass ratio (default {d.bypass_ratio})')
    p.add_argument('--opr', dest='overall_pressure_ratio', type=float,
                   default=d.overall_pressure_ratio,
                   help=f'Overall pressure ratio (default {d.overall_pressure_ratio})')
    p.add_argument('--fpr', dest='fan_pressure_ratio', type=float,
                   default=d.fan_pressure_ratio,
                   help=f'Fan pressure ratio (default {d.fan_pressure_ratio})')
    p.add_argument('--tit', dest='turbine_entry_temp', type=float,
                   default=d.turbine_entry_temp,
                   help=f'Turbine-entry temperature Tt4 [K] (default {d.turbine_entry_temp})')

    # ── Component losses ─────────────────────────────────────────
    p.add_argument('--eta-fan', dest='efficiency_fan', type=float,
                   default=d.efficiency_fan)
    p.add_argument('--eta-lpc', dest='efficiency_lpc', type=float,
                   default=d.efficiency_lpc,
                   help='LPC efficiency (accepted, merged into the fan)')
    p.add_argument('--eta-hpc', dest='efficiency_hpc', type=float,
                   default=d.efficiency_hpc)
    p.add_argument('--eta-hpt', dest='efficiency_hpt', type=float,
                   default=d.efficiency_hpt)
    p.add_argument('--eta-lpt', dest='efficiency_lpt', type=float,
                   default=d.efficiency_lpt)
    p.add_argument('--eta-burner', dest='efficiency_burner', type=float,
                   default=d.efficiency_burner)
    p.add_argument('--sigma-inlet', dest='pressure_recovery_inlet',
                   type=float, default=d.pressure_recovery_inlet)
    p.add_argument('--sigma-burner', dest='pressure_recovery_burner',
                   type=float, default=d.pressure_recovery_burner)
    p.add_argument('--sigma-nozzle', dest='pressure_recovery_nozzle',
                   type=float, default=d.pressure_recovery_nozzle)
    p.add_argument('--eta-mech-high', dest='mech_efficiency_high',
                   type=float, default=d.mech_efficiency_high)
    p.add_argument('--eta-mech-low', dest='mech_efficiency_low',
                   type=float, default=d.mech_efficiency_low)
    p.add_argument('--hu', dest='heating_value', type=float,
                   default=d.heating_value,
                   help=f'Fuel heating value [MJ/kg] (default {d.heating_value})')

    # ── Analysis modes ───────────────────────────────────────────
    p.add_argument('--sweep', choices=sorted(SWEEPS), default=None,
                   help='Run a design trend sweep instead of a single point')
    p.add_argument('--envelope', action='store_true',
                   help='Compute the Mach/altitude performance map')

    # ── Output ───────────────────────────────────────────────────
    p.add_argument('--output', '--csv', type=str, default=None,
                   help='CSV output path')
    p.add_argument('--save-plot', type=str, default=None,
                   help='Save the plot to this path')
    p.add_argument('--no-plot', action='store_true',
                   help='Suppress all plots')
    p.add_argument('-v', '--verbose', action='count', default=0,
                   help='-v for progress, -vv for solver diagnostics')

    return p


def inputs_from_args(args) -> EngineInputs:
    """Build the operating point from parsed arguments."""
    return EngineInputs(**{f.name: getattr(args, f.name)
                           for f in fields(EngineInputs)})


def configure_logging(verbosity: int):
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)
    logging.basicConfig(level=level,
                        format="%(levelname)s %(name)s: %(message)s")


# ── Single point ─────────────────────────────────────────────────────

def run_point(args, inputs: EngineInputs) -> int:
    """Solve and report one operating point.  Returns the exit status."""
    result = calculate_cycle(inputs)
    _print_summary(inputs, result)

    if args.output:
        csv_path = export_stations_csv(result, args.output)
        print(f"  → CSV: {csv_path}")

    if not args.no_plot or args.save_plot:
        plot_stations(result, show=not args.no_plot, save_path=args.save_plot)

    print("\n  Done.\n")
    return 0 if result.performance.is_valid else 1


# ── Sweep mode ───────────────────────────────────────────────────────

def run_sweep(args, inputs: EngineInputs) -> int:
    """Design trend sweep mode."""
    var = args.sweep
    print(f"  Sweeping '{var}' ...\n")
    results = SWEEPS[var](inputs)

    if not results:
        print("  No feasible points in the sweep range.")
        return 1

    keys = list(results[0].keys())
    print("  " + "  ".join(f"{k:>16s}" for k in keys))
    for r in results:
        print("  " + "  ".join(f"{r[k]:16.4f}" for k in keys))

    if args.output:
        csv_path = export_sweep_csv(results, args.output)
        print(f"  → CSV: {csv_path}")

    if not args.no_plot or args.save_plot:
        plot_trade_study(results, var, title=f"Trade Study: {var.upper()}",
                         show=not args.no_plot, save_path=args.save_plot)

    print("\n  Done.\n")
    return 0


# ── Envelope mode ────────────────────────────────────────────────────

def run_envelope(args, inputs: EngineInputs) -> int:
    """Mach/altitude performance map."""
    print("  Computing flight envelope ...\n")
    points = flight_envelope(inputs)
    print(f"  Feasible cells: {len(points)}")

    if points:
        best = min(points, key=lambda r: r['sfc'])
        print(f"  Lowest SFC  = {best['sfc']:.4f} kg/(N·h) at "
              f"M {best['mach']:.2f}, {best['altitude']:.1f} km")
        top = max(points, key=lambda r: r['thrust'])
        print(f"  Peak thrust = {top['thrust']/1000:.1f} kN at "
              f"M {top['mach']:.2f}, {top['altitude']:.1f} km")

    if args.output:
        csv_path = export_sweep_csv(points, args.output)
        print(f"  → CSV: {csv_path}")

    if points and (not args.no_plot or args.save_plot):
        plot_flight_envelope(points, show=not args.no_plot,
                             save_path=args.save_plot)

    print("\n  Done.\n")
    return 0 if points else 1


# ── Shared printing ──────────────────────────────────────────────────

def _print_summary(inputs: EngineInputs, result):
    """Print station table + performance summary."""
    perf = result.performance
    print(f"  ✓ Flight: H = {inputs.altitude:.2f} km, M = {inputs.mach:.2f}, "
          f"ṁ = {inputs.mass_flow:.1f} kg/s")
    print(f"  ✓ Cycle:  BPR = {inputs.bypass_ratio:.2f}, "
          f"OPR = {inputs.overall_pressure_ratio:.1f}, "
          f"FPR = {inputs.fan_pressure_ratio:.2f}, "
          f"Tt4 = {inputs.turbine_entry_temp:.0f} K")
    print()
    print("  ── Stations ────────────────────────────────────────────")
    for s in result.stations:
        kind = "total " if s.is_total else "static"
        print(f"    {s.label:>4s}  {s.name:<20s} {kind}  "
              f"T = {s.temp:8.1f} K   p = {s.pressure/1000:9.2f} kPa")
    print()

    if not perf.is_valid:
        print("  ── Infeasible cycle ────────────────────────────────────")
        print("    ⚠  The turbines or nozzles cannot close the energy balance")
        print("       at this operating point; no performance is reported.")
        return

    print("  ── Performance ─────────────────────────────────────────")
    print(f"    Net thrust        = {perf.thrust:.0f} N  "
          f"({perf.thrust/1000:.2f} kN)")
    print(f"    Specific thrust   = {perf.specific_thrust:.2f} N/(kg/s)")
    print(f"    SFC               = {perf.sfc:.5f} kg/(N·h)")
    print(f"    Fuel-air ratio    = {perf.fuel_air_ratio:.5f}")
    print(f"    HPC pressure ratio= {perf.hpc_pressure_ratio:.3f}")
    print(f"    V9 (core)         = {perf.core_velocity:.1f} m/s")
    print(f"    V19 (bypass)      = {perf.bypass_velocity:.1f} m/s")
    print(f"    η thermal         = {perf.thermal_efficiency:.4f}")
    print(f"    η propulsive      = {perf.propulsive_efficiency:.4f}")
    print(f"    η overall         = {perf.overall_efficiency:.4f}")


# ── Entry point ──────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    inputs = inputs_from_args(args)
    for name in out_of_range_fields(inputs):
        logger.warning("%s = %g is outside its typical range",
                       name, getattr(inputs, name))

    _header()
    if args.sweep:
        return run_sweep(args, inputs)
    if args.envelope:
        return run_envelope(args, inputs)
    return run_point(args, inputs)


if __name__ == "__main__":
    sys.exit(main())
