"""
envelope.py – Flight-envelope performance map.

Solves the cycle over a Mach × altitude grid.  The engine is assumed to run
at constant corrected flow (fixed rotational speed), so the design mass
flow is taken as a corrected flow and rescaled to the physical flow of
each cell:

    ṁ = ṁ_corr · δ / √θ,   θ = Tt2/288.15,   δ = Pt2/101325

The map is built in three separable stages: grid generation, per-cell
solve, and collection of the feasible cells.
"""

from __future__ import annotations
import logging
from concurrent.futures import Executor
from functools import partial

import numpy as np
import matplotlib.pyplot as plt

from tfcycle.cycle import calculate_cycle
from tfcycle.engine_inputs import EngineInputs
from tfcycle.gas_dynamics import (
    inlet_conditions,
    corrected_flow_ratios,
    physical_mass_flow,
)

logger = logging.getLogger(__name__)

MACH_STEPS = 50
ALT_STEPS = 40
MAX_MACH = 2.5
MAX_ALT = 20.0   # km


def envelope_grid(max_mach: float = MAX_MACH, max_alt: float = MAX_ALT,
                  mach_steps: int = MACH_STEPS,
                  alt_steps: int = ALT_STEPS) -> list[tuple[float, float]]:
    """
    (mach, altitude_km) cells, Mach-major and altitude-minor, with
    (mach_steps + 1) × (alt_steps + 1) entries.
    """
    return [
        ((i / mach_steps) * max_mach, (j / alt_steps) * max_alt)
        for i in range(mach_steps + 1)
        for j in range(alt_steps + 1)
    ]


def cell_mass_flow(base: EngineInputs, mach: float, altitude: float) -> float:
    """Physical air mass flow [kg/s] of a cell at constant corrected flow."""
    Tt2, Pt2 = inlet_conditions(altitude, mach, base.pressure_recovery_inlet)
    theta, delta = corrected_flow_ratios(Tt2, Pt2)
    return physical_mass_flow(base.mass_flow, theta, delta)


def solve_envelope_cell(base: EngineInputs, cell: tuple[float, float]) -> dict:
    """
    Solve one grid cell.

    Returns dict with keys: mach, altitude, sfc, thrust, is_valid
    """
    mach, altitude = cell
    inputs = base.with_changes(
        altitude=altitude, mach=mach,
        mass_flow=cell_mass_flow(base, mach, altitude),
    )
    perf = calculate_cycle(inputs).performance
    return {
        'mach': mach,
        'altitude': altitude,
        'sfc': perf.sfc,
        'thrust': perf.thrust,
        'is_valid': perf.is_valid,
    }


def flight_envelope(base: EngineInputs,
                    max_mach: float = MAX_MACH,
                    max_alt: float = MAX_ALT,
                    mach_steps: int = MACH_STEPS,
                    alt_steps: int = ALT_STEPS,
                    executor: Executor | None = None) -> list[dict]:
    """
    Compute the envelope map; only feasible cells with positive thrust are
    kept, in grid order.

    Parameters
    ----------
    base      : reference operating point; its ``mass_flow`` is the design
                corrected flow
    max_mach, max_alt, mach_steps, alt_steps : grid definition
    executor  : optional ``concurrent.futures`` executor; cells are
                independent and may be solved in parallel

    Returns
    -------
    list of dicts with keys: mach, altitude, sfc, thrust, is_valid
    """
    grid = envelope_grid(max_mach, max_alt, mach_steps, alt_steps)
    solve = partial(solve_envelope_cell, base)
    cells = executor.map(solve, grid) if executor is not None else map(solve, grid)

    results = [c for c in cells if c['is_valid'] and c['thrust'] > 0]
    logger.info("Envelope: %d of %d cells feasible", len(results), len(grid))
    return results


def plot_flight_envelope(points: list[dict], *, show: bool = True,
                         save_path: str | None = None) -> plt.Figure:
    """Two-panel Mach–altitude map coloured by thrust and by SFC."""
    mach = np.array([p['mach'] for p in points])
    alt = np.array([p['altitude'] for p in points])
    thrust = np.array([p['thrust'] for p in points])
    sfc = np.array([p['sfc'] for p in points])

    fig, axes = plt.subplots(1, 2, figsize=(13, 5), sharey=True)

    sc = axes[0].scatter(mach, alt, c=thrust / 1000, cmap='viridis',
                         marker='s', s=18)
    fig.colorbar(sc, ax=axes[0], label='Thrust [kN]')
    axes[0].set_title('Net thrust')
    axes[0].set_ylabel('Altitude [km]')

    sc = axes[1].scatter(mach, alt, c=sfc, cmap='inferno_r',
                         marker='s', s=18)
    fig.colorbar(sc, ax=axes[1], label='SFC [kg/(N·h)]')
    axes[1].set_title('Specific fuel consumption')

    for ax in axes:
        ax.set_xlabel('Mach number')
        ax.grid(True, ls=':', alpha=0.4)

    fig.suptitle('Flight Envelope Performance', fontsize=13,
                 fontweight='bold')
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=200, bbox_inches='tight')
    if show:
        plt.show()
    return fig
