"""
trade_study.py – One-dimensional cycle trend sweeps and plotting.

Sweep one design variable (OPR, FPR or BPR) while holding the rest of the
operating point constant.  Returns results as a list of dicts (easily
convertible to a DataFrame), ordered by the swept variable, and produces
multi-panel comparison plots.  Infeasible or non-thrusting points are
dropped from the results.
"""

from __future__ import annotations
import logging
import numpy as np
import matplotlib.pyplot as plt

from tfcycle.cycle import calculate_cycle
from tfcycle.engine_inputs import EngineInputs

logger = logging.getLogger(__name__)


def sweep_values(start: float, stop: float, step: float) -> np.ndarray:
    """
    Inclusive grid start, start+step, …, stop built by index so that the
    end point is not lost to floating-point accumulation.
    """
    n = int(round((stop - start) / step)) + 1
    return np.round(np.linspace(start, stop, n), 10)


def _sweep(base: EngineInputs, field: str, key: str,
           values, skip=None) -> list[dict]:
    results = []
    for v in values:
        v = float(v)
        if skip is not None and skip(v):
            continue
        perf = calculate_cycle(base.with_changes(**{field: v})).performance
        if perf.is_valid and perf.specific_thrust > 0:
            results.append({
                key: v,
                'sfc': perf.sfc,
                'specific_thrust': perf.specific_thrust,
            })
    logger.info("%s sweep: %d of %d points feasible",
                key.upper(), len(results), len(values))
    return results


def sweep_opr(base: EngineInputs,
              values: np.ndarray | list[float] | None = None) -> list[dict]:
    """
    Sweep overall pressure ratio (default 10 … 60, step 1).

    Points with OPR ≤ base FPR are skipped (core compressor ratio ≤ 1).

    Returns list of dicts with keys: opr, sfc, specific_thrust
    """
    if values is None:
        values = sweep_values(10.0, 60.0, 1.0)
    return _sweep(base, 'overall_pressure_ratio', 'opr', values,
                  skip=lambda opr: opr <= base.fan_pressure_ratio)


def sweep_fpr(base: EngineInputs,
              values: np.ndarray | list[float] | None = None) -> list[dict]:
    """
    Sweep fan pressure ratio (default 1.1 … 4.0, step 0.1).

    Points with FPR ≥ base OPR are skipped.

    Returns list of dicts with keys: fpr, sfc, specific_thrust
    """
    if values is None:
        values = sweep_values(1.1, 4.0, 0.1)
    return _sweep(base, 'fan_pressure_ratio', 'fpr', values,
                  skip=lambda fpr: fpr >= base.overall_pressure_ratio)


def sweep_bpr(base: EngineInputs,
              values: np.ndarray | list[float] | None = None) -> list[dict]:
    """
    Sweep bypass ratio (default 0.2 … 15.0, step 0.1).

    Returns list of dicts with keys: bpr, sfc, specific_thrust
    """
    if values is None:
        values = sweep_values(0.2, 15.0, 0.1)
    return _sweep(base, 'bypass_ratio', 'bpr', values)


SWEEPS = {
    'opr': sweep_opr,
    'fpr': sweep_fpr,
    'bpr': sweep_bpr,
}


def plot_trade_study(results: list[dict], x_key: str,
                     title: str = "Trade Study",
                     *, show: bool = True,
                     save_path: str | None = None) -> plt.Figure:
    """
    Two-panel trend plot: specific thrust and SFC against the swept variable.

    Parameters
    ----------
    results : list of dicts from a sweep function
    x_key   : the key to use as the x-axis ('opr', 'fpr' or 'bpr')
    title   : plot super-title
    """
    labels = {
        'opr': 'Overall pressure ratio',
        'fpr': 'Fan pressure ratio',
        'bpr': 'Bypass ratio',
    }
    x_vals = [r[x_key] for r in results]

    fig, axes = plt.subplots(2, 1, figsize=(10, 6.4), sharex=True)

    axes[0].plot(x_vals, [r['specific_thrust'] for r in results], 'o-',
                 color='#1a73e8', lw=2, ms=3)
    axes[0].set_ylabel('Specific thrust [N/(kg/s)]', fontsize=10)
    axes[0].grid(True, ls=':', alpha=0.4)

    axes[1].plot(x_vals, [r['sfc'] for r in results], 'o-',
                 color='#d93025', lw=2, ms=3)
    axes[1].set_ylabel('SFC [kg/(N·h)]', fontsize=10)
    axes[1].grid(True, ls=':', alpha=0.4)

    axes[-1].set_xlabel(labels.get(x_key, x_key), fontsize=11)
    fig.suptitle(title, fontsize=13, fontweight='bold')
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=200, bbox_inches='tight')
    if show:
        plt.show()
    return fig
