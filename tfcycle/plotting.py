"""
plotting.py – Station-by-station gas-path chart.
"""

from __future__ import annotations
import matplotlib.pyplot as plt

from tfcycle.cycle import CalculationResult


def plot_stations(result: CalculationResult, *, show: bool = True,
                  save_path: str | None = None) -> plt.Figure:
    """
    Plot temperature and pressure along the gas path.

    Total (stagnation) values are drawn as filled markers, static values
    (ambient and nozzle exits) as hollow ones.

    Parameters
    ----------
    result    : CalculationResult from ``calculate_cycle``
    show      : call plt.show()
    save_path : if given, save to file

    Returns
    -------
    matplotlib Figure
    """
    stations = result.stations
    idx = list(range(len(stations)))
    labels = [s.label for s in stations]
    temps = [s.temp for s in stations]
    press = [s.pressure / 1000.0 for s in stations]

    fig, (ax_t, ax_p) = plt.subplots(2, 1, figsize=(10, 7), sharex=True)

    for ax, y, color, ylabel in (
        (ax_t, temps, '#d93025', 'Temperature [K]'),
        (ax_p, press, '#1a73e8', 'Pressure [kPa]'),
    ):
        # core path up to the core nozzle; bypass exit drawn on its own
        ax.plot(idx[:-1], y[:-1], '-', color=color, lw=1.5, alpha=0.7)
        for i, s in enumerate(stations):
            ax.plot(i, y[i], 'o', color=color, ms=7,
                    mfc=color if s.is_total else 'white', zorder=5)
        ax.set_ylabel(ylabel)
        ax.grid(True, ls=':', alpha=0.4)

    ax_p.set_xticks(idx)
    ax_p.set_xticklabels(labels)
    ax_p.set_xlabel('Station')

    title = 'Gas-Path Stations'
    if not result.performance.is_valid:
        title += '  (infeasible cycle)'
    fig.suptitle(title, fontsize=13, fontweight='bold')
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=200, bbox_inches='tight')
    if show:
        plt.show()
    return fig
