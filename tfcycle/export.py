"""
export.py – CSV export for station tables and sweep results.
"""

from __future__ import annotations
from pathlib import Path

from tfcycle.cycle import CalculationResult


def export_stations_csv(result: CalculationResult, path: str | Path) -> Path:
    """
    Write the station table of a solved cycle to CSV.

    Columns: label, name, temp_K, pressure_Pa, is_total

    Returns
    -------
    Resolved Path of the written file.
    """
    path = Path(path).expanduser().resolve()

    with open(path, "w") as f:
        f.write("label,name,temp_K,pressure_Pa,is_total\n")
        for s in result.stations:
            f.write(f"{s.label},{s.name},{s.temp:.6e},{s.pressure:.6e},"
                    f"{int(s.is_total)}\n")

    return path


def export_sweep_csv(results: list[dict], path: str | Path) -> Path:
    """
    Write a list of sweep dicts to CSV, one row per point.  The header is
    taken from the keys of the first point; an empty list writes nothing
    but an empty file.

    Returns
    -------
    Resolved Path of the written file.
    """
    path = Path(path).expanduser().resolve()

    with open(path, "w") as f:
        if not results:
            return path
        keys = list(results[0].keys())
        f.write(",".join(keys) + "\n")
        for r in results:
            vals = []
            for k in keys:
                v = r[k]
                if isinstance(v, bool):
                    vals.append(str(int(v)))
                elif isinstance(v, float):
                    vals.append(f"{v:.8e}")
                else:
                    vals.append(str(v))
            f.write(",".join(vals) + "\n")

    return path
