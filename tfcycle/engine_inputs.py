"""
engine_inputs.py – Operating-point and engine-design input record.

An ``EngineInputs`` describes one flight condition together with the cycle
design and component losses of a two-spool, separate-exhaust turbofan.
Records are immutable; sweeps derive modified copies with ``with_changes``.

The default values form the reference cruise point: a modern high-bypass
engine (GE90-class) at 10.7 km, Mach 0.83.
"""

from __future__ import annotations
from dataclasses import dataclass, fields, replace


@dataclass(frozen=True)
class EngineInputs:
    # flight condition
    altitude: float = 10.7                  # km
    mach: float = 0.83
    mass_flow: float = 1350.0               # total air mass flow  [kg/s]

    # cycle design
    bypass_ratio: float = 9.0
    overall_pressure_ratio: float = 42.0
    fan_pressure_ratio: float = 1.65
    turbine_entry_temp: float = 1650.0      # Tt4  [K]

    # component adiabatic efficiencies
    efficiency_fan: float = 0.92
    efficiency_lpc: float = 0.90            # accepted, not used (see below)
    efficiency_hpc: float = 0.90
    efficiency_hpt: float = 0.92
    efficiency_lpt: float = 0.93
    efficiency_burner: float = 0.995

    # total-pressure recovery
    pressure_recovery_inlet: float = 0.98
    pressure_recovery_burner: float = 0.96
    pressure_recovery_nozzle: float = 0.99

    # spool mechanical efficiencies
    mech_efficiency_high: float = 0.99
    mech_efficiency_low: float = 0.99

    # fuel
    heating_value: float = 43.1             # Hu  [MJ/kg]  (Jet A-1)

    # ``efficiency_lpc`` is kept for record compatibility only: the cycle
    # merges the booster into the fan stage and never reads it.

    def with_changes(self, **changes) -> "EngineInputs":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


DEFAULT_INPUTS = EngineInputs()


# ── Typical control-surface ranges ───────────────────────────────────
# (min, max) for each field; the solver itself accepts any finite value.

INPUT_RANGES: dict[str, tuple[float, float]] = {
    'altitude': (0.0, 20.0),
    'mach': (0.0, 3.0),
    'mass_flow': (10.0, 2000.0),
    'bypass_ratio': (0.0, 15.0),
    'overall_pressure_ratio': (10.0, 60.0),
    'fan_pressure_ratio': (1.1, 4.0),
    'turbine_entry_temp': (1000.0, 2200.0),
    'efficiency_fan': (0.8, 0.99),
    'efficiency_hpc': (0.8, 0.99),
    'efficiency_hpt': (0.8, 0.99),
    'efficiency_lpt': (0.8, 0.99),
    'pressure_recovery_inlet': (0.8, 1.0),
    'pressure_recovery_burner': (0.9, 0.99),
    'pressure_recovery_nozzle': (0.9, 0.99),
}


def out_of_range_fields(inputs: EngineInputs) -> list[str]:
    """Names of fields lying outside ``INPUT_RANGES``, in declaration order."""
    flagged = []
    for f in fields(inputs):
        bounds = INPUT_RANGES.get(f.name)
        if bounds is None:
            continue
        lo, hi = bounds
        value = getattr(inputs, f.name)
        if not lo <= value <= hi:
            flagged.append(f.name)
    return flagged
