"""
gas_properties.py – Constant-property gas tables for the cycle.

Two property sets are used throughout the solver:

COLD_AIR : unburned air (inlet, fan, compressor, bypass duct/nozzle)
HOT_GAS  : mean combustion products (turbines, core nozzle)

Fields
------
cp    : specific heat at constant pressure  [J/(kg·K)]
gamma : ratio of specific heats  (γ)

Derived quantities
------------------
R              : specific gas constant used for velocities and densities
gamma_exponent : γ/(γ-1), the isentropic pressure–temperature exponent
"""

from __future__ import annotations
from dataclasses import dataclass

from tfcycle.atmosphere import R_AIR   # one gas constant for both streams


@dataclass(frozen=True)
class GasProperties:
    name: str
    cp: float        # J/(kg·K)
    gamma: float

    @property
    def R(self) -> float:
        return R_AIR

    @property
    def gamma_exponent(self) -> float:
        """γ/(γ-1)"""
        return self.gamma / (self.gamma - 1.0)


# ── Built-in property sets ──────────────────────────────────────────
# Sources: piecewise-constant textbook values (Mattingly; Farokhi).

GAS_DB: dict[str, GasProperties] = {}


def _register(g: GasProperties):
    GAS_DB[g.name.lower()] = g


COLD_AIR = GasProperties(name="Cold air", cp=1005.0, gamma=1.4)
HOT_GAS = GasProperties(name="Hot gas", cp=1150.0, gamma=1.33)

_register(COLD_AIR)
_register(HOT_GAS)


def get_gas(name: str) -> GasProperties:
    """Lookup by case-insensitive name.  Raises KeyError if not found."""
    key = name.lower().replace("_", " ").strip()
    try:
        return GAS_DB[key]
    except KeyError:
        raise KeyError(
            f"Unknown gas '{name}'.  Available: {list(GAS_DB.keys())}"
        ) from None
