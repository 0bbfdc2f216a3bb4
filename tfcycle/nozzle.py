"""
nozzle.py – Convergent exhaust nozzle for one stream.

Each stream (core 5→9, bypass 13→19) is expanded independently.  Above the
critical pressure ratio the nozzle chokes: exit flow is sonic and exit
static pressure stays above ambient.  Below it the stream expands fully to
ambient pressure.
"""

from __future__ import annotations
import math
from dataclasses import dataclass

from tfcycle.gas_dynamics import critical_pressure_ratio, critical_temperature_ratio
from tfcycle.gas_properties import GasProperties


@dataclass(frozen=True)
class NozzleExit:
    """Static exit state of a convergent nozzle."""
    P: float            # exit static pressure  [Pa]
    T: float            # exit static temperature  [K]
    V: float            # exit velocity  [m/s]
    choked: bool
    valid: bool         # False if the stream cannot expand at all

    def density(self, R: float) -> float:
        """ρ = p / (R·T)"""
        return self.P / (R * self.T)


def expand_nozzle(Pt: float, Tt: float, P0: float,
                  gas: GasProperties) -> NozzleExit:
    """
    Expand a stream of total state (Pt, Tt) against ambient pressure P0.

    Parameters
    ----------
    Pt  : nozzle-inlet total pressure (after nozzle recovery)  [Pa]
    Tt  : nozzle-inlet total temperature  [K]
    P0  : ambient static pressure  [Pa]
    gas : property set of the stream

    Returns
    -------
    NozzleExit; ``valid`` is False when an unchoked nozzle has Pt ≤ P0.
    """
    gamma = gas.gamma
    crit = critical_pressure_ratio(gamma)

    if Pt > crit * P0:
        P = Pt / crit
        T = Tt * critical_temperature_ratio(gamma)
        V = math.sqrt(gamma * gas.R * T)
        return NozzleExit(P=P, T=T, V=V, choked=True, valid=True)

    if Pt > P0:
        T = Tt * (P0 / Pt) ** ((gamma - 1.0) / gamma)
        V = math.sqrt(max(0.0, 2.0 * gas.cp * (Tt - T)))
        return NozzleExit(P=P0, T=T, V=V, choked=False, valid=True)

    return NozzleExit(P=P0, T=Tt, V=0.0, choked=False, valid=False)


def effective_velocity(V: float, P: float, P0: float, rho: float) -> float:
    """
    Effective exhaust velocity folding pressure thrust into momentum.

        V_eff = V + (P - P0) / (ρ · V)

    Only applied for a moving stream (V > 1 m/s) of positive density;
    otherwise V is returned unchanged.
    """
    if V > 1.0 and rho > 0:
        return V + (P - P0) / (rho * V)
    return V
