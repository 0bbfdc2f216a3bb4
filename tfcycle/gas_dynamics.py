"""
gas_dynamics.py – Isentropic relations for the turbofan gas path.

All functions assume a calorically perfect ideal gas with constant γ.
Compression and expansion stages use constant adiabatic (isentropic)
efficiencies; no component maps are involved.
References: Mattingly, *Elements of Propulsion*; Farokhi, *Aircraft
Propulsion*.
"""

from __future__ import annotations
import math

from tfcycle.atmosphere import isa, T0_ISA, P0_ISA
from tfcycle.gas_properties import COLD_AIR

# ──────────────────────────────────────────────────────────────────────
# Ram (free-stream stagnation) ratios
# ──────────────────────────────────────────────────────────────────────

def ram_temperature_ratio(M: float, gamma: float) -> float:
    """τ_r = Tt/T = 1 + (γ-1)/2 · M²"""
    return 1.0 + 0.5 * (gamma - 1.0) * M * M


def ram_pressure_ratio(M: float, gamma: float) -> float:
    """π_r = Pt/p = τ_r^(γ/(γ-1))"""
    return ram_temperature_ratio(M, gamma) ** (gamma / (gamma - 1.0))


# ──────────────────────────────────────────────────────────────────────
# Compression / expansion with adiabatic efficiency
# ──────────────────────────────────────────────────────────────────────

def compressor_exit_temperature(Tt_in: float, pi: float, gamma: float,
                                eta: float) -> float:
    """
    Actual exit total temperature of a compressor (actual rise > ideal).

        Tt_out = Tt_in · (1 + (π^((γ-1)/γ) - 1) / η)
    """
    return Tt_in * (1.0 + (pi ** ((gamma - 1.0) / gamma) - 1.0) / eta)


def turbine_exit_temperature(Tt_in: float, pi: float, gamma: float,
                             eta: float) -> float:
    """
    Actual exit total temperature of a turbine expanding by π = Pt_in/Pt_out
    (actual drop < ideal).

        Tt_out = Tt_in · (1 - (1 - π^(-(γ-1)/γ)) · η)

    A non-positive π gives back Tt_in.
    """
    if pi <= 0:
        return Tt_in
    return Tt_in * (1.0 - (1.0 - (1.0 / pi) ** ((gamma - 1.0) / gamma)) * eta)


def turbine_pressure_term(tau_t: float, eta: float) -> float:
    """(1 - τ_t)/η, the ideal fractional temperature drop of a turbine."""
    return (1.0 - tau_t) / eta


def turbine_pressure_ratio(tau_t: float, gamma: float, eta: float) -> float:
    """
    Expansion ratio Pt_in/Pt_out back-solved from the actual temperature
    ratio τ_t = Tt_out/Tt_in.

        π_t = (1 / (1 - (1 - τ_t)/η))^(γ/(γ-1))

    Caller is responsible for 0 < τ_t < 1 and (1 - τ_t)/η < 1.
    """
    term = turbine_pressure_term(tau_t, eta)
    return (1.0 / (1.0 - term)) ** (gamma / (gamma - 1.0))


# ──────────────────────────────────────────────────────────────────────
# Nozzle choking
# ──────────────────────────────────────────────────────────────────────

def critical_pressure_ratio(gamma: float) -> float:
    """Pt/p* = ((γ+1)/2)^(γ/(γ-1)); above this a convergent nozzle chokes."""
    return ((gamma + 1.0) / 2.0) ** (gamma / (gamma - 1.0))


def critical_temperature_ratio(gamma: float) -> float:
    """T*/Tt = 2/(γ+1)"""
    return 2.0 / (gamma + 1.0)


# ──────────────────────────────────────────────────────────────────────
# Inlet conditions and corrected flow
# ──────────────────────────────────────────────────────────────────────

def inlet_conditions(altitude_km: float, mach: float,
                     recovery: float) -> tuple[float, float]:
    """
    Return (Tt2 [K], Pt2 [Pa]) at the fan face for a flight condition.

    The intake is adiabatic; only total pressure is lost, through the
    recovery factor σ_i.
    """
    T0, P0 = isa(altitude_km)
    gamma = COLD_AIR.gamma
    Tt2 = T0 * ram_temperature_ratio(mach, gamma)
    Pt2 = P0 * ram_pressure_ratio(mach, gamma) * recovery
    return Tt2, Pt2


def corrected_flow_ratios(Tt: float, Pt: float) -> tuple[float, float]:
    """(θ, δ) = (Tt / 288.15 K, Pt / 101325 Pa)"""
    return Tt / T0_ISA, Pt / P0_ISA


def physical_mass_flow(corrected_flow: float, theta: float,
                       delta: float) -> float:
    """ṁ = ṁ_corr · δ / √θ"""
    return corrected_flow * delta / math.sqrt(theta)
