"""
cycle.py – On-design cycle of a two-spool, separate-exhaust turbofan.

Walks the gas path station by station from the free stream through inlet,
fan, high-pressure compressor, combustor, high- and low-pressure turbines
and both exhaust nozzles, then aggregates thrust, SFC and efficiencies.

The solver never raises for infeasible physics.  Any step whose energy
balance cannot be closed sets ``is_valid`` to False, and the headline
performance numbers are then reported as zero.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass

from tfcycle.atmosphere import isa
from tfcycle.engine_inputs import EngineInputs
from tfcycle.gas_dynamics import (
    ram_temperature_ratio,
    ram_pressure_ratio,
    compressor_exit_temperature,
    turbine_pressure_term,
    turbine_pressure_ratio,
)
from tfcycle.gas_properties import COLD_AIR, HOT_GAS, R_AIR
from tfcycle.nozzle import NozzleExit, expand_nozzle, effective_velocity

logger = logging.getLogger(__name__)

HPC_PRESSURE_RATIO_FLOOR = 1.1
PROPULSIVE_EFFICIENCY_CAP = 0.999

STATION_LABELS = ("0", "2", "2.5", "3", "4", "4.5", "5", "9", "19")


@dataclass(frozen=True)
class StationResult:
    """One gas-path station."""
    name: str
    label: str
    temp: float         # K
    pressure: float     # Pa
    is_total: bool      # total (stagnation) vs static values


@dataclass(frozen=True)
class PerformanceResult:
    """Derived performance of one solved cycle."""
    thrust: float                   # net thrust  [N]
    specific_thrust: float          # N/(kg/s)
    sfc: float                      # kg/(N·h)
    mass_flow_air: float            # kg/s
    fuel_air_ratio: float
    bypass_velocity: float          # V19  [m/s]
    core_velocity: float            # V9   [m/s]
    thermal_efficiency: float
    propulsive_efficiency: float
    overall_efficiency: float
    fan_pressure_ratio: float
    hpc_pressure_ratio: float
    is_valid: bool


@dataclass(frozen=True)
class CalculationResult:
    stations: tuple[StationResult, ...]
    performance: PerformanceResult

    def station(self, label: str) -> StationResult:
        """Lookup a station by its label.  Raises KeyError if not found."""
        for s in self.stations:
            if s.label == label:
                return s
        raise KeyError(
            f"Unknown station '{label}'.  Available: {list(STATION_LABELS)}"
        )


# ──────────────────────────────────────────────────────────────────────
# Feasibility helpers
# ──────────────────────────────────────────────────────────────────────

def hpc_pressure_ratio(overall_pressure_ratio: float,
                       fan_pressure_ratio: float) -> float:
    """OPR / FPR, floored at 1.1 so the core compressor always compresses."""
    return max(HPC_PRESSURE_RATIO_FLOOR,
               overall_pressure_ratio / fan_pressure_ratio)


def positive_divisors(inputs: EngineInputs) -> bool:
    """
    True when every quantity the gas path divides by or raises to a
    fractional power is usable: component and spool efficiencies, Tt4 and
    FPR strictly positive, bypass ratio non-negative.
    """
    divisors = (
        inputs.efficiency_fan,
        inputs.efficiency_hpc,
        inputs.efficiency_hpt,
        inputs.efficiency_lpt,
        inputs.mech_efficiency_high,
        inputs.mech_efficiency_low,
        inputs.turbine_entry_temp,
        inputs.fan_pressure_ratio,
    )
    return all(d > 0 for d in divisors) and inputs.bypass_ratio >= 0


def fuel_air_ratio(Tt3: float, Tt4: float, eta_burner: float,
                   Hu: float) -> float:
    """
    Burner fuel-air ratio from the steady energy balance, Hu in J/kg.

        f = (cp_h·Tt4 - cp_c·Tt3) / (η_b·Hu - cp_h·Tt4)

    Negative results (no heat addition needed) are clamped to zero, as is
    a fuel whose released heat cannot reach Tt4 (η_b·Hu ≤ cp_h·Tt4).
    """
    numerator = HOT_GAS.cp * Tt4 - COLD_AIR.cp * Tt3
    denominator = eta_burner * Hu - HOT_GAS.cp * Tt4
    if denominator <= 0:
        return 0.0
    return max(0.0, numerator / denominator)


def turbine_pressure_ratio_or_none(tau_t: float, eta: float) -> float | None:
    """
    Expansion ratio of a turbine with temperature ratio τ_t, or None when
    the stage cannot deliver the work: τ_t outside (0, 1) or
    (1 - τ_t)/η ≥ 1.
    """
    if not 0 < tau_t < 1:
        return None
    if turbine_pressure_term(tau_t, eta) >= 1:
        return None
    return turbine_pressure_ratio(tau_t, HOT_GAS.gamma, eta)


def _exit_area_per_unit_flow(flow: float, rho: float, V: float) -> float:
    """A = ṁ/(ρ·V) per unit core flow; a stagnant stream has no area term."""
    if rho * V <= 0:
        return 0.0
    return flow / (rho * V)


def clamp_propulsive_efficiency(eta_p: float) -> float:
    return min(eta_p, PROPULSIVE_EFFICIENCY_CAP)


def finite_or_zero(x: float) -> float:
    """Replace NaN / ±inf by 0."""
    return x if math.isfinite(x) else 0.0


# ──────────────────────────────────────────────────────────────────────
# Cycle solver
# ──────────────────────────────────────────────────────────────────────

def calculate_cycle(inputs: EngineInputs) -> CalculationResult:
    """
    Solve the cycle for one operating point.

    Parameters
    ----------
    inputs : EngineInputs

    Returns
    -------
    CalculationResult with exactly nine stations ("0" … "19") and the
    performance summary.  ``performance.is_valid`` is False when any
    turbine or nozzle step is infeasible.
    """
    cold, hot = COLD_AIR, HOT_GAS
    BPR = inputs.bypass_ratio
    m_dot = inputs.mass_flow
    Hu = inputs.heating_value * 1e6   # MJ/kg → J/kg
    is_valid = True
    reasons = []

    # 0 – free stream
    T0, P0 = isa(inputs.altitude)
    V0 = inputs.mach * math.sqrt(cold.gamma * R_AIR * T0)

    # 0 → 2 – inlet (adiabatic, total-pressure loss only)
    Tt2 = T0 * ram_temperature_ratio(inputs.mach, cold.gamma)
    Pt2 = P0 * ram_pressure_ratio(inputs.mach, cold.gamma) \
        * inputs.pressure_recovery_inlet

    if not positive_divisors(inputs):
        logger.debug("Infeasible cycle at H=%.2f km, M=%.2f: "
                     "non-positive efficiency, Tt4 or FPR",
                     inputs.altitude, inputs.mach)
        return _degenerate_result(inputs, T0, P0, Tt2, Pt2)

    # 2 → 13 – fan; the core stream (21) leaves at the same state
    pi_f = inputs.fan_pressure_ratio
    Pt13 = Pt2 * pi_f
    Tt13 = compressor_exit_temperature(Tt2, pi_f, cold.gamma,
                                       inputs.efficiency_fan)
    Pt21, Tt21 = Pt13, Tt13

    # 21 → 3 – high-pressure compressor
    pi_hpc = hpc_pressure_ratio(inputs.overall_pressure_ratio, pi_f)
    Pt3 = Pt21 * pi_hpc
    Tt3 = compressor_exit_temperature(Tt21, pi_hpc, cold.gamma,
                                      inputs.efficiency_hpc)

    # 3 → 4 – combustor
    Pt4 = Pt3 * inputs.pressure_recovery_burner
    Tt4 = inputs.turbine_entry_temp
    f = fuel_air_ratio(Tt3, Tt4, inputs.efficiency_burner, Hu)

    # 4 → 4.5 – HPT drives the HPC
    w_hpc = cold.cp * (Tt3 - Tt21) / inputs.mech_efficiency_high
    Tt45 = Tt4 - w_hpc / ((1.0 + f) * hot.cp)
    Pt45 = Pt4
    if Tt45 < Tt3:
        is_valid = False
        reasons.append("HPT exit below HPC exit temperature")
    pi_hpt = turbine_pressure_ratio_or_none(Tt45 / Tt4, inputs.efficiency_hpt)
    if pi_hpt is None:
        is_valid = False
        reasons.append("HPT cannot supply HPC work")
    else:
        Pt45 = Pt4 / pi_hpt

    # 4.5 → 5 – LPT drives the fan (core + bypass flow)
    w_fan = (1.0 + BPR) * cold.cp * (Tt13 - Tt2) / inputs.mech_efficiency_low
    Tt5 = Tt45 - w_fan / ((1.0 + f) * hot.cp)
    Pt5 = Pt45
    if Tt5 < T0:
        is_valid = False
        reasons.append("LPT exit below ambient temperature")
    pi_lpt = turbine_pressure_ratio_or_none(Tt5 / Tt45, inputs.efficiency_lpt)
    if pi_lpt is None:
        is_valid = False
        reasons.append("LPT cannot supply fan work")
    else:
        Pt5 = Pt45 / pi_lpt

    # 5 → 9, 13 → 19 – nozzles
    Pt9 = Pt5 * inputs.pressure_recovery_nozzle
    Pt19 = Pt13 * inputs.pressure_recovery_nozzle
    core = NozzleExit(P=P0, T=Tt5, V=0.0, choked=False, valid=False)
    bypass = NozzleExit(P=P0, T=Tt13, V=0.0, choked=False, valid=False)
    if is_valid:
        core = expand_nozzle(Pt9, Tt5, P0, hot)
        if not core.valid:
            is_valid = False
            reasons.append("core nozzle total pressure below ambient")
    if is_valid:
        bypass = expand_nozzle(Pt19, Tt13, P0, cold)
        if not bypass.valid:
            is_valid = False
            reasons.append("bypass nozzle total pressure below ambient")

    # performance
    specific_thrust = 0.0
    thrust = 0.0
    sfc = 0.0
    eta_th = 0.0
    eta_p = 0.0
    eta_o = 0.0

    if is_valid:
        rho9 = core.density(R_AIR)
        A9 = _exit_area_per_unit_flow(1.0 + f, rho9, core.V)
        F_core = (1.0 + f) * core.V - V0 + (core.P - P0) * A9

        rho19 = bypass.density(R_AIR)
        A19 = _exit_area_per_unit_flow(BPR, rho19, bypass.V)
        F_bypass = BPR * (bypass.V - V0) + (bypass.P - P0) * A19

        specific_thrust = (F_core + F_bypass) / (1.0 + BPR)
        thrust = specific_thrust * m_dot

        m_core = m_dot / (1.0 + BPR)
        if thrust > 0:
            sfc = f * m_core * 3600.0 / thrust

        # kinetic-energy bookkeeping with pressure thrust folded into V_eff
        V9_eff = effective_velocity(core.V, core.P, P0, rho9)
        V19_eff = effective_velocity(bypass.V, bypass.P, P0, rho19)
        ke_out = 0.5 * m_core * (1.0 + f) * V9_eff ** 2 \
            + 0.5 * (m_dot - m_core) * V19_eff ** 2
        ke_in = 0.5 * m_dot * V0 ** 2
        q_in = m_core * f * Hu

        if q_in > 0:
            eta_th = (ke_out - ke_in) / q_in
            if ke_out - ke_in > 0:
                eta_p = thrust * V0 / (ke_out - ke_in)
        eta_p = clamp_propulsive_efficiency(eta_p)
        eta_o = eta_th * eta_p
    else:
        logger.debug("Infeasible cycle at H=%.2f km, M=%.2f: %s",
                     inputs.altitude, inputs.mach, "; ".join(reasons))

    stations = (
        StationResult("Ambient", "0", T0, P0, False),
        StationResult("Inlet exit", "2", Tt2, Pt2, True),
        StationResult("Fan exit", "2.5", Tt13, Pt13, True),
        StationResult("HPC exit", "3", Tt3, Pt3, True),
        StationResult("Burner exit", "4", Tt4, Pt4, True),
        StationResult("HPT exit", "4.5", Tt45, Pt45, True),
        StationResult("LPT exit", "5", Tt5, Pt5, True),
        StationResult("Core nozzle exit", "9", core.T, core.P, False),
        StationResult("Bypass nozzle exit", "19", bypass.T, bypass.P, False),
    )

    performance = PerformanceResult(
        thrust=finite_or_zero(thrust),
        specific_thrust=finite_or_zero(specific_thrust),
        sfc=finite_or_zero(sfc),
        mass_flow_air=m_dot,
        fuel_air_ratio=f,
        bypass_velocity=bypass.V,
        core_velocity=core.V,
        thermal_efficiency=eta_th,
        propulsive_efficiency=eta_p,
        overall_efficiency=eta_o,
        fan_pressure_ratio=pi_f,
        hpc_pressure_ratio=pi_hpc,
        is_valid=is_valid,
    )
    return CalculationResult(stations=stations, performance=performance)


def _degenerate_result(inputs: EngineInputs, T0: float, P0: float,
                       Tt2: float, Pt2: float) -> CalculationResult:
    """
    Invalid result for inputs the gas path cannot be evaluated with.
    Downstream stations hold the inlet state; Tt4 is still the input.
    """
    pi_f = inputs.fan_pressure_ratio
    if pi_f > 0:
        pi_hpc = hpc_pressure_ratio(inputs.overall_pressure_ratio, pi_f)
    else:
        pi_hpc = HPC_PRESSURE_RATIO_FLOOR
    Tt4 = inputs.turbine_entry_temp

    stations = (
        StationResult("Ambient", "0", T0, P0, False),
        StationResult("Inlet exit", "2", Tt2, Pt2, True),
        StationResult("Fan exit", "2.5", Tt2, Pt2, True),
        StationResult("HPC exit", "3", Tt2, Pt2, True),
        StationResult("Burner exit", "4", Tt4, Pt2, True),
        StationResult("HPT exit", "4.5", Tt4, Pt2, True),
        StationResult("LPT exit", "5", Tt4, Pt2, True),
        StationResult("Core nozzle exit", "9", Tt4, P0, False),
        StationResult("Bypass nozzle exit", "19", Tt2, P0, False),
    )

    performance = PerformanceResult(
        thrust=0.0,
        specific_thrust=0.0,
        sfc=0.0,
        mass_flow_air=inputs.mass_flow,
        fuel_air_ratio=0.0,
        bypass_velocity=0.0,
        core_velocity=0.0,
        thermal_efficiency=0.0,
        propulsive_efficiency=0.0,
        overall_efficiency=0.0,
        fan_pressure_ratio=pi_f,
        hpc_pressure_ratio=pi_hpc,
        is_valid=False,
    )
    return CalculationResult(stations=stations, performance=performance)
