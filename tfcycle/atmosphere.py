"""
atmosphere.py – Two-layer ISA (International Standard Atmosphere) model.

Provides ambient static temperature and pressure as a function of geometric
altitude.  Only the troposphere and the isothermal lower stratosphere are
modelled; above ~20 km the isothermal layer is simply extended.
"""

from __future__ import annotations
import math

# ISA sea-level constants
T0_ISA = 288.15    # K
P0_ISA = 101325.0  # Pa
R_AIR = 287.05     # J/(kg·K)
g0 = 9.80665       # m/s²

LAPSE_RATE = 0.0065        # K/m
H_TROPOPAUSE = 11000.0     # m
T_TROPOPAUSE = 216.65      # K
P_TROPOPAUSE = 22632.1     # Pa
PRESSURE_EXPONENT = 5.25588


def isa(altitude_km: float) -> tuple[float, float]:
    """
    Return (T [K], p [Pa]) at geometric altitude given in **kilometres**.

    Layers
    ------
    0–11 km : troposphere   (lapse −6.5 K/km)
    >11 km  : stratosphere  (isothermal 216.65 K, exponential pressure decay)
    """
    h = altitude_km * 1000.0

    if h <= H_TROPOPAUSE:
        T = T0_ISA - LAPSE_RATE * h
        p = P0_ISA * (1.0 - LAPSE_RATE * h / T0_ISA) ** PRESSURE_EXPONENT
    else:
        T = T_TROPOPAUSE
        p = P_TROPOPAUSE * math.exp(-g0 * (h - H_TROPOPAUSE) / (R_AIR * T))

    return T, p


def pressure(altitude_km: float) -> float:
    """Ambient static pressure [Pa] at altitude [km]."""
    return isa(altitude_km)[1]


def temperature(altitude_km: float) -> float:
    """Ambient static temperature [K] at altitude [km]."""
    return isa(altitude_km)[0]
