"""
Tests for tfcycle.cycle

Reference point (GE90-class cruise): 10.7 km, M 0.83, ṁ 1350 kg/s, BPR 9,
OPR 42, FPR 1.65, Tt4 1650 K  →  Fn ≈ 215 kN, SFC ≈ 0.0613 kg/(N·h),
both nozzles choked.  The SFC matches the value the legacy web tool
reports for the same inputs, so the bound below is kept tight.
"""

import math
import pytest

from tfcycle.atmosphere import isa
from tfcycle.cycle import (
    calculate_cycle,
    hpc_pressure_ratio,
    fuel_air_ratio,
    turbine_pressure_ratio_or_none,
    clamp_propulsive_efficiency,
    finite_or_zero,
    positive_divisors,
    STATION_LABELS,
)
from tfcycle.gas_dynamics import ram_pressure_ratio
from tfcycle.nozzle import expand_nozzle, effective_velocity
from tfcycle.gas_properties import COLD_AIR, HOT_GAS


class TestReferenceCruise:

    def test_valid(self, cruise_result):
        assert cruise_result.performance.is_valid

    def test_thrust_positive(self, cruise_result):
        perf = cruise_result.performance
        assert perf.thrust > 0
        assert perf.specific_thrust > 0
        assert perf.thrust == pytest.approx(perf.specific_thrust * 1350.0)

    def test_sfc_plausible(self, cruise_result):
        # legacy tool: 0.0613 kg/(N·h)
        assert 0.03 < cruise_result.performance.sfc < 0.065

    def test_efficiencies_plausible(self, cruise_result):
        perf = cruise_result.performance
        assert 0.3 < perf.thermal_efficiency < 0.7
        assert 0.5 < perf.propulsive_efficiency <= 0.999
        assert perf.overall_efficiency == pytest.approx(
            perf.thermal_efficiency * perf.propulsive_efficiency)

    def test_station_labels(self, cruise_result):
        labels = [s.label for s in cruise_result.stations]
        assert labels == ["0", "2", "2.5", "3", "4", "4.5", "5", "9", "19"]
        assert tuple(labels) == STATION_LABELS

    def test_static_and_total_flags(self, cruise_result):
        static = [s.label for s in cruise_result.stations if not s.is_total]
        assert static == ["0", "9", "19"]

    def test_hpc_ratio_reported(self, cruise, cruise_result):
        perf = cruise_result.performance
        assert perf.fan_pressure_ratio == cruise.fan_pressure_ratio
        assert perf.hpc_pressure_ratio == pytest.approx(42.0 / 1.65)

    def test_both_nozzles_choked(self, cruise_result):
        P0 = cruise_result.station("0").pressure
        assert cruise_result.station("9").pressure > P0
        assert cruise_result.station("19").pressure > P0

    def test_unknown_station(self, cruise_result):
        with pytest.raises(KeyError):
            cruise_result.station("13")


class TestStationProperties:

    def test_inlet_recovery(self, cruise, cruise_result):
        T0, P0 = isa(cruise.altitude)
        Pt0 = P0 * ram_pressure_ratio(cruise.mach, COLD_AIR.gamma)
        assert cruise_result.station("2").pressure <= Pt0

    def test_compression(self, cruise_result):
        assert cruise_result.station("3").pressure > cruise_result.station("2").pressure

    def test_burner_loss(self, cruise_result):
        assert cruise_result.station("4").pressure <= cruise_result.station("3").pressure

    def test_tt4_is_input(self, cruise):
        for tit in [1400.0, 1650.0, 1987.5]:
            res = calculate_cycle(cruise.with_changes(turbine_entry_temp=tit))
            assert res.station("4").temp == tit

    def test_turbines_expand(self, cruise_result):
        s = {st.label: st for st in cruise_result.stations}
        assert s["4"].temp > s["4.5"].temp > s["5"].temp
        assert s["4"].pressure > s["4.5"].pressure > s["5"].pressure


class TestValidity:

    def test_hotter_stays_valid(self, cruise):
        for tit in [1650, 1750, 1850, 1950, 2100]:
            res = calculate_cycle(cruise.with_changes(turbine_entry_temp=tit))
            assert res.performance.is_valid, tit

    def test_cold_turbine_invalid(self, cruise):
        res = calculate_cycle(cruise.with_changes(turbine_entry_temp=1000.0))
        assert not res.performance.is_valid

    def test_invalid_zeroes_headline_numbers(self, cruise):
        perf = calculate_cycle(cruise.with_changes(turbine_entry_temp=1000.0)).performance
        assert perf.thrust == 0
        assert perf.specific_thrust == 0
        assert perf.sfc == 0

    def test_invalid_keeps_nine_stations(self, cruise):
        res = calculate_cycle(cruise.with_changes(turbine_entry_temp=1000.0))
        assert len(res.stations) == 9
        # nozzles are not evaluated: exit pressure holds ambient
        assert res.station("9").pressure == res.station("0").pressure

    def test_lpt_cannot_drive_huge_fan(self, cruise):
        res = calculate_cycle(cruise.with_changes(bypass_ratio=40.0))
        assert not res.performance.is_valid

    def test_valid_points_non_negative(self, cruise):
        for bpr in [0.5, 2.0, 5.0, 9.0, 12.0]:
            perf = calculate_cycle(cruise.with_changes(bypass_ratio=bpr)).performance
            if perf.is_valid:
                assert perf.sfc >= 0
                assert perf.thrust >= 0

    def test_propulsive_efficiency_capped(self, cruise):
        for mach in [0.0, 0.4, 0.83, 1.5, 2.5]:
            perf = calculate_cycle(cruise.with_changes(mach=mach)).performance
            assert perf.propulsive_efficiency <= 0.999

    def test_lpc_efficiency_is_unused(self, cruise, cruise_result):
        other = calculate_cycle(cruise.with_changes(efficiency_lpc=0.5))
        assert other == cruise_result


class TestSeaLevelStatic:
    """Low fan ratio at sea level: bypass nozzle expands fully, core chokes."""

    @pytest.fixture
    def sls(self, cruise):
        return calculate_cycle(cruise.with_changes(
            altitude=0.0, mach=0.0, fan_pressure_ratio=1.3))

    def test_valid(self, sls):
        assert sls.performance.is_valid
        assert sls.performance.thrust > 0

    def test_bypass_unchoked(self, sls):
        assert sls.station("19").pressure == sls.station("0").pressure

    def test_core_choked(self, sls):
        assert sls.station("9").pressure > sls.station("0").pressure

    def test_no_flight_speed_no_propulsive_work(self, sls):
        assert sls.performance.propulsive_efficiency == 0.0


class TestTurbinePressureHold:
    """A turbine that cannot deliver its work passes total pressure through."""

    def test_both_turbines_hold(self, cruise):
        # Tt4 below HPC exit: neither spool closes its work balance
        res = calculate_cycle(cruise.with_changes(turbine_entry_temp=400.0))
        assert not res.performance.is_valid
        assert res.station("4.5").pressure == res.station("4").pressure
        assert res.station("5").pressure == res.station("4.5").pressure

    def test_lpt_hold_after_working_hpt(self, cruise):
        res = calculate_cycle(cruise.with_changes(bypass_ratio=40.0))
        assert not res.performance.is_valid
        assert res.station("4.5").pressure < res.station("4").pressure
        assert res.station("5").pressure == res.station("4.5").pressure


class TestBypassCannotExpand:
    """Sea-level static, FPR 1.02, lossy nozzles: Pt19 ≈ 91 kPa < P0."""

    @pytest.fixture
    def weak_fan(self, cruise):
        return calculate_cycle(cruise.with_changes(
            altitude=0.0, mach=0.0, fan_pressure_ratio=1.02,
            pressure_recovery_nozzle=0.9))

    def test_invalid(self, weak_fan):
        perf = weak_fan.performance
        assert not perf.is_valid
        assert perf.thrust == 0
        assert perf.sfc == 0
        assert perf.bypass_velocity == 0.0

    def test_core_still_choked(self, weak_fan):
        assert weak_fan.station("9").pressure > weak_fan.station("0").pressure
        assert weak_fan.performance.core_velocity > 0

    def test_bypass_exit_holds_ambient(self, weak_fan):
        assert weak_fan.station("19").pressure == weak_fan.station("0").pressure


class TestDegenerateInputs:
    """Zero or negative divisors give an invalid result, never an exception."""

    @pytest.mark.parametrize("field", [
        'efficiency_fan', 'efficiency_hpc', 'efficiency_hpt', 'efficiency_lpt',
        'mech_efficiency_high', 'mech_efficiency_low',
        'turbine_entry_temp', 'fan_pressure_ratio',
    ])
    def test_zero(self, cruise, field):
        inputs = cruise.with_changes(**{field: 0.0})
        assert not positive_divisors(inputs)
        res = calculate_cycle(inputs)
        assert not res.performance.is_valid
        assert tuple(s.label for s in res.stations) == STATION_LABELS
        assert res.performance.thrust == 0
        assert res.performance.specific_thrust == 0
        assert res.performance.sfc == 0
        assert res.station("4").temp == inputs.turbine_entry_temp

    @pytest.mark.parametrize("field, value", [
        ('fan_pressure_ratio', -1.5),
        ('bypass_ratio', -1.0),
        ('efficiency_hpt', -0.9),
    ])
    def test_negative(self, cruise, field, value):
        res = calculate_cycle(cruise.with_changes(**{field: value}))
        assert not res.performance.is_valid
        assert len(res.stations) == 9
        assert res.performance.thrust == 0

    def test_reference_point_passes(self, cruise):
        assert positive_divisors(cruise)
        assert positive_divisors(cruise.with_changes(bypass_ratio=0.0))

    def test_inlet_state_kept(self, cruise, cruise_result):
        res = calculate_cycle(cruise.with_changes(efficiency_hpc=0.0))
        assert res.station("0") == cruise_result.station("0")
        assert res.station("2") == cruise_result.station("2")


class TestHelpers:

    def test_hpc_floor(self):
        assert hpc_pressure_ratio(10.0, 20.0) == 1.1
        assert hpc_pressure_ratio(42.0, 1.65) == pytest.approx(25.4545, rel=1e-5)

    def test_fuel_air_ratio_reference(self):
        f = fuel_air_ratio(781.06, 1650.0, 0.995, 43.1e6)
        assert f == pytest.approx(0.02714, rel=1e-3)

    def test_fuel_air_ratio_clamped(self):
        """Compressor exit already hotter than the burner target."""
        assert fuel_air_ratio(1900.0, 1650.0, 0.995, 43.1e6) == 0.0

    def test_fuel_air_ratio_unusable_fuel(self):
        assert fuel_air_ratio(700.0, 1650.0, 0.995, 1.0e6) == 0.0

    def test_turbine_ratio_bounds(self):
        assert turbine_pressure_ratio_or_none(1.0, 0.9) is None
        assert turbine_pressure_ratio_or_none(0.0, 0.9) is None
        assert turbine_pressure_ratio_or_none(-0.2, 0.9) is None
        assert turbine_pressure_ratio_or_none(float('nan'), 0.9) is None

    def test_turbine_pressure_term_limit(self):
        """(1 - 0.05)/0.9 > 1: no finite expansion ratio exists."""
        assert turbine_pressure_ratio_or_none(0.05, 0.9) is None
        assert turbine_pressure_ratio_or_none(0.8, 0.9) > 1.0

    def test_propulsive_clamp(self):
        assert clamp_propulsive_efficiency(1.3) == 0.999
        assert clamp_propulsive_efficiency(0.7) == 0.7

    def test_finite_or_zero(self):
        assert finite_or_zero(float('nan')) == 0.0
        assert finite_or_zero(float('inf')) == 0.0
        assert finite_or_zero(-float('inf')) == 0.0
        assert finite_or_zero(2.5) == 2.5


class TestNozzle:

    def test_choked(self):
        ex = expand_nozzle(300e3, 900.0, 50e3, HOT_GAS)
        assert ex.choked and ex.valid
        assert ex.P == pytest.approx(300e3 / 1.8506, rel=1e-3)
        assert ex.T == pytest.approx(900.0 * 2 / 2.33)
        assert ex.V == pytest.approx(math.sqrt(1.33 * 287.05 * ex.T))

    def test_fully_expanded(self):
        ex = expand_nozzle(150e3, 320.0, 101325.0, COLD_AIR)
        assert not ex.choked and ex.valid
        assert ex.P == 101325.0
        assert ex.T < 320.0
        assert ex.V == pytest.approx(math.sqrt(2 * 1005.0 * (320.0 - ex.T)))

    def test_cannot_expand(self):
        ex = expand_nozzle(90e3, 300.0, 101325.0, COLD_AIR)
        assert not ex.valid
        assert ex.V == 0.0

    def test_effective_velocity(self):
        assert effective_velocity(500.0, 40e3, 20e3, 0.2) == pytest.approx(700.0)
        assert effective_velocity(0.5, 40e3, 20e3, 0.2) == 0.5
        assert effective_velocity(300.0, 101325.0, 101325.0, 1.2) == 300.0

    def test_vacuum_back_pressure(self):
        ex = expand_nozzle(300e3, 900.0, 0.0, HOT_GAS)
        assert ex.choked and ex.valid
