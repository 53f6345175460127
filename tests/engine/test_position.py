"""Tests for solar position, incidence angle and elevation filtering."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from pvflux.errors import InputValidationError
from pvflux.solar import (
    aoi,
    cos_aoi,
    declination,
    equation_of_time,
    filter_solar_elevation,
    julian_day,
    solar_position,
    sun_position,
    sun_vector,
)
from pvflux.timeutils import prepare_time_utc


# ======================================================================
# Ephemeris terms
# ======================================================================


class TestEphemeris:
    def test_julian_day_j2000(self):
        idx = pd.DatetimeIndex(["2000-01-01 12:00"]).tz_localize("UTC")
        assert julian_day(idx)[0] == pytest.approx(2451545.0)

    def test_julian_day_unix_epoch(self):
        idx = pd.DatetimeIndex(["1970-01-01 00:00"]).tz_localize("UTC")
        assert julian_day(idx)[0] == pytest.approx(2440587.5)

    @pytest.mark.parametrize("unit", ["s", "ms", "us", "ns"])
    def test_julian_day_any_resolution(self, unit):
        idx = pd.DatetimeIndex(["2000-01-01T12:00:00Z"]).as_unit(unit)
        assert julian_day(idx)[0] == pytest.approx(2451545.0)

    def test_julian_day_from_parsed_strings(self):
        info = prepare_time_utc(["2000-01-01T12:00:00Z", "2000-01-02T00:00:00.000001Z"])
        np.testing.assert_allclose(julian_day(info.time_utc), [2451545.0, 2451545.5], atol=1e-9)

    def test_declination_solstices(self):
        june = julian_day(pd.DatetimeIndex(["2026-06-21 12:00"]).tz_localize("UTC"))
        december = julian_day(pd.DatetimeIndex(["2026-12-21 12:00"]).tz_localize("UTC"))
        assert declination(june)[0] == pytest.approx(23.44, abs=0.05)
        assert declination(december)[0] == pytest.approx(-23.44, abs=0.05)

    def test_declination_equinox_near_zero(self):
        jd = julian_day(pd.DatetimeIndex(["2026-03-20 12:00"]).tz_localize("UTC"))
        assert abs(declination(jd)[0]) < 0.5

    def test_equation_of_time_extremes(self):
        """Sun fast by ~16 min in early November, slow by ~14 min in mid-February."""
        nov = julian_day(pd.DatetimeIndex(["2026-11-03 12:00"]).tz_localize("UTC"))
        feb = julian_day(pd.DatetimeIndex(["2026-02-11 12:00"]).tz_localize("UTC"))
        assert equation_of_time(nov)[0] == pytest.approx(16.4, abs=0.5)
        assert equation_of_time(feb)[0] == pytest.approx(-14.2, abs=0.5)


class TestSunVector:
    def test_unit_length(self):
        idx = pd.date_range("2026-01-15", periods=24, freq="h", tz="UTC")
        vec = sun_vector(julian_day(idx), -30.6279, 24.0054)
        assert vec.shape == (24, 3)
        np.testing.assert_allclose(np.linalg.norm(vec, axis=1), 1.0, atol=1e-12)

    def test_overhead_sun(self):
        azimuth, zenith = sun_position(np.array([[0.0, 0.0, 1.0]]))
        assert zenith[0] == pytest.approx(0.0)

    def test_sun_due_east(self):
        azimuth, zenith = sun_position(np.array([[1.0, 0.0, 0.0]]))
        assert zenith[0] == pytest.approx(90.0)
        assert azimuth[0] == pytest.approx(90.0)


# ======================================================================
# solar_position
# ======================================================================


class TestSolarPosition:
    def test_columns_and_index(self, day_times, site):
        df = solar_position(day_times, site["lat"], site["lon"])
        assert list(df.columns) == ["zenith", "azimuth", "elevation"]
        assert df.index.name == "time"
        assert df.index.equals(day_times.rename("time"))
        np.testing.assert_allclose(df["elevation"], 90.0 - df["zenith"])

    def test_de_aar_january_midday(self, site):
        df = solar_position(["2026-01-15T12:00:00Z"], site["lat"], site["lon"])
        # 13:30 local solar time, sun high and in the north-west
        assert 15.0 < df["zenith"].iloc[0] < 30.0
        assert 270.0 < df["azimuth"].iloc[0] < 360.0

    def test_de_aar_night(self, site):
        df = solar_position(["2026-01-15T00:00:00Z"], site["lat"], site["lon"])
        assert df["zenith"].iloc[0] > 90.0
        assert df["elevation"].iloc[0] < 0.0

    def test_winter_noon_due_south(self):
        df = solar_position(["2026-12-21T12:00:00Z"], 45.0, 0.0)
        assert df["azimuth"].iloc[0] == pytest.approx(180.0, abs=2.0)
        assert df["zenith"].iloc[0] == pytest.approx(45.0 + 23.44, abs=0.5)

    def test_morning_east_afternoon_west(self):
        df = solar_position(["2026-06-21T08:00:00Z", "2026-06-21T16:00:00Z"], 45.0, 0.0)
        assert df["azimuth"].iloc[0] < 180.0
        assert df["azimuth"].iloc[1] > 180.0

    def test_azimuth_range(self, day_times, site):
        az = solar_position(day_times, site["lat"], site["lon"])["azimuth"]
        assert ((az >= 0.0) & (az < 360.0)).all()

    def test_per_row_locations(self):
        times = ["2026-01-15T12:00:00Z"] * 2
        df = solar_position(times, [0.0, 60.0], [0.0, 0.0])
        assert df["zenith"].iloc[1] > df["zenith"].iloc[0]

    def test_invalid_latitude(self):
        with pytest.raises(InputValidationError, match="lat"):
            solar_position(["2026-01-15T12:00:00Z"], 95.0, 0.0)

    def test_location_length_mismatch(self):
        with pytest.raises(InputValidationError, match="lon"):
            solar_position(["2026-01-15T12:00:00Z"] * 3, 0.0, [0.0, 1.0])


# ======================================================================
# Incidence angle
# ======================================================================


class TestAngleOfIncidence:
    def test_horizontal_surface_equals_zenith(self):
        assert aoi(0.0, 180.0, 35.0, 120.0) == pytest.approx(35.0)

    def test_facing_the_sun(self):
        assert aoi(30.0, 180.0, 30.0, 180.0) == pytest.approx(0.0, abs=1e-6)

    def test_sun_behind_panel(self):
        assert cos_aoi(90.0, 0.0, 45.0, 180.0) < 0.0

    def test_clipped(self):
        c = cos_aoi(np.array([0.0, 180.0]), 0.0, np.array([0.0, 0.0]), 0.0)
        assert np.all(np.abs(c) <= 1.0)


class TestFilterSolarElevation:
    def test_mask(self, day_times, site):
        mask = filter_solar_elevation(day_times, site["lat"], site["lon"])
        zenith = solar_position(day_times, site["lat"], site["lon"])["zenith"].to_numpy()
        assert mask.dtype == bool
        np.testing.assert_array_equal(mask, zenith < 80.0)
        assert mask.any() and not mask.all()

    def test_daylight_threshold(self, day_times, site):
        strict = filter_solar_elevation(day_times, site["lat"], site["lon"], max_zenith=60.0)
        loose = filter_solar_elevation(day_times, site["lat"], site["lon"], max_zenith=90.0)
        assert strict.sum() < loose.sum()
