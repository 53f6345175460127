"""Tests for plane-of-array transposition models."""

from __future__ import annotations

import numpy as np
import pytest

from pvflux.errors import InputValidationError
from pvflux.solar import aoi, hay_davies, olmo, perez, reindl, transpose
from pvflux.solar.transposition import PEREZ_INVALID_BIN, perez_bin, perez_sky_clearness

MIDDAY = ["2026-01-15T12:00:00Z"]
MIDNIGHT = ["2026-01-15T00:00:00Z"]

COMPONENT_MODELS = [hay_davies, reindl, perez]


def as_float(series):
    return series.to_numpy(dtype=np.float64, na_value=np.nan)


@pytest.fixture
def day_components(day_weather):
    """Crude 75/25 beam/diffuse split of the synthetic day."""
    ghi = day_weather["ghi"]
    cos_z = np.maximum(np.cos(np.radians(day_weather["zenith"])), 0.0)
    dhi = 0.25 * ghi
    dni = np.where(cos_z > 0.05, 0.75 * ghi / np.maximum(cos_z, 0.05), 0.0)
    return ghi, dni, dhi


# ======================================================================
# Shared invariants
# ======================================================================


class TestCommonInvariants:
    @pytest.mark.parametrize("model", COMPONENT_MODELS)
    def test_global_is_sum_of_components(self, model, day_times, site, day_components):
        ghi, dni, dhi = day_components
        df = model(day_times, site["lat"], site["lon"], ghi, dni, dhi, 25.0, 0.0)
        cols = {c: as_float(df[c]) for c in df.columns if c.startswith("poa_")}
        np.testing.assert_allclose(
            cols["poa_global"],
            cols["poa_beam"] + cols["poa_sky_diffuse"] + cols["poa_ground_diffuse"],
            rtol=1e-12,
        )
        np.testing.assert_allclose(
            cols["poa_diffuse"], cols["poa_sky_diffuse"] + cols["poa_ground_diffuse"], rtol=1e-12
        )

    @pytest.mark.parametrize("model", COMPONENT_MODELS)
    def test_night_is_exactly_zero(self, model, site):
        df = model(MIDNIGHT, site["lat"], site["lon"], [100.0], [50.0], [80.0], 30.0, 0.0)
        assert df["zenith"].iloc[0] >= 90.0
        for col in ("poa_global", "poa_beam", "poa_sky_diffuse", "poa_ground_diffuse"):
            assert df[col].iloc[0] == 0.0

    def test_olmo_night_is_exactly_zero(self, site):
        df = olmo(MIDNIGHT, site["lat"], site["lon"], [100.0], 30.0, 0.0)
        assert df["poa_global"].iloc[0] == 0.0

    @pytest.mark.parametrize("model", COMPONENT_MODELS)
    def test_components_non_negative(self, model, day_times, site, day_components):
        ghi, dni, dhi = day_components
        df = model(day_times, site["lat"], site["lon"], ghi, dni, dhi, 60.0, 180.0)
        for col in ("poa_beam", "poa_sky_diffuse", "poa_ground_diffuse"):
            assert (df[col] >= 0.0).all()

    @pytest.mark.parametrize("model", COMPONENT_MODELS)
    def test_length_mismatch(self, model, site):
        with pytest.raises(InputValidationError, match="dni"):
            model(MIDDAY, site["lat"], site["lon"], [700.0], [500.0, 1.0], [200.0], 20.0, 0.0)

    def test_horizontal_panel_gets_no_ground_reflection(self, site):
        df = hay_davies(MIDDAY, site["lat"], site["lon"], [700.0], [500.0], [200.0], 0.0, 0.0)
        assert df["poa_ground_diffuse"].iloc[0] == pytest.approx(0.0, abs=1e-12)


# ======================================================================
# Hay-Davies and Reindl
# ======================================================================


class TestHayDavies:
    def test_beam_is_dni_times_cos_aoi(self, site):
        df = hay_davies(MIDDAY, site["lat"], site["lon"], [700.0], [500.0], [200.0], 20.0, 0.0)
        row = df.iloc[0]
        expected_aoi = aoi(20.0, 0.0, row["zenith"], row["azimuth"])
        assert row["incidence"] == pytest.approx(expected_aoi, abs=1e-9)
        assert row["poa_beam"] == pytest.approx(500.0 * np.cos(np.radians(expected_aoi)), abs=1e-6)

    def test_reproducible(self, site):
        args = (MIDDAY, site["lat"], site["lon"], [700.0], [500.0], [200.0], 20.0, 0.0)
        assert hay_davies(*args)["poa_global"].iloc[0] == hay_davies(*args)["poa_global"].iloc[0]

    def test_isotropic_when_no_direct(self, site):
        """With DNI = 0 the anisotropy index is 0 and the sky is isotropic."""
        df = hay_davies(MIDDAY, site["lat"], site["lon"], [200.0], [0.0], [200.0], 30.0, 0.0)
        assert df["ai"].iloc[0] == 0.0
        expected = 200.0 * (1.0 + np.cos(np.radians(30.0))) / 2.0
        assert df["poa_sky_diffuse"].iloc[0] == pytest.approx(expected)

    def test_ground_diffuse(self, site):
        df = hay_davies(
            MIDDAY, site["lat"], site["lon"], [700.0], [500.0], [200.0], 40.0, 0.0, albedo=0.3
        )
        expected = 700.0 * 0.3 * 0.5 * (1.0 - np.cos(np.radians(40.0)))
        assert df["poa_ground_diffuse"].iloc[0] == pytest.approx(expected)


class TestReindl:
    def test_horizon_brightening_adds_diffuse(self, day_times, site, day_components):
        ghi, dni, dhi = day_components
        hd = hay_davies(day_times, site["lat"], site["lon"], ghi, dni, dhi, 35.0, 0.0)
        rd = reindl(day_times, site["lat"], site["lon"], ghi, dni, dhi, 35.0, 0.0)
        assert (rd["poa_sky_diffuse"] >= hd["poa_sky_diffuse"] - 1e-12).all()
        assert (rd["poa_sky_diffuse"] > hd["poa_sky_diffuse"]).any()
        np.testing.assert_allclose(rd["poa_beam"], hd["poa_beam"])


# ======================================================================
# Perez
# ======================================================================


class TestPerez:
    def test_bins(self):
        eps = np.array([1.0, 1.065, 1.07, 1.3, 6.2, 6.3, np.inf, np.nan])
        np.testing.assert_array_equal(perez_bin(eps), [1, 1, 2, 3, 7, 8, 8, PEREZ_INVALID_BIN])

    def test_sky_clearness_overcast(self):
        assert perez_sky_clearness(100.0, 0.0, 40.0) == pytest.approx(1.0)

    def test_f1_clamped_f2_negative(self, site):
        """Overcast, thin sky: F1 floors at zero while F2 keeps its negative fit."""
        df = perez(MIDDAY, site["lat"], site["lon"], [50.0], [0.0], [50.0], 30.0, 0.0)
        row = df.iloc[0]
        assert row["ebin"] == 1
        assert row["F1"] == 0.0
        assert row["F2"] < 0.0

    def test_f1_never_negative(self, day_times, site, day_components):
        ghi, dni, dhi = day_components
        df = perez(day_times, site["lat"], site["lon"], ghi, dni, dhi, 25.0, 0.0)
        f1 = df["F1"].dropna()
        assert len(f1) > 0
        assert (f1 >= 0.0).all()

    def test_undefined_bin(self, site):
        df = perez(MIDDAY, site["lat"], site["lon"], [0.0], [0.0], [0.0], 30.0, 0.0)
        row = df.iloc[0]
        assert row["ebin"] == PEREZ_INVALID_BIN
        assert df["F1"].isna().iloc[0]
        assert df["F2"].isna().iloc[0]
        assert row["poa_beam"] == 0.0
        for column in ("poa_sky_diffuse", "poa_diffuse", "poa_global"):
            assert df[column].isna().iloc[0]
            assert str(df[column].dtype) == "Float64"

    def test_missing_dhi_is_undefined_not_plausible(self, site):
        df = perez(MIDDAY, site["lat"], site["lon"], [700.0], [500.0], [np.nan], 20.0, 0.0)
        assert df["ebin"].iloc[0] == PEREZ_INVALID_BIN
        assert df["poa_global"].isna().iloc[0]
        assert df["poa_beam"].iloc[0] > 0.0

    def test_undefined_row_does_not_spoil_batch(self, site):
        times = MIDDAY + ["2026-01-15T13:00:00Z"]
        df = perez(times, site["lat"], site["lon"], [700.0, 0.0], [500.0, 0.0], [200.0, 0.0],
                   20.0, 0.0)
        assert df["poa_global"].iloc[0] > 0.0
        assert df["poa_global"].isna().tolist() == [False, True]

    def test_night_coefficients_undefined(self, site):
        df = perez(MIDNIGHT, site["lat"], site["lon"], [10.0], [0.0], [10.0], 30.0, 0.0)
        assert df["delta"].isna().iloc[0]
        assert df["poa_global"].iloc[0] == 0.0

    def test_extra_columns(self, site):
        df = perez(MIDDAY, site["lat"], site["lon"], [700.0], [500.0], [200.0], 20.0, 0.0)
        for col in ("epsilon", "delta", "ebin", "F1", "F2"):
            assert col in df.columns
        assert str(df["F2"].dtype) == "Float64"


# ======================================================================
# Olmo
# ======================================================================


class TestOlmo:
    def test_columns(self, site):
        df = olmo(MIDDAY, site["lat"], site["lon"], [700.0], 20.0, 0.0)
        assert list(df.columns) == ["ghi", "poa_global", "kt", "zenith", "azimuth", "incidence"]

    def test_horizontal_panel(self, site):
        """Incidence equals zenith, so only the albedo factor remains."""
        df = olmo(MIDDAY, site["lat"], site["lon"], [700.0], 0.0, 0.0, albedo=0.2)
        z = np.radians(df["zenith"].iloc[0])
        assert df["poa_global"].iloc[0] == pytest.approx(700.0 * (1.0 + 0.2 * np.sin(z / 2) ** 2))

    def test_kt_bounded(self, day_times, site, day_weather):
        df = olmo(day_times, site["lat"], site["lon"], day_weather["ghi"], 25.0, 0.0)
        assert ((df["kt"] >= 0.0) & (df["kt"] <= 1.0)).all()

    def test_facing_sun_gains(self, site):
        north = olmo(MIDDAY, site["lat"], site["lon"], [900.0], 30.0, 0.0)
        south = olmo(MIDDAY, site["lat"], site["lon"], [900.0], 30.0, 180.0)
        assert north["poa_global"].iloc[0] > south["poa_global"].iloc[0]


class TestTransposeDispatch:
    def test_by_name(self, site):
        via = transpose("PEREZ", MIDDAY, site["lat"], site["lon"], [700.0], 20.0, 0.0,
                        dni=[500.0], dhi=[200.0])
        direct = perez(MIDDAY, site["lat"], site["lon"], [700.0], [500.0], [200.0], 20.0, 0.0)
        assert via["poa_global"].iloc[0] == direct["poa_global"].iloc[0]

    def test_olmo_needs_only_ghi(self, site):
        df = transpose("olmo", MIDDAY, site["lat"], site["lon"], [700.0], 20.0, 0.0)
        assert df["poa_global"].iloc[0] > 0.0

    def test_missing_dhi(self, site):
        with pytest.raises(InputValidationError, match="dhi"):
            transpose("haydavies", MIDDAY, site["lat"], site["lon"], [700.0], 20.0, 0.0,
                      dni=[500.0])

    def test_unknown_model(self, site):
        with pytest.raises(InputValidationError, match="transposition"):
            transpose("isotropic", MIDDAY, site["lat"], site["lon"], [700.0], 20.0, 0.0)
