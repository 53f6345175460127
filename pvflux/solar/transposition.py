"""
Irradiance transposition module for converting horizontal irradiance
components (GHI, DNI, DHI) to plane-of-array (POA) irradiance.

Four models are provided:

- Hay-Davies: isotropic + circumsolar diffuse weighted by the anisotropy
  index.
- Reindl: Hay-Davies with a horizon-brightening factor.
- Perez 1990 (allsitescomposite coefficients): diffuse split into
  isotropic, circumsolar and horizon bands by sky clearness and
  brightness.
- Olmo 1999: global-to-tilted conversion from GHI alone.

Panel azimuth is measured clockwise from north. Every POA output is zero
while the sun is below the horizon.

References
----------
- Hay J.E., Davies J.A., "Calculation of the solar radiation incident on
  an inclined surface", Proc. First Canadian Solar Radiation Data
  Workshop, 59-72, 1980.
- Reindl D.T., Beckman W.A., Duffie J.A., "Evaluation of hourly tilted
  surface radiation models", Solar Energy, 45(1):9-17, 1990.
- Perez R. et al., "Modeling daylight availability and irradiance
  components from direct and global irradiance", Solar Energy,
  44(5):271-289, 1990.
- Olmo F.J. et al., "Prediction of global irradiance on inclined surfaces
  from horizontal global irradiance", Energy, 24(8):689-704, 1999.
- Loutzenhiser P.G. et al., "Empirical validation of models to compute
  solar irradiance on inclined surfaces for building energy simulation",
  Solar Energy, 81:254-267, 2007.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray

from ..errors import InputValidationError
from ..inputs import broadcast, coerce_enum, require_same_length, validate_location
from ..timeutils import TimeInfo, day_of_year, output_index, prepare_time_utc
from .airmass import kasten_young_airmass
from .extraterrestrial import SOLAR_CONSTANT, extra_radiation_spencer
from .position import cos_aoi as _cos_aoi
from .position import zenith_azimuth

# ---------------------------------------------------------------------------
# Perez 1990 allsitescomposite coefficients
# 8 sky-clearness (epsilon) bins plus bin 9 for undefined epsilon.
# Each row: [constant, delta, zenith (radians)]
# ---------------------------------------------------------------------------
_PEREZ_F1 = np.array(
    [
        [-0.008, 0.588, -0.062],  # bin 1 (overcast)
        [0.130, 0.683, -0.151],   # bin 2
        [0.330, 0.487, -0.221],   # bin 3
        [0.568, 0.187, -0.295],   # bin 4
        [0.873, -0.392, -0.362],  # bin 5
        [1.132, -1.237, -0.412],  # bin 6
        [1.060, -1.600, -0.359],  # bin 7
        [0.678, -0.327, -0.250],  # bin 8 (clear)
        [np.nan, np.nan, np.nan],  # bin 9 (undefined)
    ],
    dtype=np.float64,
)

_PEREZ_F2 = np.array(
    [
        [-0.060, 0.072, -0.022],
        [-0.019, 0.066, -0.029],
        [0.055, -0.064, -0.026],
        [0.109, -0.152, -0.014],
        [0.226, -0.462, 0.001],
        [0.288, -0.823, 0.056],
        [0.264, -1.127, 0.131],
        [0.156, -1.377, 0.251],
        [np.nan, np.nan, np.nan],
    ],
    dtype=np.float64,
)

# Upper (inclusive) epsilon edges of bins 1-7; bin 8 is open above
_PEREZ_EPSILON_EDGES = np.array([1.065, 1.23, 1.5, 1.95, 2.8, 4.5, 6.2], dtype=np.float64)
PEREZ_INVALID_BIN = 9

_PEREZ_KAPPA = 1.041  # zenith in radians
_OLMO_SOLAR_CONSTANT = 1367.0


class TranspositionModel(str, Enum):
    HAY_DAVIES = "haydavies"
    REINDL = "reindl"
    PEREZ = "perez"
    OLMO = "olmo"

    @property
    def needs_decomposition(self) -> bool:
        """True when the model consumes DNI and DHI as well as GHI."""
        return self is not TranspositionModel.OLMO


@dataclass(frozen=True)
class _PanelGeometry:
    """Per-row sun and panel geometry shared by all models."""

    info: TimeInfo
    zenith: NDArray[np.float64]
    sun_azimuth: NDArray[np.float64]
    tilt: NDArray[np.float64]
    cos_aoi: NDArray[np.float64]  # clipped to [-1, 1]
    albedo: NDArray[np.float64]

    @property
    def n(self) -> int:
        return len(self.info)

    @property
    def incidence(self) -> NDArray[np.float64]:
        return np.degrees(np.arccos(self.cos_aoi))

    @property
    def night(self) -> NDArray[np.bool_]:
        return self.zenith >= 90.0

    @property
    def beta(self) -> NDArray[np.float64]:
        return np.radians(self.tilt)


def _panel_geometry(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    tilt: ArrayLike,
    azimuth: ArrayLike,
    albedo: ArrayLike,
) -> _PanelGeometry:
    info = prepare_time_utc(time)
    n = len(info)
    lat_arr, lon_arr = validate_location(lat, lon, n)
    tilt_arr = broadcast("tilt", tilt, n)
    panel_az = broadcast("azimuth", azimuth, n)
    albedo_arr = broadcast("albedo", albedo, n)

    zenith, sun_az = zenith_azimuth(info, lat_arr, lon_arr)
    return _PanelGeometry(
        info=info,
        zenith=zenith,
        sun_azimuth=sun_az,
        tilt=tilt_arr,
        cos_aoi=_cos_aoi(tilt_arr, panel_az, zenith, sun_az),
        albedo=albedo_arr,
    )


def _poa_table(
    geom: _PanelGeometry,
    ghi: NDArray[np.float64],
    dni: NDArray[np.float64],
    dhi: NDArray[np.float64],
    beam: NDArray[np.float64],
    sky_diffuse: NDArray[np.float64],
    ground_diffuse: NDArray[np.float64],
    extra: dict[str, Any],
) -> pd.DataFrame:
    """Assemble the common POA result, zeroing every component at night."""
    night = geom.night
    beam = np.where(night, 0.0, beam)
    sky_diffuse = np.where(night, 0.0, sky_diffuse)
    ground_diffuse = np.where(night, 0.0, ground_diffuse)
    poa_diffuse = sky_diffuse + ground_diffuse

    columns: dict[str, Any] = {
        "ghi": ghi,
        "dni": dni,
        "dhi": dhi,
        "poa_global": beam + poa_diffuse,
        "poa_beam": beam,
        "poa_sky_diffuse": sky_diffuse,
        "poa_ground_diffuse": ground_diffuse,
        "poa_diffuse": poa_diffuse,
        "zenith": geom.zenith,
        "azimuth": geom.sun_azimuth,
        "incidence": geom.incidence,
    }
    columns.update(extra)
    return pd.DataFrame(columns, index=output_index(geom.info))


def _ground_diffuse(ghi: NDArray[np.float64], geom: _PanelGeometry) -> NDArray[np.float64]:
    return ghi * geom.albedo * 0.5 * (1.0 - np.cos(geom.beta))


def _anisotropy(
    geom: _PanelGeometry,
    dni: NDArray[np.float64],
    solar_constant: float,
    min_cos_zenith: float,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Anisotropy index AI and beam projection ratio Rb."""
    dni_extra = extra_radiation_spencer(day_of_year(geom.info.time_utc), solar_constant)
    ai = np.clip(dni / dni_extra, 0.0, 1.0)
    cos_z = np.cos(np.radians(geom.zenith))
    rb = np.maximum(geom.cos_aoi, 0.0) / np.maximum(cos_z, min_cos_zenith)
    return ai, rb


def _components(
    n: int,
    ghi: ArrayLike,
    dni: ArrayLike,
    dhi: ArrayLike,
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    ghi_arr, dni_arr, dhi_arr = require_same_length(n, ghi=ghi, dni=dni, dhi=dhi)
    return ghi_arr, dni_arr, dhi_arr


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


def hay_davies(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    ghi: ArrayLike,
    dni: ArrayLike,
    dhi: ArrayLike,
    tilt: ArrayLike,
    azimuth: ArrayLike,
    albedo: ArrayLike = 0.2,
    min_cos_zenith: float = 0.01745,
    solar_constant: float = SOLAR_CONSTANT,
) -> pd.DataFrame:
    """Transpose GHI / DNI / DHI to the plane of array with Hay-Davies.

    Parameters
    ----------
    time : sequence of instants
        Timestamps, one per irradiance sample.
    lat, lon : float or array_like
        Site coordinates in degrees.
    ghi, dni, dhi : array_like, shape (N,)
        Horizontal global, direct normal and horizontal diffuse
        irradiance (W/m^2).
    tilt : float or array_like
        Panel tilt from horizontal (degrees).
    azimuth : float or array_like
        Panel azimuth, clockwise from north (degrees).
    albedo : float or array_like
        Ground reflectance.
    min_cos_zenith : float
        Floor on cos(zenith) in the projection ratio Rb.
    solar_constant : float
        Used for the extraterrestrial irradiance in the anisotropy index.

    Returns
    -------
    DataFrame
        ``ghi``, ``dni``, ``dhi``, ``poa_global``, ``poa_beam``,
        ``poa_sky_diffuse``, ``poa_ground_diffuse``, ``poa_diffuse``,
        ``zenith``, ``azimuth`` (solar), ``incidence``, ``ai`` and ``rb``.
    """
    geom = _panel_geometry(time, lat, lon, tilt, azimuth, albedo)
    ghi, dni, dhi = _components(geom.n, ghi, dni, dhi)
    ai, rb = _anisotropy(geom, dni, solar_constant, min_cos_zenith)

    sky = np.maximum(dhi * ((1.0 - ai) * (1.0 + np.cos(geom.beta)) / 2.0 + ai * rb), 0.0)
    beam = dni * np.maximum(geom.cos_aoi, 0.0)
    return _poa_table(
        geom, ghi, dni, dhi, beam, sky, _ground_diffuse(ghi, geom), {"ai": ai, "rb": rb}
    )


def reindl(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    ghi: ArrayLike,
    dni: ArrayLike,
    dhi: ArrayLike,
    tilt: ArrayLike,
    azimuth: ArrayLike,
    albedo: ArrayLike = 0.2,
    min_cos_zenith: float = 0.01745,
    solar_constant: float = SOLAR_CONSTANT,
) -> pd.DataFrame:
    """Reindl (1990) transposition.

    Extends Hay-Davies with the horizon-brightening factor
    ``1 + sqrt(BHI / GHI) * sin^3(tilt / 2)``, where BHI = GHI - DHI.
    Parameters and output columns are those of :func:`hay_davies`.
    """
    geom = _panel_geometry(time, lat, lon, tilt, azimuth, albedo)
    ghi, dni, dhi = _components(geom.n, ghi, dni, dhi)
    ai, rb = _anisotropy(geom, dni, solar_constant, min_cos_zenith)

    bhi = np.maximum(ghi - dhi, 0.0)
    horizon = 1.0 + np.sqrt(bhi / np.maximum(ghi, 1.0)) * np.sin(geom.beta / 2.0) ** 3
    isotropic = np.maximum(dhi * (1.0 - ai) * 0.5 * (1.0 + np.cos(geom.beta)) * horizon, 0.0)
    circumsolar = np.maximum(dhi * ai * rb, 0.0)

    beam = dni * np.maximum(geom.cos_aoi, 0.0)
    return _poa_table(
        geom,
        ghi,
        dni,
        dhi,
        beam,
        isotropic + circumsolar,
        _ground_diffuse(ghi, geom),
        {"ai": ai, "rb": rb},
    )


def perez_sky_clearness(
    dhi: ArrayLike,
    dni: ArrayLike,
    zenith: ArrayLike,
) -> NDArray[np.float64]:
    """Perez sky clearness epsilon (zenith in degrees). NaN when DHI = DNI = 0."""
    dhi = np.asarray(dhi, dtype=np.float64)
    dni = np.asarray(dni, dtype=np.float64)
    z3 = _PEREZ_KAPPA * np.radians(zenith) ** 3
    with np.errstate(divide="ignore", invalid="ignore"):
        return ((dhi + dni) / dhi + z3) / (1.0 + z3)


def perez_bin(epsilon: ArrayLike) -> NDArray[np.intp]:
    """Map sky clearness to Perez bins 1-8 (right-closed); NaN maps to 9."""
    epsilon = np.asarray(epsilon, dtype=np.float64)
    ebin = np.searchsorted(_PEREZ_EPSILON_EDGES, epsilon, side="left") + 1
    return np.where(np.isnan(epsilon), PEREZ_INVALID_BIN, ebin).astype(np.intp)


def perez(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    ghi: ArrayLike,
    dni: ArrayLike,
    dhi: ArrayLike,
    tilt: ArrayLike,
    azimuth: ArrayLike,
    albedo: ArrayLike = 0.2,
    solar_constant: float = SOLAR_CONSTANT,
) -> pd.DataFrame:
    """Transpose with the Perez 1990 anisotropic diffuse model.

    The circumsolar coefficient F1 is floored at zero; the horizon
    coefficient F2 is used as fitted and may be negative.

    Returns
    -------
    DataFrame
        The common POA columns (see :func:`hay_davies`) plus the sky
        classification ``epsilon``, ``delta``, ``ebin`` and the
        coefficients ``F1`` and ``F2``. Bin 9 marks an undefined
        clearness (for example no diffuse and no direct light, or a
        missing DHI). Its coefficients are ``<NA>``, and in daylight so are
        ``poa_sky_diffuse``, ``poa_diffuse`` and ``poa_global``, which are
        nullable ``Float64``. ``delta``, ``F1`` and ``F2`` are also ``<NA>``
        at night, where the airmass is undefined; POA components are 0 there.
    """
    geom = _panel_geometry(time, lat, lon, tilt, azimuth, albedo)
    ghi, dni, dhi = _components(geom.n, ghi, dni, dhi)

    z_rad = np.radians(geom.zenith)
    cos_z = np.cos(z_rad)
    airmass = kasten_young_airmass(geom.zenith)
    dni_extra = extra_radiation_spencer(day_of_year(geom.info.time_utc), solar_constant)

    delta = dhi * airmass / dni_extra
    epsilon = perez_sky_clearness(dhi, dni, geom.zenith)
    ebin = perez_bin(epsilon)

    f1c = _PEREZ_F1[ebin - 1]
    f2c = _PEREZ_F2[ebin - 1]
    f1 = np.maximum(f1c[:, 0] + f1c[:, 1] * delta + f1c[:, 2] * z_rad, 0.0)
    f2 = f2c[:, 0] + f2c[:, 1] * delta + f2c[:, 2] * z_rad

    a = np.maximum(geom.cos_aoi, 0.0)
    b = np.maximum(cos_z, np.cos(np.radians(85.0)))
    sky = np.maximum(
        dhi * (0.5 * (1.0 - f1) * (1.0 + np.cos(geom.beta)) + f1 * a / b + f2 * np.sin(geom.beta)),
        0.0,
    )
    sky = np.where(np.isnan(airmass), 0.0, sky)

    beam = dni * np.maximum(geom.cos_aoi, 0.0)
    extra = {
        "epsilon": pd.array(epsilon, dtype="Float64"),
        "delta": pd.array(delta, dtype="Float64"),
        "ebin": ebin,
        "F1": pd.array(f1, dtype="Float64"),
        "F2": pd.array(f2, dtype="Float64"),
    }
    table = _poa_table(geom, ghi, dni, dhi, beam, sky, _ground_diffuse(ghi, geom), extra)

    # Undefined clearness in daylight: sky diffuse and its sums are <NA>
    undefined = (ebin == PEREZ_INVALID_BIN) & ~geom.night
    for column in ("poa_sky_diffuse", "poa_diffuse", "poa_global"):
        values = np.where(undefined, np.nan, table[column].to_numpy(dtype=np.float64))
        table[column] = pd.array(values, dtype="Float64")
    return table


def olmo(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    ghi: ArrayLike,
    tilt: ArrayLike,
    azimuth: ArrayLike,
    albedo: ArrayLike = 0.2,
) -> pd.DataFrame:
    """Olmo et al. (1999) global-to-tilted transposition from GHI only.

    G_poa = GHI * exp(-kt * (theta^2 - theta_z^2)) * (1 + albedo * sin^2(theta / 2)),
    with kt the clearness index and theta, theta_z the incidence and
    zenith angles in radians. The model was fitted on Granada (Spain)
    data; elsewhere it is an approximation.

    Returns
    -------
    DataFrame
        ``ghi``, ``poa_global``, ``kt``, ``zenith``, ``azimuth`` (solar)
        and ``incidence``. The model does not separate beam and diffuse
        parts, so no component columns are reported.
    """
    geom = _panel_geometry(time, lat, lon, tilt, azimuth, albedo)
    (ghi,) = require_same_length(geom.n, ghi=ghi)

    doy = day_of_year(geom.info.time_utc)
    eccentricity = 1.0 + 0.033 * np.cos(2.0 * np.pi * doy / 365.0)
    cos_z = np.cos(np.radians(geom.zenith))
    i0 = _OLMO_SOLAR_CONSTANT * eccentricity * np.maximum(cos_z, 0.0)
    kt = np.where(i0 > 0.0, np.minimum(ghi / np.where(i0 > 0.0, i0, 1.0), 1.0), 0.0)

    theta = np.arccos(geom.cos_aoi)
    theta_z = np.radians(geom.zenith)
    psi = np.exp(-kt * (theta**2 - theta_z**2))
    fc = 1.0 + geom.albedo * np.sin(theta / 2.0) ** 2
    g_poa = np.maximum(ghi * psi * fc, 0.0)
    g_poa = np.where(geom.night, 0.0, g_poa)

    return pd.DataFrame(
        {
            "ghi": ghi,
            "poa_global": g_poa,
            "kt": kt,
            "zenith": geom.zenith,
            "azimuth": geom.sun_azimuth,
            "incidence": geom.incidence,
        },
        index=output_index(geom.info),
    )


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

_DISPATCH: dict[TranspositionModel, Callable[..., pd.DataFrame]] = {
    TranspositionModel.HAY_DAVIES: hay_davies,
    TranspositionModel.REINDL: reindl,
    TranspositionModel.PEREZ: perez,
}


def transpose(
    model: TranspositionModel | str,
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    ghi: ArrayLike,
    tilt: ArrayLike,
    azimuth: ArrayLike,
    dni: ArrayLike | None = None,
    dhi: ArrayLike | None = None,
    **kwargs: Any,
) -> pd.DataFrame:
    """Run the transposition model named by ``model``.

    ``dni`` and ``dhi`` are required for every model except Olmo, which
    ignores them.

    Raises
    ------
    InputValidationError
        For an unknown model name or missing DNI/DHI.
    """
    model = coerce_enum(TranspositionModel, model, "transposition")
    if not model.needs_decomposition:
        return olmo(time, lat, lon, ghi, tilt, azimuth, **kwargs)

    if dni is None or dhi is None:
        missing = "dni" if dni is None else "dhi"
        raise InputValidationError(missing, f"required by the '{model.value}' model")
    return _DISPATCH[model](time, lat, lon, ghi, dni, dhi, tilt, azimuth, **kwargs)
