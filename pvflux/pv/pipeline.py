"""
System-level PV power pipelines.

Chains solar geometry, (optional) GHI decomposition, plane-of-array
transposition, cell temperature, PVWatts DC and inverter clipping into a
single call over a time series. The clear-sky variants start from a
clear-sky model instead of measured GHI and feed its DNI/DHI straight into
the transposition.

All stages are vectorised over the input series; output rows are in input
order and indexed by the caller's timestamps.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TypeVar

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike

from ..inputs import coerce_choice, coerce_enum, require_same_length, thresholded_ratio
from ..solar.clearsky import ClearSkyModel, clearsky
from ..solar.decomposition import DecompositionModel, decompose
from ..solar.extraterrestrial import SOLAR_CONSTANT
from ..solar.transposition import TranspositionModel, transpose
from ..timeutils import prepare_time_utc
from .dc import iam_power_law, pvwatts_dc
from .inverter import simple_clipping
from .temperature import SKOPLAKI_VARIANTS, CellTemperatureModel, faiman, skoplaki

logger = logging.getLogger(__name__)

C = TypeVar("C")


# ---------------------------------------------------------------------------
# Configuration with sensible defaults
# ---------------------------------------------------------------------------

@dataclass
class ModuleConfig:
    """Module parameters for the DC stage.

    Defaults describe a 230 W crystalline-silicon module.
    """

    # --- PVWatts ---
    p_dc0: float = 230.0            # DC rating at STC (W)
    gamma: float = -0.0043          # power temperature coefficient (1/K)
    iam_exp: float | None = 0.05    # power-law IAM exponent; None disables IAM

    # --- Skoplaki (NOCT conditions) ---
    t_noct: float = 45.0            # cell temperature at NOCT (degC)
    t_a_noct: float = 20.0          # ambient temperature at NOCT (degC)
    i_noct: float = 800.0           # irradiance at NOCT (W/m^2)
    v_noct: float = 1.0             # wind speed at NOCT (m/s)
    eta_stc: float = 0.141          # module efficiency at STC
    tau_alpha: float = 0.9          # transmittance-absorptance product

    # --- Faiman ---
    u0: float = 25.0                # constant heat loss (W/m^2/K)
    u1: float = 6.84                # wind heat loss (W s/m^3/K)


@dataclass
class InverterConfig:
    """Plant inverter fleet for the AC stage."""

    n_inverters: int = 20
    inverter_kw: float = 500.0      # AC rating per inverter (kW)
    eta_inv: float = 0.97           # conversion efficiency


def resolve_config(config: C | dict[str, Any] | None, cls: type[C]) -> C:
    if config is None:
        return cls()
    if isinstance(config, dict):
        return cls(**config)
    return config


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def _dc_stage(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    ghi: ArrayLike,
    dni: ArrayLike | None,
    dhi: ArrayLike | None,
    t_air: ArrayLike,
    wind: ArrayLike,
    tilt: ArrayLike,
    azimuth: ArrayLike,
    albedo: ArrayLike,
    transposition: TranspositionModel,
    cell_temp: CellTemperatureModel,
    skoplaki_variant: str,
    min_cos_zenith: float,
    module: ModuleConfig,
    solar_constant: float,
) -> pd.DataFrame:
    """Transposition, cell temperature and DC power for known GHI/DNI/DHI."""
    n = len(prepare_time_utc(time))
    ghi_arr, t_air_arr, wind_arr = require_same_length(n, ghi=ghi, t_air=t_air, wind=wind)

    kwargs: dict[str, Any] = {"albedo": albedo}
    if transposition in (TranspositionModel.HAY_DAVIES, TranspositionModel.REINDL):
        kwargs["min_cos_zenith"] = min_cos_zenith
    if transposition.needs_decomposition:
        kwargs["solar_constant"] = solar_constant
    poa = transpose(
        transposition, time, lat, lon, ghi_arr, tilt, azimuth, dni=dni, dhi=dhi, **kwargs
    )

    g_poa = poa["poa_global"].to_numpy(dtype=np.float64, na_value=np.nan)
    incidence = poa["incidence"].to_numpy(dtype=np.float64)

    if cell_temp is CellTemperatureModel.SKOPLAKI:
        t_cell = skoplaki(
            g_poa,
            t_air_arr,
            wind_arr,
            variant=skoplaki_variant,
            gamma=module.gamma,
            t_noct=module.t_noct,
            t_a_noct=module.t_a_noct,
            i_noct=module.i_noct,
            v_noct=module.v_noct,
            eta_stc=module.eta_stc,
            tau_alpha=module.tau_alpha,
        )
    else:
        t_cell = faiman(g_poa, t_air_arr, wind_arr, u0=module.u0, u1=module.u1)

    p_dc = pvwatts_dc(
        g_poa,
        t_cell,
        p_dc0=module.p_dc0,
        gamma=module.gamma,
        incidence=incidence,
        iam_exp=module.iam_exp,
    )

    result = pd.DataFrame(
        {
            "ghi": ghi_arr,
            "g_poa": g_poa,
            "t_air": t_air_arr,
            "wind": wind_arr,
            "t_cell": t_cell,
            "p_dc": p_dc,
            "zenith": poa["zenith"].to_numpy(),
            "incidence": incidence,
            "transposition": transposition.value,
            "cell_temp": cell_temp.value,
            "sun_azimuth": poa["azimuth"].to_numpy(),
        },
        index=poa.index,
    )
    if transposition.needs_decomposition:
        result["dni"] = poa["dni"].to_numpy()
        result["dhi"] = poa["dhi"].to_numpy()
    for column in ("ai", "rb"):
        if column in poa:
            result[column] = poa[column].to_numpy()
    if cell_temp is CellTemperatureModel.SKOPLAKI:
        result["skoplaki"] = skoplaki_variant
    if module.iam_exp is not None:
        result["iam"] = iam_power_law(incidence, module.iam_exp)
    return result


def add_ac_stage(
    dc: pd.DataFrame,
    inverter: InverterConfig | dict[str, Any] | None = None,
) -> pd.DataFrame:
    """Return ``dc`` with ``p_ac``, ``clipped`` and ``p_ac_rated`` columns added."""
    inv = resolve_config(inverter, InverterConfig)
    ac = simple_clipping(
        dc["p_dc"].to_numpy(dtype=np.float64),
        n_inverters=inv.n_inverters,
        inverter_kw=inv.inverter_kw,
        eta_inv=inv.eta_inv,
    )
    out = dc.copy()
    out["p_ac"] = ac.p_ac
    out["clipped"] = ac.clipped
    out["p_ac_rated"] = ac.p_ac_rated
    return out


# ---------------------------------------------------------------------------
# Measured-GHI pipelines
# ---------------------------------------------------------------------------

def dc_pipeline(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    ghi: ArrayLike,
    t_air: ArrayLike,
    wind: ArrayLike,
    tilt: ArrayLike,
    azimuth: ArrayLike,
    albedo: ArrayLike = 0.2,
    transposition: TranspositionModel | str = TranspositionModel.OLMO,
    decomposition: DecompositionModel | str = DecompositionModel.ERBS,
    cell_temp: CellTemperatureModel | str = CellTemperatureModel.SKOPLAKI,
    skoplaki_variant: str = "model1",
    min_cos_zenith: float = 0.01745,
    module: ModuleConfig | dict[str, Any] | None = None,
    solar_constant: float = SOLAR_CONSTANT,
) -> pd.DataFrame:
    """Estimate DC power from measured GHI and weather.

    Processing chain
    ~~~~~~~~~~~~~~~~
    1. Decompose GHI into DNI/DHI when the transposition needs them.
    2. Transpose to plane-of-array irradiance.
    3. Cell temperature (Skoplaki or Faiman).
    4. PVWatts DC, with the power-law IAM unless ``module.iam_exp`` is None.

    Parameters
    ----------
    time : sequence of instants
        Timestamps (naive is taken as UTC).
    lat, lon : float or array_like
        Site coordinates in degrees.
    ghi, t_air, wind : array_like, shape (N,)
        Global horizontal irradiance (W/m^2), air temperature (degC) and
        wind speed (m/s), one per instant.
    tilt, azimuth : float or array_like
        Panel tilt from horizontal and azimuth clockwise from north
        (degrees).
    albedo : float or array_like
        Ground reflectance.
    transposition, decomposition, cell_temp : enum or str
        Model selection.
    skoplaki_variant : {"model1", "model2"}
        Wind correlation used by the Skoplaki model.
    min_cos_zenith : float
        cos(zenith) floor for the Hay-Davies / Reindl projection ratio.
    module : ModuleConfig or dict or None
        Module parameters. A ``dict`` is unpacked into
        :class:`ModuleConfig`; ``None`` uses the defaults.
    solar_constant : float
        Used for extraterrestrial irradiance.

    Returns
    -------
    DataFrame
        ``ghi``, ``g_poa``, ``t_air``, ``wind``, ``t_cell``, ``p_dc``,
        ``zenith``, ``incidence``, ``transposition``, ``cell_temp`` and
        ``sun_azimuth``, plus ``dni``/``dhi`` (decomposed), ``ai``/``rb``
        (Hay-Davies, Reindl), ``skoplaki`` and ``iam`` when applicable.

    Raises
    ------
    InputValidationError
        On unknown model names or length mismatches.
    """
    transposition = coerce_enum(TranspositionModel, transposition, "transposition")
    decomposition = coerce_enum(DecompositionModel, decomposition, "decomposition")
    cell_temp = coerce_enum(CellTemperatureModel, cell_temp, "cell_temp")
    coerce_choice(skoplaki_variant, SKOPLAKI_VARIANTS, "skoplaki_variant")
    module_cfg = resolve_config(module, ModuleConfig)

    info = prepare_time_utc(time)
    require_same_length(len(info), ghi=ghi, t_air=t_air, wind=wind)
    logger.debug(
        "DC pipeline: %d rows, transposition=%s, cell_temp=%s",
        len(info), transposition.value, cell_temp.value,
    )

    dni = dhi = None
    if transposition.needs_decomposition:
        split = decompose(decomposition, time, lat, lon, ghi, solar_constant=solar_constant)
        dni = split["dni"].to_numpy()
        dhi = split["dhi"].to_numpy()

    return _dc_stage(
        time, lat, lon, ghi, dni, dhi, t_air, wind, tilt, azimuth, albedo,
        transposition, cell_temp, skoplaki_variant, min_cos_zenith, module_cfg,
        solar_constant,
    )


def power_pipeline(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    ghi: ArrayLike,
    t_air: ArrayLike,
    wind: ArrayLike,
    tilt: ArrayLike,
    azimuth: ArrayLike,
    inverter: InverterConfig | dict[str, Any] | None = None,
    **kwargs: Any,
) -> pd.DataFrame:
    """:func:`dc_pipeline` followed by inverter clipping.

    Keyword arguments other than ``inverter`` are passed to
    :func:`dc_pipeline`. Adds ``p_ac``, ``clipped`` and ``p_ac_rated``.
    """
    dc = dc_pipeline(time, lat, lon, ghi, t_air, wind, tilt, azimuth, **kwargs)
    return add_ac_stage(dc, inverter)


# ---------------------------------------------------------------------------
# Clear-sky pipelines
# ---------------------------------------------------------------------------

def clearsky_dc_pipeline(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    t_air: ArrayLike,
    wind: ArrayLike,
    tilt: ArrayLike,
    azimuth: ArrayLike,
    linke_turbidity: ArrayLike = 3.0,
    altitude: ArrayLike = 0.0,
    clearsky_model: ClearSkyModel | str = ClearSkyModel.INEICHEN,
    transposition: TranspositionModel | str = TranspositionModel.HAY_DAVIES,
    cell_temp: CellTemperatureModel | str = CellTemperatureModel.SKOPLAKI,
    decomposition: DecompositionModel | str = DecompositionModel.ERBS,
    albedo: ArrayLike = 0.2,
    perez_enhancement: bool = False,
    skoplaki_variant: str = "model1",
    min_cos_zenith: float = 0.01745,
    module: ModuleConfig | dict[str, Any] | None = None,
    solar_constant: float = SOLAR_CONSTANT,
) -> pd.DataFrame:
    """Expected DC power under clear skies.

    The clear-sky GHI, DNI and DHI go straight into the transposition.
    ``decomposition`` only matters for the Haurwitz model, whose DNI/DHI
    come from a decomposition of its GHI; ``linke_turbidity``,
    ``altitude`` and ``perez_enhancement`` only apply to Ineichen-Perez.

    Returns
    -------
    DataFrame
        ``ghi_clearsky``, ``dni_clearsky``, ``dhi_clearsky``, the
        :func:`dc_pipeline` columns and ``airmass``.
    """
    clearsky_model = coerce_enum(ClearSkyModel, clearsky_model, "clearsky_model")
    transposition = coerce_enum(TranspositionModel, transposition, "transposition")
    cell_temp = coerce_enum(CellTemperatureModel, cell_temp, "cell_temp")
    coerce_choice(skoplaki_variant, SKOPLAKI_VARIANTS, "skoplaki_variant")
    module_cfg = resolve_config(module, ModuleConfig)

    info = prepare_time_utc(time)
    require_same_length(len(info), t_air=t_air, wind=wind)
    logger.debug(
        "Clear-sky DC pipeline: %d rows, clearsky=%s, transposition=%s, cell_temp=%s",
        len(info), clearsky_model.value, transposition.value, cell_temp.value,
    )

    if clearsky_model is ClearSkyModel.INEICHEN:
        cs = clearsky(
            clearsky_model, time, lat, lon,
            linke_turbidity=linke_turbidity,
            altitude=altitude,
            solar_constant=solar_constant,
            perez_enhancement=perez_enhancement,
        )
    else:
        cs = clearsky(
            clearsky_model, time, lat, lon,
            decomposition=decomposition,
            solar_constant=solar_constant,
        )

    ghi = cs["ghi_clearsky"].to_numpy()
    dni = cs["dni_clearsky"].to_numpy() if transposition.needs_decomposition else None
    dhi = cs["dhi_clearsky"].to_numpy() if transposition.needs_decomposition else None
    dc = _dc_stage(
        time, lat, lon, ghi, dni, dhi, t_air, wind, tilt, azimuth, albedo,
        transposition, cell_temp, skoplaki_variant, min_cos_zenith, module_cfg,
        solar_constant,
    )
    for position, column in enumerate(("ghi_clearsky", "dni_clearsky", "dhi_clearsky")):
        dc.insert(position, column, cs[column].to_numpy())
    dc["airmass"] = cs["airmass"].array
    return dc


def clearsky_power_pipeline(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    t_air: ArrayLike,
    wind: ArrayLike,
    tilt: ArrayLike,
    azimuth: ArrayLike,
    inverter: InverterConfig | dict[str, Any] | None = None,
    **kwargs: Any,
) -> pd.DataFrame:
    """:func:`clearsky_dc_pipeline` followed by inverter clipping."""
    dc = clearsky_dc_pipeline(time, lat, lon, t_air, wind, tilt, azimuth, **kwargs)
    return add_ac_stage(dc, inverter)


def clearsky_performance_ratio(
    p_measured: ArrayLike,
    p_clearsky: ArrayLike,
    min_clearsky_power: float = 100.0,
) -> pd.Series:
    """Measured over clear-sky power; ``<NA>`` where clear-sky power is below the threshold."""
    return thresholded_ratio(p_measured, p_clearsky, min_clearsky_power, "performance_ratio")

