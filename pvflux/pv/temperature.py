"""
Cell temperature models.

References
----------
- Skoplaki E., Boudouvis A.G., Palyvos J.A., "A simple correlation for the
  operating temperature of photovoltaic modules of arbitrary mounting",
  Solar Energy Materials and Solar Cells, 92:1393-1402, 2008.
- Faiman D., "Assessing the outdoor operating temperature of photovoltaic
  modules", Progress in Photovoltaics, 16(4):307-315, 2008.
"""

from __future__ import annotations

from enum import Enum

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..inputs import coerce_choice

SKOPLAKI_VARIANTS = ("model1", "model2")
_T_STC = 25.0


class CellTemperatureModel(str, Enum):
    SKOPLAKI = "skoplaki"
    FAIMAN = "faiman"


def _wind_convection(wind: NDArray[np.float64], variant: str) -> NDArray[np.float64]:
    """Wind convection coefficient h_w (W/m^2/K) for a Skoplaki variant."""
    if variant == "model1":
        return 8.91 + 2.00 * wind
    return 5.7 + 3.8 * np.maximum(0.0, 0.68 * wind - 0.5)


def skoplaki(
    g_poa: ArrayLike,
    t_air: ArrayLike,
    wind: ArrayLike,
    variant: str = "model1",
    gamma: float = -0.0043,
    t_noct: float = 45.0,
    t_a_noct: float = 20.0,
    i_noct: float = 800.0,
    v_noct: float = 1.0,
    eta_stc: float = 0.141,
    tau_alpha: float = 0.9,
) -> NDArray[np.float64]:
    """Estimate cell temperature with the Skoplaki wind-dependent correlation.

    Parameters
    ----------
    g_poa : array_like
        Plane-of-array irradiance (W/m^2).
    t_air : array_like
        Ambient temperature (degC).
    wind : array_like
        Wind speed (m/s).
    variant : {"model1", "model2"}
        Wind convection correlation: ``8.91 + 2.0 v`` (model1) or
        ``5.7 + 3.8 max(0, 0.68 v - 0.5)`` (model2).
    gamma : float
        Power temperature coefficient (1/K).
    t_noct, t_a_noct, i_noct, v_noct : float
        Cell temperature, ambient temperature, irradiance and wind speed
        at Nominal Operating Cell Temperature conditions.
    eta_stc : float
        Module efficiency at STC.
    tau_alpha : float
        Transmittance-absorptance product.

    Returns
    -------
    ndarray
        Cell temperature (degC).
    """
    coerce_choice(variant, SKOPLAKI_VARIANTS, "skoplaki_variant")
    g_poa = np.asarray(g_poa, dtype=np.float64)
    t_air = np.asarray(t_air, dtype=np.float64)
    wind = np.asarray(wind, dtype=np.float64)

    h_w_noct = _wind_convection(np.asarray(v_noct, dtype=np.float64), variant)
    h_w = _wind_convection(wind, variant)

    irradiance_ratio = g_poa / i_noct
    heating = irradiance_ratio * (t_noct - t_a_noct) * (h_w_noct / h_w)

    numerator = t_air + heating * (1.0 - (eta_stc / tau_alpha) * (1.0 - gamma * _T_STC))
    denominator = 1.0 - (gamma * eta_stc / tau_alpha) * heating
    return numerator / denominator


def faiman(
    poa_global: ArrayLike,
    temp_air: ArrayLike,
    wind_speed: ArrayLike,
    u0: float = 25.0,
    u1: float = 6.84,
) -> NDArray[np.float64]:
    """Faiman cell temperature: ``T_air + G / (u0 + u1 * ws)`` (degC)."""
    poa_global = np.asarray(poa_global, dtype=np.float64)
    temp_air = np.asarray(temp_air, dtype=np.float64)
    wind_speed = np.asarray(wind_speed, dtype=np.float64)
    return temp_air + poa_global / (u0 + u1 * wind_speed)
