"""PVWatts DC power with an optional power-law incidence angle modifier."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray


def iam_power_law(incidence: ArrayLike, b: float = 0.05) -> NDArray[np.float64]:
    """Incidence angle modifier ``max(0, cos(theta)) ** b`` (theta in degrees)."""
    cos_theta = np.maximum(0.0, np.cos(np.radians(np.asarray(incidence, dtype=np.float64))))
    return cos_theta**b


def pvwatts_dc(
    g_poa: ArrayLike,
    t_cell: ArrayLike,
    p_dc0: float = 230.0,
    gamma: float = -0.0043,
    incidence: ArrayLike | None = None,
    iam_exp: float | None = None,
) -> NDArray[np.float64]:
    """PVWatts DC power.

    Parameters
    ----------
    g_poa : array_like
        Plane-of-array irradiance (W/m^2).
    t_cell : array_like
        Cell temperature (degC).
    p_dc0 : float
        DC rating at 1000 W/m^2 and 25 degC (W).
    gamma : float
        Power temperature coefficient (1/K).
    incidence : array_like, optional
        Angle of incidence (degrees). With ``iam_exp`` it scales the
        irradiance by :func:`iam_power_law`.
    iam_exp : float, optional
        IAM exponent. No IAM is applied when omitted.

    Returns
    -------
    ndarray
        DC power (W), never negative.
    """
    g_eff = np.asarray(g_poa, dtype=np.float64)
    t_cell = np.asarray(t_cell, dtype=np.float64)
    if incidence is not None and iam_exp is not None:
        g_eff = g_eff * iam_power_law(incidence, iam_exp)

    p_dc = p_dc0 * (g_eff / 1000.0) * (1.0 + gamma * (t_cell - 25.0))
    return np.maximum(p_dc, 0.0)
