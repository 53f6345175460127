"""
Inverter model: constant efficiency with clipping at the plant AC rating.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray


@dataclass
class ACResult:
    """AC output of :func:`simple_clipping`."""

    p_ac: NDArray[np.float64]  # AC power (W)
    clipped: NDArray[np.bool_]  # rows limited by the rating
    p_ac_rated: float  # plant AC rating (W)


def simple_clipping(
    p_dc: ArrayLike,
    n_inverters: int = 20,
    inverter_kw: float = 500.0,
    eta_inv: float = 0.97,
) -> ACResult:
    """Convert DC to AC at a fixed efficiency and clip at the plant rating.

    Parameters
    ----------
    p_dc : array_like
        DC power input (W).
    n_inverters : int
        Number of identical inverters.
    inverter_kw : float
        AC rating of one inverter (kW).
    eta_inv : float
        Constant conversion efficiency (0-1).

    Returns
    -------
    ACResult
        ``p_ac = min(eta_inv * p_dc, rated)`` with the clipping flag and
        the rating ``n_inverters * inverter_kw * 1000`` W.
    """
    p_dc = np.asarray(p_dc, dtype=np.float64)
    rated = float(n_inverters) * float(inverter_kw) * 1000.0
    uncapped = eta_inv * p_dc
    return ACResult(
        p_ac=np.minimum(uncapped, rated),
        clipped=uncapped > rated,
        p_ac_rated=rated,
    )
