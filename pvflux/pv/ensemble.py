"""
Model-combination ensembles.

Runs the DC (or DC + AC) pipeline once per transposition x cell-temperature
combination and stacks the results into a long table keyed by a ``model``
label such as ``"olmo_skoplaki"``. The spread across models is a quick
measure of model uncertainty for a site.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import pandas as pd
from numpy.typing import ArrayLike

from ..inputs import coerce_enum
from ..solar.transposition import TranspositionModel
from .pipeline import InverterConfig, add_ac_stage, dc_pipeline
from .temperature import CellTemperatureModel

logger = logging.getLogger(__name__)

ENSEMBLE_COLUMNS = (
    "ghi",
    "t_air",
    "wind",
    "model",
    "transposition",
    "cell_temp",
    "g_poa",
    "t_cell",
    "p_dc",
)


def dc_ensemble(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    ghi: ArrayLike,
    t_air: ArrayLike,
    wind: ArrayLike,
    tilt: ArrayLike,
    azimuth: ArrayLike,
    transpositions: Iterable[TranspositionModel | str] = ("olmo", "haydavies"),
    cell_temps: Iterable[CellTemperatureModel | str] = ("skoplaki", "faiman"),
    **kwargs: Any,
) -> pd.DataFrame:
    """Run :func:`dc_pipeline` for every model combination.

    Parameters
    ----------
    time, lat, lon, ghi, t_air, wind, tilt, azimuth
        As for :func:`~pvflux.pv.pipeline.dc_pipeline`.
    transpositions : iterable of TranspositionModel or str
        Transposition models to combine.
    cell_temps : iterable of CellTemperatureModel or str
        Cell temperature models to combine.
    **kwargs
        Passed unchanged to every pipeline run (albedo, module, ...).

    Returns
    -------
    DataFrame
        One block of rows per combination, each in input time order, with
        the columns ``ghi``, ``t_air``, ``wind``, ``model``,
        ``transposition``, ``cell_temp``, ``g_poa``, ``t_cell``, ``p_dc``
        and ``iam`` when the IAM is enabled. The transposition varies
        fastest across blocks.
    """
    transposition_models = [
        coerce_enum(TranspositionModel, t, "transposition") for t in transpositions
    ]
    cell_temp_models = [coerce_enum(CellTemperatureModel, c, "cell_temp") for c in cell_temps]

    blocks = []
    for cell_temp in cell_temp_models:
        for transposition in transposition_models:
            label = f"{transposition.value}_{cell_temp.value}"
            logger.debug("Ensemble member %s", label)
            result = dc_pipeline(
                time, lat, lon, ghi, t_air, wind, tilt, azimuth,
                transposition=transposition,
                cell_temp=cell_temp,
                **kwargs,
            )
            result["model"] = label
            columns = list(ENSEMBLE_COLUMNS)
            if "iam" in result:
                columns.append("iam")
            blocks.append(result[columns])

    return pd.concat(blocks)


def power_ensemble(
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
    """:func:`dc_ensemble` with ``p_ac``, ``clipped`` and ``p_ac_rated`` per model."""
    dc = dc_ensemble(time, lat, lon, ghi, t_air, wind, tilt, azimuth, **kwargs)
    blocks = [add_ac_stage(block, inverter) for _, block in dc.groupby("model", sort=False)]
    return pd.concat(blocks)
