"""
Solar geometry and irradiance models.

Provides solar position (vector algebra, Meeus ephemeris terms),
extraterrestrial irradiance, airmass, clear-sky irradiance
(Ineichen-Perez, Haurwitz), Linke turbidity lookup, GHI decomposition
(Erbs, Boland-Ridley) and plane-of-array transposition (Hay-Davies,
Reindl, Perez 1990, Olmo 1999).
"""

from .airmass import absolute_airmass, kasten_young_airmass, pressure_altitude_correction
from .clearsky import ClearSkyModel, clearsky, clearsky_index, haurwitz, ineichen_perez
from .decomposition import DecompositionModel, boland_ridley, decompose, erbs
from .extraterrestrial import SOLAR_CONSTANT, extra_radiation_spencer
from .position import (
    aoi,
    cos_aoi,
    declination,
    equation_of_time,
    filter_solar_elevation,
    hour_angle,
    julian_day,
    solar_position,
    sun_position,
    sun_vector,
)
from .transposition import TranspositionModel, hay_davies, olmo, perez, reindl, transpose
from .turbidity import (
    ArrayTurbidityGrid,
    H5TurbidityGrid,
    TurbidityGrid,
    degrees_to_index,
    interpolate_monthly,
    lookup_linke_turbidity,
    simple_linke_turbidity,
)

__all__ = [
    # position
    "julian_day",
    "equation_of_time",
    "declination",
    "hour_angle",
    "sun_vector",
    "sun_position",
    "solar_position",
    "cos_aoi",
    "aoi",
    "filter_solar_elevation",
    # extraterrestrial / airmass
    "SOLAR_CONSTANT",
    "extra_radiation_spencer",
    "kasten_young_airmass",
    "pressure_altitude_correction",
    "absolute_airmass",
    # clearsky
    "ClearSkyModel",
    "clearsky",
    "ineichen_perez",
    "haurwitz",
    "clearsky_index",
    # turbidity
    "TurbidityGrid",
    "H5TurbidityGrid",
    "ArrayTurbidityGrid",
    "degrees_to_index",
    "interpolate_monthly",
    "lookup_linke_turbidity",
    "simple_linke_turbidity",
    # decomposition
    "DecompositionModel",
    "decompose",
    "erbs",
    "boland_ridley",
    # transposition
    "TranspositionModel",
    "transpose",
    "hay_davies",
    "reindl",
    "perez",
    "olmo",
]
