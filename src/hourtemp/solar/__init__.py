"""Solar geometry for the diurnal temperature curve."""

from hourtemp.solar.daylength import SunTimes, solar_declination, sun_times, sun_times_table

__all__ = [
    "SunTimes",
    "solar_declination",
    "sun_times",
    "sun_times_table",
]
