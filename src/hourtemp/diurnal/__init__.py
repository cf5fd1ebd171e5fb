"""Idealized diurnal temperature curve (sine by day, log decay by night)."""

from hourtemp.diurnal.curve import (
    DEFAULT_TIME_OF_MAX_OFFSET,
    FALLING,
    POST_SUNSET,
    PRE_SUNRISE,
    RISING,
    SEGMENTS,
    DiurnalEquation,
    day_equations,
    equation_for,
    idealized_series,
    idealized_temp,
    make_hourly_temps,
    segment_for,
    sun_times_for_days,
    time_of_max,
)

__all__ = [
    "DEFAULT_TIME_OF_MAX_OFFSET",
    "PRE_SUNRISE",
    "RISING",
    "FALLING",
    "POST_SUNSET",
    "SEGMENTS",
    "DiurnalEquation",
    "day_equations",
    "equation_for",
    "idealized_series",
    "idealized_temp",
    "make_hourly_temps",
    "segment_for",
    "sun_times_for_days",
    "time_of_max",
]
