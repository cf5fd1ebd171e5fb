"""Sunrise, sunset and day length from latitude and day of year.

Times are in local solar hours (solar noon = 12). Declination follows the
Spencer (1971) Fourier series; sunrise/sunset are taken at a solar altitude of
-0.8333 degrees (upper limb with standard refraction).

Polar days and nights never produce NaN: the hour-angle cosine is clamped,
giving sunrise = sunset = 12 (daylength 0) or sunrise = 0, sunset = 24
(daylength 24).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np
import pandas as pd

# Solar altitude at sunrise/sunset, degrees
SUNRISE_ALTITUDE_DEG = -0.8333

# Degrees of hour angle per hour
_DEG_PER_HOUR = 15.0


@dataclass(frozen=True)
class SunTimes:
    """Sun times for one day, in local solar hours.

    Attributes:
        sunrise: Hour of sunrise, in [0, 12]
        sunset: Hour of sunset, in [12, 24]
        daylength: sunset - sunrise, in [0, 24]
    """
    sunrise: float
    sunset: float
    daylength: float


def _check_latitude(latitude: float) -> None:
    if not np.isfinite(latitude) or not -90 < latitude < 90:
        raise ValueError(f"latitude must be in (-90, 90), got {latitude}")


def solar_declination(day_of_year: np.ndarray | float) -> np.ndarray:
    """Solar declination in radians (Spencer 1971)."""
    gamma = 2 * np.pi / 365 * (np.asarray(day_of_year, dtype=float) - 1)
    return (
        0.006918
        - 0.399912 * np.cos(gamma)
        + 0.070257 * np.sin(gamma)
        - 0.006758 * np.cos(2 * gamma)
        + 0.000907 * np.sin(2 * gamma)
        - 0.002697 * np.cos(3 * gamma)
        + 0.001480 * np.sin(3 * gamma)
    )


def _sun_times_arrays(
    latitude: float,
    day_of_year: np.ndarray,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    lat = np.radians(latitude)
    delta = solar_declination(day_of_year)
    cos_wo = (np.sin(np.radians(SUNRISE_ALTITUDE_DEG)) - np.sin(lat) * np.sin(delta)) / (
        np.cos(lat) * np.cos(delta)
    )
    # cos_wo > 1: sun never rises; cos_wo < -1: sun never sets
    half_day = np.degrees(np.arccos(np.clip(cos_wo, -1.0, 1.0))) / _DEG_PER_HOUR
    half_day = np.where(cos_wo >= 1.0, 0.0, np.where(cos_wo <= -1.0, 12.0, half_day))
    sunrise = 12.0 - half_day
    sunset = 12.0 + half_day
    return sunrise, sunset, sunset - sunrise


def sun_times(latitude: float, day_of_year: int) -> SunTimes:
    """Compute sunrise, sunset and day length for one day.

    Args:
        latitude: Degrees north (negative for south), strictly inside (-90, 90)
        day_of_year: 1..366

    Returns:
        SunTimes with 0 <= sunrise <= sunset <= 24

    Raises:
        ValueError: If latitude or day_of_year are out of range
    """
    _check_latitude(latitude)
    if not 1 <= day_of_year <= 366:
        raise ValueError(f"day_of_year must be in [1, 366], got {day_of_year}")

    sunrise, sunset, daylength = _sun_times_arrays(latitude, np.array([day_of_year]))
    return SunTimes(float(sunrise[0]), float(sunset[0]), float(daylength[0]))


def sun_times_table(latitude: float, days_of_year: Iterable[int]) -> pd.DataFrame:
    """Vectorized sun_times over many days.

    Returns:
        DataFrame with columns day_of_year, sunrise, sunset, daylength
    """
    _check_latitude(latitude)
    doy = np.asarray(list(days_of_year), dtype=int)
    if doy.size and (doy.min() < 1 or doy.max() > 366):
        raise ValueError("day_of_year must be in [1, 366]")

    sunrise, sunset, daylength = _sun_times_arrays(latitude, doy)
    return pd.DataFrame({
        "day_of_year": doy,
        "sunrise": sunrise,
        "sunset": sunset,
        "daylength": daylength,
    })
