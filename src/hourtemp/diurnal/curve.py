"""Idealized diurnal temperature curve.

Each day is split into four segments by sunrise, sunset and the time of
maximum (a fixed offset after solar noon):

    pre_sunrise   hour <= sunrise            log decay from yesterday's sunset
                                             temperature toward today's Tmin
    rising        sunrise < hour < t_max     sine ascent from Tmin to Tmax
    falling       t_max <= hour <= sunset    same sine, past its peak
    post_sunset   hour > sunset              log decay from today's sunset
                                             temperature toward tomorrow's Tmin

Daytime:  T = Tmin + (Tmax - Tmin) * sin(pi * (h - sunrise) / (daylength + 2 * offset))
Night:    T = Tss - (Tss - Tmin_target) * ln(1 + elapsed) / ln(1 + night_length)

Every hour is linear in the daily extremes, so the same model is exposed two
ways: as a value (idealized_temp) and as coefficients over the extremes it
depends on (equation_for), which is what the solver needs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Mapping

import numpy as np
import pandas as pd

from hourtemp.schemas.daily_extremes import daily_dates, validate_daily_extremes
from hourtemp.solar.daylength import SunTimes, sun_times_table

PRE_SUNRISE = "pre_sunrise"
RISING = "rising"
FALLING = "falling"
POST_SUNSET = "post_sunset"

SEGMENTS = (PRE_SUNRISE, RISING, FALLING, POST_SUNSET)

# Hours after solar noon at which the daily maximum is reached
DEFAULT_TIME_OF_MAX_OFFSET = 2.0

HOURS_PER_DAY = 24

# (day offset relative to the equation's day, "tmin" | "tmax")
ExtremeKey = tuple[int, str]


@dataclass(frozen=True)
class DiurnalEquation:
    """temp(hour) = intercept + sum(coef * extreme) for one hour of one day.

    Keys of `coefficients` are (day_offset, var) with day_offset in
    {-1, 0, 1}. Only extremes with a non-zero weight appear.
    """
    hour: int
    segment: str
    coefficients: dict[ExtremeKey, float] = field(default_factory=dict)
    intercept: float = 0.0

    def evaluate(self, values: Mapping[ExtremeKey, float]) -> float:
        """Evaluate with extremes looked up by (day_offset, var)."""
        total = self.intercept
        for key, coef in self.coefficients.items():
            total += coef * values[key]
        return total

    def resolve(self, day: int, n_days: int) -> dict[tuple[int, str], float]:
        """Map coefficients to absolute (day_index, var) keys.

        Neighbours beyond either end of the series fall back to the day
        itself, so coefficients may merge.
        """
        resolved: dict[tuple[int, str], float] = {}
        for (offset, var), coef in self.coefficients.items():
            target = min(max(day + offset, 0), n_days - 1)
            resolved[(target, var)] = resolved.get((target, var), 0.0) + coef
        return resolved


def time_of_max(sun: SunTimes, offset: float = DEFAULT_TIME_OF_MAX_OFFSET) -> float:
    return sun.sunrise + sun.daylength / 2 + offset


def segment_for(
    hour: float,
    sun: SunTimes,
    offset: float = DEFAULT_TIME_OF_MAX_OFFSET,
) -> str:
    """Return the curve segment an hour falls into."""
    if hour <= sun.sunrise:
        return PRE_SUNRISE
    if hour > sun.sunset:
        return POST_SUNSET
    if hour < time_of_max(sun, offset):
        return RISING
    return FALLING


def _day_weight(hour: float, sun: SunTimes, offset: float) -> float:
    """Weight of Tmax in the daytime sine (Tmin gets 1 - weight)."""
    return math.sin(math.pi * (hour - sun.sunrise) / (sun.daylength + 2 * offset))


def _sunset_weight(sun: SunTimes, offset: float) -> float:
    return _day_weight(sun.sunset, sun, offset)


def _night_weight(elapsed: float, night_length: float) -> float:
    """Fraction of the way from sunset temperature to the next Tmin."""
    if night_length <= 0:
        return 1.0
    weight = math.log1p(max(elapsed, 0.0)) / math.log1p(night_length)
    return min(max(weight, 0.0), 1.0)


def _add(coefs: dict[ExtremeKey, float], key: ExtremeKey, value: float) -> None:
    if value != 0.0:
        coefs[key] = coefs.get(key, 0.0) + value


def equation_for(
    hour: int,
    sun_prev: SunTimes,
    sun_today: SunTimes,
    sun_next: SunTimes,
    offset: float = DEFAULT_TIME_OF_MAX_OFFSET,
) -> DiurnalEquation:
    """Express the idealized temperature at `hour` as a linear equation.

    Args:
        hour: Hour of day, 0..23
        sun_prev: Sun times of the previous day
        sun_today: Sun times of this day
        sun_next: Sun times of the next day
        offset: Hours after solar noon of the daily maximum

    Returns:
        DiurnalEquation over (day_offset, var) extremes
    """
    segment = segment_for(hour, sun_today, offset)
    coefs: dict[ExtremeKey, float] = {}

    if segment == PRE_SUNRISE:
        night = _night_weight(
            hour + HOURS_PER_DAY - sun_prev.sunset,
            HOURS_PER_DAY - sun_prev.sunset + sun_today.sunrise,
        )
        s = _sunset_weight(sun_prev, offset)
        _add(coefs, (-1, "tmin"), (1 - night) * (1 - s))
        _add(coefs, (-1, "tmax"), (1 - night) * s)
        _add(coefs, (0, "tmin"), night)
    elif segment == POST_SUNSET:
        night = _night_weight(
            hour - sun_today.sunset,
            HOURS_PER_DAY - sun_today.sunset + sun_next.sunrise,
        )
        s = _sunset_weight(sun_today, offset)
        _add(coefs, (0, "tmin"), (1 - night) * (1 - s))
        _add(coefs, (0, "tmax"), (1 - night) * s)
        _add(coefs, (1, "tmin"), night)
    else:
        g = _day_weight(hour, sun_today, offset)
        _add(coefs, (0, "tmin"), 1 - g)
        _add(coefs, (0, "tmax"), g)

    return DiurnalEquation(hour=hour, segment=segment, coefficients=coefs)


def idealized_temp(
    hour: int,
    tmin_prev: float,
    tmax_prev: float,
    tmin_today: float,
    tmax_today: float,
    tmin_next: float,
    sun_prev: SunTimes,
    sun_today: SunTimes,
    sun_next: SunTimes,
    offset: float = DEFAULT_TIME_OF_MAX_OFFSET,
) -> float:
    """Idealized temperature at `hour` given neighbouring daily extremes."""
    eq = equation_for(hour, sun_prev, sun_today, sun_next, offset)
    return eq.evaluate({
        (-1, "tmin"): tmin_prev,
        (-1, "tmax"): tmax_prev,
        (0, "tmin"): tmin_today,
        (0, "tmax"): tmax_today,
        (1, "tmin"): tmin_next,
    })


def sun_times_for_days(dates: pd.Series, latitude: float) -> list[SunTimes]:
    """SunTimes for each calendar date, in order."""
    doy = pd.DatetimeIndex(dates).dayofyear
    table = sun_times_table(latitude, doy)
    return [
        SunTimes(row.sunrise, row.sunset, row.daylength)
        for row in table.itertuples(index=False)
    ]


def day_equations(
    day: int,
    suns: list[SunTimes],
    offset: float = DEFAULT_TIME_OF_MAX_OFFSET,
) -> list[DiurnalEquation]:
    """The 24 hourly equations of one day of a series.

    Missing neighbours at either end of the series reuse the day itself.
    """
    n = len(suns)
    sun_prev = suns[max(day - 1, 0)]
    sun_next = suns[min(day + 1, n - 1)]
    return [
        equation_for(hour, sun_prev, suns[day], sun_next, offset)
        for hour in range(HOURS_PER_DAY)
    ]


def idealized_series(
    daily: pd.DataFrame,
    latitude: float,
    offset: float = DEFAULT_TIME_OF_MAX_OFFSET,
) -> np.ndarray:
    """Idealized hourly temperatures for every hour of a daily table.

    Hours depending on a missing extreme come back NaN.
    """
    suns = sun_times_for_days(daily_dates(daily), latitude)
    tmin = daily["tmin_c"].to_numpy(dtype=float)
    tmax = daily["tmax_c"].to_numpy(dtype=float)
    n = len(daily)
    extremes = {"tmin": tmin, "tmax": tmax}

    out = np.empty(n * HOURS_PER_DAY)
    for day in range(n):
        for eq in day_equations(day, suns, offset):
            value = eq.intercept
            for (target, var), coef in eq.resolve(day, n).items():
                value += coef * extremes[var][target]
            out[day * HOURS_PER_DAY + eq.hour] = value
    return out


def make_hourly_temps(
    latitude: float,
    daily: pd.DataFrame,
    offset: float = DEFAULT_TIME_OF_MAX_OFFSET,
) -> pd.DataFrame:
    """Generate an idealized hourly table from daily Tmin/Tmax.

    Args:
        latitude: Station latitude in degrees
        daily: Daily table (year, month, day, tmin_c, tmax_c), consecutive days
        offset: Hours after solar noon of the daily maximum

    Returns:
        Hourly table with columns year, month, day, hour, temp_c

    Raises:
        ValueError: If the daily table or latitude is invalid
    """
    validate_daily_extremes(daily)
    if daily.empty:
        return pd.DataFrame(columns=["year", "month", "day", "hour", "temp_c"])

    temps = idealized_series(daily, latitude, offset)
    calendar = daily[["year", "month", "day"]].astype(int).reset_index(drop=True)
    hourly = calendar.loc[calendar.index.repeat(HOURS_PER_DAY)].reset_index(drop=True)
    hourly["hour"] = np.tile(np.arange(HOURS_PER_DAY), len(calendar))
    hourly["temp_c"] = temps
    return hourly
