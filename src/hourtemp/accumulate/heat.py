"""Heat accumulation from hourly temperatures.

Both models are stateless per hour: the output is a running sum of hourly
contributions in calendar order.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from hourtemp.accumulate.common import as_temperature_array, finish_output


def heat_hours(
    temps: Iterable[float] | pd.Series | np.ndarray,
    base_temperature: float = 4.0,
    summ: bool = True,
) -> np.ndarray | pd.Series:
    """Degree hours above a base temperature: max(0, T - base) per hour.

    Args:
        temps: Hourly temperatures in °C, in calendar order
        base_temperature: Base temperature in °C
        summ: If True return cumulative totals, else per-hour values

    Returns:
        Array (or Series for Series input); NaN where the input is missing
    """
    t = as_temperature_array(temps)
    with np.errstate(invalid="ignore"):
        per_hour = np.where(np.isnan(t), np.nan, np.maximum(t - base_temperature, 0.0))
    return finish_output(per_hour, temps, summ)


def gdh(
    temps: Iterable[float] | pd.Series | np.ndarray,
    summ: bool = True,
    base: float = 4.0,
    optimum: float = 25.0,
    critical: float = 36.0,
    stress: float = 1.0,
) -> np.ndarray | pd.Series:
    """Growing Degree Hours after Anderson et al. (1986).

    Contribution rises along a cosine from `base` to `optimum`, declines
    along a cosine from `optimum` to `critical`, and is 0 outside.

    Args:
        temps: Hourly temperatures in °C, in calendar order
        summ: If True return cumulative totals, else per-hour values
        base: Base temperature (°C)
        optimum: Optimum temperature (°C)
        critical: Critical temperature (°C)
        stress: Stress factor, 1 for unstressed

    Returns:
        Array (or Series for Series input); NaN where the input is missing
    """
    if not base < optimum < critical:
        raise ValueError(
            f"GDH requires base < optimum < critical, got {base}, {optimum}, {critical}"
        )

    t = as_temperature_array(temps)
    per_hour = np.zeros_like(t)
    with np.errstate(invalid="ignore"):
        rising = (t >= base) & (t <= optimum)
        falling = (t > optimum) & (t <= critical)
    span = optimum - base
    per_hour[rising] = stress * span / 2 * (1 + np.cos(np.pi + np.pi * (t[rising] - base) / span))
    per_hour[falling] = stress * span * (
        1 + np.cos(np.pi / 2 + np.pi / 2 * (t[falling] - optimum) / (critical - optimum))
    )
    per_hour[np.isnan(t)] = np.nan
    return finish_output(per_hour, temps, summ)
