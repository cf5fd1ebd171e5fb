"""Winter chill from hourly temperatures.

The Dynamic Model (Fishman et al. 1987; Erez et al. 1990) simulates a
two-step process: cool temperatures build a thermally labile intermediate,
warm temperatures destroy it, and once it reaches a critical level a share of
it is fixed irreversibly as a chill portion.

The model is a strict left fold over the hours in calendar order: each step
takes the previous DynamicState and one temperature and returns the next
state plus the portions gained that hour. Separate series never share
state, so they can be processed independently.

Chilling Hours and the Utah Model are per-hour weightings included for
comparison.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np
import pandas as pd

from hourtemp.accumulate.common import as_temperature_array, finish_output


@dataclass(frozen=True)
class DynamicParams:
    """Dynamic Model constants.

    Attributes:
        e0: Activation energy for forming the intermediate (K)
        e1: Activation energy for destroying the intermediate (K)
        a0: Rate constant for forming the intermediate
        a1: Rate constant for destroying the intermediate
        slp: Slope of the sigmoid governing conversion to portions
        tetmlt: Temperature (K) at the sigmoid's midpoint
        kelvin_offset: Added to °C to obtain the model's K
    """
    e0: float = 4153.5
    e1: float = 12888.8
    a0: float = 139500.0
    a1: float = 2.567e18
    slp: float = 1.6
    tetmlt: float = 277.0
    kelvin_offset: float = 273.0


@dataclass(frozen=True)
class DynamicState:
    """Kinetic state carried from one hour to the next.

    Attributes:
        inter_e: Intermediate level at the end of the last hour
        xi_last: Share of the intermediate converted at the last hour
        portions: Chill portions accumulated so far
    """
    inter_e: float = 0.0
    xi_last: float = 0.0
    portions: float = 0.0


# Completion threshold of the intermediate
CRITICAL_LEVEL = 1.0


def step_dynamic(
    state: DynamicState,
    temp_c: float,
    params: DynamicParams = DynamicParams(),
) -> tuple[DynamicState, float]:
    """Advance the Dynamic Model by one hour.

    A missing temperature leaves the state untouched and yields NaN.

    Returns:
        (next state, chill portions gained this hour)
    """
    if temp_c is None or math.isnan(temp_c):
        return state, math.nan

    tk = temp_c + params.kelvin_offset
    ftmprt = params.slp * params.tetmlt * (tk - params.tetmlt) / tk
    xi = 1.0 / (1.0 + math.exp(-ftmprt))
    xs = params.a0 / params.a1 * math.exp((params.e1 - params.e0) / tk)
    ak1 = params.a1 * math.exp(-params.e1 / tk)

    # A completed intermediate gives up the share fixed at the last hour
    if state.inter_e < CRITICAL_LEVEL:
        inter_s = state.inter_e
    else:
        inter_s = state.inter_e * (1.0 - state.xi_last)

    inter_e = xs - (xs - inter_s) * math.exp(-ak1)
    delta = inter_e * xi if inter_e >= CRITICAL_LEVEL else 0.0

    return DynamicState(inter_e=inter_e, xi_last=xi, portions=state.portions + delta), delta


def run_dynamic(
    temps: Iterable[float] | pd.Series | np.ndarray,
    state: DynamicState | None = None,
    params: DynamicParams = DynamicParams(),
) -> tuple[DynamicState, np.ndarray]:
    """Fold step_dynamic over a series.

    Args:
        temps: Hourly temperatures in °C, in calendar order
        state: Starting state (default: fresh)
        params: Model constants

    Returns:
        (final state, per-hour portions with NaN for missing hours)
    """
    state = state or DynamicState()
    t = as_temperature_array(temps)
    deltas = np.empty_like(t)
    for i, temp in enumerate(t):
        state, deltas[i] = step_dynamic(state, float(temp), params)
    return state, deltas


def dynamic_model(
    temps: Iterable[float] | pd.Series | np.ndarray,
    summ: bool = True,
    params: DynamicParams = DynamicParams(),
) -> np.ndarray | pd.Series:
    """Chill portions from hourly temperatures.

    Args:
        temps: Hourly temperatures in °C, in calendar order
        summ: If True return cumulative portions, else per-hour gains
        params: Model constants

    Returns:
        Array (or Series for Series input); NaN where the input is missing
    """
    _, deltas = run_dynamic(temps, params=params)
    return finish_output(deltas, temps, summ)


def chilling_hours(
    temps: Iterable[float] | pd.Series | np.ndarray,
    summ: bool = True,
    lower: float = 0.0,
    upper: float = 7.2,
) -> np.ndarray | pd.Series:
    """Hours with lower < T <= upper (°C)."""
    t = as_temperature_array(temps)
    per_hour = ((t > lower) & (t <= upper)).astype(float)
    per_hour[np.isnan(t)] = np.nan
    return finish_output(per_hour, temps, summ)


# Upper bounds (inclusive) and chill unit weights of the Utah Model
_UTAH_WEIGHTS = (
    (1.4, 0.0),
    (2.4, 0.5),
    (9.1, 1.0),
    (12.4, 0.5),
    (15.9, 0.0),
    (18.0, -0.5),
)
_UTAH_ABOVE = -1.0


def utah_model(
    temps: Iterable[float] | pd.Series | np.ndarray,
    summ: bool = True,
) -> np.ndarray | pd.Series:
    """Chill units after Richardson et al. (1974).

    Warm hours count negatively, so the cumulative total can decrease.
    """
    t = as_temperature_array(temps)
    conditions = []
    lower = -np.inf
    for upper, _ in _UTAH_WEIGHTS:
        conditions.append((t > lower) & (t <= upper))
        lower = upper
    per_hour = np.select(conditions, [w for _, w in _UTAH_WEIGHTS], default=_UTAH_ABOVE)
    per_hour[np.isnan(t)] = np.nan
    return finish_output(per_hour, temps, summ)
