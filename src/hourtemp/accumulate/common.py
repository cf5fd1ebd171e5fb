"""Shared input/output handling for hourly accumulation models."""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd


def as_temperature_array(temps: Iterable[float] | pd.Series | np.ndarray) -> np.ndarray:
    """Hourly temperatures as a float array, NaN for missing hours."""
    if isinstance(temps, pd.Series):
        return temps.to_numpy(dtype=float, na_value=np.nan)
    return np.asarray(list(temps) if not isinstance(temps, np.ndarray) else temps, dtype=float)


def finish_output(
    per_hour: np.ndarray,
    temps: Iterable[float] | pd.Series | np.ndarray,
    summ: bool,
) -> np.ndarray | pd.Series:
    """Turn per-hour contributions into the requested output form.

    Missing hours are NaN in both forms. Cumulative totals skip them and
    resume from the last known total; they are never zero-filled.
    A Series input yields a Series on the same index.
    """
    missing = np.isnan(per_hour)
    if summ:
        out = np.nancumsum(per_hour)
        out[missing] = np.nan
    else:
        out = per_hour
    if isinstance(temps, pd.Series):
        return pd.Series(out, index=temps.index, name=temps.name)
    return out
