"""Pytest configuration and fixtures."""

from __future__ import annotations

from datetime import date

import numpy as np
import pandas as pd
import pytest

from hourtemp.diurnal.curve import make_hourly_temps

# Mid-latitude station used throughout (roughly Bonn)
LATITUDE = 50.7


@pytest.fixture
def latitude() -> float:
    return LATITUDE


@pytest.fixture
def make_daily():
    """Factory fixture for creating daily extremes DataFrames."""

    def _make(
        n_days: int = 10,
        start: date | None = None,
        tmin_base: float = 4.0,
        amplitude: float = 9.0,
    ) -> pd.DataFrame:
        if start is None:
            start = date(2023, 4, 1)

        dates = pd.date_range(start=start, periods=n_days, freq="D")
        i = np.arange(n_days)
        tmin = tmin_base + 3.0 * np.sin(i * 0.9)
        tmax = tmin + amplitude + 2.0 * np.cos(i * 1.3)

        return pd.DataFrame(
            {
                "year": dates.year,
                "month": dates.month,
                "day": dates.day,
                "tmin_c": tmin,
                "tmax_c": tmax,
            }
        )

    return _make


@pytest.fixture
def make_hourly(make_daily):
    """Factory fixture for idealized hourly tables plus the daily truth.

    Returns (hourly, daily). The hourly series is exactly the idealized
    curve of the daily table, so any reconstruction of it is exact.
    """

    def _make(n_days: int = 10, start: date | None = None, **kwargs):
        daily = make_daily(n_days=n_days, start=start, **kwargs)
        hourly = make_hourly_temps(LATITUDE, daily)
        return hourly, daily

    return _make


def hour_position(day: int, hour: int) -> int:
    """Row index of (day, hour) in an hourly table starting at hour 0."""
    return day * 24 + hour
