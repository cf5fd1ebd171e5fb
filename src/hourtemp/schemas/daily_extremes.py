"""Daily extremes schema.

The daily table is the hinge of the reconstruction:
- the solver fills tmin_c/tmax_c from hourly readings
- the patcher fills what is left from proxies and interpolation
- the residual interpolator only reads it

Key rules:
- one row per calendar day, days consecutive
- tmin_c/tmax_c are Celsius and may be NaN until patched
- once produced by the pipeline, every value has a *_source tag in its row
"""

from __future__ import annotations

from typing import TypedDict

import numpy as np
import pandas as pd

from hourtemp.schemas.provenance import SOURCE_MISSING, SOURCE_OBSERVED
from hourtemp.schemas.validate import (
    require_calendar_dates,
    require_columns,
    require_consecutive,
    require_integer_values,
    require_no_nulls,
    require_range,
    require_unique,
)


class DailyExtremes(TypedDict):
    """Daily minimum and maximum temperature with provenance."""

    year: int
    month: int
    day: int
    tmin_c: float  # NaN when unknown
    tmax_c: float  # NaN when unknown
    tmin_source: str  # provenance tag, see schemas.provenance
    tmax_source: str


DAILY_INPUT_FIELDS = ["year", "month", "day", "tmin_c", "tmax_c"]

DAILY_EXTREMES_FIELDS = DAILY_INPUT_FIELDS + ["tmin_source", "tmax_source"]

# Extreme name -> value column
EXTREME_COLUMNS = {"tmin": "tmin_c", "tmax": "tmax_c"}

_DATASET_NAME = "daily_extremes"


def daily_dates(df: pd.DataFrame, dataset: str = _DATASET_NAME) -> pd.Series:
    return require_calendar_dates(df, dataset=dataset)


def validate_daily_extremes(
    df: pd.DataFrame,
    require_sources: bool = False,
    dataset: str = _DATASET_NAME,
) -> None:
    """Validate that a DataFrame conforms to the daily_extremes schema.

    Checks performed:
    - Required columns present (source columns only if require_sources)
    - Calendar fields non-null whole numbers forming real dates
    - Unique, sorted and consecutive by one day
    - tmin_c/tmax_c in [-90, 60] where present

    Args:
        df: DataFrame to validate
        require_sources: If True, tmin_source/tmax_source must exist and be
            non-null (pipeline output)
        dataset: Dataset name for error messages (proxies pass their own)

    Raises:
        ValueError: If any validation check fails
    """
    required = DAILY_EXTREMES_FIELDS if require_sources else DAILY_INPUT_FIELDS
    require_columns(df.columns, required, dataset=dataset)

    if df.empty:
        return

    require_no_nulls(df, ["year", "month", "day"], dataset=dataset)
    for col in ("year", "month", "day"):
        require_integer_values(df, col, dataset=dataset)
    require_range(df, "tmin_c", lo=-90, hi=60, allow_null=True, dataset=dataset)
    require_range(df, "tmax_c", lo=-90, hi=60, allow_null=True, dataset=dataset)
    require_unique(df, ["year", "month", "day"], dataset=dataset)

    require_consecutive(daily_dates(df, dataset), pd.Timedelta(days=1), dataset=dataset)

    if require_sources:
        require_no_nulls(df, ["tmin_source", "tmax_source"], dataset=dataset)


def daily_from_hourly_calendar(hourly: pd.DataFrame) -> pd.DataFrame:
    """Build an all-missing daily table covering the days of an hourly table."""
    days = hourly[["year", "month", "day"]].drop_duplicates().reset_index(drop=True)
    days["tmin_c"] = np.nan
    days["tmax_c"] = np.nan
    return days.astype({"year": int, "month": int, "day": int})


def align_to_hourly_calendar(daily: pd.DataFrame | None, hourly: pd.DataFrame) -> pd.DataFrame:
    """Return daily rows for exactly the days of `hourly`, in hourly order.

    Days the daily table does not cover come back with NaN extremes; days
    outside the hourly range are dropped.
    """
    calendar = daily_from_hourly_calendar(hourly)
    if daily is None:
        return calendar

    keep = [c for c in DAILY_EXTREMES_FIELDS if c in daily.columns]
    merged = calendar[["year", "month", "day"]].merge(
        daily[keep].astype({"year": int, "month": int, "day": int}),
        on=["year", "month", "day"],
        how="left",
    )
    return merged


def with_observed_sources(daily: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of `daily` with *_source columns tagging known values.

    Existing source columns are kept; absent ones are derived from whether
    the value is present (observed) or not (missing).
    """
    df = daily.copy()
    for var, col in EXTREME_COLUMNS.items():
        src = f"{var}_source"
        if src not in df.columns:
            df[src] = np.where(df[col].notna(), SOURCE_OBSERVED, SOURCE_MISSING)
        else:
            df[src] = df[src].where(df[col].isna() | df[src].notna(), SOURCE_OBSERVED)
            df.loc[df[col].isna(), src] = SOURCE_MISSING
    return df[DAILY_EXTREMES_FIELDS]
