"""Hourly temperature schema.

This is what the reconstruction engine consumes and produces:
- one row per (year, month, day, hour), hours 0..23
- every day complete, days consecutive (no calendar gaps)
- temp_c is Celsius and may be NaN for a missing reading

Calendar completeness is produced upstream; this module only checks it and
fails fast when it does not hold.
"""

from __future__ import annotations

from typing import TypedDict

import pandas as pd

from hourtemp.schemas.validate import (
    require_calendar_dates,
    require_columns,
    require_consecutive,
    require_integer_values,
    require_no_nulls,
    require_range,
    require_unique,
)


class HourlyTemp(TypedDict):
    """One hourly temperature sample."""

    year: int
    month: int
    day: int
    hour: int  # 0..23
    temp_c: float  # Celsius, NaN when missing


HOURLY_TEMP_FIELDS = ["year", "month", "day", "hour", "temp_c"]

CALENDAR_FIELDS = ["year", "month", "day"]

_DATASET_NAME = "hourly_temps"


def hourly_timestamps(df: pd.DataFrame) -> pd.Series:
    """Return naive timestamps (date + hour) for an hourly table."""
    dates = require_calendar_dates(df, dataset=_DATASET_NAME)
    return dates + pd.to_timedelta(df["hour"].astype(int), unit="h")


def validate_hourly_temps(df: pd.DataFrame) -> None:
    """Validate that a DataFrame conforms to the hourly_temps schema.

    Checks performed:
    - All required columns present
    - No nulls in calendar fields, and they are whole numbers
    - hour in [0, 23], month in [1, 12], day in [1, 31]
    - year/month/day form real dates
    - Unique on (year, month, day, hour)
    - Rows sorted and consecutive by one hour, starting at hour 0 and ending
      at hour 23 (complete days)
    - temp_c in [-90, 60] where present

    Raises:
        ValueError: If any validation check fails
    """
    require_columns(df.columns, HOURLY_TEMP_FIELDS, dataset=_DATASET_NAME)

    if df.empty:
        return

    calendar = CALENDAR_FIELDS + ["hour"]
    require_no_nulls(df, calendar, dataset=_DATASET_NAME)
    for col in calendar:
        require_integer_values(df, col, dataset=_DATASET_NAME)

    require_range(df, "hour", lo=0, hi=23, dataset=_DATASET_NAME)
    require_range(df, "month", lo=1, hi=12, dataset=_DATASET_NAME)
    require_range(df, "day", lo=1, hi=31, dataset=_DATASET_NAME)
    require_range(df, "temp_c", lo=-90, hi=60, allow_null=True, dataset=_DATASET_NAME)
    require_unique(df, calendar, dataset=_DATASET_NAME)

    stamps = hourly_timestamps(df)
    require_consecutive(stamps, pd.Timedelta(hours=1), dataset=_DATASET_NAME)

    if int(df["hour"].iloc[0]) != 0 or int(df["hour"].iloc[-1]) != 23:
        raise ValueError(
            f"[{_DATASET_NAME}] Incomplete day: series must start at hour 0 "
            "and end at hour 23"
        )


def day_index(df: pd.DataFrame) -> pd.Series:
    """Zero-based position of each row's calendar day within the series."""
    dates = require_calendar_dates(df, dataset=_DATASET_NAME)
    return pd.Series(pd.factorize(dates)[0], index=df.index)
