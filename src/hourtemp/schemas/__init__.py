"""Schema definitions for the hourly temperature reconstruction.

This package defines the contract layer: what valid tables look like and how
provenance is tagged. Nothing here reconstructs anything.

Schemas:
- hourly_temps: Hourly temperature table (calendar complete, temp may be NaN)
- daily_extremes: Daily Tmin/Tmax table with provenance columns
- provenance: Provenance tag vocabulary
- validate: Validation helpers
"""

from hourtemp.schemas.daily_extremes import (
    DAILY_EXTREMES_FIELDS,
    DAILY_INPUT_FIELDS,
    EXTREME_COLUMNS,
    DailyExtremes,
    align_to_hourly_calendar,
    validate_daily_extremes,
    with_observed_sources,
)
from hourtemp.schemas.hourly_temps import (
    HOURLY_TEMP_FIELDS,
    HourlyTemp,
    day_index,
    validate_hourly_temps,
)
from hourtemp.schemas.provenance import (
    HOURLY_IDEALIZED,
    HOURLY_MISSING,
    HOURLY_OBSERVED,
    HOURLY_RECONSTRUCTED,
    SOURCE_INTERPOLATED,
    SOURCE_MISSING,
    SOURCE_OBSERVED,
    SOURCE_SOLVED,
    proxy_source,
)

__all__ = [
    # Hourly temperatures
    "HourlyTemp",
    "HOURLY_TEMP_FIELDS",
    "day_index",
    "validate_hourly_temps",
    # Daily extremes
    "DailyExtremes",
    "DAILY_INPUT_FIELDS",
    "DAILY_EXTREMES_FIELDS",
    "EXTREME_COLUMNS",
    "align_to_hourly_calendar",
    "validate_daily_extremes",
    "with_observed_sources",
    # Provenance
    "SOURCE_OBSERVED",
    "SOURCE_SOLVED",
    "SOURCE_INTERPOLATED",
    "SOURCE_MISSING",
    "HOURLY_OBSERVED",
    "HOURLY_RECONSTRUCTED",
    "HOURLY_IDEALIZED",
    "HOURLY_MISSING",
    "proxy_source",
]
