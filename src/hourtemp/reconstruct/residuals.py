"""Fill hourly gaps with the idealized curve plus an interpolated residual.

Straight-line interpolation of temperature across a gap flattens the diurnal
cycle. Instead this stage interpolates the deviation from the idealized
curve, which varies slowly, and adds it back to the curve:

    residual(h) = observed(h) - idealized(h)        at known hours
    residual    = linear interpolation              inside gaps
    residual    = 0                                 in unanchored runs
    temp(h)     = idealized(h) + residual(h)        at unknown hours

Known hours are returned untouched. Daily extremes are only read here.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from hourtemp.diurnal.curve import DEFAULT_TIME_OF_MAX_OFFSET, idealized_series
from hourtemp.schemas.daily_extremes import align_to_hourly_calendar, validate_daily_extremes
from hourtemp.schemas.hourly_temps import validate_hourly_temps
from hourtemp.schemas.provenance import (
    HOURLY_IDEALIZED,
    HOURLY_MISSING,
    HOURLY_OBSERVED,
    HOURLY_RECONSTRUCTED,
)

RECONSTRUCTED_HOURLY_FIELDS = [
    "year",
    "month",
    "day",
    "hour",
    "temp_c",
    "temp_idealized",
    "residual",
    "source",
]


def interpolate_residuals(residual: pd.Series) -> tuple[pd.Series, pd.Series]:
    """Interpolate a residual series across its gaps.

    Returns:
        (filled residuals, mask of positions that had an anchor on both
        sides); unanchored positions are filled with 0
    """
    inside = residual.interpolate(method="linear", limit_area="inside")
    anchored = residual.isna() & inside.notna()
    return inside.fillna(0.0), anchored


def reconstruct(
    hourly: pd.DataFrame,
    daily: pd.DataFrame,
    latitude: float,
    offset: float = DEFAULT_TIME_OF_MAX_OFFSET,
    verbose: bool = False,
) -> tuple[pd.DataFrame, pd.Series]:
    """Reconstruct a complete hourly series from gappy hours and daily extremes.

    Args:
        hourly: Hourly table (hourly_temps schema), temp_c NaN in gaps
        daily: Completed daily extremes covering the same days
        latitude: Station latitude in degrees
        offset: Hours after solar noon of the daily maximum
        verbose: If True, print a summary line

    Returns:
        (reconstructed hourly table, per-hour source tags). Hours whose
        idealized value needs a still-missing extreme stay NaN and are
        tagged "missing".

    Raises:
        ValueError: If the inputs fail schema validation
    """
    validate_hourly_temps(hourly)
    validate_daily_extremes(daily)

    out = hourly[["year", "month", "day", "hour", "temp_c"]].reset_index(drop=True).copy()
    if out.empty:
        out = pd.DataFrame(columns=RECONSTRUCTED_HOURLY_FIELDS)
        return out, out["source"]

    days = align_to_hourly_calendar(daily, hourly)
    ideal = pd.Series(idealized_series(days, latitude, offset))
    observed = out["temp_c"].astype(float)

    residual, anchored = interpolate_residuals(observed - ideal)
    filled = ideal + residual

    known = observed.notna()
    out["temp_idealized"] = ideal
    out["residual"] = residual.where(ideal.notna())
    out["temp_c"] = observed.where(known, filled)

    source = np.select(
        [known, ideal.isna(), anchored],
        [HOURLY_OBSERVED, HOURLY_MISSING, HOURLY_RECONSTRUCTED],
        default=HOURLY_IDEALIZED,
    )
    out["source"] = source

    if verbose:
        counts = out["source"].value_counts()
        print(
            f"[reconstruct] {len(out)} hours: "
            f"{counts.get(HOURLY_OBSERVED, 0)} observed, "
            f"{counts.get(HOURLY_RECONSTRUCTED, 0)} reconstructed, "
            f"{counts.get(HOURLY_IDEALIZED, 0)} idealized, "
            f"{counts.get(HOURLY_MISSING, 0)} missing"
        )

    return out[RECONSTRUCTED_HOURLY_FIELDS], out["source"]
