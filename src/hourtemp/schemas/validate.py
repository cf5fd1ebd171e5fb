"""Validation helpers for schema enforcement.

Every helper raises ValueError with an actionable message including:
- Dataset name (if provided)
- The rule that failed
- Count of failing rows
- Sample of failing row indices (first 5)
"""

from __future__ import annotations

from typing import Any, Iterable

import pandas as pd


def _format_error(
    dataset: str | None,
    rule: str,
    detail: str,
    failing_indices: list[Any] | None = None,
    count: int | None = None,
) -> str:
    """Format a validation error message consistently."""
    parts = []
    if dataset:
        parts.append(f"[{dataset}] ")
    parts.append(rule)
    parts.append(f": {detail}")
    if count is not None:
        parts.append(f" ({count} rows)")
    if failing_indices:
        parts.append(f" | sample indices: {failing_indices[:5]}")
    return "".join(parts)


def require_columns(
    df_columns: Iterable[str],
    required: Iterable[str],
    dataset: str | None = None,
) -> None:
    """Raise ValueError if required columns are missing.

    Args:
        df_columns: Column names from a DataFrame (e.g., df.columns)
        required: Required column names
        dataset: Optional dataset name for error messages
    """
    missing = set(required) - set(df_columns)
    if missing:
        raise ValueError(
            _format_error(dataset, "Missing columns", f"{sorted(missing)}")
        )


def require_no_nulls(
    df: pd.DataFrame,
    cols: Iterable[str],
    dataset: str | None = None,
) -> None:
    """Raise ValueError if any of the given columns contain nulls."""
    for col in cols:
        if col not in df.columns:
            continue  # Let require_columns handle missing columns

        null_mask = df[col].isna()
        null_count = int(null_mask.sum())
        if null_count > 0:
            raise ValueError(
                _format_error(
                    dataset,
                    "Null values",
                    f"column '{col}' has nulls",
                    df.index[null_mask].tolist(),
                    null_count,
                )
            )


def require_unique(
    df: pd.DataFrame,
    key_cols: list[str],
    dataset: str | None = None,
) -> None:
    """Raise ValueError if key columns have duplicate combinations."""
    if df.empty:
        return

    for col in key_cols:
        if col not in df.columns:
            return

    dup_mask = df.duplicated(subset=key_cols, keep=False)
    dup_count = int(dup_mask.sum())
    if dup_count > 0:
        raise ValueError(
            _format_error(
                dataset,
                "Duplicate keys",
                f"columns {key_cols} have duplicates",
                df.index[dup_mask].tolist(),
                dup_count,
            )
        )


def require_range(
    df: pd.DataFrame,
    col: str,
    lo: float,
    hi: float,
    allow_null: bool = False,
    dataset: str | None = None,
) -> None:
    """Raise ValueError if values fall outside [lo, hi].

    Args:
        df: DataFrame to check
        col: Column name to check
        lo: Minimum allowed value (inclusive)
        hi: Maximum allowed value (inclusive)
        allow_null: If True, null values are skipped
        dataset: Optional dataset name for error messages
    """
    if col not in df.columns or df.empty:
        return

    series = df[col]
    if allow_null:
        series = series.dropna()

    out_of_range = (series < lo) | (series > hi)
    bad_count = int(out_of_range.sum())
    if bad_count > 0:
        raise ValueError(
            _format_error(
                dataset,
                "Out of range",
                f"column '{col}' must be in [{lo}, {hi}]",
                series.index[out_of_range].tolist(),
                bad_count,
            )
        )


def require_integer_values(
    df: pd.DataFrame,
    col: str,
    dataset: str | None = None,
) -> None:
    """Raise ValueError if a column holds non-integral numbers (e.g. 3.5)."""
    if col not in df.columns or df.empty:
        return

    series = pd.to_numeric(df[col], errors="coerce")
    bad = series.isna() | (series != series.round())
    bad_count = int(bad.sum())
    if bad_count > 0:
        raise ValueError(
            _format_error(
                dataset,
                "Not an integer",
                f"column '{col}' must hold whole numbers",
                df.index[bad].tolist(),
                bad_count,
            )
        )


def require_calendar_dates(
    df: pd.DataFrame,
    dataset: str | None = None,
) -> pd.Series:
    """Build calendar dates from year/month/day columns.

    Returns:
        Series of normalized pd.Timestamp values aligned to df.index

    Raises:
        ValueError: If any (year, month, day) triple is not a real date
    """
    parts = df[["year", "month", "day"]].astype(int)
    dates = pd.to_datetime(parts, errors="coerce")
    bad = dates.isna()
    bad_count = int(bad.sum())
    if bad_count > 0:
        raise ValueError(
            _format_error(
                dataset,
                "Invalid date",
                "year/month/day do not form a calendar date",
                df.index[bad].tolist(),
                bad_count,
            )
        )
    return dates


def require_consecutive(
    stamps: pd.Series,
    step: pd.Timedelta,
    dataset: str | None = None,
) -> None:
    """Raise ValueError if timestamps are not strictly consecutive by `step`.

    The table must already be sorted; a gap or a reordering both fail.
    """
    if len(stamps) < 2:
        return

    delta = stamps.diff().iloc[1:]
    bad = delta != step
    bad_count = int(bad.sum())
    if bad_count > 0:
        raise ValueError(
            _format_error(
                dataset,
                "Calendar gap",
                f"rows must be consecutive with step {step}",
                delta.index[bad].tolist(),
                bad_count,
            )
        )
