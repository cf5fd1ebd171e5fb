"""Tests for hourly_temps and daily_extremes schema validation."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from hourtemp.schemas import (
    DAILY_EXTREMES_FIELDS,
    HOURLY_TEMP_FIELDS,
    SOURCE_MISSING,
    SOURCE_OBSERVED,
    SOURCE_SOLVED,
    align_to_hourly_calendar,
    day_index,
    validate_daily_extremes,
    validate_hourly_temps,
    with_observed_sources,
)
from hourtemp.schemas.provenance import is_proxy_source, proxy_name, proxy_source


class TestValidateHourlyTempsPass:
    """Tests that should pass validation."""

    def test_generated_data_validates(self, make_hourly) -> None:
        hourly, _ = make_hourly(n_days=3)
        validate_hourly_temps(hourly)

    def test_empty_dataframe_validates(self) -> None:
        """Empty DataFrame with correct columns should pass."""
        validate_hourly_temps(pd.DataFrame(columns=HOURLY_TEMP_FIELDS))

    def test_missing_temperatures_allowed(self, make_hourly) -> None:
        hourly, _ = make_hourly(n_days=2)
        hourly.loc[3:20, "temp_c"] = np.nan
        validate_hourly_temps(hourly)

    def test_month_boundary(self, make_hourly) -> None:
        from datetime import date

        hourly, _ = make_hourly(n_days=3, start=date(2023, 12, 31))
        validate_hourly_temps(hourly)
        assert day_index(hourly).iloc[-1] == 2


class TestValidateHourlyTempsFail:
    """Tests that should fail validation."""

    def test_missing_column(self, make_hourly) -> None:
        hourly, _ = make_hourly(n_days=1)
        with pytest.raises(ValueError, match=r"\[hourly_temps\] Missing columns"):
            validate_hourly_temps(hourly.drop(columns=["temp_c"]))

    def test_fractional_hour(self, make_hourly) -> None:
        hourly, _ = make_hourly(n_days=1)
        hourly["hour"] = hourly["hour"].astype(float)
        hourly.loc[4, "hour"] = 4.5
        with pytest.raises(ValueError, match="Not an integer"):
            validate_hourly_temps(hourly)

    def test_temperature_out_of_range(self, make_hourly) -> None:
        hourly, _ = make_hourly(n_days=1)
        hourly.loc[2, "temp_c"] = 75.0
        with pytest.raises(ValueError, match="Out of range"):
            validate_hourly_temps(hourly)

    def test_duplicate_hour(self, make_hourly) -> None:
        hourly, _ = make_hourly(n_days=2)
        hourly.loc[10, "hour"] = 9
        with pytest.raises(ValueError, match="Duplicate keys"):
            validate_hourly_temps(hourly)

    def test_unsorted_rows(self, make_hourly) -> None:
        hourly, _ = make_hourly(n_days=2)
        shuffled = hourly.iloc[::-1].reset_index(drop=True)
        with pytest.raises(ValueError, match="Calendar gap"):
            validate_hourly_temps(shuffled)

    def test_missing_day(self, make_hourly) -> None:
        hourly, _ = make_hourly(n_days=3)
        with pytest.raises(ValueError, match="Calendar gap"):
            validate_hourly_temps(hourly.drop(index=range(24, 48)))

    def test_partial_first_day(self, make_hourly) -> None:
        hourly, _ = make_hourly(n_days=2)
        with pytest.raises(ValueError, match="Incomplete day"):
            validate_hourly_temps(hourly.iloc[3:])


class TestValidateDailyExtremes:
    """Daily table validation."""

    def test_input_table_validates(self, make_daily) -> None:
        validate_daily_extremes(make_daily(n_days=5))

    def test_sources_required_for_output(self, make_daily) -> None:
        daily = make_daily(n_days=5)
        with pytest.raises(ValueError, match="Missing columns"):
            validate_daily_extremes(daily, require_sources=True)
        validate_daily_extremes(with_observed_sources(daily), require_sources=True)

    def test_dataset_name_in_error(self, make_daily) -> None:
        daily = make_daily(n_days=5).drop(index=2)
        with pytest.raises(ValueError, match=r"\[proxy:north\] Calendar gap"):
            validate_daily_extremes(daily, dataset="proxy:north")

    def test_extreme_out_of_range(self, make_daily) -> None:
        daily = make_daily(n_days=3)
        daily.loc[1, "tmin_c"] = -120.0
        with pytest.raises(ValueError, match="Out of range"):
            validate_daily_extremes(daily)


class TestDailyHelpers:
    """Alignment and provenance helpers."""

    def test_align_fills_uncovered_days(self, make_hourly, make_daily) -> None:
        hourly, _ = make_hourly(n_days=5)
        partial = make_daily(n_days=3)

        aligned = align_to_hourly_calendar(partial, hourly)

        assert len(aligned) == 5
        assert aligned.loc[3:4, ["tmin_c", "tmax_c"]].isna().all().all()
        np.testing.assert_allclose(aligned.loc[:2, "tmax_c"], partial["tmax_c"])

    def test_align_without_daily(self, make_hourly) -> None:
        hourly, _ = make_hourly(n_days=4)
        aligned = align_to_hourly_calendar(None, hourly)
        assert len(aligned) == 4
        assert aligned["tmin_c"].isna().all()

    def test_observed_sources_derived(self, make_daily) -> None:
        daily = make_daily(n_days=3)
        daily.loc[1, "tmax_c"] = np.nan

        tagged = with_observed_sources(daily)

        assert list(tagged.columns) == DAILY_EXTREMES_FIELDS
        assert tagged["tmax_source"].tolist() == [SOURCE_OBSERVED, SOURCE_MISSING, SOURCE_OBSERVED]

    def test_existing_sources_kept(self, make_daily) -> None:
        daily = make_daily(n_days=3)
        daily["tmin_source"] = [SOURCE_OBSERVED, SOURCE_SOLVED, None]
        daily["tmax_source"] = SOURCE_OBSERVED

        tagged = with_observed_sources(daily)

        assert tagged["tmin_source"].tolist() == [SOURCE_OBSERVED, SOURCE_SOLVED, SOURCE_OBSERVED]


class TestProvenance:
    """Proxy provenance tags."""

    def test_proxy_tag_roundtrip(self) -> None:
        tag = proxy_source("KOELN")
        assert tag == "proxy:KOELN"
        assert is_proxy_source(tag)
        assert proxy_name(tag) == "KOELN"

    def test_non_proxy_tag(self) -> None:
        assert not is_proxy_source(SOURCE_SOLVED)
        with pytest.raises(ValueError, match="Not a proxy"):
            proxy_name(SOURCE_SOLVED)
