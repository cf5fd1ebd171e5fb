"""Tests for sunrise, sunset and day length."""

from __future__ import annotations

import numpy as np
import pytest

from hourtemp.solar.daylength import SunTimes, sun_times, sun_times_table


class TestSunTimesInvariants:
    """Properties that hold for every valid latitude and day."""

    @pytest.mark.parametrize("latitude", [-89.9, -66.0, -45.0, -10.0, 0.0, 23.4, 50.7, 70.0, 89.9])
    def test_ordering_and_daylength(self, latitude: float) -> None:
        table = sun_times_table(latitude, range(1, 367))

        assert (table["sunrise"] >= 0).all()
        assert (table["sunrise"] <= table["sunset"]).all()
        assert (table["sunset"] <= 24).all()
        np.testing.assert_allclose(table["daylength"], table["sunset"] - table["sunrise"])
        assert table[["sunrise", "sunset", "daylength"]].notna().all().all()

    def test_table_matches_scalar(self) -> None:
        table = sun_times_table(50.7, [1, 100, 172, 300])
        for row in table.itertuples(index=False):
            st = sun_times(50.7, int(row.day_of_year))
            assert st.sunrise == pytest.approx(row.sunrise)
            assert st.sunset == pytest.approx(row.sunset)


class TestSunTimesValues:
    """Known day lengths."""

    def test_equator_near_twelve_hours(self) -> None:
        for doy in (1, 80, 172, 266, 355):
            assert sun_times(0.0, doy).daylength == pytest.approx(12.1, abs=0.2)

    def test_midlatitude_summer_longer_than_winter(self) -> None:
        summer = sun_times(50.7, 172)
        winter = sun_times(50.7, 355)
        assert 16.0 < summer.daylength < 16.8
        assert 7.8 < winter.daylength < 8.4

    def test_southern_hemisphere_is_mirrored(self) -> None:
        assert sun_times(-50.7, 172).daylength < 12
        assert sun_times(-50.7, 355).daylength > 12

    def test_solar_noon_centered(self) -> None:
        st = sun_times(35.0, 120)
        assert (st.sunrise + st.sunset) / 2 == pytest.approx(12.0)


class TestPolarClamping:
    """Polar day/night must clamp instead of producing NaN."""

    def test_polar_night(self) -> None:
        st = sun_times(80.0, 355)
        assert st == SunTimes(sunrise=12.0, sunset=12.0, daylength=0.0)

    def test_polar_day(self) -> None:
        st = sun_times(80.0, 172)
        assert st.daylength == 24.0
        assert st.sunrise == 0.0
        assert st.sunset == 24.0

    def test_southern_polar_day_in_december(self) -> None:
        assert sun_times(-80.0, 355).daylength == 24.0


class TestSunTimesValidation:
    """Out-of-domain inputs fail fast."""

    @pytest.mark.parametrize("latitude", [90.0, -90.0, 95.0, float("nan")])
    def test_bad_latitude(self, latitude: float) -> None:
        with pytest.raises(ValueError, match="latitude"):
            sun_times(latitude, 100)

    @pytest.mark.parametrize("doy", [0, 367, -5])
    def test_bad_day_of_year(self, doy: int) -> None:
        with pytest.raises(ValueError, match="day_of_year"):
            sun_times(45.0, doy)

    def test_table_bad_latitude(self) -> None:
        with pytest.raises(ValueError, match="latitude"):
            sun_times_table(120.0, [1, 2])
