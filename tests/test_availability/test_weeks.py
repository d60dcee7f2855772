"""Tests for week navigation and past-date checks."""

from datetime import date

from opsdesk.availability.weeks import (
    PAST_WEEK_NOTICE,
    is_past_date,
    next_week,
    previous_week,
    week_dates,
    week_start_for,
)

TODAY = date(2024, 1, 3)  # Wednesday


class TestWeekStart:
    def test_monday_is_its_own_week_start(self) -> None:
        assert week_start_for(date(2024, 1, 1)) == date(2024, 1, 1)

    def test_sunday_belongs_to_previous_monday(self) -> None:
        assert week_start_for(date(2024, 1, 7)) == date(2024, 1, 1)

    def test_week_dates_are_monday_to_friday(self) -> None:
        days = week_dates(date(2024, 1, 1))
        assert days[0] == date(2024, 1, 1)
        assert days[-1] == date(2024, 1, 5)
        assert len(days) == 5


class TestIsPastDate:
    def test_yesterday_is_past(self) -> None:
        assert is_past_date(date(2024, 1, 2), TODAY)

    def test_today_is_not_past(self) -> None:
        assert not is_past_date(TODAY, TODAY)

    def test_tomorrow_is_not_past(self) -> None:
        assert not is_past_date(date(2024, 1, 4), TODAY)


class TestNavigation:
    def test_previous_from_current_week_is_rejected(self) -> None:
        nav = previous_week(date(2024, 1, 1), TODAY)
        assert nav.week_start == date(2024, 1, 1)
        assert nav.moved is False
        assert nav.notice == PAST_WEEK_NOTICE

    def test_previous_from_future_week(self) -> None:
        nav = previous_week(date(2024, 1, 15), TODAY)
        assert nav.week_start == date(2024, 1, 8)
        assert nav.moved is True
        assert nav.notice is None

    def test_previous_back_to_current_week(self) -> None:
        nav = previous_week(date(2024, 1, 8), TODAY)
        assert nav.week_start == date(2024, 1, 1)
        assert nav.moved is True

    def test_next_is_always_allowed(self) -> None:
        nav = next_week(date(2024, 1, 1))
        assert nav.week_start == date(2024, 1, 8)
        assert nav.moved is True
