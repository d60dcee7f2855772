"""Monday-anchored week arithmetic and past-date checks."""

from dataclasses import dataclass
from datetime import date, timedelta

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]

PAST_WEEK_NOTICE = "Cannot navigate to past weeks"


@dataclass
class WeekNavigation:
    """Outcome of a previous/next week request."""

    week_start: date
    moved: bool = True
    notice: str | None = None


def week_start_for(day: date) -> date:
    """Return the Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())  # weekday(): 0=Mon


def week_dates(week_start: date) -> list[date]:
    """Return the Monday..Friday dates of the week."""
    return [week_start + timedelta(days=offset) for offset in range(len(DAY_NAMES))]


def is_past_date(day: date, today: date) -> bool:
    return day < today


def previous_week(current: date, today: date) -> WeekNavigation:
    """Step back one week unless that lands before the week containing ``today``."""
    candidate = current - timedelta(days=7)
    if candidate < week_start_for(today):
        return WeekNavigation(week_start=current, moved=False, notice=PAST_WEEK_NOTICE)
    return WeekNavigation(week_start=candidate)


def next_week(current: date) -> WeekNavigation:
    return WeekNavigation(week_start=current + timedelta(days=7))
