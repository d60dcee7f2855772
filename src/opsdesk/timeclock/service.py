"""Clock in/out bookkeeping for time entries."""

import logging
import math
from datetime import date, datetime, time

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from opsdesk.models.time_entry import TimeEntry

logger = logging.getLogger(__name__)


class ClockError(Exception):
    """Clock action not possible in the current state."""


def hours_between(start: datetime, end: datetime) -> float:
    """Elapsed hours rounded to two decimals, halves rounded up."""
    hours = (end - start).total_seconds() / 3600
    return math.floor(hours * 100 + 0.5) / 100


async def get_open_entry(session: AsyncSession, user_id: int, day: date) -> TimeEntry | None:
    """The entry of ``day`` that has been clocked in but not out, if any."""
    stmt = (
        select(TimeEntry)
        .where(
            TimeEntry.user_id == user_id,
            TimeEntry.entry_date == day,
            TimeEntry.clock_in.is_not(None),
            TimeEntry.clock_out.is_(None),
        )
        .order_by(TimeEntry.id)
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def clock_in(session: AsyncSession, user_id: int, now: datetime | None = None) -> TimeEntry:
    """Open a new time entry. Several in/out cycles per day are allowed."""
    now = now or datetime.now()
    if await get_open_entry(session, user_id, now.date()) is not None:
        raise ClockError("You are already clocked in. Please clock out first.")

    entry = TimeEntry(user_id=user_id, entry_date=now.date(), clock_in=now)
    session.add(entry)
    await session.commit()
    await session.refresh(entry)
    logger.info("User %s clocked in at %s", user_id, now.strftime("%H:%M"))
    return entry


async def clock_out(session: AsyncSession, user_id: int, now: datetime | None = None) -> TimeEntry:
    now = now or datetime.now()
    entry = await get_open_entry(session, user_id, now.date())
    if entry is None or entry.clock_in is None:
        raise ClockError("You are not clocked in.")

    entry.clock_out = now
    entry.total_hours = hours_between(entry.clock_in, now)
    await session.commit()
    await session.refresh(entry)
    logger.info("User %s clocked out after %.2fh", user_id, entry.total_hours)
    return entry


async def record_manual_entry(
    session: AsyncSession,
    user_id: int,
    day: date,
    start: time,
    end: time,
) -> TimeEntry:
    """Record a completed shift for ``day``.

    Overwrites the first existing entry of that day, otherwise creates one.

    Raises:
        ValueError: If ``end`` is not after ``start``.
    """
    clock_in_at = datetime.combine(day, start)
    clock_out_at = datetime.combine(day, end)
    if clock_out_at <= clock_in_at:
        raise ValueError("Clock out time must be after clock in time")

    stmt = (
        select(TimeEntry)
        .where(TimeEntry.user_id == user_id, TimeEntry.entry_date == day)
        .order_by(TimeEntry.id)
        .limit(1)
    )
    result = await session.execute(stmt)
    entry = result.scalar_one_or_none()
    if entry is None:
        entry = TimeEntry(user_id=user_id, entry_date=day)
        session.add(entry)

    entry.clock_in = clock_in_at
    entry.clock_out = clock_out_at
    entry.total_hours = hours_between(clock_in_at, clock_out_at)
    await session.commit()
    await session.refresh(entry)
    return entry


async def list_entries(
    session: AsyncSession, user_id: int, day: date | None = None
) -> list[TimeEntry]:
    """A user's entries, newest first, optionally limited to one day."""
    stmt = select(TimeEntry).where(TimeEntry.user_id == user_id)
    if day is not None:
        stmt = stmt.where(TimeEntry.entry_date == day)
    stmt = stmt.order_by(TimeEntry.entry_date.desc(), TimeEntry.clock_in.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_open_entries(session: AsyncSession, day: date) -> list[TimeEntry]:
    """Everyone currently clocked in on ``day``."""
    stmt = (
        select(TimeEntry)
        .where(
            TimeEntry.entry_date == day,
            TimeEntry.clock_in.is_not(None),
            TimeEntry.clock_out.is_(None),
        )
        .order_by(TimeEntry.clock_in)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
