"""Time clock API routes: clock in/out and manual entries."""

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from opsdesk.api.deps import get_current_user, get_now
from opsdesk.database import get_db
from opsdesk.models.time_entry import TimeEntry
from opsdesk.models.user import User
from opsdesk.schemas.time_entry import ClockStatus, ManualTimeEntry, TimeEntryRead
from opsdesk.timeclock.service import (
    ClockError,
    clock_in,
    clock_out,
    get_open_entry,
    list_entries,
    list_open_entries,
    record_manual_entry,
)

router = APIRouter(prefix="/api/clock", tags=["clock"])


@router.get("/status", response_model=ClockStatus)
async def get_clock_status(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
) -> ClockStatus:
    entry = await get_open_entry(session, user.id, now.date())
    return ClockStatus(
        clocked_in=entry is not None,
        entry=TimeEntryRead.model_validate(entry) if entry else None,
    )


@router.post("/in", response_model=TimeEntryRead, status_code=201)
async def post_clock_in(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
) -> TimeEntry:
    try:
        return await clock_in(session, user.id, now)
    except ClockError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.post("/out", response_model=TimeEntryRead)
async def post_clock_out(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
) -> TimeEntry:
    try:
        return await clock_out(session, user.id, now)
    except ClockError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.post("/entries", response_model=TimeEntryRead, status_code=201)
async def post_manual_entry(
    body: ManualTimeEntry,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> TimeEntry:
    """Record (or overwrite) a completed shift for a given day."""
    try:
        return await record_manual_entry(
            session, user.id, body.entry_date, body.clock_in, body.clock_out
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.get("/entries", response_model=list[TimeEntryRead])
async def get_entries(
    entry_date: date | None = Query(default=None),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> list[TimeEntry]:
    return await list_entries(session, user.id, entry_date)


@router.get("/active", response_model=list[TimeEntryRead])
async def get_active_entries(
    entry_date: date | None = Query(default=None),
    session: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
) -> list[TimeEntry]:
    """Everyone currently clocked in (today unless a date is given)."""
    return await list_open_entries(session, entry_date or now.date())
