"""Availability API routes: weekly slot drafts, submission and change requests."""

import json
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from opsdesk.api.deps import get_current_user, get_today, get_today_source
from opsdesk.availability.drafts import DraftStore, get_draft_store
from opsdesk.availability.engine import AvailabilityWorkflow, CurrentUser, WeekView
from opsdesk.availability.errors import (
    AvailabilityError,
    MalformedKey,
    PersistenceError,
    ValidationError,
)
from opsdesk.availability.records import SqlRecordStore, WeekSnapshot, watch_week
from opsdesk.availability.slots import TIME_SLOTS
from opsdesk.availability.weeks import DAY_NAMES, next_week, previous_week, week_start_for
from opsdesk.config import get_settings
from opsdesk.database import async_session, get_db
from opsdesk.models.user import User
from opsdesk.schemas.availability import (
    DraftRead,
    RequestAvailabilityChange,
    SlotToggle,
    SubmitAvailability,
    WeekNavigationRead,
    WeekRecordRead,
    WeekViewRead,
)

router = APIRouter(prefix="/api/availability", tags=["availability"])
logger = logging.getLogger(__name__)


def get_workflow(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    drafts: DraftStore = Depends(get_draft_store),
    today_source: Callable[[], date] = Depends(get_today_source),
) -> AvailabilityWorkflow:
    return AvailabilityWorkflow(
        user=CurrentUser(uid=user.id, name=user.name),
        records=SqlRecordStore(session),
        drafts=drafts,
        today=today_source,
    )


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session


def _http_error(e: AvailabilityError) -> HTTPException:
    if isinstance(e, MalformedKey):
        logger.error("Rejected malformed slot key: %s", e)
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, ValidationError):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, PersistenceError):
        return HTTPException(status_code=503, detail="Availability storage is unavailable, please retry")
    return HTTPException(status_code=500, detail=str(e))


def _view_response(view: WeekView) -> WeekViewRead:
    return WeekViewRead(
        week_start=view.week_start,
        day_names=DAY_NAMES,
        is_submitted=view.is_submitted,
        record=WeekRecordRead.model_validate(view.record) if view.record else None,
        selection=sorted(view.selection),
        grid=[asdict(row) for row in view.grid],
    )


async def week_events(
    workflow: AvailabilityWorkflow,
    session_factory: async_sessionmaker[AsyncSession],
    week_start: date,
    interval: float,
) -> AsyncIterator[str]:
    """Server-sent event frames, one per change of the week's record."""
    snapshots = watch_week(session_factory, workflow.user.uid, week_start, interval)
    try:
        async for snapshot in snapshots:
            view = workflow.build_view(week_start, snapshot)
            payload = _view_response(view).model_dump(mode="json")
            yield f"event: week\ndata: {json.dumps(payload)}\n\n"
    except PersistenceError:
        logger.warning("Stopped availability stream for user %s", workflow.user.uid)
        yield "event: error\ndata: {\"detail\": \"storage unavailable\"}\n\n"
    finally:
        await snapshots.aclose()


@router.get("/slots", response_model=list[str])
async def list_time_slots() -> list[str]:
    """Labels of the half-hour slots, indexed by slot number."""
    return TIME_SLOTS


@router.get("/weeks/current", response_model=WeekNavigationRead)
async def get_current_week(today: date = Depends(get_today)) -> WeekNavigationRead:
    return WeekNavigationRead(week_start=week_start_for(today), moved=False)


@router.get("/weeks/{week_start}/previous", response_model=WeekNavigationRead)
async def get_previous_week(
    week_start: date,
    today: date = Depends(get_today),
) -> WeekNavigationRead:
    """Step back one week; refused with a notice before the current week."""
    return WeekNavigationRead.model_validate(previous_week(week_start_for(week_start), today))


@router.get("/weeks/{week_start}/next", response_model=WeekNavigationRead)
async def get_next_week(week_start: date) -> WeekNavigationRead:
    return WeekNavigationRead.model_validate(next_week(week_start_for(week_start)))


@router.get("/{week_start}", response_model=WeekViewRead)
async def get_week(
    week_start: date,
    workflow: AvailabilityWorkflow = Depends(get_workflow),
) -> WeekViewRead:
    """Week view: stored record (if any), working selection and classified grid."""
    try:
        view = await workflow.load_week(week_start)
    except AvailabilityError as e:
        raise _http_error(e) from e
    return _view_response(view)


@router.post("/{week_start}/draft/toggle", response_model=DraftRead)
async def toggle_draft_slot(
    week_start: date,
    body: SlotToggle,
    workflow: AvailabilityWorkflow = Depends(get_workflow),
) -> DraftRead:
    """Flip one slot in the unsubmitted draft."""
    try:
        selection = workflow.toggle_draft(week_start, body.key)
    except AvailabilityError as e:
        raise _http_error(e) from e
    return DraftRead(week_start=week_start, selection=sorted(selection))


@router.delete("/{week_start}/draft", status_code=204)
async def clear_draft(
    week_start: date,
    workflow: AvailabilityWorkflow = Depends(get_workflow),
) -> None:
    workflow.clear_draft(week_start)


@router.post("/{week_start}/submit", response_model=WeekRecordRead, status_code=201)
async def submit_week(
    week_start: date,
    body: SubmitAvailability,
    workflow: AvailabilityWorkflow = Depends(get_workflow),
    drafts: DraftStore = Depends(get_draft_store),
) -> WeekSnapshot:
    """Submit the week for review, using the stored draft unless slots are given."""
    if body.selected is not None:
        selection = set(body.selected)
    else:
        selection = drafts.load(workflow.user.uid, week_start) or set()
    try:
        return await workflow.submit(week_start, selection)
    except AvailabilityError as e:
        raise _http_error(e) from e


@router.post("/{week_start}/changes", response_model=WeekRecordRead)
async def request_changes(
    week_start: date,
    body: RequestAvailabilityChange,
    workflow: AvailabilityWorkflow = Depends(get_workflow),
) -> WeekSnapshot:
    """Propose changes to a submitted week; the approved slots stay as they are."""
    try:
        return await workflow.request_change(week_start, set(body.selected))
    except AvailabilityError as e:
        raise _http_error(e) from e


@router.get("/{week_start}/events")
async def stream_week(
    week_start: date,
    workflow: AvailabilityWorkflow = Depends(get_workflow),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> StreamingResponse:
    """Server-sent events carrying the week view whenever the record changes."""
    if week_start.weekday() != 0:
        raise HTTPException(status_code=422, detail="week_start must be a Monday")
    interval = get_settings().availability_poll_seconds
    return StreamingResponse(
        week_events(workflow, session_factory, week_start, interval),
        media_type="text/event-stream",
    )
