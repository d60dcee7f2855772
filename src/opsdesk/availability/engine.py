"""Availability workflow: submit, request changes, and derive the week view.

States per (user, week): no record -> pending -> approved -> pending (via a
change request) -> ... Approval itself happens on the reviewer side and is
not driven from here.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime

from opsdesk.availability.cells import GridRow, build_week_grid
from opsdesk.availability.drafts import DraftStore
from opsdesk.availability.errors import ValidationError
from opsdesk.availability.records import RecordStore, SlotMap, WeekSnapshot
from opsdesk.availability.slots import TIME_SLOTS, decode_slot_key, encode_slot_key
from opsdesk.availability.weeks import is_past_date, week_dates, week_start_for

logger = logging.getLogger(__name__)

PAST_DATE_NOTICE = "Cannot edit past dates"


@dataclass
class CurrentUser:
    uid: int
    name: str = ""


@dataclass
class WeekView:
    """Everything needed to render one week for the current user."""

    week_start: date
    record: WeekSnapshot | None
    selection: set[str]
    grid: list[GridRow]

    @property
    def is_submitted(self) -> bool:
        return self.record is not None


def group_by_day(week_start: date, selection: set[str]) -> SlotMap:
    """Turn a flat set of slot keys into ``{date: [slot indices]}``.

    Days and indices come out in calendar/slot order; days without any
    selected slot and keys outside the week are left out.
    """
    slots: SlotMap = {}
    for day in week_dates(week_start):
        indices = [i for i in range(len(TIME_SLOTS)) if encode_slot_key(day, i) in selection]
        if indices:
            slots[day.isoformat()] = indices
    return slots


def expand_slots(slots: SlotMap) -> set[str]:
    """Inverse of ``group_by_day``."""
    return {
        encode_slot_key(date.fromisoformat(day), index)
        for day, indices in slots.items()
        for index in indices
    }


def display_selection(snapshot: WeekSnapshot | None) -> set[str]:
    """Slots currently shown as selected for a stored record.

    An open change proposal takes precedence over the base slots.
    """
    if snapshot is None:
        return set()
    if snapshot.has_pending_changes:
        return expand_slots(snapshot.pending_slots)
    return expand_slots(snapshot.slots)


class AvailabilityWorkflow:
    """Weekly availability state transitions for a single user."""

    def __init__(
        self,
        user: CurrentUser,
        records: RecordStore,
        drafts: DraftStore,
        today: Callable[[], date] = date.today,
        now: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self.user = user
        self._records = records
        self._drafts = drafts
        self._today = today
        self._now = now

    @property
    def current_week(self) -> date:
        return week_start_for(self._today())

    def toggle(self, week_start: date, selection: set[str], key: str) -> set[str]:
        """Return a copy of ``selection`` with ``key`` flipped.

        Raises:
            MalformedKey: If ``key`` cannot be decoded.
            ValidationError: If the slot is in the past or outside the week.
        """
        day, _ = self._decode_in_week(week_start, key)
        if is_past_date(day, self._today()):
            raise ValidationError(PAST_DATE_NOTICE)

        updated = set(selection)
        if key in updated:
            updated.remove(key)
        else:
            updated.add(key)
        return updated

    def toggle_draft(self, week_start: date, key: str) -> set[str]:
        """Toggle a slot in the stored draft and save it."""
        current = self._drafts.load(self.user.uid, week_start) or set()
        updated = self.toggle(week_start, current, key)
        self._drafts.save(self.user.uid, week_start, updated)
        return updated

    def clear_draft(self, week_start: date) -> None:
        self._drafts.clear(self.user.uid, week_start)

    async def submit(self, week_start: date, selection: set[str]) -> WeekSnapshot:
        """Submit the week for review.

        Creates the record on first submission; otherwise overwrites its
        ``slots``. The draft is cleared only after the write succeeded.

        Raises:
            MalformedKey: A key in ``selection`` cannot be decoded.
            ValidationError: Empty selection, a slot outside the week,
                non-Monday or past week.
            PersistenceError: The record store failed.
        """
        self._check_week_start(week_start)
        if not selection:
            raise ValidationError("Select at least one slot before submitting")
        if week_start < self.current_week:
            raise ValidationError("Cannot submit for past week")

        for key in selection:
            self._decode_in_week(week_start, key)

        fields = {
            "slots": group_by_day(week_start, selection),
            "status": "pending",
            "submitted_at": self._now(),
        }
        existing = await self._records.find(self.user.uid, week_start)
        if existing is None:
            snapshot = await self._records.create(self.user.uid, week_start, fields)
        else:
            snapshot = await self._records.update(existing.id, fields)

        self._drafts.clear(self.user.uid, week_start)
        logger.info(
            "User %s submitted %d slot(s) for week %s",
            self.user.uid,
            len(selection),
            week_start,
        )
        return snapshot

    async def request_change(self, week_start: date, selection: set[str]) -> WeekSnapshot:
        """Propose a new set of slots without touching the approved baseline.

        Raises:
            ValidationError: No record exists yet, a slot is outside the
                week, or the proposal changes a past date.
            MalformedKey: A key in ``selection`` cannot be decoded.
            PersistenceError: The record store failed.
        """
        self._check_week_start(week_start)
        for key in selection:
            self._decode_in_week(week_start, key)
        existing = await self._records.find(self.user.uid, week_start)
        if existing is None:
            raise ValidationError("Submit availability for this week before requesting changes")

        today = self._today()
        for key in selection ^ display_selection(existing):
            day, _ = decode_slot_key(key)
            if is_past_date(day, today):
                raise ValidationError(PAST_DATE_NOTICE)

        snapshot = await self._records.update(
            existing.id,
            {"pending_slots": group_by_day(week_start, selection), "status": "pending"},
        )
        logger.info("User %s requested availability changes for week %s", self.user.uid, week_start)
        return snapshot

    def observe(self, week_start: date, snapshot: WeekSnapshot | None) -> None:
        """React to a record snapshot; a stored record supersedes the draft."""
        if snapshot is not None:
            self._drafts.clear(self.user.uid, week_start)

    async def load_week(self, week_start: date) -> WeekView:
        self._check_week_start(week_start)
        snapshot = await self._records.find(self.user.uid, week_start)
        return self.build_view(week_start, snapshot)

    def build_view(self, week_start: date, snapshot: WeekSnapshot | None) -> WeekView:
        self.observe(week_start, snapshot)
        if snapshot is None:
            selection = self._drafts.load(self.user.uid, week_start) or set()
        else:
            selection = display_selection(snapshot)
        grid = build_week_grid(week_start, snapshot, selection, self._today())
        return WeekView(week_start=week_start, record=snapshot, selection=selection, grid=grid)

    @staticmethod
    def _decode_in_week(week_start: date, key: str) -> tuple[date, int]:
        day, index = decode_slot_key(key)
        if day not in week_dates(week_start) or index >= len(TIME_SLOTS):
            raise ValidationError(f"Slot {key} is not part of the week of {week_start}")
        return day, index

    @staticmethod
    def _check_week_start(week_start: date) -> None:
        if week_start.weekday() != 0:
            raise ValidationError("week_start must be a Monday")
