"""Access to the stored week availability records.

The workflow only sees ``WeekSnapshot`` values and the ``RecordStore``
interface; ``SqlRecordStore`` is the SQLAlchemy implementation.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from opsdesk.availability.errors import PersistenceError
from opsdesk.models.availability import WeeklyAvailability

logger = logging.getLogger(__name__)

SlotMap = dict[str, list[int]]


@dataclass(frozen=True)
class WeekSnapshot:
    """Immutable view of one (user, week) record."""

    id: int
    uid: int
    week_start: date
    slots: SlotMap = field(default_factory=dict)
    pending_slots: SlotMap = field(default_factory=dict)
    status: str = "pending"
    submitted_at: datetime | None = None

    @property
    def has_pending_changes(self) -> bool:
        """True while a non-empty change proposal is under review."""
        return self.status == "pending" and any(self.pending_slots.values())

    @classmethod
    def from_row(cls, row: WeeklyAvailability) -> "WeekSnapshot":
        return cls(
            id=row.id,
            uid=row.user_id,
            week_start=row.week_start,
            slots=_normalize(row.slots),
            pending_slots=_normalize(row.pending_slots),
            status=row.status,
            submitted_at=row.submitted_at,
        )


def _normalize(raw: dict[str, Any] | None) -> SlotMap:
    return {day: [int(i) for i in indices] for day, indices in (raw or {}).items()}


class RecordStore(Protocol):
    async def find(self, uid: int, week_start: date) -> WeekSnapshot | None: ...

    async def create(self, uid: int, week_start: date, fields: dict[str, Any]) -> WeekSnapshot: ...

    async def update(self, record_id: int, fields: dict[str, Any]) -> WeekSnapshot: ...


class SqlRecordStore:
    """``RecordStore`` backed by the ``weekly_availabilities`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find(self, uid: int, week_start: date) -> WeekSnapshot | None:
        stmt = (
            select(WeeklyAvailability)
            .where(
                WeeklyAvailability.user_id == uid,
                WeeklyAvailability.week_start == week_start,
            )
            .order_by(WeeklyAvailability.id)
            .limit(1)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            logger.exception("Failed to load availability for user %s week %s", uid, week_start)
            raise PersistenceError(f"Failed to load availability: {e}") from e
        row = result.scalar_one_or_none()
        return WeekSnapshot.from_row(row) if row is not None else None

    async def create(self, uid: int, week_start: date, fields: dict[str, Any]) -> WeekSnapshot:
        row = WeeklyAvailability(user_id=uid, week_start=week_start, **fields)
        self._session.add(row)
        await self._commit(f"create availability for user {uid} week {week_start}")
        await self._session.refresh(row)
        logger.info("Created availability record %s for user %s week %s", row.id, uid, week_start)
        return WeekSnapshot.from_row(row)

    async def update(self, record_id: int, fields: dict[str, Any]) -> WeekSnapshot:
        try:
            row = await self._session.get(WeeklyAvailability, record_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to load availability record %s", record_id)
            raise PersistenceError(f"Failed to load availability record: {e}") from e
        if row is None:
            raise PersistenceError(f"Availability record {record_id} no longer exists")

        for name, value in fields.items():
            setattr(row, name, value)
        await self._commit(f"update availability record {record_id}")
        await self._session.refresh(row)
        logger.info("Updated availability record %s: %s", record_id, ", ".join(sorted(fields)))
        return WeekSnapshot.from_row(row)

    async def _commit(self, action: str) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.exception("Failed to %s", action)
            raise PersistenceError(f"Failed to {action}: {e}") from e


async def watch_week(
    session_factory: async_sessionmaker[AsyncSession],
    uid: int,
    week_start: date,
    interval: float = 2.0,
) -> AsyncGenerator[WeekSnapshot | None, None]:
    """Yield the week's record every time it changes.

    The current state is always yielded first; afterwards the table is
    polled every ``interval`` seconds and a snapshot is only emitted when
    it differs from the previous one. Close the generator to stop watching.
    """
    last: WeekSnapshot | None = None
    first = True
    while True:
        async with session_factory() as session:
            snapshot = await SqlRecordStore(session).find(uid, week_start)
        if first or snapshot != last:
            first = False
            last = snapshot
            yield snapshot
        await asyncio.sleep(interval)
