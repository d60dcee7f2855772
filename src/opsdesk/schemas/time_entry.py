from datetime import date, datetime, time

from pydantic import BaseModel


class ManualTimeEntry(BaseModel):
    entry_date: date
    clock_in: time
    clock_out: time


class TimeEntryRead(BaseModel):
    id: int
    user_id: int
    entry_date: date
    clock_in: datetime | None = None
    clock_out: datetime | None = None
    total_hours: float | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ClockStatus(BaseModel):
    clocked_in: bool
    entry: TimeEntryRead | None = None
