from datetime import date, datetime

from pydantic import BaseModel, Field

from opsdesk.availability.cells import CellState


class WeekRecordRead(BaseModel):
    id: int
    uid: int
    week_start: date
    slots: dict[str, list[int]]
    pending_slots: dict[str, list[int]]
    status: str
    submitted_at: datetime | None = None

    model_config = {"from_attributes": True}


class GridCellRead(BaseModel):
    key: str
    state: CellState
    past: bool

    model_config = {"from_attributes": True}


class GridRowRead(BaseModel):
    slot_index: int
    label: str
    cells: list[GridCellRead]

    model_config = {"from_attributes": True}


class WeekViewRead(BaseModel):
    week_start: date
    day_names: list[str]
    is_submitted: bool
    record: WeekRecordRead | None = None
    selection: list[str]
    grid: list[GridRowRead]


class SlotToggle(BaseModel):
    key: str = Field(max_length=20)


class DraftRead(BaseModel):
    week_start: date
    selection: list[str]


class SubmitAvailability(BaseModel):
    selected: list[str] | None = None  # None: submit the stored draft


class RequestAvailabilityChange(BaseModel):
    selected: list[str]


class WeekNavigationRead(BaseModel):
    week_start: date
    moved: bool
    notice: str | None = None

    model_config = {"from_attributes": True}
