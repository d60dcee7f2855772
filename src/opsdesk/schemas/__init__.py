from opsdesk.schemas.availability import (
    DraftRead,
    GridCellRead,
    GridRowRead,
    RequestAvailabilityChange,
    SlotToggle,
    SubmitAvailability,
    WeekNavigationRead,
    WeekRecordRead,
    WeekViewRead,
)
from opsdesk.schemas.cost import CostCreate, CostRead, CostSummaryRead, CostUpdate
from opsdesk.schemas.leave import LeaveRequestCreate, LeaveRequestRead
from opsdesk.schemas.system import StatusResponse
from opsdesk.schemas.task import TaskCreate, TaskRead, TaskStatusMove, TaskUpdate
from opsdesk.schemas.time_entry import ClockStatus, ManualTimeEntry, TimeEntryRead
from opsdesk.schemas.user import UserCreate, UserRead

__all__ = [
    "ClockStatus",
    "CostCreate",
    "CostRead",
    "CostSummaryRead",
    "CostUpdate",
    "DraftRead",
    "GridCellRead",
    "GridRowRead",
    "LeaveRequestCreate",
    "LeaveRequestRead",
    "ManualTimeEntry",
    "RequestAvailabilityChange",
    "SlotToggle",
    "StatusResponse",
    "SubmitAvailability",
    "TaskCreate",
    "TaskRead",
    "TaskStatusMove",
    "TaskUpdate",
    "TimeEntryRead",
    "UserCreate",
    "UserRead",
    "WeekNavigationRead",
    "WeekRecordRead",
    "WeekViewRead",
]
