from opsdesk.availability.cells import CellState, build_week_grid, derive_cell_state
from opsdesk.availability.drafts import DraftStore, FileStorage, MemoryStorage
from opsdesk.availability.engine import AvailabilityWorkflow, CurrentUser, WeekView
from opsdesk.availability.errors import (
    AvailabilityError,
    MalformedKey,
    PersistenceError,
    ValidationError,
)
from opsdesk.availability.records import SqlRecordStore, WeekSnapshot, watch_week
from opsdesk.availability.slots import TIME_SLOTS, decode_slot_key, encode_slot_key

__all__ = [
    "TIME_SLOTS",
    "AvailabilityError",
    "AvailabilityWorkflow",
    "CellState",
    "CurrentUser",
    "DraftStore",
    "FileStorage",
    "MalformedKey",
    "MemoryStorage",
    "PersistenceError",
    "SqlRecordStore",
    "ValidationError",
    "WeekSnapshot",
    "WeekView",
    "build_week_grid",
    "decode_slot_key",
    "derive_cell_state",
    "encode_slot_key",
    "watch_week",
]
