"""Per-cell classification of the weekly availability grid."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from opsdesk.availability.records import WeekSnapshot
from opsdesk.availability.slots import TIME_SLOTS, encode_slot_key
from opsdesk.availability.weeks import is_past_date, week_dates


class CellState(StrEnum):
    DRAFT_SELECTED = "draft_selected"
    INITIAL_PENDING = "initial_pending"
    APPROVED = "approved"
    KEEP = "keep"
    ADD = "add"
    REMOVE = "remove"
    EMPTY = "empty"


@dataclass
class GridCell:
    key: str
    state: CellState
    past: bool


@dataclass
class GridRow:
    slot_index: int
    label: str
    cells: list[GridCell]


def derive_cell_state(
    day: date,
    slot_index: int,
    snapshot: WeekSnapshot | None,
    selection: set[str] | None = None,
) -> CellState:
    """Classify one (day, slot) cell.

    Without a record the cell reflects the local draft. A pending record
    with no proposal is a first submission still under review, so its
    ``slots`` are shown as pending. Once a proposal exists, the base
    ``slots`` and the proposed ``pending_slots`` are compared. Records in
    any other status (e.g. rejected) show no slots.
    """
    if snapshot is None:
        key = encode_slot_key(day, slot_index)
        return CellState.DRAFT_SELECTED if selection and key in selection else CellState.EMPTY

    day_str = day.isoformat()
    in_base = slot_index in snapshot.slots.get(day_str, [])

    if snapshot.status == "approved":
        return CellState.APPROVED if in_base else CellState.EMPTY
    if snapshot.status != "pending":
        return CellState.EMPTY

    if not snapshot.has_pending_changes:
        return CellState.INITIAL_PENDING if in_base else CellState.EMPTY

    in_proposed = slot_index in snapshot.pending_slots.get(day_str, [])
    if in_base and in_proposed:
        return CellState.KEEP
    if in_proposed:
        return CellState.ADD
    if in_base:
        return CellState.REMOVE
    return CellState.EMPTY


def build_week_grid(
    week_start: date,
    snapshot: WeekSnapshot | None,
    selection: set[str] | None,
    today: date,
) -> list[GridRow]:
    """Classify every (slot, weekday) cell of the week, one row per slot."""
    days = week_dates(week_start)
    rows = []
    for slot_index, label in enumerate(TIME_SLOTS):
        cells = [
            GridCell(
                key=encode_slot_key(day, slot_index),
                state=derive_cell_state(day, slot_index, snapshot, selection),
                past=is_past_date(day, today),
            )
            for day in days
        ]
        rows.append(GridRow(slot_index=slot_index, label=label, cells=cells))
    return rows
