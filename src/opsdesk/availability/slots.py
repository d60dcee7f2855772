"""Half-hour slot labels and the ``<date>-<index>`` slot key codec."""

import re
from datetime import date, datetime, timedelta

from opsdesk.availability.errors import MalformedKey

SLOT_MINUTES = 30
DAY_START = (4, 30)  # first slot begins at 4:30 AM
SLOT_COUNT = 39  # last slot is 11:30 PM - 12:00 AM

_KEY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})-(\d+)$")


def _format_time(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}.{moment.minute:02d}{suffix}"


def _build_time_slots() -> list[str]:
    labels: list[str] = []
    current = datetime(2000, 1, 1, *DAY_START)
    for _ in range(SLOT_COUNT):
        end = current + timedelta(minutes=SLOT_MINUTES)
        labels.append(f"{_format_time(current)} - {_format_time(end)}")
        current = end
    return labels


TIME_SLOTS: list[str] = _build_time_slots()


def encode_slot_key(day: date, slot_index: int) -> str:
    """Encode a (date, slot index) pair as ``"2024-01-01-3"``."""
    if not 0 <= slot_index < len(TIME_SLOTS):
        raise MalformedKey(f"Slot index {slot_index} out of range 0..{len(TIME_SLOTS) - 1}")
    return f"{day.isoformat()}-{slot_index}"


def decode_slot_key(key: str) -> tuple[date, int]:
    """Decode a slot key back into its date and slot index.

    Only the shape is checked here; whether the index falls inside
    ``TIME_SLOTS`` or the date inside a given week is up to the caller.

    Raises:
        MalformedKey: If ``key`` is not ``<YYYY-MM-DD>-<digits>`` or names
            an impossible calendar date.
    """
    match = _KEY_RE.match(key)
    if match is None:
        raise MalformedKey(f"Malformed slot key: {key!r}")
    year, month, day, index = (int(part) for part in match.groups())
    try:
        return date(year, month, day), index
    except ValueError as e:
        raise MalformedKey(f"Malformed slot key: {key!r} ({e})") from e
