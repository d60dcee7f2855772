"""Tests for slot labels and the slot key codec."""

from datetime import date

import pytest

from opsdesk.availability.errors import MalformedKey
from opsdesk.availability.slots import TIME_SLOTS, decode_slot_key, encode_slot_key


class TestTimeSlots:
    def test_first_and_last_labels(self) -> None:
        assert TIME_SLOTS[0] == "4.30AM - 5.00AM"
        assert TIME_SLOTS[-1] == "11.30PM - 12.00AM"

    def test_count(self) -> None:
        assert len(TIME_SLOTS) == 39

    def test_noon_crossing(self) -> None:
        assert "11.30AM - 12.00PM" in TIME_SLOTS
        assert "12.00PM - 12.30PM" in TIME_SLOTS


class TestEncode:
    def test_encode(self) -> None:
        assert encode_slot_key(date(2024, 1, 1), 3) == "2024-01-01-3"

    def test_encode_rejects_out_of_range_index(self) -> None:
        with pytest.raises(MalformedKey):
            encode_slot_key(date(2024, 1, 1), len(TIME_SLOTS))
        with pytest.raises(MalformedKey):
            encode_slot_key(date(2024, 1, 1), -1)

    def test_round_trip_across_year_boundary(self) -> None:
        for day in (date(2023, 12, 31), date(2024, 2, 29), date(2024, 1, 1)):
            for index in (0, 17, len(TIME_SLOTS) - 1):
                assert decode_slot_key(encode_slot_key(day, index)) == (day, index)

    def test_distinct_inputs_give_distinct_keys(self) -> None:
        keys = {encode_slot_key(date(2024, 1, d), i) for d in range(1, 6) for i in range(len(TIME_SLOTS))}
        assert len(keys) == 5 * len(TIME_SLOTS)


class TestDecode:
    def test_decode(self) -> None:
        assert decode_slot_key("2024-01-02-0") == (date(2024, 1, 2), 0)

    @pytest.mark.parametrize(
        "key",
        ["", "2024-01-01", "2024-01-01-", "2024-1-1-3", "2024-01-01-x", "garbage", "2024-01-01--3"],
    )
    def test_malformed(self, key: str) -> None:
        with pytest.raises(MalformedKey):
            decode_slot_key(key)

    def test_impossible_date(self) -> None:
        with pytest.raises(MalformedKey):
            decode_slot_key("2024-02-30-1")

    def test_index_range_left_to_caller(self) -> None:
        assert decode_slot_key("2024-01-01-99") == (date(2024, 1, 1), 99)
