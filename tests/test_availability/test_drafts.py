"""Tests for the availability draft store."""

import json
import logging
from datetime import date
from pathlib import Path

import pytest

from opsdesk.availability.drafts import DraftStore, FileStorage, MemoryStorage

WEEK = date(2024, 1, 1)


class BrokenStorage:
    def get(self, key: str) -> str | None:
        raise OSError("disk unavailable")

    def set(self, key: str, value: str) -> None:
        raise OSError("disk unavailable")

    def remove(self, key: str) -> None:
        raise OSError("disk unavailable")


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def drafts(storage: MemoryStorage) -> DraftStore:
    return DraftStore(storage)


class TestDraftStore:
    def test_load_absent(self, drafts: DraftStore) -> None:
        assert drafts.load(1, WEEK) is None

    def test_save_and_load(self, drafts: DraftStore) -> None:
        drafts.save(1, WEEK, {"2024-01-03-4", "2024-01-04-0"})
        assert drafts.load(1, WEEK) == {"2024-01-03-4", "2024-01-04-0"}

    def test_save_overwrites(self, drafts: DraftStore) -> None:
        drafts.save(1, WEEK, {"2024-01-03-4"})
        drafts.save(1, WEEK, {"2024-01-05-1"})
        assert drafts.load(1, WEEK) == {"2024-01-05-1"}

    def test_scoped_per_user_and_week(self, drafts: DraftStore) -> None:
        drafts.save(1, WEEK, {"2024-01-03-4"})
        assert drafts.load(2, WEEK) is None
        assert drafts.load(1, date(2024, 1, 8)) is None

    def test_payload_shape(self, drafts: DraftStore, storage: MemoryStorage) -> None:
        drafts.save(7, WEEK, {"2024-01-03-4"})
        payload = json.loads(storage.get("draft-availability-7-2024-01-01") or "")
        assert payload["weekStart"] == "2024-01-01"
        assert payload["selected"] == ["2024-01-03-4"]
        assert "updatedAt" in payload

    def test_clear_is_idempotent(self, drafts: DraftStore) -> None:
        drafts.save(1, WEEK, {"2024-01-03-4"})
        drafts.clear(1, WEEK)
        drafts.clear(1, WEEK)
        assert drafts.load(1, WEEK) is None

    @pytest.mark.parametrize(
        "raw",
        ["{not json", "[]", '{"weekStart": "2024-01-01"}', '{"selected": "2024-01-03-4"}', '{"selected": [1, 2]}'],
    )
    def test_corrupt_draft_is_discarded(
        self, drafts: DraftStore, storage: MemoryStorage, raw: str
    ) -> None:
        storage.set(DraftStore.draft_key(1, WEEK), raw)
        assert drafts.load(1, WEEK) is None
        assert storage.get(DraftStore.draft_key(1, WEEK)) is None

    def test_storage_failures_are_swallowed(self, caplog: pytest.LogCaptureFixture) -> None:
        drafts = DraftStore(BrokenStorage())
        with caplog.at_level(logging.WARNING):
            drafts.save(1, WEEK, {"2024-01-03-4"})
            assert drafts.load(1, WEEK) is None
            drafts.clear(1, WEEK)
        assert "disk unavailable" in caplog.text


class TestFileStorage:
    def test_round_trip_on_disk(self, tmp_path: Path) -> None:
        drafts = DraftStore(FileStorage(tmp_path / "drafts"))
        drafts.save(1, WEEK, {"2024-01-03-4"})
        assert drafts.load(1, WEEK) == {"2024-01-03-4"}
        assert len(list((tmp_path / "drafts").iterdir())) == 1

    def test_missing_directory_reads_as_absent(self, tmp_path: Path) -> None:
        drafts = DraftStore(FileStorage(tmp_path / "nowhere"))
        assert drafts.load(1, WEEK) is None
        drafts.clear(1, WEEK)

    def test_undecodable_file_is_discarded(self, tmp_path: Path) -> None:
        storage = FileStorage(tmp_path)
        drafts = DraftStore(storage)
        (tmp_path / f"{DraftStore.draft_key(1, WEEK)}.json").write_bytes(b"\xff\xfe{bad")

        assert drafts.load(1, WEEK) is None
        assert list(tmp_path.iterdir()) == []

    def test_unparseable_file_is_discarded(self, tmp_path: Path) -> None:
        drafts = DraftStore(FileStorage(tmp_path))
        (tmp_path / f"{DraftStore.draft_key(1, WEEK)}.json").write_text("{not json", encoding="utf-8")

        assert drafts.load(1, WEEK) is None
        assert list(tmp_path.iterdir()) == []
