"""Tests for time clock API endpoints."""

from collections.abc import Callable, Iterator
from datetime import datetime

import pytest
from httpx import AsyncClient

from opsdesk.api.deps import get_now
from opsdesk.main import app
from opsdesk.models.user import User
from tests.conftest import NOW, create_user


@pytest.fixture
def set_now() -> Iterator[Callable[[datetime], None]]:
    current = {"now": NOW}
    app.dependency_overrides[get_now] = lambda: current["now"]

    def _set(value: datetime) -> None:
        current["now"] = value

    yield _set
    app.dependency_overrides[get_now] = lambda: NOW


async def test_clock_in_and_out(
    client: AsyncClient, user: User, set_now: Callable[[datetime], None]
) -> None:
    resp = await client.post("/api/clock/in")
    assert resp.status_code == 201
    assert resp.json()["clock_in"] == "2024-01-03T09:00:00"
    assert resp.json()["clock_out"] is None

    status = (await client.get("/api/clock/status")).json()
    assert status["clocked_in"] is True

    set_now(datetime(2024, 1, 3, 17, 20))
    resp = await client.post("/api/clock/out")
    assert resp.status_code == 200
    assert resp.json()["total_hours"] == 8.33

    status = (await client.get("/api/clock/status")).json()
    assert status == {"clocked_in": False, "entry": None}


async def test_double_clock_in_rejected(
    client: AsyncClient, user: User, set_now: Callable[[datetime], None]
) -> None:
    await client.post("/api/clock/in")
    resp = await client.post("/api/clock/in")
    assert resp.status_code == 409
    assert "already clocked in" in resp.json()["detail"]


async def test_clock_out_without_clock_in(
    client: AsyncClient, user: User, set_now: Callable[[datetime], None]
) -> None:
    resp = await client.post("/api/clock/out")
    assert resp.status_code == 409


async def test_multiple_cycles_per_day(
    client: AsyncClient, user: User, set_now: Callable[[datetime], None]
) -> None:
    await client.post("/api/clock/in")
    set_now(datetime(2024, 1, 3, 12, 0))
    await client.post("/api/clock/out")
    set_now(datetime(2024, 1, 3, 13, 0))
    resp = await client.post("/api/clock/in")
    assert resp.status_code == 201

    entries = (await client.get("/api/clock/entries", params={"entry_date": "2024-01-03"})).json()
    assert len(entries) == 2
    assert entries[0]["clock_in"] == "2024-01-03T13:00:00"


async def test_manual_entry_creates_then_overwrites(client: AsyncClient, user: User) -> None:
    resp = await client.post(
        "/api/clock/entries",
        json={"entry_date": "2024-01-02", "clock_in": "08:00", "clock_out": "12:30"},
    )
    assert resp.status_code == 201
    assert resp.json()["total_hours"] == 4.5
    entry_id = resp.json()["id"]

    resp = await client.post(
        "/api/clock/entries",
        json={"entry_date": "2024-01-02", "clock_in": "09:00", "clock_out": "10:00"},
    )
    assert resp.json()["id"] == entry_id
    assert resp.json()["total_hours"] == 1.0


async def test_manual_entry_rejects_inverted_times(client: AsyncClient, user: User) -> None:
    resp = await client.post(
        "/api/clock/entries",
        json={"entry_date": "2024-01-02", "clock_in": "12:00", "clock_out": "12:00"},
    )
    assert resp.status_code == 422
    assert "after clock in" in resp.json()["detail"]


async def test_active_entries_across_users(
    client: AsyncClient, user: User, set_now: Callable[[datetime], None]
) -> None:
    await create_user(user_id=2, email="second@example.com")
    await client.post("/api/clock/in")
    await client.post("/api/clock/in", headers={"X-User-Id": "2"})
    await client.post("/api/clock/out", headers={"X-User-Id": "2"})

    active = (await client.get("/api/clock/active")).json()
    assert [e["user_id"] for e in active] == [1]
