"""Shared FastAPI dependencies."""

from collections.abc import Callable
from datetime import date, datetime

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from opsdesk.config import get_settings
from opsdesk.database import get_db
from opsdesk.models.user import User


def get_today_source() -> Callable[[], date]:
    """Callable giving the current date; overridden in tests."""
    return date.today


def get_today(today_source: Callable[[], date] = Depends(get_today_source)) -> date:
    return today_source()


def get_now() -> datetime:
    """Local wall-clock time used by the time clock; overridden in tests."""
    return datetime.now()


async def get_current_user(
    x_user_id: int | None = Header(default=None),
    session: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the acting user from ``X-User-Id`` or the configured default."""
    user_id = x_user_id if x_user_id is not None else get_settings().default_user_id
    user = await session.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user
