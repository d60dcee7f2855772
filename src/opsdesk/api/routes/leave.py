"""Leave request API routes."""

from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from opsdesk.api.deps import get_current_user, get_today
from opsdesk.database import get_db
from opsdesk.models.leave import LeaveRequest
from opsdesk.models.user import User
from opsdesk.schemas.leave import LeaveRequestCreate, LeaveRequestRead

router = APIRouter(prefix="/api/leave", tags=["leave"])


@router.post("", response_model=LeaveRequestRead, status_code=201)
async def request_leave(
    body: LeaveRequestCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> LeaveRequest:
    """Apply for ``days`` consecutive days of leave starting at ``from_date``."""
    if not body.description.strip():
        raise HTTPException(status_code=422, detail="description must not be blank")

    row = LeaveRequest(
        user_id=user.id,
        from_date=body.from_date,
        to_date=body.from_date + timedelta(days=body.days - 1),
        description=body.description.strip(),
        status="pending",
    )
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return row


@router.get("", response_model=list[LeaveRequestRead])
async def list_leave_requests(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
) -> list[LeaveRequest]:
    """The user's leave requests that have not ended yet."""
    stmt = (
        select(LeaveRequest)
        .where(LeaveRequest.user_id == user.id, LeaveRequest.to_date > today)
        .order_by(LeaveRequest.from_date)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
