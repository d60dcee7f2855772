"""User API routes."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from opsdesk.api.deps import get_current_user
from opsdesk.database import get_db
from opsdesk.models.user import User
from opsdesk.schemas.user import UserCreate, UserRead

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    session: AsyncSession = Depends(get_db),
) -> User:
    existing = await session.execute(select(User).where(User.email == body.email))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(status_code=409, detail=f"User with email '{body.email}' already exists")

    row = User(name=body.name, email=body.email, role=body.role)
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return row


@router.get("/me", response_model=UserRead)
async def get_me(user: User = Depends(get_current_user)) -> User:
    return user
