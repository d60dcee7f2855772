"""Task board API routes: create, search and move tasks between columns."""

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from opsdesk.api.deps import get_current_user, get_now
from opsdesk.database import get_db
from opsdesk.models.task import Task
from opsdesk.models.user import User
from opsdesk.schemas.task import TaskCreate, TaskRead, TaskStatusMove, TaskUpdate
from opsdesk.tasks.board import (
    TaskPermissionError,
    filter_tasks,
    is_admin,
    is_visible,
    list_visible_tasks,
    member_names,
    move_task,
)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _to_read(task: Task, names_by_id: dict[int, str]) -> TaskRead:
    read = TaskRead.model_validate(task)
    names = [names_by_id[uid] for uid in task.assigned_members if uid in names_by_id]
    return read.model_copy(update={"assigned_member_names": names})


async def _get_visible_task_or_404(session: AsyncSession, task_id: int, user: User) -> Task:
    task = await session.get(Task, task_id)
    if task is None or not is_visible(task, user):
        raise HTTPException(status_code=404, detail="Task not found")
    return task


def _require_manage(task: Task, user: User) -> None:
    if not (is_admin(user) or task.created_by == user.id):
        raise HTTPException(status_code=403, detail="Only admins or the task creator can change this task")


async def _check_members(session: AsyncSession, member_ids: list[int]) -> None:
    if not member_ids:
        return
    result = await session.execute(select(User.id).where(User.id.in_(member_ids)))
    unknown = set(member_ids) - set(result.scalars().all())
    if unknown:
        raise HTTPException(status_code=422, detail=f"Unknown users: {sorted(unknown)}")


@router.post("", response_model=TaskRead, status_code=201)
async def create_task(
    body: TaskCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> TaskRead:
    await _check_members(session, body.assigned_members)
    row = Task(
        name=body.name,
        description=body.description,
        task_date=body.task_date,
        status=body.status,
        assigned_members=list(dict.fromkeys(body.assigned_members)),
        created_by=user.id,
    )
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return _to_read(row, await member_names(session, [row]))


@router.get("", response_model=list[TaskRead])
async def list_tasks(
    q: str | None = Query(default=None, max_length=200),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> list[TaskRead]:
    """Tasks visible to the user, filtered by search text and date range."""
    tasks = await list_visible_tasks(session, user)
    names_by_id = await member_names(session, tasks)
    filtered = filter_tasks(tasks, names_by_id, query=q, date_from=date_from, date_to=date_to)
    return [_to_read(task, names_by_id) for task in filtered]


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> TaskRead:
    task = await _get_visible_task_or_404(session, task_id, user)
    return _to_read(task, await member_names(session, [task]))


@router.patch("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: int,
    body: TaskUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
) -> TaskRead:
    task = await _get_visible_task_or_404(session, task_id, user)
    _require_manage(task, user)

    updates = body.model_dump(exclude_unset=True, exclude_none=True)
    if "assigned_members" in updates:
        await _check_members(session, updates["assigned_members"])
        updates["assigned_members"] = list(dict.fromkeys(updates["assigned_members"]))
    for name, value in updates.items():
        setattr(task, name, value)
    task.updated_at = now

    await session.commit()
    await session.refresh(task)
    return _to_read(task, await member_names(session, [task]))


@router.patch("/{task_id}/status", response_model=TaskRead)
async def move_task_status(
    task_id: int,
    body: TaskStatusMove,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
) -> TaskRead:
    """Move a task to another column; only assignees and admins may do so."""
    task = await session.get(Task, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    try:
        moved = move_task(task, user, body.status, now)
    except TaskPermissionError as e:
        raise HTTPException(status_code=403, detail=str(e)) from e

    if moved:
        await session.commit()
        await session.refresh(task)
    return _to_read(task, await member_names(session, [task]))


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> None:
    task = await _get_visible_task_or_404(session, task_id, user)
    _require_manage(task, user)
    await session.delete(task)
    await session.commit()
