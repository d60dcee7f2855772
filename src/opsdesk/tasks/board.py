"""Task board rules: who sees which task, search filters and status moves."""

import logging
from collections.abc import Iterable
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from opsdesk.models.task import Task
from opsdesk.models.user import User

logger = logging.getLogger(__name__)

class TaskPermissionError(Exception):
    """The user may not change this task."""


def is_admin(user: User) -> bool:
    return user.role == "admin"


def is_visible(task: Task, user: User) -> bool:
    """Admins see every task, everyone else only tasks assigned to them."""
    return is_admin(user) or user.id in (task.assigned_members or [])


def matches_search(task: Task, query: str, names_by_id: dict[int, str]) -> bool:
    """Case-insensitive match on name, description, code or assignee name."""
    needle = query.strip().lower()
    if not needle:
        return True
    haystack = [task.name, task.description or "", task.task_code]
    haystack += [names_by_id.get(uid, "") for uid in task.assigned_members or []]
    return any(needle in text.lower() for text in haystack)


def filter_tasks(
    tasks: Iterable[Task],
    names_by_id: dict[int, str],
    query: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[Task]:
    """Apply the search box and the (inclusive) date range."""
    result = []
    for task in tasks:
        if query and not matches_search(task, query, names_by_id):
            continue
        if date_from is not None and task.task_date < date_from:
            continue
        if date_to is not None and task.task_date > date_to:
            continue
        result.append(task)
    return result


def move_task(task: Task, user: User, status: str, now: datetime | None = None) -> bool:
    """Move ``task`` to another board column.

    Returns False without touching the task when the status is unchanged.

    Raises:
        TaskPermissionError: The user is neither assigned nor an admin.
    """
    if task.status == status:
        return False
    if not is_visible(task, user):
        raise TaskPermissionError("You can only move tasks assigned to you.")

    now = now or datetime.utcnow()
    logger.info("User %s moved task %s from %s to %s", user.id, task.id, task.status, status)
    task.status = status
    task.status_changed_by = user.id
    task.status_changed_at = now
    task.updated_at = now
    return True


async def member_names(session: AsyncSession, tasks: Iterable[Task]) -> dict[int, str]:
    """Names of every user assigned to any of ``tasks``."""
    ids = {uid for task in tasks for uid in task.assigned_members or []}
    if not ids:
        return {}
    result = await session.execute(select(User.id, User.name).where(User.id.in_(ids)))
    return {uid: name for uid, name in result.all()}


async def list_visible_tasks(session: AsyncSession, user: User) -> list[Task]:
    """Tasks the user may see, by date then id."""
    result = await session.execute(select(Task).order_by(Task.task_date, Task.id))
    return [task for task in result.scalars().all() if is_visible(task, user)]
