from datetime import date, datetime

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from opsdesk.database import Base


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, default="")
    task_date: Mapped[date] = mapped_column(index=True)
    status: Mapped[str] = mapped_column(String(20), default="New")  # New, Progress, Complete
    assigned_members: Mapped[list[int]] = mapped_column(JSON, default=list)  # user ids
    created_by: Mapped[int] = mapped_column(ForeignKey("users.id"))
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(default=None)
    status_changed_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), default=None)
    status_changed_at: Mapped[datetime | None] = mapped_column(default=None)

    @property
    def task_code(self) -> str:
        return f"TASK-{self.id:04d}"
