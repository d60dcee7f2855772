from datetime import date, datetime
from typing import Any

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from opsdesk.database import Base


class WeeklyAvailability(Base):
    __tablename__ = "weekly_availabilities"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    week_start: Mapped[date]  # Monday of the target week
    slots: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)  # date str -> slot indices
    pending_slots: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending, approved
    submitted_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
