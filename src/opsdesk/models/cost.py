from datetime import datetime

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from opsdesk.database import Base


class Cost(Base):
    __tablename__ = "costs"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    type: Mapped[str] = mapped_column(String(20))  # fixed, variable
    category: Mapped[str] = mapped_column(String(30))
    amount: Mapped[float] = mapped_column(default=0.0)  # fixed amount or cost per unit
    unit: Mapped[str | None] = mapped_column(String(20), default=None)  # variable costs only
    expected_volume: Mapped[float | None] = mapped_column(default=None)
    actual_volume: Mapped[float | None] = mapped_column(default=None)
    month: Mapped[str] = mapped_column(String(7), index=True)  # YYYY-MM
    created_by: Mapped[int] = mapped_column(ForeignKey("users.id"))
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(default=None)
    updated_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), default=None)
