from datetime import date, datetime

from pydantic import BaseModel, Field

TASK_STATUS_PATTERN = r"^(New|Progress|Complete)$"


class TaskBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    task_date: date
    status: str = Field(default="New", pattern=TASK_STATUS_PATTERN)
    assigned_members: list[int] = Field(default_factory=list)


class TaskCreate(TaskBase):
    pass


class TaskUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    task_date: date | None = None
    assigned_members: list[int] | None = None


class TaskStatusMove(BaseModel):
    status: str = Field(pattern=TASK_STATUS_PATTERN)


class TaskRead(TaskBase):
    id: int
    task_code: str
    assigned_member_names: list[str] = Field(default_factory=list)
    created_by: int
    created_at: datetime
    updated_at: datetime | None = None
    status_changed_by: int | None = None
    status_changed_at: datetime | None = None

    model_config = {"from_attributes": True}
