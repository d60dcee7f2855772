from datetime import date, datetime

from pydantic import BaseModel, Field


class LeaveRequestCreate(BaseModel):
    from_date: date
    days: int = Field(ge=1, le=365)
    description: str = Field(min_length=1, max_length=1000)


class LeaveRequestRead(BaseModel):
    id: int
    user_id: int
    from_date: date
    to_date: date
    description: str
    status: str
    applied_at: datetime

    model_config = {"from_attributes": True}
