from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    name: str = Field(max_length=100)
    email: EmailStr
    role: str = Field(default="employee", pattern=r"^(employee|admin)$")


class UserCreate(UserBase):
    pass


class UserRead(UserBase):
    id: int
    created_at: datetime

    model_config = {"from_attributes": True}
