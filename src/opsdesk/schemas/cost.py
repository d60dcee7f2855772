from datetime import datetime

from pydantic import BaseModel, Field

COST_CATEGORY_PATTERN = r"^(CLIENT_PAYMENT|MARKETING|OTHER|TAX|FRANCHISE_FEE|GST|INVESTMENT)$"
COST_TYPE_PATTERN = r"^(fixed|variable)$"
COST_UNIT_PATTERN = r"^(task|hour|client|unit)?$"
MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class CostBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    type: str = Field(pattern=COST_TYPE_PATTERN)
    category: str = Field(pattern=COST_CATEGORY_PATTERN)
    amount: float = Field(ge=0)
    unit: str | None = Field(default=None, pattern=COST_UNIT_PATTERN)
    expected_volume: float | None = Field(default=None, ge=0)
    actual_volume: float | None = Field(default=None, ge=0)
    month: str = Field(pattern=MONTH_PATTERN)


class CostCreate(CostBase):
    pass


class CostUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    type: str | None = Field(default=None, pattern=COST_TYPE_PATTERN)
    category: str | None = Field(default=None, pattern=COST_CATEGORY_PATTERN)
    amount: float | None = Field(default=None, ge=0)
    unit: str | None = Field(default=None, pattern=COST_UNIT_PATTERN)
    expected_volume: float | None = Field(default=None, ge=0)
    actual_volume: float | None = Field(default=None, ge=0)
    month: str | None = Field(default=None, pattern=MONTH_PATTERN)


class CostRead(CostBase):
    id: int
    created_by: int
    created_at: datetime
    updated_at: datetime | None = None
    updated_by: int | None = None

    model_config = {"from_attributes": True}


class CostSummaryRead(BaseModel):
    month: str | None = None
    total_fixed_cost: float
    total_variable_cost: float
    target_variable_cost: float
    total_cost: float
    total_target_cost: float
    revenue: float
    profit: float
    margin: float

    model_config = {"from_attributes": True}
