"""Cost management API routes: fixed/variable costs and the monthly summary."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from opsdesk.api.deps import get_current_user
from opsdesk.database import get_db
from opsdesk.finance.costs import calculate_cost_summary, list_costs
from opsdesk.models.cost import Cost
from opsdesk.models.user import User
from opsdesk.schemas.cost import (
    COST_CATEGORY_PATTERN,
    COST_TYPE_PATTERN,
    MONTH_PATTERN,
    CostCreate,
    CostRead,
    CostSummaryRead,
    CostUpdate,
)

router = APIRouter(prefix="/api/costs", tags=["costs"])


async def _get_cost_or_404(session: AsyncSession, cost_id: int) -> Cost:
    cost = await session.get(Cost, cost_id)
    if cost is None:
        raise HTTPException(status_code=404, detail="Cost not found")
    return cost


@router.post("", response_model=CostRead, status_code=201)
async def create_cost(
    body: CostCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> Cost:
    row = Cost(**body.model_dump(), created_by=user.id)
    if not row.unit:
        row.unit = None
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return row


@router.get("", response_model=list[CostRead])
async def get_costs(
    month: str | None = Query(default=None, pattern=MONTH_PATTERN),
    cost_type: str | None = Query(default=None, alias="type", pattern=COST_TYPE_PATTERN),
    category: str | None = Query(default=None, pattern=COST_CATEGORY_PATTERN),
    session: AsyncSession = Depends(get_db),
) -> list[Cost]:
    return await list_costs(session, month=month, cost_type=cost_type, category=category)


@router.get("/summary", response_model=CostSummaryRead)
async def get_cost_summary(
    month: str | None = Query(default=None, pattern=MONTH_PATTERN),
    revenue: float = Query(default=0.0, ge=0),
    session: AsyncSession = Depends(get_db),
) -> CostSummaryRead:
    """Fixed vs. variable cost totals, target costs and margin against ``revenue``."""
    costs = await list_costs(session, month=month)
    summary = calculate_cost_summary(costs, revenue)
    return CostSummaryRead(month=month, **vars(summary))


@router.get("/{cost_id}", response_model=CostRead)
async def get_cost(
    cost_id: int,
    session: AsyncSession = Depends(get_db),
) -> Cost:
    return await _get_cost_or_404(session, cost_id)


@router.patch("/{cost_id}", response_model=CostRead)
async def update_cost(
    cost_id: int,
    body: CostUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> Cost:
    """Partially update a cost. An empty unit or a zero volume clears the field."""
    cost = await _get_cost_or_404(session, cost_id)

    for name, value in body.model_dump(exclude_unset=True).items():
        if name in ("unit", "expected_volume", "actual_volume"):
            value = value or None
        elif value is None:
            continue
        setattr(cost, name, value)
    cost.updated_at = datetime.utcnow()
    cost.updated_by = user.id

    await session.commit()
    await session.refresh(cost)
    return cost


@router.delete("/{cost_id}", status_code=204)
async def delete_cost(
    cost_id: int,
    session: AsyncSession = Depends(get_db),
) -> None:
    cost = await _get_cost_or_404(session, cost_id)
    await session.delete(cost)
    await session.commit()
