"""Cost queries and the cost vs. revenue summary."""

from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from opsdesk.models.cost import Cost


@dataclass
class CostSummary:
    total_fixed_cost: float
    total_variable_cost: float
    target_variable_cost: float
    total_cost: float
    total_target_cost: float
    revenue: float
    profit: float
    margin: float  # percentage of revenue


def current_month(today: date | None = None) -> str:
    """Month in ``YYYY-MM`` form."""
    today = today or date.today()
    return f"{today.year}-{today.month:02d}"


def calculate_cost_summary(costs: list[Any], revenue: float = 0.0) -> CostSummary:
    """Aggregate costs against revenue.

    Fixed costs count their ``amount``; variable costs multiply the
    per-unit ``amount`` by the actual volume (spent) and by the expected
    volume (target). Missing volumes count as zero. Margin is 0 when there
    is no revenue.
    """
    total_fixed = 0.0
    total_variable = 0.0
    target_variable = 0.0

    for cost in costs:
        if cost.type == "fixed":
            total_fixed += cost.amount
        else:
            total_variable += cost.amount * (cost.actual_volume or 0)
            target_variable += cost.amount * (cost.expected_volume or 0)

    total_cost = total_fixed + total_variable
    profit = revenue - total_cost
    margin = (profit / revenue) * 100 if revenue > 0 else 0.0

    return CostSummary(
        total_fixed_cost=total_fixed,
        total_variable_cost=total_variable,
        target_variable_cost=target_variable,
        total_cost=total_cost,
        total_target_cost=total_fixed + target_variable,
        revenue=revenue,
        profit=profit,
        margin=margin,
    )


async def list_costs(
    session: AsyncSession,
    month: str | None = None,
    cost_type: str | None = None,
    category: str | None = None,
) -> list[Cost]:
    """Costs matching the filters, newest month first, then newest entry first."""
    stmt = select(Cost)
    if month:
        stmt = stmt.where(Cost.month == month)
    if cost_type:
        stmt = stmt.where(Cost.type == cost_type)
    if category:
        stmt = stmt.where(Cost.category == category)
    stmt = stmt.order_by(Cost.month.desc(), Cost.created_at.desc(), Cost.id.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())
