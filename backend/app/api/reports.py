"""Dashboard and analytics endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.sales import employee_names
from app.core.config import settings
from app.core.deps import require_page
from app.core.identity import EmployeeIdentity, OwnerIdentity
from app.core.permissions import Page
from app.db.base import get_db
from app.models.product import Product
from app.models.transaction import Transaction
from app.schemas.product import ProductResponse
from app.schemas.report import AnalyticsResponse, DashboardResponse
from app.services import reporting

router = APIRouter(prefix="/reports", tags=["reports"])


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def _transactions_since(db: AsyncSession, business_id, since: datetime) -> list[Transaction]:
    result = await db.execute(
        select(Transaction)
        .where(
            Transaction.business_id == business_id,
            Transaction.created_at >= since,
        )
        .order_by(Transaction.created_at)
    )
    return list(result.scalars().all())


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    identity: OwnerIdentity | EmployeeIdentity = Depends(require_page(Page.DASHBOARD)),
    db: AsyncSession = Depends(get_db),
):
    """Today's and this month's sales plus products at or below their low-stock threshold."""
    today_start, month_start = reporting.period_bounds(_utcnow())

    month = await _transactions_since(db, identity.business_id, month_start)
    today = [t for t in month if t.created_at >= today_start]

    result = await db.execute(
        select(Product).where(
            Product.business_id == identity.business_id,
            Product.is_active == True,  # noqa: E712
        )
    )
    low_stock = reporting.low_stock_products(result.scalars().all())

    return DashboardResponse(
        today=reporting.summarize(today),
        month=reporting.summarize(month),
        low_stock=[ProductResponse.model_validate(p) for p in low_stock],
    )


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    days: int | None = Query(None, ge=1, le=366),
    identity: OwnerIdentity = Depends(require_page(Page.ANALYTICS)),
    db: AsyncSession = Depends(get_db),
):
    """Sales analytics over the last ``days`` days; monthly trends cover twelve months."""
    now = _utcnow()
    start, end = reporting.analytics_window(now, days or settings.ANALYTICS_DEFAULT_DAYS)
    trend_start = reporting.months_back(now, 12)

    history = await _transactions_since(db, identity.business_id, min(start, trend_start))
    window = [t for t in history if t.created_at >= start]
    trend = [t for t in history if t.created_at >= trend_start]
    names = await employee_names(db, identity.business_id)

    summary = reporting.summarize(window)
    return AnalyticsResponse(
        period_start=start.date(),
        period_end=end.date(),
        total_sales=summary.total_sales,
        transaction_count=summary.transaction_count,
        daily_sales=reporting.daily_sales(window),
        top_products=reporting.top_products(window),
        employee_performance=reporting.employee_performance(window, names),
        payment_methods=reporting.payment_breakdown(window),
        monthly_trends=reporting.monthly_trends(trend),
    )
