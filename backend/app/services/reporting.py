"""In-memory aggregation behind the dashboard, sales history and analytics endpoints.

Every function here is pure: it takes business-scoped rows that were already
fetched and reduces them, so an aggregate always equals the sum over its input.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from uuid import UUID

from app.schemas.report import (
    DailySalesItem,
    EmployeePerformance,
    MonthlyTrend,
    PaymentMethodStat,
    SalesSummary,
    TopProduct,
)

OWNER_LABEL = "Owner"
UNKNOWN_EMPLOYEE_LABEL = "Unknown Employee"
ZERO = Decimal("0.00")


def utc_day(timestamp: datetime) -> date:
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc)
    return timestamp.date()


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def period_bounds(now: datetime) -> tuple[datetime, datetime]:
    """(start of today, start of this month), both UTC."""
    today = utc_day(now)
    return start_of_day(today), start_of_day(today.replace(day=1))


def months_back(now: datetime, months: int) -> datetime:
    """Start of the month ``months`` before the current one."""
    today = utc_day(now)
    index = today.year * 12 + (today.month - 1) - months
    return start_of_day(date(index // 12, index % 12 + 1, 1))


def summarize(transactions: Iterable) -> SalesSummary:
    total = ZERO
    count = 0
    for transaction in transactions:
        total += transaction.total_amount
        count += 1
    return SalesSummary(total_sales=total, transaction_count=count)


def low_stock_products(products: Iterable) -> list:
    """Active products at or below their threshold, lowest stock first."""
    flagged = [
        product for product in products
        if product.is_active and product.stock_quantity <= product.low_stock_threshold
    ]
    return sorted(flagged, key=lambda product: product.stock_quantity)


def employee_label(employee_id: UUID | None, names: Mapping[UUID, str]) -> str:
    if employee_id is None:
        return OWNER_LABEL
    return names.get(employee_id, UNKNOWN_EMPLOYEE_LABEL)


@dataclass(frozen=True)
class SalesHistoryFilters:
    employee_id: UUID | None = None
    payment_method: str | None = None
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None


def filter_transactions(transactions: Iterable, filters: SalesHistoryFilters) -> list:
    result = []
    for transaction in transactions:
        if filters.employee_id is not None and transaction.employee_id != filters.employee_id:
            continue
        if filters.payment_method and _method(transaction) != filters.payment_method:
            continue
        if filters.min_amount is not None and transaction.total_amount < filters.min_amount:
            continue
        if filters.max_amount is not None and transaction.total_amount > filters.max_amount:
            continue
        result.append(transaction)
    return result


def _method(transaction) -> str:
    method = transaction.payment_method
    return getattr(method, "value", method)


def daily_sales(transactions: Iterable) -> list[DailySalesItem]:
    days: dict[date, list] = {}
    for transaction in transactions:
        bucket = days.setdefault(utc_day(transaction.created_at), [ZERO, 0])
        bucket[0] += transaction.total_amount
        bucket[1] += 1
    return [
        DailySalesItem(date=day, amount=amount, transactions=count)
        for day, (amount, count) in sorted(days.items())
    ]


def top_products(transactions: Iterable, limit: int = 10) -> list[TopProduct]:
    """Best sellers by revenue, keyed by the item name captured at sale time."""
    products: dict[str, list] = {}
    for transaction in transactions:
        for item in transaction.items:
            bucket = products.setdefault(item.item_name, [0, ZERO])
            bucket[0] += item.quantity
            bucket[1] += item.total_price
    ranked = sorted(products.items(), key=lambda pair: (-pair[1][1], pair[0]))
    return [
        TopProduct(name=name, quantity=quantity, revenue=revenue)
        for name, (quantity, revenue) in ranked[:limit]
    ]


def employee_performance(
    transactions: Iterable, names: Mapping[UUID, str]
) -> list[EmployeePerformance]:
    actors: dict[str, list] = {}
    for transaction in transactions:
        bucket = actors.setdefault(employee_label(transaction.employee_id, names), [ZERO, 0])
        bucket[0] += transaction.total_amount
        bucket[1] += 1
    ranked = sorted(actors.items(), key=lambda pair: (-pair[1][0], pair[0]))
    return [
        EmployeePerformance(name=name, sales=sales, transactions=count)
        for name, (sales, count) in ranked
    ]


def payment_breakdown(transactions: Iterable) -> list[PaymentMethodStat]:
    methods: dict[str, list] = {}
    for transaction in transactions:
        bucket = methods.setdefault(_method(transaction), [ZERO, 0])
        bucket[0] += transaction.total_amount
        bucket[1] += 1
    ranked = sorted(methods.items(), key=lambda pair: (-pair[1][0], pair[0]))
    return [
        PaymentMethodStat(method=method, amount=amount, count=count)
        for method, (amount, count) in ranked
    ]


def monthly_trends(transactions: Iterable) -> list[MonthlyTrend]:
    months: dict[str, list] = {}
    for transaction in transactions:
        key = utc_day(transaction.created_at).strftime("%Y-%m")
        bucket = months.setdefault(key, [ZERO, 0])
        bucket[0] += transaction.total_amount
        bucket[1] += 1
    return [
        MonthlyTrend(month=month, sales=sales, transactions=count)
        for month, (sales, count) in sorted(months.items())
    ]


def analytics_window(now: datetime, days: int) -> tuple[datetime, datetime]:
    return now - timedelta(days=days), now
