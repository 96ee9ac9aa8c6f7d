"""Dashboard and analytics response schemas."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from app.schemas.product import ProductResponse


class SalesSummary(BaseModel):
    total_sales: Decimal = Field(..., decimal_places=2)
    transaction_count: int


class DashboardResponse(BaseModel):
    today: SalesSummary
    month: SalesSummary
    low_stock: list[ProductResponse]


class DailySalesItem(BaseModel):
    date: date
    amount: Decimal = Field(..., decimal_places=2)
    transactions: int


class TopProduct(BaseModel):
    name: str
    quantity: int
    revenue: Decimal = Field(..., decimal_places=2)


class EmployeePerformance(BaseModel):
    name: str
    sales: Decimal = Field(..., decimal_places=2)
    transactions: int


class PaymentMethodStat(BaseModel):
    method: str
    amount: Decimal = Field(..., decimal_places=2)
    count: int


class MonthlyTrend(BaseModel):
    month: str  # YYYY-MM
    sales: Decimal = Field(..., decimal_places=2)
    transactions: int


class AnalyticsResponse(BaseModel):
    period_start: date
    period_end: date
    total_sales: Decimal = Field(..., decimal_places=2)
    transaction_count: int
    daily_sales: list[DailySalesItem]
    top_products: list[TopProduct]
    employee_performance: list[EmployeePerformance]
    payment_methods: list[PaymentMethodStat]
    monthly_trends: list[MonthlyTrend]
