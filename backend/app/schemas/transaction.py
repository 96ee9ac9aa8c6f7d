"""Sale / transaction schemas for API request/response."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.transaction import PaymentMethod, TransactionType


class CartLine(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    unit_price: Decimal = Field(..., ge=0, decimal_places=2)
    quantity: int = Field(..., gt=0)
    product_id: UUID | None = None


class SaleCreate(BaseModel):
    items: list[CartLine] = Field(..., min_length=1)
    payment_method: PaymentMethod


class TransactionItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    transaction_id: UUID
    product_id: UUID | None
    item_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    business_id: UUID
    employee_id: UUID | None
    total_amount: Decimal
    payment_method: PaymentMethod
    transaction_type: TransactionType
    created_at: datetime
    items: list[TransactionItemResponse]


class StockLevel(BaseModel):
    product_id: UUID
    stock_quantity: int


class SaleReceipt(BaseModel):
    transaction: TransactionResponse
    stock: list[StockLevel]
    replayed: bool = False


class SalesHistoryEntry(TransactionResponse):
    employee_name: str


class SalesHistoryResponse(BaseModel):
    items: list[SalesHistoryEntry]
    total: int
    total_amount: Decimal
