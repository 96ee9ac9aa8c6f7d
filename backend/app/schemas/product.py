from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: Decimal = Field(..., gt=0, decimal_places=2)
    cost: Decimal = Field(default=Decimal("0.00"), ge=0, decimal_places=2)
    stock_quantity: int = Field(default=0, ge=0)
    low_stock_threshold: int = Field(default=10, ge=0)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    price: Decimal | None = Field(None, gt=0, decimal_places=2)
    cost: Decimal | None = Field(None, ge=0, decimal_places=2)
    stock_quantity: int | None = None
    low_stock_threshold: int | None = Field(None, ge=0)
    is_active: bool | None = None


class ProductResponse(ProductBase):
    id: UUID
    business_id: UUID
    # May be negative after overselling
    stock_quantity: int
    is_active: bool
    is_low_stock: bool
    created_at: datetime
    updated_at: datetime
    model_config = {"from_attributes": True}


class ProductListResponse(BaseModel):
    items: list[ProductResponse]
    total: int
