"""Point-of-sale endpoints: sellable products and sale commit."""

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import require_page
from app.core.identity import EmployeeIdentity, OwnerIdentity
from app.core.permissions import Action, Page
from app.db.base import get_db
from app.models.product import Product
from app.schemas.product import ProductResponse
from app.schemas.transaction import SaleCreate, SaleReceipt, StockLevel, TransactionResponse
from app.services.sales import SaleError, commit_sale

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pos", tags=["pos"])


@router.get("/products", response_model=list[ProductResponse])
async def list_sellable_products(
    identity: OwnerIdentity | EmployeeIdentity = Depends(require_page(Page.POS)),
    db: AsyncSession = Depends(get_db),
):
    """Active, in-stock products for the product grid, ordered by name."""
    result = await db.execute(
        select(Product)
        .where(
            Product.business_id == identity.business_id,
            Product.is_active == True,  # noqa: E712
            Product.stock_quantity > 0,
        )
        .order_by(Product.name)
    )
    return [ProductResponse.model_validate(p) for p in result.scalars().all()]


@router.post("/sales", response_model=SaleReceipt, status_code=status.HTTP_201_CREATED)
async def create_sale(
    body: SaleCreate,
    idempotency_key: str | None = Header(None, alias="Idempotency-Key", max_length=100),
    identity: OwnerIdentity | EmployeeIdentity = Depends(require_page(Page.POS, Action.EDIT)),
    db: AsyncSession = Depends(get_db),
):
    """Commit the cart as a sale.

    The response carries the stored transaction and the remaining stock of every
    product in the cart, so the client can refresh its product grid.
    """
    try:
        result = await commit_sale(
            db,
            business_id=identity.business_id,
            employee_id=identity.employee_id,
            lines=body.items,
            payment_method=body.payment_method,
            idempotency_key=idempotency_key,
        )
    except SaleError as exc:
        logger.warning("Sale rejected for business %s: %s", identity.business_id, exc)
        raise HTTPException(status_code=exc.status_code, detail=str(exc))

    return SaleReceipt(
        transaction=TransactionResponse.model_validate(result.transaction),
        stock=[
            StockLevel(product_id=product_id, stock_quantity=quantity)
            for product_id, quantity in result.stock.items()
        ],
        replayed=result.replayed,
    )
