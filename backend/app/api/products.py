"""Inventory (product catalogue) endpoints. Viewing follows the page gate; edits are owner-only."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import require_page
from app.core.identity import EmployeeIdentity, OwnerIdentity
from app.core.permissions import Action, Page
from app.db.base import get_db
from app.models.product import Product
from app.schemas.product import (
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["inventory"])


def _escape_like(s: str) -> str:
    """Escape SQL LIKE wildcards in user input."""
    return s.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def _get_scoped_product(db: AsyncSession, product_id: UUID, business_id: UUID) -> Product:
    result = await db.execute(
        select(Product).where(
            Product.id == product_id,
            Product.business_id == business_id,
        )
    )
    product = result.scalar_one_or_none()
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


@router.get("", response_model=ProductListResponse)
async def list_products(
    search: str | None = None,
    include_inactive: bool = False,
    identity: OwnerIdentity | EmployeeIdentity = Depends(require_page(Page.INVENTORY)),
    db: AsyncSession = Depends(get_db),
):
    """List the business's products ordered by name, optionally filtered by name."""
    query = select(Product).where(Product.business_id == identity.business_id)

    if not include_inactive:
        query = query.where(Product.is_active == True)  # noqa: E712
    if search:
        query = query.where(Product.name.ilike(f"%{_escape_like(search)}%", escape="\\"))

    result = await db.execute(query.order_by(Product.name))
    products = result.scalars().all()

    return ProductListResponse(
        items=[ProductResponse.model_validate(p) for p in products],
        total=len(products),
    )


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: UUID,
    identity: OwnerIdentity | EmployeeIdentity = Depends(require_page(Page.INVENTORY)),
    db: AsyncSession = Depends(get_db),
):
    product = await _get_scoped_product(db, product_id, identity.business_id)
    return ProductResponse.model_validate(product)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreate,
    identity: OwnerIdentity = Depends(require_page(Page.INVENTORY, Action.EDIT)),
    db: AsyncSession = Depends(get_db),
):
    """Add a product to the business's catalogue (owner only)."""
    product = Product(**body.model_dump(), business_id=identity.business_id)
    db.add(product)
    await db.commit()
    await db.refresh(product)

    logger.info("Product %s created for business %s", product.id, identity.business_id)
    return ProductResponse.model_validate(product)


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: UUID,
    body: ProductUpdate,
    identity: OwnerIdentity = Depends(require_page(Page.INVENTORY, Action.EDIT)),
    db: AsyncSession = Depends(get_db),
):
    """Edit price, cost, stock or threshold (owner only)."""
    product = await _get_scoped_product(db, product_id, identity.business_id)

    for field, value in body.model_dump(exclude_unset=True).items():
        # Every product column is NOT NULL; an explicit null leaves the value as is
        if value is not None:
            setattr(product, field, value)

    await db.commit()
    await db.refresh(product)

    return ProductResponse.model_validate(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_product(
    product_id: UUID,
    identity: OwnerIdentity = Depends(require_page(Page.INVENTORY, Action.EDIT)),
    db: AsyncSession = Depends(get_db),
):
    """Hide a product from inventory and POS. Past sales keep their item snapshots."""
    product = await _get_scoped_product(db, product_id, identity.business_id)
    product.is_active = False
    await db.commit()
    logger.info("Product %s deactivated", product.id)
