"""Sale commit: transaction row, line items and stock decrements as one database unit."""

import hashlib
import json
import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.product import Product
from app.models.transaction import PaymentMethod, Transaction, TransactionItem, TransactionType
from app.schemas.transaction import CartLine
from app.services.cart import cart_total, line_total

logger = logging.getLogger(__name__)


class SaleError(Exception):
    status_code = 400


class EmptyCartError(SaleError):
    status_code = 400


class UnknownProductError(SaleError):
    status_code = 404

    def __init__(self, product_id: UUID) -> None:
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class InsufficientStockError(SaleError):
    status_code = 409

    def __init__(self, product_id: UUID, requested: int) -> None:
        super().__init__(f"Insufficient stock for product {product_id} (requested {requested})")
        self.product_id = product_id
        self.requested = requested


class IdempotencyKeyReusedError(SaleError):
    status_code = 409

    def __init__(self, idempotency_key: str) -> None:
        super().__init__(f"Idempotency key {idempotency_key!r} was already used for a different sale")
        self.idempotency_key = idempotency_key


@dataclass
class SaleResult:
    transaction: Transaction
    stock: dict[UUID, int] = field(default_factory=dict)
    replayed: bool = False


def quantities_by_product(lines: Sequence[CartLine]) -> dict[UUID, int]:
    """Total quantity per product id, in a stable order. Custom lines are skipped."""
    totals: dict[UUID, int] = {}
    for line in lines:
        if line.product_id is None:
            continue
        totals[line.product_id] = totals.get(line.product_id, 0) + line.quantity
    # Rows are locked in this order; concurrent sales must agree on it
    return dict(sorted(totals.items(), key=lambda pair: str(pair[0])))


async def find_by_idempotency_key(
    db: AsyncSession, business_id: UUID, idempotency_key: str
) -> Transaction | None:
    result = await db.execute(
        select(Transaction).where(
            Transaction.business_id == business_id,
            Transaction.idempotency_key == idempotency_key,
        )
    )
    return result.scalar_one_or_none()


async def current_stock(
    db: AsyncSession, business_id: UUID, product_ids: Sequence[UUID]
) -> dict[UUID, int]:
    if not product_ids:
        return {}
    result = await db.execute(
        select(Product.id, Product.stock_quantity).where(
            Product.business_id == business_id,
            Product.id.in_(product_ids),
        )
    )
    return {row.id: row.stock_quantity for row in result.all()}


async def _product_exists(db: AsyncSession, business_id: UUID, product_id: UUID) -> bool:
    result = await db.execute(
        select(Product.id).where(Product.id == product_id, Product.business_id == business_id)
    )
    return result.scalar_one_or_none() is not None


async def _decrement_stock(
    db: AsyncSession,
    business_id: UUID,
    quantities: dict[UUID, int],
    allow_negative_stock: bool,
) -> dict[UUID, int]:
    """Server-side ``stock_quantity - n`` per product; returns the remaining stock."""
    remaining: dict[UUID, int] = {}
    for product_id, quantity in quantities.items():
        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.business_id == business_id)
            .values(stock_quantity=Product.stock_quantity - quantity)
            .returning(Product.stock_quantity)
            .execution_options(synchronize_session=False)
        )
        if not allow_negative_stock:
            stmt = stmt.where(Product.stock_quantity >= quantity)

        result = await db.execute(stmt)
        new_quantity = result.scalar_one_or_none()
        if new_quantity is None:
            if not allow_negative_stock and await _product_exists(db, business_id, product_id):
                raise InsufficientStockError(product_id, quantity)
            raise UnknownProductError(product_id)
        remaining[product_id] = new_quantity
    return remaining


def sale_fingerprint(lines: Sequence[CartLine], payment_method: PaymentMethod) -> str:
    """Stable hash of a sale request, stored next to its idempotency key."""
    payload = {
        "payment_method": getattr(payment_method, "value", payment_method),
        "lines": [
            {
                "name": line.name,
                "unit_price": str(line.unit_price),
                "quantity": line.quantity,
                "product_id": str(line.product_id) if line.product_id else None,
            }
            for line in lines
        ],
    }
    payload_bytes = json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
    return hashlib.sha256(payload_bytes).hexdigest()


async def _ensure_products_exist(
    db: AsyncSession, business_id: UUID, product_ids: Sequence[UUID]
) -> None:
    """Every referenced product must belong to the business before anything is written."""
    if not product_ids:
        return
    result = await db.execute(
        select(Product.id).where(
            Product.business_id == business_id,
            Product.id.in_(product_ids),
        )
    )
    found = set(result.scalars().all())
    for product_id in product_ids:
        if product_id not in found:
            raise UnknownProductError(product_id)


async def _replay(db: AsyncSession, transaction: Transaction, request_hash: str) -> SaleResult:
    if transaction.request_hash != request_hash:
        raise IdempotencyKeyReusedError(transaction.idempotency_key)
    product_ids = [item.product_id for item in transaction.items if item.product_id is not None]
    stock = await current_stock(db, transaction.business_id, product_ids)
    logger.info("Replaying sale %s for idempotency key %s", transaction.id, transaction.idempotency_key)
    return SaleResult(transaction=transaction, stock=stock, replayed=True)


async def commit_sale(
    db: AsyncSession,
    *,
    business_id: UUID,
    employee_id: UUID | None,
    lines: Sequence[CartLine],
    payment_method: PaymentMethod,
    idempotency_key: str | None = None,
    allow_negative_stock: bool | None = None,
) -> SaleResult:
    """Record a sale and its inventory effect atomically.

    1. Transaction row with total = sum(unit_price * quantity).
    2. One TransactionItem per cart line, snapshotting name, price and quantity.
    3. Stock decrement for every line that references a product.

    All three steps share one database transaction: any failure rolls back the
    lot, so a sale is never recorded without its stock movement (or vice versa).
    With an ``idempotency_key`` a retried request returns the stored sale; the
    same key with a different cart is rejected.
    """
    if not lines:
        raise EmptyCartError("Cart is empty")
    if allow_negative_stock is None:
        allow_negative_stock = settings.ALLOW_NEGATIVE_STOCK

    request_hash = sale_fingerprint(lines, payment_method) if idempotency_key else None
    if idempotency_key:
        existing = await find_by_idempotency_key(db, business_id, idempotency_key)
        if existing is not None:
            return await _replay(db, existing, request_hash)

    quantities = quantities_by_product(lines)
    await _ensure_products_exist(db, business_id, list(quantities))

    transaction_id = uuid.uuid4()
    transaction = Transaction(
        id=transaction_id,
        business_id=business_id,
        employee_id=employee_id,
        total_amount=cart_total(lines),
        payment_method=payment_method,
        transaction_type=TransactionType.SALE,
        idempotency_key=idempotency_key,
        request_hash=request_hash,
    )
    transaction.items = [
        TransactionItem(
            id=uuid.uuid4(),
            transaction_id=transaction_id,
            product_id=line.product_id,
            item_name=line.name,
            quantity=line.quantity,
            unit_price=line.unit_price,
            total_price=line_total(line.unit_price, line.quantity),
        )
        for line in lines
    ]
    db.add(transaction)

    try:
        await db.flush()
        stock = await _decrement_stock(db, business_id, quantities, allow_negative_stock)
        await db.commit()
    except SaleError:
        await db.rollback()
        raise
    except IntegrityError:
        await db.rollback()
        if idempotency_key:
            # Lost a race against a concurrent request with the same key
            existing = await find_by_idempotency_key(db, business_id, idempotency_key)
            if existing is not None:
                return await _replay(db, existing, request_hash)
        raise
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Sale for business %s rolled back", business_id)
        raise

    await db.refresh(transaction)
    logger.info(
        "Sale %s committed: business=%s employee=%s total=%s lines=%d",
        transaction.id,
        business_id,
        employee_id,
        transaction.total_amount,
        len(lines),
    )
    return SaleResult(transaction=transaction, stock=stock)
