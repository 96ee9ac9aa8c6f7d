"""Sales history endpoints."""

from datetime import date, timedelta
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import require_page
from app.core.identity import EmployeeIdentity, OwnerIdentity
from app.core.permissions import Page
from app.db.base import get_db
from app.models.employee import Employee
from app.models.transaction import PaymentMethod, Transaction
from app.schemas.transaction import SalesHistoryEntry, SalesHistoryResponse, TransactionResponse
from app.services.reporting import (
    ZERO,
    SalesHistoryFilters,
    employee_label,
    filter_transactions,
    start_of_day,
)

router = APIRouter(prefix="/sales", tags=["sales"])


async def employee_names(db: AsyncSession, business_id: UUID) -> dict[UUID, str]:
    """id -> name for every employee of the business, inactive ones included."""
    result = await db.execute(
        select(Employee.id, Employee.name).where(Employee.business_id == business_id)
    )
    return {row.id: row.name for row in result.all()}


def _history_entry(transaction: Transaction, names: dict[UUID, str]) -> SalesHistoryEntry:
    base = TransactionResponse.model_validate(transaction)
    return SalesHistoryEntry(
        **base.model_dump(),
        employee_name=employee_label(transaction.employee_id, names),
    )


@router.get("", response_model=SalesHistoryResponse)
async def list_sales(
    date_from: date | None = None,
    date_to: date | None = None,
    employee_id: UUID | None = None,
    payment_method: PaymentMethod | None = None,
    min_amount: Decimal | None = Query(None, ge=0),
    max_amount: Decimal | None = Query(None, ge=0),
    identity: OwnerIdentity | EmployeeIdentity = Depends(require_page(Page.SALES)),
    db: AsyncSession = Depends(get_db),
):
    """Sales newest first. ``date_to`` is inclusive of the whole day."""
    if date_from and date_to and date_to < date_from:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="date_to must be >= date_from",
        )

    query = select(Transaction).where(Transaction.business_id == identity.business_id)
    if date_from:
        query = query.where(Transaction.created_at >= start_of_day(date_from))
    if date_to:
        query = query.where(Transaction.created_at < start_of_day(date_to + timedelta(days=1)))

    result = await db.execute(query.order_by(Transaction.created_at.desc()))
    transactions = filter_transactions(
        result.scalars().all(),
        SalesHistoryFilters(
            employee_id=employee_id,
            payment_method=payment_method.value if payment_method else None,
            min_amount=min_amount,
            max_amount=max_amount,
        ),
    )
    names = await employee_names(db, identity.business_id)

    return SalesHistoryResponse(
        items=[_history_entry(t, names) for t in transactions],
        total=len(transactions),
        total_amount=sum((t.total_amount for t in transactions), ZERO),
    )


@router.get("/{transaction_id}", response_model=SalesHistoryEntry)
async def get_sale(
    transaction_id: UUID,
    identity: OwnerIdentity | EmployeeIdentity = Depends(require_page(Page.SALES)),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Transaction).where(
            Transaction.id == transaction_id,
            Transaction.business_id == identity.business_id,
        )
    )
    transaction = result.scalar_one_or_none()
    if not transaction:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sale not found")

    names = await employee_names(db, identity.business_id)
    return _history_entry(transaction, names)
