"""Staff management endpoints (owner only)."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import require_page
from app.core.identity import OwnerIdentity
from app.core.permissions import Action, Page
from app.core.security import hash_passcode
from app.db.base import get_db
from app.models.employee import Employee
from app.schemas.employee import EmployeeCreate, EmployeeResponse, EmployeeUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["staff"])


async def _get_scoped_employee(db: AsyncSession, employee_id: UUID, business_id: UUID) -> Employee:
    result = await db.execute(
        select(Employee).where(
            Employee.id == employee_id,
            Employee.business_id == business_id,
        )
    )
    employee = result.scalar_one_or_none()
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    return employee


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(
    identity: OwnerIdentity = Depends(require_page(Page.STAFF)),
    db: AsyncSession = Depends(get_db),
):
    """All employees of the business, active or not, ordered by name."""
    result = await db.execute(
        select(Employee)
        .where(Employee.business_id == identity.business_id)
        .order_by(Employee.name)
    )
    return [EmployeeResponse.model_validate(e) for e in result.scalars().all()]


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    body: EmployeeCreate,
    identity: OwnerIdentity = Depends(require_page(Page.STAFF, Action.EDIT)),
    db: AsyncSession = Depends(get_db),
):
    employee = Employee(
        name=body.name,
        hashed_passcode=hash_passcode(body.passcode),
        permissions=body.permissions.model_dump(),
        is_active=True,
        business_id=identity.business_id,
    )
    db.add(employee)
    await db.commit()
    await db.refresh(employee)

    logger.info("Employee %s added to business %s", employee.id, identity.business_id)
    return EmployeeResponse.model_validate(employee)


@router.patch("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: UUID,
    body: EmployeeUpdate,
    identity: OwnerIdentity = Depends(require_page(Page.STAFF, Action.EDIT)),
    db: AsyncSession = Depends(get_db),
):
    """Edit name, permissions or active flag; a passcode is only replaced when given."""
    employee = await _get_scoped_employee(db, employee_id, identity.business_id)

    changes = body.model_dump(exclude_unset=True)
    passcode = changes.pop("passcode", None)
    if passcode:
        employee.hashed_passcode = hash_passcode(passcode)
    for field, value in changes.items():
        if value is not None:
            setattr(employee, field, value)

    await db.commit()
    await db.refresh(employee)

    return EmployeeResponse.model_validate(employee)


@router.post("/{employee_id}/toggle-active", response_model=EmployeeResponse)
async def toggle_employee_status(
    employee_id: UUID,
    identity: OwnerIdentity = Depends(require_page(Page.STAFF, Action.EDIT)),
    db: AsyncSession = Depends(get_db),
):
    """Flip the active flag. Inactive employees cannot log in; live sessions stop resolving."""
    employee = await _get_scoped_employee(db, employee_id, identity.business_id)
    employee.is_active = not employee.is_active
    await db.commit()
    await db.refresh(employee)

    logger.info("Employee %s active=%s", employee.id, employee.is_active)
    return EmployeeResponse.model_validate(employee)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: UUID,
    identity: OwnerIdentity = Depends(require_page(Page.STAFF, Action.EDIT)),
    db: AsyncSession = Depends(get_db),
):
    employee = await _get_scoped_employee(db, employee_id, identity.business_id)
    await db.delete(employee)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Employee has recorded sales; deactivate instead",
        )
    logger.info("Employee %s deleted", employee_id)
