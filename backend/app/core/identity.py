"""Who is acting: nobody, the business owner, or a passcode-authenticated employee."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union
from uuid import UUID

if TYPE_CHECKING:
    from app.models.business import Business
    from app.models.employee import Employee
    from app.models.owner import Owner


@dataclass(frozen=True)
class Unauthenticated:
    kind = "unauthenticated"


@dataclass(frozen=True)
class OwnerIdentity:
    """Owner session. ``business`` is None between account creation and business setup."""

    owner: Owner
    business: Business | None = None

    kind = "owner"

    @property
    def business_id(self) -> UUID | None:
        return self.business.id if self.business is not None else None

    @property
    def employee_id(self) -> None:
        return None


@dataclass(frozen=True)
class EmployeeIdentity:
    business: Business
    employee: Employee

    kind = "employee"

    @property
    def business_id(self) -> UUID:
        return self.business.id

    @property
    def employee_id(self) -> UUID:
        return self.employee.id


Identity = Union[Unauthenticated, OwnerIdentity, EmployeeIdentity]

UNAUTHENTICATED = Unauthenticated()
