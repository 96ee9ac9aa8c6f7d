"""Employee (staff) schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EmployeePermissions(BaseModel):
    pos_access: bool = False
    inventory_access: bool = False
    dashboard_access: bool = False


class EmployeeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    passcode: str = Field(..., min_length=4, max_length=32)
    permissions: EmployeePermissions = EmployeePermissions()


class EmployeeUpdate(BaseModel):
    """Partial update. An empty passcode keeps the current one."""
    name: str | None = Field(None, min_length=1, max_length=255)
    passcode: str | None = Field(None, max_length=32)
    permissions: EmployeePermissions | None = None
    is_active: bool | None = None

    @field_validator("passcode")
    @classmethod
    def blank_passcode_keeps_current(cls, value: str | None) -> str | None:
        if value is None or value == "":
            return None
        if len(value) < 4:
            raise ValueError("passcode must be at least 4 characters")
        return value


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    business_id: UUID
    name: str
    permissions: EmployeePermissions
    is_active: bool
    created_at: datetime
