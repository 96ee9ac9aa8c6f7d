"""Auth request/response schemas."""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from app.schemas.business import BusinessResponse
from app.schemas.employee import EmployeePermissions


# ── Owner ──────────────────────────────────────────
class OwnerLoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class OwnerSignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    business_name: str | None = Field(None, min_length=1, max_length=255)


# ── Employee ───────────────────────────────────────
class EmployeeLoginRequest(BaseModel):
    business_id: UUID
    employee_id: UUID
    passcode: str = Field(min_length=1, max_length=32)


# ── Tokens ─────────────────────────────────────────
class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    kind: str
    business_id: UUID | None = None


# ── Current identity ───────────────────────────────
class EmployeeSummary(BaseModel):
    id: UUID
    name: str
    permissions: EmployeePermissions


class IdentityResponse(BaseModel):
    kind: str
    owner_email: str | None = None
    business: BusinessResponse | None = None
    employee: EmployeeSummary | None = None
    pages: list[str]
