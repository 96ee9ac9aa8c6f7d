"""Authentication endpoints: owner sign-up/login, employee passcode login, sign-out."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_current_identity, oauth2_scheme, require_owner
from app.core.identity import EmployeeIdentity, OwnerIdentity
from app.core.permissions import visible_pages
from app.core.security import TOKEN_KIND_EMPLOYEE, TOKEN_KIND_OWNER, create_access_token
from app.db.base import get_db
from app.models.business import Business
from app.models.employee import Employee
from app.schemas.auth import (
    EmployeeLoginRequest,
    EmployeeSummary,
    IdentityResponse,
    OwnerLoginRequest,
    OwnerSignUpRequest,
    TokenResponse,
)
from app.schemas.business import BusinessCreate, BusinessResponse, DirectoryEntry
from app.services.session import (
    INVALID_CREDENTIALS,
    BusinessAlreadyExistsError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    create_business,
    login_employee,
    owner_sign_in,
    owner_sign_up,
    sign_out,
)

router = APIRouter(prefix="/auth", tags=["auth"])


def _invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=INVALID_CREDENTIALS,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(body: OwnerSignUpRequest, db: AsyncSession = Depends(get_db)):
    """Create an owner account, optionally together with its business."""
    try:
        owner, business = await owner_sign_up(db, body.email, body.password, body.business_name)
    except EmailAlreadyRegisteredError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    business_id = business.id if business else None
    return TokenResponse(
        access_token=create_access_token(owner.id, TOKEN_KIND_OWNER, business_id),
        kind=TOKEN_KIND_OWNER,
        business_id=business_id,
    )


@router.post("/login", response_model=TokenResponse)
async def login(body: OwnerLoginRequest, db: AsyncSession = Depends(get_db)):
    """Authenticate the owner via email + password, return JWT."""
    try:
        owner = await owner_sign_in(db, body.email, body.password)
    except InvalidCredentialsError:
        raise _invalid_credentials()

    result = await db.execute(select(Business.id).where(Business.owner_id == owner.id))
    business_id = result.scalar_one_or_none()
    return TokenResponse(
        access_token=create_access_token(owner.id, TOKEN_KIND_OWNER, business_id),
        kind=TOKEN_KIND_OWNER,
        business_id=business_id,
    )


@router.post("/employee-login", response_model=TokenResponse)
async def employee_login(body: EmployeeLoginRequest, db: AsyncSession = Depends(get_db)):
    """Passcode login for an employee of the selected business."""
    try:
        business, employee = await login_employee(
            db, body.business_id, body.employee_id, body.passcode
        )
    except InvalidCredentialsError:
        raise _invalid_credentials()

    return TokenResponse(
        access_token=create_access_token(employee.id, TOKEN_KIND_EMPLOYEE, business.id),
        kind=TOKEN_KIND_EMPLOYEE,
        business_id=business.id,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
):
    """Revoke the presented session token (owner or employee)."""
    if not token or not await sign_out(db, token):
        raise _invalid_credentials()


@router.post("/business", response_model=BusinessResponse, status_code=status.HTTP_201_CREATED)
async def setup_business(
    body: BusinessCreate,
    identity: OwnerIdentity = Depends(require_owner),
    db: AsyncSession = Depends(get_db),
):
    """Create the business for an owner who signed up without one."""
    try:
        business = await create_business(db, identity.owner, body.name)
    except BusinessAlreadyExistsError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Business already exists")
    return BusinessResponse.model_validate(business)


@router.get("/me", response_model=IdentityResponse)
async def get_me(identity: OwnerIdentity | EmployeeIdentity = Depends(get_current_identity)):
    """Resolved identity plus the pages it may open."""
    business = (
        BusinessResponse.model_validate(identity.business) if identity.business is not None else None
    )
    response = IdentityResponse(
        kind=identity.kind,
        business=business,
        pages=[page.value for page in visible_pages(identity)],
    )
    if isinstance(identity, OwnerIdentity):
        response.owner_email = identity.owner.email
    else:
        response.employee = EmployeeSummary(
            id=identity.employee.id,
            name=identity.employee.name,
            permissions=identity.employee.permissions,
        )
    return response


# ── Login directory ────────────────────────────────
@router.get("/businesses", response_model=list[DirectoryEntry])
async def list_businesses(db: AsyncSession = Depends(get_db)):
    """Businesses to pick from on the employee login screen."""
    result = await db.execute(select(Business.id, Business.name).order_by(Business.name))
    return [DirectoryEntry(id=row.id, name=row.name) for row in result.all()]


@router.get("/businesses/{business_id}/employees", response_model=list[DirectoryEntry])
async def list_business_employees(business_id: UUID, db: AsyncSession = Depends(get_db)):
    """Active employees of a business; names only."""
    result = await db.execute(
        select(Employee.id, Employee.name)
        .where(
            Employee.business_id == business_id,
            Employee.is_active == True,  # noqa: E712
        )
        .order_by(Employee.name)
    )
    return [DirectoryEntry(id=row.id, name=row.name) for row in result.all()]
