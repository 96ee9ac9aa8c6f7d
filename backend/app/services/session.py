"""Session resolution, owner/employee login and sign-out."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.identity import (
    UNAUTHENTICATED,
    EmployeeIdentity,
    Identity,
    OwnerIdentity,
)
from app.core.security import (
    DUMMY_HASH,
    TOKEN_KIND_EMPLOYEE,
    TOKEN_KIND_OWNER,
    decode_access_token,
    hash_password,
    verify_passcode,
    verify_password,
)
from app.models.business import Business, default_settings
from app.models.employee import Employee
from app.models.owner import Owner
from app.models.revoked_token import RevokedToken

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class InvalidCredentialsError(Exception):
    """Login failed. Deliberately carries no detail about which field was wrong."""

    def __init__(self) -> None:
        super().__init__(INVALID_CREDENTIALS)


class EmailAlreadyRegisteredError(Exception):
    pass


class BusinessAlreadyExistsError(Exception):
    pass


async def resolve_session(db: AsyncSession, token: str | None) -> Identity:
    """Map a bearer token to the acting identity; anything unusable is Unauthenticated."""
    if not token:
        return UNAUTHENTICATED
    try:
        claims = decode_access_token(token)
        subject_id = UUID(claims["sub"])
        kind = claims["kind"]
        jti = claims["jti"]
    except (JWTError, KeyError, ValueError, TypeError):
        return UNAUTHENTICATED

    if await db.get(RevokedToken, jti) is not None:
        return UNAUTHENTICATED

    if kind == TOKEN_KIND_OWNER:
        owner = await db.get(Owner, subject_id)
        if owner is None or not owner.is_active:
            return UNAUTHENTICATED
        result = await db.execute(select(Business).where(Business.owner_id == owner.id))
        return OwnerIdentity(owner=owner, business=result.scalar_one_or_none())

    if kind == TOKEN_KIND_EMPLOYEE:
        try:
            business_id = UUID(claims["business_id"])
        except (KeyError, ValueError, TypeError):
            return UNAUTHENTICATED
        result = await db.execute(
            select(Employee).where(
                Employee.id == subject_id,
                Employee.business_id == business_id,
                Employee.is_active == True,  # noqa: E712
            )
        )
        employee = result.scalar_one_or_none()
        if employee is None:
            return UNAUTHENTICATED
        business = await db.get(Business, business_id)
        if business is None:
            return UNAUTHENTICATED
        return EmployeeIdentity(business=business, employee=employee)

    return UNAUTHENTICATED


async def owner_sign_in(db: AsyncSession, email: str, password: str) -> Owner:
    result = await db.execute(select(Owner).where(Owner.email == email.lower()))
    owner = result.scalar_one_or_none()
    hashed = owner.hashed_password if owner is not None else DUMMY_HASH
    if not verify_password(password, hashed) or owner is None or not owner.is_active:
        logger.info("Owner sign-in rejected")
        raise InvalidCredentialsError()
    return owner


async def owner_sign_up(
    db: AsyncSession, email: str, password: str, business_name: str | None
) -> tuple[Owner, Business | None]:
    """Create the owner account and, when a name is given, its business in one commit."""
    existing = await db.execute(select(Owner).where(Owner.email == email.lower()))
    if existing.scalar_one_or_none():
        raise EmailAlreadyRegisteredError(email)

    owner = Owner(email=email.lower(), hashed_password=hash_password(password))
    db.add(owner)
    await db.flush()  # get owner.id

    business = None
    if business_name:
        business = Business(name=business_name, owner_id=owner.id, settings=default_settings())
        db.add(business)

    await db.commit()
    logger.info("Owner %s signed up (business created: %s)", owner.id, business is not None)
    return owner, business


async def create_business(db: AsyncSession, owner: Owner, name: str) -> Business:
    existing = await db.execute(select(Business).where(Business.owner_id == owner.id))
    if existing.scalar_one_or_none():
        raise BusinessAlreadyExistsError(str(owner.id))

    business = Business(name=name, owner_id=owner.id, settings=default_settings())
    db.add(business)
    await db.commit()
    await db.refresh(business)
    logger.info("Business %s created for owner %s", business.id, owner.id)
    return business


async def login_employee(
    db: AsyncSession, business_id: UUID, employee_id: UUID, passcode: str
) -> tuple[Business, Employee]:
    """Authenticate an employee of ``business_id``.

    Unknown business, unknown or inactive employee and wrong passcode all raise the
    same InvalidCredentialsError so callers cannot tell which part was wrong.
    """
    result = await db.execute(
        select(Employee).where(
            Employee.id == employee_id,
            Employee.business_id == business_id,
            Employee.is_active == True,  # noqa: E712
        )
    )
    employee = result.scalar_one_or_none()
    hashed = employee.hashed_passcode if employee is not None else DUMMY_HASH
    if not verify_passcode(passcode, hashed) or employee is None:
        logger.info("Employee login rejected for business %s", business_id)
        raise InvalidCredentialsError()

    business = await db.get(Business, business_id)
    if business is None:
        raise InvalidCredentialsError()

    logger.info("Employee %s logged in to business %s", employee.id, business.id)
    return business, employee


async def sign_out(db: AsyncSession, token: str) -> bool:
    """Revoke ``token``. Returns False when the token was not a valid session."""
    try:
        claims = decode_access_token(token)
        jti = claims["jti"]
        expires_at = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
    except (JWTError, KeyError, ValueError, TypeError):
        return False

    await db.merge(RevokedToken(jti=jti, expires_at=expires_at))
    await db.commit()
    logger.info("Session %s signed out (%s)", jti, claims.get("kind"))
    return True
