"""Unit tests for auth: security utils, session resolution and login flows."""

import uuid
from datetime import timedelta
from unittest.mock import patch

import pytest
from fastapi import HTTPException

from app.core.identity import UNAUTHENTICATED, EmployeeIdentity, OwnerIdentity
from app.core.security import (
    DUMMY_HASH,
    TOKEN_KIND_EMPLOYEE,
    TOKEN_KIND_OWNER,
    create_access_token,
    decode_access_token,
    hash_passcode,
    hash_password,
    verify_passcode,
    verify_password,
)
from app.models.revoked_token import RevokedToken
from app.services.session import (
    INVALID_CREDENTIALS,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    login_employee,
    owner_sign_in,
    owner_sign_up,
    resolve_session,
    sign_out,
)

from factories import make_business, make_employee, make_owner, scalar_result


# ── Password hashing ──────────────────────────────

def test_hash_and_verify():
    plain = "SecurePass123!"
    hashed = hash_password(plain)
    assert hashed != plain
    assert verify_password(plain, hashed)
    assert not verify_password("wrong", hashed)


def test_passcode_is_stored_hashed():
    hashed = hash_passcode("4321")
    assert "4321" not in hashed
    assert verify_passcode("4321", hashed)
    assert not verify_passcode("1234", hashed)


# ── JWT ────────────────────────────────────────────

def test_create_and_decode_token():
    uid = uuid.uuid4()
    bid = uuid.uuid4()
    token = create_access_token(uid, TOKEN_KIND_EMPLOYEE, bid)
    payload = decode_access_token(token)
    assert payload["sub"] == str(uid)
    assert payload["kind"] == "employee"
    assert payload["business_id"] == str(bid)
    assert payload["jti"]


def test_owner_token_without_business():
    payload = decode_access_token(create_access_token(uuid.uuid4(), TOKEN_KIND_OWNER, None))
    assert payload["business_id"] is None


def test_tokens_get_distinct_ids():
    uid = uuid.uuid4()
    first = decode_access_token(create_access_token(uid, TOKEN_KIND_OWNER, None))
    second = decode_access_token(create_access_token(uid, TOKEN_KIND_OWNER, None))
    assert first["jti"] != second["jti"]


def test_expired_token():
    token = create_access_token(
        uuid.uuid4(), TOKEN_KIND_OWNER, None, expires_delta=timedelta(seconds=-1)
    )
    with pytest.raises(Exception):
        decode_access_token(token)


# ── Session resolution ────────────────────────────

@pytest.mark.asyncio
async def test_resolve_without_token(mock_db):
    assert await resolve_session(mock_db, None) is UNAUTHENTICATED
    mock_db.get.assert_not_called()


@pytest.mark.asyncio
async def test_resolve_garbage_token(mock_db):
    assert await resolve_session(mock_db, "not-a-jwt") is UNAUTHENTICATED


@pytest.mark.asyncio
async def test_resolve_revoked_token(mock_db):
    token = create_access_token(uuid.uuid4(), TOKEN_KIND_OWNER, None)
    mock_db.get.return_value = RevokedToken(jti="x")

    assert await resolve_session(mock_db, token) is UNAUTHENTICATED


@pytest.mark.asyncio
async def test_resolve_owner_with_business(mock_db):
    owner = make_owner()
    business = make_business(owner)
    token = create_access_token(owner.id, TOKEN_KIND_OWNER, business.id)

    mock_db.get.side_effect = [None, owner]
    mock_db.execute.return_value = scalar_result(business)

    identity = await resolve_session(mock_db, token)

    assert isinstance(identity, OwnerIdentity)
    assert identity.owner is owner
    assert identity.business_id == business.id
    assert identity.employee_id is None


@pytest.mark.asyncio
async def test_resolve_owner_before_business_setup(mock_db):
    owner = make_owner()
    token = create_access_token(owner.id, TOKEN_KIND_OWNER, None)

    mock_db.get.side_effect = [None, owner]
    mock_db.execute.return_value = scalar_result(None)

    identity = await resolve_session(mock_db, token)

    assert isinstance(identity, OwnerIdentity)
    assert identity.business is None


@pytest.mark.asyncio
async def test_resolve_inactive_owner(mock_db):
    owner = make_owner()
    owner.is_active = False
    mock_db.get.side_effect = [None, owner]

    token = create_access_token(owner.id, TOKEN_KIND_OWNER, None)
    assert await resolve_session(mock_db, token) is UNAUTHENTICATED


@pytest.mark.asyncio
async def test_resolve_employee(mock_db):
    business = make_business()
    employee = make_employee(business, pos_access=True)
    token = create_access_token(employee.id, TOKEN_KIND_EMPLOYEE, business.id)

    mock_db.get.side_effect = [None, business]
    mock_db.execute.return_value = scalar_result(employee)

    identity = await resolve_session(mock_db, token)

    assert isinstance(identity, EmployeeIdentity)
    assert identity.employee_id == employee.id
    assert identity.business_id == business.id


@pytest.mark.asyncio
async def test_resolve_deactivated_employee(mock_db):
    """The employee lookup filters on is_active, so a deactivated employee finds no row."""
    business = make_business()
    employee = make_employee(business)
    token = create_access_token(employee.id, TOKEN_KIND_EMPLOYEE, business.id)

    mock_db.get.return_value = None
    mock_db.execute.return_value = scalar_result(None)

    assert await resolve_session(mock_db, token) is UNAUTHENTICATED


# ── Owner sign-in / sign-up ───────────────────────

@pytest.mark.asyncio
async def test_owner_sign_in_wrong_password(mock_db):
    owner = make_owner()
    owner.hashed_password = hash_password("right-password")
    mock_db.execute.return_value = scalar_result(owner)

    with pytest.raises(InvalidCredentialsError):
        await owner_sign_in(mock_db, "owner@shop.test", "wrong-password")


@pytest.mark.asyncio
async def test_owner_sign_in_normalizes_email(mock_db):
    owner = make_owner()
    owner.hashed_password = hash_password("right-password")
    mock_db.execute.return_value = scalar_result(owner)

    assert await owner_sign_in(mock_db, "Owner@Shop.TEST", "right-password") is owner


@pytest.mark.asyncio
async def test_owner_sign_up_with_business(mock_db):
    mock_db.execute.return_value = scalar_result(None)

    owner, business = await owner_sign_up(mock_db, "New@Shop.test", "secret1", "Corner Shop")

    assert owner.email == "new@shop.test"
    assert owner.hashed_password != "secret1"
    assert business.name == "Corner Shop"
    assert business.settings == {"pos_type": "simple", "auto_logout": False}
    assert mock_db.add.call_count == 2
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_owner_sign_up_without_business(mock_db):
    mock_db.execute.return_value = scalar_result(None)

    _, business = await owner_sign_up(mock_db, "new@shop.test", "secret1", None)

    assert business is None
    assert mock_db.add.call_count == 1


@pytest.mark.asyncio
async def test_owner_sign_up_duplicate_email(mock_db):
    mock_db.execute.return_value = scalar_result(make_owner())

    with pytest.raises(EmailAlreadyRegisteredError):
        await owner_sign_up(mock_db, "owner@shop.test", "secret1", None)
    mock_db.commit.assert_not_called()


# ── Employee login ────────────────────────────────

@pytest.mark.asyncio
async def test_login_employee_success(mock_db):
    business = make_business()
    employee = make_employee(business, passcode="2468")
    mock_db.execute.return_value = scalar_result(employee)
    mock_db.get.return_value = business

    found_business, found_employee = await login_employee(mock_db, business.id, employee.id, "2468")

    assert found_business is business
    assert found_employee is employee


@pytest.mark.asyncio
async def test_login_employee_wrong_passcode(mock_db):
    business = make_business()
    employee = make_employee(business, passcode="2468")
    mock_db.execute.return_value = scalar_result(employee)

    with pytest.raises(InvalidCredentialsError) as exc_info:
        await login_employee(mock_db, business.id, employee.id, "0000")
    assert str(exc_info.value) == INVALID_CREDENTIALS


@pytest.mark.asyncio
async def test_login_employee_unknown_employee_same_error(mock_db):
    mock_db.execute.return_value = scalar_result(None)

    with pytest.raises(InvalidCredentialsError) as exc_info:
        await login_employee(mock_db, uuid.uuid4(), uuid.uuid4(), "2468")
    assert str(exc_info.value) == INVALID_CREDENTIALS


@pytest.mark.asyncio
async def test_login_employee_unknown_employee_still_hashes(mock_db):
    """A miss runs bcrypt too, so timing doesn't reveal which ids exist."""
    mock_db.execute.return_value = scalar_result(None)

    with patch("app.services.session.verify_passcode", wraps=verify_passcode) as verify:
        with pytest.raises(InvalidCredentialsError):
            await login_employee(mock_db, uuid.uuid4(), uuid.uuid4(), "2468")

    verify.assert_called_once_with("2468", DUMMY_HASH)


@pytest.mark.asyncio
async def test_owner_sign_in_unknown_email_still_hashes(mock_db):
    mock_db.execute.return_value = scalar_result(None)

    with patch("app.services.session.verify_password", wraps=verify_password) as verify:
        with pytest.raises(InvalidCredentialsError):
            await owner_sign_in(mock_db, "nobody@shop.test", "whatever")

    verify.assert_called_once_with("whatever", DUMMY_HASH)


@pytest.mark.asyncio
async def test_employee_login_endpoint_hides_reason(mock_db):
    from app.api.auth import employee_login
    from app.schemas.auth import EmployeeLoginRequest

    mock_db.execute.return_value = scalar_result(None)
    body = EmployeeLoginRequest(business_id=uuid.uuid4(), employee_id=uuid.uuid4(), passcode="9999")

    with pytest.raises(HTTPException) as exc_info:
        await employee_login(body, mock_db)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Invalid credentials"


@pytest.mark.asyncio
async def test_employee_login_endpoint_issues_employee_token(mock_db):
    from app.api.auth import employee_login
    from app.schemas.auth import EmployeeLoginRequest

    business = make_business()
    employee = make_employee(business, passcode="2468")
    mock_db.execute.return_value = scalar_result(employee)
    mock_db.get.return_value = business

    body = EmployeeLoginRequest(business_id=business.id, employee_id=employee.id, passcode="2468")
    response = await employee_login(body, mock_db)

    payload = decode_access_token(response.access_token)
    assert response.kind == "employee"
    assert payload["sub"] == str(employee.id)
    assert payload["business_id"] == str(business.id)


# ── Sign-out ──────────────────────────────────────

@pytest.mark.asyncio
async def test_sign_out_revokes_token(mock_db):
    token = create_access_token(uuid.uuid4(), TOKEN_KIND_OWNER, None)
    jti = decode_access_token(token)["jti"]

    assert await sign_out(mock_db, token) is True

    revoked = mock_db.merge.await_args.args[0]
    assert revoked.jti == jti
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_sign_out_invalid_token(mock_db):
    assert await sign_out(mock_db, "garbage") is False
    mock_db.merge.assert_not_called()


# ── /auth/me ──────────────────────────────────────

@pytest.mark.asyncio
async def test_me_for_cashier(cashier_identity):
    from app.api.auth import get_me

    response = await get_me(cashier_identity)

    assert response.kind == "employee"
    assert response.employee.name == "Asha"
    assert response.employee.permissions.pos_access is True
    assert response.pages == ["pos", "sales"]


@pytest.mark.asyncio
async def test_me_for_owner(owner_identity):
    from app.api.auth import get_me

    response = await get_me(owner_identity)

    assert response.kind == "owner"
    assert response.owner_email == "owner@shop.test"
    assert response.pages == [
        "dashboard", "pos", "inventory", "sales", "analytics", "staff", "settings",
    ]


@pytest.mark.asyncio
async def test_setup_business_rejects_second_business(owner, mock_db):
    from app.api.auth import setup_business
    from app.schemas.business import BusinessCreate

    mock_db.execute.return_value = scalar_result(make_business(owner))

    with pytest.raises(HTTPException) as exc_info:
        await setup_business(BusinessCreate(name="Second"), OwnerIdentity(owner=owner), mock_db)
    assert exc_info.value.status_code == 409
