"""Tests for the page access table and the require_page dependency."""

import pytest
from fastapi import HTTPException

from app.core.identity import UNAUTHENTICATED, EmployeeIdentity, OwnerIdentity
from app.core.permissions import (
    ACCESS_TABLE,
    Action,
    Page,
    Role,
    check_access,
    is_allowed,
    visible_pages,
)
from app.core.deps import require_owner, require_page

from factories import make_employee

ALL_FLAGS = {"pos_access": True, "inventory_access": True, "dashboard_access": True}

# Expected employee access when every flag is granted
EMPLOYEE_WITH_ALL_FLAGS = {
    (Page.DASHBOARD, Action.VIEW): True,
    (Page.DASHBOARD, Action.EDIT): False,
    (Page.POS, Action.VIEW): True,
    (Page.POS, Action.EDIT): True,
    (Page.INVENTORY, Action.VIEW): True,
    (Page.INVENTORY, Action.EDIT): False,
    (Page.SALES, Action.VIEW): True,
    (Page.SALES, Action.EDIT): False,
    (Page.ANALYTICS, Action.VIEW): False,
    (Page.ANALYTICS, Action.EDIT): False,
    (Page.STAFF, Action.VIEW): False,
    (Page.STAFF, Action.EDIT): False,
    (Page.SETTINGS, Action.VIEW): False,
    (Page.SETTINGS, Action.EDIT): False,
}


def test_table_covers_every_page_and_action():
    assert set(ACCESS_TABLE) == {(page, action) for page in Page for action in Action}


@pytest.mark.parametrize("page", list(Page))
@pytest.mark.parametrize("action", list(Action))
def test_owner_has_full_access(page, action):
    assert check_access(Role.OWNER, None, page, action)


@pytest.mark.parametrize(("key", "expected"), EMPLOYEE_WITH_ALL_FLAGS.items())
def test_employee_with_all_flags(key, expected):
    page, action = key
    assert check_access(Role.EMPLOYEE, ALL_FLAGS, page, action) is expected


@pytest.mark.parametrize("page", list(Page))
@pytest.mark.parametrize("action", list(Action))
def test_employee_without_flags_sees_nothing(page, action):
    assert not check_access(Role.EMPLOYEE, {}, page, action)
    assert not check_access(Role.EMPLOYEE, None, page, action)


def test_each_flag_opens_its_own_pages():
    assert check_access(Role.EMPLOYEE, {"dashboard_access": True}, Page.DASHBOARD)
    assert not check_access(Role.EMPLOYEE, {"dashboard_access": True}, Page.POS)
    assert check_access(Role.EMPLOYEE, {"inventory_access": True}, Page.INVENTORY)
    assert not check_access(Role.EMPLOYEE, {"inventory_access": True}, Page.SALES)
    assert check_access(Role.EMPLOYEE, {"pos_access": True}, Page.SALES)


def test_check_is_deterministic():
    results = {check_access(Role.EMPLOYEE, ALL_FLAGS, Page.POS, Action.EDIT) for _ in range(5)}
    assert results == {True}


def test_owner_without_business_sees_nothing(owner):
    identity = OwnerIdentity(owner=owner)
    assert visible_pages(identity) == []
    assert not is_allowed(identity, Page.SETTINGS)


def test_unauthenticated_sees_nothing():
    assert visible_pages(UNAUTHENTICATED) == []


def test_visible_pages_follow_navigation_order(business):
    employee = make_employee(business, dashboard_access=True, pos_access=True)
    identity = EmployeeIdentity(business=business, employee=employee)
    assert visible_pages(identity) == [Page.DASHBOARD, Page.POS, Page.SALES]


@pytest.mark.asyncio
async def test_require_page_allows(cashier_identity):
    checker = require_page(Page.POS, Action.EDIT)
    assert await checker(cashier_identity) is cashier_identity


@pytest.mark.asyncio
async def test_require_page_denies_with_403(cashier_identity):
    checker = require_page(Page.INVENTORY, Action.EDIT)
    with pytest.raises(HTTPException) as exc_info:
        await checker(cashier_identity)
    assert exc_info.value.status_code == 403
    assert "inventory" in exc_info.value.detail


@pytest.mark.asyncio
async def test_require_page_owner_needs_business(owner):
    checker = require_page(Page.DASHBOARD)
    with pytest.raises(HTTPException) as exc_info:
        await checker(OwnerIdentity(owner=owner))
    assert exc_info.value.status_code == 403
    assert "Business setup" in exc_info.value.detail


@pytest.mark.asyncio
async def test_require_owner_rejects_employee(cashier_identity):
    with pytest.raises(HTTPException) as exc_info:
        await require_owner(cashier_identity)
    assert exc_info.value.status_code == 403
