"""Shared fixtures: database doubles and a ready-made business with its people."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.identity import EmployeeIdentity, OwnerIdentity

from factories import make_business, make_employee, make_owner


@pytest.fixture
def mock_db():
    db = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def owner():
    return make_owner()


@pytest.fixture
def business(owner):
    return make_business(owner)


@pytest.fixture
def owner_identity(owner, business):
    return OwnerIdentity(owner=owner, business=business)


@pytest.fixture
def cashier(business):
    return make_employee(business, pos_access=True)


@pytest.fixture
def cashier_identity(business, cashier):
    return EmployeeIdentity(business=business, employee=cashier)
