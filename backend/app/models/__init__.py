"""SQLAlchemy models for BizPOS."""

from app.models.owner import Owner
from app.models.business import Business, PosType
from app.models.employee import Employee, PermissionFlag
from app.models.product import Product
from app.models.transaction import Transaction, TransactionItem, PaymentMethod, TransactionType
from app.models.revoked_token import RevokedToken

__all__ = [
    "Owner",
    "Business",
    "PosType",
    "Employee",
    "PermissionFlag",
    "Product",
    "Transaction",
    "TransactionItem",
    "PaymentMethod",
    "TransactionType",
    "RevokedToken",
]
