"""Transaction & TransactionItem models."""

import enum
import uuid
from decimal import Decimal

from sqlalchemy import String, Numeric, Integer, Enum, ForeignKey, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    BANK_TRANSFER = "bank_transfer"


class TransactionType(str, enum.Enum):
    SALE = "sale"


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class Transaction(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_business_created", "business_id", "created_at"),
        UniqueConstraint("business_id", "idempotency_key", name="uq_transactions_business_idempotency_key"),
    )

    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod, name="payment_method", values_callable=_enum_values), nullable=False, index=True
    )
    transaction_type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType, name="transaction_type", values_callable=_enum_values),
        default=TransactionType.SALE,
        nullable=False,
    )
    idempotency_key: Mapped[str | None] = mapped_column(String(100))
    # sha256 of the request that claimed the key
    request_hash: Mapped[str | None] = mapped_column(String(64))

    # Foreign keys
    business_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False
    )
    # NULL when the owner rang up the sale
    employee_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("employees.id"), index=True
    )

    items = relationship(
        "TransactionItem", back_populates="transaction", cascade="all, delete-orphan", lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Transaction {self.id} total={self.total_amount}>"


class TransactionItem(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "transaction_items"

    # Point-in-time snapshot of the cart line
    item_name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    transaction_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # NULL for custom (free-text) items
    product_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("products.id", ondelete="SET NULL"), index=True
    )

    transaction = relationship("Transaction", back_populates="items")

    def __repr__(self) -> str:
        return f"<TransactionItem {self.item_name} qty={self.quantity}>"
