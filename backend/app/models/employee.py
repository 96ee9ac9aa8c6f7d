"""Employee model - business-scoped staff logging in by passcode."""

import enum
import uuid

from sqlalchemy import String, Boolean, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.mixins import JSONDocument, UUIDPrimaryKeyMixin, TimestampMixin


class PermissionFlag(str, enum.Enum):
    POS_ACCESS = "pos_access"
    INVENTORY_ACCESS = "inventory_access"
    DASHBOARD_ACCESS = "dashboard_access"


def default_permissions() -> dict:
    return {flag.value: False for flag in PermissionFlag}


class Employee(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "employees"
    __table_args__ = (
        Index("ix_employees_business_name", "business_id", "name"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    hashed_passcode: Mapped[str] = mapped_column(String(255), nullable=False)
    permissions: Mapped[dict] = mapped_column(JSONDocument, default=default_permissions, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    business_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True
    )

    def has_permission(self, flag: PermissionFlag | str) -> bool:
        key = flag.value if isinstance(flag, PermissionFlag) else flag
        return bool((self.permissions or {}).get(key, False))

    def __repr__(self) -> str:
        return f"<Employee {self.name}>"
