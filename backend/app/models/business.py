"""Business model."""

import enum
import uuid

from sqlalchemy import String, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.mixins import JSONDocument, UUIDPrimaryKeyMixin, TimestampMixin


class PosType(str, enum.Enum):
    SIMPLE = "simple"  # product grid
    CALCULATOR = "calculator"  # free-text custom items


def default_settings() -> dict:
    return {"pos_type": PosType.SIMPLE.value, "auto_logout": False}


class Business(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "businesses"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    settings: Mapped[dict] = mapped_column(JSONDocument, default=default_settings, nullable=False)

    # One business per owner
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("owners.id", ondelete="CASCADE"), unique=True, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Business {self.name}>"
