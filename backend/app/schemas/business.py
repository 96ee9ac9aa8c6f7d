"""Business and settings schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.business import PosType


class BusinessSettings(BaseModel):
    pos_type: PosType = PosType.SIMPLE
    auto_logout: bool = False


class BusinessResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    settings: BusinessSettings
    created_at: datetime


class BusinessUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    settings: BusinessSettings | None = None


class BusinessCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class DirectoryEntry(BaseModel):
    """Public id/name pair for the employee login pickers."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
