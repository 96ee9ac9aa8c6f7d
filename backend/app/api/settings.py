"""Business settings endpoints (owner only)."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import require_page
from app.core.identity import OwnerIdentity
from app.core.permissions import Action, Page
from app.db.base import get_db
from app.schemas.business import BusinessResponse, BusinessUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=BusinessResponse)
async def get_settings(identity: OwnerIdentity = Depends(require_page(Page.SETTINGS))):
    return BusinessResponse.model_validate(identity.business)


@router.put("", response_model=BusinessResponse)
async def save_settings(
    body: BusinessUpdate,
    identity: OwnerIdentity = Depends(require_page(Page.SETTINGS, Action.EDIT)),
    db: AsyncSession = Depends(get_db),
):
    """Save business name and POS settings."""
    business = identity.business
    db.add(business)
    if body.name is not None:
        business.name = body.name
    if body.settings is not None:
        # Reassign rather than mutate: JSONB columns don't track in-place changes
        business.settings = {**(business.settings or {}), **body.settings.model_dump(mode="json")}

    await db.commit()
    await db.refresh(business)

    logger.info("Settings saved for business %s", business.id)
    return BusinessResponse.model_validate(business)
