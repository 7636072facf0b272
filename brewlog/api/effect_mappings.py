"""Effect mapping catalog endpoints."""
import logging
from typing import List, Literal
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from brewlog.config import settings
from brewlog.database import get_db
from brewlog.models.user import User
from brewlog.services.auth.dependencies import get_current_user
from brewlog.services.effect_mapping_service import EffectMappingService
from brewlog.services.exceptions import NotFoundError
from brewlog.services.gaps import SensoryGap, SensoryGaps
from brewlog.services.schemas import EffectMappingOut, RelevantMappingsResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/effect-mappings", tags=["effect-mappings"])


class GapInput(BaseModel):
    """One sensory attribute's measured and target score (0-10)."""

    output_variable: Literal["acidity", "sweetness", "bitterness", "body", "aroma"]
    current_value: float | None = Field(None, ge=0, le=10)
    target_value: float | None = Field(None, ge=0, le=10)


class RelevantMappingsRequest(BaseModel):
    """Request model for matching the catalog against ad-hoc gaps."""

    gaps: List[GapInput]


@router.post("/relevant", response_model=RelevantMappingsResponse)
def find_relevant_mappings(
    request: RelevantMappingsRequest = Body(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Active mappings that act on any of the given gaps.

    Attributes left out of the request are treated as on target. If an
    attribute is listed more than once, the last entry wins.
    """
    gaps = SensoryGaps(
        **{
            gap.output_variable: SensoryGap(
                current=gap.current_value,
                target=gap.target_value,
                tolerance=settings.gap_tolerance,
            )
            for gap in request.gaps
        }
    )
    try:
        mappings = EffectMappingService.find_relevant(db, user.id, gaps)
    except SQLAlchemyError:
        logger.exception("Database error while matching effect mappings")
        raise HTTPException(status_code=500, detail="Internal server error")

    return RelevantMappingsResponse(
        mappings=[EffectMappingOut.model_validate(mapping) for mapping in mappings]
    )


@router.get("/{mapping_id}", response_model=EffectMappingOut)
def get_mapping(
    mapping_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get a single mapping with its effects."""
    try:
        return EffectMappingService.get_mapping(db, user.id, mapping_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Database error while loading effect mapping %s", mapping_id)
        raise HTTPException(status_code=500, detail="Internal server error")
