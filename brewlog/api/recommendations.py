"""Recommendation API endpoints: ranked suggestions, dismissals, and the gap backlog."""
import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from fastapi.responses import Response
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from brewlog.config import settings
from brewlog.database import get_db
from brewlog.models.user import User
from brewlog.services.auth.dependencies import get_current_user
from brewlog.services.exceptions import NotFoundError
from brewlog.services.recommendation_service import RecommendationService
from brewlog.services.schemas import (
    DismissedMappingsResponse,
    ExperimentOut,
    ExperimentsWithGapsResponse,
    RecommendationsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/experiments", tags=["recommendations"])


class DismissMappingRequest(BaseModel):
    """Request model for dismissing a mapping."""

    mapping_id: UUID


class TryMappingRequest(BaseModel):
    """Request model for starting a follow-up experiment from a mapping."""

    mapping_id: UUID
    notes: str | None = None


def _database_error(action: str) -> HTTPException:
    logger.exception("Database error while %s", action)
    return HTTPException(status_code=500, detail="Internal server error")


# =============================================================================
# Gap backlog
# =============================================================================

# Registered before the /{experiment_id} routes so "with-gaps" is never parsed as an ID


@router.get("/with-gaps", response_model=ExperimentsWithGapsResponse)
def list_experiments_with_gaps(
    page: int = Query(1),
    page_size: int = Query(settings.default_page_size),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Experiments with at least one active sensory gap, newest first.

    Out-of-range pagination values are normalized rather than rejected.
    """
    service = RecommendationService(db)
    try:
        return service.list_experiments_with_gaps(user.id, page=page, page_size=page_size)
    except SQLAlchemyError:
        raise _database_error("listing experiments with gaps")


# =============================================================================
# Recommendations
# =============================================================================


@router.get("/{experiment_id}/recommendations", response_model=RecommendationsResponse)
def get_recommendations(
    experiment_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Ranked effect mappings that would close the experiment's sensory gaps."""
    service = RecommendationService(db)
    try:
        return service.get_recommendations(user.id, experiment_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        raise _database_error("scoring recommendations")


@router.post("/{experiment_id}/try-mapping", response_model=ExperimentOut, status_code=201)
def try_mapping(
    experiment_id: UUID,
    request: TryMappingRequest = Body(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a follow-up experiment that applies one recommended mapping."""
    service = RecommendationService(db)
    try:
        return service.try_mapping(user.id, experiment_id, request.mapping_id, request.notes)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        raise _database_error("creating follow-up experiment")


# =============================================================================
# Dismissals
# =============================================================================


@router.post("/{experiment_id}/dismissals", status_code=204)
def dismiss_mapping(
    experiment_id: UUID,
    request: DismissMappingRequest = Body(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Hide a mapping for this experiment.

    Repeating the call is harmless: the existing dismissal is refreshed.
    """
    service = RecommendationService(db)
    try:
        service.dismiss_mapping(user.id, experiment_id, request.mapping_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        raise _database_error("dismissing mapping")
    return Response(status_code=204)


@router.delete("/{experiment_id}/dismissals/{mapping_id}", status_code=204)
def undo_dismissal(
    experiment_id: UUID,
    mapping_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Restore a dismissed mapping. 404 if it was not dismissed."""
    service = RecommendationService(db)
    try:
        service.undo_dismissal(user.id, experiment_id, mapping_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        raise _database_error("undoing dismissal")
    return Response(status_code=204)


@router.get("/{experiment_id}/dismissals", response_model=DismissedMappingsResponse)
def get_dismissed_mappings(
    experiment_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """IDs of mappings dismissed for this experiment (empty list when none)."""
    service = RecommendationService(db)
    try:
        mapping_ids = service.get_dismissed_mappings(user.id, experiment_id)
    except SQLAlchemyError:
        raise _database_error("listing dismissals")
    return DismissedMappingsResponse(mapping_ids=mapping_ids)
