"""Effect mapping catalog read path and gap relevance matching."""

import logging
from typing import Dict, Iterable, List
from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from brewlog.models.effect_mapping import (
    EffectMapping,
    EffectDirection,
    OutputVariable,
)
from brewlog.services.exceptions import MappingNotFoundError
from brewlog.services.gaps import GapDirection, SensoryGaps

logger = logging.getLogger(__name__)


def is_relevant(
    mapping: EffectMapping, active_directions: Dict[OutputVariable, GapDirection]
) -> bool:
    """
    True if any effect of the mapping acts on a variable with an active gap.

    Helping and conflicting effects both count: conflicts must reach the
    scorer so they can be penalised and shown. Effects with direction
    "none" never count.
    """
    for effect in mapping.effects:
        if effect.direction == EffectDirection.NONE:
            continue
        if effect.output_variable in active_directions:
            return True
    return False


def filter_relevant(
    mappings: Iterable[EffectMapping], gaps: SensoryGaps
) -> List[EffectMapping]:
    """Active mappings relevant to the given gaps. Empty gaps give an empty list."""
    active_directions = gaps.active_directions()
    if not active_directions:
        return []
    return [
        mapping
        for mapping in mappings
        if mapping.active and is_relevant(mapping, active_directions)
    ]


class EffectMappingService:
    """Read access to a user's effect mapping catalog.

    Nothing here is cached: the catalog can be edited between requests.
    """

    @staticmethod
    def get_mapping(db: Session, user_id: UUID, mapping_id: UUID) -> EffectMapping:
        """
        Get a mapping owned by the user, with its effects loaded.

        Raises:
            MappingNotFoundError: If it does not exist or belongs to another user
        """
        mapping = (
            db.query(EffectMapping)
            .options(selectinload(EffectMapping.effects))
            .filter(EffectMapping.id == mapping_id, EffectMapping.user_id == user_id)
            .first()
        )
        if mapping is None:
            raise MappingNotFoundError()
        return mapping

    @staticmethod
    def list_active(db: Session, user_id: UUID) -> List[EffectMapping]:
        """All active mappings for a user, ordered by name."""
        return (
            db.query(EffectMapping)
            .options(selectinload(EffectMapping.effects))
            .filter(EffectMapping.user_id == user_id, EffectMapping.active.is_(True))
            .order_by(EffectMapping.name)
            .all()
        )

    @staticmethod
    def find_relevant(db: Session, user_id: UUID, gaps: SensoryGaps) -> List[EffectMapping]:
        """
        Narrow the user's active catalog to mappings worth scoring for these gaps.

        Args:
            db: Database session
            user_id: Catalog owner
            gaps: Sensory gaps of the experiment

        Returns:
            Relevant mappings (empty when there are no active gaps)
        """
        if not gaps.active_directions():
            return []

        mappings = EffectMappingService.list_active(db, user_id)
        relevant = filter_relevant(mappings, gaps)
        logger.debug(
            "Matched %d of %d active mappings for user %s", len(relevant), len(mappings), user_id
        )
        return relevant
