"""
Recommendation engine.

Scores and ranks a user's effect mappings against the sensory gaps of one
experiment:

- score = helps_count * 10 + confidence weight - 5 if any effect conflicts
- ranked by score descending, then name ascending
- dismissals are reported per recommendation but never change score or membership
"""
import logging
import math
from typing import Collection, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from brewlog.config import settings
from brewlog.models.effect_mapping import EffectDirection, EffectMapping, OutputVariable
from brewlog.models.experiment import Experiment
from brewlog.services.dismissal_service import DismissalService
from brewlog.services.effect_mapping_service import EffectMappingService, filter_relevant
from brewlog.services.experiment_service import ExperimentService
from brewlog.services.gaps import (
    GAP_VARIABLES,
    GapDirection,
    SensoryGaps,
    compute_gaps,
    count_active_gaps,
)
from brewlog.services.schemas import (
    EffectMappingOut,
    ExperimentsWithGapsResponse,
    ExperimentWithGaps,
    Recommendation,
    RecommendationsResponse,
)

logger = logging.getLogger(__name__)

# Each helped attribute outweighs any confidence nuance (1-3 per effect)
HELP_POINTS = 10
# A single side effect is a moderate penalty, not a disqualification
CONFLICT_PENALTY = 5

# Effect direction that closes a gap of the given direction
HELPING_EFFECT = {
    GapDirection.INCREASE: EffectDirection.INCREASE,
    GapDirection.DECREASE: EffectDirection.DECREASE,
}


def score_mapping(
    mapping: EffectMapping,
    active_directions: Dict[OutputVariable, GapDirection],
    is_dismissed: bool = False,
) -> Recommendation:
    """
    Turn one relevant mapping into a scored recommendation.

    An effect helps when its direction matches the gap's desired direction
    and conflicts when it is the opposite; effects on attributes without an
    active gap, and effects with direction "none", are ignored. Every
    helping effect adds its confidence weight; an attribute helped by several
    effects still counts once in helps_count.

    Args:
        mapping: Mapping with its effects loaded
        active_directions: Desired direction per attribute with an active gap
        is_dismissed: Whether the user dismissed this mapping for the experiment

    Returns:
        Recommendation carrying the mapping fields plus scoring
    """
    helped = set()
    confidence_weight = 0
    has_conflict = False

    for effect in mapping.effects:
        if effect.direction == EffectDirection.NONE:
            continue

        desired = active_directions.get(effect.output_variable)
        if desired is None:
            continue

        if effect.direction == HELPING_EFFECT[desired]:
            helped.add(OutputVariable(effect.output_variable))
            confidence_weight += effect.confidence.weight
        else:
            has_conflict = True

    helps_gaps = [variable.label for variable in GAP_VARIABLES if variable in helped]
    score = len(helps_gaps) * HELP_POINTS + confidence_weight
    if has_conflict:
        score -= CONFLICT_PENALTY

    return Recommendation(
        **EffectMappingOut.model_validate(mapping).model_dump(),
        helps_count=len(helps_gaps),
        helps_gaps=helps_gaps,
        has_conflict=has_conflict,
        score=score,
        is_dismissed=is_dismissed,
    )


def rank_recommendations(recommendations: List[Recommendation]) -> List[Recommendation]:
    """Order by score descending, ties by name ascending (case-sensitive)."""
    return sorted(recommendations, key=lambda rec: (-rec.score, rec.name))


def score_relevant_mappings(
    mappings: List[EffectMapping],
    gaps: SensoryGaps,
    dismissed_ids: Collection[UUID] = (),
) -> List[Recommendation]:
    """Score and rank already-matched mappings against a set of gaps."""
    active_directions = gaps.active_directions()
    recommendations = [
        score_mapping(mapping, active_directions, mapping.id in dismissed_ids)
        for mapping in mappings
    ]
    return rank_recommendations(recommendations)


def normalize_pagination(page: int, page_size: int) -> Tuple[int, int]:
    """Clamp page to >= 1 and page_size to 1..max_page_size (default when < 1)."""
    if page < 1:
        page = 1
    if page_size < 1:
        page_size = settings.default_page_size
    if page_size > settings.max_page_size:
        page_size = settings.max_page_size
    return page, page_size


class RecommendationService:
    """Service exposing the recommendation engine to the API layer."""

    def __init__(self, db: Session):
        """Initialize recommendation service."""
        self.db = db

    def get_recommendations(self, user_id: UUID, experiment_id: UUID) -> RecommendationsResponse:
        """
        Ranked recommendations for one experiment.

        Experiments without active gaps return an empty list without
        touching the catalog.

        Raises:
            ExperimentNotFoundError: If the experiment is missing or not the user's
        """
        experiment = ExperimentService.get_experiment(self.db, user_id, experiment_id)
        gaps = compute_gaps(experiment)

        if count_active_gaps(gaps) == 0:
            return RecommendationsResponse(
                recommendations=[], experiment_id=experiment_id, total_count=0
            )

        mappings = EffectMappingService.find_relevant(self.db, user_id, gaps)
        dismissed_ids = set(DismissalService.list_dismissed(self.db, user_id, experiment_id))
        recommendations = score_relevant_mappings(mappings, gaps, dismissed_ids)

        logger.debug(
            "Scored %d recommendations for experiment %s (%d dismissed)",
            len(recommendations),
            experiment_id,
            len(dismissed_ids),
        )
        return RecommendationsResponse(
            recommendations=recommendations,
            experiment_id=experiment_id,
            total_count=len(recommendations),
        )

    def dismiss_mapping(self, user_id: UUID, experiment_id: UUID, mapping_id: UUID) -> None:
        """Hide a mapping for an experiment (idempotent)."""
        DismissalService.dismiss(self.db, user_id, experiment_id, mapping_id)

    def undo_dismissal(self, user_id: UUID, experiment_id: UUID, mapping_id: UUID) -> None:
        """Restore a previously dismissed mapping."""
        DismissalService.undo_dismiss(self.db, user_id, experiment_id, mapping_id)

    def get_dismissed_mappings(self, user_id: UUID, experiment_id: UUID) -> List[UUID]:
        """Dismissed mapping IDs for an experiment."""
        return DismissalService.list_dismissed(self.db, user_id, experiment_id)

    def try_mapping(
        self,
        user_id: UUID,
        experiment_id: UUID,
        mapping_id: UUID,
        notes: Optional[str] = None,
    ) -> Experiment:
        """
        Start a follow-up experiment that tries one mapping.

        The new experiment repeats the source brew parameters and target
        profile; its improvement notes name the mapping and its tick.

        Raises:
            ExperimentNotFoundError: If the source experiment is missing
            MappingNotFoundError: If the mapping is missing
        """
        source = ExperimentService.get_experiment(self.db, user_id, experiment_id)
        mapping = EffectMappingService.get_mapping(self.db, user_id, mapping_id)

        improvement_notes = f"Trying: {mapping.name} - {mapping.tick_description}"
        if notes:
            improvement_notes += f"\n\nAdditional notes: {notes}"

        follow_up = ExperimentService.create_follow_up(
            self.db,
            source,
            overall_notes=f"Follow-up experiment for: {mapping.name}",
            improvement_notes=improvement_notes,
        )
        logger.info(
            "Created follow-up experiment %s from %s trying mapping %s",
            follow_up.id,
            experiment_id,
            mapping_id,
        )
        return follow_up

    def list_experiments_with_gaps(
        self, user_id: UUID, page: int = 1, page_size: int = 20
    ) -> ExperimentsWithGapsResponse:
        """
        Paginated backlog of experiments that still have active gaps.

        Scans the most recent experiments (capped by
        settings.gap_backlog_scan_limit), keeps those with at least one
        active gap, then paginates, so total_count covers every gap-bearing
        experiment in the scan. The catalog is loaded once per call.
        """
        page, page_size = normalize_pagination(page, page_size)

        experiments = ExperimentService.list_recent(
            self.db, user_id, settings.gap_backlog_scan_limit
        )

        catalog: Optional[List[EffectMapping]] = None
        with_gaps = []
        for experiment in experiments:
            gaps = compute_gaps(experiment)
            active_gap_count = count_active_gaps(gaps)
            if active_gap_count == 0:
                continue

            if catalog is None:
                catalog = EffectMappingService.list_active(self.db, user_id)
            recommendation_count = len(filter_relevant(catalog, gaps))
            with_gaps.append((experiment, gaps, active_gap_count, recommendation_count))

        total_count = len(with_gaps)
        total_pages = math.ceil(total_count / page_size)
        offset = (page - 1) * page_size
        page_items = with_gaps[offset:offset + page_size]

        dismissed = DismissalService.list_dismissed_for_experiments(
            self.db, user_id, [experiment.id for experiment, _, _, _ in page_items]
        )

        return ExperimentsWithGapsResponse(
            experiments=[
                ExperimentWithGaps(
                    id=experiment.id,
                    brew_date=experiment.brew_date,
                    overall_notes=experiment.overall_notes,
                    overall_score=experiment.overall_score,
                    gaps=gaps,
                    active_gap_count=active_gap_count,
                    recommendation_count=recommendation_count,
                    dismissed_count=len(dismissed.get(experiment.id, [])),
                    created_at=experiment.created_at,
                )
                for experiment, gaps, active_gap_count, recommendation_count in page_items
            ],
            total_count=total_count,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
        )
