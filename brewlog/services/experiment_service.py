"""Experiment lookups used as the gap source for recommendations."""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from brewlog.models.experiment import Experiment
from brewlog.services.exceptions import ExperimentNotFoundError

# Columns copied onto a follow-up experiment
FOLLOW_UP_FIELDS = (
    "coffee_weight",
    "water_weight",
    "ratio",
    "grind_size",
    "water_temperature",
    "bloom_water",
    "bloom_time",
    "total_brew_time",
    "technique_notes",
    "target_acidity",
    "target_sweetness",
    "target_bitterness",
    "target_body",
    "target_aroma",
)


class ExperimentService:
    """Service for experiment reads and follow-up creation."""

    @staticmethod
    def get_experiment(db: Session, user_id: UUID, experiment_id: UUID) -> Experiment:
        """
        Get an experiment owned by the user.

        Raises:
            ExperimentNotFoundError: If it does not exist or belongs to another user
        """
        experiment = (
            db.query(Experiment)
            .filter(Experiment.id == experiment_id, Experiment.user_id == user_id)
            .first()
        )
        if experiment is None:
            raise ExperimentNotFoundError()
        return experiment

    @staticmethod
    def list_recent(db: Session, user_id: UUID, limit: int) -> List[Experiment]:
        """Most recent experiments for a user, newest brew first."""
        return (
            db.query(Experiment)
            .filter(Experiment.user_id == user_id)
            .order_by(Experiment.brew_date.desc(), Experiment.created_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def create_follow_up(
        db: Session,
        source: Experiment,
        overall_notes: str,
        improvement_notes: Optional[str] = None,
    ) -> Experiment:
        """
        Create a new experiment that repeats the source brew and its target profile.

        Sensory results are not copied; the follow-up has yet to be tasted.
        """
        experiment = Experiment(
            user_id=source.user_id,
            brew_date=datetime.now(timezone.utc),
            overall_notes=overall_notes,
            improvement_notes=improvement_notes,
            **{field: getattr(source, field) for field in FOLLOW_UP_FIELDS},
        )
        db.add(experiment)
        db.commit()
        db.refresh(experiment)
        return experiment
