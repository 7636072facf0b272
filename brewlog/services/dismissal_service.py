"""Dismissal ledger: per-experiment record of effect mappings a user has hidden."""

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List
from uuid import UUID

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from brewlog.models.dismissal import ExperimentMappingDismissal
from brewlog.services.effect_mapping_service import EffectMappingService
from brewlog.services.exceptions import DismissalNotFoundError, UnsupportedDialectError
from brewlog.services.experiment_service import ExperimentService

logger = logging.getLogger(__name__)

# INSERT constructs supporting ON CONFLICT DO UPDATE, by dialect name
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _upsert_insert(db: Session):
    dialect = db.get_bind().dialect.name
    if dialect not in _UPSERT_INSERTS:
        raise UnsupportedDialectError(dialect, "Dismissal upsert")
    return _UPSERT_INSERTS[dialect]


class DismissalService:
    """Service for dismissing effect mappings per experiment."""

    @staticmethod
    def dismiss(
        db: Session, user_id: UUID, experiment_id: UUID, mapping_id: UUID
    ) -> ExperimentMappingDismissal:
        """
        Dismiss a mapping for one experiment.

        Idempotent: dismissing an already-dismissed mapping refreshes
        dismissed_at on the existing row instead of adding another. The
        upsert is a single atomic statement, so concurrent dismissals of the
        same pair resolve to one row (last writer wins on the timestamp).

        Args:
            db: Database session
            user_id: Owner of the experiment and mapping
            experiment_id: Experiment the dismissal applies to
            mapping_id: Mapping being hidden

        Returns:
            The created or refreshed dismissal

        Raises:
            ExperimentNotFoundError: If the experiment is missing or not the user's
            MappingNotFoundError: If the mapping is missing or not the user's
        """
        ExperimentService.get_experiment(db, user_id, experiment_id)
        EffectMappingService.get_mapping(db, user_id, mapping_id)

        now = datetime.now(timezone.utc)
        insert = _upsert_insert(db)
        stmt = (
            insert(ExperimentMappingDismissal)
            .values(
                experiment_id=experiment_id,
                mapping_id=mapping_id,
                user_id=user_id,
                dismissed_at=now,
            )
            .on_conflict_do_update(
                index_elements=["experiment_id", "mapping_id", "user_id"],
                set_={"dismissed_at": now},
            )
            .returning(ExperimentMappingDismissal)
        )
        dismissal = db.scalars(stmt, execution_options={"populate_existing": True}).one()
        db.commit()

        logger.info(
            "Dismissed mapping %s for experiment %s (user %s)",
            mapping_id,
            experiment_id,
            user_id,
        )
        return dismissal

    @staticmethod
    def undo_dismiss(
        db: Session, user_id: UUID, experiment_id: UUID, mapping_id: UUID
    ) -> None:
        """
        Remove a dismissal.

        Raises:
            DismissalNotFoundError: If no such dismissal exists for the user
        """
        deleted = (
            db.query(ExperimentMappingDismissal)
            .filter(
                ExperimentMappingDismissal.experiment_id == experiment_id,
                ExperimentMappingDismissal.mapping_id == mapping_id,
                ExperimentMappingDismissal.user_id == user_id,
            )
            .delete(synchronize_session=False)
        )
        if deleted == 0:
            raise DismissalNotFoundError()

        db.commit()
        logger.info(
            "Restored mapping %s for experiment %s (user %s)",
            mapping_id,
            experiment_id,
            user_id,
        )

    @staticmethod
    def list_dismissed(db: Session, user_id: UUID, experiment_id: UUID) -> List[UUID]:
        """Dismissed mapping IDs for an experiment, oldest dismissal first. Never None."""
        rows = (
            db.query(ExperimentMappingDismissal.mapping_id)
            .filter(
                ExperimentMappingDismissal.experiment_id == experiment_id,
                ExperimentMappingDismissal.user_id == user_id,
            )
            .order_by(ExperimentMappingDismissal.dismissed_at, ExperimentMappingDismissal.id)
            .all()
        )
        return [row.mapping_id for row in rows]

    @staticmethod
    def list_dismissed_for_experiments(
        db: Session, user_id: UUID, experiment_ids: Iterable[UUID]
    ) -> Dict[UUID, List[UUID]]:
        """
        Batch lookup of dismissed mapping IDs.

        Returns:
            Dict of experiment_id -> mapping IDs; experiments without
            dismissals are absent from the dict
        """
        experiment_ids = list(experiment_ids)
        if not experiment_ids:
            return {}

        rows = (
            db.query(
                ExperimentMappingDismissal.experiment_id,
                ExperimentMappingDismissal.mapping_id,
            )
            .filter(
                ExperimentMappingDismissal.experiment_id.in_(experiment_ids),
                ExperimentMappingDismissal.user_id == user_id,
            )
            .all()
        )

        dismissed: Dict[UUID, List[UUID]] = {}
        for row in rows:
            dismissed.setdefault(row.experiment_id, []).append(row.mapping_id)
        return dismissed
