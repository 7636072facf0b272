"""Per-experiment record of effect mappings a user chose to hide."""
from sqlalchemy import (
    Column,
    Integer,
    DateTime,
    ForeignKey,
    Index,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from brewlog.database import Base


class ExperimentMappingDismissal(Base):
    """One dismissal per (experiment, mapping, user); re-dismissing refreshes dismissed_at."""

    __tablename__ = "experiment_mapping_dismissals"

    id = Column(Integer, primary_key=True)
    experiment_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("experiments.id", ondelete="CASCADE"),
        nullable=False,
    )
    mapping_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("effect_mappings.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    dismissed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    experiment = relationship("Experiment", back_populates="dismissals")
    mapping = relationship("EffectMapping")

    __table_args__ = (
        UniqueConstraint(
            "experiment_id", "mapping_id", "user_id", name="uq_experiment_mapping_dismissal"
        ),
        Index("idx_dismissals_experiment_user", "experiment_id", "user_id"),
    )

    def __repr__(self):
        return (
            f"<ExperimentMappingDismissal(experiment_id={self.experiment_id}, "
            f"mapping_id={self.mapping_id})>"
        )
