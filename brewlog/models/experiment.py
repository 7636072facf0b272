from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    Index,
    Float,
    Uuid,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import uuid

from brewlog.database import Base


class Experiment(Base):
    """A single brew with its parameters, measured sensory scores and target profile."""

    __tablename__ = "experiments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    brew_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    overall_notes = Column(Text, nullable=False, default="")
    overall_score = Column(Integer)  # 1-10

    # Pre-brew parameters
    coffee_weight = Column(Float)  # grams
    water_weight = Column(Float)  # grams
    ratio = Column(Float)  # e.g. 15.0 for 1:15
    grind_size = Column(String(100))
    water_temperature = Column(Float)  # celsius

    # Brew parameters
    bloom_water = Column(Float)
    bloom_time = Column(Integer)  # seconds
    total_brew_time = Column(Integer)  # seconds
    technique_notes = Column(Text)

    # Measured sensory scores (1-10)
    acidity_intensity = Column(Integer)
    sweetness_intensity = Column(Integer)
    bitterness_intensity = Column(Integer)
    body_weight = Column(Integer)
    aroma_intensity = Column(Integer)

    # Target profile (1-10)
    target_acidity = Column(Integer)
    target_sweetness = Column(Integer)
    target_bitterness = Column(Integer)
    target_body = Column(Integer)
    target_aroma = Column(Integer)

    improvement_notes = Column(Text)  # What to try next time
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="experiments")
    dismissals = relationship(
        "ExperimentMappingDismissal",
        back_populates="experiment",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_experiments_user_id", "user_id"),
        Index("idx_experiments_user_brew_date", "user_id", "brew_date"),
    )
