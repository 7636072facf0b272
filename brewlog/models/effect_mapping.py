from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    Index,
    Boolean,
    Enum,
    Numeric,
    Uuid,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
import uuid

from brewlog.database import Base


class InputVariable(str, enum.Enum):
    """Controllable brew variable a mapping describes changing."""
    TEMPERATURE = "temperature"
    RATIO = "ratio"
    GRIND_SIZE = "grind_size"
    BLOOM_TIME = "bloom_time"
    TOTAL_BREW_TIME = "total_brew_time"
    COFFEE_WEIGHT = "coffee_weight"
    POUR_COUNT = "pour_count"
    POUR_TECHNIQUE = "pour_technique"
    FILTER_TYPE = "filter_type"


class OutputVariable(str, enum.Enum):
    """Sensory outcome an effect acts on."""
    ACIDITY = "acidity"
    SWEETNESS = "sweetness"
    BITTERNESS = "bitterness"
    BODY = "body"
    AROMA = "aroma"
    AFTERTASTE = "aftertaste"
    OVERALL = "overall"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class MappingDirection(str, enum.Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


class EffectDirection(str, enum.Enum):
    """Direction of an effect. NONE documents "no effect", not missing data."""
    INCREASE = "increase"
    DECREASE = "decrease"
    NONE = "none"


class Confidence(str, enum.Enum):
    """Authored certainty of a single effect."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def weight(self) -> int:
        return CONFIDENCE_WEIGHTS[self]


CONFIDENCE_WEIGHTS = {
    Confidence.LOW: 1,
    Confidence.MEDIUM: 2,
    Confidence.HIGH: 3,
}


class EffectMapping(Base):
    """Cause-effect fact: changing one brew variable affects one or more sensory outcomes."""

    __tablename__ = "effect_mappings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(255), nullable=False)
    variable = Column(Enum(InputVariable), nullable=False)
    direction = Column(Enum(MappingDirection), nullable=False)
    tick_description = Column(String(100), nullable=False)  # One unit of change, e.g. "+2°C"
    source = Column(String(255))  # Provenance (book, video, own testing)
    notes = Column(Text)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="effect_mappings")
    effects = relationship(
        "Effect",
        back_populates="mapping",
        cascade="all, delete-orphan",
        order_by="Effect.position",
    )

    __table_args__ = (
        Index("idx_effect_mappings_user_id", "user_id"),
        Index("idx_effect_mappings_user_active", "user_id", "active"),
    )

    def __repr__(self):
        return f"<EffectMapping(id={self.id}, name={self.name!r}, active={self.active})>"


class Effect(Base):
    """One expected outcome of an effect mapping."""

    __tablename__ = "effect_mapping_effects"

    id = Column(Integer, primary_key=True)
    mapping_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("effect_mappings.id", ondelete="CASCADE"),
        nullable=False,
    )
    position = Column(Integer, nullable=False, default=0)  # Authored order within the mapping
    output_variable = Column(Enum(OutputVariable), nullable=False)
    direction = Column(Enum(EffectDirection), nullable=False)
    range_min = Column(Numeric(4, 1))  # Expected magnitude on the 1-10 scale
    range_max = Column(Numeric(4, 1))
    confidence = Column(Enum(Confidence), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    mapping = relationship("EffectMapping", back_populates="effects")

    __table_args__ = (Index("idx_effect_mapping_effects_mapping_id", "mapping_id"),)
