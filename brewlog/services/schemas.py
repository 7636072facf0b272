"""
Pydantic models for recommendation engine responses.

Mapping and experiment schemas read straight from ORM objects
(from_attributes); Recommendation extends the mapping with its score.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from brewlog.models.effect_mapping import (
    Confidence,
    EffectDirection,
    InputVariable,
    MappingDirection,
    OutputVariable,
)
from brewlog.services.gaps import SensoryGaps


# --- Effect mapping catalog ---


class EffectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    output_variable: OutputVariable
    direction: EffectDirection
    range_min: Optional[float] = None
    range_max: Optional[float] = None
    confidence: Confidence


class EffectMappingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    variable: InputVariable
    direction: MappingDirection
    tick_description: str
    source: Optional[str] = None
    notes: Optional[str] = None
    active: bool
    effects: List[EffectOut]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RelevantMappingsResponse(BaseModel):
    mappings: List[EffectMappingOut]


# --- Recommendations ---


class Recommendation(EffectMappingOut):
    helps_count: int
    helps_gaps: List[str]  # Labels in canonical gap order
    has_conflict: bool
    score: int
    is_dismissed: bool


class RecommendationsResponse(BaseModel):
    recommendations: List[Recommendation]
    experiment_id: UUID
    total_count: int


class DismissedMappingsResponse(BaseModel):
    mapping_ids: List[UUID]


# --- Experiments ---


class ExperimentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    brew_date: datetime
    overall_notes: str
    overall_score: Optional[int] = None
    coffee_weight: Optional[float] = None
    water_weight: Optional[float] = None
    ratio: Optional[float] = None
    grind_size: Optional[str] = None
    water_temperature: Optional[float] = None
    bloom_water: Optional[float] = None
    bloom_time: Optional[int] = None
    total_brew_time: Optional[int] = None
    technique_notes: Optional[str] = None
    acidity_intensity: Optional[int] = None
    sweetness_intensity: Optional[int] = None
    bitterness_intensity: Optional[int] = None
    body_weight: Optional[int] = None
    aroma_intensity: Optional[int] = None
    target_acidity: Optional[int] = None
    target_sweetness: Optional[int] = None
    target_bitterness: Optional[int] = None
    target_body: Optional[int] = None
    target_aroma: Optional[int] = None
    improvement_notes: Optional[str] = None
    created_at: Optional[datetime] = None


class ExperimentWithGaps(BaseModel):
    id: UUID
    brew_date: datetime
    overall_notes: str
    overall_score: Optional[int] = None
    gaps: SensoryGaps
    active_gap_count: int
    recommendation_count: int
    dismissed_count: int
    created_at: Optional[datetime] = None


class ExperimentsWithGapsResponse(BaseModel):
    experiments: List[ExperimentWithGaps]
    total_count: int
    page: int
    page_size: int
    total_pages: int
