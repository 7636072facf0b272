"""
Sensory gap model.

A gap is the directional distance between a measured sensory score and the
taster's declared target for one experiment. Gaps are computed fresh from the
experiment on every request and never persisted.
"""
import enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from brewlog.config import settings
from brewlog.models.effect_mapping import OutputVariable


class GapDirection(str, enum.Enum):
    """Change in the sensory attribute that would close the gap."""
    INCREASE = "increase"
    DECREASE = "decrease"
    ON_TARGET = "on_target"


# Canonical gap order: (attribute, measured column, target column)
SENSORY_FIELDS = (
    (OutputVariable.ACIDITY, "acidity_intensity", "target_acidity"),
    (OutputVariable.SWEETNESS, "sweetness_intensity", "target_sweetness"),
    (OutputVariable.BITTERNESS, "bitterness_intensity", "target_bitterness"),
    (OutputVariable.BODY, "body_weight", "target_body"),
    (OutputVariable.AROMA, "aroma_intensity", "target_aroma"),
)

GAP_VARIABLES = tuple(variable for variable, _, _ in SENSORY_FIELDS)

# An unrecorded score or an unset target means "nothing to fix" rather than
# "unknown", so partial target profiles still get recommendations for the
# attributes that are set.
MISSING_VALUE_DIRECTION = GapDirection.ON_TARGET


def gap_direction(
    current: Optional[float], target: Optional[float], tolerance: float = 0.0
) -> GapDirection:
    """Derive the gap direction from a measured value and its target."""
    if current is None or target is None:
        return MISSING_VALUE_DIRECTION
    if abs(current - target) <= tolerance:
        return GapDirection.ON_TARGET
    if current < target:
        return GapDirection.INCREASE
    return GapDirection.DECREASE


class SensoryGap(BaseModel):
    """Measured vs target value for one sensory attribute.

    The direction is always derived from current, target and tolerance. A
    supplied direction (e.g. from a serialized gap) must agree with it.
    """

    model_config = ConfigDict(frozen=True)

    current: Optional[float] = None
    target: Optional[float] = None
    tolerance: float = Field(default=0.0, ge=0)

    @model_validator(mode="wrap")
    @classmethod
    def check_supplied_direction(cls, data, handler):
        supplied = None
        if isinstance(data, dict) and "direction" in data:
            data = dict(data)
            supplied = GapDirection(data.pop("direction"))
        gap = handler(data)
        if supplied is not None and supplied != gap.direction:
            raise ValueError(
                f"direction '{supplied.value}' contradicts current={gap.current}, "
                f"target={gap.target} (expected '{gap.direction.value}')"
            )
        return gap

    @computed_field
    @property
    def direction(self) -> GapDirection:
        return gap_direction(self.current, self.target, self.tolerance)

    @property
    def is_active(self) -> bool:
        return self.direction != GapDirection.ON_TARGET


class SensoryGaps(BaseModel):
    """The five sensory gaps of one experiment snapshot."""

    model_config = ConfigDict(frozen=True)

    acidity: SensoryGap = Field(default_factory=SensoryGap)
    sweetness: SensoryGap = Field(default_factory=SensoryGap)
    bitterness: SensoryGap = Field(default_factory=SensoryGap)
    body: SensoryGap = Field(default_factory=SensoryGap)
    aroma: SensoryGap = Field(default_factory=SensoryGap)

    def get(self, variable: OutputVariable) -> Optional[SensoryGap]:
        """Gap for a sensory variable; None for outputs that have no target (aftertaste, overall)."""
        if variable not in GAP_VARIABLES:
            return None
        return getattr(self, variable.value)

    def active_directions(self) -> Dict[OutputVariable, GapDirection]:
        """Desired direction per attribute with an active gap, in canonical order."""
        directions = {}
        for variable in GAP_VARIABLES:
            gap = self.get(variable)
            if gap.is_active:
                directions[variable] = gap.direction
        return directions


def compute_gaps(experiment, tolerance: Optional[float] = None) -> SensoryGaps:
    """
    Build the sensory gaps for an experiment.

    Args:
        experiment: Object exposing the measured (e.g. ``acidity_intensity``)
            and target (e.g. ``target_acidity``) columns
        tolerance: Maximum difference still considered on target
            (defaults to settings.gap_tolerance)

    Returns:
        SensoryGaps snapshot; missing values yield on-target gaps
    """
    if tolerance is None:
        tolerance = settings.gap_tolerance

    return SensoryGaps(
        **{
            variable.value: SensoryGap(
                current=getattr(experiment, current_field),
                target=getattr(experiment, target_field),
                tolerance=tolerance,
            )
            for variable, current_field, target_field in SENSORY_FIELDS
        }
    )


def count_active_gaps(gaps: SensoryGaps) -> int:
    """Number of attributes whose direction is not on target."""
    return len(gaps.active_directions())
