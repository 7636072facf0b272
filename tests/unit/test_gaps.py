"""
Unit tests for the sensory gap model.

Covers direction derivation, the missing-value rule, tolerance, and the
canonical ordering of active gaps.
"""
import pytest
from pydantic import ValidationError

from brewlog.models import Experiment, OutputVariable
from brewlog.services.gaps import (
    GapDirection,
    SensoryGap,
    SensoryGaps,
    compute_gaps,
    count_active_gaps,
    gap_direction,
)


class TestGapDirection:
    """Tests for gap_direction."""

    def test_below_target_increases(self):
        """Test a measured value under target asks for an increase."""
        assert gap_direction(4, 7) == GapDirection.INCREASE

    def test_above_target_decreases(self):
        """Test a measured value over target asks for a decrease."""
        assert gap_direction(8, 6) == GapDirection.DECREASE

    def test_equal_is_on_target(self):
        """Test equal values are on target."""
        assert gap_direction(5, 5) == GapDirection.ON_TARGET

    def test_missing_current_is_on_target(self):
        """Test an unrecorded measurement is treated as on target."""
        assert gap_direction(None, 7) == GapDirection.ON_TARGET

    def test_missing_target_is_on_target(self):
        """Test an unset target is treated as on target."""
        assert gap_direction(4, None) == GapDirection.ON_TARGET

    def test_tolerance_absorbs_small_differences(self):
        """Test differences within tolerance count as on target."""
        assert gap_direction(5, 6, tolerance=1.0) == GapDirection.ON_TARGET
        assert gap_direction(4, 6, tolerance=1.0) == GapDirection.INCREASE


class TestSensoryGaps:
    """Tests for the SensoryGaps snapshot."""

    def test_serialized_shape(self):
        """Test the dump exposes the values, tolerance and derived direction."""
        gap = SensoryGap(current=4, target=7, tolerance=0.5)

        assert gap.model_dump() == {
            "current": 4, "target": 7, "tolerance": 0.5, "direction": GapDirection.INCREASE,
        }

    def test_serialized_gap_validates_back_unchanged(self):
        """Test a dumped gap validates back to an equal gap."""
        gap = SensoryGap(current=6, target=7, tolerance=1.0)

        restored = SensoryGap.model_validate(gap.model_dump())

        assert restored.direction == GapDirection.ON_TARGET
        assert restored == gap

    def test_negative_tolerance_rejected(self):
        """Test a negative tolerance is a validation error."""
        with pytest.raises(ValidationError):
            SensoryGap(current=1, target=2, tolerance=-1)

    def test_contradicting_direction_rejected(self):
        """Test a supplied direction that disagrees with the values is rejected."""
        with pytest.raises(ValidationError):
            SensoryGap(current=5, target=7, direction="decrease")

    def test_matching_direction_accepted(self):
        """Test a supplied direction equal to the derived one is accepted."""
        gap = SensoryGap(current=5, target=7, direction="increase")

        assert gap.direction == GapDirection.INCREASE

    def test_direction_cannot_override_missing_value_rule(self):
        """Test a gap with no target stays on target whatever direction is supplied."""
        with pytest.raises(ValidationError):
            SensoryGap(current=5, direction="increase")

    def test_direction_is_read_only(self):
        """Test direction cannot be assigned after construction."""
        gap = SensoryGap(current=5, target=7)

        with pytest.raises((AttributeError, ValidationError)):
            gap.direction = GapDirection.DECREASE

    def test_defaults_have_no_active_gaps(self):
        """Test an empty snapshot has no active gaps."""
        gaps = SensoryGaps()

        assert gaps.active_directions() == {}
        assert count_active_gaps(gaps) == 0

    def test_active_directions_follow_canonical_order(self):
        """Test active gaps come back in acidity..aroma order regardless of construction order."""
        gaps = SensoryGaps(
            aroma=SensoryGap(current=3, target=6),
            acidity=SensoryGap(current=8, target=6),
            body=SensoryGap(current=5, target=5),
        )

        assert list(gaps.active_directions().items()) == [
            (OutputVariable.ACIDITY, GapDirection.DECREASE),
            (OutputVariable.AROMA, GapDirection.INCREASE),
        ]

    def test_get_returns_none_for_untargeted_outputs(self):
        """Test aftertaste and overall have no gap."""
        gaps = SensoryGaps()

        assert gaps.get(OutputVariable.AFTERTASTE) is None
        assert gaps.get(OutputVariable.OVERALL) is None
        assert gaps.get(OutputVariable.BODY) is not None


class TestComputeGaps:
    """Tests for compute_gaps on experiments."""

    def test_compute_gaps_reads_measured_and_target_columns(self):
        """Test each attribute pairs its measured column with its target column."""
        experiment = Experiment(
            acidity_intensity=8, target_acidity=6,
            sweetness_intensity=4, target_sweetness=7,
            bitterness_intensity=5, target_bitterness=5,
            body_weight=6,
            target_aroma=8,
        )

        gaps = compute_gaps(experiment, tolerance=0.0)

        assert gaps.acidity.direction == GapDirection.DECREASE
        assert gaps.sweetness.direction == GapDirection.INCREASE
        assert gaps.bitterness.direction == GapDirection.ON_TARGET
        # Partial pairs never produce a gap
        assert gaps.body.direction == GapDirection.ON_TARGET
        assert gaps.aroma.direction == GapDirection.ON_TARGET
        assert count_active_gaps(gaps) == 2

    def test_compute_gaps_uses_given_tolerance(self):
        """Test tolerance is applied to every attribute."""
        experiment = Experiment(acidity_intensity=6, target_acidity=7)

        assert count_active_gaps(compute_gaps(experiment, tolerance=0.0)) == 1
        assert count_active_gaps(compute_gaps(experiment, tolerance=1.0)) == 0

    def test_count_active_gaps_range(self):
        """Test the active count stays within 0..5."""
        experiment = Experiment(
            acidity_intensity=1, target_acidity=9,
            sweetness_intensity=1, target_sweetness=9,
            bitterness_intensity=9, target_bitterness=1,
            body_weight=1, target_body=9,
            aroma_intensity=1, target_aroma=9,
        )

        assert count_active_gaps(compute_gaps(experiment, tolerance=0.0)) == 5
