"""
Tests for the add (aggregate) and merge steps.

Validates per-batch reduction across all accepted batch forms, dimension
checking, and in-place merging into the global state.
"""

import numpy as np
import pandas as pd
import pytest

from streamingnb.exceptions import DimensionMismatch
from streamingnb.model import (
    SufficientStats,
    aggregate_batch,
    merge_into,
    state_num_features,
)
from streamingnb.streaming import LabeledBatch, LabeledVector


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def scenario_records():
    """Two classes: 0.0 -> [1,0], [1,0]; 1.0 -> [0,1]."""
    return [(0.0, [1, 0]), (1.0, [0, 1]), (0.0, [1, 0])]


# =============================================================================
# Test aggregate_batch
# =============================================================================

class TestAggregateBatch:
    """Test batch reduction into per-label statistics."""

    def test_pairs(self, scenario_records) -> None:
        """(label, features) pairs are grouped by label."""
        local = aggregate_batch(scenario_records)

        assert set(local) == {0.0, 1.0}
        assert local[0.0].count == 2
        assert local[0.0].feature_sums.tolist() == [2.0, 0.0]
        assert local[1.0].count == 1
        assert local[1.0].feature_sums.tolist() == [0.0, 1.0]

    def test_labeled_vectors(self, scenario_records) -> None:
        """LabeledVector records give the same result as pairs."""
        records = [LabeledVector(label=l, features=f) for l, f in scenario_records]
        local = aggregate_batch(records)

        assert local[0.0].count == 2
        assert local[0.0].feature_sums.tolist() == [2.0, 0.0]

    def test_labeled_batch(self) -> None:
        """Columnar LabeledBatch is aggregated row by row."""
        batch = LabeledBatch(
            labels=np.array([0, 1, 0]),
            features=np.array([[1, 0], [0, 1], [1, 0]], dtype=np.float64),
        )
        local = aggregate_batch(batch)

        assert local[0.0].count == 2
        assert local[1.0].feature_sums.tolist() == [0.0, 1.0]

    def test_dataframe_long(self) -> None:
        """DataFrame with a features column of vectors."""
        frame = pd.DataFrame({
            'label': [0.0, 1.0, 0.0],
            'features': [[1, 0], [0, 1], [1, 0]],
        })
        local = aggregate_batch(frame)

        assert local[0.0].count == 2
        assert local[0.0].feature_sums.tolist() == [2.0, 0.0]

    def test_dataframe_wide(self) -> None:
        """DataFrame with one column per feature."""
        frame = pd.DataFrame({
            'label': [0.0, 1.0, 0.0],
            'f0': [1, 0, 1],
            'f1': [0, 1, 0],
        })
        local = aggregate_batch(frame)

        assert local[0.0].feature_sums.tolist() == [2.0, 0.0]
        assert local[1.0].feature_sums.tolist() == [0.0, 1.0]

    def test_dataframe_wide_scalar_features_column(self) -> None:
        """A scalar column named 'features' is one wide feature column."""
        frame = pd.DataFrame({
            'label': [0.0, 1.0, 0.0],
            'features': [3.0, 1.0, 2.0],
            'f2': [0.0, 2.0, 1.0],
        })
        local = aggregate_batch(frame)

        assert local[0.0].count == 2
        assert local[0.0].feature_sums.tolist() == [5.0, 1.0]
        assert local[1.0].feature_sums.tolist() == [1.0, 2.0]

    def test_dataframe_missing_label_column(self) -> None:
        """A DataFrame without a label column is rejected."""
        frame = pd.DataFrame({'features': [[1, 0]]})

        with pytest.raises(ValueError, match="label"):
            aggregate_batch(frame)

    def test_dataframe_ragged_features(self) -> None:
        """Ragged vectors in a DataFrame raise DimensionMismatch."""
        frame = pd.DataFrame({
            'label': [0.0, 1.0],
            'features': [[1, 0], [0, 1, 2]],
        })

        with pytest.raises(DimensionMismatch):
            aggregate_batch(frame)

    def test_integer_labels_become_float_keys(self) -> None:
        """Integer and numpy labels map to the same float key."""
        local = aggregate_batch([(1, [1.0]), (np.int8(1), [2.0]), (1.0, [3.0])])

        assert list(local) == [1.0]
        assert local[1.0].count == 3
        assert local[1.0].feature_sums.tolist() == [6.0]

    def test_order_within_batch_irrelevant(self) -> None:
        """Permuting records does not change the aggregate."""
        rng = np.random.default_rng(0)
        labels = rng.integers(0, 4, size=200)
        features = rng.integers(0, 5, size=(200, 6)).astype(float)
        perm = rng.permutation(200)

        a = aggregate_batch(list(zip(labels, features)))
        b = aggregate_batch(list(zip(labels[perm], features[perm])))

        assert set(a) == set(b)
        for label in a:
            assert a[label].count == b[label].count
            np.testing.assert_array_equal(a[label].feature_sums, b[label].feature_sums)

    def test_empty_batch(self) -> None:
        """An empty batch yields an empty mapping."""
        assert aggregate_batch([]) == {}

    def test_input_not_aliased(self) -> None:
        """The aggregate does not alias caller-owned feature arrays."""
        row = np.array([1.0, 2.0])
        local = aggregate_batch([(0.0, row)])
        row[0] = 50.0

        assert local[0.0].feature_sums.tolist() == [1.0, 2.0]


class TestAggregateErrors:
    """Test error conditions during aggregation."""

    def test_mismatch_within_batch(self) -> None:
        """The first record sets the dimensionality for the batch."""
        with pytest.raises(DimensionMismatch) as excinfo:
            aggregate_batch([(0.0, [1, 0]), (1.0, [1, 0, 0])])

        assert excinfo.value.expected == 2
        assert excinfo.value.actual == 3
        assert excinfo.value.label == 1.0

    def test_mismatch_with_established(self) -> None:
        """An established feature count is enforced from the first record."""
        with pytest.raises(DimensionMismatch, match="expected 3"):
            aggregate_batch([(0.0, [1, 0])], num_features=3)

    def test_mismatch_is_value_error(self) -> None:
        """DimensionMismatch is catchable as ValueError."""
        with pytest.raises(ValueError):
            aggregate_batch([(0.0, [1, 0]), (0.0, [1])])

    def test_nan_label(self) -> None:
        """NaN labels are rejected."""
        with pytest.raises(ValueError, match="NaN"):
            aggregate_batch([(float('nan'), [1, 0])])

    def test_non_vector_features(self) -> None:
        """2-D feature records are rejected."""
        with pytest.raises(ValueError, match="1-D"):
            aggregate_batch([(0.0, [[1, 0], [0, 1]])])


# =============================================================================
# Test merge_into
# =============================================================================

class TestMergeInto:
    """Test folding batch statistics into the global state."""

    def test_new_labels_inserted(self) -> None:
        """Labels absent from the state are inserted."""
        state = {}
        update = aggregate_batch([(0.0, [1, 0]), (1.0, [0, 1])])
        merge_into(state, update)

        assert set(state) == {0.0, 1.0}
        assert state_num_features(state) == 2

    def test_existing_entries_mutated_in_place(self) -> None:
        """Existing entries and their arrays are updated, not replaced."""
        state = {0.0: SufficientStats(count=1, feature_sums=np.array([1.0, 0.0]))}
        entry = state[0.0]
        sums = entry.feature_sums

        merge_into(state, aggregate_batch([(0.0, [2, 3]), (0.0, [0, 1])]))

        assert state[0.0] is entry
        assert state[0.0].feature_sums is sums
        assert entry.count == 3
        assert sums.tolist() == [3.0, 4.0]

    def test_mismatch_leaves_state_unchanged(self) -> None:
        """A mismatched update is rejected before any entry is touched."""
        state = {}
        merge_into(state, aggregate_batch([(0.0, [1, 0]), (1.0, [0, 1])]))

        bad = {
            0.0: SufficientStats(count=1, feature_sums=np.array([1.0, 1.0])),
            2.0: SufficientStats(count=1, feature_sums=np.array([1.0, 1.0, 1.0])),
        }
        with pytest.raises(DimensionMismatch):
            merge_into(state, bad)

        assert set(state) == {0.0, 1.0}
        assert state[0.0].count == 1
        assert state[0.0].feature_sums.tolist() == [1.0, 0.0]

    def test_empty_update_is_noop(self) -> None:
        """Merging an empty update changes nothing."""
        state = {}
        merge_into(state, {})

        assert state == {}
        assert state_num_features(state) is None

    def test_reapplication_double_counts(self) -> None:
        """Merging the same statistics twice counts them twice."""
        state = {}
        merge_into(state, aggregate_batch([(0.0, [1, 0])]))
        merge_into(state, aggregate_batch([(0.0, [1, 0])]))

        assert state[0.0].count == 2
        assert state[0.0].feature_sums.tolist() == [2.0, 0.0]
