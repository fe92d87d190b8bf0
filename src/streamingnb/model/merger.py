"""
Fold a batch's per-label statistics into the running global state.

This is the "merge" step. It is commutative and associative, so batches
may be merged in any order. It is not idempotent: applying the same
update twice counts it twice, and callers must merge each update once.
"""

from typing import Dict, Mapping, Optional

from streamingnb.model.sufficient_stats import SufficientStats
from streamingnb.validation import check_dimension


def state_num_features(state: Mapping[float, SufficientStats]) -> Optional[int]:
    """Feature count shared by all entries, or None for an empty state."""
    for stats in state.values():
        return stats.num_features
    return None


def check_update_dimension(
    state: Mapping[float, SufficientStats],
    update: Mapping[float, SufficientStats],
) -> None:
    """
    Raise DimensionMismatch if update disagrees with the state's feature count.

    Checked for every entry before any mutation so a rejected update
    leaves the state untouched.
    """
    expected = state_num_features(state)
    for label, stats in update.items():
        check_dimension(stats.feature_sums, expected, label)
        if expected is None:
            expected = stats.num_features


def merge_into(
    state: Dict[float, SufficientStats],
    update: Mapping[float, SufficientStats],
) -> None:
    """
    Merge update into state in place.

    Existing labels are updated by adding counts and feature sums into
    the existing entry (same SufficientStats and array objects). New
    labels are inserted as given.

    Args:
        state: Global label -> SufficientStats mapping (mutated)
        update: Per-label statistics for one batch

    Raises:
        DimensionMismatch: If update's feature count disagrees with state
    """
    check_update_dimension(state, update)

    for label, stats in update.items():
        existing = state.get(label)
        if existing is None:
            # new label encountered
            state[label] = stats
        else:
            existing.merge_from(stats)
