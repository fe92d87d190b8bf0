"""
Library defaults and on-disk batch layout.

These are the values used when the caller does not override them. The
batch layout constants describe how mini-batches are stored on disk
for the file-based iterators.

Batch Layout:
    | File                    | Shape  | Contents               |
    |-------------------------|--------|------------------------|
    | <name>_features.npy     | (N, F) | Feature rows           |
    | <name>_labels.npy       | (N,)   | One label per row      |
"""

from typing import Final, Tuple

# =============================================================================
# Model Parameters
# =============================================================================

DEFAULT_SMOOTHING: Final[float] = 1.0
"""Additive (Laplace) smoothing applied to class and feature counts."""

UID_PREFIX: Final[str] = "snb"
"""Prefix for generated classifier identifiers."""

UID_HEX_LENGTH: Final[int] = 12
"""Number of hex digits appended to UID_PREFIX."""

# =============================================================================
# Batch Columns
# =============================================================================

LABEL_COLUMN: Final[str] = "label"
"""DataFrame column holding the class label."""

FEATURES_COLUMN: Final[str] = "features"
"""DataFrame column holding the feature vector."""

# =============================================================================
# On-disk Layout
# =============================================================================

FEATURES_SUFFIX: Final[str] = "_features"
"""Stem suffix of feature files."""

LABELS_SUFFIX: Final[str] = "_labels"
"""Stem suffix of label files."""

DEFAULT_SPLITS: Final[Tuple[str, ...]] = ("train", "val", "test")
"""Split directory names scanned by get_split_overview()."""

FEATURE_DTYPE: Final[str] = "float64"
"""Accumulation dtype for feature sums."""
