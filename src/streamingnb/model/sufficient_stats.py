"""
Per-class sufficient statistics for multinomial Naive Bayes.

A class's contribution to the model is fully described by how many
observations carried its label and the elementwise sum of their
feature vectors. Both combine by addition, so partial results from
independent batches can be merged in any order or grouping.

Formula:
    count_ab = count_a + count_b
    sums_ab  = sums_a + sums_b

Memory Budget:
    - SufficientStats: O(n_features) per class
    - Global state: O(n_classes * n_features), independent of samples seen
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict

from streamingnb.constants import FEATURE_DTYPE
from streamingnb.validation import as_feature_vector, check_dimension


def axpy(a: float, x: np.ndarray, y: np.ndarray) -> None:
    """
    In-place y += a * x.

    The single elementwise-add primitive shared by in-batch accumulation
    and cross-batch merging.

    Args:
        a: Scalar multiplier
        x: Source vector
        y: Destination vector (mutated)
    """
    if a == 1.0:
        np.add(y, x, out=y)
    else:
        y += a * x


@dataclass
class SufficientStats:
    """
    Running count and feature-sum vector for one class label.

    Attributes:
        count: Number of observations seen for this label
        feature_sums: Elementwise sum of their feature vectors
    """
    count: int
    feature_sums: np.ndarray

    @classmethod
    def from_vector(cls, features: np.ndarray) -> 'SufficientStats':
        """Start a fresh accumulator from a single observation (copied)."""
        vec = as_feature_vector(features)
        return cls(count=1, feature_sums=np.array(vec, dtype=FEATURE_DTYPE, copy=True))

    @property
    def num_features(self) -> int:
        """Length of the feature-sum vector."""
        return self.feature_sums.shape[0]

    @property
    def total(self) -> float:
        """Total feature mass across all features."""
        return float(self.feature_sums.sum())

    def add_vector(self, features: np.ndarray) -> None:
        """
        Add one observation in place.

        Args:
            features: 1-D feature vector of length num_features

        Raises:
            DimensionMismatch: If the vector length differs
        """
        vec = as_feature_vector(features)
        check_dimension(vec, self.num_features)
        axpy(1.0, vec, self.feature_sums)
        self.count += 1

    def merge_from(self, other: 'SufficientStats') -> None:
        """
        Fold another accumulator into this one in place.

        The feature_sums array object is kept, so existing references to
        it observe the update.

        Raises:
            DimensionMismatch: If the two accumulators differ in length
        """
        check_dimension(other.feature_sums, self.num_features)
        axpy(1.0, other.feature_sums, self.feature_sums)
        self.count += other.count

    def copy(self) -> 'SufficientStats':
        """Deep copy (independent feature_sums array)."""
        return SufficientStats(count=self.count, feature_sums=self.feature_sums.copy())

    @classmethod
    def merge(cls, a: 'SufficientStats', b: 'SufficientStats') -> 'SufficientStats':
        """
        Combine two accumulators without mutating either.

        Args:
            a: First SufficientStats
            b: Second SufficientStats

        Returns:
            New SufficientStats holding the combined counts and sums
        """
        combined = a.copy()
        combined.merge_from(b)
        return combined

    def to_dict(self) -> Dict[str, object]:
        """Convert to dict."""
        return {
            'count': self.count,
            'feature_sums': self.feature_sums.tolist(),
        }
