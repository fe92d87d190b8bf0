"""
Parameter and feature-vector validation.

Functions:
    validate_smoothing: Check an additive smoothing value
    as_feature_vector: Coerce a record's features to a dense 1-D vector
    check_dimension: Compare a vector length with an established count
"""

import math
import numbers
import numpy as np
from typing import Any, Optional

from streamingnb.constants import FEATURE_DTYPE
from streamingnb.exceptions import DimensionMismatch, InvalidParameter


def validate_smoothing(value: Any) -> float:
    """
    Validate an additive smoothing parameter.
    
    Args:
        value: Candidate smoothing value
    
    Returns:
        The value as a float
    
    Raises:
        InvalidParameter: If value is not a finite real number >= 0
    
    Example:
        >>> validate_smoothing(0.5)
        0.5
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameter(
            f"smoothing must be a real number, got {type(value).__name__}"
        )
    
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise InvalidParameter(f"smoothing must be finite and >= 0, got {value}")
    
    return value


def as_feature_vector(features: Any) -> np.ndarray:
    """
    Coerce features to a dense 1-D float vector.
    
    Args:
        features: Array-like of numbers
    
    Returns:
        1-D float64 array (a view when the input already matches)
    
    Raises:
        ValueError: If features are not one-dimensional
    """
    vec = np.asarray(features, dtype=FEATURE_DTYPE)
    if vec.ndim != 1:
        raise ValueError(f"Feature vector must be 1-D, got shape {vec.shape}")
    return vec


def check_dimension(
    vec: np.ndarray,
    num_features: Optional[int],
    label: Optional[float] = None,
) -> None:
    """
    Raise DimensionMismatch if vec does not have num_features entries.
    
    A num_features of None means no dimensionality is established yet.
    """
    if num_features is not None and vec.shape[0] != num_features:
        raise DimensionMismatch(num_features, vec.shape[0], label)
