"""
Validation utilities for streaming Naive Bayes.

Usage:
    >>> from streamingnb.validation import validate_smoothing, as_feature_vector
    >>> 
    >>> lam = validate_smoothing(1.0)
    >>> vec = as_feature_vector([1, 0, 3])
"""

from streamingnb.validation.params import (
    validate_smoothing,
    as_feature_vector,
    check_dimension,
)

__all__ = [
    "validate_smoothing",
    "as_feature_vector",
    "check_dimension",
]
