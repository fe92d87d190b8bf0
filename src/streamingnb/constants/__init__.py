"""
Constants for streaming Naive Bayes training.

Re-exports the library defaults and on-disk batch layout.
"""

from streamingnb.constants.defaults import (
    DEFAULT_SMOOTHING,
    UID_PREFIX,
    UID_HEX_LENGTH,
    LABEL_COLUMN,
    FEATURES_COLUMN,
    FEATURES_SUFFIX,
    LABELS_SUFFIX,
    DEFAULT_SPLITS,
    FEATURE_DTYPE,
)

__all__ = [
    "DEFAULT_SMOOTHING",
    "UID_PREFIX",
    "UID_HEX_LENGTH",
    "LABEL_COLUMN",
    "FEATURES_COLUMN",
    "FEATURES_SUFFIX",
    "LABELS_SUFFIX",
    "DEFAULT_SPLITS",
    "FEATURE_DTYPE",
]
