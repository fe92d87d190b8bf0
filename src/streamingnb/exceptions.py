"""
Error kinds raised by streaming Naive Bayes training.

All errors are scoped to the call that raised them; none leaves the
accumulated class statistics in a partially updated state.
"""

from typing import Optional


class StreamingNBError(Exception):
    """Base class for all streamingnb errors."""


class DimensionMismatch(StreamingNBError, ValueError):
    """
    A feature vector's length disagrees with the established feature count.
    
    Attributes:
        expected: Feature count already established
        actual: Length of the offending vector
        label: Label of the offending record, if known
    """
    
    def __init__(self, expected: int, actual: int, label: Optional[float] = None) -> None:
        self.expected = expected
        self.actual = actual
        self.label = label
        where = f" (label={label})" if label is not None else ""
        super().__init__(
            f"Feature vector has {actual} features, expected {expected}{where}"
        )


class InvalidParameter(StreamingNBError, ValueError):
    """A configuration parameter is out of its valid range."""


class EmptyModel(StreamingNBError, RuntimeError):
    """A model was requested before any labeled data was observed."""
