"""
streamingnb - Incremental multinomial Naive Bayes over streaming mini-batches.

Trains a multinomial Naive Bayes classifier one labeled batch at a time
without holding the dataset in memory. Per-class counts and feature sums
are aggregated per batch, merged into a running state, and turned into
Laplace-smoothed log-probabilities on demand.

Modules:
    constants: Library defaults and on-disk batch layout
    model: Sufficient statistics, aggregation, merging, model derivation
    streaming: Batch containers, iterators, training helpers
    validation: Parameter and feature-vector checks
    exceptions: DimensionMismatch, InvalidParameter, EmptyModel

Quick Start:
    >>> from streamingnb import StreamingNaiveBayes
    >>> 
    >>> snb = StreamingNaiveBayes(smoothing=1.0)
    >>> snb.update([(0.0, [1, 0]), (0.0, [1, 0]), (1.0, [0, 1])])
    >>> model = snb.snapshot_model()
    >>> model.log_priors            # [ln(3/5), ln(2/5)]
    >>> model.predict([[3, 0]])     # array([0.])
"""

__version__ = "0.1.0"

from streamingnb.constants import DEFAULT_SMOOTHING

from streamingnb.exceptions import (
    StreamingNBError,
    DimensionMismatch,
    InvalidParameter,
    EmptyModel,
)

from streamingnb.model import (
    SufficientStats,
    NaiveBayesModel,
    StreamingNaiveBayes,
    aggregate_batch,
    merge_into,
    build_model,
)

from streamingnb.streaming import (
    LabeledVector,
    LabeledBatch,
)

__all__ = [
    # Version
    "__version__",
    # Defaults
    "DEFAULT_SMOOTHING",
    # Errors
    "StreamingNBError",
    "DimensionMismatch",
    "InvalidParameter",
    "EmptyModel",
    # Core
    "SufficientStats",
    "NaiveBayesModel",
    "StreamingNaiveBayes",
    "aggregate_batch",
    "merge_into",
    "build_model",
    # Records
    "LabeledVector",
    "LabeledBatch",
]
