"""
Online sufficient statistics and model derivation for multinomial Naive Bayes.

Modules:
    - sufficient_stats: Per-class (count, feature_sums) accumulator
    - aggregator: Reduce one batch to per-label statistics ("add")
    - merger: Fold batch statistics into the global state ("merge")
    - builder: Derive smoothed log-probabilities on demand
    - streaming_nb: Thread-safe classifier state tying the above together

Usage:
    >>> from streamingnb.model import StreamingNaiveBayes
    >>> 
    >>> snb = StreamingNaiveBayes(smoothing=1.0)
    >>> for batch in batches:
    ...     snb.update(batch)
    >>> model = snb.snapshot_model()
    >>> model.predict(X_new)
"""

from streamingnb.model.sufficient_stats import (
    SufficientStats,
    axpy,
)

from streamingnb.model.aggregator import (
    aggregate_batch,
    frame_to_columns,
    iter_records,
    normalize_label,
)

from streamingnb.model.merger import (
    merge_into,
    check_update_dimension,
    state_num_features,
)

from streamingnb.model.builder import (
    NaiveBayesModel,
    build_model,
)

from streamingnb.model.streaming_nb import (
    StreamingNaiveBayes,
    random_uid,
)

__all__ = [
    # Accumulator
    "SufficientStats",
    "axpy",
    # Add step
    "aggregate_batch",
    "frame_to_columns",
    "iter_records",
    "normalize_label",
    # Merge step
    "merge_into",
    "check_update_dimension",
    "state_num_features",
    # Model derivation
    "NaiveBayesModel",
    "build_model",
    # Classifier state
    "StreamingNaiveBayes",
    "random_uid",
]
