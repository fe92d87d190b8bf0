"""
Streaming data delivery for incremental training.

Provides batch containers, batch-at-a-time iteration over on-disk data,
and helpers that feed batches into a StreamingNaiveBayes classifier.

Design Principles:
    - Memory-efficient: one mini-batch in memory at a time
    - Format-agnostic: records, columnar batches and DataFrames
    - At-most-once delivery: every batch is handed to update() once

Usage:
    >>> from streamingnb.streaming import iter_batches, train_streaming
    >>> 
    >>> snb = train_streaming(iter_batches(Path("data/stream"), "train"))
    >>> model = snb.snapshot_model()
    >>> 
    >>> # Hook into an external pipeline
    >>> from streamingnb.streaming import foreach_batch_sink
    >>> pipeline.on_batch(foreach_batch_sink(snb))
"""

from streamingnb.streaming.batch import (
    LabeledVector,
    LabeledBatch,
    batch_from_records,
    batch_from_frame,
)

from streamingnb.streaming.iterators import (
    iter_batches,
    count_batches,
    get_batch_names,
)

from streamingnb.streaming.convenience import (
    foreach_batch_sink,
    train_streaming,
    train_streaming_from_dir,
    evaluate_streaming,
    get_split_overview,
    get_default_config,
)

__all__ = [
    # Data containers
    "LabeledVector",
    "LabeledBatch",
    "batch_from_records",
    "batch_from_frame",
    # Iterators
    "iter_batches",
    "count_batches",
    "get_batch_names",
    # Convenience functions
    "foreach_batch_sink",
    "train_streaming",
    "train_streaming_from_dir",
    "evaluate_streaming",
    "get_split_overview",
    "get_default_config",
]
