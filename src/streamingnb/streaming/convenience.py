"""
High-level streaming convenience functions for training and evaluation.

These functions provide simple interfaces for common tasks by wrapping
the batch iterators and the StreamingNaiveBayes classifier.

Design Principles:
    - O(n_classes * n_features) memory: constant regardless of stream length
    - One batch in memory at a time
    - Each batch is delivered to the classifier exactly once

Usage:
    >>> from streamingnb.streaming import train_streaming_from_dir, evaluate_streaming
    >>>
    >>> snb, summary = train_streaming_from_dir(Path("data/stream"), split="train")
    >>> print(f"{summary['total_samples']:,} samples in {summary['n_batches']} batches")
    >>>
    >>> report = evaluate_streaming(snb.snapshot_model(), iter_batches(Path("data/stream"), "test"))
    >>> print(f"Accuracy: {report['accuracy']:.4f}")
"""

import numpy as np
from pathlib import Path
from sklearn.metrics import accuracy_score, confusion_matrix
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple

from streamingnb.constants import (
    DEFAULT_SMOOTHING,
    DEFAULT_SPLITS,
    FEATURE_DTYPE,
    FEATURES_SUFFIX,
    LABELS_SUFFIX,
)
from streamingnb.model import NaiveBayesModel, StreamingNaiveBayes, iter_records
from streamingnb.streaming.iterators import count_batches, iter_batches


def foreach_batch_sink(model: StreamingNaiveBayes) -> Callable[[Any], None]:
    """
    Wrap a classifier as a per-batch callback for an external pipeline.

    The returned callable feeds each batch it receives into model.update().

    Example:
        >>> sink = foreach_batch_sink(snb)
        >>> pipeline.on_batch(sink)
    """
    def sink(batch: Any) -> None:
        model.update(batch)

    return sink


def train_streaming(
    batches: Iterable[Any],
    model: Optional[StreamingNaiveBayes] = None,
    smoothing: float = DEFAULT_SMOOTHING,
) -> StreamingNaiveBayes:
    """
    Fold an iterable of batches into a classifier.

    Args:
        batches: Iterable of batches in any form accepted by update()
        model: Classifier to continue training; a new one is created
            with the given smoothing if None
        smoothing: Smoothing for a newly created classifier

    Returns:
        The trained classifier
    """
    if model is None:
        model = StreamingNaiveBayes(smoothing=smoothing)

    sink = foreach_batch_sink(model)
    for batch in batches:
        sink(batch)

    return model


def train_streaming_from_dir(
    data_dir: Path,
    split: str = 'train',
    model: Optional[StreamingNaiveBayes] = None,
    smoothing: float = DEFAULT_SMOOTHING,
    dtype: np.dtype = np.float64,
    mmap_mode: Optional[str] = None,
) -> Tuple[StreamingNaiveBayes, Dict[str, Any]]:
    """
    Train a classifier over every batch file in a split.

    Memory usage: one batch plus O(n_classes * n_features).

    Args:
        data_dir: Path to dataset root
        split: Split directory name
        model: Classifier to continue training (new one if None)
        smoothing: Smoothing for a newly created classifier
        dtype: Data type for loading features
        mmap_mode: Passed through to iter_batches

    Returns:
        (classifier, summary) where summary has:
            - data_dir: Path to data
            - split: Split name
            - n_batches: Batches consumed
            - batch_names: Batch names in consumption order
            - total_samples: Rows consumed
            - num_features: Established feature count
            - labels: Sorted labels seen so far
            - class_counts: label -> observations seen
    """
    if model is None:
        model = StreamingNaiveBayes(smoothing=smoothing)

    batch_names = []
    total_samples = 0

    for batch in iter_batches(data_dir, split, dtype=dtype, mmap_mode=mmap_mode):
        model.update(batch)
        batch_names.append(batch.name)
        total_samples += batch.n_samples

    summary = {
        'data_dir': str(data_dir),
        'split': split,
        'n_batches': len(batch_names),
        'batch_names': batch_names,
        'total_samples': total_samples,
        'num_features': model.num_features,
        'labels': model.labels,
        'class_counts': model.class_counts(),
    }
    return model, summary


def evaluate_streaming(
    model: NaiveBayesModel,
    batches: Iterable[Any],
) -> Dict[str, Any]:
    """
    Evaluate a model snapshot on held-out batches, one batch at a time.

    Confusion counts are accumulated across batches so memory stays
    O(n_classes^2). Records whose true label is unknown to the model are
    counted as errors and reported separately.

    Args:
        model: Snapshot from StreamingNaiveBayes.snapshot_model()
        batches: Iterable of batches in any form accepted by update()

    Returns:
        Dict with:
            - total_samples: Records scored
            - correct: Records predicted correctly
            - accuracy: correct / total_samples (None if nothing scored)
            - unseen_label_count: Records whose label the model never saw
            - labels: Model labels (row/column order of the matrix)
            - confusion_matrix: (K, K) counts, rows = true, columns = predicted
            - batch_stats: Per-batch {'n', 'accuracy'}
    """
    # Score on class indices; real-valued labels are not valid sklearn targets
    index_of = {float(label): i for i, label in enumerate(model.labels)}
    class_indices = np.arange(model.num_labels)
    confusion = np.zeros((model.num_labels, model.num_labels), dtype=np.int64)
    total = 0
    correct = 0
    unseen = 0
    batch_stats = []

    for batch in batches:
        pairs = list(iter_records(batch))
        if not pairs:
            continue

        y_true = np.array([index_of.get(float(label), -1) for label, _ in pairs])
        X = np.vstack([np.asarray(f, dtype=FEATURE_DTYPE) for _, f in pairs])
        y_pred = np.argmax(model.joint_log_likelihood(X), axis=1)

        known = y_true >= 0
        if known.any():
            # confusion_matrix rejects batches with no known true label
            confusion += confusion_matrix(y_true, y_pred, labels=class_indices)
        correct += int((y_true == y_pred).sum())
        total += len(y_true)
        unseen += int((~known).sum())

        batch_stats.append({
            'n': len(y_true),
            'accuracy': float(accuracy_score(y_true, y_pred)),
        })

    return {
        'total_samples': total,
        'correct': correct,
        'accuracy': correct / total if total > 0 else None,
        'unseen_label_count': unseen,
        'labels': model.labels.tolist(),
        'confusion_matrix': confusion.tolist(),
        'batch_stats': batch_stats,
    }


def get_split_overview(
    data_dir: Path,
    splits: Sequence[str] = DEFAULT_SPLITS,
) -> Dict[str, int]:
    """
    Count batches per split without loading data.

    Split directories missing under data_dir are left out.

    Example:
        >>> get_split_overview(Path("data/stream"))
        {'train': 40, 'test': 8}
    """
    data_dir = Path(data_dir)
    return {
        split: count_batches(data_dir, split)
        for split in splits
        if (data_dir / split).is_dir()
    }


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration for streaming training.

    Returns:
        Dict with library defaults
    """
    return {
        'smoothing': DEFAULT_SMOOTHING,
        'splits': list(DEFAULT_SPLITS),
        'dtype': FEATURE_DTYPE,
        'mmap_mode': None,
        'features_suffix': FEATURES_SUFFIX,
        'labels_suffix': LABELS_SUFFIX,
        'max_batches_in_memory': 1,
    }
