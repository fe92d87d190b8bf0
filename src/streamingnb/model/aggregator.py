"""
Batch aggregation: reduce one mini-batch to per-label sufficient statistics.

This is the "add" step. It builds a fresh local mapping and never touches
the global state, so a failure part-way through a batch leaves nothing to
roll back.

Accepted batch forms:
    - Columnar: any object with `labels` (N,) and `features` (N, F)
      attributes, e.g. LabeledBatch
    - pandas DataFrame with a label column and either a features column
      of vectors or one column per feature
    - Iterable of records, each a LabeledVector-like object with
      `label`/`features` attributes or a (label, features) pair
"""

import math
import numpy as np
import pandas as pd
from typing import Any, Dict, Iterator, Optional, Tuple

from streamingnb.constants import FEATURE_DTYPE, FEATURES_COLUMN, LABEL_COLUMN
from streamingnb.model.sufficient_stats import SufficientStats
from streamingnb.validation import as_feature_vector, check_dimension


def normalize_label(label: Any) -> float:
    """
    Convert a label to the float key used for class lookup.

    Raises:
        ValueError: If the label is NaN or not numeric
    """
    key = float(label)
    if math.isnan(key):
        raise ValueError("Label must not be NaN")
    return key


def _holds_vectors(frame: pd.DataFrame, column: Optional[str]) -> bool:
    """True if column exists and its first non-null cell is list-like."""
    if column is None or column not in frame.columns:
        return False
    cells = frame[column].dropna()
    if cells.empty:
        return False
    return pd.api.types.is_list_like(cells.iloc[0])


def frame_to_columns(
    frame: pd.DataFrame,
    label_column: str = LABEL_COLUMN,
    features_column: Optional[str] = FEATURES_COLUMN,
) -> Tuple[np.ndarray, Any]:
    """
    Split a DataFrame into (labels, features).

    Uses the features column when it holds vectors, otherwise every
    non-label column is one feature (a scalar column that happens to be
    named like the features column is just another feature). Ragged
    vectors are returned as a list of rows so callers can report the
    offending record.
    """
    if label_column not in frame.columns:
        raise ValueError(f"DataFrame has no '{label_column}' column")

    labels = frame[label_column].to_numpy()
    if _holds_vectors(frame, features_column):
        cells = frame[features_column].tolist()
        if not cells:
            return labels, np.empty((0, 0), dtype=FEATURE_DTYPE)
        lengths = {len(c) for c in cells}
        if len(lengths) > 1:
            # Let the row loop report the first offending record
            return labels, cells
        features = np.asarray(cells, dtype=FEATURE_DTYPE)
    else:
        features = frame.drop(columns=[label_column]).to_numpy(dtype=FEATURE_DTYPE)
    return labels, features


def iter_records(batch: Any) -> Iterator[Tuple[Any, Any]]:
    """
    Iterate (label, features) pairs of any accepted batch form.

    Args:
        batch: LabeledBatch, DataFrame, or iterable of records

    Yields:
        (raw_label, raw_features) per record
    """
    if isinstance(batch, pd.DataFrame):
        labels, features = frame_to_columns(batch)
        yield from zip(labels, features)
        return

    if hasattr(batch, 'labels') and hasattr(batch, 'features'):
        labels = np.asarray(batch.labels)
        features = batch.features
        if len(labels) != len(features):
            raise ValueError(
                f"Batch has {len(labels)} labels but {len(features)} feature rows"
            )
        yield from zip(labels, features)
        return

    for record in batch:
        if hasattr(record, 'label') and hasattr(record, 'features'):
            yield record.label, record.features
        else:
            label, features = record
            yield label, features


def aggregate_batch(
    batch: Any,
    num_features: Optional[int] = None,
) -> Dict[float, SufficientStats]:
    """
    Reduce a batch to one SufficientStats per distinct label.

    Single pass, combine-by-key: the first record of a label starts a
    fresh accumulator from a copy of its features, later records are
    added elementwise and bump the count. Order within the batch does
    not matter.

    Args:
        batch: Any accepted batch form (see module docstring)
        num_features: Feature count already established by earlier
            batches. None lets the first record of this batch set it.

    Returns:
        Dict mapping label -> SufficientStats for labels in this batch.
        Empty for an empty batch.

    Raises:
        DimensionMismatch: If a record's length disagrees with the
            established (or batch-established) feature count
        ValueError: If a label is NaN or a record is not 1-D

    Example:
        >>> local = aggregate_batch([(0.0, [1, 0]), (0.0, [1, 0]), (1.0, [0, 1])])
        >>> local[0.0].count, local[0.0].feature_sums.tolist()
        (2, [2.0, 0.0])
    """
    local: Dict[float, SufficientStats] = {}
    expected = num_features

    for raw_label, raw_features in iter_records(batch):
        label = normalize_label(raw_label)
        vec = as_feature_vector(raw_features)
        check_dimension(vec, expected, label)
        if expected is None:
            expected = vec.shape[0]

        stats = local.get(label)
        if stats is None:
            local[label] = SufficientStats.from_vector(vec)
        else:
            stats.add_vector(vec)

    return local
