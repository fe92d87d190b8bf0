"""
Mini-batch containers for streaming training.

This module provides containers for holding one mini-batch of labeled
feature vectors, the unit of work delivered to
StreamingNaiveBayes.update().

Classes:
    LabeledVector: One immutable (label, features) record
    LabeledBatch: One mini-batch in columnar form (labels, features matrix)
"""

import numpy as np
import pandas as pd
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from streamingnb.constants import FEATURE_DTYPE, FEATURES_COLUMN, LABEL_COLUMN
from streamingnb.model.aggregator import frame_to_columns


@dataclass(frozen=True, eq=False)
class LabeledVector:
    """
    A single labeled observation.

    Attributes:
        label: Class label (real-valued, used as a discrete key)
        features: (F,) read-only feature vector
    """
    label: float
    features: np.ndarray

    def __post_init__(self) -> None:
        features = np.array(self.features, dtype=FEATURE_DTYPE, copy=True)
        if features.ndim != 1:
            raise ValueError(f"features must be 1-D, got shape {features.shape}")
        features.setflags(write=False)
        object.__setattr__(self, 'label', float(self.label))
        object.__setattr__(self, 'features', features)

    @property
    def num_features(self) -> int:
        return self.features.shape[0]


@dataclass
class LabeledBatch:
    """
    Container for one mini-batch in columnar form.

    Attributes:
        labels: (N,) label array
        features: (N, F) feature array
        name: Optional batch name (file stem for on-disk batches)

    Contract:
        len(labels) == features.shape[0]
    """
    labels: np.ndarray     # (N,)
    features: np.ndarray   # (N, F)
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.features.ndim != 2:
            raise ValueError(
                f"features must be 2-D (n_samples, n_features), got shape {self.features.shape}"
            )
        if self.labels.shape[0] != self.features.shape[0]:
            raise ValueError(
                f"{self.labels.shape[0]} labels for {self.features.shape[0]} feature rows"
            )

    @property
    def n_samples(self) -> int:
        return self.features.shape[0]

    @property
    def num_features(self) -> int:
        return self.features.shape[1]

    @property
    def memory_bytes(self) -> int:
        """Approximate memory usage in bytes."""
        return self.features.nbytes + self.labels.nbytes

    @property
    def memory_mb(self) -> float:
        """Memory usage in megabytes."""
        return self.memory_bytes / (1024 * 1024)

    def __len__(self) -> int:
        return self.n_samples

    def __iter__(self) -> Iterator[LabeledVector]:
        for label, row in zip(self.labels, self.features):
            yield LabeledVector(label=label, features=row)

    def to_frame(self) -> pd.DataFrame:
        """DataFrame with a label column and a features column of vectors."""
        return pd.DataFrame({
            LABEL_COLUMN: self.labels,
            FEATURES_COLUMN: list(self.features),
        })


def batch_from_records(
    records: Iterable[Any],
    name: Optional[str] = None,
) -> LabeledBatch:
    """
    Build a LabeledBatch from LabeledVector objects or (label, features) pairs.

    Args:
        records: Iterable of records
        name: Optional batch name

    Returns:
        LabeledBatch

    Raises:
        ValueError: If records have differing feature lengths

    Example:
        >>> batch = batch_from_records([(0.0, [1, 0]), (1.0, [0, 1])])
        >>> batch.features.shape
        (2, 2)
    """
    labels = []
    rows = []
    for record in records:
        if isinstance(record, LabeledVector):
            labels.append(record.label)
            rows.append(record.features)
        else:
            label, features = record
            labels.append(float(label))
            rows.append(np.asarray(features, dtype=FEATURE_DTYPE))

    if not rows:
        return LabeledBatch(
            labels=np.empty(0, dtype=np.float64),
            features=np.empty((0, 0), dtype=FEATURE_DTYPE),
            name=name,
        )

    lengths = {row.shape[0] for row in rows}
    if len(lengths) > 1:
        raise ValueError(f"Records have differing feature lengths: {sorted(lengths)}")

    return LabeledBatch(
        labels=np.asarray(labels, dtype=np.float64),
        features=np.vstack(rows),
        name=name,
    )


def batch_from_frame(
    frame: pd.DataFrame,
    label_column: str = LABEL_COLUMN,
    features_column: Optional[str] = FEATURES_COLUMN,
    name: Optional[str] = None,
) -> LabeledBatch:
    """
    Build a LabeledBatch from a DataFrame.

    Two layouts are supported:
        - Long: one column of feature vectors (features_column)
        - Wide: every non-label column is one feature

    Args:
        frame: Source DataFrame
        label_column: Column holding labels
        features_column: Column holding vectors; if absent from the
            frame (or None), the wide layout is used
        name: Optional batch name

    Returns:
        LabeledBatch

    Raises:
        ValueError: If the label column is missing or vectors are ragged
    """
    labels, features = frame_to_columns(frame, label_column, features_column)
    if isinstance(features, list):
        lengths = sorted({len(row) for row in features})
        raise ValueError(f"Feature vectors have differing lengths: {lengths}")

    return LabeledBatch(
        labels=np.asarray(labels, dtype=np.float64),
        features=features,
        name=name,
    )
