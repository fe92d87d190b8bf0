"""
Streaming multinomial Naive Bayes classifier state.

Holds the running label -> SufficientStats mapping and the smoothing
parameter, and ties together aggregation, merging and model building.

Thread Safety:
    One lock guards every read and mutation of the class statistics.
    Aggregation of an incoming batch runs outside the lock on a private
    mapping; only the dimension check and merge run under it. Snapshots
    copy the statistics under the lock and derive the model outside it.

Usage:
    >>> snb = StreamingNaiveBayes(smoothing=1.0)
    >>> snb.update([(0.0, [1, 0]), (0.0, [1, 0]), (1.0, [0, 1])])
    >>> model = snb.snapshot_model()
    >>> model.labels
    array([0., 1.])
"""

import threading
import uuid
from typing import Any, Dict, List, Optional

from streamingnb.constants import DEFAULT_SMOOTHING, UID_HEX_LENGTH, UID_PREFIX
from streamingnb.model.aggregator import aggregate_batch
from streamingnb.model.builder import NaiveBayesModel, build_model
from streamingnb.model.merger import merge_into, state_num_features
from streamingnb.model.sufficient_stats import SufficientStats
from streamingnb.validation import validate_smoothing


def random_uid(prefix: str = UID_PREFIX) -> str:
    """Random identifier of the form '<prefix>_<12 hex digits>'."""
    return f"{prefix}_{uuid.uuid4().hex[-UID_HEX_LENGTH:]}"


class StreamingNaiveBayes:
    """
    Incrementally trained multinomial Naive Bayes.

    Labels are discovered as data arrives; the number of classes is never
    declared up front. Once a label has been seen it is never removed.

    Attributes:
        uid: Identifier carried onto every snapshot
    """

    def __init__(self, smoothing: float = DEFAULT_SMOOTHING, uid: Optional[str] = None) -> None:
        self.uid = uid if uid is not None else random_uid()
        self._smoothing = validate_smoothing(smoothing)
        self._counts_by_class: Dict[float, SufficientStats] = {}
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Parameters
    # -------------------------------------------------------------------------

    @property
    def smoothing(self) -> float:
        """Additive smoothing used by snapshot_model()."""
        return self._smoothing

    @smoothing.setter
    def smoothing(self, value: float) -> None:
        self._smoothing = validate_smoothing(value)

    def set_smoothing(self, value: float) -> 'StreamingNaiveBayes':
        """
        Set the smoothing parameter (default 1.0).

        Raises:
            InvalidParameter: If value < 0 or not finite
        """
        self.smoothing = value
        return self

    def get_params(self) -> Dict[str, Any]:
        """Current parameter values."""
        return {'smoothing': self._smoothing}

    def copy(self, **overrides: Any) -> 'StreamingNaiveBayes':
        """
        New, empty classifier with the same parameters.

        Accumulated statistics are not copied.

        Args:
            **overrides: Parameter values to replace (e.g. smoothing=0.5)
        """
        params = self.get_params()
        unknown = set(overrides) - set(params)
        if unknown:
            raise TypeError(f"Unknown parameters: {sorted(unknown)}")
        params.update(overrides)
        return StreamingNaiveBayes(**params)

    # -------------------------------------------------------------------------
    # Training
    # -------------------------------------------------------------------------

    def update(self, batch: Any) -> None:
        """
        Update the class statistics with a new batch of labeled vectors.

        Each batch must be passed exactly once; there is no deduplication.

        Args:
            batch: LabeledBatch, DataFrame, or iterable of records

        Raises:
            DimensionMismatch: If any vector's length disagrees with the
                established feature count. The state is left unchanged.
        """
        with self._lock:
            expected = state_num_features(self._counts_by_class)

        local = aggregate_batch(batch, num_features=expected)
        if not local:
            return

        with self._lock:
            # Another update may have set the dimensionality meanwhile
            merge_into(self._counts_by_class, local)

    def has_model(self) -> bool:
        """True once any labeled data has been observed."""
        with self._lock:
            return bool(self._counts_by_class)

    @property
    def num_features(self) -> Optional[int]:
        """Established feature count, or None before any data."""
        with self._lock:
            return state_num_features(self._counts_by_class)

    @property
    def labels(self) -> List[float]:
        """Labels seen so far, sorted ascending."""
        with self._lock:
            return sorted(self._counts_by_class)

    def class_counts(self) -> Dict[float, int]:
        """Observations seen per label, keyed in ascending label order."""
        with self._lock:
            return {label: self._counts_by_class[label].count
                    for label in sorted(self._counts_by_class)}

    # -------------------------------------------------------------------------
    # Model
    # -------------------------------------------------------------------------

    def snapshot_model(self) -> NaiveBayesModel:
        """
        Derive class and feature log-probabilities from the current counts.

        Returns:
            Immutable NaiveBayesModel consistent with a single point in time

        Raises:
            EmptyModel: If no data has been observed
        """
        with self._lock:
            state = {label: stats.copy() for label, stats in self._counts_by_class.items()}
            smoothing = self._smoothing
        return build_model(state, smoothing, uid=self.uid)

    def __repr__(self) -> str:
        with self._lock:
            n_labels = len(self._counts_by_class)
        return (
            f"StreamingNaiveBayes(uid={self.uid!r}, smoothing={self._smoothing}, "
            f"n_labels={n_labels})"
        )
