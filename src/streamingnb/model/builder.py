"""
Derive a smoothed multinomial Naive Bayes model from class statistics.

Formula (lambda = smoothing, K = num labels, F = num features):
    log_prior[c]         = ln(n_c + lambda) - ln(N + K * lambda)
    log_likelihood[c, j] = ln(s_cj + lambda) - ln(sum_j s_cj + F * lambda)

where n_c is the class count, N the total count and s_cj the summed
feature j for class c. A zero numerator gives -inf, a valid
log-probability for a feature with no observed mass.

The derivation is a pure function of its input: the same statistics and
smoothing always give bit-identical arrays.
"""

import numpy as np
from dataclasses import dataclass
from scipy.special import logsumexp
from typing import Any, Dict, Mapping, Optional

from streamingnb.exceptions import EmptyModel
from streamingnb.model.sufficient_stats import SufficientStats
from streamingnb.validation import validate_smoothing


def _freeze(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class NaiveBayesModel:
    """
    Immutable snapshot of a multinomial Naive Bayes model.

    Attributes:
        uid: Identifier of the classifier that produced the snapshot
        labels: (K,) distinct class labels, sorted ascending
        log_priors: (K,) smoothed class log-probabilities
        log_likelihoods: (K, F) smoothed per-feature log-probabilities
        class_counts: (K,) observations seen per label
        feature_sums: (K, F) summed feature values per label
        smoothing: Additive smoothing used for the derivation

    Contract:
        len(labels) == len(log_priors) == log_likelihoods.shape[0]
        log_likelihoods.shape[1] == num_features
    """
    uid: str
    labels: np.ndarray
    log_priors: np.ndarray
    log_likelihoods: np.ndarray
    class_counts: np.ndarray
    feature_sums: np.ndarray
    smoothing: float

    def __post_init__(self) -> None:
        for arr in (self.labels, self.log_priors, self.log_likelihoods,
                    self.class_counts, self.feature_sums):
            _freeze(arr)

    @property
    def num_labels(self) -> int:
        return self.labels.shape[0]

    @property
    def num_features(self) -> int:
        return self.log_likelihoods.shape[1]

    @property
    def num_documents(self) -> int:
        """Total observations across all labels."""
        return int(self.class_counts.sum())

    @property
    def pi(self) -> np.ndarray:
        """Alias for log_priors."""
        return self.log_priors

    @property
    def theta(self) -> np.ndarray:
        """Alias for log_likelihoods."""
        return self.log_likelihoods

    def joint_log_likelihood(self, X: Any) -> np.ndarray:
        """
        Unnormalized class log-scores: log P(c) + sum_j x_j log P(j | c).

        Features with -inf log-likelihood contribute nothing when x_j == 0
        and force the class score to -inf when x_j > 0.

        Args:
            X: (n_samples, n_features) or (n_features,) count matrix

        Returns:
            (n_samples, n_labels) array of log-scores
        """
        X = np.atleast_2d(np.asarray(X, dtype=np.float64))
        if X.shape[1] != self.num_features:
            raise ValueError(
                f"X has {X.shape[1]} features, model has {self.num_features}"
            )

        impossible = np.isneginf(self.log_likelihoods)
        theta = np.where(impossible, 0.0, self.log_likelihoods)
        jll = X @ theta.T + self.log_priors

        blocked = (X > 0).astype(np.float64) @ impossible.T.astype(np.float64)
        jll[blocked > 0] = -np.inf
        return jll

    def predict_log_proba(self, X: Any) -> np.ndarray:
        """
        Class log-probabilities, normalized per row with logsumexp.

        A row that every class rules out (possible only with zero
        smoothing) has no normalizer; it is returned as all -inf.
        """
        jll = self.joint_log_likelihood(X)
        out = np.full_like(jll, -np.inf)
        scorable = ~np.all(np.isneginf(jll), axis=1)
        if scorable.any():
            rows = jll[scorable]
            out[scorable] = rows - logsumexp(rows, axis=1, keepdims=True)
        return out

    def predict_proba(self, X: Any) -> np.ndarray:
        """Class probabilities per row; all zeros for a row no class allows."""
        return np.exp(self.predict_log_proba(X))

    def predict(self, X: Any) -> np.ndarray:
        """Most probable label per row."""
        return self.labels[np.argmax(self.joint_log_likelihood(X), axis=1)]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict."""
        return {
            'uid': self.uid,
            'smoothing': self.smoothing,
            'num_labels': self.num_labels,
            'num_features': self.num_features,
            'num_documents': self.num_documents,
            'labels': self.labels.tolist(),
            'class_counts': self.class_counts.tolist(),
            'log_priors': self.log_priors.tolist(),
            'log_likelihoods': self.log_likelihoods.tolist(),
        }


def build_model(
    state: Mapping[float, SufficientStats],
    smoothing: float,
    uid: Optional[str] = None,
) -> NaiveBayesModel:
    """
    Build a NaiveBayesModel from per-label statistics.

    The state is only read. Callers sharing the state across threads
    should pass a private copy.

    Args:
        state: label -> SufficientStats mapping
        smoothing: Additive smoothing (>= 0)
        uid: Identifier recorded on the model

    Returns:
        NaiveBayesModel with labels sorted ascending

    Raises:
        EmptyModel: If state has no labels
        InvalidParameter: If smoothing is invalid

    Example:
        >>> model = build_model(state, smoothing=1.0)
        >>> np.exp(model.log_priors).sum()
        1.0
    """
    lam = validate_smoothing(smoothing)
    num_labels = len(state)
    if num_labels == 0:
        raise EmptyModel("No labeled data observed yet; nothing to build")

    labels = sorted(state)
    counts = np.array([state[label].count for label in labels], dtype=np.int64)
    sums = np.vstack([state[label].feature_sums for label in labels]).astype(np.float64)
    num_documents = int(counts.sum())
    num_features = sums.shape[1]

    with np.errstate(divide='ignore', invalid='ignore'):
        pi_log_denom = np.log(num_documents + num_labels * lam)
        log_priors = np.log(counts + lam) - pi_log_denom

        numerators = sums + lam
        theta_log_denom = np.log(sums.sum(axis=1) + num_features * lam)
        log_likelihoods = np.log(numerators) - theta_log_denom[:, np.newaxis]

    # ln(0) - ln(0) is nan; a zero-mass feature is -inf regardless of the row total
    log_likelihoods[numerators == 0] = -np.inf

    return NaiveBayesModel(
        uid=uid if uid is not None else "",
        labels=np.array(labels, dtype=np.float64),
        log_priors=log_priors,
        log_likelihoods=log_likelihoods,
        class_counts=counts,
        feature_sums=sums,
        smoothing=lam,
    )
