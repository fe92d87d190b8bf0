"""
Memory-efficient streaming iterators over on-disk mini-batches.

This module provides generators for iterating over a dataset one batch
file at a time, keeping memory usage bounded regardless of dataset size.

Layout:
    <data_dir>/<split>/<name>_features.npy   (N, F)
    <data_dir>/<split>/<name>_labels.npy     (N,)

Design Principles:
    - Process one batch at a time (never load the entire split)
    - Explicit memory management with gc.collect() after each batch
    - Support memory-mapped files for even lower memory usage

Functions:
    iter_batches: Iterate over labeled batches in name order
    count_batches: Count batches without loading data
    get_batch_names: Get sorted list of batch names without loading data
"""

import gc
import warnings
import numpy as np
from pathlib import Path
from typing import Generator, List, Optional

from streamingnb.constants import FEATURES_SUFFIX, LABELS_SUFFIX
from streamingnb.streaming.batch import LabeledBatch


def _feature_files(split_dir: Path) -> List[Path]:
    return sorted(split_dir.glob(f'*{FEATURES_SUFFIX}.npy'))


def iter_batches(
    data_dir: Path,
    split: str,
    dtype: np.dtype = np.float64,
    mmap_mode: Optional[str] = None,
) -> Generator[LabeledBatch, None, None]:
    """
    Iterate over batches in a split, yielding one batch at a time.

    Each batch is loaded, handed to the caller, then freed before the
    next one is read.

    Args:
        data_dir: Path to dataset root
        split: Split directory name (e.g. 'train')
        dtype: Data type for features
        mmap_mode: If 'r', use memory-mapped files (read-only)

    Yields:
        LabeledBatch for each batch file pair, in name order

    Raises:
        FileNotFoundError: If split directory doesn't exist
        ValueError: If a features file is not 2-D or disagrees in
            length with its labels file

    Example:
        >>> snb = StreamingNaiveBayes()
        >>> for batch in iter_batches(Path("data/stream"), "train"):
        ...     snb.update(batch)
    """
    split_dir = Path(data_dir) / split
    if not split_dir.exists():
        raise FileNotFoundError(f"Split directory not found: {split_dir}")

    for data_file in _feature_files(split_dir):
        name = data_file.stem[:-len(FEATURES_SUFFIX)]
        label_file = data_file.parent / f"{name}{LABELS_SUFFIX}.npy"

        if not label_file.exists():
            warnings.warn(f"Label file not found for batch {name}, skipping")
            continue

        if mmap_mode:
            raw_features = np.load(data_file, mmap_mode=mmap_mode)
            labels = np.load(label_file, mmap_mode=mmap_mode)
        else:
            raw_features = np.load(data_file)
            labels = np.load(label_file)

        features = raw_features.astype(dtype, copy=False)

        yield LabeledBatch(
            labels=np.asarray(labels).reshape(-1),
            features=features,
            name=name,
        )

        # Explicit cleanup (important for memory)
        if not mmap_mode:
            del features, labels, raw_features
            gc.collect()


def count_batches(data_dir: Path, split: str) -> int:
    """
    Count batches in a split without loading data.

    Returns:
        Number of feature files in the split (0 if the split is missing)
    """
    split_dir = Path(data_dir) / split
    if not split_dir.exists():
        return 0
    return len(_feature_files(split_dir))


def get_batch_names(data_dir: Path, split: str) -> List[str]:
    """
    Get sorted list of batch names in a split without loading data.

    Example:
        >>> get_batch_names(Path("data/stream"), "train")
        ['batch_000', 'batch_001']
    """
    split_dir = Path(data_dir) / split
    if not split_dir.exists():
        return []
    return [f.stem[:-len(FEATURES_SUFFIX)] for f in _feature_files(split_dir)]
