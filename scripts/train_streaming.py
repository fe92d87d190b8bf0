#!/usr/bin/env python3
"""
Stream a directory of mini-batches through a Naive Bayes classifier.

Trains on one split batch by batch, optionally scores a held-out split
with the resulting snapshot, and writes the model and report as JSON.

INPUT LAYOUT:
<data-dir>/
├── train/
│   ├── batch_000_features.npy   # (N, F)
│   ├── batch_000_labels.npy     # (N,)
│   └── ...
└── test/
    └── ...

OUTPUT FILES:
├── model.json        # Labels, class counts, log priors, log likelihoods
└── evaluation.json   # Held-out accuracy and confusion matrix (--eval-split)

Usage:
    python scripts/train_streaming.py \
        --data-dir /path/to/stream \
        --split train \
        --eval-split test \
        --smoothing 1.0
"""

import argparse
import json
import math
import sys
from pathlib import Path
from datetime import datetime
from typing import Any, Dict
import numpy as np

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from streamingnb import InvalidParameter, EmptyModel, StreamingNaiveBayes
from streamingnb.constants import DEFAULT_SMOOTHING, DEFAULT_SPLITS
from streamingnb.streaming import (
    evaluate_streaming,
    get_split_overview,
    iter_batches,
    train_streaming_from_dir,
)


def to_jsonable(obj: Any) -> Any:
    """
    Reduce training output to plain JSON values.

    Covers what this script writes: numpy arrays and scalars, objects with
    to_dict() (the model snapshot), dicts and lists. Dict keys become
    strings, so float labels read back as "0.0". Non-finite floats, i.e.
    the -inf log-likelihood of a feature never seen with a class under
    zero smoothing, are written as null to keep the files strict JSON.
    """
    if hasattr(obj, 'to_dict'):
        return to_jsonable(obj.to_dict())
    if isinstance(obj, np.ndarray):
        return to_jsonable(obj.tolist())
    if isinstance(obj, np.generic):
        return to_jsonable(obj.item())
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [to_jsonable(item) for item in obj]
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    return obj


def write_json(data: Dict[str, Any], path: Path) -> None:
    """Write one output file and report it."""
    with open(path, 'w') as f:
        json.dump(to_jsonable(data), f, indent=2, allow_nan=False)
    print(f"  wrote {path.name}")


def banner(title: str) -> None:
    print(f"\n--- {title} ---")


def main():
    parser = argparse.ArgumentParser(
        description='Train a streaming multinomial Naive Bayes model batch by batch'
    )
    parser.add_argument('--data-dir', type=Path, required=True,
                        help='Dataset root containing split directories')
    parser.add_argument('--split', type=str, default='train',
                        help='Split to train on')
    parser.add_argument('--eval-split', type=str, default=None,
                        help='Split to evaluate the final snapshot on')
    parser.add_argument('--smoothing', type=float, default=DEFAULT_SMOOTHING,
                        help='Additive smoothing (>= 0)')
    parser.add_argument('--output-dir', type=Path, default=None,
                        help='Output directory (default: data_dir/model_output)')

    args = parser.parse_args()

    if not args.data_dir.exists():
        print(f"❌ ERROR: Data directory not found: {args.data_dir}")
        return 1

    try:
        snb = StreamingNaiveBayes(smoothing=args.smoothing)
    except InvalidParameter as e:
        print(f"❌ ERROR: {e}")
        return 1

    splits = list(DEFAULT_SPLITS)
    for extra in (args.split, args.eval_split):
        if extra and extra not in splits:
            splits.append(extra)
    overview = get_split_overview(args.data_dir, splits)
    if args.split not in overview:
        print(f"❌ ERROR: split '{args.split}' not found; available: {sorted(overview)}")
        return 1

    output_dir = args.output_dir or args.data_dir / 'model_output'
    output_dir.mkdir(parents=True, exist_ok=True)

    banner("STREAMING NAIVE BAYES - TRAINING")
    print(f"Dataset:    {args.data_dir}")
    print(f"Splits:     {', '.join(f'{s} ({n} batches)' for s, n in overview.items())}")
    print(f"Train on:   {args.split}")
    print(f"Smoothing:  {args.smoothing}")
    print(f"Output:     {output_dir}")

    start_time = datetime.now()

    snb, summary = train_streaming_from_dir(args.data_dir, args.split, model=snb)
    print(f"\n  Batches:  {summary['n_batches']}")
    print(f"  Samples:  {summary['total_samples']:,}")
    print(f"  Labels:   {summary['labels']}")

    try:
        model = snb.snapshot_model()
    except EmptyModel as e:
        print(f"❌ ERROR: {e}")
        return 1

    write_json({'training': summary, 'model': model}, output_dir / 'model.json')

    if args.eval_split:
        banner(f"EVALUATION ({args.eval_split})")
        report = evaluate_streaming(model, iter_batches(args.data_dir, args.eval_split))
        if report['accuracy'] is not None:
            print(f"  Accuracy: {report['accuracy']:.4f} on {report['total_samples']:,} samples")
        if report['unseen_label_count']:
            print(f"  ⚠️  {report['unseen_label_count']} samples had labels unseen in training")
        write_json(report, output_dir / 'evaluation.json')

    duration = (datetime.now() - start_time).total_seconds()
    print(f"\n  Duration: {duration:.1f} seconds")

    return 0


if __name__ == '__main__':
    sys.exit(main())
