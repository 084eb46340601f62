"""
Dataset construction and deterministic train/test split.

The split is a contiguous prefix/suffix by row order (no shuffling), so
evaluation is reproducible given the ingestion order.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .encoder import FeatureEncoder
from .errors import EmptyDatasetError
from .records import CustomerRecord
from .scaler import ScalerState, apply_scaler, fit_scaler

logger = logging.getLogger(__name__)

TRAIN_FRACTION = 0.8
CHURN_VALUES = {"yes", "1"}


def churn_label(value: Optional[str]) -> int:
    """1 if the Churn field is "Yes" or "1", else 0."""
    if value is None:
        return 0
    return int(str(value).strip().lower() in CHURN_VALUES)


@dataclass(frozen=True)
class Split:
    """Features (N x width) and labels (N,) for one side of the split."""

    features: np.ndarray
    labels: np.ndarray

    def __len__(self) -> int:
        return len(self.labels)


@dataclass(frozen=True)
class Dataset:
    """Train/test split of the normalized corpus."""

    train: Split
    test: Split
    split_index: int

    @property
    def n_samples(self) -> int:
        return len(self.train) + len(self.test)


def split_dataset(features, labels, train_fraction: float = TRAIN_FRACTION) -> Dataset:
    """
    Split rows into train = [0, split_index) and test = [split_index, N).

    Args:
        features: N x width normalized vectors
        labels: N labels (0/1)
        train_fraction: Share of rows in the train prefix

    Raises:
        EmptyDatasetError: If N == 0
        ValueError: If features and labels differ in length
    """
    features = np.asarray(features, dtype=float)
    labels = np.asarray(labels, dtype=float).ravel()
    n = len(labels)

    if n == 0:
        raise EmptyDatasetError("Dataset splitter: no rows to split (N == 0)")
    if len(features) != n:
        raise ValueError(
            f"Dataset splitter: {len(features)} feature rows but {n} labels"
        )

    split_index = int(math.floor(train_fraction * n))
    return Dataset(
        train=Split(features[:split_index], labels[:split_index]),
        test=Split(features[split_index:], labels[split_index:]),
        split_index=split_index,
    )


def build_dataset(
    records: list[CustomerRecord],
    encoder: Optional[FeatureEncoder] = None,
    train_fraction: float = TRAIN_FRACTION,
) -> tuple[Dataset, ScalerState]:
    """
    Encode, fit the scaler on the full corpus, normalize and split.

    Returns:
        Tuple of (dataset, scaler_state)

    Raises:
        EmptyDatasetError: If there are no records
    """
    if not records:
        raise EmptyDatasetError("Dataset builder: zero customer records loaded")

    encoder = encoder or FeatureEncoder()
    raw = encoder.encode_records(records).to_numpy(dtype=float)
    labels = np.array([churn_label(r.churn) for r in records], dtype=float)

    state = fit_scaler(raw)
    dataset = split_dataset(apply_scaler(raw, state), labels, train_fraction)

    logger.info(
        "Processed %d samples with %d features (train=%d, test=%d, churn rate=%.1f%%)",
        dataset.n_samples,
        raw.shape[1],
        len(dataset.train),
        len(dataset.test),
        labels.mean() * 100,
    )
    return dataset, state
