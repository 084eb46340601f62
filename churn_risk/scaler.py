"""
Min-max scaler for encoded feature vectors.

fit_scaler records the per-feature min/max of a corpus; apply_scaler maps
values to (value - min) / (max - min). Constant features normalize to 0.
Values outside the fitted range are NOT clamped, so out-of-range inputs
stay visible downstream (see out_of_range_mask).
"""

import hashlib
from dataclasses import dataclass

import numpy as np
import pandas as pd

from .schemas import FEATURE_NAMES


@dataclass(frozen=True)
class ScalerState:
    """
    Fitted min/max per feature index.

    Attributes:
        mins: Minimum per feature index
        maxs: Maximum per feature index (always >= mins)
        n_samples: Number of vectors the state was fitted on
    """

    mins: tuple[float, ...]
    maxs: tuple[float, ...]
    n_samples: int

    @property
    def width(self) -> int:
        return len(self.mins)

    @property
    def ranges(self) -> dict[int, dict[str, float]]:
        """Feature index -> {"min", "max"}."""
        return {
            idx: {"min": lo, "max": hi}
            for idx, (lo, hi) in enumerate(zip(self.mins, self.maxs))
        }

    @property
    def fingerprint(self) -> str:
        """Stable identifier of the fitted range, used to bind it to a model."""
        payload = repr((self.mins, self.maxs, self.n_samples)).encode()
        return hashlib.sha1(payload).hexdigest()[:12]

    def to_frame(self) -> pd.DataFrame:
        """Ranges as a DataFrame indexed by feature name."""
        names = FEATURE_NAMES if self.width == len(FEATURE_NAMES) else range(self.width)
        return pd.DataFrame({"min": self.mins, "max": self.maxs}, index=list(names))


def _as_matrix(vectors) -> np.ndarray:
    matrix = np.asarray(vectors, dtype=float)
    if matrix.ndim == 1:
        matrix = matrix.reshape(1, -1)
    return matrix


def fit_scaler(vectors, width: int = len(FEATURE_NAMES)) -> ScalerState:
    """
    Compute per-feature min and max over a corpus.

    Args:
        vectors: N x width array-like (DataFrame, ndarray or list of vectors)
        width: Feature count, used when the corpus is empty

    Returns:
        ScalerState; an empty corpus yields an all-zero state
    """
    matrix = _as_matrix(vectors) if len(vectors) else np.zeros((0, width))
    if matrix.shape[0] == 0:
        zeros = tuple(0.0 for _ in range(matrix.shape[1] or width))
        return ScalerState(mins=zeros, maxs=zeros, n_samples=0)

    return ScalerState(
        mins=tuple(float(v) for v in matrix.min(axis=0)),
        maxs=tuple(float(v) for v in matrix.max(axis=0)),
        n_samples=int(matrix.shape[0]),
    )


def apply_scaler(vectors, state: ScalerState) -> np.ndarray:
    """
    Normalize vectors against a fitted state.

    Args:
        vectors: One vector (shape (width,)) or a matrix (N x width)

    Returns:
        Array with the same shape as the input
    """
    single = np.ndim(vectors) == 1
    matrix = _as_matrix(vectors)
    mins = np.asarray(state.mins, dtype=float)
    span = np.asarray(state.maxs, dtype=float) - mins

    with np.errstate(divide="ignore", invalid="ignore"):
        scaled = np.where(span == 0, 0.0, (matrix - mins) / np.where(span == 0, 1.0, span))

    return scaled[0] if single else scaled


def out_of_range_mask(vectors, state: ScalerState) -> np.ndarray:
    """Boolean per row: True if any raw value lies outside the fitted range."""
    matrix = _as_matrix(vectors)
    mins = np.asarray(state.mins, dtype=float)
    maxs = np.asarray(state.maxs, dtype=float)
    return ((matrix < mins) | (matrix > maxs)).any(axis=1)
