"""
Learning engine interface.

The core never does network math itself. It asks an engine to build,
train and run a model, and reads probabilities back out of the engine's
buffers. ``KerasEngine`` (churn_risk.keras_engine) is the production
implementation.
"""

from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, Protocol

import numpy as np

from .config import ArchitectureSpec, TrainingConfig

# (epoch, logs) -> False to stop training
EpochCallback = Callable[[int, dict], Optional[bool]]


class LearningEngine(Protocol):
    """Operations the pipeline needs from a numerical learning library."""

    def create_model(self, architecture: ArchitectureSpec) -> Any:
        """Build and compile a model; returns an opaque handle."""
        ...

    def train(
        self,
        handle: Any,
        xs: np.ndarray,
        ys: np.ndarray,
        training: TrainingConfig,
        on_epoch_end: Optional[EpochCallback] = None,
    ) -> dict[str, list[float]]:
        """Fit the model; returns per-epoch history (metric -> values)."""
        ...

    def predict(self, handle: Any, xs: np.ndarray) -> Any:
        """Run inference; returns an engine-owned buffer."""
        ...

    def read(self, buffer: Any) -> np.ndarray:
        """Copy values out of an engine-owned buffer."""
        ...

    def evaluate(self, handle: Any, xs: np.ndarray, ys: np.ndarray) -> list[float]:
        """Return [loss, accuracy] on the given rows."""
        ...

    def dispose(self, buffer: Any) -> None:
        """Release an engine-owned buffer or model handle."""
        ...


@contextmanager
def read_predictions(engine: LearningEngine, handle: Any, xs) -> Iterator[np.ndarray]:
    """
    Predict and yield probabilities as a flat float array.

    The engine buffer is released on every exit path, including errors
    raised while reading or while the caller uses the values.
    """
    buffer = engine.predict(handle, np.asarray(xs, dtype=np.float32))
    try:
        yield np.asarray(engine.read(buffer), dtype=float).ravel()
    finally:
        engine.dispose(buffer)
