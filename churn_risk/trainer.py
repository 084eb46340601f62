"""
ClassifierTrainer - configures the learning engine and owns the trained model.

Usage:
    from churn_risk import ClassifierTrainer, TrainingConfig
    from churn_risk.keras_engine import KerasEngine

    trainer = ClassifierTrainer(KerasEngine(), TrainingConfig(epochs=50))
    model = trainer.train(dataset, scaler_state, on_progress=print)
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

import numpy as np
import pandas as pd

from .config import ArchitectureSpec, TrainingConfig, DEFAULT_TRAINING
from .dataset import Dataset
from .engine import LearningEngine
from .errors import EmptyDatasetError, NotTrainedError, TrainingCancelled, TrainingFailure
from .scaler import ScalerState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainingProgress:
    """Metrics reported at the end of one epoch."""

    epoch: int
    epochs: int
    loss: float
    accuracy: float
    val_loss: Optional[float] = None
    val_accuracy: Optional[float] = None

    def summary(self) -> str:
        text = (
            f"Epoch {self.epoch}/{self.epochs} - Loss: {self.loss:.4f}, "
            f"Acc: {self.accuracy:.2%}"
        )
        if self.val_accuracy is not None:
            text += f", Val Acc: {self.val_accuracy:.2%}"
        return text


ProgressCallback = Callable[[TrainingProgress], Optional[bool]]


@dataclass(frozen=True)
class TrainedModel:
    """
    Trained classifier bound to the scaler state it was trained against.

    Attributes:
        handle: Opaque engine model handle
        scaler_state: Scaling applied to every input of this model
        architecture: Architecture requested from the engine
        history: Per-epoch metrics (metric -> values)
        model_id: Unique identifier for logs
    """

    handle: Any
    scaler_state: ScalerState
    architecture: ArchitectureSpec
    history: dict[str, list[float]] = field(default_factory=dict)
    model_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    trained_at: datetime = field(default_factory=datetime.now)

    @property
    def epochs_run(self) -> int:
        return len(self.history.get("loss", []))

    def history_frame(self) -> pd.DataFrame:
        """Training history with one row per epoch."""
        frame = pd.DataFrame(self.history)
        frame.insert(0, "epoch", np.arange(1, len(frame) + 1))
        return frame


class ClassifierTrainer:
    """
    Trains the churn classifier through a LearningEngine.

    The installed model is replaced only when a run completes. A failed or
    cancelled run leaves the previous model (or no model) in place.
    """

    def __init__(self, engine: LearningEngine, config: Optional[TrainingConfig] = None):
        """
        Initialize trainer.

        Args:
            engine: LearningEngine implementation
            config: TrainingConfig. Uses DEFAULT_TRAINING if None.
        """
        self.engine = engine
        self.config = config or DEFAULT_TRAINING
        self._model: Optional[TrainedModel] = None

    @property
    def model(self) -> Optional[TrainedModel]:
        return self._model

    @property
    def is_trained(self) -> bool:
        return self._model is not None

    def require_model(self) -> TrainedModel:
        """Return the installed model or raise NotTrainedError."""
        if self._model is None:
            raise NotTrainedError(
                "No trained model: run training before evaluation or prediction"
            )
        return self._model

    def train(
        self,
        dataset: Dataset,
        scaler_state: ScalerState,
        on_progress: Optional[ProgressCallback] = None,
    ) -> TrainedModel:
        """
        Fit a new classifier on the dataset's train split.

        Args:
            dataset: Normalized train/test split
            scaler_state: State used to normalize the dataset; bound to the model
            on_progress: Called after every epoch; returning False cancels

        Returns:
            The newly installed TrainedModel

        Raises:
            EmptyDatasetError: If the train split has no rows
            TrainingCancelled: If on_progress returned False
            TrainingFailure: If the engine raised during build or fit
        """
        train = dataset.train
        if len(train) == 0:
            raise EmptyDatasetError(
                f"Trainer: train split is empty ({dataset.n_samples} rows in corpus)"
            )

        architecture = self.config.architecture(input_width=train.features.shape[1])
        epochs = self.config.epochs
        cancelled = []

        def _on_epoch_end(epoch: int, logs: dict) -> bool:
            progress = TrainingProgress(
                epoch=epoch + 1,
                epochs=epochs,
                loss=float(logs.get("loss", float("nan"))),
                accuracy=float(logs.get("accuracy", logs.get("acc", float("nan")))),
                val_loss=logs.get("val_loss"),
                val_accuracy=logs.get("val_accuracy", logs.get("val_acc")),
            )
            if epoch % self.config.progress_every == 0:
                logger.info(progress.summary())
            if on_progress is not None and on_progress(progress) is False:
                cancelled.append(progress.epoch)
                return False
            return True

        logger.info(
            "Training on %d samples for %d epochs (batch size %d)",
            len(train), epochs, self.config.batch_size,
        )

        handle = None
        try:
            handle = self.engine.create_model(architecture)
            history = self.engine.train(
                handle, train.features, train.labels, self.config, _on_epoch_end
            )
        except Exception as e:
            if handle is not None:
                self.engine.dispose(handle)
            logger.error("Training failed: %s", e)
            raise TrainingFailure(f"Trainer: learning engine failed during fit: {e}") from e

        if cancelled:
            self.engine.dispose(handle)
            raise TrainingCancelled(
                f"Trainer: training cancelled at epoch {cancelled[0]}/{epochs}"
            )

        model = TrainedModel(
            handle=handle,
            scaler_state=scaler_state,
            architecture=architecture,
            history=history,
        )
        self._model = model

        logger.info("Training complete: model %s (%d epochs)", model.model_id, model.epochs_run)
        return model
