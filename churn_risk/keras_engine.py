"""
TensorFlow/Keras implementation of the learning engine.

Builds a Sequential dense network from an ArchitectureSpec:
Dense -> [BatchNormalization] -> [Dropout] per hidden layer, then a
single sigmoid unit, compiled with Adam and binary cross-entropy.
"""

from typing import Optional

import numpy as np
import tensorflow as tf
from tensorflow.keras import layers, regularizers

from .config import ArchitectureSpec, TrainingConfig
from .engine import EpochCallback


class KerasEngine:
    """LearningEngine backed by tf.keras."""

    def __init__(self, verbose: int = 0):
        self.verbose = verbose
        self._live: set[int] = set()

    @property
    def live_buffers(self) -> int:
        """Prediction buffers handed out and not yet disposed."""
        return len(self._live)

    def create_model(self, architecture: ArchitectureSpec) -> tf.keras.Model:
        model = tf.keras.Sequential(name="churn_classifier")
        model.add(layers.Input(shape=(architecture.input_width,)))

        for layer in architecture.hidden_layers:
            model.add(layers.Dense(
                layer.units,
                activation=layer.activation,
                kernel_regularizer=regularizers.l2(layer.l2) if layer.l2 else None,
            ))
            if layer.batch_norm:
                model.add(layers.BatchNormalization())
            if layer.dropout:
                model.add(layers.Dropout(layer.dropout))

        model.add(layers.Dense(1, activation=architecture.output_activation))
        model.compile(
            optimizer=tf.keras.optimizers.Adam(learning_rate=architecture.learning_rate),
            loss=architecture.loss,
            metrics=["accuracy"],
        )
        return model

    def train(
        self,
        handle: tf.keras.Model,
        xs: np.ndarray,
        ys: np.ndarray,
        training: TrainingConfig,
        on_epoch_end: Optional[EpochCallback] = None,
    ) -> dict[str, list[float]]:
        if training.seed is not None:
            tf.keras.utils.set_random_seed(training.seed)

        def _epoch_end(epoch, logs):
            if on_epoch_end is not None and on_epoch_end(epoch, dict(logs or {})) is False:
                handle.stop_training = True

        history = handle.fit(
            np.asarray(xs, dtype=np.float32),
            np.asarray(ys, dtype=np.float32).reshape(-1, 1),
            epochs=training.epochs,
            batch_size=training.batch_size,
            validation_split=training.validation_split,
            verbose=self.verbose,
            callbacks=[tf.keras.callbacks.LambdaCallback(on_epoch_end=_epoch_end)],
        )
        return {k: [float(v) for v in values] for k, values in history.history.items()}

    def predict(self, handle: tf.keras.Model, xs: np.ndarray) -> tf.Tensor:
        buffer = handle(tf.convert_to_tensor(xs, dtype=tf.float32), training=False)
        self._live.add(id(buffer))
        return buffer

    def read(self, buffer: tf.Tensor) -> np.ndarray:
        return np.asarray(buffer).reshape(-1)

    def evaluate(self, handle: tf.keras.Model, xs: np.ndarray, ys: np.ndarray) -> list[float]:
        results = handle.evaluate(
            np.asarray(xs, dtype=np.float32),
            np.asarray(ys, dtype=np.float32).reshape(-1, 1),
            verbose=0,
            return_dict=True,
        )
        return [float(results["loss"]), float(results.get("accuracy", 0.0))]

    def dispose(self, buffer) -> None:
        # Eager tensors free their memory once the last reference is dropped
        self._live.discard(id(buffer))
