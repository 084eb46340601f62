"""
Pytest fixtures for churn risk scoring tests.
"""

import numpy as np
import pandas as pd
import pytest

# Add packages to path
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from churn_risk.config import ScoringConfig, TrainingConfig
from churn_risk.encoder import FeatureEncoder
from churn_risk.records import CustomerRecord, frame_to_records, generate_sample_customers
from churn_risk.scaler import fit_scaler
from churn_risk.trainer import TrainedModel


class FakeModel:
    """Model handle produced by FakeEngine."""

    def __init__(self, architecture):
        self.architecture = architecture
        self.trained = False


class FakeBuffer:
    """Engine-owned prediction buffer."""

    def __init__(self, values):
        self.values = values


def tenure_churn(xs: np.ndarray) -> np.ndarray:
    """Short normalized tenure -> high churn probability."""
    return np.clip(1.0 - xs[:, 0], 0.0, 1.0)


class FakeEngine:
    """
    Deterministic in-memory LearningEngine.

    Predictions come from predict_fn(xs); training emits synthetic
    per-epoch metrics through the epoch callback, like Keras does.
    """

    def __init__(
        self,
        predict_fn=None,
        fail_on_train=False,
        fail_on_create=False,
        fail_on_predict=False,
        fail_on_read=False,
        fail_on_evaluate=False,
    ):
        self.predict_fn = predict_fn or tenure_churn
        self.fail_on_train = fail_on_train
        self.fail_on_create = fail_on_create
        self.fail_on_predict = fail_on_predict
        self.fail_on_read = fail_on_read
        self.fail_on_evaluate = fail_on_evaluate
        self.created = []
        self.disposed = []
        self.live = set()
        self.train_calls = 0

    def create_model(self, architecture):
        if self.fail_on_create:
            raise ValueError("unsupported architecture")
        handle = FakeModel(architecture)
        self.created.append(handle)
        return handle

    def train(self, handle, xs, ys, training, on_epoch_end=None):
        self.train_calls += 1
        if self.fail_on_train:
            raise RuntimeError("engine exploded during fit")

        history = {"loss": [], "accuracy": [], "val_loss": [], "val_accuracy": []}
        for epoch in range(training.epochs):
            logs = {
                "loss": 1.0 / (epoch + 1),
                "accuracy": min(0.5 + 0.05 * epoch, 1.0),
                "val_loss": 1.2 / (epoch + 1),
                "val_accuracy": min(0.45 + 0.05 * epoch, 1.0),
            }
            for key, value in logs.items():
                history[key].append(value)
            if on_epoch_end is not None and on_epoch_end(epoch, logs) is False:
                break
        handle.trained = True
        return history

    def predict(self, handle, xs):
        if self.fail_on_predict:
            raise RuntimeError("engine predict failed: shape mismatch")
        buffer = FakeBuffer(np.asarray(self.predict_fn(np.asarray(xs, dtype=float)), dtype=float))
        self.live.add(id(buffer))
        return buffer

    def read(self, buffer):
        if self.fail_on_read:
            raise RuntimeError("engine read failed: buffer corrupted")
        return buffer.values

    def evaluate(self, handle, xs, ys):
        if self.fail_on_evaluate:
            raise RuntimeError("engine evaluate failed")
        probs = np.clip(np.asarray(self.predict_fn(np.asarray(xs, dtype=float)), dtype=float), 1e-7, 1 - 1e-7)
        ys = np.asarray(ys, dtype=float).ravel()
        loss = float(-np.mean(ys * np.log(probs) + (1 - ys) * np.log(1 - probs)))
        accuracy = float(np.mean((probs >= 0.5) == (ys == 1)))
        return [loss, accuracy]

    def dispose(self, buffer):
        self.disposed.append(buffer)
        self.live.discard(id(buffer))


def constant_probabilities(values):
    """predict_fn returning fixed probabilities in input row order."""
    values = np.asarray(values, dtype=float)
    return lambda xs: values[: len(xs)]


@pytest.fixture
def fake_engine():
    """Deterministic engine (short tenure -> churn)."""
    return FakeEngine()


@pytest.fixture
def training_config():
    """Short training run."""
    return TrainingConfig(epochs=5, batch_size=8, progress_every=1)


@pytest.fixture
def scoring_config():
    """Default scoring policy."""
    return ScoringConfig()


@pytest.fixture
def encoder():
    return FeatureEncoder()


@pytest.fixture
def sample_frame():
    """100 sample customers as raw string columns."""
    return generate_sample_customers(n_customers=100, seed=42)


@pytest.fixture
def sample_records(sample_frame):
    """100 sample customers as records."""
    return frame_to_records(sample_frame)


@pytest.fixture
def scaler_state(encoder, sample_records):
    """Scaler fitted on the sample corpus."""
    return fit_scaler(encoder.encode_records(sample_records))


@pytest.fixture
def make_model(scaler_state, training_config):
    """Factory for TrainedModel instances on a given engine."""

    def _make(engine, state=None):
        architecture = training_config.architecture(input_width=8)
        return TrainedModel(
            handle=engine.create_model(architecture),
            scaler_state=state or scaler_state,
            architecture=architecture,
        )

    return _make


@pytest.fixture
def edge_customers():
    """Specific customers for boundary tests."""
    return [
        # New, month-to-month, expensive: every high-risk trigger
        CustomerRecord(
            customer_id="EDGE_NEW_EXPENSIVE",
            tenure="3",
            monthly_charges="95.50",
            total_charges="286.50",
            contract="Month-to-month",
            online_security="No",
            tech_support="No",
            internet_service="Fiber optic",
            churn="Yes",
        ),
        # Long-tenured, two-year contract, cheap
        CustomerRecord(
            customer_id="EDGE_LOYAL",
            tenure="70",
            monthly_charges="25.00",
            total_charges="1750.00",
            contract="Two year",
            online_security="Yes",
            tech_support="Yes",
            internet_service="DSL",
            churn="No",
        ),
        # Malformed values everywhere
        CustomerRecord(
            customer_id="EDGE_MALFORMED",
            tenure="n/a",
            monthly_charges="",
            total_charges=" ",
            contract=None,
            online_security="maybe",
            churn="No",
        ),
    ]
