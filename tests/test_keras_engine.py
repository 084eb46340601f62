"""
End-to-end check with the real TensorFlow/Keras engine.

Slow: deselect with -m "not slow".
"""

import pytest

tf = pytest.importorskip("tensorflow")

from churn_risk.config import TrainingConfig
from churn_risk.errors import TrainingCancelled
from churn_risk.keras_engine import KerasEngine
from churn_risk.session import PipelineSession

pytestmark = pytest.mark.slow


@pytest.fixture
def engine():
    return KerasEngine()


@pytest.fixture
def session(engine):
    training = TrainingConfig(epochs=3, batch_size=16, seed=0)
    return PipelineSession(engine, training=training)


class TestKerasEngine:
    """Tests for the Keras-backed pipeline."""

    def test_architecture(self, engine):
        arch = TrainingConfig().architecture(input_width=8)
        model = engine.create_model(arch)

        dense = [layer for layer in model.layers if isinstance(layer, tf.keras.layers.Dense)]
        assert [layer.units for layer in dense] == [128, 64, 32, 16, 1]
        assert sum(isinstance(layer, tf.keras.layers.BatchNormalization) for layer in model.layers) == 3
        assert sum(isinstance(layer, tf.keras.layers.Dropout) for layer in model.layers) == 4

    def test_train_evaluate_predict(self, session, engine, sample_records, edge_customers):
        session.load(sample_records)
        model = session.train()

        assert model.epochs_run == 3
        assert "val_loss" in model.history

        report = session.evaluate()
        assert report.confusion.total == 20

        batch = session.predict_batch(edge_customers)
        assert len(batch) == 3
        assert all(0.0 <= p.probability <= 1.0 for p in batch.predictions)
        assert engine.live_buffers == 0

    def test_cancellation(self, session, sample_records):
        session.load(sample_records)
        with pytest.raises(TrainingCancelled):
            session.train(on_progress=lambda progress: False)
        assert session.model is None
