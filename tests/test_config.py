"""
Tests for training and scoring configuration.
"""

import pytest

from churn_risk.config import DEFAULT_TRAINING, LayerSpec, ScoringConfig, TrainingConfig


class TestTrainingConfig:
    """Tests for hyperparameter validation and overrides."""

    def test_defaults(self):
        assert DEFAULT_TRAINING.epochs == 150
        assert DEFAULT_TRAINING.batch_size == 32
        assert DEFAULT_TRAINING.validation_split == 0.1
        assert [layer.units for layer in DEFAULT_TRAINING.hidden_layers] == [128, 64, 32, 16]

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"progress_every": 0}, "progress_every"),
            ({"epochs": 0}, "epochs"),
            ({"batch_size": 0}, "batch_size"),
            ({"validation_split": 1.0}, "validation_split"),
            ({"validation_split": -0.1}, "validation_split"),
        ],
    )
    def test_rejects_invalid(self, overrides, field):
        with pytest.raises(ValueError, match=field):
            TrainingConfig(**overrides)

    def test_overrides_validated(self):
        with pytest.raises(ValueError, match="progress_every"):
            TrainingConfig.from_overrides({"progress_every": 0})

    def test_no_validation_split_allowed(self):
        assert TrainingConfig(validation_split=0.0).validation_split == 0.0

    def test_layer_overrides(self):
        config = TrainingConfig.from_overrides({"hidden_layers": [{"units": 4}, LayerSpec(2)]})
        assert [layer.units for layer in config.hidden_layers] == [4, 2]
        assert config.architecture(8).hidden_layers[0].activation == "relu"


class TestScoringConfig:
    """Tests for scoring policy overrides."""

    def test_from_overrides(self):
        config = ScoringConfig.from_overrides({"decision_threshold": 0.6})
        assert config.decision_threshold == 0.6
        assert config.lifetime_months == 24

    def test_unknown_key(self):
        with pytest.raises(TypeError):
            ScoringConfig.from_overrides({"lifetime": 12})
