"""
Configuration for churn risk training and scoring.

All thresholds, hyperparameters and business policy constants are defined
here for easy tuning. Business figures (retention success rate, retention
cost, lifetime horizon) are assumptions, not derived from data.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class LayerSpec:
    """One hidden dense layer and what follows it."""

    units: int
    activation: str = "relu"
    l2: float = 0.0
    batch_norm: bool = False
    dropout: float = 0.0


@dataclass(frozen=True)
class ArchitectureSpec:
    """Architecture requested from the learning engine."""

    input_width: int
    hidden_layers: tuple[LayerSpec, ...]
    output_activation: str = "sigmoid"
    loss: str = "binary_crossentropy"
    learning_rate: float = 0.001


@dataclass
class TrainingConfig:
    """
    Hyperparameters for the binary churn classifier.

    Hidden layers shrink 128 -> 64 -> 32 -> 16. Weight decay applies to the
    first three layers, batch normalization follows them, and dropout
    follows every hidden layer.
    """

    hidden_layers: list[LayerSpec] = field(default_factory=lambda: [
        LayerSpec(128, l2=0.001, batch_norm=True, dropout=0.3),
        LayerSpec(64, l2=0.001, batch_norm=True, dropout=0.3),
        LayerSpec(32, l2=0.001, batch_norm=True, dropout=0.2),
        LayerSpec(16, dropout=0.2),
    ])
    learning_rate: float = 0.001
    epochs: int = 150
    batch_size: int = 32
    # Carved from the train split, never from the held-out test split
    validation_split: float = 0.1
    progress_every: int = 10
    seed: Optional[int] = None

    def __post_init__(self):
        if self.epochs < 1:
            raise ValueError(f"epochs must be >= 1, got {self.epochs}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")
        if self.progress_every < 1:
            raise ValueError(f"progress_every must be >= 1, got {self.progress_every}")
        if not 0 <= self.validation_split < 1:
            raise ValueError(
                f"validation_split must be in [0, 1), got {self.validation_split}"
            )

    def architecture(self, input_width: int) -> ArchitectureSpec:
        """Build the architecture spec for a given input width."""
        return ArchitectureSpec(
            input_width=input_width,
            hidden_layers=tuple(self.hidden_layers),
            learning_rate=self.learning_rate,
        )

    @classmethod
    def from_overrides(cls, overrides: Optional[dict] = None) -> "TrainingConfig":
        """Create config from a flat override dict (e.g. parsed YAML)."""
        overrides = dict(overrides or {})
        layers = overrides.pop("hidden_layers", None)
        config = cls(**overrides)
        if layers is not None:
            config.hidden_layers = [
                layer if isinstance(layer, LayerSpec) else LayerSpec(**layer)
                for layer in layers
            ]
        return config


@dataclass
class ScoringConfig:
    """
    Risk tiering and business-impact policy.

    Tiers (same convention for single and batch scoring):
    - high:   p > high_risk_threshold
    - medium: medium_risk_threshold < p <= high_risk_threshold
    - low:    p <= medium_risk_threshold
    """

    high_risk_threshold: float = 0.7
    medium_risk_threshold: float = 0.4

    # Classification threshold for confusion-matrix bookkeeping (p >= t -> churn)
    decision_threshold: float = 0.5

    # === Business impact ===
    lifetime_months: int = 24
    retention_cost_months: int = 2
    annual_months: int = 12
    retention_success_rate: float = 0.7

    # === Retention strategy triggers ===
    new_customer_tenure_months: float = 12
    high_charges_threshold: float = 70

    def get_risk_level(self, probability: float) -> str:
        """Map a churn probability to a risk tier."""
        if probability > self.high_risk_threshold:
            return "high"
        if probability > self.medium_risk_threshold:
            return "medium"
        return "low"

    @classmethod
    def from_overrides(cls, overrides: Optional[dict] = None) -> "ScoringConfig":
        """Create config from a flat override dict."""
        return cls(**(overrides or {}))


# Default configuration instances
DEFAULT_TRAINING = TrainingConfig()
DEFAULT_SCORING = ScoringConfig()
