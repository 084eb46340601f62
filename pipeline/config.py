"""
Run configuration for the churn scoring pipeline.

Defines the RunConfig dataclass for YAML-driven runs.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional

import yaml

from churn_risk.config import ScoringConfig, TrainingConfig


@dataclass
class RunConfig:
    """
    Configuration for a single pipeline run.

    Load from YAML:
        config = RunConfig.from_yaml("configs/default.yaml")

    Create programmatically:
        config = RunConfig(
            name="short_training",
            data_path="data/customers.csv",
            training={"epochs": 20},
        )
    """

    # Metadata
    name: str
    description: str = ""

    # Data paths (relative to the runner's base path)
    data_path: str = "data/customers.csv"
    batch_path: Optional[str] = None

    # Overrides for churn_risk.config.TrainingConfig / ScoringConfig
    training: dict = field(default_factory=dict)
    scoring: dict = field(default_factory=dict)

    # Pass/fail criteria on the held-out split
    min_accuracy: float = 0.50
    min_f1: Optional[float] = None

    # Number of ranked customers kept in the run summary
    top_n: int = 10

    @classmethod
    def from_yaml(cls, path: Path | str) -> "RunConfig":
        """Load configuration from YAML file."""
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls(**data)

    def to_yaml(self, path: Path | str) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(asdict(self), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    def training_config(self) -> TrainingConfig:
        return TrainingConfig.from_overrides(self.training)

    def scoring_config(self) -> ScoringConfig:
        return ScoringConfig.from_overrides(self.scoring)
