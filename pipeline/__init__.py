"""
Run pipeline for churn risk scoring.

Usage:
    from pipeline import PipelineRunner, RunConfig

    # Run from YAML
    runner = PipelineRunner()
    result = runner.run_from_yaml("configs/default.yaml")
    print(result.summary())

    # Run programmatically
    config = RunConfig(
        name="quick",
        data_path="data/customers.csv",
        training={"epochs": 20},
    )
    result = runner.run(config)

CLI:
    python -m pipeline.run configs/default.yaml
    python -m pipeline.run configs/default.yaml --batch-file new.csv --export ranked.csv
    python -m pipeline.run --list
"""

from .config import RunConfig
from .runner import PipelineRunner, RunResult
from .data import read_customers
from .logger import RunLogger
from .artifacts import ArtifactManager

__all__ = [
    "RunConfig",
    "PipelineRunner",
    "RunResult",
    "RunLogger",
    "ArtifactManager",
    "read_customers",
]
