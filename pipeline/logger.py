"""
Run logging for the churn scoring pipeline.

Writes one JSON log per run (pass, fail or error).
"""

import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import pandas as pd

if TYPE_CHECKING:
    from .runner import RunResult
    from .config import RunConfig

# Flattened log field -> summary column
SUMMARY_COLUMNS = {
    "run_id": "run_id",
    "config.name": "name",
    "timestamp": "timestamp",
    "status": "status",
    "stage": "stage",
    "model.epochs_run": "epochs_run",
    "results.metrics.accuracy": "accuracy",
    "results.metrics.recall": "recall",
    "results.metrics.f1": "f1",
    "results.business.high_risk": "high_risk",
    "results.business.potential_annual_loss": "potential_annual_loss",
}


class RunLogger:
    """Structured JSON logging for pipeline runs."""

    def __init__(self, logs_dir: Path):
        """
        Initialize logger.

        Args:
            logs_dir: Directory to write log files
        """
        self.logs_dir = logs_dir
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def log_run(self, result: "RunResult") -> Path:
        """
        Log a completed run to a JSON file.

        Args:
            result: RunResult from runner

        Returns:
            Path to log file
        """
        log_entry = {
            "run_id": result.run_id,
            "timestamp": result.timestamp.isoformat(),
            "duration_seconds": result.duration_seconds,
            "config": {
                "name": result.config.name,
                "description": result.config.description,
                "data_path": result.config.data_path,
                "batch_path": result.config.batch_path,
                "training": result.config.training,
                "scoring": result.config.scoring,
                "min_accuracy": result.config.min_accuracy,
                "min_f1": result.config.min_f1,
            },
            "model": {
                "model_id": result.model_id,
                "epochs_run": result.epochs_run,
                "scaler": result.scaler_ranges,
            },
            "results": {
                "metrics": result.metrics,
                "business": result.business,
                "batch_tiers": result.batch_tiers,
            },
            "passed": result.passed,
            "status": "PASS" if result.passed else "FAIL",
        }

        log_path = self.logs_dir / f"{result.run_id}.json"
        with open(log_path, "w") as f:
            json.dump(log_entry, f, indent=2, default=str)

        return log_path

    def log_failure(
        self,
        run_id: str,
        config: "RunConfig",
        stage: str,
        error: str,
    ) -> Path:
        """
        Log a run that raised.

        Args:
            run_id: Unique run ID
            config: RunConfig used
            stage: Pipeline stage that failed (load, train, evaluate, score, batch)
            error: Error message

        Returns:
            Path to log file
        """
        log_entry = {
            "run_id": run_id,
            "timestamp": datetime.now().isoformat(),
            "config": {
                "name": config.name,
                "description": config.description,
            },
            "status": "ERROR",
            "stage": stage,
            "error": error,
        }

        log_path = self.logs_dir / f"{run_id}.json"
        with open(log_path, "w") as f:
            json.dump(log_entry, f, indent=2)

        return log_path

    def get_all_logs(self, status: Optional[str] = None) -> list[dict]:
        """
        Load run logs in run-ID order.

        Args:
            status: Keep only runs with this status (PASS, FAIL or ERROR)
        """
        logs = [json.loads(p.read_text()) for p in sorted(self.logs_dir.glob("run_*.json"))]
        if status is not None:
            logs = [log for log in logs if log.get("status") == status]
        return logs

    def get_summary_dataframe(self) -> pd.DataFrame:
        """
        One row per run, newest first.

        Errored runs carry the failing ``stage`` and no metrics; completed
        runs carry metrics, epochs and business totals but no stage.
        """
        logs = self.get_all_logs()
        if not logs:
            return pd.DataFrame()

        flat = pd.json_normalize(logs).reindex(columns=list(SUMMARY_COLUMNS))
        return (
            flat.rename(columns=SUMMARY_COLUMNS)
            .sort_values("timestamp", ascending=False)
            .reset_index(drop=True)
        )
