"""
Artifact management for pipeline runs.

Saves CSVs and plots for PASSING runs only.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from churn_risk.evaluator import ConfusionMatrix
from churn_risk.scorer import BatchResult

if TYPE_CHECKING:
    from .runner import RunResult


class ArtifactManager:
    """Manages saving run artifacts."""

    def __init__(self, artifacts_dir: Path):
        """
        Initialize artifact manager.

        Args:
            artifacts_dir: Base directory for artifacts
        """
        self.artifacts_dir = artifacts_dir
        self.artifacts_dir.mkdir(parents=True, exist_ok=True)

    def save_artifacts(
        self,
        result: "RunResult",
        history: pd.DataFrame,
        batch: BatchResult,
        confusion: ConfusionMatrix,
        scored: Optional[BatchResult] = None,
    ) -> Path:
        """
        Save full artifacts for a passing run.

        Args:
            result: RunResult from runner
            history: Per-epoch training history
            batch: Ranked predictions for the held-out customers
            confusion: Held-out confusion matrix
            scored: Ranked predictions for the configured batch file, if any

        Returns:
            Path to run artifacts directory
        """
        run_dir = self.artifacts_dir / result.run_id
        run_dir.mkdir(exist_ok=True)

        result.config.to_yaml(run_dir / "config.yaml")

        metrics_df = pd.DataFrame([{
            "split": "test",
            **result.metrics,
            **{f"business_{k}": v for k, v in result.business.items()},
        }])
        metrics_df.to_csv(run_dir / "metrics.csv", index=False)

        history.to_csv(run_dir / "history.csv", index=False)
        batch.to_csv(run_dir / "predictions.csv")
        if scored is not None:
            scored.to_csv(run_dir / "batch_predictions.csv")

        self._plot_confusion_matrix(confusion, run_dir)
        self._plot_history(history, run_dir)

        return run_dir

    def _plot_confusion_matrix(self, cm: ConfusionMatrix, output_dir: Path) -> None:
        """Generate confusion matrix plot."""
        counts = np.array([
            [cm.true_negative, cm.false_positive],
            [cm.false_negative, cm.true_positive],
        ])

        fig, ax = plt.subplots(figsize=(8, 6))
        sns.heatmap(
            counts,
            annot=True,
            fmt="d",
            cmap="Blues",
            ax=ax,
            xticklabels=["Predicted No", "Predicted Yes"],
            yticklabels=["Actual No", "Actual Yes"],
        )
        ax.set_title("Confusion Matrix (Threshold = 0.5)")
        plt.tight_layout()
        plt.savefig(output_dir / "confusion_matrix.png", dpi=150)
        plt.close()

    def _plot_history(self, history: pd.DataFrame, output_dir: Path) -> None:
        """Generate training history plot (loss and accuracy per epoch)."""
        fig, (loss_ax, acc_ax) = plt.subplots(1, 2, figsize=(12, 5))

        for metric, ax in [("loss", loss_ax), ("accuracy", acc_ax)]:
            for column in [metric, f"val_{metric}"]:
                if column in history.columns:
                    ax.plot(history["epoch"], history[column], label=column, linewidth=2)
            ax.set_xlabel("Epoch")
            ax.set_title(metric.capitalize())
            ax.legend()
            ax.grid(True, alpha=0.3)

        plt.tight_layout()
        plt.savefig(output_dir / "training_history.png", dpi=150)
        plt.close()

    def load_run(self, run_id: str) -> dict | None:
        """
        Load artifacts for a specific run.

        Args:
            run_id: Run ID to load

        Returns:
            Dictionary with loaded artifacts, or None if not found
        """
        run_dir = self.artifacts_dir / run_id
        if not run_dir.exists():
            return None

        from .config import RunConfig

        return {
            "config": RunConfig.from_yaml(run_dir / "config.yaml"),
            "metrics": pd.read_csv(run_dir / "metrics.csv"),
            "history": pd.read_csv(run_dir / "history.csv"),
            "predictions": pd.read_csv(run_dir / "predictions.csv"),
        }
