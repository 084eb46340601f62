"""
Pipeline runner for churn risk scoring.

Single entry point for load -> train -> evaluate -> score runs.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from churn_risk.engine import LearningEngine
from churn_risk.errors import NotTrainedError
from churn_risk.scorer import BatchResult
from churn_risk.session import PipelineSession
from churn_risk.summaries import actionable_insights, churn_distribution, data_quality
from churn_risk.trainer import TrainingProgress

from .artifacts import ArtifactManager
from .config import RunConfig
from .data import read_customers
from .logger import RunLogger

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Container for run results."""

    run_id: str
    config: RunConfig
    metrics: dict
    business: dict
    passed: bool
    timestamp: datetime
    duration_seconds: float
    model_id: str
    epochs_run: int
    scaler_ranges: dict
    data_quality: dict = field(default_factory=dict)
    churn_distribution: dict = field(default_factory=dict)
    top_customers: list[dict] = field(default_factory=list)
    insights: list[dict] = field(default_factory=list)
    batch_tiers: dict = field(default_factory=dict)

    def summary(self) -> str:
        """Human-readable summary."""
        status = "PASS" if self.passed else "FAIL"
        m = self.metrics
        b = self.business

        return (
            f"[{self.run_id}] {self.config.name} - {status}\n"
            f"  Accuracy:  {m.get('accuracy', 0):.1%}\n"
            f"  Precision: {m.get('precision', 0):.1%}\n"
            f"  Recall:    {m.get('recall', 0):.1%}\n"
            f"  F1:        {m.get('f1', 0):.3f}\n"
            f"  High/Medium/Low: {b.get('high_risk', 0)}/{b.get('medium_risk', 0)}/{b.get('low_risk', 0)}\n"
            f"  Potential annual loss: {b.get('potential_annual_loss', 0):,.2f}"
        )


class PipelineRunner:
    """
    Single entry point for running the pipeline.

    Usage:
        runner = PipelineRunner()

        # From YAML config
        result = runner.run_from_yaml("configs/default.yaml")

        # Score a new file with the model from the last run
        batch = runner.predict_file("data/new_customers.csv")
    """

    def __init__(
        self,
        base_path: Optional[Path] = None,
        logs_dir: str = "logs",
        artifacts_dir: str = "artifacts",
        engine: Optional[LearningEngine] = None,
    ):
        """
        Initialize runner.

        Args:
            base_path: Base path for data, logs and artifacts (default: cwd)
            logs_dir: Subdirectory for logs
            artifacts_dir: Subdirectory for artifacts
            engine: LearningEngine (default: KerasEngine)
        """
        self.base_path = base_path or Path.cwd()
        self.logs_dir = self.base_path / logs_dir
        self.artifacts_dir = self.base_path / artifacts_dir

        if engine is None:
            from churn_risk.keras_engine import KerasEngine

            engine = KerasEngine()
        self.engine = engine

        self.logger = RunLogger(self.logs_dir)
        self.artifact_manager = ArtifactManager(self.artifacts_dir)
        self.session: Optional[PipelineSession] = None

    def generate_run_id(self) -> str:
        """Generate unique run ID: run_YYYYMMDD_XXXX"""
        date_str = datetime.now().strftime("%Y%m%d")
        short_uuid = uuid.uuid4().hex[:4]
        return f"run_{date_str}_{short_uuid}"

    def _resolve(self, path: str | Path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.base_path / path

    def run(self, config: RunConfig) -> RunResult:
        """
        Run the full pipeline once.

        Args:
            config: RunConfig to run

        Returns:
            RunResult with metrics and pass/fail status
        """
        run_id = self.generate_run_id()
        start_time = datetime.now()
        stage = "load"

        try:
            session = PipelineSession(
                self.engine,
                training=config.training_config(),
                scoring=config.scoring_config(),
            )

            records = read_customers(self._resolve(config.data_path))
            session.load(records)
            logger.info("Loaded %d customer records", len(records))
            quality = data_quality(records)
            if quality["missing_columns"]:
                logger.warning(
                    "Input lacks columns %s; their features encode as 0",
                    ", ".join(quality["missing_columns"]),
                )

            stage = "train"
            model = session.train(on_progress=self._on_progress)

            stage = "evaluate"
            report = session.evaluate()

            stage = "score"
            batch = session.predict_test_split()

            scored = None
            if config.batch_path:
                stage = "batch"
                scored = session.predict_batch(read_customers(self._resolve(config.batch_path)))
                logger.info("Scored %d customers from %s", len(scored), config.batch_path)
            self.session = session

            metrics = report.to_dict()
            passed = self._evaluate_pass_fail(metrics, config)
            duration = (datetime.now() - start_time).total_seconds()

            result = RunResult(
                run_id=run_id,
                config=config,
                metrics=metrics,
                business=batch.metrics.to_dict(),
                passed=passed,
                timestamp=start_time,
                duration_seconds=duration,
                model_id=model.model_id,
                epochs_run=model.epochs_run,
                scaler_ranges=model.scaler_state.ranges,
                data_quality=quality,
                churn_distribution=churn_distribution(records),
                top_customers=[p.to_dict() for p in batch.top(config.top_n)],
                insights=actionable_insights(report, len(records)),
                batch_tiers=scored.tier_counts() if scored is not None else {},
            )

            # Always log
            self.logger.log_run(result)

            # Save full artifacts only if passed
            if passed:
                self.artifact_manager.save_artifacts(
                    result,
                    history=model.history_frame(),
                    batch=batch,
                    confusion=report.confusion,
                    scored=scored,
                )

            return result

        except Exception as e:
            logger.error("Run %s failed during %s: %s", run_id, stage, e)
            self.logger.log_failure(run_id, config, stage, str(e))
            raise

    def run_from_yaml(self, config_path: str | Path) -> RunResult:
        """
        Load config from YAML and run.

        Args:
            config_path: Path to YAML config (relative to base_path or absolute)

        Returns:
            RunResult
        """
        config = RunConfig.from_yaml(self._resolve(config_path))
        return self.run(config)

    def predict_file(
        self,
        path: str | Path,
        export_path: Optional[str | Path] = None,
    ) -> BatchResult:
        """
        Score a customer CSV with the model from the last successful run.

        Raises:
            NotTrainedError: If no run has completed
            MalformedBatchFileError: If the file has zero rows
        """
        if self.session is None:
            raise NotTrainedError("Runner: no trained model, run a config before batch prediction")

        records = read_customers(self._resolve(path))
        batch = self.session.predict_batch(records)
        if export_path is not None:
            batch.to_csv(self._resolve(export_path))
        logger.info("Predicted churn for %d customers", len(batch))
        return batch

    def list_runs(self):
        """
        Get summary of all past runs.

        Returns:
            DataFrame with run history
        """
        return self.logger.get_summary_dataframe()

    def _on_progress(self, progress: TrainingProgress) -> bool:
        logger.debug(progress.summary())
        return True

    def _evaluate_pass_fail(self, metrics: dict, config: RunConfig) -> bool:
        """Evaluate if the run passes its criteria."""
        if metrics["accuracy"] < config.min_accuracy:
            return False

        if config.min_f1 and metrics["f1"] < config.min_f1:
            return False

        return True
