"""
Evaluator - confusion matrix and derived metrics on held-out rows.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Optional

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    confusion_matrix,
    f1_score,
    precision_score,
    recall_score,
)

from .engine import LearningEngine, read_predictions
from .errors import EmptyDatasetError, EngineError, NotTrainedError
from .trainer import TrainedModel

logger = logging.getLogger(__name__)

DECISION_THRESHOLD = 0.5


@dataclass(frozen=True)
class ConfusionMatrix:
    """Predicted-vs-actual counts at a fixed decision threshold."""

    true_positive: int
    true_negative: int
    false_positive: int
    false_negative: int

    @property
    def total(self) -> int:
        return (
            self.true_positive
            + self.true_negative
            + self.false_positive
            + self.false_negative
        )

    @classmethod
    def from_predictions(cls, y_true, y_pred) -> "ConfusionMatrix":
        """Build counts from 0/1 labels and 0/1 predictions."""
        cm = confusion_matrix(y_true, y_pred, labels=[0, 1])
        return cls(
            true_positive=int(cm[1, 1]),
            true_negative=int(cm[0, 0]),
            false_positive=int(cm[0, 1]),
            false_negative=int(cm[1, 0]),
        )

    def to_dict(self) -> dict:
        return asdict(self)


def _ratio(numerator: int, denominator: int) -> float:
    return numerator / denominator if denominator else 0.0


@dataclass(frozen=True)
class EvaluationReport:
    """Confusion matrix plus derived metrics for one evaluation call."""

    confusion: ConfusionMatrix
    accuracy: float
    precision: float
    recall: float
    specificity: float
    f1: float
    loss: Optional[float]
    n_samples: int
    threshold: float = DECISION_THRESHOLD

    def to_dict(self) -> dict:
        """Flat dictionary for logs and CSV artifacts."""
        return {
            "n_samples": self.n_samples,
            "threshold": self.threshold,
            "accuracy": self.accuracy,
            "precision": self.precision,
            "recall": self.recall,
            "specificity": self.specificity,
            "f1": self.f1,
            "loss": self.loss,
            **self.confusion.to_dict(),
        }

    def summary(self) -> str:
        """Human-readable summary."""
        cm = self.confusion
        return (
            f"  Accuracy:    {self.accuracy:.1%}\n"
            f"  Precision:   {self.precision:.1%}\n"
            f"  Recall:      {self.recall:.1%}\n"
            f"  Specificity: {self.specificity:.1%}\n"
            f"  F1:          {self.f1:.3f}\n"
            f"  TP={cm.true_positive} TN={cm.true_negative} "
            f"FP={cm.false_positive} FN={cm.false_negative}"
        )


class Evaluator:
    """Runs a trained model over held-out rows and scores its predictions."""

    def __init__(self, engine: LearningEngine, threshold: float = DECISION_THRESHOLD):
        self.engine = engine
        self.threshold = threshold

    def evaluate(
        self,
        model: Optional[TrainedModel],
        features,
        labels,
    ) -> EvaluationReport:
        """
        Evaluate a model on normalized features and 0/1 labels.

        Predictions are churn when probability >= threshold. The confusion
        matrix is rebuilt from scratch on every call.

        Raises:
            NotTrainedError: If model is None
            EmptyDatasetError: If there are no rows
        """
        if model is None:
            raise NotTrainedError("Evaluator: no trained model to evaluate")

        features = np.asarray(features, dtype=float)
        y_true = np.asarray(labels, dtype=float).ravel().astype(int)
        if len(y_true) == 0:
            raise EmptyDatasetError("Evaluator: held-out split has no rows")

        try:
            with read_predictions(self.engine, model.handle, features) as probabilities:
                y_pred = (probabilities >= self.threshold).astype(int)
            loss, _ = self.engine.evaluate(model.handle, features, y_true)
        except Exception as e:
            logger.error("Evaluation failed: %s", e)
            raise EngineError(
                f"Evaluator: learning engine failed on {len(y_true)} held-out rows: {e}"
            ) from e

        cm = ConfusionMatrix.from_predictions(y_true, y_pred)

        report = EvaluationReport(
            confusion=cm,
            accuracy=float(accuracy_score(y_true, y_pred)),
            precision=float(precision_score(y_true, y_pred, zero_division=0)),
            recall=float(recall_score(y_true, y_pred, zero_division=0)),
            specificity=_ratio(cm.true_negative, cm.true_negative + cm.false_positive),
            f1=float(f1_score(y_true, y_pred, zero_division=0)),
            loss=float(loss),
            n_samples=len(y_true),
            threshold=self.threshold,
        )

        logger.info(
            "Confusion Matrix - TP: %d, TN: %d, FP: %d, FN: %d",
            cm.true_positive, cm.true_negative, cm.false_positive, cm.false_negative,
        )
        return report
