"""
PipelineSession - the caller-owned context for one churn scoring workflow.

Holds the loaded corpus, its dataset and scaler state, and the trainer
with its installed model. Every stage reads from the session instead of
module-level globals.

Usage:
    session = PipelineSession(KerasEngine())
    session.load(records)
    session.train(on_progress=print)
    report = session.evaluate()
    batch = session.predict_batch(new_records)
"""

import logging
from typing import Mapping, Optional, Union

from .config import ScoringConfig, TrainingConfig, DEFAULT_SCORING
from .dataset import Dataset, build_dataset
from .encoder import FeatureEncoder
from .engine import LearningEngine
from .errors import InputError, NotTrainedError, StaleModelError
from .evaluator import EvaluationReport, Evaluator
from .records import CustomerRecord
from .scaler import ScalerState
from .scorer import BatchResult, PredictionResult, RiskScorer
from .trainer import ClassifierTrainer, ProgressCallback, TrainedModel

logger = logging.getLogger(__name__)


class PipelineSession:
    """Explicit pipeline state passed by reference through every stage."""

    def __init__(
        self,
        engine: LearningEngine,
        training: Optional[TrainingConfig] = None,
        scoring: Optional[ScoringConfig] = None,
    ):
        self.engine = engine
        self.scoring = scoring or DEFAULT_SCORING
        self.encoder = FeatureEncoder()
        self.trainer = ClassifierTrainer(engine, training)
        self.evaluator = Evaluator(engine, threshold=self.scoring.decision_threshold)

        self.records: list[CustomerRecord] = []
        self.dataset: Optional[Dataset] = None
        self.scaler_state: Optional[ScalerState] = None

    # === State ===

    @property
    def model(self) -> Optional[TrainedModel]:
        return self.trainer.model

    @property
    def model_is_stale(self) -> bool:
        """True if the model was trained against a different scaler state."""
        model = self.model
        if model is None or self.scaler_state is None:
            return False
        return model.scaler_state.fingerprint != self.scaler_state.fingerprint

    def _require_dataset(self) -> Dataset:
        if self.dataset is None:
            raise InputError("Session: no dataset loaded, call load() with customer records")
        return self.dataset

    def _require_current_model(self) -> TrainedModel:
        model = self.trainer.require_model()
        if self.model_is_stale:
            raise StaleModelError(
                f"Session: model {model.model_id} was trained against scaler "
                f"{model.scaler_state.fingerprint}, but the loaded corpus uses "
                f"{self.scaler_state.fingerprint}; retrain before predicting"
            )
        return model

    # === Stages ===

    def load(self, records: list[Union[CustomerRecord, Mapping]]) -> Dataset:
        """
        Encode, scale and split a training corpus.

        Re-fitting the scaler while a model is installed makes that model
        stale until the next training run.
        """
        records = [
            r if isinstance(r, CustomerRecord) else CustomerRecord.from_mapping(r)
            for r in records
        ]
        dataset, state = build_dataset(records, self.encoder)

        self.records = records
        self.dataset = dataset
        self.scaler_state = state

        if self.model_is_stale:
            logger.warning(
                "Scaler re-fitted (%s); installed model %s is stale until retrained",
                state.fingerprint, self.model.model_id,
            )
        return dataset

    def train(self, on_progress: Optional[ProgressCallback] = None) -> TrainedModel:
        """Train on the loaded dataset; the scaler state is bound to the model."""
        dataset = self._require_dataset()
        return self.trainer.train(dataset, self.scaler_state, on_progress)

    def evaluate(self) -> EvaluationReport:
        """Evaluate the installed model on the held-out test split."""
        dataset = self._require_dataset()
        if not self.trainer.is_trained:
            raise NotTrainedError("Session: evaluation requested before training")
        model = self._require_current_model()
        return self.evaluator.evaluate(model, dataset.test.features, dataset.test.labels)

    def scorer(self) -> RiskScorer:
        """RiskScorer for the installed, current model."""
        return RiskScorer(self.engine, self._require_current_model(), self.scoring, encoder=self.encoder)

    def predict(self, customer: Union[CustomerRecord, Mapping]) -> PredictionResult:
        """Score one customer."""
        return self.scorer().predict_single(customer)

    def predict_batch(
        self,
        customers: list[Union[CustomerRecord, Mapping]],
        labels: Optional[list[int]] = None,
    ) -> BatchResult:
        """Score and rank many customers."""
        return self.scorer().predict_batch(customers, labels)

    def test_records(self) -> list[CustomerRecord]:
        """Source records of the held-out test split, in row order."""
        dataset = self._require_dataset()
        return self.records[dataset.split_index:]

    def predict_test_split(self) -> BatchResult:
        """Batch-score the held-out customers with their ground truth."""
        dataset = self._require_dataset()
        labels = [int(v) for v in dataset.test.labels]
        return self.predict_batch(self.test_records(), labels)
