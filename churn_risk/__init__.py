"""
Churn Risk Scoring Package

Encodes customer records, trains a dense churn classifier through a
pluggable learning engine, evaluates it with a confusion matrix, and turns
probabilities into risk tiers and business-impact estimates.
"""

from .config import ScoringConfig, TrainingConfig
from .dataset import Dataset, build_dataset, split_dataset
from .encoder import FeatureEncoder
from .errors import (
    ChurnRiskError,
    EmptyDatasetError,
    InputError,
    MalformedBatchFileError,
    NotTrainedError,
    StaleModelError,
    EngineError,
    TrainingCancelled,
    TrainingFailure,
)
from .evaluator import ConfusionMatrix, EvaluationReport, Evaluator
from .records import CustomerRecord, generate_sample_customers
from .scaler import ScalerState, apply_scaler, fit_scaler
from .scorer import BatchResult, PredictionResult, RiskScorer
from .session import PipelineSession
from .trainer import ClassifierTrainer, TrainedModel, TrainingProgress

__all__ = [
    "BatchResult",
    "ChurnRiskError",
    "ClassifierTrainer",
    "ConfusionMatrix",
    "CustomerRecord",
    "Dataset",
    "EmptyDatasetError",
    "EngineError",
    "EvaluationReport",
    "Evaluator",
    "FeatureEncoder",
    "InputError",
    "MalformedBatchFileError",
    "NotTrainedError",
    "PipelineSession",
    "PredictionResult",
    "RiskScorer",
    "ScalerState",
    "ScoringConfig",
    "StaleModelError",
    "TrainedModel",
    "TrainingCancelled",
    "TrainingConfig",
    "TrainingFailure",
    "TrainingProgress",
    "apply_scaler",
    "build_dataset",
    "fit_scaler",
    "generate_sample_customers",
    "split_dataset",
]
__version__ = "1.0.0"
