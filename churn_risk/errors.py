"""
Error taxonomy for the churn risk pipeline.

Encoder and Scaler never raise: malformed values degrade to defaults.
Trainer, Evaluator and RiskScorer fail fast with one of these types.
"""


class ChurnRiskError(Exception):
    """Base class for all pipeline errors."""


class InputError(ChurnRiskError, ValueError):
    """Input data is unusable (e.g. zero rows)."""


class EmptyDatasetError(InputError):
    """A dataset or split has no rows."""


class MalformedBatchFileError(InputError):
    """A batch input produced zero parsed rows."""


class TrainingFailure(ChurnRiskError, RuntimeError):
    """The learning engine rejected the configuration or failed during fit."""


class TrainingCancelled(TrainingFailure):
    """A progress callback asked to stop training."""


class NotTrainedError(ChurnRiskError, RuntimeError):
    """Prediction or evaluation requested before a model was trained."""


class StaleModelError(ChurnRiskError, RuntimeError):
    """The installed model was trained against a different scaler state."""


class EngineError(ChurnRiskError, RuntimeError):
    """The learning engine failed while predicting or evaluating."""
