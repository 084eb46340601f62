"""
RiskScorer - turns churn probabilities into risk tiers and business impact.

Usage:
    from churn_risk import RiskScorer

    scorer = RiskScorer(engine, trainer.require_model())

    # Single customer
    result = scorer.predict_single(record)
    print(result.risk_tier, result.business_impact.net_value)

    # Batch, ranked by probability (highest risk first)
    batch = scorer.predict_batch(records)
    print(batch.metrics.potential_annual_loss)
    batch.to_csv("predictions.csv")
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Union

import numpy as np
import pandas as pd

from .config import ScoringConfig, DEFAULT_SCORING
from .dataset import churn_label
from .encoder import FeatureEncoder
from .engine import LearningEngine, read_predictions
from .errors import EngineError, InputError, NotTrainedError
from .evaluator import ConfusionMatrix
from .records import CustomerRecord
from .scaler import apply_scaler, out_of_range_mask
from .schemas import EXPORT_COLUMNS, EXPORT_SCHEMA
from .strategies import RetentionStrategies
from .trainer import TrainedModel

RISK_LABELS = {"high": "High", "medium": "Medium", "low": "Low"}

# Feature positions read back for business logic
TENURE, MONTHLY_CHARGES, CONTRACT_CODE = 0, 1, 3


@dataclass(frozen=True)
class BusinessImpact:
    """Per-customer value at stake."""

    monthly_charges: float
    lifetime_value: float
    retention_cost: float
    net_value: float


def business_impact(monthly_charges: float, config: ScoringConfig = DEFAULT_SCORING) -> BusinessImpact:
    """
    Lifetime value and retention cost for one customer.

    lifetime value = monthly x lifetime_months (24)
    retention cost = monthly x retention_cost_months (2)
    """
    lifetime_value = monthly_charges * config.lifetime_months
    retention_cost = monthly_charges * config.retention_cost_months
    return BusinessImpact(
        monthly_charges=monthly_charges,
        lifetime_value=lifetime_value,
        retention_cost=retention_cost,
        net_value=lifetime_value - retention_cost,
    )


@dataclass(frozen=True)
class PredictionResult:
    """Score for one customer. Derived per request, never stored."""

    probability: float
    risk_tier: str
    business_impact: BusinessImpact
    strategies: tuple[str, ...] = ()
    out_of_range: bool = False
    source_record: Optional[CustomerRecord] = None
    actual: Optional[int] = None

    @property
    def risk_level(self) -> str:
        """Display label: High, Medium or Low."""
        return RISK_LABELS[self.risk_tier]

    def to_dict(self) -> dict:
        return {
            "probability": self.probability,
            "risk_tier": self.risk_tier,
            "strategies": list(self.strategies),
            "out_of_range": self.out_of_range,
            "actual": self.actual,
            **asdict(self.business_impact),
        }


@dataclass(frozen=True)
class BusinessMetrics:
    """
    Aggregate business figures for a batch.

    Cost figures are None unless ground truth was available.
    """

    n_customers: int
    high_risk: int
    medium_risk: int
    low_risk: int
    avg_monthly_charge: float
    potential_annual_loss: float
    expected_savings: float
    cost_of_false_positives: Optional[float] = None
    cost_of_false_negatives: Optional[float] = None
    confusion: Optional[ConfusionMatrix] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data.pop("confusion")
        if self.confusion is not None:
            data.update(self.confusion.to_dict())
        return data


@dataclass
class BatchResult:
    """
    Ranked batch predictions.

    Attributes:
        predictions: Results sorted by probability, highest first
        metrics: Aggregate business metrics
    """

    predictions: list[PredictionResult]
    metrics: BusinessMetrics
    has_ground_truth: bool = field(default=False)

    def __len__(self) -> int:
        return len(self.predictions)

    def by_tier(self, tier: str) -> list[PredictionResult]:
        return [p for p in self.predictions if p.risk_tier == tier]

    @property
    def high(self) -> list[PredictionResult]:
        return self.by_tier("high")

    @property
    def medium(self) -> list[PredictionResult]:
        return self.by_tier("medium")

    @property
    def low(self) -> list[PredictionResult]:
        return self.by_tier("low")

    def top(self, n: int = 10) -> list[PredictionResult]:
        """Top-n at-risk customers."""
        return self.predictions[:n]

    def to_frame(self) -> pd.DataFrame:
        """
        Export frame, one row per customer in rank order.

        Columns: Customer_ID (1-based rank), Churn_Probability ("12.34%"),
        Risk_Level, Tenure, Monthly_Charges, Contract.
        """
        rows = []
        for rank, result in enumerate(self.predictions, start=1):
            record = result.source_record or CustomerRecord()
            rows.append({
                "Customer_ID": rank,
                "Churn_Probability": f"{result.probability * 100:.2f}%",
                "Risk_Level": result.risk_level,
                "Tenure": record.tenure or "",
                "Monthly_Charges": record.monthly_charges or "",
                "Contract": record.contract or "",
            })
        frame = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
        frame["Customer_ID"] = frame["Customer_ID"].astype("int64")
        return EXPORT_SCHEMA.validate(frame)

    def to_csv(self, path: Optional[Union[Path, str]] = None) -> str:
        """Comma-separated export with header; also written to path if given."""
        text = self.to_frame().to_csv(index=False, lineterminator="\n")
        if path is not None:
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text)
        return text

    def tier_counts(self) -> dict[str, int]:
        return {
            "high": self.metrics.high_risk,
            "medium": self.metrics.medium_risk,
            "low": self.metrics.low_risk,
        }


class RiskScorer:
    """
    Scores customers with a trained model.

    Inputs are always normalized with the ScalerState bound to the model,
    so scoring can never drift from the scaling the model was trained on.
    """

    def __init__(
        self,
        engine: LearningEngine,
        model: Optional[TrainedModel],
        config: Optional[ScoringConfig] = None,
        strategies: Optional[RetentionStrategies] = None,
        encoder: Optional[FeatureEncoder] = None,
    ):
        """
        Initialize scorer.

        Raises:
            NotTrainedError: If model is None
        """
        if model is None:
            raise NotTrainedError("Risk scorer: no trained model, train before predicting")
        self.engine = engine
        self.model = model
        self.config = config or DEFAULT_SCORING
        self.strategies = strategies or RetentionStrategies(config=self.config)
        self.encoder = encoder or FeatureEncoder()

    def _probabilities(self, raw: np.ndarray) -> np.ndarray:
        scaled = apply_scaler(raw, self.model.scaler_state)
        try:
            with read_predictions(self.engine, self.model.handle, scaled) as values:
                probabilities = np.clip(values.astype(float), 0.0, 1.0)
        except Exception as e:
            raise EngineError(
                f"Risk scorer: learning engine failed scoring {len(scaled)} customers: {e}"
            ) from e
        return probabilities

    def _result(
        self,
        probability: float,
        vector: np.ndarray,
        out_of_range: bool,
        record: Optional[CustomerRecord],
        actual: Optional[int] = None,
    ) -> PredictionResult:
        tier = self.config.get_risk_level(probability)
        monthly = float(vector[MONTHLY_CHARGES])
        names = self.strategies.names(
            tier,
            tenure=float(vector[TENURE]),
            contract_code=int(vector[CONTRACT_CODE]),
            monthly_charges=monthly,
        )
        return PredictionResult(
            probability=float(probability),
            risk_tier=tier,
            business_impact=business_impact(monthly, self.config),
            strategies=tuple(names),
            out_of_range=bool(out_of_range),
            source_record=record,
            actual=actual,
        )

    def predict_single(self, customer: Union[CustomerRecord, Mapping]) -> PredictionResult:
        """Score one customer (record or raw column mapping)."""
        record = customer if isinstance(customer, CustomerRecord) else CustomerRecord.from_mapping(customer)
        vector = self.encoder.encode_record(record)
        probability = self._probabilities(vector.reshape(1, -1))[0]
        flagged = out_of_range_mask(vector, self.model.scaler_state)[0]
        return self._result(probability, vector, flagged, record)

    def predict_batch(
        self,
        customers: list[Union[CustomerRecord, Mapping]],
        labels: Optional[list[int]] = None,
    ) -> BatchResult:
        """
        Score many customers, rank them and compute business metrics.

        Args:
            customers: Records or raw column mappings
            labels: Ground truth (0/1). If None, derived when every record
                carries a Churn value.

        Raises:
            InputError: If the batch is empty or labels do not align
        """
        records = [
            c if isinstance(c, CustomerRecord) else CustomerRecord.from_mapping(c)
            for c in customers
        ]
        if not records:
            raise InputError("Risk scorer: batch contains no customers")

        if labels is None and all(r.has_label for r in records):
            labels = [churn_label(r.churn) for r in records]
        if labels is not None and len(labels) != len(records):
            raise InputError(
                f"Risk scorer: {len(labels)} labels for {len(records)} customers"
            )

        raw = self.encoder.encode_records(records).to_numpy(dtype=float)
        probabilities = self._probabilities(raw)
        flagged = out_of_range_mask(raw, self.model.scaler_state)

        order = np.argsort(-probabilities, kind="stable")
        predictions = [
            self._result(
                probabilities[i],
                raw[i],
                flagged[i],
                records[i],
                actual=int(labels[i]) if labels is not None else None,
            )
            for i in order
        ]

        metrics = self._business_metrics(raw, probabilities, labels)
        return BatchResult(
            predictions=predictions,
            metrics=metrics,
            has_ground_truth=labels is not None,
        )

    def _business_metrics(
        self,
        raw: np.ndarray,
        probabilities: np.ndarray,
        labels: Optional[list[int]],
    ) -> BusinessMetrics:
        """
        Aggregate figures for a batch.

        potential annual loss = high-risk count x avg monthly x 12
        expected savings      = loss x retention success rate (0.7)
        false positive cost   = FP x avg monthly x retention cost months
        false negative cost   = FN x avg monthly x 12
        """
        cfg = self.config
        tiers = [cfg.get_risk_level(p) for p in probabilities]
        high = tiers.count("high")
        avg_monthly = float(raw[:, MONTHLY_CHARGES].mean())

        potential_loss = high * avg_monthly * cfg.annual_months

        fp_cost = fn_cost = None
        cm = None
        if labels is not None:
            predicted = (probabilities >= cfg.decision_threshold).astype(int)
            cm = ConfusionMatrix.from_predictions(np.asarray(labels, dtype=int), predicted)
            fp_cost = cm.false_positive * avg_monthly * cfg.retention_cost_months
            fn_cost = cm.false_negative * avg_monthly * cfg.annual_months

        return BusinessMetrics(
            n_customers=len(probabilities),
            high_risk=high,
            medium_risk=tiers.count("medium"),
            low_risk=tiers.count("low"),
            avg_monthly_charge=avg_monthly,
            potential_annual_loss=potential_loss,
            expected_savings=potential_loss * cfg.retention_success_rate,
            cost_of_false_positives=fp_cost,
            cost_of_false_negatives=fn_cost,
            confusion=cm,
        )
