"""
Typed customer records.

Raw rows arrive as column name -> string mappings. CustomerRecord keeps the
columns the pipeline reads as named optional fields and carries everything
else in ``extras`` for display passthrough.
"""

from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

import numpy as np
import pandas as pd


# Raw column name -> record attribute
FIELD_COLUMNS = {
    "customerID": "customer_id",
    "tenure": "tenure",
    "MonthlyCharges": "monthly_charges",
    "TotalCharges": "total_charges",
    "Contract": "contract",
    "OnlineSecurity": "online_security",
    "TechSupport": "tech_support",
    "InternetService": "internet_service",
    "Churn": "churn",
}

REQUIRED_COLUMNS = [
    "tenure",
    "MonthlyCharges",
    "TotalCharges",
    "Contract",
    "OnlineSecurity",
    "TechSupport",
    "InternetService",
    "Churn",
]


def _clean(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and np.isnan(value):
        return None
    return str(value)


@dataclass(frozen=True)
class CustomerRecord:
    """One customer row. Every field is the raw string value or None."""

    customer_id: Optional[str] = None
    tenure: Optional[str] = None
    monthly_charges: Optional[str] = None
    total_charges: Optional[str] = None
    contract: Optional[str] = None
    online_security: Optional[str] = None
    tech_support: Optional[str] = None
    internet_service: Optional[str] = None
    churn: Optional[str] = None
    extras: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, row: Mapping) -> "CustomerRecord":
        """Build a record from a raw column -> value mapping."""
        known = {}
        extras = {}
        for column, value in row.items():
            attr = FIELD_COLUMNS.get(column)
            if attr is not None:
                known[attr] = _clean(value)
            else:
                extras[column] = _clean(value)
        return cls(**known, extras=extras)

    def to_mapping(self) -> dict:
        """Return the raw column -> value mapping (extras included)."""
        row = {
            column: getattr(self, attr)
            for column, attr in FIELD_COLUMNS.items()
            if getattr(self, attr) is not None
        }
        row.update(self.extras)
        return row

    def with_values(self, **changes) -> "CustomerRecord":
        """Return a copy with some fields rewritten (e.g. after cleansing)."""
        return replace(self, **changes)

    @property
    def has_label(self) -> bool:
        """Whether the record carries a ground-truth churn value."""
        return self.churn is not None and self.churn.strip() != ""


def records_to_frame(records: list[CustomerRecord]) -> pd.DataFrame:
    """Convert records to a raw string DataFrame with all known columns."""
    columns = list(FIELD_COLUMNS)
    return pd.DataFrame(
        [{col: getattr(r, FIELD_COLUMNS[col]) for col in columns} for r in records],
        columns=columns,
        dtype=object,
    )


def frame_to_records(df: pd.DataFrame) -> list[CustomerRecord]:
    """Convert a raw DataFrame to records."""
    return [CustomerRecord.from_mapping(row) for row in df.to_dict(orient="records")]


def generate_sample_customers(n_customers: int = 100, seed: int = 42) -> pd.DataFrame:
    """
    Generate realistic telco-style customer rows for testing.

    Distributions loosely follow the public telco churn dataset:
    - Contract: month-to-month 55%, one year 21%, two year 24%
    - Churn is more likely for short tenure, month-to-month, high charges
    - All values are strings, as ingestion would produce them
    """
    rng = np.random.default_rng(seed)

    contracts = rng.choice(
        ["Month-to-month", "One year", "Two year"],
        size=n_customers,
        p=[0.55, 0.21, 0.24],
    )
    tenure = rng.integers(0, 73, size=n_customers)
    monthly = np.round(rng.uniform(18.0, 119.0, size=n_customers), 2)
    total = np.round(monthly * np.maximum(tenure, 1) * rng.uniform(0.9, 1.1, n_customers), 2)
    internet = rng.choice(["DSL", "Fiber optic", "No"], size=n_customers, p=[0.34, 0.44, 0.22])
    security = rng.choice(["Yes", "No", "No internet service"], size=n_customers, p=[0.29, 0.5, 0.21])
    support = rng.choice(["Yes", "No", "No internet service"], size=n_customers, p=[0.29, 0.5, 0.21])

    logit = (
        -1.0
        + 1.6 * (contracts == "Month-to-month")
        - 0.04 * tenure
        + 0.015 * (monthly - 65)
        - 0.5 * (support == "Yes")
    )
    churned = rng.random(n_customers) < 1 / (1 + np.exp(-logit))

    return pd.DataFrame(
        {
            "customerID": [f"CUST_{i:04d}" for i in range(n_customers)],
            "tenure": tenure.astype(str),
            "MonthlyCharges": [f"{v:.2f}" for v in monthly],
            "TotalCharges": [f"{v:.2f}" for v in total],
            "Contract": contracts,
            "OnlineSecurity": security,
            "TechSupport": support,
            "InternetService": internet,
            "Churn": np.where(churned, "Yes", "No"),
        }
    )
