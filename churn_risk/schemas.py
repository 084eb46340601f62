"""
Data schema definitions for churn risk scoring.

Uses Pandera for runtime validation of encoded feature frames and of the
batch export, so an encoding regression (NaN/inf leak, wrong width) or a
malformed export is caught before it reaches the model or a file.
"""

import numpy as np
import pandas as pd
from pandera import Column, Check, DataFrameSchema


FEATURE_NAMES = [
    "tenure",
    "monthlyCharges",
    "totalCharges",
    "contractCode",
    "onlineSecurityFlag",
    "techSupportFlag",
    "internetServiceFlag",
    "tenureYears",
]

EXPORT_COLUMNS = [
    "Customer_ID",
    "Churn_Probability",
    "Risk_Level",
    "Tenure",
    "Monthly_Charges",
    "Contract",
]


def _finite(series: pd.Series) -> bool:
    return bool(np.isfinite(series.to_numpy(dtype=float)).all())


_flag = [Check.isin([0.0, 1.0])]

# Schema for encoded feature frames (one row per customer)
FEATURE_FRAME_SCHEMA = DataFrameSchema(
    {
        "tenure": Column(float, checks=Check(_finite), nullable=False),
        "monthlyCharges": Column(float, checks=Check(_finite), nullable=False),
        "totalCharges": Column(float, checks=Check(_finite), nullable=False),
        "contractCode": Column(
            float,
            checks=Check.isin([0.0, 1.0, 2.0]),
            nullable=False,
            description="0 month-to-month, 1 one year, 2 two year",
        ),
        "onlineSecurityFlag": Column(float, checks=_flag, nullable=False),
        "techSupportFlag": Column(float, checks=_flag, nullable=False),
        "internetServiceFlag": Column(float, checks=_flag, nullable=False),
        "tenureYears": Column(float, checks=Check(_finite), nullable=False),
    },
    strict=True,
    ordered=True,
    description="Encoded 8-feature customer vectors",
)


# Schema for the batch export
EXPORT_SCHEMA = DataFrameSchema(
    {
        "Customer_ID": Column(int, checks=Check.greater_than_or_equal_to(1), unique=True),
        "Churn_Probability": Column(
            str,
            checks=Check.str_matches(r"^-?\d+\.\d{2}%$"),
            description="Percentage with 2 decimals",
        ),
        "Risk_Level": Column(str, checks=Check.isin(["High", "Medium", "Low"])),
        "Tenure": Column(str, nullable=True),
        "Monthly_Charges": Column(str, nullable=True),
        "Contract": Column(str, nullable=True),
    },
    strict=True,
    ordered=True,
    description="Ranked batch prediction export",
)
