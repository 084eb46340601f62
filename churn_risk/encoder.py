"""
FeatureEncoder - maps raw customer records to 8-feature vectors.

Usage:
    from churn_risk import FeatureEncoder, CustomerRecord

    encoder = FeatureEncoder()
    vector = encoder.encode_record(CustomerRecord(tenure="12", contract="One year"))
    frame = encoder.encode_records(records)
"""

import numpy as np
import pandas as pd

from .components import (
    ContractFeature,
    FlagFeature,
    NumericFeature,
    TenureYearsFeature,
)
from .records import CustomerRecord, records_to_frame
from .schemas import FEATURE_FRAME_SCHEMA, FEATURE_NAMES


class FeatureEncoder:
    """
    Vectorized encoder for customer records.

    Components (fixed positions):
    0 tenure, 1 monthlyCharges, 2 totalCharges: parsed reals, default 0
    3 contractCode: 0/1/2 from the contract term
    4-6 onlineSecurity/techSupport/internetService flags: 0/1
    7 tenureYears: tenure / 12

    Encoding is total: malformed or absent values become 0, never errors.
    """

    FEATURE_NAMES = FEATURE_NAMES

    def __init__(self):
        self._init_components()

    def _init_components(self) -> None:
        """Initialize encoding components in feature order."""
        self.components = [
            NumericFeature("tenure", "tenure"),
            NumericFeature("MonthlyCharges", "monthlyCharges"),
            NumericFeature("TotalCharges", "totalCharges"),
            ContractFeature("Contract", "contractCode"),
            FlagFeature("OnlineSecurity", "onlineSecurityFlag"),
            FlagFeature("TechSupport", "techSupportFlag"),
            FlagFeature("InternetService", "internetServiceFlag"),
            TenureYearsFeature("tenure", "tenureYears"),
        ]

    @property
    def width(self) -> int:
        return len(self.components)

    def encode_frame(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Encode a raw DataFrame.

        Args:
            df: Raw DataFrame keyed by input column names

        Returns:
            DataFrame with FEATURE_NAMES columns, one row per input row
        """
        encoded = pd.DataFrame(index=df.index)
        for component in self.components:
            encoded[component.feature] = component.encode(df).astype(float)
        return FEATURE_FRAME_SCHEMA.validate(encoded)

    def encode_records(self, records: list[CustomerRecord]) -> pd.DataFrame:
        """Encode a list of records into an N x 8 frame."""
        return self.encode_frame(records_to_frame(records))

    def encode_record(self, record: CustomerRecord) -> np.ndarray:
        """Encode one record into a length-8 vector."""
        return self.encode_records([record]).to_numpy(dtype=float)[0]
