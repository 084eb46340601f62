"""Numeric feature component."""

import numpy as np
import pandas as pd

from .base import BaseFeature


def parse_numeric(values: pd.Series) -> pd.Series:
    """Parse strings as floats; unparseable, absent or non-finite -> 0."""
    parsed = pd.to_numeric(values, errors="coerce").astype(float)
    return parsed.replace([np.inf, -np.inf], np.nan).fillna(0.0)


class NumericFeature(BaseFeature):
    """
    Real-valued feature parsed from a raw column.

    Used for tenure, MonthlyCharges and TotalCharges. Blank TotalCharges
    values (new customers in the telco export) encode as 0.
    """

    def encode(self, df: pd.DataFrame) -> pd.Series:
        """Parse the raw column as floats."""
        return parse_numeric(self.raw(df))
