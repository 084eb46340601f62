"""Derived tenure-in-years component."""

import pandas as pd

from .numeric import parse_numeric
from .base import BaseFeature


class TenureYearsFeature(BaseFeature):
    """Tenure in years (tenure months / 12); not stored in the input."""

    months_per_year = 12

    def encode(self, df: pd.DataFrame) -> pd.Series:
        """Derive years from the raw tenure column."""
        return parse_numeric(self.raw(df)) / self.months_per_year
