"""Binary service flag component."""

import pandas as pd

from .base import BaseFeature


class FlagFeature(BaseFeature):
    """
    Binary flag from a yes/no service column.

    1 if the value case-insensitively equals "yes" or "1", else 0.
    "No internet service" and absent values are 0.
    """

    truthy = {"yes", "1"}

    def encode(self, df: pd.DataFrame) -> pd.Series:
        """Encode the column as 0/1."""
        return self.raw(df).str.lower().isin(self.truthy).astype(float)
