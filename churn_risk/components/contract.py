"""Contract term categorical component."""

import numpy as np
import pandas as pd

from .base import BaseFeature


class ContractFeature(BaseFeature):
    """
    Categorical code for the contract term.

    Case-insensitive substring match, first match wins:
    - contains "month":        0 (month-to-month)
    - contains "one" or "1":   1 (one year)
    - contains "two" or "2":   2 (two year)
    - absent or unmatched:     0
    """

    # (substrings, code) checked in order
    codes = [
        (("month",), 0),
        (("one", "1"), 1),
        (("two", "2"), 2),
    ]
    default = 0

    def encode(self, df: pd.DataFrame) -> pd.Series:
        """Encode contract terms as 0/1/2."""
        values = self.raw(df).str.lower()

        conditions = []
        choices = []
        for substrings, code in self.codes:
            matched = np.zeros(len(values), dtype=bool)
            for sub in substrings:
                matched |= values.str.contains(sub, regex=False).to_numpy()
            conditions.append(matched)
            choices.append(code)

        return pd.Series(
            np.select(conditions, choices, default=self.default),
            index=df.index,
            dtype=float,
        )
