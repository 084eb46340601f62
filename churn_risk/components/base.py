"""Base class for feature encoding components."""

from abc import ABC, abstractmethod

import pandas as pd


class BaseFeature(ABC):
    """
    Abstract base class for feature encoding components.

    Each component turns raw string columns into one or more numeric
    feature columns using vectorized pandas operations. Components never
    raise on malformed values: they fall back to 0.
    """

    def __init__(self, column: str, feature: str):
        """
        Initialize component.

        Args:
            column: Raw input column to read
            feature: Name of the produced feature column
        """
        self.column = column
        self.feature = feature

    @abstractmethod
    def encode(self, df: pd.DataFrame) -> pd.Series:
        """
        Calculate the feature for all rows.

        Args:
            df: Raw DataFrame (string values, possibly missing)

        Returns:
            Series of floats aligned with df.index
        """
        pass

    def raw(self, df: pd.DataFrame) -> pd.Series:
        """Raw column as stripped strings; absent column -> empty strings."""
        if self.column not in df.columns:
            return pd.Series("", index=df.index, dtype=object)
        return df[self.column].fillna("").astype(str).str.strip()
