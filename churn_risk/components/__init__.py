"""Feature encoding components for churn risk scoring."""

from .base import BaseFeature
from .numeric import NumericFeature, parse_numeric
from .contract import ContractFeature
from .flags import FlagFeature
from .tenure import TenureYearsFeature

__all__ = [
    "BaseFeature",
    "NumericFeature",
    "ContractFeature",
    "FlagFeature",
    "TenureYearsFeature",
    "parse_numeric",
]
