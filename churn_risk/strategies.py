"""
Retention strategy rule table.

Each rule names a tier and optional conditions on tenure, contract code
and monthly charges. Selection is deterministic: rules are evaluated in
table order and every matching rule contributes its actions once.
"""

from dataclasses import dataclass
from typing import Optional

from .config import ScoringConfig, DEFAULT_SCORING


@dataclass(frozen=True)
class StrategyRule:
    """
    One row of the strategy table.

    Attributes:
        tier: Risk tier the rule applies to
        name: Short strategy name
        actions: Concrete retention actions
        max_tenure: Applies only when tenure < max_tenure (months)
        contract_code: Applies only to this contract code
        min_monthly_charges: Applies only when monthly charges > this
    """

    tier: str
    name: str
    actions: tuple[str, ...]
    max_tenure: Optional[float] = None
    contract_code: Optional[int] = None
    min_monthly_charges: Optional[float] = None

    def matches(self, tier: str, tenure: float, contract_code: int, monthly_charges: float) -> bool:
        if tier != self.tier:
            return False
        if self.max_tenure is not None and not tenure < self.max_tenure:
            return False
        if self.contract_code is not None and contract_code != self.contract_code:
            return False
        if self.min_monthly_charges is not None and not monthly_charges > self.min_monthly_charges:
            return False
        return True


def default_rules(config: ScoringConfig = DEFAULT_SCORING) -> list[StrategyRule]:
    """Strategy table for the given tenure/charges triggers."""
    return [
        # === High risk: immediate action ===
        StrategyRule(
            "high", "immediate outreach",
            (
                "Offer 20-30% discount for next 3 months",
                "Priority outreach from account manager within 48 hours",
                "Exclusive premium features or loyalty rewards",
            ),
        ),
        StrategyRule(
            "high", "new customer bonus",
            (
                "Welcome bonus credit for customers in their first year",
                "Onboarding review call to resolve early issues",
            ),
            max_tenure=config.new_customer_tenure_months,
        ),
        StrategyRule(
            "high", "contract upgrade incentive",
            (
                "Upgrade to a one- or two-year contract with a price lock",
                "Waive fees for switching from month-to-month",
            ),
            contract_code=0,
        ),
        StrategyRule(
            "high", "service optimization",
            (
                "Personalized service review and plan optimization",
                "Bundle add-ons to lower the effective monthly price",
            ),
            min_monthly_charges=config.high_charges_threshold,
        ),
        # === Medium risk: proactive engagement ===
        StrategyRule(
            "medium", "engagement",
            (
                "Send personalized email with product tips and value highlights",
                "Quarterly check-in to ensure satisfaction",
                "Gather feedback through survey with small incentive",
            ),
        ),
        StrategyRule(
            "medium", "trial offer",
            (
                "10-15% discount offer for contract renewal",
                "Free trial of new features aligned with their usage patterns",
            ),
        ),
        # === Low risk: maintain and grow ===
        StrategyRule(
            "low", "retention",
            (
                "Continue excellent service and monitor usage patterns",
                "Acknowledge loyalty with thank-you communications",
                "Annual satisfaction check-in",
            ),
        ),
        StrategyRule(
            "low", "upsell",
            ("Share relevant product updates and premium add-ons",),
        ),
    ]


class RetentionStrategies:
    """Selects strategies for a scored customer from a rule table."""

    def __init__(self, rules: Optional[list[StrategyRule]] = None, config: Optional[ScoringConfig] = None):
        self.rules = rules if rules is not None else default_rules(config or DEFAULT_SCORING)

    def select(
        self,
        tier: str,
        tenure: float,
        contract_code: int,
        monthly_charges: float,
    ) -> list[StrategyRule]:
        """Return matching rules in table order."""
        return [
            rule for rule in self.rules
            if rule.matches(tier, tenure, contract_code, monthly_charges)
        ]

    def names(self, tier: str, tenure: float, contract_code: int, monthly_charges: float) -> list[str]:
        """Names of matching strategies."""
        return [rule.name for rule in self.select(tier, tenure, contract_code, monthly_charges)]
