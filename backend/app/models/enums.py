"""
Ledger enumerations.
"""

import enum


class SubscriptionType(str, enum.Enum):
    """
    How a client is billed.

    Only MONTHLY clients carry a start date and a next payment date.
    """
    MONTHLY = "monthly"
    ONE_TIME = "one-time"

    @property
    def label(self) -> str:
        return "Monthly" if self is SubscriptionType.MONTHLY else "One-Time"


class AdjustmentDirection(str, enum.Enum):
    """Sign applied to a balance adjustment magnitude."""
    INCREASE = "increase"
    DECREASE = "decrease"
