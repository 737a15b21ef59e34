"""
Ledger input validation.

Pure, synchronous checks run before any store call. Nothing here coerces
a bad value into a good one: a negative total is rejected, never clamped.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Tuple

from backend.app.core.exceptions import LedgerValidationError
from backend.app.models.enums import AdjustmentDirection, SubscriptionType
from backend.app.schemas.ledger import AdjustmentInput, ClientInput


@dataclass(frozen=True)
class ValidatedClient:
    """Client fields that passed validation, ready to persist."""
    name: str
    total_amount: float
    paid_amount: float
    subscription_type: SubscriptionType
    start_date: Optional[date]
    next_payment_date: Optional[date]

    def as_row(self) -> dict:
        return {
            "name": self.name,
            "total_amount": self.total_amount,
            "paid_amount": self.paid_amount,
            "subscription_type": self.subscription_type,
            "start_date": self.start_date,
            "next_payment_date": self.next_payment_date,
        }


def parse_amount(raw: Any) -> Optional[float]:
    """
    Parse a monetary input strictly.

    Accepts ints, floats and numeric strings ("12", " 12.50 "). Returns None
    for anything else, including "", "12abc", NaN and infinities.
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(value):
        return None
    return value


def _require_text(value: Optional[str], field: str, message: str) -> str:
    text = (value or "").strip()
    if not text:
        raise LedgerValidationError(
            message=message,
            error_code=LedgerValidationError.REQUIRED_FIELD,
            field=field,
            category="Missing Field"
        )
    return text


def validate_client(data: ClientInput) -> ValidatedClient:
    """
    Validate a proposed client state (create, or the new values of an edit).

    Order: name, total amount, paid amount, paid <= total.

    Raises:
        LedgerValidationError: on the first failing check
    """
    name = _require_text(data.name, "name", "Client name is required")

    total = parse_amount(data.total_amount)
    if total is None or total < 0:
        raise LedgerValidationError(
            message="Please enter a valid total amount",
            error_code=LedgerValidationError.INVALID_TOTAL_AMOUNT,
            field="total_amount"
        )

    paid = parse_amount(data.paid_amount)
    if paid is None or paid < 0:
        raise LedgerValidationError(
            message="Please enter a valid paid amount",
            error_code=LedgerValidationError.INVALID_PAID_AMOUNT,
            field="paid_amount"
        )

    if paid > total:
        raise LedgerValidationError(
            message="Paid amount cannot exceed total amount",
            error_code=LedgerValidationError.PAID_EXCEEDS_TOTAL,
            field="paid_amount"
        )

    # Schedule dates only mean something for monthly billing
    is_monthly = data.subscription_type == SubscriptionType.MONTHLY

    return ValidatedClient(
        name=name,
        total_amount=total,
        paid_amount=paid,
        subscription_type=data.subscription_type,
        start_date=data.start_date if is_monthly else None,
        next_payment_date=data.next_payment_date if is_monthly else None,
    )


def validate_adjustment(data: AdjustmentInput) -> Tuple[float, str]:
    """
    Validate an adjustment and apply its direction.

    Returns:
        (signed_amount, reason)

    Raises:
        LedgerValidationError: bad magnitude or empty reason
    """
    magnitude = parse_amount(data.amount)
    if magnitude is None or magnitude <= 0:
        raise LedgerValidationError(
            message="Please enter a valid positive number",
            error_code=LedgerValidationError.INVALID_ADJUSTMENT_AMOUNT,
            field="amount"
        )

    reason = _require_text(data.reason, "reason", "Reason is required")

    signed_amount = -magnitude if data.direction == AdjustmentDirection.DECREASE else magnitude
    return signed_amount, reason
