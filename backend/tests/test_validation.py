"""
Unit tests for ledger input validation.

Pure checks, no database.
"""

import math

import pytest

from backend.app.core.exceptions import LedgerValidationError
from backend.app.domain.ledger.validation import parse_amount, validate_adjustment, validate_client
from backend.app.models.enums import AdjustmentDirection, SubscriptionType
from backend.app.schemas.ledger import AdjustmentInput, ClientInput


@pytest.mark.parametrize("raw, expected", [
    (12, 12.0),
    (12.5, 12.5),
    ("12", 12.0),
    (" 12.50 ", 12.5),
    ("-3", -3.0),
    ("0", 0.0),
])
def test_parse_amount_accepts_numbers(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "12abc", "abc", "nan", "inf", "-inf", float("nan"), True])
def test_parse_amount_rejects_garbage(raw):
    assert parse_amount(raw) is None


def test_name_is_checked_first():
    with pytest.raises(LedgerValidationError) as exc_info:
        validate_client(ClientInput(name="  ", total_amount="abc", paid_amount="x"))

    assert exc_info.value.error_code == LedgerValidationError.REQUIRED_FIELD
    assert exc_info.value.field == "name"
    assert exc_info.value.category == "Missing Field"


def test_total_checked_before_paid():
    with pytest.raises(LedgerValidationError) as exc_info:
        validate_client(ClientInput(name="Acme", total_amount="12abc", paid_amount="-1"))

    assert exc_info.value.error_code == LedgerValidationError.INVALID_TOTAL_AMOUNT
    assert exc_info.value.message == "Please enter a valid total amount"
    assert exc_info.value.status_code == 400


def test_missing_total_is_invalid():
    with pytest.raises(LedgerValidationError) as exc_info:
        validate_client(ClientInput(name="Acme"))
    assert exc_info.value.error_code == LedgerValidationError.INVALID_TOTAL_AMOUNT


def test_negative_total_is_rejected_not_clamped():
    with pytest.raises(LedgerValidationError) as exc_info:
        validate_client(ClientInput(name="Acme", total_amount=-10, paid_amount=0))
    assert exc_info.value.error_code == LedgerValidationError.INVALID_TOTAL_AMOUNT


def test_negative_paid_is_rejected():
    with pytest.raises(LedgerValidationError) as exc_info:
        validate_client(ClientInput(name="Acme", total_amount=100, paid_amount=-5))

    assert exc_info.value.error_code == LedgerValidationError.INVALID_PAID_AMOUNT
    assert exc_info.value.details == {"field": "paid_amount"}


def test_paid_cannot_exceed_total():
    with pytest.raises(LedgerValidationError) as exc_info:
        validate_client(ClientInput(name="Acme", total_amount=100, paid_amount=150))

    assert exc_info.value.error_code == LedgerValidationError.PAID_EXCEEDS_TOTAL
    assert exc_info.value.message == "Paid amount cannot exceed total amount"
    assert exc_info.value.category == "Invalid Amount"


def test_paid_equal_to_total_is_fine():
    validated = validate_client(ClientInput(name="Acme", total_amount="100", paid_amount="100"))
    assert validated.paid_amount == validated.total_amount == 100.0


def test_dates_dropped_for_one_time_clients():
    validated = validate_client(ClientInput(
        name=" Acme ",
        total_amount=100,
        paid_amount=0,
        subscription_type=SubscriptionType.ONE_TIME,
        start_date="2026-01-01",
        next_payment_date="2026-02-01",
    ))

    assert validated.name == "Acme"
    assert validated.start_date is None
    assert validated.next_payment_date is None


def test_dates_kept_for_monthly_clients():
    validated = validate_client(ClientInput(
        name="Acme",
        total_amount=100,
        subscription_type="monthly",
        start_date="2026-01-01",
        next_payment_date="2026-02-01",
    ))

    row = validated.as_row()
    assert row["subscription_type"] == SubscriptionType.MONTHLY
    assert row["start_date"].isoformat() == "2026-01-01"
    assert row["next_payment_date"].isoformat() == "2026-02-01"


def test_adjustment_decrease_is_negative():
    amount, reason = validate_adjustment(AdjustmentInput(
        amount="75", direction=AdjustmentDirection.DECREASE, reason="Bank fee"
    ))
    assert amount == -75.0
    assert reason == "Bank fee"


def test_adjustment_increase_is_positive():
    amount, _ = validate_adjustment(AdjustmentInput(amount=75, direction="increase", reason="Capital"))
    assert amount == 75.0
    assert not math.isnan(amount)


@pytest.mark.parametrize("raw", [0, "-5", "abc", None, "nan"])
def test_adjustment_magnitude_must_be_positive(raw):
    with pytest.raises(LedgerValidationError) as exc_info:
        validate_adjustment(AdjustmentInput(amount=raw, reason="Fee"))

    assert exc_info.value.error_code == LedgerValidationError.INVALID_ADJUSTMENT_AMOUNT
    assert exc_info.value.message == "Please enter a valid positive number"


def test_adjustment_reason_required():
    with pytest.raises(LedgerValidationError) as exc_info:
        validate_adjustment(AdjustmentInput(amount=10, reason="  "))

    assert exc_info.value.error_code == LedgerValidationError.REQUIRED_FIELD
    assert exc_info.value.field == "reason"


@pytest.mark.parametrize("field, code", [
    ("total_amount", LedgerValidationError.INVALID_TOTAL_AMOUNT),
    ("paid_amount", LedgerValidationError.INVALID_PAID_AMOUNT),
])
def test_boolean_client_amounts_are_not_coerced(field, code):
    data = {"name": "Acme", "total_amount": 100, "paid_amount": 0, field: True}
    client_input = ClientInput(**data)

    assert getattr(client_input, field) is True
    with pytest.raises(LedgerValidationError) as exc_info:
        validate_client(client_input)
    assert exc_info.value.error_code == code


@pytest.mark.parametrize("raw", [True, False, [10], {"value": 10}])
def test_non_numeric_adjustment_amount_is_rejected(raw):
    adjustment_input = AdjustmentInput(amount=raw, reason="Fee")

    assert adjustment_input.amount == raw
    with pytest.raises(LedgerValidationError) as exc_info:
        validate_adjustment(adjustment_input)
    assert exc_info.value.error_code == LedgerValidationError.INVALID_ADJUSTMENT_AMOUNT
