"""
Ledger Pydantic schemas.

Amount fields on the request side accept raw numbers or form strings;
the ledger engine parses them strictly so each bad field gets its own error
instead of a generic 422.
"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Any, Optional, List
from backend.app.models.enums import SubscriptionType, AdjustmentDirection


# Left untyped so JSON booleans and garbage strings reach the strict parser
RawAmount = Any


class ClientInput(BaseModel):
    """Schema for creating or editing a client (full replacement of editable fields)."""
    name: str = Field(default="", max_length=255, description="Client display name")
    total_amount: RawAmount = Field(default=None, description="Amount owed")
    paid_amount: RawAmount = Field(default=0, description="Amount received so far")
    subscription_type: SubscriptionType = Field(default=SubscriptionType.ONE_TIME)
    start_date: Optional[date] = Field(default=None, description="Monthly clients only")
    next_payment_date: Optional[date] = Field(default=None, description="Monthly clients only")


class AdjustmentInput(BaseModel):
    """Schema for adding or editing a balance adjustment."""
    amount: RawAmount = Field(default=None, description="Positive magnitude; sign comes from direction")
    direction: AdjustmentDirection = Field(default=AdjustmentDirection.INCREASE)
    reason: str = Field(default="", description="Why the balance changes")


class ClientResponse(BaseModel):
    """Schema for client response."""
    id: int
    user_id: int
    name: str
    total_amount: float
    paid_amount: float
    subscription_type: SubscriptionType
    start_date: Optional[date]
    next_payment_date: Optional[date]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AdjustmentResponse(BaseModel):
    """Schema for balance adjustment response."""
    id: int
    user_id: int
    amount: float
    reason: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TransactionResponse(BaseModel):
    """Schema for payment transaction response."""
    id: int
    user_id: int
    client_id: int
    client_name: str
    amount: float
    payment_date: datetime
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ClientWriteResponse(BaseModel):
    """
    Outcome of a client create/edit.

    transaction_write_ok is False only when a payment transaction was due and
    its insert failed after the client row was already written.
    """
    client: ClientResponse
    client_write_ok: bool
    transaction_write_ok: bool
    transaction: Optional[TransactionResponse] = None
    message: str


class AdjustmentWriteResponse(BaseModel):
    """Outcome of an adjustment upsert."""
    adjustment: AdjustmentResponse
    message: str


class ClientListResponse(BaseModel):
    """Schema for the client list."""
    clients: List[ClientResponse]
    total: int


class AdjustmentListResponse(BaseModel):
    """Schema for the adjustment list."""
    adjustments: List[AdjustmentResponse]
    total: int


class TransactionLogResponse(BaseModel):
    """Schema for the payment transaction log with its footer totals."""
    transactions: List[TransactionResponse]
    total: int
    total_amount: float
