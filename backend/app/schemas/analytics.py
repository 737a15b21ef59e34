"""
Analytics Schemas.
"""

from pydantic import BaseModel
from typing import List

from backend.app.schemas.ledger import ClientResponse


class DashboardMetrics(BaseModel):
    """Top-level figures, recomputed from the full snapshot on every call."""
    total_revenue: float
    total_paid: float
    total_remaining: float
    total_adjustments: float
    company_balance: float
    client_count: int


class ClientProgress(BaseModel):
    """Per-client figures used for display only."""
    remaining: float
    percent_paid: float
    progress_width: float


class ClientOverview(BaseModel):
    """A client row with its progress figures."""
    client: ClientResponse
    progress: ClientProgress


class TransactionTotals(BaseModel):
    """Footer of the payment transaction log."""
    count: int
    total_amount: float


class DashboardResponse(BaseModel):
    """Dashboard view: metrics, client cards and transaction totals."""
    metrics: DashboardMetrics
    clients: List[ClientOverview]
    transaction_totals: TransactionTotals
