"""
Payment Transaction API Endpoints.

Read-only: the log is written by the ledger service only.
"""

from fastapi import APIRouter, Depends

from backend.app.core.dependencies import get_ledger_stores
from backend.app.db.record_store import LedgerStores
from backend.app.domain.ledger.ledger_service import LedgerService
from backend.app.schemas.ledger import TransactionLogResponse, TransactionResponse
from backend.app.services.analytics import AnalyticsService

router = APIRouter(prefix="/transactions", tags=["Payment Transactions"])


@router.get("", response_model=TransactionLogResponse)
async def list_transactions(stores: LedgerStores = Depends(get_ledger_stores)):
    """Complete payment history, newest payment first, with count and sum."""
    transactions = await LedgerService.load_transactions(stores)
    totals = AnalyticsService.transaction_totals(transactions)
    return TransactionLogResponse(
        transactions=[TransactionResponse.model_validate(transaction) for transaction in transactions],
        total=totals.count,
        total_amount=totals.total_amount
    )
