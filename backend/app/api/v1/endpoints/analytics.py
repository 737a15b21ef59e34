"""
Dashboard API Endpoints.

Read-only figures recomputed from a fresh snapshot on every request.
"""

from fastapi import APIRouter, Depends

from backend.app.core.dependencies import get_ledger_stores
from backend.app.db.record_store import LedgerStores
from backend.app.domain.ledger.ledger_service import LedgerService
from backend.app.schemas.analytics import ClientOverview, DashboardMetrics, DashboardResponse
from backend.app.schemas.ledger import ClientResponse
from backend.app.services.analytics import AnalyticsService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(stores: LedgerStores = Depends(get_ledger_stores)):
    """Metrics cards, client cards with progress, and transaction log totals."""
    snapshot = await LedgerService.load_snapshot(stores)

    return DashboardResponse(
        metrics=AnalyticsService.compute_metrics(snapshot.clients, snapshot.adjustments),
        clients=[
            ClientOverview(
                client=ClientResponse.model_validate(client),
                progress=AnalyticsService.client_progress(client)
            )
            for client in snapshot.clients
        ],
        transaction_totals=AnalyticsService.transaction_totals(snapshot.transactions),
    )


@router.get("/metrics", response_model=DashboardMetrics)
async def get_metrics(stores: LedgerStores = Depends(get_ledger_stores)):
    """Just the five summary figures."""
    snapshot = await LedgerService.load_snapshot(stores)
    return AnalyticsService.compute_metrics(snapshot.clients, snapshot.adjustments)
