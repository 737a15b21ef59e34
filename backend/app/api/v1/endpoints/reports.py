"""
Report API Endpoints.

Generates the PDF report on demand; nothing is stored server-side.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from backend.app.core.dependencies import get_current_user, get_ledger_stores
from backend.app.db.record_store import LedgerStores
from backend.app.domain.ledger.ledger_service import LedgerService
from backend.app.services.analytics import AnalyticsService
from backend.app.services.report import build_report, render_pdf

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/pdf", response_class=Response)
async def download_report(
    current_user: dict = Depends(get_current_user),
    stores: LedgerStores = Depends(get_ledger_stores)
):
    """Money management report as a PDF attachment."""
    snapshot = await LedgerService.load_snapshot(stores)
    metrics = AnalyticsService.compute_metrics(snapshot.clients, snapshot.adjustments)

    document = build_report(
        metrics=metrics,
        clients=snapshot.clients,
        adjustments=snapshot.adjustments,
        transactions=snapshot.transactions,
        generated_at=datetime.now(timezone.utc),
        user_email=current_user.get("email"),
    )
    # reportlab is synchronous; keep the event loop free while it draws
    content = await run_in_threadpool(render_pdf, document)
    logger.info("Generated report %s for user %s", document.filename, current_user["user_id"])

    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'}
    )
