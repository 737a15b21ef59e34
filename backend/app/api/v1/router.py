"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import (
    auth, clients, adjustments, transactions, analytics, reports
)

router = APIRouter()

# Identity
router.include_router(auth.router)

# Ledger writes
router.include_router(clients.router)
router.include_router(adjustments.router)

# Read-only views
router.include_router(transactions.router)
router.include_router(analytics.router)
router.include_router(reports.router)
