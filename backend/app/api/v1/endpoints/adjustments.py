"""
Balance Adjustment API Endpoints.
"""

from fastapi import APIRouter, Depends, Path, status

from backend.app.core.dependencies import get_ledger_stores
from backend.app.db.record_store import LedgerStores
from backend.app.domain.ledger.ledger_service import LedgerService
from backend.app.schemas.ledger import (
    AdjustmentInput, AdjustmentResponse, AdjustmentListResponse, AdjustmentWriteResponse
)

router = APIRouter(prefix="/adjustments", tags=["Balance Adjustments"])


@router.get("", response_model=AdjustmentListResponse)
async def list_adjustments(stores: LedgerStores = Depends(get_ledger_stores)):
    """List the owner's balance adjustments, newest first."""
    adjustments = await LedgerService.load_adjustments(stores)
    return AdjustmentListResponse(
        adjustments=[AdjustmentResponse.model_validate(adjustment) for adjustment in adjustments],
        total=len(adjustments)
    )


@router.post("", response_model=AdjustmentWriteResponse, status_code=status.HTTP_201_CREATED)
async def add_adjustment(
    adjustment_data: AdjustmentInput,
    stores: LedgerStores = Depends(get_ledger_stores)
):
    """Add a balance adjustment; direction decides the sign."""
    adjustment = await LedgerService.upsert_adjustment(stores, adjustment_data)
    return AdjustmentWriteResponse(
        adjustment=AdjustmentResponse.model_validate(adjustment),
        message="Adjustment added successfully"
    )


@router.put("/{adjustment_id}", response_model=AdjustmentWriteResponse)
async def edit_adjustment(
    adjustment_data: AdjustmentInput,
    adjustment_id: int = Path(...),
    stores: LedgerStores = Depends(get_ledger_stores)
):
    """Rewrite the amount and reason of an adjustment."""
    adjustment = await LedgerService.upsert_adjustment(stores, adjustment_data, editing_id=adjustment_id)
    return AdjustmentWriteResponse(
        adjustment=AdjustmentResponse.model_validate(adjustment),
        message="Adjustment updated successfully"
    )


@router.delete("/{adjustment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_adjustment(
    adjustment_id: int = Path(...),
    stores: LedgerStores = Depends(get_ledger_stores)
):
    await LedgerService.delete_adjustment(stores, adjustment_id)
