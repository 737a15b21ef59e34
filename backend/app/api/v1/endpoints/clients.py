"""
Client API Endpoints.

Create, edit and delete clients. Paid-amount increases are logged to the
payment transaction log by the ledger service.
"""

from fastapi import APIRouter, Depends, Path, status

from backend.app.core.dependencies import get_ledger_stores
from backend.app.db.record_store import LedgerStores
from backend.app.domain.ledger.ledger_service import LedgerService, LedgerWriteResult
from backend.app.schemas.ledger import (
    ClientInput, ClientResponse, ClientListResponse, ClientWriteResponse, TransactionResponse
)

router = APIRouter(prefix="/clients", tags=["Clients"])


def _write_response(result: LedgerWriteResult, message: str) -> ClientWriteResponse:
    return ClientWriteResponse(
        client=ClientResponse.model_validate(result.client),
        client_write_ok=result.client_write_ok,
        transaction_write_ok=result.transaction_write_ok,
        transaction=(
            TransactionResponse.model_validate(result.transaction)
            if result.transaction is not None else None
        ),
        message=message,
    )


@router.get("", response_model=ClientListResponse)
async def list_clients(stores: LedgerStores = Depends(get_ledger_stores)):
    """List the owner's clients, newest first."""
    clients = await LedgerService.load_clients(stores)
    return ClientListResponse(
        clients=[ClientResponse.model_validate(client) for client in clients],
        total=len(clients)
    )


@router.post("", response_model=ClientWriteResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_data: ClientInput,
    stores: LedgerStores = Depends(get_ledger_stores)
):
    """
    Add a client.

    A nonzero paid amount is logged as the client's first payment.
    """
    result = await LedgerService.create_client(stores, client_data)
    return _write_response(result, "Client added successfully")


@router.put("/{client_id}", response_model=ClientWriteResponse)
async def edit_client(
    client_data: ClientInput,
    client_id: int = Path(...),
    stores: LedgerStores = Depends(get_ledger_stores)
):
    """
    Update a client.

    Raising the paid amount logs the difference as a new payment; lowering
    it logs nothing.
    """
    result = await LedgerService.edit_client(stores, client_id, client_data)
    return _write_response(result, "Client updated successfully")


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: int = Path(...),
    stores: LedgerStores = Depends(get_ledger_stores)
):
    """Delete a client. Its payment history is kept."""
    await LedgerService.delete_client(stores, client_id)
