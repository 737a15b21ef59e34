"""
Ledger Service (Domain Logic).

Keeps client paid amounts, balance adjustments and the payment transaction
log consistent with each other.

Writes are best effort, not transactional: the client row is written first
and the payment transaction second, as two separate store calls. If the
second call fails the client change stands, the failure is logged, and the
result says so through ``transaction_write_ok``.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from backend.app.core.exceptions import ResourceNotFoundError, StoreError
from backend.app.db.record_store import LedgerStores
from backend.app.domain.ledger.validation import validate_adjustment, validate_client
from backend.app.models.balance_adjustment import BalanceAdjustment
from backend.app.models.client import Client
from backend.app.models.payment_transaction import PaymentTransaction
from backend.app.schemas.ledger import AdjustmentInput, ClientInput

logger = logging.getLogger(__name__)


@dataclass
class LedgerWriteResult:
    """Two-phase outcome of a client create/edit."""
    client: Client
    client_write_ok: bool = True
    transaction_write_ok: bool = True
    transaction: Optional[PaymentTransaction] = None


@dataclass
class LedgerSnapshot:
    """The three collections a dashboard view or report is computed from."""
    clients: List[Client]
    adjustments: List[BalanceAdjustment]
    transactions: List[PaymentTransaction]


class LedgerService:

    @staticmethod
    async def _record_payment(
        stores: LedgerStores,
        client_id: int,
        client_name: str,
        amount: float
    ) -> Tuple[bool, Optional[PaymentTransaction]]:
        """Insert one payment transaction; a failure is logged and reported, not raised."""
        try:
            transaction = await stores.transactions.insert({
                "client_id": client_id,
                "client_name": client_name,
                "amount": amount,
                "payment_date": datetime.now(timezone.utc),
            })
        except StoreError as e:
            logger.error(
                "Failed to create transaction for client %s (amount %.2f): %s",
                client_id, amount, e.message
            )
            return False, None
        return True, transaction

    @staticmethod
    async def create_client(stores: LedgerStores, data: ClientInput) -> LedgerWriteResult:
        """
        Create a client.

        Flow:
        1. Validate (no store call on failure)
        2. Insert the client
        3. If paid_amount > 0, log one payment for the full paid amount

        Raises:
            LedgerValidationError: invalid input
            StoreError: the client insert failed
        """
        validated = validate_client(data)

        client = await stores.clients.insert(validated.as_row())
        logger.info("Client %s created for user %s", client.id, stores.owner_id)

        result = LedgerWriteResult(client=client)
        if validated.paid_amount > 0:
            result.transaction_write_ok, result.transaction = await LedgerService._record_payment(
                stores, client.id, validated.name, validated.paid_amount
            )
        return result

    @staticmethod
    async def edit_client(stores: LedgerStores, client_id: int, data: ClientInput) -> LedgerWriteResult:
        """
        Edit a client.

        Validation runs on the new values. The payment delta is measured
        against the stored paid amount; only a positive delta is logged, and
        under the new name. Update first, insert second.

        Raises:
            LedgerValidationError: invalid input
            ResourceNotFoundError: no such client for this owner
            StoreError: the client read or update failed
        """
        validated = validate_client(data)

        current = await stores.clients.get(client_id)
        if current is None:
            raise ResourceNotFoundError("Client", client_id)

        delta = validated.paid_amount - float(current.paid_amount)

        client = await stores.clients.update(client_id, validated.as_row())
        if client is None:
            # Deleted between the read and the update
            raise ResourceNotFoundError("Client", client_id)

        result = LedgerWriteResult(client=client)
        if delta > 0:
            result.transaction_write_ok, result.transaction = await LedgerService._record_payment(
                stores, client.id, validated.name, delta
            )
        return result

    @staticmethod
    async def delete_client(stores: LedgerStores, client_id: int) -> None:
        """Delete the client row only; its payment transactions stay."""
        await stores.clients.delete(client_id)
        logger.info("Client %s deleted for user %s", client_id, stores.owner_id)

    @staticmethod
    async def upsert_adjustment(
        stores: LedgerStores,
        data: AdjustmentInput,
        editing_id: Optional[int] = None
    ) -> BalanceAdjustment:
        """
        Add a balance adjustment, or rewrite amount and reason of an existing one.

        Adjustments never touch the payment transaction log.

        Raises:
            LedgerValidationError: invalid input
            ResourceNotFoundError: editing_id does not belong to this owner
            StoreError: the store call failed
        """
        signed_amount, reason = validate_adjustment(data)
        row = {"amount": signed_amount, "reason": reason}

        if editing_id is None:
            return await stores.adjustments.insert(row)

        adjustment = await stores.adjustments.update(editing_id, row)
        if adjustment is None:
            raise ResourceNotFoundError("Adjustment", editing_id)
        return adjustment

    @staticmethod
    async def delete_adjustment(stores: LedgerStores, adjustment_id: int) -> None:
        await stores.adjustments.delete(adjustment_id)

    @staticmethod
    async def load_clients(stores: LedgerStores) -> List[Client]:
        return await stores.clients.list(order_by="created_at", ascending=False)

    @staticmethod
    async def load_adjustments(stores: LedgerStores) -> List[BalanceAdjustment]:
        return await stores.adjustments.list(order_by="created_at", ascending=False)

    @staticmethod
    async def load_transactions(stores: LedgerStores) -> List[PaymentTransaction]:
        return await stores.transactions.list(order_by="payment_date", ascending=False)

    @staticmethod
    async def load_snapshot(stores: LedgerStores) -> LedgerSnapshot:
        """Load the three collections concurrently and join them."""
        clients, adjustments, transactions = await asyncio.gather(
            LedgerService.load_clients(stores),
            LedgerService.load_adjustments(stores),
            LedgerService.load_transactions(stores),
        )
        return LedgerSnapshot(clients=clients, adjustments=adjustments, transactions=transactions)
