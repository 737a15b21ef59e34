"""
Integration tests for the ledger service against the SQLite record stores.

Covers payment transaction emission on create/edit, adjustment signs,
delete semantics and the best-effort second write.
"""

import pytest

from backend.app.core.exceptions import LedgerValidationError, ResourceNotFoundError, StoreError
from backend.app.db.record_store import build_ledger_stores
from backend.app.domain.ledger.ledger_service import LedgerService
from backend.app.models.enums import AdjustmentDirection
from backend.app.schemas.ledger import AdjustmentInput, ClientInput

from conftest import TestingSessionLocal, create_user


def client_input(**overrides) -> ClientInput:
    data = {"name": "Acme", "total_amount": 100, "paid_amount": 0}
    data.update(overrides)
    return ClientInput(**data)


async def test_create_with_paid_amount_logs_one_payment(stores):
    result = await LedgerService.create_client(stores, client_input(paid_amount=40))

    assert result.client_write_ok is True
    assert result.transaction_write_ok is True
    assert result.transaction.amount == 40
    assert result.transaction.client_id == result.client.id
    assert result.transaction.client_name == "Acme"

    transactions = await LedgerService.load_transactions(stores)
    assert len(transactions) == 1
    assert transactions[0].amount == 40


async def test_create_with_zero_paid_logs_nothing(stores):
    result = await LedgerService.create_client(stores, client_input(paid_amount=0))

    assert result.transaction is None
    assert await LedgerService.load_transactions(stores) == []


async def test_paid_exceeding_total_has_no_side_effects(stores, mocker):
    client_insert = mocker.spy(stores.clients, "insert")
    transaction_insert = mocker.spy(stores.transactions, "insert")

    with pytest.raises(LedgerValidationError) as exc_info:
        await LedgerService.create_client(stores, client_input(total_amount=100, paid_amount=150))

    assert exc_info.value.error_code == LedgerValidationError.PAID_EXCEEDS_TOTAL
    client_insert.assert_not_called()
    transaction_insert.assert_not_called()
    assert await LedgerService.load_clients(stores) == []
    assert await LedgerService.load_transactions(stores) == []


async def test_edit_raising_paid_logs_the_difference(stores):
    created = await LedgerService.create_client(stores, client_input(paid_amount=30))

    result = await LedgerService.edit_client(stores, created.client.id, client_input(paid_amount=80))

    assert result.client.paid_amount == 80
    assert result.transaction is not None
    assert result.transaction.amount == 50

    amounts = [t.amount for t in await LedgerService.load_transactions(stores)]
    assert sorted(amounts) == [30, 50]


async def test_edit_lowering_paid_logs_nothing(stores):
    created = await LedgerService.create_client(stores, client_input(paid_amount=80))

    result = await LedgerService.edit_client(stores, created.client.id, client_input(paid_amount=30))

    assert result.client.paid_amount == 30
    assert result.transaction is None
    transactions = await LedgerService.load_transactions(stores)
    assert [t.amount for t in transactions] == [80]
    assert all(t.amount > 0 for t in transactions)


async def test_edit_payment_uses_new_name(stores):
    created = await LedgerService.create_client(stores, client_input(name="Old Name", paid_amount=10))

    result = await LedgerService.edit_client(
        stores, created.client.id, client_input(name="New Name", paid_amount=25)
    )

    assert result.transaction.client_name == "New Name"
    names = {t.client_name for t in await LedgerService.load_transactions(stores)}
    # Earlier rows keep the name they were written with
    assert names == {"Old Name", "New Name"}


async def test_lowering_total_below_paid_is_rejected(stores):
    created = await LedgerService.create_client(stores, client_input(total_amount=100, paid_amount=60))

    with pytest.raises(LedgerValidationError) as exc_info:
        await LedgerService.edit_client(
            stores, created.client.id, client_input(total_amount=50, paid_amount=60)
        )

    assert exc_info.value.error_code == LedgerValidationError.PAID_EXCEEDS_TOTAL
    clients = await LedgerService.load_clients(stores)
    assert clients[0].total_amount == 100


async def test_edit_missing_client_is_not_found(stores):
    with pytest.raises(ResourceNotFoundError):
        await LedgerService.edit_client(stores, 9999, client_input())


async def test_edit_other_owners_client_is_not_found(stores):
    intruder = await create_user("intruder", "intruder@test.com")
    intruder_stores = build_ledger_stores(TestingSessionLocal, intruder.id)
    created = await LedgerService.create_client(stores, client_input(paid_amount=10))

    with pytest.raises(ResourceNotFoundError):
        await LedgerService.edit_client(intruder_stores, created.client.id, client_input(paid_amount=90))

    clients = await LedgerService.load_clients(stores)
    assert clients[0].paid_amount == 10


async def test_deleting_client_keeps_its_transactions(stores):
    created = await LedgerService.create_client(stores, client_input(paid_amount=40))

    await LedgerService.delete_client(stores, created.client.id)

    assert await LedgerService.load_clients(stores) == []
    transactions = await LedgerService.load_transactions(stores)
    assert len(transactions) == 1
    assert transactions[0].client_id == created.client.id
    assert transactions[0].client_name == "Acme"


async def test_delete_missing_client_is_benign(stores):
    await LedgerService.delete_client(stores, 12345)


async def test_failed_transaction_insert_keeps_client(stores, mocker):
    mocker.patch.object(
        stores.transactions, "insert",
        side_effect=StoreError("Failed to add transaction")
    )

    result = await LedgerService.create_client(stores, client_input(paid_amount=40))

    assert result.client_write_ok is True
    assert result.transaction_write_ok is False
    assert result.transaction is None
    clients = await LedgerService.load_clients(stores)
    assert [c.paid_amount for c in clients] == [40]


async def test_failed_client_insert_propagates(stores, mocker):
    mocker.patch.object(stores.clients, "insert", side_effect=StoreError("Failed to add client"))
    transaction_insert = mocker.spy(stores.transactions, "insert")

    with pytest.raises(StoreError):
        await LedgerService.create_client(stores, client_input(paid_amount=40))

    transaction_insert.assert_not_called()


async def test_adjustment_sign_mapping(stores):
    decrease = await LedgerService.upsert_adjustment(stores, AdjustmentInput(
        amount=75, direction=AdjustmentDirection.DECREASE, reason="Bank fee"
    ))
    increase = await LedgerService.upsert_adjustment(stores, AdjustmentInput(
        amount=75, direction=AdjustmentDirection.INCREASE, reason="Capital"
    ))

    assert decrease.amount == -75
    assert increase.amount == 75
    # Adjustments never touch the payment log
    assert await LedgerService.load_transactions(stores) == []


async def test_adjustment_edit_keeps_created_at(stores):
    original = await LedgerService.upsert_adjustment(stores, AdjustmentInput(amount=20, reason="Fee"))

    edited = await LedgerService.upsert_adjustment(
        stores,
        AdjustmentInput(amount=30, direction="decrease", reason="Corrected fee"),
        editing_id=original.id
    )

    assert edited.id == original.id
    assert edited.amount == -30
    assert edited.reason == "Corrected fee"
    assert edited.created_at == original.created_at
    assert len(await LedgerService.load_adjustments(stores)) == 1


async def test_adjustment_edit_missing_is_not_found(stores):
    with pytest.raises(ResourceNotFoundError):
        await LedgerService.upsert_adjustment(stores, AdjustmentInput(amount=5, reason="x"), editing_id=404)


async def test_delete_adjustment(stores):
    adjustment = await LedgerService.upsert_adjustment(stores, AdjustmentInput(amount=5, reason="Tip"))

    await LedgerService.delete_adjustment(stores, adjustment.id)

    assert await LedgerService.load_adjustments(stores) == []


async def test_lists_are_newest_first(stores):
    for name in ("First", "Second", "Third"):
        await LedgerService.create_client(stores, client_input(name=name, paid_amount=1))

    clients = await LedgerService.load_clients(stores)
    transactions = await LedgerService.load_transactions(stores)

    assert [c.name for c in clients] == ["Third", "Second", "First"]
    assert [t.client_name for t in transactions] == ["Third", "Second", "First"]


async def test_snapshot_loads_all_collections(stores):
    await LedgerService.create_client(stores, client_input(paid_amount=10))
    await LedgerService.upsert_adjustment(stores, AdjustmentInput(amount=5, reason="Tip"))

    snapshot = await LedgerService.load_snapshot(stores)

    assert len(snapshot.clients) == 1
    assert len(snapshot.adjustments) == 1
    assert len(snapshot.transactions) == 1
