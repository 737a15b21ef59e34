"""
Database seeding script for a demo ledger.

Creates one owner with a handful of clients and balance adjustments,
written through the ledger service so the payment log is filled the same
way the API fills it. Run this script after the database is set up.
"""

import asyncio
import sys
from datetime import date
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from backend.app.db.session import AsyncSessionLocal, engine, Base
from backend.app.db.record_store import build_ledger_stores
from backend.app.domain.ledger.ledger_service import LedgerService
from backend.app.models.user import User
from backend.app.models.enums import AdjustmentDirection, SubscriptionType
from backend.app.schemas.ledger import AdjustmentInput, ClientInput
from backend.app.core.security import get_password_hash

DEMO_CLIENTS = [
    ClientInput(name="Atlas Cafe", total_amount=1200, paid_amount=400,
                subscription_type=SubscriptionType.MONTHLY,
                start_date=date(2026, 9, 1), next_payment_date=date(2026, 11, 1)),
    ClientInput(name="Medina Print Shop", total_amount=3500, paid_amount=3500),
    ClientInput(name="Riad Studio", total_amount=800, paid_amount=0),
]

DEMO_ADJUSTMENTS = [
    AdjustmentInput(amount=5000, direction=AdjustmentDirection.INCREASE, reason="Founders' capital"),
    AdjustmentInput(amount=350, direction=AdjustmentDirection.DECREASE, reason="Hosting invoice"),
]


async def seed_users():
    """
    Seed the demo owner and its ledger.

    Creates:
    - 1 owner (demo / demo123)
    - 3 clients, two of them with payments
    - 2 balance adjustments
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("🌱 Starting seeding...")

        result = await db.execute(select(User).where(User.username == "demo"))
        if result.scalar_one_or_none():
            print("ℹ️  Demo user already exists, skipping seeding")
            return

        owner = User(
            email="demo@money-management.local",
            username="demo",
            hashed_password=get_password_hash("demo123"),
            is_active=True,
        )
        db.add(owner)
        await db.commit()
        await db.refresh(owner)
        print("✅ Created demo user (username: demo, password: demo123)")

    stores = build_ledger_stores(AsyncSessionLocal, owner.id)

    for client_input in DEMO_CLIENTS:
        result = await LedgerService.create_client(stores, client_input)
        print(f"✅ Client {result.client.name} (payment logged: {result.transaction is not None})")

    for adjustment_input in DEMO_ADJUSTMENTS:
        adjustment = await LedgerService.upsert_adjustment(stores, adjustment_input)
        print(f"✅ Adjustment {adjustment.reason}: {adjustment.amount:.2f}")

    print("\n🎉 Seeding completed successfully!")


if __name__ == "__main__":
    asyncio.run(seed_users())
