"""
Client database model.

A billing relationship with one payer.
"""

from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Enum, ForeignKey
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.enums import SubscriptionType


class Client(Base):
    """
    Client model.

    Invariant: 0 <= paid_amount <= total_amount. The ledger engine checks
    it before every write; the table itself does not.
    start_date / next_payment_date are only set for monthly clients.
    """
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Ownership
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)

    name = Column(String(255), nullable=False)

    # Financials
    total_amount = Column(Float, nullable=False, default=0)
    paid_amount = Column(Float, nullable=False, default=0)

    subscription_type = Column(
        Enum(
            SubscriptionType,
            name="subscription_type",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=SubscriptionType.ONE_TIME,
    )
    start_date = Column(Date, nullable=True)
    next_payment_date = Column(Date, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Client(id={self.id}, name='{self.name}', paid={self.paid_amount}/{self.total_amount})>"
