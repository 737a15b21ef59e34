"""
Payment Transaction database model.

Append-only audit trail of money received.
"""

from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime, String
from sqlalchemy.sql import func
from backend.app.db.session import Base


class PaymentTransaction(Base):
    """
    Payment Transaction model.

    One row per increase of a client's paid amount.
    client_id is deliberately not a foreign key: rows outlive the client they
    reference, and client_name keeps the name the client had at payment time.
    NO updates or deletions from the ledger engine.
    """
    __tablename__ = "payment_transactions"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)

    # Linkage (snapshot, not enforced)
    client_id = Column(Integer, nullable=False, index=True)
    client_name = Column(String(255), nullable=False)

    amount = Column(Float, nullable=False)
    payment_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<PaymentTransaction(id={self.id}, client='{self.client_name}', amount={self.amount})>"
