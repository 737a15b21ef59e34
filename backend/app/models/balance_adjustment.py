"""
Balance Adjustment database model.
"""

from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime, Text
from sqlalchemy.sql import func
from backend.app.db.session import Base


class BalanceAdjustment(Base):
    """
    Manual correction to the company balance, independent of any client.

    amount is signed: positive raises the balance, negative lowers it.
    """
    __tablename__ = "balance_adjustments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)

    amount = Column(Float, nullable=False)
    reason = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<BalanceAdjustment(id={self.id}, amount={self.amount})>"
