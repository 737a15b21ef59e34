"""
Analytics Service.

Derives the dashboard figures from in-memory snapshots. Pure functions:
no store access, no cached running totals, nothing mutated. Each call walks
the whole collection again.
"""

from typing import Iterable

from backend.app.schemas.analytics import ClientProgress, DashboardMetrics, TransactionTotals


def _amount(value) -> float:
    return float(value or 0)


class AnalyticsService:

    @staticmethod
    def compute_metrics(clients: Iterable, adjustments: Iterable) -> DashboardMetrics:
        """
        Compute the dashboard figures.

        company_balance = money actually received + signed manual adjustments.
        """
        clients = list(clients)

        total_revenue = sum(_amount(client.total_amount) for client in clients)
        total_paid = sum(_amount(client.paid_amount) for client in clients)
        total_adjustments = sum(_amount(adjustment.amount) for adjustment in adjustments)

        return DashboardMetrics(
            total_revenue=total_revenue,
            total_paid=total_paid,
            total_remaining=total_revenue - total_paid,
            total_adjustments=total_adjustments,
            company_balance=total_paid + total_adjustments,
            client_count=len(clients),
        )

    @staticmethod
    def client_progress(client) -> ClientProgress:
        """
        Remaining amount and paid percentage of one client.

        A zero total has no meaningful ratio; it reports 0% instead of NaN.
        The bar width is capped at 100.
        """
        total = _amount(client.total_amount)
        paid = _amount(client.paid_amount)

        percent_paid = (paid / total) * 100 if total > 0 else 0.0

        return ClientProgress(
            remaining=total - paid,
            percent_paid=percent_paid,
            progress_width=min(percent_paid, 100.0),
        )

    @staticmethod
    def transaction_totals(transactions: Iterable) -> TransactionTotals:
        """Count and sum of the payment transaction log."""
        transactions = list(transactions)
        return TransactionTotals(
            count=len(transactions),
            total_amount=sum(_amount(transaction.amount) for transaction in transactions),
        )
