from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from dairybill.models.bill import Bill
from dairybill.models.client import Client
from dairybill.models.stats import PaymentStats, PendingBalance


def select_due_bills(bills: Iterable[Bill], today: date) -> list[Bill]:
    """Unpaid bills whose due date has arrived."""
    return [bill for bill in bills if not bill.is_paid and bill.due_date <= today]


def select_upcoming_bills(bills: Iterable[Bill], today: date, window_days: int = 7) -> list[Bill]:
    """Unpaid bills falling due after today but within ``window_days``."""
    horizon = today + timedelta(days=window_days)
    return [bill for bill in bills if not bill.is_paid and today < bill.due_date <= horizon]


def compute_payment_stats(bills: Iterable[Bill], today: date) -> PaymentStats:
    bills = list(bills)
    if not bills:
        return PaymentStats()

    paid = [bill for bill in bills if bill.is_paid]
    total_revenue = sum(bill.total_amount for bill in bills)
    collected_revenue = sum(bill.total_amount for bill in paid)
    overdue = sum(1 for bill in bills if not bill.is_paid and bill.due_date < today)

    return PaymentStats(
        total_bills=len(bills),
        paid_bills=len(paid),
        unpaid_bills=len(bills) - len(paid),
        overdue_bills=overdue,
        total_revenue=total_revenue,
        collected_revenue=collected_revenue,
        pending_revenue=total_revenue - collected_revenue,
        average_bill_amount=round(total_revenue / len(bills)),
        collection_rate=(collected_revenue / total_revenue * 100) if total_revenue > 0 else 0.0,
    )


def pending_balances(clients: Iterable[Client], bills: Iterable[Bill]) -> list[PendingBalance]:
    """Unpaid totals per client, largest balance first."""
    totals: dict[int, tuple[int, int]] = {}
    for bill in bills:
        if bill.is_paid:
            continue
        amount, count = totals.get(bill.client_id, (0, 0))
        totals[bill.client_id] = (amount + bill.total_amount, count + 1)

    result = [
        PendingBalance(client=client, pending_amount=totals[client.id][0], bills_count=totals[client.id][1])
        for client in clients
        if client.id in totals
    ]
    result.sort(key=lambda balance: balance.pending_amount, reverse=True)
    return result
