from __future__ import annotations

from rich.console import Console
from rich.table import Table

from dairybill.cli.prompts import ask_period
from dairybill.constants import format_period
from dairybill.models import format_inr
from dairybill.services.bill_service import BillService

console = Console()


def payment_stats_menu(bill_service: BillService) -> None:
    period = ask_period("Statistics for month (YYYY-MM):")
    if period is None:
        return
    month, year = period
    stats = bill_service.get_payment_stats(month, year)

    table = Table(title=f"Payments - {format_period(month, year)}", show_header=False)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Bills", str(stats.total_bills))
    table.add_row("Paid", str(stats.paid_bills))
    table.add_row("Unpaid", str(stats.unpaid_bills))
    table.add_row("Overdue", str(stats.overdue_bills))
    table.add_row("Total revenue", format_inr(stats.total_revenue))
    table.add_row("Collected", format_inr(stats.collected_revenue))
    table.add_row("Pending", format_inr(stats.pending_revenue))
    table.add_row("Average bill", format_inr(stats.average_bill_amount))
    table.add_row("Collection rate", f"{stats.collection_rate:.1f}%")
    console.print(table)


def payment_trends_menu(bill_service: BillService, months_back: int = 6) -> None:
    trends = bill_service.get_payment_trends(months_back)

    table = Table(title=f"Last {months_back} months")
    table.add_column("Month")
    table.add_column("Bills", justify="right")
    table.add_column("Revenue", justify="right")
    table.add_column("Collected", justify="right")
    table.add_column("Rate", justify="right")
    for period in trends:
        table.add_row(
            period.label,
            str(period.stats.total_bills),
            format_inr(period.stats.total_revenue),
            format_inr(period.stats.collected_revenue),
            f"{period.stats.collection_rate:.1f}%",
        )
    console.print(table)


def pending_balances_menu(bill_service: BillService) -> None:
    balances = bill_service.get_clients_with_pending_payments()
    if not balances:
        console.print("[green]No pending payments.[/green]")
        return

    table = Table(title="Pending Balances")
    table.add_column("Client")
    table.add_column("Phone")
    table.add_column("Bills", justify="right")
    table.add_column("Pending", justify="right")
    for balance in balances:
        table.add_row(
            balance.client.name,
            balance.client.phone,
            str(balance.bills_count),
            format_inr(balance.pending_amount),
        )
    console.print(table)
