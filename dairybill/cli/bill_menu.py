from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from dairybill.cli.prompts import ask_period
from dairybill.constants import ADJUSTMENT_LABELS, PAYMENT_METHOD_LABELS, format_period
from dairybill.models import format_inr, format_liters, parse_inr
from dairybill.models.bill import Bill
from dairybill.models.billing import BillGenerationResult, GenerationStatus
from dairybill.models.payment import PaymentMethod
from dairybill.services.bill_service import BillService
from dairybill.services.billing_service import BillingService

console = Console()

STATUS_STYLES = {
    GenerationStatus.GENERATED: "[green]generated[/green]",
    GenerationStatus.SKIPPED: "[yellow]skipped[/yellow]",
    GenerationStatus.FAILED: "[red]failed[/red]",
}


def _show_generation_results(results: list[BillGenerationResult]) -> None:
    table = Table(title="Generation Results")
    table.add_column("Client")
    table.add_column("Status", justify="center")
    table.add_column("Quantity", justify="right")
    table.add_column("Amount", justify="right")
    table.add_column("Details")

    for result in results:
        calc = result.calculation
        table.add_row(
            result.client_name,
            STATUS_STYLES[result.status],
            format_liters(calc.billed_quantity) if calc else "-",
            format_inr(calc.total_amount) if calc else "-",
            result.error or "",
        )
    console.print(table)


def generate_bills_menu(billing_service: BillingService) -> None:
    console.print()
    console.print("[bold]Generate Monthly Bills[/bold]", style="cyan")

    period = ask_period()
    if period is None:
        console.print("[yellow]Cancelled.[/yellow]")
        return
    month, year = period

    include_inactive = questionary.confirm("Include inactive clients?", default=False).ask()
    results = billing_service.generate_monthly_bills(month, year, include_inactive=bool(include_inactive))
    if not results:
        console.print("[dim]No clients to bill.[/dim]")
        return

    _show_generation_results(results)
    generated = sum(1 for r in results if r.success)
    console.print(f"  [bold]{generated} of {len(results)} bills generated for {format_period(month, year)}[/bold]")


def _show_bill_detail(bill: Bill, bill_service: BillService) -> None:
    console.print()
    console.print(f"[bold]Bill {bill.uuid}[/bold] - {bill.period_label}")
    calc = bill.calculation
    if calc is not None:
        console.print(
            f"  Delivered {calc.delivery_days} of {calc.days_in_month} days "
            f"({calc.missed_deliveries} missed)"
        )
        console.print(f"  Estimated: {format_liters(calc.estimated_quantity)}")
        console.print(f"  Actual: {format_liters(calc.actual_quantity)}")
        console.print(f"  Base amount: {format_inr(calc.base_amount)}")
        for adj in calc.adjustments:
            label = ADJUSTMENT_LABELS.get(adj.kind, adj.kind)
            console.print(f"  [dim]{label}:[/dim] {adj.description} {format_inr(adj.amount)}")
    console.print(f"  [bold]Total: {format_inr(bill.total_amount)}[/bold]")
    console.print(f"  Due: {bill.due_date.strftime('%d/%m/%Y')}")
    status = bill.payment_status()
    if bill.is_paid and bill.paid_date is not None:
        status += f" on {bill.paid_date.strftime('%d/%m/%Y')}"
    console.print(f"  Status: {status}")

    if bill.id is None:
        return
    for payment in bill_service.list_payments(bill.id):
        label = PAYMENT_METHOD_LABELS.get(payment.method, payment.method.value)
        console.print(f"  [dim]Payment:[/dim] {format_inr(payment.amount)} via {label} {payment.transaction_id}")


def record_payment_menu(bill: Bill, bill_service: BillService) -> None:
    console.print()
    console.print("[bold]Record Payment[/bold]", style="cyan")

    label_to_method = {label: method for method, label in PAYMENT_METHOD_LABELS.items()}
    choice = questionary.select("Payment method:", choices=list(label_to_method)).ask()
    if choice is None:
        console.print("[yellow]Cancelled.[/yellow]")
        return
    method: PaymentMethod = label_to_method[choice]

    while True:
        val = questionary.text("Amount (blank for bill total):", default="").ask()
        if val is None:
            console.print("[yellow]Cancelled.[/yellow]")
            return
        if not val:
            amount = None
            break
        amount = parse_inr(val)
        if amount is not None and amount > 0:
            break
        console.print("[red]Invalid amount. Try again.[/red]")

    transaction_id = questionary.text("Transaction reference (optional):").ask() or ""

    try:
        payment = bill_service.record_payment(bill, method, amount=amount, transaction_id=transaction_id)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        return
    console.print(f"[green]Payment of {format_inr(payment.amount)} recorded.[/green]")


def _bill_actions(bill: Bill, bill_service: BillService) -> None:
    while True:
        _show_bill_detail(bill, bill_service)
        choices = ["Mark as Unpaid" if bill.is_paid else "Record Payment", "Back"]
        action = questionary.select("Action:", choices=choices).ask()
        if action is None or action == "Back":
            return
        if action == "Record Payment":
            record_payment_menu(bill, bill_service)
        elif action == "Mark as Unpaid":
            bill_service.toggle_paid(bill)
            console.print("[yellow]Bill marked as unpaid.[/yellow]")


def _bills_table(title: str, bills: list[Bill]) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Client", justify="right")
    table.add_column("Period")
    table.add_column("Quantity", justify="right")
    table.add_column("Amount", justify="right")
    table.add_column("Due")
    table.add_column("Status")
    for i, bill in enumerate(bills, 1):
        table.add_row(
            str(i),
            str(bill.client_id),
            bill.period_label,
            format_liters(bill.total_quantity),
            format_inr(bill.total_amount),
            bill.due_date.strftime("%d/%m/%Y"),
            bill.payment_status(),
        )
    return table


def list_bills_menu(bill_service: BillService) -> None:
    period = ask_period()
    if period is None:
        return
    month, year = period

    bills = bill_service.list_bills(month, year)
    if not bills:
        console.print(f"[dim]No bills for {format_period(month, year)}.[/dim]")
        return

    console.print(_bills_table(f"Bills - {format_period(month, year)}", bills))

    choices = [f"{i}. Client {b.client_id} - {format_inr(b.total_amount)}" for i, b in enumerate(bills, 1)]
    choices.append("Back")
    choice = questionary.select("Select a bill:", choices=choices).ask()
    if choice is None or choice == "Back":
        return
    idx = int(choice.split(".")[0]) - 1
    _bill_actions(bills[idx], bill_service)


def due_bills_menu(bill_service: BillService) -> None:
    due = bill_service.get_due_bills()
    upcoming = bill_service.get_upcoming_due_bills()

    if due:
        console.print(_bills_table("Due Bills", due))
    else:
        console.print("[green]No bills due.[/green]")
    if upcoming:
        console.print(_bills_table("Due This Week", upcoming))
    else:
        console.print("[dim]No bills due this week.[/dim]")
