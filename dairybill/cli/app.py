import questionary
from rich.console import Console

from dairybill.cli.bill_menu import due_bills_menu, generate_bills_menu, list_bills_menu
from dairybill.cli.client_menu import client_menu, record_delivery_menu
from dairybill.cli.report_menu import payment_stats_menu, payment_trends_menu, pending_balances_menu
from dairybill.repositories.factory import (
    get_bill_repository,
    get_client_repository,
    get_delivery_repository,
    get_payment_repository,
)
from dairybill.services.bill_service import BillService
from dairybill.services.billing_service import BillingService
from dairybill.services.client_service import ClientService

console = Console()


def _build_services() -> tuple[BillingService, BillService, ClientService]:
    client_repo = get_client_repository()
    delivery_repo = get_delivery_repository()
    bill_repo = get_bill_repository()
    payment_repo = get_payment_repository()
    return (
        BillingService(client_repo, delivery_repo, bill_repo),
        BillService(bill_repo, payment_repo, client_repo),
        ClientService(client_repo, delivery_repo),
    )


def main_menu() -> None:
    billing_service, bill_service, client_service = _build_services()

    console.print()
    console.print("[bold]Dairy Billing[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Main Menu",
            choices=[
                "Generate Monthly Bills",
                "List Bills",
                "Due & Upcoming Bills",
                "Payment Statistics",
                "Payment Trends",
                "Pending Balances",
                "Clients",
                "Record Delivery",
                "Exit",
            ],
        ).ask()

        if choice is None or choice == "Exit":
            console.print("[bold]Goodbye![/bold]")
            break
        elif choice == "Generate Monthly Bills":
            generate_bills_menu(billing_service)
        elif choice == "List Bills":
            list_bills_menu(bill_service)
        elif choice == "Due & Upcoming Bills":
            due_bills_menu(bill_service)
        elif choice == "Payment Statistics":
            payment_stats_menu(bill_service)
        elif choice == "Payment Trends":
            payment_trends_menu(bill_service)
        elif choice == "Pending Balances":
            pending_balances_menu(bill_service)
        elif choice == "Clients":
            client_menu(client_service)
        elif choice == "Record Delivery":
            record_delivery_menu(client_service)
