from __future__ import annotations

from datetime import date, datetime

import questionary
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import IntegrityError

from dairybill.constants import IST
from dairybill.models import format_inr, format_liters, parse_inr, parse_liters
from dairybill.models.client import Client
from dairybill.services.client_service import ClientService

console = Console()


def _list_clients(client_service: ClientService) -> None:
    clients = client_service.list_clients()
    if not clients:
        console.print("[dim]No clients registered.[/dim]")
        return

    table = Table(title="Clients")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Phone")
    table.add_column("Daily", justify="right")
    table.add_column("Rate/L", justify="right")
    table.add_column("Active", justify="center")
    for client in clients:
        table.add_row(
            str(client.id),
            client.name,
            client.phone,
            format_liters(client.milk_quantity),
            format_inr(client.rate),
            "yes" if client.is_active else "no",
        )
    console.print(table)


def _create_client(client_service: ClientService) -> None:
    console.print()
    console.print("[bold]New Client[/bold]", style="cyan")

    name = questionary.text("Name:").ask()
    if not name:
        console.print("[yellow]Cancelled.[/yellow]")
        return
    phone = questionary.text("Phone (optional):").ask() or ""
    address = questionary.text("Address (optional):").ask() or ""

    while True:
        answer = questionary.text("Liters per day (e.g. 1.5):").ask()
        if answer is None:
            console.print("[yellow]Cancelled.[/yellow]")
            return
        quantity = parse_liters(answer)
        if quantity is not None and quantity >= 0:
            break
        console.print("[red]Invalid quantity. Try again.[/red]")

    while True:
        answer = questionary.text("Rate per liter (e.g. 60.00):").ask()
        if answer is None:
            console.print("[yellow]Cancelled.[/yellow]")
            return
        rate = parse_inr(answer)
        if rate is not None and rate >= 0:
            break
        console.print("[red]Invalid rate. Try again.[/red]")

    client = client_service.create_client(name, quantity, rate, phone=phone, address=address)
    console.print(f"[green]Client created: {client.name} (id={client.id})[/green]")


def client_menu(client_service: ClientService) -> None:
    while True:
        choice = questionary.select("Clients", choices=["List Clients", "Add Client", "Back"]).ask()
        if choice is None or choice == "Back":
            return
        if choice == "List Clients":
            _list_clients(client_service)
        elif choice == "Add Client":
            _create_client(client_service)


def _ask_date() -> date | None:
    default = datetime.now(IST).strftime("%d/%m/%Y")
    while True:
        answer = questionary.text("Date (DD/MM/YYYY):", default=default).ask()
        if answer is None:
            return None
        try:
            return datetime.strptime(answer.strip(), "%d/%m/%Y").date()
        except ValueError:
            console.print("[red]Invalid date. Use DD/MM/YYYY.[/red]")


def record_delivery_menu(client_service: ClientService) -> None:
    clients = client_service.list_clients(active_only=True)
    if not clients:
        console.print("[dim]No active clients.[/dim]")
        return

    by_label: dict[str, Client] = {f"{c.id}. {c.name}": c for c in clients}
    choice = questionary.select("Client:", choices=[*by_label, "Back"]).ask()
    if choice is None or choice == "Back":
        return
    client = by_label[choice]

    delivery_date = _ask_date()
    if delivery_date is None:
        return

    delivered = questionary.confirm("Delivered?", default=True).ask()
    if delivered is None:
        return
    quantity = client.milk_quantity
    if delivered:
        while True:
            answer = questionary.text("Quantity (liters):", default=str(client.milk_quantity)).ask()
            if answer is None:
                return
            parsed = parse_liters(answer)
            if parsed is not None and parsed >= 0:
                quantity = parsed
                break
            console.print("[red]Invalid quantity. Try again.[/red]")

    try:
        client_service.record_delivery(client, delivery_date, quantity=quantity, is_delivered=bool(delivered))
    except (IntegrityError, ValueError) as exc:
        console.print(f"[red]Could not record delivery: {exc}[/red]")
        return
    console.print("[green]Delivery recorded.[/green]")
