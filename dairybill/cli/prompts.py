from __future__ import annotations

from datetime import datetime

import questionary
from rich.console import Console

from dairybill.constants import IST

console = Console()


def parse_period(text: str) -> tuple[int, int] | None:
    """Parse 'YYYY-MM' into a zero-based (month, year) pair."""
    text = (text or "").strip()
    if len(text) != 7 or text[4] != "-":
        return None
    try:
        year = int(text[:4])
        month = int(text[5:])
    except ValueError:
        return None
    if not 1 <= month <= 12:
        return None
    return month - 1, year


def ask_period(prompt: str = "Billing month (YYYY-MM):") -> tuple[int, int] | None:
    """Prompt until a valid month is entered. Returns None if cancelled."""
    default = datetime.now(IST).strftime("%Y-%m")
    while True:
        answer = questionary.text(prompt, default=default).ask()
        if answer is None:
            return None
        period = parse_period(answer)
        if period is not None:
            return period
        console.print("[red]Invalid format. Use YYYY-MM (e.g. 2025-03).[/red]")
