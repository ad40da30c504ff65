from __future__ import annotations

import logging
from datetime import datetime

from dairybill.constants import IST, format_period
from dairybill.models.billing import BillGenerationResult, BillingPolicy, GenerationStatus
from dairybill.models.client import Client
from dairybill.repositories.base import BillRepository, ClientRepository, DeliveryRepository, DuplicateBillError
from dairybill.services.calculator import build_bill, calculate_monthly_bill, month_bounds

logger = logging.getLogger(__name__)

ALREADY_EXISTS = "Bill already exists for this month"


class BillingService:
    """Generates monthly bills from client settings and delivery records."""

    def __init__(
        self,
        client_repo: ClientRepository,
        delivery_repo: DeliveryRepository,
        bill_repo: BillRepository,
        policy: BillingPolicy | None = None,
    ) -> None:
        self.client_repo = client_repo
        self.delivery_repo = delivery_repo
        self.bill_repo = bill_repo
        self.policy = policy or BillingPolicy.from_settings()

    def generate_bill_for_client(
        self,
        client: Client,
        month: int,
        year: int,
        now: datetime | None = None,
    ) -> BillGenerationResult:
        """Calculate and persist one client's bill.

        Never raises: a bill that already exists yields a skipped result and
        any other error yields a failed one.
        """
        if now is None:
            now = datetime.now(IST)
        try:
            if client.id is None:
                raise ValueError("Cannot generate bill for client without an id")

            if self.bill_repo.get_for_client_period(client.id, month, year) is not None:
                logger.info("Skipping client %s: bill exists for %s", client.id, format_period(month, year))
                return BillGenerationResult(
                    client_id=client.id,
                    client_name=client.name,
                    status=GenerationStatus.SKIPPED,
                    error=ALREADY_EXISTS,
                )

            start, end = month_bounds(month, year)
            deliveries = self.delivery_repo.list_by_date_range(start, end, client_id=client.id)
            calculation = calculate_monthly_bill(client, month, year, deliveries, now=now, policy=self.policy)
            bill = build_bill(client, month, year, calculation, deliveries, policy=self.policy)
            bill = self.bill_repo.create(bill)
        except DuplicateBillError:
            logger.info("Skipping client %s: bill created concurrently for %s", client.id, format_period(month, year))
            return BillGenerationResult(
                client_id=client.id,
                client_name=client.name,
                status=GenerationStatus.SKIPPED,
                error=ALREADY_EXISTS,
            )
        except Exception as exc:
            logger.exception("Bill generation failed for client %s (%s)", client.id, format_period(month, year))
            return BillGenerationResult(
                client_id=client.id,
                client_name=client.name,
                status=GenerationStatus.FAILED,
                error=str(exc) or type(exc).__name__,
            )

        logger.info(
            "Bill created: id=%s, client=%s, period=%s, total=%d",
            bill.id,
            client.id,
            format_period(month, year),
            bill.total_amount,
        )
        return BillGenerationResult(
            client_id=client.id,
            client_name=client.name,
            status=GenerationStatus.GENERATED,
            bill_id=bill.id,
            calculation=calculation,
        )

    def generate_monthly_bills(
        self,
        month: int,
        year: int,
        include_inactive: bool = False,
        now: datetime | None = None,
    ) -> list[BillGenerationResult]:
        month_bounds(month, year)
        clients = self.client_repo.list_all()
        if not include_inactive:
            clients = [client for client in clients if client.is_active]

        results = [self.generate_bill_for_client(client, month, year, now=now) for client in clients]

        generated = sum(1 for r in results if r.status == GenerationStatus.GENERATED)
        skipped = sum(1 for r in results if r.status == GenerationStatus.SKIPPED)
        failed = sum(1 for r in results if r.status == GenerationStatus.FAILED)
        logger.info(
            "Monthly bills for %s: generated=%d skipped=%d failed=%d",
            format_period(month, year),
            generated,
            skipped,
            failed,
        )
        return results
