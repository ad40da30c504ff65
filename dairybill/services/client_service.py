from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from dairybill.models.client import Client
from dairybill.models.delivery import Delivery
from dairybill.repositories.base import ClientRepository, DeliveryRepository

logger = logging.getLogger(__name__)


class ClientService:
    def __init__(self, client_repo: ClientRepository, delivery_repo: DeliveryRepository) -> None:
        self.client_repo = client_repo
        self.delivery_repo = delivery_repo

    def create_client(
        self,
        name: str,
        milk_quantity: Decimal,
        rate: int,
        phone: str = "",
        address: str = "",
        user_id: int = 0,
    ) -> Client:
        if milk_quantity < 0:
            raise ValueError("Milk quantity cannot be negative")
        if rate < 0:
            raise ValueError("Rate cannot be negative")
        client = Client(
            name=name,
            milk_quantity=milk_quantity,
            rate=rate,
            phone=phone,
            address=address,
            user_id=user_id,
        )
        result = self.client_repo.create(client)
        logger.info("Client created: id=%s, name=%s", result.id, result.name)
        return result

    def list_clients(self, active_only: bool = False) -> list[Client]:
        result = self.client_repo.list_all()
        if active_only:
            result = [client for client in result if client.is_active]
        logger.debug("Listed %d clients", len(result))
        return result

    def get_client(self, client_id: int) -> Client | None:
        return self.client_repo.get_by_id(client_id)

    def record_delivery(
        self,
        client: Client,
        delivery_date: date,
        quantity: Decimal | None = None,
        is_delivered: bool = True,
        notes: str = "",
    ) -> Delivery:
        """Record a day's delivery; quantity defaults to the client's standard amount."""
        if client.id is None:
            raise ValueError("Cannot record delivery for client without an id")
        if quantity is None:
            quantity = client.milk_quantity
        if quantity < 0:
            raise ValueError("Delivery quantity cannot be negative")
        delivery = self.delivery_repo.create(
            Delivery(
                client_id=client.id,
                date=delivery_date,
                quantity=quantity,
                is_delivered=is_delivered,
                notes=notes,
            )
        )
        logger.info("Delivery recorded: client=%s date=%s delivered=%s", client.id, delivery_date, is_delivered)
        return delivery
