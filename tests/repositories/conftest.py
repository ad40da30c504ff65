import pytest
from sqlalchemy import Connection

from dairybill.repositories.sqlalchemy import (
    SQLAlchemyBillRepository,
    SQLAlchemyClientRepository,
    SQLAlchemyDeliveryRepository,
    SQLAlchemyPaymentRepository,
)


@pytest.fixture()
def client_repo(db_connection: Connection) -> SQLAlchemyClientRepository:
    return SQLAlchemyClientRepository(db_connection)


@pytest.fixture()
def delivery_repo(db_connection: Connection) -> SQLAlchemyDeliveryRepository:
    return SQLAlchemyDeliveryRepository(db_connection)


@pytest.fixture()
def bill_repo(db_connection: Connection) -> SQLAlchemyBillRepository:
    return SQLAlchemyBillRepository(db_connection)


@pytest.fixture()
def payment_repo(db_connection: Connection) -> SQLAlchemyPaymentRepository:
    return SQLAlchemyPaymentRepository(db_connection)
