from dairybill.repositories.base import (
    BillRepository,
    ClientRepository,
    DeliveryRepository,
    PaymentRepository,
)


def get_client_repository() -> ClientRepository:
    from dairybill.db import get_connection
    from dairybill.repositories.sqlalchemy import SQLAlchemyClientRepository

    return SQLAlchemyClientRepository(get_connection())


def get_delivery_repository() -> DeliveryRepository:
    from dairybill.db import get_connection
    from dairybill.repositories.sqlalchemy import SQLAlchemyDeliveryRepository

    return SQLAlchemyDeliveryRepository(get_connection())


def get_bill_repository() -> BillRepository:
    from dairybill.db import get_connection
    from dairybill.repositories.sqlalchemy import SQLAlchemyBillRepository

    return SQLAlchemyBillRepository(get_connection())


def get_payment_repository() -> PaymentRepository:
    from dairybill.db import get_connection
    from dairybill.repositories.sqlalchemy import SQLAlchemyPaymentRepository

    return SQLAlchemyPaymentRepository(get_connection())
