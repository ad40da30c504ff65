"""Root conftest: in-memory SQLite engine and fixtures for the full schema."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy import Connection, create_engine, event, text
from sqlalchemy.engine import Engine

from dairybill.constants import IST
from dairybill.models.bill import Bill
from dairybill.models.client import Client
from dairybill.models.delivery import Delivery

# Matches Alembic head: 3f9a1c2d7e40 (initial schema)
SCHEMA_DDL = """
CREATE TABLE clients (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    user_id INTEGER NOT NULL DEFAULT 0,
    name TEXT NOT NULL,
    phone TEXT NOT NULL DEFAULT '',
    address TEXT NOT NULL DEFAULT '',
    milk_quantity NUMERIC(10, 3) NOT NULL DEFAULT 0,
    rate INTEGER NOT NULL DEFAULT 0,
    is_active TINYINT NOT NULL DEFAULT 1,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
);

CREATE TABLE deliveries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    client_id INTEGER NOT NULL REFERENCES clients(id) ON DELETE CASCADE,
    date DATE NOT NULL,
    quantity NUMERIC(10, 3) NOT NULL DEFAULT 0,
    is_delivered TINYINT NOT NULL DEFAULT 0,
    notes TEXT NOT NULL DEFAULT '',
    created_at DATETIME NOT NULL,
    UNIQUE(client_id, date)
);

CREATE TABLE bills (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    client_id INTEGER NOT NULL REFERENCES clients(id),
    user_id INTEGER NOT NULL DEFAULT 0,
    month SMALLINT NOT NULL,
    year INTEGER NOT NULL,
    total_quantity NUMERIC(12, 3) NOT NULL DEFAULT 0,
    total_amount INTEGER NOT NULL DEFAULT 0,
    is_paid TINYINT NOT NULL DEFAULT 0,
    paid_date DATETIME,
    due_date DATE NOT NULL,
    delivery_ids TEXT NOT NULL DEFAULT '[]',
    calculation TEXT,
    created_at DATETIME NOT NULL,
    UNIQUE(client_id, month, year)
);

CREATE TABLE payments (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    bill_id INTEGER NOT NULL REFERENCES bills(id) ON DELETE CASCADE,
    client_id INTEGER NOT NULL REFERENCES clients(id),
    amount INTEGER NOT NULL,
    method VARCHAR(20) NOT NULL,
    transaction_id TEXT NOT NULL DEFAULT '',
    notes TEXT NOT NULL DEFAULT '',
    paid_at DATETIME NOT NULL,
    created_at DATETIME NOT NULL
);
"""

# Reference "now" used across the suite: early May 2025, India time.
NOW = datetime(2025, 5, 2, 9, 0, tzinfo=IST)


@pytest.fixture()
def db_engine() -> Engine:
    engine = create_engine("sqlite:///:memory:")

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    return engine


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()
    yield conn
    conn.close()


def _sample_client(**overrides) -> Client:
    defaults = dict(
        name="Sharma Household",
        phone="9876543210",
        address="12 MG Road",
        milk_quantity=Decimal("2"),
        rate=5000,
        is_active=True,
        created_at=datetime(2025, 4, 1, 8, 0, tzinfo=IST),
    )
    defaults.update(overrides)
    return Client(**defaults)


def _sample_bill(client_id: int = 1, **overrides) -> Bill:
    defaults = dict(
        client_id=client_id,
        month=3,
        year=2025,
        total_quantity=Decimal("60"),
        total_amount=300000,
        due_date=date(2025, 5, 10),
    )
    defaults.update(overrides)
    return Bill(**defaults)


def _full_month_deliveries(client_id: int, month: int, year: int, quantity: Decimal) -> list[Delivery]:
    from dairybill.services.calculator import days_in_month

    return [
        Delivery(id=i, client_id=client_id, date=day, quantity=quantity, is_delivered=True)
        for i, day in enumerate(days_in_month(month, year), 1)
    ]


@pytest.fixture()
def sample_client():
    return _sample_client


@pytest.fixture()
def sample_bill():
    return _sample_bill


@pytest.fixture()
def full_month_deliveries():
    return _full_month_deliveries
