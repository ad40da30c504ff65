import logging
import os

from alembic.config import Config
from sqlalchemy import Connection, create_engine, event
from sqlalchemy.engine import Engine

from alembic import command
from dairybill.settings import settings

logger = logging.getLogger(__name__)

_engine: Engine | None = None
_connection: Connection | None = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # deliveries and payments cascade on client/bill removal
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def create_db_engine(url: str) -> Engine:
    """Build an engine for ``url``; SQLite connections get foreign keys enforced."""
    engine = create_engine(url, pool_pre_ping=True, pool_recycle=1800)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    logger.info("Database engine created: dialect=%s database=%s", engine.dialect.name, engine.url.database)
    return engine


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_db_engine(settings.db_url)
    return _engine


def get_connection() -> Connection:
    """Return the process-wide connection shared by the CLI repositories."""
    global _connection
    if _connection is None:
        _connection = get_engine().connect()
        logger.debug("Shared DB connection opened")
    return _connection


def _get_alembic_config() -> Config:
    project_root = os.path.dirname(os.path.dirname(__file__))
    ini_path = os.path.join(project_root, "alembic.ini")
    if not os.path.exists(ini_path):
        ini_path = os.path.join(os.getcwd(), "alembic.ini")
    cfg = Config(ini_path)
    cfg.set_main_option("script_location", os.path.join(project_root, "alembic"))
    return cfg


def initialize_db() -> None:
    """Bring the billing schema up to the latest Alembic revision."""
    cfg = _get_alembic_config()
    logger.info("Upgrading billing schema at %s", cfg.get_main_option("script_location"))
    command.upgrade(cfg, "head")
    logger.info("Billing schema is current")
