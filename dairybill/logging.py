import logging
import sys
from datetime import datetime

from dairybill.constants import IST
from dairybill.settings import settings

APP_NAME = "dairybill"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
# Third-party loggers that only add noise to the billing CLI.
QUIET_LOGGERS = ("alembic", "sqlalchemy.engine")


class ISTFormatter(logging.Formatter):
    """Text formatter stamping records in India time, where billing periods live."""

    def formatTime(self, record, datefmt=None):
        stamp = datetime.fromtimestamp(record.created, IST)
        return stamp.strftime(datefmt) if datefmt else stamp.isoformat(timespec="seconds")


def configure_logging() -> None:
    """Configure the root logger based on settings.

    Call once at startup.  Call ``reconfigure()`` after Alembic's
    ``fileConfig`` has replaced the handlers.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)

    if settings.log_json:
        from pythonjsonlogger.json import JsonFormatter

        handler.setFormatter(
            JsonFormatter(
                fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
                rename_fields={"asctime": "timestamp", "levelname": "level"},
                static_fields={"app": APP_NAME},
            )
        )
    else:
        handler.setFormatter(ISTFormatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


reconfigure = configure_logging
