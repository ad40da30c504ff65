from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="DAIRYBILL_", extra="ignore")

    db_url: str = "sqlite:///dairybill.db"

    loyalty_discount_percent: Decimal = Decimal("5")
    loyalty_min_months: int = 6
    bulk_discount_percent: Decimal = Decimal("2")
    bulk_min_liters: Decimal = Decimal("100")
    bill_due_day: int = 10
    upcoming_window_days: int = 7

    log_level: str = "INFO"
    log_json: bool = False


settings = Settings()
