"""
Configuration settings for the expiry report
"""
import logging
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_ENV_FILE = [str(p) for p in (_PROJECT_ROOT / ".env",) if p.is_file()]


class Settings(BaseSettings):
    """Report settings, overridable through STOCKEXPIRY_* environment variables"""

    # Days before expiry at which a batch turns from "safe" to "near"
    ALERT_THRESHOLD_DAYS: int = 90
    # Batches with this much stock or less are treated as fully depleted
    DEPLETION_EPSILON: float = 0.001

    # Invoice status values written by the invoice screens
    DELETED_STATUS: str = "محذوف"
    RETURNED_STATUS: str = "مرتجع"

    STOCKTAKE_SOURCE_LABEL: str = "الرصيد الحالي (المخزن)"
    # Formatted with invoice_id and vendor
    INVOICE_SOURCE_TEMPLATE: str = "فاتورة #{invoice_id} ({vendor})"

    LOG_LEVEL: str = "WARNING"

    @field_validator("ALERT_THRESHOLD_DAYS")
    @classmethod
    def _threshold_not_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("ALERT_THRESHOLD_DAYS must not be negative")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level

    class Config:
        env_prefix = "STOCKEXPIRY_"
        env_file = _ENV_FILE if _ENV_FILE else [".env"]
        case_sensitive = True


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a console handler to the package logger.

    Library code only logs through ``logging.getLogger(__name__)``; callers that
    want the output (scripts, the back-office shell) call this once.
    """
    logger = logging.getLogger("stockexpiry")
    logger.setLevel(level or settings.LOG_LEVEL)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(handler)
