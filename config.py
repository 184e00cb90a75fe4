"""
Settings and logging setup for the invoice app.
Values come from the environment or a local .env file.
"""
import logging
from functools import lru_cache
from typing import Optional

import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Freelancer profile and invoicing defaults"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Freelancer profile (printed on every invoice)
    FREELANCER_NAME: str = "Your Name"
    FREELANCER_GSTIN: str = ""
    FREELANCER_PAN: str = ""
    FREELANCER_ADDRESS: str = ""
    FREELANCER_EMAIL: str = ""
    UPI_ID: Optional[str] = None

    # Invoice Settings
    INVOICE_NUMBER_PREFIX: str = "INV"
    DEFAULT_TAX_RATE: float = 18.0
    DEFAULT_PAYMENT_TERMS: int = 30

    LOG_LEVEL: str = "INFO"

    def freelancer_info(self):
        return {
            "name": self.FREELANCER_NAME,
            "gstin": self.FREELANCER_GSTIN,
            "pan": self.FREELANCER_PAN,
            "address": self.FREELANCER_ADDRESS,
            "email": self.FREELANCER_EMAIL,
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: Optional[str] = None):
    """Configure structlog to emit JSON lines at the given level."""
    level = level or get_settings().LOG_LEVEL
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )
