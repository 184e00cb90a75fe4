"""Tests for settings and logging setup."""

import logging

import structlog

from config import Settings, configure_logging


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.DEFAULT_TAX_RATE == 18
    assert settings.DEFAULT_PAYMENT_TERMS == 30
    assert settings.INVOICE_NUMBER_PREFIX == "INV"
    assert settings.UPI_ID is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("UPI_ID", "asha@upi")
    monkeypatch.setenv("FREELANCER_NAME", "Asha Rao")
    monkeypatch.setenv("DEFAULT_PAYMENT_TERMS", "15")

    settings = Settings(_env_file=None)

    assert settings.UPI_ID == "asha@upi"
    assert settings.DEFAULT_PAYMENT_TERMS == 15
    assert settings.freelancer_info()["name"] == "Asha Rao"


def test_configure_logging():
    configure_logging("WARNING")
    config = structlog.get_config()

    assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)
    assert config["wrapper_class"] is structlog.make_filtering_bound_logger(logging.WARNING)
    structlog.reset_defaults()
