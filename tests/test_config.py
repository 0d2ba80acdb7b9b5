import logging

import pytest
from pydantic import ValidationError

from stockexpiry.config import Settings, configure_logging


def test_defaults():
    s = Settings()
    assert s.ALERT_THRESHOLD_DAYS == 90
    assert s.DEPLETION_EPSILON == pytest.approx(0.001)
    assert s.DELETED_STATUS == "محذوف"
    assert s.RETURNED_STATUS == "مرتجع"


def test_environment_override(monkeypatch):
    monkeypatch.setenv("STOCKEXPIRY_ALERT_THRESHOLD_DAYS", "30")
    monkeypatch.setenv("STOCKEXPIRY_LOG_LEVEL", "debug")
    s = Settings()
    assert s.ALERT_THRESHOLD_DAYS == 30
    assert s.LOG_LEVEL == "DEBUG"


def test_invalid_values_rejected():
    with pytest.raises(ValidationError):
        Settings(ALERT_THRESHOLD_DAYS=-5)
    with pytest.raises(ValidationError):
        Settings(LOG_LEVEL="chatty")


def test_configure_logging_sets_package_level():
    configure_logging("INFO")
    logger = logging.getLogger("stockexpiry")
    assert logger.level == logging.INFO
    assert logger.handlers
