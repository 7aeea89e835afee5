# tests/conftest.py
import logging
from datetime import datetime, timezone

import pytest

import listings_dump.api.http  # noqa: F401  registers the package loggers
import listings_dump.entrypoints.cli  # noqa: F401
from listings_dump.adapters.config import AppConfig
from listings_dump.domain.ports import NotFound

from .fixtures.listings import FakeWarehouse


@pytest.fixture
def app_config():
    return AppConfig(DOMAIN_API_KEY="test-key", BIGQUERY_PROJECT_ID="test-project")


@pytest.fixture
def fixed_now():
    ts = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
    return lambda: ts


@pytest.fixture
def warehouse():
    return FakeWarehouse()


@pytest.fixture
def missing_warehouse():
    return FakeWarehouse(dataset=NotFound(), table=NotFound())


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    # keep a developer's shell or .env from leaking into config
    monkeypatch.chdir(tmp_path)
    for key in (
        "PORT",
        "LISTINGS_PORT",
        "LISTINGS_DOMAIN_API_KEY",
        "LISTINGS_BIGQUERY_PROJECT_ID",
        "LISTINGS_STATE",
        "LISTINGS_DATASET",
        "LISTINGS_TABLE",
        "LISTINGS_SUBURB",
        "LISTINGS_POSTCODE",
        "LISTINGS_LOG_LEVEL",
        "LISTINGS_DOMAIN_BASE_URL",
        "LISTINGS_DOMAIN_TIMEOUT_S",
        "LISTINGS_TABLE_DISPLAY_NAME",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def app_logs(caplog):
    """
    caplog for the package loggers. They don't propagate to root, so the
    capture handler is attached to each of them directly.
    """
    names = (
        "listings_dump.services.dump",
        "listings_dump.api.http",
        "listings_dump.entrypoints.cli",
    )
    loggers = [logging.getLogger(n) for n in names]
    for lg in loggers:
        lg.addHandler(caplog.handler)
    yield caplog
    for lg in loggers:
        lg.removeHandler(caplog.handler)
