import pytest
from pydantic import ValidationError

from listings_dump.adapters.config import AppConfig, load_config
from listings_dump.domain.errors import ConfigError


def test_defaults():
    cfg = AppConfig()

    assert cfg.DATASET == "domain"
    assert cfg.TABLE == "listings_test"
    assert cfg.STATE == "NSW"
    assert cfg.SUBURB == "Pyrmont"
    assert cfg.POSTCODE == "2009"
    assert cfg.PORT == 8080
    assert cfg.TABLE_DISPLAY_NAME == "Domain Listings"


def test_require_names_missing_flag():
    with pytest.raises(ConfigError, match="domain_api_key"):
        AppConfig(BIGQUERY_PROJECT_ID="p").require()

    with pytest.raises(ConfigError, match="bigquery_project_id"):
        AppConfig(DOMAIN_API_KEY="k").require()


def test_blank_values_count_as_missing():
    cfg = AppConfig(DOMAIN_API_KEY="   ", BIGQUERY_PROJECT_ID="p", POSTCODE="")

    assert cfg.DOMAIN_API_KEY is None
    assert cfg.POSTCODE is None
    with pytest.raises(ConfigError):
        cfg.require()


def test_env_and_port(monkeypatch):
    monkeypatch.setenv("LISTINGS_DOMAIN_API_KEY", "env-key")
    monkeypatch.setenv("LISTINGS_STATE", " qld ")
    monkeypatch.setenv("PORT", "9090")

    cfg = AppConfig()

    assert cfg.DOMAIN_API_KEY == "env-key"
    assert cfg.STATE == "QLD"
    assert cfg.PORT == 9090


def test_load_config_ignores_unset_overrides(monkeypatch):
    monkeypatch.setenv("LISTINGS_TABLE", "from_env")

    cfg = load_config(TABLE=None, DATASET="override")

    assert cfg.TABLE == "from_env"
    assert cfg.DATASET == "override"


def test_log_level_is_normalised_and_checked():
    assert AppConfig(LOG_LEVEL=" debug ").LOG_LEVEL == "DEBUG"

    with pytest.raises(ValidationError, match="LOG_LEVEL"):
        AppConfig(LOG_LEVEL="verbose")
