import pytest
from pydantic import ValidationError

from app.core.config import (
    PRODUCTION_BASE_URL,
    SANDBOX_BASE_URL,
    ProviderConfig,
    Settings,
)
from app.core.exceptions import ConfigurationError


def make_settings(**overrides):
    return Settings(_env_file=None, **overrides)


def test_sandbox_username_resolves_sandbox_mode():
    config = ProviderConfig.from_settings(make_settings(AT_API_KEY="key", AT_USERNAME="sandbox"))

    assert config.mode == "sandbox"
    assert config.is_sandbox
    assert config.base_url == SANDBOX_BASE_URL


def test_other_username_resolves_production_mode():
    config = ProviderConfig.from_settings(
        make_settings(AT_API_KEY="key", AT_USERNAME="mybank", AT_SENDER="MYBANK")
    )

    assert config.mode == "production"
    assert config.sender_id == "MYBANK"
    assert config.base_url == PRODUCTION_BASE_URL


def test_explicit_mode_wins_over_username():
    config = ProviderConfig.from_settings(
        make_settings(AT_API_KEY="key", AT_USERNAME="mybank", SMS_MODE="sandbox")
    )
    assert config.mode == "sandbox"


def test_base_url_override_and_timeout():
    config = ProviderConfig.from_settings(
        make_settings(AT_API_KEY="key", AT_BASE_URL="http://localhost:9000/", SMS_REQUEST_TIMEOUT=2.5)
    )
    assert config.base_url == "http://localhost:9000"
    assert config.timeout == 2.5


def test_missing_api_key_is_fatal():
    with pytest.raises(ConfigurationError) as exc_info:
        ProviderConfig.from_settings(make_settings(AT_API_KEY=None))
    assert "AT_API_KEY is required" in exc_info.value.details


def test_missing_username_is_fatal():
    with pytest.raises(ConfigurationError):
        ProviderConfig.from_settings(make_settings(AT_API_KEY="key", AT_USERNAME=""))


def test_provider_config_is_immutable():
    config = ProviderConfig(api_key="k", username="sandbox", mode="sandbox")
    with pytest.raises(AttributeError):
        config.mode = "production"


def test_country_code_is_stored_without_plus():
    assert make_settings(DEFAULT_COUNTRY_CODE="+254").DEFAULT_COUNTRY_CODE == "254"


@pytest.mark.parametrize("code", ["٢٣٤", "２３４", "23a"])
def test_country_code_must_be_ascii_digits(code):
    with pytest.raises(ValidationError):
        make_settings(DEFAULT_COUNTRY_CODE=code)
