"""
Unit tests for configuration loading.
"""
import pytest
from pydantic import ValidationError

from pickem.bracket import CoinTier, TierThresholds, get_coin_tier
from pickem.config.settings import (
    ApiSettings,
    ObservabilitySettings,
    RetrySettings,
    Settings,
    TierSettings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PICKEM_API_KEY", "PICKEM_STEAM_ID", "PICKEM_AUTH_CODE", "RETRY_MAX_RETRIES",
                 "RETRY_INITIAL_DELAY_S", "TIER_SILVER", "TIER_GOLD", "TIER_DIAMOND",
                 "ENVIRONMENT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = Settings(_env_file=None)

    assert config.api.base_url == "https://api.steampowered.com"
    assert config.retry.max_retries == 3
    assert config.retry.initial_delay_s == 1.0
    assert (config.tiers.silver, config.tiers.gold, config.tiers.diamond) == (50, 75, 100)
    assert config.observability.environment == "development"
    assert not config.api.has_credentials


def test_credentials_from_environment(monkeypatch):
    monkeypatch.setenv("PICKEM_API_KEY", "abc")
    monkeypatch.setenv("PICKEM_STEAM_ID", "76561198012345678")
    monkeypatch.setenv("PICKEM_AUTH_CODE", "ABCD-EFGH1-JKLM")

    api = ApiSettings()

    assert api.api_key == "abc"
    assert api.has_credentials


def test_retry_override(monkeypatch):
    monkeypatch.setenv("RETRY_MAX_RETRIES", "5")
    monkeypatch.setenv("RETRY_INITIAL_DELAY_S", "0.5")

    retry = RetrySettings()

    assert retry.max_retries == 5
    assert retry.initial_delay_s == 0.5


def test_retry_bounds():
    with pytest.raises(ValidationError):
        RetrySettings(max_retries=-1)
    with pytest.raises(ValidationError):
        RetrySettings(max_retries=11)


def test_tiers_must_ascend():
    with pytest.raises(ValidationError):
        TierSettings(silver=50, gold=50, diamond=100)
    with pytest.raises(ValidationError):
        TierSettings(silver=50, gold=75, diamond=60)


def test_custom_tiers_drive_thresholds(monkeypatch):
    monkeypatch.setenv("TIER_SILVER", "10")
    monkeypatch.setenv("TIER_GOLD", "20")
    monkeypatch.setenv("TIER_DIAMOND", "30")

    tiers = TierSettings()
    thresholds = TierThresholds(tiers.silver, tiers.gold, tiers.diamond)

    assert get_coin_tier(25, thresholds) is CoinTier.GOLD


def test_log_level_is_checked():
    with pytest.raises(ValidationError):
        ObservabilitySettings(log_level="LOUD")
