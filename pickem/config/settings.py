"""
Strongly typed configuration using pydantic-settings.

All settings are validated at startup and loaded from:
1. Default values defined here
2. .env file (if present)
3. Environment variables (highest priority)

Environment variable naming:
- ApiSettings: PICKEM_API_KEY, PICKEM_STEAM_ID, PICKEM_AUTH_CODE, etc.
- RetrySettings: RETRY_MAX_RETRIES, RETRY_INITIAL_DELAY_S
- TierSettings: TIER_SILVER, TIER_GOLD, TIER_DIAMOND
- ObservabilitySettings: ENVIRONMENT, LOG_LEVEL (no prefix)
"""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """Steam Web API credentials and endpoints."""

    model_config = SettingsConfigDict(env_prefix="PICKEM_")

    api_key: str = Field(default="", description="Steam Web API key")
    steam_id: str = Field(default="", description="SteamID64 of the account")
    auth_code: str = Field(default="", description="Game authentication code (XXXX-XXXXX-XXXX)")

    base_url: str = Field(default="https://api.steampowered.com")
    inventory_url: str = Field(default="https://steamcommunity.com/inventory")
    timeout_s: float = Field(default=30.0, gt=0.0, description="Per-request timeout")

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.steam_id and self.auth_code)


class RetrySettings(BaseSettings):
    """Retry policy for rate-limited calls."""

    model_config = SettingsConfigDict(env_prefix="RETRY_")

    max_retries: int = Field(default=3, ge=0, le=10)
    initial_delay_s: float = Field(default=1.0, ge=0.0, description="First backoff delay, doubled per retry")


class TierSettings(BaseSettings):
    """Minimum points for each coin tier above Bronze."""

    model_config = SettingsConfigDict(env_prefix="TIER_")

    silver: int = Field(default=50, ge=1)
    gold: int = Field(default=75, ge=1)
    diamond: int = Field(default=100, ge=1)

    @field_validator('gold')
    @classmethod
    def gold_gt_silver(cls, v, info):
        if 'silver' in info.data and v <= info.data['silver']:
            raise ValueError('gold must be > silver')
        return v

    @field_validator('diamond')
    @classmethod
    def diamond_gt_gold(cls, v, info):
        if 'gold' in info.data and v <= info.data['gold']:
            raise ValueError('diamond must be > gold')
        return v


class ObservabilitySettings(BaseSettings):
    """Logging and metrics settings."""

    model_config = SettingsConfigDict(env_prefix="")  # Direct: ENVIRONMENT, LOG_LEVEL

    environment: str = Field(default="development", pattern="^(development|staging|production)$")
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_format: str = Field(default="console", pattern="^(console|json)$")


class Settings(BaseSettings):
    """
    Root settings aggregating all subsections.

    Usage:
        from pickem.config import settings

        settings.api.base_url
        settings.retry.max_retries
        settings.tiers.diamond
        settings.observability.log_level
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api: ApiSettings = Field(default_factory=ApiSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    tiers: TierSettings = Field(default_factory=TierSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
