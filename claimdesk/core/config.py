"""
Brokerage Core Configuration
Settings for rating, claim limits, plan tiers, persistence and logging.
Source: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BrokerageSettings(BaseSettings):
    """
    Brokerage core configuration settings.

    Every value can be overridden from the environment or a ``.env`` file
    using the ``BROKERAGE_`` prefix, e.g. ``BROKERAGE_SMOKER_LOADING=1.35``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="BROKERAGE_",
    )

    # =========================================================================
    # Premium Rating
    # =========================================================================
    SENIOR_AGE_THRESHOLD: int = Field(
        default=50,
        ge=0,
        description="Applicants strictly older than this receive the senior loading",
    )
    SENIOR_LOADING: Decimal = Field(
        default=Decimal("1.20"),
        description="Premium multiplier for senior applicants",
    )
    SMOKER_LOADING: Decimal = Field(
        default=Decimal("1.30"),
        description="Premium multiplier for smokers",
    )
    VEHICLE_VALUE_RATE: Decimal = Field(
        default=Decimal("0.01"),
        description="Share of declared vehicle value added to the premium",
    )
    TRIP_DAILY_RATE: Decimal = Field(
        default=Decimal("2"),
        description="Flat amount added per day of trip duration",
    )

    # =========================================================================
    # Claims
    # =========================================================================
    CLAIM_LIMIT_MULTIPLIER: Decimal = Field(
        default=Decimal("5"),
        description="Hard cap on a claim as a multiple of the policy premium",
    )

    # =========================================================================
    # Plans & Policies
    # =========================================================================
    PLAN_TABLE_PATH: Optional[str] = Field(
        default=None,
        description="YAML plan-tier table (defaults to the packaged table)",
    )
    POLICY_TERM_MONTHS: int = Field(
        default=12,
        ge=1,
        description="Default coverage term for newly issued policies",
    )
    POLICY_NUMBER_PREFIX: str = Field(
        default="POL",
        min_length=1,
        max_length=10,
        description="Prefix of generated policy numbers",
    )

    # =========================================================================
    # Persistence
    # =========================================================================
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./claimdesk.db",
        description="Async SQLAlchemy URL for the SQL record store",
    )
    DB_ECHO: bool = Field(
        default=False,
        description="Log emitted SQL",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    LOG_LEVEL: str = Field(default="INFO", description="Log level")
    LOG_JSON: bool = Field(default=False, description="Serialize logs as JSON")
    LOG_FILE: Optional[str] = Field(default=None, description="Optional log file path")

    # =========================================================================
    # Validators
    # =========================================================================
    @field_validator(
        "SENIOR_LOADING",
        "SMOKER_LOADING",
        "VEHICLE_VALUE_RATE",
        "TRIP_DAILY_RATE",
    )
    @classmethod
    def validate_positive(cls, v: Decimal) -> Decimal:
        """Rating factors must be positive."""
        if v <= 0:
            raise ValueError("Rating factors must be greater than 0")
        return v

    @field_validator("CLAIM_LIMIT_MULTIPLIER")
    @classmethod
    def validate_multiplier(cls, v: Decimal) -> Decimal:
        """A claim cap below the premium itself makes no sense."""
        if v < 1:
            raise ValueError("CLAIM_LIMIT_MULTIPLIER must be at least 1")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of {valid_levels}")
        return v.upper()


# Singleton instance
_settings: Optional[BrokerageSettings] = None


def get_settings() -> BrokerageSettings:
    """
    Get cached settings instance.

    Returns:
        BrokerageSettings instance
    """
    global _settings
    if _settings is None:
        _settings = BrokerageSettings()
    return _settings


def reset_settings() -> None:
    """Drop the cached instance so the next call re-reads the environment."""
    global _settings
    _settings = None
