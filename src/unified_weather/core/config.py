"""Application configuration using Pydantic Settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def check_user_agent(value: str, field: str = "user_agent") -> str:
    """Validate the "(AppName, contact)" shape expected by NWS.

    Example:
        >>> check_user_agent(" (MyApp, me@example.com) ")
        '(MyApp, me@example.com)'
    """
    value = value.strip()
    if not (value.startswith("(") and value.endswith(")") and "," in value):
        raise ValueError(f'{field} must look like "(AppName, contact)"')
    return value


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    Every value has a default so the client works out of the box, but the
    identifying User-Agent should be overridden by each deployment: the NWS API
    rejects anonymous requests.

    Example:
        >>> settings = Settings()
        >>> settings.RETRY_MAX_ATTEMPTS
        3
        >>> settings.PROVIDER_STRATEGY
        'automatic'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Client identity and provider selection
    USER_AGENT: str = Field(
        default="(unified-weather, contact@example.com)",
        description='Identifying User-Agent sent to NWS, format "(AppName, contact)"',
    )
    TEMPERATURE_UNIT: str = Field(
        default="fahrenheit",
        description="Preferred display unit (celsius or fahrenheit)",
    )
    PROVIDER_STRATEGY: str = Field(
        default="automatic",
        description="Provider selection strategy (automatic, us_only, global_only)",
    )

    # Upstream API Configuration
    NWS_BASE_URL: str = Field(
        default="https://api.weather.gov",
        description="Base URL for the National Weather Service API",
    )
    OPENMETEO_BASE_URL: str = Field(
        default="https://api.open-meteo.com/v1/forecast",
        description="Forecast endpoint for Open-Meteo",
    )
    GEOCODING_BASE_URL: str = Field(
        default="https://geocoding-api.open-meteo.com/v1/search",
        description="Search endpoint for the Open-Meteo geocoding API",
    )
    UPSTREAM_TIMEOUT: float = Field(
        default=10.0,
        description="Timeout for upstream requests in seconds",
        ge=0.1,
        le=60.0,
    )

    # Retry Configuration
    RETRY_MAX_ATTEMPTS: int = Field(
        default=3,
        description="Maximum attempts per upstream request (first attempt included)",
        ge=1,
        le=10,
    )
    RETRY_BASE_DELAY: float = Field(
        default=1.0,
        description="Delay before the first retry in seconds",
        ge=0.0,
        le=60.0,
    )
    RETRY_BACKOFF_MULTIPLIER: float = Field(
        default=2.0,
        description="Exponential backoff multiplier for retries",
        ge=1.0,
        le=10.0,
    )

    # Streaming updates
    UPDATE_INTERVAL: float = Field(
        default=3600.0,
        description="Default polling interval for weather updates in seconds",
        gt=0.0,
    )

    # Server Configuration
    PORT: int = Field(
        default=8000,
        description="Server port",
        ge=1,
        le=65535,
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Environment Configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment (development, staging, production)",
    )

    @field_validator("USER_AGENT")
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        """Validate the NWS User-Agent.

        Example:
            >>> Settings(USER_AGENT="(MyApp, me@example.com)").USER_AGENT
            '(MyApp, me@example.com)'
        """
        return check_user_agent(v, "USER_AGENT")

    @field_validator("TEMPERATURE_UNIT", "PROVIDER_STRATEGY")
    @classmethod
    def validate_choice(cls, v: str, info) -> str:
        choices = {
            "TEMPERATURE_UNIT": {"celsius", "fahrenheit"},
            "PROVIDER_STRATEGY": {"automatic", "us_only", "global_only"},
        }[info.field_name]
        v_lower = v.lower()
        if v_lower not in choices:
            raise ValueError(f"{info.field_name} must be one of {sorted(choices)}, got {v}")
        return v_lower

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that LOG_LEVEL is a valid logging level.

        Example:
            >>> Settings(LOG_LEVEL="info").LOG_LEVEL
            'INFO'
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}, got {v}")
        return v_upper

    @field_validator("NWS_BASE_URL", "OPENMETEO_BASE_URL", "GEOCODING_BASE_URL")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate upstream URLs and strip the trailing slash.

        Example:
            >>> Settings(NWS_BASE_URL="https://api.example.com/").NWS_BASE_URL
            'https://api.example.com'
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError("Upstream URLs must start with http:// or https://")
        return v.rstrip("/")


# Global settings instance
settings = Settings()
