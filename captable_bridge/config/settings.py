"""Typed runtime settings with dotenv support and startup validation."""

import logging
from typing import Annotated, Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from captable_bridge.mapping.core_objects import DEPRECATION_LOGGER_NAME

_LOG_LEVEL_NAMES = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class BridgeSettings(BaseSettings):
    """Conversion runtime settings.

    Environment variable names map directly to field names in uppercase.
    Example: `log_level` reads from `LOG_LEVEL`.

    Attributes:
        environment_name: Runtime environment label.
        log_level: Root logging level name.
        log_format: Logging format string.
        equivalence_extra_ignored_fields: Keys skipped by round-trip checks beyond the internal defaults.
        deprecation_warnings_enabled: Whether deprecated-field warnings are emitted.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="%(asctime)s %(levelname)s %(name)s %(message)s")
    equivalence_extra_ignored_fields: Annotated[tuple[str, ...], NoDecode] = Field(default=())
    deprecation_warnings_enabled: bool = Field(default=True)

    @field_validator("environment_name", "log_format")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in _LOG_LEVEL_NAMES:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVEL_NAMES)}")
        return normalized_value

    @field_validator("equivalence_extra_ignored_fields", mode="before")
    @classmethod
    def _split_field_names(cls, value: Any) -> Any:
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return value


def config_load_settings() -> BridgeSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        BridgeSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when settings are invalid.
    """

    try:
        return BridgeSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error


def config_configure_logging(settings: BridgeSettings) -> None:
    """Apply logging level and format from settings.

    When deprecation warnings are disabled, the deprecation logger only passes
    errors through.

    Args:
        settings: Validated runtime settings.

    Returns:
        None: This function does not return a value.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    logging.basicConfig(level=settings.log_level, format=settings.log_format, force=True)
    deprecation_logger = logging.getLogger(DEPRECATION_LOGGER_NAME)
    deprecation_logger.setLevel(logging.NOTSET if settings.deprecation_warnings_enabled else logging.ERROR)
