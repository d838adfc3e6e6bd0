"""Bootstrap wiring for startup validation and conversion service assembly."""

from __future__ import annotations

from captable_bridge.config import config_configure_logging, config_load_settings
from captable_bridge.mapping import ConversionServiceConfig, EntityConversionService


def bootstrap_create_conversion_service() -> EntityConversionService:
    """Assemble the conversion service after validating startup configuration.

    Returns:
        EntityConversionService: Fully initialized conversion service.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    settings = config_load_settings()
    config_configure_logging(settings)
    return EntityConversionService(
        config=ConversionServiceConfig(extra_ignored_fields=settings.equivalence_extra_ignored_fields),
    )
