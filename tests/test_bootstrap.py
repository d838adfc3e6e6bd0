"""Tests for conversion service bootstrap wiring."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from captable_bridge.bootstrap import bootstrap_create_conversion_service
from captable_bridge.config import SettingsLoadError
from captable_bridge.mapping import ConversionPort, EntityConversionService
from captable_bridge.mapping.core_objects import DEPRECATION_LOGGER_NAME


@pytest.fixture
def clean_startup(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[pytest.MonkeyPatch]:
    """Provide an isolated environment and restore logger state afterwards.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        tmp_path: Temporary working directory without a dotenv file.

    Returns:
        Iterator[pytest.MonkeyPatch]: Generator yielding the monkeypatch fixture.

    Raises:
        RuntimeError: This fixture does not raise runtime errors.
    """

    monkeypatch.chdir(tmp_path)
    for variable_name in ("LOG_LEVEL", "LOG_FORMAT", "ENVIRONMENT_NAME", "EQUIVALENCE_EXTRA_IGNORED_FIELDS"):
        monkeypatch.delenv(variable_name, raising=False)
    root_logger = logging.getLogger()
    root_handlers = list(root_logger.handlers)
    root_level = root_logger.level
    deprecation_level = logging.getLogger(DEPRECATION_LOGGER_NAME).level
    yield monkeypatch
    root_logger.handlers[:] = root_handlers
    root_logger.setLevel(root_level)
    logging.getLogger(DEPRECATION_LOGGER_NAME).setLevel(deprecation_level)


def test_bootstrap_creates_service_with_configured_ignored_fields(clean_startup: pytest.MonkeyPatch) -> None:
    """Build a service whose round-trip checks honor configured ignored fields.

    Args:
        clean_startup: Isolated startup fixture.

    Returns:
        None: Assertions validate bootstrap wiring.

    Raises:
        AssertionError: Raised when settings are not applied to the service.
    """

    clean_startup.setenv("EQUIVALENCE_EXTRA_IGNORED_FIELDS", "quantity_source")

    service: ConversionPort = bootstrap_create_conversion_service()

    assert isinstance(service, EntityConversionService)
    assert service.mapping_contract_version() == "v1"
    result = service.mapping_check_round_trip(
        "warrantIssuance",
        {
            "object_type": "TX_WARRANT_ISSUANCE",
            "id": "w-tx",
            "date": "2024-02-01",
            "security_id": "w-1",
            "custom_id": "W-1",
            "stakeholder_id": "sh-1",
            "quantity": "10",
            "purchase_price": {"amount": "1", "currency": "USD"},
            "exercise_triggers": [],
        },
    )
    assert result.equal


def test_bootstrap_propagates_settings_errors(clean_startup: pytest.MonkeyPatch) -> None:
    """Fail startup when settings are invalid.

    Args:
        clean_startup: Isolated startup fixture.

    Returns:
        None: Assertions validate startup failure propagation.

    Raises:
        AssertionError: Raised when invalid settings do not stop startup.
    """

    clean_startup.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(SettingsLoadError):
        bootstrap_create_conversion_service()
