"""Tests for settings, logging setup and settings-driven registry construction."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from escrow_custody.config import Settings, get_settings
from escrow_custody.domain.exceptions import InvalidEscrowParametersError
from escrow_custody.logging_config import get_logger, setup_logging
from escrow_custody.services.escrow_registry import EscrowRegistry
from escrow_custody.services.payment_service import SimulatedValueMover


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ESCROW_ENFORCE_DISTINCT_PARTIES", raising=False)
        settings = Settings(_env_file=None)

        assert settings.is_development
        assert settings.simulate_transfers
        assert not settings.enforce_distinct_parties
        assert settings.max_description_length is None

    def test_reads_prefixed_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ESCROW_ENFORCE_DISTINCT_PARTIES", "true")
        monkeypatch.setenv("ESCROW_MAX_DESCRIPTION_LENGTH", "32")
        monkeypatch.setenv("ESCROW_APP_ENV", "production")

        settings = Settings(_env_file=None)
        assert settings.enforce_distinct_parties
        assert settings.max_description_length == 32
        assert not settings.is_development

    def test_get_settings_is_cached(self) -> None:
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()


class TestRegistryFromSettings:
    def test_applies_creation_policy(self) -> None:
        settings = Settings(_env_file=None, enforce_distinct_parties=True)
        registry = EscrowRegistry.from_settings("owner", settings=settings)

        with pytest.raises(InvalidEscrowParametersError):
            registry.create_escrow("B", "B", "A", 1, 60)

    def test_requires_mover_when_not_simulating(self) -> None:
        settings = Settings(_env_file=None, simulate_transfers=False)
        with pytest.raises(ValueError, match="ValueMover is required"):
            EscrowRegistry.from_settings("owner", settings=settings)

        mover = SimulatedValueMover()
        registry = EscrowRegistry.from_settings("owner", value_mover=mover, settings=settings)
        assert registry.owner == "owner"


@pytest.fixture
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestLogging:
    @pytest.mark.usefixtures("restore_logging")
    def test_setup_installs_single_root_handler(self) -> None:
        setup_logging(log_level="WARNING", json_logs=True)
        root = logging.getLogger()

        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        get_logger(__name__).warning("test.logging_configured", check=True)

    @pytest.mark.usefixtures("restore_logging")
    def test_setup_defaults_to_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ESCROW_LOG_LEVEL", "ERROR")
        get_settings.cache_clear()
        try:
            setup_logging()
        finally:
            get_settings.cache_clear()

        assert logging.getLogger().level == logging.ERROR

    @pytest.mark.usefixtures("restore_logging")
    def test_json_entries_carry_tracebacks(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(log_level="INFO", json_logs=True)
        try:
            raise RuntimeError("subscriber down")
        except RuntimeError:
            get_logger("escrow_custody.test").exception("events.subscriber_failed", sequence=3)

        entry = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert entry["event"] == "events.subscriber_failed"
        assert entry["sequence"] == 3
        assert "RuntimeError" in json.dumps(entry["exception"])
