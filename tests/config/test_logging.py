"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from shopledger.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    shop = logging.getLogger("shopledger")
    shop_level = shop.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    shop.setLevel(shop_level)
    structlog.contextvars.clear_contextvars()


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("shopledger").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("shopledger").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("shopledger.test")
        log.warning("low stock", item="Rice", quantity=2)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "low stock"
        assert parsed["quantity"] == 2
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "shopledger.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("shopledger.infrastructure.registry").debug("Loaded 3 customers")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Loaded 3 customers"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "shopledger.infrastructure.registry"

    def test_sqlalchemy_info_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("sqlalchemy.engine").info("SELECT 1")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        """Multiple configure_logging calls don't stack handlers."""
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1

    def test_quiet_sets_error(self) -> None:
        configure_logging(quiet=True)
        assert logging.getLogger("shopledger").level == logging.ERROR

    def test_verbose_wins_over_quiet(self) -> None:
        configure_logging(verbose=True, quiet=True)
        assert logging.getLogger("shopledger").level == logging.DEBUG

    def test_shop_name_on_every_line(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True, shop_name="duka-kuu")
        logging.getLogger("shopledger.services").warning("Plugin hook failed")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["shop"] == "duka-kuu"

    def test_pluggy_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("pluggy").debug("hook call")
        assert capfd.readouterr().err == ""


class TestPhoneMasking:
    def _event(self, capfd: pytest.CaptureFixture[str], message: str) -> str:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("shopledger.services.base").debug(message)
        event: str = json.loads(capfd.readouterr().err.strip())["event"]
        return event

    @pytest.mark.parametrize("phone", ["0712345678", "0712-345-678", "(0712) 345 678"])
    def test_phone_masked(self, capfd: pytest.CaptureFixture[str], phone: str) -> None:
        event = self._event(capfd, f"Phone '{phone}' is already registered")
        assert event == "Phone '*******678' is already registered"

    def test_record_ids_untouched(self, capfd: pytest.CaptureFixture[str]) -> None:
        event = self._event(capfd, "Deleted customer cus_0000000001")
        assert event == "Deleted customer cus_0000000001"

    def test_short_numbers_untouched(self, capfd: pytest.CaptureFixture[str]) -> None:
        event = self._event(capfd, "Stored customers (1234 bytes)")
        assert event == "Stored customers (1234 bytes)"
