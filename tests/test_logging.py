"""Tests for logging configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest
from loguru import logger

from devops_metrics.logging import (
    bind_pr,
    bind_repo,
    context_label,
    get_logger,
    is_configured,
    reset_logging,
    setup_logging,
)

if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


@pytest.fixture(autouse=True)
def _reset_logging_state() -> Generator[None, None, None]:
    """Reset loguru state before and after each test."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def captured() -> Generator[list[str], None, None]:
    """Collect formatted records (extra context included)."""
    messages: list[str] = []
    handler_id = logger.add(
        lambda msg: messages.append(str(msg)),
        format="{extra} | {message}",
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_sets_configured_flag(self) -> None:
        assert not is_configured()
        setup_logging(level="INFO")
        assert is_configured()

    def test_quiet_raises_sqlalchemy_threshold(self) -> None:
        setup_logging(level="DEBUG", quiet=True)

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_verbose_lowers_httpx_threshold(self) -> None:
        setup_logging(level="WARNING", verbose=True)

        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_file_sink_receives_bound_records(self, tmp_path: Path) -> None:
        log_file = tmp_path / "sync.log"
        setup_logging(level="INFO", log_file=log_file)

        get_logger("tests").info("Fetched page 1 (3 PRs)")
        reset_logging()  # closes the file sink

        assert "Fetched page 1 (3 PRs)" in log_file.read_text()

    def test_reset_clears_configured(self) -> None:
        setup_logging(level="INFO")
        reset_logging()
        assert not is_configured()


class TestInterceptHandler:
    """Tests for stdlib logging interception."""

    def test_stdlib_records_reach_loguru(self) -> None:
        messages: list[str] = []
        setup_logging(level="DEBUG")
        handler_id = logger.add(lambda msg: messages.append(str(msg)), level="DEBUG")
        try:
            logging.getLogger("test_stdlib_intercept").warning("Hello from stdlib")
        finally:
            logger.remove(handler_id)

        assert any("Hello from stdlib" in msg for msg in messages)


class TestContextBinding:
    """Tests for context binding helpers."""

    def test_get_logger_binds_name(self, captured: list[str]) -> None:
        get_logger("devops_metrics.github.sync.service").info("hello")

        assert any("devops_metrics.github.sync.service" in msg for msg in captured)

    def test_bind_repo(self, captured: list[str]) -> None:
        bind_repo("octo-org", "service").info("Watermark: epoch")

        assert any("octo-org/service" in msg for msg in captured)

    def test_bind_pr(self, captured: list[str]) -> None:
        bind_pr("octo-org", "service", 42).info("Processed 2 reviews")

        output = "".join(captured)
        assert "octo-org/service" in output
        assert "'pr': 42" in output


class TestContextLabel:
    """Tests for the console/file context label."""

    def test_repository_and_pr(self) -> None:
        extra = {"name": "sync", "repo": "octo-org/service", "pr": 42}

        assert context_label(extra, "fallback") == "octo-org/service#42"

    def test_bound_name_without_repository(self) -> None:
        assert context_label({"name": "devops_metrics.db.engine"}, "x") == "devops_metrics.db.engine"

    def test_intercepted_record_uses_module(self) -> None:
        assert context_label({}, "sqlalchemy.engine.Engine") == "sqlalchemy.engine.Engine"

    def test_console_shows_label(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="INFO")

        bind_pr("octo-org", "service", 7).info("Synced 3 reviews")

        err = capsys.readouterr().err
        assert "octo-org/service#7" in err
        assert "Synced 3 reviews" in err
