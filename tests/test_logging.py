"""Tests for logging helpers."""

import logging

import pytest

from swiftdeploy.core.logging import LogLevel, StructuredLogger, resolve_level


class TestResolveLevel:
    """Tests for mapping -v/-q onto a level."""

    @pytest.mark.parametrize(
        "verbose,quiet,expected",
        [
            (0, False, LogLevel.WARNING),
            (1, False, LogLevel.INFO),
            (2, False, LogLevel.DEBUG),
            (3, True, LogLevel.DEBUG),
            (0, True, LogLevel.ERROR),
        ],
    )
    def test_flags(self, verbose, quiet, expected):
        assert resolve_level(verbose, quiet, LogLevel.WARNING) == expected

    def test_config_default(self):
        assert resolve_level(0, False, LogLevel.INFO) == LogLevel.INFO


class TestStructuredLogger:
    """Tests for StructuredLogger."""

    def test_context_is_appended(self, caplog):
        logger = StructuredLogger("tests").bind(repo="u/r")

        with caplog.at_level(logging.DEBUG, logger="swiftdeploy"):
            logger.debug("Deployment status changed", phase="uploading", message="Uploading main.swift...")

        assert caplog.records[0].name == "swiftdeploy.tests"
        assert caplog.messages == [
            "Deployment status changed [repo=u/r phase=uploading message=Uploading main.swift...]"
        ]

    def test_tokens_are_redacted(self, caplog):
        logger = StructuredLogger("tests")

        with caplog.at_level(logging.INFO, logger="swiftdeploy"):
            logger.info("Created client", token="ghp_secret", Authorization="Bearer ghp_secret")

        assert "ghp_secret" not in caplog.text
        assert "token=***" in caplog.text
