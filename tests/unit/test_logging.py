"""Unit tests for logging configuration and credential redaction."""

from __future__ import annotations

import logging

from tracklookup.utils.logging import configure_logging, redact_secrets


class TestRedactSecrets:
    def test_credential_fields_masked(self) -> None:
        event = redact_secrets(None, "info", {"event": "x", "access_token": "tok", "captcha_key": "k"})
        assert event["access_token"] == "***"
        assert event["captcha_key"] == "***"

    def test_credentials_in_urls_masked(self) -> None:
        event = redact_secrets(
            None,
            "warning",
            {
                "event": "catalog_request_failed",
                "error": "GET https://api.vk.com/method/audio.get?access_token=tok&captcha_key=k&v=5.71",
            },
        )
        assert "tok" not in event["error"]
        assert "access_token=***" in event["error"]
        assert "captcha_key=***" in event["error"]
        assert event["error"].endswith("&v=5.71")

    def test_other_fields_untouched(self) -> None:
        event = redact_secrets(None, "info", {"event": "search_by", "query": "moby", "count": 3})
        assert event == {"event": "search_by", "query": "moby", "count": 3}


class TestConfigureLogging:
    def test_http_client_request_lines_silenced(self) -> None:
        configure_logging(log_level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING
        assert logging.getLogger().level == logging.DEBUG
