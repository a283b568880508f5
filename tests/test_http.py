"""Tests for the shared HTTP client."""

from __future__ import annotations

from unittest.mock import patch

import requests
from urllib3.util.retry import Retry

from biodiversity_explorer.services.http import (
    DEFAULT_RETRY,
    DEFAULT_TIMEOUT,
    NO_RETRY,
    create_session,
    session,
)


class TestRetryStrategies:
    """Verify retry strategy configuration."""

    def test_module_session_does_not_retry(self) -> None:
        assert NO_RETRY.total == 0

    def test_default_retry_for_tooling(self) -> None:
        assert DEFAULT_RETRY.total == 4
        assert DEFAULT_RETRY.backoff_factor == 2
        assert 429 in DEFAULT_RETRY.status_forcelist
        assert 503 in DEFAULT_RETRY.status_forcelist

    def test_default_retry_only_safe_methods(self) -> None:
        allowed = DEFAULT_RETRY.allowed_methods
        assert "GET" in allowed
        assert "POST" not in allowed


class TestCreateSession:
    """Verify session factory."""

    def test_returns_session(self) -> None:
        assert isinstance(create_session(), requests.Session)

    def test_mounts_adapters(self) -> None:
        s = create_session()
        assert isinstance(s.get_adapter("https://api.gbif.org"), requests.adapters.HTTPAdapter)
        assert isinstance(s.get_adapter("http://example.com"), requests.adapters.HTTPAdapter)

    def test_no_retry_by_default(self) -> None:
        adapter = create_session().get_adapter("https://api.inaturalist.org")
        assert adapter.max_retries.total == 0

    def test_custom_retry(self) -> None:
        s = create_session(retry=Retry(total=10, backoff_factor=1))
        assert s.get_adapter("https://api.gbif.org").max_retries.total == 10

    def test_user_agent_header(self) -> None:
        assert "kenya-biodiversity-explorer" in create_session().headers["User-Agent"]

    def test_default_timeout_injected(self) -> None:
        s = create_session(timeout=42)
        prep = requests.Request("GET", "https://example.com").prepare()
        with patch.object(
            requests.adapters.HTTPAdapter, "send", return_value=requests.Response()
        ) as mock_send:
            s.send(prep)
            _, kwargs = mock_send.call_args
            assert kwargs.get("timeout") == 42

    def test_explicit_none_timeout_replaced(self) -> None:
        s = create_session(timeout=42)
        prep = requests.Request("GET", "https://example.com").prepare()
        with patch.object(
            requests.adapters.HTTPAdapter, "send", return_value=requests.Response()
        ) as mock_send:
            s.send(prep, timeout=None)
            _, kwargs = mock_send.call_args
            assert kwargs.get("timeout") == 42

    def test_explicit_timeout_not_overridden(self) -> None:
        s = create_session(timeout=42)
        prep = requests.Request("GET", "https://example.com").prepare()
        with patch.object(
            requests.adapters.HTTPAdapter, "send", return_value=requests.Response()
        ) as mock_send:
            s.send(prep, timeout=99)
            _, kwargs = mock_send.call_args
            assert kwargs.get("timeout") == 99


class TestModuleSession:
    """Verify the module-level singleton."""

    def test_session_is_configured(self) -> None:
        assert session.get_adapter("https://api.gbif.org").max_retries.total == 0

    def test_default_timeout(self) -> None:
        assert DEFAULT_TIMEOUT == 30
