"""
Unit tests for the latest stable release lookup.

Tests use mocked network requests.
"""

import pytest
import requests
import responses

from nimswitch.core.config import DEFAULT_STABLE_URL
from nimswitch.core.exceptions import ExternalFailureError, StableQueryError
from nimswitch.toolchain.stable import query_latest_stable


class TestQueryLatestStable:
    @responses.activate
    def test_returns_trimmed_version(self):
        responses.add(responses.GET, DEFAULT_STABLE_URL, body="2.2.4\n", status=200)

        assert query_latest_stable() == "2.2.4"

    @responses.activate
    def test_custom_url(self):
        url = "https://mirror.example.com/stable"
        responses.add(responses.GET, url, body="2.0.16", status=200)

        assert query_latest_stable(url) == "2.0.16"

    @responses.activate
    def test_http_error(self):
        responses.add(responses.GET, DEFAULT_STABLE_URL, status=503)

        with pytest.raises(StableQueryError, match="Failed to query"):
            query_latest_stable()

    @responses.activate
    def test_connection_error(self):
        responses.add(
            responses.GET,
            DEFAULT_STABLE_URL,
            body=requests.ConnectionError("no route to host"),
        )

        with pytest.raises(StableQueryError) as exc_info:
            query_latest_stable()

        assert isinstance(exc_info.value, ExternalFailureError)

    @pytest.mark.parametrize("body", ["", "   \n", "<html>\n<body>"])
    @responses.activate
    def test_unexpected_body(self, body):
        responses.add(responses.GET, DEFAULT_STABLE_URL, body=body, status=200)

        with pytest.raises(StableQueryError, match="Unexpected response"):
            query_latest_stable()

    @responses.activate
    def test_uses_session(self):
        responses.add(responses.GET, DEFAULT_STABLE_URL, body="2.2.4", status=200)

        with requests.Session() as session:
            assert query_latest_stable(session=session) == "2.2.4"

        assert len(responses.calls) == 1
