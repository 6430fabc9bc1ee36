"""Tests for classify_error()."""

import asyncio

import httpx
import pytest

from playbot.communication.errors import classify_error
from playbot.playground.errors import (
    FormatToolError,
    NoCandidatesError,
    ParseError,
    PlaygroundError,
    ServiceError,
)


# ── Playground exceptions ───────────────────────────────────

class TestPlaygroundErrors:
    def test_parse_error(self):
        msg = classify_error(ParseError("missing code block"))
        assert msg == "Couldn't parse the command: missing code block"

    def test_no_candidates(self):
        msg = classify_error(NoCandidatesError("No public functions found for benchmarking 🤔"))
        assert msg == "No public functions found for benchmarking 🤔"

    def test_service_error(self):
        msg = classify_error(ServiceError("playground returned HTTP 502"))
        assert "HTTP 502" in msg
        assert "try again later" in msg

    def test_format_tool_error(self):
        assert "rustfmt" in classify_error(FormatToolError("couldn't run rustfmt"))

    def test_hierarchy(self):
        for cls in (ParseError, ServiceError, FormatToolError, NoCandidatesError):
            assert issubclass(cls, PlaygroundError)


# ── httpx.HTTPStatusError ────────────────────────────────────

def _make_http_error(status_code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "https://play.rust-lang.org/execute")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(
        f"{status_code} error", request=request, response=response
    )


class TestHTTPStatusError:
    def test_429(self):
        assert "Rate limited" in classify_error(_make_http_error(429))

    @pytest.mark.parametrize("status", [500, 502, 503])
    def test_5xx(self, status):
        assert "server issues" in classify_error(_make_http_error(status))

    def test_unknown_status(self):
        assert "HTTP 418" in classify_error(_make_http_error(418))


# ── Network / timeout errors ────────────────────────────────

class TestNetworkErrors:
    def test_connect_error(self):
        assert "Cannot connect" in classify_error(httpx.ConnectError("Connection refused"))

    def test_read_timeout(self):
        assert "timed out" in classify_error(httpx.ReadTimeout("read timed out"))

    def test_asyncio_timeout(self):
        assert "timed out" in classify_error(asyncio.TimeoutError())


# ── Fallback ─────────────────────────────────────────────────

class TestFallback:
    def test_unknown_exception_includes_type_name(self):
        msg = classify_error(ValueError("bad value"))
        assert "ValueError" in msg
        assert "Something went wrong" in msg

    def test_custom_exception(self):
        class MyCustomError(Exception):
            pass
        assert "MyCustomError" in classify_error(MyCustomError("oops"))
