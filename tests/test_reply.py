"""Tests for reply composition and the paste fallback."""

from unittest.mock import AsyncMock

import pytest

from playbot.formatting import Reply
from playbot.playground.errors import ServiceError
from playbot.playground.models import Channel, CommandFlags, Edition, Mode, ToolResult
from playbot.playground.reply import build_reply, compose_body, format_and_send


class TestComposeBody:
    def test_failure_shows_stderr(self):
        result = ToolResult(success=False, stdout="ignored", stderr="error[E0308]")
        assert compose_body(result) == "error[E0308]"

    def test_success_without_stderr(self):
        assert compose_body(ToolResult(success=True, stdout="42\n")) == "42\n"

    def test_success_with_stderr(self):
        result = ToolResult(success=True, stdout="ok\n", stderr="warning: unused\n")
        assert compose_body(result) == "warning: unused\n\nok\n"


class TestBuildReply:
    """Test inline replies and the gist fallback."""

    @pytest.mark.asyncio
    async def test_inline_reply(self, client):
        result = ToolResult(success=True, stdout="boom")
        reply = await build_reply(result, "code", CommandFlags(), "", client=client)

        assert reply == Reply(body="boom")
        assert "boom" in reply.to_html()
        client.post_gist.assert_not_called()

    @pytest.mark.asyncio
    async def test_diagnostics_come_first(self, client):
        result = ToolResult(success=True, stdout="hi")
        reply = await build_reply(
            result, "code", CommandFlags(), "invalid release channel `bogus`\n", client=client,
        )
        assert reply.to_text().startswith("invalid release channel `bogus`\n```rust\nhi")

    @pytest.mark.asyncio
    async def test_empty_output(self, client):
        result = ToolResult(success=True, stdout="  \n", stderr="")
        reply = await build_reply(result, "code", CommandFlags(), "diag\n", client=client)

        assert reply == Reply(diagnostics="diag\n")
        assert "\u200b" in reply.to_html()
        client.post_gist.assert_not_called()

    @pytest.mark.asyncio
    async def test_output_too_large_uploads_gist_once(self, client):
        flags = CommandFlags(channel=Channel.STABLE, mode=Mode.RELEASE, edition=Edition.E2015)
        result = ToolResult(success=True, stdout="x" * 5000)

        reply = await build_reply(result, "fn main() {}", flags, "", client=client)

        client.post_gist.assert_awaited_once_with("fn main() {}")
        assert reply.body == ""
        assert reply.link == (
            "https://play.rust-lang.org/?version=stable&mode=release&edition=2015&gist=gist123"
        )
        assert reply.to_text().startswith("Output too large. Playground link: ")
        assert "x" * 100 not in reply.to_html()

    @pytest.mark.asyncio
    async def test_length_boundary(self, client):
        result = ToolResult(success=True, stdout="x" * 10)

        fits = await build_reply(result, "c", CommandFlags(), "ab", client=client, max_length=12)
        assert fits.link is None

        too_big = await build_reply(result, "c", CommandFlags(), "ab", client=client, max_length=11)
        assert too_big.link is not None
        assert too_big.diagnostics == "ab"

    @pytest.mark.asyncio
    async def test_size_is_counted_in_utf16_units(self, client):
        result = ToolResult(success=True, stdout="🦀\n" * 1500)

        reply = await build_reply(result, "code", CommandFlags(), "", client=client)

        assert reply.link is not None
        client.post_gist.assert_awaited_once_with("code")

    @pytest.mark.asyncio
    async def test_paste_failure_propagates(self, client):
        client.post_gist.side_effect = ServiceError("playground returned HTTP 500")
        result = ToolResult(success=True, stdout="x" * 5000)

        with pytest.raises(ServiceError):
            await build_reply(result, "code", CommandFlags(), "", client=client)


class TestFormatAndSend:
    @pytest.mark.asyncio
    async def test_sends_built_reply(self, client):
        send = AsyncMock()
        result = ToolResult(success=False, stderr="error: oops")

        reply = await format_and_send(result, "code", CommandFlags(), "", client=client, send=send)

        send.assert_awaited_once_with(reply)
        assert reply.body == "error: oops"
