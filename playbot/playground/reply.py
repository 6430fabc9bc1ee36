"""Turn a tool result into a chat reply that fits the platform's size limit."""

import logging
from typing import Any, Awaitable, Callable

from ..formatting import Reply
from .client import PlaygroundClient
from .models import CommandFlags, ToolResult

logger = logging.getLogger("playbot.playground.reply")

SendFn = Callable[[Reply], Awaitable[Any]]

TELEGRAM_MAX_MESSAGE_LENGTH = 4096


def compose_body(result: ToolResult) -> str:
    """Pick what to show: stderr on failure, otherwise stdout plus any stderr."""
    if not result.success:
        return result.stderr
    if not result.stderr:
        return result.stdout
    return f"{result.stderr}\n{result.stdout}"


async def build_reply(
    result: ToolResult,
    code: str,
    flags: CommandFlags,
    diagnostics: str,
    *,
    client: PlaygroundClient,
    max_length: int = TELEGRAM_MAX_MESSAGE_LENGTH,
) -> Reply:
    """Build the reply for a tool result.

    Output that doesn't fit in one message is replaced by a playground link:
    `code` is uploaded to the paste service and the link carries the flags.
    Paste failures propagate as ServiceError.
    """
    body = compose_body(result)
    if not body.strip():
        return Reply(diagnostics=diagnostics)

    reply = Reply(diagnostics=diagnostics, body=body)
    if reply.visible_length <= max_length:
        return reply

    logger.info(f"Output too large ({reply.visible_length} chars), uploading gist")
    gist_id = await client.post_gist(code)
    return Reply(diagnostics=diagnostics, link=client.url_from_gist(flags, gist_id))


async def format_and_send(
    result: ToolResult,
    code: str,
    flags: CommandFlags,
    diagnostics: str,
    *,
    client: PlaygroundClient,
    send: SendFn,
    max_length: int = TELEGRAM_MAX_MESSAGE_LENGTH,
) -> Reply:
    """Build the reply for `result` and hand it to `send`."""
    reply = await build_reply(
        result, code, flags, diagnostics, client=client, max_length=max_length,
    )
    await send(reply)
    return reply
