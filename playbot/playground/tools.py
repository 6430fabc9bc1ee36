"""Playground tools and the pipeline they share.

Each tool is a PlaygroundTool value describing how its request is built and
how its output is cleaned up. run_tool drives all of them the same way:
wrap, request, shape stderr, post-process, reply.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..formatting import Reply
from .client import (
    CLIPPY_ENDPOINT,
    EXECUTE_ENDPOINT,
    FORMAT_ENDPOINT,
    MACRO_EXPANSION_ENDPOINT,
    MIRI_ENDPOINT,
    PlaygroundClient,
)
from .errors import FormatToolError
from .extract import (
    CLIPPY_OUTPUT,
    MACRO_EXPANSION_OUTPUT,
    MIRI_OUTPUT,
    format_compiler_stderr,
)
from .models import CommandFlags, CrateType, ExecutionRequest, ResultHandling, ToolResult
from .reply import TELEGRAM_MAX_MESSAGE_LENGTH, SendFn, format_and_send
from .rustfmt import RustFormatter
from .wrap import maybe_wrap, strip_main_boilerplate

logger = logging.getLogger("playbot.playground.tools")

RequestBuilder = Callable[[str, CommandFlags], dict]


def execute_request(code: str, flags: CommandFlags) -> dict:
    return ExecutionRequest(
        code=code,
        channel=flags.channel,
        edition=flags.edition,
        mode=flags.mode,
    ).to_payload()


def edition_request(code: str, flags: CommandFlags) -> dict:
    """Body shared by /miri and /macro-expansion."""
    return {"edition": flags.edition.value, "code": code}


def clippy_request(code: str, flags: CommandFlags) -> dict:
    return {
        "edition": flags.edition.value,
        "crateType": CrateType.for_code(code).value,
        "code": code,
    }


def format_request(code: str, flags: CommandFlags) -> dict:
    return {"channel": flags.channel.value, "edition": flags.edition.value, "code": code}


def _unchanged(text: str) -> str:
    return text


@dataclass(frozen=True)
class PlaygroundTool:
    name: str
    endpoint: str
    result_handling: ResultHandling
    build_request: RequestBuilder
    shape_stderr: Callable[[str], str] = _unchanged
    reformat_output: bool = False     # pass successful stdout through rustfmt
    strip_boilerplate: bool = False   # drop our generated fn main from stdout
    local_format: bool = False        # try rustfmt locally before the endpoint


PLAY = PlaygroundTool(
    "play", EXECUTE_ENDPOINT, ResultHandling.NONE, execute_request, format_compiler_stderr,
)
EVAL = PlaygroundTool(
    "eval", EXECUTE_ENDPOINT, ResultHandling.PRINT, execute_request, format_compiler_stderr,
)
MIRI = PlaygroundTool(
    "miri", MIRI_ENDPOINT, ResultHandling.DISCARD, edition_request, MIRI_OUTPUT.apply,
)
EXPAND = PlaygroundTool(
    "expand", MACRO_EXPANSION_ENDPOINT, ResultHandling.NONE, edition_request,
    MACRO_EXPANSION_OUTPUT.apply, reformat_output=True, strip_boilerplate=True,
)
CLIPPY = PlaygroundTool(
    "clippy", CLIPPY_ENDPOINT, ResultHandling.DISCARD, clippy_request, CLIPPY_OUTPUT.apply,
)
FMT = PlaygroundTool(
    "fmt", FORMAT_ENDPOINT, ResultHandling.NONE, format_request,
    strip_boilerplate=True, local_format=True,
)
# The benchmark harness brings its own fn main, so nothing gets wrapped
MICROBENCH = PlaygroundTool(
    "microbench", EXECUTE_ENDPOINT, ResultHandling.NONE, execute_request, format_compiler_stderr,
)

TOOLS = {tool.name: tool for tool in (PLAY, EVAL, MIRI, EXPAND, CLIPPY, FMT, MICROBENCH)}


@dataclass(frozen=True)
class PlaygroundServices:
    """Collaborators every tool run needs. Built once at startup, read-only."""

    client: PlaygroundClient
    formatter: RustFormatter
    max_message_length: int = TELEGRAM_MAX_MESSAGE_LENGTH


async def fetch_result(
    tool: PlaygroundTool,
    code: str,
    flags: CommandFlags,
    services: PlaygroundServices,
) -> ToolResult:
    if tool.local_format:
        try:
            return await services.formatter.format(code, flags.edition)
        except FormatToolError as e:
            logger.warning(f"Local rustfmt unavailable, using the playground: {e}")

    payload = tool.build_request(code, flags)
    if tool.endpoint == FORMAT_ENDPOINT:
        return await services.client.format(payload)
    return await services.client.run_tool(tool.endpoint, payload)


async def reformat(text: str, flags: CommandFlags, services: PlaygroundServices) -> str:
    """rustfmt `text`, keeping it unformatted if rustfmt fails."""
    try:
        formatted = await services.formatter.format(text, flags.edition)
    except FormatToolError as e:
        logger.warning(f"Couldn't run rustfmt: {e}")
        return text

    if not formatted.success:
        logger.warning(f"rustfmt failed on code that passed macro expansion: {formatted.stderr}")
        return text
    return formatted.stdout


async def run_tool(
    tool: PlaygroundTool,
    code: str,
    flags: CommandFlags,
    diagnostics: str,
    *,
    services: PlaygroundServices,
    send: SendFn,
    paste_code: Optional[str] = None,
) -> Reply:
    """Run `code` through `tool` and send the formatted result.

    Args:
        code: The user's snippet, before any wrapping
        diagnostics: Flag parse errors and hints, shown above the output
        paste_code: What to upload if the output is too large (default: `code`)
    """
    wrapped, was_wrapped = maybe_wrap(code, tool.result_handling)
    logger.debug(f"Running {tool.name} (wrapped={was_wrapped}, {len(wrapped)} chars)")

    result = await fetch_result(tool, wrapped, flags, services)
    result.stderr = tool.shape_stderr(result.stderr)

    if tool.reformat_output and result.success:
        result.stdout = await reformat(result.stdout, flags, services)
    if tool.strip_boilerplate and was_wrapped:
        result.stdout = strip_main_boilerplate(result.stdout)

    return await format_and_send(
        result,
        paste_code if paste_code is not None else code,
        flags,
        diagnostics,
        client=services.client,
        send=send,
        max_length=services.max_message_length,
    )
