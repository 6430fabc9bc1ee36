"""Channel-agnostic error classification for user-facing messages."""

import asyncio
import httpx

from ..playground.errors import (
    FormatToolError,
    NoCandidatesError,
    ParseError,
    ServiceError,
)


def classify_error(e: Exception) -> str:
    """Classify any exception into a user-friendly message.

    Works for all channels (Telegram, CLI). Returns a short string suitable
    for sending directly to the user.
    """
    # 1-2: Problems with what the user sent
    if isinstance(e, ParseError):
        return f"Couldn't parse the command: {e}"
    if isinstance(e, NoCandidatesError):
        return str(e)

    # 3: Playground or paste service failure
    if isinstance(e, ServiceError):
        return f"The playground request failed ({e}). Please try again later."

    # 4: rustfmt could not run and nothing could stand in for it
    if isinstance(e, FormatToolError):
        return "rustfmt is not available right now."

    # 5: httpx HTTP status errors that escaped the client
    if isinstance(e, httpx.HTTPStatusError):
        code = e.response.status_code
        if code == 429:
            return "Rate limited. Please wait a moment and try again."
        if 500 <= code < 600:
            return "The playground is having server issues. Please try again later."
        return f"The playground returned HTTP {code}. Please try again later."

    # 6-7: Network / timeout errors
    if isinstance(e, httpx.ConnectError):
        return "Cannot connect to the playground. Please try again later."
    if isinstance(e, (httpx.TimeoutException, asyncio.TimeoutError)):
        return "Request timed out. Please try again."

    # 8: Fallback, include type name for debugging
    type_name = type(e).__name__
    return f"Something went wrong ({type_name}). Check logs for details."
