"""Rust Playground API client."""

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ValidationError

from .errors import ServiceError
from .models import CommandFlags, FormatResponse, GistResponse, ToolResult

logger = logging.getLogger("playbot.playground.client")

DEFAULT_PLAYGROUND_URL = "https://play.rust-lang.org"

EXECUTE_ENDPOINT = "/execute"
MIRI_ENDPOINT = "/miri"
MACRO_EXPANSION_ENDPOINT = "/macro-expansion"
CLIPPY_ENDPOINT = "/clippy"
FORMAT_ENDPOINT = "/format"
GIST_ENDPOINT = "/meta/gist/"


class PlaygroundClient:
    """Thin async wrapper over the playground's JSON endpoints.

    Every call is a single POST with no retries. Anything that keeps us
    from getting a well-formed response raises ServiceError.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_PLAYGROUND_URL,
        timeout: float = 60.0,
        referer: Optional[str] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.referer = referer

    async def _post(self, endpoint: str, payload: dict, model: type[BaseModel]) -> BaseModel:
        url = f"{self.base_url}{endpoint}"
        headers = {"Referer": self.referer} if self.referer else {}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, headers=headers) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(f"Playground {endpoint} returned HTTP {status}")
            raise ServiceError(f"playground returned HTTP {status}") from e
        except httpx.TimeoutException as e:
            logger.warning(f"Playground {endpoint} timed out after {self.timeout}s")
            raise ServiceError(f"playground timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            logger.warning(f"Playground {endpoint} request failed: {e}")
            raise ServiceError(f"could not reach the playground: {e}") from e
        except ValueError as e:
            raise ServiceError("playground sent a response that isn't JSON") from e

        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Unexpected {endpoint} response shape: {data!r}")
            raise ServiceError("unexpected response from the playground") from e

    async def run_tool(self, endpoint: str, payload: dict) -> ToolResult:
        """POST a tool request and decode the {success, stdout, stderr} reply."""
        return await self._post(endpoint, payload, ToolResult)

    async def format(self, payload: dict) -> ToolResult:
        response = await self._post(FORMAT_ENDPOINT, payload, FormatResponse)
        return response.to_result()

    async def post_gist(self, code: str) -> str:
        """Upload code to the paste service. Returns the gist ID."""
        response = await self._post(GIST_ENDPOINT, {"code": code}, GistResponse)
        logger.info(f"gist response: {response.id}")
        return response.id

    def url_from_gist(self, flags: CommandFlags, gist_id: str) -> str:
        return (
            f"{self.base_url}/?version={flags.channel.value}&mode={flags.mode.value}"
            f"&edition={flags.edition.value}&gist={gist_id}"
        )
