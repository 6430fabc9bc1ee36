"""Pytest configuration and shared fixtures."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from playbot.commands import CommandArgs
from playbot.playground.client import PlaygroundClient
from playbot.playground.rustfmt import RustFormatter
from playbot.playground.tools import PlaygroundServices


@pytest.fixture
def client():
    """PlaygroundClient with every network call mocked out."""
    mock = MagicMock(spec=PlaygroundClient)
    mock.run_tool = AsyncMock()
    mock.format = AsyncMock()
    mock.post_gist = AsyncMock(return_value="gist123")
    real = PlaygroundClient()
    mock.url_from_gist.side_effect = real.url_from_gist
    return mock


@pytest.fixture
def formatter():
    mock = MagicMock(spec=RustFormatter)
    mock.format = AsyncMock()
    return mock


@pytest.fixture
def services(client, formatter):
    return PlaygroundServices(client=client, formatter=formatter)


@pytest.fixture
def make_args():
    """Factory for CommandArgs with recorded reply/send calls."""
    def _make(body: str = "", params: dict | None = None, code: str | None = None) -> CommandArgs:
        return CommandArgs(
            body=body,
            reply=AsyncMock(),
            send=AsyncMock(),
            params=params or {},
            code=code,
        )
    return _make
