"""Client factory for CLI commands."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from etrade_oauth.client import ETradeOAuthClient

if TYPE_CHECKING:
    from etrade_oauth.cli.config import CLIConfig


@asynccontextmanager
async def get_client(config: CLIConfig) -> AsyncGenerator[ETradeOAuthClient]:
    """Create an ETradeOAuthClient for CLI use.

    This context manager:
    1. Loads credentials from config file with env var overrides
    2. Starts a fresh in-memory session
    3. Manages connection pooling lifecycle

    Usage:
        async with get_client(cli_config) as client:
            result = await client.tools.start()
    """
    client = ETradeOAuthClient(config.to_oauth_config())

    async with client:
        yield client
