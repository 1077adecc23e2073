"""Per-session E*Trade OAuth client."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from etrade_oauth.auth import ETradeOAuth
from etrade_oauth.config import ETradeOAuthConfig
from etrade_oauth.session import OAuthSession
from etrade_oauth.tools import OAuthTools

if TYPE_CHECKING:
    from types import TracebackType


class ETradeOAuthClient:
    """Wires the OAuth handler, one session and the tool operations together.

    Build one client per connection or agent session; sessions never share
    tokens.

    Usage (context manager - recommended for connection pooling):
        async with ETradeOAuthClient(config) as client:
            result = await client.tools.start()

    Usage (external HTTP client - shared across sessions):
        http_client = httpx.AsyncClient(timeout=30.0)
        client = ETradeOAuthClient(config, http_client=http_client)
        # Client uses shared pool, doesn't close it

    Usage (no pooling - creates connection per request):
        client = ETradeOAuthClient(config)
        result = await client.tools.start()  # Per-request connection
    """

    def __init__(
        self,
        config: ETradeOAuthConfig,
        *,
        session: OAuthSession | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: E*Trade configuration with credentials
            session: Optional session state (a fresh one if not provided)
            http_client: Optional httpx.AsyncClient for connection pooling.
                        If provided, the client will use this pool and NOT close it.
        """
        self.config = config
        self.session = session or OAuthSession()
        self.auth = ETradeOAuth(config, http_client)
        self.tools = OAuthTools(self.auth, self.session)

        # HTTP client management
        self._http_client = http_client
        self._owns_http_client = http_client is None

    def _set_http_client(self, http_client: httpx.AsyncClient | None) -> None:
        self._http_client = http_client
        self.auth.set_http_client(http_client)

    async def open(self) -> None:
        """Open connection pool for HTTP requests."""
        if self._http_client is None and self._owns_http_client:
            self._set_http_client(httpx.AsyncClient(timeout=self.config.timeout))

    async def close(self) -> None:
        """Close connection pool.

        Only closes the pool if this client owns it (not external).
        """
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._set_http_client(None)

    async def __aenter__(self) -> ETradeOAuthClient:
        """Async context manager entry - opens connection pool."""
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit - closes connection pool."""
        await self.close()

    @classmethod
    def from_env(cls, *, sandbox: bool | None = None) -> ETradeOAuthClient:
        """Create client from environment variables.

        Expects:
        - ETRADE_CONSUMER_KEY
        - ETRADE_CONSUMER_SECRET
        """
        return cls(ETradeOAuthConfig.from_env(sandbox=sandbox))

    @property
    def is_authenticated(self) -> bool:
        """Check if the session is authenticated."""
        return self.session.is_authenticated

    def sign_request(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
    ) -> dict[str, str]:
        """Build OAuth headers for an API call using the session's access token."""
        return self.auth.sign_request(method, url, self.session.access_token, params)
