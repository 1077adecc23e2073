"""Shared fixtures: a fake E*Trade OAuth provider behind httpx.MockTransport."""

from collections.abc import AsyncIterator
from urllib.parse import unquote

import httpx
import pytest

from etrade_oauth import ETradeOAuth, ETradeOAuthConfig, OAuthSession, OAuthTools

REQUEST_TOKEN_PATH = "/oauth/request_token"
ACCESS_TOKEN_PATH = "/oauth/access_token"
RENEW_PATH = "/oauth/renew_access_token"
REVOKE_PATH = "/oauth/revoke_access_token"


def parse_auth_header(header: str) -> dict[str, str]:
    """Parse an ``OAuth k="v", ...`` header into decoded parameters."""
    assert header.startswith("OAuth ")
    params = {}
    for part in header[len("OAuth ") :].split(", "):
        key, _, value = part.partition("=")
        params[key] = unquote(value.strip('"'))
    return params


class FakeETrade:
    """Scriptable stand-in for E*Trade's OAuth endpoints.

    Set ``responses[path]`` to a ``(status, body)`` pair or an exception to raise.
    Every request is recorded in ``requests``.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, tuple[int, str] | Exception] = {
            REQUEST_TOKEN_PATH: (
                200,
                "oauth_token=RT1&oauth_token_secret=RTS1&oauth_callback_confirmed=true",
            ),
            ACCESS_TOKEN_PATH: (200, "oauth_token=AT1&oauth_token_secret=ATS1"),
            RENEW_PATH: (200, "Access Token has been renewed"),
            REVOKE_PATH: (200, "Revoked Access Token"),
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.get(request.url.path)
        if response is None:
            return httpx.Response(404, text="not found")
        if isinstance(response, Exception):
            raise response
        status_code, body = response
        return httpx.Response(status_code, text=body)

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def oauth_params(self, path: str) -> dict[str, str]:
        """Authorization header parameters of the last request to ``path``."""
        return parse_auth_header(self.requests_to(path)[-1].headers["Authorization"])


@pytest.fixture
def config() -> ETradeOAuthConfig:
    """Create a test configuration."""
    return ETradeOAuthConfig(
        consumer_key="K1",
        consumer_secret="S1",
        sandbox=True,
    )


@pytest.fixture
def fake_etrade() -> FakeETrade:
    return FakeETrade()


@pytest.fixture
async def http_client(fake_etrade: FakeETrade) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_etrade.handler)) as client:
        yield client


@pytest.fixture
def auth(config: ETradeOAuthConfig, http_client: httpx.AsyncClient) -> ETradeOAuth:
    return ETradeOAuth(config, http_client)


@pytest.fixture
def session() -> OAuthSession:
    return OAuthSession()


@pytest.fixture
def tools(auth: ETradeOAuth, session: OAuthSession) -> OAuthTools:
    return OAuthTools(auth, session)
