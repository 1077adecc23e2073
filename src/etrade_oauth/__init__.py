"""E*Trade OAuth 1.0a client.

Walks a human user through E*Trade's three-legged OAuth flow on behalf of
an automated agent, keeping the resulting tokens in memory only.

Example:
    from etrade_oauth import ETradeOAuthClient

    async with ETradeOAuthClient.from_env(sandbox=True) as client:
        started = await client.tools.start()
        print(started.to_json())  # authorizationUrl for the user

        verifier = input("Enter verifier code: ")
        print((await client.tools.complete(verifier)).to_json())
        print(client.tools.status().to_json())

        # Tokens expire at midnight US Eastern
        await client.tools.renew()
        await client.tools.revoke()
"""

from etrade_oauth.auth import (
    CallbackVerifierProvider,
    ETradeOAuth,
    UnsupportedVerifierProvider,
    VerifierProvider,
)
from etrade_oauth.client import ETradeOAuthClient
from etrade_oauth.config import ETradeOAuthConfig
from etrade_oauth.exceptions import (
    ETradeError,
    ETradeOAuthError,
    ETradeTransportError,
    InvalidStateError,
    InvalidVerifierError,
    NotAuthenticatedError,
    TokenExchangeError,
    TokenRenewalError,
    TokenRequestError,
    TokenRevocationError,
    VerifierUnavailableError,
)
from etrade_oauth.models.auth import AccessToken, RequestToken
from etrade_oauth.models.results import StartResult, StatusResult, ToolResult
from etrade_oauth.session import OAuthSession, SessionState
from etrade_oauth.tools import OAuthTools

__version__ = "0.1.0"

__all__ = [
    # Main client
    "ETradeOAuthClient",
    "ETradeOAuthConfig",
    # Building blocks
    "ETradeOAuth",
    "OAuthSession",
    "OAuthTools",
    "SessionState",
    # Verifier providers
    "CallbackVerifierProvider",
    "UnsupportedVerifierProvider",
    "VerifierProvider",
    # Models
    "AccessToken",
    "RequestToken",
    "StartResult",
    "StatusResult",
    "ToolResult",
    # Exceptions
    "ETradeError",
    "ETradeOAuthError",
    "ETradeTransportError",
    "InvalidStateError",
    "InvalidVerifierError",
    "NotAuthenticatedError",
    "TokenExchangeError",
    "TokenRenewalError",
    "TokenRequestError",
    "TokenRevocationError",
    "VerifierUnavailableError",
]
