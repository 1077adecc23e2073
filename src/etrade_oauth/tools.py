"""Tool operations that guide a user through the E*Trade OAuth flow.

These are the five actions an agent-facing tool layer exposes (start,
complete, status, renew, revoke). Each one returns a result model instead
of raising, because the agent only sees the single response it gets back.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from etrade_oauth.exceptions import (
    ETradeError,
    InvalidStateError,
    InvalidVerifierError,
    NotAuthenticatedError,
)
from etrade_oauth.models.results import StartResult, StatusResult, ToolResult

if TYPE_CHECKING:
    from etrade_oauth.auth.oauth import ETradeOAuth
    from etrade_oauth.session import OAuthSession

logger = logging.getLogger(__name__)

START_INSTRUCTIONS = (
    "Please click the authorization URL above to log in to E*TRADE and authorize "
    "this application. After you authorize, you will see a verification code on the "
    "page. Copy that code and provide it using the etrade_oauth_complete tool."
)


class OAuthTools:
    """Agent-facing OAuth operations over one ``OAuthSession``.

    Usage:
        tools = OAuthTools(ETradeOAuth(config), OAuthSession())
        result = await tools.start()
        print(result.to_json())
    """

    def __init__(self, auth: ETradeOAuth, session: OAuthSession) -> None:
        self.auth = auth
        self.session = session

    async def start(self) -> ToolResult:
        """Leg 1: get a request token and return the authorization URL."""
        async with self.session.lock:
            try:
                request_token = await self.auth.get_request_token()
            except Exception as e:
                return self._failure("start", e)

            authorization_url = self.auth.get_authorization_url(request_token.token)
            self.session.begin(request_token, authorization_url)

        return StartResult(authorization_url=authorization_url, instructions=START_INSTRUCTIONS)

    async def complete(self, verifier_code: str | None) -> ToolResult:
        """Leg 3: exchange the user's verifier code for an access token."""
        async with self.session.lock:
            try:
                if not self.session.has_pending_authorization:
                    raise InvalidStateError(
                        "OAuth flow not started. Please call etrade_oauth_start first.",
                        operation="complete",
                    )
                verifier = (verifier_code or "").strip()
                if not verifier:
                    raise InvalidVerifierError("Verifier code is required.")

                access_token = await self.auth.get_access_token(
                    verifier, self.session.request_token
                )
            except Exception as e:
                # The pending request token stays usable with a fresh verifier
                return self._failure("complete", e)

            self.session.authenticate(access_token)

        return ToolResult.ok("Authentication successful! You can now use E*TRADE API tools.")

    def status(self) -> StatusResult:
        """Report the current authentication state without any network call."""
        return StatusResult(
            is_authenticated=self.session.is_authenticated,
            has_pending_authorization=self.session.has_pending_authorization,
            authorization_url=self.session.authorization_url,
            environment=self.auth.config.environment,
            state=self.session.state.value,
            token_expires_at=self.session.token_expires_at,
        )

    async def renew(self) -> ToolResult:
        """Extend the access token until the next provider midnight."""
        async with self.session.lock:
            try:
                if not self.session.is_authenticated:
                    raise NotAuthenticatedError(
                        "Not authenticated. Please complete the OAuth flow first using "
                        "etrade_oauth_start and etrade_oauth_complete.",
                        operation="renew",
                    )
                await self.auth.renew_access_token(self.session.access_token)
            except Exception as e:
                return self._failure("renew", e)

            self.session.mark_renewed()

        return ToolResult.ok("Access token renewed successfully.")

    async def revoke(self) -> ToolResult:
        """Revoke the access token; local tokens are cleared only once the provider confirms."""
        async with self.session.lock:
            try:
                if not self.session.is_authenticated:
                    raise NotAuthenticatedError(
                        "Not authenticated. Nothing to revoke.",
                        operation="revoke",
                    )
                await self.auth.revoke_access_token(self.session.access_token)
            except Exception as e:
                return self._failure("revoke", e)

            self.session.clear_access_token()

        return ToolResult.ok("Access token revoked. You are now logged out.")

    @staticmethod
    def _failure(operation: str, error: Exception) -> ToolResult:
        if isinstance(error, InvalidStateError | InvalidVerifierError):
            logger.info("Rejected %s: %s", operation, error.message)
        elif isinstance(error, ETradeError):
            logger.warning("OAuth %s failed: %s", operation, error.message)
        else:
            logger.exception("Unexpected error during OAuth %s", operation)
        return ToolResult.failure(str(error))
