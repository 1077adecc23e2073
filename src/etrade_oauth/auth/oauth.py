"""OAuth 1.0a authentication for E*Trade API."""

from __future__ import annotations

import logging
import secrets
import time
from typing import TYPE_CHECKING
from urllib.parse import parse_qs

import httpx

from etrade_oauth.auth.signature import percent_encode, sign
from etrade_oauth.exceptions import (
    ETradeOAuthError,
    ETradeTransportError,
    InvalidStateError,
    NotAuthenticatedError,
    TokenExchangeError,
    TokenRenewalError,
    TokenRequestError,
    TokenRevocationError,
)
from etrade_oauth.models.auth import AccessToken, RequestToken

if TYPE_CHECKING:
    from etrade_oauth.auth.verifier import VerifierProvider
    from etrade_oauth.config import ETradeOAuthConfig

logger = logging.getLogger(__name__)


class ETradeOAuth:
    """OAuth 1.0a handler for E*Trade API.

    Implements each leg of the three-legged flow as an independent call:
    1. Get request token
    2. User authorization (manual step, see ``get_authorization_url``)
    3. Exchange verifier for access token
    4. Token renewal and revocation

    The handler keeps no token state. Callers pass in whichever tokens the
    step needs and decide what to do with the result.
    """

    def __init__(
        self,
        config: ETradeOAuthConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._http_client = http_client

        self.request_token_url = f"{config.oauth_base_url}/request_token"
        self.access_token_url = f"{config.oauth_base_url}/access_token"
        self.renew_access_token_url = f"{config.oauth_base_url}/renew_access_token"
        self.revoke_access_token_url = f"{config.oauth_base_url}/revoke_access_token"
        self.authorize_url = config.authorize_url

    def set_http_client(self, http_client: httpx.AsyncClient | None) -> None:
        """Set the shared HTTP client for connection pooling."""
        self._http_client = http_client

    async def get_request_token(self) -> RequestToken:
        """Leg 1: Get a request token to start the OAuth flow."""
        oauth_params = self._build_oauth_params()
        oauth_params["oauth_callback"] = self.config.callback

        response = await self._send(
            url=self.request_token_url,
            oauth_params=oauth_params,
            token_secret="",
            error_cls=TokenRequestError,
            action="get request token",
        )
        token, token_secret = self._parse_token_response(response, TokenRequestError)

        logger.info("Obtained request token")
        return RequestToken(token=token, token_secret=token_secret)

    def get_authorization_url(self, request_token: str) -> str:
        """Build the URL the user visits to authorize the request token.

        No network call and no validation: gating on a real token is up to
        the caller.
        """
        return f"{self.authorize_url}?key={self.config.consumer_key}&token={request_token}"

    async def get_access_token(self, verifier: str, request_token: RequestToken | None) -> AccessToken:
        """Leg 3: Exchange verifier code for access token.

        Args:
            verifier: The verification code shown to user after authorization
            request_token: Request token pair obtained in leg 1

        Returns:
            AccessToken for API access

        Raises:
            InvalidStateError: If no request token pair is given (no network call)
            TokenExchangeError: If the provider rejects the exchange
        """
        if request_token is None or not request_token.token or not request_token.token_secret:
            raise InvalidStateError(
                "OAuth flow not started. No request token available.",
                operation="complete",
            )

        oauth_params = self._build_oauth_params()
        oauth_params["oauth_token"] = request_token.token
        oauth_params["oauth_verifier"] = verifier

        response = await self._send(
            url=self.access_token_url,
            oauth_params=oauth_params,
            token_secret=request_token.token_secret,
            error_cls=TokenExchangeError,
            action="get access token",
        )
        token, token_secret = self._parse_token_response(response, TokenExchangeError)

        logger.info("Exchanged verifier for access token")
        return AccessToken(token=token, token_secret=token_secret)

    async def renew_access_token(self, access_token: AccessToken | None) -> AccessToken:
        """Renew the current access token.

        Access tokens expire at midnight US Eastern time. Renewal resets the
        provider-side clock; the token and secret stay the same.
        """
        access_token = self._require_access_token(access_token, operation="renew")

        oauth_params = self._build_oauth_params()
        oauth_params["oauth_token"] = access_token.token

        try:
            await self._send(
                url=self.renew_access_token_url,
                oauth_params=oauth_params,
                token_secret=access_token.token_secret,
                error_cls=TokenRenewalError,
                action="renew token",
            )
        except TokenRenewalError as e:
            if e.status_code == 401:
                # Past the renewal window; the flow must restart from leg 1
                raise TokenRenewalError(
                    "Access token expired or invalid. Start the OAuth flow again.",
                    status_code=e.status_code,
                    response_body=e.response_body,
                    expired=True,
                ) from e
            raise

        logger.info("Renewed access token")
        return access_token

    async def revoke_access_token(self, access_token: AccessToken | None) -> None:
        """Revoke the current access token on the provider."""
        access_token = self._require_access_token(access_token, operation="revoke")

        oauth_params = self._build_oauth_params()
        oauth_params["oauth_token"] = access_token.token

        await self._send(
            url=self.revoke_access_token_url,
            oauth_params=oauth_params,
            token_secret=access_token.token_secret,
            error_cls=TokenRevocationError,
            action="revoke token",
        )
        logger.info("Revoked access token")

    async def authenticate(self, verifier_provider: VerifierProvider) -> AccessToken:
        """Run all three legs, asking ``verifier_provider`` for the verifier code."""
        request_token = await self.get_request_token()
        authorization_url = self.get_authorization_url(request_token.token)
        verifier = await verifier_provider.get_verifier(request_token, authorization_url)
        return await self.get_access_token(verifier.strip(), request_token)

    def sign_request(
        self,
        method: str,
        url: str,
        access_token: AccessToken | None,
        params: dict[str, str] | None = None,
    ) -> dict[str, str]:
        """Generate OAuth headers for an API request made with an access token.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            url: Full request URL
            access_token: Access token pair from a completed flow
            params: Additional parameters (query or body)

        Returns:
            Headers dict with Authorization header
        """
        access_token = self._require_access_token(access_token, operation="sign")

        oauth_params = self._build_oauth_params()
        oauth_params["oauth_token"] = access_token.token

        # Request params are signed but not sent in the header
        all_params = {**oauth_params}
        if params:
            all_params.update(params)

        oauth_params["oauth_signature"] = self._generate_signature(
            method=method,
            url=url,
            oauth_params=all_params,
            token_secret=access_token.token_secret,
        )

        return {"Authorization": self._build_auth_header(oauth_params)}

    @staticmethod
    def _require_access_token(access_token: AccessToken | None, *, operation: str) -> AccessToken:
        if access_token is None or not access_token.token or not access_token.token_secret:
            raise NotAuthenticatedError(
                "Not authenticated. Complete the OAuth flow first.",
                operation=operation,
            )
        return access_token

    async def _send(
        self,
        *,
        url: str,
        oauth_params: dict[str, str],
        token_secret: str,
        error_cls: type[ETradeOAuthError],
        action: str,
    ) -> httpx.Response:
        """Sign and send a GET to an OAuth endpoint, raising ``error_cls`` on non-2xx."""
        oauth_params["oauth_signature"] = self._generate_signature(
            method="GET",
            url=url,
            oauth_params=oauth_params,
            token_secret=token_secret,
        )
        headers = {"Authorization": self._build_auth_header(oauth_params)}

        logger.debug("Request: GET %s", url)

        try:
            if self._http_client is not None:
                response = await self._http_client.get(url, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                    response = await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Transport failure trying to %s: %s", action, e)
            raise ETradeTransportError(
                f"Failed to {action}: {e}",
                stage=error_cls.stage,
            ) from e

        if not response.is_success:
            logger.warning("Failed to %s: HTTP %s", action, response.status_code)
            raise error_cls(
                f"Failed to {action}: {response.status_code} {response.text}",
                status_code=response.status_code,
                response_body=response.text,
            )

        return response

    @staticmethod
    def _parse_token_response(
        response: httpx.Response,
        error_cls: type[ETradeOAuthError],
    ) -> tuple[str, str]:
        """Parse ``oauth_token``/``oauth_token_secret`` from a form-encoded body."""
        data = parse_qs(response.text)
        token = data.get("oauth_token", [""])[0]
        token_secret = data.get("oauth_token_secret", [""])[0]

        if not token or not token_secret:
            raise error_cls(
                f"Invalid token response: {response.text}",
                status_code=response.status_code,
                response_body=response.text,
            )

        return token, token_secret

    def _build_oauth_params(self) -> dict[str, str]:
        """Build base OAuth parameters with a fresh timestamp and nonce."""
        return {
            "oauth_consumer_key": self.config.consumer_key,
            "oauth_nonce": secrets.token_hex(16),
            "oauth_signature_method": self.config.signature_method,
            "oauth_timestamp": str(int(time.time())),
            "oauth_version": "1.0",
        }

    def _generate_signature(
        self,
        method: str,
        url: str,
        oauth_params: dict[str, str],
        token_secret: str,
    ) -> str:
        return sign(
            method,
            url,
            oauth_params,
            self.config.consumer_secret,
            token_secret,
            signature_method=self.config.signature_method,
        )

    def _build_auth_header(self, oauth_params: dict[str, str]) -> str:
        """Build OAuth Authorization header."""
        auth_parts = [f'{k}="{percent_encode(v)}"' for k, v in sorted(oauth_params.items())]
        if self.config.realm is not None:
            auth_parts.insert(0, f'realm="{percent_encode(self.config.realm)}"')
        return "OAuth " + ", ".join(auth_parts)
