"""In-memory OAuth session state for a single user."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, time, timedelta
from enum import StrEnum
from zoneinfo import ZoneInfo

from etrade_oauth.models.auth import AccessToken, RequestToken

logger = logging.getLogger(__name__)

# E*Trade access tokens expire at midnight US Eastern time
PROVIDER_TIMEZONE = ZoneInfo("America/New_York")


class SessionState(StrEnum):
    """Phase of one user's authentication attempt."""

    IDLE = "idle"
    REQUEST_TOKEN_OBTAINED = "request_token_obtained"
    AUTHENTICATED = "authenticated"


def next_provider_midnight(moment: datetime) -> datetime:
    """Return the first midnight US Eastern strictly after ``moment``."""
    local = moment.astimezone(PROVIDER_TIMEZONE)
    next_day = local.date() + timedelta(days=1)
    return datetime.combine(next_day, time.min, tzinfo=PROVIDER_TIMEZONE)


class OAuthSession:
    """Tokens held for one user's authentication attempt.

    Request and access tokens are each stored as a single pair, so a token
    and its secret are always set or cleared together. Nothing is persisted:
    a new process starts ``IDLE``.

    One instance per connection or agent session. ``lock`` serializes
    read-modify-write cycles when a host may overlap calls.
    """

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self._request_token: RequestToken | None = None
        self._authorization_url: str | None = None
        self._access_token: AccessToken | None = None
        self._authenticated_at: datetime | None = None
        self._renewed_at: datetime | None = None

    @property
    def state(self) -> SessionState:
        """Phase reported by ``status``; a pending request token wins over an access token."""
        if self._request_token is not None:
            return SessionState.REQUEST_TOKEN_OBTAINED
        if self._access_token is not None:
            return SessionState.AUTHENTICATED
        return SessionState.IDLE

    @property
    def request_token(self) -> RequestToken | None:
        return self._request_token

    @property
    def authorization_url(self) -> str | None:
        return self._authorization_url

    @property
    def access_token(self) -> AccessToken | None:
        return self._access_token

    @property
    def is_authenticated(self) -> bool:
        """True when both the access token and its secret are present."""
        token = self._access_token
        return token is not None and bool(token.token) and bool(token.token_secret)

    @property
    def has_pending_authorization(self) -> bool:
        return self._request_token is not None

    @property
    def authenticated_at(self) -> datetime | None:
        return self._authenticated_at

    @property
    def renewed_at(self) -> datetime | None:
        return self._renewed_at

    @property
    def token_expires_at(self) -> datetime | None:
        """Provider-side expiry of the access token, or None when unauthenticated."""
        if not self.is_authenticated:
            return None
        last_refresh = self._renewed_at or self._authenticated_at
        if last_refresh is None:
            return None
        return next_provider_midnight(last_refresh)

    def begin(self, request_token: RequestToken, authorization_url: str) -> None:
        """Record a fresh request token, replacing any pending one."""
        if self._request_token is not None:
            logger.info("Replacing pending request token with a new one")
        self._request_token = request_token
        self._authorization_url = authorization_url

    def authenticate(self, access_token: AccessToken, *, now: datetime | None = None) -> None:
        """Record the access token and consume the pending request token."""
        self._access_token = access_token
        self._authenticated_at = now or datetime.now(PROVIDER_TIMEZONE)
        self._renewed_at = None

        # Request tokens are single-use
        self._request_token = None
        self._authorization_url = None
        logger.info("Session authenticated")

    def mark_renewed(self, *, now: datetime | None = None) -> None:
        self._renewed_at = now or datetime.now(PROVIDER_TIMEZONE)

    def clear_access_token(self) -> None:
        """Forget the access token (after a confirmed revocation)."""
        self._access_token = None
        self._authenticated_at = None
        self._renewed_at = None
        logger.info("Session access token cleared")

    def reset(self) -> None:
        """Drop all tokens and return to ``IDLE``.

        For hosts that end a user's session without revoking, e.g. on disconnect.
        """
        self._request_token = None
        self._authorization_url = None
        self.clear_access_token()
