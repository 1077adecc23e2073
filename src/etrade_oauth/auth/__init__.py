"""OAuth 1.0a authentication for E*Trade API."""

from etrade_oauth.auth.oauth import ETradeOAuth
from etrade_oauth.auth.verifier import (
    CallbackVerifierProvider,
    UnsupportedVerifierProvider,
    VerifierProvider,
)

__all__ = [
    "CallbackVerifierProvider",
    "ETradeOAuth",
    "UnsupportedVerifierProvider",
    "VerifierProvider",
]
