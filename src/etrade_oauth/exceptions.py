"""Typed exceptions for the E*Trade OAuth client."""


class ETradeError(Exception):
    """Base exception for all E*Trade OAuth errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidStateError(ETradeError):
    """Operation invoked out of sequence. No network call was made."""

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        self.operation = operation  # e.g., "complete", "renew", "revoke"
        super().__init__(message)


class NotAuthenticatedError(InvalidStateError):
    """Operation requires an access token but none is held."""


class VerifierUnavailableError(ETradeError):
    """No verifier code could be obtained for a request token."""


class InvalidVerifierError(ETradeError):
    """Verifier code supplied by the caller is empty or blank. No network call was made."""


class ETradeOAuthError(ETradeError):
    """Provider rejected an OAuth request - carries status and raw body."""

    stage: str = "oauth"

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        response_body: str = "",
    ) -> None:
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)


class TokenRequestError(ETradeOAuthError):
    """Leg 1 failed: no request token was issued."""

    stage = "request_token"


class TokenExchangeError(ETradeOAuthError):
    """Leg 3 failed: verifier was not exchanged for an access token.

    Usually an expired, reused or mistyped verifier.
    """

    stage = "access_token"


class TokenRenewalError(ETradeOAuthError):
    """Access token renewal was rejected."""

    stage = "renewal"

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        response_body: str = "",
        expired: bool = False,
    ) -> None:
        self.expired = expired  # past the renewal window, restart from leg 1
        super().__init__(message, status_code=status_code, response_body=response_body)


class TokenRevocationError(ETradeOAuthError):
    """Access token revocation was rejected."""

    stage = "revocation"


class ETradeTransportError(ETradeError):
    """Connectivity or timeout failure talking to the provider."""

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        self.stage = stage
        super().__init__(message)
