"""Tests for the exception hierarchy."""

import pytest

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


class TestExceptionHierarchy:
    """Tests for exception class hierarchy."""

    def test_etrade_error_is_base(self) -> None:
        """All exceptions should inherit from ETradeError."""
        for exc in (
            InvalidStateError,
            InvalidVerifierError,
            NotAuthenticatedError,
            VerifierUnavailableError,
            ETradeOAuthError,
            ETradeTransportError,
        ):
            assert issubclass(exc, ETradeError)

    def test_not_authenticated_is_invalid_state(self) -> None:
        """Renew/revoke before completing is an out-of-sequence call."""
        assert issubclass(NotAuthenticatedError, InvalidStateError)

    def test_invalid_verifier_is_not_invalid_state(self) -> None:
        """A blank verifier is bad input, not an out-of-sequence call."""
        assert not issubclass(InvalidVerifierError, InvalidStateError)

    @pytest.mark.parametrize(
        ("exc", "stage"),
        [
            (TokenRequestError, "request_token"),
            (TokenExchangeError, "access_token"),
            (TokenRenewalError, "renewal"),
            (TokenRevocationError, "revocation"),
        ],
    )
    def test_provider_errors_carry_stage(self, exc: type[ETradeOAuthError], stage: str) -> None:
        assert issubclass(exc, ETradeOAuthError)
        assert exc.stage == stage


class TestETradeError:
    """Tests for base ETradeError."""

    def test_stores_message(self) -> None:
        """Should store the error message."""
        error = ETradeError("Something went wrong")

        assert error.message == "Something went wrong"
        assert str(error) == "Something went wrong"


class TestInvalidStateError:
    """Tests for InvalidStateError."""

    def test_stores_operation(self) -> None:
        error = InvalidStateError("OAuth flow not started", operation="complete")

        assert error.operation == "complete"

    def test_operation_is_optional(self) -> None:
        assert InvalidStateError("out of order").operation is None


class TestETradeOAuthError:
    """Tests for provider failures."""

    def test_stores_status_and_body(self) -> None:
        error = TokenExchangeError(
            "Failed to get access token",
            status_code=401,
            response_body="oauth_problem=token_rejected",
        )

        assert error.status_code == 401
        assert error.response_body == "oauth_problem=token_rejected"
        assert error.message == "Failed to get access token"

    def test_body_defaults_to_empty(self) -> None:
        assert TokenRequestError("Failed", status_code=500).response_body == ""

    def test_renewal_expired_flag(self) -> None:
        assert TokenRenewalError("x", status_code=401, expired=True).expired is True
        assert TokenRenewalError("x", status_code=500).expired is False

    def test_can_catch_as_etrade_error(self) -> None:
        with pytest.raises(ETradeError):
            raise TokenRevocationError("Failed", status_code=400)


class TestETradeTransportError:
    """Tests for transport failures."""

    def test_stores_stage(self) -> None:
        error = ETradeTransportError("connection refused", stage="renewal")

        assert error.stage == "renewal"
        assert error.message == "connection refused"
