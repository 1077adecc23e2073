"""Verifier retrieval for the authorization leg of the OAuth flow.

The provider shows the user a verifier code after they approve access. How
that code reaches us depends on the host: an agent relays it through the
``complete`` tool, a terminal prompts for it. Hosts inject a
``VerifierProvider`` rather than subclassing the handler.
"""

import inspect
from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

from etrade_oauth.exceptions import VerifierUnavailableError
from etrade_oauth.models.auth import RequestToken


@runtime_checkable
class VerifierProvider(Protocol):
    """Supplies the verifier code for an authorized request token."""

    async def get_verifier(self, request_token: RequestToken, authorization_url: str) -> str: ...


class UnsupportedVerifierProvider:
    """Refuses automated retrieval; the caller must supply the verifier itself."""

    async def get_verifier(self, request_token: RequestToken, authorization_url: str) -> str:
        raise VerifierUnavailableError(
            "Automated verifier retrieval is not supported. "
            "Visit the authorization URL and supply the verifier code to complete the flow."
        )


class CallbackVerifierProvider:
    """Delegates to a sync or async callable taking the authorization URL.

    Example:
        provider = CallbackVerifierProvider(lambda url: input(f"Visit {url}: "))
    """

    def __init__(self, callback: Callable[[str], str | Awaitable[str]]) -> None:
        self._callback = callback

    async def get_verifier(self, request_token: RequestToken, authorization_url: str) -> str:
        result = self._callback(authorization_url)
        if inspect.isawaitable(result):
            result = await result

        verifier = str(result).strip()
        if not verifier:
            raise VerifierUnavailableError("Verifier code is required.")
        return verifier
