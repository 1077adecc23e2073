"""Configuration management for the E*Trade OAuth client."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from etrade_oauth.auth.signature import SIGNATURE_METHODS

OUT_OF_BAND = "oob"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _get_config_dir() -> Path:
    """Get XDG-compliant config directory."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "etrade-oauth"
    return Path.home() / ".config" / "etrade-oauth"


def _parse_bool(value: str | None, *, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


def sandbox_from_env(default: bool = True) -> bool:
    """Read ETRADE_SANDBOX, falling back to ``default`` when unset."""
    return _parse_bool(os.environ.get("ETRADE_SANDBOX"), default=default)


def optional_settings_from_env() -> dict[str, Any]:
    """Read the optional OAuth settings that are set in the environment.

    Only variables that are present are returned, so the result can be laid
    over file values or dataclass defaults.

    Raises:
        ValueError: If ETRADE_TIMEOUT is not a number
    """
    settings: dict[str, Any] = {}

    if signature_method := os.environ.get("ETRADE_SIGNATURE_METHOD"):
        settings["signature_method"] = signature_method
    if callback := os.environ.get("ETRADE_OAUTH_CALLBACK"):
        settings["callback"] = callback
    if timeout := os.environ.get("ETRADE_TIMEOUT"):
        try:
            settings["timeout"] = float(timeout)
        except ValueError:
            msg = f"ETRADE_TIMEOUT must be a number of seconds, got {timeout!r}"
            raise ValueError(msg) from None

    return settings


@dataclass(frozen=True, slots=True)
class ETradeOAuthConfig:
    """E*Trade OAuth configuration.

    Credentials are immutable once loaded. The consumer secret is kept out of
    ``repr`` so it never ends up in logs or tracebacks.
    """

    consumer_key: str
    consumer_secret: str = field(repr=False)
    sandbox: bool = True
    signature_method: str = "HMAC-SHA1"
    callback: str = OUT_OF_BAND
    timeout: float = 30.0
    realm: str | None = None

    # API URLs
    _sandbox_base_url: str = field(default="https://apisb.etrade.com", repr=False)
    _production_base_url: str = field(default="https://api.etrade.com", repr=False)
    _authorize_url: str = field(default="https://us.etrade.com/e/t/etws/authorize", repr=False)

    def __post_init__(self) -> None:
        if self.signature_method not in SIGNATURE_METHODS:
            msg = (
                f"Unsupported signature method: {self.signature_method}. "
                f"Expected one of: {', '.join(sorted(SIGNATURE_METHODS))}"
            )
            raise ValueError(msg)

    @property
    def environment(self) -> str:
        """Get the environment name."""
        return "sandbox" if self.sandbox else "production"

    @property
    def base_url(self) -> str:
        """Get the appropriate base URL based on sandbox mode."""
        return self._sandbox_base_url if self.sandbox else self._production_base_url

    @property
    def oauth_base_url(self) -> str:
        """Get OAuth base URL."""
        return f"{self.base_url}/oauth"

    @property
    def authorize_url(self) -> str:
        """Browser-facing authorization page (same host for both environments)."""
        return self._authorize_url

    @classmethod
    def from_env(cls, *, sandbox: bool | None = None) -> ETradeOAuthConfig:
        """Create config from environment variables.

        Expected env vars:
        - ETRADE_CONSUMER_KEY
        - ETRADE_CONSUMER_SECRET

        Optional:
        - ETRADE_SANDBOX (default: true)
        - ETRADE_SIGNATURE_METHOD (default: HMAC-SHA1)
        - ETRADE_OAUTH_CALLBACK (default: oob)
        - ETRADE_TIMEOUT (seconds, default: 30)
        """
        consumer_key = os.environ.get("ETRADE_CONSUMER_KEY")
        consumer_secret = os.environ.get("ETRADE_CONSUMER_SECRET")

        if not consumer_key or not consumer_secret:
            msg = (
                "Missing required environment variables: "
                "ETRADE_CONSUMER_KEY and ETRADE_CONSUMER_SECRET"
            )
            raise ValueError(msg)

        if sandbox is None:
            sandbox = sandbox_from_env()

        return cls(
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            sandbox=sandbox,
            **optional_settings_from_env(),
        )

    @classmethod
    def from_file(
        cls, path: Path | None = None, *, sandbox: bool | None = None
    ) -> ETradeOAuthConfig:
        """Load config from JSON file.

        Default path: ~/.config/etrade-oauth/config.json

        Expected format:
        {
            "consumer_key": "...",
            "consumer_secret": "...",
            "signature_method": "HMAC-SHA1",
            "callback": "oob",
            "timeout": 30
        }

        When ``sandbox`` is None, ETRADE_SANDBOX decides (default: true).
        """
        if path is None:
            path = _get_config_dir() / "config.json"

        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)

        with path.open() as f:
            data = json.load(f)

        if sandbox is None:
            sandbox = sandbox_from_env()

        return cls(
            consumer_key=data["consumer_key"],
            consumer_secret=data["consumer_secret"],
            sandbox=sandbox,
            signature_method=data.get("signature_method", "HMAC-SHA1"),
            callback=data.get("callback", OUT_OF_BAND),
            timeout=float(data.get("timeout", 30.0)),
        )

    @classmethod
    def load(cls, *, sandbox: bool | None = None) -> ETradeOAuthConfig:
        """Load config from environment or file (env takes precedence)."""
        try:
            return cls.from_env(sandbox=sandbox)
        except ValueError:
            return cls.from_file(sandbox=sandbox)
