"""CLI configuration with XDG-compliant paths and environment variable overrides."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from etrade_oauth.config import ETradeOAuthConfig, optional_settings_from_env


def _default_config_dir() -> Path:
    """Get XDG-compliant config directory for credentials.

    Uses XDG_CONFIG_HOME if set, otherwise ~/.config/etrade-oauth.
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "etrade-oauth"
    return Path.home() / ".config" / "etrade-oauth"


@dataclass
class CLIConfig:
    """Configuration passed through Typer context.

    Attributes:
        sandbox: Whether to use sandbox (True) or production (False) environment.
        verbose: Enable verbose output.
        config_dir: Directory for configuration files (credentials).

    Directory Structure:
        config_dir/
        ├── sandbox.json        # Sandbox credentials
        └── production.json     # Production credentials

    Tokens are never written here; they live only as long as the CLI process.
    """

    sandbox: bool = True
    verbose: bool = False
    config_dir: Path = field(default_factory=_default_config_dir)

    @property
    def environment(self) -> str:
        """Get the environment name."""
        return "sandbox" if self.sandbox else "production"

    @property
    def credentials_path(self) -> Path:
        """Get the credentials file path for current environment."""
        return self.config_dir / f"{self.environment}.json"

    def load_credentials(self) -> tuple[str, str]:
        """Load credentials from config file with environment variable overrides.

        Loading priority:
        1. Load from environment-specific config file (sandbox.json or production.json)
        2. Override individual values with environment variables if set

        Environment variables:
        - ETRADE_CONSUMER_KEY: Overrides consumer_key from file
        - ETRADE_CONSUMER_SECRET: Overrides consumer_secret from file

        Returns:
            Tuple of (consumer_key, consumer_secret)

        Raises:
            ValueError: If credentials cannot be determined from file or env vars
        """
        consumer_key: str | None = None
        consumer_secret: str | None = None

        if self.credentials_path.exists():
            try:
                with self.credentials_path.open() as f:
                    data = json.load(f)
                consumer_key = data.get("consumer_key")
                consumer_secret = data.get("consumer_secret")
            except (json.JSONDecodeError, OSError) as e:
                if self.verbose:
                    import sys

                    print(f"Warning: Failed to read {self.credentials_path}: {e}", file=sys.stderr)

        if env_key := os.environ.get("ETRADE_CONSUMER_KEY"):
            consumer_key = env_key
        if env_secret := os.environ.get("ETRADE_CONSUMER_SECRET"):
            consumer_secret = env_secret

        if not consumer_key or not consumer_secret:
            missing = []
            if not consumer_key:
                missing.append("consumer_key")
            if not consumer_secret:
                missing.append("consumer_secret")

            msg = (
                f"Missing credentials: {', '.join(missing)}. "
                f"Set via environment variables (ETRADE_CONSUMER_KEY, ETRADE_CONSUMER_SECRET) "
                f"or create config file at {self.credentials_path}"
            )
            raise ValueError(msg)

        return consumer_key, consumer_secret

    def to_oauth_config(self) -> ETradeOAuthConfig:
        """Build the library config for the selected environment.

        Raises:
            ValueError: If credentials are missing, ETRADE_TIMEOUT is not a number,
                or the signature method is unsupported
        """
        consumer_key, consumer_secret = self.load_credentials()
        return ETradeOAuthConfig(
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            sandbox=self.sandbox,
            **optional_settings_from_env(),
        )
