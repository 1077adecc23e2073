"""E*Trade OAuth CLI - interactive authentication from a terminal."""

from etrade_oauth.cli.app import app

# Import command modules to register them with the app
from etrade_oauth.cli.commands import auth

# Register sub-apps
app.add_typer(auth.app, name="auth", help="Authentication commands.")


def main() -> None:
    """Entry point for the CLI."""
    app()


__all__ = ["app", "main"]
