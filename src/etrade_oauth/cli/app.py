"""Main Typer application."""

import logging
import os
from pathlib import Path

import typer
from rich.logging import RichHandler

from etrade_oauth.cli.config import CLIConfig
from etrade_oauth.cli.formatters import error_console

# Create main app
app = typer.Typer(
    name="etrade-oauth",
    help="E*Trade OAuth 1.0a command-line interface.",
    no_args_is_help=True,
)


def _get_config_dir() -> Path:
    """Get XDG-compliant config directory for CLI."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "etrade-oauth"
    return Path.home() / ".config" / "etrade-oauth"


def _configure_logging(verbose: bool) -> None:
    """Send library logs to stderr through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )
    if verbose:
        # httpcore traces every connection event at DEBUG
        logging.getLogger("httpcore").setLevel(logging.INFO)


@app.callback()
def main(
    ctx: typer.Context,
    sandbox: bool = typer.Option(
        True,
        "--sandbox/--production",
        "-s/-p",
        help="Use sandbox (default) or production environment.",
        envvar="ETRADE_SANDBOX",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    config_dir: Path | None = typer.Option(
        None,
        "--config-dir",
        "-c",
        help="Config directory (default: ~/.config/etrade-oauth).",
        envvar="ETRADE_OAUTH_CONFIG_DIR",
    ),
) -> None:
    """E*Trade OAuth 1.0a command-line interface.

    Use --production to authenticate against the live E*Trade API.
    Default is sandbox mode for testing.
    """
    _configure_logging(verbose)
    ctx.obj = CLIConfig(
        sandbox=sandbox,
        verbose=verbose,
        config_dir=config_dir or _get_config_dir(),
    )
