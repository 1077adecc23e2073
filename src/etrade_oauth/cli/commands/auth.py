"""Authentication commands."""

import webbrowser

import typer

from etrade_oauth.auth import CallbackVerifierProvider
from etrade_oauth.cli.async_runner import async_command
from etrade_oauth.cli.client_factory import get_client
from etrade_oauth.cli.config import CLIConfig
from etrade_oauth.cli.formatters import (
    console,
    print_error,
    print_info,
    print_result,
    print_success,
    print_warning,
)
from etrade_oauth.client import ETradeOAuthClient
from etrade_oauth.models.results import StartResult

app = typer.Typer(no_args_is_help=True)

SHELL_ACTIONS = ("start", "complete", "status", "renew", "revoke", "quit")


def _prompt_for_verifier(authorization_url: str, *, open_browser: bool) -> str:
    """Show the authorization URL and read the verifier code from the terminal."""
    if open_browser:
        print_info("Opening browser for authorization...")
        webbrowser.open(authorization_url)
        console.print("\n[dim]If browser didn't open, visit:[/dim]")
    else:
        console.print("\nOpen this URL in your browser:")
    console.print(f"[link]{authorization_url}[/link]")

    console.print()
    return typer.prompt("Enter the verification code from E*Trade")


def _require_credentials(ctx: typer.Context) -> CLIConfig:
    config: CLIConfig = ctx.obj
    try:
        config.to_oauth_config()
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1) from None
    return config


async def _run_shell(client: ETradeOAuthClient) -> None:
    """Read actions from the terminal and run them against the session."""
    console.print(f"[dim]Actions: {', '.join(SHELL_ACTIONS)}[/dim]")

    while True:
        action = typer.prompt("oauth", default="status").strip().lower()

        if action == "quit":
            break
        if action == "start":
            result = await client.tools.start()
        elif action == "complete":
            verifier = typer.prompt("Verifier code")
            result = await client.tools.complete(verifier)
        elif action == "status":
            print_result(client.tools.status())
            continue
        elif action == "renew":
            result = await client.tools.renew()
        elif action == "revoke":
            result = await client.tools.revoke()
        else:
            print_warning(f"Unknown action {action!r}. Choose one of: {', '.join(SHELL_ACTIONS)}")
            continue

        print_result(result)

    # Tokens die with the process; offer to kill them on the server too
    if client.is_authenticated and typer.confirm("Revoke access token before exiting?", default=True):
        result = await client.tools.revoke()
        print_result(result)


@app.command("login")
@async_command
async def login(
    ctx: typer.Context,
    no_browser: bool = typer.Option(
        False,
        "--no-browser",
        help="Don't open browser automatically.",
    ),
) -> None:
    """Authenticate with E*Trade OAuth, then open a session shell.

    This command runs the OAuth flow:
    1. Opens browser for E*Trade login
    2. Prompts for verification code
    3. Keeps the access token in memory for the shell session
    """
    config = _require_credentials(ctx)

    async with get_client(config) as client:
        print_info(f"Starting OAuth flow for {config.environment}...")
        started = await client.tools.start()
        request_token = client.session.request_token
        if not isinstance(started, StartResult) or request_token is None:
            print_result(started)
            raise typer.Exit(1)

        provider = CallbackVerifierProvider(
            lambda url: _prompt_for_verifier(url, open_browser=not no_browser)
        )
        verifier = await provider.get_verifier(request_token, started.authorization_url)

        print_info("Exchanging verification code for access token...")
        result = await client.tools.complete(verifier)
        if not result.success:
            print_result(result)
            raise typer.Exit(1)

        print_success(f"Authenticated with {config.environment}.")
        await _run_shell(client)


@app.command("shell")
@async_command
async def shell(ctx: typer.Context) -> None:
    """Open an interactive session to drive the OAuth flow step by step."""
    config = _require_credentials(ctx)

    async with get_client(config) as client:
        print_info(f"OAuth session for {config.environment}")
        await _run_shell(client)
