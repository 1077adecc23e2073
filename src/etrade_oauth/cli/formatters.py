"""Output formatters for CLI commands."""

from rich.console import Console

from etrade_oauth.models.results import StatusResult, ToolResult

console = Console()
error_console = Console(stderr=True)


def print_result(result: ToolResult | StatusResult) -> None:
    """Print a tool result as the JSON an agent would receive."""
    console.print_json(result.to_json())


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]i[/blue] {message}")
