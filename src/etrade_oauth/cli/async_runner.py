"""Async command support for Typer."""

import asyncio
from collections.abc import Callable, Coroutine
from functools import wraps
from typing import Any, TypeVar

import typer

from etrade_oauth.exceptions import ETradeError

T = TypeVar("T")


def async_command(f: Callable[..., Coroutine[Any, Any, T]]) -> Callable[..., T]:
    """Decorator to run async Typer commands.

    Library errors that escape the command are printed and turned into
    exit code 1 instead of a traceback.

    Usage:
        @app.command()
        @async_command
        async def my_command(ctx: typer.Context):
            async with get_client(ctx.obj) as client:
                result = await client.tools.start()
                ...
    """

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        async def run_with_error_handling() -> T:
            try:
                return await f(*args, **kwargs)
            except ETradeError as e:
                from etrade_oauth.cli.formatters import print_error

                print_error(e.message)
                raise typer.Exit(1) from None

        return asyncio.run(run_with_error_handling())

    return wrapper
