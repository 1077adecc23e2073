"""Pydantic models for OAuth tokens and tool results."""

from etrade_oauth.models.auth import AccessToken, RequestToken
from etrade_oauth.models.results import StartResult, StatusResult, ToolResult

__all__ = [
    "AccessToken",
    "RequestToken",
    "StartResult",
    "StatusResult",
    "ToolResult",
]
