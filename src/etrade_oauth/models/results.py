"""Structured results returned by the OAuth tool operations.

Every tool operation returns one of these instead of raising, so a calling
agent can inspect failures as data. ``to_json`` renders the camelCase payload
the tool layer hands back over its request/response channel.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ToolResult(BaseModel):
    """Tagged success/error result of a tool operation."""

    success: bool
    message: str | None = None
    error: str | None = None

    model_config = {"populate_by_name": True}

    @classmethod
    def ok(cls, message: str) -> ToolResult:
        return cls(success=True, message=message)

    @classmethod
    def failure(cls, error: str) -> ToolResult:
        return cls(success=False, error=error)

    def to_json(self) -> str:
        """Serialize as indented JSON, omitting unset fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


class StartResult(ToolResult):
    """Result of starting the OAuth flow."""

    success: bool = True
    authorization_url: str = Field(alias="authorizationUrl")
    instructions: str


class StatusResult(BaseModel):
    """Current authentication status of a session."""

    is_authenticated: bool = Field(alias="isAuthenticated")
    has_pending_authorization: bool = Field(alias="hasPendingAuthorization")
    authorization_url: str | None = Field(default=None, alias="authorizationUrl")
    environment: str
    state: str = "idle"
    token_expires_at: datetime | None = Field(default=None, alias="tokenExpiresAt")

    model_config = {"populate_by_name": True}

    def to_json(self) -> str:
        """Serialize as indented JSON; null fields are kept."""
        return self.model_dump_json(by_alias=True, indent=2)
