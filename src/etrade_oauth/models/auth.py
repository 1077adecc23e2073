"""OAuth token models."""

from pydantic import BaseModel, Field


class RequestToken(BaseModel):
    """OAuth request token (first leg of the OAuth flow)."""

    token: str = Field(description="Request token value")
    token_secret: str = Field(description="Request token secret", repr=False)

    model_config = {"frozen": True}


class AccessToken(BaseModel):
    """OAuth access token (final leg of the OAuth flow)."""

    token: str = Field(description="Access token value")
    token_secret: str = Field(description="Access token secret", repr=False)

    model_config = {"frozen": True}
