"""
Authentication schemas.

This module defines Pydantic models for the resolved caller identity.
"""
from typing import Optional

from pydantic import BaseModel, Field


class TokenData(BaseModel):
    """Claims extracted from a verified access token."""

    user_id: Optional[str] = Field(None, description="Subject of the token")
    token_type: str = Field(default="access", description="Token type claim")


class AuthenticatedUser(BaseModel):
    """Verified identity of the caller."""

    user_id: str = Field(..., min_length=1, description="External user identifier")
