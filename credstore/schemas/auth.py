"""Request/response schemas for auth endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """
    Credentials for login. Fields are loosely typed: anything that is not a
    matching username/password pair is answered with 401, never 422.
    """

    username: Any = Field(default=None, description="Username")
    password: Any = Field(default=None, description="Password")


class MessageResponse(BaseModel):
    """Success body for register and login."""

    message: str = Field(..., description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """Error body for every failed auth request."""

    error: str = Field(..., description="Reason the request failed")
