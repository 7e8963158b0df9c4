"""Pydantic request/response schemas."""

from credstore.schemas.auth import ErrorResponse, LoginRequest, MessageResponse
from credstore.schemas.health import HealthResponse

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
]
