"""Register and login routes; translate service results into HTTP responses."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import JSONResponse

from credstore.core.errors import (
    Authenticated,
    ConflictError,
    Created,
    InvalidCredentials,
    ValidationError,
)
from credstore.schemas.auth import ErrorResponse, LoginRequest, MessageResponse
from credstore.services.accounts import AccountService

router = APIRouter()

INTERNAL_ERROR_MESSAGE = "Internal server error"


def get_account_service(request: Request) -> AccountService:
    """Dependency: the AccountService owned by this app instance."""
    return request.app.state.account_service


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=MessageResponse(message=message).model_dump(),
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def register(
    service: Annotated[AccountService, Depends(get_account_service)],
    body: Annotated[Any, Body()] = None,
) -> JSONResponse:
    """
    Register a new account from {username, email, type, password}.
    201 on success, 400 for invalid fields, 409 if username or email is taken.
    """
    result = service.register(body)
    if isinstance(result, Created):
        return _message(status.HTTP_201_CREATED, "User created successfully")
    if isinstance(result, ValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, result.message)
    if isinstance(result, ConflictError):
        return _error(status.HTTP_409_CONFLICT, result.message)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


@router.post(
    "/login",
    response_model=MessageResponse,
    responses={401: {"model": ErrorResponse}},
)
def login(
    service: Annotated[AccountService, Depends(get_account_service)],
    body: LoginRequest | None = None,
) -> JSONResponse:
    """Verify username and password. 200 on match, 401 otherwise."""
    if body is None:
        body = LoginRequest()
    result = service.login(body.username, body.password)
    if isinstance(result, Authenticated):
        return _message(status.HTTP_200_OK, "Login successful")
    if isinstance(result, InvalidCredentials):
        return _error(status.HTTP_401_UNAUTHORIZED, result.message)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
