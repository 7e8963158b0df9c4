"""Health check endpoint with the in-memory account count."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from credstore.api.v1.auth import get_account_service
from credstore.schemas.health import HealthResponse
from credstore.services.accounts import AccountService

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    request: Request,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> HealthResponse:
    """
    Return service health status and number of registered accounts.
    Used by load balancers and monitoring.
    """
    return HealthResponse(
        status="ok",
        environment=request.app.state.settings.APP_ENV,
        accounts=len(service.store),
    )
