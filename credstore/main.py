"""FastAPI application entrypoint. No business logic; only wiring and error handlers."""

from dotenv import load_dotenv

load_dotenv()

import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from credstore import __version__
from credstore.api.v1 import router as v1_router
from credstore.core.config import Settings, get_settings
from credstore.core.logging import configure_logging
from credstore.core.security import PasswordHasher
from credstore.services.accounts import AccountService

logger = logging.getLogger(__name__)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies (bad JSON, wrong shape) are client errors: 400."""
    errors = exc.errors()
    message = str(errors[0].get("msg", "Invalid request body")) if errors else "Invalid request body"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def create_app(
    service: AccountService | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Build the app around one AccountService. Tests pass their own service to
    get an isolated identity store.
    """
    settings = settings or get_settings()
    if service is None:
        service = AccountService(hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS))

    app = FastAPI(
        title="credstore API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.DEBUG,
    )
    app.state.settings = settings
    app.state.account_service = service

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "credstore API"}

    return app


app = create_app()


def run() -> int:
    """Start the HTTP server (``python -m credstore``)."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    logger.info(
        "Starting credstore on http://%s:%s (env=%s)",
        settings.HOST,
        settings.PORT,
        settings.APP_ENV,
    )
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0
