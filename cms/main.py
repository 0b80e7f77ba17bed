"""FastAPI application entrypoint. No business logic; only wiring, error rendering and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cms.api.v1 import router as v1_router
from cms.core.config import get_settings
from cms.core.errors import CMSError, FieldValidationError, InternalError
from cms.core.logging_config import configure_logging

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="CMS API",
    version="0.1.0",
    docs_url="/docs" if settings.APP_ENV == "dev" else None,
    redoc_url="/redoc" if settings.APP_ENV == "dev" else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CMSError)
def handle_cms_error(request: Request, exc: CMSError) -> JSONResponse:
    """Render service errors as {"error": ...} or, for field validation, {"errors": [...]}."""
    if isinstance(exc, FieldValidationError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"errors": [{"field": e.field, "message": e.message} for e in exc.errors]},
        )
    if isinstance(exc, InternalError):
        logger.error(
            "Internal error on %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc.cause,
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Log anything unhandled with its traceback; the client only gets a generic message."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error."},
    )


app.include_router(v1_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "CMS API"}
