"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from glowmate.api import auth, health, ingredients, premium, products, reviews, users, waitlist
from glowmate.config import Settings, get_settings
from glowmate.errors import AppError, InternalError, ValidationError

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info(f"GlowMate API starting ({settings.environment})")
    yield


app = FastAPI(
    title="GlowMate API",
    description="Skincare product tracking and personalization backend",
    version="0.1.0",
    lifespan=lifespan,
)


def cors_origins(settings: Settings) -> list[str]:
    """Origins allowed to call the API from a browser."""
    if settings.is_development:
        return ["*"]
    return settings.cors_origins


# Mobile and web clients send the bearer token in a header, not a cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(settings),
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Register routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(waitlist.router)
app.include_router(users.router)
app.include_router(premium.router)
app.include_router(products.router)
app.include_router(reviews.router)
app.include_router(ingredients.router)


def _describe_validation_error(exc: RequestValidationError) -> str:
    """Describe the first violated constraint as ``<field>: <reason>``."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query")]
    field = ".".join(location) or "body"
    return f"{field}: {first.get('msg', 'invalid value')}"


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    error = ValidationError(details=_describe_validation_error(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": code, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Log unexpected exceptions and hide their details from the client."""
    logger.exception(
        "Unhandled exception: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content=InternalError().to_dict())
