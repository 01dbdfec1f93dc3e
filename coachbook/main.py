import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from coachbook.api.routes import availability, bookings, contact
from coachbook.core.config import settings, _ENV_FILE
from coachbook.core.errors import (
    BookingSiteError,
    InvalidBookingInput,
    StoreConfigurationError,
    StoreUnavailableError,
)
from coachbook.core.store import AirtableStore

if os.getenv("ENV") != "production":
    logging.basicConfig(level=logging.DEBUG)
else:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}',
    )
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Loading .env from: %s (exists: %s)", _ENV_FILE, _ENV_FILE.exists())
    if settings.store_configured:
        logger.info("Airtable: configured (base %s, schema %s)", settings.airtable_base_id, settings.airtable_booking_schema)
    else:
        logger.warning(
            "Airtable: NOT configured. Set AIRTABLE_API_TOKEN and AIRTABLE_BASE_ID in %s",
            _ENV_FILE,
        )
    if not settings.email_enabled:
        logger.info("Email: SMTP not configured, confirmations will not be sent")
    app.state.store = AirtableStore(settings)
    yield
    await app.state.store.aclose()


app = FastAPI(
    title="Coachbook API",
    description="Consultation booking backend: availability, bookings, client intake, contact",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(availability.router, prefix="/api")
app.include_router(bookings.router, prefix="/api")
app.include_router(contact.router, prefix="/api")


def _cors_headers(origin: str | None) -> dict[str, str]:
    """Add CORS headers to error responses so the browser doesn't block them."""
    headers = {
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }
    if origin and origin in settings.cors_origins_list:
        headers["Access-Control-Allow-Origin"] = origin
    elif settings.cors_origins_list:
        headers["Access-Control-Allow-Origin"] = settings.cors_origins_list[0]
    return headers


_ERROR_STATUS: dict[type[BookingSiteError], int] = {
    InvalidBookingInput: 400,
    StoreUnavailableError: 502,
    StoreConfigurationError: 503,
}


@app.exception_handler(BookingSiteError)
async def booking_error_handler(request: Request, exc: BookingSiteError) -> JSONResponse:
    """Map service errors to a status and a visitor-safe message."""
    status_code = _ERROR_STATUS.get(type(exc), 500)
    if status_code >= 500:
        logger.error("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc)
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.public_message},
        headers=_cors_headers(request.headers.get("origin")),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers={**(exc.headers or {}), **_cors_headers(request.headers.get("origin"))},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Generic 500 with CORS so the browser can read it; details only in the log."""
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"error": BookingSiteError.public_message},
        headers=_cors_headers(request.headers.get("origin")),
    )


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "store_configured": settings.store_configured}
