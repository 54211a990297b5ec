"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from jewelry_api.api.v1 import health
from jewelry_api.api.v1 import router as v1_router
from jewelry_api.core.config import settings
from jewelry_api.core.errors import AppError
from jewelry_api.core.logging_config import configure_logging
from jewelry_api.core.middleware import BodySizeLimitMiddleware, SecurityHeadersMiddleware
from jewelry_api.core.uploads import get_upload_store
from jewelry_api.schemas.common import ErrorResponse

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # Upload directories are created once per process, not per request.
    get_upload_store().ensure_dirs()
    logger.info("Server starting: env=%s", settings.APP_ENV)
    yield


app = FastAPI(
    title="Jewelry Catalog API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Added first so it sits inside CORS; 413 replies still carry CORS headers.
app.add_middleware(
    BodySizeLimitMiddleware,
    max_body_size=settings.MAX_FILE_SIZE + settings.MULTIPART_OVERHEAD_BYTES,
    path_prefixes=[f"{settings.API_PREFIX}/products", f"{settings.API_PREFIX}/designs"],
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SecurityHeadersMiddleware)


def _error_response(
    status_code: int,
    code: str,
    message: str,
    errors: list | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(error=code, message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc
        )
        return _error_response(500, "internal_error", "Internal server error")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return _error_response(exc.status_code, exc.code, exc.message, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = "not_found" if exc.status_code == 404 else "http_error"
    return _error_response(exc.status_code, code, str(exc.detail), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = jsonable_encoder(exc.errors(), exclude={"input", "ctx", "url"})
    return _error_response(400, "validation_failed", "Validation failed", errors=errors)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(500, "internal_error", "Internal server error")


app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(v1_router, prefix=settings.API_PREFIX)
app.mount(
    "/uploads",
    StaticFiles(directory=get_upload_store().root, check_dir=False),
    name="uploads",
)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Jewelry Catalog API"}
