"""FastAPI application setup."""

import asyncio
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.app.api.http.app_data import ApplicationDependencies
from src.app.api.http.middleware.limiter import close_rate_limiter
from src.app.api.http.routers import health
from src.app.api.http.routers.auth import router as auth_router
from src.app.api.http.routers.auth import users_router
from src.app.api.http.routers.service import (
    cart,
    category,
    compare,
    coupon,
    flash_sale,
    notification,
    order,
    payment,
    product,
    profile,
    report,
    shipment,
    wishlist,
)
from src.app.api.utils.app_startup import configure_logging
from src.app.core.errors import ApiError
from src.app.core.services import DbSessionService, JwtGeneratorService, JwtVerificationService
from src.app.core.services.database.db_manage import DbManageService
from src.app.core.services.email import EmailClient
from src.app.core.services.payments import PayPalClient, StripeClient
from src.app.core.services.report import cleanup_loop
from src.app.runtime.context import get_config

configure_logging()


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=()")
        # HSTS only in prod
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


def build_dependencies(database_service: DbSessionService | None = None) -> ApplicationDependencies:
    """Create the process-wide service graph stored on ``app.state``."""
    return ApplicationDependencies(
        database_service=database_service or DbSessionService(),
        jwt_generation_service=JwtGeneratorService(),
        jwt_verify_service=JwtVerificationService(),
        paypal_client=PayPalClient(),
        stripe_client=StripeClient(),
        email_client=EmailClient(),
    )


# --- Lifecycle hooks ---
async def startup(app: FastAPI) -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    deps = build_dependencies()
    app.state.app_dependencies = deps
    DbManageService(deps.database_service.engine).create_all()

    app.state.cleanup_task = None
    if config.reports.cleanup_enabled:
        app.state.cleanup_task = asyncio.create_task(
            cleanup_loop(deps.database_service, config.reports.cleanup_interval_seconds)
        )


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    task: asyncio.Task | None = getattr(app.state, "cleanup_task", None)
    if task is not None:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
    await close_rate_limiter()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup(app)
    try:
        yield
    finally:
        await shutdown(app)


app = FastAPI(
    title=get_config().app.name,
    lifespan=lifespan,
    docs_url=None if get_config().app.environment == "production" else "/docs",
    redoc_url=None if get_config().app.environment == "production" else "/redoc",
)

app.add_middleware(SecurityHeadersMiddleware)

__all__ = ["app", "build_dependencies", "startup", "shutdown"]

# --- CORS configuration ---
if get_config().app.environment == "production" and ("*" in get_config().app.cors.origins):
    raise RuntimeError(
        "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().app.cors.origins,
    allow_credentials=get_config().app.cors.allow_credentials,
    allow_methods=get_config().app.cors.allow_methods,
    allow_headers=get_config().app.cors.allow_headers,
)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or request.headers.get(
        "X-Request-ID", "-"
    )


def _error_response(
    request: Request, status_code: int, message: str, **extra
) -> JSONResponse:
    request_id = _request_id(request)
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **extra, "request_id": request_id},
        headers={"X-Request-ID": request_id},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


# --- Exception handlers ---
@app.exception_handler(ApiError)
async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    logger.bind(
        status_code=exc.status_code, error_type=type(exc).__name__, details=exc.details
    ).warning(exc.message)
    extra = {"details": exc.details} if exc.details else {}
    response = _error_response(request, exc.status_code, exc.message, **extra)
    retry_after = exc.details.get("retry_after")
    if retry_after is not None:
        response.headers["Retry-After"] = str(retry_after)
    return response


@app.exception_handler(IntegrityError)
async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.bind(error_type=type(exc).__name__).warning("request.integrity_error")
    return _error_response(request, 409, "Resource already exists or violates a constraint")


@app.exception_handler(RequestValidationError)
async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_response(
        request, 422, "Validation failed", errors=jsonable_errors(exc)
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(request, exc.status_code, str(exc.detail))


# --- Request logging middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    # Correlation / tracing
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
                user_id=getattr(request.state, "uid", None),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except HTTPException as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=exc.status_code,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=exc.status_code,
                content={"success": False, "message": str(exc.detail), "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "message": "Internal Server Error",
                    "request_id": request_id,
                },
                headers={"X-Request-ID": request_id},
            )


# --- Router registration ---
app.include_router(health.router)

_api_prefix = get_config().app.api_prefix
for _router in (
    auth_router,
    users_router,
    profile.router,
    category.router,
    product.router,
    flash_sale.router,
    cart.router,
    order.router,
    coupon.router,
    payment.router,
    shipment.router,
    notification.router,
    report.router,
    wishlist.router,
    compare.router,
):
    app.include_router(_router, prefix=_api_prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # We handle access logging in middleware
    )
