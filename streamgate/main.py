"""
Main FastAPI application for the streamgate API.
Serves gated content views, subscription claims, admin routes, health and metrics.
"""
import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from streamgate.core.config import settings
from streamgate.core.errors import (
    AdminRequiredError,
    ClaimInProgressError,
    ContentNotFoundError,
    StorageUnavailableError,
    SubscriptionNotFoundError,
)
from streamgate.core.logging import configure_logging, request_id_var
from streamgate.api.routes import admin, auth, content, health, subscriptions
from streamgate.utils.metrics import http_request_duration_seconds, router as metrics_router

configure_logging()
logger = logging.getLogger("streamgate.http")

app = FastAPI(
    title="Streamgate API",
    description="Obfuscated content links and subscription-gated viewing",
    version="1.0.0",
)

# CORS
origins = settings.cors_origins_list
if not origins:
    origins = ["http://localhost:5173", "http://127.0.0.1:5173", "http://localhost:3000"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    request_id = request.headers.get(settings.request_id_header) or uuid4().hex
    token = request_id_var.set(request_id)
    started = time.perf_counter()
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token)
    latency = time.perf_counter() - started
    response.headers[settings.request_id_header] = request_id
    http_request_duration_seconds.labels(method=request.method, status_code=str(response.status_code)).observe(latency)
    logger.info(
        "http_request",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
            "latency_ms": round(latency * 1000, 2),
        },
    )
    return response


# Error mapping
@app.exception_handler(AdminRequiredError)
async def admin_required_handler(request: Request, exc: AdminRequiredError):
    return JSONResponse(status_code=403, content={"detail": "Administrator capability required"})


@app.exception_handler(SubscriptionNotFoundError)
async def subscription_not_found_handler(request: Request, exc: SubscriptionNotFoundError):
    return JSONResponse(status_code=404, content={"detail": "Subscription not found"})


@app.exception_handler(ContentNotFoundError)
async def content_not_found_handler(request: Request, exc: ContentNotFoundError):
    return JSONResponse(status_code=404, content={"detail": "Content not found"})


@app.exception_handler(ClaimInProgressError)
async def claim_in_progress_handler(request: Request, exc: ClaimInProgressError):
    return JSONResponse(
        status_code=409,
        content={"detail": "Claim with this Idempotency-Key is still being processed"},
        headers={"Retry-After": "1"},
    )


@app.exception_handler(StorageUnavailableError)
@app.exception_handler(OperationalError)
@app.exception_handler(InterfaceError)
async def storage_unavailable_handler(request: Request, exc: Exception):
    logger.error("storage_unavailable", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(
        status_code=503,
        content={"detail": "Storage temporarily unavailable, retry later"},
        headers={"Retry-After": "5"},
    )


# Routers
app.include_router(health.router, tags=["health"])
app.include_router(auth.router)
app.include_router(content.router)
app.include_router(subscriptions.router)
app.include_router(admin.router)
app.include_router(metrics_router)
