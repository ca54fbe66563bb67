"""Main FastAPI application: trigger endpoints for the push dispatch core."""
import logging
import os
import time
from contextlib import asynccontextmanager

from chatpush.settings import settings

# Pydantic .env does not set os.environ; sync credential vars so firebase_admin/google.auth see them
if settings.google_application_credentials and not os.environ.get("GOOGLE_APPLICATION_CREDENTIALS"):
    os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = settings.google_application_credentials
if settings.google_application_credentials_json and not os.environ.get("GOOGLE_APPLICATION_CREDENTIALS_JSON"):
    os.environ["GOOGLE_APPLICATION_CREDENTIALS_JSON"] = settings.google_application_credentials_json

from chatpush.gcp_credentials import setup_application_default_credentials

setup_application_default_credentials()

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from chatpush.api.triggers import router as triggers_router
from chatpush.domain.common.errors import InvalidChangeEventError

# Configure logging
logging.basicConfig(
    level=getattr(logging, str(settings.log_level).upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    if settings.push_enabled:
        logger.info(
            "Push enabled (dry_run=%s, batch_size=%s)",
            settings.push_dry_run,
            settings.multicast_batch_size,
        )
    else:
        logger.warning("Push disabled: sends will be reported as failures until PUSH_ENABLED=true")
    yield
    logger.info("Shutting down")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each trigger call with status and latency."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.info(
            "%s %s - %s (%.3fs)",
            request.method,
            request.url.path,
            response.status_code,
            process_time,
        )
        return response


app.add_middleware(RequestLoggingMiddleware)

app.include_router(triggers_router, prefix=settings.api_v1_prefix)


@app.exception_handler(InvalidChangeEventError)
async def invalid_change_event_handler(request: Request, exc: InvalidChangeEventError):
    """Trigger body that is not a change document: 422, nothing dispatched."""
    logger.error("Invalid change event on %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=422, content={"detail": exc.message})


@app.get("/health")
@app.get(f"{settings.api_v1_prefix}/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": settings.app_version}


@app.get("/ready")
async def readiness():
    """Readiness endpoint: run all checks and return 200 if ready, 503 otherwise."""
    from chatpush.readiness import run_all_checks, is_ready
    checks = run_all_checks()
    ready, summary = is_ready(checks)
    if ready:
        return {"ready": True, "checks": summary}
    return JSONResponse(
        status_code=503,
        content={"ready": False, "checks": summary},
    )
