"""
Coil Tracker — Vaporizer Coil Wear Backend
==========================================

FastAPI entry point.
Start with:  uvicorn main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import default_store, router, settings
from app.core.errors import StorageError, ValidationFailed
from app.tracker.inputs import first_error
from app.tracker.operations import seed_if_empty

# ── Logging ────────────────────────────────────────────────────────
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.seed:
        seed_if_empty(default_store)
    yield


# ── App ────────────────────────────────────────────────────────────
app = FastAPI(
    title="Coil Tracker",
    description=(
        "Tracks a replaceable vaporizer coil: daily puffs, refills and "
        "measured resistance, with derived wear, remaining liquid and "
        "remaining-life estimates."
    ),
    version="0.1.0",
    lifespan=lifespan,
)

# CORS — allow the dashboard frontend to connect
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Error mapping ──────────────────────────────────────────────────

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = first_error(exc.errors())
    logger.info("Rejected %s %s: %s", request.method, request.url.path, error)
    return JSONResponse(status_code=400, content=error.to_dict())


@app.exception_handler(ValidationFailed)
async def validation_failed_handler(request: Request, exc: ValidationFailed):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content=exc.to_dict())


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(
        "Storage failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=500, content={"message": "Could not save tracker data."}
    )


# Mount all routes
app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    return {
        "name": "Coil Tracker",
        "version": "0.1.0",
        "status": "running",
        "docs": "/docs",
    }
