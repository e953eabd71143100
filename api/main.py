from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from demonlist.config import settings, validate_settings
from demonlist.db import close_db
from demonlist.errors import DemonlistError, StorageFailure
from demonlist.logging_config import configure_logging
from demonlist.middleware.logging import AccessLogMiddleware
from demonlist.routers import listings, records

configure_logging(service="demonlist-api", environment=settings.environment, log_level=settings.log_level)
validate_settings(settings)

logger = logging.getLogger("demonlist")


@asynccontextmanager
async def lifespan(_: FastAPI):
    yield
    await close_db()


app = FastAPI(title="demonlist", version="1.0.0", lifespan=lifespan)

app.add_middleware(AccessLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Link", "ETag", "X-Submission-Count"],
)


@app.exception_handler(DemonlistError)
async def demonlist_error_handler(request: Request, exc: DemonlistError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", extra={"path": request.url.path, "error_code": exc.error_code})
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("storage_failure", extra={"path": request.url.path})
    failure = StorageFailure()
    return JSONResponse(status_code=failure.status_code, content=failure.to_dict())


app.include_router(records.router)
app.include_router(listings.router)


@app.get("/healthz")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
