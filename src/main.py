"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.rm_common.errors import AppError
from src.rm_common.response import error_response
from src.rm_deploy.api.router import router as chain_router
from src.rm_deploy.application.runtime import get_runtime
from src.rm_gateway.middleware.request_log import RequestLogMiddleware
from src.rm_marketplace.api.router import router as marketplace_router
from src.rm_parameters.api.router import router as parameters_router
from src.rm_reserves.api.router import router as reserves_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: deploy the protocol on the configured network."""
    get_runtime()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, request)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(parameters_router, prefix="/api/v1")
app.include_router(marketplace_router, prefix="/api/v1")
app.include_router(reserves_router, prefix="/api/v1")
app.include_router(chain_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
