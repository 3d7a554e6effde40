from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from expense_tracker.config import load_config
from expense_tracker.core.models import EXPENSE, INCOME
from expense_tracker.errors import ExpenseTrackerError
from webapp.routes import auth_router, build_transaction_router, dashboard_router
from webapp.schemas import validation_message

logger = logging.getLogger(__name__)


async def _handle_app_error(request: Request, exc: ExpenseTrackerError) -> JSONResponse:
    logger.debug("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": validation_message(exc.errors())})


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Server error"})


def create_app(config: Dict[str, object] | None = None) -> FastAPI:
    """Build the API. Without ``config`` it is loaded from the environment.

    ``EXPENSE_TRACKER_CONFIG`` may point at a YAML config file. Usable as a
    uvicorn factory: ``uvicorn webapp.main:create_app --factory``.
    """
    if config is None:
        config = load_config(os.environ.get("EXPENSE_TRACKER_CONFIG"))
    if not config.get("jwt_secret"):
        raise RuntimeError("JWT secret is not configured; set JWT_SECRET")

    app = FastAPI(title="Expense Tracker API")
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config["cors_origins"]),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    upload_dir = Path(config["upload_dir"])
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=upload_dir), name="uploads")

    prefix = str(config["api_prefix"]).rstrip("/")
    app.include_router(auth_router, prefix=prefix)
    app.include_router(dashboard_router, prefix=prefix)
    app.include_router(build_transaction_router(INCOME), prefix=prefix)
    app.include_router(build_transaction_router(EXPENSE), prefix=prefix)

    app.add_exception_handler(ExpenseTrackerError, _handle_app_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)
    return app
