import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pythonjsonlogger import jsonlogger
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import models
from .config import Settings
from .crud import users as crud_users
from .database import Database
from .routers import (
    addresses,
    auth,
    cart,
    categories,
    ebooks,
    invoices,
    orders,
    payments,
    reports,
    seller_requests,
    users,
)

logger = logging.getLogger(__name__)

ROUTERS = (
    auth.router,
    users.router,
    categories.router,
    ebooks.router,
    cart.router,
    addresses.router,
    orders.router,
    payments.router,
    invoices.router,
    reports.router,
    seller_requests.router,
)


def configure_logging(level: str = "INFO"):
    # JSON logging setup
    root = logging.getLogger()
    root.setLevel(level)
    if any(isinstance(handler.formatter, jsonlogger.JsonFormatter) for handler in root.handlers):
        return
    log_handler = logging.StreamHandler(sys.stdout)
    log_handler.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    root.addHandler(log_handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database: Database = app.state.database
    settings: Settings = app.state.settings
    database.create_all()
    db = database.session()
    try:
        models.seed_lookups(db)
        crud_users.ensure_admin(db, settings.admin_email, settings.admin_password, settings.admin_name)
    finally:
        db.close()
    logger.info("Database ready")
    yield
    database.dispose()


def _error(status_code: int, message: str, headers=None, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message, **extra}, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        message = error.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": ".".join(location), "message": message})
    return _error(400, "Validation failed", errors=errors)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", extra={"path": request.url.path, "method": request.method})
    return _error(500, "Internal server error")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Ebook Store API", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = Database(settings.database_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/")
    def root():
        """Health check endpoint."""
        return {"success": True, "message": "Welcome to the Ebook Store API"}

    for router in ROUTERS:
        app.include_router(router)

    return app
