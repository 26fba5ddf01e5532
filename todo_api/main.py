# todo_api/main.py

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from todo_api.config import Settings, get_settings
from todo_api.database import Database
from todo_api.errors import NotFoundError, StorageError, ValidationError
from todo_api.task.task_router import router as task_router

logger = logging.getLogger("todo_api.http")

# ---------------- CORS ----------------
DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def _cors_origins(settings: Settings) -> list[str]:
    origins = list(DEFAULT_ORIGINS)
    if settings.frontend_origin:
        origins.append(settings.frontend_origin)
    return origins


def _request_error_messages(exc: RequestValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        # drop the "body"/"query" location prefix
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        where = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        messages.append(f"{where}: {msg}" if where else msg)
    return messages


# ---------------- ERROR HANDLERS ----------------
def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": "Validation failed", "details": exc.errors})

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Validation failed", "details": _request_error_messages(exc)},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_error_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": exc.message})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("storage_error", extra={"path": request.url.path}, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            # no route matched
            return JSONResponse(status_code=404, content={"error": "Route not found", "path": request.url.path})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


# ---------------- ROUTES ----------------
def _register_routes(app: FastAPI, prefix: str) -> None:
    @app.get(f"{prefix}/health")
    def health():
        return {"status": "ok", "message": "TODO API is running"}

    app.include_router(task_router, prefix=prefix)

    # Legacy /items endpoints, kept so old clients learn the new path
    moved = {
        "message": f"This endpoint has been moved. Please use {prefix}/tasks",
        "redirectTo": f"{prefix}/tasks",
    }

    @app.get(f"{prefix}/items", status_code=301)
    def legacy_list_items():
        return JSONResponse(status_code=301, content=moved)

    @app.post(f"{prefix}/items", status_code=301)
    def legacy_create_item():
        return JSONResponse(status_code=301, content=moved)

    @app.delete(f"{prefix}/items/{{item_id}}", status_code=301)
    def legacy_delete_item(item_id: str):
        return JSONResponse(status_code=301, content=moved)


def create_app(database: Optional[Database] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API around a storage context.

    The database is opened when the app starts and closed at shutdown.
    Tests pass their own in-memory Database.
    """
    settings = settings or get_settings()
    database = database or Database(settings.database_url, echo=settings.sql_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.open()
        try:
            yield
        finally:
            database.close()

    app = FastAPI(title="TODO API", lifespan=lifespan)
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(settings),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - start) * 1000, 1)
        logger.info(
            "%s %s %s %sms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            extra={"status_code": response.status_code, "elapsed_ms": elapsed_ms},
        )
        return response

    _register_error_handlers(app)
    _register_routes(app, settings.api_prefix)
    return app


app = create_app()
