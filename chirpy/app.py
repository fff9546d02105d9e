import logging
import os
import threading
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from chirpy.core.config import get_settings
from chirpy.core.errors import ChirpyError, StorageFailureError, status_code_for
from chirpy.core.logging_config import configure_logging
from chirpy.repositories.json_storage import JsonStore, get_store
from chirpy.routers import admin as admin_router
from chirpy.routers import auth as auth_router
from chirpy.routers import chirps as chirps_router
from chirpy.routers import users as users_router
from chirpy.routers import webhooks as webhooks_router
from chirpy.services.chirp_service import ChirpService
from chirpy.services.token_service import TokenService
from chirpy.services.user_service import UserService

logger = logging.getLogger(__name__)

STATIC_PREFIX = "/app"


class HitCounter:
    """Thread-safe counter of file-server hits."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def increment(self) -> None:
        with self._lock:
            self._value += 1

    def reset(self) -> None:
        with self._lock:
            self._value = 0


class FileServerMetricsMiddleware(BaseHTTPMiddleware):
    """Count requests served under the static file prefix."""

    def __init__(self, app, *, counter: HitCounter) -> None:
        super().__init__(app)
        self._counter = counter

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        if request.url.path.startswith(STATIC_PREFIX + "/") or request.url.path == STATIC_PREFIX:
            self._counter.increment()
        return response


async def _chirpy_error_handler(request: Request, exc: ChirpyError):
    status = status_code_for(exc)
    if isinstance(exc, StorageFailureError):
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse({"error": "Internal storage error"}, status_code=status)
    return JSONResponse({"error": exc.message}, status_code=status)


def create_app(store: Optional[JsonStore] = None) -> FastAPI:
    """Factory compatible with uvicorn (``--factory``) and the test client."""
    settings = get_settings()
    configure_logging(settings.log_level)
    store = store or get_store()

    app = FastAPI(title="Chirpy API")
    app.state.store = store
    app.state.hits = HitCounter()
    app.state.chirp_service = ChirpService(store)
    app.state.user_service = UserService(store)
    app.state.token_service = TokenService(store)

    app.add_exception_handler(ChirpyError, _chirpy_error_handler)
    app.add_middleware(FileServerMetricsMiddleware, counter=app.state.hits)

    app.include_router(admin_router.router)
    app.include_router(chirps_router.router)
    app.include_router(users_router.router)
    app.include_router(auth_router.router)
    app.include_router(webhooks_router.router)

    if os.path.isdir(settings.static_dir):
        app.mount(STATIC_PREFIX, StaticFiles(directory=settings.static_dir, html=True), name="app")
    else:
        logger.warning("Static directory %s not found; %s is disabled", settings.static_dir, STATIC_PREFIX)
    return app
