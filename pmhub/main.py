# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging
import os
import time
import uuid
from contextlib import asynccontextmanager

import socketio
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from pmhub.api.api import api_router
from pmhub.api.ws.realtime_namespace import register_realtime_namespace
from pmhub.core.config import settings
from pmhub.core.context import set_request_context
from pmhub.core.exceptions import (
    CustomHTTPException,
    RequestValidationError,
    http_exception_handler,
    python_exception_handler,
    validation_exception_handler,
)
from pmhub.core.logging import setup_logging
from pmhub.core.security import get_user_id_from_request
from pmhub.core.socketio import get_sio
from pmhub.db.base import Base
from pmhub.db.session import engine
from pmhub.models import *  # noqa: F401,F403
from pmhub.services.realtime import (
    ConnectionRegistry,
    init_realtime_emitter,
    shutdown_realtime_emitter,
)
# Initialize logging at module level for use in lifespan
setup_logging()
_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.
    Handles startup and shutdown events.
    """
    logger = _logger

    # ==================== STARTUP ====================
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("✓ Database ready")

    registry = getattr(app.state, "registry", None)
    if registry is not None:
        registry.start()
        init_realtime_emitter(registry)
        logger.info("✓ Realtime channel initialized")
    else:
        logger.warning("No connection registry attached, realtime events disabled")

    logger.info("Application startup completed")

    # ==================== YIELD (app is running) ====================
    yield

    # ==================== SHUTDOWN ====================
    shutdown_realtime_emitter()
    if registry is not None:
        registry.stop()
    logger.info("Application shutdown completed")


def create_app():
    # Toggle API docs/OpenAPI via environment (settings.ENABLE_API_DOCS, default True)
    enable_docs = settings.ENABLE_API_DOCS
    openapi_url = f"{settings.API_PREFIX}/openapi.json" if enable_docs else None
    docs_url = f"{settings.API_PREFIX}/docs" if enable_docs else None

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Project Management Backend API",
        version=settings.VERSION,
        openapi_url=openapi_url,
        docs_url=docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )
    logger = _logger

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        # Skip logging for health check/probe requests (root path)
        if request.url.path == "/":
            return await call_next(request)

        # First 8 characters of a UUID as request ID
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        start_time = time.time()

        user_id = get_user_id_from_request(request)
        client_ip = request.client.host if request.client else "Unknown"
        set_request_context(request_id)

        logger.info(
            f"request : {request.method} {request.url.path} {request.query_params} {request_id} {client_ip} [{user_id}]"
        )

        response = await call_next(request)

        process_time = (time.time() - start_time) * 1000
        logger.info(
            f"response: {request.method} {request.url.path} {response.status_code} {process_time:.2f}ms [{user_id}]"
        )
        response.headers["X-Request-ID"] = request_id
        return response

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(CustomHTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, python_exception_handler)

    # Include API routes
    app.include_router(api_router, prefix=settings.API_PREFIX)

    # Uploaded files, one URL per storage key
    os.makedirs(settings.STORAGE_DIR, exist_ok=True)
    app.mount(
        settings.STORAGE_URL_PREFIX,
        StaticFiles(directory=settings.STORAGE_DIR),
        name="storage",
    )

    @app.get("/")
    async def root():
        """
        Liveness probe
        """
        return {
            "status": "ok",
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
        }

    return app


# Create FastAPI app
_fastapi_app = create_app()


def create_socketio_asgi_app(fastapi_app: FastAPI):
    """
    Create combined ASGI app with Socket.IO mounted.

    Socket.IO traffic goes to the Socket.IO server, everything else
    (including lifespan events) to FastAPI. The connection registry is
    attached to the FastAPI app state so the lifespan can start and stop it.
    """
    sio = get_sio()
    registry = ConnectionRegistry(sio)
    register_realtime_namespace(sio, registry)
    fastapi_app.state.registry = registry
    _logger.info("Realtime namespace registered during ASGI app creation")

    return socketio.ASGIApp(
        sio,
        other_asgi_app=fastapi_app,
        socketio_path=settings.SOCKETIO_PATH,
    )


# Combined ASGI app (Socket.IO + FastAPI)
app = create_socketio_asgi_app(_fastapi_app)


def run():
    """Console entry point"""
    import uvicorn

    uvicorn.run(
        "pmhub.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
