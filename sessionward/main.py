#!/usr/bin/env python3
"""
Sessionward - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Builds the session manager and starts the expiry sweep
3. Runs a small API exposing the visitor's session

All session logic is in the modules, following black box principles.
"""

import logging
import logging.config as log_config
from contextlib import asynccontextmanager
from typing import Any, Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from sessionward.config.provider import ConfigProvider, EnvConfigProvider
from sessionward.logging_config import get_logging_config
from sessionward.modules.api import (
    ErrorResponse,
    GCResponse,
    HealthResponse,
    SessionResponse,
    SessionValueRequest,
    SessionValueResponse,
)
from sessionward.modules.errors import ProviderError, RandomnessError
from sessionward.modules.gc import SessionCollector
from sessionward.modules.manager import SessionFactory, SessionManager
from sessionward.modules.provider import MISSING, Session
from sessionward.modules.storage import StorageModule

# Configuration provider (centralized config access)
config_provider: ConfigProvider = EnvConfigProvider()
api_config = config_provider.get_api_config()

log_config.dictConfig(get_logging_config(api_config.log_level))
logger = logging.getLogger(__name__)

# Error bodies documented on every endpoint that touches the session backend
SESSION_ERRORS = {
    500: {"model": ErrorResponse, "description": "Session identifier generation failed"},
    503: {"model": ErrorResponse, "description": "Session storage backend unavailable"},
}
BACKEND_ERRORS = {503: SESSION_ERRORS[503]}

# Module instances (initialized at startup)
session_manager: Optional[SessionManager] = None
session_collector: Optional[SessionCollector] = None
storage_module: Optional[StorageModule] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - initialize and cleanup resources.
    """
    global session_manager, session_collector, storage_module

    # Startup
    logger.info("Starting Sessionward API...")

    session_config = config_provider.get_session_config()
    redis_config = config_provider.get_redis_config()

    redis_client = None
    if redis_config.enabled:
        storage_module = StorageModule(redis_config.url)
        redis_client = await storage_module.connect()

    session_manager = SessionFactory.build(config_provider, redis_client)
    session_collector = SessionCollector(session_manager, interval=session_config.gc_interval)
    session_collector.start()

    logger.info("Sessionward API started successfully")

    yield

    # Shutdown
    logger.info("Shutting down Sessionward API...")
    await session_collector.stop()
    if storage_module:
        await storage_module.disconnect()
    logger.info("Sessionward API shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Sessionward API",
    description="Sessionward - Server-side session lifecycle management",
    version="1.0.0",
    lifespan=lifespan,
)


# Dependency injection helpers
def get_manager() -> SessionManager:
    if not session_manager:
        raise HTTPException(503, "Service not initialized")
    return session_manager


async def current_session(
    request: Request,
    response: Response,
    manager: SessionManager = Depends(get_manager),
) -> Session:
    """Resolve the caller's session, issuing a cookie if it is new."""
    return await manager.session_start(request.cookies, response)


# Session Endpoints


@app.get("/session", response_model=SessionResponse, responses=SESSION_ERRORS)
async def get_session(
    session: Session = Depends(current_session),
    manager: SessionManager = Depends(get_manager),
):
    """
    Start or resume the caller's session.

    Returns:
        200: Session identifier (cookie set when the session is new)
        503: Storage backend unavailable
    """
    return SessionResponse(session_id=session.identifier(), provider=manager.provider_name)


@app.get(
    "/session/values/{key}", response_model=SessionValueResponse, responses=SESSION_ERRORS
)
async def get_value(key: str, session: Session = Depends(current_session)):
    """
    Read a value from the caller's session.

    Returns:
        200: Stored value
        404: Key not set
    """
    value = await session.get(key)
    if value is MISSING:
        raise HTTPException(404, f"Key '{key}' not set")
    return SessionValueResponse(session_id=session.identifier(), key=key, value=value)


@app.put(
    "/session/values/{key}", response_model=SessionValueResponse, responses=SESSION_ERRORS
)
async def set_value(
    key: str,
    payload: SessionValueRequest,
    session: Session = Depends(current_session),
):
    """Store a value in the caller's session, replacing any previous value."""
    await session.set(key, payload.value)
    return SessionValueResponse(session_id=session.identifier(), key=key, value=payload.value)


@app.delete("/session/values/{key}", status_code=204, responses=SESSION_ERRORS)
async def delete_value(key: str, session: Session = Depends(current_session)):
    """Remove a value from the caller's session."""
    await session.delete(key)


@app.post("/session/logout", status_code=204, responses=BACKEND_ERRORS)
async def logout(request: Request, manager: SessionManager = Depends(get_manager)):
    """
    Destroy the caller's session and expire the cookie.

    Returns:
        204: Session destroyed (or there was none)
    """
    response = Response(status_code=204)
    await manager.session_destroy(request.cookies, response)
    return response


# Admin Endpoints


@app.post("/admin/gc", response_model=GCResponse, responses=BACKEND_ERRORS)
async def run_gc(manager: SessionManager = Depends(get_manager)):
    """Run one expiry sweep immediately."""
    if session_collector:
        evicted = await session_collector.run_once()
    else:
        evicted = await manager.session_gc()
    return GCResponse(evicted=evicted, max_lifetime=manager.max_lifetime)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if session_manager else "starting",
        provider=session_manager.provider_name if session_manager else None,
        collector_running=bool(session_collector and session_collector.running),
    )


# Error handlers


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError) -> Any:
    """Handle storage backend failures."""
    logger.error(f"Session provider error: {exc}")
    return JSONResponse(status_code=503, content=ErrorResponse(**exc.to_dict()).model_dump())


@app.exception_handler(RandomnessError)
async def randomness_error_handler(request: Request, exc: RandomnessError) -> Any:
    """Handle identifier generation failures."""
    logger.error(f"Session identifier generation failed: {exc}")
    return JSONResponse(status_code=500, content=ErrorResponse(**exc.to_dict()).model_dump())


if __name__ == "__main__":
    # Use dict config for logging, not file path
    uvicorn.run(
        "sessionward.main:app",
        host=api_config.host,
        port=api_config.port,
        log_level=api_config.log_level.lower(),
        reload=api_config.debug,
        log_config=get_logging_config(api_config.log_level),
    )
