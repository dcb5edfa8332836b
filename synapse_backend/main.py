"""
Synapse Backend - FastAPI Application Entry Point
"""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import asynccontextmanager

import aiohttp
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .routers import agent, chat, config, edit, inspector, workspace
from .services.container import AppServices
from .services.errors import (
    ConfigurationError,
    PatchConflictError,
    PathAccessError,
    ProtocolError,
    ProviderError,
)

logger = logging.getLogger(__name__)

ALLOWED_ORIGINS_ENV = "SYNAPSE_ALLOWED_ORIGINS"
# Vite dev server of the desktop shell
DEFAULT_ALLOWED_ORIGINS = ["http://localhost:5173", "http://127.0.0.1:5173"]


def configure_logging() -> None:
    level = os.environ.get("SYNAPSE_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown logic"""
    logger.info("Starting Synapse backend...")
    if getattr(app.state, "services", None) is None:
        app.state.services = AppServices()
    yield
    logger.info("Shutting down Synapse backend...")


def allowed_origins() -> list[str]:
    """Comma-separated origins from the environment, or the shell defaults"""
    raw = os.environ.get(ALLOWED_ORIGINS_ENV, "")
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or list(DEFAULT_ALLOWED_ORIGINS)


def create_app(services: AppServices | None = None, origins: list[str] | None = None) -> FastAPI:
    app = FastAPI(
        title="Synapse Backend",
        description="AI provider gateway, quick-edit and element locator for the Synapse editor",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.services = services

    # Only the shell may call in; the previewed page must not reach the filesystem
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins if origins is not None else allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(chat.router, prefix="/api/chat", tags=["chat"])
    app.include_router(edit.router, prefix="/api/edit", tags=["edit"])
    app.include_router(agent.router, prefix="/api/agent", tags=["agent"])
    app.include_router(inspector.router, prefix="/api/inspector", tags=["inspector"])
    app.include_router(workspace.router, prefix="/api/workspace", tags=["workspace"])
    app.include_router(config.router, prefix="/api/config", tags=["config"])

    @app.exception_handler(ProviderError)
    async def provider_error_handler(request: Request, exc: ProviderError):
        # Raw backend text is passed through unchanged
        return JSONResponse(
            status_code=502,
            content={"detail": str(exc), "provider": exc.provider, "status": exc.status, "body": exc.body},
        )

    @app.exception_handler(ProtocolError)
    async def protocol_error_handler(request: Request, exc: ProtocolError):
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(aiohttp.ClientError)
    async def network_error_handler(request: Request, exc: aiohttp.ClientError):
        return JSONResponse(status_code=502, content={"detail": f"Network error: {exc}"})

    @app.exception_handler(asyncio.TimeoutError)
    async def timeout_handler(request: Request, exc: asyncio.TimeoutError):
        return JSONResponse(status_code=504, content={"detail": "Provider request timed out"})

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(PatchConflictError)
    async def patch_conflict_handler(request: Request, exc: PatchConflictError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(PathAccessError)
    async def path_access_handler(request: Request, exc: PathAccessError):
        return JSONResponse(status_code=403, content={"detail": str(exc)})

    @app.exception_handler(FileNotFoundError)
    async def not_found_handler(request: Request, exc: FileNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(request: Request, exc: NotADirectoryError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(OSError)
    async def os_error_handler(request: Request, exc: OSError):
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": "synapse-backend"}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    configure_logging()
    uvicorn.run(
        app,
        host=os.environ.get("SYNAPSE_HOST", "127.0.0.1"),
        port=int(os.environ.get("SYNAPSE_PORT", "8000")),
    )


if __name__ == "__main__":
    run()
