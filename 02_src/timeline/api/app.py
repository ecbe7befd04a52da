"""FastAPI application setup."""

from contextlib import asynccontextmanager
from typing import Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..app import Application, IApplication
from ..config import Settings, load_settings
from .routes import health, search, workflows


# Global application instance
_app: Application | None = None


def get_app(settings: Settings | None = None) -> Application:
    """Get the global application instance."""
    global _app
    if not _app:
        _app = Application(settings or load_settings())
    return _app


def create_fastapi_app(
    application: IApplication | None = None,
    cors_allow_origins: Sequence[str] = ("*",),
) -> FastAPI:
    """Create and configure FastAPI application."""
    application = application or get_app()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        await application.start()
        yield
        await application.stop()

    fastapi_app = FastAPI(
        title="Workflow Timeline API",
        description="Execution timelines reconstructed from workflow history",
        version="0.1.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_allow_origins),
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    fastapi_app.include_router(workflows.create_workflows_router(application))
    fastapi_app.include_router(search.create_search_router(application))
    fastapi_app.include_router(health.create_health_router())

    return fastapi_app
