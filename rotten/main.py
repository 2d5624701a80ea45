"""Rotten Company FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rotten.api.company_requests import router as company_requests_router
from rotten.api.entities import router as entities_router
from rotten.api.evidence import router as evidence_router
from rotten.api.health import router as health_router
from rotten.api.moderation import router as moderation_router
from rotten.api.notifications import router as notifications_router
from rotten.api.scores import router as scores_router
from rotten.config import Settings, settings as default_settings
from rotten.database import build_engine, build_session_maker
from rotten.notifications.mailer import Mailer

logger = logging.getLogger(__name__)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": message}."""
    return JSONResponse(
        {"error": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app with its own engine, session maker and mailer on app.state."""
    settings = settings or default_settings

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    engine = build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await engine.dispose()

    app = FastAPI(
        title="Rotten Company",
        description="Evidence moderation and rotten scores for companies, leaders and managers",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_maker = build_session_maker(engine)
    app.state.mailer = Mailer.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(health_router, tags=["Health"])
    app.include_router(evidence_router, prefix="/api", tags=["Evidence"])
    app.include_router(moderation_router, prefix="/api/moderation", tags=["Moderation"])
    app.include_router(company_requests_router, prefix="/api", tags=["Company requests"])
    app.include_router(entities_router, prefix="/api", tags=["Entities"])
    app.include_router(scores_router, prefix="/api", tags=["Scores"])
    app.include_router(notifications_router, prefix="/api", tags=["Notifications"])

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {"service": "Rotten Company", "version": "0.1.0", "docs": "/docs"}

    logger.info("app created")
    return app


app = create_app()
