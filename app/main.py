"""FastAPI application factory and lifespan."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.api.v1 import api_router
from app.core.config import get_settings
from app.core.sessions import ServerSessionMiddleware
from app.db.session import async_session_maker, engine

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: nothing to prepare (schema is managed by Alembic); shutdown: dispose the engine."""
    yield
    await engine.dispose()


def create_application(session_maker: async_sessionmaker[AsyncSession] | None = None) -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # Request DB sessions and the session store share this factory
    app.state.session_maker = session_maker or async_session_maker

    # CORS: allow localhost in dev; in production use CORS_ORIGINS env (comma-separated)
    if settings.environment == "development":
        cors_origins = ["http://localhost:3000", "https://local.fitorforget.com:3000"]
    else:
        cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        ServerSessionMiddleware,
        cookie_name=settings.session_cookie_name,
        secure=settings.secure_cookies,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def root():
        return {"status": "ok", "message": settings.app_name}

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_application()
