"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from dreamgame.config import get_settings
from dreamgame.database import close_db, init_db
from dreamgame.gamification.router import router as gamification_router
from dreamgame.health.router import router as health_router
from dreamgame.journey.router import router as journey_router
from dreamgame.market.router import router as market_router
from dreamgame.middleware import setup_middleware
from dreamgame.redis_client import close_redis, init_redis
from dreamgame.users.router import router as users_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    if settings.redis_url:
        await init_redis(settings.redis_url)
    else:
        logger.warning("redis_disabled", reason="DREAMGAME_REDIS_URL is empty; events will not be published")

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="DreamGame API",
        description="Progression and personalized content engine for the DreamGame entrepreneurship journey",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(users_router)
    app.include_router(gamification_router)
    app.include_router(journey_router)
    app.include_router(market_router)

    return app


app = create_app()
