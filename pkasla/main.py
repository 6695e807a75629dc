"""FastAPI application factory and entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from pkasla.config import settings
from pkasla.database import close_db
from pkasla.exceptions import create_exception_handlers
from pkasla.services.telegram_service import get_telegram_service

log_level = logging.DEBUG if settings.is_development else getattr(logging, settings.app_log_level)
logging.basicConfig(
    level=log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    force=True,
)
# httpx logs every request URL, which includes the bot token
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)
logger.info(f"Logging configured at level: {logging.getLevelName(log_level)}")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")

        bot_task: asyncio.Task | None = None
        if settings.telegram_bot_token:
            bot_task = asyncio.create_task(
                get_telegram_service().run_chat_id_bot(settings.telegram_bot_token)
            )
            logger.info("Telegram bot started with chat ID command handler")
        else:
            logger.info("Telegram bot not configured; skipping bot startup")

        yield

        logger.info(f"Shutting down {settings.app_name}")
        if bot_task is not None:
            bot_task.cancel()
            with suppress(asyncio.CancelledError):
                await bot_task
        await close_db()

    app = FastAPI(
        title=settings.app_name,
        description="Event platform API: site settings and Telegram notifications",
        version=settings.app_version,
        docs_url="/api/docs" if settings.app_debug else None,
        redoc_url="/api/redoc" if settings.app_debug else None,
        openapi_url="/api/openapi.json" if settings.app_debug else None,
        lifespan=lifespan,
    )

    # Middleware added last runs first: CORS -> auth -> maintenance
    from pkasla.middleware import AuthMiddleware, MaintenanceMiddleware

    app.add_middleware(MaintenanceMiddleware)
    app.add_middleware(AuthMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    for exc_class, handler in create_exception_handlers().items():
        app.add_exception_handler(exc_class, handler)

    register_routers(app)

    return app


def register_routers(app: FastAPI):
    """Register all API routers."""
    from pkasla.api.v1 import api_router

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {"status": "healthy", "app": settings.app_name, "env": settings.app_env}


# Create the app instance
app = create_app()


def main():
    """Entry point for running the application."""
    import uvicorn

    uvicorn.run(
        "pkasla.main:app",
        host="0.0.0.0",
        port=4000,
        reload=settings.is_development,
        log_level=settings.app_log_level.lower(),
    )


if __name__ == "__main__":
    main()
