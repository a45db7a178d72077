"""
FastAPI application entry point for the guild site backend.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from guildsite.config import Settings, get_settings
from guildsite.errors import register_error_handlers
from guildsite.routes import router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def log_startup_diagnostics(settings: Settings) -> None:
    logger.info("--- SERVER STARTING ---")
    if not settings.discord_bot_token:
        logger.error("DISCORD_BOT_TOKEN is missing in environment variables!")
    else:
        logger.info(
            "Discord token loaded. Starts with: %s...",
            settings.discord_bot_token[:5],
        )
    if settings.admin_password == "admin":
        logger.warning("ADMIN_PASSWORD not set; using the default password.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log_startup_diagnostics(get_settings())
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Guild Site Backend (FastAPI)", version="0.1.0", lifespan=lifespan
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_error_handlers(app)

    @app.get("/", response_class=PlainTextResponse)
    def root() -> str:
        return f"{settings.service_name} is Running!"

    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()


def main() -> None:
    """Entrypoint for running the API directly."""
    import uvicorn

    settings = get_settings()
    logger.info("Bot API server running on port %s", settings.port)
    uvicorn.run("guildsite.app:app", host="0.0.0.0", port=settings.port)
