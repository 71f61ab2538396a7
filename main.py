"""
Credential-issuance service — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import register_middleware
from auth.context import build_auth_context
from auth.routes import router as auth_router
from config.settings import Settings, config
from database.session import init_db

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "aiosqlite", "asyncio"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ConfigurationError propagates and aborts startup
        logger.info("Building auth context…")
        ctx = build_auth_context(settings)

        if ctx.engine is not None:
            logger.info("Preparing user store…")
            await init_db(ctx.engine)

        app.state.auth_context = ctx
        logger.info("Application ready to accept requests on port %d.", settings.server_port)
        try:
            yield
        finally:
            if ctx.engine is not None:
                await ctx.engine.dispose()

    app = FastAPI(
        title="Credential Issuance Service",
        version="1.0.0",
        description="User registration and short-lived bearer tokens.",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)

    # Routes
    app.include_router(auth_router, prefix="/api/auth")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.server_port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
