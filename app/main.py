from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import get_settings
from app.db import ensure_schema
from app.infra.logging_config import LoggingConfig
from app.routers import webhooks


@asynccontextmanager
async def lifespan(app: FastAPI):
    LoggingConfig()
    # Tests manage their own schema on the shared in-memory engine.
    if not app.state.testing:
        ensure_schema()
    yield


def create_app(testing: bool = False) -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.testing = testing

    app.include_router(webhooks.router)
    return app


app = create_app()
