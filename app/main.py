import uvicorn
from fastapi import FastAPI

from app.api.routes.health import router as health_router
from app.api.routes.internal_admin import router as internal_admin_router
from app.api.routes.internal_play import router as internal_play_router
from app.api.routes.internal_scoreboard import router as internal_scoreboard_router
from app.api.routes.internal_store import router as internal_store_router
from app.core.config import get_settings
from app.core.logging import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level, app_env=settings.app_env)

    docs_enabled = settings.enable_openapi_docs
    app = FastAPI(
        title="Campaign Console API",
        version="0.1.0",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.include_router(health_router)
    app.include_router(internal_play_router)
    app.include_router(internal_store_router)
    app.include_router(internal_admin_router)
    app.include_router(internal_scoreboard_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
