import threading
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies.rate_limits import setup_rate_limiter
from api.router import api_router
from infrastructure.configuration import Settings
from infrastructure.logging import configure_logging, get_module_logger
from infrastructure.services import get_notification_orchestrator, get_settings

logger = get_module_logger()


def list_configs(settings: Settings):
    """Log configuration keys (values of secrets are never logged)."""
    config_settings = {"settings": []}

    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger.info("application_startup")
    list_configs(settings)

    # Bulk runs in flight stop sending once this is set.
    app.state.shutdown_event = threading.Event()
    app.state.orchestrator = get_notification_orchestrator()

    yield

    logger.info("application_shutdown")
    app.state.shutdown_event.set()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(log_level=settings.LOG_LEVEL, is_production=settings.is_production)

    app = FastAPI(title="Cubicle Notifications", lifespan=lifespan)
    setup_rate_limiter(app)

    allow_origins = (
        [settings.notifications.FRONTEND_URL]
        if settings.is_production
        else [
            settings.notifications.FRONTEND_URL,
            "http://localhost:8000",
            "http://127.0.0.1:8000",
        ]
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app


server_app = create_app()
