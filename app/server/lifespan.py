from contextlib import asynccontextmanager
import threading
from typing import AsyncIterator, Optional, TYPE_CHECKING

from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from infrastructure.events import shutdown_event_executor, start_event_executor
from infrastructure.logging.setup import configure_logging
from infrastructure.services import get_settings
from jobs import scheduled_tasks
from modules.onboarding import register_handlers
from modules.onboarding.providers import get_retry_scheduler

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


def _get_logger(settings: "Settings") -> BoundLogger:
    return configure_logging(
        log_level=settings.LOG_LEVEL, is_production=settings.is_production
    )


def _list_configs(settings: "Settings", logger: BoundLogger) -> None:
    config_settings: dict[str, list[object]] = {"settings": []}

    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)


def _start_scheduled_tasks(
    settings: "Settings",
    logger: BoundLogger,
) -> Optional[threading.Event]:
    if not settings.retry.scheduler_enabled:
        logger.info("scheduled_tasks_skipped", reason="retry_scheduler_disabled")
        return None

    scheduled_tasks.init(
        get_retry_scheduler(),
        interval_seconds=settings.retry.scheduler_interval_seconds,
    )
    stop_event = scheduled_tasks.run_continuously()
    logger.info(
        "scheduled_tasks_started",
        interval_seconds=settings.retry.scheduler_interval_seconds,
    )
    return stop_event


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = _get_logger(settings)

    app.state.settings = settings
    app.state.logger = logger

    logger.info("application_startup")
    _list_configs(settings, logger)

    register_handlers()
    start_event_executor()

    app.state.scheduled_stop_event = _start_scheduled_tasks(settings, logger)

    yield

    logger.info("application_shutdown")

    if app.state.scheduled_stop_event is not None:
        scheduled_tasks.stop(app.state.scheduled_stop_event)
    shutdown_event_executor(wait=True)
