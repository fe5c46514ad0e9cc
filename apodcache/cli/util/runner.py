"""Run one CLI command as a unit of work against the DI container."""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncEngine

from apodcache.application.di import create_container
from apodcache.cli.console import get_console
from apodcache.config import Config, configure_logging
from apodcache.domain.apod.service.reconciliation import ReconciliationService
from apodcache.domain.shared.error import ApodError
from apodcache.infrastructure.persistence.database import init_schema
from apodcache.util.di.scope import Scope

T = TypeVar("T")

Action = Callable[[ReconciliationService], Awaitable[T]]


async def run_action(action: Action[T], config: Config) -> T:
    """Build the container, open a UOW scope and hand its service to ``action``."""
    container = create_container(config)
    try:
        if config.database.auto_create:
            await init_schema(await container.get(AsyncEngine))
        async with container(scope=Scope.UOW) as uow:
            service = await uow.get(ReconciliationService)
            return await action(service)
    finally:
        await container.close()


def run(action: Action[T]) -> T:
    """Entry point for commands: errors are printed as ``code: message`` and exit 1."""
    config = Config()  # type: ignore[call-arg]
    configure_logging(config.logging)
    try:
        return asyncio.run(run_action(action, config))
    except ApodError as e:
        get_console().error(f"{e.code}: {e.message}")
        sys.exit(1)
