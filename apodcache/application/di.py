from dishka import AsyncContainer, from_context, make_async_container

from apodcache.config import Config
from apodcache.domain.apod.util.di import ApodProvider
from apodcache.infrastructure.http import HttpProvider
from apodcache.infrastructure.persistence import PersistenceProvider
from apodcache.util.di.base import Provider
from apodcache.util.di.scope import Scope


class ConfigProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    return make_async_container(
        ConfigProvider(),
        PersistenceProvider(),
        HttpProvider(),
        ApodProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
