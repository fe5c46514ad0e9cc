"""DI provider for HTTP infrastructure."""

from typing import AsyncIterable, NewType

import httpx
from dishka import provide

from apodcache.config import Config
from apodcache.domain.apod.port.upstream import UpstreamClient
from apodcache.infrastructure.http.apod_client import HttpApodClient
from apodcache.util.di.base import Provider
from apodcache.util.di.scope import Scope

# Shared client for every call to the APOD provider
UpstreamHttpClient = NewType("UpstreamHttpClient", httpx.AsyncClient)


class HttpProvider(Provider):
    """DI provider for the upstream HTTP adapter."""

    @provide(scope=Scope.APP)
    async def get_upstream_http_client(
        self, config: Config
    ) -> AsyncIterable[UpstreamHttpClient]:
        """One AsyncClient per process, closed when the container shuts down."""
        client = httpx.AsyncClient(
            base_url=config.upstream.base_url,
            timeout=httpx.Timeout(config.upstream.timeout),
            headers={"User-Agent": config.upstream.user_agent},
        )
        try:
            yield UpstreamHttpClient(client)
        finally:
            await client.aclose()

    @provide(scope=Scope.APP, provides=UpstreamClient)
    def get_upstream_client(
        self, client: UpstreamHttpClient, config: Config
    ) -> HttpApodClient:
        return HttpApodClient(
            client=client,
            api_key=config.upstream.api_key,
            path=config.upstream.path,
        )
