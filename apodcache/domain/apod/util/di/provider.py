from dishka import provide

from apodcache.config import Config
from apodcache.domain.apod.port.repository import DailyRecordRepository
from apodcache.domain.apod.port.upstream import UpstreamClient
from apodcache.domain.apod.service.reconciliation import ReconciliationService
from apodcache.util.di.base import Provider
from apodcache.util.di.scope import Scope


class ApodProvider(Provider):
    # Services
    @provide(scope=Scope.UOW)
    def get_reconciliation_service(
        self,
        record_repo: DailyRecordRepository,
        upstream: UpstreamClient,
        config: Config,
    ) -> ReconciliationService:
        return ReconciliationService(
            record_repo=record_repo,
            upstream=upstream,
            ttl=config.cache.ttl,
        )
