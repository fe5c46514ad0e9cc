from apodcache.domain.apod.util.di.provider import ApodProvider

__all__ = ["ApodProvider"]
