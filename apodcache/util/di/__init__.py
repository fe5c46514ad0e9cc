from apodcache.util.di.base import Provider
from apodcache.util.di.scope import Scope

__all__ = ["Provider", "Scope"]
