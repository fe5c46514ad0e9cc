from dishka import Provider as _DishkaProvider


class Provider(_DishkaProvider):
    """Base for all apodcache DI providers.

    Subclasses declare their factories with ``dishka.provide`` and an explicit
    ``Scope`` from ``apodcache.util.di.scope``.
    """
