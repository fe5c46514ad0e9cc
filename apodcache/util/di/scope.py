"""Custom Dishka scopes for apodcache."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """apodcache dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: Process lifetime (engine, HTTP client, upstream adapter)
    - UOW: Unit of Work (one CLI command or one API request)
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
