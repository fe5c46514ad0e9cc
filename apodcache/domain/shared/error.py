"""Error hierarchy for apodcache.

Error layers:
- ApodError: Base class for all apodcache errors
- DomainError: Input validation failures, missing resources (4xx responses)
- InfrastructureError: Storage and upstream failures (5xx responses)

These errors are mapped to HTTP responses by map_apod_error in
apodcache.application.api.v1.errors.
"""

from enum import StrEnum


class ApodError(Exception):
    """Base class for all apodcache errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (caller mistakes - typically 4xx)
# =============================================================================


class DomainError(ApodError):
    """Base class for domain errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class ValidationError(DomainError):
    """Input validation failed (bad date, oversized range, bad count)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


# =============================================================================
# Infrastructure Errors (system-level failures - typically 5xx)
# =============================================================================


class InfrastructureError(ApodError):
    """Base class for infrastructure/system errors."""


class StorageError(InfrastructureError):
    """Local record store is unavailable or rejected the operation."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="STORAGE_ERROR")


class UpstreamErrorKind(StrEnum):
    """How a call to the upstream provider failed."""

    CLIENT_ERROR = "client_error"  # HTTP 4xx
    SERVER_ERROR = "server_error"  # HTTP 5xx
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"  # no response at all
    INVALID_RESPONSE = "invalid_response"  # 2xx with an unusable body


class UpstreamError(InfrastructureError):
    """The upstream provider call failed."""

    def __init__(
        self,
        message: str,
        kind: UpstreamErrorKind,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, code="UPSTREAM_ERROR")
        self.kind = kind
        self.status_code = status_code


class ReconciliationError(InfrastructureError):
    """Upstream failed and the cache had nothing usable to fall back on.

    Carries both underlying causes: ``upstream_error`` is always set,
    ``cache_error`` is the storage failure or None when the cache was simply
    empty for the requested key.
    """

    def __init__(
        self,
        message: str,
        upstream_error: UpstreamError,
        cache_error: StorageError | None = None,
    ) -> None:
        cache_part = (
            f"cache unavailable: {cache_error.message}" if cache_error else "no cached copy"
        )
        super().__init__(
            f"{message} (upstream {upstream_error.kind}: {upstream_error.message}; {cache_part})",
            code="RECONCILIATION_ERROR",
        )
        self.upstream_error = upstream_error
        self.cache_error = cache_error


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
