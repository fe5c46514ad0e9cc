"""Centralized error transformation for API routes.

Maps apodcache errors (domain and infrastructure) to HTTPException responses.
"""

from typing import Any

from fastapi import HTTPException

from apodcache.domain.shared.error import (
    ApodError,
    DomainError,
    NotFoundError,
    ReconciliationError,
    StorageError,
    UpstreamError,
    UpstreamErrorKind,
    ValidationError,
)

DOMAIN_ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
}


def map_apod_error(error: ApodError) -> HTTPException:
    """Map an apodcache error to an HTTPException.

    Args:
        error: The apodcache error to map.

    Returns:
        HTTPException with appropriate status code and detail.
    """
    detail: dict[str, Any] = {
        "code": error.code,
        "message": error.message,
    }

    if isinstance(error, DomainError):
        status_code = DOMAIN_ERROR_STATUS_MAP.get(type(error), 400)
        if isinstance(error, ValidationError) and error.field is not None:
            detail["field"] = error.field
        return HTTPException(status_code=status_code, detail=detail)

    if isinstance(error, UpstreamError):
        detail["upstream_kind"] = error.kind.value
        # Gateway timeout vs. bad gateway
        status_code = 504 if error.kind is UpstreamErrorKind.TIMEOUT else 502
        return HTTPException(status_code=status_code, detail=detail)

    if isinstance(error, StorageError):
        return HTTPException(status_code=503, detail=detail)

    if isinstance(error, ReconciliationError):
        detail["upstream_kind"] = error.upstream_error.kind.value
        return HTTPException(status_code=500, detail=detail)

    # Fallback for unknown ApodError subclasses
    return HTTPException(status_code=500, detail=detail)
