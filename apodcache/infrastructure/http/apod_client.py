"""HTTP adapter for the UpstreamClient port."""

import logging
from collections.abc import Callable
from datetime import date
from typing import Any

import httpx
import pydantic

from apodcache.domain.apod.model.record import DailyRecord
from apodcache.domain.apod.port.upstream import UpstreamClient
from apodcache.domain.apod.validation import (
    utc_today,
    validate_count,
    validate_date,
    validate_range,
)
from apodcache.domain.shared.error import UpstreamError, UpstreamErrorKind

logger = logging.getLogger(__name__)

DEFAULT_PATH = "/planetary/apod"

# Provider field name -> DailyRecord field name
_FIELD_ALIASES = {"hdurl": "hd_url"}


def _provider_message(response: httpx.Response) -> str:
    """Best-effort extraction of the provider's error text."""
    try:
        body = response.json()
    except ValueError:
        return "Unknown error"
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if body.get("msg"):
            return str(body["msg"])
    return "Unknown error"


def payload_to_record(payload: dict[str, Any]) -> DailyRecord:
    """Convert one provider JSON object to a DailyRecord.

    Raises:
        pydantic.ValidationError: If the payload is not a usable record
    """
    data = {_FIELD_ALIASES.get(key, key): value for key, value in payload.items()}
    return DailyRecord.model_validate(
        {
            "date": data.get("date"),
            "title": data.get("title"),
            "explanation": data.get("explanation"),
            "media_type": data.get("media_type"),
            "url": data.get("url"),
            "hd_url": data.get("hd_url") or None,
            "copyright": data.get("copyright") or None,
            "service_version": data.get("service_version") or "v1",
        }
    )


class HttpApodClient(UpstreamClient):
    """Fetches APOD JSON from the provider using httpx.

    The shared AsyncClient carries base URL, timeout and User-Agent; this
    adapter adds the API key to every request and turns every failure into
    an UpstreamError. It never retries.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_key: str,
        path: str = DEFAULT_PATH,
        today: Callable[[], date] = utc_today,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._path = path
        self._today = today

    async def fetch_by_date(self, date: str) -> DailyRecord:
        validate_date(date, today=self._today())
        body = await self._get({"date": date})
        if not isinstance(body, dict):
            raise UpstreamError(
                f"Expected a single record for {date}, got {type(body).__name__}",
                kind=UpstreamErrorKind.INVALID_RESPONSE,
            )
        try:
            return payload_to_record(body)
        except pydantic.ValidationError as e:
            raise UpstreamError(
                f"Malformed record for {date}: {e.error_count()} invalid field(s)",
                kind=UpstreamErrorKind.INVALID_RESPONSE,
            ) from e

    async def fetch_by_range(self, start: str, end: str) -> list[DailyRecord]:
        validate_range(start, end, today=self._today())
        body = await self._get({"start_date": start, "end_date": end})
        return self._to_records(body)

    async def fetch_random(self, count: int) -> list[DailyRecord]:
        validate_count(count)
        body = await self._get({"count": count})
        return self._to_records(body)

    async def _get(self, params: dict[str, Any]) -> Any:
        try:
            response = await self._client.get(
                self._path, params={**params, "api_key": self._api_key}
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise UpstreamError(
                f"Upstream timed out: {e}", kind=UpstreamErrorKind.TIMEOUT
            ) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            kind = (
                UpstreamErrorKind.CLIENT_ERROR
                if 400 <= status < 500
                else UpstreamErrorKind.SERVER_ERROR
            )
            raise UpstreamError(
                f"Upstream error ({status}): {_provider_message(e.response)}",
                kind=kind,
                status_code=status,
            ) from e
        except httpx.DecodingError as e:
            raise UpstreamError(
                f"Upstream body could not be decoded: {e}",
                kind=UpstreamErrorKind.INVALID_RESPONSE,
            ) from e
        except httpx.RequestError as e:
            raise UpstreamError(
                f"Upstream is not responding: {e}", kind=UpstreamErrorKind.UNREACHABLE
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                "Upstream returned a body that is not JSON",
                kind=UpstreamErrorKind.INVALID_RESPONSE,
                status_code=response.status_code,
            ) from e

    def _to_records(self, body: Any) -> list[DailyRecord]:
        """Normalize a single object or a list to records, dropping malformed items."""
        if isinstance(body, dict):
            items: list[Any] = [body]
        elif isinstance(body, list):
            items = body
        else:
            raise UpstreamError(
                f"Expected a record or a list of records, got {type(body).__name__}",
                kind=UpstreamErrorKind.INVALID_RESPONSE,
            )

        records = []
        for item in items:
            if not isinstance(item, dict):
                logger.warning("Dropping non-object item from upstream response: %r", item)
                continue
            try:
                records.append(payload_to_record(item))
            except pydantic.ValidationError as e:
                logger.warning(
                    "Dropping malformed upstream record %s: %d invalid field(s)",
                    item.get("date", "<no date>"),
                    e.error_count(),
                )
        return records
