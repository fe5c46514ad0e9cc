"""Unit tests for HttpApodClient adapter."""

from datetime import UTC, date, datetime, timedelta
from unittest.mock import AsyncMock

import httpx
import pytest

from apodcache.domain.apod.port.repository import DailyRecordRepository
from apodcache.domain.apod.service.reconciliation import ReconciliationService
from apodcache.domain.shared.error import UpstreamError, UpstreamErrorKind, ValidationError
from apodcache.infrastructure.http.apod_client import HttpApodClient, payload_to_record

BASE_URL = "https://api.example.gov"


def _payload(day: str = "2024-05-01", **overrides) -> dict:
    payload = {
        "date": day,
        "title": "Galaxy Wars",
        "explanation": "Two galaxies collide.",
        "media_type": "image",
        "url": "https://apod.example.org/image/galaxies.jpg",
        "hdurl": "https://apod.example.org/image/galaxies_hd.jpg",
        "copyright": "\nJane Doe\n",
        "service_version": "v1",
    }
    payload.update(overrides)
    return payload


def _client(handler) -> HttpApodClient:
    http = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return HttpApodClient(http, api_key="TEST_KEY", today=lambda: date(2024, 6, 1))


class TestPayloadMapping:
    def test_maps_provider_fields(self):
        record = payload_to_record(_payload())

        assert record.hd_url == "https://apod.example.org/image/galaxies_hd.jpg"
        assert record.copyright == "Jane Doe"
        assert record.updated_at is None

    def test_missing_optional_fields(self):
        payload = _payload()
        del payload["hdurl"], payload["copyright"], payload["service_version"]

        record = payload_to_record(payload)

        assert record.hd_url is None
        assert record.copyright is None
        assert record.service_version == "v1"


class TestRequests:
    @pytest.mark.asyncio
    async def test_fetch_by_date_sends_key_and_date(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_payload())

        record = await _client(handler).fetch_by_date("2024-05-01")

        assert record.date == "2024-05-01"
        assert seen[0].url.path == "/planetary/apod"
        assert seen[0].url.params["api_key"] == "TEST_KEY"
        assert seen[0].url.params["date"] == "2024-05-01"

    @pytest.mark.asyncio
    async def test_fetch_by_range_sends_both_bounds(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[_payload("2024-05-01"), _payload("2024-05-02")])

        records = await _client(handler).fetch_by_range("2024-05-01", "2024-05-02")

        assert [r.date for r in records] == ["2024-05-01", "2024-05-02"]
        assert seen[0].url.params["start_date"] == "2024-05-01"
        assert seen[0].url.params["end_date"] == "2024-05-02"

    @pytest.mark.asyncio
    async def test_fetch_random_normalizes_single_object(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["count"] == "1"
            return httpx.Response(200, json=_payload("2001-03-04"))

        records = await _client(handler).fetch_random(1)

        assert [r.date for r in records] == ["2001-03-04"]

    @pytest.mark.asyncio
    async def test_malformed_list_items_are_dropped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json=[_payload("2001-03-04"), _payload("2002-01-01", media_type="other"), "junk"],
            )

        records = await _client(handler).fetch_random(3)

        assert [r.date for r in records] == ["2001-03-04"]

    @pytest.mark.asyncio
    async def test_validates_before_calling(self):
        http = AsyncMock(spec=httpx.AsyncClient)
        client = HttpApodClient(http, api_key="TEST_KEY")

        with pytest.raises(ValidationError):
            await client.fetch_random(0)
        with pytest.raises(ValidationError):
            await client.fetch_by_date("1990-01-01")

        http.get.assert_not_called()


class TestErrorClassification:
    @pytest.mark.asyncio
    async def test_4xx_is_client_error_with_provider_message(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"code": 400, "msg": "Date must be after 1995"})

        with pytest.raises(UpstreamError) as exc_info:
            await _client(handler).fetch_by_date("2024-05-01")

        assert exc_info.value.kind is UpstreamErrorKind.CLIENT_ERROR
        assert exc_info.value.status_code == 400
        assert "Date must be after 1995" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_rate_limit_message_from_error_object(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                429,
                json={"error": {"code": "OVER_RATE_LIMIT", "message": "Rate limit exceeded"}},
            )

        with pytest.raises(UpstreamError) as exc_info:
            await _client(handler).fetch_by_date("2024-05-01")

        assert exc_info.value.kind is UpstreamErrorKind.CLIENT_ERROR
        assert "Rate limit exceeded" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_5xx_is_server_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="Service Unavailable")

        with pytest.raises(UpstreamError) as exc_info:
            await _client(handler).fetch_by_date("2024-05-01")

        assert exc_info.value.kind is UpstreamErrorKind.SERVER_ERROR
        assert "Unknown error" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(UpstreamError) as exc_info:
            await _client(handler).fetch_by_date("2024-05-01")

        assert exc_info.value.kind is UpstreamErrorKind.TIMEOUT
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_connection_failure_is_unreachable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamError) as exc_info:
            await _client(handler).fetch_random(2)

        assert exc_info.value.kind is UpstreamErrorKind.UNREACHABLE

    @pytest.mark.asyncio
    async def test_non_json_body_is_invalid_response(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        with pytest.raises(UpstreamError) as exc_info:
            await _client(handler).fetch_by_date("2024-05-01")

        assert exc_info.value.kind is UpstreamErrorKind.INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_malformed_single_record_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_payload(url="not a url"))

        with pytest.raises(UpstreamError) as exc_info:
            await _client(handler).fetch_by_date("2024-05-01")

        assert exc_info.value.kind is UpstreamErrorKind.INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_list_for_single_date_is_invalid_response(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[_payload()])

        with pytest.raises(UpstreamError) as exc_info:
            await _client(handler).fetch_by_date("2024-05-01")

        assert exc_info.value.kind is UpstreamErrorKind.INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_undecodable_body_is_invalid_response(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, headers={"Content-Encoding": "gzip"}, content=b"not gzip at all"
            )

        with pytest.raises(UpstreamError) as exc_info:
            await _client(handler).fetch_by_date("2024-05-01")

        assert exc_info.value.kind is UpstreamErrorKind.INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_other_request_errors_are_unreachable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.TooManyRedirects("Exceeded maximum allowed redirects", request=request)

        with pytest.raises(UpstreamError) as exc_info:
            await _client(handler).fetch_by_range("2024-05-01", "2024-05-03")

        assert exc_info.value.kind is UpstreamErrorKind.UNREACHABLE


class TestStaleFallback:
    @pytest.mark.asyncio
    async def test_undecodable_body_serves_stale_cache(self, make_record):
        now = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)
        stale = make_record("2024-05-01", updated_at=now - timedelta(hours=25))
        record_repo = AsyncMock(spec=DailyRecordRepository)
        record_repo.find_by_date.return_value = stale

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, headers={"Content-Encoding": "gzip"}, content=b"not gzip at all"
            )

        service = ReconciliationService(
            record_repo=record_repo,
            upstream=_client(handler),
            ttl=timedelta(hours=24),
            clock=lambda: now,
        )

        result = await service.get_by_date("2024-05-01")

        assert result == stale
        record_repo.save.assert_not_awaited()
