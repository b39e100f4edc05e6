"""
Unit tests for weather_alerts/core/http_client.py and the source clients
built on it.

HTTP traffic goes through httpx.MockTransport; backoff sleeps are patched
out.
"""
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from weather_alerts.core.api_errors import (
    FatalError,
    NotFoundError,
    RateLimitError,
    RetryableError,
    classify_http_error,
)
from weather_alerts.sources.nws.client import NWSClient
from weather_alerts.sources.open_meteo.client import OpenMeteoClient


def _with_transport(client, handler):
    client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client


@pytest.mark.unit
class TestClassifyHttpError:

    @pytest.mark.parametrize("status,error_type", [
        (429, RateLimitError),
        (401, FatalError),
        (403, FatalError),
        (404, NotFoundError),
        (400, FatalError),
        (500, RetryableError),
        (503, RetryableError),
    ])
    def test_classification(self, status, error_type):
        assert isinstance(classify_http_error(status, "body", "open_meteo"), error_type)

    def test_retryable_flag(self):
        assert classify_http_error(502).retryable is True
        assert classify_http_error(404).retryable is False
        assert classify_http_error(418).retryable is False

    def test_message_includes_source_and_status(self):
        error = classify_http_error(403, "key revoked", "resend")
        assert str(error) == "[resend] Access denied: key revoked (HTTP 403)"


@pytest.mark.unit
class TestRetry:

    @pytest.mark.asyncio
    async def test_server_error_is_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) == 1:
                return httpx.Response(503, text="busy")
            return httpx.Response(200, json={"ok": True})

        client = _with_transport(OpenMeteoClient(max_retries=2), handler)
        with patch.object(client, "_backoff", new=AsyncMock()):
            data = await client.get("forecast")

        assert data == {"ok": True}
        assert len(attempts) == 2
        await client.close()

    @pytest.mark.asyncio
    async def test_retries_exhausted_raises_retryable_error(self):
        client = _with_transport(
            OpenMeteoClient(max_retries=2), lambda r: httpx.Response(500, text="down")
        )
        with patch.object(client, "_backoff", new=AsyncMock()):
            with pytest.raises(RetryableError) as exc_info:
                await client.get("forecast")

        assert exc_info.value.status_code == 500
        await client.close()

    @pytest.mark.asyncio
    async def test_not_found_is_not_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(404, text="no coverage")

        client = _with_transport(NWSClient(user_agent="test (t@example.com)", max_retries=3), handler)
        with pytest.raises(NotFoundError):
            await client.get("alerts/active")

        assert len(attempts) == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_network_error_is_retryable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = _with_transport(OpenMeteoClient(max_retries=2), handler)
        with patch.object(client, "_backoff", new=AsyncMock()) as backoff:
            with pytest.raises(RetryableError):
                await client.get("forecast")

        backoff.assert_awaited_once()
        await client.close()

    @pytest.mark.asyncio
    async def test_rate_limit_honours_retry_after(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) == 1:
                return httpx.Response(429, headers={"Retry-After": "3"}, text="slow down")
            return httpx.Response(200, json={"features": []})

        client = _with_transport(NWSClient(user_agent="test (t@example.com)", max_retries=2), handler)
        with patch("weather_alerts.core.http_client.asyncio.sleep", new=AsyncMock()) as sleep:
            await client.get("alerts/active")

        sleep.assert_awaited_once_with(3)
        await client.close()


@pytest.mark.unit
class TestErrorDetail:

    @pytest.mark.asyncio
    async def test_open_meteo_reason_is_surfaced(self):
        client = _with_transport(
            OpenMeteoClient(),
            lambda r: httpx.Response(400, json={"error": True, "reason": "Latitude must be in range of -90 to 90°."}),
        )
        with pytest.raises(FatalError) as exc_info:
            await client.get("forecast")

        assert exc_info.value.message == "Bad request: Latitude must be in range of -90 to 90°."
        await client.close()

    @pytest.mark.asyncio
    async def test_nws_problem_detail_is_surfaced(self):
        client = _with_transport(
            NWSClient(user_agent="test (t@example.com)"),
            lambda r: httpx.Response(
                404,
                json={"title": "Not Found", "detail": "Point is outside the forecast area"},
            ),
        )
        with pytest.raises(NotFoundError) as exc_info:
            await client.get("alerts/active")

        assert "outside the forecast area" in exc_info.value.message
        await client.close()

    @pytest.mark.asyncio
    async def test_plain_text_body_is_used_as_is(self):
        client = _with_transport(NWSClient(user_agent="test (t@example.com)"), lambda r: httpx.Response(403, text="blocked"))
        with pytest.raises(FatalError) as exc_info:
            await client.get("alerts/active")

        assert exc_info.value.message == "Access denied: blocked"
        await client.close()


@pytest.mark.unit
class TestSourceClients:

    @pytest.mark.asyncio
    async def test_open_meteo_forecast_request(self):
        seen = {}

        def handler(request):
            seen["url"] = request.url
            return httpx.Response(200, json={"current": {}})

        client = _with_transport(OpenMeteoClient(), handler)
        await client.fetch_forecast(33.45, -112.07)

        params = seen["url"].params
        assert seen["url"].path == "/v1/forecast"
        assert params["temperature_unit"] == "fahrenheit"
        assert params["wind_speed_unit"] == "mph"
        assert params["timezone"] == "auto"
        assert params["forecast_days"] == "3"
        assert "apparent_temperature" in params["hourly"]
        await client.close()

    @pytest.mark.asyncio
    async def test_open_meteo_air_quality_request(self):
        seen = {}

        def handler(request):
            seen["url"] = request.url
            return httpx.Response(200, json={"current": {"us_aqi": 40}})

        client = _with_transport(OpenMeteoClient(), handler)
        data = await client.fetch_air_quality(33.45, -112.07)

        assert seen["url"].host == "air-quality-api.open-meteo.com"
        assert seen["url"].params["current"] == "us_aqi"
        assert data["current"]["us_aqi"] == 40
        await client.close()

    @pytest.mark.asyncio
    async def test_nws_request_headers_and_point(self):
        seen = {}

        def handler(request):
            seen["request"] = request
            return httpx.Response(200, json={"features": []})

        client = _with_transport(NWSClient(user_agent="jobsite-test (ops@example.com)"), handler)
        advisories = await client.fetch_active_alerts(33.4484, -112.074)

        request = seen["request"]
        assert advisories == []
        assert request.url.params["point"] == "33.4484,-112.0740"
        assert request.headers["User-Agent"] == "jobsite-test (ops@example.com)"
        assert request.headers["Accept"] == "application/geo+json"
        await client.close()
