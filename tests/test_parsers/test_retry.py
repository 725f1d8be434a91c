"""Tests for the shared provider retry helper."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from src.parsers.exceptions import (
    ProviderHTTPError,
    ProviderPayloadError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from src.parsers.retry import NO_WAIT, RetryPolicy, send_with_retry
from tests.conftest import make_response


class TestRetryPolicy:
    def test_backoff_doubles_and_caps(self) -> None:
        policy = RetryPolicy(base_delay=1.0, max_delay=4.0)
        assert [policy.backoff(a) for a in range(4)] == [1.0, 2.0, 4.0, 4.0]

    def test_rate_limit_branch_is_longer(self) -> None:
        policy = RetryPolicy(base_delay=1.0, rate_limit_delay=5.0)
        assert policy.rate_limit_backoff(0) > policy.backoff(0)

    def test_retry_after_header_honored(self) -> None:
        policy = RetryPolicy(rate_limit_delay=1.0, rate_limit_max_delay=30.0)
        assert policy.rate_limit_backoff(0, "12") == 12.0

    def test_retry_after_capped(self) -> None:
        policy = RetryPolicy(rate_limit_delay=1.0, rate_limit_max_delay=30.0)
        assert policy.rate_limit_backoff(0, "600") == 30.0

    def test_bad_retry_after_ignored(self) -> None:
        policy = RetryPolicy(rate_limit_delay=2.0)
        assert policy.rate_limit_backoff(0, "soon") == 2.0


class TestSendWithRetry:
    @pytest.mark.asyncio
    async def test_success_returns_json(self) -> None:
        client = AsyncMock()
        client.request = AsyncMock(return_value=make_response({"ok": True}))

        data = await send_with_retry(client, "GET", "/x", source="test", policy=NO_WAIT)

        assert data == {"ok": True}
        assert client.request.await_count == 1

    @pytest.mark.asyncio
    async def test_retries_on_429_then_succeeds(self) -> None:
        client = AsyncMock()
        client.request = AsyncMock(
            side_effect=[make_response({}, 429), make_response({"ok": 1})]
        )

        data = await send_with_retry(client, "GET", "/x", source="test", policy=NO_WAIT)

        assert data == {"ok": 1}
        assert client.request.await_count == 2

    @pytest.mark.asyncio
    async def test_rate_limit_exhausted(self) -> None:
        client = AsyncMock()
        client.request = AsyncMock(return_value=make_response({}, 429))

        with pytest.raises(ProviderRateLimitError):
            await send_with_retry(client, "GET", "/x", source="test", policy=NO_WAIT)
        assert client.request.await_count == 3

    @pytest.mark.asyncio
    async def test_timeout_exhausted(self) -> None:
        client = AsyncMock()
        client.request = AsyncMock(side_effect=httpx.ConnectTimeout("slow"))

        with pytest.raises(ProviderTimeoutError):
            await send_with_retry(client, "GET", "/x", source="test", policy=NO_WAIT)
        assert client.request.await_count == 3

    @pytest.mark.asyncio
    async def test_server_error_retried(self) -> None:
        client = AsyncMock()
        client.request = AsyncMock(side_effect=[make_response({}, 503), make_response([1, 2])])

        assert await send_with_retry(client, "GET", "/x", source="test", policy=NO_WAIT) == [1, 2]

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self) -> None:
        client = AsyncMock()
        client.request = AsyncMock(return_value=make_response({}, 404))

        with pytest.raises(ProviderHTTPError) as exc:
            await send_with_retry(client, "GET", "/x", source="test", policy=NO_WAIT)
        assert exc.value.status_code == 404
        assert client.request.await_count == 1

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        resp = make_response(None)
        resp.json.side_effect = ValueError("bad json")
        client = AsyncMock()
        client.request = AsyncMock(return_value=resp)

        with pytest.raises(ProviderPayloadError):
            await send_with_retry(client, "GET", "/x", source="test", policy=NO_WAIT)

    @pytest.mark.asyncio
    async def test_sleeps_with_policy_delays(self) -> None:
        client = AsyncMock()
        client.request = AsyncMock(
            side_effect=[httpx.ReadTimeout("t"), httpx.ReadTimeout("t"), make_response({})]
        )
        policy = RetryPolicy(base_delay=1.0, max_delay=8.0)

        with patch("src.parsers.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            await send_with_retry(client, "GET", "/x", source="test", policy=policy)

        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]
