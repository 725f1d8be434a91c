"""Tests for Raydium pool lookup client."""

from unittest.mock import AsyncMock

import pytest

from src.parsers.exceptions import ProviderPayloadError
from src.parsers.raydium.client import RaydiumClient, _parse_pool
from src.parsers.retry import NO_WAIT
from tests.conftest import make_response


def _client(body) -> RaydiumClient:
    client = RaydiumClient(max_rps=100.0, retry_policy=NO_WAIT)
    client._client = AsyncMock()
    client._client.request = AsyncMock(return_value=make_response(body))
    return client


class TestParsePool:
    def test_full_pool(self) -> None:
        pool = _parse_pool({
            "data": {
                "data": [
                    {
                        "id": "pool123",
                        "mintA": {"address": "TokenMint", "symbol": "TKN", "name": "Token"},
                        "mintB": {"address": "SOLMint"},
                        "price": "0.002",
                        "tvl": 50000,
                        "openTime": "1700000000",
                        "burnPercent": 85.5,
                        "day": {"volume": 12000, "priceChangePercent": -12.5},
                    }
                ]
            }
        })

        assert pool is not None
        assert pool.pool_id == "pool123"
        assert pool.base_symbol == "TKN"
        assert pool.tvl == 50000.0
        assert pool.volume_24h == 12000.0
        assert pool.price_change_24h == -12.5
        assert pool.open_time == 1700000000

    def test_missing_optional_fields(self) -> None:
        pool = _parse_pool({"data": {"data": [{"id": "p", "tvl": ""}]}})
        assert pool.tvl is None
        assert pool.open_time is None
        assert pool.base_mint == ""


class TestRaydiumClient:
    @pytest.mark.asyncio
    async def test_pool_found(self) -> None:
        client = _client({"data": {"data": [{"id": "pool123", "tvl": 1000}]}})

        pool = await client.get_pool_info("TokenMint")

        assert pool.pool_id == "pool123"
        kwargs = client._client.request.await_args.kwargs
        assert kwargs["params"]["mint1"] == "TokenMint"

    @pytest.mark.asyncio
    async def test_no_pool(self) -> None:
        client = _client({"data": {"data": []}})
        assert await client.get_pool_info("TokenMint") is None

    @pytest.mark.asyncio
    async def test_non_object_body(self) -> None:
        client = _client([])
        with pytest.raises(ProviderPayloadError):
            await client.get_pool_info("TokenMint")
