"""Tests for Jupiter token registry client."""

from unittest.mock import AsyncMock

import pytest

from src.parsers.exceptions import ProviderPayloadError
from src.parsers.jupiter.client import AUTH_URL, LITE_URL, JupiterClient
from src.parsers.jupiter.models import JupiterToken
from src.parsers.retry import NO_WAIT
from tests.conftest import make_response


def _client(body, api_key: str = "") -> JupiterClient:
    client = JupiterClient(api_key=api_key, max_rps=100.0, retry_policy=NO_WAIT)
    client._client = AsyncMock()
    client._client.request = AsyncMock(return_value=make_response(body))
    return client


def test_verified_flag():
    assert JupiterToken(id="m", isVerified=True).verified is True


def test_verified_via_tag():
    assert JupiterToken(id="m", tags=["strict"]).verified is True


def test_unverified():
    assert JupiterToken(id="m", tags=["community"]).verified is False


@pytest.mark.asyncio
async def test_search_exact_match():
    client = _client([
        {"id": "OtherMint", "symbol": "OTH"},
        {"id": "MintA", "name": "Alpha", "symbol": "ALP", "decimals": 6, "isVerified": True},
    ])

    token = await client.search_token("MintA")

    assert token is not None
    assert token.symbol == "ALP"
    assert token.verified is True


@pytest.mark.asyncio
async def test_search_unknown_mint():
    client = _client([{"id": "OtherMint"}])
    assert await client.search_token("MintA") is None


@pytest.mark.asyncio
async def test_search_bad_body():
    client = _client({"error": "nope"})
    with pytest.raises(ProviderPayloadError):
        await client.search_token("MintA")


@pytest.mark.asyncio
async def test_gateway_selection():
    lite = _client([])
    await lite.search_token("MintA")
    assert lite._client.request.await_args.args[1].startswith(LITE_URL)

    keyed = _client([], api_key="k")
    await keyed.search_token("MintA")
    assert keyed._client.request.await_args.args[1].startswith(AUTH_URL)
