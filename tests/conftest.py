"""Shared test builders and fakes."""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from src.parsers.exceptions import ProviderEmptyError, ProviderTimeoutError
from src.routing.capabilities import QUOTA_LIMITED_SOURCES, Capability
from src.routing.payloads import HolderBalance, HolderData, PoolData, SecurityData, TokenMetadata

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
MINT = "7GCihgDB8fe6KNjn2MYtkzZcRjQy3t9GHdC8uHYmW2hr"
WALLET = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


def make_response(body, status_code: int = 200, headers: dict | None = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.headers = headers or {}
    resp.json.return_value = body
    return resp


def make_pool(**overrides) -> PoolData:
    """A healthy, established pool; override fields per test."""
    fields = dict(
        address=MINT,
        pair_address="PAIR1",
        dex="raydium",
        base_symbol="GOOD",
        base_name="Good Token",
        price_usd=0.5,
        liquidity_usd=750_000.0,
        market_cap=5_000_000.0,
        volume_h1=20_000.0,
        volume_h6=120_000.0,
        volume_h24=480_000.0,
        price_change_h1=1.0,
        price_change_h6=2.0,
        price_change_h24=3.0,
        buys_h24=900,
        sells_h24=850,
        pair_created_at=NOW - timedelta(days=90),
    )
    fields.update(overrides)
    return PoolData(**fields)


def make_holders(shares: list[float], total_holders: int | None = 10_000, supply: float = 1_000_000.0) -> HolderData:
    """Holders with the given percentage shares of ``supply``."""
    holders = tuple(
        HolderBalance(owner=f"holder{i}", balance=supply * pct / 100) for i, pct in enumerate(shares)
    )
    return HolderData(address=MINT, holders=holders, total_holders=total_holders, supply=supply)


def spread_holders() -> HolderData:
    """Top 10 own ~15% of supply, no dominant wallet."""
    return make_holders([1.5] * 10 + [1.0] * 10)


def make_metadata(**overrides) -> TokenMetadata:
    fields = dict(address=MINT, name="Good Token", symbol="GOOD", decimals=6, verified=True)
    fields.update(overrides)
    return TokenMetadata(**fields)


def clean_security(**overrides) -> SecurityData:
    fields = dict(
        address=MINT,
        is_honeypot=False,
        buy_tax=0.0,
        sell_tax=0.0,
        transfer_fee_pct=0.0,
        trading_disabled=False,
        selling_disabled=False,
        transfer_pausable=False,
        trading_cooldown=False,
        anti_whale=False,
        blacklist_enabled=False,
        mintable=False,
        balance_mutable=False,
    )
    fields.update(overrides)
    return SecurityData(**fields)


class FakeAdapter:
    """Adapter stub: returns canned payloads or raises per capability."""

    def __init__(self, name: str, responses: dict | None = None, fail: Exception | None = None) -> None:
        self.name = name
        self.quota_limited = name in QUOTA_LIMITED_SOURCES
        self._responses = responses or {}
        self._fail = fail
        self.capabilities = frozenset(Capability)
        self.calls: list[tuple[Capability, str]] = []
        self.costs: dict[Capability, int] = {}
        self.closed = False

    def request_cost(self, capability: Capability) -> int:
        return self.costs.get(capability, 1)

    async def fetch(self, capability: Capability, subject_id: str):
        self.calls.append((capability, subject_id))
        if self._fail is not None:
            raise self._fail
        if capability not in self._responses:
            raise ProviderEmptyError(self.name, f"no {capability}")
        return self._responses[capability]

    async def close(self) -> None:
        self.closed = True


def failing_adapter(name: str) -> FakeAdapter:
    return FakeAdapter(name, fail=ProviderTimeoutError(name, "connect timeout"))


@pytest.fixture
def now() -> datetime:
    return NOW
