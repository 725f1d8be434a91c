"""Tests for provider-to-canonical normalization."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from src.parsers.birdeye.models import BirdeyeHolder, BirdeyeMarketToken, BirdeyeTokenSecurity
from src.parsers.dexscreener.models import DexScreenerPair
from src.parsers.goplus.models import GoPlusReport
from src.parsers.raydium.models import RaydiumPoolInfo
from src.parsers.solana_rpc.models import TokenAccountBalance, TokenSupply
from src.routing import normalize


def _pair(liquidity: float, **extra) -> DexScreenerPair:
    return DexScreenerPair.model_validate({
        "pairAddress": f"P{liquidity}",
        "dexId": "raydium",
        "baseToken": {"address": "MintA", "name": "Alpha", "symbol": "ALP"},
        "liquidity": {"usd": liquidity},
        **extra,
    })


class TestDexScreener:
    def test_pool_fields(self) -> None:
        pair = _pair(
            25000,
            priceUsd="0.01",
            volume={"h1": 100, "h24": 5000},
            priceChange={"h1": -3, "h24": 12},
            txns={"h1": {"buys": 4, "sells": 1}, "h24": {"buys": 60, "sells": 40}},
            pairCreatedAt=1_700_000_000_000,
        )

        pool = normalize.pool_from_dexscreener(pair)

        assert pool.address == "MintA"
        assert pool.liquidity_usd == 25000.0
        assert pool.volume_h24 == 5000.0
        assert pool.price_change_h1 == -3.0
        assert pool.txns_h24 == 100
        assert pool.pair_created_at == datetime.fromtimestamp(1_700_000_000, tz=UTC)

    def test_missing_windows_stay_none(self) -> None:
        pool = normalize.pool_from_dexscreener(_pair(1000))
        assert pool.volume_h24 is None
        assert pool.price_change_h24 is None
        assert pool.txns_h24 is None

    def test_fdv_fallback_for_market_cap(self) -> None:
        pool = normalize.pool_from_dexscreener(_pair(1000, fdv=123456))
        assert pool.market_cap == 123456.0

    def test_deepest_pair(self) -> None:
        pairs = [_pair(1000), _pair(90000), _pair(500)]
        assert normalize.deepest_pair(pairs).pairAddress == "P90000"
        assert normalize.deepest_pair([]) is None


class TestRaydium:
    def test_open_time_seconds(self) -> None:
        pool = normalize.pool_from_raydium(
            RaydiumPoolInfo(pool_id="p", tvl=5000.0, open_time=1_700_000_000), "MintA"
        )
        assert pool.address == "MintA"
        assert pool.liquidity_usd == 5000.0
        assert pool.pair_created_at.year == 2023


class TestBirdeye:
    def test_security_flags(self) -> None:
        sec = normalize.security_from_birdeye(
            BirdeyeTokenSecurity(freezeAuthority="F", nonTransferable=True, transferFeeEnable=False), "MintA"
        )
        assert sec.blacklist_enabled is True
        assert sec.selling_disabled is True
        assert sec.mintable is False
        assert sec.transfer_fee_pct == 0.0
        assert sec.is_honeypot is None

    def test_holders_sorted(self) -> None:
        data = normalize.holders_from_birdeye(
            [BirdeyeHolder(owner="A", ui_amount=Decimal(5)), BirdeyeHolder(owner="B", ui_amount=Decimal(50))],
            "MintA",
        )
        assert [h.owner for h in data.holders] == ["B", "A"]
        assert data.total_holders is None

    def test_market_listing_time(self) -> None:
        pool = normalize.pool_from_birdeye_market(
            BirdeyeMarketToken(address="MintA", liquidityAddedAt="2026-03-01T10:00:00")
        )
        assert pool.pair_created_at == datetime(2026, 3, 1, 10, tzinfo=UTC)

    def test_market_bad_timestamp(self) -> None:
        pool = normalize.pool_from_birdeye_market(BirdeyeMarketToken(address="MintA", liquidityAddedAt="later"))
        assert pool.pair_created_at is None


class TestGoPlus:
    def test_combined_flags(self) -> None:
        sec = normalize.security_from_goplus(
            GoPlusReport(cannot_sell_all=False, non_transferable=True, is_freezable=None, is_blacklisted=None),
            "MintA",
        )
        assert sec.selling_disabled is True
        assert sec.blacklist_enabled is None


class TestHoldersFromAccounts:
    def test_merges_accounts_by_owner(self) -> None:
        accounts = [
            TokenAccountBalance(address="acc1", owner="W1", amount=Decimal(30)),
            TokenAccountBalance(address="acc2", owner="W2", amount=Decimal(50)),
            TokenAccountBalance(address="acc3", owner="W1", amount=Decimal(40)),
        ]

        data = normalize.holders_from_accounts(
            accounts, "MintA", supply=TokenSupply(amount=Decimal(1000)), total_holders=3
        )

        assert [(h.owner, h.balance) for h in data.holders] == [("W1", 70.0), ("W2", 50.0)]
        assert data.supply == 1000.0
        assert data.total_holders == 3
        assert data.share_pct(70.0) == pytest.approx(7.0)

    def test_without_supply_uses_sum(self) -> None:
        data = normalize.holders_from_accounts(
            [TokenAccountBalance(address="a", amount=Decimal(25)), TokenAccountBalance(address="b", amount=Decimal(75))],
            "MintA",
        )
        assert data.effective_supply == 100.0
        assert data.share_pct(75.0) == 75.0
