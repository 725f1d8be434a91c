"""End-to-end tests for the analysis pipeline with stubbed sources."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.analysis.pipeline import (
    ERROR_INTERNAL,
    ERROR_MISSING_ADDRESS,
    ERROR_NOT_FOUND,
    KNOWLEDGE_BASE_SOURCE,
    AnalysisPipeline,
)
from src.risk.models import RiskLevel
from src.routing.capabilities import Capability
from src.routing.router import NO_SOURCE, SourceRouter
from src.routing.usage_tracker import UsageTracker
from tests.conftest import (
    MINT,
    NOW,
    FakeAdapter,
    clean_security,
    failing_adapter,
    make_holders,
    make_metadata,
    make_pool,
    spread_holders,
)


def _pipeline(*adapters, usage: UsageTracker | None = None, **kwargs) -> AnalysisPipeline:
    router = SourceRouter(list(adapters), usage or UsageTracker(), timeout_sec=5.0)
    return AnalysisPipeline(router, clock=lambda: NOW, **kwargs)


def _healthy_sources(pool=None, holders=None) -> list[FakeAdapter]:
    pool = pool or make_pool()
    return [
        FakeAdapter("jupiter", {Capability.TOKEN_METADATA: make_metadata()}),
        FakeAdapter("dexscreener", {Capability.POOL_DATA: pool}),
        FakeAdapter("solana_rpc", {Capability.HOLDER_DATA: holders or spread_holders()}),
        FakeAdapter("goplus", {Capability.SECURITY: clean_security()}),
    ]


class TestTokenAssessment:
    @pytest.mark.asyncio
    async def test_healthy_token(self) -> None:
        result = await _pipeline(*_healthy_sources()).run_analysis(f"risk score for {MINT}")

        assert result.success
        assert result.intent == "risk_scoring"
        assert result.source == "dexscreener"
        assert result.fallback_used is False
        assert result.data.risk_level == RiskLevel.LOW
        assert result.sources == {
            "pool_data": "dexscreener",
            "token_metadata": "jupiter",
            "holder_data": "solana_rpc",
            "security": "goplus",
        }
        assert "Risk Score" in result.response

    @pytest.mark.asyncio
    async def test_thin_brand_new_pool_is_extreme(self) -> None:
        pool = make_pool(liquidity_usd=800.0, volume_h24=50_000.0, pair_created_at=NOW - timedelta(hours=12))

        result = await _pipeline(*_healthy_sources(pool=pool)).run_analysis(f"risk score for {MINT}")

        assert result.data.risk_level == RiskLevel.EXTREME
        assert result.data.details["rug_heuristic"]["age_band"] == "very_new"

    @pytest.mark.asyncio
    async def test_concentrated_holders_are_extreme(self) -> None:
        sources = _healthy_sources(holders=make_holders([8.5] * 10))

        result = await _pipeline(*sources).run_analysis(f"holder distribution of {MINT}")

        assert result.intent == "holder_analysis"
        assert dict(result.data.sub_scores)["concentration"] >= 90
        assert result.data.risk_level == RiskLevel.EXTREME

    @pytest.mark.asyncio
    async def test_rug_question(self) -> None:
        result = await _pipeline(*_healthy_sources()).run_analysis(f"Is this a rug? {MINT}")

        assert result.success
        assert result.intent == "rug_pull_detection"
        assert "lp_lock" in dict(result.data.sub_scores)
        assert "estimate" in result.response

    @pytest.mark.asyncio
    async def test_honeypot_check(self) -> None:
        sources = _healthy_sources()
        sources[3] = FakeAdapter("goplus", {Capability.SECURITY: clean_security(is_honeypot=True)})

        result = await _pipeline(*sources).run_analysis(f"honeypot? {MINT}")

        assert result.data.risk_level == RiskLevel.HONEYPOT
        assert result.source == "goplus"

    @pytest.mark.asyncio
    async def test_fallback_flag_propagates(self) -> None:
        sources = _healthy_sources()
        sources[1] = failing_adapter("dexscreener")
        sources.append(FakeAdapter("raydium", {Capability.POOL_DATA: make_pool(dex="raydium")}))

        result = await _pipeline(*sources).run_analysis(f"risk score for {MINT}")

        assert result.success
        assert result.source == "raydium"
        assert result.fallback_used is True

    @pytest.mark.asyncio
    async def test_optional_source_missing_assumes_worst(self) -> None:
        full = await _pipeline(*_healthy_sources()).run_analysis(f"risk score for {MINT}")
        sources = [s for s in _healthy_sources() if s.name != "goplus"]

        partial = await _pipeline(*sources).run_analysis(f"risk score for {MINT}")

        assert partial.success
        assert partial.data.overall_score > full.data.overall_score
        assert partial.data.details["honeypot"]["sell_verified"] is False
        assert partial.sources["security"] == NO_SOURCE
        assert partial.fallback_used is True

    @pytest.mark.asyncio
    async def test_all_sources_fail(self) -> None:
        adapters = [failing_adapter(n) for n in ("dexscreener", "raydium", "solana_rpc", "helius", "birdeye")]

        result = await _pipeline(*adapters).run_analysis(f"Is this a rug? {MINT}")

        assert result.success is False
        assert result.source == NO_SOURCE
        assert result.fallback_used is True
        assert result.error_code == ERROR_NOT_FOUND
        assert MINT in result.response

    @pytest.mark.asyncio
    async def test_missing_address(self) -> None:
        result = await _pipeline(*_healthy_sources()).run_analysis("is this a rug?")

        assert result.success is False
        assert result.error_code == ERROR_MISSING_ADDRESS
        assert "token address" in result.response

    @pytest.mark.asyncio
    async def test_quota_limited_sources_disabled(self) -> None:
        birdeye = FakeAdapter("birdeye", {Capability.POOL_DATA: make_pool()})

        result = await _pipeline(birdeye).run_analysis(f"risk score for {MINT}", allow_quota_limited_sources=False)

        assert result.success is False
        assert birdeye.calls == []

    @pytest.mark.asyncio
    async def test_quota_limited_source_counted(self) -> None:
        usage = UsageTracker()
        birdeye = FakeAdapter("birdeye", {Capability.POOL_DATA: make_pool()})

        result = await _pipeline(birdeye, usage=usage).run_analysis(f"lp lock status {MINT}")

        assert result.success
        assert result.source == "birdeye"
        assert usage.get_usage("birdeye") == 1


class TestOtherIntents:
    @pytest.mark.asyncio
    async def test_token_metadata(self) -> None:
        result = await _pipeline(*_healthy_sources()).run_analysis(f"name and symbol of {MINT}")

        assert result.intent == "token_metadata"
        assert result.data.symbol == "GOOD"
        assert "Verified: yes" in result.response

    @pytest.mark.asyncio
    async def test_educational(self) -> None:
        result = await _pipeline().run_analysis("teach me how to avoid a honeypot")

        assert result.success
        assert result.source == KNOWLEDGE_BASE_SOURCE
        assert result.data.key == "honeypot"

    @pytest.mark.asyncio
    async def test_trending(self) -> None:
        pools = [make_pool(address=f"Mint{i}", base_symbol=f"T{i}") for i in range(3)]
        dex = FakeAdapter("dexscreener", {Capability.TRENDING: pools})

        result = await _pipeline(dex).run_analysis("what's trending")

        assert result.intent == "trending_tokens"
        assert [r.pool.address for r in result.data] == ["Mint0", "Mint1", "Mint2"]
        assert result.to_dict()["data"][0]["pool"]["address"] == "Mint0"

    @pytest.mark.asyncio
    async def test_new_tokens_filtered_by_age(self) -> None:
        pools = [
            make_pool(address="Fresh", pair_created_at=NOW - timedelta(hours=2)),
            make_pool(address="Old"),
            make_pool(address="Unknown", pair_created_at=None),
        ]
        dex = FakeAdapter("dexscreener", {Capability.NEW_PAIRS: pools})

        result = await _pipeline(dex).run_analysis("new tokens just launched")

        assert result.intent == "new_token_detection"
        assert [r.pool.address for r in result.data] == ["Fresh"]

    @pytest.mark.asyncio
    async def test_scan_limit(self) -> None:
        pools = [make_pool(address=f"Mint{i}") for i in range(5)]
        dex = FakeAdapter("dexscreener", {Capability.TRENDING: pools})

        result = await _pipeline(dex, scan_limit=2).run_analysis("trending tokens")

        assert len(result.data) == 2

    @pytest.mark.asyncio
    async def test_market_scan_not_found(self) -> None:
        result = await _pipeline(failing_adapter("dexscreener")).run_analysis("what's trending")

        assert result.success is False
        assert result.error_code == ERROR_NOT_FOUND


class TestFailureBoundary:
    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self) -> None:
        router = MagicMock()
        router.resolve = AsyncMock(side_effect=RuntimeError("boom"))

        result = await AnalysisPipeline(router, clock=lambda: NOW).run_analysis(f"risk score for {MINT}")

        assert result.success is False
        assert result.error_code == ERROR_INTERNAL
        assert result.error == "RuntimeError"
        assert "boom" not in result.response

    @pytest.mark.asyncio
    async def test_result_dict_shape(self) -> None:
        result = await _pipeline(*_healthy_sources()).run_analysis(f"risk score for {MINT}")
        data = result.to_dict()

        assert set(data) >= {"success", "response", "data", "source", "fallbackUsed", "error"}
        assert data["data"]["risk_level"] == "LOW"

    @pytest.mark.asyncio
    async def test_close(self) -> None:
        sources = _healthy_sources()
        await _pipeline(*sources).close()
        assert all(s.closed for s in sources)
