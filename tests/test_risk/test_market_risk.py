"""Tests for liquidity, volatility and rug heuristic calculators."""

from datetime import timedelta

import pytest

from src.risk.market import age_band, liquidity_risk, rug_heuristic_risk, volatility_risk
from src.risk.models import RiskCategory
from tests.conftest import NOW, make_pool


def _names(sub) -> list[str]:
    return [f.name for f in sub.factors]


class TestLiquidityRisk:
    def test_deep_pool(self) -> None:
        sub = liquidity_risk(make_pool())
        assert sub.score == 0
        assert sub.factors == ()
        assert sub.data_backed

    def test_lowest_band_with_extreme_turnover(self) -> None:
        sub = liquidity_risk(make_pool(liquidity_usd=800.0, volume_h24=50_000.0))

        assert sub.score == 90
        assert _names(sub) == ["liquidity_below_1k", "volume_liquidity_extreme"]

    @pytest.mark.parametrize(
        "liquidity,expected",
        [(3_000.0, 45), (20_000.0, 30), (80_000.0, 15), (300_000.0, 5), (600_000.0, 0)],
    )
    def test_bands(self, liquidity: float, expected: int) -> None:
        sub = liquidity_risk(make_pool(liquidity_usd=liquidity, volume_h24=liquidity))
        assert sub.score == expected

    def test_bands_decrease_with_depth(self) -> None:
        scores = [
            liquidity_risk(make_pool(liquidity_usd=liq, volume_h24=None)).score
            for liq in (500.0, 2_000.0, 10_000.0, 50_000.0, 200_000.0, 1_000_000.0)
        ]
        assert scores == sorted(scores, reverse=True)

    def test_dead_pool(self) -> None:
        sub = liquidity_risk(make_pool(liquidity_usd=200_000.0, volume_h24=1_000.0))
        assert sub.score == 20
        assert "dead_pool" in _names(sub)

    def test_empty_pool(self) -> None:
        sub = liquidity_risk(make_pool(liquidity_usd=0.0))
        assert sub.score == 100

    def test_missing_pool(self) -> None:
        sub = liquidity_risk(None)
        assert sub.score == 100
        assert sub.data_backed is False
        assert _names(sub) == ["liquidity_data_unavailable"]


class TestVolatilityRisk:
    def test_calm_market(self) -> None:
        assert volatility_risk(make_pool()).score == 0

    def test_all_windows_extreme(self) -> None:
        sub = volatility_risk(make_pool(price_change_h1=25.0, price_change_h6=60.0, price_change_h24=120.0))
        assert sub.score == 90
        assert _names(sub) == ["volatile_1h_extreme", "volatile_6h_extreme", "volatile_24h_extreme"]

    def test_negative_moves_count(self) -> None:
        sub = volatility_risk(make_pool(price_change_h24=-60.0))
        assert sub.score == 25

    def test_movement_without_trades(self) -> None:
        pool = make_pool(
            price_change_h1=15.0, price_change_h6=None, price_change_h24=None, buys_h24=2, sells_h24=1
        )
        sub = volatility_risk(pool)
        assert sub.score == 45
        assert "movement_without_trades" in _names(sub)

    def test_thin_trading(self) -> None:
        sub = volatility_risk(make_pool(price_change_h24=30.0, buys_h24=10, sells_h24=5))
        assert sub.score == 30

    def test_missing_history(self) -> None:
        sub = volatility_risk(make_pool(price_change_h1=None, price_change_h6=None, price_change_h24=None))
        assert sub.score == 100
        assert not sub.data_backed


class TestRugHeuristic:
    def test_established_pool(self) -> None:
        assert rug_heuristic_risk(make_pool(), NOW).score == 0

    def test_fresh_thin_pool(self) -> None:
        pool = make_pool(liquidity_usd=800.0, volume_h24=50_000.0, pair_created_at=NOW - timedelta(hours=12))
        sub = rug_heuristic_risk(pool, NOW)

        assert sub.score == 75
        assert sub.details["age_band"] == "very_new"
        assert sub.category == RiskCategory.SECURITY

    def test_unknown_age(self) -> None:
        sub = rug_heuristic_risk(make_pool(pair_created_at=None), NOW)
        assert sub.score == 20
        assert _names(sub) == ["pair_age_unknown"]

    def test_price_collapse(self) -> None:
        assert rug_heuristic_risk(make_pool(price_change_h24=-60.0), NOW).score == 25

    def test_one_sided_flow(self) -> None:
        sub = rug_heuristic_risk(make_pool(buys_h24=50, sells_h24=0), NOW)
        assert _names(sub) == ["one_sided_flow"]

    def test_sell_imbalance(self) -> None:
        sub = rug_heuristic_risk(make_pool(buys_h24=10, sells_h24=50), NOW)
        assert sub.score == 15

    def test_few_trades_ignored(self) -> None:
        assert rug_heuristic_risk(make_pool(buys_h24=5, sells_h24=0), NOW).score == 0

    def test_missing_pool(self) -> None:
        sub = rug_heuristic_risk(None, NOW)
        assert sub.score == 100
        assert not sub.data_backed


@pytest.mark.parametrize(
    "hours,band",
    [(None, "unknown"), (0.5, "brand_new"), (12, "very_new"), (48, "new"), (100, "recent"), (500, "established")],
)
def test_age_band(hours, band):
    assert age_band(hours) == band
