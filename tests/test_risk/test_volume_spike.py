"""Tests for volume-spike pattern detection."""

import pytest

from src.risk.volume_spike import (
    price_direction,
    spike_intensity,
    spike_level,
    volume_change_pct,
    volume_spike_risk,
)
from tests.conftest import make_pool


class TestHelpers:
    def test_volume_change(self) -> None:
        assert volume_change_pct(make_pool()) == pytest.approx(0.0)
        assert volume_change_pct(make_pool(volume_h1=60_000.0)) == pytest.approx(200.0)
        assert volume_change_pct(make_pool(volume_h1=None)) is None

    @pytest.mark.parametrize(
        "change,intensity",
        [(1500, 100), (600, 90), (300, 80), (150, 70), (60, 60), (30, 40), (15, 20), (5, 0), (-50, 0)],
    )
    def test_intensity(self, change: float, intensity: int) -> None:
        assert spike_intensity(change) == intensity

    def test_level(self) -> None:
        assert spike_level(95) == "MASSIVE"
        assert spike_level(70) == "LARGE"
        assert spike_level(0) == "NONE"

    def test_direction(self) -> None:
        assert price_direction(35.0) == "PUMP"
        assert price_direction(-35.0) == "DUMP"
        assert price_direction(5.0) == "STABLE"
        assert price_direction(None) == "UNKNOWN"


class TestVolumeSpikeRisk:
    def test_quiet_pool(self) -> None:
        sub = volume_spike_risk(make_pool())

        assert sub.score < 10
        assert sub.details["pattern"] == "NORMAL"
        assert sub.details["spike_level"] == "NONE"
        assert sub.factors == ()

    def test_organic_growth(self) -> None:
        sub = volume_spike_risk(make_pool(volume_h1=60_000.0))

        assert sub.details["spike_intensity"] == 70
        assert sub.details["pattern"] == "ORGANIC_GROWTH"
        assert "spike_intensity" in {f.name for f in sub.factors}

    def test_manipulated_pump(self) -> None:
        pool = make_pool(
            liquidity_usd=30_000.0,
            volume_h1=200_000.0,
            price_change_h1=30.0,
            price_change_h24=80.0,
        )
        sub = volume_spike_risk(pool)

        assert sub.details["pattern"] == "MANIPULATION"
        assert sub.score >= 80
        assert {f.name for f in sub.factors} == {
            "spike_intensity",
            "spike_with_pump",
            "spike_volatility",
            "spike_wash_trading",
            "spike_inconsistent",
        }

    def test_no_hourly_split(self) -> None:
        sub = volume_spike_risk(make_pool(volume_h1=None))
        assert sub.details["volume_change_pct"] is None
        assert sub.details["spike_intensity"] == 0

    def test_missing_volume(self) -> None:
        sub = volume_spike_risk(make_pool(volume_h24=None))
        assert sub.score == 100
        assert not sub.data_backed

    def test_medium_spike_with_high_turnover_is_explained(self) -> None:
        sub = volume_spike_risk(make_pool(volume_h1=32_000.0, volume_h24=480_000.0, liquidity_usd=70_000.0))

        assert sub.details["spike_level"] == "MEDIUM"
        assert [f.name for f in sub.factors] == ["spike_intensity", "spike_high_turnover"]
        assert "+60%" in sub.factors[0].description
        assert "6.9x" in sub.factors[1].description

    def test_unknown_liquidity_is_explained(self) -> None:
        sub = volume_spike_risk(make_pool(liquidity_usd=None))

        assert sub.score >= 25
        assert [f.name for f in sub.factors] == ["spike_turnover_unknown"]

    def test_price_swing_below_manipulation_threshold(self) -> None:
        sub = volume_spike_risk(make_pool(price_change_h1=10.0, price_change_h24=30.0))

        assert [f.name for f in sub.factors] == ["spike_price_swing"]

    def test_large_daily_volume_without_hourly_split(self) -> None:
        sub = volume_spike_risk(make_pool(volume_h1=None, volume_h24=2_000_000.0, liquidity_usd=1_000_000.0))

        assert sub.details["spike_level"] == "MEDIUM"
        assert "no hourly breakdown" in sub.factors[0].description
