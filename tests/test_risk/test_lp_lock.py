"""Tests for the LP-lock estimate."""

from datetime import timedelta

from src.risk.lp_lock import lp_lock_risk
from tests.conftest import NOW, make_pool


def test_established_deep_pool():
    sub = lp_lock_risk(make_pool(), NOW)

    assert sub.score == 20
    assert sub.details["estimated"] is True
    assert sub.details["likely_locked"] is True
    assert sub.factors[0].name == "lp_lock_unverified"


def test_always_flagged_as_estimate():
    sub = lp_lock_risk(make_pool(liquidity_usd=5_000_000.0), NOW)
    assert any(f.name == "lp_lock_unverified" for f in sub.factors)


def test_small_fresh_pool():
    sub = lp_lock_risk(make_pool(liquidity_usd=5_000.0, volume_h24=5_000.0, pair_created_at=NOW - timedelta(hours=2)), NOW)

    assert sub.score == 70
    assert sub.details["likely_locked"] is False


def test_churning_pool():
    sub = lp_lock_risk(make_pool(liquidity_usd=60_000.0, volume_h24=900_000.0), NOW)
    assert sub.score == 35
    assert "lp_churn" in [f.name for f in sub.factors]


def test_unknown_age():
    assert lp_lock_risk(make_pool(pair_created_at=None), NOW).score == 35


def test_missing_pool():
    sub = lp_lock_risk(None, NOW)
    assert sub.score == 100
    assert not sub.data_backed
