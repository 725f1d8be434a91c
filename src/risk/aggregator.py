"""Composite risk assessment from independent sub-scores.

The overall score is a weighted mean of sub-scores, weighted either by risk
category or by calculator name depending on the intent. The risk tier is the
highest of three independent escalations:

* score bands (>=80 EXTREME, >=60 HIGH, >=35 MEDIUM)
* factor count (>8 EXTREME, >6 HIGH, >3 MEDIUM)
* any data-backed sub-score at or above ``CRITICAL_SUBSCORE``

Honeypot checks use the sellability tiers (SAFE / SUSPICIOUS / HONEYPOT) from
score bands alone. Recommendations are tier boilerplate followed by one line
per matching rule in ``FACTOR_RECOMMENDATIONS``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from src.risk.models import (
    RISK_TIERS,
    CompositeRiskAssessment,
    RiskCategory,
    RiskFactor,
    RiskLevel,
    SubScore,
    clamp_score,
)

CRITICAL_SUBSCORE = 90

CATEGORY_WEIGHTS: dict[RiskCategory, float] = {
    RiskCategory.SECURITY: 0.35,
    RiskCategory.MARKET: 0.25,
    RiskCategory.TOKENOMICS: 0.25,
    RiskCategory.COMMUNITY: 0.10,
    RiskCategory.TECHNICAL: 0.05,
}


@dataclass(frozen=True)
class WeightScheme:
    by_category: Mapping[RiskCategory, float] | None = None
    by_name: Mapping[str, float] = field(default_factory=dict)
    sellability: bool = False

    def includes(self, sub: SubScore) -> bool:
        if self.by_category is not None:
            return sub.category in self.by_category
        return sub.name in self.by_name


CATEGORY_SCHEME = WeightScheme(by_category=CATEGORY_WEIGHTS)

INTENT_WEIGHTS: dict[str, WeightScheme] = {
    "risk_scoring": CATEGORY_SCHEME,
    "token_analysis": CATEGORY_SCHEME,
    "rug_pull_detection": WeightScheme(
        by_name={
            "dev_wallet": 0.25,
            "lp_lock": 0.20,
            "volatility": 0.20,
            "rug_heuristic": 0.20,
            "concentration": 0.15,
        }
    ),
    "holder_analysis": WeightScheme(
        by_name={"concentration": 0.4, "whale_influence": 0.3, "holder_count": 0.3}
    ),
    "whale_tracking": WeightScheme(
        by_name={"whale_influence": 0.5, "concentration": 0.3, "dev_wallet": 0.2}
    ),
    "lp_lock_check": WeightScheme(by_name={"lp_lock": 0.7, "liquidity": 0.3}),
    "honeypot_detection": WeightScheme(by_name={"honeypot": 1.0}, sellability=True),
    "new_token_detection": WeightScheme(by_name={"launch_quality": 0.6, "rug_heuristic": 0.4}),
    "volume_spike_detection": WeightScheme(by_name={"volume_spike": 0.7, "liquidity": 0.3}),
    "trending_tokens": WeightScheme(
        by_name={"rug_heuristic": 0.5, "liquidity": 0.3, "volatility": 0.2}
    ),
}

TIER_RECOMMENDATIONS: dict[RiskLevel, tuple[str, ...]] = {
    RiskLevel.EXTREME: (
        "Avoid this token: several critical risk signals are present.",
        "Only risk funds you are fully prepared to lose.",
    ),
    RiskLevel.HIGH: (
        "High risk: if you trade it at all, keep the position very small.",
        "Set a stop loss and watch liquidity closely.",
    ),
    RiskLevel.MEDIUM: (
        "Moderate risk: do more research before investing.",
        "Size positions conservatively.",
    ),
    RiskLevel.LOW: (
        "No major red flags found, but always do your own research.",
    ),
    RiskLevel.HONEYPOT: (
        "Do not buy: this token shows honeypot characteristics.",
    ),
    RiskLevel.SUSPICIOUS: (
        "Sellability is questionable: test with a very small amount first.",
    ),
    RiskLevel.SAFE: (
        "No sell restrictions were reported for this token.",
    ),
}

# (factor-name prefixes, recommendation); applied in order, each at most once
FACTOR_RECOMMENDATIONS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("buy_test_failed", "sell_test_failed"), "Trading restrictions detected: selling may be blocked."),
    (("sell_unverified",), "Sell restrictions could not be checked; confirm with a small test sell."),
    (("blacklist_function",), "The owner can freeze or blacklist wallets."),
    (("sell_restriction", "contract_restrictions"), "Review taxes, pauses and fees in the contract before trading."),
    (("price_collapse",), "Price is collapsing; liquidity may already be leaving."),
    (("liquidity_empty", "liquidity_below_1k", "liquidity_below_5k", "rug_low_liquidity", "lp_negligible"),
     "Liquidity is very low: expect heavy slippage and a risk of the pool being pulled."),
    (("lp_lock_unverified",), "Confirm the LP lock on a locker service; lock status here is an estimate."),
    (("volume_liquidity_extreme", "volume_liquidity_high", "rug_abnormal_turnover", "spike_wash_trading"),
     "Volume far exceeds liquidity; treat it as possible wash trading."),
    (("dead_pool",), "The pool is barely traded; exiting a position may be hard."),
    (("pair_brand_new", "pair_very_new", "lp_fresh_pool"), "Very new token: wait for trading history before entering."),
    (("top10_concentration", "dev_wallets_share", "single_wallet_dominant", "whales_"),
     "Supply is concentrated; a few wallets can crash the price."),
    (("volatile_", "movement_without_trades", "spike_"), "Price is highly volatile: use small positions and stop losses."),
    (("one_sided_flow", "buy_imbalance", "sell_imbalance"), "Order flow is lopsided; watch for coordinated buying or dumping."),
    (("holders_very_few", "holders_few"), "The holder base is small and unproven."),
    (("launch_",), "Launch metrics are weak; treat early price action with caution."),
    (("token_unverified", "token_unnamed", "token_no_symbol"), "Token is not verified; double-check the mint address."),
    (("_data_unavailable",), "Some data was unavailable; those checks assume the worst case."),
)


def _matches(factor: RiskFactor, prefixes: tuple[str, ...]) -> bool:
    return any(factor.name.startswith(p) or factor.name.endswith(p) for p in prefixes)


def score_tier(score: int) -> int:
    if score >= 80:
        return 3
    if score >= 60:
        return 2
    if score >= 35:
        return 1
    return 0


def factor_count_tier(count: int) -> int:
    if count > 8:
        return 3
    if count > 6:
        return 2
    if count > 3:
        return 1
    return 0


def sellability_level(score: int) -> RiskLevel:
    if score >= 80:
        return RiskLevel.HONEYPOT
    if score >= 20:
        return RiskLevel.SUSPICIOUS
    return RiskLevel.SAFE


def weighted_score(scheme: WeightScheme, subs: list[SubScore]) -> int:
    if not subs:
        return 100
    if scheme.by_category is not None:
        by_category: dict[RiskCategory, list[int]] = {}
        for sub in subs:
            by_category.setdefault(sub.category, []).append(sub.score)
        total_weight = sum(scheme.by_category[c] for c in by_category)
        weighted = sum(scheme.by_category[c] * (sum(s) / len(s)) for c, s in by_category.items())
    else:
        total_weight = sum(scheme.by_name[s.name] for s in subs)
        weighted = sum(scheme.by_name[s.name] * s.score for s in subs)
    if total_weight <= 0:
        return 100
    return clamp_score(weighted / total_weight)


def confidence_for(factor_count: int, overall: int, missing_inputs: int) -> int:
    confidence = min(100, 50 + 10 * factor_count)
    if overall > 80:
        confidence = min(confidence, max(confidence - 20, 60))
    return clamp_score(confidence - 10 * missing_inputs)


def recommendations_for(level: RiskLevel, factors: tuple[RiskFactor, ...]) -> tuple[str, ...]:
    lines = list(TIER_RECOMMENDATIONS[level])
    for prefixes, text in FACTOR_RECOMMENDATIONS:
        if any(_matches(f, prefixes) for f in factors) and text not in lines:
            lines.append(text)
    return tuple(lines)


def aggregate(intent: str, sub_scores: Mapping[str, SubScore]) -> CompositeRiskAssessment:
    scheme = INTENT_WEIGHTS.get(str(intent), CATEGORY_SCHEME)
    subs = [sub for sub in sub_scores.values() if scheme.includes(sub)]

    overall = weighted_score(scheme, subs)
    indexed = [(factor, i) for i, factor in enumerate(f for sub in subs for f in sub.factors)]
    factors = tuple(f for f, _ in sorted(indexed, key=lambda pair: (-pair[0].score, pair[1])))

    if scheme.sellability:
        level = sellability_level(overall)
    else:
        tier = max(score_tier(overall), factor_count_tier(len(factors)))
        if any(sub.data_backed and sub.score >= CRITICAL_SUBSCORE for sub in subs):
            tier = 3
        level = RISK_TIERS[tier]

    missing = sum(1 for sub in subs if not sub.data_backed)
    return CompositeRiskAssessment(
        intent=str(intent),
        overall_score=overall,
        risk_level=level,
        factors=factors,
        recommendations=recommendations_for(level, factors),
        confidence=confidence_for(len(factors), overall, missing),
        sub_scores=tuple((sub.name, sub.score) for sub in subs),
        details={sub.name: sub.details for sub in subs if sub.details},
    )
