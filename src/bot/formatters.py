"""Render pipeline results as HTML chat messages."""

import html

from src.intent.knowledge_base import Topic
from src.risk.models import CompositeRiskAssessment, RiskLevel
from src.routing.payloads import PoolData, TokenMetadata

LEVEL_EMOJI = {
    RiskLevel.LOW: "🟢",
    RiskLevel.MEDIUM: "🟡",
    RiskLevel.HIGH: "🟠",
    RiskLevel.EXTREME: "🔴",
    RiskLevel.SAFE: "🟢",
    RiskLevel.SUSPICIOUS: "🟡",
    RiskLevel.HONEYPOT: "🍯",
}

INTENT_TITLES = {
    "token_analysis": "Token Analysis",
    "risk_scoring": "Risk Score",
    "lp_lock_check": "LP Lock Check",
    "holder_analysis": "Holder Analysis",
    "rug_pull_detection": "Rug Pull Check",
    "honeypot_detection": "Honeypot Check",
    "whale_tracking": "Whale Tracking",
    "new_token_detection": "New Tokens",
    "volume_spike_detection": "Volume Spikes",
    "trending_tokens": "Trending Tokens",
    "token_metadata": "Token Info",
    "educational": "Guide",
}

MAX_LISTED_FACTORS = 6


def _money(value: float | None) -> str:
    return f"${value:,.0f}" if value is not None else "?"


def _pct(value: float | None) -> str:
    return f"{value:+.1f}%" if value is not None else "?"


def _label(symbol: str | None, address: str) -> str:
    return html.escape(symbol or f"{address[:8]}...")


def format_assessment(
    intent: str,
    address: str,
    assessment: CompositeRiskAssessment,
    *,
    metadata: TokenMetadata | None = None,
    pool: PoolData | None = None,
) -> str:
    symbol = (metadata.symbol if metadata else None) or (pool.base_symbol if pool else None)
    emoji = LEVEL_EMOJI.get(assessment.risk_level, "")
    lines = [
        f"<b>{INTENT_TITLES.get(intent, 'Analysis')}: {_label(symbol, address)}</b>",
        f"<code>{address}</code>",
        f"\n{emoji} <b>{assessment.risk_level}</b> risk score {assessment.overall_score}/100 "
        f"(confidence {assessment.confidence}%)",
    ]

    if pool is not None:
        lines.append(
            f"Liquidity: {_money(pool.liquidity_usd)} | Vol 24h: {_money(pool.volume_h24)} | "
            f"24h: {_pct(pool.price_change_h24)}"
        )

    lp = assessment.details.get("lp_lock")
    if lp:
        guess = "likely locked" if lp.get("likely_locked") else "likely unlocked"
        lines.append(f"LP lock: {guess} (estimate, not verified on-chain)")

    hp = assessment.details.get("honeypot")
    if hp:
        buy = "pass" if hp.get("buy_test") else "fail"
        sell = "pass" if hp.get("sell_test") else ("fail" if hp.get("sell_verified") else "unverified")
        lines.append(f"Buy test: {buy} | Sell test: {sell} (from contract flags, not simulated)")

    if assessment.factors:
        lines.append("\n<b>Risk factors</b>")
        for factor in assessment.factors[:MAX_LISTED_FACTORS]:
            lines.append(f"• {html.escape(factor.description)}")
        extra = len(assessment.factors) - MAX_LISTED_FACTORS
        if extra > 0:
            lines.append(f"• ...and {extra} more")

    lines.append("\n<b>Recommendations</b>")
    lines.extend(f"• {html.escape(line)}" for line in assessment.recommendations)
    return "\n".join(lines)


def format_metadata(metadata: TokenMetadata) -> str:
    lines = [f"<b>{_label(metadata.symbol, metadata.address)}</b>"]
    if metadata.name:
        lines.append(f"Name: {html.escape(metadata.name)}")
    lines.append(f"Address: <code>{metadata.address}</code>")
    if metadata.decimals is not None:
        lines.append(f"Decimals: {metadata.decimals}")
    lines.append(f"Verified: {'yes' if metadata.verified else 'no'}")
    return "\n".join(lines)


def format_market_scan(intent: str, rows: list[tuple[PoolData, CompositeRiskAssessment]], note: str = "") -> str:
    title = INTENT_TITLES.get(intent, "Market Scan")
    if not rows:
        return f"<b>{title}</b>\nNothing matched right now. {html.escape(note)}".strip()

    lines = [f"<b>{title}</b>"]
    if note:
        lines.append(html.escape(note))
    for i, (pool, assessment) in enumerate(rows, start=1):
        emoji = LEVEL_EMOJI.get(assessment.risk_level, "")
        extra = ""
        spike = assessment.details.get("volume_spike")
        launch = assessment.details.get("launch_quality")
        if spike:
            extra = f" | spike {spike.get('spike_level')} ({spike.get('pattern')})"
        elif launch:
            extra = f" | launch {launch.get('label')}"
        lines.append(
            f"\n{i}. {emoji} <b>{_label(pool.base_symbol, pool.address)}</b> "
            f"risk {assessment.overall_score}/100 {assessment.risk_level}{extra}\n"
            f"   Liq {_money(pool.liquidity_usd)} | Vol {_money(pool.volume_h24)} | 24h {_pct(pool.price_change_h24)}\n"
            f"   <code>{pool.address}</code>"
        )
    return "\n".join(lines)


def format_topic(topic: Topic) -> str:
    lines = [f"<b>{html.escape(topic.title)}</b>", html.escape(topic.summary)]
    for item in topic.checklist:
        lines.append(f"\n<b>{html.escape(item.item)}</b>: {html.escape(item.how_to_check)}")
        lines.append("🚩 " + html.escape(", ".join(item.red_flags)))
        lines.append("✅ " + html.escape(", ".join(item.green_flags)))
    if topic.tips:
        lines.append("\n<b>Tips</b>")
        lines.extend(f"• {html.escape(tip)}" for tip in topic.tips)
    return "\n".join(lines)


def format_missing_address(intent: str) -> str:
    title = INTENT_TITLES.get(intent, "Analysis")
    return f"<b>{title}</b>\nPlease provide a token address so I can run this check."


def format_not_found(intent: str, subject: str) -> str:
    title = INTENT_TITLES.get(intent, "Analysis")
    return (
        f"<b>{title}</b>\nNo data found for <code>{html.escape(subject)}</code> in any source. "
        "Check the address or try again later."
    )


def format_internal_error() -> str:
    return "Something went wrong while analyzing this request. Please try again."
