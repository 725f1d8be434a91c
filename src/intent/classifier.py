"""Keyword-table intent classification for free-text queries.

Scoring is driven entirely by the tables below:

* ``INTENT_KEYWORDS``: +1 per keyword found (case-insensitive substring)
* ``BOOST_RULES``: extra weight when every term group of a rule is present

The intent with the strictly highest score wins; on a tie the earlier entry
of ``INTENT_KEYWORDS`` is kept. An extracted address seeds the score at 1,
and an address with no matching keywords is treated as a token analysis.
"""

import re
from dataclasses import dataclass, field
from enum import StrEnum

from src.routing.capabilities import SOURCE_PRIORITY, Capability


class AnalysisIntent(StrEnum):
    TOKEN_ANALYSIS = "token_analysis"
    LP_LOCK_CHECK = "lp_lock_check"
    HOLDER_ANALYSIS = "holder_analysis"
    RUG_PULL_DETECTION = "rug_pull_detection"
    HONEYPOT_DETECTION = "honeypot_detection"
    NEW_TOKEN_DETECTION = "new_token_detection"
    VOLUME_SPIKE_DETECTION = "volume_spike_detection"
    WHALE_TRACKING = "whale_tracking"
    TRENDING_TOKENS = "trending_tokens"
    EDUCATIONAL = "educational"
    TOKEN_METADATA = "token_metadata"
    RISK_SCORING = "risk_scoring"


# Order matters: it is the tie-break order.
INTENT_KEYWORDS: dict[AnalysisIntent, tuple[str, ...]] = {
    AnalysisIntent.TOKEN_ANALYSIS: (
        "analyze", "token", "price", "volume", "market cap", "mcap", "data", "info", "chart",
    ),
    AnalysisIntent.LP_LOCK_CHECK: (
        "lp", "liquidity", "locked", "lock", "pool", "liquidity pool", "locked liquidity",
    ),
    AnalysisIntent.HOLDER_ANALYSIS: (
        "holders", "holder", "distribution", "whale", "wallet", "top holders", "holder count",
    ),
    AnalysisIntent.RUG_PULL_DETECTION: (
        "rug", "rugpull", "rug pull", "scam", "risk", "red flag", "suspicious", "safe",
    ),
    AnalysisIntent.HONEYPOT_DETECTION: (
        "honeypot", "honey pot", "sell", "sellable", "can sell", "sell test",
    ),
    AnalysisIntent.NEW_TOKEN_DETECTION: (
        "new", "launched", "recent", "just launched", "new token", "fresh",
    ),
    AnalysisIntent.VOLUME_SPIKE_DETECTION: (
        "volume", "spike", "volume spike", "unusual volume", "high volume",
    ),
    AnalysisIntent.WHALE_TRACKING: (
        "whale", "large", "big wallet", "whale wallet", "movement", "track",
    ),
    AnalysisIntent.TRENDING_TOKENS: (
        "trending", "hot", "popular", "trend", "top", "best", "trending tokens",
    ),
    AnalysisIntent.EDUCATIONAL: (
        "teach", "learn", "how to", "guide", "tutorial", "explain", "what is", "education",
    ),
    AnalysisIntent.TOKEN_METADATA: (
        "name", "symbol", "logo", "info", "metadata", "what is this token",
    ),
    AnalysisIntent.RISK_SCORING: (
        "risk", "score", "risk score", "safety", "security", "danger", "safe", "unsafe",
    ),
}


@dataclass(frozen=True)
class BoostRule:
    """Adds ``bonus`` to ``intent`` when each group has at least one term in the text."""

    intent: AnalysisIntent
    groups: tuple[tuple[str, ...], ...]
    bonus: float

    def applies(self, text: str) -> bool:
        return all(any(term in text for term in group) for group in self.groups)


BOOST_RULES: tuple[BoostRule, ...] = (
    BoostRule(AnalysisIntent.LP_LOCK_CHECK, (("lock",), ("liquidity", "lp")), 2.0),
    BoostRule(AnalysisIntent.RUG_PULL_DETECTION, (("rug", "scam"),), 2.0),
    BoostRule(AnalysisIntent.HOLDER_ANALYSIS, (("holder", "whale"),), 1.5),
)

# Base58 mint/wallet addresses, then a looser alphanumeric shape (hex and friends)
PRIMARY_ADDRESS_RE = re.compile(r"[1-9A-HJ-NP-Za-km-z]{32,44}")
SECONDARY_ADDRESS_RE = re.compile(r"[A-Za-z0-9]{30,50}")

# Capabilities each intent needs; suggested tools are their source chains
INTENT_CAPABILITIES: dict[AnalysisIntent, tuple[Capability, ...]] = {
    AnalysisIntent.TOKEN_ANALYSIS: (Capability.POOL_DATA, Capability.TOKEN_METADATA),
    AnalysisIntent.LP_LOCK_CHECK: (Capability.POOL_DATA,),
    AnalysisIntent.HOLDER_ANALYSIS: (Capability.HOLDER_DATA,),
    AnalysisIntent.RUG_PULL_DETECTION: (Capability.POOL_DATA, Capability.HOLDER_DATA),
    AnalysisIntent.HONEYPOT_DETECTION: (Capability.SECURITY, Capability.POOL_DATA),
    AnalysisIntent.NEW_TOKEN_DETECTION: (Capability.NEW_PAIRS,),
    AnalysisIntent.VOLUME_SPIKE_DETECTION: (Capability.VOLUME_SPIKES,),
    AnalysisIntent.WHALE_TRACKING: (Capability.HOLDER_DATA,),
    AnalysisIntent.TRENDING_TOKENS: (Capability.TRENDING,),
    AnalysisIntent.EDUCATIONAL: (),
    AnalysisIntent.TOKEN_METADATA: (Capability.TOKEN_METADATA,),
    AnalysisIntent.RISK_SCORING: (
        Capability.POOL_DATA,
        Capability.TOKEN_METADATA,
        Capability.HOLDER_DATA,
        Capability.SECURITY,
    ),
}


def suggested_tools(intent: AnalysisIntent) -> tuple[str, ...]:
    sources: list[str] = []
    for capability in INTENT_CAPABILITIES[intent]:
        for name in SOURCE_PRIORITY[capability]:
            if name not in sources:
                sources.append(name)
    return tuple(sources)


@dataclass(frozen=True)
class ClassificationResult:
    intent: AnalysisIntent
    confidence: float
    parameters: dict[str, str] = field(default_factory=dict)
    suggested_tools: tuple[str, ...] = ()

    @property
    def token_address(self) -> str | None:
        return self.parameters.get("tokenAddress")

    @property
    def wallet_address(self) -> str | None:
        return self.parameters.get("walletAddress")


def extract_addresses(text: str) -> list[str]:
    """Address-shaped substrings, primary shape first, without duplicates."""
    found = PRIMARY_ADDRESS_RE.findall(text)
    if not found:
        found = SECONDARY_ADDRESS_RE.findall(text)
    return list(dict.fromkeys(found))


def classify(text: str) -> ClassificationResult:
    parameters: dict[str, str] = {}
    addresses = extract_addresses(text)
    if addresses:
        parameters["tokenAddress"] = addresses[0]
    if len(addresses) > 1:
        parameters["walletAddress"] = addresses[1]

    # Addresses are random base58 and may contain keyword substrings
    keyword_text = text
    for address in addresses:
        keyword_text = keyword_text.replace(address, " ")
    keyword_text = keyword_text.lower()

    scores = {intent: 0.0 for intent in INTENT_KEYWORDS}
    for intent, keywords in INTENT_KEYWORDS.items():
        scores[intent] += sum(1 for keyword in keywords if keyword in keyword_text)
    for rule in BOOST_RULES:
        if rule.applies(keyword_text):
            scores[rule.intent] += rule.bonus

    seed = 1.0 if addresses else 0.0
    best_intent = AnalysisIntent.TOKEN_ANALYSIS
    best_confidence = seed
    keyword_hit = False
    for intent in INTENT_KEYWORDS:
        if scores[intent] > 0:
            keyword_hit = True
        total = seed + scores[intent]
        if total > best_confidence:
            best_intent = intent
            best_confidence = total

    if addresses and not keyword_hit:
        best_intent = AnalysisIntent.TOKEN_ANALYSIS

    return ClassificationResult(
        intent=best_intent,
        confidence=best_confidence,
        parameters=parameters,
        suggested_tools=suggested_tools(best_intent),
    )
