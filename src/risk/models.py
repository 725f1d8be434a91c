"""Shared result types for risk calculators and the aggregation engine."""

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any


class RiskCategory(StrEnum):
    SECURITY = "security"
    TOKENOMICS = "tokenomics"
    MARKET = "market"
    COMMUNITY = "community"
    TECHNICAL = "technical"


class RiskLevel(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    EXTREME = "EXTREME"
    # Sellability variant
    SAFE = "SAFE"
    SUSPICIOUS = "SUSPICIOUS"
    HONEYPOT = "HONEYPOT"


RISK_TIERS: tuple[RiskLevel, ...] = (RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.EXTREME)
SELLABILITY_TIERS: tuple[RiskLevel, ...] = (RiskLevel.SAFE, RiskLevel.SUSPICIOUS, RiskLevel.HONEYPOT)


def clamp_score(value: float) -> int:
    return int(round(min(100.0, max(0.0, value))))


@dataclass(frozen=True)
class RiskFactor:
    """One triggered condition. ``score`` is its severity on 0-100."""

    name: str
    category: RiskCategory
    score: int
    description: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "score", clamp_score(self.score))


@dataclass(frozen=True)
class SubScore:
    """Output of one calculator.

    ``data_backed`` is False when the input was missing and the score is the
    fail-safe maximum rather than a measurement.
    """

    name: str
    category: RiskCategory
    score: int
    factors: tuple[RiskFactor, ...] = ()
    details: dict[str, Any] = field(default_factory=dict)
    data_backed: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "score", clamp_score(self.score))


@dataclass(frozen=True)
class CompositeRiskAssessment:
    intent: str
    overall_score: int
    risk_level: RiskLevel
    factors: tuple[RiskFactor, ...]
    recommendations: tuple[str, ...]
    confidence: int
    sub_scores: tuple[tuple[str, int], ...] = ()
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["sub_scores"] = dict(self.sub_scores)
        return data


def missing_input(name: str, category: RiskCategory, what: str) -> SubScore:
    """Fail-safe result for a calculator whose input is unavailable."""
    factor = RiskFactor(
        name=f"{name}_data_unavailable",
        category=category,
        score=100,
        description=f"{what} unavailable; assuming worst case",
    )
    return SubScore(name=name, category=category, score=100, factors=(factor,), data_backed=False)


class FactorCollector:
    """Accumulates points and one factor per triggered condition."""

    def __init__(self, category: RiskCategory) -> None:
        self.category = category
        self.points = 0.0
        self.items: list[RiskFactor] = []

    def add(self, name: str, points: float, description: str) -> None:
        self.points += points
        self.items.append(RiskFactor(name=name, category=self.category, score=points, description=description))

    def result(self, name: str, *, floor: float = 0.0, details: dict[str, Any] | None = None) -> SubScore:
        return SubScore(
            name=name,
            category=self.category,
            score=max(self.points, floor),
            factors=tuple(self.items),
            details=details or {},
        )


def format_usd(value: float) -> str:
    if value >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"${value / 1_000:.1f}K"
    return f"${value:.0f}"
