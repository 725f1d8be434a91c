"""Query pipeline: classify, resolve sources, score, aggregate, format.

``AnalysisPipeline.run_analysis`` never raises. Every path ends in an
``AnalysisResult``: missing address, nothing found in any source, or an
unexpected exception turned into a generic message with an error code.
"""

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass, field, is_dataclass
from datetime import UTC, datetime
from typing import Any

from loguru import logger

from src.bot import formatters
from src.intent.classifier import INTENT_CAPABILITIES, AnalysisIntent, ClassificationResult, classify
from src.intent.knowledge_base import find_topic
from src.risk.aggregator import aggregate
from src.risk.holders import concentration_risk, dev_wallet_risk, holder_count_risk, whale_influence_risk
from src.risk.honeypot import honeypot_risk
from src.risk.launch import launch_quality_risk
from src.risk.lp_lock import lp_lock_risk
from src.risk.market import liquidity_risk, rug_heuristic_risk, volatility_risk
from src.risk.metadata import metadata_risk
from src.risk.models import CompositeRiskAssessment, SubScore
from src.risk.volume_spike import volume_spike_risk
from src.routing.capabilities import MARKET_SUBJECT, Capability
from src.routing.payloads import PoolData
from src.routing.router import NO_SOURCE, ProviderResult, SourceRouter

KNOWLEDGE_BASE_SOURCE = "knowledge_base"

ERROR_MISSING_ADDRESS = "missing_address"
ERROR_NOT_FOUND = "not_found"
ERROR_INTERNAL = "internal_error"


def to_jsonable(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, list | tuple):
        return [to_jsonable(v) for v in value]
    return value


@dataclass(frozen=True)
class AnalysisResult:
    success: bool
    response: str
    data: Any
    source: str
    fallback_used: bool
    intent: str
    error: str | None = None
    error_code: str | None = None
    sources: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "response": self.response,
            "data": to_jsonable(self.data),
            "source": self.source,
            "fallbackUsed": self.fallback_used,
            "intent": self.intent,
            "error": self.error,
            "errorCode": self.error_code,
            "sources": dict(self.sources),
        }


@dataclass(frozen=True)
class MarketTokenReport:
    pool: PoolData
    assessment: CompositeRiskAssessment

    def to_dict(self) -> dict:
        return {"pool": asdict(self.pool), "assessment": self.assessment.to_dict()}


Payloads = Mapping[Capability, Any]
SubScoreBuilder = Callable[[Payloads, datetime], list[SubScore]]


@dataclass(frozen=True)
class TokenCheck:
    """How one token-level intent turns resolved payloads into sub-scores."""

    required: tuple[Capability, ...]
    build: SubScoreBuilder


def _pool(p: Payloads) -> PoolData | None:
    return p.get(Capability.POOL_DATA)


TOKEN_CHECKS: dict[AnalysisIntent, TokenCheck] = {
    AnalysisIntent.TOKEN_ANALYSIS: TokenCheck(
        required=(Capability.POOL_DATA, Capability.TOKEN_METADATA),
        build=lambda p, now: [
            liquidity_risk(_pool(p)),
            volatility_risk(_pool(p)),
            rug_heuristic_risk(_pool(p), now),
            metadata_risk(p.get(Capability.TOKEN_METADATA)),
        ],
    ),
    AnalysisIntent.RISK_SCORING: TokenCheck(
        required=(Capability.POOL_DATA,),
        build=lambda p, now: [
            liquidity_risk(_pool(p)),
            volatility_risk(_pool(p)),
            rug_heuristic_risk(_pool(p), now),
            lp_lock_risk(_pool(p), now),
            honeypot_risk(p.get(Capability.SECURITY), _pool(p)),
            concentration_risk(p.get(Capability.HOLDER_DATA)),
            dev_wallet_risk(p.get(Capability.HOLDER_DATA)),
            holder_count_risk(p.get(Capability.HOLDER_DATA)),
            metadata_risk(p.get(Capability.TOKEN_METADATA)),
        ],
    ),
    AnalysisIntent.LP_LOCK_CHECK: TokenCheck(
        required=(Capability.POOL_DATA,),
        build=lambda p, now: [lp_lock_risk(_pool(p), now), liquidity_risk(_pool(p))],
    ),
    AnalysisIntent.HOLDER_ANALYSIS: TokenCheck(
        required=(Capability.HOLDER_DATA,),
        build=lambda p, now: [
            concentration_risk(p.get(Capability.HOLDER_DATA)),
            whale_influence_risk(p.get(Capability.HOLDER_DATA)),
            holder_count_risk(p.get(Capability.HOLDER_DATA)),
        ],
    ),
    AnalysisIntent.RUG_PULL_DETECTION: TokenCheck(
        required=(Capability.POOL_DATA, Capability.HOLDER_DATA),
        build=lambda p, now: [
            dev_wallet_risk(p.get(Capability.HOLDER_DATA)),
            lp_lock_risk(_pool(p), now),
            volatility_risk(_pool(p)),
            rug_heuristic_risk(_pool(p), now),
            concentration_risk(p.get(Capability.HOLDER_DATA)),
        ],
    ),
    AnalysisIntent.HONEYPOT_DETECTION: TokenCheck(
        required=(Capability.SECURITY, Capability.POOL_DATA),
        build=lambda p, now: [honeypot_risk(p.get(Capability.SECURITY), _pool(p))],
    ),
    AnalysisIntent.WHALE_TRACKING: TokenCheck(
        required=(Capability.HOLDER_DATA,),
        build=lambda p, now: [
            whale_influence_risk(p.get(Capability.HOLDER_DATA)),
            concentration_risk(p.get(Capability.HOLDER_DATA)),
            dev_wallet_risk(p.get(Capability.HOLDER_DATA)),
        ],
    ),
}


class AnalysisPipeline:
    def __init__(
        self,
        router: SourceRouter,
        *,
        allow_quota_limited_sources: bool = True,
        scan_limit: int = 10,
        new_token_max_age_hours: float = 24.0,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._router = router
        self._allow_quota_limited = allow_quota_limited_sources
        self._scan_limit = scan_limit
        self._new_token_max_age_hours = new_token_max_age_hours
        self._clock = clock or (lambda: datetime.now(UTC))

    @property
    def router(self) -> SourceRouter:
        return self._router

    async def run_analysis(
        self,
        raw_text: str,
        *,
        allow_quota_limited_sources: bool | None = None,
    ) -> AnalysisResult:
        allow = self._allow_quota_limited if allow_quota_limited_sources is None else allow_quota_limited_sources
        intent = AnalysisIntent.TOKEN_ANALYSIS
        try:
            classification = classify(raw_text)
            intent = classification.intent
            logger.info(
                f"[PIPELINE] intent={intent} confidence={classification.confidence} "
                f"address={classification.token_address or '-'}"
            )
            if intent == AnalysisIntent.EDUCATIONAL:
                return self._educational(raw_text)
            if intent in TOKEN_CHECKS:
                return await self._token_assessment(classification, allow)
            if intent == AnalysisIntent.TOKEN_METADATA:
                return await self._token_metadata(classification, allow)
            return await self._market_scan(intent, allow)
        except Exception as e:
            logger.exception(f"[PIPELINE] Unhandled error for intent {intent}: {e}")
            return AnalysisResult(
                success=False,
                response=formatters.format_internal_error(),
                data=None,
                source=NO_SOURCE,
                fallback_used=False,
                intent=str(intent),
                error=type(e).__name__,
                error_code=ERROR_INTERNAL,
            )

    async def _resolve_all(
        self, capabilities: tuple[Capability, ...], subject: str, allow: bool
    ) -> dict[Capability, ProviderResult]:
        results = await asyncio.gather(
            *(
                self._router.resolve(c, subject, allow_quota_limited_sources=allow)
                for c in capabilities
            )
        )
        return dict(zip(capabilities, results))

    def _missing_address(self, intent: AnalysisIntent) -> AnalysisResult:
        return AnalysisResult(
            success=False,
            response=formatters.format_missing_address(intent),
            data=None,
            source=NO_SOURCE,
            fallback_used=False,
            intent=str(intent),
            error="No token address found in the request",
            error_code=ERROR_MISSING_ADDRESS,
        )

    def _not_found(self, intent: AnalysisIntent, subject: str, failed: ProviderResult) -> AnalysisResult:
        return AnalysisResult(
            success=False,
            response=formatters.format_not_found(intent, subject),
            data=None,
            source=failed.source,
            fallback_used=failed.fallback_used,
            intent=str(intent),
            error=failed.error,
            error_code=ERROR_NOT_FOUND,
        )

    async def _token_assessment(self, classification: ClassificationResult, allow: bool) -> AnalysisResult:
        intent = classification.intent
        address = classification.token_address
        if not address:
            return self._missing_address(intent)

        check = TOKEN_CHECKS[intent]
        results = await self._resolve_all(INTENT_CAPABILITIES[intent], address, allow)
        primary = next((results[c] for c in check.required if results[c].success), None)
        if primary is None:
            return self._not_found(intent, address, results[check.required[0]])

        payloads = {c: r.data for c, r in results.items() if r.success}
        sub_scores = {sub.name: sub for sub in check.build(payloads, self._clock())}
        assessment = aggregate(intent, sub_scores)
        logger.info(
            f"[PIPELINE] {intent} {address[:12]} score={assessment.overall_score} "
            f"level={assessment.risk_level} factors={len(assessment.factors)}"
        )

        return AnalysisResult(
            success=True,
            response=formatters.format_assessment(
                intent,
                address,
                assessment,
                metadata=payloads.get(Capability.TOKEN_METADATA),
                pool=payloads.get(Capability.POOL_DATA),
            ),
            data=assessment,
            source=primary.source,
            fallback_used=any(r.fallback_used for r in results.values()),
            intent=str(intent),
            sources={str(c): r.source for c, r in results.items()},
        )

    async def _token_metadata(self, classification: ClassificationResult, allow: bool) -> AnalysisResult:
        intent = classification.intent
        address = classification.token_address
        if not address:
            return self._missing_address(intent)

        result = await self._router.resolve(
            Capability.TOKEN_METADATA, address, allow_quota_limited_sources=allow
        )
        if not result.success:
            return self._not_found(intent, address, result)
        return AnalysisResult(
            success=True,
            response=formatters.format_metadata(result.data),
            data=result.data,
            source=result.source,
            fallback_used=result.fallback_used,
            intent=str(intent),
            sources={str(Capability.TOKEN_METADATA): result.source},
        )

    def _score_market_token(self, intent: AnalysisIntent, pool: PoolData, now: datetime) -> CompositeRiskAssessment:
        if intent == AnalysisIntent.NEW_TOKEN_DETECTION:
            subs = [launch_quality_risk(pool, now), rug_heuristic_risk(pool, now)]
        elif intent == AnalysisIntent.VOLUME_SPIKE_DETECTION:
            subs = [volume_spike_risk(pool), liquidity_risk(pool)]
        else:
            subs = [rug_heuristic_risk(pool, now), liquidity_risk(pool), volatility_risk(pool)]
        return aggregate(intent, {sub.name: sub for sub in subs})

    async def _market_scan(self, intent: AnalysisIntent, allow: bool) -> AnalysisResult:
        capability = INTENT_CAPABILITIES[intent][0]
        result = await self._router.resolve(capability, MARKET_SUBJECT, allow_quota_limited_sources=allow)
        if not result.success:
            return self._not_found(intent, MARKET_SUBJECT, result)

        now = self._clock()
        pools: list[PoolData] = list(result.data)
        note = ""
        if intent == AnalysisIntent.NEW_TOKEN_DETECTION:
            max_age = self._new_token_max_age_hours
            pools = [p for p in pools if (age := p.age_hours(now)) is not None and age <= max_age]
            note = f"Pairs listed within the last {max_age:g} hours."

        reports = [MarketTokenReport(pool=p, assessment=self._score_market_token(intent, p, now)) for p in pools]
        if intent == AnalysisIntent.NEW_TOKEN_DETECTION:
            reports.sort(key=lambda r: r.assessment.overall_score)
        elif intent == AnalysisIntent.VOLUME_SPIKE_DETECTION:
            reports.sort(
                key=lambda r: r.assessment.details.get("volume_spike", {}).get("spike_intensity", 0),
                reverse=True,
            )
        reports = reports[: self._scan_limit]

        return AnalysisResult(
            success=True,
            response=formatters.format_market_scan(intent, [(r.pool, r.assessment) for r in reports], note),
            data=reports,
            source=result.source,
            fallback_used=result.fallback_used,
            intent=str(intent),
            sources={str(capability): result.source},
        )

    def _educational(self, raw_text: str) -> AnalysisResult:
        topic = find_topic(raw_text)
        return AnalysisResult(
            success=True,
            response=formatters.format_topic(topic),
            data=topic,
            source=KNOWLEDGE_BASE_SOURCE,
            fallback_used=False,
            intent=str(AnalysisIntent.EDUCATIONAL),
        )

    async def close(self) -> None:
        await self._router.close()
