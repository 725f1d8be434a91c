"""Wire provider clients, adapters, router and pipeline from settings."""

from loguru import logger

from config.settings import Settings
from src.analysis.pipeline import AnalysisPipeline
from src.parsers.birdeye.client import BirdeyeClient
from src.parsers.dexscreener.client import DexScreenerClient
from src.parsers.goplus.client import GoPlusClient
from src.parsers.helius.client import HeliusClient
from src.parsers.jupiter.client import JupiterClient
from src.parsers.raydium.client import RaydiumClient
from src.parsers.retry import RetryPolicy
from src.parsers.solana_rpc.client import SolanaRpcClient
from src.routing.adapters import (
    BirdeyeAdapter,
    DexScreenerAdapter,
    GoPlusAdapter,
    HeliusAdapter,
    JupiterAdapter,
    RaydiumAdapter,
    SolanaRpcAdapter,
    SourceAdapter,
)
from src.routing.capabilities import SOURCE_PRIORITY, Capability
from src.routing.router import SourceRouter
from src.routing.usage_tracker import UsageTracker


def build_adapters(settings: Settings) -> list[SourceAdapter]:
    retry = RetryPolicy.from_settings(settings)
    timeout = settings.provider_http_timeout_sec

    adapters: list[SourceAdapter] = [
        DexScreenerAdapter(
            DexScreenerClient(max_rps=settings.dexscreener_max_rps, retry_policy=retry, timeout=timeout)
        ),
        JupiterAdapter(
            JupiterClient(
                api_key=settings.jupiter_api_key,
                max_rps=settings.jupiter_max_rps,
                retry_policy=retry,
                timeout=timeout,
            )
        ),
        RaydiumAdapter(RaydiumClient(max_rps=settings.raydium_max_rps, retry_policy=retry, timeout=timeout)),
        GoPlusAdapter(GoPlusClient(max_rps=settings.goplus_max_rps, retry_policy=retry, timeout=timeout)),
        SolanaRpcAdapter(
            SolanaRpcClient(
                settings.solana_rpc_url,
                max_rps=settings.solana_rpc_max_rps,
                retry_policy=retry,
                timeout=timeout,
            )
        ),
    ]

    if settings.birdeye_api_key:
        adapters.append(
            BirdeyeAdapter(
                BirdeyeClient(
                    settings.birdeye_api_key,
                    max_rps=settings.birdeye_max_rps,
                    retry_policy=retry,
                    timeout=timeout,
                ),
                scan_limit=max(settings.market_scan_limit, 20),
            )
        )
    else:
        logger.info("[FACTORY] BIRDEYE_API_KEY not set, Birdeye fallback disabled")

    if settings.helius_api_key or settings.helius_rpc_url:
        adapters.append(
            HeliusAdapter(
                HeliusClient(
                    settings.helius_api_key,
                    rpc_url=settings.effective_helius_rpc_url,
                    max_rps=settings.helius_max_rps,
                    retry_policy=retry,
                    timeout=timeout,
                )
            )
        )
    else:
        logger.info("[FACTORY] HELIUS_API_KEY not set, Helius fallback disabled")

    return adapters


def build_priority(settings: Settings) -> dict[Capability, tuple[str, ...]]:
    """Default source order with per-capability overrides from settings."""
    priority = dict(SOURCE_PRIORITY)
    known = {c.value for c in Capability}
    for key, sources in settings.source_priority.items():
        if key not in known:
            logger.warning(f"[FACTORY] Unknown capability '{key}' in SOURCE_PRIORITY, ignored")
            continue
        priority[Capability(key)] = tuple(sources)
        logger.info(f"[FACTORY] {key} priority overridden: {' > '.join(sources)}")
    return priority


def build_pipeline(settings: Settings, usage: UsageTracker | None = None) -> AnalysisPipeline:
    usage = usage or UsageTracker(
        default_limit=settings.default_daily_quota,
        limits=settings.source_daily_quotas,
    )
    router = SourceRouter(
        build_adapters(settings),
        usage,
        priority=build_priority(settings),
        timeout_sec=settings.adapter_timeout_sec,
    )
    return AnalysisPipeline(
        router,
        allow_quota_limited_sources=settings.allow_quota_limited_sources,
        scan_limit=settings.market_scan_limit,
        new_token_max_age_hours=settings.new_token_max_age_hours,
    )
