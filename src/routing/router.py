"""Source resolution: ordered fallback across provider adapters.

Every capability is resolved the same way. The configured priority list is
turned into a sequence of attempts, and ``try_in_order`` walks it until one
adapter returns a usable payload. Individual adapter failures are logged and
absorbed; only exhausting the whole chain produces a failed result.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from functools import partial
from typing import Any

from loguru import logger

from src.parsers.exceptions import ProviderEmptyError
from src.routing.adapters import SourceAdapter
from src.routing.capabilities import SOURCE_PRIORITY, Capability
from src.routing.payloads import payload_is_usable
from src.routing.usage_tracker import UsageTracker

NO_SOURCE = "none"


@dataclass(frozen=True)
class ProviderResult:
    success: bool
    data: Any
    source: str
    fallback_used: bool
    error: str | None = None

    @classmethod
    def exhausted(cls, error: str) -> "ProviderResult":
        return cls(success=False, data=None, source=NO_SOURCE, fallback_used=True, error=error)


@dataclass(frozen=True)
class SourceAttempt:
    source: str
    rank: int  # position in the configured priority list
    call: Callable[[], Awaitable[Any]]
    cost: int = 1  # HTTP requests one call spends


async def try_in_order(
    attempts: Sequence[SourceAttempt],
    *,
    is_usable: Callable[[Any], bool],
    on_call: Callable[[str, int], None] | None = None,
    label: str = "",
) -> ProviderResult:
    """Run attempts sequentially and return the first usable payload.

    ``on_call`` fires for every attempt whose provider answered, including an
    empty answer, but not for timeouts or transport errors.
    """
    errors: list[str] = []
    for attempt in attempts:
        try:
            payload = await attempt.call()
        except asyncio.TimeoutError:
            logger.warning(f"[ROUTER] {label}: {attempt.source} timed out")
            errors.append(f"{attempt.source}: timeout")
            continue
        except ProviderEmptyError as e:
            if on_call is not None:
                on_call(attempt.source, attempt.cost)
            logger.debug(f"[ROUTER] {label}: {attempt.source} had nothing: {e}")
            errors.append(f"{attempt.source}: empty")
            continue
        except Exception as e:
            logger.warning(f"[ROUTER] {label}: {attempt.source} failed: {e}")
            errors.append(f"{attempt.source}: {e}")
            continue

        if on_call is not None:
            on_call(attempt.source, attempt.cost)
        if not is_usable(payload):
            logger.debug(f"[ROUTER] {label}: {attempt.source} returned an unusable payload")
            errors.append(f"{attempt.source}: unusable payload")
            continue

        if attempt.rank > 0:
            logger.info(f"[ROUTER] {label}: served by fallback {attempt.source}")
        return ProviderResult(
            success=True,
            data=payload,
            source=attempt.source,
            fallback_used=attempt.rank > 0,
        )

    detail = "; ".join(errors) if errors else "no eligible source"
    return ProviderResult.exhausted(f"{label} not found in any source ({detail})")


class SourceRouter:
    def __init__(
        self,
        adapters: Sequence[SourceAdapter],
        usage: UsageTracker,
        *,
        priority: Mapping[Capability, Sequence[str]] = SOURCE_PRIORITY,
        timeout_sec: float = 20.0,
    ) -> None:
        self._adapters = {adapter.name: adapter for adapter in adapters}
        self._priority = priority
        self._usage = usage
        self._timeout = timeout_sec

    @property
    def usage(self) -> UsageTracker:
        return self._usage

    def priority_for(self, capability: Capability) -> tuple[str, ...]:
        return tuple(self._priority.get(capability, ()))

    def _plan(self, capability: Capability, subject_id: str, allow_quota_limited: bool) -> list[SourceAttempt]:
        attempts = []
        for rank, name in enumerate(self.priority_for(capability)):
            adapter = self._adapters.get(name)
            if adapter is None or capability not in adapter.capabilities:
                continue
            if adapter.quota_limited:
                if not allow_quota_limited:
                    logger.debug(f"[ROUTER] {capability}: skipping {name}, quota-limited sources disabled")
                    continue
                if not self._usage.is_within_limit(name):
                    logger.info(f"[ROUTER] {capability}: skipping {name}, daily quota reached")
                    continue
            call = partial(self._call, adapter, capability, subject_id)
            attempts.append(
                SourceAttempt(source=name, rank=rank, call=call, cost=adapter.request_cost(capability))
            )
        return attempts

    async def _call(self, adapter: SourceAdapter, capability: Capability, subject_id: str) -> Any:
        return await asyncio.wait_for(adapter.fetch(capability, subject_id), timeout=self._timeout)

    async def resolve(
        self,
        capability: Capability,
        subject_id: str,
        *,
        allow_quota_limited_sources: bool = True,
    ) -> ProviderResult:
        attempts = self._plan(capability, subject_id, allow_quota_limited_sources)
        return await try_in_order(
            attempts,
            is_usable=partial(payload_is_usable, capability),
            on_call=self._usage.track_usage,
            label=str(capability),
        )

    async def close(self) -> None:
        for adapter in self._adapters.values():
            await adapter.close()
