"""Per-source daily call counters.

Counters are advisory: the router checks ``is_within_limit`` before trying a
quota-limited source but nothing is reserved, so concurrent requests can
overshoot a ceiling by a call or two. Counters reset on local-day rollover or
on an explicit ``reset_daily_usage``.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date

from loguru import logger

DEFAULT_DAILY_QUOTA = 1000


@dataclass(frozen=True)
class UsageSnapshot:
    day: date
    counts: dict[str, int]
    limits: dict[str, int]

    def to_dict(self) -> dict:
        return {
            "day": self.day.isoformat(),
            "sources": {
                name: {"used": self.counts.get(name, 0), "limit": self.limits[name]}
                for name in sorted(set(self.counts) | set(self.limits))
            },
        }


class UsageTracker:
    def __init__(
        self,
        default_limit: int = DEFAULT_DAILY_QUOTA,
        limits: Mapping[str, int] | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._default_limit = default_limit
        self._limits = dict(limits or {})
        self._today = today
        self._day = today()
        self._counts: dict[str, int] = {}

    def _roll_over(self) -> None:
        current = self._today()
        if current != self._day:
            logger.info(f"[USAGE] Day rollover {self._day} -> {current}, resetting counters")
            self._counts.clear()
            self._day = current

    def limit_for(self, source: str) -> int:
        return self._limits.get(source, self._default_limit)

    def track_usage(self, source: str, calls: int = 1) -> None:
        self._roll_over()
        self._counts[source] = self._counts.get(source, 0) + calls

    def get_usage(self, source: str) -> int:
        self._roll_over()
        return self._counts.get(source, 0)

    def is_within_limit(self, source: str) -> bool:
        return self.get_usage(source) < self.limit_for(source)

    def reset_daily_usage(self) -> None:
        self._counts.clear()
        self._day = self._today()

    def snapshot(self) -> UsageSnapshot:
        self._roll_over()
        limits = {name: self.limit_for(name) for name in set(self._counts) | set(self._limits)}
        return UsageSnapshot(day=self._day, counts=dict(self._counts), limits=limits)
