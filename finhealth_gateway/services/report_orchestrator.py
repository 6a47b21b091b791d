"""Report orchestration - cache lookup, stale-while-revalidate refresh, local fallback"""

import logging
import time
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, List, Optional

from finhealth_gateway.domain.models import HealthScoreDetail
from finhealth_gateway.domain.scoring import compute_health_score
from finhealth_gateway.domain.summary import BillSummaryInput
from finhealth_gateway.infrastructure.clients.report import ReportClient
from finhealth_gateway.infrastructure.observability.logging import log_report_served
from finhealth_gateway.infrastructure.observability.metrics import record_cache_lookup, record_health_score
from finhealth_gateway.infrastructure.storage.report_cache import ReportCacheManager
from finhealth_gateway.infrastructure.storage.store import KeyValueStore, default_store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportState:
    """Consumer-facing snapshot; `fallback` is the on-device score for the summary"""

    data: Optional[dict] = None
    loading: bool = False
    error: Optional[Exception] = None
    is_stale: bool = False
    fallback: Optional[HealthScoreDetail] = None

    @property
    def health_score(self) -> Optional[dict]:
        """Remote score when a report is present, otherwise the local one"""
        if self.data and self.data.get("healthScore"):
            return self.data["healthScore"]
        if self.fallback is not None:
            return self.fallback.to_dict()
        return None


StateListener = Callable[[ReportState], None]


class ReportOrchestrator:
    """
    Drives one consumer's report state.

    Each load() starts a new generation; results from older generations, or
    arriving after detach(), are dropped so a superseded fetch never
    overwrites state belonging to the current summary. Within a generation
    only the most recently started fetch may apply its result.
    """

    def __init__(
        self,
        cache: ReportCacheManager,
        client: ReportClient,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.cache = cache
        self.client = client
        self.clock = clock
        self.state = ReportState()
        self._listeners: List[StateListener] = []
        self._generation = 0
        self._fetch_seq = 0
        self._detached = False
        self._summary: Optional[BillSummaryInput] = None
        self._key: Optional[str] = None

    @property
    def cache_key(self) -> Optional[str]:
        return self._key

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with every committed state; returns an unsubscribe callable"""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def detach(self) -> None:
        """Consumer went away; late results are discarded from now on"""
        self._detached = True
        self._generation += 1

    def _is_current(self, generation: int, fetch_seq: Optional[int] = None) -> bool:
        if self._detached or generation != self._generation:
            return False
        return fetch_seq is None or fetch_seq == self._fetch_seq

    def _commit(self, generation: int, state: ReportState, fetch_seq: Optional[int] = None) -> bool:
        if not self._is_current(generation, fetch_seq):
            logger.debug("Dropping superseded report state", extra={"cache_key": self._key})
            return False
        self.state = state
        for listener in list(self._listeners):
            listener(state)
        return True

    async def load(self, summary: BillSummaryInput) -> ReportState:
        """
        Flow:
        1. Not ready -> empty state, no cache or network activity
        2. Cache miss -> fetch
        3. Fresh hit -> serve cached
        4. Stale hit -> serve cached with loading, then fetch
        """
        self._generation += 1
        generation = self._generation
        self._summary = summary
        self._key = self.cache.key_for(summary)

        if not summary.is_ready:
            self._commit(generation, ReportState())
            return self.state

        start_time = time.time()
        fallback = compute_health_score(summary)
        record_health_score(fallback.status, "local")

        try:
            cached = await self.cache.read(self._key)
        except Exception as e:
            # Unreadable cache behaves like an empty one
            logger.warning(f"Report cache read failed: {e}", extra={"cache_key": self._key})
            record_cache_lookup("error")
            cached = None

        if not self._is_current(generation):
            return self.state

        if cached is None:
            record_cache_lookup("miss")
            self._commit(generation, ReportState(loading=True, fallback=fallback))
            await self._fetch(generation, summary)
            return self.state

        stale = self.cache.is_stale(cached, self.clock())
        record_cache_lookup("stale" if stale else "hit")
        self._commit(
            generation,
            ReportState(data=cached.data, loading=stale, is_stale=stale, fallback=fallback),
        )
        if stale:
            await self._fetch(generation, summary)
        else:
            duration_ms = (time.time() - start_time) * 1000
            log_report_served(self._key, "cache", _score_of(cached.data), duration_ms)
        return self.state

    async def refresh(self) -> ReportState:
        """Re-fetch the current summary; no-op when it is not ready"""
        if self._summary is None or not self._summary.is_ready or self._detached:
            return self.state
        await self._fetch(self._generation, self._summary)
        return self.state

    async def _fetch(self, generation: int, summary: BillSummaryInput) -> None:
        start_time = time.time()
        key = self.cache.key_for(summary)
        self._fetch_seq += 1
        fetch_seq = self._fetch_seq
        self._commit(generation, replace(self.state, loading=True, error=None))

        try:
            data = await self.client.fetch(summary)
        except Exception as e:
            logger.error(f"Report fetch failed: {e}", extra={"cache_key": key})
            # Visible data stays alongside the error
            self._commit(generation, replace(self.state, loading=False, error=e), fetch_seq)
            return

        applied = self._commit(
            generation,
            replace(self.state, data=data, loading=False, error=None, is_stale=False),
            fetch_seq,
        )
        if applied:
            health = data.get("healthScore") or {}
            if health.get("status"):
                record_health_score(health["status"], "remote")
            duration_ms = (time.time() - start_time) * 1000
            log_report_served(key, "remote", _score_of(data), duration_ms)


def _score_of(data: dict) -> Optional[int]:
    return (data.get("healthScore") or {}).get("score")


def create_report_orchestrator(
    store: Optional[KeyValueStore] = None,
    base_url: Optional[str] = None,
    language: Optional[str] = None,
) -> ReportOrchestrator:
    """Wire cache, HTTP client and orchestrator; defaults to the SQL-backed store"""
    cache = ReportCacheManager(store if store is not None else default_store())
    client = ReportClient(cache, base_url=base_url, language=language)
    return ReportOrchestrator(cache, client)
