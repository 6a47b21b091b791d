"""Report cache - key derivation, read/write and day-boundary staleness"""

from datetime import datetime
from typing import Optional

from finhealth_gateway.config import settings
from finhealth_gateway.domain.models import CachedReportEntry
from finhealth_gateway.domain.summary import BillSummaryInput
from finhealth_gateway.infrastructure.storage.store import KeyValueStore
from finhealth_gateway.utils.date_utils import as_local_datetime, parse_iso_timestamp
from finhealth_gateway.utils.math_utils import round_half_up


class ReportCacheManager:
    """Caches remote reports in a generic key-value store"""

    def __init__(self, store: KeyValueStore, prefix: str | None = None):
        self.store = store
        self.prefix = prefix or settings.cache_key_prefix

    def key_for(self, summary: BillSummaryInput) -> str:
        """
        Fingerprint of period, start date and whole-unit total expense.

        Expense is rounded so small spend changes within a day reuse the same
        entry; a new whole unit of spend gets a fresh report.
        """
        expense = round_half_up(summary.core_totals.total_expense or 0)
        return f"{self.prefix}:{summary.period.value}:{summary.start_date or 'unknown'}:exp{expense}"

    async def read(self, key: str) -> Optional[CachedReportEntry]:
        data = await self.store.get_item(key)
        if not isinstance(data, dict):
            return None
        return CachedReportEntry(key=key, data=data)

    async def write(self, key: str, data: dict) -> None:
        await self.store.set_item(key, data)

    async def remove(self, key: str) -> None:
        await self.store.remove_item(key)

    @staticmethod
    def is_stale(entry: CachedReportEntry, now: datetime | None = None) -> bool:
        """
        Reports expire at local midnight of the day they were generated.

        Elapsed time does not matter: a report generated at 23:59 is stale a
        minute later. Entries without a parseable generatedAt are stale.
        """
        if not isinstance(entry.generated_at, str) or not entry.generated_at:
            return True
        try:
            generated = as_local_datetime(parse_iso_timestamp(entry.generated_at))
        except (TypeError, ValueError):
            return True
        current = as_local_datetime(now or datetime.now())
        return generated.date() != current.date()
