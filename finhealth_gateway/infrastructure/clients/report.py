"""Remote scoring HTTP client for fetching authoritative health reports"""

import logging

import httpx
from finhealth_gateway.config import settings
from finhealth_gateway.domain.exceptions import NetworkError
from finhealth_gateway.domain.summary import BillSummaryInput
from finhealth_gateway.infrastructure.observability.metrics import (
    report_fetch_failures_counter,
    report_fetch_latency_histogram,
)
from finhealth_gateway.infrastructure.storage.report_cache import ReportCacheManager

logger = logging.getLogger(__name__)


class ReportClient:
    """Client for the remote insights endpoint"""

    def __init__(
        self,
        cache: ReportCacheManager,
        base_url: str | None = None,
        language: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.cache = cache
        self.base_url = base_url or settings.report_api_base
        self.language = language or settings.default_language
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}{settings.report_insights_path}"

    async def fetch(self, summary: BillSummaryInput) -> dict:
        """
        POST the summary and return the decoded report.

        The report is written to the cache under the summary's key before it
        is returned. No retries; retry policy belongs to the caller.

        Raises:
            NetworkError: On timeout, transport failure, non-2xx status, or invalid body
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with report_fetch_latency_histogram.time():
                    response = await client.post(
                        self.url,
                        json=summary.to_payload(),
                        headers={"Accept-Language": self.language},
                    )
                response.raise_for_status()
                data = response.json()
                if not isinstance(data, dict):
                    raise ValueError("report body is not an object")

            except httpx.TimeoutException as e:
                report_fetch_failures_counter.inc()
                raise NetworkError(f"Report API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                report_fetch_failures_counter.inc()
                raise NetworkError(f"HTTP {e.response.status_code}") from e
            except httpx.RequestError as e:
                report_fetch_failures_counter.inc()
                raise NetworkError(f"Report API unreachable: {e}") from e
            except ValueError as e:
                report_fetch_failures_counter.inc()
                raise NetworkError(f"Invalid report data from server: {e}") from e

        key = self.cache.key_for(summary)
        await self.cache.write(key, data)
        logger.info("Report fetched", extra={"cache_key": key, "step": "report_fetched"})
        return data
