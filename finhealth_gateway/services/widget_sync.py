"""Widget sync - one-way push of the latest report numbers to the widget sink"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Set

from finhealth_gateway.domain.models import Period
from finhealth_gateway.infrastructure.clients.widget import WidgetSink
from finhealth_gateway.infrastructure.observability.metrics import widget_sync_failures_counter
from finhealth_gateway.services.report_orchestrator import ReportOrchestrator, ReportState

logger = logging.getLogger(__name__)


@dataclass
class ViewContext:
    """
    Explicit view state passed to consumers instead of process-wide stores.

    `data_version` is bumped whenever ledger or budget data changes so that
    dependents can invalidate without subscribing to each other.
    """

    view_mode: str = "personal"  # "personal" | "family"
    period: Period = Period.MONTHLY
    is_dark_mode: Optional[bool] = None
    data_version: int = 0

    def bump_version(self) -> int:
        self.data_version += 1
        return self.data_version


def build_widget_payload(context: ViewContext, report_data: Optional[dict]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "viewMode": context.view_mode,
        "currentReportData": report_data,
        "currentPeriodType": context.period.value,
        "dataVersion": context.data_version,
    }
    if context.is_dark_mode is not None:
        payload["isDarkMode"] = context.is_dark_mode
    return payload


class WidgetSyncTrigger:
    """Fire-and-forget widget updates; failures are logged and never raised"""

    def __init__(self, sink: WidgetSink):
        self.sink = sink
        self._last_signature: Optional[tuple] = None
        self._last_data: Optional[dict] = None
        self._tasks: Set[asyncio.Task] = set()

    async def push(self, payload: Dict[str, Any]) -> None:
        try:
            await self.sink.update(payload)
        except Exception as e:
            widget_sync_failures_counter.inc()
            logger.warning(f"Failed to sync widgets: {e}", extra={"step": "widget_sync"})

    def notify(self, context: ViewContext, report_data: Optional[dict]) -> Optional[asyncio.Task]:
        """
        Schedule a push when report data, period, view mode or data version changed.

        Must be called from a running event loop. Returns the scheduled task, or
        None when nothing changed since the last push.
        """
        signature = (context.period, context.view_mode, context.data_version)
        # Report data is compared by identity: a new fetch is a new object
        if self._last_signature is not None and signature == self._last_signature and report_data is self._last_data:
            return None
        self._last_signature = signature
        self._last_data = report_data

        task = asyncio.get_running_loop().create_task(self.push(build_widget_payload(context, report_data)))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def follow(self, orchestrator: ReportOrchestrator, context: ViewContext) -> Callable[[], None]:
        """Push settled report data from an orchestrator; returns the unsubscribe callable"""

        def on_state(state: ReportState) -> None:
            if state.loading or state.data is None:
                return
            self.notify(context, state.data)

        return orchestrator.subscribe(on_state)

    async def drain(self) -> None:
        """Wait for scheduled pushes; used on shutdown"""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))
