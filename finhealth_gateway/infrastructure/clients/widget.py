"""Widget bridge client - pushes the latest numbers to the home-screen widgets"""

from typing import Any, Dict, Protocol

import httpx
from finhealth_gateway.config import settings


class WidgetSink(Protocol):
    """One-way presentation surface"""

    async def update(self, payload: Dict[str, Any]) -> None: ...


class HttpWidgetSink:
    """Posts widget payloads to the widget bridge; single attempt, no retries"""

    def __init__(
        self,
        bridge_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.bridge_url = bridge_url or settings.widget_bridge_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def update(self, payload: Dict[str, Any]) -> None:
        """
        Send the payload to the bridge.

        Raises:
            httpx.HTTPStatusError, httpx.RequestError: left to the sync trigger to log
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(self.bridge_url, json=payload)
            response.raise_for_status()
