"""Revenue ledger webhook client with exponential backoff retry logic"""

import httpx
import asyncio
from typing import Dict, Any
from phantom_wallet.config import settings
from phantom_wallet.domain.exceptions import LedgerServiceError
from phantom_wallet.domain.models import RevenueEvent
from phantom_wallet.infrastructure.observability.metrics import webhook_latency_histogram, webhook_failure_counter


def revenue_payload(event: RevenueEvent) -> Dict[str, Any]:
    return {
        "amount": str(event.amount),
        "category": event.category,
        "source_id": event.source_id,
        "user_id": event.user_id,
        "description": event.description,
        "direction": event.direction,
    }


class LedgerClient:
    """Client for sending revenue events to the operator ledger"""

    def __init__(
        self,
        webhook_url: str | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = webhook_url or settings.ledger_webhook_url
        self.max_retries = max_retries if max_retries is not None else settings.webhook_max_retries
        self.backoff_base = backoff_base if backoff_base is not None else settings.webhook_backoff_base
        self.transport = transport

    async def record_revenue(self, event: RevenueEvent) -> None:
        """
        Send a revenue or expense event to the ledger with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s, 16s (base^attempt)
        - Retries on 5xx errors and network failures
        - Tracks latency histogram and failure counter

        Raises:
            LedgerServiceError: After the final failed attempt
        """
        payload = revenue_payload(event)
        attempt = 0
        async with httpx.AsyncClient(transport=self.transport) as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(
                            self.webhook_url,
                            json=payload,
                            timeout=10.0,
                        )
                        response.raise_for_status()
                        return  # Success

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    webhook_failure_counter.inc()

                    if attempt >= self.max_retries:
                        raise LedgerServiceError(f"Ledger delivery failed after {attempt} attempts: {e}") from e

                    # Exponential backoff: 1s, 2s, 4s, 8s, 16s
                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
