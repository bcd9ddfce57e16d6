"""Wallet service HTTP client - user balance and premium tier"""

import httpx
from decimal import Decimal, InvalidOperation
from typing import Any, Dict
from phantom_wallet.domain.models import PremiumTier
from phantom_wallet.domain.exceptions import WalletServiceError
from phantom_wallet.config import settings


class WalletClient:
    """Client for the external wallet/profile service that owns user balances"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.wallet_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    async def _get_wallet(self, user_id: str) -> Dict[str, Any]:
        async with self._client() as client:
            try:
                response = await client.get(f"/wallet/{user_id}")
                response.raise_for_status()
                return response.json()
            except httpx.TimeoutException as e:
                raise WalletServiceError(f"Wallet API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise WalletServiceError(f"Wallet API error: {e.response.status_code}") from e
            except (httpx.RequestError, ValueError) as e:
                raise WalletServiceError(f"Wallet API unavailable: {e}") from e

    async def get_balance(self, user_id: str) -> Decimal:
        """
        Read a user's spendable balance.

        Raises:
            WalletServiceError: On timeout, HTTP errors, or invalid response
        """
        data = await self._get_wallet(user_id)
        try:
            return Decimal(str(data["wallet_balance"]))
        except (KeyError, InvalidOperation) as e:
            raise WalletServiceError(f"Invalid wallet data: {e}") from e

    async def get_premium_tier(self, user_id: str) -> PremiumTier:
        """Premium users without a named plan are treated as plus"""
        data = await self._get_wallet(user_id)
        if not data.get("premium_status"):
            return PremiumTier.BASIC
        return PremiumTier.parse(data.get("premium_plan") or PremiumTier.PLUS.value)

    async def set_balance(self, user_id: str, balance: Decimal) -> None:
        """
        Overwrite a user's balance with the engine-computed value.

        Raises:
            WalletServiceError: On timeout or HTTP errors
        """
        async with self._client() as client:
            try:
                response = await client.put(
                    f"/wallet/{user_id}/balance",
                    json={"wallet_balance": str(balance)},
                )
                response.raise_for_status()
            except httpx.TimeoutException as e:
                raise WalletServiceError(f"Wallet API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise WalletServiceError(f"Wallet API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise WalletServiceError(f"Wallet API unavailable: {e}") from e
