"""Unit tests for the wallet and revenue ledger HTTP clients"""

import json
import httpx
import pytest
from decimal import Decimal
from phantom_wallet.domain.exceptions import LedgerServiceError, WalletServiceError
from phantom_wallet.domain.models import PremiumTier, RevenueEvent
from phantom_wallet.infrastructure.clients.ledger import LedgerClient
from phantom_wallet.infrastructure.clients.wallet import WalletClient


def wallet_with(payload: dict, status_code: int = 200) -> WalletClient:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/wallet/user_1"
        return httpx.Response(status_code, json=payload)

    return WalletClient(base_url="http://wallet.test", transport=httpx.MockTransport(handler))


async def test_get_balance_parses_decimal():
    client = wallet_with({"wallet_balance": "1520.75", "premium_status": False})

    assert await client.get_balance("user_1") == Decimal("1520.75")


@pytest.mark.parametrize(
    "payload,expected",
    [
        ({"wallet_balance": 0, "premium_status": False, "premium_plan": "vip"}, PremiumTier.BASIC),
        ({"wallet_balance": 0, "premium_status": True}, PremiumTier.PLUS),
        ({"wallet_balance": 0, "premium_status": True, "premium_plan": "vip"}, PremiumTier.VIP),
    ],
)
async def test_get_premium_tier(payload, expected):
    assert await wallet_with(payload).get_premium_tier("user_1") == expected


async def test_wallet_http_error_raises():
    with pytest.raises(WalletServiceError, match="503"):
        await wallet_with({}, status_code=503).get_balance("user_1")


async def test_wallet_missing_balance_raises():
    with pytest.raises(WalletServiceError, match="Invalid wallet data"):
        await wallet_with({"premium_status": True}).get_balance("user_1")


async def test_set_balance_puts_decimal_string():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(204)

    client = WalletClient(base_url="http://wallet.test", transport=httpx.MockTransport(handler))
    await client.set_balance("user_1", Decimal("9500.00"))

    assert seen == {"method": "PUT", "path": "/wallet/user_1/balance", "body": {"wallet_balance": "9500.00"}}


def revenue_event() -> RevenueEvent:
    return RevenueEvent(
        amount=Decimal("900"),
        category="loan_interest",
        source_id="loan_1",
        user_id="user_1",
        description="Loan interest revenue from loan (18% rate)",
    )


async def test_ledger_retries_then_succeeds():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(json.loads(request.content))
        return httpx.Response(500 if len(calls) < 3 else 200)

    client = LedgerClient(
        webhook_url="http://ledger.test/revenue",
        max_retries=5,
        backoff_base=0,
        transport=httpx.MockTransport(handler),
    )
    await client.record_revenue(revenue_event())

    assert len(calls) == 3
    assert calls[-1] == {
        "amount": "900",
        "category": "loan_interest",
        "source_id": "loan_1",
        "user_id": "user_1",
        "description": "Loan interest revenue from loan (18% rate)",
        "direction": "revenue",
    }


async def test_ledger_gives_up_after_max_retries():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = LedgerClient(
        webhook_url="http://ledger.test/revenue",
        max_retries=2,
        backoff_base=0,
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(LedgerServiceError, match="2 attempts"):
        await client.record_revenue(revenue_event())
