"""Unit tests for record serialization"""

import json
from datetime import datetime, timezone
from decimal import Decimal
from conftest import make_account, make_loan
from phantom_wallet.domain.models import LoanStatus, SavingsStatus
from phantom_wallet.infrastructure.database.records import (
    dump_loan,
    dump_savings_account,
    load_loan,
    load_savings_account,
)


def test_savings_account_round_trip():
    account = make_account(
        principal="12345.67",
        start=datetime(2025, 3, 31, 23, 59, 59, 123456, tzinfo=timezone.utc),
    )
    account.status = SavingsStatus.WITHDRAWN
    account.withdrawn_at = datetime(2025, 5, 2, tzinfo=timezone.utc)
    account.payout_amount = Decimal("11728.39")

    data = json.loads(json.dumps(dump_savings_account(account)))

    assert data["principal"] == "12345.67"
    assert data["start_date"].startswith("2025-03-31T23:59:59.123456")
    assert data["status"] == "withdrawn"
    assert load_savings_account(data) == account


def test_loan_round_trip():
    loan = make_loan(amount="45925", total_interest="4593", repaid="1000.5")

    data = json.loads(json.dumps(dump_loan(loan)))

    assert data["remaining_amount"] == "49517.5"
    assert data["status"] == "active"
    assert data["savings_account_id"] == "combined_savings"
    restored = load_loan(data)
    assert restored == loan
    assert restored.due_date == loan.due_date
    assert restored.status is LoanStatus.ACTIVE
