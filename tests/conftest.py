"""Pytest fixtures for testing"""

import asyncio
import pytest
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Generator, List
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from phantom_wallet.api.dependencies import get_clock, get_ledger_client, get_wallet_client
from phantom_wallet.api.main import create_app
from phantom_wallet.domain.exceptions import LedgerServiceError, WalletServiceError
from phantom_wallet.domain.models import (
    Loan,
    LoanStatus,
    PremiumTier,
    RevenueEvent,
    SavingsAccount,
    SavingsStatus,
)
from phantom_wallet.infrastructure.database.models import Base
from phantom_wallet.infrastructure.database.session import build_engine, get_db
from phantom_wallet.services.locks import UserLockRegistry
from phantom_wallet.utils.date_utils import add_months


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

NOW = datetime(2025, 1, 15, 9, 30, tzinfo=timezone.utc)


class FrozenClock:
    """Settable clock standing in for utc_now"""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeWalletClient:
    """In-memory wallet service; yields to the loop on every call like real I/O"""

    def __init__(self):
        self.balances: Dict[str, Decimal] = {}
        self.tiers: Dict[str, PremiumTier] = {}
        self.fail_set_balance = False

    async def get_balance(self, user_id: str) -> Decimal:
        await asyncio.sleep(0)
        return self.balances.get(user_id, Decimal("0"))

    async def get_premium_tier(self, user_id: str) -> PremiumTier:
        await asyncio.sleep(0)
        return self.tiers.get(user_id, PremiumTier.BASIC)

    async def set_balance(self, user_id: str, balance: Decimal) -> None:
        await asyncio.sleep(0)
        if self.fail_set_balance:
            raise WalletServiceError("Wallet API error: 503")
        self.balances[user_id] = balance


class FakeLedgerClient:
    """Collects revenue events; can be switched to fail every delivery"""

    def __init__(self):
        self.events: List[RevenueEvent] = []
        self.fail = False

    async def record_revenue(self, event: RevenueEvent) -> None:
        if self.fail:
            raise LedgerServiceError("Ledger delivery failed after 5 attempts")
        self.events.append(event)


def make_account(
    principal="50000",
    rate="6",
    lock_period_months=6,
    start=NOW,
    status=SavingsStatus.ACTIVE,
    owner_id="user_1",
    account_id="sav_1",
) -> SavingsAccount:
    return SavingsAccount(
        id=account_id,
        owner_id=owner_id,
        principal=Decimal(principal),
        annual_interest_rate=Decimal(rate),
        lock_period_months=lock_period_months,
        start_date=start,
        maturity_date=add_months(start, lock_period_months),
        status=status,
    )


def make_loan(
    amount="10000",
    total_interest="1000",
    repaid="0",
    disbursed=NOW,
    status=LoanStatus.ACTIVE,
    owner_id="user_1",
    loan_id="loan_1",
) -> Loan:
    total = Decimal(amount) + Decimal(total_interest)
    return Loan(
        id=loan_id,
        owner_id=owner_id,
        amount=Decimal(amount),
        interest_rate=Decimal("20"),
        total_interest=Decimal(total_interest),
        total_repayment=total,
        disbursement_date=disbursed,
        due_date=add_months(disbursed, 6),
        status=status,
        repaid_amount=Decimal(repaid),
        remaining_amount=max(Decimal("0"), total - Decimal(repaid)),
    )


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def wallet() -> FakeWalletClient:
    return FakeWalletClient()


@pytest.fixture
def ledger() -> FakeLedgerClient:
    return FakeLedgerClient()


@pytest.fixture
def locks() -> UserLockRegistry:
    return UserLockRegistry()


@pytest.fixture
def client(db: Session, wallet: FakeWalletClient, ledger: FakeLedgerClient, clock: FrozenClock) -> TestClient:
    """Create FastAPI test client with test database and fake collaborators"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_wallet_client] = lambda: wallet
    app.dependency_overrides[get_ledger_client] = lambda: ledger
    app.dependency_overrides[get_clock] = lambda: clock
    return TestClient(app)
