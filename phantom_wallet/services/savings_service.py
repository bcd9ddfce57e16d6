"""Savings lifecycle manager - orchestrates deposits and withdrawals"""

import time
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from phantom_wallet.config import Settings, settings as default_settings
from phantom_wallet.domain.exceptions import AmountExceedsLimit
from phantom_wallet.domain.models import SavingsDeposit, SavingsSnapshot, SavingsWithdrawal
from phantom_wallet.domain.savings import (
    ensure_collateral_released,
    find_account,
    open_savings_account,
    replace_account,
    settle_withdrawal,
)
from phantom_wallet.domain.valuation import value_savings
from phantom_wallet.infrastructure.clients.wallet import WalletClient
from phantom_wallet.infrastructure.database.repositories import LoanRepository, SavingsRepository, transaction
from phantom_wallet.infrastructure.observability.logging import log_savings_event
from phantom_wallet.infrastructure.observability.metrics import savings_opened_counter, savings_withdrawal_counter
from phantom_wallet.services.locks import UserLockRegistry
from phantom_wallet.services.common import require_user, settlement_events
from phantom_wallet.utils.date_utils import utc_now


class SavingsService:
    """Savings operations for one request"""

    def __init__(
        self,
        db: Session,
        wallet: WalletClient,
        locks: UserLockRegistry,
        clock: Callable[[], datetime] = utc_now,
        config: Settings = default_settings,
    ):
        self.db = db
        self.savings = SavingsRepository(db)
        self.loans = LoanRepository(db)
        self.wallet = wallet
        self.locks = locks
        self.clock = clock
        self.config = config

    def list_accounts(self, user_id: Optional[str]) -> List[SavingsSnapshot]:
        user_id = require_user(user_id)
        now = self.clock()
        return [
            SavingsSnapshot(account=a, status=a.effective_status(now), valuation=value_savings(a, now))
            for a in self.savings.get_accounts(user_id)
        ]

    async def create(self, user_id: Optional[str], amount: Decimal, lock_period_months: int) -> SavingsDeposit:
        """Lock `amount` from the wallet at the user's current tier rate"""
        user_id = require_user(user_id)
        start_time = time.time()

        async with self.locks.lock(user_id):
            now = self.clock()
            tier = await self.wallet.get_premium_tier(user_id)
            account = open_savings_account(
                owner_id=user_id,
                amount=amount,
                lock_period_months=lock_period_months,
                tier=tier,
                now=now,
                minimum_deposit=self.config.minimum_savings_deposit,
            )

            balance = await self.wallet.get_balance(user_id)
            if account.principal > balance:
                raise AmountExceedsLimit("amount exceeds available funds")

            accounts = self.savings.get_accounts(user_id)
            with transaction(self.db):
                self.savings.save_accounts(user_id, accounts + [account])
                await self.wallet.set_balance(user_id, balance - account.principal)

        savings_opened_counter.labels(lock_period=str(lock_period_months)).inc()
        log_savings_event(
            "deposit",
            user_id,
            account.id,
            account.principal,
            (time.time() - start_time) * 1000,
            lock_period_months=lock_period_months,
            annual_interest_rate=account.annual_interest_rate,
        )
        return SavingsDeposit(account=account, debited_amount=account.principal)

    async def withdraw(self, user_id: Optional[str], account_id: str) -> SavingsWithdrawal:
        """
        Close an account and credit its payout to the wallet.

        Early withdrawals pay principal less the penalty. Withdrawals that
        would leave an outstanding loan under-collateralized are refused.
        Penalty revenue and interest expense are returned for the ledger.
        """
        user_id = require_user(user_id)
        start_time = time.time()

        async with self.locks.lock(user_id):
            now = self.clock()
            accounts = self.savings.get_accounts(user_id)
            account = find_account(accounts, account_id)
            settlement = settle_withdrawal(account, now, self.config.early_withdrawal_penalty_rate)
            ensure_collateral_released(accounts, account_id, self.loans.get_loans(user_id))

            balance = await self.wallet.get_balance(user_id)
            with transaction(self.db):
                self.savings.save_accounts(user_id, replace_account(accounts, settlement.account))
                await self.wallet.set_balance(user_id, balance + settlement.payout)

        savings_withdrawal_counter.labels(kind="early" if settlement.early else "matured").inc()
        events = settlement_events(settlement, user_id, "savings account withdrawal")

        log_savings_event(
            "withdrawal",
            user_id,
            account_id,
            settlement.payout,
            (time.time() - start_time) * 1000,
            early=settlement.early,
            penalty=settlement.penalty,
        )
        return SavingsWithdrawal(settlement=settlement, revenue_events=events)
