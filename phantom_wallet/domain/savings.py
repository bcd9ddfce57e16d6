"""Savings lifecycle - account opening and withdrawal settlement (pure, no I/O)"""

import uuid
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import List

from phantom_wallet.domain.eligibility import pool_collateral
from phantom_wallet.domain.exceptions import CollateralInUse, InvalidInput, NotFound
from phantom_wallet.domain.loans import outstanding_loan
from phantom_wallet.domain.models import (
    Loan,
    PremiumTier,
    SavingsAccount,
    SavingsStatus,
    WithdrawalSettlement,
)
from phantom_wallet.domain.rates import savings_rate
from phantom_wallet.domain.valuation import value_savings
from phantom_wallet.utils.date_utils import add_months
from phantom_wallet.utils.money_utils import to_money

LOCK_PERIODS = (1, 3, 6, 12)
MINIMUM_SAVINGS_DEPOSIT = Decimal("500")
EARLY_WITHDRAWAL_PENALTY_RATE = Decimal("0.05")


def find_account(accounts: List[SavingsAccount], account_id: str) -> SavingsAccount:
    for account in accounts:
        if account.id == account_id:
            return account
    raise NotFound("savings account not found")


def open_savings_account(
    owner_id: str,
    amount: Decimal,
    lock_period_months: int,
    tier: PremiumTier,
    now: datetime,
    minimum_deposit: Decimal = MINIMUM_SAVINGS_DEPOSIT,
) -> SavingsAccount:
    """
    Build a new account locked at the tier's current savings rate.

    Raises:
        InvalidInput: amount below the minimum deposit or unsupported lock period
    """
    amount = to_money(amount)
    if amount <= 0:
        raise InvalidInput("deposit amount must be positive")
    if amount < minimum_deposit:
        raise InvalidInput(f"minimum deposit is {int(minimum_deposit):,}")
    if lock_period_months not in LOCK_PERIODS:
        raise InvalidInput("Invalid lock period. Must be 1, 3, 6, or 12 months")

    return SavingsAccount(
        id=str(uuid.uuid4()),
        owner_id=owner_id,
        principal=amount,
        annual_interest_rate=savings_rate(tier),
        lock_period_months=lock_period_months,
        start_date=now,
        maturity_date=add_months(now, lock_period_months),
        status=SavingsStatus.ACTIVE,
    )


def settle_withdrawal(
    account: SavingsAccount,
    now: datetime,
    penalty_rate: Decimal = EARLY_WITHDRAWAL_PENALTY_RATE,
) -> WithdrawalSettlement:
    """
    Close an account and compute its payout.

    At or after maturity the full compounded value is paid out. Before
    maturity only the principal less the penalty is paid; all accrued
    interest is forfeited.

    Raises:
        InvalidInput: account already withdrawn
    """
    if account.is_withdrawn:
        raise InvalidInput("savings account already withdrawn")

    early = now < account.maturity_date
    if early:
        penalty = to_money(account.principal * penalty_rate)
        payout = to_money(account.principal) - penalty
        interest_paid = Decimal("0.00")
    else:
        valuation = value_savings(account, now)
        penalty = Decimal("0.00")
        payout = valuation.current_value
        interest_paid = valuation.earned_interest

    closed = replace(account, status=SavingsStatus.WITHDRAWN, withdrawn_at=now, payout_amount=payout)
    return WithdrawalSettlement(
        account=closed,
        payout=payout,
        penalty=penalty,
        interest_paid=interest_paid,
        early=early,
    )


def ensure_collateral_released(accounts: List[SavingsAccount], account_id: str, loans: List[Loan]) -> None:
    """
    Refuse to withdraw collateral an outstanding loan still depends on.

    The remaining active accounts' pooled projection must stay strictly
    above the loan's remaining amount.

    Raises:
        CollateralInUse
    """
    loan = outstanding_loan(loans)
    if loan is None:
        return

    remaining = [a for a in accounts if a.id != account_id]
    if pool_collateral(remaining).total_value <= loan.remaining_amount:
        raise CollateralInUse("savings account is backing an active loan; repay the loan first")


def replace_account(accounts: List[SavingsAccount], updated: SavingsAccount) -> List[SavingsAccount]:
    return [updated if account.id == updated.id else account for account in accounts]
