"""Savings valuation engine - monthly-compounded projections of time-locked savings"""

from datetime import datetime
from decimal import Decimal

from phantom_wallet.domain.models import SavingsAccount, SavingsValuation
from phantom_wallet.utils.date_utils import months_between, days_until
from phantom_wallet.utils.money_utils import to_money


def monthly_rate(annual_interest_rate: Decimal) -> Decimal:
    return Decimal(annual_interest_rate) / 12 / 100


def compound_value(principal: Decimal, annual_interest_rate: Decimal, months) -> Decimal:
    """
    principal * (1 + annual/12/100) ^ months, unrounded.

    Zero principal or zero months returns the principal untouched.
    """
    principal = Decimal(principal)
    months = Decimal(months)
    if principal <= 0 or months <= 0:
        return principal
    return principal * (1 + monthly_rate(annual_interest_rate)) ** months


def project_maturity_value(account: SavingsAccount) -> Decimal:
    """Full lock-period value; collateral sizing always uses this projection"""
    return compound_value(account.principal, account.annual_interest_rate, account.lock_period_months)


def elapsed_months(account: SavingsAccount, now: datetime) -> Decimal:
    """Months accrued so far, clamped to the lock period"""
    if now >= account.maturity_date:
        return Decimal(account.lock_period_months)
    return min(months_between(account.start_date, now), Decimal(account.lock_period_months))


def value_savings(account: SavingsAccount, now: datetime) -> SavingsValuation:
    """
    Project an account's value at `now`.

    Interest never accrues past the lock period: once `now` reaches the
    maturity date the current value equals the maturity value.
    Figures are rounded half-up to 0.01.
    """
    months = elapsed_months(account, now)
    current_value = to_money(compound_value(account.principal, account.annual_interest_rate, months))
    principal = to_money(account.principal)

    return SavingsValuation(
        months_elapsed=months,
        maturity_value=to_money(project_maturity_value(account)),
        current_value=current_value,
        earned_interest=current_value - principal,
        days_to_maturity=days_until(now, account.maturity_date),
    )
