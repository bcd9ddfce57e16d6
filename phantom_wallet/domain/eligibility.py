"""Loan eligibility engine - pooled-collateral sizing and eligibility rules"""

from decimal import Decimal
from typing import Iterable, List

from phantom_wallet.domain.exceptions import AmountExceedsLimit
from phantom_wallet.domain.models import (
    CollateralPool,
    Loan,
    LoanEligibility,
    LoanQuote,
    SavingsAccount,
    SavingsStatus,
)
from phantom_wallet.domain.rates import sizing_loan_rate
from phantom_wallet.domain.valuation import project_maturity_value
from phantom_wallet.utils.money_utils import floor_whole

MINIMUM_LOAN_AMOUNT = Decimal("1000")
SAFETY_MARGIN = Decimal("1")

REASON_NO_ACTIVE_SAVINGS = "You need at least one active savings account to qualify for a loan"
REASON_EXISTING_LOAN = "You already have an active loan. Please repay it before applying for a new one."
REASON_SAVINGS_TOO_LOW = "Combined savings amount too low for loan eligibility (minimum loan: {minimum:,})"


def active_savings(accounts: Iterable[SavingsAccount]) -> List[SavingsAccount]:
    """Accounts still locked as collateral; stored status only, matured-but-unwithdrawn counts"""
    return [a for a in accounts if a.status == SavingsStatus.ACTIVE]


def pool_collateral(accounts: Iterable[SavingsAccount]) -> CollateralPool:
    """Sum principal and full-term projected interest across all active accounts"""
    total_principal = Decimal("0")
    total_interest = Decimal("0")
    count = 0
    for account in active_savings(accounts):
        maturity_value = project_maturity_value(account)
        total_principal += account.principal
        total_interest += maturity_value - account.principal
        count += 1
    return CollateralPool(
        total_principal=total_principal,
        total_projected_interest=total_interest,
        account_count=count,
    )


def calculate_max_loan_amount(accounts: Iterable[SavingsAccount]) -> int:
    """
    Largest principal P with P + P * rate * 0.5 <= pooled value - 1.

    The rate is the basic-tier loan rate regardless of the borrower's
    tier, so plus/vip borrowers are deliberately under-quoted.

    Example:
        one account, 50000 at 6% for 6 months
        pooled = 50000 * 1.005^6 ~ 51518.88, budget ~ 50517.88
        P = floor(50517.88 / 1.10) = 45925
    """
    pool = pool_collateral(accounts)
    if pool.account_count == 0:
        return 0

    budget = pool.total_value - SAFETY_MARGIN
    max_amount = budget / (1 + sizing_loan_rate() * Decimal("0.5"))
    return max(0, floor_whole(max_amount))


def get_loan_eligibility(
    accounts: List[SavingsAccount],
    loans: List[Loan],
    minimum_loan_amount: Decimal = MINIMUM_LOAN_AMOUNT,
) -> LoanEligibility:
    """
    Decide eligibility. Rules are checked in order and the first failure wins:

    1. No active savings account
    2. An active or overdue loan exists
    3. Pooled maximum below the minimum loan
    """
    if not active_savings(accounts):
        return LoanEligibility(eligible=False, max_amount=0, reason=REASON_NO_ACTIVE_SAVINGS)

    # Stored status; overdue is derived from active so both are caught here
    if any(loan.is_outstanding for loan in loans):
        return LoanEligibility(eligible=False, max_amount=0, reason=REASON_EXISTING_LOAN)

    max_amount = calculate_max_loan_amount(accounts)
    if max_amount < minimum_loan_amount:
        return LoanEligibility(
            eligible=False,
            max_amount=0,
            reason=REASON_SAVINGS_TOO_LOW.format(minimum=int(minimum_loan_amount)),
        )

    return LoanEligibility(eligible=True, max_amount=max_amount)


def verify_collateral_coverage(quote: LoanQuote, accounts: Iterable[SavingsAccount]) -> None:
    """
    Authoritative disbursement check at the borrower's actual tier.

    Raises:
        AmountExceedsLimit: total repayment is not strictly below the pooled value
    """
    pool = pool_collateral(accounts)
    if quote.total_repayment >= pool.total_value:
        raise AmountExceedsLimit("total repayment exceeds pooled savings value")
