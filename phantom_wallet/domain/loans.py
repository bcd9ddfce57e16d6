"""Loan lifecycle - disbursement and repayment transitions (pure, no I/O)"""

import uuid
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from phantom_wallet.domain.eligibility import (
    MINIMUM_LOAN_AMOUNT,
    get_loan_eligibility,
    verify_collateral_coverage,
)
from phantom_wallet.domain.exceptions import (
    AmountExceedsLimit,
    IneligibleForLoan,
    InvalidInput,
    NotFound,
)
from phantom_wallet.domain.loan_interest import LOAN_TERM_MONTHS, calculate_loan_interest, generate_repayment_schedule
from phantom_wallet.domain.models import Loan, LoanStatus, PremiumTier, RepaymentSchedule, SavingsAccount
from phantom_wallet.utils.date_utils import add_months
from phantom_wallet.utils.money_utils import to_money


def find_loan(loans: List[Loan], loan_id: str) -> Loan:
    for loan in loans:
        if loan.id == loan_id:
            return loan
    raise NotFound("loan not found")


def outstanding_loan(loans: List[Loan]) -> Optional[Loan]:
    """The single active-or-overdue loan, if any"""
    return next((loan for loan in loans if loan.is_outstanding), None)


def disburse_loan(
    owner_id: str,
    amount: Decimal,
    tier: PremiumTier,
    accounts: List[SavingsAccount],
    loans: List[Loan],
    now: datetime,
    minimum_loan_amount: Decimal = MINIMUM_LOAN_AMOUNT,
    term_months: int = LOAN_TERM_MONTHS,
) -> Loan:
    """
    Validate an application and build the new loan record.

    Order of checks:
    - amount must be positive
    - eligibility rules (raises IneligibleForLoan with the first failing reason)
    - amount within [minimum loan, advisory maximum]
    - total repayment at the borrower's tier strictly below pooled collateral

    Raises:
        InvalidInput, IneligibleForLoan, AmountExceedsLimit
    """
    amount = to_money(amount)
    if amount <= 0:
        raise InvalidInput("loan amount must be positive")

    eligibility = get_loan_eligibility(accounts, loans, minimum_loan_amount)
    if not eligibility.eligible:
        raise IneligibleForLoan(eligibility.reason)

    if amount < minimum_loan_amount:
        raise InvalidInput(f"minimum loan amount is {int(minimum_loan_amount):,}")
    if amount > eligibility.max_amount:
        raise AmountExceedsLimit("amount exceeds maximum eligible loan")

    quote = calculate_loan_interest(amount, tier, term_months)
    verify_collateral_coverage(quote, accounts)

    return Loan(
        id=str(uuid.uuid4()),
        owner_id=owner_id,
        amount=amount,
        interest_rate=quote.rate,
        total_interest=quote.total_interest,
        total_repayment=quote.total_repayment,
        disbursement_date=now,
        due_date=add_months(now, term_months),
        status=LoanStatus.ACTIVE,
        repaid_amount=Decimal("0"),
        remaining_amount=quote.total_repayment,
        auto_deduct_from_savings=True,
    )


def apply_repayment(loan: Loan, amount: Decimal) -> Loan:
    """
    Return the loan with `amount` applied; the input loan is left untouched.

    Raises:
        InvalidInput: amount is not positive
        AmountExceedsLimit: amount exceeds the remaining balance
    """
    amount = to_money(amount)
    if amount <= 0:
        raise InvalidInput("repayment amount must be positive")
    if amount > loan.remaining_amount:
        raise AmountExceedsLimit("amount exceeds remaining balance")

    repaid = loan.repaid_amount + amount
    remaining = max(Decimal("0"), loan.total_repayment - repaid)
    status = LoanStatus.REPAID if remaining == 0 else loan.status

    return replace(loan, repaid_amount=repaid, remaining_amount=remaining, status=status)


def replace_loan(loans: List[Loan], updated: Loan) -> List[Loan]:
    return [updated if loan.id == updated.id else loan for loan in loans]


def loan_term_months(loan: Loan) -> int:
    """Term recovered from the stored dates; due_date is always a whole number of months out"""
    start, due = loan.disbursement_date, loan.due_date
    return (due.year - start.year) * 12 + due.month - start.month


def loan_schedule(loan: Loan) -> RepaymentSchedule:
    return generate_repayment_schedule(
        loan.total_repayment, loan.total_interest, loan.disbursement_date, loan_term_months(loan)
    )
