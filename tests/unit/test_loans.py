"""Unit tests for loan disbursement and repayment transitions"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from conftest import NOW, make_account, make_loan
from phantom_wallet.domain.eligibility import REASON_EXISTING_LOAN
from phantom_wallet.domain.exceptions import AmountExceedsLimit, IneligibleForLoan, InvalidInput, NotFound
from phantom_wallet.domain.loans import (
    apply_repayment,
    disburse_loan,
    find_loan,
    loan_schedule,
    loan_term_months,
    outstanding_loan,
)
from phantom_wallet.domain.models import LoanStatus, PremiumTier


def test_disburse_loan_locks_terms_at_tier():
    loan = disburse_loan("user_1", Decimal("10000"), PremiumTier.PLUS, [make_account()], [], NOW)

    assert loan.amount == Decimal("10000")
    assert loan.interest_rate == Decimal("18")
    assert loan.total_interest == Decimal("900")
    assert loan.total_repayment == Decimal("10900")
    assert loan.remaining_amount == Decimal("10900")
    assert loan.repaid_amount == 0
    assert loan.status == LoanStatus.ACTIVE
    assert loan.auto_deduct_from_savings is True
    assert loan.disbursement_date == NOW
    assert loan.due_date == datetime(2025, 7, 15, 9, 30, tzinfo=timezone.utc)


def test_disburse_max_amount_is_covered():
    """Borrowing exactly the advisory maximum still passes the coverage check"""
    loan = disburse_loan("user_1", Decimal("45925"), PremiumTier.BASIC, [make_account()], [], NOW)

    assert loan.total_repayment == Decimal("50518")


def test_second_loan_is_ineligible():
    with pytest.raises(IneligibleForLoan) as exc_info:
        disburse_loan("user_1", Decimal("5000"), PremiumTier.BASIC, [make_account()], [make_loan()], NOW)

    assert exc_info.value.reason == REASON_EXISTING_LOAN


def test_amount_above_max_rejected():
    with pytest.raises(AmountExceedsLimit):
        disburse_loan("user_1", Decimal("45926"), PremiumTier.BASIC, [make_account()], [], NOW)


@pytest.mark.parametrize("amount", ["0", "-5", "999"])
def test_invalid_amounts_rejected(amount):
    with pytest.raises(InvalidInput):
        disburse_loan("user_1", Decimal(amount), PremiumTier.BASIC, [make_account()], [], NOW)


def test_exact_repayment_marks_loan_repaid():
    loan = make_loan(amount="10000", total_interest="1000")
    repaid = apply_repayment(loan, Decimal("11000"))

    assert repaid.status == LoanStatus.REPAID
    assert repaid.remaining_amount == 0
    assert repaid.repaid_amount == Decimal("11000")


def test_partial_repayment_stays_active():
    loan = apply_repayment(make_loan(), Decimal("4000"))

    assert loan.status == LoanStatus.ACTIVE
    assert loan.repaid_amount == Decimal("4000")
    assert loan.remaining_amount == Decimal("7000")


def test_over_repayment_rejected_and_loan_unchanged():
    loan = make_loan(repaid="3000")

    with pytest.raises(AmountExceedsLimit, match="remaining balance"):
        apply_repayment(loan, Decimal("8000.01"))

    assert loan.repaid_amount == Decimal("3000")
    assert loan.remaining_amount == Decimal("8000")
    assert loan.status == LoanStatus.ACTIVE


def test_non_positive_repayment_rejected():
    with pytest.raises(InvalidInput):
        apply_repayment(make_loan(), Decimal("0"))


def test_overdue_is_derived_at_read_time():
    loan = make_loan()

    assert loan.effective_status(loan.due_date) == LoanStatus.ACTIVE
    assert loan.effective_status(loan.due_date + timedelta(seconds=1)) == LoanStatus.OVERDUE
    assert loan.status == LoanStatus.ACTIVE

    repaid = apply_repayment(loan, loan.remaining_amount)
    assert repaid.effective_status(loan.due_date + timedelta(days=30)) == LoanStatus.REPAID


def test_find_and_outstanding_loan():
    loans = [make_loan(loan_id="old", repaid="11000", status=LoanStatus.REPAID), make_loan(loan_id="new")]

    assert find_loan(loans, "old").status == LoanStatus.REPAID
    assert outstanding_loan(loans).id == "new"
    with pytest.raises(NotFound, match="loan not found"):
        find_loan(loans, "missing")


def test_amounts_are_rounded_to_cents():
    loan = disburse_loan("user_1", Decimal("1000.005"), PremiumTier.BASIC, [make_account()], [], NOW)
    assert loan.amount == Decimal("1000.01")

    repaid = apply_repayment(make_loan(), Decimal("250.004"))
    assert repaid.repaid_amount == Decimal("250.00")
    assert repaid.remaining_amount == Decimal("10750.00")


def test_stored_loan_schedule_sums_to_total_repayment():
    loan = disburse_loan("user_1", Decimal("10000"), PremiumTier.PLUS, [make_account()], [], NOW)

    schedule = loan_schedule(loan)

    assert loan_term_months(loan) == 6
    assert len(schedule.payments) == 6
    assert schedule.total == loan.total_repayment == Decimal("10900")
    assert schedule.payments[-1].due_date == loan.due_date
