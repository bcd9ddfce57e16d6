"""Loan interest calculator - fixed-term simple interest per premium tier"""

from datetime import datetime
from decimal import Decimal
from typing import List

from phantom_wallet.domain.models import LoanQuote, PremiumTier, RepaymentSchedule, ScheduledPayment
from phantom_wallet.domain.rates import loan_rate
from phantom_wallet.utils.date_utils import add_months
from phantom_wallet.utils.money_utils import floor_cent, round_whole, to_money

LOAN_TERM_MONTHS = 6


def calculate_loan_interest(principal: Decimal, tier: PremiumTier, term_months: int = LOAN_TERM_MONTHS) -> LoanQuote:
    """
    Quote interest and total repayment for a loan.

    totalInterest = principal * annualRate * term/12, rounded half-up to a
    whole unit. The quoted figures are exactly what gets persisted on
    disbursement.

    Example:
        100000 at basic (20%) for 6 months -> interest 10000, repayment 110000
    """
    rate = loan_rate(tier)
    principal = Decimal(principal)
    interest = principal * (rate / 100) * Decimal(term_months) / 12

    return LoanQuote(
        rate=rate,
        total_interest=round_whole(interest),
        total_repayment=round_whole(principal + interest),
    )


def _split_evenly(total: Decimal, parts: int) -> List[Decimal]:
    """Equal cent-floored shares; the last share absorbs the remainder"""
    base = floor_cent(total / parts)
    return [base] * (parts - 1) + [total - base * (parts - 1)]


def generate_repayment_schedule(
    total_repayment: Decimal,
    total_interest: Decimal,
    start_date: datetime,
    term_months: int = LOAN_TERM_MONTHS,
) -> RepaymentSchedule:
    """
    Split a loan's total repayment into equal monthly instalments.

    Requirements:
    - one instalment per month of the term, due on the monthly anniversary
      of `start_date` (the last falls on the loan's due date)
    - amounts and their principal/interest parts are whole cents
    - the last instalment absorbs rounding so the schedule sums exactly to
      total_repayment, and the interest parts to total_interest

    Example:
        10000 at basic -> total 11000 over 6 months
        11000 / 6 = 1833.333.. -> [1833.33] * 5 + [1833.35]
    """
    total_repayment = to_money(total_repayment)
    total_interest = to_money(total_interest)
    if term_months <= 0 or total_repayment <= 0:
        return RepaymentSchedule(monthly_payment=Decimal("0.00"), payments=[])

    amounts = _split_evenly(total_repayment, term_months)
    interests = _split_evenly(total_interest, term_months)

    payments = [
        ScheduledPayment(
            month=month,
            due_date=add_months(start_date, month),
            amount=amount,
            principal=amount - interest,
            interest=interest,
        )
        for month, (amount, interest) in enumerate(zip(amounts, interests), start=1)
    ]
    return RepaymentSchedule(monthly_payment=amounts[0], payments=payments)
