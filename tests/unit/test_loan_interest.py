"""Unit tests for the loan interest calculator"""

from datetime import datetime, timezone
from decimal import Decimal
from conftest import NOW
from phantom_wallet.domain.loan_interest import calculate_loan_interest, generate_repayment_schedule
from phantom_wallet.domain.models import PremiumTier


def test_basic_tier_six_month_simple_interest():
    """100000 at 20% for half a year"""
    quote = calculate_loan_interest(Decimal("100000"), PremiumTier.BASIC)

    assert quote.rate == Decimal("20")
    assert quote.total_interest == Decimal("10000")
    assert quote.total_repayment == Decimal("110000")


def test_higher_tiers_pay_less_interest():
    plus = calculate_loan_interest(Decimal("100000"), PremiumTier.PLUS)
    vip = calculate_loan_interest(Decimal("100000"), PremiumTier.VIP)

    assert (plus.rate, plus.total_interest, plus.total_repayment) == (Decimal("18"), Decimal("9000"), Decimal("109000"))
    assert (vip.rate, vip.total_interest, vip.total_repayment) == (Decimal("15"), Decimal("7500"), Decimal("107500"))


def test_rounds_to_whole_units_half_up():
    """1001 -> 100.1 interest; 1005 -> 100.5 interest"""
    low = calculate_loan_interest(Decimal("1001"), PremiumTier.BASIC)
    assert low.total_interest == Decimal("100")
    assert low.total_repayment == Decimal("1101")

    half = calculate_loan_interest(Decimal("1005"), PremiumTier.BASIC)
    assert half.total_interest == Decimal("101")
    assert half.total_repayment == Decimal("1106")


def test_schedule_divides_evenly():
    """120000 over 6 months splits into whole-cent instalments with nothing left over"""
    schedule = generate_repayment_schedule(Decimal("120000"), Decimal("20000"), NOW)

    assert schedule.monthly_payment == Decimal("20000.00")
    assert [p.amount for p in schedule.payments] == [Decimal("20000.00")] * 6
    assert schedule.total == Decimal("120000")


def test_schedule_last_payment_absorbs_remainder():
    """10000 at basic: 11000 / 6 does not divide into whole cents"""
    quote = calculate_loan_interest(Decimal("10000"), PremiumTier.BASIC)
    schedule = generate_repayment_schedule(quote.total_repayment, quote.total_interest, NOW)
    payments = schedule.payments

    assert schedule.monthly_payment == Decimal("1833.33")
    assert [p.amount for p in payments[:5]] == [Decimal("1833.33")] * 5
    assert payments[-1].amount == Decimal("1833.35")
    assert schedule.total == quote.total_repayment
    assert sum(p.interest for p in payments) == quote.total_interest
    assert sum(p.principal for p in payments) == Decimal("10000")
    assert all(p.amount == p.principal + p.interest for p in payments)


def test_schedule_matches_total_when_rounding_adds_a_unit():
    """1000.50 at basic: interest 100.05 -> 100 but total 1100.55 -> 1101"""
    quote = calculate_loan_interest(Decimal("1000.50"), PremiumTier.BASIC)
    schedule = generate_repayment_schedule(quote.total_repayment, quote.total_interest, NOW)

    assert quote.total_repayment == Decimal("1101")
    assert schedule.total == Decimal("1101")


def test_schedule_due_dates_are_monthly_anniversaries():
    start = datetime(2025, 1, 31, tzinfo=timezone.utc)
    schedule = generate_repayment_schedule(Decimal("1100"), Decimal("100"), start)

    assert [p.month for p in schedule.payments] == [1, 2, 3, 4, 5, 6]
    assert schedule.payments[0].due_date == datetime(2025, 2, 28, tzinfo=timezone.utc)
    assert schedule.payments[-1].due_date == datetime(2025, 7, 31, tzinfo=timezone.utc)


def test_schedule_for_empty_loan():
    schedule = generate_repayment_schedule(Decimal("0"), Decimal("0"), NOW)

    assert schedule.payments == []
    assert schedule.total == 0
