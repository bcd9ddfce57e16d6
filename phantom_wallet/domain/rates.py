"""Premium tier rate tables - the single source of truth for savings and loan pricing"""

from decimal import Decimal
from typing import Dict, List

from phantom_wallet.domain.models import PremiumTier

# Annual percentages, keyed by the same tier enumeration
SAVINGS_RATES: Dict[PremiumTier, Decimal] = {
    PremiumTier.BASIC: Decimal("6"),
    PremiumTier.PLUS: Decimal("12"),
    PremiumTier.VIP: Decimal("18"),
}

LOAN_RATES: Dict[PremiumTier, Decimal] = {
    PremiumTier.BASIC: Decimal("20"),
    PremiumTier.PLUS: Decimal("18"),
    PremiumTier.VIP: Decimal("15"),
}

# Collateral sizing always prices at the most expensive (basic) loan rate
SIZING_TIER = PremiumTier.BASIC


def savings_rate(tier: PremiumTier) -> Decimal:
    """Annual savings rate in percent for a tier"""
    return SAVINGS_RATES.get(tier, SAVINGS_RATES[PremiumTier.BASIC])


def loan_rate(tier: PremiumTier) -> Decimal:
    """Annual loan rate in percent for a tier"""
    return LOAN_RATES.get(tier, LOAN_RATES[PremiumTier.BASIC])


def sizing_loan_rate() -> Decimal:
    """Conservative loan rate as a fraction, used for maximum-amount sizing"""
    return loan_rate(SIZING_TIER) / 100


def rate_spread_violations() -> List[PremiumTier]:
    """
    Tiers whose loan rate does not exceed their savings rate.

    Each tier must lend strictly above what it pays on savings for a loan
    to be net-revenue-positive. The shipped vip pricing (18% savings vs
    15% loans) is reported here.
    """
    return [tier for tier in PremiumTier if loan_rate(tier) <= savings_rate(tier)]
