"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

COMBINED_SAVINGS = "combined_savings"


class PremiumTier(str, Enum):
    """User classification that parameterizes savings and loan rates"""

    BASIC = "basic"
    PLUS = "plus"
    VIP = "vip"

    @classmethod
    def parse(cls, value: Optional[str]) -> "PremiumTier":
        """Unknown or missing tiers read as basic"""
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.BASIC


class SavingsStatus(str, Enum):
    ACTIVE = "active"
    MATURED = "matured"
    WITHDRAWN = "withdrawn"


class LoanStatus(str, Enum):
    ACTIVE = "active"
    OVERDUE = "overdue"
    REPAID = "repaid"


@dataclass
class SavingsAccount:
    """Time-locked savings account; status only ever stores active or withdrawn"""

    id: str
    owner_id: str
    principal: Decimal
    annual_interest_rate: Decimal  # percent, e.g. 6 for 6%
    lock_period_months: int
    start_date: datetime
    maturity_date: datetime
    status: SavingsStatus = SavingsStatus.ACTIVE
    withdrawn_at: Optional[datetime] = None
    payout_amount: Optional[Decimal] = None

    def effective_status(self, now: datetime) -> SavingsStatus:
        """Matured is a read-time projection of an active account past maturity"""
        if self.status == SavingsStatus.WITHDRAWN:
            return SavingsStatus.WITHDRAWN
        if now >= self.maturity_date:
            return SavingsStatus.MATURED
        return SavingsStatus.ACTIVE

    @property
    def is_withdrawn(self) -> bool:
        return self.status == SavingsStatus.WITHDRAWN


@dataclass
class Loan:
    """Fixed-term loan backed by the owner's pooled savings"""

    id: str
    owner_id: str
    amount: Decimal
    interest_rate: Decimal  # percent
    total_interest: Decimal
    total_repayment: Decimal
    disbursement_date: datetime
    due_date: datetime
    status: LoanStatus = LoanStatus.ACTIVE
    repaid_amount: Decimal = Decimal("0")
    remaining_amount: Decimal = Decimal("0")
    auto_deduct_from_savings: bool = True
    savings_account_id: str = COMBINED_SAVINGS

    def effective_status(self, now: datetime) -> LoanStatus:
        """Overdue is a read-time projection of an unpaid loan past its due date"""
        if self.status == LoanStatus.REPAID:
            return LoanStatus.REPAID
        if now > self.due_date and self.remaining_amount > 0:
            return LoanStatus.OVERDUE
        return self.status

    @property
    def is_outstanding(self) -> bool:
        return self.status in (LoanStatus.ACTIVE, LoanStatus.OVERDUE)


@dataclass
class SavingsValuation:
    """Read-time projection of a savings account"""

    months_elapsed: Decimal
    maturity_value: Decimal
    current_value: Decimal
    earned_interest: Decimal
    days_to_maturity: int


@dataclass
class LoanQuote:
    """Interest and repayment owed for a principal at a tier's rate"""

    rate: Decimal  # percent
    total_interest: Decimal
    total_repayment: Decimal


@dataclass
class ScheduledPayment:
    """One monthly instalment of a loan's repayment schedule"""

    month: int
    due_date: datetime
    amount: Decimal
    principal: Decimal
    interest: Decimal


@dataclass
class RepaymentSchedule:
    """Monthly instalments over the loan term; the last one absorbs rounding"""

    monthly_payment: Decimal
    payments: List[ScheduledPayment]

    @property
    def total(self) -> Decimal:
        return sum((p.amount for p in self.payments), Decimal("0"))


@dataclass
class CollateralPool:
    """Pooled full-term projection of a user's active savings"""

    total_principal: Decimal
    total_projected_interest: Decimal
    account_count: int

    @property
    def total_value(self) -> Decimal:
        return self.total_principal + self.total_projected_interest


@dataclass
class LoanEligibility:
    """Outcome of the eligibility rules"""

    eligible: bool
    max_amount: int
    reason: Optional[str] = None


@dataclass
class WithdrawalSettlement:
    """Result of settling a savings withdrawal"""

    account: SavingsAccount
    payout: Decimal
    penalty: Decimal
    interest_paid: Decimal
    early: bool


@dataclass
class RevenueEvent:
    """Bookkeeping event for the operator revenue ledger"""

    amount: Decimal
    category: str  # loan_interest | early_withdrawal_penalty | savings_interest
    source_id: str
    user_id: str
    description: str
    direction: str = "revenue"  # revenue | expense


@dataclass
class LoanOffer:
    """Quote for a prospective loan with its monthly schedule"""

    quote: LoanQuote
    schedule: RepaymentSchedule


@dataclass
class SavingsSnapshot:
    """Account as of a read time, with derived status and valuation"""

    account: SavingsAccount
    status: SavingsStatus
    valuation: SavingsValuation


@dataclass
class LoanDisbursement:
    """New loan and the principal to credit to the wallet"""

    loan: Loan
    credited_amount: Decimal
    revenue_events: List[RevenueEvent] = field(default_factory=list)


@dataclass
class RepaymentResult:
    """Updated loan and the amount debited from the wallet"""

    loan: Loan
    debited_amount: Decimal


@dataclass
class SavingsDeposit:
    """New account and the amount debited from the wallet"""

    account: SavingsAccount
    debited_amount: Decimal


@dataclass
class SavingsWithdrawal:
    """Settled withdrawal and the ledger events it produced"""

    settlement: WithdrawalSettlement
    revenue_events: List[RevenueEvent] = field(default_factory=list)


@dataclass
class RecoveryResult:
    """Collateral seized for an overdue loan"""

    loan: Loan
    settlements: List[WithdrawalSettlement]
    credited_amount: Decimal
    revenue_events: List[RevenueEvent] = field(default_factory=list)
