"""Pydantic record shapes for persisted loans and savings accounts"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel

from phantom_wallet.domain.models import (
    COMBINED_SAVINGS,
    Loan,
    LoanStatus,
    SavingsAccount,
    SavingsStatus,
)


class SavingsAccountRecord(BaseModel):
    """Stored savings account: dates as ISO-8601, money as decimal strings"""

    id: str
    owner_id: str
    principal: Decimal
    annual_interest_rate: Decimal
    lock_period_months: int
    start_date: datetime
    maturity_date: datetime
    status: SavingsStatus
    withdrawn_at: Optional[datetime] = None
    payout_amount: Optional[Decimal] = None

    @classmethod
    def from_domain(cls, account: SavingsAccount) -> "SavingsAccountRecord":
        return cls(**vars(account))

    def to_domain(self) -> SavingsAccount:
        return SavingsAccount(**self.model_dump())


class LoanRecord(BaseModel):
    """Stored loan: dates as ISO-8601, money as decimal strings"""

    id: str
    owner_id: str
    amount: Decimal
    interest_rate: Decimal
    total_interest: Decimal
    total_repayment: Decimal
    disbursement_date: datetime
    due_date: datetime
    status: LoanStatus
    repaid_amount: Decimal
    remaining_amount: Decimal
    auto_deduct_from_savings: bool = True
    savings_account_id: str = COMBINED_SAVINGS

    @classmethod
    def from_domain(cls, loan: Loan) -> "LoanRecord":
        return cls(**vars(loan))

    def to_domain(self) -> Loan:
        return Loan(**self.model_dump())


def dump_savings_account(account: SavingsAccount) -> Dict[str, Any]:
    return SavingsAccountRecord.from_domain(account).model_dump(mode="json")


def load_savings_account(data: Dict[str, Any]) -> SavingsAccount:
    return SavingsAccountRecord.model_validate(data).to_domain()


def dump_loan(loan: Loan) -> Dict[str, Any]:
    return LoanRecord.from_domain(loan).model_dump(mode="json")


def load_loan(data: Dict[str, Any]) -> Loan:
    return LoanRecord.model_validate(data).to_domain()
