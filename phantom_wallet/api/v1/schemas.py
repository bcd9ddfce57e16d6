"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from phantom_wallet.domain.loans import loan_schedule
from phantom_wallet.domain.models import Loan, LoanStatus, RepaymentSchedule, SavingsSnapshot, SavingsStatus


class SavingsCreateRequest(BaseModel):
    """Request body for POST /v1/savings"""

    amount: Decimal = Field(..., gt=0, description="Amount to lock from the wallet")
    lock_period_months: int = Field(..., description="One of 1, 3, 6 or 12")


class SavingsAccountSchema(BaseModel):
    """Savings account with read-time valuation"""

    id: str
    principal: Decimal
    annual_interest_rate: Decimal
    lock_period_months: int
    start_date: datetime
    maturity_date: datetime
    status: SavingsStatus
    current_value: Decimal
    earned_interest: Decimal
    days_to_maturity: int
    payout_amount: Optional[Decimal] = None

    @classmethod
    def from_snapshot(cls, snapshot: SavingsSnapshot) -> "SavingsAccountSchema":
        account, valuation = snapshot.account, snapshot.valuation
        return cls(
            id=account.id,
            principal=account.principal,
            annual_interest_rate=account.annual_interest_rate,
            lock_period_months=account.lock_period_months,
            start_date=account.start_date,
            maturity_date=account.maturity_date,
            status=snapshot.status,
            current_value=valuation.current_value,
            earned_interest=valuation.earned_interest,
            days_to_maturity=valuation.days_to_maturity,
            payout_amount=account.payout_amount,
        )


class SavingsListResponse(BaseModel):
    """Response for GET /v1/savings"""

    user_id: str
    accounts: List[SavingsAccountSchema]


class SavingsDepositResponse(BaseModel):
    """Response for POST /v1/savings"""

    account_id: str
    principal: Decimal
    annual_interest_rate: Decimal
    maturity_date: datetime
    debited_amount: Decimal


class WithdrawalResponse(BaseModel):
    """Response for POST /v1/savings/{account_id}/withdraw"""

    account_id: str
    payout: Decimal
    penalty: Decimal
    interest_paid: Decimal
    early: bool


class LoanApplyRequest(BaseModel):
    """Request body for POST /v1/loans"""

    amount: Decimal = Field(..., gt=0, description="Principal to borrow")


class RepaymentRequest(BaseModel):
    """Request body for POST /v1/loans/{loan_id}/repay"""

    amount: Decimal = Field(..., gt=0, description="Amount to repay from the wallet")


class ScheduledPaymentSchema(BaseModel):
    """One monthly instalment"""

    month: int
    due_date: datetime
    amount: Decimal
    principal: Decimal
    interest: Decimal


class RepaymentScheduleSchema(BaseModel):
    """Monthly repayment plan over the loan term"""

    monthly_payment: Decimal
    payments: List[ScheduledPaymentSchema]

    @classmethod
    def from_domain(cls, schedule: RepaymentSchedule) -> "RepaymentScheduleSchema":
        return cls(
            monthly_payment=schedule.monthly_payment,
            payments=[
                ScheduledPaymentSchema(
                    month=p.month,
                    due_date=p.due_date,
                    amount=p.amount,
                    principal=p.principal,
                    interest=p.interest,
                )
                for p in schedule.payments
            ],
        )


class LoanSchema(BaseModel):
    """Loan as stored, with overdue derived at read time"""

    id: str
    amount: Decimal
    interest_rate: Decimal
    total_interest: Decimal
    total_repayment: Decimal
    disbursement_date: datetime
    due_date: datetime
    status: LoanStatus
    repaid_amount: Decimal
    remaining_amount: Decimal
    auto_deduct_from_savings: bool
    schedule: RepaymentScheduleSchema

    @classmethod
    def from_domain(cls, loan: Loan) -> "LoanSchema":
        return cls(
            id=loan.id,
            amount=loan.amount,
            interest_rate=loan.interest_rate,
            total_interest=loan.total_interest,
            total_repayment=loan.total_repayment,
            disbursement_date=loan.disbursement_date,
            due_date=loan.due_date,
            status=loan.status,
            repaid_amount=loan.repaid_amount,
            remaining_amount=loan.remaining_amount,
            auto_deduct_from_savings=loan.auto_deduct_from_savings,
            schedule=RepaymentScheduleSchema.from_domain(loan_schedule(loan)),
        )


class LoanListResponse(BaseModel):
    """Response for GET /v1/loans"""

    user_id: str
    loans: List[LoanSchema]


class EligibilityResponse(BaseModel):
    """Response for GET /v1/loans/eligibility"""

    eligible: bool
    max_amount: int
    reason: Optional[str] = None


class QuoteResponse(BaseModel):
    """Response for GET /v1/loans/quote"""

    rate: Decimal
    total_interest: Decimal
    total_repayment: Decimal
    schedule: RepaymentScheduleSchema


class DisbursementResponse(BaseModel):
    """Response for POST /v1/loans"""

    loan: LoanSchema
    credited_amount: Decimal


class RepaymentResponse(BaseModel):
    """Response for POST /v1/loans/{loan_id}/repay"""

    loan: LoanSchema
    debited_amount: Decimal


class RecoveryResponse(BaseModel):
    """Response for POST /v1/loans/{loan_id}/recover"""

    loan: LoanSchema
    withdrawn_account_ids: List[str]
    credited_amount: Decimal
