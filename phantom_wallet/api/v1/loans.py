"""Loan endpoints - eligibility, quotes, disbursement, repayment and recovery"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from phantom_wallet.api.dependencies import get_ledger_client, get_loan_service, get_user_id
from phantom_wallet.api.v1.schemas import (
    DisbursementResponse,
    EligibilityResponse,
    LoanApplyRequest,
    LoanListResponse,
    LoanSchema,
    QuoteResponse,
    RecoveryResponse,
    RepaymentRequest,
    RepaymentResponse,
    RepaymentScheduleSchema,
)
from phantom_wallet.infrastructure.clients.ledger import LedgerClient
from phantom_wallet.services.loan_service import LoanService
from phantom_wallet.services.common import require_user, schedule_revenue

router = APIRouter()


@router.get("/loans", response_model=LoanListResponse)
def list_loans(
    user_id: Optional[str] = Depends(get_user_id),
    service: LoanService = Depends(get_loan_service),
):
    loans = service.list_loans(user_id)
    return LoanListResponse(user_id=require_user(user_id), loans=[LoanSchema.from_domain(loan) for loan in loans])


@router.get("/loans/eligibility", response_model=EligibilityResponse)
def get_eligibility(
    user_id: Optional[str] = Depends(get_user_id),
    service: LoanService = Depends(get_loan_service),
):
    """
    Eligibility against pooled active savings.

    Returns:
        eligible flag, advisory maximum principal, and the first failing reason
    """
    eligibility = service.get_eligibility(user_id)
    return EligibilityResponse(
        eligible=eligibility.eligible,
        max_amount=eligibility.max_amount,
        reason=eligibility.reason,
    )


@router.get("/loans/quote", response_model=QuoteResponse)
async def get_quote(
    amount: Decimal = Query(..., gt=0, description="Principal to price"),
    user_id: Optional[str] = Depends(get_user_id),
    service: LoanService = Depends(get_loan_service),
):
    offer = await service.quote(user_id, amount)
    quote = offer.quote
    return QuoteResponse(
        rate=quote.rate,
        total_interest=quote.total_interest,
        total_repayment=quote.total_repayment,
        schedule=RepaymentScheduleSchema.from_domain(offer.schedule),
    )


@router.post("/loans", response_model=DisbursementResponse, status_code=201)
async def apply_for_loan(
    request_body: LoanApplyRequest,
    background_tasks: BackgroundTasks,
    user_id: Optional[str] = Depends(get_user_id),
    service: LoanService = Depends(get_loan_service),
    ledger_client: LedgerClient = Depends(get_ledger_client),
):
    """
    Disburse a 6-month loan against pooled savings.

    Flow:
    1. Check eligibility and the advisory maximum
    2. Verify total repayment at the user's tier stays below pooled savings
    3. Persist the loan and credit the principal to the wallet
    4. Schedule the loan interest event for the revenue ledger
    """
    disbursement = await service.apply(user_id, request_body.amount)
    schedule_revenue(background_tasks, ledger_client, disbursement.revenue_events)
    return DisbursementResponse(
        loan=LoanSchema.from_domain(disbursement.loan),
        credited_amount=disbursement.credited_amount,
    )


@router.post("/loans/{loan_id}/repay", response_model=RepaymentResponse)
async def repay_loan(
    loan_id: str,
    request_body: RepaymentRequest,
    user_id: Optional[str] = Depends(get_user_id),
    service: LoanService = Depends(get_loan_service),
):
    result = await service.repay(user_id, loan_id, request_body.amount)
    return RepaymentResponse(loan=LoanSchema.from_domain(result.loan), debited_amount=result.debited_amount)


@router.post("/loans/{loan_id}/recover", response_model=RecoveryResponse)
async def recover_loan(
    loan_id: str,
    background_tasks: BackgroundTasks,
    user_id: Optional[str] = Depends(get_user_id),
    service: LoanService = Depends(get_loan_service),
    ledger_client: LedgerClient = Depends(get_ledger_client),
):
    """Settle an overdue loan from the user's savings (auto-deduct)"""
    result = await service.recover_from_collateral(user_id, loan_id)
    schedule_revenue(background_tasks, ledger_client, result.revenue_events)
    return RecoveryResponse(
        loan=LoanSchema.from_domain(result.loan),
        withdrawn_account_ids=[s.account.id for s in result.settlements],
        credited_amount=result.credited_amount,
    )
