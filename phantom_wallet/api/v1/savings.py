"""Savings endpoints - list, open and withdraw time-locked accounts"""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends

from phantom_wallet.api.dependencies import get_ledger_client, get_savings_service, get_user_id
from phantom_wallet.api.v1.schemas import (
    SavingsAccountSchema,
    SavingsCreateRequest,
    SavingsDepositResponse,
    SavingsListResponse,
    WithdrawalResponse,
)
from phantom_wallet.infrastructure.clients.ledger import LedgerClient
from phantom_wallet.services.common import require_user, schedule_revenue
from phantom_wallet.services.savings_service import SavingsService

router = APIRouter()


@router.get("/savings", response_model=SavingsListResponse)
def list_savings(
    user_id: Optional[str] = Depends(get_user_id),
    service: SavingsService = Depends(get_savings_service),
):
    """User's savings accounts with current value, earned interest and days to maturity"""
    snapshots = service.list_accounts(user_id)
    return SavingsListResponse(
        user_id=require_user(user_id),
        accounts=[SavingsAccountSchema.from_snapshot(s) for s in snapshots],
    )


@router.post("/savings", response_model=SavingsDepositResponse, status_code=201)
async def create_savings(
    request_body: SavingsCreateRequest,
    user_id: Optional[str] = Depends(get_user_id),
    service: SavingsService = Depends(get_savings_service),
):
    """
    Open a savings account funded from the wallet.

    The annual rate is fixed from the user's premium tier at creation.
    """
    deposit = await service.create(user_id, request_body.amount, request_body.lock_period_months)
    return SavingsDepositResponse(
        account_id=deposit.account.id,
        principal=deposit.account.principal,
        annual_interest_rate=deposit.account.annual_interest_rate,
        maturity_date=deposit.account.maturity_date,
        debited_amount=deposit.debited_amount,
    )


@router.post("/savings/{account_id}/withdraw", response_model=WithdrawalResponse)
async def withdraw_savings(
    account_id: str,
    background_tasks: BackgroundTasks,
    user_id: Optional[str] = Depends(get_user_id),
    service: SavingsService = Depends(get_savings_service),
    ledger_client: LedgerClient = Depends(get_ledger_client),
):
    """Withdraw an account; before maturity a 5% principal penalty applies and interest is forfeited"""
    withdrawal = await service.withdraw(user_id, account_id)
    schedule_revenue(background_tasks, ledger_client, withdrawal.revenue_events)
    settlement = withdrawal.settlement
    return WithdrawalResponse(
        account_id=settlement.account.id,
        payout=settlement.payout,
        penalty=settlement.penalty,
        interest_paid=settlement.interest_paid,
        early=settlement.early,
    )
