"""Shared service helpers - acting-user guard and best-effort revenue bookkeeping"""

import logging
from typing import List, Optional

from fastapi import BackgroundTasks

from phantom_wallet.domain.exceptions import LedgerServiceError, Unauthenticated
from phantom_wallet.domain.models import RevenueEvent, WithdrawalSettlement
from phantom_wallet.infrastructure.clients.ledger import LedgerClient
from phantom_wallet.infrastructure.observability.metrics import revenue_dropped_counter

logger = logging.getLogger(__name__)


def require_user(user_id: Optional[str]) -> str:
    if not user_id:
        raise Unauthenticated()
    return user_id


def settlement_events(settlement: WithdrawalSettlement, user_id: str, context: str) -> List[RevenueEvent]:
    """Penalty revenue and interest expense produced by closing a savings account"""
    account = settlement.account
    events = []
    if settlement.penalty > 0:
        events.append(
            RevenueEvent(
                amount=settlement.penalty,
                category="early_withdrawal_penalty",
                source_id=account.id,
                user_id=user_id,
                description=f"Early withdrawal penalty from {context}",
            )
        )
    if settlement.interest_paid > 0:
        events.append(
            RevenueEvent(
                amount=settlement.interest_paid,
                category="savings_interest",
                source_id=account.id,
                user_id=user_id,
                description=f"Savings interest payout for {account.lock_period_months} month savings ({context})",
                direction="expense",
            )
        )
    return events


async def emit_revenue(ledger: LedgerClient, event: RevenueEvent) -> None:
    """Ledger failures are logged and dropped; they never undo the operation"""
    try:
        await ledger.record_revenue(event)
    except LedgerServiceError as e:
        revenue_dropped_counter.labels(category=event.category).inc()
        logger.warning(
            f"Revenue event dropped: {e}",
            extra={
                "user_id": event.user_id,
                "source_id": event.source_id,
                "category": event.category,
                "amount": str(event.amount),
            },
        )


def schedule_revenue(background_tasks: BackgroundTasks, ledger: LedgerClient, events: List[RevenueEvent]) -> None:
    """Deliver events to the ledger after the response has been sent"""
    for event in events:
        background_tasks.add_task(emit_revenue, ledger, event)
