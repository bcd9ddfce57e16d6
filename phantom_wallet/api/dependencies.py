"""Dependency injection for FastAPI endpoints"""

from datetime import datetime
from typing import Callable, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from phantom_wallet.infrastructure.clients.ledger import LedgerClient
from phantom_wallet.infrastructure.clients.wallet import WalletClient
from phantom_wallet.infrastructure.database.session import get_db
from phantom_wallet.services.loan_service import LoanService
from phantom_wallet.services.locks import UserLockRegistry
from phantom_wallet.services.savings_service import SavingsService
from phantom_wallet.utils.date_utils import utc_now


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> Optional[str]:
    """Acting user, already authenticated by the upstream gateway"""
    return x_user_id


def get_wallet_client() -> WalletClient:
    """Provide wallet service client instance"""
    return WalletClient()


def get_ledger_client() -> LedgerClient:
    """Provide revenue ledger client instance"""
    return LedgerClient()


def get_lock_registry(request: Request) -> UserLockRegistry:
    return request.app.state.user_locks


def get_clock() -> Callable[[], datetime]:
    return utc_now


def get_loan_service(
    db: Session = Depends(get_db),
    wallet: WalletClient = Depends(get_wallet_client),
    locks: UserLockRegistry = Depends(get_lock_registry),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> LoanService:
    return LoanService(db, wallet, locks, clock=clock)


def get_savings_service(
    db: Session = Depends(get_db),
    wallet: WalletClient = Depends(get_wallet_client),
    locks: UserLockRegistry = Depends(get_lock_registry),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> SavingsService:
    return SavingsService(db, wallet, locks, clock=clock)
