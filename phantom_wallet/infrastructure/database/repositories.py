"""Data access layer - per-user record collections, read whole and written whole"""

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, TypeVar

from sqlalchemy.orm import Session

from phantom_wallet.domain.models import Loan, SavingsAccount
from phantom_wallet.infrastructure.database.models import LOANS, SAVINGS_ACCOUNTS, UserRecordCollection
from phantom_wallet.infrastructure.database.records import (
    dump_loan,
    dump_savings_account,
    load_loan,
    load_savings_account,
)

T = TypeVar("T")


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit on success; roll back on any failure, cancellation included"""
    try:
        yield db
        db.commit()
    except BaseException:
        db.rollback()
        raise


class RecordCollectionRepository:
    """Keyed store of one serialized collection per user"""

    collection: str = ""

    def __init__(self, db: Session):
        self.db = db

    def _row(self, user_id: str) -> UserRecordCollection | None:
        return (
            self.db.query(UserRecordCollection)
            .filter(
                UserRecordCollection.user_id == user_id,
                UserRecordCollection.collection == self.collection,
            )
            .first()
        )

    def _read(self, user_id: str, load: Callable[[Dict[str, Any]], T]) -> List[T]:
        row = self._row(user_id)
        if row is None:
            return []
        return [load(item) for item in row.records]

    def _write(self, user_id: str, items: List[T], dump: Callable[[T], Dict[str, Any]]) -> None:
        """Replace the whole collection; flushed, committed by the caller"""
        payload = [dump(item) for item in items]
        row = self._row(user_id)
        if row is None:
            row = UserRecordCollection(user_id=user_id, collection=self.collection, records=payload)
            self.db.add(row)
        else:
            row.records = payload
        self.db.flush()


class LoanRepository(RecordCollectionRepository):
    """Repository for a user's loans"""

    collection = LOANS

    def get_loans(self, user_id: str) -> List[Loan]:
        return self._read(user_id, load_loan)

    def save_loans(self, user_id: str, loans: List[Loan]) -> None:
        self._write(user_id, loans, dump_loan)


class SavingsRepository(RecordCollectionRepository):
    """Repository for a user's savings accounts"""

    collection = SAVINGS_ACCOUNTS

    def get_accounts(self, user_id: str) -> List[SavingsAccount]:
        return self._read(user_id, load_savings_account)

    def save_accounts(self, user_id: str, accounts: List[SavingsAccount]) -> None:
        self._write(user_id, accounts, dump_savings_account)
