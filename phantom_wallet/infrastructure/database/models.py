"""SQLAlchemy ORM models for the per-user record store"""

from sqlalchemy import Column, DateTime, JSON, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

LOANS = "loans"
SAVINGS_ACCOUNTS = "savings_accounts"


class UserRecordCollection(Base):
    """One user's full collection of serialized records, read and written whole"""

    __tablename__ = "user_record_collection"

    user_id = Column(Text, primary_key=True)
    collection = Column(Text, primary_key=True)  # loans | savings_accounts
    records = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
