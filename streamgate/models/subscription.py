"""
SubscriptionRecord: one billing cycle attempt for an account.
Records are never deleted: cancellation is a status change. The most recently
created record of an account is the authoritative one.
"""
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, Index, Numeric, String

from streamgate.db.base import Base

STATUS_PENDING = "pending_approval"
STATUS_ACTIVE = "active"
STATUS_EXPIRED = "expired"
STATUS_CANCELLED = "cancelled"

STATUSES = (STATUS_PENDING, STATUS_ACTIVE, STATUS_EXPIRED, STATUS_CANCELLED)


class SubscriptionRecord(Base):
    __tablename__ = "subscriptions"
    __table_args__ = (
        Index("ix_subscriptions_account_created", "account_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    account_id = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default=STATUS_PENDING, index=True)
    amount = Column(Numeric(10, 2), nullable=False)  # informational, not checked against a price list
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    expires_at = Column(DateTime(timezone=True), nullable=True)  # set only on activation
