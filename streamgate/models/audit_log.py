"""
AuditLog: append-only trail of admin actions on subscriptions and content.
Rows are looked up per entity (GET /admin/audit?entity_id=...), newest first.
"""
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, Index, String

from streamgate.db.base import Base

ENTITY_SUBSCRIPTION = "subscription"
ENTITY_CONTENT = "content"


class AuditLog(Base):
    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_entity", "entity_type", "entity_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    actor_type = Column(String(16), nullable=False)  # admin / account
    actor_id = Column(String, nullable=True)  # Account.id of the actor
    action = Column(String(32), nullable=False, index=True)
    entity_type = Column(String(32), nullable=False)
    entity_id = Column(String(36), nullable=True)
    # Resulting status for subscriptions, title for content.
    payload = Column(JSON, nullable=False, default=dict)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
