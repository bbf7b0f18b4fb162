"""
Admin audit trail for subscription transitions and content mutations.
Entries are staged in the caller's transaction; the caller commits.
"""
from typing import Any

from sqlalchemy.orm import Session

from streamgate.models.account import Account
from streamgate.models.audit_log import AuditLog

ACTOR_ADMIN = "admin"
ACTOR_ACCOUNT = "account"


class AuditService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def record(
        self,
        actor: Account,
        action: str,
        entity_type: str,
        entity_id: str,
        payload: dict[str, Any] | None = None,
    ) -> AuditLog:
        entry = AuditLog(
            actor_type=ACTOR_ADMIN if actor.is_admin else ACTOR_ACCOUNT,
            actor_id=actor.id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            payload=payload or {},
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def search(
        self,
        entity_type: str | None = None,
        entity_id: str | None = None,
        action: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[AuditLog], int]:
        """Newest first, with the unpaginated total."""
        q = self.db.query(AuditLog)
        if entity_type:
            q = q.filter(AuditLog.entity_type == entity_type)
        if entity_id:
            q = q.filter(AuditLog.entity_id == entity_id)
        if action:
            q = q.filter(AuditLog.action == action)
        total = q.count()
        rows = q.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).offset(offset).limit(limit).all()
        return rows, total
