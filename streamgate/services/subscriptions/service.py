"""
SubscriptionService: subscription lifecycle transitions.

pending_approval --approve--> active --(time)--> lapsed/expired --reactivate--> active
pending_approval --reject--> cancelled --reactivate--> active

Every transition is one conditional UPDATE (compare-and-set on the stored
status) followed by a rowcount check. A caller that loses the race gets
outcome="already_resolved" and changes nothing, expires_at included.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import and_, or_, update
from sqlalchemy.orm import Session

from streamgate.core.errors import AdminRequiredError, ClaimInProgressError, SubscriptionNotFoundError
from streamgate.db.session import storage_guard
from streamgate.models.account import Account
from streamgate.models.audit_log import ENTITY_SUBSCRIPTION
from streamgate.models.subscription import (
    STATUS_ACTIVE,
    STATUS_CANCELLED,
    STATUS_EXPIRED,
    STATUS_PENDING,
    SubscriptionRecord,
)
from streamgate.paywall.config import get_subscription_period, get_subscription_price
from streamgate.services.audit.service import AuditService
from streamgate.services.idempotency import IN_FLIGHT, IdempotencyStore
from streamgate.services.subscriptions.lifecycle import utcnow
from streamgate.utils.metrics import subscription_claims_total, subscription_transitions_total

logger = logging.getLogger(__name__)

OUTCOME_TRANSITIONED = "transitioned"
OUTCOME_ALREADY_RESOLVED = "already_resolved"


@dataclass
class TransitionResult:
    record: SubscriptionRecord
    changed: bool

    @property
    def outcome(self) -> str:
        return OUTCOME_TRANSITIONED if self.changed else OUTCOME_ALREADY_RESOLVED


class SubscriptionService:
    def __init__(self, db: Session, idempotency: IdempotencyStore | None = None):
        self.db = db
        self._idempotency = idempotency

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, record_id: str) -> SubscriptionRecord | None:
        with storage_guard():
            return self.db.query(SubscriptionRecord).filter(SubscriptionRecord.id == record_id).one_or_none()

    def authoritative_for(self, account_id: str) -> SubscriptionRecord | None:
        """Most recently created record of the account (or None). Never aggregates."""
        with storage_guard():
            return (
                self.db.query(SubscriptionRecord)
                .filter(SubscriptionRecord.account_id == account_id)
                .order_by(SubscriptionRecord.created_at.desc(), SubscriptionRecord.id.desc())
                .first()
            )

    def history_for(self, account_id: str) -> list[SubscriptionRecord]:
        return (
            self.db.query(SubscriptionRecord)
            .filter(SubscriptionRecord.account_id == account_id)
            .order_by(SubscriptionRecord.created_at.desc(), SubscriptionRecord.id.desc())
            .all()
        )

    def list_pending(self, limit: int = 100, offset: int = 0) -> list[SubscriptionRecord]:
        """Admin queue, newest first."""
        return (
            self.db.query(SubscriptionRecord)
            .filter(SubscriptionRecord.status == STATUS_PENDING)
            .order_by(SubscriptionRecord.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    # ------------------------------------------------------------------
    # Self-service
    # ------------------------------------------------------------------

    def create_pending(
        self,
        account: Account,
        amount: Decimal | None = None,
        idempotency_key: str | None = None,
    ) -> SubscriptionRecord:
        """
        Payment claim by the account itself. Several pending records per account
        are allowed; idempotency_key only collapses a double-submitted form.

        A repeat of a committed key returns exactly the record that key created.
        A repeat while the first request is still writing raises
        ClaimInProgressError. If the write fails the key is released, so the
        client's retry creates the claim.
        """
        claim_key = None
        if idempotency_key and self._idempotency is not None:
            claim_key = f"subscription_claim:{account.id}:{idempotency_key}"
            if not self._idempotency.reserve(claim_key):
                existing = self._claimed_record(account, claim_key)
                if existing is not None:
                    return existing
                # key vanished between reserve and lookup; proceed untracked
                claim_key = None

        now = utcnow()
        record = SubscriptionRecord(
            id=str(uuid4()),
            account_id=account.id,
            status=STATUS_PENDING,
            amount=amount if amount is not None else get_subscription_price(),
            created_at=now,
            updated_at=now,
        )
        record_id = record.id
        try:
            with storage_guard():
                self.db.add(record)
                self.db.commit()
        except Exception:
            self.db.rollback()
            if claim_key is not None:
                self._idempotency.release(claim_key)
            raise
        if claim_key is not None:
            self._idempotency.complete(claim_key, record_id)
        with storage_guard():
            self.db.refresh(record)
        subscription_claims_total.labels(deduplicated="false").inc()
        logger.info(
            "subscription_claimed",
            extra={"account_id": account.id, "subscription_id": record.id, "status": record.status},
        )
        return record

    # ------------------------------------------------------------------
    # Administrative transitions
    # ------------------------------------------------------------------

    def approve(self, actor: Account, record_id: str, now: datetime | None = None) -> TransitionResult:
        """Activate if currently pending. Concurrent approvals: exactly one wins."""
        self._require_admin(actor)
        now = now or utcnow()
        return self._transition(
            actor,
            record_id,
            action="approve",
            condition=SubscriptionRecord.status == STATUS_PENDING,
            values={
                "status": STATUS_ACTIVE,
                "expires_at": now + get_subscription_period(),
                "updated_at": now,
            },
        )

    def reject(self, actor: Account, record_id: str, now: datetime | None = None) -> TransitionResult:
        """Cancel a pending claim. Rejecting an already cancelled record is a no-op."""
        self._require_admin(actor)
        now = now or utcnow()
        return self._transition(
            actor,
            record_id,
            action="reject",
            condition=SubscriptionRecord.status == STATUS_PENDING,
            values={"status": STATUS_CANCELLED, "updated_at": now},
        )

    def reactivate(self, actor: Account, record_id: str, now: datetime | None = None) -> TransitionResult:
        """
        Start a new period for an expired or cancelled record. A record stored
        as active but already past expires_at counts as expired here.
        """
        self._require_admin(actor)
        now = now or utcnow()
        lapsed = and_(
            SubscriptionRecord.status == STATUS_ACTIVE,
            or_(SubscriptionRecord.expires_at.is_(None), SubscriptionRecord.expires_at <= now),
        )
        return self._transition(
            actor,
            record_id,
            action="reactivate",
            condition=or_(SubscriptionRecord.status.in_([STATUS_EXPIRED, STATUS_CANCELLED]), lapsed),
            values={
                "status": STATUS_ACTIVE,
                "expires_at": now + get_subscription_period(),
                "updated_at": now,
            },
        )

    def grant_active(
        self,
        actor: Account,
        account_id: str,
        amount: Decimal | None = None,
        now: datetime | None = None,
    ) -> SubscriptionRecord:
        """Administrator creates a record directly in active state (e.g. paid offline)."""
        self._require_admin(actor)
        now = now or utcnow()
        record = SubscriptionRecord(
            account_id=account_id,
            status=STATUS_ACTIVE,
            amount=amount if amount is not None else get_subscription_price(),
            created_at=now,
            updated_at=now,
            expires_at=now + get_subscription_period(),
        )
        with storage_guard():
            self.db.add(record)
            self.db.flush()
            AuditService(self.db).record(
                actor=actor,
                action="grant",
                entity_type=ENTITY_SUBSCRIPTION,
                entity_id=record.id,
                payload={"account_id": account_id, "amount": str(record.amount)},
            )
            self.db.commit()
            self.db.refresh(record)
        subscription_transitions_total.labels(action="grant", outcome=OUTCOME_TRANSITIONED).inc()
        logger.info(
            "subscription_granted",
            extra={"actor_id": actor.id, "account_id": account_id, "subscription_id": record.id},
        )
        return record

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _claimed_record(self, account: Account, claim_key: str) -> SubscriptionRecord | None:
        """Record created under claim_key, or None if the key no longer points anywhere."""
        stored = self._idempotency.lookup(claim_key)
        if stored == IN_FLIGHT:
            logger.info("subscription_claim_in_flight", extra={"account_id": account.id})
            raise ClaimInProgressError(account.id)
        if stored is None:
            return None
        existing = self.get(stored)
        if existing is None or existing.account_id != account.id:
            return None
        subscription_claims_total.labels(deduplicated="true").inc()
        logger.info(
            "subscription_claim_deduplicated",
            extra={"account_id": account.id, "subscription_id": existing.id},
        )
        return existing

    @staticmethod
    def _require_admin(actor: Account | None) -> None:
        if actor is None or not actor.is_admin:
            logger.warning(
                "subscription_admin_required",
                extra={"actor_id": getattr(actor, "id", None)},
            )
            raise AdminRequiredError(getattr(actor, "id", None))

    def _transition(self, actor: Account, record_id: str, action: str, condition, values: dict) -> TransitionResult:
        with storage_guard():
            result = self.db.execute(
                update(SubscriptionRecord)
                .where(SubscriptionRecord.id == record_id, condition)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            changed = result.rowcount > 0
            if changed:
                AuditService(self.db).record(
                    actor=actor,
                    action=action,
                    entity_type=ENTITY_SUBSCRIPTION,
                    entity_id=record_id,
                    payload={"status": values["status"]},
                )
            self.db.commit()

        record = self.get(record_id)
        if record is None:
            raise SubscriptionNotFoundError(record_id)

        outcome = OUTCOME_TRANSITIONED if changed else OUTCOME_ALREADY_RESOLVED
        subscription_transitions_total.labels(action=action, outcome=outcome).inc()
        logger.info(
            f"subscription_{action}",
            extra={
                "actor_id": actor.id,
                "account_id": record.account_id,
                "subscription_id": record_id,
                "status": record.status,
                "outcome": outcome,
            },
        )
        return TransitionResult(record=record, changed=changed)
