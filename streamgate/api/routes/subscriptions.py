from fastapi import APIRouter, Body, Depends, Header
from sqlalchemy.orm import Session

from streamgate.db.session import get_db
from streamgate.models.account import Account
from streamgate.models.subscription import SubscriptionRecord
from streamgate.schemas.subscriptions import SubscriptionClaimIn, SubscriptionOut
from streamgate.services.auth.jwt import require_account
from streamgate.services.idempotency import IdempotencyStore
from streamgate.services.subscriptions.lifecycle import days_remaining, effective_status, is_usable, utcnow
from streamgate.services.subscriptions.service import SubscriptionService


router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


def get_idempotency_store() -> IdempotencyStore:
    return IdempotencyStore()


def subscription_to_out(record: SubscriptionRecord) -> SubscriptionOut:
    now = utcnow()
    return SubscriptionOut(
        id=record.id,
        account_id=record.account_id,
        status=record.status,
        effective_status=effective_status(record, now),
        is_usable=is_usable(record, now),
        days_remaining=days_remaining(record, now),
        amount=record.amount,
        created_at=record.created_at,
        updated_at=record.updated_at,
        expires_at=record.expires_at,
    )


@router.post("", response_model=SubscriptionOut, status_code=201)
def claim_subscription(
    body: SubscriptionClaimIn | None = Body(None),
    idempotency_key: str | None = Header(None, alias="Idempotency-Key"),
    account: Account = Depends(require_account),
    db: Session = Depends(get_db),
    idempotency: IdempotencyStore = Depends(get_idempotency_store),
) -> SubscriptionOut:
    """Self-service payment claim: creates a pending_approval record for the caller."""
    svc = SubscriptionService(db, idempotency=idempotency)
    amount = body.amount if body is not None else None
    record = svc.create_pending(account, amount=amount, idempotency_key=idempotency_key)
    return subscription_to_out(record)


@router.get("/me", response_model=SubscriptionOut | None)
def my_subscription(
    account: Account = Depends(require_account),
    db: Session = Depends(get_db),
) -> SubscriptionOut | None:
    """Authoritative (most recent) record of the caller, or null."""
    record = SubscriptionService(db).authoritative_for(account.id)
    if record is None:
        return None
    return subscription_to_out(record)


@router.get("/me/history", response_model=list[SubscriptionOut])
def my_subscription_history(
    account: Account = Depends(require_account),
    db: Session = Depends(get_db),
) -> list[SubscriptionOut]:
    return [subscription_to_out(r) for r in SubscriptionService(db).history_for(account.id)]
