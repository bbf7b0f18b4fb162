"""
Admin API: subscription approval queue and transitions, content CRUD, audit trail.
Every route requires an account with is_admin; services re-check before mutating.
"""
from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from streamgate.core.errors import ContentNotFoundError
from streamgate.db.session import get_db
from streamgate.links.codec import build_share_link, encode
from streamgate.models.account import Account
from streamgate.models.content_item import ContentItem
from streamgate.api.routes.subscriptions import subscription_to_out
from streamgate.schemas.audit import AuditEntryOut, AuditPageOut
from streamgate.schemas.content import ContentAdminOut, ContentIn, ShareLinkOut
from streamgate.schemas.subscriptions import SubscriptionGrantIn, SubscriptionOut, TransitionOut
from streamgate.services.audit.service import AuditService
from streamgate.services.auth.jwt import require_admin
from streamgate.services.content.service import ContentService
from streamgate.services.subscriptions.service import SubscriptionService, TransitionResult

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _transition_out(result: TransitionResult) -> TransitionOut:
    return TransitionOut(outcome=result.outcome, subscription=subscription_to_out(result.record))


def _content_out(item: ContentItem) -> ContentAdminOut:
    return ContentAdminOut(
        id=item.id,
        token=encode(item.id),
        title=item.title,
        description=item.description or "",
        poster_url=item.poster_url,
        embed_payload=item.embed_payload,
        tags=list(item.tags or []),
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def _get_content_or_404(svc: ContentService, content_id: str) -> ContentItem:
    item = svc.get(content_id)
    if item is None:
        raise ContentNotFoundError(content_id)
    return item


# ---------- Subscriptions ----------
@router.get("/subscriptions/pending", response_model=list[SubscriptionOut])
def pending_subscriptions(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
) -> list[SubscriptionOut]:
    records = SubscriptionService(db).list_pending(limit=page_size, offset=(page - 1) * page_size)
    return [subscription_to_out(r) for r in records]


@router.post("/subscriptions/{record_id}/approve", response_model=TransitionOut)
def approve_subscription(record_id: str, db: Session = Depends(get_db), admin: Account = Depends(require_admin)):
    return _transition_out(SubscriptionService(db).approve(admin, record_id))


@router.post("/subscriptions/{record_id}/reject", response_model=TransitionOut)
def reject_subscription(record_id: str, db: Session = Depends(get_db), admin: Account = Depends(require_admin)):
    return _transition_out(SubscriptionService(db).reject(admin, record_id))


@router.post("/subscriptions/{record_id}/reactivate", response_model=TransitionOut)
def reactivate_subscription(record_id: str, db: Session = Depends(get_db), admin: Account = Depends(require_admin)):
    return _transition_out(SubscriptionService(db).reactivate(admin, record_id))


@router.post("/accounts/{account_id}/subscriptions", response_model=SubscriptionOut, status_code=201)
def grant_subscription(
    account_id: str,
    body: SubscriptionGrantIn | None = Body(None),
    db: Session = Depends(get_db),
    admin: Account = Depends(require_admin),
):
    record = SubscriptionService(db).grant_active(admin, account_id, amount=body.amount if body is not None else None)
    return subscription_to_out(record)


# ---------- Content ----------
@router.post("/content", response_model=ContentAdminOut, status_code=201)
def create_content(body: ContentIn, db: Session = Depends(get_db), admin: Account = Depends(require_admin)):
    item = ContentService(db).create(admin, body.model_dump())
    return _content_out(item)


@router.get("/content/{content_id}", response_model=ContentAdminOut)
def get_content(content_id: str, db: Session = Depends(get_db)):
    return _content_out(_get_content_or_404(ContentService(db), content_id))


@router.put("/content/{content_id}", response_model=ContentAdminOut)
def replace_content(
    content_id: str,
    body: ContentIn,
    db: Session = Depends(get_db),
    admin: Account = Depends(require_admin),
):
    svc = ContentService(db)
    item = svc.replace(admin, _get_content_or_404(svc, content_id), body.model_dump())
    return _content_out(item)


@router.delete("/content/{content_id}", status_code=204)
def delete_content(content_id: str, db: Session = Depends(get_db), admin: Account = Depends(require_admin)):
    svc = ContentService(db)
    svc.delete(admin, _get_content_or_404(svc, content_id))


@router.get("/content/{content_id}/link", response_model=ShareLinkOut)
def content_share_link(content_id: str, db: Session = Depends(get_db)):
    item = _get_content_or_404(ContentService(db), content_id)
    return ShareLinkOut(
        token=encode(item.id),
        video_url=build_share_link(item.id, kind="video"),
        dorama_url=build_share_link(item.id, kind="dorama"),
    )


# ---------- Audit ----------
@router.get("/audit", response_model=AuditPageOut)
def audit_list(
    db: Session = Depends(get_db),
    entity_type: str | None = None,
    entity_id: str | None = None,
    action: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
):
    rows, total = AuditService(db).search(
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        limit=page_size,
        offset=(page - 1) * page_size,
    )
    return AuditPageOut(
        items=[
            AuditEntryOut(
                id=r.id,
                actor_type=r.actor_type,
                actor_id=r.actor_id,
                action=r.action,
                entity_type=r.entity_type,
                entity_id=r.entity_id,
                payload=r.payload or {},
                created_at=r.created_at,
            )
            for r in rows
        ],
        total=total,
        page=page,
        pages=(total + page_size - 1) // page_size,
    )
