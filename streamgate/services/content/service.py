import logging
from typing import Any

from sqlalchemy.orm import Session

from streamgate.db.session import storage_guard
from streamgate.models.account import Account
from streamgate.models.audit_log import ENTITY_CONTENT
from streamgate.models.content_item import ContentItem
from streamgate.services.audit.service import AuditService

logger = logging.getLogger(__name__)

# Fields replaced as a whole by replace(); id and created_at are immutable.
REPLACEABLE_FIELDS = ("title", "description", "poster_url", "embed_payload", "tags")
REPLACE_DEFAULTS = {"description": "", "poster_url": None, "tags": []}


def normalize_tags(tags) -> list[str]:
    """Tags are a set: strip, drop empties and duplicates, store sorted."""
    return sorted({t.strip() for t in (tags or []) if t and t.strip()})


class ContentService:
    def __init__(self, db: Session):
        self.db = db

    def get(self, content_id: str) -> ContentItem | None:
        with storage_guard():
            return self.db.query(ContentItem).filter(ContentItem.id == content_id).one_or_none()

    def list_recent(self, tag: str | None = None, limit: int = 100, offset: int = 0) -> list[ContentItem]:
        """Newest first. Tag filter runs in Python to stay portable across JSON column backends."""
        q = self.db.query(ContentItem).order_by(ContentItem.created_at.desc(), ContentItem.id.desc())
        if tag is None:
            return q.offset(offset).limit(limit).all()
        tag = tag.strip()
        matched = [item for item in q.all() if item.has_tag(tag)]
        return matched[offset:offset + limit]

    def create(self, actor: Account, data: dict[str, Any]) -> ContentItem:
        item = ContentItem(**self._clean(data))
        with storage_guard():
            self.db.add(item)
            self.db.flush()
            self._audit(actor, "create", item)
            self.db.commit()
            self.db.refresh(item)
        logger.info("content_created", extra={"content_id": item.id, "actor_id": actor.id})
        return item

    def replace(self, actor: Account, item: ContentItem, data: dict[str, Any]) -> ContentItem:
        """Full replace: fields missing from data are reset, not kept."""
        clean = {**REPLACE_DEFAULTS, **self._clean(data)}
        for field in REPLACEABLE_FIELDS:
            setattr(item, field, clean.get(field))
        with storage_guard():
            self.db.add(item)
            self.db.flush()
            self._audit(actor, "replace", item)
            self.db.commit()
            self.db.refresh(item)
        logger.info("content_replaced", extra={"content_id": item.id, "actor_id": actor.id})
        return item

    def delete(self, actor: Account, item: ContentItem) -> None:
        content_id = item.id
        with storage_guard():
            self.db.delete(item)
            self._audit(actor, "delete", item)
            self.db.commit()
        logger.info("content_deleted", extra={"content_id": content_id, "actor_id": actor.id})

    @staticmethod
    def _clean(data: dict[str, Any]) -> dict[str, Any]:
        clean = {k: v for k, v in data.items() if k in REPLACEABLE_FIELDS}
        if "tags" in clean:
            clean["tags"] = normalize_tags(clean["tags"])
        return clean

    def _audit(self, actor: Account, action: str, item: ContentItem) -> None:
        AuditService(self.db).record(
            actor=actor,
            action=action,
            entity_type=ENTITY_CONTENT,
            entity_id=item.id,
            payload={"title": item.title},
        )
