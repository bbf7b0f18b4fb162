"""
ContentResolver: public token -> ContentItem | None.

decode and shape check run before any storage call, so garbage tokens cost
nothing. Every failure collapses into None (NotFound); callers cannot tell a
malformed token from an unknown id. Storage errors are not caught here.
"""
import logging

from streamgate.links.codec import decode
from streamgate.links.validator import is_well_formed
from streamgate.models.content_item import ContentItem
from streamgate.services.content.service import ContentService

logger = logging.getLogger(__name__)


class ContentResolver:
    def __init__(self, content: ContentService):
        self.content = content

    def resolve_id(self, token: str | None) -> str | None:
        """Identifier behind token if it is syntactically ours, else None. No I/O."""
        identifier = decode(token)
        if identifier is None:
            return None
        if not is_well_formed(identifier):
            logger.info("token_identifier_malformed")
            return None
        return identifier

    def resolve(self, token: str | None) -> ContentItem | None:
        identifier = self.resolve_id(token)
        if identifier is None:
            return None
        item = self.content.get(identifier)
        if item is None:
            logger.info("content_not_found", extra={"content_id": identifier})
        return item
