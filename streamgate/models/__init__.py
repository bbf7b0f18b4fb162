from streamgate.models.account import Account
from streamgate.models.audit_log import AuditLog
from streamgate.models.content_item import ContentItem
from streamgate.models.subscription import SubscriptionRecord

__all__ = ["Account", "AuditLog", "ContentItem", "SubscriptionRecord"]
