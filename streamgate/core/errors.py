"""
Error taxonomy shared by services and the HTTP layer.

Token/identifier problems never appear here: they are absorbed into the
NotFound outcome by ContentResolver.
"""


class StreamgateError(Exception):
    """Base class for domain errors."""


class StorageUnavailableError(StreamgateError):
    """The persistent store (or redis) could not be reached. Retryable."""

    retryable = True


class AdminRequiredError(StreamgateError):
    """A non-admin account attempted an administrative action."""

    def __init__(self, account_id: str | None = None) -> None:
        super().__init__("administrator capability required")
        self.account_id = account_id


class SubscriptionNotFoundError(StreamgateError):
    def __init__(self, record_id: str) -> None:
        super().__init__(f"subscription {record_id} not found")
        self.record_id = record_id


class ContentNotFoundError(StreamgateError):
    def __init__(self, content_id: str) -> None:
        super().__init__(f"content {content_id} not found")
        self.content_id = content_id


class ClaimInProgressError(StreamgateError):
    """The same idempotency key is held by a claim that has not committed yet. Retryable."""

    retryable = True

    def __init__(self, account_id: str) -> None:
        super().__init__("a claim with this idempotency key is still being processed")
        self.account_id = account_id
