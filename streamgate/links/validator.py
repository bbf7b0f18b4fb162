"""IdentifierValidator: canonical content id shape (UUID, 8-4-4-4-12 hex)."""
import re

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_well_formed(identifier: object) -> bool:
    return isinstance(identifier, str) and _UUID_RE.fullmatch(identifier) is not None
