"""
TokenCodec: content id <-> public URL-safe token.

token = base64("LP_" + id + "_VID") with "+" -> "-", "/" -> "_" and padding
stripped. decode() never raises: malformed tokens are ordinary input, and
only the exact string encode() emits is accepted, so every id has one token.
"""
from __future__ import annotations

import base64
import binascii
import logging

from streamgate.utils.metrics import token_decode_failures_total

logger = logging.getLogger(__name__)

PREFIX = "LP_"
SUFFIX = "_VID"

_TO_URLSAFE = str.maketrans({"+": "-", "/": "_"})
_FROM_URLSAFE = str.maketrans({"-": "+", "_": "/"})
_UNSAFE = frozenset("+/=")

PATH_KINDS = {"video": "v", "dorama": "dorama"}


def encode(identifier: str) -> str:
    if not identifier:
        raise ValueError("identifier must be a non-empty string")
    raw = f"{PREFIX}{identifier}{SUFFIX}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii").translate(_TO_URLSAFE).rstrip("=")


def decode(token: str | None) -> str | None:
    """Return the identifier hidden in token, or None if token is not one of ours."""
    if not isinstance(token, str) or not token:
        return None
    if _UNSAFE.intersection(token):
        # encode() never emits these; accepting them would make tokens non-canonical
        return _reject("unsafe_char")
    b64 = token.translate(_FROM_URLSAFE)
    if len(b64) % 4 == 1:
        return _reject("bad_length")
    b64 += "=" * (-len(b64) % 4)
    try:
        raw = base64.b64decode(b64, validate=True)
        text = raw.decode("utf-8")
    except (binascii.Error, ValueError):
        return _reject("not_base64")
    if len(text) <= len(PREFIX) + len(SUFFIX):
        return _reject("too_short")
    if not (text.startswith(PREFIX) and text.endswith(SUFFIX)):
        return _reject("no_marker")
    identifier = text[len(PREFIX):-len(SUFFIX)]
    if encode(identifier) != token:
        # b64decode ignores the unused bits of the last character
        return _reject("non_canonical")
    return identifier


def build_share_link(identifier: str, base_url: str | None = None, kind: str = "video") -> str:
    """Absolute shareable URL: {base}/v/{token} or {base}/dorama/{token}."""
    if kind not in PATH_KINDS:
        raise ValueError(f"unknown link kind: {kind}")
    if base_url is None:
        from streamgate.core.config import settings

        base_url = settings.public_base_url
    return f"{base_url.rstrip('/')}/{PATH_KINDS[kind]}/{encode(identifier)}"


def _reject(reason: str) -> None:
    token_decode_failures_total.labels(reason=reason).inc()
    logger.debug("token_decode_failed", extra={"error": reason})
    return None
