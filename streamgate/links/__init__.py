"""
Obfuscated content links: token codec + identifier shape check.
Obfuscation only (no key): hides raw ids from casual inspection and crawlers.
"""
from streamgate.links.codec import build_share_link, decode, encode
from streamgate.links.validator import is_well_formed

__all__ = [
    "encode",
    "decode",
    "build_share_link",
    "is_well_formed",
]
