#!/usr/bin/env python3
"""
Print shareable links for all content (title + /v/ and /dorama/ URLs).
Run from the project root: python -m scripts.print_share_links
"""
from streamgate.core.config import settings
from streamgate.db.session import SessionLocal
from streamgate.links.codec import build_share_link
from streamgate.services.content.service import ContentService


def main():
    db = SessionLocal()
    try:
        items = ContentService(db).list_recent(limit=10_000)
        if not items:
            print("No content in the database.")
            return
        print(f"Share links (base: {settings.public_base_url}):\n")
        for item in items:
            print(f"  {item.title}")
            print(f"    {build_share_link(item.id, kind='video')}")
            print(f"    {build_share_link(item.id, kind='dorama')}\n")
    finally:
        db.close()


if __name__ == "__main__":
    main()
