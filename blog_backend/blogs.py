"""
Blog entries owned by a single user.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from bson import ObjectId
from bson.errors import InvalidId

from blog_backend.errors import BlogBackendError, InternalError, NotFound
from blog_backend.store import DocumentStore

logger = logging.getLogger(__name__)


def parse_entry_id(entry_id: str | None, error: BlogBackendError) -> ObjectId:
    """Malformed ids cannot match any entry; raise ``error`` for them."""
    # ObjectId(None) would mint a fresh id.
    if not entry_id:
        raise error
    try:
        return ObjectId(entry_id)
    except (InvalidId, TypeError) as exc:
        raise error from exc


class BlogCollection:
    def __init__(self, store: DocumentStore):
        self.store = store

    def create_blog(self, username: str, title: str, content: str) -> str:
        entry_id = self.store.insert_entry(
            username, {"title": title, "content": content, "public": False}
        )
        if entry_id is None:
            raise InternalError("Failed to create blog", key="message")
        logger.info("Created blog %s for %s", entry_id, username)
        return str(entry_id)

    def view_all(self, username: str) -> List[dict]:
        return self.store.list_entries(username)

    def fetch_one(self, username: str, entry_id: str) -> dict:
        not_found = NotFound("Data not found")
        entry = self.store.get_entry(username, parse_entry_id(entry_id, not_found))
        if not entry:
            raise not_found
        return entry

    def update_entry(
        self, username: str, entry_id: str, title: str, content: str
    ) -> dict:
        not_found = NotFound("User not found", key="message")
        updated = self.store.update_entry(
            username,
            parse_entry_id(entry_id, not_found),
            {"title": title, "content": content},
        )
        if updated is None:
            raise not_found
        return updated

    def set_public(
        self, username: str, entry_id: str, current_public: Optional[bool]
    ) -> bool:
        """
        Store the negation of ``current_public`` and return the new value.

        When the caller does not say what it believes the current value is,
        the stored value is read and negated instead.
        """
        failed = InternalError("Failed to update public status")
        oid = parse_entry_id(entry_id, failed)
        if current_public is None:
            entry = self.store.get_entry(username, oid)
            if not entry:
                raise failed
            current_public = bool(entry.get("public"))
        public = not current_public
        if self.store.set_entry_public(username, oid, public) == 0:
            raise failed
        return public

    def delete_entry(self, username: str, entry_id: str) -> None:
        not_found = NotFound("Entry not found or already deleted")
        if self.store.delete_entry(username, parse_entry_id(entry_id, not_found)) == 0:
            raise not_found
        logger.info("Deleted blog %s for %s", entry_id, username)
