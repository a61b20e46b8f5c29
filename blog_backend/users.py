"""
User directory: signup, signin and profile management.
"""

from __future__ import annotations

import enum
import logging
from typing import List, Optional

from blog_backend.errors import AlreadyExists, InternalError, NotFound, ValidationError
from blog_backend.security import hash_password, verify_password
from blog_backend.store import DocumentStore

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("first_name", "last_name", "about_me", "hobby", "skills", "avatar")


class SignupResult(enum.Enum):
    CREATED = "created"
    EXISTS = "exists"


def _without_password(record: dict) -> dict:
    return {k: v for k, v in record.items() if k != "password"}


class UserDirectory:
    def __init__(self, store: DocumentStore, *, bcrypt_rounds: int = 10):
        self.store = store
        self.bcrypt_rounds = bcrypt_rounds

    def signup(
        self, username: Optional[str], password: Optional[str], **profile
    ) -> SignupResult:
        if not username or not password:
            raise ValidationError("Username and password are required")

        if self.store.find_user(username):
            return SignupResult.EXISTS

        record = {
            "username": username,
            "password": hash_password(password, self.bcrypt_rounds),
        }
        for field in PROFILE_FIELDS:
            if profile.get(field) is not None:
                record[field] = profile[field]

        try:
            inserted = self.store.insert_user(record)
        except AlreadyExists:
            # Lost a race with a concurrent signup for the same username.
            return SignupResult.EXISTS
        if inserted is None:
            raise InternalError("Could not add the user details", key="message")
        logger.info("Created user %s", username)
        return SignupResult.CREATED

    def signin(self, username: Optional[str], password: Optional[str]) -> bool:
        if not username:
            return False
        user = self.store.find_user(username)
        if not user:
            return False
        return verify_password(password or "", user.get("password"))

    def view_user_details(self, username: str) -> List[dict]:
        users = self.store.find_users(username)
        if not users:
            raise NotFound("User not found")
        return [_without_password(user) for user in users]

    def update_profile(self, username: str, **fields) -> dict:
        if not self.store.find_user(username):
            raise NotFound("User not found", key="message")
        # Every profile field is overwritten; omitted ones are cleared.
        updates = {field: fields.get(field) for field in PROFILE_FIELDS}
        updated = self.store.update_user_profile(username, updates)
        if updated is None:
            raise NotFound("User not found", key="message")
        return _without_password(updated)
