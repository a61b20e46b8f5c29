"""
Document store abstraction for MongoDB and an in-memory test implementation.

Users live in one collection keyed by a unique ``username``; blog entries
live in a single collection keyed by ``owner`` (the author's username).
"""

from __future__ import annotations

import copy
import logging
import threading
from typing import Dict, List, Optional, Protocol

from bson import ObjectId
from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError

from blog_backend.config import Settings
from blog_backend.errors import AlreadyExists

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    """Interface for document store access."""

    name: str

    def ping(self) -> None:
        ...

    def ensure_indexes(self) -> None:
        ...

    def close(self) -> None:
        ...

    def list_collection_names(self) -> List[str]:
        ...

    def find_user(self, username: str) -> Optional[dict]:
        ...

    def find_users(self, username: str) -> List[dict]:
        ...

    def insert_user(self, record: dict) -> Optional[ObjectId]:
        ...

    def update_user_profile(self, username: str, fields: dict) -> Optional[dict]:
        ...

    def insert_entry(self, owner: str, entry: dict) -> Optional[ObjectId]:
        ...

    def list_entries(self, owner: str) -> List[dict]:
        ...

    def get_entry(self, owner: str, entry_id: ObjectId) -> Optional[dict]:
        ...

    def update_entry(
        self, owner: str, entry_id: ObjectId, fields: dict
    ) -> Optional[dict]:
        ...

    def set_entry_public(self, owner: str, entry_id: ObjectId, public: bool) -> int:
        ...

    def delete_entry(self, owner: str, entry_id: ObjectId) -> int:
        ...


class InMemoryDocumentStore:
    """Simple in-memory document store for development and tests."""

    def __init__(
        self,
        name: str = "Blog",
        users_collection: str = "users",
        blogs_collection: str = "blogs",
    ):
        self.name = name
        self.users_collection = users_collection
        self.blogs_collection = blogs_collection
        self.users: Dict[ObjectId, dict] = {}
        self.entries: Dict[ObjectId, dict] = {}
        self._lock = threading.Lock()

    def ping(self) -> None:
        return None

    def ensure_indexes(self) -> None:
        return None

    def close(self) -> None:
        return None

    def list_collection_names(self) -> List[str]:
        names = []
        if self.users:
            names.append(self.users_collection)
        if self.entries:
            names.append(self.blogs_collection)
        return names

    def find_user(self, username: str) -> Optional[dict]:
        with self._lock:
            for user in self.users.values():
                if user.get("username") == username:
                    return copy.deepcopy(user)
        return None

    def find_users(self, username: str) -> List[dict]:
        with self._lock:
            return [
                copy.deepcopy(user)
                for user in self.users.values()
                if user.get("username") == username
            ]

    def insert_user(self, record: dict) -> Optional[ObjectId]:
        doc = copy.deepcopy(record)
        doc.setdefault("_id", ObjectId())
        with self._lock:
            taken = {u.get("username") for u in self.users.values()}
            if doc.get("username") in taken:
                raise AlreadyExists()
            self.users[doc["_id"]] = doc
        return doc["_id"]

    def update_user_profile(self, username: str, fields: dict) -> Optional[dict]:
        with self._lock:
            for user in self.users.values():
                if user.get("username") == username:
                    user.update(copy.deepcopy(fields))
                    return copy.deepcopy(user)
        return None

    def _owned(self, owner: str, entry_id: ObjectId) -> Optional[dict]:
        entry = self.entries.get(entry_id)
        if entry is None or entry.get("owner") != owner:
            return None
        return entry

    def insert_entry(self, owner: str, entry: dict) -> Optional[ObjectId]:
        doc = copy.deepcopy(entry)
        doc["owner"] = owner
        doc.setdefault("_id", ObjectId())
        with self._lock:
            self.entries[doc["_id"]] = doc
        return doc["_id"]

    def list_entries(self, owner: str) -> List[dict]:
        with self._lock:
            return [
                copy.deepcopy(entry)
                for entry in self.entries.values()
                if entry.get("owner") == owner
            ]

    def get_entry(self, owner: str, entry_id: ObjectId) -> Optional[dict]:
        with self._lock:
            entry = self._owned(owner, entry_id)
            return copy.deepcopy(entry) if entry else None

    def update_entry(
        self, owner: str, entry_id: ObjectId, fields: dict
    ) -> Optional[dict]:
        with self._lock:
            entry = self._owned(owner, entry_id)
            if entry is None:
                return None
            entry.update(copy.deepcopy(fields))
            return copy.deepcopy(entry)

    def set_entry_public(self, owner: str, entry_id: ObjectId, public: bool) -> int:
        with self._lock:
            entry = self._owned(owner, entry_id)
            # Mirrors Mongo's modified_count: writing the same value is a no-op.
            if entry is None or entry.get("public") == public:
                return 0
            entry["public"] = public
            return 1

    def delete_entry(self, owner: str, entry_id: ObjectId) -> int:
        with self._lock:
            if self._owned(owner, entry_id) is None:
                return 0
            del self.entries[entry_id]
            return 1


class MongoDocumentStore:
    """
    pymongo-backed implementation. Accepts any MongoDB connection URL.
    """

    def __init__(
        self,
        mongodb_url: str,
        name: str = "Blog",
        *,
        users_collection: str = "users",
        blogs_collection: str = "blogs",
        server_selection_timeout_ms: int = 5000,
        client: Optional[MongoClient] = None,
    ):
        if not mongodb_url and client is None:
            raise ValueError("MONGODB_URL is required for MongoDocumentStore")
        self.name = name
        if client is None:
            client = MongoClient(
                mongodb_url, serverSelectionTimeoutMS=server_selection_timeout_ms
            )
        self.client = client
        self.db = self.client[name]
        self.users = self.db[users_collection]
        self.blogs = self.db[blogs_collection]

    def ping(self) -> None:
        try:
            self.client.admin.command("ping")
        except ConnectionFailure as exc:
            raise ConnectionError(f"MongoDB is unreachable: {exc}") from exc

    def ensure_indexes(self) -> None:
        self.users.create_index([("username", ASCENDING)], unique=True)
        self.blogs.create_index([("owner", ASCENDING)])

    def close(self) -> None:
        self.client.close()

    def list_collection_names(self) -> List[str]:
        return self.db.list_collection_names()

    def find_user(self, username: str) -> Optional[dict]:
        return self.users.find_one({"username": username})

    def find_users(self, username: str) -> List[dict]:
        return list(self.users.find({"username": username}))

    def insert_user(self, record: dict) -> Optional[ObjectId]:
        try:
            result = self.users.insert_one(dict(record))
        except DuplicateKeyError as exc:
            raise AlreadyExists() from exc
        return result.inserted_id if result.acknowledged else None

    def update_user_profile(self, username: str, fields: dict) -> Optional[dict]:
        return self.users.find_one_and_update(
            {"username": username},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    def insert_entry(self, owner: str, entry: dict) -> Optional[ObjectId]:
        result = self.blogs.insert_one({**entry, "owner": owner})
        return result.inserted_id if result.acknowledged else None

    def list_entries(self, owner: str) -> List[dict]:
        return list(self.blogs.find({"owner": owner}))

    def get_entry(self, owner: str, entry_id: ObjectId) -> Optional[dict]:
        return self.blogs.find_one({"_id": entry_id, "owner": owner})

    def update_entry(
        self, owner: str, entry_id: ObjectId, fields: dict
    ) -> Optional[dict]:
        return self.blogs.find_one_and_update(
            {"_id": entry_id, "owner": owner},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    def set_entry_public(self, owner: str, entry_id: ObjectId, public: bool) -> int:
        result = self.blogs.update_one(
            {"_id": entry_id, "owner": owner}, {"$set": {"public": public}}
        )
        return result.modified_count

    def delete_entry(self, owner: str, entry_id: ObjectId) -> int:
        result = self.blogs.delete_one({"_id": entry_id, "owner": owner})
        return result.deleted_count


def connect(settings: Settings) -> DocumentStore:
    """
    Open the configured document store.

    Raises ConnectionError when MongoDB cannot be reached.
    """
    if settings.use_in_memory_backends:
        logger.info("Using in-memory document store")
        return InMemoryDocumentStore(
            settings.database_name,
            users_collection=settings.users_collection,
            blogs_collection=settings.blogs_collection,
        )

    store = MongoDocumentStore(
        settings.mongodb_url,
        settings.database_name,
        users_collection=settings.users_collection,
        blogs_collection=settings.blogs_collection,
        server_selection_timeout_ms=settings.server_selection_timeout_ms,
    )
    try:
        store.ping()
        store.ensure_indexes()
    except ConnectionError:
        store.close()
        raise
    except PyMongoError as exc:
        store.close()
        raise ConnectionError(f"Could not initialise MongoDB: {exc}") from exc
    logger.info("Connected successfully to the database %s", settings.database_name)
    return store
