import unittest
from unittest.mock import MagicMock, patch

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, OperationFailure, ServerSelectionTimeoutError

from blog_backend.config import Settings
from blog_backend.errors import AlreadyExists
from blog_backend.store import InMemoryDocumentStore, MongoDocumentStore, connect


class MongoDocumentStoreTests(unittest.TestCase):
    """
    Exercises the pymongo calls against mocked collections.
    """

    def setUp(self):
        self.client = MagicMock()
        self.store = MongoDocumentStore("", "Blog", client=self.client)
        self.store.users = MagicMock()
        self.store.blogs = MagicMock()

    def test_requires_url_without_client(self):
        with self.assertRaises(ValueError):
            MongoDocumentStore("")

    def test_ping_unreachable_raises_connection_error(self):
        self.client.admin.command.side_effect = ServerSelectionTimeoutError("down")
        with self.assertRaises(ConnectionError):
            self.store.ping()

    def test_ensure_indexes(self):
        self.store.ensure_indexes()
        self.store.users.create_index.assert_called_once_with(
            [("username", 1)], unique=True
        )
        self.store.blogs.create_index.assert_called_once_with([("owner", 1)])

    def test_insert_user_acknowledged(self):
        oid = ObjectId()
        self.store.users.insert_one.return_value = MagicMock(
            acknowledged=True, inserted_id=oid
        )
        self.assertEqual(self.store.insert_user({"username": "a"}), oid)

    def test_insert_user_unacknowledged(self):
        self.store.users.insert_one.return_value = MagicMock(acknowledged=False)
        self.assertIsNone(self.store.insert_user({"username": "a"}))

    def test_insert_user_duplicate_key(self):
        self.store.users.insert_one.side_effect = DuplicateKeyError("dup")
        with self.assertRaises(AlreadyExists):
            self.store.insert_user({"username": "a"})

    def test_update_user_profile_returns_new_document(self):
        self.store.update_user_profile("a", {"hobby": "go"})
        self.store.users.find_one_and_update.assert_called_once_with(
            {"username": "a"},
            {"$set": {"hobby": "go"}},
            return_document=ReturnDocument.AFTER,
        )

    def test_insert_entry_sets_owner(self):
        self.store.insert_entry("a", {"title": "t", "content": "c", "public": False})
        self.store.blogs.insert_one.assert_called_once_with(
            {"title": "t", "content": "c", "public": False, "owner": "a"}
        )

    def test_entry_queries_filter_by_owner(self):
        oid = ObjectId()
        self.store.blogs.find.return_value = iter([{"_id": oid}])
        self.assertEqual(self.store.list_entries("a"), [{"_id": oid}])
        self.store.blogs.find.assert_called_once_with({"owner": "a"})

        self.store.get_entry("a", oid)
        self.store.blogs.find_one.assert_called_once_with({"_id": oid, "owner": "a"})

    def test_set_entry_public_returns_modified_count(self):
        oid = ObjectId()
        self.store.blogs.update_one.return_value = MagicMock(modified_count=1)
        self.assertEqual(self.store.set_entry_public("a", oid, True), 1)
        self.store.blogs.update_one.assert_called_once_with(
            {"_id": oid, "owner": "a"}, {"$set": {"public": True}}
        )

    def test_delete_entry_returns_deleted_count(self):
        self.store.blogs.delete_one.return_value = MagicMock(deleted_count=0)
        self.assertEqual(self.store.delete_entry("a", ObjectId()), 0)


class ConnectTests(unittest.TestCase):
    def test_in_memory(self):
        store = connect(Settings(use_in_memory_backends=True, database_name="T"))
        self.assertIsInstance(store, InMemoryDocumentStore)
        self.assertEqual(store.name, "T")

    @patch("blog_backend.store.MongoClient")
    def test_unreachable_server(self, mock_client):
        mock_client.return_value.admin.command.side_effect = (
            ServerSelectionTimeoutError("timeout")
        )
        with self.assertRaises(ConnectionError):
            connect(Settings(use_in_memory_backends=False))
        mock_client.return_value.close.assert_called_once()

    @patch("blog_backend.store.MongoClient")
    def test_index_failure_is_connection_error(self, mock_client):
        store_db = mock_client.return_value.__getitem__.return_value
        store_db.__getitem__.return_value.create_index.side_effect = OperationFailure(
            "not authorized"
        )
        with self.assertRaises(ConnectionError):
            connect(Settings(use_in_memory_backends=False))

    @patch("blog_backend.store.MongoClient")
    def test_connects_and_creates_indexes(self, mock_client):
        store = connect(
            Settings(
                use_in_memory_backends=False,
                mongodb_url="mongodb://db:27017",
                server_selection_timeout_ms=100,
            )
        )
        self.assertIsInstance(store, MongoDocumentStore)
        mock_client.assert_called_once_with(
            "mongodb://db:27017", serverSelectionTimeoutMS=100
        )
        mock_client.return_value.admin.command.assert_called_once_with("ping")


if __name__ == "__main__":
    unittest.main()
