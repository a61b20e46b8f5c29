import unittest

from blog_backend.errors import InternalError, NotFound, ValidationError
from blog_backend.store import InMemoryDocumentStore
from blog_backend.users import SignupResult, UserDirectory


class UserDirectoryTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryDocumentStore()
        self.users = UserDirectory(self.store, bcrypt_rounds=4)

    def test_signup_then_signin(self):
        self.assertIs(self.users.signup("alice", "pw"), SignupResult.CREATED)
        self.assertTrue(self.users.signin("alice", "pw"))
        self.assertFalse(self.users.signin("alice", "wrong"))
        self.assertFalse(self.users.signin("bob", "pw"))
        self.assertFalse(self.users.signin(None, "pw"))

    def test_signup_duplicate_keeps_first_record(self):
        self.users.signup("alice", "pw")
        self.assertIs(self.users.signup("alice", "other"), SignupResult.EXISTS)
        self.assertEqual(len(self.store.users), 1)
        self.assertTrue(self.users.signin("alice", "pw"))

    def test_signup_requires_credentials(self):
        for username, password in [("", "pw"), ("alice", ""), (None, None)]:
            with self.assertRaises(ValidationError) as ctx:
                self.users.signup(username, password)
            self.assertEqual(ctx.exception.status_code, 400)

    def test_signup_keeps_profile_fields(self):
        self.users.signup("alice", "pw", first_name="Alice", hobby=None, unknown="x")
        record = self.store.find_user("alice")
        self.assertEqual(record["first_name"], "Alice")
        self.assertNotIn("hobby", record)
        self.assertNotIn("unknown", record)

    def test_signup_unacknowledged_insert(self):
        self.store.insert_user = lambda record: None
        with self.assertRaises(InternalError):
            self.users.signup("alice", "pw")

    def test_signup_race_reports_exists(self):
        self.store.insert_user({"username": "alice", "password": "x"})
        self.store.find_user = lambda username: None
        self.assertIs(self.users.signup("alice", "pw"), SignupResult.EXISTS)

    def test_view_user_details(self):
        self.users.signup("alice", "pw", about_me="hi")
        [record] = self.users.view_user_details("alice")
        self.assertEqual(record["about_me"], "hi")
        self.assertNotIn("password", record)
        with self.assertRaises(NotFound):
            self.users.view_user_details("bob")

    def test_update_profile_overwrites_all_fields(self):
        self.users.signup("alice", "pw", hobby="chess", skills="go")
        updated = self.users.update_profile("alice", skills="python", avatar="a.png")
        self.assertEqual(updated["skills"], "python")
        self.assertEqual(updated["avatar"], "a.png")
        self.assertIsNone(updated["hobby"])
        self.assertNotIn("password", updated)
        # Password is untouched by profile updates.
        self.assertTrue(self.users.signin("alice", "pw"))

    def test_update_profile_unknown_user(self):
        with self.assertRaises(NotFound) as ctx:
            self.users.update_profile("bob", first_name="Bob")
        self.assertEqual(ctx.exception.as_body(), {"message": "User not found"})


if __name__ == "__main__":
    unittest.main()
