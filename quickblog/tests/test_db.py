import json
import unittest

from quickblog.db import BlogRepository
from quickblog.errors import (
    ConflictError,
    NotFoundError,
    StoreUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from quickblog.store import InMemoryKeyValueStore
from quickblog.text import slugify


def words(n: int) -> str:
    return " ".join(f"w{i}" for i in range(n))


class RecordingStore(InMemoryKeyValueStore):
    """In-memory store that records every write."""

    def __init__(self):
        super().__init__()
        self.writes: list[tuple[str, str]] = []

    def set(self, key, value):
        self.writes.append(("set", key))
        super().set(key, value)

    def delete(self, key):
        self.writes.append(("delete", key))
        super().delete(key)


class FixedClock:
    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now


class BlogRepositoryTestCase(unittest.TestCase):
    def setUp(self):
        self.store = RecordingStore()
        self.clock = FixedClock(1_700_000_000.0)
        self.repo = BlogRepository(self.store, bcrypt_rounds=4, clock=self.clock)


class UserTests(BlogRepositoryTestCase):
    def test_register_stores_user_and_empty_post_list(self):
        self.repo.register_user("alice", "secret")
        user = json.loads(self.store.get("user:alice"))
        self.assertNotEqual(user["password_hash"], "secret")
        self.assertTrue(user["password_hash"].startswith("$2"))
        self.assertIn("created_at", user)
        self.assertEqual(json.loads(self.store.get("user_blogs:alice")), [])

    def test_duplicate_username_conflicts(self):
        self.repo.register_user("alice", "x")
        with self.assertRaises(ConflictError):
            self.repo.register_user("alice", "y")

    def test_register_requires_username_and_password(self):
        with self.assertRaises(ValidationError):
            self.repo.register_user("", "x")
        with self.assertRaises(ValidationError):
            self.repo.register_user("bob", "")

    def test_authenticate(self):
        self.repo.register_user("alice", "right")
        self.assertEqual(self.repo.authenticate("alice", "right"), "alice")

    def test_wrong_password_is_unauthorized(self):
        self.repo.register_user("alice", "right")
        with self.assertRaises(UnauthorizedError):
            self.repo.authenticate("alice", "wrong")

    def test_unknown_user_is_unauthorized(self):
        with self.assertRaises(UnauthorizedError):
            self.repo.authenticate("nobody", "x")

    def test_list_usernames(self):
        self.repo.register_user("bob", "x")
        self.repo.register_user("alice", "x")
        self.assertEqual(self.repo.list_usernames(), ["alice", "bob"])


class CreatePostTests(BlogRepositoryTestCase):
    def setUp(self):
        super().setUp()
        self.repo.register_user("alice", "pw")

    def test_create_then_resolve_slug(self):
        created = self.repo.create_post(
            "alice", "Hello, World! 2024", words(100), ["intro", "python"]
        )
        self.assertEqual(created.slug, "hello-world-2024")
        self.assertEqual(created.post.id, "1700000000000")

        resolved = self.repo.resolve_slug(slugify("Hello, World! 2024"))
        self.assertEqual(resolved.id, created.post.id)
        self.assertEqual(resolved.author, "alice")
        self.assertEqual(resolved.tags, ["intro", "python"])

    def test_persisted_key_layout(self):
        created = self.repo.create_post("alice", "My Post", words(120))
        post_id = created.post.id
        self.assertIsNotNone(self.store.get(f"blog:alice:{post_id}"))
        self.assertEqual(
            json.loads(self.store.get("blog_slug:my-post")),
            {"username": "alice", "blogId": post_id},
        )
        self.assertEqual(json.loads(self.store.get("user_blogs:alice")), [post_id])

    def test_word_count_boundaries(self):
        self.repo.create_post("alice", "Min", words(100))
        self.repo.create_post("alice", "Max", words(3000))
        with self.assertRaises(ValidationError):
            self.repo.create_post("alice", "Short", words(99))
        with self.assertRaises(ValidationError):
            self.repo.create_post("alice", "Long", words(3001))

    def test_rejected_post_writes_nothing(self):
        writes_before = len(self.store.writes)
        with self.assertRaises(ValidationError):
            self.repo.create_post("alice", "Tags", words(150), list("abcde"))
        self.assertEqual(len(self.store.writes), writes_before)

    def test_four_tags_allowed_after_cleaning(self):
        created = self.repo.create_post(
            "alice", "Tags", words(150), ["a", " a ", "b", "", "c", "d"]
        )
        self.assertEqual(created.post.tags, ["a", "b", "c", "d"])

    def test_same_millisecond_posts_get_distinct_ids(self):
        first = self.repo.create_post("alice", "First", words(100))
        second = self.repo.create_post("alice", "Second", words(100))
        self.assertNotEqual(first.post.id, second.post.id)
        self.assertEqual(
            [p.id for p in self.repo.list_posts("alice")],
            [first.post.id, second.post.id],
        )

    def test_category_is_kept(self):
        created = self.repo.create_post(
            "alice", "Cat", words(100), category="technology"
        )
        self.assertEqual(self.repo.get_post("alice", created.post.id).category, "technology")


class ListPostsTests(BlogRepositoryTestCase):
    def setUp(self):
        super().setUp()
        self.repo.register_user("alice", "pw")
        self.repo.register_user("bob", "pw")

    def test_missing_records_are_skipped(self):
        created = self.repo.create_post("alice", "Kept", words(100))
        self.store.set("user_blogs:alice", json.dumps([created.post.id, "404"]))
        self.assertEqual([p.id for p in self.repo.list_posts("alice")], [created.post.id])

    def test_unknown_author_has_no_posts(self):
        self.assertEqual(self.repo.list_posts("nobody"), [])

    def test_list_all_posts_newest_first(self):
        self.repo.create_post("alice", "Old", words(100))
        self.clock.now += 60
        self.repo.create_post("bob", "New", words(100))
        titles = [p.title for p in self.repo.list_all_posts()]
        self.assertEqual(titles, ["New", "Old"])


class UpdatePostTests(BlogRepositoryTestCase):
    def setUp(self):
        super().setUp()
        self.repo.register_user("alice", "pw")
        self.created = self.repo.create_post("alice", "Original", words(100), ["a"])

    def test_merge_keeps_unsupplied_fields(self):
        updated = self.repo.update_post(
            "alice", self.created.post.id, title="Renamed"
        )
        self.assertEqual(updated.title, "Renamed")
        self.assertEqual(updated.content, self.created.post.content)
        self.assertEqual(updated.tags, ["a"])
        stored = self.repo.get_post("alice", self.created.post.id)
        self.assertEqual(stored.title, "Renamed")
        self.assertEqual(stored.created_at, self.created.post.created_at)

    def test_slug_index_is_not_recomputed(self):
        self.repo.update_post("alice", self.created.post.id, title="Renamed")
        self.assertIsNone(self.store.get("blog_slug:renamed"))
        self.assertEqual(self.repo.resolve_slug("original").title, "Renamed")

    def test_update_replaces_tags(self):
        updated = self.repo.update_post(
            "alice", self.created.post.id, tags=["x", "y"]
        )
        self.assertEqual(updated.tags, ["x", "y"])

    def test_invalid_content_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.repo.update_post("alice", self.created.post.id, content=words(5))

    def test_missing_post_is_not_found_without_writes(self):
        writes_before = len(self.store.writes)
        with self.assertRaises(NotFoundError):
            self.repo.update_post("alice", "does-not-exist", title="x")
        self.assertEqual(len(self.store.writes), writes_before)

    def test_other_author_cannot_update(self):
        self.repo.register_user("mallory", "pw")
        with self.assertRaises(NotFoundError):
            self.repo.update_post("mallory", self.created.post.id, title="Mine")


class DeletePostTests(BlogRepositoryTestCase):
    def setUp(self):
        super().setUp()
        self.repo.register_user("alice", "pw")

    def test_delete_leaves_stale_slug_entry(self):
        created = self.repo.create_post("alice", "Gone Soon", words(100))
        before = self.repo.resolve_slug("gone-soon")
        self.assertEqual(before.id, created.post.id)

        self.repo.delete_post("alice", created.post.id)

        self.assertEqual(self.repo.list_posts("alice"), [])
        self.assertIsNone(self.store.get(f"blog:alice:{created.post.id}"))
        # The index entry survives; the earlier lookup result is now stale.
        self.assertIsNotNone(self.store.get("blog_slug:gone-soon"))
        self.assertEqual(before.title, "Gone Soon")
        with self.assertRaises(NotFoundError):
            self.repo.resolve_slug("gone-soon")

    def test_delete_unknown_id_is_noop(self):
        created = self.repo.create_post("alice", "Stay", words(100))
        self.repo.delete_post("alice", "nope")
        self.assertEqual([p.id for p in self.repo.list_posts("alice")], [created.post.id])


class SlugAndTitleTests(BlogRepositoryTestCase):
    def setUp(self):
        super().setUp()
        self.repo.register_user("alice", "pw")

    def test_unknown_slug_is_not_found(self):
        with self.assertRaises(NotFoundError):
            self.repo.resolve_slug("missing")

    def test_title_availability(self):
        self.assertTrue(self.repo.is_title_available("My First Post"))
        self.repo.create_post("alice", "My First Post", words(100))
        self.assertFalse(self.repo.is_title_available("my first post!"))
        self.assertFalse(self.repo.is_title_available("MyFirstPost 2"))
        self.assertTrue(self.repo.is_title_available("My Second Post"))

    def test_corrupt_record_surfaces_as_store_failure(self):
        self.store.set("blog_slug:broken", "{not json")
        with self.assertRaises(StoreUnavailableError):
            self.repo.resolve_slug("broken")


if __name__ == "__main__":
    unittest.main()
