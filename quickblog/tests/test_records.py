import json
import unittest

from quickblog.errors import StoreUnavailableError
from quickblog.records import PostRecord, SlugEntry, UserRecord, decode_id_list


class RecordDecodingTests(unittest.TestCase):
    def test_user_record_without_username_uses_key(self):
        raw = json.dumps(
            {"password_hash": "$2b$10$abc", "created_at": "2024-01-01T00:00:00.000Z"}
        )
        record = UserRecord.from_json("alice", raw)
        self.assertEqual(record.username, "alice")

    def test_post_record_requires_fields(self):
        with self.assertRaises(StoreUnavailableError):
            PostRecord.from_json("blog:a:1", json.dumps({"id": "1"}))

    def test_post_record_rejects_non_list_tags(self):
        raw = json.dumps(
            {
                "id": "1",
                "title": "t",
                "content": "c",
                "author": "a",
                "tags": "oops",
                "created_at": "x",
                "updated_at": "x",
            }
        )
        with self.assertRaises(StoreUnavailableError):
            PostRecord.from_json("blog:a:1", raw)

    def test_slug_entry_uses_blog_id_key(self):
        entry = SlugEntry("alice", "17")
        self.assertEqual(json.loads(entry.to_json()), {"username": "alice", "blogId": "17"})
        self.assertEqual(SlugEntry.from_json("blog_slug:x", entry.to_json()), entry)

    def test_id_list(self):
        self.assertEqual(decode_id_list("user_blogs:a", None), [])
        self.assertEqual(decode_id_list("user_blogs:a", "[1, \"2\"]"), ["1", "2"])
        with self.assertRaises(StoreUnavailableError):
            decode_id_list("user_blogs:a", "{}")


if __name__ == "__main__":
    unittest.main()
