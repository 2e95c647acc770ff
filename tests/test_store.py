"""
Test cases for the sign store, its JSON encoding and storage backends.
"""
import json
import tempfile
import unittest
import sys
from pathlib import Path

# Add project root and tests dir to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from signtrainer.errors import EmptyInput, IndexOutOfRange, PersistenceCorrupt
from signtrainer.landmarks import normalize
from signtrainer.persistence import FileVocabularyBackend, InMemoryVocabularyBackend
from signtrainer.store import SignStore, decode_vocabulary, encode_vocabulary
from signtrainer.types import Point3, SignRecord
from synthetic import hand_a, hand_b, bend


def record(name, pose, thumbnail="data:image/png;base64,AAAA"):
    return SignRecord(name=name, landmarks=normalize(pose), thumbnail=thumbnail)


class TestVocabularyEncoding(unittest.TestCase):
    """Test the persisted vocabulary format."""

    def test_round_trip_preserves_order_and_fields(self):
        vocabulary = (
            record("hello", hand_a()),
            record("bye", hand_b(), thumbnail=None),
            record("hello", bend(hand_a(), 0.1234567891234)),
        )
        self.assertEqual(decode_vocabulary(encode_vocabulary(vocabulary)), vocabulary)

    def test_empty_round_trip(self):
        self.assertEqual(decode_vocabulary(encode_vocabulary(())), ())

    def test_wire_shape(self):
        data = json.loads(encode_vocabulary((record("hello", hand_a()),)))
        self.assertIsInstance(data, list)
        self.assertEqual(set(data[0]), {"name", "landmarks", "thumbnail"})
        self.assertEqual(data[0]["name"], "hello")
        self.assertEqual(len(data[0]["landmarks"]), 21)
        self.assertEqual(data[0]["landmarks"][0], {"x": 0.0, "y": 0.0, "z": 0.0})

    def test_accepts_legacy_image_key(self):
        data = json.dumps([{
            "name": " wave ",
            "landmarks": [{"x": 0.0, "y": 0.0, "z": 0.0}],
            "image": "data:image/png;base64,AAAA",
        }]).encode()
        (sign,) = decode_vocabulary(data)
        self.assertEqual(sign.name, "wave")
        self.assertEqual(sign.thumbnail, "data:image/png;base64,AAAA")
        self.assertEqual(sign.landmarks, (Point3(0.0, 0.0, 0.0),))

    def test_corrupt_payloads(self):
        for bad in [b"not json", b"{\"name\": \"x\"}", b"[{\"name\": \"x\"}]",
                    b"[{\"name\": \"  \", \"landmarks\": []}]",
                    b"[{\"name\": \"x\", \"landmarks\": [{\"x\": \"a\", \"y\": 0, \"z\": 0}]}]",
                    b"[{\"name\": \"x\", \"landmarks\": [{\"x\": NaN, \"y\": 0, \"z\": 0}]}]",
                    b"[{\"name\": \"x\", \"landmarks\": [{\"x\": 0, \"y\": Infinity, \"z\": 0}]}]",
                    b"[{\"name\": \"x\", \"landmarks\": [{\"x\": 0, \"y\": 0, \"z\": -Infinity}]}]"]:
            with self.assertRaises(PersistenceCorrupt, msg=bad):
                decode_vocabulary(bad)


class TestSignStore(unittest.TestCase):
    """Test vocabulary mutations and persistence."""

    def setUp(self):
        self.backend = InMemoryVocabularyBackend()
        self.store = SignStore(self.backend)
        self.store.load()

    def names(self):
        return [sign.name for sign in self.store.snapshot()]

    def test_load_missing_data_is_empty(self):
        self.assertEqual(self.store.load(), ())
        self.assertEqual(len(self.store), 0)

    def test_load_corrupt_data_is_empty(self):
        store = SignStore(InMemoryVocabularyBackend(b"\x00\xffgarbage"))
        with self.assertLogs("signtrainer.store", level="WARNING"):
            self.assertEqual(store.load(), ())

    def test_add_appends_and_persists(self):
        self.store.add(record("hello", hand_a()))
        self.store.add(record("bye", hand_b()))
        self.assertEqual(self.names(), ["hello", "bye"])
        self.assertEqual(self.backend.save_count, 2)
        self.assertEqual(decode_vocabulary(self.backend.load_vocabulary()), self.store.snapshot())

    def test_duplicate_names_allowed(self):
        self.store.add(record("wave", hand_a()))
        self.store.add(record("wave", hand_b()))
        self.assertEqual(self.names(), ["wave", "wave"])

    def test_remove_shifts_indices(self):
        for name in ["a", "b", "c", "d"]:
            self.store.add(record(name, hand_a()))
        removed = self.store.remove(1)
        self.assertEqual(removed.name, "b")
        self.assertEqual(self.names(), ["a", "c", "d"])
        self.assertEqual(self.store[1].name, "c")
        self.assertEqual(decode_vocabulary(self.backend.load_vocabulary()), self.store.snapshot())

    def test_remove_out_of_range(self):
        for name in ["a", "b", "c"]:
            self.store.add(record(name, hand_a()))
        saves = self.backend.save_count
        with self.assertRaises(IndexOutOfRange):
            self.store.remove(5)
        with self.assertRaises(IndexOutOfRange):
            self.store.remove(-1)
        with self.assertRaises(IndexError):
            self.store.remove(3)
        self.assertEqual(self.names(), ["a", "b", "c"])
        self.assertEqual(self.backend.save_count, saves)

    def test_clear_persists_empty(self):
        self.store.add(record("hello", hand_a()))
        self.store.clear()
        self.assertEqual(self.store.snapshot(), ())
        self.assertEqual(decode_vocabulary(self.backend.load_vocabulary()), ())

    def test_snapshot_unaffected_by_later_mutation(self):
        self.store.add(record("hello", hand_a()))
        snapshot = self.store.snapshot()
        self.store.add(record("bye", hand_b()))
        self.store.clear()
        self.assertEqual([s.name for s in snapshot], ["hello"])

    def test_reload_restores_vocabulary(self):
        self.store.add(record("hello", hand_a()))
        self.store.add(record("bye", hand_b()))
        reloaded = SignStore(self.backend)
        self.assertEqual(reloaded.load(), self.store.snapshot())

    def test_record_names_are_trimmed_and_non_blank(self):
        with self.assertRaises(EmptyInput):
            SignRecord("", normalize(hand_a()))
        with self.assertRaises(EmptyInput):
            SignRecord("   ", normalize(hand_a()))
        with self.assertRaises(ValueError):
            SignRecord(" hi ", normalize(hand_a()))
        self.assertEqual(self.store.snapshot(), ())
        self.assertEqual(self.backend.save_count, 0)

    def test_saved_names_reload_unchanged(self):
        self.store.add(record("thumbs up", hand_a()))
        reloaded = SignStore(self.backend).load()
        self.assertEqual([s.name for s in reloaded], ["thumbs up"])
        self.assertEqual(reloaded, self.store.snapshot())

    def test_failed_write_leaves_vocabulary_unchanged(self):
        class FailingBackend(InMemoryVocabularyBackend):
            def save_vocabulary(self, data):
                raise OSError("disk full")

        store = SignStore(FailingBackend())
        with self.assertRaises(OSError):
            store.add(record("hello", hand_a()))
        self.assertEqual(store.snapshot(), ())


class TestFileVocabularyBackend(unittest.TestCase):
    """Test the single-file backend."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "nested" / "signs.json"
        self.backend = FileVocabularyBackend(self.path)

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_file(self):
        self.assertIsNone(self.backend.load_vocabulary())

    def test_save_and_load(self):
        self.backend.save_vocabulary(b"[]")
        self.backend.save_vocabulary(b"[1]")
        self.assertEqual(self.backend.load_vocabulary(), b"[1]")
        self.assertEqual(list(self.path.parent.iterdir()), [self.path])

    def test_store_round_trip_through_file(self):
        store = SignStore(self.backend)
        store.add(record("hello", hand_a()))
        store.add(record("bye", hand_b(), thumbnail=None))
        self.assertEqual(SignStore(FileVocabularyBackend(self.path)).load(), store.snapshot())

    def test_corrupt_file_yields_empty_vocabulary(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("[{\"name\": ")
        with self.assertLogs("signtrainer.store", level="WARNING"):
            self.assertEqual(SignStore(self.backend).load(), ())


if __name__ == '__main__':
    unittest.main()
