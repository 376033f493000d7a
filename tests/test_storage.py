"""Tests for gatekeeper.storage."""

import json

import pytest

from gatekeeper.storage import (
    PLACEHOLDER_REFERENCE,
    GatekeeperStore,
    JsonFileBackend,
    MemoryBackend,
    StorageError,
    VerificationReference,
)


@pytest.fixture
def paths(tmp_path):
    return {
        "data_file": tmp_path / "data.json",
        "verified_users_file": tmp_path / "verified_users.json",
        "last_prompt_file": tmp_path / "last_verification_message.json",
    }


class TestJsonFileBackend:
    def test_missing_file_returns_default(self, tmp_path):
        backend = JsonFileBackend({"doc": tmp_path / "missing.json"})
        assert backend.get("doc", {"a": 1}) == {"a": 1}

    def test_corrupt_file_returns_default(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        backend = JsonFileBackend({"doc": path})
        assert backend.get("doc", {}) == {}

    def test_set_is_not_written_until_flush(self, tmp_path):
        path = tmp_path / "doc.json"
        backend = JsonFileBackend({"doc": path})

        backend.set("doc", {"x": 1})
        assert not path.exists()
        assert backend.get("doc", None) == {"x": 1}

        backend.flush()
        assert json.loads(path.read_text(encoding="utf-8")) == {"x": 1}

    def test_flush_rewrites_whole_document(self, tmp_path):
        path = tmp_path / "doc.json"
        path.write_text(json.dumps({"old": True}), encoding="utf-8")
        backend = JsonFileBackend({"doc": path})

        backend.set("doc", {"new": True})
        backend.flush()

        assert json.loads(path.read_text(encoding="utf-8")) == {"new": True}

    def test_unknown_key_raises(self, tmp_path):
        backend = JsonFileBackend({"doc": tmp_path / "doc.json"})
        with pytest.raises(KeyError):
            backend.set("other", {})

    def test_write_failure_raises_storage_error(self, tmp_path):
        backend = JsonFileBackend({"doc": tmp_path / "no-such-dir" / "doc.json"})
        backend.set("doc", {"x": 1})
        with pytest.raises(StorageError):
            backend.flush()

    def test_arabic_text_round_trips_unescaped(self, tmp_path):
        path = tmp_path / "doc.json"
        backend = JsonFileBackend({"doc": path})
        backend.set("doc", {"text": "مرحبا"})
        backend.flush()
        assert "مرحبا" in path.read_text(encoding="utf-8")


class TestVerificationReference:
    def test_from_document(self):
        ref = VerificationReference.from_document(
            {
                "verification_keywords": ["هوية", "توثيق"],
                "verification_reference": "Reference text",
            }
        )
        assert ref.keywords == ["هوية", "توثيق"]
        assert ref.reference == "Reference text"

    @pytest.mark.parametrize("data", [None, [], "text", {}])
    def test_invalid_document_uses_placeholder(self, data):
        ref = VerificationReference.from_document(data)
        assert ref.keywords == []
        assert ref.reference == PLACEHOLDER_REFERENCE


class TestGatekeeperStore:
    def test_reference_loaded_from_file(self, paths):
        paths["data_file"].write_text(
            json.dumps(
                {"verification_keywords": ["k"], "verification_reference": "ref"}
            ),
            encoding="utf-8",
        )
        store = GatekeeperStore.from_files(**paths)
        assert store.load_reference() == VerificationReference(["k"], "ref")

    def test_reference_placeholder_when_missing(self, paths):
        store = GatekeeperStore.from_files(**paths)
        assert store.load_reference().reference == PLACEHOLDER_REFERENCE

    def test_mark_verified_persists_immediately(self, paths):
        store = GatekeeperStore.from_files(**paths)
        assert store.is_verified(42) is False

        store.mark_verified(42)

        on_disk = json.loads(paths["verified_users_file"].read_text(encoding="utf-8"))
        assert on_disk == {"42": True}
        assert store.is_verified(42) is True

    def test_existing_verified_users_are_kept(self, paths):
        paths["verified_users_file"].write_text(
            json.dumps({"7": True}), encoding="utf-8"
        )
        store = GatekeeperStore.from_files(**paths)

        store.mark_verified(8)

        on_disk = json.loads(paths["verified_users_file"].read_text(encoding="utf-8"))
        assert on_disk == {"7": True, "8": True}

    def test_last_prompt_round_trip(self, paths):
        store = GatekeeperStore.from_files(**paths)
        assert store.last_prompt_id() is None

        store.set_last_prompt_id(1234)

        on_disk = json.loads(paths["last_prompt_file"].read_text(encoding="utf-8"))
        assert on_disk == {"messageId": 1234}
        assert GatekeeperStore.from_files(**paths).last_prompt_id() == 1234

    @pytest.mark.parametrize(
        "document", [{"messageId": None}, {"messageId": "abc"}, [], {}]
    )
    def test_last_prompt_invalid_values(self, document):
        store = GatekeeperStore(MemoryBackend({"last_prompt": document}))
        assert store.last_prompt_id() is None

    def test_non_dict_verified_document_is_empty(self):
        store = GatekeeperStore(MemoryBackend({"verified_users": ["42"]}))
        assert store.is_verified(42) is False
        store.mark_verified(42)
        assert store.is_verified(42) is True
