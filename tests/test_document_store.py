"""Tests for the in-memory and Firestore document store gateways."""

from unittest.mock import MagicMock, Mock

import pytest
from google.api_core import exceptions as google_exceptions

from domain.errors import StoreUnavailable
from repositories.document_store import FirestoreDocumentStore, InMemoryDocumentStore


class TestInMemoryDocumentStore:
    def test_set_get_delete(self, memory_store):
        memory_store.set_document("provisions", "p1", {"name": "Trail Rations"})
        assert memory_store.get_document("provisions", "p1") == {"name": "Trail Rations"}

        memory_store.delete_document("provisions", "p1")
        assert memory_store.get_document("provisions", "p1") is None

    def test_documents_are_copied(self, memory_store):
        doc = {"tags": ["a"]}
        memory_store.set_document("c", "d", doc)
        doc["tags"].append("b")
        memory_store.get_document("c", "d")["tags"].append("c")
        assert memory_store.get_document("c", "d") == {"tags": ["a"]}

    def test_list_documents(self, memory_store):
        memory_store.set_document("resourceHubs", "h1", {"name": "A"})
        memory_store.set_document("resourceHubs", "h2", {"name": "B"})
        assert sorted(memory_store.list_documents("resourceHubs")) == [
            ("h1", {"name": "A"}),
            ("h2", {"name": "B"}),
        ]
        assert memory_store.list_documents("empty") == []

    def test_subscribe_delivers_current_then_changes(self, memory_store):
        seen = []
        memory_store.set_document("settings", "general", {"v": 1})
        unsubscribe = memory_store.subscribe("settings", "general", seen.append, Mock())

        memory_store.set_document("settings", "general", {"v": 2})
        memory_store.delete_document("settings", "general")
        assert seen == [{"v": 1}, {"v": 2}, None]

        unsubscribe()
        memory_store.set_document("settings", "general", {"v": 3})
        assert len(seen) == 3
        assert memory_store.listener_count("settings", "general") == 0

    def test_listener_failure_goes_to_on_error(self, memory_store):
        on_error = Mock()
        memory_store.subscribe("settings", "general", Mock(side_effect=RuntimeError("bad")), on_error)
        on_error.assert_called_once()
        assert isinstance(on_error.call_args[0][0], RuntimeError)

    def test_unsubscribe_twice_is_harmless(self, memory_store):
        unsubscribe = memory_store.subscribe("c", "d", Mock(), Mock())
        unsubscribe()
        unsubscribe()
        assert memory_store.listener_count("c", "d") == 0


def _firestore_store():
    client = MagicMock()
    ref = client.collection.return_value.document.return_value
    return FirestoreDocumentStore(client), client, ref


class TestFirestoreDocumentStore:
    def test_get_existing_and_missing(self):
        store, client, ref = _firestore_store()
        ref.get.return_value = Mock(exists=True, to_dict=Mock(return_value={"name": "Rope"}))
        assert store.get_document("provisions", "p1") == {"name": "Rope"}
        client.collection.assert_called_with("provisions")
        client.collection.return_value.document.assert_called_with("p1")

        ref.get.return_value = Mock(exists=False)
        assert store.get_document("provisions", "p1") is None

    def test_google_errors_become_store_unavailable(self):
        store, _, ref = _firestore_store()
        ref.set.side_effect = google_exceptions.ServiceUnavailable("down")

        with pytest.raises(StoreUnavailable) as exc_info:
            store.set_document("settings", "general", {"showDeletionConfirmation": True})
        assert exc_info.value.operation == "write"
        assert exc_info.value.path == "settings/general"

    def test_list_documents_streams_collection(self):
        store, client, _ = _firestore_store()
        snap = Mock(id="h1", to_dict=Mock(return_value={"name": "Forest Cache"}))
        client.collection.return_value.stream.return_value = [snap]
        assert store.list_documents("resourceHubs") == [("h1", {"name": "Forest Cache"})]

    def test_subscribe_forwards_snapshots(self):
        store, _, ref = _firestore_store()
        on_change, on_error = Mock(), Mock()

        unsubscribe = store.subscribe("settings", "general", on_change, on_error)
        callback = ref.on_snapshot.call_args[0][0]
        callback([Mock(exists=True, to_dict=Mock(return_value={"v": 1}))], [], None)
        callback([Mock(exists=False)], [], None)

        assert [c.args[0] for c in on_change.call_args_list] == [{"v": 1}, None]
        assert unsubscribe is ref.on_snapshot.return_value.unsubscribe
        on_error.assert_not_called()

    def test_subscribe_failure_reported(self):
        store, _, ref = _firestore_store()
        ref.on_snapshot.side_effect = google_exceptions.PermissionDenied("no")
        on_error = Mock()

        unsubscribe = store.subscribe("settings", "general", Mock(), on_error)
        unsubscribe()
        assert isinstance(on_error.call_args[0][0], StoreUnavailable)
