"""
Tests for BaseRepository

Tests the foundation repository class with:
- Successful reads via read_document() / read_collection()
- Transient StoreUnavailable recovery (single retry)
- Errors surviving the retry are re-raised
"""
import pytest
from unittest.mock import Mock

from domain.errors import StoreUnavailable
from repositories.base import BaseRepository, new_document_id


class TestBaseRepository:
    """Test cases for BaseRepository read helpers"""

    def _make_repo(self):
        mock_store = Mock()
        return BaseRepository(mock_store), mock_store

    def test_read_document_success(self):
        repo, store = self._make_repo()
        store.get_document.return_value = {"name": "Forest Cache"}

        assert repo.read_document("resourceHubs", "h1") == {"name": "Forest Cache"}
        store.get_document.assert_called_once_with("resourceHubs", "h1")

    def test_read_document_missing_returns_none(self):
        repo, store = self._make_repo()
        store.get_document.return_value = None
        assert repo.read_document("resourceHubs", "nope") is None

    def test_read_retries_once_after_transient_failure(self):
        repo, store = self._make_repo()
        store.list_documents.side_effect = [
            StoreUnavailable("list", "provisions"),
            [("p1", {"name": "Trail Rations"})],
        ]

        result = repo.read_collection("provisions")

        assert result == [("p1", {"name": "Trail Rations"})]
        assert store.list_documents.call_count == 2

    def test_second_failure_propagates(self):
        repo, store = self._make_repo()
        store.get_document.side_effect = StoreUnavailable("read", "settings/general")

        with pytest.raises(StoreUnavailable):
            repo.read_document("settings", "general")
        assert store.get_document.call_count == 2

    def test_other_errors_are_not_retried(self):
        repo, store = self._make_repo()
        store.get_document.side_effect = KeyError("boom")

        with pytest.raises(KeyError):
            repo.read_document("settings", "general")
        store.get_document.assert_called_once()

    def test_custom_logger_is_used(self):
        mock_logger = Mock()
        store = Mock()
        store.get_document.side_effect = [StoreUnavailable("read", "x/y"), None]

        BaseRepository(store, mock_logger).read_document("x", "y")
        mock_logger.error.assert_called_once()


def test_new_document_id_shape():
    ids = {new_document_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(len(i) == 20 for i in ids)
