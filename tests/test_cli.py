"""Tests for the lodestone CLI."""

from unittest.mock import patch

import pytest

import cli
from repositories.catalog_repo import CatalogRepository
from repositories.document_store import InMemoryDocumentStore
from repositories.settings_repo import SettingsRepository
from services.catalog_service import CatalogService


@pytest.fixture
def store():
    store = InMemoryDocumentStore()
    with patch("cli._catalog_service", return_value=CatalogService(CatalogRepository(store))), \
            patch("cli._settings_repository", return_value=SettingsRepository(store)):
        yield store


def test_seed_writes_hubs_and_settings(store, capsys):
    assert cli.main(["seed"]) == 0
    out = capsys.readouterr().out
    assert "seeded 2 of 2 hubs" in out
    assert "deletion confirmation: on" in out
    assert store.get_document("settings", "general") == {
        "showDeletionConfirmation": True,
        "deletionConfirmationDisabledAt": None,
    }

    assert cli.main(["seed"]) == 0
    assert "seeded 0 of 2 hubs" in capsys.readouterr().out


def test_seed_keeps_existing_settings(store, capsys):
    store.set_document("settings", "general", {"showDeletionConfirmation": False,
                                               "deletionConfirmationDisabledAt": "2026-01-01T12:00:00.000Z"})
    assert cli.main(["seed"]) == 0
    assert "deletion confirmation: off" in capsys.readouterr().out


def test_generate_prints_lists(store, capsys):
    assert cli.main(["generate", "h1", "-n", "2"]) == 0
    out = capsys.readouterr().out
    assert out.count("Forest Cache (") == 2


def test_generate_unknown_hub_fails(store, capsys):
    assert cli.main(["generate", "missing"]) == 1
    assert "not found" in capsys.readouterr().out


def test_log_level_rejects_unknown(capsys):
    assert cli.main(["log-level", "LOUD"]) == 1
    assert "invalid level" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()
