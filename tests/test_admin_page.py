"""Tests for the admin page's store-facing actions."""

from unittest.mock import MagicMock, patch

from domain.errors import StoreUnavailable
from domain.models import ResourceHub
from pages import admin


HUB = ResourceHub(id="h1", name="Forest Cache")


def test_visibility_change_saved():
    catalog = MagicMock()
    with patch.object(admin, "st") as mock_st:
        assert admin.update_visibility(catalog, HUB, False) is True
    catalog.set_hub_visibility.assert_called_once_with("h1", False)
    mock_st.error.assert_not_called()


def test_visibility_store_outage_shows_error():
    catalog = MagicMock()
    catalog.set_hub_visibility.side_effect = StoreUnavailable("write", "resourceHubs/h1")
    with patch.object(admin, "st") as mock_st:
        assert admin.update_visibility(catalog, HUB, False) is False
    mock_st.error.assert_called_once()
    assert "Forest Cache" in mock_st.error.call_args[0][0]
