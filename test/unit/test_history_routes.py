"""
HTTP-level tests for the history routes.

Requests go through FastAPI's TestClient against the JSON store fixture;
principals are passed in the X-Principal / X-Permissions headers.
"""
import json
import pytest
from urllib.parse import unquote
from fastapi.testclient import TestClient

from shared.config import settings
from backend.app.main import app
from backend.app.routes import history
from backend.app.services.history_request import build_history_request

BASE = settings.admin_base_path.rstrip("/")
EDITOR = {"X-Principal": "editor", "X-Permissions": "records.view,records.edit"}
VIEWER = {"X-Principal": "viewer", "X-Permissions": "records.view"}


@pytest.fixture
def client(stored_record):
    return TestClient(app)


@pytest.fixture
def override_record(fake_record):
    """Serve the in-memory fake record for every id."""
    app.dependency_overrides[history.get_history_request] = lambda: build_history_request(
        loader=lambda record_id: fake_record
    )
    yield fake_record
    app.dependency_overrides.clear()


class TestViewRoute:
    """Test cases for GET .../history/view."""

    def test_full_page(self, client):
        """A normal request returns the version wrapped in a page."""
        r = client.get(f"{BASE}/7/history/view", params={"v": 2}, headers=VIEWER)

        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/html")
        assert r.text.startswith("<!DOCTYPE html>")
        assert "Currently viewing version 2" in r.text
        assert "About us (review)" in r.text

    def test_ajax_header_returns_fragment(self, client):
        """XMLHttpRequest requests get only the fragment."""
        headers = dict(VIEWER, **{"X-Requested-With": "XMLHttpRequest"})
        r = client.get(f"{BASE}/7/history/view", params={"v": 2}, headers=headers)

        assert r.status_code == 200
        assert "<!DOCTYPE html>" not in r.text
        assert 'class="history-item"' in r.text

    def test_ajax_query_flag(self, client):
        """?ajax=1 also selects the fragment."""
        r = client.get(f"{BASE}/7/history/view", params={"v": 2, "ajax": 1}, headers=VIEWER)
        assert "<!DOCTYPE html>" not in r.text

    def test_latest_notice(self, client):
        """Viewing the current version says so."""
        r = client.get(f"{BASE}/7/history/view", params={"v": 3}, headers=VIEWER)
        assert "Currently viewing the latest version" in r.text

    def test_missing_version(self, client):
        """No v parameter is a 404 with the failure message."""
        r = client.get(f"{BASE}/7/history/view", headers=VIEWER)

        assert r.status_code == 404
        assert r.json()["detail"] == "No version provided"

    def test_unknown_version(self, client):
        """An unknown version is a 404 naming the version."""
        r = client.get(f"{BASE}/7/history/view", params={"v": 99}, headers=VIEWER)

        assert r.status_code == 404
        assert "99" in r.json()["detail"]

    def test_unknown_record(self, client):
        """An unknown record id is a 404."""
        r = client.get(f"{BASE}/404/history/view", params={"v": 1}, headers=VIEWER)

        assert r.status_code == 404
        assert r.json()["detail"] == "Record #404 not found"

    def test_unversioned_record(self, client, record_store):
        """Records without history are a 404."""
        record_store.put_record(8, "SiteConfig", "Settings", versioned=False)

        r = client.get(f"{BASE}/8/history/view", params={"v": 1}, headers=VIEWER)

        assert r.status_code == 404
        assert r.json()["detail"] == "The record is not versioned"

    def test_anonymous_forbidden(self, client):
        """Requests without a principal cannot view."""
        r = client.get(f"{BASE}/7/history/view", params={"v": 2})
        assert r.status_code == 403


class TestRollbackRoute:
    """Test cases for POST .../history/rollback."""

    def test_rollback_redirects_with_flash(self, client, record_store):
        """A successful rollback redirects to the edit view and carries the notice."""
        r = client.post(f"{BASE}/7/history/rollback", data={"v": "2"}, headers=EDITOR,
                        follow_redirects=False)

        assert r.status_code == 303
        assert r.headers["location"] == f"{BASE}/7/edit"
        notice = json.loads(unquote(r.cookies["flash"]))
        assert notice["severity"] == "good"
        assert notice["text"].startswith("Rolled back Page to version 2")
        assert record_store.get_record(7)["version"] == 2

    def test_rollback_latest_forbidden(self, client, record_store):
        """Rolling back to the current version is a 403 and changes nothing."""
        r = client.post(f"{BASE}/7/history/rollback", data={"v": "3"}, headers=EDITOR,
                        follow_redirects=False)

        assert r.status_code == 403
        assert r.json()["detail"] == "You cannot roll back to this version, as it is the latest version"
        assert record_store.get_record(7)["version"] == 3

    def test_rollback_without_edit_forbidden(self, client, record_store):
        """Viewers cannot roll back."""
        r = client.post(f"{BASE}/7/history/rollback", data={"v": "2"}, headers=VIEWER,
                        follow_redirects=False)

        assert r.status_code == 403
        assert r.json()["detail"] == "Forbidden"
        assert record_store.get_record(7)["version"] == 3

    def test_rollback_missing_version(self, client):
        """A rollback without v is a 404."""
        r = client.post(f"{BASE}/7/history/rollback", data={}, headers=EDITOR, follow_redirects=False)
        assert r.status_code == 404

    def test_store_failure_is_error(self, override_record):
        """A store refusal answers 500 and sets no flash message."""
        override_record.restore_recursive.return_value = False

        r = TestClient(app).post(f"{BASE}/7/history/rollback", data={"v": "2"}, headers=EDITOR,
                                 follow_redirects=False)

        assert r.status_code == 500
        assert "flash" not in r.cookies
        override_record.restore_recursive.assert_called_once_with(2)


class TestActionsRoute:
    """Test cases for GET .../history/actions."""

    def test_editor_gets_enabled_action(self, client):
        """Older versions offer one enabled revert action to editors."""
        r = client.get(f"{BASE}/7/history/actions", params={"v": 1}, headers=EDITOR)

        body = r.json()
        assert r.status_code == 200
        assert len(body["actions"]) == 1
        assert body["actions"][0]["name"] == "doRollback"
        assert body["actions"][0]["enabled"] is True

    def test_viewer_gets_disabled_action(self, client):
        """Viewers see the action disabled."""
        r = client.get(f"{BASE}/7/history/actions", params={"v": 1}, headers=VIEWER)
        assert r.json()["actions"][0]["enabled"] is False

    def test_latest_version_has_no_actions(self, client):
        """The latest version offers nothing."""
        r = client.get(f"{BASE}/7/history/actions", params={"v": 3}, headers=EDITOR)
        assert r.json()["actions"] == []

    def test_unknown_record_has_no_actions(self, client):
        """Missing records offer nothing."""
        r = client.get(f"{BASE}/404/history/actions", params={"v": 1}, headers=EDITOR)

        assert r.status_code == 200
        assert r.json()["actions"] == []
