"""Tests for the role-gated page routes and their redirects."""
import pytest

from dashboard.services.identity import IdentityStore
from dashboard.storage import LocalStorage


def location(response):
    return response.headers["location"]


class TestRedirects:

    def test_root_goes_to_user_dashboard(self, client):
        response = client.get("/", follow_redirects=False)

        assert response.status_code == 307
        assert location(response) == "/user"

    def test_unknown_path_goes_to_user_dashboard(self, client):
        response = client.get("/no/such/page", follow_redirects=False)

        assert response.status_code == 307
        assert location(response) == "/user"

    @pytest.mark.parametrize("path", ["/user", "/admin", "/worker", "/tasks", "/settings"])
    def test_no_session_goes_to_login(self, client, path):
        response = client.get(path, follow_redirects=False)

        assert response.status_code == 307
        assert location(response) == "/login"

    def test_login_page_is_public(self, client):
        response = client.get("/login")

        assert response.status_code == 200
        assert response.json()["page"] == "login"

    @pytest.mark.parametrize("email,path,home", [
        ("worker@example.com", "/admin", "/worker"),
        ("worker@example.com", "/admin/logs", "/worker"),
        ("user@example.com", "/worker", "/user"),
        ("user@example.com", "/admin/analytics", "/user"),
        ("admin@example.com", "/worker", "/admin"),
    ])
    def test_wrong_role_goes_home(self, client, login_as, email, path, home):
        login_as(email)

        response = client.get(path, follow_redirects=False)

        assert response.status_code == 307
        assert location(response) == home

    def test_loading_renders_placeholder(self, client):
        client.app.state.identity = IdentityStore(LocalStorage())

        response = client.get("/admin", follow_redirects=False)

        assert response.status_code == 503
        assert response.json()["page"] == "loading"


class TestPages:

    def test_user_dashboard(self, client, login_as):
        login_as("user@example.com")

        page = client.get("/user").json()

        assert page["page"] == "user"
        assert page["user"]["id"] == "3"
        assert page["nav"] == [{"to": "/user", "label": "Dashboard"}]
        assert page["data"]["task_counts"]["completed"] == 1
        assert [e["title"] for e in page["data"]["upcoming_events"]] == ["Team Meeting", "Client Presentation"]

    def test_admin_dashboard(self, client, login_as):
        login_as("admin@example.com")

        page = client.get("/admin").json()

        assert [link["to"] for link in page["nav"]] == ["/user", "/admin"]
        assert page["data"]["stats"]["total_users"] == 4
        assert page["data"]["recent_logs"][0]["action"] == "User Login"
        assert len(page["data"]["recent_logs"]) <= 5

    def test_admin_users(self, client, login_as):
        login_as("admin@example.com")

        data = client.get("/admin/users").json()["data"]

        assert len(data["users"]) == 4
        assert data["active"] == 3

    def test_admin_logs_with_filters(self, client, login_as):
        login_as("admin@example.com")

        data = client.get("/admin/logs", params={"action": "Task Created"}).json()["data"]

        assert [e["action"] for e in data["entries"]] == ["Task Created"]
        assert "User Login" in data["actions"]
        assert data["stats"]["total"] == 4

    def test_admin_logs_export(self, client, login_as):
        login_as("admin@example.com")

        response = client.get("/admin/logs/export", params={"search": "john.doe"})

        assert response.headers["content-type"].startswith("text/csv")
        assert len(response.text.splitlines()) == 2

    def test_worker_dashboard(self, client, login_as):
        login_as("worker@example.com")

        page = client.get("/worker").json()

        assert [link["label"] for link in page["nav"]] == ["Dashboard", "Worker Panel"]
        assert [t["id"] for t in page["data"]["assigned_tasks"]] == ["1"]
        assert page["data"]["overdue"] == []

    def test_tasks_page_rows(self, client, login_as):
        login_as("worker@example.com")

        rows = client.get("/tasks").json()["data"]["tasks"]

        assert [row["task"]["id"] for row in rows] == ["1", "2"]
        assert rows[0]["assignee_name"] == "Worker User"
        assert rows[0]["next_status"] == "completed"
        assert rows[1]["next_status"] == "in-progress"

    def test_tasks_page_status_filter(self, client, login_as):
        login_as("worker@example.com")

        rows = client.get("/tasks", params={"status": "pending"}).json()["data"]["tasks"]

        assert [row["task"]["id"] for row in rows] == ["2"]

    def test_documents_page(self, client, login_as):
        login_as("admin@example.com")

        data = client.get("/documents").json()["data"]

        first = data["documents"][0]
        assert first["kind"] == "pdf"
        assert first["size"] == "1.95 MB"
        assert first["uploader_name"] == "Admin User"
        assert data["stats"]["mine"] == 1

    def test_calendar_page(self, client, login_as):
        login_as("user@example.com")

        data = client.get("/calendar", params={"day": "2000-01-01"}).json()["data"]

        assert data["selected_day"] == "2000-01-01"
        assert data["events"] == []
        assert len(data["upcoming"]) == 2

    def test_notifications_page(self, client, login_as):
        login_as("worker@example.com")

        data = client.get("/notifications").json()["data"]

        assert data["unread"] == 1
        assert data["by_type"]["info"] == 1

    def test_profile_and_settings_pages(self, client, login_as):
        login_as("user@example.com")

        assert client.get("/profile").json()["data"]["profile"]["email"] == "user@example.com"
        assert client.get("/settings").json()["data"]["settings"]["theme"] == "light"

    def test_analytics_for_any_role(self, client, login_as):
        login_as("worker@example.com")

        data = client.get("/analytics").json()["data"]

        assert data["my_tasks"] == 2
        assert data["completion_rate"] == 0
