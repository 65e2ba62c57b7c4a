"""Tests for the task API endpoints."""

from fastapi.testclient import TestClient


def _create(client: TestClient, headers: dict, **fields):
    body = {"title": "Buy milk"}
    body.update(fields)
    return client.post("/api/tasks", json=body, headers=headers)


class TestTaskScenario:
    """End-to-end flows through the HTTP surface."""

    def test_single_user_lifecycle(self, client: TestClient):
        """register -> login -> list -> create -> filter -> update -> delete -> 404."""
        client.post(
            "/api/register",
            json={
                "name": "Ana",
                "email": "ana@example.com",
                "password": "pw123456",
                "password_confirmation": "pw123456",
            },
        )
        login = client.post("/api/login", json={"email": "ana@example.com", "password": "pw123456"})
        headers = {"Authorization": f"Bearer {login.json()['token']}"}
        ana_id = login.json()["user"]["id"]

        response = client.get("/api/tasks", headers=headers)
        assert response.status_code == 200
        assert response.json() == []

        response = _create(client, headers)
        assert response.status_code == 201
        task = response.json()
        assert task["id"] == 1
        assert task["completed"] is False
        assert task["user_id"] == ana_id

        response = client.get("/api/tasks?completed=0", headers=headers)
        assert [t["id"] for t in response.json()] == [1]

        response = client.put("/api/tasks/1", json={"title": "Buy milk", "completed": True}, headers=headers)
        assert response.status_code == 200
        assert response.json()["completed"] is True

        response = client.delete("/api/tasks/1", headers=headers)
        assert response.status_code == 204
        assert response.content == b""

        response = client.get("/api/tasks/1", headers=headers)
        assert response.status_code == 404

    def test_other_user_cannot_touch_task(self, client: TestClient, test_user: dict, other_user: dict):
        task_id = _create(client, test_user["headers"]).json()["id"]

        assert client.get(f"/api/tasks/{task_id}", headers=other_user["headers"]).status_code == 403
        response = client.put(
            f"/api/tasks/{task_id}",
            json={"title": "Hijacked", "completed": True},
            headers=other_user["headers"],
        )
        assert response.status_code == 403
        assert client.delete(f"/api/tasks/{task_id}", headers=other_user["headers"]).status_code == 403

        response = client.get(f"/api/tasks/{task_id}", headers=test_user["headers"])
        assert response.status_code == 200
        assert response.json()["title"] == "Buy milk"
        assert response.json()["completed"] is False

    def test_other_users_tasks_not_listed(self, client: TestClient, test_user: dict, other_user: dict):
        _create(client, test_user["headers"], title="Mine")
        _create(client, other_user["headers"], title="Theirs")

        titles = [t["title"] for t in client.get("/api/tasks", headers=test_user["headers"]).json()]
        assert titles == ["Mine"]


class TestTaskAuth:
    def test_list_requires_auth(self, client: TestClient):
        assert client.get("/api/tasks").status_code == 401

    def test_create_requires_auth(self, client: TestClient):
        assert client.post("/api/tasks", json={"title": "x"}).status_code == 401

    def test_revoked_token_rejected(self, client: TestClient, test_user: dict):
        client.post("/api/logout", headers=test_user["headers"])
        assert client.get("/api/tasks", headers=test_user["headers"]).status_code == 401


class TestCreateTask:
    def test_create_with_all_fields(self, client: TestClient, test_user: dict):
        response = _create(
            client,
            test_user["headers"],
            title="Pay rent",
            description="Before the 5th",
            due_date="2025-07-01",
            completed=False,
            priority="high",
        )
        assert response.status_code == 201
        data = response.json()
        assert data["due_date"] == "2025-07-01"
        assert data["priority"] == "high"
        assert data["description"] == "Before the 5th"
        assert "created_at" in data

    def test_create_ignores_client_owner(self, client: TestClient, test_user: dict, other_user: dict):
        response = _create(client, test_user["headers"], user_id=other_user["user_id"])
        assert response.json()["user_id"] == test_user["user_id"]

    def test_create_validation_errors(self, client: TestClient, test_user: dict):
        response = client.post(
            "/api/tasks",
            json={"title": "", "due_date": "not-a-date", "priority": "urgent"},
            headers=test_user["headers"],
        )
        assert response.status_code == 422
        errors = response.json()["errors"]
        assert {"title", "due_date", "priority"} <= set(errors)

    def test_create_missing_title(self, client: TestClient, test_user: dict):
        response = client.post("/api/tasks", json={"description": "no title"}, headers=test_user["headers"])
        assert response.status_code == 422
        assert "title" in response.json()["errors"]

    def test_create_title_too_long(self, client: TestClient, test_user: dict):
        response = _create(client, test_user["headers"], title="x" * 256)
        assert response.status_code == 422


class TestListFilters:
    def test_filters(self, client: TestClient, test_user: dict):
        headers = test_user["headers"]
        _create(client, headers, title="Buy milk", priority="low")
        _create(client, headers, title="Write report", description="milk budget", completed=True, priority="high")
        _create(client, headers, title="Call plumber")

        def titles(query: str) -> list[str]:
            return [t["title"] for t in client.get(f"/api/tasks{query}", headers=headers).json()]

        assert titles("") == ["Call plumber", "Write report", "Buy milk"]
        assert titles("?search=MILK") == ["Write report", "Buy milk"]
        assert titles("?completed=1") == ["Write report"]
        assert titles("?completed=false") == ["Call plumber", "Buy milk"]
        assert titles("?priority=low") == ["Buy milk"]
        assert titles("?search=milk&completed=0") == ["Buy milk"]

    def test_invalid_filter_values(self, client: TestClient, test_user: dict):
        response = client.get("/api/tasks?priority=urgent", headers=test_user["headers"])
        assert response.status_code == 422
        assert "priority" in response.json()["errors"]

        response = client.get("/api/tasks?completed=maybe", headers=test_user["headers"])
        assert response.status_code == 422


class TestUpdateTask:
    def test_update_missing_task(self, client: TestClient, test_user: dict):
        response = client.put("/api/tasks/9999", json={"title": "x"}, headers=test_user["headers"])
        assert response.status_code == 404

    def test_update_replaces_all_fields(self, client: TestClient, test_user: dict):
        task_id = _create(client, test_user["headers"], description="keep?", priority="high").json()["id"]
        response = client.put(f"/api/tasks/{task_id}", json={"title": "Renamed"}, headers=test_user["headers"])
        data = response.json()
        assert data["title"] == "Renamed"
        assert data["description"] is None
        assert data["priority"] is None
        assert data["completed"] is False


class TestDeleteTask:
    def test_delete_missing_task(self, client: TestClient, test_user: dict):
        assert client.delete("/api/tasks/9999", headers=test_user["headers"]).status_code == 404

    def test_delete_twice(self, client: TestClient, test_user: dict):
        task_id = _create(client, test_user["headers"]).json()["id"]
        assert client.delete(f"/api/tasks/{task_id}", headers=test_user["headers"]).status_code == 204
        assert client.delete(f"/api/tasks/{task_id}", headers=test_user["headers"]).status_code == 404
