"""API tests for departments and tasks."""

import pytest

DEPARTMENTS = "/api/v1/departments"
TASKS = "/api/v1/tasks"


@pytest.fixture
def legal(client, admin, headers):
    response = client.post(DEPARTMENTS, json={"name": "Legal", "description": "Litigation"}, headers=headers(admin))
    return response.json()


@pytest.fixture
def finance(client, admin, headers):
    return client.post(DEPARTMENTS, json={"name": "Finance"}, headers=headers(admin)).json()


class TestDepartments:
    """Test the /departments endpoints."""

    def test_admin_creates(self, client, admin, headers):
        response = client.post(DEPARTMENTS, json={"name": "Legal"}, headers=headers(admin))

        assert response.status_code == 201
        assert response.json()["is_active"] is True
        assert response.json()["tasks"] == []

    def test_duplicate_name(self, client, admin, headers, legal):
        response = client.post(DEPARTMENTS, json={"name": "Legal"}, headers=headers(admin))
        assert response.status_code == 409

    def test_staff_cannot_create(self, client, staff, headers):
        response = client.post(DEPARTMENTS, json={"name": "Legal"}, headers=headers(staff))
        assert response.status_code == 403

    def test_list_with_tasks(self, client, admin, staff, headers, legal, finance):
        client.post(TASKS, json={"name": "Filing", "department": "Legal"}, headers=headers(admin))
        client.post(TASKS, json={"name": "Drafting", "department": "Legal"}, headers=headers(admin))

        body = client.get(DEPARTMENTS, headers=headers(staff)).json()

        assert [d["name"] for d in body] == ["Finance", "Legal"]
        assert [t["name"] for t in body[1]["tasks"]] == ["Drafting", "Filing"]
        assert body[1]["tasks"][0]["department_name"] == "Legal"

    def test_rename_conflict(self, client, admin, headers, legal, finance):
        response = client.put(f"{DEPARTMENTS}/{finance['id']}", json={"name": "Legal"}, headers=headers(admin))
        assert response.status_code == 409

    def test_unknown_department(self, client, staff, headers):
        response = client.get(f"{DEPARTMENTS}/999", headers=headers(staff))
        assert response.status_code == 404

    def test_soft_delete_cascades_to_tasks(self, client, admin, headers, legal):
        client.post(TASKS, json={"name": "Filing", "department": "Legal"}, headers=headers(admin))

        response = client.delete(f"{DEPARTMENTS}/{legal['id']}", headers=headers(admin))

        assert response.status_code == 200
        assert response.json()["is_active"] is False
        assert all(task["is_active"] is False for task in response.json()["tasks"])
        assert client.get(f"{TASKS}/by-department/Legal", headers=headers(admin)).json() == []


class TestTasks:
    """Test the /tasks endpoints."""

    def test_supervisor_manages_own_department(self, client, supervisor, headers, legal):
        response = client.post(TASKS, json={"name": "Filing", "department": "Legal"}, headers=headers(supervisor))

        assert response.status_code == 201
        assert response.json()["department_name"] == "Legal"

    def test_supervisor_blocked_elsewhere(self, client, supervisor, headers, finance):
        response = client.post(TASKS, json={"name": "Audit", "department": "Finance"}, headers=headers(supervisor))
        assert response.status_code == 403

    def test_supervisor_cannot_move_task(self, client, supervisor, headers, legal, finance):
        task = client.post(TASKS, json={"name": "Filing", "department": "Legal"}, headers=headers(supervisor)).json()

        response = client.put(f"{TASKS}/{task['id']}", json={"department": "Finance"}, headers=headers(supervisor))
        assert response.status_code == 403

    def test_admin_moves_task(self, client, admin, headers, legal, finance):
        task = client.post(TASKS, json={"name": "Filing", "department": "Legal"}, headers=headers(admin)).json()

        response = client.put(f"{TASKS}/{task['id']}", json={"department": "Finance"}, headers=headers(admin))
        assert response.json()["department_name"] == "Finance"

    def test_unknown_department(self, client, admin, headers):
        response = client.post(TASKS, json={"name": "Filing", "department": "Nowhere"}, headers=headers(admin))
        assert response.status_code == 400

    def test_staff_cannot_manage(self, client, staff, headers, legal):
        response = client.post(TASKS, json={"name": "Filing", "department": "Legal"}, headers=headers(staff))
        assert response.status_code == 403

    def test_list_pinned_for_supervisor(self, client, admin, supervisor, headers, legal, finance):
        client.post(TASKS, json={"name": "Filing", "department": "Legal"}, headers=headers(admin))
        client.post(TASKS, json={"name": "Audit", "department": "Finance"}, headers=headers(admin))

        as_supervisor = client.get(TASKS, params={"department": "Finance"}, headers=headers(supervisor)).json()
        as_admin = client.get(TASKS, headers=headers(admin)).json()

        assert [t["name"] for t in as_supervisor] == ["Filing"]
        assert [t["name"] for t in as_admin] == ["Audit", "Filing"]

    def test_soft_delete_hides_from_picker(self, client, admin, staff, headers, legal):
        keep = client.post(TASKS, json={"name": "Filing", "department": "Legal"}, headers=headers(admin)).json()
        drop = client.post(TASKS, json={"name": "Drafting", "department": "Legal"}, headers=headers(admin)).json()

        client.delete(f"{TASKS}/{drop['id']}", headers=headers(admin))
        picker = client.get(f"{TASKS}/by-department/Legal", headers=headers(staff)).json()

        assert [t["id"] for t in picker] == [keep["id"]]


class TestNullUpdates:
    """Explicit nulls in partial updates leave NOT NULL columns untouched."""

    def test_department_null_fields(self, client, admin, headers, legal):
        only_null = client.put(f"{DEPARTMENTS}/{legal['id']}", json={"name": None}, headers=headers(admin))
        assert only_null.status_code == 400

        mixed = client.put(
            f"{DEPARTMENTS}/{legal['id']}",
            json={"name": None, "description": "Courts", "is_active": None},
            headers=headers(admin),
        )
        assert mixed.status_code == 200
        assert mixed.json()["name"] == "Legal"
        assert mixed.json()["description"] == "Courts"
        assert mixed.json()["is_active"] is True

    def test_task_null_fields(self, client, admin, headers, legal):
        task = client.post(TASKS, json={"name": "Filing", "department": "Legal"}, headers=headers(admin)).json()

        only_null = client.put(f"{TASKS}/{task['id']}", json={"name": None}, headers=headers(admin))
        assert only_null.status_code == 400

        mixed = client.put(
            f"{TASKS}/{task['id']}", json={"name": None, "description": "Court filings"}, headers=headers(admin)
        )
        assert mixed.status_code == 200
        assert mixed.json()["name"] == "Filing"
        assert mixed.json()["description"] == "Court filings"


class TestBulkUpload:
    """Test POST /departments/bulk-upload."""

    def test_creates_and_skips(self, client, admin, headers, legal):
        client.post(TASKS, json={"name": "Filing", "department": "Legal"}, headers=headers(admin))

        response = client.post(f"{DEPARTMENTS}/bulk-upload", headers=headers(admin), json={"departments": [
            {"name": "Legal", "tasks": [{"name": "Filing"}, {"name": "Drafting"}]},
            {"name": "Finance", "description": "Books", "tasks": [{"name": "Audit"}]},
        ]})

        assert response.status_code == 200
        body = response.json()
        assert body["total_departments"] == 2
        assert body["departments_created"] == 1
        assert body["departments_skipped"] == 1
        assert body["total_tasks"] == 3
        assert body["tasks_created"] == 2
        assert body["tasks_skipped"] == 1
        assert body["details"][0]["status"] == "skipped"
        assert [t["status"] for t in body["details"][0]["tasks"]] == ["skipped", "created"]

        departments = client.get(DEPARTMENTS, headers=headers(admin)).json()
        assert [d["name"] for d in departments] == ["Finance", "Legal"]
        assert departments[0]["description"] == "Books"
        assert [t["name"] for t in departments[1]["tasks"]] == ["Drafting", "Filing"]

    def test_empty_upload_rejected(self, client, admin, headers):
        response = client.post(f"{DEPARTMENTS}/bulk-upload", json={"departments": []}, headers=headers(admin))
        assert response.status_code == 422

    def test_supervisor_forbidden(self, client, supervisor, headers):
        response = client.post(
            f"{DEPARTMENTS}/bulk-upload", json={"departments": [{"name": "Legal"}]}, headers=headers(supervisor)
        )
        assert response.status_code == 403
