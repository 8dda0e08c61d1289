"""API tests for saved custom reports."""

from datetime import date

import pytest

REPORTS = "/api/v1/reports"


@pytest.fixture
def report_body():
    def _body(**overrides):
        body = {
            "name": "March billables",
            "description": "Billable hours for March",
            "filters": {"startDate": "2024-03-01", "endDate": "2024-03-31"},
            "columns": ["date", "total_hours"],
        }
        body.update(overrides)
        return body

    return _body


@pytest.fixture
def staff_report(client, staff, headers, report_body):
    return client.post(REPORTS, json=report_body(), headers=headers(staff)).json()


class TestReportCrud:
    """Test create, list, update and delete."""

    def test_create_stamps_owner(self, client, staff, headers, report_body):
        response = client.post(REPORTS, json=report_body(), headers=headers(staff))

        assert response.status_code == 201
        body = response.json()
        assert body["user_id"] == staff.id
        assert body["department"] == "Legal"
        assert body["schedule"] == "manual"
        assert body["last_run"] is None

    def test_description_required(self, client, staff, headers, report_body):
        response = client.post(REPORTS, json=report_body(description=""), headers=headers(staff))
        assert response.status_code == 422

    def test_list_follows_scope(self, client, admin, supervisor, staff, other_staff, finance_staff, headers,
                                report_body):
        for user in (staff, other_staff, finance_staff):
            client.post(REPORTS, json=report_body(name=f"{user.first_name} report"), headers=headers(user))

        def names(user):
            return sorted(r["name"] for r in client.get(REPORTS, headers=headers(user)).json())

        assert names(staff) == ["Alice report"]
        assert names(supervisor) == ["Alice report", "Bob report"]
        assert names(admin) == ["Alice report", "Bob report", "Carol report"]

    def test_owner_updates(self, client, staff, headers, staff_report, report_body):
        response = client.put(
            f"{REPORTS}/{staff_report['id']}", json=report_body(name="Renamed"), headers=headers(staff)
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"

    def test_supervisor_sees_but_cannot_edit(self, client, supervisor, headers, staff_report, report_body):
        response = client.put(f"{REPORTS}/{staff_report['id']}", json=report_body(), headers=headers(supervisor))
        assert response.status_code == 403

    def test_out_of_scope_is_missing(self, client, finance_staff, other_staff, headers, staff_report, report_body):
        for intruder in (finance_staff, other_staff):
            update = client.put(f"{REPORTS}/{staff_report['id']}", json=report_body(), headers=headers(intruder))
            delete = client.delete(f"{REPORTS}/{staff_report['id']}", headers=headers(intruder))
            assert update.status_code == 404
            assert delete.status_code == 404

    def test_admin_deletes_any(self, client, admin, staff, headers, staff_report):
        assert client.delete(f"{REPORTS}/{staff_report['id']}", headers=headers(admin)).status_code == 204
        assert client.get(REPORTS, headers=headers(staff)).json() == []


class TestReportRun:
    """Test POST /reports/{id}/run."""

    def test_run_uses_stored_filters(self, client, staff, headers, add_entry, staff_report):
        add_entry(staff, day=date(2024, 3, 4), start="09:00", end="17:00")
        add_entry(staff, day=date(2024, 4, 1), start="09:00", end="12:00")

        response = client.post(f"{REPORTS}/{staff_report['id']}/run", headers=headers(staff))

        assert response.status_code == 200
        body = response.json()
        assert body["report"]["last_run"] is not None
        assert body["result"]["scope"] == f"user:{staff.id}"
        assert body["result"]["range"] == {"start_date": "2024-03-01", "end_date": "2024-03-31"}
        assert body["result"]["summary"]["total_hours"] == 8

    def test_run_is_scoped_to_runner(self, client, supervisor, staff, other_staff, headers, add_entry, staff_report):
        add_entry(staff, day=date(2024, 3, 4), start="09:00", end="17:00")
        add_entry(other_staff, day=date(2024, 3, 4), start="09:00", end="11:00")

        body = client.post(f"{REPORTS}/{staff_report['id']}/run", headers=headers(supervisor)).json()

        assert body["result"]["scope"] == "department:Legal"
        assert body["result"]["summary"]["total_hours"] == 10

    def test_run_with_bad_filters(self, client, staff, headers, report_body):
        report = client.post(
            REPORTS, json=report_body(filters={"startDate": "March"}), headers=headers(staff)
        ).json()

        response = client.post(f"{REPORTS}/{report['id']}/run", headers=headers(staff))
        assert response.status_code == 400

    def test_run_out_of_scope(self, client, finance_staff, headers, staff_report):
        response = client.post(f"{REPORTS}/{staff_report['id']}/run", headers=headers(finance_staff))
        assert response.status_code == 404
