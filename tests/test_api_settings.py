"""API tests for per-user settings."""

SETTINGS = "/api/v1/settings"


class TestSettings:
    """Test the /settings endpoints."""

    def test_defaults_without_row(self, client, staff, headers):
        body = client.get(SETTINGS, headers=headers(staff)).json()

        assert body["theme"] == "dark"
        assert body["start_time"] == "08:00"
        assert body["end_time"] == "17:00"
        assert body["created_at"] is None

    def test_partial_update_creates_row(self, client, staff, headers):
        response = client.put(SETTINGS, json={"theme": "light", "start_time": "07:30"}, headers=headers(staff))

        assert response.status_code == 200
        body = response.json()
        assert body["theme"] == "light"
        assert body["start_time"] == "07:30"
        assert body["density"] == "comfortable"
        assert body["created_at"] is not None

        assert client.get(SETTINGS, headers=headers(staff)).json()["theme"] == "light"

    def test_settings_are_per_user(self, client, staff, other_staff, headers):
        client.put(SETTINGS, json={"theme": "light"}, headers=headers(staff))
        assert client.get(SETTINGS, headers=headers(other_staff)).json()["theme"] == "dark"

    def test_empty_update(self, client, staff, headers):
        assert client.put(SETTINGS, json={}, headers=headers(staff)).status_code == 400

    def test_invalid_values(self, client, staff, headers):
        assert client.put(SETTINGS, json={"theme": "neon"}, headers=headers(staff)).status_code == 422
        assert client.put(SETTINGS, json={"start_time": "25:00"}, headers=headers(staff)).status_code == 422

    def test_reset(self, client, staff, headers):
        client.put(SETTINGS, json={"density": "compact"}, headers=headers(staff))

        response = client.delete(SETTINGS, headers=headers(staff))

        assert response.status_code == 200
        assert response.json()["density"] == "comfortable"
        assert client.get(SETTINGS, headers=headers(staff)).json()["created_at"] is None
