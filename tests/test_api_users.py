"""API tests for admin-only user management."""


def _new_user(**overrides) -> dict:
    body = {
        "username": "Dana Teacher",
        "email": "dana@school.edu",
        "password": "secret99",
        "role": "faculty",
    }
    body.update(overrides)
    return body


class TestAccess:

    def test_engineer_forbidden(self, client, engineer_headers) -> None:
        assert client.get("/api/users/", headers=engineer_headers).status_code == 403

    def test_faculty_forbidden(self, client, faculty_headers) -> None:
        response = client.post("/api/users/", json=_new_user(), headers=faculty_headers)
        assert response.status_code == 403


class TestManageUsers:

    def test_create_faculty_with_school(self, client, hierarchy, admin_headers) -> None:
        response = client.post(
            "/api/users/",
            json=_new_user(affiliated_school_id=hierarchy.school.id),
            headers=admin_headers,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["role"] == "faculty"
        assert body["school_name"] == "Lincoln High School"

    def test_school_dropped_for_engineers(self, client, hierarchy, admin_headers) -> None:
        response = client.post(
            "/api/users/",
            json=_new_user(role="engineer", affiliated_school_id=hierarchy.school.id),
            headers=admin_headers,
        )
        assert response.json()["affiliated_school_id"] is None

    def test_duplicate_email(self, client, admin_user, admin_headers) -> None:
        response = client.post(
            "/api/users/", json=_new_user(email="admin@school.edu"), headers=admin_headers,
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "Email already exists"

    def test_duplicate_username(self, client, admin_user, admin_headers) -> None:
        response = client.post(
            "/api/users/", json=_new_user(username="Admin User"), headers=admin_headers,
        )
        assert response.status_code == 409

    def test_role_change_clears_school(self, client, hierarchy, admin_headers) -> None:
        created = client.post(
            "/api/users/",
            json=_new_user(affiliated_school_id=hierarchy.school.id),
            headers=admin_headers,
        ).json()

        response = client.patch(
            f"/api/users/{created['id']}", json={"role": "engineer"}, headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["affiliated_school_id"] is None

    def test_cannot_delete_self(self, client, admin_user, admin_headers) -> None:
        response = client.delete(f"/api/users/{admin_user.id}", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot delete your own account"

    def test_delete_other(self, client, faculty_user, admin_headers) -> None:
        response = client.delete(f"/api/users/{faculty_user.id}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["detail"]["email"] == "faculty@school.edu"

        listed = client.get("/api/users/", headers=admin_headers).json()
        assert "faculty@school.edu" not in [u["email"] for u in listed]

    def test_delete_missing(self, client, admin_headers) -> None:
        assert client.delete("/api/users/9999", headers=admin_headers).status_code == 404
