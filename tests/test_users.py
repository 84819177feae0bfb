# =============================================================================
# tests/test_users.py - User Administration Endpoint Tests
# =============================================================================
# Tests for /api/v1/users (admin only).
#
# Run with: pytest tests/test_users.py -v
# =============================================================================

import pytest
from bson import ObjectId

from lib.security import verify_password

USERS = "/api/v1/users"


class TestAdminOnly:

    @pytest.mark.parametrize("role", ["user", "publisher"])
    def test_non_admin_forbidden(self, client, make_account, role):
        account = make_account(role)

        response = client.get(USERS, headers=account.headers)

        assert response.status_code == 403
        assert response.json()["error"] == f"User role {role} is not authorized to access this route"

    def test_anonymous_unauthorized(self, client):
        assert client.get(USERS).status_code == 401


class TestUserCrud:

    def test_list_users(self, client, admin, make_account):
        make_account("user")
        make_account("publisher")

        response = client.get(USERS, params={"sort": "created_at"}, headers=admin.headers)

        body = response.json()
        assert body["success"] is True
        assert body["count"] == 3
        assert all("password" not in u for u in body["data"])

    def test_list_users_filtered_by_role(self, client, admin, make_account):
        make_account("publisher")

        response = client.get(USERS, params={"role": "publisher"}, headers=admin.headers)

        assert [u["role"] for u in response.json()["data"]] == ["publisher"]

    def test_create_user_with_any_role(self, client, admin):
        response = client.post(
            USERS,
            json={"name": "Second Admin", "email": "Boss@Example.com", "password": "secret1", "role": "admin"},
            headers=admin.headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["role"] == "admin"
        assert data["email"] == "boss@example.com"
        assert "password" not in data

    def test_create_duplicate_email(self, client, admin, user):
        response = client.post(
            USERS,
            json={"name": "Copy", "email": user.email, "password": "secret1"},
            headers=admin.headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Duplicate field value entered"

    def test_get_user(self, client, admin, user):
        response = client.get(f"{USERS}/{user.id}", headers=admin.headers)

        assert response.status_code == 200
        assert response.json()["data"]["email"] == user.email

    def test_get_missing_user(self, client, admin):
        missing = str(ObjectId())
        response = client.get(f"{USERS}/{missing}", headers=admin.headers)

        assert response.status_code == 404
        assert response.json()["error"] == f"User not found with id of {missing}"

    def test_update_role_and_password(self, client, admin, user, db):
        response = client.put(
            f"{USERS}/{user.id}",
            json={"role": "publisher", "password": "brandnew"},
            headers=admin.headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "publisher"

        stored = db.users.find_one({"_id": ObjectId(user.id)})
        assert stored["password"] != "brandnew"
        assert verify_password("brandnew", stored["password"])

        login = client.post("/api/v1/auth/login", json={"email": user.email, "password": "brandnew"})
        assert login.status_code == 200

    def test_update_invalid_email(self, client, admin, user):
        response = client.put(f"{USERS}/{user.id}", json={"email": "nope"}, headers=admin.headers)
        assert response.status_code == 400

    @pytest.mark.parametrize("field", ["role", "password", "name", "email"])
    def test_update_rejects_null(self, client, admin, user, db, field):
        response = client.put(f"{USERS}/{user.id}", json={field: None}, headers=admin.headers)

        assert response.status_code == 400
        assert response.json()["error"] == f"{field}: Field cannot be null"
        stored = db.users.find_one({"_id": ObjectId(user.id)})
        assert stored[field] is not None

    def test_user_keeps_access_after_rejected_null_role(self, client, admin, user):
        client.put(f"{USERS}/{user.id}", json={"role": None}, headers=admin.headers)

        me = client.get("/api/v1/auth/me", headers=user.headers)

        assert me.status_code == 200
        assert me.json()["data"]["role"] == "user"

    def test_corrupt_stored_role_is_unauthorized(self, client, user, db):
        db.users.update_one({"_id": ObjectId(user.id)}, {"$set": {"role": None}})

        response = client.get("/api/v1/auth/me", headers=user.headers)

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Not authorized to access this route"}

    def test_delete_user_leaves_bootcamp_members(self, client, admin, user, publisher, create_bootcamp, db):
        bootcamp = create_bootcamp(publisher)
        client.put(f"/api/v1/bootcamps/{bootcamp['id']}/join", headers=user.headers)

        response = client.delete(f"{USERS}/{user.id}", headers=admin.headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": {}}
        assert db.users.find_one({"_id": ObjectId(user.id)}) is None
        stored = db.bootcamps.find_one({"_id": ObjectId(bootcamp["id"])})
        assert ObjectId(user.id) not in stored["joined_users"]

    def test_delete_missing_user(self, client, admin):
        response = client.delete(f"{USERS}/{ObjectId()}", headers=admin.headers)
        assert response.status_code == 404
