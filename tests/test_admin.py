from __future__ import annotations

import json

from fastapi.testclient import TestClient

from conftest import FakeBackend, session_headers


def test_admin_dashboard_counts(client: TestClient, backend: FakeBackend, admin_headers: dict) -> None:
    backend.on("GET", "/admin/users", json_body=[
        {"id": 1, "role": "ADMIN"}, {"id": 2, "role": "vendor"}, {"id": 3, "role": "vendor"}, {"id": 4, "role": "company"},
    ])
    backend.on("GET", "/lease-requests/all", json_body=[{"id": 1}, {"id": 2, "status": "approved"}])

    response = client.get("/admin/dashboard", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {
        "totalUsers": 4, "totalVendors": 2, "totalCompanies": 1, "totalAdmins": 1, "pendingRequests": 1,
    }


def test_admin_routes_reject_other_roles(client: TestClient, backend: FakeBackend) -> None:
    response = client.get("/admin/users", headers=session_headers("vendor", "42"))
    assert response.status_code == 403


def test_admin_delete_user(client: TestClient, backend: FakeBackend, admin_headers: dict) -> None:
    backend.on("DELETE", "/admin/users/5", text="")

    response = client.delete("/admin/users/5", headers=admin_headers)

    assert response.status_code == 200
    assert backend.last("DELETE", "/admin/users/5").headers["Authorization"] == admin_headers["Authorization"]


def test_admin_users_by_role(client: TestClient, backend: FakeBackend, admin_headers: dict) -> None:
    backend.on("GET", "/admin/users/role/vendor", json_body={"data": [{"id": 2, "role": "vendor"}]})

    response = client.get("/admin/users/role/vendor", headers=admin_headers)

    assert response.status_code == 200
    assert json.loads(response.content) == [
        {"id": 2, "name": None, "email": None, "role": "vendor", "gstNumber": None, "panNumber": None,
         "contactNumber": None, "companyName": None},
    ]
